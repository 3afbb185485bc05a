"""Pydantic models for chat messages."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from saad.models.enums import ChatRole


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    role: ChatRole
    content: str
    timestamp: datetime


class ChatTurnRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: str = Field(..., min_length=1)
