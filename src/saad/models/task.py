"""Pydantic models for Task entities and the task forms."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from saad.models.enums import ColumnType, Squad


class Task(BaseModel):
    """A business-rule task on the delivery board.

    ``column`` has no default: whoever builds a task decides where it sits.
    ``description`` carries the full rule text and has no length cap.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    code: str
    title: str
    category: str
    description: str = ""
    column: ColumnType
    squad: Squad | None = None
    dev_completed_at: datetime | None = None
    prod_completed_at: datetime | None = None


class TaskCreate(BaseModel):
    """Manual task form."""

    model_config = ConfigDict(extra="forbid")

    code: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    description: str = ""
    squad: Squad | None = None


class TaskUpdate(BaseModel):
    """Edit form: every field is optional, unset fields are kept.

    An explicit null clears ``description`` and ``squad``; the workspace
    rejects it for every other field before anything is stored.
    """

    model_config = ConfigDict(extra="forbid")

    code: str | None = Field(None, min_length=1)
    title: str | None = Field(None, min_length=1)
    category: str | None = Field(None, min_length=1)
    description: str | None = None
    column: ColumnType | None = None
    squad: Squad | None = None


class TaskMove(BaseModel):
    model_config = ConfigDict(extra="forbid")

    column: ColumnType
