"""Pydantic models for Project entities and project forms."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from saad.models.chat import ChatMessage
from saad.models.enums import ProjectStatus
from saad.models.task import Task
from saad.models.timeline import Timeline


class Project(BaseModel):
    """A tracked project and everything it owns."""

    model_config = ConfigDict(extra="forbid")

    id: str
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    created_at: datetime
    status: ProjectStatus = ProjectStatus.ACTIVE
    chat_history: list[ChatMessage] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    timeline: Timeline | None = None
    insights: list[str] = Field(default_factory=list)

    def find_task(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


class ProjectCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., max_length=200)
    description: str = ""


class ProjectUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., max_length=200)
    description: str = ""


class ProjectStatusUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: ProjectStatus
