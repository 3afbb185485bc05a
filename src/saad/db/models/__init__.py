"""SQLAlchemy ORM models - import all to register with Base.metadata."""

from saad.db.models.project import ProjectRow
from saad.db.models.task import TaskRow
from saad.db.models.timeline import TimelineRow
from saad.db.models.chat_message import ChatMessageRow

__all__ = [
    "ProjectRow",
    "TaskRow",
    "TimelineRow",
    "ChatMessageRow",
]
