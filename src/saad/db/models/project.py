"""Project table."""

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from saad.db.base import Base, CreatedAtMixin


class ProjectRow(Base, CreatedAtMixin):
    __tablename__ = "projects"

    project_id: Mapped[str] = mapped_column(String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    insights: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    tasks: Mapped[list["TaskRow"]] = relationship(  # noqa: F821
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    timeline: Mapped["TimelineRow | None"] = relationship(  # noqa: F821
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        uselist=False,
    )
    chat_messages: Mapped[list["ChatMessageRow"]] = relationship(  # noqa: F821
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChatMessageRow.timestamp",
    )
