"""Timeline table - at most one row per project."""

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from saad.db.base import Base


class TimelineRow(Base):
    __tablename__ = "timelines"

    project_id: Mapped[str] = mapped_column(
        String(128), ForeignKey("projects.project_id", ondelete="CASCADE"), primary_key=True
    )
    start_date: Mapped[str] = mapped_column(String(40), nullable=False)
    end_date: Mapped[str] = mapped_column(String(40), nullable=False)
    total_weeks: Mapped[int] = mapped_column(Integer, nullable=False)
    current_week: Mapped[int] = mapped_column(Integer, nullable=False)
    progress_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    project: Mapped["ProjectRow"] = relationship(back_populates="timeline")  # noqa: F821
