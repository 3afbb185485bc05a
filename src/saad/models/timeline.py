"""Pydantic model for a project's delivery timeline."""

from pydantic import BaseModel, ConfigDict, Field


class Timeline(BaseModel):
    """Schedule extracted by intake.

    ``current_week`` is whatever the last intake turn reported; it is not
    advanced locally between turns.
    """

    model_config = ConfigDict(extra="forbid")

    start_date: str
    end_date: str
    total_weeks: int = Field(..., ge=1)
    current_week: int
    progress_message: str | None = None
