"""Read models returned by the metrics engine."""

from pydantic import BaseModel

from saad.models.enums import DriftStatus, Squad


class SquadProgress(BaseModel):
    squad: Squad
    done: int
    total: int
    progress: int


class DashboardMetrics(BaseModel):
    """Figures behind the project dashboard cards."""

    total_tasks: int
    dev_done: int
    prod_done: int
    dev_progress: int
    prod_progress: int
    time_progress: int
    health_score: int
    current_week: int | None = None
    total_weeks: int | None = None


class AnalysisMetrics(BaseModel):
    """Figures behind the squad/drift analysis view."""

    squads: list[SquadProgress]
    total_tasks: int
    global_done: int
    global_progress: int
    expected_progress: int
    drift: int
    drift_status: DriftStatus
    insights: list[str]
