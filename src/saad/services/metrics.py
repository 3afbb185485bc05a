"""Progress, drift and health metrics.

Everything here is a pure function of a task list and an optional timeline;
nothing is cached or persisted, so two reads of the same state always agree.

Two notions of "done" coexist and must stay separate:

* progress views (global, per squad, drift) count TESTING, DEPLOY_DEV and
  DEPLOY_PROD;
* the health score and dev progress count DEPLOY_DEV and DEPLOY_PROD only.
"""

from collections.abc import Callable, Iterable, Sequence

from saad.models.enums import DriftStatus, Squad
from saad.models.metrics import AnalysisMetrics, DashboardMetrics, SquadProgress
from saad.models.task import Task
from saad.models.timeline import Timeline
from saad.services.pipeline import is_delivery_done, is_production_done, is_progress_done

SQUAD_ORDER: tuple[Squad, ...] = (Squad.UX_UI, Squad.BACKEND, Squad.FRONTEND, Squad.GERAL)

LAGGING_THRESHOLD = -10


def percent(part: int, whole: int) -> int:
    """Rounded percentage, halves rounded up; 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def _ratio(tasks: Sequence[Task], predicate: Callable[[Task], bool]) -> tuple[int, int]:
    done = sum(1 for t in tasks if predicate(t))
    return done, len(tasks)


def global_progress(tasks: Sequence[Task]) -> int:
    done, total = _ratio(tasks, is_progress_done)
    return percent(done, total)


def dev_progress(tasks: Sequence[Task]) -> int:
    done, total = _ratio(tasks, is_delivery_done)
    return percent(done, total)


def prod_progress(tasks: Sequence[Task]) -> int:
    """Share of tasks in DEPLOY_PROD; shown on project cards."""
    done, total = _ratio(tasks, is_production_done)
    return percent(done, total)


def squad_of(task: Task) -> Squad:
    return task.squad or Squad.GERAL


def partition_by_squad(tasks: Iterable[Task]) -> dict[Squad, list[Task]]:
    """Group tasks by squad; every task lands in exactly one group."""
    groups: dict[Squad, list[Task]] = {squad: [] for squad in SQUAD_ORDER}
    for task in tasks:
        groups[squad_of(task)].append(task)
    return groups


def squad_progress(tasks: Iterable[Task]) -> list[SquadProgress]:
    results = []
    for squad, members in partition_by_squad(tasks).items():
        done, total = _ratio(members, is_progress_done)
        results.append(SquadProgress(squad=squad, done=done, total=total, progress=percent(done, total)))
    return results


def expected_progress(timeline: Timeline | None) -> int:
    """Time-elapsed share of the schedule, capped at 100."""
    if timeline is None:
        return 0
    return min(100, percent(timeline.current_week, timeline.total_weeks))


def drift(tasks: Sequence[Task], timeline: Timeline | None) -> int:
    return global_progress(tasks) - expected_progress(timeline)


def classify_drift(value: int) -> DriftStatus:
    if value < LAGGING_THRESHOLD:
        return DriftStatus.LAGGING
    if value < 0:
        return DriftStatus.AT_RISK
    if value == 0:
        return DriftStatus.ON_TRACK
    return DriftStatus.AHEAD


def health_score(tasks: Sequence[Task], timeline: Timeline | None) -> int:
    if timeline is None or not tasks:
        return 100
    delta = dev_progress(tasks) - expected_progress(timeline)
    if delta < -20:
        return 60
    if delta < -10:
        return 80
    if delta < 0:
        return 90
    return 100


def dashboard_metrics(tasks: Sequence[Task], timeline: Timeline | None) -> DashboardMetrics:
    dev_done, total = _ratio(tasks, is_delivery_done)
    prod_done, _ = _ratio(tasks, is_production_done)
    return DashboardMetrics(
        total_tasks=total,
        dev_done=dev_done,
        prod_done=prod_done,
        dev_progress=percent(dev_done, total),
        prod_progress=percent(prod_done, total),
        time_progress=expected_progress(timeline),
        health_score=health_score(tasks, timeline),
        current_week=timeline.current_week if timeline else None,
        total_weeks=timeline.total_weeks if timeline else None,
    )


def analysis_metrics(
    tasks: Sequence[Task],
    timeline: Timeline | None,
    insights: Sequence[str] = (),
) -> AnalysisMetrics:
    global_done, total = _ratio(tasks, is_progress_done)
    progress = percent(global_done, total)
    expected = expected_progress(timeline)
    delta = progress - expected
    return AnalysisMetrics(
        squads=squad_progress(tasks),
        total_tasks=total,
        global_done=global_done,
        global_progress=progress,
        expected_progress=expected,
        drift=delta,
        drift_status=classify_drift(delta),
        insights=list(insights),
    )
