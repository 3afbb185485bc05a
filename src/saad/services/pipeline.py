"""Delivery pipeline state machine.

The board has five fixed columns and every column is a legal target from
every other one, so a move never fails for reasons of ordering. What a move
does carry is the completion stamping: the first time a task reaches a
completion column its timestamp is recorded, and later moves (forward or
backward) never overwrite or clear it.
"""

from datetime import datetime, timezone

from saad.models.enums import ColumnType
from saad.models.task import Task

COLUMN_ORDER: tuple[ColumnType, ...] = (
    ColumnType.TODO,
    ColumnType.DOING,
    ColumnType.TESTING,
    ColumnType.DEPLOY_DEV,
    ColumnType.DEPLOY_PROD,
)

INITIAL_COLUMN = ColumnType.TODO

# Columns counted as done by the progress, drift and squad views.
PROGRESS_DONE_COLUMNS = frozenset(
    {ColumnType.DEPLOY_DEV, ColumnType.TESTING, ColumnType.DEPLOY_PROD}
)

# Columns counted as done by the health score and dev progress.
DELIVERY_DONE_COLUMNS = frozenset({ColumnType.DEPLOY_DEV, ColumnType.DEPLOY_PROD})


def allowed_targets(column: ColumnType) -> tuple[ColumnType, ...]:
    """Every column may move to every column."""
    return COLUMN_ORDER


def coerce_column(value: ColumnType | str) -> ColumnType:
    """Return ``value`` as a ColumnType.

    Accepts the enum, its stored label or its member name. Anything else is
    a caller bug and raises ValueError.
    """
    if isinstance(value, ColumnType):
        return value
    try:
        return ColumnType(value)
    except ValueError:
        pass
    try:
        return ColumnType[value]
    except KeyError:
        raise ValueError(f"Unknown pipeline column: {value!r}") from None


def move_task(task: Task, target: ColumnType | str, now: datetime | None = None) -> Task:
    """Move ``task`` to ``target`` in place and return it.

    Entering TESTING, DEPLOY_DEV or DEPLOY_PROD stamps ``dev_completed_at``
    if it is unset; entering DEPLOY_PROD also stamps ``prod_completed_at`` if
    unset. Neither timestamp is ever cleared here.
    """
    column = coerce_column(target)
    stamp = now or datetime.now(timezone.utc)

    task.column = column
    if column in PROGRESS_DONE_COLUMNS and task.dev_completed_at is None:
        task.dev_completed_at = stamp
    if column == ColumnType.DEPLOY_PROD and task.prod_completed_at is None:
        task.prod_completed_at = stamp
    return task


def is_progress_done(task: Task) -> bool:
    return task.column in PROGRESS_DONE_COLUMNS


def is_delivery_done(task: Task) -> bool:
    return task.column in DELIVERY_DONE_COLUMNS


def is_production_done(task: Task) -> bool:
    return task.column == ColumnType.DEPLOY_PROD
