"""Tests for the delivery pipeline state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from saad.models.enums import ColumnType
from saad.models.task import Task
from saad.services.pipeline import (
    COLUMN_ORDER,
    INITIAL_COLUMN,
    allowed_targets,
    coerce_column,
    is_delivery_done,
    is_production_done,
    is_progress_done,
    move_task,
)

T0 = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def _task(column: ColumnType = ColumnType.TODO) -> Task:
    return Task(id="task_1", code="RN - 001.1", title="Tipo de Cadastro", category="RN - 001", column=column)


class TestColumns:
    def test_fixed_order(self):
        assert COLUMN_ORDER == (
            ColumnType.TODO,
            ColumnType.DOING,
            ColumnType.TESTING,
            ColumnType.DEPLOY_DEV,
            ColumnType.DEPLOY_PROD,
        )

    def test_initial_column_is_todo(self):
        assert INITIAL_COLUMN is ColumnType.TODO

    @pytest.mark.parametrize("column", list(ColumnType))
    def test_every_column_reaches_every_column(self, column):
        assert set(allowed_targets(column)) == set(ColumnType)

    def test_coerce_accepts_label_and_name(self):
        assert coerce_column("Deploy Prod") is ColumnType.DEPLOY_PROD
        assert coerce_column("DEPLOY_PROD") is ColumnType.DEPLOY_PROD
        assert coerce_column(ColumnType.DOING) is ColumnType.DOING

    def test_coerce_rejects_unknown(self):
        with pytest.raises(ValueError):
            coerce_column("Done")


class TestMoveTask:
    def test_move_to_doing_sets_column_only(self):
        task = move_task(_task(), ColumnType.DOING, now=T0)
        assert task.column is ColumnType.DOING
        assert task.dev_completed_at is None
        assert task.prod_completed_at is None

    @pytest.mark.parametrize("column", [ColumnType.TESTING, ColumnType.DEPLOY_DEV])
    def test_completion_columns_stamp_dev(self, column):
        task = move_task(_task(), column, now=T0)
        assert task.dev_completed_at == T0
        assert task.prod_completed_at is None

    def test_deploy_prod_stamps_both(self):
        task = move_task(_task(), ColumnType.DEPLOY_PROD, now=T0)
        assert task.dev_completed_at == T0
        assert task.prod_completed_at == T0

    def test_first_write_wins(self):
        task = move_task(_task(), ColumnType.TESTING, now=T0)
        move_task(task, ColumnType.DEPLOY_PROD, now=T0 + timedelta(days=3))
        assert task.dev_completed_at == T0
        assert task.prod_completed_at == T0 + timedelta(days=3)

        move_task(task, ColumnType.DEPLOY_DEV, now=T0 + timedelta(days=9))
        move_task(task, ColumnType.DEPLOY_PROD, now=T0 + timedelta(days=10))
        assert task.dev_completed_at == T0
        assert task.prod_completed_at == T0 + timedelta(days=3)

    def test_moving_back_to_todo_keeps_timestamps(self):
        task = move_task(_task(), ColumnType.DEPLOY_PROD, now=T0)
        move_task(task, ColumnType.TODO, now=T0 + timedelta(days=1))
        assert task.column is ColumnType.TODO
        assert task.dev_completed_at == T0
        assert task.prod_completed_at == T0

    def test_move_accepts_label(self):
        task = move_task(_task(), "Testes", now=T0)
        assert task.column is ColumnType.TESTING

    def test_move_rejects_unknown_column(self):
        task = _task()
        with pytest.raises(ValueError):
            move_task(task, "Archived")
        assert task.column is ColumnType.TODO

    def test_default_timestamp_is_aware_utc(self):
        task = move_task(_task(), ColumnType.DEPLOY_DEV)
        assert task.dev_completed_at.tzinfo is not None


class TestDonePredicates:
    @pytest.mark.parametrize(
        "column, progress, delivery, production",
        [
            (ColumnType.TODO, False, False, False),
            (ColumnType.DOING, False, False, False),
            (ColumnType.TESTING, True, False, False),
            (ColumnType.DEPLOY_DEV, True, True, False),
            (ColumnType.DEPLOY_PROD, True, True, True),
        ],
    )
    def test_predicates_stay_distinct(self, column, progress, delivery, production):
        task = _task(column)
        assert is_progress_done(task) is progress
        assert is_delivery_done(task) is delivery
        assert is_production_done(task) is production
