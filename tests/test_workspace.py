"""Tests for the workspace cache and its confirmed/optimistic writes."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from saad.errors.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError
from saad.models.enums import ChatRole, ColumnType, ProjectStatus, Squad
from saad.models.task import TaskUpdate
from saad.services.intake.merge import IntakeService, TurnGate
from saad.services.workspace import ProjectWorkspace, greeting_for

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures" / "intake"


@pytest.fixture
def workspace(store, fake_generator):
    return ProjectWorkspace(store, intake=IntakeService(store, fake_generator), gate=TurnGate())


@pytest.mark.asyncio
async def test_create_project_seeds_greeting(workspace, store):
    project = await workspace.create_project("Cardápio Digital", "Combos")

    assert project.status is ProjectStatus.ACTIVE
    assert len(project.chat_history) == 1
    greeting = project.chat_history[0]
    assert greeting.role is ChatRole.AI
    assert greeting.content == greeting_for("Cardápio Digital")
    assert '"Cardápio Digital"' in greeting.content

    stored = await store.get_project(project.id)
    assert [m.content for m in stored.chat_history] == [greeting.content]
    assert workspace.get(project.id) is project


@pytest.mark.asyncio
@pytest.mark.parametrize("name", ["", "   "])
async def test_blank_name_never_reaches_store(workspace, store, name):
    with patch.object(store, "create_project", new_callable=AsyncMock) as create:
        assert await workspace.create_project(name) is None
    create.assert_not_called()
    assert workspace.projects == {}


@pytest.mark.asyncio
async def test_failed_create_leaves_cache_alone(workspace, store):
    with patch.object(store, "create_project", new_callable=AsyncMock, return_value=None):
        with pytest.raises(PersistenceError):
            await workspace.create_project("Cardápio")
    assert workspace.projects == {}


@pytest.mark.asyncio
async def test_load_replaces_cache(workspace, store):
    await store.create_project(name="A")
    await store.create_project(name="B")

    projects = await workspace.load()

    assert [p.name for p in projects] == ["B", "A"]
    assert set(workspace.projects) == {p.id for p in projects}


@pytest.mark.asyncio
async def test_unknown_project_raises_not_found(workspace):
    with pytest.raises(NotFoundError):
        await workspace.load_project("proj_missing")
    with pytest.raises(NotFoundError):
        workspace.get("proj_missing")


@pytest.mark.asyncio
async def test_toggle_status(workspace, store):
    project = await workspace.create_project("P")

    await workspace.toggle_status(project.id)
    assert project.status is ProjectStatus.COMPLETED
    assert workspace.projects_with_status(ProjectStatus.COMPLETED) == [project]
    assert workspace.projects_with_status(ProjectStatus.ACTIVE) == []

    await workspace.toggle_status(project.id)
    assert project.status is ProjectStatus.ACTIVE
    assert (await store.get_project(project.id)).status is ProjectStatus.ACTIVE


@pytest.mark.asyncio
async def test_paused_toggles_to_completed(workspace):
    project = await workspace.create_project("P")
    await workspace.set_status(project.id, ProjectStatus.PAUSED)

    await workspace.toggle_status(project.id)
    assert project.status is ProjectStatus.COMPLETED


@pytest.mark.asyncio
async def test_failed_status_write_keeps_cached_status(workspace, store):
    project = await workspace.create_project("P")
    with patch.object(store, "update_project_status", new_callable=AsyncMock, return_value=False):
        with pytest.raises(PersistenceError):
            await workspace.toggle_status(project.id)
    assert project.status is ProjectStatus.ACTIVE


@pytest.mark.asyncio
async def test_update_project(workspace, store):
    project = await workspace.create_project("P")

    assert await workspace.update_project(project.id, "   ", "x") is None
    assert project.name == "P"

    await workspace.update_project(project.id, "Novo nome", "Nova descrição")
    stored = await store.get_project(project.id)
    assert (stored.name, stored.description) == ("Novo nome", "Nova descrição")


@pytest.mark.asyncio
async def test_delete_project(workspace, store):
    project = await workspace.create_project("P")
    await workspace.delete_project(project.id)

    assert project.id not in workspace.projects
    assert await store.get_project(project.id) is None


@pytest.mark.asyncio
async def test_manual_task_starts_in_todo(workspace, store):
    project = await workspace.create_project("P")
    task = await workspace.create_task(project.id, "RN - 1", "Login", "RN - 1 Acesso", squad=Squad.BACKEND)

    assert task.column is ColumnType.TODO
    assert project.tasks == [task]
    assert (await store.get_project(project.id)).tasks[0].code == "RN - 1"


@pytest.mark.asyncio
async def test_edit_task_keeps_unset_fields(workspace, store):
    project = await workspace.create_project("P")
    task = await workspace.create_task(project.id, "RN - 1", "Login", "RN - 1", description="Regra")

    updated = await workspace.update_task(project.id, task.id, TaskUpdate(title="Login social", column=ColumnType.DOING))

    assert updated.title == "Login social"
    assert updated.column is ColumnType.DOING
    assert updated.description == "Regra"
    assert project.find_task(task.id) is updated
    assert (await store.get_project(project.id)).tasks[0].title == "Login social"


@pytest.mark.asyncio
async def test_failed_edit_leaves_cache(workspace, store):
    project = await workspace.create_project("P")
    task = await workspace.create_task(project.id, "RN - 1", "Login", "RN - 1")

    with patch.object(store, "update_task", new_callable=AsyncMock, return_value=False):
        with pytest.raises(PersistenceError):
            await workspace.update_task(project.id, task.id, TaskUpdate(title="Outro"))
    assert project.find_task(task.id).title == "Login"


@pytest.mark.asyncio
async def test_delete_task(workspace, store):
    project = await workspace.create_project("P")
    task = await workspace.create_task(project.id, "RN - 1", "Login", "RN - 1")

    await workspace.delete_task(project.id, task.id)
    assert project.tasks == []
    with pytest.raises(NotFoundError):
        await workspace.delete_task(project.id, task.id)


@pytest.mark.asyncio
async def test_move_persists_and_stamps(workspace, store):
    project = await workspace.create_project("P")
    task = await workspace.create_task(project.id, "RN - 1", "Login", "RN - 1")

    result = await workspace.move_task(project.id, task.id, ColumnType.DEPLOY_PROD)

    assert result.persisted is True
    assert task.column is ColumnType.DEPLOY_PROD
    stored = (await store.get_project(project.id)).tasks[0]
    assert stored.column is ColumnType.DEPLOY_PROD
    assert stored.prod_completed_at is not None


@pytest.mark.asyncio
async def test_failed_move_stays_moved_in_cache(workspace, store):
    project = await workspace.create_project("P")
    task = await workspace.create_task(project.id, "RN - 1", "Login", "RN - 1")

    with patch.object(store, "upsert_task", new_callable=AsyncMock, return_value=False):
        result = await workspace.move_task(project.id, task.id, "Testes")

    assert result.persisted is False
    assert task.column is ColumnType.TESTING
    assert task.dev_completed_at is not None
    assert (await store.get_project(project.id)).tasks[0].column is ColumnType.TODO


@pytest.mark.asyncio
async def test_send_message_runs_turn(workspace, fake_generator):
    fake_generator.queue(json.loads((FIXTURES_DIR / "rules_with_schedule.response.json").read_text(encoding="utf-8")))
    project = await workspace.create_project("P")

    outcome = await workspace.send_message(project.id, "RN - 001 com prazo de 4 semanas")

    assert len(outcome.new_tasks) == 2
    assert [m.role for m in project.chat_history] == [ChatRole.AI, ChatRole.USER, ChatRole.AI]
    assert not workspace.is_busy(project.id)


@pytest.mark.asyncio
async def test_send_message_rejected_while_busy(workspace, fake_generator):
    project = await workspace.create_project("P")

    with workspace.gate.hold(project.id):
        assert workspace.is_busy(project.id)
        with pytest.raises(ConflictError):
            await workspace.send_message(project.id, "outra mensagem")

    assert fake_generator.prompts == []
    assert len(project.chat_history) == 1


@pytest.mark.asyncio
async def test_invalid_edit_never_reaches_store(workspace, store):
    project = await workspace.create_project("P")
    task = await workspace.create_task(project.id, "RN - 1", "Login", "RN - 1")

    with patch.object(store, "update_task", new_callable=AsyncMock) as update:
        with pytest.raises(ValidationError):
            await workspace.update_task(project.id, task.id, TaskUpdate(column=None))
        with pytest.raises(ValidationError):
            await workspace.update_task(project.id, task.id, TaskUpdate(title=None))
    update.assert_not_called()
    assert project.find_task(task.id).column is ColumnType.TODO
