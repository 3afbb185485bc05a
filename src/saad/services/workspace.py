"""In-memory projection of the store for one interactive client.

The store is the source of truth; ``projects`` is a cache rebuilt by
``load()``. Each mutation states how it treats the cache:

* confirmed: the store write happens first and the cache changes only if it
  succeeded, otherwise ``PersistenceError`` is raised;
* optimistic: the cache changes first and the write follows; a failed write
  is reported but not rolled back (task moves only).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError

from saad.errors.exceptions import NotFoundError, PersistenceError, ValidationError
from saad.models.chat import ChatMessage
from saad.models.enums import ChatRole, ColumnType, ProjectStatus, Squad
from saad.models.project import Project
from saad.models.task import Task, TaskUpdate
from saad.services.id_generator import MESSAGE_ID_PREFIX, TASK_ID_PREFIX, generate_id
from saad.services.intake.merge import IntakeOutcome, IntakeService, TurnGate
from saad.services.pipeline import INITIAL_COLUMN, coerce_column, move_task
from saad.services.store import ProjectStore

logger = logging.getLogger(__name__)


def greeting_for(name: str) -> str:
    return (
        f'Olá! Vamos começar o planejamento do projeto "{name}". '
        "Me informe as Regras de Negócio e o prazo."
    )


@dataclass
class MoveResult:
    task: Task
    persisted: bool


class ProjectWorkspace:
    def __init__(
        self,
        store: ProjectStore,
        intake: IntakeService | None = None,
        gate: TurnGate | None = None,
    ):
        self.store = store
        self.intake = intake
        self.gate = gate or TurnGate()
        self.projects: dict[str, Project] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> list[Project]:
        """Replace the cache with everything in the store, newest first."""
        projects = await self.store.list_projects()
        self.projects = {p.id: p for p in projects}
        return projects

    async def load_project(self, project_id: str) -> Project:
        """Refresh a single project from the store into the cache."""
        project = await self.store.get_project(project_id)
        if project is None:
            self.projects.pop(project_id, None)
            raise NotFoundError("Project", project_id)
        self.projects[project_id] = project
        return project

    def get(self, project_id: str) -> Project:
        project = self.projects.get(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    def _get_task(self, project: Project, task_id: str) -> Task:
        task = project.find_task(task_id)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    # ------------------------------------------------------------------
    # Projects (confirmed)
    # ------------------------------------------------------------------

    async def create_project(self, name: str, description: str = "") -> Project | None:
        """Create a project seeded with the assistant's greeting.

        A blank name is rejected before touching the store and returns None.
        """
        if not name.strip():
            return None

        project_id = await self.store.create_project(name=name, description=description)
        if project_id is None:
            raise PersistenceError("Erro ao criar projeto no banco de dados.")

        greeting = ChatMessage(
            id=generate_id(MESSAGE_ID_PREFIX),
            role=ChatRole.AI,
            content=greeting_for(name),
            timestamp=datetime.now(timezone.utc),
        )
        project = Project(
            id=project_id,
            name=name,
            description=description,
            created_at=datetime.now(timezone.utc),
            status=ProjectStatus.ACTIVE,
        )
        if await self.store.add_chat_message(project_id, greeting):
            project.chat_history.append(greeting)
        else:
            logger.warning("Greeting for project %s was not saved", project_id)
        self.projects[project_id] = project
        return project

    async def delete_project(self, project_id: str) -> None:
        self.get(project_id)
        if not await self.store.delete_project(project_id):
            raise PersistenceError("Erro ao excluir projeto.")
        del self.projects[project_id]

    async def set_status(self, project_id: str, status: ProjectStatus) -> Project:
        project = self.get(project_id)
        if not await self.store.update_project_status(project_id, status):
            raise PersistenceError("Erro ao atualizar status.")
        project.status = ProjectStatus(status)
        return project

    async def toggle_status(self, project_id: str) -> Project:
        """Completed projects go back to active; anything else completes."""
        project = self.get(project_id)
        target = ProjectStatus.ACTIVE if project.status == ProjectStatus.COMPLETED else ProjectStatus.COMPLETED
        return await self.set_status(project_id, target)

    async def update_project(self, project_id: str, name: str, description: str) -> Project | None:
        """Rename/re-describe a project; a blank name returns None untouched."""
        project = self.get(project_id)
        if not name.strip():
            return None
        if not await self.store.update_project(project_id, name=name, description=description):
            raise PersistenceError("Erro ao atualizar projeto.")
        project.name = name
        project.description = description
        return project

    def projects_with_status(self, status: ProjectStatus) -> list[Project]:
        """Cached projects in one status, newest first; completed ones are the deliveries list."""
        return [p for p in self.projects.values() if p.status == status]

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def create_task(
        self,
        project_id: str,
        code: str,
        title: str,
        category: str,
        description: str = "",
        squad: Squad | None = None,
    ) -> Task:
        """Manual task entry; confirmed. New tasks start in TODO."""
        project = self.get(project_id)
        task = Task(
            id=generate_id(TASK_ID_PREFIX),
            code=code,
            title=title,
            category=category,
            description=description,
            column=INITIAL_COLUMN,
            squad=squad,
        )
        if not await self.store.upsert_task(project_id, task):
            raise PersistenceError("Erro ao criar tarefa.")
        project.tasks.append(task)
        return task

    async def update_task(self, project_id: str, task_id: str, changes: TaskUpdate) -> Task:
        """Edit-form update of any task field; confirmed.

        Raises:
            ValidationError: if the edited task is not a valid task (e.g. a
                null title or column); the store is not called.
        """
        project = self.get(project_id)
        current = self._get_task(project, task_id)
        fields = changes.model_dump(exclude_unset=True)
        if "description" in fields and fields["description"] is None:
            fields["description"] = ""
        try:
            updated = Task.model_validate({**current.model_dump(), **fields})
        except PydanticValidationError as exc:
            raise ValidationError(
                "Tarefa inválida.", details=exc.errors(include_url=False, include_context=False)
            ) from exc
        if not await self.store.update_task(updated):
            raise PersistenceError("Erro ao atualizar tarefa.")
        project.tasks = [updated if t.id == task_id else t for t in project.tasks]
        return updated

    async def delete_task(self, project_id: str, task_id: str) -> None:
        project = self.get(project_id)
        self._get_task(project, task_id)
        if not await self.store.delete_task(task_id):
            raise PersistenceError("Erro ao excluir tarefa.")
        project.tasks = [t for t in project.tasks if t.id != task_id]

    async def move_task(self, project_id: str, task_id: str, target: ColumnType | str) -> MoveResult:
        """Drag-and-drop move; optimistic.

        The cached task moves before the upsert and stays moved if the upsert
        fails.
        """
        project = self.get(project_id)
        task = self._get_task(project, task_id)
        column = coerce_column(target)
        move_task(task, column)
        persisted = await self.store.upsert_task(project_id, task)
        if not persisted:
            logger.warning("Move of task %s to %s was not persisted", task_id, column.value)
        return MoveResult(task=task, persisted=persisted)

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def is_busy(self, project_id: str) -> bool:
        return self.gate.is_busy(project_id)

    async def send_message(self, project_id: str, text: str) -> IntakeOutcome:
        """Run one intake turn; a second turn for a busy project is rejected."""
        if self.intake is None:
            raise RuntimeError("ProjectWorkspace was created without an intake service")
        project = self.get(project_id)
        with self.gate.hold(project_id):
            return await self.intake.run_turn(project, text)
