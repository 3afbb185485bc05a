"""Project store facade.

Keyed create/read/update/delete over the repositories. Every write commits
on its own, so each one is individually durable, and reports success as a
bool: a store failure is logged, rolled back and returned as ``False``,
never raised. Reads return empty results on failure.
"""

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from saad.db.models.chat_message import ChatMessageRow
from saad.db.models.project import ProjectRow
from saad.db.models.task import TaskRow
from saad.db.models.timeline import TimelineRow
from saad.models.chat import ChatMessage
from saad.models.enums import ProjectStatus
from saad.models.project import Project
from saad.models.task import Task
from saad.models.timeline import Timeline
from saad.repositories.chat_message_repo import ChatMessageRepository
from saad.repositories.project_repo import ProjectRepository
from saad.repositories.task_repo import TaskRepository
from saad.repositories.timeline_repo import TimelineRepository
from saad.services.id_generator import PROJECT_ID_PREFIX, generate_id

logger = logging.getLogger(__name__)


def task_from_row(row: TaskRow) -> Task:
    return Task(
        id=row.task_id,
        code=row.code,
        title=row.title,
        category=row.category,
        description=row.description or "",
        column=row.column,
        squad=row.squad,
        dev_completed_at=row.dev_completed_at,
        prod_completed_at=row.prod_completed_at,
    )


def timeline_from_row(row: TimelineRow) -> Timeline:
    return Timeline(
        start_date=row.start_date,
        end_date=row.end_date,
        total_weeks=row.total_weeks,
        current_week=row.current_week,
        progress_message=row.progress_message,
    )


def message_from_row(row: ChatMessageRow) -> ChatMessage:
    return ChatMessage(
        id=row.message_id,
        role=row.role,
        content=row.content,
        timestamp=row.timestamp,
    )


def project_from_row(row: ProjectRow) -> Project:
    return Project(
        id=row.project_id,
        name=row.name,
        description=row.description or "",
        created_at=row.created_at,
        status=row.status,
        insights=list(row.insights or []),
        tasks=[task_from_row(t) for t in row.tasks],
        timeline=timeline_from_row(row.timeline) if row.timeline else None,
        chat_history=[message_from_row(m) for m in row.chat_messages],
    )


def _task_fields(task: Task) -> dict:
    return {
        "code": task.code,
        "title": task.title,
        "category": task.category,
        "description": task.description,
        "column": task.column.value,
        "squad": task.squad.value if task.squad else None,
        "dev_completed_at": task.dev_completed_at,
        "prod_completed_at": task.prod_completed_at,
    }


class ProjectStore:
    """Store facade bound to one database session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.projects = ProjectRepository(session)
        self.tasks = TaskRepository(session)
        self.timelines = TimelineRepository(session)
        self.messages = ChatMessageRepository(session)

    async def _commit(self, operation: str, **context) -> bool:
        try:
            await self.session.commit()
            return True
        except SQLAlchemyError:
            logger.exception("Store commit failed: %s %s", operation, context)
            await self.session.rollback()
            return False

    async def _fail(self, operation: str, **context) -> bool:
        logger.exception("Store operation failed: %s %s", operation, context)
        await self.session.rollback()
        return False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_projects(self) -> list[Project]:
        """All projects with tasks, timeline and messages joined, newest first."""
        try:
            rows = await self.projects.list_with_children()
        except SQLAlchemyError:
            logger.exception("Error fetching projects")
            await self.session.rollback()
            return []
        return [project_from_row(row) for row in rows]

    async def get_project(self, project_id: str) -> Project | None:
        try:
            row = await self.projects.get_with_children(project_id)
        except SQLAlchemyError:
            logger.exception("Error fetching project %s", project_id)
            await self.session.rollback()
            return None
        return project_from_row(row) if row else None

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    async def create_project(
        self,
        name: str,
        description: str = "",
        status: ProjectStatus = ProjectStatus.ACTIVE,
        insights: Sequence[str] = (),
    ) -> str | None:
        """Insert a project; returns the store-assigned id or None on failure."""
        project_id = generate_id(PROJECT_ID_PREFIX)
        try:
            await self.projects.create(
                project_id=project_id,
                name=name,
                description=description,
                status=status.value,
                insights=list(insights),
            )
        except SQLAlchemyError:
            await self._fail("create_project", name=name)
            return None
        if not await self._commit("create_project", project_id=project_id):
            return None
        return project_id

    async def delete_project(self, project_id: str) -> bool:
        try:
            deleted = await self.projects.delete(project_id)
        except SQLAlchemyError:
            return await self._fail("delete_project", project_id=project_id)
        if not deleted:
            logger.warning("Delete requested for unknown project %s", project_id)
            return False
        return await self._commit("delete_project", project_id=project_id)

    async def update_project_status(self, project_id: str, status: ProjectStatus) -> bool:
        return await self._update_project_fields(
            "update_project_status", project_id, status=ProjectStatus(status).value
        )

    async def update_project(self, project_id: str, name: str, description: str) -> bool:
        return await self._update_project_fields(
            "update_project", project_id, name=name, description=description
        )

    async def update_project_insights(self, project_id: str, insights: Sequence[str]) -> bool:
        return await self._update_project_fields(
            "update_project_insights", project_id, insights=list(insights)
        )

    async def _update_project_fields(self, operation: str, project_id: str, **fields) -> bool:
        try:
            row = await self.projects.get(project_id)
            if row is None:
                logger.warning("%s: project %s not found", operation, project_id)
                return False
            await self.projects.update(row, **fields)
        except SQLAlchemyError:
            return await self._fail(operation, project_id=project_id)
        return await self._commit(operation, project_id=project_id)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    async def upsert_task(self, project_id: str, task: Task) -> bool:
        try:
            await self.tasks.upsert(task.id, project_id, **_task_fields(task))
        except SQLAlchemyError:
            return await self._fail("upsert_task", project_id=project_id, task_id=task.id)
        return await self._commit("upsert_task", task_id=task.id)

    async def update_task(self, task: Task) -> bool:
        """Overwrite the fields of an existing task; unknown ids fail."""
        try:
            row = await self.tasks.get(task.id)
            if row is None:
                logger.warning("update_task: task %s not found", task.id)
                return False
            await self.tasks.update(row, **_task_fields(task))
        except SQLAlchemyError:
            return await self._fail("update_task", task_id=task.id)
        return await self._commit("update_task", task_id=task.id)

    async def delete_task(self, task_id: str) -> bool:
        try:
            deleted = await self.tasks.delete(task_id)
        except SQLAlchemyError:
            return await self._fail("delete_task", task_id=task_id)
        if not deleted:
            logger.warning("delete_task: task %s not found", task_id)
            return False
        return await self._commit("delete_task", task_id=task_id)

    async def save_tasks(self, project_id: str, tasks: Sequence[Task]) -> bool:
        """Bulk upsert; all tasks land in one commit or none do."""
        try:
            for task in tasks:
                await self.tasks.upsert(task.id, project_id, **_task_fields(task))
        except SQLAlchemyError:
            return await self._fail("save_tasks", project_id=project_id, count=len(tasks))
        return await self._commit("save_tasks", project_id=project_id, count=len(tasks))

    # ------------------------------------------------------------------
    # Chat, timeline
    # ------------------------------------------------------------------

    async def add_chat_message(self, project_id: str, message: ChatMessage) -> bool:
        try:
            await self.messages.create(
                message_id=message.id,
                project_id=project_id,
                role=message.role.value,
                content=message.content,
                timestamp=message.timestamp,
            )
        except SQLAlchemyError:
            return await self._fail("add_chat_message", project_id=project_id, message_id=message.id)
        return await self._commit("add_chat_message", message_id=message.id)

    async def update_timeline(self, project_id: str, timeline: Timeline) -> bool:
        """Replace the project's timeline row wholesale."""
        try:
            await self.timelines.upsert(
                project_id,
                start_date=timeline.start_date,
                end_date=timeline.end_date,
                total_weeks=timeline.total_weeks,
                current_week=timeline.current_week,
                progress_message=timeline.progress_message,
            )
        except SQLAlchemyError:
            return await self._fail("update_timeline", project_id=project_id)
        return await self._commit("update_timeline", project_id=project_id)
