"""Task repository."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from saad.db.models.task import TaskRow
from saad.repositories.base import BaseRepository


class TaskRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TaskRow)

    async def get(self, task_id: str) -> TaskRow | None:
        return await self.get_by_id("task_id", task_id)

    async def upsert(self, task_id: str, project_id: str, **fields: Any) -> TaskRow:
        """Insert the task or overwrite the stored row with the same id."""
        row = await self.get(task_id)
        if row is None:
            return await self.create(task_id=task_id, project_id=project_id, **fields)
        return await self.update(row, project_id=project_id, **fields)

    async def delete(self, task_id: str) -> bool:
        return await self.delete_by_id("task_id", task_id) > 0
