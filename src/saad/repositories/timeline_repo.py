"""Timeline repository."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from saad.db.models.timeline import TimelineRow
from saad.repositories.base import BaseRepository


class TimelineRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, TimelineRow)

    async def get(self, project_id: str) -> TimelineRow | None:
        return await self.get_by_id("project_id", project_id)

    async def upsert(self, project_id: str, **fields: Any) -> TimelineRow:
        """Replace the project's timeline; one row per project."""
        row = await self.get(project_id)
        if row is None:
            return await self.create(project_id=project_id, **fields)
        return await self.update(row, **fields)
