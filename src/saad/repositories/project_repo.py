"""Project repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from saad.db.models.project import ProjectRow
from saad.repositories.base import BaseRepository


class ProjectRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, ProjectRow)

    async def get(self, project_id: str) -> ProjectRow | None:
        return await self.get_by_id("project_id", project_id)

    async def get_with_children(self, project_id: str) -> ProjectRow | None:
        """Get a project with tasks, timeline and chat messages loaded."""
        stmt = (
            select(ProjectRow)
            .where(ProjectRow.project_id == project_id)
            .options(
                selectinload(ProjectRow.tasks),
                selectinload(ProjectRow.timeline),
                selectinload(ProjectRow.chat_messages),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_with_children(self) -> list[ProjectRow]:
        """All projects, newest first, with their children loaded."""
        stmt = (
            select(ProjectRow)
            .options(
                selectinload(ProjectRow.tasks),
                selectinload(ProjectRow.timeline),
                selectinload(ProjectRow.chat_messages),
            )
            .execution_options(populate_existing=True)
            .order_by(ProjectRow.created_at.desc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, project_id: str) -> bool:
        """Delete a project; tasks, timeline and messages cascade."""
        row = await self.get_with_children(project_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True
