"""Chat message repository."""

from sqlalchemy.ext.asyncio import AsyncSession

from saad.db.models.chat_message import ChatMessageRow
from saad.repositories.base import BaseRepository


class ChatMessageRepository(BaseRepository):
    def __init__(self, session: AsyncSession):
        super().__init__(session, ChatMessageRow)
