"""Repository for chat messages."""

import uuid
from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.models.chat import KIND_TEXT, ChatMessage


class ChatRepository:
    """Stateless repository for ChatMessage rows."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        match_id: uuid.UUID,
        sender_id: uuid.UUID,
        body: str,
        kind: str = KIND_TEXT,
    ) -> ChatMessage:
        message = ChatMessage(
            match_id=match_id, sender_id=sender_id, body=body, kind=kind
        )
        db.add(message)
        await db.flush()
        await db.refresh(message)
        return message

    @staticmethod
    async def list_for_match(
        db: AsyncSession,
        match_id: uuid.UUID,
        *,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[Sequence[ChatMessage], int]:
        """A page of a conversation, oldest first, plus the total count.

        Args:
            db: Async database session.
            match_id: Conversation to read.
            offset: Messages to skip.
            limit: Maximum messages to return.

        Returns:
            Tuple of (messages, total messages in the conversation).
        """
        total = await ChatRepository.count_for_match(db, match_id)
        result = await db.execute(
            select(ChatMessage)
            .where(ChatMessage.match_id == match_id)
            .order_by(ChatMessage.id)
            .offset(offset)
            .limit(limit)
        )
        return result.scalars().all(), total

    @staticmethod
    async def count_for_match(db: AsyncSession, match_id: uuid.UUID) -> int:
        result = await db.execute(
            select(func.count())
            .select_from(ChatMessage)
            .where(ChatMessage.match_id == match_id)
        )
        return int(result.scalar_one())

    @staticmethod
    async def delete_for_match(db: AsyncSession, match_id: uuid.UUID) -> int:
        """Delete the whole conversation. Returns the number of messages removed."""
        result = await db.execute(
            delete(ChatMessage).where(ChatMessage.match_id == match_id)
        )
        await db.flush()
        return result.rowcount or 0
