"""Repositories for swipes and matches."""

import uuid
from collections.abc import Sequence

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.models.swipe import DIRECTION_LIKE, DIRECTION_PASS, Match, Swipe


class SwipeRepository:
    """Stateless repository for Swipe rows."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        swiper_id: uuid.UUID,
        target_id: uuid.UUID,
        direction: str,
    ) -> Swipe:
        """Record a decision.

        Raises:
            sqlalchemy.exc.IntegrityError: If the pair was already swiped.
        """
        swipe = Swipe(swiper_id=swiper_id, target_id=target_id, direction=direction)
        db.add(swipe)
        await db.flush()
        await db.refresh(swipe)
        return swipe

    @staticmethod
    async def get_pair(
        db: AsyncSession, swiper_id: uuid.UUID, target_id: uuid.UUID
    ) -> Swipe | None:
        result = await db.execute(
            select(Swipe).where(
                Swipe.swiper_id == swiper_id, Swipe.target_id == target_id
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def has_liked(
        db: AsyncSession, swiper_id: uuid.UUID, target_id: uuid.UUID
    ) -> bool:
        """Whether ``swiper_id`` liked ``target_id``."""
        result = await db.execute(
            select(Swipe.id).where(
                Swipe.swiper_id == swiper_id,
                Swipe.target_id == target_id,
                Swipe.direction == DIRECTION_LIKE,
            )
        )
        return result.first() is not None

    @staticmethod
    async def latest_for_user(
        db: AsyncSession, swiper_id: uuid.UUID, *, limit: int
    ) -> Sequence[Swipe]:
        """The user's most recent swipes, newest first."""
        result = await db.execute(
            select(Swipe)
            .where(Swipe.swiper_id == swiper_id)
            .order_by(Swipe.id.desc())
            .limit(limit)
        )
        return result.scalars().all()

    @staticmethod
    async def delete(db: AsyncSession, swipe_id: int) -> None:
        await db.execute(delete(Swipe).where(Swipe.id == swipe_id))
        await db.flush()

    @staticmethod
    async def delete_passes(db: AsyncSession, swiper_id: uuid.UUID) -> int:
        """Forget every profile the user passed on. Returns rows removed."""
        result = await db.execute(
            delete(Swipe).where(
                Swipe.swiper_id == swiper_id, Swipe.direction == DIRECTION_PASS
            )
        )
        await db.flush()
        return result.rowcount or 0


class MatchRepository:
    """Stateless repository for Match rows."""

    @staticmethod
    async def get(db: AsyncSession, match_id: uuid.UUID) -> Match | None:
        return await db.get(Match, match_id)

    @staticmethod
    async def get_for_user(
        db: AsyncSession, match_id: uuid.UUID, user_id: uuid.UUID
    ) -> Match | None:
        """Fetch a match only if ``user_id`` is one of its two members."""
        result = await db.execute(
            select(Match).where(
                Match.id == match_id,
                or_(Match.user_a_id == user_id, Match.user_b_id == user_id),
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_pair(
        db: AsyncSession, first: uuid.UUID, second: uuid.UUID
    ) -> Match | None:
        user_a, user_b = Match.ordered_pair(first, second)
        result = await db.execute(
            select(Match).where(Match.user_a_id == user_a, Match.user_b_id == user_b)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        db: AsyncSession,
        first: uuid.UUID,
        second: uuid.UUID,
        *,
        created_by_swipe_id: int | None = None,
    ) -> Match:
        """Store a match; argument order does not matter.

        Raises:
            sqlalchemy.exc.IntegrityError: If the pair is already matched.
        """
        user_a, user_b = Match.ordered_pair(first, second)
        match = Match(
            user_a_id=user_a,
            user_b_id=user_b,
            created_by_swipe_id=created_by_swipe_id,
        )
        db.add(match)
        await db.flush()
        await db.refresh(match)
        return match

    @staticmethod
    async def list_for_user(db: AsyncSession, user_id: uuid.UUID) -> Sequence[Match]:
        """All matches the user belongs to, newest first."""
        result = await db.execute(
            select(Match)
            .where(or_(Match.user_a_id == user_id, Match.user_b_id == user_id))
            .order_by(Match.created_at.desc(), Match.id)
        )
        return result.scalars().all()

    @staticmethod
    async def delete(db: AsyncSession, match_id: uuid.UUID) -> None:
        await db.execute(delete(Match).where(Match.id == match_id))
        await db.flush()
