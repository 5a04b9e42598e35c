"""Repository for referral requests."""

import uuid
from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.models.referral import STATUS_PENDING, Referral


class ReferralRepository:
    """Stateless repository for Referral rows."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        from_user_id: uuid.UUID,
        to_user_id: uuid.UUID,
        day_key: str,
        match_id: uuid.UUID | None = None,
        job_id: str | None = None,
        company_id: str | None = None,
        email: str | None = None,
        message: str | None = None,
    ) -> Referral:
        referral = Referral(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            match_id=match_id,
            job_id=job_id,
            company_id=company_id,
            email=email,
            message=message,
            status=STATUS_PENDING,
            day_key=day_key,
        )
        db.add(referral)
        await db.flush()
        await db.refresh(referral)
        return referral

    @staticmethod
    async def count_for_day(
        db: AsyncSession, from_user_id: uuid.UUID, day_key: str
    ) -> int:
        """How many requests the user made on the given calendar day."""
        result = await db.execute(
            select(func.count())
            .select_from(Referral)
            .where(Referral.from_user_id == from_user_id, Referral.day_key == day_key)
        )
        return int(result.scalar_one())

    @staticmethod
    async def list_from_user(
        db: AsyncSession,
        from_user_id: uuid.UUID,
        *,
        offset: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[Referral], int]:
        """A page of the user's requests, newest first, plus the total."""
        total_result = await db.execute(
            select(func.count())
            .select_from(Referral)
            .where(Referral.from_user_id == from_user_id)
        )
        result = await db.execute(
            select(Referral)
            .where(Referral.from_user_id == from_user_id)
            .order_by(Referral.created_at.desc(), Referral.day_key.desc())
            .offset(offset)
            .limit(limit)
        )
        return result.scalars().all(), int(total_result.scalar_one())
