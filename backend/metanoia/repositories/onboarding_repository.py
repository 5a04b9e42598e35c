"""Repository for in-progress onboarding sessions."""

import uuid
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.models.onboarding import OnboardingSession


class OnboardingRepository:
    """Stateless repository for OnboardingSession rows.

    JSON columns are always replaced with new objects, never mutated in
    place, so SQLAlchemy sees every change.
    """

    @staticmethod
    async def get(db: AsyncSession, user_id: uuid.UUID) -> OnboardingSession | None:
        return await db.get(OnboardingSession, user_id)

    @staticmethod
    async def start(
        db: AsyncSession,
        user_id: uuid.UUID,
        *,
        role: str,
        answers: dict[str, Any],
    ) -> OnboardingSession:
        """Create the user's session, replacing any previous one.

        Args:
            db: Async database session.
            user_id: Owner of the session.
            role: Wizard to run.
            answers: Initial answer bag.

        Returns:
            Fresh session at step 0.
        """
        session = await db.get(OnboardingSession, user_id)
        if session is None:
            session = OnboardingSession(user_id=user_id)
            db.add(session)
        session.role = role
        session.current_step = 0
        session.completed_steps = []
        session.answers = dict(answers)
        await db.flush()
        await db.refresh(session)
        return session

    @staticmethod
    async def save(
        db: AsyncSession,
        session: OnboardingSession,
        *,
        current_step: int,
        completed_steps: list[str],
        answers: dict[str, Any],
    ) -> OnboardingSession:
        """Persist the cursor, completed steps and answer bag."""
        session.current_step = current_step
        session.completed_steps = list(completed_steps)
        session.answers = dict(answers)
        await db.flush()
        await db.refresh(session)
        return session

    @staticmethod
    async def delete(db: AsyncSession, user_id: uuid.UUID) -> bool:
        result = await db.execute(
            delete(OnboardingSession).where(OnboardingSession.user_id == user_id)
        )
        await db.flush()
        return (result.rowcount or 0) > 0
