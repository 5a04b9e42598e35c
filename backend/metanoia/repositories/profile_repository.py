"""Repository for Profile operations."""

import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.models.profile import Profile
from metanoia.models.swipe import Swipe

# Columns a caller may set through upsert()/update().
# user_id and role identify the profile and are only set on creation.
_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "company_type",
        "location",
        "display_name",
        "headline",
        "photo_url",
        "is_published",
        "data",
        "completed_at",
    }
)


def _check_fields(kwargs: dict[str, Any]) -> None:
    unknown = set(kwargs) - _UPDATABLE_FIELDS
    if unknown:
        msg = f"Unknown fields: {', '.join(sorted(unknown))}"
        raise ValueError(msg)


class ProfileRepository:
    """Stateless repository for Profile table operations."""

    @staticmethod
    async def get_by_user(db: AsyncSession, user_id: uuid.UUID) -> Profile | None:
        """Fetch the profile owned by ``user_id``."""
        result = await db.execute(select(Profile).where(Profile.user_id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def upsert(
        db: AsyncSession,
        user_id: uuid.UUID,
        *,
        role: str,
        **kwargs: Any,
    ) -> Profile:
        """Create the user's profile or overwrite the existing one.

        Args:
            db: Async database session.
            user_id: Profile owner.
            role: candidate or hr.
            **kwargs: Column values (see _UPDATABLE_FIELDS).

        Returns:
            The stored profile.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        _check_fields(kwargs)
        profile = await ProfileRepository.get_by_user(db, user_id)
        if profile is None:
            profile = Profile(user_id=user_id, role=role)
            db.add(profile)
        profile.role = role
        for field, value in kwargs.items():
            setattr(profile, field, value)
        await db.flush()
        await db.refresh(profile)
        return profile

    @staticmethod
    async def update(db: AsyncSession, profile: Profile, **kwargs: Any) -> Profile:
        """Update columns of a loaded profile.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        _check_fields(kwargs)
        for field, value in kwargs.items():
            setattr(profile, field, value)
        await db.flush()
        await db.refresh(profile)
        return profile

    @staticmethod
    async def list_feed(
        db: AsyncSession,
        *,
        viewer_id: uuid.UUID,
        role: str,
    ) -> Sequence[Profile]:
        """Published, completed profiles of ``role`` the viewer hasn't swiped.

        Oldest profiles first so the deck order is stable between fetches.

        Args:
            db: Async database session.
            viewer_id: User the feed is for (never included).
            role: Counterpart role to list.

        Returns:
            Matching profiles.
        """
        already_swiped = select(Swipe.target_id).where(Swipe.swiper_id == viewer_id)
        stmt = (
            select(Profile)
            .where(
                Profile.role == role,
                Profile.is_published.is_(True),
                Profile.completed_at.is_not(None),
                Profile.user_id != viewer_id,
                Profile.user_id.not_in(already_swiped),
            )
            .order_by(Profile.created_at, Profile.id)
        )
        result = await db.execute(stmt)
        return result.scalars().all()

    @staticmethod
    async def get_many_by_user(
        db: AsyncSession, user_ids: Sequence[uuid.UUID]
    ) -> dict[uuid.UUID, Profile]:
        """Profiles for several users keyed by user id (missing ones omitted)."""
        if not user_ids:
            return {}
        result = await db.execute(select(Profile).where(Profile.user_id.in_(user_ids)))
        return {profile.user_id: profile for profile in result.scalars().all()}
