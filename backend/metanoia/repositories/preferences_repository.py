"""Repository for user preferences."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.models.preferences import UserPreferences

_UPDATABLE_FIELDS: frozenset[str] = frozenset({"notifications_enabled", "dark_mode"})


class PreferencesRepository:
    """Stateless repository for UserPreferences rows."""

    @staticmethod
    async def get_or_create(db: AsyncSession, user_id: uuid.UUID) -> UserPreferences:
        """Return the user's preferences, creating defaults on first access."""
        prefs = await db.get(UserPreferences, user_id)
        if prefs is None:
            prefs = UserPreferences(
                user_id=user_id, notifications_enabled=True, dark_mode=False
            )
            db.add(prefs)
            await db.flush()
            await db.refresh(prefs)
        return prefs

    @staticmethod
    async def update(
        db: AsyncSession, user_id: uuid.UUID, **kwargs: bool
    ) -> UserPreferences:
        """Update preference toggles.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        unknown = set(kwargs) - _UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)

        prefs = await PreferencesRepository.get_or_create(db, user_id)
        for field, value in kwargs.items():
            setattr(prefs, field, value)
        await db.flush()
        await db.refresh(prefs)
        return prefs
