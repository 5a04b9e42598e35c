"""User model - authentication foundation.

A user picks a role (candidate or hr) when starting onboarding; the role
is fixed once onboarding completes and drives which profiles they see.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metanoia.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from metanoia.models.onboarding import OnboardingSession
    from metanoia.models.preferences import UserPreferences
    from metanoia.models.profile import Profile

_CASCADE_ALL_DELETE_ORPHAN = "all, delete-orphan"

ROLE_CANDIDATE = "candidate"
ROLE_HR = "hr"
ROLES = (ROLE_CANDIDATE, ROLE_HR)


def counterpart_role(role: str) -> str:
    """Role whose profiles a user of ``role`` swipes on."""
    return ROLE_HR if role == ROLE_CANDIDATE else ROLE_CANDIDATE


class User(Base, TimestampMixin):
    """User account for authentication.

    Attributes:
        id: UUID primary key.
        email: Unique email address (stored lowercase).
        password_hash: bcrypt hash.
        role: candidate or hr. NULL until onboarding starts.
        onboarded_at: When onboarding was completed. NULL = not onboarded.
        token_invalidated_before: JWTs issued before this are rejected.
        swipe_undo_available: How many of the latest swipes may still be undone.
        created_at: Account creation timestamp (from TimestampMixin).
        updated_at: Last modification timestamp (from TimestampMixin).
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IS NULL OR role IN ('candidate', 'hr')",
            name="ck_users_role",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )
    role: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
    )
    onboarded_at: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )
    token_invalidated_before: Mapped[datetime | None] = mapped_column(
        nullable=True,
    )
    swipe_undo_available: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    # Relationships
    profile: Mapped["Profile | None"] = relationship(
        "Profile",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
        passive_deletes=True,
        uselist=False,
    )
    onboarding_session: Mapped["OnboardingSession | None"] = relationship(
        "OnboardingSession",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
        passive_deletes=True,
        uselist=False,
    )
    preferences: Mapped["UserPreferences | None"] = relationship(
        "UserPreferences",
        back_populates="user",
        cascade=_CASCADE_ALL_DELETE_ORPHAN,
        passive_deletes=True,
        uselist=False,
    )

    @property
    def is_onboarded(self) -> bool:
        return self.onboarded_at is not None
