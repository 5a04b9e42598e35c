"""Onboarding session model - the persisted answer bag of an in-progress wizard."""

import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metanoia.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from metanoia.models.user import User


class OnboardingSession(Base, TimestampMixin):
    """One wizard run per user.

    Attributes:
        user_id: Owning user (primary key, at most one session per user).
        role: Which wizard is running (candidate or hr).
        current_step: Index of the step the user is on (0-based).
        completed_steps: Keys of steps that were submitted or skipped.
        answers: Flat key-value answer bag accumulated across steps.
    """

    __tablename__ = "onboarding_sessions"
    __table_args__ = (
        CheckConstraint(
            "role IN ('candidate', 'hr')", name="ck_onboarding_sessions_role"
        ),
        CheckConstraint("current_step >= 0", name="ck_onboarding_sessions_step"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    current_step: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_steps: Mapped[list[str]] = mapped_column(
        JSON, nullable=False, default=list
    )
    answers: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )

    user: Mapped["User"] = relationship("User", back_populates="onboarding_session")
