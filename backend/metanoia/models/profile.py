"""Profile model - the published result of onboarding.

The full answer document lives in ``data``; the columns next to it are
denormalized copies of the fields the discovery feed filters and renders
on, so the feed never has to parse JSON.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metanoia.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from metanoia.models.user import User


class Profile(Base, TimestampMixin):
    """Candidate or HR profile, one per user.

    Attributes:
        id: UUID primary key.
        user_id: Owning user (unique).
        role: candidate or hr, copied from the user at publish time.
        company_type: mnc, middle_enterprise, startup or open_to_all.
        location: Free-text location (candidate city or HR office address).
        display_name: Person's full name.
        headline: Short card subtitle (designation @ company, or first role).
        photo_url: Card image (candidate photo or HR brand image).
        is_published: Whether the profile appears in other users' feeds.
        data: Complete onboarding answer document.
        completed_at: When onboarding produced this profile.
    """

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("role IN ('candidate', 'hr')", name="ck_profiles_role"),
        Index("idx_profiles_feed", "role", "is_published"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    company_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    headline: Mapped[str | None] = mapped_column(String(255), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text(), nullable=True)
    is_published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )
    data: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="profile")
