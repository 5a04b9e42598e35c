"""User preferences shown on the settings screen."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Uuid, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

from metanoia.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from metanoia.models.user import User


class UserPreferences(Base, TimestampMixin):
    """Per-user app preferences.

    Attributes:
        user_id: Owning user (primary key).
        notifications_enabled: Push notifications opt-in. Defaults to True.
        dark_mode: Dark theme. Defaults to False.
    """

    __tablename__ = "user_preferences"

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    notifications_enabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )
    dark_mode: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="preferences")
