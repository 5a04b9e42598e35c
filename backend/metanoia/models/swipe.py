"""Swipe and Match models.

A swipe is one like/pass decision by a viewer on a counterpart profile.
Two likes in opposite directions make a match; the pair is stored once
with the smaller user id in user_a_id so lookups are order-independent.
"""

import uuid

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from metanoia.models.base import Base, CreatedAtMixin

DIRECTION_LIKE = "like"
DIRECTION_PASS = "pass"


class Swipe(Base, CreatedAtMixin):
    """A single like/pass decision.

    Integer ids give a strict swipe order per viewer, which undo relies on.

    Attributes:
        id: Autoincrement primary key.
        swiper_id: User who swiped.
        target_id: User whose profile was swiped.
        direction: like or pass.
    """

    __tablename__ = "swipes"
    __table_args__ = (
        UniqueConstraint("swiper_id", "target_id", name="uq_swipes_pair"),
        CheckConstraint("direction IN ('like', 'pass')", name="ck_swipes_direction"),
        CheckConstraint("swiper_id != target_id", name="ck_swipes_not_self"),
        Index("idx_swipes_target", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    swiper_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    target_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    direction: Mapped[str] = mapped_column(String(10), nullable=False)


class Match(Base, CreatedAtMixin):
    """Mutual like between a candidate and an HR user.

    Attributes:
        id: UUID primary key.
        user_a_id: Lower of the two user ids.
        user_b_id: Higher of the two user ids.
        created_by_swipe_id: The like that completed the pair.
    """

    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("user_a_id", "user_b_id", name="uq_matches_pair"),
        CheckConstraint("user_a_id < user_b_id", name="ck_matches_ordered"),
        Index("idx_matches_user_b", "user_b_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_a_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_b_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_by_swipe_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("swipes.id", ondelete="SET NULL"),
        nullable=True,
    )

    @staticmethod
    def ordered_pair(
        first: uuid.UUID, second: uuid.UUID
    ) -> tuple[uuid.UUID, uuid.UUID]:
        """Return the two ids in storage order (smaller first)."""
        return (first, second) if str(first) < str(second) else (second, first)

    def other_user_id(self, user_id: uuid.UUID) -> uuid.UUID:
        """Id of the matched counterpart of ``user_id``."""
        return self.user_b_id if self.user_a_id == user_id else self.user_a_id
