"""Referral request model."""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from metanoia.models.base import Base, CreatedAtMixin

STATUS_PENDING = "pending"
REFERRAL_STATUSES = ("pending", "accepted", "declined")


class Referral(Base, CreatedAtMixin):
    """A candidate's request that a matched HR user refer them.

    Attributes:
        id: UUID primary key.
        from_user_id: Candidate asking for the referral.
        to_user_id: HR user being asked.
        match_id: Conversation the request was made from (NULL once deleted).
        job_id: Optional job opening identifier the request is about.
        company_id: Optional company identifier.
        email: Contact email the request was addressed to, if any.
        message: Optional note from the candidate.
        status: pending, accepted or declined.
        day_key: Calendar day (YYYY-MM-DD, referral timezone) the request
            counts against for the daily limit.
    """

    __tablename__ = "referrals"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'accepted', 'declined')",
            name="ck_referrals_status",
        ),
        Index("idx_referrals_from_day", "from_user_id", "day_key"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        primary_key=True,
        default=uuid.uuid4,
    )
    from_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    to_user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    match_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid(),
        ForeignKey("matches.id", ondelete="SET NULL"),
        nullable=True,
    )
    job_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    company_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    message: Mapped[str | None] = mapped_column(Text(), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=STATUS_PENDING
    )
    day_key: Mapped[str] = mapped_column(String(10), nullable=False)
