"""Chat message model - conversation between two matched users."""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from metanoia.models.base import Base, CreatedAtMixin

KIND_TEXT = "text"
KIND_CALL_SCHEDULED = "call_scheduled"
KIND_EMAIL_SENT = "email_sent"
KIND_REFERRAL_REQUESTED = "referral_requested"
MESSAGE_KINDS = (
    KIND_TEXT,
    KIND_CALL_SCHEDULED,
    KIND_EMAIL_SENT,
    KIND_REFERRAL_REQUESTED,
)


class ChatMessage(Base, CreatedAtMixin):
    """One message in a match's conversation.

    Attributes:
        id: Autoincrement primary key; conversation order.
        match_id: Conversation the message belongs to.
        sender_id: Author of the message.
        kind: text for typed messages, otherwise the chat action that
            produced it.
        body: Message text as shown in the conversation.
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        CheckConstraint(
            "kind IN ('text', 'call_scheduled', 'email_sent', 'referral_requested')",
            name="ck_chat_messages_kind",
        ),
        Index("idx_chat_messages_match", "match_id", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    match_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("matches.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    kind: Mapped[str] = mapped_column(String(30), nullable=False, default=KIND_TEXT)
    body: Mapped[str] = mapped_column(Text(), nullable=False)
