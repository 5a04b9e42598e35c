"""Conversations between matched users.

Besides plain messages, the chat screen has three quick actions that each
post a system-style message into the conversation: scheduling a call,
sending a CV by email, and (candidates only) requesting a referral. The
referral action is rate limited per calendar day.
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote
from zoneinfo import ZoneInfo

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.core.config import settings
from metanoia.core.errors import (
    ForbiddenError,
    NotFoundError,
    ReferralLimitError,
    ValidationError,
)
from metanoia.core.validators import is_email
from metanoia.models.chat import (
    KIND_CALL_SCHEDULED,
    KIND_EMAIL_SENT,
    KIND_REFERRAL_REQUESTED,
    KIND_TEXT,
    ChatMessage,
)
from metanoia.models.referral import Referral
from metanoia.models.swipe import Match
from metanoia.models.user import ROLE_CANDIDATE, User
from metanoia.repositories.chat_repository import ChatRepository
from metanoia.repositories.referral_repository import ReferralRepository
from metanoia.repositories.swipe_repository import MatchRepository
from metanoia.services.linkify import parse_message_content

logger = structlog.get_logger()

MAX_MESSAGE_LENGTH = 2000

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


@dataclass(frozen=True)
class EmailDraft:
    """A composed email plus the chat message that records it."""

    mailto_url: str
    message: ChatMessage


@dataclass(frozen=True)
class ReferralStatus:
    """Where the user stands against today's referral allowance."""

    day: str
    limit: int
    used: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)

    @property
    def can_request(self) -> bool:
        return self.remaining > 0


# =============================================================================
# Helpers
# =============================================================================


def build_mailto(to: str, subject: str, body: str) -> str:
    """mailto: URL with URL-encoded subject and body."""
    return (
        f"mailto:{to}"
        f"?subject={quote(subject, safe=_URI_COMPONENT_SAFE)}"
        f"&body={quote(body, safe=_URI_COMPONENT_SAFE)}"
    )


def referral_day(now: datetime | None = None, tz_name: str | None = None) -> str:
    """Calendar day (YYYY-MM-DD) that a referral made at ``now`` counts against."""
    moment = now or datetime.now(UTC)
    zone = ZoneInfo(tz_name or settings.referral_timezone)
    return moment.astimezone(zone).strftime("%Y-%m-%d")


def message_to_dict(message: ChatMessage, viewer_id: uuid.UUID) -> dict[str, Any]:
    """Serialize a message for ``viewer_id``, with linkified segments."""
    return {
        "id": message.id,
        "sender_id": str(message.sender_id),
        "from_me": message.sender_id == viewer_id,
        "kind": message.kind,
        "text": message.body,
        "timestamp": message.created_at.isoformat(),
        "segments": parse_message_content(message.body),
    }


async def get_match_for_user(
    db: AsyncSession, match_id: uuid.UUID, user: User
) -> Match:
    """Fetch a match the user belongs to.

    Raises:
        NotFoundError: Match missing or the user is not part of it.
    """
    match = await MatchRepository.get_for_user(db, match_id, user.id)
    if match is None:
        raise NotFoundError("Match", str(match_id))
    return match


async def _post(
    db: AsyncSession, match: Match, user: User, body: str, kind: str
) -> ChatMessage:
    message = await ChatRepository.create(
        db, match_id=match.id, sender_id=user.id, body=body, kind=kind
    )
    logger.info(
        "chat_message_sent",
        match_id=str(match.id),
        user_id=str(user.id),
        kind=kind,
    )
    return message


# =============================================================================
# Messages
# =============================================================================


async def send_message(
    db: AsyncSession, user: User, match_id: uuid.UUID, text: str
) -> ChatMessage:
    """Post a plain text message.

    Raises:
        NotFoundError: Match not visible to the user.
        ValidationError: Text is empty after trimming or too long.
    """
    match = await get_match_for_user(db, match_id, user)
    body = (text or "").strip()
    if not body:
        raise ValidationError(
            "Message can't be empty",
            details=[{"field": "text", "msg": "Type a message first"}],
        )
    if len(body) > MAX_MESSAGE_LENGTH:
        raise ValidationError(
            "Message is too long",
            details=[
                {"field": "text", "msg": f"Max {MAX_MESSAGE_LENGTH} characters"}
            ],
        )
    return await _post(db, match, user, body, KIND_TEXT)


async def list_messages(
    db: AsyncSession,
    user: User,
    match_id: uuid.UUID,
    *,
    offset: int = 0,
    limit: int = 50,
) -> tuple[list[dict[str, Any]], int]:
    """A page of the conversation, oldest first, plus the total count."""
    match = await get_match_for_user(db, match_id, user)
    messages, total = await ChatRepository.list_for_match(
        db, match.id, offset=offset, limit=limit
    )
    return [message_to_dict(message, user.id) for message in messages], total


async def delete_conversation(
    db: AsyncSession, user: User, match_id: uuid.UUID
) -> int:
    """Delete every message of the conversation for both users.

    The match itself stays, so the pair can keep chatting.

    Returns:
        Number of messages removed.
    """
    match = await get_match_for_user(db, match_id, user)
    removed = await ChatRepository.delete_for_match(db, match.id)
    logger.info(
        "chat_conversation_deleted",
        match_id=str(match.id),
        user_id=str(user.id),
        removed=removed,
    )
    return removed


# =============================================================================
# Quick Actions
# =============================================================================


async def schedule_call(
    db: AsyncSession, user: User, match_id: uuid.UUID, slot: str
) -> ChatMessage:
    """Post the chosen call slot into the conversation.

    Raises:
        ValidationError: Slot is not one of the offered slots.
    """
    match = await get_match_for_user(db, match_id, user)
    if slot not in settings.call_slots:
        raise ValidationError(
            "Pick one of the offered time slots",
            details=[{"field": "slot", "msg": f"Unsupported slot: {slot}"}],
        )
    return await _post(
        db, match, user, f"Scheduled a call for: {slot}", KIND_CALL_SCHEDULED
    )


async def compose_email(
    db: AsyncSession,
    user: User,
    match_id: uuid.UUID,
    *,
    to: str,
    subject: str = "",
    body: str = "",
) -> EmailDraft:
    """Build a mailto: link for sending a CV and note it in the chat.

    Raises:
        ValidationError: Recipient is not a valid email address.
    """
    match = await get_match_for_user(db, match_id, user)
    recipient = (to or "").strip()
    if not is_email(recipient):
        raise ValidationError(
            "Enter a valid email address",
            details=[{"field": "to", "msg": "Enter a valid email address"}],
        )
    message = await _post(
        db, match, user, f"Sent CV to {recipient}.", KIND_EMAIL_SENT
    )
    return EmailDraft(
        mailto_url=build_mailto(recipient, subject, body), message=message
    )


async def referral_status(
    db: AsyncSession, user: User, now: datetime | None = None
) -> ReferralStatus:
    """How many referral requests the user has left today."""
    day = referral_day(now)
    used = await ReferralRepository.count_for_day(db, user.id, day)
    return ReferralStatus(day=day, limit=settings.referral_daily_limit, used=used)


async def request_referral(
    db: AsyncSession,
    user: User,
    match_id: uuid.UUID,
    *,
    email: str | None = None,
    message: str | None = None,
    job_id: str | None = None,
    company_id: str | None = None,
    now: datetime | None = None,
) -> tuple[Referral, ChatMessage]:
    """Ask the matched HR user for a referral.

    Args:
        db: Async database session.
        user: Requesting candidate.
        match_id: Conversation the request is made in.
        email: Address the referral should go to (defaults to the HR user).
        message: Optional note for the HR user.
        job_id: Optional job opening reference.
        company_id: Optional company reference.
        now: Clock override for the daily allowance.

    Returns:
        Tuple of (stored referral, chat message announcing it).

    Raises:
        ForbiddenError: The user is not a candidate.
        ValidationError: Email given but invalid.
        ReferralLimitError: Today's allowance is used up.
    """
    if user.role != ROLE_CANDIDATE:
        raise ForbiddenError("Only candidates can request referrals")
    match = await get_match_for_user(db, match_id, user)

    email = (email or "").strip() or None
    note = (message or "").strip() or None
    if email is not None and not is_email(email):
        raise ValidationError(
            "Enter a valid email address",
            details=[{"field": "email", "msg": "Enter a valid email address"}],
        )

    status = await referral_status(db, user, now)
    if not status.can_request:
        logger.info("referral_limit_reached", user_id=str(user.id), day=status.day)
        raise ReferralLimitError(status.limit, status.day)

    referral = await ReferralRepository.create(
        db,
        from_user_id=user.id,
        to_user_id=match.other_user_id(user.id),
        day_key=status.day,
        match_id=match.id,
        job_id=job_id,
        company_id=company_id,
        email=email,
        message=note,
    )
    text = f"Requested a referral from your end for: {email or 'HR'}"
    if note:
        text += f"\nMsg: {note}"
    chat_message = await _post(db, match, user, text, KIND_REFERRAL_REQUESTED)
    logger.info("referral_requested", user_id=str(user.id), referral_id=str(referral.id))
    return referral, chat_message
