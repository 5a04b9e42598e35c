"""Discovery: the swipe feed, swipe decisions, undo, and matches.

Candidates swipe on HR profiles and HR users swipe on candidates. A like
that the other side already gave back turns into a match, which opens the
chat. The last few swipes can be undone; how many is set by
``settings.swipe_undo_depth`` and tracked per user.
"""

import uuid
from dataclasses import dataclass
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.core.config import settings
from metanoia.core.errors import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from metanoia.models.profile import Profile
from metanoia.models.swipe import DIRECTION_LIKE
from metanoia.models.user import User, counterpart_role
from metanoia.repositories.chat_repository import ChatRepository
from metanoia.repositories.profile_repository import ProfileRepository
from metanoia.repositories.swipe_repository import MatchRepository, SwipeRepository
from metanoia.repositories.user_repository import UserRepository
from metanoia.services.profile_cards import (
    build_card,
    matches_company_type,
    normalize_company_filter,
)
from metanoia.services.swipe_deck import (
    NOTHING_TO_UNDO_MESSAGE,
    SWIPE_MESSAGES,
    UNDO_MESSAGE,
    classify_gesture,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class SwipeOutcome:
    """Result of one swipe."""

    swipe_id: int
    target_id: uuid.UUID
    direction: str
    matched: bool
    match_id: uuid.UUID | None
    message: str


@dataclass(frozen=True)
class UndoOutcome:
    """Result of undoing the latest swipe."""

    target_id: uuid.UUID
    direction: str
    match_removed: bool
    undo_remaining: int
    message: str


def profile_card(profile: Profile) -> dict[str, Any]:
    """Swipe card for a stored profile."""
    return build_card(
        user_id=str(profile.user_id),
        role=profile.role,
        answers=profile.data or {},
        columns={
            "display_name": profile.display_name,
            "headline": profile.headline,
            "company_type": profile.company_type,
            "photo_url": profile.photo_url,
            "location": profile.location,
        },
    )


def _require_onboarded(user: User) -> str:
    if not user.is_onboarded or user.role is None:
        raise InvalidStateError("Finish onboarding before using discovery")
    return user.role


async def get_feed(
    db: AsyncSession, viewer: User, company_type: str | None = None
) -> list[dict[str, Any]]:
    """Cards the viewer can still swipe on.

    Args:
        db: Async database session.
        viewer: Current user (must be onboarded).
        company_type: Optional filter (all, mnc, middle_enterprise, startup).

    Returns:
        Profile cards in deck order.

    Raises:
        InvalidStateError: If the viewer hasn't finished onboarding.
        ValidationError: If the filter value is unknown.
    """
    role = _require_onboarded(viewer)
    company_filter = normalize_company_filter(company_type)
    profiles = await ProfileRepository.list_feed(
        db, viewer_id=viewer.id, role=counterpart_role(role)
    )
    return [
        profile_card(profile)
        for profile in profiles
        if matches_company_type(profile.company_type, company_filter)
    ]


async def swipe(
    db: AsyncSession,
    viewer: User,
    target_id: uuid.UUID,
    *,
    direction: str | None = None,
    dx: float | None = None,
) -> SwipeOutcome:
    """Record a like or pass on a counterpart profile.

    Either an explicit direction or the horizontal drag distance of the
    gesture is accepted; a drag inside the threshold is a snap back and
    records nothing.

    Args:
        db: Async database session.
        viewer: Current user.
        target_id: User id of the profile being swiped.
        direction: "like" or "pass".
        dx: Horizontal drag distance in pixels.

    Returns:
        SwipeOutcome, with ``matched`` set when the like was reciprocated.

    Raises:
        ValidationError: Neither direction nor a decisive drag given.
        NotFoundError: Target is not a published counterpart profile.
        ConflictError: The viewer already swiped this profile.
    """
    role = _require_onboarded(viewer)
    if direction is None and dx is not None:
        direction = classify_gesture(dx, settings.swipe_threshold_px)
        if direction is None:
            threshold = settings.swipe_threshold_px
            raise ValidationError(
                "Drag did not pass the swipe threshold",
                details=[{"field": "dx", "msg": f"|dx| must exceed {threshold}"}],
            )
    if direction not in SWIPE_MESSAGES:
        raise ValidationError(
            "Swipe direction is required",
            details=[{"field": "direction", "msg": "Must be 'like' or 'pass'"}],
        )

    target = await ProfileRepository.get_by_user(db, target_id)
    if (
        target is None
        or target.user_id == viewer.id
        or target.role != counterpart_role(role)
        or not target.is_published
        or target.completed_at is None
    ):
        raise NotFoundError("Profile", str(target_id))

    if await SwipeRepository.get_pair(db, viewer.id, target_id) is not None:
        raise ConflictError("ALREADY_SWIPED", "You already swiped on this profile")

    record = await SwipeRepository.create(
        db, swiper_id=viewer.id, target_id=target_id, direction=direction
    )

    match_id = None
    if direction == DIRECTION_LIKE and await SwipeRepository.has_liked(
        db, target_id, viewer.id
    ):
        match = await MatchRepository.get_pair(db, viewer.id, target_id)
        if match is None:
            match = await MatchRepository.create(
                db, viewer.id, target_id, created_by_swipe_id=record.id
            )
            logger.info(
                "match_created",
                match_id=str(match.id),
                user_id=str(viewer.id),
                target_id=str(target_id),
            )
        match_id = match.id

    await UserRepository.update(
        db,
        viewer.id,
        swipe_undo_available=min(
            viewer.swipe_undo_available + 1, settings.swipe_undo_depth
        ),
    )
    logger.info(
        "swipe_recorded",
        user_id=str(viewer.id),
        target_id=str(target_id),
        direction=direction,
    )
    return SwipeOutcome(
        swipe_id=record.id,
        target_id=target_id,
        direction=direction,
        matched=match_id is not None,
        match_id=match_id,
        message=SWIPE_MESSAGES[direction],
    )


async def undo_last_swipe(db: AsyncSession, viewer: User) -> UndoOutcome:
    """Take back the viewer's most recent swipe.

    Undoing a like also dissolves the match it belonged to, unless the pair
    already started chatting; the conversation is kept in that case.

    Raises:
        ConflictError: NOTHING_TO_UNDO when the undo allowance is used up.
    """
    _require_onboarded(viewer)
    latest = await SwipeRepository.latest_for_user(db, viewer.id, limit=1)
    if viewer.swipe_undo_available <= 0 or not latest:
        raise ConflictError("NOTHING_TO_UNDO", NOTHING_TO_UNDO_MESSAGE)
    record = latest[0]

    match_removed = False
    if record.direction == DIRECTION_LIKE:
        match = await MatchRepository.get_pair(db, viewer.id, record.target_id)
        if match is not None and await ChatRepository.count_for_match(db, match.id) == 0:
            await MatchRepository.delete(db, match.id)
            match_removed = True

    target_id, direction = record.target_id, record.direction
    await SwipeRepository.delete(db, record.id)
    remaining = viewer.swipe_undo_available - 1
    await UserRepository.update(db, viewer.id, swipe_undo_available=remaining)
    logger.info(
        "swipe_undone",
        user_id=str(viewer.id),
        target_id=str(target_id),
        match_removed=match_removed,
    )
    return UndoOutcome(
        target_id=target_id,
        direction=direction,
        match_removed=match_removed,
        undo_remaining=remaining,
        message=UNDO_MESSAGE,
    )


async def restart_deck(db: AsyncSession, viewer: User) -> int:
    """Put every passed profile back into the feed.

    Likes are kept so existing matches survive. The undo allowance resets.

    Returns:
        Number of passes forgotten.
    """
    _require_onboarded(viewer)
    removed = await SwipeRepository.delete_passes(db, viewer.id)
    await UserRepository.update(db, viewer.id, swipe_undo_available=0)
    logger.info("deck_restarted", user_id=str(viewer.id), passes_removed=removed)
    return removed


async def list_matches(db: AsyncSession, viewer: User) -> list[dict[str, Any]]:
    """The viewer's matches, newest first, each with the counterpart card."""
    matches = await MatchRepository.list_for_user(db, viewer.id)
    others = [match.other_user_id(viewer.id) for match in matches]
    profiles = await ProfileRepository.get_many_by_user(db, others)
    items = []
    for match, other_id in zip(matches, others, strict=True):
        profile = profiles.get(other_id)
        items.append(
            {
                "id": str(match.id),
                "user_id": str(other_id),
                "matched_at": match.created_at.isoformat(),
                "profile": profile_card(profile) if profile else None,
            }
        )
    return items
