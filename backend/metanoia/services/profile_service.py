"""Profile documents after onboarding.

Owners can read and partially edit their document and toggle whether it
shows up in other users' feeds. Other users can read a profile when it is
a published counterpart profile or when the two of them matched.
"""

import uuid
from collections.abc import Mapping
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.core.errors import NotFoundError, StepValidationError, ValidationError
from metanoia.models.profile import Profile
from metanoia.models.user import User, counterpart_role
from metanoia.repositories.profile_repository import ProfileRepository
from metanoia.repositories.swipe_repository import MatchRepository
from metanoia.services.onboarding_service import build_profile_document
from metanoia.services.onboarding_steps import get_steps
from metanoia.services.profile_cards import profile_columns

logger = structlog.get_logger()

# Keys owned by the server; owners can't overwrite them with an edit
_READ_ONLY_KEYS = frozenset({"role", "completed", "onboardingCompletedAt"})


def apply_edit(
    role: str, stored: Mapping[str, Any], changes: Mapping[str, Any]
) -> dict[str, Any]:
    """Merge an edit into stored answers, re-running the wizard rules.

    Every step that owns a changed key is validated again on the stored
    answers with the changes laid over them, so an edit can never store a
    value onboarding would have refused. A None value clears the key.

    Args:
        role: Profile role, selects the wizard.
        stored: Current profile document.
        changes: Partial answer document.

    Returns:
        The merged, normalized answers (without server-owned keys).

    Raises:
        ValidationError: Read-only or unknown key, or a step rule failed.
            Details list every failing field across all touched steps.
    """
    details: list[dict[str, str]] = []
    for key in changes:
        if key in _READ_ONLY_KEYS:
            details.append({"field": key, "msg": "Field can't be edited"})
        elif not any(key in step.fields for step in get_steps(role)):
            details.append({"field": key, "msg": "Unknown field"})

    answers = {key: value for key, value in stored.items() if key not in _READ_ONLY_KEYS}
    for step in get_steps(role):
        touched = step.fields & set(changes)
        if not touched:
            continue
        payload = step.payload_from(stored)
        for key in touched:
            if changes[key] is None:
                payload.pop(key, None)
            else:
                payload[key] = changes[key]
        try:
            values = step.validate(payload)
        except StepValidationError as exc:
            details.extend(exc.details or [])
            continue
        for key, value in values.items():
            if value is None:
                answers.pop(key, None)
            else:
                answers[key] = value

    if details:
        raise ValidationError("Profile update has invalid fields", details=details)
    return answers


async def get_own_profile(db: AsyncSession, user: User) -> Profile:
    """The current user's profile.

    Raises:
        NotFoundError: If onboarding was never completed.
    """
    profile = await ProfileRepository.get_by_user(db, user.id)
    if profile is None:
        raise NotFoundError("Profile")
    return profile


async def update_own_profile(
    db: AsyncSession, user: User, changes: Mapping[str, Any]
) -> Profile:
    """Merge ``changes`` into the profile document.

    A None value removes the key. Changed fields go through the same step
    rules as onboarding and the denormalized columns are recomputed.

    Args:
        db: Async database session.
        user: Profile owner.
        changes: Partial answer document.

    Returns:
        The updated profile.

    Raises:
        NotFoundError: If the user has no profile.
        ValidationError: If a field can't be edited or fails its rule.
    """
    profile = await get_own_profile(db, user)
    answers = apply_edit(profile.role, profile.data or {}, changes)

    if profile.completed_at is not None:
        document = build_profile_document(profile.role, answers, profile.completed_at)
    else:
        document = answers
    profile = await ProfileRepository.update(
        db,
        profile,
        data=document,
        **profile_columns(profile.role, document),
    )
    logger.info(
        "profile_updated",
        user_id=str(user.id),
        fields=sorted(changes),
    )
    return profile


async def set_published(db: AsyncSession, user: User, published: bool) -> Profile:
    """Show or hide the user's profile in other users' feeds."""
    profile = await get_own_profile(db, user)
    profile = await ProfileRepository.update(db, profile, is_published=published)
    logger.info("profile_visibility_changed", user_id=str(user.id), published=published)
    return profile


async def get_visible_profile(
    db: AsyncSession, viewer: User, user_id: uuid.UUID
) -> Profile:
    """Another user's profile, if the viewer may see it.

    Visible when the two users matched, or when it is a published,
    completed profile of the viewer's counterpart role. Anything else is
    reported as not found.

    Raises:
        NotFoundError: Profile missing or not visible to the viewer.
    """
    if user_id == viewer.id:
        return await get_own_profile(db, viewer)

    profile = await ProfileRepository.get_by_user(db, user_id)
    if profile is None:
        raise NotFoundError("Profile", str(user_id))
    if await MatchRepository.get_pair(db, viewer.id, user_id) is not None:
        return profile
    if (
        viewer.role is not None
        and profile.role == counterpart_role(viewer.role)
        and profile.is_published
        and profile.completed_at is not None
    ):
        return profile
    raise NotFoundError("Profile", str(user_id))
