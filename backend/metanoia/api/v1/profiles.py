"""Profiles API router.

Endpoints:
- GET   /profiles/me            — own profile
- PATCH /profiles/me            — partial edit of the answer document
- POST  /profiles/me/publish    — show in feeds
- POST  /profiles/me/unpublish  — hide from feeds
- GET   /profiles/{user_id}     — a counterpart's or match's profile
"""

import uuid
from typing import Any

from fastapi import APIRouter, Body

from metanoia.api.deps import CurrentUser, DbSession
from metanoia.core.errors import ValidationError
from metanoia.core.responses import DataResponse
from metanoia.models.profile import Profile
from metanoia.services import profile_service
from metanoia.services.discovery_service import profile_card

router = APIRouter()

_MAX_PATCH_KEYS = 100


def profile_to_dict(profile: Profile) -> dict:
    """Convert Profile model to API response dict."""
    return {
        "id": str(profile.id),
        "user_id": str(profile.user_id),
        "role": profile.role,
        "company_type": profile.company_type,
        "location": profile.location,
        "display_name": profile.display_name,
        "headline": profile.headline,
        "photo_url": profile.photo_url,
        "is_published": profile.is_published,
        "completed_at": profile.completed_at.isoformat() if profile.completed_at else None,
        "data": profile.data,
        "card": profile_card(profile),
        "created_at": profile.created_at.isoformat(),
        "updated_at": profile.updated_at.isoformat(),
    }


# =============================================================================
# Own Profile
# =============================================================================


@router.get("/me")
async def get_my_profile(user: CurrentUser, db: DbSession) -> DataResponse[dict]:
    """The signed-in user's profile."""
    profile = await profile_service.get_own_profile(db, user)
    return DataResponse(data=profile_to_dict(profile))


@router.patch("/me")
async def update_my_profile(
    user: CurrentUser,
    db: DbSession,
    changes: dict[str, Any] = Body(...),
) -> DataResponse[dict]:
    """Merge changes into the profile document (null removes a key)."""
    if not changes or len(changes) > _MAX_PATCH_KEYS:
        raise ValidationError(
            f"Send between 1 and {_MAX_PATCH_KEYS} fields to update"
        )
    profile = await profile_service.update_own_profile(db, user, changes)
    await db.commit()
    return DataResponse(data=profile_to_dict(profile))


@router.post("/me/publish")
async def publish_my_profile(user: CurrentUser, db: DbSession) -> DataResponse[dict]:
    """Show the profile in other users' feeds."""
    profile = await profile_service.set_published(db, user, True)
    await db.commit()
    return DataResponse(data=profile_to_dict(profile))


@router.post("/me/unpublish")
async def unpublish_my_profile(user: CurrentUser, db: DbSession) -> DataResponse[dict]:
    """Hide the profile from other users' feeds."""
    profile = await profile_service.set_published(db, user, False)
    await db.commit()
    return DataResponse(data=profile_to_dict(profile))


# =============================================================================
# Other Users
# =============================================================================


@router.get("/{user_id}")
async def get_profile(
    user_id: uuid.UUID,
    user: CurrentUser,
    db: DbSession,
) -> DataResponse[dict]:
    """Another user's profile card.

    Only the card is returned for other users; the raw answer document
    stays private to its owner.
    """
    profile = await profile_service.get_visible_profile(db, user, user_id)
    if profile.user_id == user.id:
        return DataResponse(data=profile_to_dict(profile))
    return DataResponse(data=profile_card(profile))
