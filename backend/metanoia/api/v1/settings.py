"""Settings screen API router.

Endpoints:
- GET/PATCH /settings/preferences — notification and theme toggles
- GET       /settings/support     — support, privacy and terms links
- DELETE    /settings/account     — delete the account and everything it owns
"""

import structlog
from fastapi import APIRouter, Response, status
from pydantic import BaseModel, ConfigDict

from metanoia.api.deps import CurrentUserId, DbSession
from metanoia.core.auth import clear_auth_cookie
from metanoia.core.config import settings
from metanoia.core.errors import NotFoundError, ValidationError
from metanoia.core.responses import DataResponse
from metanoia.models.preferences import UserPreferences
from metanoia.repositories.preferences_repository import PreferencesRepository
from metanoia.repositories.user_repository import UserRepository

logger = structlog.get_logger()

router = APIRouter()


class UpdatePreferencesRequest(BaseModel):
    """Request body for PATCH /settings/preferences.

    All fields optional; only provided fields are updated.
    """

    model_config = ConfigDict(extra="forbid")

    notifications_enabled: bool | None = None
    dark_mode: bool | None = None


def _preferences_to_dict(prefs: UserPreferences) -> dict:
    return {
        "notifications_enabled": prefs.notifications_enabled,
        "dark_mode": prefs.dark_mode,
    }


# =============================================================================
# Preferences
# =============================================================================


@router.get("/preferences")
async def get_preferences(user_id: CurrentUserId, db: DbSession) -> DataResponse[dict]:
    """Current toggles (defaults are created on first read)."""
    prefs = await PreferencesRepository.get_or_create(db, user_id)
    await db.commit()
    return DataResponse(data=_preferences_to_dict(prefs))


@router.patch("/preferences")
async def update_preferences(
    request: UpdatePreferencesRequest,
    user_id: CurrentUserId,
    db: DbSession,
) -> DataResponse[dict]:
    """Flip one or both toggles."""
    changes = request.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("Send at least one preference to update")
    prefs = await PreferencesRepository.update(db, user_id, **changes)
    await db.commit()
    return DataResponse(data=_preferences_to_dict(prefs))


# =============================================================================
# Support
# =============================================================================


@router.get("/support")
async def get_support_links() -> DataResponse[dict]:
    """Links shown under Help & Legal."""
    return DataResponse(
        data={
            "support_email": settings.support_email,
            "support_url": f"mailto:{settings.support_email}",
            "privacy_policy_url": settings.privacy_policy_url,
            "terms_url": settings.terms_url,
        }
    )


# =============================================================================
# Account
# =============================================================================


@router.delete("/account", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    response: Response,
    user_id: CurrentUserId,
    db: DbSession,
) -> None:
    """Delete the account.

    The profile, onboarding session, preferences, swipes, matches, messages
    and referrals go with it through ON DELETE CASCADE.
    """
    if not await UserRepository.delete(db, user_id):
        raise NotFoundError("User")
    await db.commit()
    clear_auth_cookie(response)
    logger.info("account_deleted", user_id=str(user_id))
