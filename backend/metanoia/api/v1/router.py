"""API v1 router aggregator.

All v1 endpoint routers are included here; main.py mounts this under
/api/v1.
"""

from fastapi import APIRouter

from metanoia.api.v1 import (
    auth,
    discovery,
    matches,
    onboarding,
    profiles,
    referrals,
    settings,
)

router = APIRouter()

# =============================================================================
# Authentication
# =============================================================================

router.include_router(auth.router, prefix="/auth", tags=["auth"])

# =============================================================================
# Onboarding & Profiles
# =============================================================================

router.include_router(onboarding.router, prefix="/onboarding", tags=["onboarding"])
router.include_router(profiles.router, prefix="/profiles", tags=["profiles"])

# =============================================================================
# Discovery & Chat
# =============================================================================

router.include_router(discovery.router, prefix="/discovery", tags=["discovery"])
router.include_router(matches.router, prefix="/matches", tags=["matches"])
router.include_router(referrals.router, prefix="/referrals", tags=["referrals"])

# =============================================================================
# Settings
# =============================================================================

router.include_router(settings.router, prefix="/settings", tags=["settings"])
