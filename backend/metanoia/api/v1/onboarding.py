"""Onboarding wizard API router.

Endpoints:
- POST   /onboarding                       — start the wizard for a role
- GET    /onboarding                       — current session
- DELETE /onboarding                       — abandon (answers are dropped)
- GET    /onboarding/steps?role=           — step catalogue
- PUT    /onboarding/steps/{step_key}      — submit a step
- POST   /onboarding/steps/{step_key}/skip — skip an optional step
- POST   /onboarding/back                  — previous step
- GET    /onboarding/summary               — preview rows
- POST   /onboarding/complete              — publish the profile
"""

from typing import Any, Literal

from fastapi import APIRouter, Body, Query, status
from pydantic import BaseModel, ConfigDict

from metanoia.api.deps import CurrentUser, DbSession
from metanoia.api.v1.profiles import profile_to_dict
from metanoia.core.errors import ValidationError
from metanoia.core.responses import DataResponse
from metanoia.models.user import ROLES
from metanoia.services import onboarding_service
from metanoia.services.onboarding_service import OnboardingState
from metanoia.services.onboarding_steps import get_steps

router = APIRouter()


# =============================================================================
# Request Schemas
# =============================================================================


class StartOnboardingRequest(BaseModel):
    """Request body for POST /onboarding."""

    model_config = ConfigDict(extra="forbid")

    role: Literal["candidate", "hr"]


def _state_to_dict(state: OnboardingState) -> dict:
    return {
        "role": state.role,
        "current_step": state.current_step,
        "total_steps": state.total_steps,
        "step_key": state.step_key,
        "step_title": state.step_title,
        "completed_steps": list(state.completed_steps),
        "progress": state.progress,
        "ready_to_complete": state.ready_to_complete,
        "answers": state.answers,
    }


# =============================================================================
# Session
# =============================================================================


@router.post("", status_code=status.HTTP_201_CREATED)
async def start_onboarding(
    request: StartOnboardingRequest,
    user: CurrentUser,
    db: DbSession,
) -> DataResponse[dict]:
    """Start (or restart) the wizard for the chosen role."""
    state = await onboarding_service.start_onboarding(db, user, request.role)
    await db.commit()
    return DataResponse(data=_state_to_dict(state))


@router.get("")
async def get_onboarding(user: CurrentUser, db: DbSession) -> DataResponse[dict]:
    """Current wizard state."""
    state = await onboarding_service.get_onboarding(db, user)
    return DataResponse(data=_state_to_dict(state))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_onboarding(user: CurrentUser, db: DbSession) -> None:
    """Exit the wizard without publishing; the answers are discarded."""
    await onboarding_service.abandon_onboarding(db, user)
    await db.commit()


# =============================================================================
# Steps
# =============================================================================


@router.get("/steps")
async def list_steps(
    role: str = Query(..., description="candidate or hr"),
) -> DataResponse[list[dict]]:
    """The ordered step catalogue for a role."""
    if role not in ROLES:
        raise ValidationError(
            "Unknown role", details=[{"field": "role", "msg": f"Unsupported: {role}"}]
        )
    return DataResponse(
        data=[
            {
                "index": index,
                "key": step.key,
                "title": step.title,
                "skippable": step.skippable,
            }
            for index, step in enumerate(get_steps(role))
        ]
    )


@router.put("/steps/{step_key}")
async def submit_step(
    step_key: str,
    user: CurrentUser,
    db: DbSession,
    payload: dict[str, Any] = Body(...),
) -> DataResponse[dict]:
    """Validate a step's answers and move the wizard forward.

    Field errors come back together as STEP_VALIDATION_FAILED with one
    detail per field.
    """
    state = await onboarding_service.submit_step(db, user, step_key, payload)
    await db.commit()
    return DataResponse(data=_state_to_dict(state))


@router.post("/steps/{step_key}/skip")
async def skip_step(
    step_key: str,
    user: CurrentUser,
    db: DbSession,
) -> DataResponse[dict]:
    """Skip an optional step."""
    state = await onboarding_service.skip_step(db, user, step_key)
    await db.commit()
    return DataResponse(data=_state_to_dict(state))


@router.post("/back")
async def go_back(user: CurrentUser, db: DbSession) -> DataResponse[dict]:
    """Move back one step; answers are kept."""
    state = await onboarding_service.go_back(db, user)
    await db.commit()
    return DataResponse(data=_state_to_dict(state))


# =============================================================================
# Preview & Publish
# =============================================================================


@router.get("/summary")
async def get_summary(user: CurrentUser, db: DbSession) -> DataResponse[list[dict]]:
    """Label/value rows for the preview screen."""
    rows = await onboarding_service.get_summary(db, user)
    return DataResponse(data=rows)


@router.post("/complete")
async def complete_onboarding(user: CurrentUser, db: DbSession) -> DataResponse[dict]:
    """Publish the profile and finish onboarding."""
    profile = await onboarding_service.complete_onboarding(db, user)
    await db.commit()
    return DataResponse(data=profile_to_dict(profile))
