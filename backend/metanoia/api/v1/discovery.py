"""Discovery API router.

Endpoints:
- GET  /discovery/feed?company_type= — cards still to swipe
- POST /discovery/swipes             — like or pass
- POST /discovery/swipes/undo        — take back the latest swipe
- POST /discovery/restart            — bring passed profiles back
"""

import uuid
from typing import Literal

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, ConfigDict, Field

from metanoia.api.deps import CurrentUser, DbSession
from metanoia.core.responses import DataResponse, ListResponse, PaginationMeta
from metanoia.services import discovery_service

router = APIRouter()


class SwipeRequest(BaseModel):
    """Request body for POST /discovery/swipes.

    Send either ``direction`` or the gesture's horizontal drag ``dx``.
    """

    model_config = ConfigDict(extra="forbid")

    target_user_id: uuid.UUID
    direction: Literal["like", "pass"] | None = None
    dx: float | None = Field(default=None, ge=-10_000, le=10_000)


@router.get("/feed")
async def get_feed(
    user: CurrentUser,
    db: DbSession,
    company_type: str | None = Query(
        default=None, description="all, mnc, middle_enterprise or startup"
    ),
) -> ListResponse[dict]:
    """Profile cards of the counterpart role the user hasn't swiped yet."""
    cards = await discovery_service.get_feed(db, user, company_type)
    return ListResponse(
        data=cards,
        meta=PaginationMeta(total=len(cards), page=1, per_page=len(cards) or 20),
    )


@router.post("/swipes", status_code=status.HTTP_201_CREATED)
async def swipe(
    request: SwipeRequest,
    user: CurrentUser,
    db: DbSession,
) -> DataResponse[dict]:
    """Record a swipe; reports whether it produced a match."""
    outcome = await discovery_service.swipe(
        db,
        user,
        request.target_user_id,
        direction=request.direction,
        dx=request.dx,
    )
    await db.commit()
    return DataResponse(
        data={
            "swipe_id": outcome.swipe_id,
            "target_user_id": str(outcome.target_id),
            "direction": outcome.direction,
            "matched": outcome.matched,
            "match_id": str(outcome.match_id) if outcome.match_id else None,
            "message": outcome.message,
        }
    )


@router.post("/swipes/undo")
async def undo_swipe(user: CurrentUser, db: DbSession) -> DataResponse[dict]:
    """Undo the latest swipe (409 NOTHING_TO_UNDO when there is none)."""
    outcome = await discovery_service.undo_last_swipe(db, user)
    await db.commit()
    return DataResponse(
        data={
            "target_user_id": str(outcome.target_id),
            "direction": outcome.direction,
            "match_removed": outcome.match_removed,
            "undo_remaining": outcome.undo_remaining,
            "message": outcome.message,
        }
    )


@router.post("/restart")
async def restart_deck(user: CurrentUser, db: DbSession) -> DataResponse[dict]:
    """Start the deck over: passed profiles come back, likes stay."""
    removed = await discovery_service.restart_deck(db, user)
    await db.commit()
    return DataResponse(data={"passes_cleared": removed})
