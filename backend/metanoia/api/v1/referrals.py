"""Referrals API router.

Endpoints:
- GET /referrals/status — today's allowance
- GET /referrals        — the user's own requests, newest first
"""

from fastapi import APIRouter, Depends

from metanoia.api.deps import CurrentUser, DbSession
from metanoia.api.v1.matches import referral_to_dict
from metanoia.core.pagination import PaginationParams, pagination_params
from metanoia.core.responses import DataResponse, ListResponse, PaginationMeta
from metanoia.repositories.referral_repository import ReferralRepository
from metanoia.services import chat_service

router = APIRouter()


@router.get("/status")
async def referral_status(user: CurrentUser, db: DbSession) -> DataResponse[dict]:
    """Whether the user can still request a referral today."""
    status = await chat_service.referral_status(db, user)
    return DataResponse(
        data={
            "day": status.day,
            "limit": status.limit,
            "used": status.used,
            "remaining": status.remaining,
            "can_request": status.can_request,
        }
    )


@router.get("")
async def list_referrals(
    user: CurrentUser,
    db: DbSession,
    pagination: PaginationParams = Depends(pagination_params),
) -> ListResponse[dict]:
    """Referral requests the user has sent."""
    referrals, total = await ReferralRepository.list_from_user(
        db, user.id, offset=pagination.offset, limit=pagination.limit
    )
    return ListResponse(
        data=[referral_to_dict(referral) for referral in referrals],
        meta=PaginationMeta(
            total=total, page=pagination.page, per_page=pagination.per_page
        ),
    )
