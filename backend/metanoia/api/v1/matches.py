"""Matches and chat API router.

Endpoints:
- GET    /matches                                — matches with counterpart cards
- GET    /matches/{match_id}/messages            — conversation (paginated)
- POST   /matches/{match_id}/messages            — send a message
- DELETE /matches/{match_id}/messages            — clear the conversation
- POST   /matches/{match_id}/actions/schedule-call
- POST   /matches/{match_id}/actions/email
- POST   /matches/{match_id}/actions/referral    — candidates only, daily limit
"""

import uuid

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field

from metanoia.api.deps import CurrentUser, DbSession
from metanoia.core.config import settings
from metanoia.core.pagination import PaginationParams, pagination_params
from metanoia.core.rate_limiting import limiter
from metanoia.core.responses import DataResponse, ListResponse, PaginationMeta
from metanoia.models.referral import Referral
from metanoia.services import chat_service, discovery_service

router = APIRouter()


# =============================================================================
# Request Schemas
# =============================================================================


class SendMessageRequest(BaseModel):
    """Request body for POST /matches/{match_id}/messages."""

    model_config = ConfigDict(extra="forbid")

    text: str = Field(max_length=chat_service.MAX_MESSAGE_LENGTH * 2)


class ScheduleCallRequest(BaseModel):
    """Request body for POST /matches/{match_id}/actions/schedule-call."""

    model_config = ConfigDict(extra="forbid")

    slot: str = Field(min_length=1, max_length=100)


class EmailRequest(BaseModel):
    """Request body for POST /matches/{match_id}/actions/email."""

    model_config = ConfigDict(extra="forbid")

    to: str = Field(min_length=1, max_length=255)
    subject: str = Field(default="", max_length=255)
    body: str = Field(default="", max_length=5000)


class ReferralRequest(BaseModel):
    """Request body for POST /matches/{match_id}/actions/referral."""

    model_config = ConfigDict(extra="forbid")

    email: str | None = Field(default=None, max_length=255)
    message: str | None = Field(default=None, max_length=1000)
    job_id: str | None = Field(default=None, max_length=100)
    company_id: str | None = Field(default=None, max_length=100)


def referral_to_dict(referral: Referral) -> dict:
    """Convert Referral model to API response dict."""
    return {
        "id": str(referral.id),
        "from_user_id": str(referral.from_user_id),
        "to_user_id": str(referral.to_user_id),
        "match_id": str(referral.match_id) if referral.match_id else None,
        "job_id": referral.job_id,
        "company_id": referral.company_id,
        "email": referral.email,
        "message": referral.message,
        "status": referral.status,
        "day": referral.day_key,
        "created_at": referral.created_at.isoformat(),
    }


# =============================================================================
# Matches
# =============================================================================


@router.get("")
async def list_matches(user: CurrentUser, db: DbSession) -> ListResponse[dict]:
    """Matches, newest first."""
    matches = await discovery_service.list_matches(db, user)
    return ListResponse(
        data=matches,
        meta=PaginationMeta(total=len(matches), page=1, per_page=len(matches) or 20),
    )


# =============================================================================
# Messages
# =============================================================================


@router.get("/{match_id}/messages")
async def list_messages(
    match_id: uuid.UUID,
    user: CurrentUser,
    db: DbSession,
    pagination: PaginationParams = Depends(pagination_params),
) -> ListResponse[dict]:
    """A page of the conversation, oldest first, with linkified segments."""
    messages, total = await chat_service.list_messages(
        db, user, match_id, offset=pagination.offset, limit=pagination.limit
    )
    return ListResponse(
        data=messages,
        meta=PaginationMeta(
            total=total, page=pagination.page, per_page=pagination.per_page
        ),
    )


@router.post("/{match_id}/messages", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.rate_limit_chat)
async def send_message(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    match_id: uuid.UUID,
    body: SendMessageRequest,
    user: CurrentUser,
    db: DbSession,
) -> DataResponse[dict]:
    """Send a text message."""
    message = await chat_service.send_message(db, user, match_id, body.text)
    await db.commit()
    return DataResponse(data=chat_service.message_to_dict(message, user.id))


@router.delete("/{match_id}/messages")
async def delete_conversation(
    match_id: uuid.UUID,
    user: CurrentUser,
    db: DbSession,
) -> DataResponse[dict]:
    """Delete the whole conversation for both users."""
    removed = await chat_service.delete_conversation(db, user, match_id)
    await db.commit()
    return DataResponse(data={"deleted": removed})


# =============================================================================
# Quick Actions
# =============================================================================


@router.post("/{match_id}/actions/schedule-call", status_code=status.HTTP_201_CREATED)
async def schedule_call(
    match_id: uuid.UUID,
    body: ScheduleCallRequest,
    user: CurrentUser,
    db: DbSession,
) -> DataResponse[dict]:
    """Post a call slot into the chat. Slots come from settings.call_slots."""
    message = await chat_service.schedule_call(db, user, match_id, body.slot)
    await db.commit()
    return DataResponse(data=chat_service.message_to_dict(message, user.id))


@router.post("/{match_id}/actions/email", status_code=status.HTTP_201_CREATED)
async def compose_email(
    match_id: uuid.UUID,
    body: EmailRequest,
    user: CurrentUser,
    db: DbSession,
) -> DataResponse[dict]:
    """Build the mailto: link for sending a CV and note it in the chat."""
    draft = await chat_service.compose_email(
        db, user, match_id, to=body.to, subject=body.subject, body=body.body
    )
    await db.commit()
    return DataResponse(
        data={
            "mailto_url": draft.mailto_url,
            "message": chat_service.message_to_dict(draft.message, user.id),
        }
    )


@router.post("/{match_id}/actions/referral", status_code=status.HTTP_201_CREATED)
async def request_referral(
    match_id: uuid.UUID,
    body: ReferralRequest,
    user: CurrentUser,
    db: DbSession,
) -> DataResponse[dict]:
    """Ask the matched HR user for a referral (once per day)."""
    referral, message = await chat_service.request_referral(
        db,
        user,
        match_id,
        email=body.email,
        message=body.message,
        job_id=body.job_id,
        company_id=body.company_id,
    )
    await db.commit()
    return DataResponse(
        data={
            "referral": referral_to_dict(referral),
            "message": chat_service.message_to_dict(message, user.id),
        }
    )
