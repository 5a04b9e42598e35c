"""Authentication endpoints for password-based auth.

Security considerations:
- login: constant-time comparison via DUMMY_HASH prevents user enumeration
- register: bcrypt cost 12, email uniqueness
- logout: revokes every JWT issued before now and clears the cookie

Both register and login return the token in the body as well as the
cookie, since the mobile client keeps it in secure storage.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, Request, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import IntegrityError

from metanoia.api.deps import CurrentUser, CurrentUserId, DbSession
from metanoia.core.auth import (
    clear_auth_cookie,
    create_jwt,
    hash_password,
    set_auth_cookie,
    validate_credentials,
    verify_password,
)
from metanoia.core.config import settings
from metanoia.core.errors import ConflictError, UnauthorizedError
from metanoia.core.rate_limiting import limiter
from metanoia.core.responses import DataResponse
from metanoia.models import User
from metanoia.repositories.user_repository import UserRepository

router = APIRouter()


# ===================================================================
# Request models
# ===================================================================


class CredentialsRequest(BaseModel):
    """Request body for POST /auth/register and POST /auth/login."""

    model_config = ConfigDict(extra="forbid")

    email: str = Field(max_length=255)
    password: str = Field(max_length=128)


def _user_to_dict(user: User) -> dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "role": user.role,
        "onboarded": user.is_onboarded,
        "onboarded_at": user.onboarded_at.isoformat() if user.onboarded_at else None,
    }


def _issue_session(response: Response, user: User) -> dict:
    token = create_jwt(
        user_id=str(user.id),
        secret=settings.auth_secret.get_secret_value(),
    )
    set_auth_cookie(response, token)
    return {"token": token, "user": _user_to_dict(user)}


# ===================================================================
# POST /auth/register
# ===================================================================


@router.post("/register", status_code=201)
@limiter.limit(settings.rate_limit_auth)
async def register(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: CredentialsRequest,
    response: Response,
    db: DbSession,
) -> DataResponse[dict]:
    """Create an account and sign it in.

    Raises:
        ValidationError: Email or password format is invalid.
        ConflictError: DUPLICATE_EMAIL when the email is taken.
    """
    validate_credentials(body.email, body.password)

    if await UserRepository.get_by_email(db, body.email) is not None:
        raise ConflictError(
            code="DUPLICATE_EMAIL",
            message="An account with this email already exists",
        )

    try:
        user = await UserRepository.create(
            db, email=body.email, password_hash=hash_password(body.password)
        )
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError(
            code="DUPLICATE_EMAIL",
            message="An account with this email already exists",
        ) from exc

    return DataResponse(data=_issue_session(response, user))


# ===================================================================
# POST /auth/login
# ===================================================================


@router.post("/login")
@limiter.limit(settings.rate_limit_auth)
async def login(
    request: Request,  # noqa: ARG001 - required by @limiter.limit()
    body: CredentialsRequest,
    response: Response,
    db: DbSession,
) -> DataResponse[dict]:
    """Verify email + password and issue a session.

    Raises:
        UnauthorizedError: Unknown email or wrong password.
    """
    validate_credentials(body.email, body.password)
    user = await UserRepository.get_by_email(db, body.email)

    # Security: always perform bcrypt comparison to prevent timing attacks.
    password_ok = verify_password(body.password, user.password_hash if user else None)
    if user is None or not password_ok:
        raise UnauthorizedError("Invalid email or password")

    return DataResponse(data=_issue_session(response, user))


# ===================================================================
# POST /auth/logout
# ===================================================================


@router.post("/logout")
async def logout(
    response: Response,
    user_id: CurrentUserId,
    db: DbSession,
) -> DataResponse[dict]:
    """Sign out everywhere: revoke all existing JWTs and clear the cookie."""
    # Truncate microseconds: PyJWT encodes iat as integer seconds,
    # so a later JWT's iat must be >= token_invalidated_before.
    invalidation_time = datetime.now(UTC).replace(microsecond=0)
    await UserRepository.update(db, user_id, token_invalidated_before=invalidation_time)
    await db.commit()

    clear_auth_cookie(response)
    return DataResponse(data={"message": "Signed out"})


# ===================================================================
# GET /auth/me
# ===================================================================


@router.get("/me")
async def me(user: CurrentUser) -> DataResponse[dict]:
    """The signed-in user with role and onboarding status."""
    return DataResponse(data=_user_to_dict(user))
