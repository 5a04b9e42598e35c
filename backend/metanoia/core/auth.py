"""Authentication helpers for JWT handling, cookies, and credentials.

Shared utilities used by the auth endpoints and dependencies:
- create_jwt / decode_jwt: HS256 session tokens
- set_auth_cookie / clear_auth_cookie: httpOnly cookie management
- hash_password / verify_password: bcrypt
- validate_credentials: Format rules for sign-up and sign-in
- DUMMY_HASH: Timing-safe constant for user enumeration defense
"""

import re
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from fastapi import Response

from metanoia.core.config import settings
from metanoia.core.errors import ValidationError

# bcrypt cost factor for password hashing
_BCRYPT_ROUNDS = 12

_EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
_MIN_PASSWORD_LENGTH = 6
_MAX_PASSWORD_LENGTH = 128

# Pre-computed bcrypt hash for timing-safe comparison on user-not-found.
# Security: prevents user enumeration via response time differences.
DUMMY_HASH = b"$2b$12$ZP2PVB8yI35X.mkRqcUPUuSzJA1CNRt4dZ7X3cyrfJu.2S3w.Qen2"


def _token_lifetime() -> timedelta:
    return timedelta(hours=settings.auth_token_hours)


def create_jwt(
    *,
    user_id: str,
    secret: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT with standard claims.

    Args:
        user_id: User UUID string for the sub claim.
        secret: HMAC signing secret.
        expires_delta: Time until expiration. Defaults to AUTH_TOKEN_HOURS.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "aud": settings.auth_audience,
        "iss": settings.auth_issuer,
        "exp": now + (expires_delta or _token_lifetime()),
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def decode_jwt(token: str) -> dict:
    """Decode and verify a session JWT.

    Verifies signature, exp, aud and iss.

    Args:
        token: Encoded JWT string.

    Returns:
        Decoded claims.

    Raises:
        jwt.InvalidTokenError: If the token fails any check.
    """
    return jwt.decode(
        token,
        settings.auth_secret.get_secret_value(),
        algorithms=["HS256"],
        audience=settings.auth_audience,
        issuer=settings.auth_issuer,
    )


def set_auth_cookie(response: Response, token: str) -> None:
    """Set httpOnly JWT cookie on response.

    Security: httpOnly prevents XSS cookie theft. Secure flag and SameSite
    are configured via settings for environment-appropriate security.

    Args:
        response: FastAPI response object.
        token: JWT token string.
    """
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=token,
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite=settings.auth_cookie_samesite,
        path="/",
        max_age=int(_token_lifetime().total_seconds()),
        domain=settings.auth_cookie_domain or None,
    )


def clear_auth_cookie(response: Response) -> None:
    """Expire the session cookie on the client."""
    response.delete_cookie(
        key=settings.auth_cookie_name,
        path="/",
        domain=settings.auth_cookie_domain or None,
    )


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (cost 12)."""
    return bcrypt.hashpw(
        password.encode(), bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)
    ).decode()


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored hash.

    Always runs a bcrypt comparison, against DUMMY_HASH when there is no
    stored hash, so response time does not reveal whether the user exists.

    Args:
        password: Plain-text password from the request.
        password_hash: Stored bcrypt hash, or None for unknown users.

    Returns:
        True only when a stored hash exists and matches.
    """
    if password_hash is None:
        bcrypt.checkpw(password.encode(), DUMMY_HASH)
        return False
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def validate_credentials(email: str, password: str) -> None:
    """Validate sign-up/sign-in credential format.

    Email must look like name@domain.tld; password must be 6-128 chars.

    Args:
        email: Email address as typed.
        password: Plain-text password.

    Raises:
        ValidationError: With one detail entry per failing field.
    """
    details: list[dict] = []
    if not email.strip():
        details.append({"field": "email", "msg": "Email is required"})
    elif not _EMAIL_PATTERN.fullmatch(email.strip()):
        details.append({"field": "email", "msg": "Enter a valid email"})

    if not password:
        details.append({"field": "password", "msg": "Password is required"})
    elif len(password) < _MIN_PASSWORD_LENGTH:
        details.append(
            {
                "field": "password",
                "msg": f"Password must be at least {_MIN_PASSWORD_LENGTH} characters",
            }
        )
    elif len(password) > _MAX_PASSWORD_LENGTH:
        details.append(
            {
                "field": "password",
                "msg": f"Password must be at most {_MAX_PASSWORD_LENGTH} characters",
            }
        )

    if details:
        raise ValidationError("Invalid credentials format", details=details)
