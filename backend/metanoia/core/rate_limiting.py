"""Rate limiting configuration using slowapi.

Security: Prevents credential stuffing on the auth endpoints and chat spam.

Rate limiting keys on the JWT subject (per-user) so users behind a shared
IP don't throttle each other. Unauthenticated requests fall back to
IP-based keying.

Usage in routers:
    from metanoia.core.rate_limiting import limiter

    @router.post("/{match_id}/messages")
    @limiter.limit(settings.rate_limit_chat)
    async def send_message(request: Request, ...):
        ...
"""

import jwt
from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from metanoia.core.auth import decode_jwt
from metanoia.core.config import settings


def extract_token(request: Request) -> str | None:
    """Read the session JWT from the Bearer header or the session cookie.

    Args:
        request: The incoming request.

    Returns:
        Raw token string, or None when neither carrier is present.
    """
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.auth_cookie_name)


def _rate_limit_key_func(request: Request) -> str:
    """Get rate limit key from request.

    Key format:
    - Valid JWT: "user:{sub}"
    - No/invalid JWT: "unauth:{ip}"

    Args:
        request: The incoming request.

    Returns:
        Rate limit key string.
    """
    # No revocation check here: keying only needs the sub claim. Full auth
    # validation happens in deps.py.
    token = extract_token(request)
    if token:
        try:
            sub = decode_jwt(token)["sub"]
            # sub should look like a UUID (36 chars)
            if len(sub) <= 36:
                return f"user:{sub}"
        except (jwt.InvalidTokenError, KeyError, TypeError):
            pass

    return f"unauth:{get_remote_address(request)}"


# Global limiter instance
# In-memory storage (single instance). For multi-instance deployments
# configure Redis storage via RATELIMIT_STORAGE_URL.
limiter = Limiter(
    key_func=_rate_limit_key_func,
    enabled=settings.rate_limit_enabled,
)


def rate_limit_exceeded_handler(
    _request: Request,
    exc: RateLimitExceeded,
) -> Response:
    """Handle rate limit exceeded errors.

    Returns 429 Too Many Requests with standard error envelope.

    Args:
        request: The incoming request.
        exc: The rate limit exception.

    Returns:
        JSONResponse with 429 status and retry-after header.
    """
    # Parse retry-after from exception detail (e.g., "10 per 1 minute")
    # Fallback to 60 seconds if parsing fails
    try:
        retry_after = str(exc.detail.split()[-1])
        int(retry_after.rstrip("s"))
    except (ValueError, AttributeError, IndexError):
        retry_after = "60"

    return JSONResponse(
        status_code=429,
        content={
            "error": {
                "code": "RATE_LIMITED",
                "message": f"Rate limit exceeded: {exc.detail}",
                "details": None,
            }
        },
        headers={"Retry-After": retry_after},
    )
