"""API error classes.

Every error raised from services and routers is an APIError so the
exception handlers in main.py can render one consistent envelope:
{"error": {"code", "message", "details"}}.
"""


class APIError(Exception):
    """Base class for API errors.

    All API errors have a code, message, and HTTP status.
    Subclasses set default status_code.

    Attributes:
        code: Machine-readable error code (e.g., "NOT_FOUND").
        message: Human-readable error message.
        status_code: HTTP status code to return.
        details: Optional list of additional error details.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: list[dict] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ValidationError(APIError):
    """Field validation failed (400).

    Use for request body validation errors, query param errors, etc.
    """

    def __init__(
        self,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details=details,
        )


class StepValidationError(APIError):
    """An onboarding step payload failed its field rules (400).

    Details carry one entry per failing field so the client can mark every
    invalid input at once instead of one per round trip.

    Args:
        step: Key of the step that was validated.
        errors: Mapping of field name to human-readable message.
    """

    def __init__(self, step: str, errors: dict[str, str]) -> None:
        self.step = step
        self.errors = dict(errors)
        super().__init__(
            code="STEP_VALIDATION_FAILED",
            message=f"Step '{step}' has invalid fields",
            status_code=400,
            details=[{"field": field, "msg": msg} for field, msg in errors.items()],
        )


class UnauthorizedError(APIError):
    """Authentication required (401).

    Use when no valid auth credentials provided.
    """

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
        )


class ForbiddenError(APIError):
    """Not allowed to access resource (403).

    Use when auth is valid but user lacks permission.
    """

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            code="FORBIDDEN",
            message=message,
            status_code=403,
        )


class NotFoundError(APIError):
    """Resource not found (404).

    Use when requested resource doesn't exist OR isn't visible to the user.
    Revealing "exists but not yours" leaks information, so both cases
    return the same 404.
    """

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(
            code="NOT_FOUND",
            message=message,
            status_code=404,
        )


class ConflictError(APIError):
    """Duplicate or conflicting resource (409).

    Use for duplicate entries, conflicting state, etc.
    Accepts custom code for specific conflict types.
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: list[dict] | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details,
        )


class InvalidStateError(APIError):
    """Business rule violation (422).

    Use when request is syntactically valid but violates business rules.
    E.g., completing onboarding before every step was submitted.
    """

    def __init__(self, message: str) -> None:
        super().__init__(
            code="INVALID_STATE_TRANSITION",
            message=message,
            status_code=422,
        )


class ReferralLimitError(APIError):
    """Daily referral request allowance used up (429).

    Args:
        limit: Requests allowed per calendar day.
        day: The day key (YYYY-MM-DD) the allowance applies to.
    """

    def __init__(self, limit: int, day: str) -> None:
        allowance = "once" if limit == 1 else f"{limit} times"
        super().__init__(
            code="REFERRAL_LIMIT_REACHED",
            message=f"You can only request a referral {allowance} per day.",
            status_code=429,
            details=[{"limit": limit, "day": day}],
        )
