"""Application configuration loaded from environment variables.

Settings for the database, API, authentication, rate limiting and the
matching/chat product rules. Uses pydantic-settings for validation and
.env file support.
"""

from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure default secret that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_SECRET = "metanoia-dev-secret-change-me"  # nosec B105

# Minimum length for AUTH_SECRET in production (256 bits = 32 bytes)
_MIN_AUTH_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    # Any SQLAlchemy async URL, e.g. postgresql+asyncpg://user:pw@host/db
    database_url: str = "sqlite+aiosqlite:///./metanoia.db"

    # API
    # 0.0.0.0 binds to all network interfaces (required for Docker containers)
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 8000

    # CORS (Security)
    # Production: Set ALLOWED_ORIGINS to specific domain(s)
    # Never set to ["*"] when allow_credentials=True
    allowed_origins: list[str] = ["http://localhost:8081"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    log_json: bool = False

    # Authentication
    # Mobile clients send the JWT as a Bearer header; web clients use the cookie
    auth_secret: SecretStr = SecretStr(_INSECURE_DEFAULT_SECRET)
    auth_issuer: str = "metanoia"
    auth_audience: str = "metanoia-app"
    auth_cookie_name: str = "metanoia.session-token"
    auth_cookie_secure: bool = True
    auth_cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    auth_cookie_domain: str = ""
    auth_token_hours: int = 24 * 7

    # Rate Limiting (Security)
    # Format: "count/period" (e.g., "10/minute", "100/hour")
    rate_limit_auth: str = "10/minute"  # /auth/register, /auth/login
    rate_limit_chat: str = "60/minute"  # POST /matches/{id}/messages
    rate_limit_enabled: bool = True  # Disable for testing

    # Swipe deck
    swipe_threshold_px: int = 120
    swipe_undo_depth: int = 1

    # Referrals
    referral_daily_limit: int = 1
    referral_timezone: str = "UTC"

    # Chat actions
    call_slots: list[str] = [
        "Tomorrow 2:00 PM",
        "Tomorrow 5:00 PM",
        "Tuesday 11:00 AM",
        "Wednesday 4:00 PM",
    ]

    # Settings screen links
    support_email: str = "support@metanoia.com"
    privacy_policy_url: str = "https://metanoia.com/privacy"
    terms_url: str = "https://metanoia.com/terms"

    @property
    def database_url_sync(self) -> str:
        """Sync database URL for Alembic offline mode."""
        return self.database_url.replace("+aiosqlite", "").replace("+asyncpg", "")

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate security and product-rule settings.

        Checks:
        - SameSite=None requires Secure flag (browser requirement)
        - CORS must not use wildcard origin (incompatible with credentials)
        - Swipe threshold, undo depth and referral limit must be positive
        - Referral timezone must be a known IANA zone
        - AUTH_SECRET must not be the default and must be >= 32 chars in production
        """
        if self.auth_cookie_samesite == "none" and not self.auth_cookie_secure:
            msg = (
                "AUTH_COOKIE_SECURE must be true when AUTH_COOKIE_SAMESITE=none. "
                "Browsers reject SameSite=None cookies without the Secure flag."
            )
            raise ValueError(msg)

        if "*" in self.allowed_origins:
            msg = (
                "ALLOWED_ORIGINS must not contain '*' (wildcard). "
                "This application uses credentials (cookies) which are "
                "incompatible with wildcard CORS origins."
            )
            raise ValueError(msg)

        if self.swipe_threshold_px <= 0:
            msg = f"SWIPE_THRESHOLD_PX must be positive. Got: {self.swipe_threshold_px}"
            raise ValueError(msg)
        if self.swipe_undo_depth < 1:
            msg = f"SWIPE_UNDO_DEPTH must be at least 1. Got: {self.swipe_undo_depth}"
            raise ValueError(msg)
        if self.referral_daily_limit < 1:
            msg = (
                "REFERRAL_DAILY_LIMIT must be at least 1. "
                f"Got: {self.referral_daily_limit}"
            )
            raise ValueError(msg)

        try:
            ZoneInfo(self.referral_timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"REFERRAL_TIMEZONE is not a known timezone: {self.referral_timezone}"
            raise ValueError(msg) from exc

        if self.environment == "production":
            secret_value = self.auth_secret.get_secret_value()
            if secret_value == _INSECURE_DEFAULT_SECRET:
                msg = (
                    "Cannot use default AUTH_SECRET in production. "
                    'Generate with: python -c "import secrets; '
                    'print(secrets.token_hex(32))"'
                )
                raise ValueError(msg)
            if len(secret_value) < _MIN_AUTH_SECRET_LENGTH:
                msg = (
                    f"AUTH_SECRET must be at least {_MIN_AUTH_SECRET_LENGTH} "
                    "characters for adequate security."
                )
                raise ValueError(msg)

        return self


settings = Settings()
