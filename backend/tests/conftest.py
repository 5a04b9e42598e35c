import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from metanoia.core.config import settings
from metanoia.core.database import build_engine
from metanoia.core.rate_limiting import limiter
from metanoia.models import Base, Profile, User
from metanoia.services.profile_cards import profile_columns

# In-memory database; StaticPool keeps one connection so every session
# created during a test sees the same data.
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Test user ID (consistent across tests for predictable auth)
TEST_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")

# Security: This is a test-only secret. Production uses a real secret from env.
TEST_AUTH_SECRET = "test-secret-key-that-is-at-least-32-characters-long"  # nosec B105  # gitleaks:allow


def create_test_jwt(
    user_id: uuid.UUID = TEST_USER_ID,
    *,
    secret: str = TEST_AUTH_SECRET,
    expires_delta: timedelta | None = None,
    iat: datetime | None = None,
) -> str:
    """Create a signed JWT for test authentication.

    Args:
        user_id: User UUID to encode in the sub claim.
        secret: Signing secret (must match settings.auth_secret in tests).
        expires_delta: Time until expiration. Defaults to 1 hour.
        iat: Issued-at time. Defaults to now.

    Returns:
        Encoded JWT string.
    """
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),
        "aud": settings.auth_audience,
        "iss": settings.auth_issuer,
        "exp": now + (expires_delta or timedelta(hours=1)),
        "iat": iat or now,
    }
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_headers(user_id: uuid.UUID, **kwargs: Any) -> dict[str, str]:
    """Bearer header for ``user_id``, as the mobile client sends it."""
    return {"Authorization": f"Bearer {create_test_jwt(user_id, **kwargs)}"}


# =============================================================================
# Sample Answer Documents
# =============================================================================


def candidate_answers(**overrides: Any) -> dict[str, Any]:
    """A complete candidate answer document."""
    answers: dict[str, Any] = {
        "role": "candidate",
        "companyTypePreference": "startup",
        "location": "Bengaluru",
        "fullName": "Asha Rao",
        "birthday": "15/06/1998",
        "age": 28,
        "gender": "woman",
        "latestEducation": "B.Tech Computer Science",
        "passingYear": "2020",
        "projects": ["Expense tracker"],
        "experiences": ["Backend intern at Acme"],
        "skills": ["Python"],
        "roles": ["Backend Engineer"],
        "hardSkills": ["Python", "SQL"],
        "softSkills": ["Teamwork"],
        "specificSkills": ["FastAPI"],
        "introText": "I build reliable APIs.",
        "selectedPrompts": [],
        "promptAnswersArray": [],
        "cvUrl": "https://example.com/asha.pdf",
        "profilePhotoUrl": "https://example.com/asha.jpg",
        "completed": True,
    }
    answers.update(overrides)
    return answers


def hr_answers(**overrides: Any) -> dict[str, Any]:
    """A complete HR answer document."""
    answers: dict[str, Any] = {
        "role": "hr",
        "address": "MG Road, Bengaluru",
        "companyType": "mnc",
        "fullName": "Ravi Kumar",
        "designation": "Talent Lead",
        "companyName": "Globex",
        "brandImageUrl": "https://example.com/globex.png",
        "industry": "Software",
        "companySize": "1001-5000",
        "companyMission": "Make hiring humane",
        "officeLocation": "Bengaluru",
        "workType": "hybrid",
        "rolesHiringFor": ["Backend Engineer"],
        "hardSkills": ["Python"],
        "perks": ["Health insurance"],
        "jobOpenings": [],
        "linkedinUrl": "https://www.linkedin.com/company/globex",
        "completed": True,
    }
    answers.update(overrides)
    return answers


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _test_settings():
    """Sign tokens with the test secret and switch rate limiting off."""
    original_secret = settings.auth_secret
    original_limiter_enabled = limiter.enabled
    settings.auth_secret = SecretStr(TEST_AUTH_SECRET)
    limiter.enabled = False
    yield
    settings.auth_secret = original_secret
    limiter.enabled = original_limiter_enabled


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create a fresh in-memory database with every table."""
    engine = build_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """A signed-up user who hasn't started onboarding."""
    user = User(id=TEST_USER_ID, email="test@example.com")
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


MakeUser = Callable[..., Awaitable[User]]


@pytest_asyncio.fixture
async def make_onboarded_user(db_session: AsyncSession) -> MakeUser:
    """Factory for users who finished onboarding and have a published profile.

    Usage:
        hr = await make_onboarded_user("hr", email="hr@example.com")
        candidate = await make_onboarded_user(
            "candidate", companyTypePreference="mnc"
        )
    """

    async def _make(
        role: str,
        *,
        email: str | None = None,
        user_id: uuid.UUID | None = None,
        published: bool = True,
        **answer_overrides: Any,
    ) -> User:
        now = datetime.now(UTC)
        user = User(
            id=user_id or uuid.uuid4(),
            email=email or f"{uuid.uuid4().hex[:12]}@example.com",
            role=role,
            onboarded_at=now,
        )
        db_session.add(user)
        await db_session.flush()

        builder = candidate_answers if role == "candidate" else hr_answers
        data = builder(**answer_overrides)
        db_session.add(
            Profile(
                user_id=user.id,
                role=role,
                is_published=published,
                data=data,
                completed_at=now,
                **profile_columns(role, data),
            )
        )
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest_asyncio.fixture
async def onboarded_candidate(make_onboarded_user: MakeUser) -> User:
    """TEST_USER_ID as an onboarded candidate."""
    return await make_onboarded_user(
        "candidate", email="test@example.com", user_id=TEST_USER_ID
    )


@pytest_asyncio.fixture
async def onboarded_hr(make_onboarded_user: MakeUser) -> User:
    """TEST_USER_ID as an onboarded HR user."""
    return await make_onboarded_user("hr", email="test@example.com", user_id=TEST_USER_ID)


# =============================================================================
# API Test Fixtures
# =============================================================================


async def _app_client(
    db_engine, cookies: dict[str, str] | None = None
) -> AsyncGenerator[AsyncClient, None]:
    from metanoia.core.database import get_db
    from metanoia.main import app

    # Create session factory for this test
    test_session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Override get_db to use test database
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", cookies=cookies
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client authenticated as TEST_USER_ID via the session cookie.

    The user row itself comes from whichever user fixture the test asks
    for (test_user, onboarded_candidate, onboarded_hr).
    """
    cookies = {settings.auth_cookie_name: create_test_jwt(TEST_USER_ID)}
    async for ac in _app_client(db_engine, cookies):
        yield ac


@pytest_asyncio.fixture
async def unauthenticated_client(db_engine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client without authentication."""
    async for ac in _app_client(db_engine):
        yield ac
