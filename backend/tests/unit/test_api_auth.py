"""Tests for the auth endpoints and the session dependencies."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import select

from metanoia.core.auth import hash_password
from metanoia.core.config import settings
from metanoia.models import User
from tests.conftest import TEST_USER_ID, auth_headers, create_test_jwt

_PASSWORD = "correct-horse"


@pytest.fixture
async def password_user(db_session) -> User:
    """A user who signed up with email + password."""
    user = User(
        id=TEST_USER_ID,
        email="asha@example.com",
        password_hash=hash_password(_PASSWORD),
    )
    db_session.add(user)
    await db_session.commit()
    return user


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_creates_user_and_session(
        self, unauthenticated_client, db_session
    ):
        response = await unauthenticated_client.post(
            "/api/v1/auth/register",
            json={"email": "  New@Example.com ", "password": "secret1"},
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["email"] == "new@example.com"
        assert data["user"]["role"] is None
        assert data["user"]["onboarded"] is False
        assert data["token"]
        assert settings.auth_cookie_name in response.headers["set-cookie"]

        stored = await db_session.scalar(
            select(User).where(User.email == "new@example.com")
        )
        assert stored is not None
        assert stored.password_hash != "secret1"

    @pytest.mark.asyncio
    async def test_register_token_authenticates(self, unauthenticated_client):
        response = await unauthenticated_client.post(
            "/api/v1/auth/register",
            json={"email": "bearer@example.com", "password": "secret1"},
        )
        token = response.json()["data"]["token"]
        me = await unauthenticated_client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert me.status_code == 200
        assert me.json()["data"]["email"] == "bearer@example.com"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, unauthenticated_client, password_user):
        response = await unauthenticated_client.post(
            "/api/v1/auth/register",
            json={"email": "ASHA@example.com", "password": "secret1"},
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_EMAIL"

    @pytest.mark.asyncio
    async def test_invalid_credentials_format(self, unauthenticated_client):
        response = await unauthenticated_client.post(
            "/api/v1/auth/register", json={"email": "nope", "password": "123"}
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert {detail["field"] for detail in error["details"]} == {"email", "password"}


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, unauthenticated_client, password_user):
        response = await unauthenticated_client.post(
            "/api/v1/auth/login",
            json={"email": "asha@example.com", "password": _PASSWORD},
        )
        assert response.status_code == 200
        assert response.json()["data"]["user"]["id"] == str(TEST_USER_ID)

    @pytest.mark.asyncio
    async def test_wrong_password(self, unauthenticated_client, password_user):
        response = await unauthenticated_client.post(
            "/api/v1/auth/login",
            json={"email": "asha@example.com", "password": "wrong-pass"},
        )
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_unknown_email_same_error(self, unauthenticated_client):
        response = await unauthenticated_client.post(
            "/api/v1/auth/login",
            json={"email": "ghost@example.com", "password": _PASSWORD},
        )
        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid email or password"


class TestSessionDependency:
    @pytest.mark.asyncio
    async def test_cookie_session(self, client, test_user):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 200
        assert response.json()["data"]["id"] == str(TEST_USER_ID)

    @pytest.mark.asyncio
    async def test_expired_token(self, unauthenticated_client, test_user):
        response = await unauthenticated_client.get(
            "/api/v1/auth/me",
            headers=auth_headers(TEST_USER_ID, expires_delta=timedelta(seconds=-5)),
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_secret(self, unauthenticated_client, test_user):
        token = create_test_jwt(TEST_USER_ID, secret="another-secret-that-is-long-enough!")
        response = await unauthenticated_client.get(
            "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_unknown_user(self, unauthenticated_client):
        response = await unauthenticated_client.get(
            "/api/v1/auth/me", headers=auth_headers(TEST_USER_ID)
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_revokes_older_tokens(self, unauthenticated_client, test_user):
        headers = auth_headers(
            TEST_USER_ID, iat=datetime.now(UTC) - timedelta(hours=1)
        )
        response = await unauthenticated_client.post(
            "/api/v1/auth/logout", headers=headers
        )
        assert response.status_code == 200
        assert response.json()["data"] == {"message": "Signed out"}

        again = await unauthenticated_client.get("/api/v1/auth/me", headers=headers)
        assert again.status_code == 401

    @pytest.mark.asyncio
    async def test_new_token_after_logout_works(
        self, unauthenticated_client, test_user
    ):
        old = auth_headers(TEST_USER_ID, iat=datetime.now(UTC) - timedelta(hours=1))
        await unauthenticated_client.post("/api/v1/auth/logout", headers=old)

        # Issued after the logout, in the same second at the earliest
        fresh = auth_headers(TEST_USER_ID)
        response = await unauthenticated_client.get("/api/v1/auth/me", headers=fresh)
        assert response.status_code == 200
