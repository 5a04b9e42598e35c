"""Tests for the FastAPI application, middleware and exception handlers."""

import json

import pytest
from fastapi import Request
from httpx import ASGITransport, AsyncClient

from metanoia.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ReferralLimitError,
    StepValidationError,
    ValidationError,
)
from metanoia.main import create_app, internal_error_handler


@pytest.fixture
def app():
    """Create test application instance."""
    return create_app()


@pytest.fixture
async def client(app):
    """Create async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthEndpoint:
    """Tests for health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_healthy_status(self, client):
        """Health endpoint should return 200 with healthy status."""
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestUnknownRoutes:
    """Unknown routes still answer with the error envelope."""

    @pytest.mark.asyncio
    async def test_unknown_route_returns_not_found_envelope(self, client):
        response = await client.get("/api/v1/nonexistent")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestMiddleware:
    """Request id and security headers."""

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client):
        response = await client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 32

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    @pytest.mark.asyncio
    async def test_oversized_request_id_is_replaced(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "x" * 200})
        assert response.headers["X-Request-ID"] != "x" * 200

    @pytest.mark.asyncio
    async def test_security_headers_present(self, client):
        response = await client.get("/health")
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert "default-src 'none'" in response.headers["Content-Security-Policy"]

    @pytest.mark.asyncio
    async def test_api_responses_are_not_cached(self, client):
        response = await client.get("/api/v1/settings/support")
        assert response.headers["Cache-Control"] == "no-store, max-age=0"


class TestExceptionHandlers:
    """Custom exceptions become HTTP responses with the error envelope."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("exc", "status", "code"),
        [
            (ValidationError("Invalid input"), 400, "VALIDATION_ERROR"),
            (ForbiddenError(), 403, "FORBIDDEN"),
            (NotFoundError("Match", "42"), 404, "NOT_FOUND"),
            (ConflictError("ALREADY_SWIPED", "Already"), 409, "ALREADY_SWIPED"),
            (InvalidStateError("Not yet"), 422, "INVALID_STATE_TRANSITION"),
            (ReferralLimitError(1, "2026-10-19"), 429, "REFERRAL_LIMIT_REACHED"),
        ],
    )
    async def test_api_errors_render_envelope(self, app, client, exc, status, code):
        @app.get("/test/raise")
        async def raise_error():
            raise exc

        response = await client.get("/test/raise")
        assert response.status_code == status
        body = response.json()
        assert body["error"]["code"] == code
        assert body["error"]["message"] == exc.message

    @pytest.mark.asyncio
    async def test_step_validation_lists_every_field(self, app, client):
        @app.get("/test/step-error")
        async def raise_step_error():
            raise StepValidationError(
                "gender", {"gender": "Pick how you identify", "genderPronoun": "Too long"}
            )

        response = await client.get("/test/step-error")
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "STEP_VALIDATION_FAILED"
        assert {detail["field"] for detail in error["details"]} == {
            "gender",
            "genderPronoun",
        }

    @pytest.mark.asyncio
    async def test_request_validation_returns_400(self, client):
        response = await client.post(
            "/api/v1/auth/login", json={"email": "a@b.co", "nope": 1}
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert all({"loc", "msg", "type"} <= set(d) for d in error["details"])

    @pytest.mark.asyncio
    async def test_missing_auth_returns_unauthorized_envelope(self, client):
        response = await client.get("/api/v1/auth/me")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_internal_error_hides_details(self):
        request = Request({"type": "http", "method": "GET", "path": "/x", "headers": []})
        response = internal_error_handler(request, RuntimeError("db password leaked"))
        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "password" not in body["error"]["message"]
