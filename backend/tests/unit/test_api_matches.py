"""Tests for matches, chat messages and the chat quick actions."""

import uuid
from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qs, urlsplit

import pytest
from sqlalchemy import func, select

from metanoia.core.config import settings
from metanoia.core.errors import ReferralLimitError
from metanoia.models import ChatMessage, Match, Referral
from metanoia.repositories.swipe_repository import MatchRepository
from metanoia.services import chat_service
from tests.conftest import TEST_USER_ID, auth_headers

_BASE = "/api/v1/matches"


@pytest.fixture
async def hr_user(make_onboarded_user):
    return await make_onboarded_user("hr", email="hr@globex.io")


@pytest.fixture
async def match(db_session, onboarded_candidate, hr_user) -> Match:
    """TEST_USER_ID (candidate) matched with hr_user."""
    created = await MatchRepository.create(db_session, TEST_USER_ID, hr_user.id)
    await db_session.commit()
    return created


class TestListMatches:
    @pytest.mark.asyncio
    async def test_no_matches(self, client, onboarded_candidate):
        response = await client.get(_BASE)
        assert response.json()["data"] == []
        assert response.json()["meta"]["total"] == 0

    @pytest.mark.asyncio
    async def test_lists_counterpart(self, client, match, hr_user):
        response = await client.get(_BASE)
        items = response.json()["data"]
        assert items[0]["id"] == str(match.id)
        assert items[0]["profile"]["user_id"] == str(hr_user.id)


class TestMessages:
    @pytest.mark.asyncio
    async def test_send_and_list(self, client, match, hr_user):
        url = f"{_BASE}/{match.id}/messages"
        sent = await client.post(url, json={"text": "  Hi, mail me at asha@example.com "})
        assert sent.status_code == 201
        message = sent.json()["data"]
        assert message["text"] == "Hi, mail me at asha@example.com"
        assert message["from_me"] is True
        assert message["kind"] == "text"
        assert message["segments"][1]["href"] == "mailto:asha@example.com"

        await client.post(url, json={"text": "Sure"}, headers=auth_headers(hr_user.id))

        listed = await client.get(url)
        body = listed.json()
        assert body["meta"]["total"] == 2
        assert [m["text"] for m in body["data"]] == [
            "Hi, mail me at asha@example.com",
            "Sure",
        ]
        assert [m["from_me"] for m in body["data"]] == [True, False]
        ids = [m["id"] for m in body["data"]]
        assert all(isinstance(message_id, int) for message_id in ids)
        assert ids == sorted(ids)
        assert ids[0] == message["id"]

    @pytest.mark.asyncio
    async def test_pagination(self, client, match):
        url = f"{_BASE}/{match.id}/messages"
        for i in range(3):
            await client.post(url, json={"text": f"message {i}"})
        response = await client.get(url, params={"page": 2, "per_page": 2})
        body = response.json()
        assert [m["text"] for m in body["data"]] == ["message 2"]
        assert body["meta"]["total_pages"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["   ", "x" * 2001])
    async def test_rejects_empty_and_long(self, client, match, text):
        response = await client.post(f"{_BASE}/{match.id}/messages", json={"text": text})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_outsiders_get_not_found(self, client, onboarded_candidate, make_onboarded_user, db_session):
        hr = await make_onboarded_user("hr")
        other = await make_onboarded_user("candidate")
        foreign = await MatchRepository.create(db_session, other.id, hr.id)
        await db_session.commit()

        response = await client.get(f"{_BASE}/{foreign.id}/messages")
        assert response.status_code == 404
        response = await client.post(f"{_BASE}/{uuid.uuid4()}/messages", json={"text": "hi"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_conversation_keeps_match(self, client, match, db_session):
        url = f"{_BASE}/{match.id}/messages"
        await client.post(url, json={"text": "one"})
        await client.post(url, json={"text": "two"})

        response = await client.delete(url)
        assert response.json()["data"] == {"deleted": 2}
        assert (await client.get(url)).json()["data"] == []
        assert await db_session.scalar(select(func.count()).select_from(Match)) == 1


class TestQuickActions:
    @pytest.mark.asyncio
    async def test_schedule_call(self, client, match):
        slot = settings.call_slots[0]
        response = await client.post(
            f"{_BASE}/{match.id}/actions/schedule-call", json={"slot": slot}
        )
        assert response.status_code == 201
        message = response.json()["data"]
        assert message["kind"] == "call_scheduled"
        assert message["text"] == f"Scheduled a call for: {slot}"

    @pytest.mark.asyncio
    async def test_schedule_call_unknown_slot(self, client, match):
        response = await client.post(
            f"{_BASE}/{match.id}/actions/schedule-call", json={"slot": "Never"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_email_builds_mailto(self, client, match):
        response = await client.post(
            f"{_BASE}/{match.id}/actions/email",
            json={"to": "hr@globex.io", "subject": "My CV & more", "body": "Hello there!"},
        )
        assert response.status_code == 201
        data = response.json()["data"]
        parts = urlsplit(data["mailto_url"])
        assert parts.scheme == "mailto"
        assert parts.path == "hr@globex.io"
        query = parse_qs(parts.query)
        assert query["subject"] == ["My CV & more"]
        assert query["body"] == ["Hello there!"]
        assert "%20" in data["mailto_url"]
        assert data["message"]["text"] == "Sent CV to hr@globex.io."
        assert data["message"]["kind"] == "email_sent"

    @pytest.mark.asyncio
    async def test_email_invalid_recipient(self, client, match):
        response = await client.post(
            f"{_BASE}/{match.id}/actions/email", json={"to": "not-an-email"}
        )
        assert response.status_code == 400


class TestReferrals:
    @pytest.mark.asyncio
    async def test_request_referral(self, client, match, hr_user):
        response = await client.post(
            f"{_BASE}/{match.id}/actions/referral",
            json={"email": "hr@globex.io", "message": "Backend role please", "job_id": "J-1"},
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["referral"]["to_user_id"] == str(hr_user.id)
        assert data["referral"]["status"] == "pending"
        assert data["referral"]["job_id"] == "J-1"
        assert data["message"]["kind"] == "referral_requested"
        assert data["message"]["text"] == (
            "Requested a referral from your end for: hr@globex.io\nMsg: Backend role please"
        )

    @pytest.mark.asyncio
    async def test_default_recipient_is_hr(self, client, match):
        response = await client.post(f"{_BASE}/{match.id}/actions/referral", json={})
        assert response.json()["data"]["message"]["text"] == (
            "Requested a referral from your end for: HR"
        )

    @pytest.mark.asyncio
    async def test_once_per_day(self, client, match, db_session):
        url = f"{_BASE}/{match.id}/actions/referral"
        assert (await client.post(url, json={})).status_code == 201

        response = await client.post(url, json={})
        assert response.status_code == 429
        error = response.json()["error"]
        assert error["code"] == "REFERRAL_LIMIT_REACHED"
        assert error["message"] == "You can only request a referral once per day."
        assert await db_session.scalar(select(func.count()).select_from(Referral)) == 1

        status = (await client.get("/api/v1/referrals/status")).json()["data"]
        assert status["used"] == 1
        assert status["remaining"] == 0
        assert status["can_request"] is False

    @pytest.mark.asyncio
    async def test_allowance_resets_next_day(self, match, onboarded_candidate, db_session):
        today = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
        tomorrow = today + timedelta(days=1)

        referral, _ = await chat_service.request_referral(
            db_session, onboarded_candidate, match.id, now=today
        )
        assert referral.day_key == "2026-10-19"

        with pytest.raises(ReferralLimitError):
            await chat_service.request_referral(
                db_session, onboarded_candidate, match.id, now=today
            )

        referral, _ = await chat_service.request_referral(
            db_session, onboarded_candidate, match.id, now=tomorrow
        )
        assert referral.day_key == "2026-10-20"
        status = await chat_service.referral_status(
            db_session, onboarded_candidate, now=tomorrow
        )
        assert status.can_request is False

    @pytest.mark.asyncio
    async def test_hr_cannot_request(self, client, match, hr_user, db_session):
        response = await client.post(
            f"{_BASE}/{match.id}/actions/referral",
            json={},
            headers=auth_headers(hr_user.id),
        )
        assert response.status_code == 403
        messages = await db_session.scalar(select(func.count()).select_from(ChatMessage))
        assert messages == 0

    @pytest.mark.asyncio
    async def test_invalid_email(self, client, match):
        response = await client.post(
            f"{_BASE}/{match.id}/actions/referral", json={"email": "nope"}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_referrals(self, client, match):
        await client.post(f"{_BASE}/{match.id}/actions/referral", json={"job_id": "J-9"})
        response = await client.get("/api/v1/referrals")
        body = response.json()
        assert body["meta"]["total"] == 1
        assert body["data"][0]["job_id"] == "J-9"
