"""Tests for the profile endpoints."""

import pytest

from metanoia.repositories.swipe_repository import MatchRepository
from tests.conftest import TEST_USER_ID, auth_headers

_BASE = "/api/v1/profiles"


class TestOwnProfile:
    @pytest.mark.asyncio
    async def test_not_onboarded(self, client, test_user):
        response = await client.get(f"{_BASE}/me")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_own_profile(self, client, onboarded_candidate):
        response = await client.get(f"{_BASE}/me")
        assert response.status_code == 200
        profile = response.json()["data"]
        assert profile["user_id"] == str(TEST_USER_ID)
        assert profile["data"]["fullName"] == "Asha Rao"
        assert profile["card"]["name"] == "Asha Rao"

    @pytest.mark.asyncio
    async def test_partial_update_recomputes_columns(self, client, onboarded_candidate):
        response = await client.patch(
            f"{_BASE}/me",
            json={
                "fullName": "  Asha R. ",
                "companyTypePreference": "mnc",
                "superpower": "Debugging",
            },
        )
        assert response.status_code == 200
        profile = response.json()["data"]
        assert profile["display_name"] == "Asha R."
        assert profile["company_type"] == "mnc"
        assert profile["data"]["fullName"] == "Asha R."
        assert profile["data"]["superpower"] == "Debugging"
        assert profile["data"]["companyType"] == "mnc"
        assert profile["data"]["completed"] is True
        assert profile["data"]["role"] == "candidate"

    @pytest.mark.asyncio
    async def test_null_clears_optional_field(self, client, onboarded_candidate):
        await client.patch(f"{_BASE}/me", json={"superpower": "Debugging"})
        response = await client.patch(f"{_BASE}/me", json={"superpower": None})
        assert response.status_code == 200
        assert "superpower" not in response.json()["data"]["data"]

    @pytest.mark.asyncio
    async def test_null_on_required_field_rejected(self, client, onboarded_candidate):
        response = await client.patch(f"{_BASE}/me", json={"softSkills": None})
        assert response.status_code == 400
        fields = {d["field"] for d in response.json()["error"]["details"]}
        assert fields == {"softSkills"}

    @pytest.mark.asyncio
    async def test_update_rejects_read_only_and_bad_links(
        self, client, onboarded_candidate
    ):
        response = await client.patch(
            f"{_BASE}/me",
            json={"role": "hr", "profilePhotoUrl": "https://example.com/cv.pdf"},
        )
        assert response.status_code == 400
        fields = {d["field"] for d in response.json()["error"]["details"]}
        assert fields == {"role", "profilePhotoUrl"}

    @pytest.mark.asyncio
    async def test_update_rejects_values_onboarding_refuses(
        self, client, onboarded_candidate
    ):
        response = await client.patch(
            f"{_BASE}/me",
            json={"companyTypePreference": "banana", "introText": "x" * 500},
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert {d["field"] for d in error["details"]} == {
            "companyTypePreference",
            "introText",
        }

        stored = (await client.get(f"{_BASE}/me")).json()["data"]["data"]
        assert stored["companyTypePreference"] == "startup"
        assert stored["introText"] == "I build reliable APIs."

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "changes",
        [{"fullName": {"a": 1}}, {"fullName": ["Asha"]}, {"showAge": "yes"}],
    )
    async def test_update_rejects_wrong_types(self, client, onboarded_candidate, changes):
        response = await client.patch(f"{_BASE}/me", json=changes)
        assert response.status_code == 400
        assert {d["field"] for d in response.json()["error"]["details"]} == set(changes)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("key", ["age", "companyType", "favouriteBand"])
    async def test_update_rejects_keys_no_step_owns(
        self, client, onboarded_candidate, key
    ):
        response = await client.patch(f"{_BASE}/me", json={key: "x"})
        assert response.status_code == 400
        assert response.json()["error"]["details"] == [
            {"field": key, "msg": "Unknown field"}
        ]

    @pytest.mark.asyncio
    async def test_birthday_edit_recomputes_age(self, client, onboarded_candidate):
        response = await client.patch(f"{_BASE}/me", json={"birthday": "01/01/2000"})
        assert response.status_code == 200
        data = response.json()["data"]["data"]
        assert data["birthday"] == "01/01/2000"
        assert data["age"] >= 26

    @pytest.mark.asyncio
    async def test_custom_gender_survives_unrelated_edit(
        self, client, make_onboarded_user
    ):
        await make_onboarded_user("candidate", user_id=TEST_USER_ID, gender="Agender")
        response = await client.patch(f"{_BASE}/me", json={"genderPronoun": "ze/zir"})
        assert response.status_code == 200
        data = response.json()["data"]["data"]
        assert data["gender"] == "Agender"
        assert data["genderPronoun"] == "ze/zir"

    @pytest.mark.asyncio
    async def test_bad_hr_edit_keeps_candidate_feed_working(
        self, client, onboarded_hr, make_onboarded_user
    ):
        candidate = await make_onboarded_user("candidate")
        response = await client.patch(
            f"{_BASE}/me", json={"industry": {"latitude": "x"}}
        )
        assert response.status_code == 400
        assert response.json()["error"]["details"][0]["field"] == "industry"

        feed = await client.get(
            "/api/v1/discovery/feed", headers=auth_headers(candidate.id)
        )
        assert feed.status_code == 200
        assert [card["user_id"] for card in feed.json()["data"]] == [str(TEST_USER_ID)]

    @pytest.mark.asyncio
    async def test_hr_edit_revalidates_shared_keys(self, client, onboarded_hr):
        response = await client.patch(f"{_BASE}/me", json={"companyName": "X"})
        assert response.status_code == 400
        details = response.json()["error"]["details"]
        assert {d["field"] for d in details} == {"companyName"}

        response = await client.patch(
            f"{_BASE}/me", json={"companyName": " Initech ", "industry": "Fintech"}
        )
        assert response.status_code == 200
        data = response.json()["data"]["data"]
        assert data["companyName"] == "Initech"
        assert data["industry"] == "Fintech"

    @pytest.mark.asyncio
    async def test_empty_update_rejected(self, client, onboarded_candidate):
        response = await client.patch(f"{_BASE}/me", json={})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_publish_toggle(self, client, onboarded_candidate):
        response = await client.post(f"{_BASE}/me/unpublish")
        assert response.json()["data"]["is_published"] is False
        response = await client.post(f"{_BASE}/me/publish")
        assert response.json()["data"]["is_published"] is True


class TestOtherProfiles:
    @pytest.mark.asyncio
    async def test_counterpart_sees_card_only(
        self, client, onboarded_candidate, make_onboarded_user
    ):
        hr = await make_onboarded_user("hr")
        response = await client.get(f"{_BASE}/{hr.id}")
        assert response.status_code == 200
        card = response.json()["data"]
        assert card["user_id"] == str(hr.id)
        assert card["headline"] == "Talent Lead @ Globex"
        assert "data" not in card

    @pytest.mark.asyncio
    async def test_same_role_hidden(
        self, client, onboarded_candidate, make_onboarded_user
    ):
        other = await make_onboarded_user("candidate")
        response = await client.get(f"{_BASE}/{other.id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unpublished_hidden_unless_matched(
        self, client, onboarded_candidate, make_onboarded_user, db_session
    ):
        hr = await make_onboarded_user("hr", published=False)
        assert (await client.get(f"{_BASE}/{hr.id}")).status_code == 404

        await MatchRepository.create(db_session, TEST_USER_ID, hr.id)
        await db_session.commit()
        assert (await client.get(f"{_BASE}/{hr.id}")).status_code == 200

    @pytest.mark.asyncio
    async def test_own_id_returns_full_profile(self, client, onboarded_candidate):
        response = await client.get(f"{_BASE}/{TEST_USER_ID}")
        assert "data" in response.json()["data"]
