"""Tests for the pure helpers in chat_service."""

from datetime import UTC, datetime

from metanoia.core.errors import ReferralLimitError
from metanoia.services.chat_service import ReferralStatus, build_mailto, referral_day


class TestBuildMailto:
    def test_encodes_like_uri_components(self):
        url = build_mailto("hr@globex.io", "CV: Asha & co", "Hi!\nSee (attached)")
        assert url == (
            "mailto:hr@globex.io"
            "?subject=CV%3A%20Asha%20%26%20co"
            "&body=Hi!%0ASee%20(attached)"
        )

    def test_empty_subject_and_body(self):
        assert build_mailto("a@b.co", "", "") == "mailto:a@b.co?subject=&body="


class TestReferralDay:
    def test_utc_day(self):
        now = datetime(2026, 10, 19, 23, 30, tzinfo=UTC)
        assert referral_day(now, "UTC") == "2026-10-19"

    def test_local_day_rolls_over(self):
        # 23:30 UTC is already the next morning in India
        now = datetime(2026, 10, 19, 23, 30, tzinfo=UTC)
        assert referral_day(now, "Asia/Kolkata") == "2026-10-20"

    def test_behind_utc(self):
        now = datetime(2026, 10, 19, 2, 0, tzinfo=UTC)
        assert referral_day(now, "America/New_York") == "2026-10-18"


class TestReferralStatus:
    def test_remaining_never_negative(self):
        status = ReferralStatus(day="2026-10-19", limit=1, used=3)
        assert status.remaining == 0
        assert status.can_request is False

    def test_fresh_day(self):
        status = ReferralStatus(day="2026-10-19", limit=1, used=0)
        assert status.remaining == 1
        assert status.can_request is True


class TestReferralLimitMessage:
    def test_single_allowance(self):
        error = ReferralLimitError(1, "2026-10-19")
        assert error.message == "You can only request a referral once per day."

    def test_message_follows_limit(self):
        error = ReferralLimitError(3, "2026-10-19")
        assert error.message == "You can only request a referral 3 times per day."
        assert error.details == [{"limit": 3, "day": "2026-10-19"}]
