"""Tests for field format checks."""

from datetime import date

import pytest

from metanoia.core.validators import (
    age_on,
    is_alpha_name,
    is_email,
    is_founded_year,
    is_image_url,
    is_linkedin_url,
    is_pdf_url,
    is_thumbnail_url,
    is_url,
    is_video_url,
    is_website,
    normalize_chips,
    parse_birthday,
)


class TestUrlChecks:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("https://example.com", True),
            ("http://a.b/c?d=1", True),
            ("ftp://example.com", False),
            ("https://localhost", False),
            ("example.com", False),
        ],
    )
    def test_is_url(self, value, expected):
        assert is_url(value) is expected

    def test_linkedin(self):
        assert is_linkedin_url("https://www.linkedin.com/in/asha")
        assert is_linkedin_url("https://LinkedIn.com/company/globex")
        assert not is_linkedin_url("https://linkedin.com/")
        assert not is_linkedin_url("https://example.com/linkedin")

    def test_website_requires_tld(self):
        assert is_website("https://globex.io/careers")
        assert not is_website("https://globex")

    def test_image_and_thumbnail(self):
        assert is_image_url("https://cdn.example.com/me.WEBP")
        assert not is_image_url("https://cdn.example.com/me.pdf")
        assert is_thumbnail_url("https://cdn.example.com/poster.png")
        assert not is_thumbnail_url("https://cdn.example.com/poster.webp")

    @pytest.mark.parametrize(
        "value",
        [
            "https://youtu.be/abc123",
            "https://www.loom.com/share/xyz",
            "https://cdn.example.com/hello.mp4",
        ],
    )
    def test_video_urls(self, value):
        assert is_video_url(value)

    def test_video_rejects_other_hosts(self):
        assert not is_video_url("https://example.com/watch")

    def test_pdf_links(self):
        assert is_pdf_url("https://example.com/jd.pdf?dl=1")
        assert is_pdf_url("https://drive.google.com/file/d/123")
        assert not is_pdf_url("https://example.com/jd.docx")


class TestTextChecks:
    def test_alpha_name(self):
        assert is_alpha_name("Mary-Jane O'Neil Jr.")
        assert not is_alpha_name("R2D2")

    def test_email(self):
        assert is_email("hr@globex.io")
        assert not is_email("hr@globex")
        assert not is_email("hr globex.io")


class TestBirthday:
    def test_age_counts_completed_years(self):
        assert age_on(date(2000, 6, 15), date(2026, 6, 14)) == 25
        assert age_on(date(2000, 6, 15), date(2026, 6, 15)) == 26

    def test_parses_both_separators(self):
        today = date(2026, 10, 19)
        assert parse_birthday("15/06/1998", today) == (date(1998, 6, 15), 28)
        assert parse_birthday("15-06-1998", today) == (date(1998, 6, 15), 28)

    @pytest.mark.parametrize(
        "value",
        ["1998/06/15", "31/02/2000", "01/01/2020", "01/01/1900", "tomorrow"],
    )
    def test_rejects_bad_dates_and_ages(self, value):
        with pytest.raises(ValueError, match="DD/MM/YYYY"):
            parse_birthday(value, date(2026, 10, 19))

    def test_age_bounds_are_exclusive(self):
        today = date(2026, 10, 19)
        with pytest.raises(ValueError):
            parse_birthday("19/10/2016", today)  # exactly 10
        with pytest.raises(ValueError):
            parse_birthday("19/10/1946", today)  # exactly 80
        assert parse_birthday("19/10/2015", today)[1] == 11
        assert parse_birthday("20/10/1946", today)[1] == 79


class TestFoundedYear:
    def test_range(self):
        assert is_founded_year("1999", current_year=2026)
        assert is_founded_year("2026", current_year=2026)
        assert not is_founded_year("2027", current_year=2026)
        assert not is_founded_year("1800", current_year=2026)
        assert not is_founded_year("99", current_year=2026)


class TestNormalizeChips:
    def test_trims_and_deduplicates_case_insensitively(self):
        assert normalize_chips(["  Python", "python", "", "SQL "]) == ["Python", "SQL"]

    def test_none_is_empty(self):
        assert normalize_chips(None) == []

    def test_rejects_long_items(self):
        with pytest.raises(ValueError, match="longer than 5"):
            normalize_chips(["Kubernetes"], max_item_length=5, label="Skill")

    def test_rejects_too_many(self):
        with pytest.raises(ValueError, match="at most 2"):
            normalize_chips(["a", "b", "c"], max_items=2)

    def test_rejects_non_text(self):
        with pytest.raises(ValueError, match="must be text"):
            normalize_chips(["ok", 3])
