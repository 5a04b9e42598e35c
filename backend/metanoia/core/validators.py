"""Field-level format checks shared by onboarding steps and profile edits.

All predicates treat their input as already trimmed and return a bool;
callers decide whether an empty value is allowed. normalize_chips and
parse_birthday raise ValueError with a user-facing message.
"""

import re
from collections.abc import Iterable
from datetime import date

_URL = re.compile(r"^https?://\S+\.\S+")
_LINKEDIN_URL = re.compile(r"^https?://(www\.)?linkedin\.com/.+", re.IGNORECASE)
_WEBSITE = re.compile(
    r"^https?://(www\.)?[a-zA-Z0-9\-.]+\.[a-zA-Z]{2,}(/\S*)?$", re.IGNORECASE
)
_IMAGE_URL = re.compile(
    r"^https?://\S+\.(jpg|jpeg|png|gif|webp|avif|svg|bmp|tiff)$", re.IGNORECASE
)
_THUMBNAIL_URL = re.compile(r"^https?://\S+\.(jpg|jpeg|png|gif)$", re.IGNORECASE)
_VIDEO_FILE = re.compile(r"\.(mp4|mov|webm|m4v|avi)$", re.IGNORECASE)
_VIDEO_HOST = re.compile(
    r"(youtube\.com|youtu\.be|vimeo\.com|loom\.com|drive\.google\.com|dropbox\.com)",
    re.IGNORECASE,
)
_PDF_URL = re.compile(r"^https?://\S+\.pdf(\?.*)?$", re.IGNORECASE)
_SHARED_DRIVE = re.compile(r"(drive\.google\.com|dropbox\.com)", re.IGNORECASE)
_ALPHA_NAME = re.compile(r"^[a-zA-Z\s'.-]+$")
_EMAIL = re.compile(r"^\S+@\S+\.\S+$")
_BIRTHDAY = re.compile(r"^(\d{2})[/\-](\d{2})[/\-](\d{4})$")
_YEAR = re.compile(r"^\d{4}$")

MIN_AGE = 10
MAX_AGE = 80
MIN_FOUNDED_YEAR = 1800


def is_url(value: str) -> bool:
    """http(s) URL with at least one dot after the scheme."""
    return bool(_URL.match(value))


def is_linkedin_url(value: str) -> bool:
    return bool(_LINKEDIN_URL.match(value))


def is_website(value: str) -> bool:
    return bool(_WEBSITE.match(value))


def is_image_url(value: str) -> bool:
    return bool(_IMAGE_URL.match(value))


def is_thumbnail_url(value: str) -> bool:
    """Image URL restricted to the formats video players accept as posters."""
    return bool(_THUMBNAIL_URL.match(value))


def is_video_url(value: str) -> bool:
    """Direct video file link or a link to a known video/file host."""
    return is_url(value) and bool(
        _VIDEO_FILE.search(value) or _VIDEO_HOST.search(value)
    )


def is_pdf_url(value: str) -> bool:
    """PDF link (query string allowed) or a Google Drive / Dropbox share."""
    return bool(_PDF_URL.match(value) or _SHARED_DRIVE.search(value))


def is_alpha_name(value: str) -> bool:
    """Letters, spaces, apostrophes, dots and hyphens only."""
    return bool(_ALPHA_NAME.match(value))


def is_email(value: str) -> bool:
    return bool(_EMAIL.match(value))


def age_on(born: date, today: date) -> int:
    """Completed years between born and today."""
    years = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        years -= 1
    return years


def parse_birthday(value: str, today: date | None = None) -> tuple[date, int]:
    """Parse a DD/MM/YYYY (or DD-MM-YYYY) birthday and derive the age.

    Args:
        value: Birthday as typed.
        today: Reference date for the age; defaults to date.today().

    Returns:
        Tuple of (date of birth, age in completed years).

    Raises:
        ValueError: Bad format, impossible date, or age outside (10, 80).
    """
    invalid = f"Enter a valid date (DD/MM/YYYY) and age between {MIN_AGE} and {MAX_AGE}"
    match = _BIRTHDAY.match(value)
    if not match:
        raise ValueError(invalid)
    day, month, year = (int(part) for part in match.groups())
    try:
        born = date(year, month, day)
    except ValueError as exc:
        raise ValueError(invalid) from exc

    age = age_on(born, today or date.today())
    if not MIN_AGE < age < MAX_AGE:
        raise ValueError(invalid)
    return born, age


def is_founded_year(value: str, current_year: int | None = None) -> bool:
    """Four digits, after 1800 and not in the future."""
    if not _YEAR.match(value):
        return False
    year = int(value)
    return MIN_FOUNDED_YEAR < year <= (current_year or date.today().year)


def normalize_chips(
    values: Iterable[object] | None,
    *,
    max_item_length: int | None = None,
    max_items: int | None = None,
    label: str = "Item",
) -> list[str]:
    """Trim a chip list, dropping blanks and case-insensitive duplicates.

    The first spelling of a duplicate wins and order is preserved.

    Args:
        values: Raw list from the client (None is treated as empty).
        max_item_length: Reject chips longer than this.
        max_items: Reject lists longer than this after de-duplication.
        label: Noun used in error messages.

    Returns:
        Normalized chip list.

    Raises:
        ValueError: A chip is not a string, is too long, or the list is too long.
    """
    chips: list[str] = []
    seen: set[str] = set()
    for raw in values or []:
        if not isinstance(raw, str):
            raise ValueError(f"{label} entries must be text")
        chip = raw.strip()
        if not chip:
            continue
        if max_item_length is not None and len(chip) > max_item_length:
            raise ValueError(
                f"{label} '{chip}' is longer than {max_item_length} characters"
            )
        key = chip.casefold()
        if key in seen:
            continue
        seen.add(key)
        chips.append(chip)

    if max_items is not None and len(chips) > max_items:
        raise ValueError(f"Add at most {max_items} {label.lower()} entries")
    return chips
