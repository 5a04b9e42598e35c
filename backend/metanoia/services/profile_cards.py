"""Profile presentation: swipe cards, preview rows, and feed filtering.

Pure functions over the onboarding answer document. Nothing here touches
the database, so the discovery and onboarding services share it and tests
can exercise it with plain dicts.
"""

from collections.abc import Mapping
from typing import Any

from metanoia.core.errors import ValidationError
from metanoia.models.user import ROLE_CANDIDATE, ROLE_HR

COMPANY_TYPE_ALL = "all"
COMPANY_TYPE_OPEN = "open_to_all"

COMPANY_TYPE_LABELS: dict[str, str] = {
    "mnc": "MNC",
    "middle_enterprise": "Mid-size enterprise",
    "startup": "Startup",
    COMPANY_TYPE_OPEN: "Open to all",
}

# Older clients sent these for the mid-size bucket
_COMPANY_TYPE_ALIASES: dict[str, str] = {
    "middle": "middle_enterprise",
    "medium": "middle_enterprise",
    "mid": "middle_enterprise",
}

# Answer keys that only drive the client UI and never reach a profile
_UI_ONLY_KEYS = frozenset({"role", "step", "completed", "onboardingCompletedAt"})

FIELD_LABELS: dict[str, str] = {
    # candidate
    "companyTypePreference": "Preferred company type",
    "location": "Location",
    "openToRemote": "Open to remote",
    "relocate": "Willing to relocate",
    "whyLocation": "Why this location",
    "fullName": "Full name",
    "nickname": "Nickname",
    "birthday": "Birthday",
    "age": "Age",
    "pronouns": "Pronouns",
    "showAge": "Show age",
    "gender": "Gender",
    "genderPronoun": "Pronoun",
    "latestEducation": "Latest education",
    "passingYear": "Passing year",
    "projects": "Projects",
    "experiences": "Experience",
    "skills": "Skills",
    "gpa": "GPA",
    "honors": "Honors",
    "roles": "Roles",
    "hardSkills": "Hard skills",
    "softSkills": "Soft skills",
    "specificSkills": "Specific skills",
    "software": "Software",
    "otherStrengths": "Other strengths",
    "superpower": "Superpower",
    "introText": "Intro",
    "videoUrl": "Intro video",
    "videoCoverImage": "Video cover",
    "promptAnswersArray": "Prompts",
    "cvUrl": "CV",
    "linkedInUrl": "LinkedIn",
    "portfolioUrl": "Portfolio",
    "githubUrl": "GitHub",
    "otherLink": "Other link",
    "profilePhotoUrl": "Profile photo",
    # hr
    "address": "Address",
    "locationRadius": "Search radius (km)",
    "companyType": "Company type",
    "teleport": "Teleport",
    "designation": "Designation",
    "companyName": "Company",
    "linkedIn": "LinkedIn",
    "hiringFor": "Hiring for",
    "brandImageUrl": "Brand image",
    "tagline": "Tagline",
    "website": "Website",
    "about": "About",
    "industry": "Industry",
    "companySize": "Company size",
    "foundedIn": "Founded in",
    "websiteUrl": "Company website",
    "cultureTags": "Culture",
    "perks": "Perks",
    "remoteFirst": "Remote first",
    "companyMission": "Mission",
    "vision": "Vision",
    "coreValues": "Core values",
    "hashtags": "Hashtags",
    "officeLocation": "Office",
    "workType": "Work type",
    "satelliteOffices": "Other offices",
    "timezone": "Timezone",
    "relocationSupport": "Relocation support",
    "rolesHiringFor": "Roles hiring for",
    "priorityRoles": "Priority roles",
    "mustHaveSkills": "Must-have skills",
    "niceToHaveSkills": "Nice-to-have skills",
    "jobType": "Job type",
    "minExperience": "Min experience (years)",
    "maxExperience": "Max experience (years)",
    "toolsRequired": "Tools",
    "certifications": "Certifications",
    "languages": "Languages",
    "minEducation": "Minimum education",
    "highlight": "Highlighted perk",
    "videoGreetingUrl": "Video greeting",
    "videoCaption": "Video caption",
    "jobOpenings": "Job openings",
    "linkedinUrl": "LinkedIn",
    "careersPageUrl": "Careers page",
    "otherLinks": "Other links",
    "aboutBlurb": "About",
    "featuredLink": "Featured link",
}


# =============================================================================
# Value Formatting
# =============================================================================


def _coords_label(value: Mapping[str, Any]) -> str | None:
    try:
        latitude = float(value["latitude"])
        longitude = float(value.get("longitude", 0))
    except (TypeError, ValueError):
        return None
    return f"{latitude:.4f}, {longitude:.4f}"


def _display(value: Any) -> str | None:
    """Render an answer value as a single display string (None if empty)."""
    if value is None or value == "" or value == [] or value == {}:
        return None
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, list):
        parts = [_display(item) for item in value]
        joined = ", ".join(part for part in parts if part)
        return joined or None
    if isinstance(value, Mapping):
        if "prompt" in value:
            return f"{value['prompt']}: {value.get('answer', '')}"
        if "jobTitle" in value:
            return str(value["jobTitle"])
        label = _coords_label(value) if "latitude" in value else None
        if label is not None:
            return label
        return ", ".join(f"{key}: {item}" for key, item in value.items())
    return str(value)


def _first(values: Any) -> Any:
    if isinstance(values, list) and values:
        return values[0]
    return None


# =============================================================================
# Preview Summary
# =============================================================================


def summarize(answers: Mapping[str, Any]) -> list[dict[str, str]]:
    """Label/value rows for the preview screen before publishing.

    Known keys come first in catalogue order with human labels; UI-only
    keys and tip toggles are dropped; empty values are skipped.

    Args:
        answers: Accumulated onboarding answers.

    Returns:
        List of {"key", "label", "value"} rows.
    """
    rows: list[dict[str, str]] = []
    for key, label in FIELD_LABELS.items():
        if key not in answers:
            continue
        value = answers[key]
        if key in ("companyTypePreference", "companyType"):
            value = COMPANY_TYPE_LABELS.get(value, value)
        shown = _display(value)
        if shown is not None:
            rows.append({"key": key, "label": label, "value": shown})

    for key, value in answers.items():
        if key in FIELD_LABELS or key in _UI_ONLY_KEYS or key.endswith("TipsDismissed"):
            continue
        if key in ("selectedPrompts", "promptAnswers", "coords", "customGender"):
            continue
        shown = _display(value)
        if shown is not None:
            rows.append({"key": key, "label": key, "value": shown})
    return rows


# =============================================================================
# Profile Columns
# =============================================================================


def profile_columns(role: str, answers: Mapping[str, Any]) -> dict[str, Any]:
    """Derive the denormalized Profile columns from an answer document.

    Args:
        role: candidate or hr.
        answers: Complete onboarding answers.

    Returns:
        Dict with company_type, location, display_name, headline, photo_url.
    """
    if role == ROLE_CANDIDATE:
        return {
            "company_type": answers.get("companyTypePreference"),
            "location": answers.get("location"),
            "display_name": answers.get("fullName"),
            "headline": _first(answers.get("roles")) or answers.get("latestEducation"),
            "photo_url": answers.get("profilePhotoUrl"),
        }

    designation = answers.get("designation")
    company = answers.get("companyName")
    headline = " @ ".join(part for part in (designation, company) if part) or None
    return {
        "company_type": answers.get("companyType"),
        "location": answers.get("officeLocation") or answers.get("address"),
        "display_name": answers.get("fullName"),
        "headline": headline,
        "photo_url": answers.get("brandImageUrl") or answers.get("profilePicUri"),
    }


# =============================================================================
# Swipe Cards
# =============================================================================

CANDIDATE_CARD_ROWS: tuple[tuple[str, str], ...] = (
    ("Job Title", "roles.0"),
    ("Education", "latestEducation"),
    ("Skills", "hardSkills"),
    ("Work Experience", "experiences.0"),
    ("Dream Company", "companyTypePreference"),
    ("Fun Fact", "superpower"),
    ("What motivates you?", "introText"),
    ("Looking for", "roles"),
    ("Location", "location"),
)

HR_CARD_ROWS: tuple[tuple[str, str], ...] = (
    ("Company Name", "companyName"),
    ("Industry", "industry"),
    ("Company Size", "companySize"),
    ("Role Hiring For", "rolesHiringFor"),
    ("Skills Needed", "hardSkills"),
    ("Perks", "perks"),
    ("Team Culture", "cultureTags"),
    ("Vision", "vision"),
    ("What excites you about candidates?", "aboutBlurb"),
    ("Fun Fact", "tagline"),
    ("Salary Range", "jobOpenings.0.salaryRange"),
    ("Location", "officeLocation"),
)


def _lookup(answers: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted path where numeric parts index into lists."""
    current: Any = answers
    for part in path.split("."):
        if isinstance(current, list):
            if not part.isdigit() or int(part) >= len(current):
                return None
            current = current[int(part)]
        elif isinstance(current, Mapping):
            current = current.get(part)
        else:
            return None
    return current


def build_card(
    *,
    user_id: str,
    role: str,
    answers: Mapping[str, Any],
    columns: Mapping[str, Any],
) -> dict[str, Any]:
    """Build the swipe card for one profile.

    Args:
        user_id: Profile owner id (string).
        role: Profile role.
        answers: Profile answer document.
        columns: Denormalized profile columns (see profile_columns).

    Returns:
        Card dict with header fields, labelled rows, and prompt answers.
    """
    layout = CANDIDATE_CARD_ROWS if role == ROLE_CANDIDATE else HR_CARD_ROWS
    rows: list[dict[str, str]] = []
    for label, path in layout:
        value = _lookup(answers, path)
        if path in ("companyTypePreference", "companyType"):
            value = COMPANY_TYPE_LABELS.get(value, value)
        shown = _display(value)
        if shown is not None:
            rows.append({"label": label, "value": shown})

    card: dict[str, Any] = {
        "user_id": user_id,
        "role": role,
        "name": columns.get("display_name"),
        "headline": columns.get("headline"),
        "company_type": columns.get("company_type"),
        "photo_url": columns.get("photo_url"),
        "location": columns.get("location"),
        "rows": rows,
        "prompts": list(answers.get("promptAnswersArray") or []),
    }
    if role == ROLE_CANDIDATE and answers.get("showAge", True) and answers.get("age"):
        card["age"] = answers["age"]
    if role == ROLE_HR and answers.get("showVideoOnCard") and answers.get("videoGreetingUrl"):
        card["video_url"] = answers["videoGreetingUrl"]
    return card


# =============================================================================
# Company Type Filter
# =============================================================================


def normalize_company_filter(value: str | None) -> str:
    """Map a feed filter value to a canonical company type or "all".

    Raises:
        ValidationError: If the value is not a known company type.
    """
    if value is None or not value.strip():
        return COMPANY_TYPE_ALL
    key = value.strip().lower()
    key = _COMPANY_TYPE_ALIASES.get(key, key)
    if key == COMPANY_TYPE_ALL:
        return key
    if key not in COMPANY_TYPE_LABELS or key == COMPANY_TYPE_OPEN:
        raise ValidationError(
            "Unknown company type filter",
            details=[{"field": "company_type", "msg": f"Unsupported value: {value}"}],
        )
    return key


def matches_company_type(profile_type: str | None, company_filter: str) -> bool:
    """Whether a profile passes the feed's company-type filter.

    Candidates open to every company type pass every filter; profiles with
    no company type only appear under "all".
    """
    if company_filter == COMPANY_TYPE_ALL:
        return True
    if profile_type == COMPANY_TYPE_OPEN:
        return True
    return _COMPANY_TYPE_ALIASES.get(profile_type or "", profile_type) == company_filter
