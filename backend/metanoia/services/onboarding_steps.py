"""Onboarding step catalogue and per-step validation.

Each wizard screen is a StepDefinition. Validating a step payload yields
the normalized answers that step owns (trimmed text, de-duplicated chip
lists, derived values such as age) or raises StepValidationError listing
every failing field at once.

Answers returned with a None value mean "clear this key"; the accumulator
drops them, so emptying an optional field after going back removes it.

Candidate wizard: 9 steps. HR wizard: 12 steps (video and job opening
may be skipped).
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from datetime import date
from typing import Any

from metanoia.core.errors import StepValidationError
from metanoia.core.validators import (
    is_alpha_name,
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
from metanoia.models.user import ROLE_CANDIDATE, ROLE_HR

# =============================================================================
# Choice Lists
# =============================================================================

CANDIDATE_COMPANY_TYPES = ("mnc", "middle_enterprise", "startup", "open_to_all")
HR_COMPANY_TYPES = ("mnc", "middle_enterprise", "startup")

PRONOUNS = (
    "He/Him",
    "She/Her",
    "They/Them",
    "He/They",
    "She/They",
    "Prefer not to say",
)

GENDERS = ("woman", "male", "nonbinary", "prefer_not_say")
GENDER_OTHER = "other"

COMPANY_SIZES = (
    "1-10",
    "11-50",
    "51-200",
    "201-500",
    "501-1000",
    "1001-5000",
    "5001-10000",
    "10000+",
)

WORK_TYPES = ("onsite", "hybrid", "remote")
JOB_TYPES = ("fullTime", "partTime", "internship", "contract", "freelance")

PROMPTS = (
    "I see myself in the next 5 years…",
    "My biggest strength",
    "My biggest weakness",
    "My love language at work",
    "Proudest professional accomplishment",
    "Introverted or extroverted?",
    "Give me a deadline and I'll…",
    "If I could design my dream job, it would include…",
    "To me, success at work feels like…",
    "My toxic trait at work? I actually love Mondays.",
    "In group projects, I'm always the one who…",
    "The one tool or software I can't live without is…",
    "If I could have lunch with a CEO, I'd ask them…",
    "I think work should feel like…",
    "My biggest work superpower is...",
    "My most underrated skill is...",
    "I'm the go-to person for...",
    "My biggest professional challenge was...",
    "If I could master one new skill instantly...",
    "A coworker would describe me as...",
    "My favorite way to learn is...",
    "The work task I secretly love...",
    "If I could join any project in the world...",
    "I'm most motivated when...",
    "My dream team would...",
    "I bring energy to meetings by...",
    "I geek out over...",
    "My ideal project looks like...",
)

REQUIRED_PROMPT_COUNT = 3
MAX_PROMPT_ANSWER_LENGTH = 140
MAX_INTRO_LENGTH = 100

LOCATION_RADIUS_DEFAULT = 25
LOCATION_RADIUS_MIN = 5
LOCATION_RADIUS_MAX = 100
LOCATION_RADIUS_STEP = 5
MAX_RECENT_LOCATIONS = 3
MAX_PRIORITY_ROLES = 3

# UI-only flags ("don't show these tips again"); stored but never validated
_TIPS_FLAG = re.compile(r"^[a-zA-Z0-9]*TipsDismissed$")

# Upper bound on free-text answers without a tighter rule
_MAX_TEXT = 2000


# =============================================================================
# Form Helper
# =============================================================================


class StepForm:
    """Collects normalized answers and field errors for one step payload.

    Every accessor marks the field as consumed; result() rejects payload
    keys no rule consumed so typos surface instead of being silently lost.
    """

    def __init__(self, step: str, payload: Mapping[str, Any]) -> None:
        self.step = step
        self.payload = payload
        self.answers: dict[str, Any] = {}
        self.errors: dict[str, str] = {}
        self._consumed: set[str] = set()

    # -- primitives ----------------------------------------------------------

    def error(self, name: str, message: str) -> None:
        # First error per field wins
        self.errors.setdefault(name, message)

    def take(self, name: str) -> Any:
        self._consumed.add(name)
        return self.payload.get(name)

    def skip(self, name: str) -> None:
        """Accept ``name`` in the payload without storing it."""
        self._consumed.add(name)

    def set(self, name: str, value: Any) -> None:
        self.answers[name] = value

    @property
    def consumed(self) -> frozenset[str]:
        return frozenset(self._consumed)

    # -- typed fields ----------------------------------------------------------

    def text(
        self,
        name: str,
        *,
        required: bool = False,
        min_length: int = 1,
        max_length: int = _MAX_TEXT,
        check: Callable[[str], bool] | None = None,
        message: str | None = None,
        store: bool = True,
    ) -> str | None:
        """Trimmed text field.

        Numbers are accepted and converted to text (years, experience).
        Blank optional fields store None so a previous value is cleared.
        """
        raw = self.take(name)
        if isinstance(raw, bool) or (
            raw is not None and not isinstance(raw, str | int | float)
        ):
            self.error(name, message or "Must be text")
            return None
        value = "" if raw is None else str(raw).strip()

        if not value:
            if required:
                self.error(name, message or "This field is required")
            elif store:
                self.set(name, None)
            return None

        if len(value) < min_length:
            self.error(name, message or f"Must be at least {min_length} characters")
            return None
        if len(value) > max_length:
            self.error(name, message or f"Must be at most {max_length} characters")
            return None
        if check is not None and not check(value):
            self.error(name, message or "Invalid value")
            return None

        if store:
            self.set(name, value)
        return value

    def url(
        self,
        name: str,
        *,
        required: bool = False,
        check: Callable[[str], bool] = is_url,
        message: str = "Enter a valid URL",
    ) -> str | None:
        return self.text(
            name, required=required, max_length=2048, check=check, message=message
        )

    def choice(
        self,
        name: str,
        choices: tuple[str, ...],
        *,
        required: bool = False,
        message: str | None = None,
    ) -> str | None:
        return self.text(
            name,
            required=required,
            check=lambda value: value in choices,
            message=message or f"Choose one of: {', '.join(choices)}",
        )

    def flag(self, name: str, *, default: bool | None = None) -> bool | None:
        """Boolean toggle; absent means ``default`` (None clears)."""
        raw = self.take(name)
        if raw is None:
            self.set(name, default)
            return default
        if not isinstance(raw, bool):
            self.error(name, "Must be true or false")
            return None
        self.set(name, raw)
        return raw

    def integer(
        self,
        name: str,
        *,
        minimum: int | None = None,
        maximum: int | None = None,
        default: int | None = None,
    ) -> int | None:
        raw = self.take(name)
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            self.set(name, default)
            return default
        try:
            if isinstance(raw, bool):
                raise ValueError
            value = int(str(raw).strip())
        except ValueError:
            self.error(name, "Must be a whole number")
            return None
        if minimum is not None and value < minimum:
            self.error(name, f"Must be at least {minimum}")
            return None
        if maximum is not None and value > maximum:
            self.error(name, f"Must be at most {maximum}")
            return None
        self.set(name, value)
        return value

    def chips(
        self,
        name: str,
        *,
        min_items: int = 0,
        max_items: int | None = None,
        max_item_length: int | None = None,
        label: str = "Item",
        message: str | None = None,
    ) -> list[str]:
        """Chip list, trimmed and de-duplicated case-insensitively."""
        raw = self.take(name)
        if raw is not None and not isinstance(raw, list | tuple):
            self.error(name, "Must be a list")
            return []
        try:
            chips = normalize_chips(
                raw,
                max_item_length=max_item_length,
                max_items=max_items,
                label=label,
            )
        except ValueError as exc:
            self.error(name, str(exc))
            return []
        if len(chips) < min_items:
            self.error(
                name, message or f"Add at least {min_items} {label.lower()}"
            )
            return []
        self.set(name, chips)
        return chips

    def url_list(
        self,
        name: str,
        *,
        max_items: int = 10,
        message: str = "Enter valid URLs",
    ) -> list[str]:
        """List of links, trimmed; only exact duplicates are dropped.

        URL paths are case-sensitive, so two links differing in case are
        both kept.
        """
        raw = self.take(name)
        if raw is None:
            raw = []
        if not isinstance(raw, list | tuple):
            self.error(name, "Must be a list")
            return []

        links: list[str] = []
        for item in raw:
            if not isinstance(item, str):
                self.error(name, message)
                return []
            link = item.strip()
            if not link or link in links:
                continue
            if len(link) > 2048 or not is_url(link):
                self.error(name, message)
                return []
            links.append(link)
        if len(links) > max_items:
            self.error(name, f"Add at most {max_items} links")
            return []
        self.set(name, links)
        return links

    def records(
        self,
        name: str,
        rules: Callable[["StepForm"], None],
        *,
        max_items: int = 10,
    ) -> list[dict[str, Any]]:
        """List of nested objects, each validated by ``rules``.

        Nested errors are reported as ``name[index].field``.
        """
        raw = self.take(name)
        if raw is None:
            raw = []
        if not isinstance(raw, list | tuple):
            self.error(name, "Must be a list")
            return []
        if len(raw) > max_items:
            self.error(name, f"Add at most {max_items} entries")
            return []

        records: list[dict[str, Any]] = []
        for index, item in enumerate(raw):
            if not isinstance(item, Mapping):
                self.error(f"{name}[{index}]", "Must be an object")
                continue
            sub = StepForm(self.step, item)
            rules(sub)
            sub.reject_unknown()
            for field_name, msg in sub.errors.items():
                self.error(f"{name}[{index}].{field_name}", msg)
            records.append(
                {key: value for key, value in sub.answers.items() if value is not None}
            )
        self.set(name, records)
        return records

    # -- completion ----------------------------------------------------------

    def reject_unknown(self) -> None:
        for name in self.payload:
            if name in self._consumed:
                continue
            if _TIPS_FLAG.match(name) and isinstance(self.payload[name], bool):
                self.set(name, self.payload[name])
                continue
            self.error(name, "Unknown field")

    def result(self) -> dict[str, Any]:
        """Return the answers, or raise with every collected field error.

        Raises:
            StepValidationError: If any field failed.
        """
        self.reject_unknown()
        if self.errors:
            raise StepValidationError(self.step, self.errors)
        return dict(self.answers)


# =============================================================================
# Step Definition
# =============================================================================


@dataclass(frozen=True)
class StepDefinition:
    """One wizard screen.

    Attributes:
        key: Stable identifier used in URLs.
        title: Screen title shown in the client.
        rules: Validation routine filling a StepForm.
        skippable: Whether the step may be skipped.
        skip_answers: Answers stored when the step is skipped.
        unpack: Turns stored answers back into the payload the step expects,
            for steps whose stored shape differs from what is submitted.
    """

    key: str
    title: str
    rules: Callable[[StepForm], None]
    skippable: bool = False
    skip_answers: Mapping[str, Any] = field(default_factory=dict)
    unpack: Callable[[dict[str, Any]], dict[str, Any]] | None = None

    @cached_property
    def fields(self) -> frozenset[str]:
        """Payload keys the step reads."""
        form = StepForm(self.key, {})
        self.rules(form)
        return form.consumed

    def payload_from(self, answers: Mapping[str, Any]) -> dict[str, Any]:
        """Rebuild this step's payload from stored answers."""
        payload = {name: answers[name] for name in self.fields if name in answers}
        return self.unpack(payload) if self.unpack else payload

    def validate(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Validate a payload and return the answers to merge.

        Args:
            payload: Field values submitted for this step.

        Returns:
            Normalized answers; None values clear the key.

        Raises:
            StepValidationError: If any field fails its rule.
        """
        form = StepForm(self.key, payload)
        self.rules(form)
        return form.result()


# =============================================================================
# Candidate Steps
# =============================================================================


def _candidate_company_location(form: StepForm) -> None:
    form.choice(
        "companyTypePreference",
        CANDIDATE_COMPANY_TYPES,
        required=True,
        message="Pick the kind of company you want to work at",
    )
    form.text("location", required=True, max_length=255, message="Location is required")
    form.flag("openToRemote")
    form.flag("relocate")
    form.text("whyLocation", max_length=300)


def _candidate_name_birthday(form: StepForm) -> None:
    form.text(
        "fullName",
        required=True,
        min_length=2,
        max_length=100,
        message="Name must be at least 2 characters",
    )
    form.text("nickname", max_length=50)
    form.choice("pronouns", PRONOUNS)
    form.flag("showAge", default=True)

    birthday = form.text("birthday", required=True, max_length=10, store=False)
    if birthday is not None:
        try:
            _born, age = parse_birthday(birthday, today=date.today())
        except ValueError as exc:
            form.error("birthday", str(exc))
        else:
            form.set("birthday", birthday)
            form.set("age", age)


def _candidate_gender(form: StepForm) -> None:
    gender = form.choice(
        "gender",
        (*GENDERS, GENDER_OTHER),
        required=True,
        message="Pick how you identify",
    )
    if gender == GENDER_OTHER:
        custom = form.text(
            "customGender",
            required=True,
            min_length=2,
            max_length=50,
            message="Tell us in at least 2 characters",
            store=False,
        )
        if custom is not None:
            form.set("gender", custom)
    else:
        form.skip("customGender")
    form.text("genderPronoun", max_length=30)


def _unpack_gender(payload: dict[str, Any]) -> dict[str, Any]:
    # A self-described gender is stored in place of "other"
    gender = payload.get("gender")
    if isinstance(gender, str) and gender not in (*GENDERS, GENDER_OTHER):
        return {**payload, "gender": GENDER_OTHER, "customGender": gender}
    return payload


def _candidate_education_experience(form: StepForm) -> None:
    form.text(
        "latestEducation",
        required=True,
        min_length=3,
        max_length=200,
        message="Add your latest education",
    )
    form.text("passingYear", required=True, max_length=10, message="Passing year is required")
    form.chips(
        "projects", min_items=1, max_items=20, max_item_length=500, label="Project"
    )
    form.chips(
        "experiences",
        min_items=1,
        max_items=20,
        max_item_length=500,
        label="Experience",
    )
    form.chips("skills", min_items=1, max_items=30, max_item_length=32, label="Skill")
    form.text("gpa", max_length=10)
    form.text("honors", max_length=300)


def _candidate_roles_skills(form: StepForm) -> None:
    for name, label in (
        ("roles", "Role"),
        ("hardSkills", "Hard skill"),
        ("softSkills", "Soft skill"),
        ("specificSkills", "Specific skill"),
    ):
        form.chips(name, min_items=1, max_items=10, max_item_length=40, label=label)
    form.chips("software", max_items=10, max_item_length=40, label="Software")
    form.chips("otherStrengths", max_items=10, max_item_length=40, label="Strength")
    form.text("superpower", max_length=100)


def _candidate_intro(form: StepForm) -> None:
    form.text(
        "introText",
        required=True,
        max_length=MAX_INTRO_LENGTH,
        message=f"Write a short intro (max {MAX_INTRO_LENGTH} characters)",
    )
    form.url("videoUrl")
    form.url("videoCoverImage")


def _candidate_prompts(form: StepForm) -> None:
    # promptAnswersArray is derived from the other two fields
    form.skip("promptAnswersArray")
    raw_answers = form.take("promptAnswers")
    selected = form.chips("selectedPrompts", label="Prompt")
    if len(selected) != REQUIRED_PROMPT_COUNT:
        form.error("selectedPrompts", f"Pick exactly {REQUIRED_PROMPT_COUNT} prompts")
        return
    unknown = [prompt for prompt in selected if prompt not in PROMPTS]
    if unknown:
        form.error("selectedPrompts", f"Unknown prompt: {unknown[0]}")
        return

    if not isinstance(raw_answers, Mapping):
        form.error("promptAnswers", "Answer each selected prompt")
        return

    answers: dict[str, str] = {}
    for prompt in selected:
        answer = raw_answers.get(prompt)
        text = answer.strip() if isinstance(answer, str) else ""
        if not text:
            form.error("promptAnswers", f"Answer the prompt: {prompt}")
        elif len(text) > MAX_PROMPT_ANSWER_LENGTH:
            form.error(
                "promptAnswers",
                f"Answers must be at most {MAX_PROMPT_ANSWER_LENGTH} characters",
            )
        else:
            answers[prompt] = text

    form.set("promptAnswers", answers)
    form.set(
        "promptAnswersArray",
        [{"prompt": prompt, "answer": answers.get(prompt, "")} for prompt in selected],
    )


def _candidate_links(form: StepForm) -> None:
    form.url("cvUrl", required=True, message="Add a valid CV link")
    form.url("linkedInUrl")
    form.url("portfolioUrl")
    form.url("githubUrl")
    form.url("otherLink")


def _candidate_profile_photo(form: StepForm) -> None:
    form.url(
        "profilePhotoUrl",
        required=True,
        check=is_image_url,
        message="Add a profile photo (jpg, png, gif, webp...)",
    )


CANDIDATE_STEPS: tuple[StepDefinition, ...] = (
    StepDefinition("company_location", "Company & Location", _candidate_company_location),
    StepDefinition("name_birthday", "Your Name & Birthday", _candidate_name_birthday),
    StepDefinition("gender", "Gender", _candidate_gender, unpack=_unpack_gender),
    StepDefinition(
        "education_experience", "Education & Experience", _candidate_education_experience
    ),
    StepDefinition("roles_skills", "Roles & Skills", _candidate_roles_skills),
    StepDefinition("intro", "Intro & Video", _candidate_intro),
    StepDefinition("prompts", "Fun Prompts", _candidate_prompts),
    StepDefinition("links", "Links & Docs", _candidate_links),
    StepDefinition("profile_photo", "Profile Photo", _candidate_profile_photo),
)


# =============================================================================
# HR Steps
# =============================================================================


def _hr_location(form: StepForm) -> None:
    address = form.text("address", max_length=255)

    coords = form.take("coords")
    if coords is None:
        form.set("coords", None)
    elif not _valid_coords(coords):
        form.error("coords", "Coordinates need a latitude and longitude")
        coords = None
    else:
        form.set(
            "coords",
            {"latitude": float(coords["latitude"]), "longitude": float(coords["longitude"])},
        )

    if address is None and coords is None and "address" not in form.errors:
        form.error("address", "Enter an address or share your location")

    radius = form.integer("locationRadius", default=LOCATION_RADIUS_DEFAULT)
    if radius is not None:
        form.set("locationRadius", clamp_radius(radius))

    form.choice("companyType", HR_COMPANY_TYPES)
    form.flag("teleport", default=False)
    form.chips(
        "recentLocations",
        max_items=MAX_RECENT_LOCATIONS,
        max_item_length=255,
        label="Location",
    )


def _valid_coords(coords: Any) -> bool:
    if not isinstance(coords, Mapping):
        return False
    try:
        latitude = float(coords["latitude"])
        longitude = float(coords["longitude"])
    except (KeyError, TypeError, ValueError):
        return False
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def clamp_radius(radius: int) -> int:
    """Snap a search radius to the slider: 5..100 km in steps of 5."""
    bounded = max(LOCATION_RADIUS_MIN, min(LOCATION_RADIUS_MAX, radius))
    return int(round(bounded / LOCATION_RADIUS_STEP) * LOCATION_RADIUS_STEP)


def _hr_identity(form: StepForm) -> None:
    form.text(
        "fullName",
        required=True,
        min_length=2,
        max_length=100,
        check=is_alpha_name,
        message="Enter your full name (letters only, at least 2 characters)",
    )
    form.text(
        "designation",
        required=True,
        min_length=2,
        max_length=100,
        message="Designation must be at least 2 characters",
    )
    form.text(
        "companyName",
        required=True,
        min_length=2,
        max_length=150,
        message="Company name must be at least 2 characters",
    )
    form.url("linkedIn", check=is_linkedin_url, message="Enter a valid LinkedIn URL")
    form.chips("hiringFor", max_items=20, max_item_length=40, label="Role")
    form.url("companyLogoUri")
    form.url("profilePicUri")


def _hr_brand(form: StepForm) -> None:
    form.url(
        "brandImageUrl",
        required=True,
        check=is_image_url,
        message="Add a brand image link (jpg, png, gif, webp...)",
    )
    form.text("tagline", max_length=100)
    form.url("website", check=is_website, message="Enter a valid website")
    form.text("about", max_length=1000)
    form.flag("featured")


def _hr_company(form: StepForm) -> None:
    form.text(
        "companyName",
        required=True,
        min_length=2,
        max_length=150,
        message="Company name must be at least 2 characters",
    )
    form.text(
        "industry",
        required=True,
        min_length=2,
        max_length=100,
        message="Industry must be at least 2 characters",
    )
    form.choice("companySize", COMPANY_SIZES, required=True, message="Pick a company size")
    form.text(
        "foundedIn",
        max_length=4,
        check=is_founded_year,
        message="Enter a 4-digit year after 1800, not in the future",
    )
    form.url("websiteUrl", check=is_website, message="Enter a valid website")
    form.chips("cultureTags", max_items=15, max_item_length=40, label="Culture tag")
    form.chips("perks", max_items=20, max_item_length=40, label="Perk")
    form.flag("remoteFirst")
    form.flag("diversity")
    form.flag("verified")


def _hr_mission(form: StepForm) -> None:
    form.text(
        "companyMission",
        required=True,
        min_length=4,
        max_length=100,
        message="Mission must be 4 to 100 characters",
    )
    form.text(
        "vision",
        min_length=4,
        max_length=100,
        message="Vision must be 4 to 100 characters",
    )
    form.chips("coreValues", max_items=10, max_item_length=40, label="Core value")
    form.chips("hashtags", max_items=10, max_item_length=40, label="Hashtag")


def _hr_office(form: StepForm) -> None:
    form.text(
        "officeLocation",
        required=True,
        min_length=2,
        max_length=255,
        message="Office location must be at least 2 characters",
    )
    form.choice("workType", WORK_TYPES, required=True, message="Pick a work type")
    offices = form.chips(
        "satelliteOffices", max_items=20, max_item_length=255, label="Office"
    )
    if any(len(office) < 2 for office in offices):
        form.error("satelliteOffices", "Office names must be at least 2 characters")
    form.text("timezone", max_length=64)
    form.flag("relocationSupport")
    form.text("remotePolicyNote", max_length=300)


def _hr_roles(form: StepForm) -> None:
    roles = form.chips(
        "rolesHiringFor",
        min_items=1,
        max_items=20,
        max_item_length=39,
        label="Role",
        message="Add at least one role you're hiring for",
    )
    priority = form.chips(
        "priorityRoles", max_items=MAX_PRIORITY_ROLES, max_item_length=39, label="Priority role"
    )
    role_keys = {role.casefold() for role in roles}
    if roles and any(role.casefold() not in role_keys for role in priority):
        form.error("priorityRoles", "Priority roles must be among the roles you listed")

    form.chips("mustHaveSkills", max_items=20, max_item_length=32, label="Skill")
    form.chips("niceToHaveSkills", max_items=20, max_item_length=32, label="Skill")
    form.flag("allowRemote")
    form.flag("allowRelocation")
    form.flag("diversityHiring")
    form.flag("fresherFriendly")

    job_type = form.choice("jobType", JOB_TYPES)
    contract_length = form.text("contractLength", max_length=50)
    if job_type != "contract" and contract_length is not None:
        form.set("contractLength", None)

    minimum = form.integer("minExperience", minimum=0, maximum=60)
    maximum = form.integer("maxExperience", minimum=0, maximum=60)
    if minimum is not None and maximum is not None and minimum > maximum:
        form.error("maxExperience", "Max experience can't be below min experience")


def _hr_skills(form: StepForm) -> None:
    form.chips(
        "hardSkills",
        min_items=1,
        max_items=30,
        max_item_length=32,
        label="Skill",
        message="Add at least one required skill",
    )
    form.chips("softSkills", max_items=20, max_item_length=32, label="Skill")
    form.chips("toolsRequired", max_items=20, max_item_length=32, label="Tool")
    form.chips("certifications", max_items=20, max_item_length=60, label="Certification")
    form.chips("languages", max_items=20, max_item_length=32, label="Language")
    form.chips("preferredDegrees", max_items=20, max_item_length=60, label="Degree")
    form.chips("preferredLanguages", max_items=20, max_item_length=32, label="Language")
    form.text("minEducation", max_length=100)
    form.flag("mustHaveAll")
    form.flag("openToFreshers")


def _hr_perks(form: StepForm) -> None:
    perks = form.chips(
        "perks",
        min_items=1,
        max_items=20,
        max_item_length=40,
        label="Perk",
        message="Add at least one perk",
    )
    highlight = form.text("highlight", max_length=40)
    if highlight is not None and perks and highlight.casefold() not in {
        perk.casefold() for perk in perks
    }:
        form.error("highlight", "Highlight one of your listed perks")
    form.flag("showPerksOnCard")
    form.text("customPerkNotes", max_length=300)
    form.flag("ecoFriendly")
    form.url_list("perksImages", message="Perk images must be valid links")


_VIDEO_FIELDS = (
    "videoGreetingUrl",
    "videoThumbnailUrl",
    "videoCaption",
    "transcript",
    "showVideoOnCard",
)


def _hr_video(form: StepForm) -> None:
    form.url(
        "videoGreetingUrl",
        check=is_video_url,
        message="Use a YouTube, Vimeo, Loom, Drive, Dropbox or direct video link",
    )
    form.url(
        "videoThumbnailUrl",
        check=is_thumbnail_url,
        message="Thumbnail must be a jpg, png or gif link",
    )
    form.text("videoCaption", max_length=150)
    form.text("transcript", max_length=_MAX_TEXT)
    form.flag("showVideoOnCard")


def _job_opening(form: StepForm) -> None:
    form.text("jobTitle", required=True, max_length=100, message="Job title is required")
    form.text(
        "description", required=True, max_length=_MAX_TEXT, message="Description is required"
    )
    form.text(
        "experienceRequired",
        required=True,
        max_length=50,
        message="Experience required is required",
    )
    form.text("salaryRange", max_length=50)
    form.text("location", max_length=255)
    form.url("jdPdfUrl", check=is_pdf_url, message="Enter a valid PDF or drive link")
    form.url("applyLink")
    form.integer("openingsCount", minimum=1, maximum=1000)
    form.chips("skills", max_items=20, max_item_length=24, label="Skill")
    form.flag("urgent")
    form.flag("highlight")


def _hr_job_opening(form: StepForm) -> None:
    form.records("jobOpenings", _job_opening)


def _hr_links(form: StepForm) -> None:
    linkedin = form.url(
        "linkedinUrl", check=is_linkedin_url, message="Enter a valid LinkedIn URL"
    )
    careers = form.url("careersPageUrl")
    others = form.url_list("otherLinks", message="Every link must be a valid URL")

    if (
        linkedin is None
        and careers is None
        and not others
        and not {"linkedinUrl", "careersPageUrl", "otherLinks"} & set(form.errors)
    ):
        form.error("linkedinUrl", "Add at least one link")

    form.text("aboutBlurb", max_length=300)
    form.url("featuredLink")


HR_STEPS: tuple[StepDefinition, ...] = (
    StepDefinition("location", "Company Location", _hr_location),
    StepDefinition("identity", "About You", _hr_identity),
    StepDefinition("brand", "Brand Image", _hr_brand),
    StepDefinition("company", "Company Details", _hr_company),
    StepDefinition("mission", "Mission & Vision", _hr_mission),
    StepDefinition("office", "Office & Work Type", _hr_office),
    StepDefinition("roles", "Roles Hiring For", _hr_roles),
    StepDefinition("skills", "Skills Required", _hr_skills),
    StepDefinition("perks", "Perks & Benefits", _hr_perks),
    StepDefinition(
        "video",
        "Video Greeting",
        _hr_video,
        skippable=True,
        skip_answers={name: None for name in _VIDEO_FIELDS},
    ),
    StepDefinition(
        "job_opening",
        "Job Opening",
        _hr_job_opening,
        skippable=True,
        skip_answers={"jobOpenings": []},
    ),
    StepDefinition("links", "Links", _hr_links),
)


# =============================================================================
# Lookup
# =============================================================================

_STEPS_BY_ROLE: dict[str, tuple[StepDefinition, ...]] = {
    ROLE_CANDIDATE: CANDIDATE_STEPS,
    ROLE_HR: HR_STEPS,
}


def get_steps(role: str) -> tuple[StepDefinition, ...]:
    """Return the ordered steps of the wizard for ``role``.

    Raises:
        KeyError: If role is not candidate or hr.
    """
    return _STEPS_BY_ROLE[role]


def find_step(role: str, key: str) -> tuple[int, StepDefinition] | None:
    """Return (index, step) for ``key`` in the role's wizard, or None."""
    for index, step in enumerate(get_steps(role)):
        if step.key == key:
            return index, step
    return None
