"""Onboarding wizard sessions.

Drives one user through the candidate or HR wizard: validates each step,
merges the step's answers into the session's answer bag, moves the cursor,
and finally turns the answers into a published profile.

Public functions mirror the wizard lifecycle:

1. start_onboarding — pick a role, fresh answer bag at step 0
2. submit_step / skip_step / go_back — move through the steps
3. get_summary — preview rows before publishing
4. complete_onboarding — build the profile, flag the user, close the session
5. abandon_onboarding — drop the answers and the session
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from metanoia.core.errors import InvalidStateError, NotFoundError, ValidationError
from metanoia.models.onboarding import OnboardingSession
from metanoia.models.profile import Profile
from metanoia.models.user import ROLE_CANDIDATE, ROLES, User
from metanoia.repositories.onboarding_repository import OnboardingRepository
from metanoia.repositories.profile_repository import ProfileRepository
from metanoia.repositories.user_repository import UserRepository
from metanoia.services.onboarding_answers import OnboardingAnswers
from metanoia.services.onboarding_steps import StepDefinition, find_step, get_steps
from metanoia.services.profile_cards import profile_columns, summarize

logger = structlog.get_logger()


# =============================================================================
# Result Dataclasses
# =============================================================================


@dataclass(frozen=True)
class OnboardingState:
    """Snapshot of a wizard session for the client."""

    role: str
    current_step: int
    total_steps: int
    step_key: str | None
    step_title: str | None
    completed_steps: tuple[str, ...]
    answers: dict[str, Any]

    @property
    def progress(self) -> float:
        """Fraction of steps submitted or skipped (0.0 - 1.0)."""
        if self.total_steps == 0:
            return 0.0
        return len(self.completed_steps) / self.total_steps

    @property
    def ready_to_complete(self) -> bool:
        return len(self.completed_steps) == self.total_steps


# =============================================================================
# Helpers
# =============================================================================


def _state(session: OnboardingSession) -> OnboardingState:
    steps = get_steps(session.role)
    current = steps[session.current_step] if session.current_step < len(steps) else None
    # Keep completed steps in wizard order regardless of submission order
    completed = tuple(
        step.key for step in steps if step.key in set(session.completed_steps)
    )
    return OnboardingState(
        role=session.role,
        current_step=session.current_step,
        total_steps=len(steps),
        step_key=current.key if current else None,
        step_title=current.title if current else None,
        completed_steps=completed,
        answers=dict(session.answers),
    )


async def _require_session(db: AsyncSession, user: User) -> OnboardingSession:
    session = await OnboardingRepository.get(db, user.id)
    if session is None:
        raise NotFoundError("Onboarding session")
    return session


def _resolve_step(session: OnboardingSession, step_key: str) -> tuple[int, StepDefinition]:
    found = find_step(session.role, step_key)
    if found is None:
        raise NotFoundError("Onboarding step", step_key)
    index, step = found
    if index > session.current_step:
        raise InvalidStateError(
            f"Finish the earlier steps before '{step.title}'"
        )
    return index, step


async def _record_step(
    db: AsyncSession,
    session: OnboardingSession,
    index: int,
    step: StepDefinition,
    values: dict[str, Any],
) -> OnboardingState:
    answers = OnboardingAnswers(session.answers)
    answers.update(values)
    answers.set_answer("role", session.role)

    completed = list(session.completed_steps)
    if step.key not in completed:
        completed.append(step.key)

    session = await OnboardingRepository.save(
        db,
        session,
        current_step=max(session.current_step, index + 1),
        completed_steps=completed,
        answers=answers.as_dict(),
    )
    return _state(session)


# =============================================================================
# Public API
# =============================================================================


async def start_onboarding(db: AsyncSession, user: User, role: str) -> OnboardingState:
    """Start (or restart) the wizard for ``role``.

    Any unfinished session is discarded along with its answers.

    Args:
        db: Async database session.
        user: Current user.
        role: candidate or hr.

    Returns:
        State at step 0.

    Raises:
        ValidationError: If role is unknown.
        InvalidStateError: If the user already completed onboarding.
    """
    if role not in ROLES:
        raise ValidationError(
            "Unknown role", details=[{"field": "role", "msg": f"Unsupported: {role}"}]
        )
    if user.is_onboarded:
        raise InvalidStateError("Onboarding is already complete")

    answers = OnboardingAnswers({"role": role})
    session = await OnboardingRepository.start(
        db, user.id, role=role, answers=answers.as_dict()
    )
    await UserRepository.update(db, user.id, role=role)
    logger.info("onboarding_started", user_id=str(user.id), role=role)
    return _state(session)


async def get_onboarding(db: AsyncSession, user: User) -> OnboardingState:
    """Current wizard state.

    Raises:
        NotFoundError: If the user has no session.
    """
    return _state(await _require_session(db, user))


async def submit_step(
    db: AsyncSession,
    user: User,
    step_key: str,
    payload: dict[str, Any],
) -> OnboardingState:
    """Validate a step payload and merge it into the answer bag.

    The step must be the current one or an earlier one (editing after going
    back). The cursor never moves backwards on submit.

    Raises:
        NotFoundError: No session, or unknown step key.
        InvalidStateError: Step is ahead of the cursor.
        StepValidationError: Payload failed the step's rules.
    """
    session = await _require_session(db, user)
    index, step = _resolve_step(session, step_key)
    values = step.validate(payload)
    state = await _record_step(db, session, index, step, values)
    logger.info(
        "onboarding_step_submitted",
        user_id=str(user.id),
        step=step.key,
        current_step=state.current_step,
    )
    return state


async def skip_step(db: AsyncSession, user: User, step_key: str) -> OnboardingState:
    """Skip an optional step, storing its skip defaults.

    Raises:
        NotFoundError: No session, or unknown step key.
        InvalidStateError: Step is ahead of the cursor or not skippable.
    """
    session = await _require_session(db, user)
    index, step = _resolve_step(session, step_key)
    if not step.skippable:
        raise InvalidStateError(f"'{step.title}' can't be skipped")
    state = await _record_step(db, session, index, step, dict(step.skip_answers))
    logger.info("onboarding_step_skipped", user_id=str(user.id), step=step.key)
    return state


async def go_back(db: AsyncSession, user: User) -> OnboardingState:
    """Move the cursor back one step (answers are kept)."""
    session = await _require_session(db, user)
    session = await OnboardingRepository.save(
        db,
        session,
        current_step=max(session.current_step - 1, 0),
        completed_steps=list(session.completed_steps),
        answers=dict(session.answers),
    )
    return _state(session)


async def get_summary(db: AsyncSession, user: User) -> list[dict[str, str]]:
    """Preview rows of everything answered so far."""
    session = await _require_session(db, user)
    return summarize(session.answers)


async def abandon_onboarding(db: AsyncSession, user: User) -> None:
    """Throw away the answers and the session (exit without publishing).

    Raises:
        NotFoundError: If the user has no session.
    """
    session = await _require_session(db, user)
    await OnboardingRepository.delete(db, user.id)
    logger.info("onboarding_abandoned", user_id=str(user.id), role=session.role)


def build_profile_document(
    role: str, answers: dict[str, Any], completed_at: datetime
) -> dict[str, Any]:
    """Merge the answer bag with the top-level profile fields.

    Args:
        role: candidate or hr.
        answers: Accumulated answers.
        completed_at: Completion timestamp.

    Returns:
        The profile document stored in Profile.data.
    """
    document = {
        key: value
        for key, value in answers.items()
        if not key.endswith("TipsDismissed")
    }
    if role == ROLE_CANDIDATE:
        company_type = answers.get("companyTypePreference")
        location = answers.get("location")
    else:
        company_type = answers.get("companyType")
        location = answers.get("officeLocation") or answers.get("address")
    document.update(
        {
            "role": role,
            "companyType": company_type,
            "location": location,
            "completed": True,
            "onboardingCompletedAt": completed_at.isoformat(),
        }
    )
    return document


async def complete_onboarding(db: AsyncSession, user: User) -> Profile:
    """Publish the profile built from the answers and close the session.

    Args:
        db: Async database session.
        user: Current user.

    Returns:
        The stored profile.

    Raises:
        NotFoundError: If the user has no session.
        InvalidStateError: If any step is still missing.
    """
    session = await _require_session(db, user)
    state = _state(session)
    if not state.ready_to_complete:
        missing = [
            step.key for step in get_steps(session.role)
            if step.key not in state.completed_steps
        ]
        raise InvalidStateError(f"Steps still missing: {', '.join(missing)}")

    now = datetime.now(UTC)
    document = build_profile_document(session.role, dict(session.answers or {}), now)
    profile = await ProfileRepository.upsert(
        db,
        user.id,
        role=session.role,
        data=document,
        is_published=True,
        completed_at=now,
        **profile_columns(session.role, document),
    )
    await UserRepository.update(db, user.id, role=session.role, onboarded_at=now)

    await OnboardingRepository.delete(db, user.id)
    logger.info("onboarding_completed", user_id=str(user.id), role=session.role)
    return profile
