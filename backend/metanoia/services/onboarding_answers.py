"""Onboarding answer accumulator.

A flat key-value bag shared by every step of one onboarding run. There is
no invariant beyond "last write wins": each step writes the keys it owns
and later writes replace earlier ones. Writing None removes the key, so a
step can clear an optional field the user emptied after going back.
"""

from collections.abc import Iterator, Mapping
from typing import Any


class OnboardingAnswers:
    """Mutable answer bag for a single onboarding session.

    Example:
        answers = OnboardingAnswers({"role": "candidate"})
        answers.set_answer("fullName", "Asha Rao")
        answers.set_answer("nickname", None)  # removes nickname
        answers.as_dict()  # {"role": "candidate", "fullName": "Asha Rao"}
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._answers: dict[str, Any] = {}
        if initial:
            self.update(initial)

    def set_answer(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value.

        Args:
            key: Answer name (non-empty string).
            value: Answer value; None removes the key.

        Raises:
            ValueError: If key is empty or not a string.
        """
        if not isinstance(key, str) or not key:
            msg = "Answer key must be a non-empty string"
            raise ValueError(msg)
        if value is None:
            self._answers.pop(key, None)
        else:
            self._answers[key] = value

    def update(self, values: Mapping[str, Any]) -> None:
        """Apply set_answer for every item, in iteration order."""
        for key, value in values.items():
            self.set_answer(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        return self._answers.get(key, default)

    def reset_answers(self) -> None:
        """Drop every answer."""
        self._answers.clear()

    def as_dict(self) -> dict[str, Any]:
        """Shallow copy of the answers, safe to persist or serialize."""
        return dict(self._answers)

    def __contains__(self, key: object) -> bool:
        return key in self._answers

    def __len__(self) -> int:
        return len(self._answers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._answers)

    def __repr__(self) -> str:
        return f"OnboardingAnswers({self._answers!r})"
