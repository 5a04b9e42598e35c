"""Swipe deck: gesture classification and a cursor over fetched cards.

The deck is the in-memory model behind the swipe screen. Cards are
decided one at a time in order; each decision is pushed onto a bounded
history so the most recent decisions can be undone.
"""

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

# Horizontal drag past which a released card counts as a decision
SWIPE_THRESHOLD_PX = 120

Direction = Literal["like", "pass"]

LIKE: Direction = "like"
PASS: Direction = "pass"

SWIPE_MESSAGES: dict[str, str] = {
    LIKE: "Liked! 🎉",
    PASS: "Passed",
}
UNDO_MESSAGE = "Undo successful!"
NOTHING_TO_UNDO_MESSAGE = "Nothing to undo!"

CardT = TypeVar("CardT")


def classify_gesture(dx: float, threshold: float = SWIPE_THRESHOLD_PX) -> Direction | None:
    """Decide what a released drag means.

    Args:
        dx: Horizontal displacement in points (right is positive).
        threshold: Minimum displacement, exclusive, for a decision.

    Returns:
        "like" past the right threshold, "pass" past the left one,
        None to snap the card back.
    """
    if dx > threshold:
        return LIKE
    if dx < -threshold:
        return PASS
    return None


@dataclass(frozen=True)
class SwipeRecord(Generic[CardT]):
    """One decision on the history stack."""

    card: CardT
    index: int
    direction: Direction


class SwipeDeck(Generic[CardT]):
    """Cursor over a list of cards with bounded undo.

    Example:
        deck = SwipeDeck(cards)
        deck.swipe("like")      # decides cards[0], cursor -> 1
        deck.undo()             # cursor back to 0
        deck.progress_label()   # "Profile 1 of 3"

    Args:
        cards: Cards in display order.
        undo_depth: How many decisions can be undone (oldest fall off).
    """

    def __init__(self, cards: Sequence[CardT], undo_depth: int = 1) -> None:
        if undo_depth < 1:
            msg = "undo_depth must be at least 1"
            raise ValueError(msg)
        self._cards = list(cards)
        self._index = 0
        self._history: deque[SwipeRecord[CardT]] = deque(maxlen=undo_depth)

    @property
    def index(self) -> int:
        return self._index

    @property
    def cards(self) -> list[CardT]:
        return list(self._cards)

    @property
    def current(self) -> CardT | None:
        """Card on top of the deck, or None once every card is decided."""
        if self.exhausted:
            return None
        return self._cards[self._index]

    @property
    def remaining(self) -> int:
        return max(len(self._cards) - self._index, 0)

    @property
    def exhausted(self) -> bool:
        return self._index >= len(self._cards)

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    def swipe(self, direction: Direction) -> SwipeRecord[CardT] | None:
        """Decide the current card and advance.

        Args:
            direction: "like" or "pass".

        Returns:
            The recorded decision, or None when the deck is exhausted.

        Raises:
            ValueError: If direction is not like or pass.
        """
        if direction not in (LIKE, PASS):
            msg = f"Unknown swipe direction: {direction}"
            raise ValueError(msg)
        if self.exhausted:
            return None
        record = SwipeRecord(
            card=self._cards[self._index], index=self._index, direction=direction
        )
        self._history.append(record)
        self._index += 1
        return record

    def release(
        self, dx: float, threshold: float = SWIPE_THRESHOLD_PX
    ) -> SwipeRecord[CardT] | None:
        """Apply a released drag: swipe past the threshold, else snap back."""
        direction = classify_gesture(dx, threshold)
        if direction is None:
            return None
        return self.swipe(direction)

    def undo(self) -> SwipeRecord[CardT] | None:
        """Restore the most recent decision's card to the top of the deck.

        Returns:
            The undone decision, or None if there is nothing to undo.
        """
        if not self._history:
            return None
        record = self._history.pop()
        self._index = record.index
        return record

    def restart(self) -> None:
        """Go back to the first card and forget the history."""
        self._index = 0
        self._history.clear()

    def progress_label(self) -> str:
        """Human position label, e.g. "Profile 2 of 5"."""
        if not self._cards:
            return "No profiles"
        position = min(self._index + 1, len(self._cards))
        return f"Profile {position} of {len(self._cards)}"
