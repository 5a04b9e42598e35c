"""Tests for gesture classification and the in-memory swipe deck."""

import pytest

from metanoia.services.swipe_deck import (
    LIKE,
    PASS,
    SwipeDeck,
    classify_gesture,
)


class TestGestures:
    @pytest.mark.parametrize(
        ("dx", "expected"),
        [(121, LIKE), (-121, PASS), (120, None), (-120, None), (0, None)],
    )
    def test_threshold_is_exclusive(self, dx, expected):
        assert classify_gesture(dx) == expected

    def test_custom_threshold(self):
        assert classify_gesture(60, threshold=50) == LIKE


class TestSwipeDeck:
    def test_swipe_advances(self):
        deck = SwipeDeck(["a", "b", "c"])
        record = deck.swipe(LIKE)
        assert record.card == "a"
        assert deck.current == "b"
        assert deck.progress_label() == "Profile 2 of 3"

    def test_exhausted_deck(self):
        deck = SwipeDeck(["a"])
        deck.swipe(PASS)
        assert deck.exhausted
        assert deck.current is None
        assert deck.swipe(LIKE) is None
        assert deck.progress_label() == "Profile 1 of 1"

    def test_undo_restores_card(self):
        deck = SwipeDeck(["a", "b"])
        deck.swipe(LIKE)
        undone = deck.undo()
        assert undone.direction == LIKE
        assert deck.current == "a"
        assert not deck.can_undo

    def test_undo_depth_bounds_history(self):
        deck = SwipeDeck(["a", "b", "c"], undo_depth=1)
        deck.swipe(LIKE)
        deck.swipe(PASS)
        assert deck.undo().card == "b"
        assert deck.undo() is None
        assert deck.index == 1

    def test_release_snaps_back_inside_threshold(self):
        deck = SwipeDeck(["a"])
        assert deck.release(40) is None
        assert deck.index == 0
        assert deck.release(-200).direction == PASS

    def test_restart(self):
        deck = SwipeDeck(["a", "b"])
        deck.swipe(LIKE)
        deck.restart()
        assert deck.current == "a"
        assert deck.remaining == 2
        assert not deck.can_undo

    def test_empty_deck_label(self):
        assert SwipeDeck([]).progress_label() == "No profiles"

    def test_rejects_unknown_direction(self):
        with pytest.raises(ValueError, match="Unknown swipe direction"):
            SwipeDeck(["a"]).swipe("superlike")

    def test_rejects_zero_depth(self):
        with pytest.raises(ValueError):
            SwipeDeck(["a"], undo_depth=0)
