"""Tests for editor/selection.py — highlight movement over participants and events."""
from __future__ import annotations

import pytest

from editor.selection import Selection, SelectionKind, SelectionNavigator


P = Selection.participant
E = Selection.event
NONE = Selection.none()


# ═══════════════════════════════════════════════════════════
# Pure moves
# ═══════════════════════════════════════════════════════════

class TestHorizontal:

    @pytest.mark.parametrize("start, count, expected", [
        (NONE, 3, P(0)),
        (NONE, 0, NONE),
        (P(2), 3, P(1)),
        (P(0), 3, P(0)),
        (E(1), 3, E(1)),
    ])
    def test_left(self, start, count, expected):
        assert start.left(count) == expected

    @pytest.mark.parametrize("start, count, expected", [
        (NONE, 3, P(0)),
        (P(0), 3, P(1)),
        (P(2), 3, P(2)),
        (E(0), 3, E(0)),
    ])
    def test_right(self, start, count, expected):
        assert start.right(count) == expected


class TestVertical:

    def test_down_from_participant_enters_events(self):
        assert P(2).down(3, 4) == E(0)

    def test_down_from_none(self):
        assert NONE.down(3, 4) == E(0)
        assert NONE.down(3, 0) == NONE

    def test_down_walks_and_stops_at_last(self):
        assert E(0).down(3, 2) == E(1)
        assert E(1).down(3, 2) == E(1)

    def test_down_without_events_stays(self):
        assert P(1).down(3, 0) == P(1)

    def test_up_walks_events(self):
        assert E(3).up(2, 4) == E(2)

    def test_up_from_first_event_returns_to_remembered(self):
        assert E(0).up(3, 4, remembered=2) == P(2)
        assert E(0).up(3, 4) == P(0)

    def test_up_clamps_remembered(self):
        assert E(0).up(2, 4, remembered=5) == P(1)

    def test_up_from_none(self):
        assert NONE.up(2, 3) == E(2)
        assert NONE.up(2, 0) == P(0)
        assert NONE.up(0, 0) == NONE

    def test_up_from_participant_stays(self):
        assert P(1).up(3, 3) == P(1)


class TestAfterRemoval:

    @pytest.mark.parametrize("start, new_count, expected", [
        (P(2), 2, P(1)),
        (P(0), 2, P(0)),
        (E(4), 0, NONE),
        (E(1), 3, E(1)),
        (NONE, 0, NONE),
    ])
    def test_clamp(self, start, new_count, expected):
        assert start.after_removal(new_count) == expected


def test_repr():
    assert repr(NONE) == "Selection.none()"
    assert repr(P(3)) == "Selection.participant(3)"
    assert E(0).kind is SelectionKind.EVENT


# ═══════════════════════════════════════════════════════════
# Navigator
# ═══════════════════════════════════════════════════════════

class TestNavigator:

    @pytest.fixture()
    def nav(self) -> SelectionNavigator:
        return SelectionNavigator()

    def test_starts_empty(self, nav):
        assert nav.selection.is_none
        assert nav.last_participant_index is None

    def test_round_trip_restores_column(self, nav):
        nav.move_right(3)
        nav.move_right(3)
        nav.move_right(3)
        assert nav.selection == P(2)
        nav.move_down(3, 2)
        nav.move_down(3, 2)
        assert nav.selection == E(1)
        nav.move_up(3, 2)
        nav.move_up(3, 2)
        assert nav.selection == P(2)

    def test_down_from_none_does_not_remember(self, nav):
        nav.move_down(3, 2)
        assert nav.selection == E(0)
        assert nav.last_participant_index is None
        nav.move_up(3, 2)
        assert nav.selection == P(0)

    def test_select_records_participant(self, nav):
        nav.select(P(1))
        assert nav.last_participant_index == 1
        nav.select(E(0))
        assert nav.last_participant_index == 1

    def test_clear_keeps_memory(self, nav):
        nav.select(P(1))
        nav.clear()
        assert nav.selection.is_none
        assert nav.last_participant_index == 1

    def test_clamp_after_removal(self, nav):
        nav.select(P(2))
        nav.clamp_after_removal(2)
        assert nav.selection == P(1)
        assert nav.last_participant_index == 1

    def test_forget_participant(self, nav):
        nav.select(P(3))
        nav.forget_participant(2)
        assert nav.last_participant_index == 1
        nav.forget_participant(0)
        assert nav.last_participant_index is None
