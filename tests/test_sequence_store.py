"""Tests for sequence.py — participant/event mutations and index rewiring.

Every structural edit must keep each stored event pointing at the same
participant it pointed at before, and out-of-range indices must be ignored.
"""
from __future__ import annotations

import random

import pytest

from mermaid import name_problem
from models import After, AtEnd, AtStart, Message, Note, NotePosition
from sequence import SequenceDiagram


@pytest.fixture()
def abc() -> SequenceDiagram:
    """Three participants, a message chain and one note on B."""
    d = SequenceDiagram()
    for name in ("A", "B", "C"):
        d.add_participant(name)
    d.add_message(0, 1, "a-b")
    d.add_message(1, 2, "b-c")
    d.add_note(NotePosition.RIGHT, 1, 1, "on b")
    d.add_message(2, 0, "c-a")
    return d


def _names(d: SequenceDiagram, event) -> tuple:
    """Resolve an event's participant indices to names."""
    return tuple(d.participants[i] for i in event.participant_indices())


# ═══════════════════════════════════════════════════════════
# Participants
# ═══════════════════════════════════════════════════════════

class TestParticipants:

    def test_add_returns_index(self):
        d = SequenceDiagram()
        assert d.add_participant("User") == 0
        assert d.add_participant("API") == 1
        assert d.participants == ["User", "API"]

    def test_duplicate_names_allowed(self):
        d = SequenceDiagram()
        d.add_participant("X")
        d.add_participant("X")
        assert d.participant_count() == 2

    def test_rename(self, abc):
        abc.rename_participant(1, "Bee")
        assert abc.participants == ["A", "Bee", "C"]
        assert _names(abc, abc.events[0]) == ("A", "Bee")

    def test_rename_out_of_range_is_noop(self, abc):
        abc.rename_participant(7, "Z")
        assert abc.participants == ["A", "B", "C"]

    def test_remove_drops_referencing_events(self, abc):
        abc.remove_participant(1)
        assert abc.participants == ["A", "C"]
        assert abc.events == [Message(1, 0, "c-a")]

    def test_remove_shifts_higher_indices(self):
        d = SequenceDiagram(["A", "B", "C", "D"])
        d.add_message(2, 3, "c-d")
        d.add_note(NotePosition.OVER, 0, 3, "span")
        d.remove_participant(1)
        assert d.events == [Message(1, 2, "c-d"), Note(NotePosition.OVER, 0, 2, "span")]

    def test_remove_last_participant_empties_events(self):
        d = SequenceDiagram(["Solo"])
        d.add_message(0, 0, "self")
        d.remove_participant(0)
        assert d.is_empty()

    def test_remove_out_of_range_is_noop(self, abc):
        before = SequenceDiagram(abc.participants, abc.events)
        abc.remove_participant(3)
        abc.remove_participant(-1)
        assert abc == before

    def test_swap_preserves_association(self):
        d = SequenceDiagram(["A", "B"])
        d.add_message(0, 1, "hi")
        d.swap_participants(0, 1)
        assert d.participants == ["B", "A"]
        assert d.events[0] == Message(1, 0, "hi")
        assert _names(d, d.events[0]) == ("A", "B")

    def test_swap_rewires_notes(self, abc):
        abc.swap_participants(1, 2)
        note = abc.events[2]
        assert isinstance(note, Note)
        assert _names(abc, note) == ("B", "B")

    def test_swap_every_event_keeps_names(self, abc):
        before = [_names(abc, e) for e in abc.events]
        abc.swap_participants(0, 2)
        assert [_names(abc, e) for e in abc.events] == before

    def test_swap_out_of_range_is_noop(self, abc):
        abc.swap_participants(0, 5)
        assert abc.participants == ["A", "B", "C"]


# ═══════════════════════════════════════════════════════════
# Events
# ═══════════════════════════════════════════════════════════

class TestEvents:

    def test_build_and_export(self):
        d = SequenceDiagram()
        d.add_participant("User")
        d.add_participant("API")
        d.add_message(0, 1, "Login")
        assert d.to_mermaid() == (
            "sequenceDiagram\n"
            "    participant User\n"
            "    participant API\n"
            "    User->>API: Login\n"
        )

    def test_add_message_out_of_range(self, abc):
        assert abc.add_message(0, 3, "nope") is None
        assert abc.event_count() == 4

    def test_add_note_out_of_range(self, abc):
        assert abc.add_note(NotePosition.LEFT, 9, 9, "nope") is None
        assert abc.event_count() == 4

    def test_insert_at_start(self, abc):
        assert abc.insert_message(AtStart(), 2, 2, "first") == 0
        assert abc.events[0] == Message(2, 2, "first")

    def test_insert_after(self, abc):
        assert abc.insert_message(After(0), 1, 0, "second") == 1
        assert abc.events[1] == Message(1, 0, "second")
        assert abc.events[2] == Message(1, 2, "b-c")

    def test_insert_after_past_end_appends(self, abc):
        assert abc.insert_note(After(99), NotePosition.OVER, 0, 2, "end") == 4
        assert abc.event_count() == 5

    def test_insert_at_end(self, abc):
        assert abc.insert_message(AtEnd(), 0, 2, "last") == 4

    def test_update_message(self, abc):
        assert abc.update_message(0, 2, 1, "changed") is True
        assert abc.events[0] == Message(2, 1, "changed")
        assert abc.event_count() == 4

    def test_update_message_rejects_note(self, abc):
        assert abc.update_message(2, 0, 1, "x") is False
        assert isinstance(abc.events[2], Note)

    def test_update_note(self, abc):
        assert abc.update_note(2, NotePosition.OVER, 0, 2, "wide") is True
        assert abc.events[2] == Note(NotePosition.OVER, 0, 2, "wide")

    def test_update_note_rejects_message(self, abc):
        assert abc.update_note(0, NotePosition.LEFT, 0, 0, "x") is False

    def test_texts_stored_trimmed(self, abc):
        abc.add_message(0, 1, "  padded  ")
        abc.update_message(0, 0, 1, " edited\t")
        abc.insert_note(AtStart(), NotePosition.OVER, 0, 1, "  note ")
        abc.update_note(3, NotePosition.LEFT, 1, 1, " side ")
        assert abc.events[-1].text == "padded"
        assert abc.events[1].text == "edited"
        assert abc.events[0].text == "note"
        assert abc.events[3].text == "side"

    @pytest.mark.parametrize("position", [NotePosition.RIGHT, NotePosition.LEFT])
    def test_side_note_keeps_one_participant(self, abc, position):
        idx = abc.add_note(position, 2, 0, "side")
        assert abc.events[idx] == Note(position, 2, 2, "side")
        abc.update_note(idx, position, 1, 2, "moved")
        assert abc.events[idx] == Note(position, 1, 1, "moved")

    def test_remove_event(self, abc):
        abc.remove_event(1)
        assert [e.text for e in abc.events] == ["a-b", "on b", "c-a"]

    def test_remove_event_out_of_range(self, abc):
        abc.remove_event(4)
        assert abc.event_count() == 4

    def test_swap_events(self, abc):
        abc.swap_events(0, 3)
        assert abc.events[0].text == "c-a"
        assert abc.events[3].text == "a-b"

    def test_move_up_and_down(self, abc):
        assert abc.move_event_up(2) == 1
        assert abc.events[1].text == "on b"
        assert abc.move_event_down(1) == 2
        assert abc.events[2].text == "on b"

    def test_move_at_edges_is_noop(self, abc):
        assert abc.move_event_up(0) == 0
        assert abc.move_event_down(3) == 3
        assert [e.text for e in abc.events] == ["a-b", "b-c", "on b", "c-a"]

    def test_point_left_and_right(self, abc):
        abc.point_event_left(0)
        assert abc.events[0] == Message(1, 0, "a-b")
        abc.point_event_left(0)
        assert abc.events[0] == Message(1, 0, "a-b")
        abc.point_event_right(0)
        assert abc.events[0] == Message(0, 1, "a-b")

    def test_point_ignores_notes_and_self_messages(self, abc):
        abc.add_message(1, 1, "self")
        abc.point_event_left(4)
        abc.point_event_right(4)
        abc.point_event_left(2)
        assert abc.events[4] == Message(1, 1, "self")
        assert abc.events[2] == Note(NotePosition.RIGHT, 1, 1, "on b")

    def test_clear(self, abc):
        abc.clear()
        assert abc.is_empty()
        assert abc.participant_count() == 0
        assert abc.event_count() == 0


# ═══════════════════════════════════════════════════════════
# Insertion points
# ═══════════════════════════════════════════════════════════

class TestInsertionPoint:

    @pytest.mark.parametrize("point, count, expected", [
        (AtStart(), 0, 0),
        (AtStart(), 5, 0),
        (AtEnd(), 0, 0),
        (AtEnd(), 5, 5),
        (After(0), 5, 1),
        (After(4), 5, 5),
        (After(10), 5, 5),
        (After(0), 0, 0),
    ])
    def test_resolve(self, point, count, expected):
        assert point.resolve(count) == expected


class TestNotePosition:

    def test_cycle(self):
        assert NotePosition.RIGHT.next() is NotePosition.LEFT
        assert NotePosition.LEFT.next() is NotePosition.OVER
        assert NotePosition.OVER.next() is NotePosition.RIGHT
        assert NotePosition.RIGHT.prev() is NotePosition.OVER

    def test_from_str(self):
        assert NotePosition.from_str("right  of") is NotePosition.RIGHT
        assert NotePosition.from_str("over") is NotePosition.OVER
        with pytest.raises(ValueError):
            NotePosition.from_str("under")


# ═══════════════════════════════════════════════════════════
# Random edit sequences
# ═══════════════════════════════════════════════════════════

NAMES = ["Alice", "Bob", "Carol", "Svc A", "db-", "Web>UI", "Note", "participant"]
TEXTS = ["hello", "  padded ", "a: b", "x->>y", "over, there", ""]
OPERATIONS = [
    "add_participant",
    "remove_participant",
    "swap_participants",
    "add_message",
    "add_note",
    "remove_event",
]


def _apply_random_operation(rng: random.Random, d: SequenceDiagram, step: int) -> None:
    """Run one store operation; indices may fall one past the end."""
    count = d.participant_count()
    op = rng.choice(OPERATIONS)
    if op == "add_participant" or count == 0:
        # "db-" gets a digit appended, so no name ends in '-'
        d.add_participant(f"{rng.choice(NAMES)}{step}")
    elif op == "remove_participant":
        d.remove_participant(rng.randrange(count + 1))
    elif op == "swap_participants":
        d.swap_participants(rng.randrange(count + 1), rng.randrange(count + 1))
    elif op == "add_message":
        d.add_message(rng.randrange(count + 1), rng.randrange(count + 1), rng.choice(TEXTS))
    elif op == "add_note":
        d.add_note(
            rng.choice(list(NotePosition)),
            rng.randrange(count + 1),
            rng.randrange(count + 1),
            rng.choice(TEXTS),
        )
    else:
        d.remove_event(rng.randrange(d.event_count() + 1))


class TestRandomEdits:

    @pytest.mark.parametrize("seed", range(40))
    def test_indices_stay_valid_and_text_reads_back(self, seed):
        rng = random.Random(seed)
        d = SequenceDiagram()
        for step in range(60):
            _apply_random_operation(rng, d, step)
            count = d.participant_count()
            for event in d.events:
                assert all(0 <= i < count for i in event.participant_indices())

        assert all(name_problem(name) is None for name in d.participants)
        assert SequenceDiagram.from_mermaid(d.to_mermaid()) == d
