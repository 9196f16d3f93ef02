"""
sequence.py

The in-memory sequence diagram: an ordered participant list and a
time-ordered event list.

Participants are identified by their position in ``participants``.  Every
structural mutation below rewrites the index fields of the stored events so
that they keep pointing at the same participant, which means every stored
index is always ``< participant_count()``.  Mutations given an out-of-range
index are silent no-ops.

Message and note texts are stored trimmed, as the Mermaid reader returns
them.  Participant names are stored as given; ``mermaid.name_problem``
tells which of them the Mermaid text format can carry.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from debug_trace import trace
from models import AtEnd, Event, InsertionPoint, Message, Note, NotePosition


def _note(position: NotePosition, start: int, end: int, text: str) -> Note:
    # Side notes sit on one participant
    if position is not NotePosition.OVER:
        end = start
    return Note(position, start, end, text.strip())


class SequenceDiagram:
    """Participants plus events, with index-preserving mutations.

    Args:
        participants: Initial participant names (copied).
        events: Initial events (copied).  Callers are responsible for these
            being consistent with *participants*.
    """

    def __init__(
        self,
        participants: Optional[List[str]] = None,
        events: Optional[List[Event]] = None,
    ):
        self.participants: List[str] = list(participants or [])
        self.events: List[Event] = list(events or [])

    def __repr__(self) -> str:
        return f"SequenceDiagram(participants={self.participants!r}, events={self.events!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SequenceDiagram):
            return NotImplemented
        return self.participants == other.participants and self.events == other.events

    # ── Queries ──────────────────────────────────────

    def participant_count(self) -> int:
        return len(self.participants)

    def event_count(self) -> int:
        return len(self.events)

    def is_empty(self) -> bool:
        return not self.participants and not self.events

    def _has_participant(self, idx: int) -> bool:
        return 0 <= idx < len(self.participants)

    def _has_event(self, idx: int) -> bool:
        return 0 <= idx < len(self.events)

    def _rewire(self, fn: Callable[[int], int]) -> None:
        self.events = [e.remapped(fn) for e in self.events]

    # ── Participants ─────────────────────────────────

    def add_participant(self, name: str) -> int:
        """Append a participant and return its index.  Names need not be unique."""
        self.participants.append(name)
        return len(self.participants) - 1

    def rename_participant(self, idx: int, name: str) -> None:
        if not self._has_participant(idx):
            trace(f"rename_participant ignored: index {idx} out of range", "STORE")
            return
        self.participants[idx] = name

    def remove_participant(self, idx: int) -> None:
        """Remove participant *idx* and every event that references it.

        Surviving events have each index above *idx* shifted down by one.
        The new lists are built first and assigned together.
        """
        if not self._has_participant(idx):
            trace(f"remove_participant ignored: index {idx} out of range", "STORE")
            return

        kept = [e for e in self.events if not e.references(idx)]
        shifted = [e.remapped(lambda i: i - 1 if i > idx else i) for e in kept]
        participants = self.participants[:idx] + self.participants[idx + 1:]

        self.participants = participants
        self.events = shifted

    def swap_participants(self, a: int, b: int) -> None:
        """Swap two participants, carrying their events' references with them."""
        if not (self._has_participant(a) and self._has_participant(b)):
            trace(f"swap_participants ignored: ({a}, {b}) out of range", "STORE")
            return
        if a == b:
            return

        self.participants[a], self.participants[b] = self.participants[b], self.participants[a]
        self._rewire(lambda i: b if i == a else a if i == b else i)

    # ── Messages ─────────────────────────────────────

    def add_message(self, from_index: int, to_index: int, text: str) -> Optional[int]:
        return self.insert_message(AtEnd(), from_index, to_index, text)

    def insert_message(
        self, at: InsertionPoint, from_index: int, to_index: int, text: str
    ) -> Optional[int]:
        """Insert a message at *at* and return its event index.

        Returns:
            The new event's index, or ``None`` if either participant index
            is out of range.
        """
        if not (self._has_participant(from_index) and self._has_participant(to_index)):
            trace(f"insert_message ignored: ({from_index}, {to_index}) out of range", "STORE")
            return None
        return self._insert_event(at, Message(from_index, to_index, text.strip()))

    def update_message(self, idx: int, from_index: int, to_index: int, text: str) -> bool:
        """Overwrite the message at *idx* in place."""
        if not (self._has_event(idx) and isinstance(self.events[idx], Message)):
            trace(f"update_message ignored: event {idx} is not a message", "STORE")
            return False
        if not (self._has_participant(from_index) and self._has_participant(to_index)):
            trace(f"update_message ignored: ({from_index}, {to_index}) out of range", "STORE")
            return False
        self.events[idx] = Message(from_index, to_index, text.strip())
        return True

    # ── Notes ────────────────────────────────────────

    def add_note(
        self, position: NotePosition, participant_start: int, participant_end: int, text: str
    ) -> Optional[int]:
        return self.insert_note(AtEnd(), position, participant_start, participant_end, text)

    def insert_note(
        self,
        at: InsertionPoint,
        position: NotePosition,
        participant_start: int,
        participant_end: int,
        text: str,
    ) -> Optional[int]:
        if not (self._has_participant(participant_start) and self._has_participant(participant_end)):
            trace(
                f"insert_note ignored: ({participant_start}, {participant_end}) out of range",
                "STORE",
            )
            return None
        return self._insert_event(at, _note(position, participant_start, participant_end, text))

    def update_note(
        self,
        idx: int,
        position: NotePosition,
        participant_start: int,
        participant_end: int,
        text: str,
    ) -> bool:
        if not (self._has_event(idx) and isinstance(self.events[idx], Note)):
            trace(f"update_note ignored: event {idx} is not a note", "STORE")
            return False
        if not (self._has_participant(participant_start) and self._has_participant(participant_end)):
            trace(
                f"update_note ignored: ({participant_start}, {participant_end}) out of range",
                "STORE",
            )
            return False
        self.events[idx] = _note(position, participant_start, participant_end, text)
        return True

    # ── Events ───────────────────────────────────────

    def _insert_event(self, at: InsertionPoint, event: Event) -> int:
        pos = at.resolve(len(self.events))
        self.events.insert(pos, event)
        return pos

    def remove_event(self, idx: int) -> None:
        if not self._has_event(idx):
            trace(f"remove_event ignored: index {idx} out of range", "STORE")
            return
        del self.events[idx]

    def swap_events(self, a: int, b: int) -> None:
        if not (self._has_event(a) and self._has_event(b)):
            trace(f"swap_events ignored: ({a}, {b}) out of range", "STORE")
            return
        self.events[a], self.events[b] = self.events[b], self.events[a]

    def move_event_up(self, idx: int) -> int:
        """Move event *idx* one step earlier; return its new index."""
        if idx > 0 and self._has_event(idx):
            self.swap_events(idx, idx - 1)
            return idx - 1
        return idx

    def move_event_down(self, idx: int) -> int:
        if self._has_event(idx) and self._has_event(idx + 1):
            self.swap_events(idx, idx + 1)
            return idx + 1
        return idx

    def point_event_left(self, idx: int) -> None:
        """Make a message arrow point left (``from > to``).

        No-op for notes, self-messages, and messages already pointing left.
        """
        if not self._has_event(idx):
            return
        event = self.events[idx]
        if isinstance(event, Message) and event.from_index < event.to_index:
            event.from_index, event.to_index = event.to_index, event.from_index

    def point_event_right(self, idx: int) -> None:
        if not self._has_event(idx):
            return
        event = self.events[idx]
        if isinstance(event, Message) and event.from_index > event.to_index:
            event.from_index, event.to_index = event.to_index, event.from_index

    def clear(self) -> None:
        self.participants = []
        self.events = []

    # ── Mermaid exchange ─────────────────────────────

    def to_mermaid(self) -> str:
        from mermaid.sequence_source import to_mermaid

        return to_mermaid(self.participants, self.events)

    @classmethod
    def from_mermaid(cls, text: str) -> "SequenceDiagram":
        """Parse Mermaid sequence text.

        Raises:
            MermaidParseError: On the first malformed line.
        """
        from mermaid.sequence_source import parse_sequence_source

        return parse_sequence_source(text)

    @classmethod
    def from_file(cls, path: str) -> "SequenceDiagram":
        from mermaid.sequence_source import parse_sequence_file

        return parse_sequence_file(path)
