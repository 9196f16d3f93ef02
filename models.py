"""
models.py

Data models and constants for the sequence diagram editor.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Tuple, Union


# ----------------------------
# Note placement
# ----------------------------

class NotePosition(Enum):
    """Where a note sits relative to its participant(s)."""
    RIGHT = "right of"
    LEFT = "left of"
    OVER = "over"

    def as_str(self) -> str:
        return self.value

    def next(self) -> "NotePosition":
        """Cycle Right -> Left -> Over -> Right."""
        return _POSITION_CYCLE[(_POSITION_CYCLE.index(self) + 1) % len(_POSITION_CYCLE)]

    def prev(self) -> "NotePosition":
        return _POSITION_CYCLE[(_POSITION_CYCLE.index(self) - 1) % len(_POSITION_CYCLE)]

    @classmethod
    def from_str(cls, text: str) -> "NotePosition":
        """Parse ``"right of"``, ``"left of"`` or ``"over"``.

        Raises:
            ValueError: If *text* is not one of the three keyword forms.
        """
        normalized = " ".join(text.split())
        for pos in cls:
            if pos.value == normalized:
                return pos
        raise ValueError(f"Unknown note position: {text!r}")


_POSITION_CYCLE = (NotePosition.RIGHT, NotePosition.LEFT, NotePosition.OVER)


# ----------------------------
# Event model
# ----------------------------

@dataclass
class Message:
    """An arrow from one participant to another.

    Attributes:
        from_index: Sender participant index.
        to_index: Receiver participant index (equal to ``from_index`` for a
            self-message).
        text: Message label.
    """
    from_index: int
    to_index: int
    text: str = ""

    def participant_indices(self) -> Tuple[int, ...]:
        return (self.from_index, self.to_index)

    def references(self, idx: int) -> bool:
        return idx in self.participant_indices()

    def remapped(self, fn: Callable[[int], int]) -> "Message":
        """Return a copy with every participant index passed through *fn*."""
        return replace(self, from_index=fn(self.from_index), to_index=fn(self.to_index))

    def is_self_message(self) -> bool:
        return self.from_index == self.to_index


@dataclass
class Note:
    """A note attached to one participant, or spanning two for ``OVER``.

    For ``RIGHT``/``LEFT`` notes ``participant_start == participant_end``.
    """
    position: NotePosition
    participant_start: int
    participant_end: int
    text: str = ""

    def participant_indices(self) -> Tuple[int, ...]:
        return (self.participant_start, self.participant_end)

    def references(self, idx: int) -> bool:
        return idx in self.participant_indices()

    def remapped(self, fn: Callable[[int], int]) -> "Note":
        return replace(
            self,
            participant_start=fn(self.participant_start),
            participant_end=fn(self.participant_end),
        )

    def is_span(self) -> bool:
        """True for an Over-note covering two distinct participants."""
        return self.position is NotePosition.OVER and self.participant_start != self.participant_end


Event = Union[Message, Note]


# ----------------------------
# Insertion points
# ----------------------------

@dataclass(frozen=True)
class AtStart:
    """Insert before every existing event."""

    def resolve(self, event_count: int) -> int:
        return 0


@dataclass(frozen=True)
class After:
    """Insert immediately after the event at ``index`` (clamped to the end)."""
    index: int

    def resolve(self, event_count: int) -> int:
        return max(0, min(self.index + 1, event_count))


@dataclass(frozen=True)
class AtEnd:
    """Append after the last event."""

    def resolve(self, event_count: int) -> int:
        return event_count


InsertionPoint = Union[AtStart, After, AtEnd]
