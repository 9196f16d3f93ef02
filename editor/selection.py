"""
editor/selection.py

Highlight cursor over the participant row and the event column.

``Selection`` values are immutable; every move is a pure function of the
current selection and the list sizes.  ``SelectionNavigator`` adds the one
piece of memory the moves need: which participant was highlighted before
the cursor last dropped down into the events, so that coming back up
restores it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SelectionKind(Enum):
    NONE = "none"
    PARTICIPANT = "participant"
    EVENT = "event"


@dataclass(frozen=True)
class Selection:
    """What is highlighted: nothing, participant ``index`` or event ``index``."""
    kind: SelectionKind = SelectionKind.NONE
    index: int = 0

    @classmethod
    def none(cls) -> "Selection":
        return cls()

    @classmethod
    def participant(cls, index: int) -> "Selection":
        return cls(SelectionKind.PARTICIPANT, index)

    @classmethod
    def event(cls, index: int) -> "Selection":
        return cls(SelectionKind.EVENT, index)

    @property
    def is_none(self) -> bool:
        return self.kind is SelectionKind.NONE

    @property
    def is_participant(self) -> bool:
        return self.kind is SelectionKind.PARTICIPANT

    @property
    def is_event(self) -> bool:
        return self.kind is SelectionKind.EVENT

    def __repr__(self) -> str:
        if self.is_none:
            return "Selection.none()"
        return f"Selection.{self.kind.value}({self.index})"

    # ── Moves ────────────────────────────────────────

    def left(self, participant_count: int) -> "Selection":
        """Move left within participants only."""
        if self.is_none and participant_count > 0:
            return Selection.participant(0)
        if self.is_participant and self.index > 0:
            return Selection.participant(self.index - 1)
        return self

    def right(self, participant_count: int) -> "Selection":
        """Move right within participants only."""
        if self.is_none and participant_count > 0:
            return Selection.participant(0)
        if self.is_participant and self.index + 1 < participant_count:
            return Selection.participant(self.index + 1)
        return self

    def down(self, participant_count: int, event_count: int) -> "Selection":
        """Move from the participant row to the first event, or to the next event."""
        if self.is_event:
            if self.index + 1 < event_count:
                return Selection.event(self.index + 1)
            return self
        if event_count > 0:
            return Selection.event(0)
        return self

    def up(
        self,
        participant_count: int,
        event_count: int,
        remembered: Optional[int] = None,
    ) -> "Selection":
        """Move to the previous event, or from the first event back to a participant.

        Args:
            remembered: Participant to return to when leaving ``Event(0)``;
                clamped into range, defaults to the first participant.
        """
        if self.is_none:
            if event_count > 0:
                return Selection.event(event_count - 1)
            if participant_count > 0:
                return Selection.participant(0)
            return self
        if self.is_event:
            if self.index > 0:
                return Selection.event(self.index - 1)
            if participant_count > 0:
                target = remembered if remembered is not None else 0
                return Selection.participant(max(0, min(target, participant_count - 1)))
        return self

    def after_removal(self, new_count: int) -> "Selection":
        """Clamp after the highlighted item was deleted from a list now *new_count* long."""
        if self.is_none:
            return self
        if new_count <= 0:
            return Selection.none()
        return Selection(self.kind, min(self.index, new_count - 1))


class SelectionNavigator:
    """Owns the current ``Selection`` and the remembered participant column."""

    def __init__(self) -> None:
        self.selection = Selection.none()
        self.last_participant_index: Optional[int] = None

    def select(self, selection: Selection) -> None:
        self.selection = selection
        if selection.is_participant:
            self.last_participant_index = selection.index

    def clear(self) -> None:
        self.selection = Selection.none()

    def move_left(self, participant_count: int) -> None:
        self.select(self.selection.left(participant_count))

    def move_right(self, participant_count: int) -> None:
        self.select(self.selection.right(participant_count))

    def move_down(self, participant_count: int, event_count: int) -> None:
        before = self.selection
        after = before.down(participant_count, event_count)
        if before.is_participant and after.is_event:
            self.last_participant_index = before.index
        self.selection = after

    def move_up(self, participant_count: int, event_count: int) -> None:
        self.select(
            self.selection.up(participant_count, event_count, self.last_participant_index)
        )

    def clamp_after_removal(self, new_count: int) -> None:
        self.selection = self.selection.after_removal(new_count)
        if self.selection.is_participant:
            self.last_participant_index = self.selection.index

    def forget_participant(self, participant_count: int) -> None:
        """Keep the remembered column valid after participants were removed."""
        if self.last_participant_index is None:
            return
        if participant_count == 0:
            self.last_participant_index = None
        else:
            self.last_participant_index = min(self.last_participant_index, participant_count - 1)
