"""
editor/state.py

Modes and pending data of the modal editing workflow.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from editor.selection import SelectionNavigator
from models import AtEnd, InsertionPoint, NotePosition


class EditorMode(Enum):
    """Every state of the editing workflow.  ``NORMAL`` is the resting state."""
    NORMAL = "normal"
    INPUT_PARTICIPANT = "input_participant"
    SELECT_FROM = "select_from"
    SELECT_TO = "select_to"
    INPUT_MESSAGE = "input_message"
    EDIT_MESSAGE = "edit_message"
    EDIT_SELECT_FROM = "edit_select_from"
    EDIT_SELECT_TO = "edit_select_to"
    RENAME_PARTICIPANT = "rename_participant"
    SELECT_NOTE_PARTICIPANT = "select_note_participant"
    SELECT_NOTE_POSITION = "select_note_position"
    SELECT_NOTE_END_PARTICIPANT = "select_note_end_participant"
    INPUT_NOTE_TEXT = "input_note_text"
    EDIT_NOTE_PARTICIPANT = "edit_note_participant"
    EDIT_NOTE_POSITION = "edit_note_position"
    EDIT_NOTE_END_PARTICIPANT = "edit_note_end_participant"
    EDIT_NOTE_TEXT = "edit_note_text"
    CONFIRM_CLEAR = "confirm_clear"
    HELP = "help"

    def is_selecting_participant(self) -> bool:
        return self in _PARTICIPANT_PICKERS

    def is_selecting_position(self) -> bool:
        return self in (EditorMode.SELECT_NOTE_POSITION, EditorMode.EDIT_NOTE_POSITION)

    def is_text_input(self) -> bool:
        return self in _TEXT_INPUTS

    def is_editing(self) -> bool:
        """True for the edit-in-place branches (as opposed to insert)."""
        return self in _EDIT_MODES


_PARTICIPANT_PICKERS = frozenset({
    EditorMode.SELECT_FROM,
    EditorMode.SELECT_TO,
    EditorMode.EDIT_SELECT_FROM,
    EditorMode.EDIT_SELECT_TO,
    EditorMode.SELECT_NOTE_PARTICIPANT,
    EditorMode.SELECT_NOTE_END_PARTICIPANT,
    EditorMode.EDIT_NOTE_PARTICIPANT,
    EditorMode.EDIT_NOTE_END_PARTICIPANT,
})

_TEXT_INPUTS = frozenset({
    EditorMode.INPUT_PARTICIPANT,
    EditorMode.INPUT_MESSAGE,
    EditorMode.EDIT_MESSAGE,
    EditorMode.RENAME_PARTICIPANT,
    EditorMode.INPUT_NOTE_TEXT,
    EditorMode.EDIT_NOTE_TEXT,
})

_EDIT_MODES = frozenset({
    EditorMode.EDIT_MESSAGE,
    EditorMode.EDIT_SELECT_FROM,
    EditorMode.EDIT_SELECT_TO,
    EditorMode.EDIT_NOTE_PARTICIPANT,
    EditorMode.EDIT_NOTE_POSITION,
    EditorMode.EDIT_NOTE_END_PARTICIPANT,
    EditorMode.EDIT_NOTE_TEXT,
})


@dataclass
class StatusMessage:
    text: str
    created_at: float


@dataclass
class EditorState:
    """Current mode plus everything a multi-step operation has collected so far.

    Attributes:
        mode: Active workflow state.
        input_buffer: Text typed in a text-input mode.
        cursor: Highlighted row in a participant picker.
        message_from: Sender chosen in ``SELECT_FROM``/``EDIT_SELECT_FROM``.
        message_to: Receiver chosen in ``SELECT_TO``/``EDIT_SELECT_TO``.
        note_position: Position chosen for a note.
        note_participant_start: First participant of a note.
        note_participant_end: Second participant (same as start unless Over).
        editing_event_index: Event being edited in place.
        editing_participant_index: Participant being renamed.
        insertion_point: Where an inserted event goes.
        navigator: Normal-mode highlight; survives ``reset()``.
        status_timeout: Seconds a status message stays visible.
    """
    mode: EditorMode = EditorMode.NORMAL
    input_buffer: str = ""
    cursor: int = 0
    message_from: Optional[int] = None
    message_to: Optional[int] = None
    note_position: NotePosition = NotePosition.RIGHT
    note_participant_start: Optional[int] = None
    note_participant_end: Optional[int] = None
    editing_event_index: Optional[int] = None
    editing_participant_index: Optional[int] = None
    insertion_point: InsertionPoint = field(default_factory=AtEnd)
    navigator: SelectionNavigator = field(default_factory=SelectionNavigator)
    status_message: Optional[StatusMessage] = None
    status_timeout: float = 1.0

    @property
    def selection(self):
        return self.navigator.selection

    def reset(self) -> None:
        """Return to ``NORMAL`` and discard every pending buffer and choice."""
        self.mode = EditorMode.NORMAL
        self.input_buffer = ""
        self.cursor = 0
        self.message_from = None
        self.message_to = None
        self.note_position = NotePosition.RIGHT
        self.note_participant_start = None
        self.note_participant_end = None
        self.editing_event_index = None
        self.editing_participant_index = None
        self.insertion_point = AtEnd()

    def set_status(self, text: str, now: Optional[float] = None) -> None:
        self.status_message = StatusMessage(text, time.monotonic() if now is None else now)

    def get_status(self, now: Optional[float] = None) -> Optional[str]:
        """Return the status text while it is still fresh, else ``None``."""
        if self.status_message is None:
            return None
        if now is None:
            now = time.monotonic()
        if now - self.status_message.created_at < self.status_timeout:
            return self.status_message.text
        return None
