"""
editor/workflow.py

The modal editing workflow.

A ``Session`` owns the diagram, the editor state and the export target.
``handle_key`` is the single entry point for input: it looks up the handler
for the current ``EditorMode`` and runs it to completion, committing into the
diagram when a multi-step operation reaches its last step.

Insert and edit flows walk separate modes and only meet at the commit,
which either inserts at the captured ``insertion_point`` or overwrites the
event captured in ``editing_event_index``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Optional

from debug_trace import trace, trace_call
from editor.selection import Selection
from editor.state import EditorMode, EditorState
from mermaid import name_problem
from models import After, AtEnd, AtStart, InsertionPoint, Message, Note, NotePosition
from sequence import SequenceDiagram

DEFAULT_EXPORT_PATH = Path("diagram.mmd")


@dataclass
class Session:
    """Everything one interactive editing session owns.

    Attributes:
        diagram: The diagram being edited.
        editor: Mode, pending buffers and the selection.
        export_path: Where the export key writes Mermaid source.
        should_quit: Set when the user asked to leave.
    """
    diagram: SequenceDiagram = field(default_factory=SequenceDiagram)
    editor: EditorState = field(default_factory=EditorState)
    export_path: Path = DEFAULT_EXPORT_PATH
    should_quit: bool = False


# ═══════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════

@trace_call("WORKFLOW")
def handle_key(session: Session, key: str, character: Optional[str] = None) -> None:
    """Process one key press.

    Args:
        session: The session to update.
        key: Key name (``"enter"``, ``"escape"``, ``"backspace"``, ``"up"``,
            ``"ctrl+c"``, ``"a"``, ...).
        character: The printable character produced by the key, if any.
    """
    trace(f"key={key!r} char={character!r} mode={session.editor.mode.value}", "KEY")
    if key == "ctrl+c":
        session.should_quit = True
        return

    printable = character if character and len(character) == 1 and character.isprintable() else None
    before = session.editor.mode
    handler = _MODE_HANDLERS[before]
    handler(session, key, printable)

    after = session.editor.mode
    if after is not before:
        trace(f"{before.value} -> {after.value}", "MODE")


def export_diagram(session: Session) -> bool:
    """Write the diagram's Mermaid source to ``session.export_path``.

    The outcome is reported through the status message only; the diagram is
    never modified and the workflow always ends in ``NORMAL``.

    Returns:
        True if the file was written.
    """
    editor = session.editor
    path = Path(session.export_path)
    ok = False
    try:
        path.write_text(session.diagram.to_mermaid(), encoding="utf-8")
    except OSError as e:
        trace(f"export to {path} failed: {e}", "EXPORT")
        editor.set_status(f"Export failed: {e}")
    else:
        trace(f"exported to {path}", "EXPORT")
        editor.set_status(f"Exported to {path}")
        ok = True
    editor.reset()
    return ok


# ═══════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════

_MOVE_BACK = {"up", "left", "k", "h"}
_MOVE_FORWARD = {"down", "right", "j", "l"}


def _insertion_point_for(selection: Selection) -> InsertionPoint:
    """Events go below the highlight: after an event, or first when on the participant row."""
    if selection.is_event:
        return After(selection.index)
    if selection.is_participant:
        return AtStart()
    return AtEnd()


def _initial_cursor(selection: Selection, participant_count: int) -> int:
    if selection.is_participant and selection.index < participant_count:
        return selection.index
    return 0


def _clamp(idx: Optional[int], count: int) -> int:
    if idx is None or count <= 0:
        return 0
    return max(0, min(idx, count - 1))


def _selected_event_index(session: Session) -> Optional[int]:
    sel = session.editor.selection
    if sel.is_event and sel.index < session.diagram.event_count():
        return sel.index
    return None


def _selected_participant_index(session: Session) -> Optional[int]:
    sel = session.editor.selection
    if sel.is_participant and sel.index < session.diagram.participant_count():
        return sel.index
    return None


# ═══════════════════════════════════════════════════════════
# Normal mode
# ═══════════════════════════════════════════════════════════

def _start_add_participant(session: Session) -> None:
    editor = session.editor
    editor.reset()
    editor.mode = EditorMode.INPUT_PARTICIPANT


def _start_insert_message(session: Session) -> None:
    editor = session.editor
    count = session.diagram.participant_count()
    if count == 0:
        editor.set_status("Add a participant first")
        return
    selection = editor.selection
    editor.reset()
    editor.insertion_point = _insertion_point_for(selection)
    editor.cursor = _initial_cursor(selection, count)
    editor.mode = EditorMode.SELECT_FROM


def _start_insert_note(session: Session) -> None:
    editor = session.editor
    count = session.diagram.participant_count()
    if count == 0:
        editor.set_status("Add a participant first")
        return
    selection = editor.selection
    editor.reset()
    editor.insertion_point = _insertion_point_for(selection)
    editor.cursor = _initial_cursor(selection, count)
    editor.mode = EditorMode.SELECT_NOTE_PARTICIPANT


def _start_rename(session: Session) -> None:
    idx = _selected_participant_index(session)
    if idx is None:
        return
    editor = session.editor
    editor.reset()
    editor.editing_participant_index = idx
    editor.input_buffer = session.diagram.participants[idx]
    editor.mode = EditorMode.RENAME_PARTICIPANT


def _start_edit(session: Session) -> None:
    """Edit whatever is highlighted: rename a participant or re-walk an event."""
    if _selected_participant_index(session) is not None:
        _start_rename(session)
        return

    idx = _selected_event_index(session)
    if idx is None:
        return
    editor = session.editor
    event = session.diagram.events[idx]
    editor.reset()
    editor.editing_event_index = idx
    editor.input_buffer = event.text

    if isinstance(event, Message):
        editor.message_from = event.from_index
        editor.message_to = event.to_index
        editor.cursor = event.from_index
        editor.mode = EditorMode.EDIT_SELECT_FROM
    elif isinstance(event, Note):
        editor.note_position = event.position
        editor.note_participant_start = event.participant_start
        editor.note_participant_end = event.participant_end
        editor.cursor = event.participant_start
        editor.mode = EditorMode.EDIT_NOTE_PARTICIPANT


def _delete_selected(session: Session) -> None:
    diagram = session.diagram
    navigator = session.editor.navigator
    sel = navigator.selection

    if sel.is_participant:
        diagram.remove_participant(sel.index)
        navigator.clamp_after_removal(diagram.participant_count())
        navigator.forget_participant(diagram.participant_count())
    elif sel.is_event:
        diagram.remove_event(sel.index)
        navigator.clamp_after_removal(diagram.event_count())
    elif diagram.events:
        diagram.remove_event(diagram.event_count() - 1)


def _shift_left(session: Session) -> None:
    """Move the highlighted participant left, or point the highlighted message left."""
    diagram = session.diagram
    navigator = session.editor.navigator
    sel = navigator.selection
    if sel.is_participant and 0 < sel.index < diagram.participant_count():
        diagram.swap_participants(sel.index, sel.index - 1)
        navigator.select(Selection.participant(sel.index - 1))
    elif sel.is_event:
        diagram.point_event_left(sel.index)


def _shift_right(session: Session) -> None:
    diagram = session.diagram
    navigator = session.editor.navigator
    sel = navigator.selection
    if sel.is_participant and sel.index + 1 < diagram.participant_count():
        diagram.swap_participants(sel.index, sel.index + 1)
        navigator.select(Selection.participant(sel.index + 1))
    elif sel.is_event:
        diagram.point_event_right(sel.index)


def _move_event_down(session: Session) -> None:
    sel = session.editor.selection
    if sel.is_event:
        new_idx = session.diagram.move_event_down(sel.index)
        session.editor.navigator.select(Selection.event(new_idx))


def _move_event_up(session: Session) -> None:
    sel = session.editor.selection
    if sel.is_event:
        new_idx = session.diagram.move_event_up(sel.index)
        session.editor.navigator.select(Selection.event(new_idx))


def _request_clear(session: Session) -> None:
    if not session.diagram.is_empty():
        session.editor.mode = EditorMode.CONFIRM_CLEAR


def _open_help(session: Session) -> None:
    session.editor.mode = EditorMode.HELP


def _quit(session: Session) -> None:
    session.should_quit = True


def _nav_left(session: Session) -> None:
    session.editor.navigator.move_left(session.diagram.participant_count())


def _nav_right(session: Session) -> None:
    session.editor.navigator.move_right(session.diagram.participant_count())


def _nav_down(session: Session) -> None:
    d = session.diagram
    session.editor.navigator.move_down(d.participant_count(), d.event_count())


def _nav_up(session: Session) -> None:
    d = session.diagram
    session.editor.navigator.move_up(d.participant_count(), d.event_count())


def _clear_selection(session: Session) -> None:
    session.editor.navigator.clear()


# Characters typed in NORMAL mode
_NORMAL_COMMANDS: Dict[str, Callable[[Session], None]] = {
    "p": _start_add_participant,
    "e": _start_insert_message,
    "n": _start_insert_note,
    "r": _start_rename,
    "d": _delete_selected,
    "h": _nav_left,
    "l": _nav_right,
    "j": _nav_down,
    "k": _nav_up,
    "H": _shift_left,
    "L": _shift_right,
    "J": _move_event_down,
    "K": _move_event_up,
    "C": _request_clear,
    "M": export_diagram,
    "?": _open_help,
    "q": _quit,
}

# Named keys in NORMAL mode
_NORMAL_KEYS: Dict[str, Callable[[Session], None]] = {
    "left": _nav_left,
    "right": _nav_right,
    "down": _nav_down,
    "up": _nav_up,
    "enter": _start_edit,
    "escape": _clear_selection,
    "delete": _delete_selected,
}


def _handle_normal(session: Session, key: str, char: Optional[str]) -> None:
    action = _NORMAL_KEYS.get(key)
    if action is None and char is not None:
        action = _NORMAL_COMMANDS.get(char)
    if action is not None:
        action(session)


# ═══════════════════════════════════════════════════════════
# Confirm steps
# ═══════════════════════════════════════════════════════════

def _rejected_name(session: Session, name: str) -> bool:
    """Show why *name* cannot be exported; the prompt stays open to fix it."""
    problem = name_problem(name)
    if problem is None:
        return False
    trace(f"participant name {name!r} rejected: {problem}", "WORKFLOW")
    session.editor.set_status(f"Invalid participant name: {problem}")
    return True


def _confirm_participant_name(session: Session) -> None:
    name = session.editor.input_buffer.strip()
    if name and _rejected_name(session, name):
        return
    if name:
        session.diagram.add_participant(name)
    session.editor.reset()


def _confirm_rename(session: Session) -> None:
    editor = session.editor
    name = editor.input_buffer.strip()
    if name and _rejected_name(session, name):
        return
    if name and editor.editing_participant_index is not None:
        session.diagram.rename_participant(editor.editing_participant_index, name)
    editor.reset()


def _confirm_from(session: Session) -> None:
    editor = session.editor
    editor.message_from = editor.cursor
    editor.mode = EditorMode.SELECT_TO


def _confirm_to(session: Session) -> None:
    editor = session.editor
    editor.message_to = editor.cursor
    editor.input_buffer = ""
    editor.mode = EditorMode.INPUT_MESSAGE


def _confirm_message_text(session: Session) -> None:
    editor = session.editor
    text = editor.input_buffer.strip()
    if text and editor.message_from is not None and editor.message_to is not None:
        idx = session.diagram.insert_message(
            editor.insertion_point, editor.message_from, editor.message_to, text
        )
        if idx is not None:
            editor.navigator.select(Selection.event(idx))
    editor.reset()


def _confirm_edit_from(session: Session) -> None:
    editor = session.editor
    editor.message_from = editor.cursor
    editor.cursor = _clamp(editor.message_to, session.diagram.participant_count())
    editor.mode = EditorMode.EDIT_SELECT_TO


def _confirm_edit_to(session: Session) -> None:
    editor = session.editor
    editor.message_to = editor.cursor
    editor.mode = EditorMode.EDIT_MESSAGE


def _confirm_edit_message_text(session: Session) -> None:
    editor = session.editor
    text = editor.input_buffer.strip()
    idx = editor.editing_event_index
    if (
        text
        and idx is not None
        and editor.message_from is not None
        and editor.message_to is not None
        and session.diagram.update_message(idx, editor.message_from, editor.message_to, text)
    ):
        editor.navigator.select(Selection.event(idx))
    editor.reset()


def _confirm_note_participant(session: Session) -> None:
    editor = session.editor
    editor.note_participant_start = editor.cursor
    editor.mode = (
        EditorMode.EDIT_NOTE_POSITION
        if editor.mode.is_editing()
        else EditorMode.SELECT_NOTE_POSITION
    )


def _confirm_note_position(session: Session) -> None:
    editor = session.editor
    editing = editor.mode.is_editing()

    if editor.note_position is NotePosition.OVER:
        if editing and editor.note_participant_end is not None:
            editor.cursor = _clamp(editor.note_participant_end, session.diagram.participant_count())
        else:
            editor.cursor = _clamp(editor.note_participant_start, session.diagram.participant_count())
        editor.mode = (
            EditorMode.EDIT_NOTE_END_PARTICIPANT if editing
            else EditorMode.SELECT_NOTE_END_PARTICIPANT
        )
        return

    editor.note_participant_end = editor.note_participant_start
    if editing:
        editor.mode = EditorMode.EDIT_NOTE_TEXT
    else:
        editor.input_buffer = ""
        editor.mode = EditorMode.INPUT_NOTE_TEXT


def _confirm_note_end(session: Session) -> None:
    editor = session.editor
    editor.note_participant_end = editor.cursor
    if editor.mode.is_editing():
        editor.mode = EditorMode.EDIT_NOTE_TEXT
    else:
        editor.input_buffer = ""
        editor.mode = EditorMode.INPUT_NOTE_TEXT


def _confirm_note_text(session: Session) -> None:
    editor = session.editor
    text = editor.input_buffer.strip()
    start, end = editor.note_participant_start, editor.note_participant_end
    if text and start is not None and end is not None:
        idx = session.diagram.insert_note(
            editor.insertion_point, editor.note_position, start, end, text
        )
        if idx is not None:
            editor.navigator.select(Selection.event(idx))
    editor.reset()


def _confirm_edit_note_text(session: Session) -> None:
    editor = session.editor
    text = editor.input_buffer.strip()
    idx = editor.editing_event_index
    start, end = editor.note_participant_start, editor.note_participant_end
    if (
        text
        and idx is not None
        and start is not None
        and end is not None
        and session.diagram.update_note(idx, editor.note_position, start, end, text)
    ):
        editor.navigator.select(Selection.event(idx))
    editor.reset()


_CONFIRM_HANDLERS: Dict[EditorMode, Callable[[Session], None]] = {
    EditorMode.INPUT_PARTICIPANT: _confirm_participant_name,
    EditorMode.RENAME_PARTICIPANT: _confirm_rename,
    EditorMode.SELECT_FROM: _confirm_from,
    EditorMode.SELECT_TO: _confirm_to,
    EditorMode.INPUT_MESSAGE: _confirm_message_text,
    EditorMode.EDIT_SELECT_FROM: _confirm_edit_from,
    EditorMode.EDIT_SELECT_TO: _confirm_edit_to,
    EditorMode.EDIT_MESSAGE: _confirm_edit_message_text,
    EditorMode.SELECT_NOTE_PARTICIPANT: _confirm_note_participant,
    EditorMode.EDIT_NOTE_PARTICIPANT: _confirm_note_participant,
    EditorMode.SELECT_NOTE_POSITION: _confirm_note_position,
    EditorMode.EDIT_NOTE_POSITION: _confirm_note_position,
    EditorMode.SELECT_NOTE_END_PARTICIPANT: _confirm_note_end,
    EditorMode.EDIT_NOTE_END_PARTICIPANT: _confirm_note_end,
    EditorMode.INPUT_NOTE_TEXT: _confirm_note_text,
    EditorMode.EDIT_NOTE_TEXT: _confirm_edit_note_text,
}


# ═══════════════════════════════════════════════════════════
# Per-mode key handlers
# ═══════════════════════════════════════════════════════════

def _handle_text_input(session: Session, key: str, char: Optional[str]) -> None:
    editor = session.editor
    if key == "escape":
        editor.reset()
    elif key == "enter":
        _CONFIRM_HANDLERS[editor.mode](session)
    elif key == "backspace":
        editor.input_buffer = editor.input_buffer[:-1]
    elif char is not None:
        editor.input_buffer += char


def _handle_participant_picker(session: Session, key: str, char: Optional[str]) -> None:
    editor = session.editor
    count = session.diagram.participant_count()
    if key == "escape" or count == 0:
        editor.reset()
        return
    if key == "enter":
        editor.cursor = _clamp(editor.cursor, count)
        _CONFIRM_HANDLERS[editor.mode](session)
        return

    step = 0
    if key in _MOVE_BACK or char in _MOVE_BACK:
        step = -1
    elif key in _MOVE_FORWARD or char in _MOVE_FORWARD:
        step = 1
    if step:
        editor.cursor = (editor.cursor + step) % count
    elif char is not None and char in "123456789":
        num = int(char)
        if num <= count:
            editor.cursor = num - 1


def _handle_position_picker(session: Session, key: str, char: Optional[str]) -> None:
    editor = session.editor
    if key == "escape":
        editor.reset()
    elif key == "enter":
        _CONFIRM_HANDLERS[editor.mode](session)
    elif key in _MOVE_BACK or char in _MOVE_BACK:
        editor.note_position = editor.note_position.prev()
    elif key in _MOVE_FORWARD or char in _MOVE_FORWARD:
        editor.note_position = editor.note_position.next()


def _handle_confirm_clear(session: Session, key: str, char: Optional[str]) -> None:
    editor = session.editor
    if char in ("y", "Y"):
        session.diagram.clear()
        editor.navigator.clear()
        editor.navigator.forget_participant(0)
        editor.reset()
        trace("diagram cleared", "STORE")
    elif char in ("n", "N") or key == "escape":
        editor.reset()


def _handle_help(session: Session, key: str, char: Optional[str]) -> None:
    if key == "escape" or char in ("?", "q"):
        session.editor.reset()


_MODE_HANDLERS: Dict[EditorMode, Callable[[Session, str, Optional[str]], None]] = {
    EditorMode.NORMAL: _handle_normal,
    EditorMode.HELP: _handle_help,
    EditorMode.CONFIRM_CLEAR: _handle_confirm_clear,
}
for _mode in EditorMode:
    if _mode.is_text_input():
        _MODE_HANDLERS[_mode] = _handle_text_input
    elif _mode.is_selecting_participant():
        _MODE_HANDLERS[_mode] = _handle_participant_picker
    elif _mode.is_selecting_position():
        _MODE_HANDLERS[_mode] = _handle_position_picker
del _mode
