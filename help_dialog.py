"""
help_dialog.py

Help content for seqdraft: the key binding reference shown in Help mode and
the one-line hints shown in the status bar for each editor mode.
"""

from __future__ import annotations

from typing import List, Tuple

from editor.state import EditorMode

APP_TITLE = "seqdraft"
APP_SUBTITLE = "Sequence Diagram Editor"


# ── Key binding reference ────────────────────────────

# (category, keys, action) in display order
SHORTCUTS: List[Tuple[str, str, str]] = [
    ("Diagram", "p", "Add participant"),
    ("Diagram", "e", "Insert message below selection"),
    ("Diagram", "n", "Insert note below selection"),
    ("Diagram", "Enter", "Edit selection"),
    ("Diagram", "r", "Rename participant"),
    ("Diagram", "d/Del", "Delete selection"),
    ("Diagram", "C", "Clear diagram"),
    ("Navigate", "h/j/k/l", "Move selection"),
    ("Navigate", "←/↓/↑/→", "Move selection"),
    ("Navigate", "Esc", "Clear selection / cancel"),
    ("Arrange", "H/L", "Move participant left/right, point arrow left/right"),
    ("Arrange", "J/K", "Move event down/up"),
    ("File", "M", "Export Mermaid"),
    ("App", "?", "Toggle help"),
    ("App", "q/Ctrl+c", "Quit"),
]

# Keys understood inside participant pickers
PICKER_SHORTCUTS: List[Tuple[str, str]] = [
    ("↑↓/jk", "Move cursor"),
    ("1-9", "Jump to participant"),
    ("Enter", "Select"),
    ("Esc", "Cancel"),
]


def help_lines() -> List[Tuple[str, str]]:
    """Return ``(keys, action)`` rows, merging keys that share an action."""
    merged: List[Tuple[str, str]] = []
    for _category, keys, action in SHORTCUTS:
        if merged and merged[-1][1] == action:
            merged[-1] = (f"{merged[-1][0]} {keys}", action)
        else:
            merged.append((keys, action))
    return merged


# ── Status bar ───────────────────────────────────────

_MODE_LABELS = {
    EditorMode.NORMAL: "NORMAL",
    EditorMode.HELP: "HELP",
    EditorMode.CONFIRM_CLEAR: "CONFIRM",
}


def mode_label(mode: EditorMode) -> str:
    """Short upper-case label for the status bar badge."""
    if mode in _MODE_LABELS:
        return _MODE_LABELS[mode]
    if mode.is_text_input():
        return "INPUT"
    if mode in (EditorMode.SELECT_FROM, EditorMode.EDIT_SELECT_FROM):
        return "SELECT FROM"
    if mode in (EditorMode.SELECT_TO, EditorMode.EDIT_SELECT_TO):
        return "SELECT TO"
    if mode.is_selecting_position():
        return "POSITION"
    return "SELECT"


def mode_hints(mode: EditorMode, participant_count: int, has_selection: bool) -> str:
    """One-line key hints for the status bar."""
    if mode is EditorMode.NORMAL:
        parts = ["p: participant"]
        if participant_count > 0:
            parts += ["e: message", "n: note"]
        if has_selection:
            parts += ["Enter: edit", "d: delete"]
        parts += ["?: help", "q: quit"]
        return "  ".join(parts)
    if mode is EditorMode.HELP:
        return "?: close"
    if mode is EditorMode.CONFIRM_CLEAR:
        return "y: clear  n: keep"
    if mode.is_text_input():
        return "Enter: confirm  Esc: cancel"
    if mode.is_selecting_position():
        return "←→: change  Enter: select  Esc: cancel"
    return "  ".join(f"{keys}: {action.lower()}" for keys, action in PICKER_SHORTCUTS)


def prompt_title(mode: EditorMode) -> str:
    """Title of the prompt panel for a non-normal mode."""
    return _PROMPT_TITLES.get(mode, "")


_PROMPT_TITLES = {
    EditorMode.INPUT_PARTICIPANT: "Add Participant",
    EditorMode.RENAME_PARTICIPANT: "Rename Participant",
    EditorMode.SELECT_FROM: "From",
    EditorMode.SELECT_TO: "To",
    EditorMode.EDIT_SELECT_FROM: "Edit Message: From",
    EditorMode.EDIT_SELECT_TO: "Edit Message: To",
    EditorMode.INPUT_MESSAGE: "Message",
    EditorMode.EDIT_MESSAGE: "Edit Message",
    EditorMode.SELECT_NOTE_PARTICIPANT: "Note: Participant",
    EditorMode.SELECT_NOTE_POSITION: "Note: Position",
    EditorMode.SELECT_NOTE_END_PARTICIPANT: "Note: Span To",
    EditorMode.INPUT_NOTE_TEXT: "Note",
    EditorMode.EDIT_NOTE_PARTICIPANT: "Edit Note: Participant",
    EditorMode.EDIT_NOTE_POSITION: "Edit Note: Position",
    EditorMode.EDIT_NOTE_END_PARTICIPANT: "Edit Note: Span To",
    EditorMode.EDIT_NOTE_TEXT: "Edit Note",
    EditorMode.CONFIRM_CLEAR: "Clear Diagram",
    EditorMode.HELP: "Help",
}
