"""
tui/overlays.py

Rich renderables for everything drawn around the diagram: the prompt panel
of each non-normal mode, the status bar, and the welcome screen shown while
the diagram is empty.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from rich.text import Text

from editor.state import EditorMode
from editor.workflow import Session
from help_dialog import APP_SUBTITLE, help_lines, mode_hints, mode_label, prompt_title
from models import NotePosition

LOGO = [
    "┌─┐┌─┐┌─┐ ┌┬┐┬─┐┌─┐┌─┐┌┬┐",
    "└─┐├┤ │─┼┐ ││├┬┘├─┤├┤  │ ",
    "└─┘└─┘└─┘└─┴┘┴└─┴ ┴└   ┴ ",
]

_TEXT_PROMPTS = {
    EditorMode.INPUT_PARTICIPANT: "Name",
    EditorMode.RENAME_PARTICIPANT: "Name",
    EditorMode.INPUT_MESSAGE: "Text",
    EditorMode.EDIT_MESSAGE: "Text",
    EditorMode.INPUT_NOTE_TEXT: "Text",
    EditorMode.EDIT_NOTE_TEXT: "Text",
}

# mode -> picking the From column
_FROM_TO_MODES = {
    EditorMode.SELECT_FROM: True,
    EditorMode.SELECT_TO: False,
    EditorMode.EDIT_SELECT_FROM: True,
    EditorMode.EDIT_SELECT_TO: False,
}


def render_prompt(session: Session, colors: Dict[str, str]) -> Optional[Text]:
    """Body of the prompt panel, or ``None`` in ``NORMAL`` mode."""
    mode = session.editor.mode
    if mode is EditorMode.NORMAL:
        return None
    if mode is EditorMode.HELP:
        return _help_body(colors)
    if mode is EditorMode.CONFIRM_CLEAR:
        return _confirm_body(colors)
    if mode.is_text_input():
        return _text_input_body(session, colors)
    if mode in _FROM_TO_MODES:
        return _from_to_body(session, colors)
    if mode.is_selecting_position():
        return _position_body(session, colors)
    return _participant_list(session.diagram.participants, session.editor.cursor, colors)


def _text_input_body(session: Session, colors: Dict[str, str]) -> Text:
    editor = session.editor
    out = Text()
    out.append(f"{_TEXT_PROMPTS[editor.mode]}: ", style=colors["muted"])
    out.append(editor.input_buffer, style=colors["text"])
    out.append("█", style=colors["highlight"])
    return out


def _participant_list(
    names: List[str],
    cursor: Optional[int],
    colors: Dict[str, str],
    active: bool = True,
    chosen: Optional[int] = None,
) -> Text:
    out = Text()
    for i, name in enumerate(names):
        if i:
            out.append("\n")
        label = f"{i + 1}. {name}" if i < 9 else f"   {name}"
        if active and i == cursor:
            out.append(f"▶ {label}", style=f"bold {colors['highlight']}")
        elif not active and i == chosen:
            out.append(f"✓ {label}", style=colors["success"])
        else:
            out.append(f"  {label}", style=colors["text"] if active else colors["muted"])
    return out


def _from_to_body(session: Session, colors: Dict[str, str]) -> Text:
    """Two columns side by side; the inactive one shows the choice made so far."""
    editor = session.editor
    names = session.diagram.participants
    picking_from = _FROM_TO_MODES[editor.mode]

    left = _participant_list(
        names, editor.cursor, colors, active=picking_from, chosen=editor.message_from
    )
    right = _participant_list(
        names, editor.cursor, colors, active=not picking_from, chosen=editor.message_to
    )
    left_lines = left.split("\n")
    right_lines = right.split("\n")
    col_width = max((len(line) for line in left_lines), default=0) + 4
    col_width = max(col_width, 10)

    out = Text()
    out.append("From".ljust(col_width), style=f"bold {colors['accent']}")
    out.append("To", style=f"bold {colors['accent']}")
    for l_line, r_line in zip(left_lines, right_lines):
        out.append("\n")
        out.append_text(l_line)
        out.append(" " * (col_width - len(l_line)))
        out.append_text(r_line)
    return out


def _position_body(session: Session, colors: Dict[str, str]) -> Text:
    editor = session.editor
    names = session.diagram.participants
    start = editor.note_participant_start
    who = names[start] if start is not None and start < len(names) else "?"

    out = Text()
    for n, position in enumerate(NotePosition):
        if n:
            out.append("   ")
        label = f"{position.as_str()} {who}"
        if position is editor.note_position:
            out.append(f"[{label}]", style=f"bold {colors['highlight']}")
        else:
            out.append(f" {label} ", style=colors["muted"])
    return out


def _confirm_body(colors: Dict[str, str]) -> Text:
    out = Text("Clear the entire diagram? ", style=colors["text"])
    out.append("[y]", style=f"bold {colors['warning']}")
    out.append("es  ", style=colors["text"])
    out.append("[n]", style=f"bold {colors['accent']}")
    out.append("o", style=colors["text"])
    return out


def _help_body(colors: Dict[str, str]) -> Text:
    rows = help_lines()
    width = max(len(keys) for keys, _ in rows) + 2
    out = Text()
    for n, (keys, action) in enumerate(rows):
        if n:
            out.append("\n")
        out.append(keys.ljust(width), style=f"bold {colors['accent']}")
        out.append(action, style=colors["text"])
    return out


def prompt_panel_title(session: Session) -> str:
    return prompt_title(session.editor.mode)


# ─────────────────────────────────────────────────────────
# Status bar
# ─────────────────────────────────────────────────────────

def _badge_color(mode: EditorMode, colors: Dict[str, str]) -> str:
    if mode is EditorMode.NORMAL:
        return colors["accent"]
    if mode is EditorMode.HELP:
        return colors["help"]
    if mode.is_text_input():
        return colors["success"]
    return colors["warning"]


def render_status_bar(session: Session, colors: Dict[str, str], now: Optional[float] = None) -> Text:
    """Mode badge followed by the live status message or the mode's key hints."""
    editor = session.editor
    mode = editor.mode
    out = Text()
    out.append(f" {mode_label(mode)} ", style=f"bold {colors['background']} on {_badge_color(mode, colors)}")
    out.append(" ")

    status = editor.get_status(now)
    if status is not None:
        out.append(status, style=f"bold {colors['highlight']}")
    else:
        hints = mode_hints(
            mode,
            session.diagram.participant_count(),
            not editor.selection.is_none,
        )
        out.append(hints, style=colors["muted"])
    return out


def render_welcome(colors: Dict[str, str]) -> Text:
    """Shown in place of the diagram while it has no participants."""
    out = Text()
    for line in LOGO:
        out.append(line + "\n", style=f"bold {colors['accent']}")
    out.append("\n")
    out.append(APP_SUBTITLE + "\n\n", style=colors["text"])
    out.append("p", style=f"bold {colors['highlight']}")
    out.append(" add a participant   ", style=colors["muted"])
    out.append("?", style=f"bold {colors['highlight']}")
    out.append(" help   ", style=colors["muted"])
    out.append("q", style=f"bold {colors['highlight']}")
    out.append(" quit", style=colors["muted"])
    return out
