"""
tui/canvas.py

Lay a sequence diagram out on a character grid and render it as Rich text.

Participants are boxed names across the top with a lifeline below each
one.  Every event gets a fixed band of rows: messages draw their label
above a horizontal arrow (self-messages a small loop), notes draw a box
beside or over their lifeline(s).  Column spacing widens where a message
label or note between two neighbours would not fit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from rich.text import Text

from editor.selection import Selection
from models import Message, Note, NotePosition
from sequence import SequenceDiagram

GUTTER = 2
NOTE_PAD = 2
BOX_ROWS = 3  # participant boxes and notes are three rows tall


@dataclass
class ParticipantLayout:
    index: int
    name: str
    x: int       # lifeline column
    width: int   # box width


@dataclass
class EventLayout:
    index: int
    top: int     # first row of the event band


@dataclass
class SequenceLayout:
    width: int
    height: int
    participants: List[ParticipantLayout] = field(default_factory=list)
    events: List[EventLayout] = field(default_factory=list)

    @classmethod
    def compute(
        cls,
        diagram: SequenceDiagram,
        header_height: int = 3,
        event_spacing: int = 3,
        min_gap: int = 4,
    ) -> "SequenceLayout":
        header_height = max(header_height, BOX_ROWS)
        event_spacing = max(event_spacing, BOX_ROWS)
        widths = [len(name) + 4 for name in diagram.participants]
        needed = _neighbour_distances(diagram, len(widths))

        participants: List[ParticipantLayout] = []
        for i, (name, w) in enumerate(zip(diagram.participants, widths)):
            if i == 0:
                x = GUTTER + w // 2
            else:
                prev = participants[-1]
                x = prev.x + max((prev.width + 1) // 2 + (w + 1) // 2 + min_gap, needed[i - 1])
            participants.append(ParticipantLayout(i, name, x, w))

        # Notes that reach left of the first lifeline push every column right
        shift = GUTTER - _leftmost_note_column(diagram, participants)
        if shift > 0:
            for p in participants:
                p.x += shift

        events = [
            EventLayout(i, header_height + i * event_spacing)
            for i in range(diagram.event_count())
        ]

        width = (participants[-1].x + participants[-1].width) if participants else GUTTER
        height = header_height + diagram.event_count() * event_spacing + 1
        return cls(width=width, height=height, participants=participants, events=events)


def _leftmost_note_column(diagram: SequenceDiagram, participants: List[ParticipantLayout]) -> int:
    xs = {p.index: p.x for p in participants}
    lefts = [
        _note_box(event, xs)[0]
        for event in diagram.events
        if isinstance(event, Note) and event.participant_start in xs and event.participant_end in xs
    ]
    return min(lefts, default=GUTTER)


def _neighbour_distances(diagram: SequenceDiagram, count: int) -> List[int]:
    """Minimum distance between lifelines i and i+1 to fit labels and notes."""
    needed = [0] * max(count - 1, 0)

    def _need(i: int, amount: int) -> None:
        if 0 <= i < len(needed):
            needed[i] = max(needed[i], amount)

    for event in diagram.events:
        if isinstance(event, Message):
            lo, hi = sorted((event.from_index, event.to_index))
            if lo == hi:
                _need(lo, len(event.text) + 6)
            elif hi - lo == 1:
                _need(lo, len(event.text) + 4)
        elif isinstance(event, Note):
            if event.position is NotePosition.RIGHT:
                _need(event.participant_start, len(event.text) + 6)
            elif event.position is NotePosition.LEFT:
                _need(event.participant_start - 1, len(event.text) + 6)
    return needed


# ─────────────────────────────────────────────────────────
# Grid
# ─────────────────────────────────────────────────────────

class _Grid:
    """Growable character grid with one Rich style per cell."""

    def __init__(self, width: int, height: int):
        self.rows: List[List[Tuple[str, Optional[str]]]] = [
            [(" ", None)] * width for _ in range(height)
        ]

    def put(self, x: int, y: int, text: str, style: Optional[str] = None) -> None:
        if y < 0:
            return
        while y >= len(self.rows):
            self.rows.append([])
        row = self.rows[y]
        for offset, ch in enumerate(text):
            col = x + offset
            if col < 0:
                continue
            if col >= len(row):
                row.extend([(" ", None)] * (col - len(row) + 1))
            row[col] = (ch, style)

    def to_text(self) -> Text:
        out = Text()
        for n, row in enumerate(self.rows):
            if n:
                out.append("\n")
            run, run_style = "", None
            for ch, style in row:
                if style != run_style and run:
                    out.append(run, style=run_style)
                    run = ""
                run_style = style
                run += ch
            if run:
                out.append(run.rstrip() if run_style is None else run, style=run_style)
        return out


# ─────────────────────────────────────────────────────────
# Rendering
# ─────────────────────────────────────────────────────────

def _draw_participant(grid: _Grid, p: ParticipantLayout, style: str) -> None:
    left = p.x - p.width // 2
    inner = p.width - 2
    grid.put(left, 0, "┌" + "─" * inner + "┐", style)
    grid.put(left, 1, "│" + p.name.center(inner) + "│", style)
    grid.put(left, 2, "└" + "─" * inner + "┘", style)


def _draw_message(grid: _Grid, fx: int, tx: int, top: int, text: str, style: str) -> None:
    if fx == tx:
        grid.put(fx, top + 1, "──┐", style)
        grid.put(fx + 4, top + 1, text, style)
        grid.put(fx, top + 2, "◀─┘", style)
        return

    lo, hi = sorted((fx, tx))
    span = hi - lo - 1
    grid.put(lo + 1, top + 2, "─" * span, style)
    if tx > fx:
        grid.put(tx - 1, top + 2, "▶", style)
    else:
        grid.put(tx + 1, top + 2, "◀", style)

    room = max(span - 2, 1)
    label = text if len(text) <= room else text[: max(room - 1, 0)] + "…"
    grid.put(lo + 1 + (span - len(label)) // 2, top + 1, label, style)


def _draw_note(grid: _Grid, left: int, width: int, top: int, text: str, style: str) -> None:
    inner = width - 2
    grid.put(left, top, "┌" + "─" * inner + "┐", style)
    grid.put(left, top + 1, "│" + text.center(inner) + "│", style)
    grid.put(left, top + 2, "└" + "─" * inner + "┘", style)


def _note_box(note: Note, xs: Dict[int, int]) -> Tuple[int, int]:
    """Return ``(left, width)`` of a note box."""
    width = len(note.text) + 2 * NOTE_PAD
    start = xs[note.participant_start]
    if note.position is NotePosition.RIGHT:
        return start + 2, width
    if note.position is NotePosition.LEFT:
        return start - 1 - width, width
    lo, hi = sorted((start, xs[note.participant_end]))
    width = max(width, hi - lo + 2 * NOTE_PAD + 1)
    return (lo + hi) // 2 - width // 2, width


def render_diagram(
    diagram: SequenceDiagram,
    selection: Selection,
    colors: Dict[str, str],
    header_height: int = 3,
    event_spacing: int = 3,
    min_gap: int = 4,
) -> Text:
    """Render *diagram* with *selection* highlighted."""
    header_height = max(header_height, BOX_ROWS)
    layout = SequenceLayout.compute(diagram, header_height, event_spacing, min_gap)
    grid = _Grid(layout.width, layout.height)
    xs = {p.index: p.x for p in layout.participants}

    text_style = colors["text"]
    muted = colors["muted"]
    selected = f"bold {colors['highlight']}"
    border = colors["accent"]

    for p in layout.participants:
        for y in range(header_height, layout.height):
            grid.put(p.x, y, "│", muted)
        is_selected = selection.is_participant and selection.index == p.index
        _draw_participant(grid, p, selected if is_selected else border)

    for ev in layout.events:
        event = diagram.events[ev.index]
        is_selected = selection.is_event and selection.index == ev.index
        if is_selected:
            grid.put(0, ev.top + 1, "▶", selected)

        if isinstance(event, Message):
            if event.from_index not in xs or event.to_index not in xs:
                continue
            style = selected if is_selected else text_style
            _draw_message(grid, xs[event.from_index], xs[event.to_index], ev.top, event.text, style)
        elif isinstance(event, Note):
            if event.participant_start not in xs or event.participant_end not in xs:
                continue
            style = selected if is_selected else colors["note"]
            left, width = _note_box(event, xs)
            _draw_note(grid, left, width, ev.top, event.text, style)

    return grid.to_text()


def selected_row(diagram: SequenceDiagram, selection: Selection, header_height: int = 3,
                 event_spacing: int = 3) -> int:
    """Grid row to keep in view for *selection*."""
    if selection.is_event and selection.index < diagram.event_count():
        header_height = max(header_height, BOX_ROWS)
        event_spacing = max(event_spacing, BOX_ROWS)
        return header_height + selection.index * event_spacing
    return 0
