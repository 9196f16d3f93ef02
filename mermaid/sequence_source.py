"""
mermaid/sequence_source.py

Serialize a sequence diagram to Mermaid ``sequenceDiagram`` source and parse
it back.

The accepted grammar is a strict subset of Mermaid::

    sequenceDiagram
        participant <Name>
        <From>->><To>: <Text>
        Note right of <Name>: <Text>
        Note left of <Name>: <Text>
        Note over <NameA>,<NameB>: <Text>
        Note over <Name>: <Text>

Blank lines and ``%%`` comments are rejected.  Names referenced before any
``participant`` line are declared on first use, in the order they are seen.
The header may be indented.  Names and texts are read back trimmed, so a
name must pass ``name_problem`` to survive a round trip.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set

from debug_trace import trace
from models import Event, Message, Note, NotePosition
from sequence import SequenceDiagram

HEADER = "sequenceDiagram"
INDENT = "    "

_PARTICIPANT_RE = re.compile(r"^participant\s+(.+)$")
_NOTE_RE = re.compile(r"^Note\s+(right\s+of|left\s+of|over)\s+([^:]+?)\s*:(.*)$")
_ARROW = "->>"
_RESERVED_PREFIX_RE = re.compile(r"^(participant|Note)\s")


# ═══════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════

class ParseErrorKind(Enum):
    MISSING_HEADER = "missing header"
    UNSUPPORTED_LINE = "unsupported line"
    MALFORMED_MESSAGE = "malformed message syntax"
    MALFORMED_NOTE = "malformed note syntax"
    NOTE_OVER_ARITY = "note-over requires exactly two participants"


class MermaidParseError(ValueError):
    """Raised on the first line the parser cannot accept.

    Attributes:
        kind: What went wrong.
        line_number: 1-based line number in the source text.
        line: The offending line, as written.
    """

    def __init__(self, kind: ParseErrorKind, line_number: int, line: str):
        self.kind = kind
        self.line_number = line_number
        self.line = line
        super().__init__(f"{kind.value} at line {line_number}: {line!r}")


# ═══════════════════════════════════════════════════════════
# Names
# ═══════════════════════════════════════════════════════════

def name_problem(name: str) -> Optional[str]:
    """Return why *name* cannot be written and read back as a participant.

    Returns:
        A short reason, or ``None`` when the name survives a round trip.
    """
    if not name.strip():
        return "name is empty"
    if name != name.strip():
        return "name has surrounding spaces"
    for token in (":", ",", _ARROW):
        if token in name:
            return f"name cannot contain '{token}'"
    if name.startswith((">", "-")) or name.endswith("-"):
        return "name cannot start with '>' or '-', or end with '-'"
    m = _RESERVED_PREFIX_RE.match(name)
    if m:
        return f"name cannot start with '{m.group(1)} '"
    return None


# ═══════════════════════════════════════════════════════════
# Serializer
# ═══════════════════════════════════════════════════════════

def to_mermaid(participants: Sequence[str], events: Sequence[Event]) -> str:
    """Render participants and events as Mermaid source.

    All ``participant`` lines come first, then the events in order.  Events
    whose indices fall outside *participants* are skipped.

    Returns:
        The source text, always ending in a newline.
    """
    count = len(participants)

    def _name(idx: int) -> Optional[str]:
        return participants[idx] if 0 <= idx < count else None

    lines = [HEADER]
    for name in participants:
        lines.append(f"{INDENT}participant {name}")

    for event in events:
        if isinstance(event, Message):
            sender, receiver = _name(event.from_index), _name(event.to_index)
            if sender is None or receiver is None:
                continue
            lines.append(f"{INDENT}{sender}{_ARROW}{receiver}: {event.text}")
        elif isinstance(event, Note):
            start, end = _name(event.participant_start), _name(event.participant_end)
            if start is None or end is None:
                continue
            if event.is_span():
                target = f"{start},{end}"
            else:
                target = start
            lines.append(f"{INDENT}Note {event.position.as_str()} {target}: {event.text}")

    return "\n".join(lines) + "\n"


# ═══════════════════════════════════════════════════════════
# Parser
# ═══════════════════════════════════════════════════════════

class _Builder:
    """Accumulates participants while resolving names to indices."""

    def __init__(self) -> None:
        self.participants: List[str] = []
        self.events: List[Event] = []
        self._index: Dict[str, int] = {}
        self._auto_declared: Set[str] = set()

    def declare(self, name: str) -> None:
        # A name first seen in a message/note is bound, not duplicated.
        if name in self._auto_declared:
            self._auto_declared.discard(name)
            return
        self._index.setdefault(name, len(self.participants))
        self.participants.append(name)

    def resolve(self, name: str) -> int:
        idx = self._index.get(name)
        if idx is None:
            idx = len(self.participants)
            self._index[name] = idx
            self._auto_declared.add(name)
            self.participants.append(name)
        return idx


def _parse_message(builder: _Builder, line: str, line_number: int, raw: str) -> None:
    sender, _, rest = line.partition(_ARROW)
    receiver, colon, text = rest.partition(":")
    sender, receiver = sender.strip(), receiver.strip()
    # Other Mermaid arrows such as -->> leave arrow characters on a name
    if (
        not colon
        or not sender
        or not receiver
        or sender.endswith("-")
        or receiver.startswith((">", "-"))
    ):
        raise MermaidParseError(ParseErrorKind.MALFORMED_MESSAGE, line_number, raw)

    from_index = builder.resolve(sender)
    to_index = builder.resolve(receiver)
    builder.events.append(Message(from_index, to_index, text.strip()))


def _parse_note(builder: _Builder, line: str, line_number: int, raw: str) -> None:
    m = _NOTE_RE.match(line)
    if not m:
        raise MermaidParseError(ParseErrorKind.MALFORMED_NOTE, line_number, raw)

    position = NotePosition.from_str(m.group(1))
    names = [n.strip() for n in m.group(2).split(",")]
    text = m.group(3).strip()

    if any(not n for n in names):
        raise MermaidParseError(ParseErrorKind.MALFORMED_NOTE, line_number, raw)
    if position is NotePosition.OVER:
        if len(names) > 2:
            raise MermaidParseError(ParseErrorKind.NOTE_OVER_ARITY, line_number, raw)
    elif len(names) != 1:
        raise MermaidParseError(ParseErrorKind.MALFORMED_NOTE, line_number, raw)

    start = builder.resolve(names[0])
    end = builder.resolve(names[1]) if len(names) == 2 else start
    builder.events.append(Note(position, start, end, text))


def parse_sequence_source(text: str) -> SequenceDiagram:
    """Parse Mermaid sequence source into a diagram.

    Args:
        text: Full content of a ``.mmd`` file.

    Returns:
        A new ``SequenceDiagram``.

    Raises:
        MermaidParseError: On the first line that does not match the grammar.
            No diagram is produced in that case.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != HEADER:
        first = lines[0] if lines else ""
        raise MermaidParseError(ParseErrorKind.MISSING_HEADER, 1, first)

    builder = _Builder()
    for line_number, raw in enumerate(lines[1:], start=2):
        line = raw.strip()

        m = _PARTICIPANT_RE.match(line)
        if m:
            builder.declare(m.group(1).strip())
        elif line.startswith("Note ") or line == "Note":
            _parse_note(builder, line, line_number, raw)
        elif _ARROW in line:
            _parse_message(builder, line, line_number, raw)
        else:
            raise MermaidParseError(ParseErrorKind.UNSUPPORTED_LINE, line_number, raw)

    trace(
        f"parsed {len(builder.participants)} participants, {len(builder.events)} events",
        "CODEC",
    )
    return SequenceDiagram(builder.participants, builder.events)


def parse_sequence_file(path: str) -> SequenceDiagram:
    """Parse a Mermaid sequence source file.

    Raises:
        OSError: If the file cannot be read.
        MermaidParseError: If its content is malformed.
    """
    with open(path, "r", encoding="utf-8") as f:
        return parse_sequence_source(f.read())
