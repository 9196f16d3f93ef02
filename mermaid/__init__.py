"""
mermaid package

Mermaid ``sequenceDiagram`` source exchange for the editor.
"""

from mermaid.sequence_source import (
    MermaidParseError,
    ParseErrorKind,
    name_problem,
    parse_sequence_file,
    parse_sequence_source,
    to_mermaid,
)

__all__ = [
    "MermaidParseError",
    "ParseErrorKind",
    "name_problem",
    "parse_sequence_file",
    "parse_sequence_source",
    "to_mermaid",
]
