"""
editor package

Modal editing workflow: the selection cursor, the mode/state record, and the
key-driven state machine that commits edits into the diagram.
"""

from editor.selection import Selection, SelectionKind, SelectionNavigator
from editor.state import EditorMode, EditorState, StatusMessage
from editor.workflow import Session, export_diagram, handle_key

__all__ = [
    "Selection",
    "SelectionKind",
    "SelectionNavigator",
    "EditorMode",
    "EditorState",
    "StatusMessage",
    "Session",
    "export_diagram",
    "handle_key",
]
