"""
tui package

Terminal front end: diagram layout, prompt panels and the Textual app.
"""

from tui.app import DiagramCanvas, SeqDraftApp
from tui.canvas import SequenceLayout, render_diagram
from tui.overlays import render_prompt, render_status_bar, render_welcome

__all__ = [
    "DiagramCanvas",
    "SeqDraftApp",
    "SequenceLayout",
    "render_diagram",
    "render_prompt",
    "render_status_bar",
    "render_welcome",
]
