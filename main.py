"""
main.py

seqdraft - Sequence Diagram Editor

Terminal application for drawing sequence diagrams from the keyboard and
exporting them as Mermaid source:
- Participants, messages and notes (left of / right of / over)
- Modal insert and edit workflows driven by single keys
- Strict Mermaid ``sequenceDiagram`` import and export

Usage:
    seqdraft [--import diagram.mmd]

Dependencies:
    pip install textual rich typer platformdirs tomli-w

Environment:
    SEQDRAFT_TRACE=1 (write a trace log to the user log directory)
"""

from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Optional

import typer

from debug_trace import close_log, enable_trace, trace, trace_exception
from editor.state import EditorState
from editor.workflow import Session
from mermaid.sequence_source import MermaidParseError
from sequence import SequenceDiagram
from settings import get_settings

app = typer.Typer(add_completion=False)


def load_diagram(path: Optional[Path]) -> SequenceDiagram:
    """Return the diagram to start with: parsed from *path*, or empty.

    Raises:
        OSError: The file could not be read.
        MermaidParseError: The file is not a supported sequence diagram.
    """
    if path is None:
        return SequenceDiagram()
    diagram = SequenceDiagram.from_file(path)
    trace(
        f"Imported {path}: {diagram.participant_count()} participants, "
        f"{diagram.event_count()} events",
        "MAIN",
    )
    return diagram


@app.command()
def edit(
    import_path: Optional[Path] = typer.Option(
        None, "--import", "-i", help="Mermaid sequence diagram to open.", show_default=False
    ),
):
    """Edit a sequence diagram in the terminal."""
    # Imported before the UI so a bad file never leaves the terminal in app mode
    try:
        diagram = load_diagram(import_path)
    except (OSError, MermaidParseError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    trace("Loading settings", "MAIN")
    settings_manager = get_settings()
    settings_manager.ensure_file_complete()
    settings = settings_manager.settings
    if settings.debug.trace:
        enable_trace()

    session = Session(
        diagram=diagram,
        editor=EditorState(status_timeout=settings.editor.status_timeout),
        export_path=settings_manager.get_export_path(),
    )

    from tui.app import SeqDraftApp

    trace("Entering event loop", "MAIN")
    try:
        SeqDraftApp(session, theme_name=settings.theme, layout=settings.layout).run()
    finally:
        trace("Saving settings on quit", "MAIN")
        settings_manager.save()
        close_log()


def excepthook(exc_type, exc_value, exc_tb):
    trace("UNCAUGHT EXCEPTION:", "CRASH")
    trace("".join(traceback.format_exception(exc_type, exc_value, exc_tb)), "CRASH")
    close_log()
    sys.__excepthook__(exc_type, exc_value, exc_tb)


def run():
    """Console script entry point."""
    sys.excepthook = excepthook
    trace("Application starting", "MAIN")
    try:
        app()
    except Exception as e:
        trace(f"FATAL: {type(e).__name__}: {e}", "CRASH")
        trace_exception("Fatal exception")
        close_log()
        raise


if __name__ == "__main__":
    run()
