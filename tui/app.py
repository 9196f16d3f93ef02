"""
tui/app.py

Textual application shell.

The app owns one ``Session``.  The focused ``DiagramCanvas`` hands every key
to ``editor.workflow.handle_key`` and the app then redraws the diagram, the
prompt panel and the status bar from the session.
"""

from __future__ import annotations

import time
from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Static

from debug_trace import trace
from editor.workflow import Session, handle_key
from settings import LayoutSettings
from styles import DEFAULT_STYLE, app_css, theme_colors
from tui.canvas import render_diagram, selected_row
from tui.overlays import prompt_panel_title, render_prompt, render_status_bar, render_welcome

STATUS_REFRESH_SECONDS = 0.25


class DiagramCanvas(Static, can_focus=True):
    """Diagram view.  Forwards every key press to the editing workflow."""

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        self.app.process_key(event.key, event.character)


class SeqDraftApp(App):
    """Interactive sequence diagram editor."""

    TITLE = "seqdraft"

    BINDINGS = [
        Binding("ctrl+c", "quit", "Quit", priority=True, show=False),
    ]

    def __init__(
        self,
        session: Session,
        theme_name: str = DEFAULT_STYLE,
        layout: Optional[LayoutSettings] = None,
    ) -> None:
        self.CSS = app_css(theme_name)
        super().__init__()
        self.session = session
        self.colors = theme_colors(theme_name)
        self.layout_settings = layout or LayoutSettings()

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="diagram-scroll"):
            yield DiagramCanvas(id="diagram")
        yield Static(id="prompt")
        yield Static(id="status-bar")

    def on_mount(self) -> None:
        self.query_one("#diagram", DiagramCanvas).focus()
        self.set_interval(STATUS_REFRESH_SECONDS, self._draw_status)
        self.refresh_all()

    # ═══ Input ═══

    def process_key(self, key: str, character: Optional[str]) -> None:
        handle_key(self.session, key, character)
        if self.session.should_quit:
            trace("quit requested", "APP")
            self.exit()
            return
        self.refresh_all()

    def action_quit(self) -> None:
        self.session.should_quit = True
        self.exit()

    # ═══ Drawing ═══

    def refresh_all(self) -> None:
        self._draw_diagram()
        self._draw_prompt()
        self._draw_status()

    def _draw_diagram(self) -> None:
        diagram = self.session.diagram
        canvas = self.query_one("#diagram", DiagramCanvas)
        if diagram.participant_count() == 0:
            canvas.update(render_welcome(self.colors))
            return

        selection = self.session.editor.selection
        canvas.update(render_diagram(
            diagram,
            selection,
            self.colors,
            header_height=self.layout_settings.header_height,
            event_spacing=self.layout_settings.event_spacing,
            min_gap=self.layout_settings.min_participant_gap,
        ))
        if selection.is_event:
            row = selected_row(
                diagram, selection, self.layout_settings.header_height, self.layout_settings.event_spacing
            )
            self.query_one("#diagram-scroll", VerticalScroll).scroll_to(
                y=max(row - self.layout_settings.event_spacing, 0), animate=False
            )

    def _draw_prompt(self) -> None:
        prompt = self.query_one("#prompt", Static)
        body = render_prompt(self.session, self.colors)
        if body is None:
            prompt.remove_class("visible")
            return
        prompt.border_title = prompt_panel_title(self.session)
        prompt.update(body)
        prompt.add_class("visible")

    def _draw_status(self) -> None:
        self.query_one("#status-bar", Static).update(
            render_status_bar(self.session, self.colors, time.monotonic())
        )
