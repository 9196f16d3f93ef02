"""Tests for the terminal renderers — diagram grid layout, prompt panels, status bar."""
from __future__ import annotations

import pytest

from editor.selection import Selection
from editor.state import EditorMode
from editor.workflow import Session, handle_key
from help_dialog import APP_SUBTITLE, help_lines, mode_hints, mode_label, prompt_title
from models import NotePosition
from sequence import SequenceDiagram
from styles import THEME_COLORS, app_css, theme_colors
from tui.canvas import SequenceLayout, render_diagram
from tui.overlays import render_prompt, render_status_bar, render_welcome

COLORS = theme_colors("Dark")


def rows(diagram: SequenceDiagram, selection: Selection = Selection.none()) -> list:
    return render_diagram(diagram, selection, COLORS).plain.split("\n")


# ═══════════════════════════════════════════════════════════
# Layout
# ═══════════════════════════════════════════════════════════

class TestLayout:

    def test_columns_increase(self):
        layout = SequenceLayout.compute(SequenceDiagram(["A", "Bob", "C"]))
        xs = [p.x for p in layout.participants]
        assert xs == sorted(xs)
        assert xs[0] == 4
        assert xs[1] == 4 + 3 + 4 + 4

    def test_long_label_widens_gap(self):
        d = SequenceDiagram(["A", "B"])
        d.add_message(0, 1, "x" * 30)
        layout = SequenceLayout.compute(d)
        assert layout.participants[1].x - layout.participants[0].x == 34

    def test_height_grows_with_events(self):
        d = SequenceDiagram(["A"])
        d.add_message(0, 0, "a")
        d.add_message(0, 0, "b")
        layout = SequenceLayout.compute(d, header_height=3, event_spacing=4)
        assert [e.top for e in layout.events] == [3, 7]
        assert layout.height == 3 + 2 * 4 + 1

    def test_spacing_never_below_box_height(self):
        d = SequenceDiagram(["A"])
        d.add_note(NotePosition.OVER, 0, 0, "n")
        d.add_note(NotePosition.OVER, 0, 0, "m")
        layout = SequenceLayout.compute(d, header_height=1, event_spacing=1)
        assert [e.top for e in layout.events] == [3, 6]


# ═══════════════════════════════════════════════════════════
# Diagram rendering
# ═══════════════════════════════════════════════════════════

class TestRenderDiagram:

    def test_participant_boxes(self):
        lines = rows(SequenceDiagram(["A", "B"]))
        assert lines[0].strip() == "┌───┐     ┌───┐"
        assert lines[1].strip() == "│ A │     │ B │"

    def test_message_right(self):
        d = SequenceDiagram(["A", "B"])
        d.add_message(0, 1, "hi")
        lines = rows(d)
        assert "hi" in lines[4]
        assert lines[5].strip() == "│" + "─" * 8 + "▶│"

    def test_message_left(self):
        d = SequenceDiagram(["A", "B"])
        d.add_message(1, 0, "back")
        lines = rows(d)
        assert lines[5].strip() == "│◀" + "─" * 8 + "│"

    def test_self_message(self):
        d = SequenceDiagram(["A"])
        d.add_message(0, 0, "loop")
        lines = rows(d)
        assert "──┐ loop" in lines[4]
        assert "◀─┘" in lines[5]

    def test_note_right_of(self):
        d = SequenceDiagram(["A", "B"])
        d.add_note(NotePosition.RIGHT, 0, 0, "n")
        lines = rows(d)
        assert "│ n │" in lines[4]

    def test_left_note_on_first_participant_fits(self):
        d = SequenceDiagram(["A", "B"])
        d.add_note(NotePosition.LEFT, 0, 0, "hello")
        layout = SequenceLayout.compute(d)
        assert layout.participants[0].x == 12
        lines = rows(d)
        assert lines[3].startswith("  ┌───────┐")
        assert lines[4].startswith("  │ hello │")

    def test_wide_note_over_first_participant_fits(self):
        d = SequenceDiagram(["A"])
        d.add_note(NotePosition.OVER, 0, 0, "a long note text")
        lines = rows(d)
        assert lines[4].startswith("  │ a long note text │")

    def test_note_over_span(self):
        d = SequenceDiagram(["A", "B"])
        d.add_note(NotePosition.OVER, 0, 1, "both")
        lines = rows(d)
        assert "both" in lines[4]
        assert lines[3].count("┌") == 1

    def test_selected_event_marker(self):
        d = SequenceDiagram(["A", "B"])
        d.add_message(0, 1, "hi")
        d.add_message(1, 0, "yo")
        lines = rows(d, Selection.event(1))
        assert lines[7].startswith("▶")
        assert not lines[4].startswith("▶")

    def test_selected_participant_highlighted(self):
        text = render_diagram(SequenceDiagram(["A", "B"]), Selection.participant(1), COLORS)
        highlighted = [
            text.plain[span.start:span.end]
            for span in text.spans
            if COLORS["highlight"] in str(span.style)
        ]
        assert any("B" in chunk for chunk in highlighted)
        assert not any("A" in chunk for chunk in highlighted)


# ═══════════════════════════════════════════════════════════
# Prompt panel and status bar
# ═══════════════════════════════════════════════════════════

@pytest.fixture()
def session(tmp_path) -> Session:
    return Session(diagram=SequenceDiagram(["Alice", "Bob"]), export_path=tmp_path / "o.mmd")


class TestPrompt:

    def test_none_in_normal(self, session):
        assert render_prompt(session, COLORS) is None

    def test_text_input_shows_buffer(self, session):
        handle_key(session, "p", "p")
        for ch in "Carol":
            handle_key(session, ch, ch)
        assert render_prompt(session, COLORS).plain == "Name: Carol█"

    def test_from_to_columns(self, session):
        handle_key(session, "e", "e")
        handle_key(session, "enter")
        plain = render_prompt(session, COLORS).plain
        assert plain.startswith("From")
        assert "To" in plain.splitlines()[0]
        assert "✓ 1. Alice" in plain
        assert "▶ 1. Alice" in plain

    def test_note_participant_list(self, session):
        handle_key(session, "n", "n")
        handle_key(session, "down")
        plain = render_prompt(session, COLORS).plain
        assert plain.splitlines() == ["  1. Alice", "▶ 2. Bob"]

    def test_position_picker(self, session):
        handle_key(session, "n", "n")
        handle_key(session, "enter")
        plain = render_prompt(session, COLORS).plain
        assert "[right of Alice]" in plain
        assert "over Alice" in plain

    def test_confirm_and_help(self, session):
        handle_key(session, "C", "C")
        assert "Clear the entire diagram?" in render_prompt(session, COLORS).plain
        handle_key(session, "escape")
        handle_key(session, "?", "?")
        assert "Export Mermaid" in render_prompt(session, COLORS).plain


class TestStatusBar:

    def test_normal_hints(self, session):
        plain = render_status_bar(session, COLORS, now=0.0).plain
        assert plain.startswith(" NORMAL ")
        assert "e: message" in plain

    def test_status_message_replaces_hints(self, session):
        session.editor.set_status("Exported to o.mmd", now=10.0)
        assert "Exported to o.mmd" in render_status_bar(session, COLORS, now=10.5).plain
        assert "Exported" not in render_status_bar(session, COLORS, now=12.0).plain

    def test_input_badge(self, session):
        handle_key(session, "p", "p")
        assert render_status_bar(session, COLORS, now=0.0).plain.startswith(" INPUT ")


# ═══════════════════════════════════════════════════════════
# Help content and themes
# ═══════════════════════════════════════════════════════════

class TestHelpContent:

    def test_adjacent_actions_merge(self):
        keys = dict((action, k) for k, action in help_lines())
        assert keys["Move selection"] == "h/j/k/l ←/↓/↑/→"

    @pytest.mark.parametrize("mode", list(EditorMode))
    def test_every_mode_labelled(self, mode):
        assert mode_label(mode)
        assert mode_hints(mode, 2, True)
        if mode is not EditorMode.NORMAL:
            assert prompt_title(mode)

    def test_hints_hide_unavailable_commands(self):
        assert "e: message" not in mode_hints(EditorMode.NORMAL, 0, False)
        assert "d: delete" not in mode_hints(EditorMode.NORMAL, 2, False)

    def test_welcome(self):
        assert APP_SUBTITLE in render_welcome(COLORS).plain


class TestThemes:

    def test_unknown_theme_falls_back(self):
        assert theme_colors("Neon") is THEME_COLORS["Dark"]

    @pytest.mark.parametrize("name", list(THEME_COLORS))
    def test_css_uses_theme(self, name):
        css = app_css(name)
        assert THEME_COLORS[name]["background"] in css
        assert "#prompt.visible" in css
