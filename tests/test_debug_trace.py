"""Tests for debug_trace.py — the trace log file."""
from __future__ import annotations

import pytest

import debug_trace


@pytest.fixture()
def log_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(debug_trace.platformdirs, "user_log_dir", lambda name: str(tmp_path))
    monkeypatch.setattr(debug_trace, "DEBUG_TRACE", False)
    monkeypatch.setattr(debug_trace, "_log_file", None)
    yield tmp_path
    debug_trace.close_log()


def test_disabled_writes_nothing(log_dir):
    debug_trace.trace("quiet", "MAIN")
    assert not debug_trace.log_path().exists()


def test_enabled_writes_categorised_lines(log_dir):
    debug_trace.enable_trace()
    debug_trace.trace("hello", "MAIN")
    debug_trace.close_log()
    text = debug_trace.log_path().read_text(encoding="utf-8")
    assert "[MAIN] hello" in text


def test_key_category_filtered(log_dir, monkeypatch):
    monkeypatch.setattr(debug_trace, "TRACE_KEYS", False)
    debug_trace.enable_trace()
    debug_trace.trace("pressed x", "KEY")
    debug_trace.trace("kept", "MODE")
    debug_trace.close_log()
    text = debug_trace.log_path().read_text(encoding="utf-8")
    assert "pressed x" not in text
    assert "[MODE] kept" in text


def test_trace_call_passes_through(log_dir):
    @debug_trace.trace_call("TEST")
    def double(x):
        return x * 2

    debug_trace.enable_trace()
    assert double(4) == 8
    debug_trace.close_log()
    assert ">>> test_trace_call_passes_through.<locals>.double" in debug_trace.log_path().read_text(
        encoding="utf-8"
    )
