"""
debug_trace.py

Trace logging for the editor.

The terminal belongs to the UI while it runs, so trace lines go to a log
file in the platform log directory.  Set ``TRACE_STDERR`` to also echo them
to stderr (useful from tests or before the UI starts).  Tracing is off
until ``enable_trace()`` is called or ``SEQDRAFT_TRACE=1`` is set.
"""

import os
import sys
import traceback
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Optional

import platformdirs

APP_NAME = "seqdraft"

DEBUG_TRACE = os.environ.get("SEQDRAFT_TRACE", "") not in ("", "0")

# Echo trace lines to stderr as well as the log file
TRACE_STDERR = False

# Set to True to trace every key press (very verbose)
TRACE_KEYS = False

# Log file name inside the log directory (None for stderr only)
LOG_FILE: Optional[str] = "seqdraft_debug.log"

_log_file = None


def log_path() -> Path:
    """Return the trace log location."""
    return Path(platformdirs.user_log_dir(APP_NAME)) / (LOG_FILE or "")


def enable_trace(enabled: bool = True) -> None:
    global DEBUG_TRACE
    DEBUG_TRACE = enabled


def _get_log_file():
    global _log_file
    if LOG_FILE and _log_file is None:
        try:
            path = log_path()
            path.parent.mkdir(parents=True, exist_ok=True)
            _log_file = open(path, "w", encoding="utf-8")
        except OSError:
            pass
    return _log_file


def trace(msg: str, category: str = "INFO"):
    """Write a trace message with timestamp."""
    if not DEBUG_TRACE:
        return
    if category == "KEY" and not TRACE_KEYS:
        return

    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    line = f"[{timestamp}] [{category}] {msg}"

    if TRACE_STDERR:
        print(line, file=sys.stderr, flush=True)

    log_file = _get_log_file()
    if log_file:
        try:
            log_file.write(line + "\n")
            log_file.flush()
        except OSError:
            pass


def trace_exception(msg: str = "Exception"):
    """Record the exception currently being handled."""
    if not DEBUG_TRACE:
        return
    trace(f"{msg}: {traceback.format_exc()}", "ERROR")


def trace_call(category: str = "CALL"):
    """Decorator to trace function calls."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if not DEBUG_TRACE:
                return func(*args, **kwargs)
            func_name = func.__qualname__
            trace(f">>> {func_name}", category)
            try:
                result = func(*args, **kwargs)
                trace(f"<<< {func_name}", category)
                return result
            except Exception as e:
                trace(f"!!! {func_name} raised {type(e).__name__}: {e}", "ERROR")
                raise
        return wrapper
    return decorator


def close_log():
    """Close log file."""
    global _log_file
    if _log_file:
        try:
            _log_file.close()
        except OSError:
            pass
        _log_file = None
