"""
styles.py

Terminal colour themes - Dark, Light and Tailwind.

Each theme maps the roles used by the diagram view, the prompt panel and
the status bar to hex colours.  ``app_css()`` turns a theme into the
Textual stylesheet for the application shell.
"""

from typing import Dict

# Colour roles:
#   background:  screen background
#   text:        participant names, message labels
#   muted:       lifelines, hints, inactive picker column
#   accent:      borders, logo, NORMAL badge
#   highlight:   selected participant/event, picker cursor
#   note:        note boxes
#   success:     INPUT badge
#   warning:     SELECT badge
#   help:        HELP badge
THEME_COLORS: Dict[str, Dict[str, str]] = {
    "Dark": {
        "background": "#1e1e1e",
        "text": "#d4d4d4",
        "muted": "#6a6a6a",
        "accent": "#569cd6",
        "highlight": "#dcdcaa",
        "note": "#c586c0",
        "success": "#6a9955",
        "warning": "#ce9178",
        "help": "#4ec9b0",
    },
    "Light": {
        "background": "#f5f5f5",
        "text": "#1a1a1a",
        "muted": "#9e9e9e",
        "accent": "#0078d4",
        "highlight": "#d83b01",
        "note": "#8764b8",
        "success": "#107c10",
        "warning": "#ca5010",
        "help": "#038387",
    },
    "Tailwind": {
        "background": "#0f172a",      # slate-900
        "text": "#e2e8f0",            # slate-200
        "muted": "#64748b",           # slate-500
        "accent": "#6366f1",          # indigo-500
        "highlight": "#facc15",       # yellow-400
        "note": "#a78bfa",            # violet-400
        "success": "#22c55e",         # green-500
        "warning": "#f97316",         # orange-500
        "help": "#06b6d4",            # cyan-500
    },
}

DEFAULT_STYLE = "Dark"


def theme_colors(name: str) -> Dict[str, str]:
    """Return the colours for *name*, falling back to the default theme."""
    return THEME_COLORS.get(name, THEME_COLORS[DEFAULT_STYLE])


def app_css(name: str) -> str:
    """Textual stylesheet for the application shell in theme *name*."""
    c = theme_colors(name)
    return f"""
Screen {{
    background: {c["background"]};
    color: {c["text"]};
}}

#diagram-scroll {{
    height: 1fr;
    border: round {c["accent"]};
    overflow: auto auto;
    scrollbar-size: 1 1;
}}

#diagram {{
    width: auto;
    padding: 0 1;
}}

#prompt {{
    height: auto;
    max-height: 50%;
    border: round {c["accent"]};
    padding: 0 1;
    display: none;
}}

#prompt.visible {{
    display: block;
}}

#status-bar {{
    height: 1;
}}
"""
