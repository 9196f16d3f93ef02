"""
settings.py

Persistent settings management for seqdraft.

Handles cross-platform settings storage using TOML format with platformdirs
for proper user config directory detection.

Settings file location:
    - Windows: %APPDATA%/seqdraft/settings.toml
    - macOS: ~/Library/Application Support/seqdraft/settings.toml
    - Linux: ~/.config/seqdraft/settings.toml

Default values are documented in comments throughout this file.
If settings.toml is corrupted, these defaults will be used.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

APP_NAME = "seqdraft"

# Global settings manager instance (singleton)
_settings_manager: Optional["SettingsManager"] = None


def get_settings() -> "SettingsManager":
    """Get the global settings manager instance.

    Returns:
        The singleton SettingsManager instance.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager


def reset_settings() -> None:
    """Drop the singleton so the next ``get_settings()`` reloads from disk."""
    global _settings_manager
    _settings_manager = None


# =============================================================================
# Editor Settings
# =============================================================================

@dataclass
class EditorSettings:
    """Editing workflow settings.

    Defaults:
        status_timeout: 1.0
        export_filename: "diagram.mmd"
    """
    status_timeout: float = 1.0              # Default: 1.0 seconds
    export_filename: str = "diagram.mmd"     # Default: "diagram.mmd" (working directory)


# =============================================================================
# Layout Settings
# =============================================================================

@dataclass
class LayoutSettings:
    """Character-grid layout of the diagram view.

    Defaults:
        header_height: 3
        event_spacing: 3
        min_participant_gap: 4
    """
    header_height: int = 3            # Default: 3 rows (boxed participant names)
    event_spacing: int = 3            # Default: 3 rows per message/note
    min_participant_gap: int = 4      # Default: 4 columns between boxes


# =============================================================================
# Debug Settings
# =============================================================================

@dataclass
class DebugSettings:
    """Diagnostics settings.

    Defaults:
        trace: False
    """
    trace: bool = False  # Default: False (SEQDRAFT_TRACE=1 also enables it)


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Application settings with default values.

    Attributes:
        theme: The UI theme name (must match a key in styles.THEME_COLORS).
        editor: Editing workflow settings.
        layout: Diagram view layout settings.
        debug: Diagnostics settings.
    """
    # UI Settings
    theme: str = "Dark"  # Default: "Dark"

    # Nested settings categories
    editor: EditorSettings = field(default_factory=EditorSettings)
    layout: LayoutSettings = field(default_factory=LayoutSettings)
    debug: DebugSettings = field(default_factory=DebugSettings)


# =============================================================================
# Settings Manager
# =============================================================================

class SettingsManager:
    """Manages loading, saving, and accessing application settings.

    Settings are stored in a TOML file at the platform-appropriate location.
    If the settings file doesn't exist, defaults are used and the file is
    created on first save.

    Args:
        app_name: Application name used for the config directory.
        settings_dir: Override for the config directory (tests).
    """

    def __init__(self, app_name: str = APP_NAME, settings_dir: Optional[Path] = None):
        if settings_dir is None:
            settings_dir = Path(platformdirs.user_config_dir(app_name))
        self.settings_dir = Path(settings_dir)
        self.settings_file = self.settings_dir / "settings.toml"
        self.settings = self.load()
        self._needs_save = not self.settings_file.exists()  # Save if file didn't exist

    def ensure_file_complete(self) -> None:
        """Ensure settings file exists with all sections. Call once at startup."""
        if self._needs_save or not self.settings_file.exists():
            self.save()
            self._needs_save = False

    def load(self) -> AppSettings:
        """Load settings from the TOML file.

        Returns:
            AppSettings instance with values from file or defaults if file
            doesn't exist or is invalid.
        """
        if not self.settings_file.exists():
            return AppSettings()

        try:
            with open(self.settings_file, "rb") as f:
                data = tomllib.load(f)

            return self._parse_toml(data)
        except (OSError, tomllib.TOMLDecodeError, AttributeError, TypeError, ValueError):
            # If file is corrupted or invalid, return defaults
            return AppSettings()

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Parse TOML data into AppSettings.

        Args:
            data: Parsed TOML dictionary.

        Returns:
            AppSettings instance populated from TOML data.
        """
        settings = AppSettings()

        # General section
        general = data.get("general", {})
        settings.theme = general.get("theme", settings.theme)

        # Editor section
        editor = data.get("editor", {})
        settings.editor.status_timeout = float(editor.get("status_timeout", settings.editor.status_timeout))
        settings.editor.export_filename = editor.get("export_filename", settings.editor.export_filename)

        # Layout section
        layout = data.get("layout", {})
        settings.layout.header_height = layout.get("header_height", settings.layout.header_height)
        settings.layout.event_spacing = layout.get("event_spacing", settings.layout.event_spacing)
        settings.layout.min_participant_gap = layout.get("min_participant_gap", settings.layout.min_participant_gap)

        # Debug section
        debug = data.get("debug", {})
        settings.debug.trace = debug.get("trace", settings.debug.trace)

        return settings

    def save(self) -> None:
        """Save current settings to the TOML file.

        Creates the settings directory if it doesn't exist.
        """
        # Ensure directory exists
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        # Convert settings to TOML structure
        data = self._to_toml_dict()

        with open(self.settings_file, "wb") as f:
            tomli_w.dump(data, f)

    def _to_toml_dict(self) -> Dict[str, Any]:
        """Convert settings to a TOML-compatible dictionary structure.

        Returns:
            Dictionary organized by TOML sections.
        """
        s = self.settings
        return {
            "general": {
                "theme": s.theme,
            },
            "editor": {
                "status_timeout": s.editor.status_timeout,
                "export_filename": s.editor.export_filename,
            },
            "layout": {
                "header_height": s.layout.header_height,
                "event_spacing": s.layout.event_spacing,
                "min_participant_gap": s.layout.min_participant_gap,
            },
            "debug": {
                "trace": s.debug.trace,
            },
        }

    def to_toml(self) -> str:
        """Convert current settings to a TOML-formatted string.

        Returns:
            TOML representation of the current settings.
        """
        data = self._to_toml_dict()
        return tomli_w.dumps(data)

    def get_export_path(self) -> Path:
        """Get the export target, relative to the working directory."""
        return Path(self.settings.editor.export_filename)

    def get_settings_path(self) -> Path:
        """Get the path to the settings file.

        Returns:
            Path object pointing to the settings file location.
        """
        return self.settings_file
