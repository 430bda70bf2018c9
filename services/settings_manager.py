"""
Settings Manager.

Handles editor settings with JSON file storage.
"""

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from typing import Optional
from pathlib import Path

from models import ShapeStyle

logger = logging.getLogger(__name__)


@dataclass
class StyleDefaults:
    """Style given to newly drawn shapes."""
    stroke_color: str = "#000000"
    fill_color: str = "#ffffff"
    line_width: int = 2

    def to_style(self) -> ShapeStyle:
        return ShapeStyle(
            stroke_color=self.stroke_color,
            fill_color=self.fill_color,
            line_width=self.line_width,
        )


@dataclass
class UISettings:
    """User interface settings."""
    show_grid: bool = True
    grid_size: int = 25
    text_font_family: str = "Arial"
    text_font_size: int = 16
    label_font_size: int = 14
    anchor_radius: float = 5.0
    show_dot_preview: bool = True


@dataclass
class PathSettings:
    """File path settings."""
    last_export_dir: str = ""
    recent_exports_max: int = 10


@dataclass
class AppSettings:
    """Complete application settings."""
    style: StyleDefaults = field(default_factory=StyleDefaults)
    ui: UISettings = field(default_factory=UISettings)
    paths: PathSettings = field(default_factory=PathSettings)
    recent_exports: list = field(default_factory=list)
    window_geometry: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "style": asdict(self.style),
            "ui": asdict(self.ui),
            "paths": asdict(self.paths),
            "recent_exports": self.recent_exports,
            "window_geometry": self.window_geometry,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """Create from dictionary. Unknown keys are ignored."""
        settings = cls()

        if "style" in data:
            settings.style = _load_section(StyleDefaults, data["style"])
        if "ui" in data:
            settings.ui = _load_section(UISettings, data["ui"])
        if "paths" in data:
            settings.paths = _load_section(PathSettings, data["paths"])
        if "recent_exports" in data:
            settings.recent_exports = list(data["recent_exports"])
        if "window_geometry" in data:
            settings.window_geometry = dict(data["window_geometry"])

        return settings


def _load_section(section_cls, data: dict):
    known = section_cls.__dataclass_fields__
    return section_cls(**{k: v for k, v in data.items() if k in known})


class SettingsManager:
    """
    Manages editor settings with JSON file storage.

    Settings file location:
    - Windows: %APPDATA%/DiagramEditor/settings.json
    - Linux: ~/.config/DiagramEditor/settings.json
    - macOS: ~/Library/Application Support/DiagramEditor/settings.json
    """

    APP_NAME = "DiagramEditor"
    SETTINGS_FILE = "settings.json"

    def __init__(self, config_override: Optional[str] = None):
        """
        Initialize settings manager.

        Args:
            config_override: Optional path to override config file location.
                            Useful for testing.
        """
        self._settings = AppSettings()
        self._config_override = config_override
        self._settings_path = self._get_settings_path()
        self._ensure_settings_dir()
        self.load()

    @property
    def settings(self) -> AppSettings:
        """Get current settings."""
        return self._settings

    @property
    def settings_path(self) -> str:
        """Get the settings file path."""
        return str(self._settings_path)

    @property
    def style(self) -> StyleDefaults:
        return self._settings.style

    @property
    def ui(self) -> UISettings:
        return self._settings.ui

    def default_style(self) -> ShapeStyle:
        """Style for newly drawn shapes."""
        return self._settings.style.to_style()

    def get_export_directory(self) -> str:
        """Get the directory to use for Export dialogs."""
        last = self._settings.paths.last_export_dir
        if last and os.path.isdir(last):
            return last
        return ""

    def set_export_directory(self, path: str):
        """Set the last used Export directory."""
        if os.path.isfile(path):
            path = os.path.dirname(path)
        self._settings.paths.last_export_dir = path
        self.save()

    def add_recent_export(self, file_path: str):
        """Add a file to the recent exports list."""
        if file_path in self._settings.recent_exports:
            self._settings.recent_exports.remove(file_path)

        self._settings.recent_exports.insert(0, file_path)

        max_files = self._settings.paths.recent_exports_max
        self._settings.recent_exports = self._settings.recent_exports[:max_files]

        self.save()

    def get_recent_exports(self) -> list:
        """Get recent exports, filtered to existing files."""
        existing = [f for f in self._settings.recent_exports if os.path.exists(f)]
        if len(existing) != len(self._settings.recent_exports):
            self._settings.recent_exports = existing
            self.save()
        return existing

    def _get_settings_path(self) -> Path:
        """Get platform-specific settings directory."""
        if self._config_override:
            return Path(self._config_override)

        import platform
        system = platform.system()

        if system == "Windows":
            base = os.environ.get("APPDATA", os.path.expanduser("~"))
            config_dir = Path(base) / self.APP_NAME
        elif system == "Darwin":  # macOS
            config_dir = Path.home() / "Library" / "Application Support" / self.APP_NAME
        else:  # Linux and others
            xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
            config_dir = Path(xdg_config) / self.APP_NAME

        return config_dir / self.SETTINGS_FILE

    def _ensure_settings_dir(self):
        """Create settings directory if it doesn't exist."""
        self._settings_path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> bool:
        """Load settings from file."""
        if not self._settings_path.exists():
            return False

        try:
            with open(self._settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._settings = AppSettings.from_dict(data)
            return True
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Error loading settings: {e}")
            return False

    def save(self) -> bool:
        """Save settings to file."""
        try:
            self._ensure_settings_dir()
            with open(self._settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings.to_dict(), f, indent=2)
            return True
        except OSError as e:
            logger.error(f"Error saving settings: {e}")
            return False

    def reset(self):
        """Reset settings to defaults."""
        self._settings = AppSettings()
        self.save()

    def save_window_geometry(self, geometry: bytes, state: bytes):
        """Save window geometry and state."""
        import base64
        self._settings.window_geometry = {
            "geometry": base64.b64encode(geometry).decode("ascii"),
            "state": base64.b64encode(state).decode("ascii"),
        }
        self.save()

    def get_window_geometry(self) -> tuple:
        """Get saved window geometry and state."""
        import base64
        import binascii
        geo = self._settings.window_geometry
        if not geo:
            return None, None

        try:
            geometry = base64.b64decode(geo.get("geometry", ""))
            state = base64.b64decode(geo.get("state", ""))
            return geometry, state
        except (binascii.Error, ValueError):
            return None, None


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings(config_override: Optional[str] = None) -> SettingsManager:
    """
    Get the global settings manager instance.

    Args:
        config_override: Optional path to override config location.
                        Only used on first call to initialize.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager(config_override)
    return _settings_manager


def reset_settings_manager():
    """Reset the global settings manager (useful for testing)."""
    global _settings_manager
    _settings_manager = None
