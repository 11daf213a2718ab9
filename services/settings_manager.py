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

logger = logging.getLogger(__name__)


@dataclass
class ManipulationSettings:
    """Shape manipulation settings."""
    min_shape_size: float = 10
    rotation_snap_degrees: float = 15
    rotation_handle_offset: float = 30
    axis_constraint_threshold: float = 5


@dataclass
class ConnectionSettings:
    """Connector routing and picking settings."""
    exit_offset: float = 20            # orthogonal perpendicular exit
    anchor_snap_threshold: float = 25  # best-anchor direct snap
    nearest_anchor_threshold: float = 20
    hit_threshold: float = 8           # at 100% zoom
    bezier_samples: int = 20
    catmull_rom_tension: float = 0.3


@dataclass
class GridSettings:
    """Grid settings."""
    size: float = 20
    snap_enabled: bool = True
    adaptive: bool = True


@dataclass
class HistorySettings:
    """Undo/redo settings."""
    max_history: int = 50


@dataclass
class EditorSettings:
    """Complete editor settings."""
    manipulation: ManipulationSettings = field(default_factory=ManipulationSettings)
    connection: ConnectionSettings = field(default_factory=ConnectionSettings)
    grid: GridSettings = field(default_factory=GridSettings)
    history: HistorySettings = field(default_factory=HistorySettings)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "manipulation": asdict(self.manipulation),
            "connection": asdict(self.connection),
            "grid": asdict(self.grid),
            "history": asdict(self.history),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EditorSettings":
        """Create from dictionary. Missing sections keep their defaults."""
        settings = cls()

        if "manipulation" in data:
            settings.manipulation = ManipulationSettings(**data["manipulation"])
        if "connection" in data:
            settings.connection = ConnectionSettings(**data["connection"])
        if "grid" in data:
            settings.grid = GridSettings(**data["grid"])
        if "history" in data:
            settings.history = HistorySettings(**data["history"])

        return settings


class SettingsManager:
    """
    Manages editor settings with JSON file storage.

    Settings file location:
    - Windows: %APPDATA%/DiagramCore/settings.json
    - Linux: ~/.config/DiagramCore/settings.json
    - macOS: ~/Library/Application Support/DiagramCore/settings.json
    """

    APP_NAME = "DiagramCore"
    SETTINGS_FILE = "settings.json"

    def __init__(self, config_override: Optional[str] = None):
        """
        Initialize settings manager.

        Args:
            config_override: Optional path to override config file location.
                            Useful for testing.
        """
        self._settings = EditorSettings()
        self._config_override = config_override
        self._settings_path = self._get_settings_path()
        self.load()

    @property
    def settings(self) -> EditorSettings:
        """Get current settings."""
        return self._settings

    @property
    def settings_path(self) -> str:
        """Get the settings file path."""
        return str(self._settings_path)

    # Convenience properties for common settings
    @property
    def max_history(self) -> int:
        return self._settings.history.max_history

    @max_history.setter
    def max_history(self, value: int):
        self._settings.history.max_history = value
        self.save()

    @property
    def grid_size(self) -> float:
        return self._settings.grid.size

    @grid_size.setter
    def grid_size(self, value: float):
        self._settings.grid.size = value
        self.save()

    @property
    def snap_to_grid(self) -> bool:
        return self._settings.grid.snap_enabled

    @snap_to_grid.setter
    def snap_to_grid(self, value: bool):
        self._settings.grid.snap_enabled = value
        self.save()

    def _get_settings_path(self) -> Path:
        """Get platform-specific settings file path."""
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
        """Load settings from file. Unreadable files leave the defaults in place."""
        if not self._settings_path.exists():
            return False

        try:
            with open(self._settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._settings = EditorSettings.from_dict(data)
            logger.debug(f"Loaded settings from {self._settings_path}")
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
        self._settings = EditorSettings()
        self.save()


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
