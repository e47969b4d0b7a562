"""
Configuration - library location, discovery filters and store preferences.

Settings are read from ``settings.json`` in the application data directory
and may be overridden through environment variables (or a ``.env`` file):
``PLAYDECK_GAMES_PATH``, ``PLAYDECK_GAMES_EXTENSIONS`` and
``PLAYDECK_GAMES_EXCLUSIONS``. There is no global instance; the application
root creates one and passes it on.
"""

from __future__ import annotations

import logging
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from playdeck.core.file_finder import FilterInput, normalize_filter
from playdeck.utils.json_utils import load_json_object, save_json

logger = logging.getLogger("playdeck.config")

__all__ = ["Settings", "default_data_dir"]

SETTINGS_FILE_NAME = "settings.json"

CARD_WIDTH_MIN = 200
CARD_WIDTH_MAX = 300
CARD_WIDTH_STEP = 10

_ENV_OVERRIDES = {
    "PLAYDECK_GAMES_PATH": "games_path",
    "PLAYDECK_GAMES_EXTENSIONS": "games_extensions",
    "PLAYDECK_GAMES_EXCLUSIONS": "games_exclusions",
}


def default_data_dir() -> Path:
    """Return the default data directory for the application."""
    system = platform.system()
    if system == "Windows":
        appdata = os.environ.get("APPDATA")
        return (Path(appdata) if appdata else Path.home() / "AppData" / "Roaming") / "Playdeck"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Playdeck"
    return Path.home() / ".config" / "Playdeck"


def clamp_card_width(value: Any) -> int:
    """Clamps a card width to 200-300 pixels in steps of 10."""
    try:
        width = int(value)
    except (TypeError, ValueError):
        return CARD_WIDTH_MIN
    width = max(CARD_WIDTH_MIN, min(CARD_WIDTH_MAX, width))
    return width - (width - CARD_WIDTH_MIN) % CARD_WIDTH_STEP


@dataclass
class Settings:
    """
    User preferences consumed by the discovery pipeline and the GUI.

    ``games_extensions`` and ``games_exclusions`` keep whatever form the user
    supplied (comma-separated string or list); ``extensions`` and
    ``exclusions`` expose the normalized lists.
    """

    games_path: str = ""
    games_extensions: FilterInput = ""
    games_exclusions: FilterInput = ""
    ui_card_width: int = CARD_WIDTH_MIN
    store_language: str = "en"
    store_country: str = "US"
    data_dir: Path = field(default_factory=default_data_dir)

    def __post_init__(self):
        self.ui_card_width = clamp_card_width(self.ui_card_width)

    @property
    def settings_file(self) -> Path:
        return self.data_dir / SETTINGS_FILE_NAME

    @property
    def extensions(self) -> list[str]:
        return normalize_filter(self.games_extensions)

    @property
    def exclusions(self) -> list[str]:
        return normalize_filter(self.games_exclusions)

    @classmethod
    def load(cls, data_dir: Path | None = None, use_env: bool = True) -> Settings:
        """Load settings from ``settings.json`` and the environment.

        Args:
            data_dir: Directory holding ``settings.json``; defaults to the
                per-platform application data directory.
            use_env: Apply ``PLAYDECK_*`` environment overrides.

        Returns:
            The loaded settings; defaults for anything missing or invalid.
        """
        settings = cls(data_dir=data_dir or default_data_dir())

        data = load_json_object(settings.settings_file)

        settings.games_path = str(data.get("games_path", settings.games_path) or "")
        settings.games_extensions = data.get("games_extensions", settings.games_extensions) or ""
        settings.games_exclusions = data.get("games_exclusions", settings.games_exclusions) or ""
        settings.ui_card_width = clamp_card_width(data.get("ui_card_width", settings.ui_card_width))
        settings.store_language = data.get("store_language", settings.store_language) or "en"
        settings.store_country = data.get("store_country", settings.store_country) or "US"

        if use_env:
            load_dotenv()
            for env_key, attr in _ENV_OVERRIDES.items():
                value = os.getenv(env_key)
                if value:
                    setattr(settings, attr, value)
                    logger.debug("%s overrides %s", env_key, attr)

        return settings

    def save(self) -> bool:
        """Save current settings to ``settings.json``."""
        data = {
            "games_path": self.games_path,
            "games_extensions": self.games_extensions
            if isinstance(self.games_extensions, str)
            else list(self.games_extensions or []),
            "games_exclusions": self.games_exclusions
            if isinstance(self.games_exclusions, str)
            else list(self.games_exclusions or []),
            "ui_card_width": self.ui_card_width,
            "store_language": self.store_language,
            "store_country": self.store_country,
        }
        return save_json(self.settings_file, data)
