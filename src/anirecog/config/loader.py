"""Locating and loading the anirecog configuration.

Without an explicit path, the first existing file of
``default_config_paths()`` is loaded; with none found, settings come from
``ANIRECOG_*`` environment variables and defaults alone.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from anirecog.config.models.settings import Settings
from anirecog.shared.constants import FileSystem

logger = logging.getLogger(__name__)


def default_config_paths() -> list[Path]:
    """Configuration files searched when no path is given, in order."""
    return [
        *(Path(path) for path in FileSystem.DEFAULT_CONFIG_PATHS),
        Path.home() / FileSystem.HOME_DIR / FileSystem.CONFIG_FILENAME,
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from ``config_path``, a default location or the environment.

    Raises:
        ApplicationError: If the configuration file is unreadable or invalid
    """
    if config_path:
        return Settings.from_toml_file(config_path)

    found = next((path for path in default_config_paths() if path.is_file()), None)
    if found is None:
        logger.debug("No configuration file found, using environment and defaults")
        return Settings()

    logger.debug("Using configuration file %s", found)
    return Settings.from_toml_file(found)


class SettingsLoader:
    """Load settings once and share them between threads.

    Args:
        config_path: File to load; default locations are searched if None
    """

    def __init__(self, config_path: str | Path | None = None) -> None:
        self.config_path = config_path
        self._settings: Settings | None = None
        self._lock = threading.Lock()

    def get_config(self) -> Settings:
        """The cached settings, loaded on first use."""
        settings = self._settings
        if settings is not None:
            return settings

        with self._lock:
            if self._settings is None:
                self._settings = load_settings(self.config_path)
            return self._settings

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Load the settings again, from ``config_path`` if given."""
        with self._lock:
            if config_path is not None:
                self.config_path = config_path
            self._settings = load_settings(self.config_path)
            return self._settings
