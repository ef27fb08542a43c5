"""
System Configuration Constants

This module contains application metadata and file-system constants shared
by the configuration loader, the logging setup and the CLI.
"""

from typing import ClassVar


class Application:
    """Application metadata constants."""

    NAME = "anirecog"
    VERSION = "0.1.0"
    DESCRIPTION = "Anime title recognition and episode matching engine"
    LOGGER_NAME = "anirecog"
    ENV_PREFIX = "ANIRECOG_"


class FileSystem:
    """File system related constants."""

    HOME_DIR = ".anirecog"
    CONFIG_FILENAME = "config.toml"
    DEFAULT_CONFIG_PATHS: ClassVar[tuple[str, ...]] = (
        "config/config.toml",
        "config.toml",
    )


class LogConfig:
    """Log configuration constants."""

    DEFAULT_LEVEL = "WARNING"
    LEVELS: ClassVar[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
    DEFAULT_ENCODING = "utf-8"


class CLIDefaults:
    """CLI default values."""

    APP_NAME = "anirecog"
    EXIT_NOT_RECOGNIZED = 2
    DEFAULT_SCORE_LIMIT = 10
