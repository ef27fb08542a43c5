"""Top-level anirecog settings.

One Settings object groups the logging, matching and relations sections. A
TOML file uses the same section names:

    [matching]
    acceptance_threshold = 0.85

    [relations]
    path = "data/relations.txt"
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from anirecog.config.models.logging_settings import LoggingSettings
from anirecog.config.models.matching_settings import MatchingSettings
from anirecog.config.models.relations_settings import RelationsSettings
from anirecog.shared.constants import Application, LogConfig
from anirecog.shared.errors import create_config_error

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """All configuration sections.

    Values come from, in order of precedence: keyword arguments (and thus a
    TOML file loaded through ``from_toml_file``), ``ANIRECOG_`` environment
    variables with ``__`` between nested names, then the defaults.

    Example:
        >>> Settings().matching.acceptance_threshold
        0.8
    """

    model_config = SettingsConfigDict(
        env_prefix=Application.ENV_PREFIX,
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    relations: RelationsSettings = Field(default_factory=RelationsSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file; the environment fills in omitted values.

        Raises:
            FileNotFoundError: If the file does not exist
            ApplicationError: If the file is not valid TOML or holds
                invalid values
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        try:
            sections = toml.load(file_path)
            settings = cls(**sections)
        except toml.TomlDecodeError as e:
            raise create_config_error(
                f"{file_path} is not valid TOML: {e}",
                config_key=str(file_path),
                original_error=e,
            ) from e
        except ValidationError as e:
            raise create_config_error(
                f"{file_path} has {e.error_count()} invalid value(s)",
                config_key=str(file_path),
                original_error=e,
            ) from e

        logger.debug("Loaded settings from %s", file_path)
        return settings

    def to_toml_file(self, file_path: str | Path) -> None:
        """Write the settings as TOML, leaving out unset optional values."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(
            toml.dumps(self.model_dump(mode="json", exclude_none=True)),
            encoding=LogConfig.DEFAULT_ENCODING,
        )
