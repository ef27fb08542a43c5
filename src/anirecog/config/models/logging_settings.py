"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from anirecog.shared.constants import LogConfig


class LoggingSettings(BaseModel):
    """How the CLI configures the package logger.

    ``--log-level`` on the command line takes precedence over ``level``.
    """

    level: str = Field(default=LogConfig.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="Also write JSON log lines to this file")
    use_rich: bool = Field(default=True, description="Rich console instead of JSON lines on stderr")

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LogConfig.LEVELS:
            msg = f"Invalid log level '{value}', expected one of {', '.join(LogConfig.LEVELS)}"
            raise ValueError(msg)
        return level
