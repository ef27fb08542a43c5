"""Configuration domain models."""

from __future__ import annotations

from .logging_settings import LoggingSettings
from .matching_settings import MatchingSettings
from .relations_settings import RelationsSettings
from .settings import Settings

__all__ = [
    "LoggingSettings",
    "MatchingSettings",
    "RelationsSettings",
    "Settings",
]
