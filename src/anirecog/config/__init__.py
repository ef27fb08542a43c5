"""anirecog Configuration Module

This module provides unified access to configuration models and settings
management:
- Settings: Main configuration facade
- load_settings and the caching SettingsLoader
- Domain models: Logging, Matching and Relations settings
"""

from __future__ import annotations

from .loader import SettingsLoader, load_settings
from .models import (
    LoggingSettings,
    MatchingSettings,
    RelationsSettings,
    Settings,
)

__all__ = [
    "LoggingSettings",
    "MatchingSettings",
    "RelationsSettings",
    "Settings",
    "SettingsLoader",
    "load_settings",
]
