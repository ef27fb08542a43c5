"""
anirecog Constants Module

This module provides centralized constants for the anirecog package.
All magic values and tunable defaults are defined here so that the
normalizer, the scorer and the configuration models share a single source
of truth.
"""

from .keywords import AnimeTypeKeywords, ReleaseKeywords
from .matching import (
    ANIME_ID_UNKNOWN,
    CustomScoreFactors,
    EpisodeLimits,
    ScoringThresholds,
    ScoringWeights,
)
from .normalization import (
    Ordinals,
    PunctuationRanges,
    RomanNumerals,
    SeasonPhrases,
    Transliteration,
    UnicodeLumps,
    UnnecessaryWords,
)
from .system import Application, CLIDefaults, FileSystem, LogConfig

__all__ = [
    "ANIME_ID_UNKNOWN",
    "AnimeTypeKeywords",
    "Application",
    "CLIDefaults",
    "CustomScoreFactors",
    "EpisodeLimits",
    "FileSystem",
    "LogConfig",
    "Ordinals",
    "PunctuationRanges",
    "ReleaseKeywords",
    "RomanNumerals",
    "ScoringThresholds",
    "ScoringWeights",
    "SeasonPhrases",
    "Transliteration",
    "UnicodeLumps",
    "UnnecessaryWords",
]
