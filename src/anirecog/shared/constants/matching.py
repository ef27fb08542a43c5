"""
Matching Engine Constants

This module contains all constants related to the recognition engine,
acceptance thresholds and the title scoring formula.
"""

ANIME_ID_UNKNOWN = -1  # Sentinel returned when no entry is recognized


class ScoringThresholds:
    """Score thresholds used by the title scorer.

    The composite title score is normalized to 1.0 for an identical title;
    bonuses may push a candidate above 1.0.
    """

    ACCEPTANCE = 0.8  # Minimum score to accept a fuzzy-only match
    MIN_CANDIDATE = 0.3  # Candidates below this never enter the ranking
    TRIGRAM_PREFILTER = 0.1  # Trigram similarity a candidate must exceed
    MAX_CANDIDATES = 20  # Ranked list is cut to this length


class ScoringWeights:
    """Weights and exponents of the composite title score."""

    JARO_WINKLER = 1.0
    CUSTOM = 0.5
    LEVENSHTEIN = 0.3
    TRIGRAM = 0.2

    CUSTOM_EXPONENT = 0.66
    LEVENSHTEIN_EXPONENT = 0.8
    TRIGRAM_EXPONENT = 0.8

    YEAR_BONUS = 0.1
    TYPE_BONUS = 0.1


class CustomScoreFactors:
    """Factors of the prefix/substring/subsequence title score."""

    SUBSTRING = 0.9
    SUBSEQUENCE = 0.8
    COMMON_PREFIX = 0.7


class EpisodeLimits:
    """Bounds used when validating episode numbers."""

    MIN_EPISODE = 1
    UNKNOWN_COUNT = 0
