"""Recognition Engine Domain Models.

This module defines the immutable option bundles and result records of the
recognition engine. They are frozen dataclasses (or named tuples) passed by
value, so callers can share them between threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from anirecog.core.parser.models import EpisodeRange, ParseOptions


@dataclass(frozen=True)
class MatchOptions:
    """Validation policy applied to every identification.

    Attributes:
        allow_sequels: Redirect out-of-range episode numbers along relations
        check_airing_date: Reject entries that have not started airing, and
            entries whose air dates do not cover the episode's year
        check_anime_type: Reject releases of openings, endings, previews...
        check_episode_number: Reject numbers outside [1, episode_count]

    Example:
        >>> options = MatchOptions(allow_sequels=True)
        >>> options.check_episode_number
        True
    """

    allow_sequels: bool = False
    check_airing_date: bool = False
    check_anime_type: bool = False
    check_episode_number: bool = True


class ScoredCandidate(NamedTuple):
    """A library entry and its similarity to the queried title."""

    anime_id: int
    score: float


@dataclass(frozen=True)
class Redirection:
    """Destination of a sequel redirection."""

    anime_id: int
    episode_range: EpisodeRange


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating an episode against one library entry.

    ``redirection`` is set when the episode number is out of range and a
    relation rule maps it to another entry.
    """

    valid: bool
    redirection: Redirection | None = None
    reason: str = ""


__all__ = [
    "MatchOptions",
    "ParseOptions",
    "Redirection",
    "ScoredCandidate",
    "ValidationResult",
]
