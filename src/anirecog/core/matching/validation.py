"""Candidate validation.

A title match alone does not make a correct identification: an opening
video, an episode number past the end of the series, or a series that has
not started airing yet all point at the wrong entry. This module checks a
candidate entry against the episode under the caller's MatchOptions, and
finds sequel redirections for out-of-range episode numbers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from anirecog.core.library import LibraryTitleSet
from anirecog.core.matching.models import MatchOptions, ValidationResult
from anirecog.core.matching.relations import RelationsGraph
from anirecog.core.parser.models import Episode
from anirecog.shared.constants import AnimeTypeKeywords, EpisodeLimits

logger = logging.getLogger(__name__)


def is_valid_episode_number(number: int | None, episode_count: int) -> bool:
    """Check an episode number against an entry's episode count.

    Args:
        number: Episode number
        episode_count: Number of episodes, 0 if unknown

    Returns:
        True if the number is at least 1 and, when the count is known, at
        most the count

    Examples:
        >>> is_valid_episode_number(13, 12)
        False
        >>> is_valid_episode_number(5, 0)
        True
    """
    if number is None or number < EpisodeLimits.MIN_EPISODE:
        return False
    return episode_count == EpisodeLimits.UNKNOWN_COUNT or number <= episode_count


def is_valid_anime_type(episode: Episode) -> bool:
    """Reject openings, endings, previews and promotional videos."""
    return not any(keyword.upper() in AnimeTypeKeywords.INVALID for keyword in episode.anime_type)


class CandidateValidator:
    """Validate candidate entries under a MatchOptions policy.

    Args:
        relations: Relations used to redirect out-of-range episode numbers
        today: Returns the reference date for airing checks
    """

    def __init__(
        self,
        relations: RelationsGraph,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.relations = relations
        self.today = today

    def validate(
        self,
        episode: Episode,
        item: LibraryTitleSet,
        options: MatchOptions,
        *,
        redirect: bool = True,
    ) -> ValidationResult:
        """Validate one candidate entry.

        Args:
            episode: Episode being identified
            item: Candidate entry
            options: Checks to apply
            redirect: Return the redirection of an out-of-range number. If
                False, an available redirection only makes the candidate
                valid and is left for a later call to apply.

        Returns:
            The outcome. A valid outcome may carry a redirection, which the
            caller must apply and validate against the destination entry.
        """
        if options.check_airing_date:
            if not item.has_aired(self.today()):
                return ValidationResult(False, reason="not aired yet")
            if episode.year is not None and not item.aired_in(episode.year):
                return ValidationResult(False, reason=f"did not air in {episode.year}")

        if options.check_anime_type and not is_valid_anime_type(episode):
            return ValidationResult(False, reason=f"invalid anime type {episode.anime_type}")

        if not options.check_episode_number:
            return ValidationResult(True)

        return self._validate_episode_number(episode, item, options, redirect=redirect)

    def _validate_episode_number(
        self,
        episode: Episode,
        item: LibraryTitleSet,
        options: MatchOptions,
        *,
        redirect: bool,
    ) -> ValidationResult:
        episode_range = episode.episode_number_range

        if episode_range is None:
            # Single-episode entries and batch releases carry no number
            if item.episode_count == 1 or not episode.file_extension or episode.is_batch_release():
                return ValidationResult(True)
        elif episode_range.low >= EpisodeLimits.MIN_EPISODE and is_valid_episode_number(
            episode_range.high, item.episode_count
        ):
            return ValidationResult(True)

        if options.allow_sequels and episode_range is not None:
            redirection = self.relations.search_redirection(item.id, episode_range)
            if redirection is not None:
                if not redirect:
                    # A redirection exists; the caller applies it later
                    return ValidationResult(True)
                logger.debug(
                    "Redirecting anime %d episode %s to anime %d episode %s",
                    item.id,
                    episode_range,
                    redirection.anime_id,
                    redirection.episode_range,
                )
                return ValidationResult(True, redirection=redirection)

        if item.episode_count == EpisodeLimits.UNKNOWN_COUNT:
            return ValidationResult(True)

        if episode.is_range and episode_range.low >= EpisodeLimits.MIN_EPISODE:
            return ValidationResult(True)

        return ValidationResult(
            False,
            reason=f"episode {episode_range or 'number missing'} out of range 1-{item.episode_count}",
        )
