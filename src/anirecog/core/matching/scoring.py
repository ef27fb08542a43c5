"""Similarity scoring for title candidates.

This module ranks library entries by how similar their titles are to a
queried title. Candidates are first filtered by trigram similarity; the
survivors get a composite score combining Jaro-Winkler similarity, a
prefix/substring/subsequence score, normalized Levenshtein similarity and
the trigram similarity, plus small bonuses for a matching year and type.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from rapidfuzz.distance import JaroWinkler, LCSseq, Levenshtein

from anirecog.config.models.matching_settings import MatchingSettings
from anirecog.core.library import LibraryTitleSet
from anirecog.core.matching.models import ScoredCandidate
from anirecog.core.matching.trigrams import TrigramStore, compare_trigrams, get_trigrams
from anirecog.core.normalization import NormalizationType, normalize
from anirecog.core.parser.models import Episode
from anirecog.shared.constants import AnimeTypeKeywords, CustomScoreFactors

logger = logging.getLogger(__name__)


def _common_prefix_length(a: str, b: str) -> int:
    for index, (char_a, char_b) in enumerate(zip(a, b)):
        if char_a != char_b:
            return index
    return min(len(a), len(b))


def custom_score(title: str, other: str) -> float:
    """Score how much two titles share, favoring prefixes and substrings.

    - one title starts with the other: the length ratio of the two
    - one title occurs inside the other: the length ratio, discounted
    - otherwise the better of the longest common subsequence and the common
      prefix, each relative to a length and discounted further

    Args:
        title: Queried title
        other: Candidate title

    Returns:
        Score in [0, 1]

    Example:
        >>> custom_score("example", "example show")
        0.5833333333333334
    """
    if not title or not other:
        return 0.0

    shorter, longer = sorted((len(title), len(other)))
    length_ratio = shorter / longer

    if other.startswith(title) or title.startswith(other):
        return length_ratio
    if title in other or other in title:
        return length_ratio * CustomScoreFactors.SUBSTRING

    subsequence = LCSseq.similarity(title, other) / longer * CustomScoreFactors.SUBSEQUENCE
    prefix = _common_prefix_length(title, other) / shorter * CustomScoreFactors.COMMON_PREFIX
    return max(subsequence, prefix)


class TitleScorer:
    """Rank library entries by title similarity.

    Args:
        settings: Thresholds, weights and bonuses (default: MatchingSettings())
    """

    def __init__(self, settings: MatchingSettings | None = None) -> None:
        self.settings = settings or MatchingSettings()
        self._weight_sum = self.settings.weight_sum()

    def title_similarity(self, title: str, other: str, trigram_similarity: float) -> float:
        """Composite similarity of two normalized titles, in [0, 1]."""
        s = self.settings
        weighted = (
            s.jaro_winkler_weight * JaroWinkler.similarity(title, other)
            + s.custom_weight * custom_score(title, other) ** s.custom_exponent
            + s.levenshtein_weight * Levenshtein.normalized_similarity(title, other) ** s.levenshtein_exponent
            + s.trigram_weight * trigram_similarity**s.trigram_exponent
        )
        return weighted / self._weight_sum

    def bonus(self, episode: Episode, item: LibraryTitleSet) -> float:
        """Bonus for a matching year and a matching series type."""
        bonus = 0.0
        if episode.year is not None and item.date_start is not None and item.date_start.year == episode.year:
            bonus += self.settings.year_bonus

        episode_types = {AnimeTypeKeywords.SERIES_TYPES.get(keyword.upper()) for keyword in episode.anime_type}
        if item.series_type.value in episode_types:
            bonus += self.settings.type_bonus
        return bonus

    def score(
        self,
        episode: Episode,
        items: Iterable[LibraryTitleSet],
        trigram_store: TrigramStore,
    ) -> list[ScoredCandidate]:
        """Score candidate entries against the episode's title.

        Args:
            episode: Episode whose title is scored
            items: Candidate entries
            trigram_store: Trigram sets of the candidates' titles

        Returns:
            Candidates with a score of at least ``min_candidate_score``,
            sorted by descending score then ascending id, at most
            ``max_scored_candidates`` long
        """
        title = normalize(episode.lookup_title, NormalizationType.FOR_TRIGRAMS)
        if not title:
            return []

        query_trigrams = frozenset(get_trigrams(title))
        results: list[ScoredCandidate] = []

        for item in items:
            best_score = 0.0
            for record in trigram_store.get(item.id):
                trigram_similarity = compare_trigrams(query_trigrams, record.trigrams)
                if trigram_similarity <= self.settings.trigram_prefilter:
                    continue
                best_score = max(
                    best_score,
                    self.title_similarity(title, record.title, trigram_similarity),
                )

            if best_score <= 0.0:
                continue

            score = best_score + self.bonus(episode, item)
            if score >= self.settings.min_candidate_score:
                results.append(ScoredCandidate(item.id, score))

        results.sort(key=lambda candidate: (-candidate.score, candidate.anime_id))
        ranked = results[: self.settings.max_scored_candidates]

        if ranked:
            logger.debug(
                "Scored '%s': best %d (%.3f) of %d candidate(s)",
                title,
                ranked[0].anime_id,
                ranked[0].score,
                len(results),
            )
        return ranked

