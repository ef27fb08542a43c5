"""Anime title recognition engine.

This module provides the facade that identifies which library entry a
release belongs to. It orchestrates the whole recognition process:
1. Parsing a raw file name or title into an Episode (anitopy)
2. Exact lookup of the normalized title in the three-tier title index
3. Fuzzy scoring when the lookup has no hit, or several
4. Validating the candidate (anime type, airing date, episode number)
5. Redirecting out-of-range episode numbers along sequel relations

A failed identification is not an error: ``identify`` returns
ANIME_ID_UNKNOWN and leaves the episode untouched.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import date
from pathlib import Path

from anirecog.config.models.matching_settings import MatchingSettings
from anirecog.config.models.settings import Settings
from anirecog.core.library import AnimeLibrary, LibraryTitleSet
from anirecog.core.matching.models import (
    MatchOptions,
    ParseOptions,
    ScoredCandidate,
    ValidationResult,
)
from anirecog.core.matching.relations import RelationsGraph
from anirecog.core.matching.scoring import TitleScorer
from anirecog.core.matching.title_index import TitleIndex
from anirecog.core.matching.trigrams import TrigramStore
from anirecog.core.matching.validation import CandidateValidator
from anirecog.core.parser.anitopy_parser import AnitopyParser
from anirecog.core.parser.models import Episode
from anirecog.shared.constants import ANIME_ID_UNKNOWN
from anirecog.shared.logging import log_operation_success
from anirecog.shared.utils import ReadWriteLock

logger = logging.getLogger(__name__)


class RecognitionEngine:
    """Identify library entries from loosely formatted release titles.

    The title index and trigram store are shared state: rebuilding them
    takes the engine's write lock, while identifications, lookups and
    searches share its read lock and run concurrently.

    Args:
        library: Library the engine recognizes against
        settings: Matching thresholds and weights (default: MatchingSettings())
        relations: Sequel relations (default: an empty RelationsGraph)
        today: Returns the reference date for airing checks
        parser: Release parser (default: AnitopyParser())

    Example:
        >>> library = AnimeLibrary([LibraryTitleSet(id=42, title="Example Show", episode_count=12)])
        >>> engine = RecognitionEngine(library)
        >>> episode = engine.parse("[Group] Example Show - 05 [720p].mkv")
        >>> engine.identify(episode)
        42
    """

    def __init__(
        self,
        library: AnimeLibrary,
        settings: MatchingSettings | None = None,
        relations: RelationsGraph | None = None,
        *,
        today: Callable[[], date] = date.today,
        parser: AnitopyParser | None = None,
    ) -> None:
        self.library = library
        self.settings = settings or MatchingSettings()
        self.relations = relations if relations is not None else RelationsGraph()

        self._titles = TitleIndex()
        self._trigrams = TrigramStore()
        self._scorer = TitleScorer(self.settings)
        self._validator = CandidateValidator(self.relations, today)
        self._parser = parser or AnitopyParser()

        self._lock = ReadWriteLock()
        self._scores: list[ScoredCandidate] = []
        self._scores_lock = threading.Lock()
        self._stale_ids: set[int] = set()
        self._stale_lock = threading.Lock()

        self.initialize_titles()

    @classmethod
    def from_settings(cls, library: AnimeLibrary, settings: Settings) -> RecognitionEngine:
        """Create an engine and load the relations file configured in ``settings``."""
        engine = cls(library, settings.matching)
        if settings.relations.path is not None:
            engine.read_relations_file(
                settings.relations.path,
                service_index=settings.relations.service_index,
            )
        return engine

    # Parsing

    def parse(
        self,
        text: str,
        options: ParseOptions | None = None,
        episode: Episode | None = None,
    ) -> Episode:
        """Parse a file name, path or title into an Episode."""
        return self._parser.parse(text, options, episode)

    # Title index

    def initialize_titles(self) -> None:
        """Rebuild the title index and trigram store from the whole library."""
        start = time.perf_counter()
        items = self.library.items()

        with self._lock.write_locked():
            self._titles.clear()
            self._trigrams.clear()
            for item in items:
                self._titles.update(item)
                self._trigrams.update(item)
            with self._stale_lock:
                self._stale_ids.clear()

        log_operation_success(
            logger,
            "initialize_titles",
            (time.perf_counter() - start) * 1000,
            {"items": len(items)},
        )

    def update_titles(self, item: LibraryTitleSet, erase_ids: bool = False) -> None:
        """Index the titles of one entry.

        Args:
            item: Entry to index
            erase_ids: Drop the entry's old titles first (after a rename)
        """
        with self._lock.write_locked():
            self._purge_stale_ids()
            self._titles.update(item, erase_ids=erase_ids)
            self._trigrams.update(item)

    def look_up_title(self, title: str) -> frozenset[int]:
        """Ids of the entries whose normalized title equals ``title``'s."""
        with self._lock.read_locked():
            return self._look_up(title)

    # Identification

    def identify(
        self,
        episode: Episode | str,
        give_score: bool = False,
        options: MatchOptions | None = None,
    ) -> int:
        """Identify the library entry an episode belongs to.

        On success the episode's ``anime_id`` is set and, after a sequel
        redirection, its episode number range is rewritten. On failure the
        episode is left untouched.

        Args:
            episode: Episode to identify, or a raw string to parse first
            give_score: Keep the ranked candidate scores for ``get_scores``
            options: Validation policy (default: MatchOptions())

        Returns:
            The identified id, or ANIME_ID_UNKNOWN
        """
        options = options or MatchOptions()
        if isinstance(episode, str):
            episode = self.parse(episode)

        if not episode.lookup_title:
            logger.debug("Episode has no title to identify")
            if give_score:
                self._store_scores([])
            return ANIME_ID_UNKNOWN

        with self._lock.read_locked():
            resolved = self._identify(episode, give_score, options)

        if resolved is None:
            logger.debug("Could not identify '%s'", episode.lookup_title)
            return ANIME_ID_UNKNOWN

        episode.anime_id = resolved.anime_id
        episode.episode_number_range = resolved.episode_number_range
        return episode.anime_id

    def score_title(
        self,
        episode: Episode,
        candidate_ids: Iterable[int] = (),
        options: MatchOptions | None = None,
    ) -> list[ScoredCandidate]:
        """Rank candidate entries by title similarity.

        Args:
            episode: Episode whose title is scored
            candidate_ids: Entries to score; every entry passing a
                non-redirecting validation if empty
            options: Validation policy for the whole-library case

        Returns:
            Ranked candidates, best first
        """
        with self._lock.read_locked():
            return self._score_title(episode, tuple(candidate_ids), options or MatchOptions())

    def search(self, text: str) -> list[int]:
        """Free-text search: exact title hits first, then fuzzy matches.

        No validation is applied.
        """
        episode = Episode(title=text)
        with self._lock.read_locked():
            exact = sorted(self._look_up(text))
            others = [item for item in self.library.items() if item.id not in exact]
            ranked = self._scorer.score(episode, others, self._trigrams)
        return exact + [candidate.anime_id for candidate in ranked]

    def get_scores(self) -> list[ScoredCandidate]:
        """Scores kept by the last ``identify(..., give_score=True)``."""
        with self._scores_lock:
            return list(self._scores)

    # Relations

    def read_relations(self, document: str | bytes, *, service_index: int = 0) -> bool:
        """Replace the sequel relations with those of a document."""
        return self.relations.read(document, service_index=service_index)

    def read_relations_file(self, path: str | Path, *, service_index: int = 0) -> bool:
        """Replace the sequel relations with those of a file."""
        return self.relations.read_file(path, service_index=service_index)

    # Internals; callers hold the read or write lock

    def _look_up(self, title: str) -> frozenset[int]:
        ids = self._titles.look_up(title)
        stale = {anime_id for anime_id in ids if anime_id not in self.library}
        if stale:
            logger.warning("Title index holds stale id(s) %s for '%s'", sorted(stale), title)
            with self._stale_lock:
                self._stale_ids.update(stale)
        return ids - stale

    def _purge_stale_ids(self) -> None:
        with self._stale_lock:
            stale, self._stale_ids = self._stale_ids, set()
        if stale:
            self._titles.remove_ids(stale)
            for anime_id in stale:
                self._trigrams.remove(anime_id)
            logger.debug("Dropped stale id(s) %s", sorted(stale))

    def _score_title(
        self,
        episode: Episode,
        candidate_ids: tuple[int, ...],
        options: MatchOptions,
    ) -> list[ScoredCandidate]:
        if candidate_ids:
            items = [item for item in map(self.library.find, candidate_ids) if item is not None]
        else:
            items = [
                item
                for item in self.library.items()
                if item.id in self._trigrams
                and self._validator.validate(episode, item, options, redirect=False).valid
            ]
        return self._scorer.score(episode, items, self._trigrams)

    def _identify(
        self,
        episode: Episode,
        give_score: bool,
        options: MatchOptions,
    ) -> Episode | None:
        candidate_ids = sorted(self._look_up(episode.lookup_title))
        scores: list[ScoredCandidate] = []
        chosen: tuple[LibraryTitleSet, ValidationResult] | None = None

        if candidate_ids:
            valid: dict[int, tuple[LibraryTitleSet, ValidationResult]] = {}
            for anime_id in candidate_ids:
                item = self.library.find(anime_id)
                if item is None:
                    continue
                result = self._validator.validate(episode, item, options)
                if result.valid:
                    valid[anime_id] = (item, result)
                else:
                    logger.debug("Rejected anime %d: %s", anime_id, result.reason)

            if give_score or len(valid) > 1:
                scores = self._scorer.score(episode, [item for item, _ in valid.values()], self._trigrams)

            if len(valid) > 1:
                best_id = scores[0].anime_id if scores else min(valid)
                logger.debug("Ambiguous title '%s' %s resolved to %d", episode.lookup_title, sorted(valid), best_id)
                chosen = valid[best_id]
            elif valid:
                chosen = next(iter(valid.values()))
        else:
            scores = self._score_title(episode, (), options)
            if scores and scores[0].score >= self.settings.acceptance_threshold:
                item = self.library.find(scores[0].anime_id)
                if item is not None:
                    result = self._validator.validate(episode, item, options)
                    if result.valid:
                        chosen = (item, result)
            elif scores:
                logger.debug(
                    "Best candidate %d for '%s' scored %.3f, below %.3f",
                    scores[0].anime_id,
                    episode.lookup_title,
                    scores[0].score,
                    self.settings.acceptance_threshold,
                )

        if give_score:
            self._store_scores(scores)

        if chosen is None:
            return None
        return self._resolve(episode, *chosen, options)

    def _resolve(
        self,
        episode: Episode,
        item: LibraryTitleSet,
        result: ValidationResult,
        options: MatchOptions,
    ) -> Episode | None:
        resolved = episode.copy()
        resolved.anime_id = item.id

        redirection = result.redirection
        if redirection is None:
            return resolved

        resolved.anime_id = redirection.anime_id
        resolved.episode_number_range = redirection.episode_range

        destination = self.library.find(redirection.anime_id)
        if destination is None:
            logger.debug("Redirection target %d is not in the library", redirection.anime_id)
            return resolved

        # Redirections do not chain
        retry = self._validator.validate(resolved, destination, replace(options, allow_sequels=False))
        if not retry.valid:
            logger.debug("Rejected redirection to anime %d: %s", destination.id, retry.reason)
            return None
        return resolved

    def _store_scores(self, scores: list[ScoredCandidate]) -> None:
        with self._scores_lock:
            self._scores = list(scores)
