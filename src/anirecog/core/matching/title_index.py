"""Three-tier exact title index.

Normalized titles map to the set of library ids carrying that title. The
tiers are consulted in order: main titles, then alternative titles (English,
Japanese, synonyms), then user synonyms. The first tier with a hit wins, so a
main title always beats another entry's synonym.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum

from anirecog.core.library import LibraryTitleSet
from anirecog.core.normalization import NormalizationType, normalize

logger = logging.getLogger(__name__)


class TitleTier(str, Enum):
    """Index tiers in lookup order."""

    MAIN = "main"
    ALTERNATIVE = "alternative"
    USER = "user"


class TitleIndex:
    """Exact lookup from normalized title to library ids.

    The index is not synchronized; the recognition engine guards it with a
    reader/writer lock.

    Example:
        >>> index = TitleIndex()
        >>> index.update(LibraryTitleSet(id=42, title="Example Show"))
        >>> index.look_up("Example Show")
        frozenset({42})
    """

    def __init__(self) -> None:
        self._tiers: dict[TitleTier, dict[str, set[int]]] = {tier: {} for tier in TitleTier}

    def __len__(self) -> int:
        return sum(len(titles) for titles in self._tiers.values())

    def look_up(self, title: str) -> frozenset[int]:
        """Find the ids of the entries with an exactly matching title.

        Args:
            title: Title to look up; it is normalized for lookup first

        Returns:
            Ids of the first tier with a hit, empty if no tier has one
        """
        normalized = normalize(title, NormalizationType.FOR_LOOKUP)
        if not normalized:
            return frozenset()

        for tier in TitleTier:
            ids = self._tiers[tier].get(normalized)
            if ids:
                return frozenset(ids)
        return frozenset()

    def update(self, item: LibraryTitleSet, erase_ids: bool = False) -> None:
        """Index every title of ``item``.

        Args:
            item: Library entry to index
            erase_ids: Remove every existing reference to ``item.id`` first
        """
        if erase_ids:
            self.remove_ids((item.id,))

        self._add(TitleTier.MAIN, item.title, item.id)
        for title in item.alternative_titles():
            self._add(TitleTier.ALTERNATIVE, title, item.id)
        for title in item.user_synonyms:
            self._add(TitleTier.USER, title, item.id)

    def remove_ids(self, anime_ids: Iterable[int]) -> None:
        """Remove every reference to the given ids from all tiers."""
        doomed = set(anime_ids)
        if not doomed:
            return

        for titles in self._tiers.values():
            for key in list(titles):
                titles[key] -= doomed
                if not titles[key]:
                    del titles[key]

    def clear(self) -> None:
        for titles in self._tiers.values():
            titles.clear()

    def _add(self, tier: TitleTier, title: str, anime_id: int) -> None:
        normalized = normalize(title, NormalizationType.FOR_LOOKUP)
        if not normalized:
            logger.debug("Title '%s' of anime %d normalizes to nothing", title, anime_id)
            return
        self._tiers[tier].setdefault(normalized, set()).add(anime_id)
