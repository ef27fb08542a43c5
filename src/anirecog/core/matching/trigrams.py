"""Character trigram extraction and comparison.

Trigram similarity is cheap to compute and forgiving of word order, so it is
used as the first filter before the more expensive string metrics run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from anirecog.core.library import LibraryTitleSet
from anirecog.core.normalization import NormalizationType, normalize

logger = logging.getLogger(__name__)

TRIGRAM_LENGTH = 3


def get_trigrams(text: str) -> list[str]:
    """Return the sorted 3-character windows of a title.

    The title is normalized for trigrams and padded with one space on each
    side, so that the first and last characters take part in two windows.

    Args:
        text: Title to split

    Returns:
        Sorted list of trigrams, empty if the normalized title is empty

    Example:
        >>> get_trigrams("abc")
        [' ab', 'abc', 'bc ']
    """
    normalized = normalize(text, NormalizationType.FOR_TRIGRAMS)
    if not normalized:
        return []

    padded = f" {normalized} "
    return sorted(padded[i : i + TRIGRAM_LENGTH] for i in range(len(padded) - TRIGRAM_LENGTH + 1))


def compare_trigrams(a: Iterable[str], b: Iterable[str]) -> float:
    """Dice coefficient of two trigram collections.

    Returns:
        ``2 * |A & B| / (|A| + |B|)`` over the distinct trigrams, 0.0 when
        both are empty. The result is symmetric and lies in [0, 1].
    """
    set_a = frozenset(a)
    set_b = frozenset(b)
    total = len(set_a) + len(set_b)
    if total == 0:
        return 0.0
    return 2.0 * len(set_a & set_b) / total


@dataclass(frozen=True)
class TrigramRecord:
    """One title variant of a library entry and its trigram set."""

    title: str
    trigrams: frozenset[str]


class TrigramStore:
    """Per-entry trigram sets of every title variant.

    The store is not synchronized; the recognition engine guards it with the
    same lock as the title index.
    """

    def __init__(self) -> None:
        self._records: dict[int, tuple[TrigramRecord, ...]] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, anime_id: object) -> bool:
        return anime_id in self._records

    def ids(self) -> list[int]:
        return sorted(self._records)

    def get(self, anime_id: int) -> tuple[TrigramRecord, ...]:
        return self._records.get(anime_id, ())

    def items(self) -> Iterator[tuple[int, tuple[TrigramRecord, ...]]]:
        for anime_id in self.ids():
            yield anime_id, self._records[anime_id]

    def update(self, item: LibraryTitleSet) -> None:
        """Replace the records of ``item`` with one per distinct title variant."""
        records: dict[str, TrigramRecord] = {}
        for title in item.all_titles():
            normalized = normalize(title, NormalizationType.FOR_TRIGRAMS)
            if normalized and normalized not in records:
                records[normalized] = TrigramRecord(normalized, frozenset(get_trigrams(normalized)))

        if records:
            self._records[item.id] = tuple(records.values())
        else:
            self._records.pop(item.id, None)
            logger.debug("No usable titles for anime %d", item.id)

    def remove(self, anime_id: int) -> None:
        self._records.pop(anime_id, None)

    def clear(self) -> None:
        self._records.clear()

    def best_similarity(self, anime_id: int, trigrams: Iterable[str]) -> float:
        """Highest trigram similarity between ``trigrams`` and any variant."""
        query = frozenset(trigrams)
        return max(
            (compare_trigrams(query, record.trigrams) for record in self.get(anime_id)),
            default=0.0,
        )
