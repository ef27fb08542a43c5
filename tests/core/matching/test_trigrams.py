"""Tests for trigram extraction and the trigram store."""

from __future__ import annotations

import pytest

from anirecog.core.library import LibraryTitleSet
from anirecog.core.matching.trigrams import TrigramStore, compare_trigrams, get_trigrams


class TestGetTrigrams:
    def test_padded_windows(self):
        assert get_trigrams("abc") == [" ab", "abc", "bc "]

    def test_title_is_normalized_first(self):
        assert get_trigrams("  ABC ") == get_trigrams("abc")

    def test_empty_title(self):
        assert get_trigrams("") == []

    def test_result_is_sorted(self):
        trigrams = get_trigrams("Example Show")
        assert trigrams == sorted(trigrams)


class TestCompareTrigrams:
    def test_identical_sets(self):
        trigrams = get_trigrams("Example Show")
        assert compare_trigrams(trigrams, trigrams) == 1.0

    def test_disjoint_sets(self):
        assert compare_trigrams(["abc"], ["xyz"]) == 0.0

    def test_both_empty(self):
        assert compare_trigrams([], []) == 0.0

    def test_symmetric(self):
        a = get_trigrams("Example Show")
        b = get_trigrams("Example Show 2")
        assert compare_trigrams(a, b) == compare_trigrams(b, a)

    def test_dice_coefficient(self):
        # 2 * |{abc}| / (2 + 2)
        assert compare_trigrams(["abc", "bcd"], ["abc", "xyz"]) == pytest.approx(0.5)


class TestTrigramStore:
    def test_one_record_per_distinct_variant(self):
        store = TrigramStore()
        store.update(
            LibraryTitleSet(
                id=1,
                title="Example Show",
                english_title="EXAMPLE SHOW",
                synonyms=frozenset({"Other Name"}),
            )
        )

        records = store.get(1)
        assert [record.title for record in records] == ["example show", "other name"]
        assert records[0].trigrams == frozenset(get_trigrams("example show"))

    def test_update_replaces_records(self):
        store = TrigramStore()
        store.update(LibraryTitleSet(id=1, title="Old Name"))
        store.update(LibraryTitleSet(id=1, title="New Name"))

        assert [record.title for record in store.get(1)] == ["new name"]

    def test_remove_and_clear(self):
        store = TrigramStore()
        store.update(LibraryTitleSet(id=1, title="First"))
        store.update(LibraryTitleSet(id=2, title="Second"))

        store.remove(1)
        assert 1 not in store
        assert store.ids() == [2]

        store.clear()
        assert len(store) == 0

    def test_best_similarity_takes_best_variant(self):
        store = TrigramStore()
        store.update(LibraryTitleSet(id=1, title="Something Else", synonyms=frozenset({"Example Show"})))

        assert store.best_similarity(1, get_trigrams("Example Show")) == 1.0
        assert store.best_similarity(2, get_trigrams("Example Show")) == 0.0

    def test_items_are_ordered_by_id(self):
        store = TrigramStore()
        for anime_id in (5, 3, 9):
            store.update(LibraryTitleSet(id=anime_id, title=f"Title {anime_id}"))

        assert [anime_id for anime_id, _ in store.items()] == [3, 5, 9]
