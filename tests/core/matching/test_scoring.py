"""Tests for title similarity scoring."""

from __future__ import annotations

from datetime import date

import pytest

from anirecog.config.models.matching_settings import MatchingSettings
from anirecog.core.library import LibraryTitleSet, SeriesType
from anirecog.core.matching.scoring import TitleScorer, custom_score
from anirecog.core.matching.trigrams import TrigramStore
from anirecog.core.parser.models import Episode


def _store(*items: LibraryTitleSet) -> TrigramStore:
    store = TrigramStore()
    for item in items:
        store.update(item)
    return store


class TestCustomScore:
    def test_prefix_gives_length_ratio(self):
        assert custom_score("example", "example show") == pytest.approx(7 / 12)

    def test_substring_is_discounted(self):
        assert custom_score("show", "example show") == pytest.approx(4 / 12 * 0.9)

    @pytest.mark.parametrize(
        ("title", "other"),
        [
            ("example show extra", "example show"),
            ("example show", "show"),
            ("example show", "exemplary shows"),
        ],
    )
    def test_argument_order_does_not_matter(self, title, other):
        assert custom_score(title, other) == pytest.approx(custom_score(other, title))

    def test_longer_query_with_candidate_prefix(self):
        assert custom_score("example show extra", "example show") == pytest.approx(12 / 18)

    def test_identical_titles(self):
        assert custom_score("example", "example") == 1.0

    def test_empty_titles(self):
        assert custom_score("", "example") == 0.0
        assert custom_score("example", "") == 0.0

    def test_unrelated_titles_score_low(self):
        assert 0.0 <= custom_score("abc", "xyz") < 0.1


class TestTitleScorer:
    """Test TitleScorer ranking."""

    def test_identical_title_scores_one(self):
        scorer = TitleScorer()
        assert scorer.title_similarity("example show", "example show", 1.0) == pytest.approx(1.0)

    def test_typo_scores_above_acceptance(self):
        item = LibraryTitleSet(id=42, title="Example Show")
        scores = TitleScorer().score(Episode(title="Exampel Show"), [item], _store(item))

        assert [candidate.anime_id for candidate in scores] == [42]
        assert scores[0].score >= MatchingSettings().acceptance_threshold

    def test_ranking_prefers_closer_title(self):
        items = [
            LibraryTitleSet(id=43, title="Example Show 2"),
            LibraryTitleSet(id=42, title="Example Show"),
        ]
        scores = TitleScorer().score(Episode(title="Example"), items, _store(*items))

        assert [candidate.anime_id for candidate in scores] == [42, 43]
        assert scores[0].score > scores[1].score

    def test_equal_scores_are_ordered_by_id(self):
        items = [
            LibraryTitleSet(id=8, title="Same Title"),
            LibraryTitleSet(id=3, title="Same Title"),
        ]
        scores = TitleScorer().score(Episode(title="Same Title"), items, _store(*items))

        assert [candidate.anime_id for candidate in scores] == [3, 8]

    def test_unrelated_titles_are_filtered(self):
        item = LibraryTitleSet(id=1, title="Zyzzyva Quartz")
        assert TitleScorer().score(Episode(title="Example Show"), [item], _store(item)) == []

    def test_empty_title_scores_nothing(self):
        item = LibraryTitleSet(id=1, title="Example Show")
        assert TitleScorer().score(Episode(), [item], _store(item)) == []

    def test_candidates_without_trigrams_are_skipped(self):
        item = LibraryTitleSet(id=1, title="Example Show")
        assert TitleScorer().score(Episode(title="Example Show"), [item], TrigramStore()) == []

    def test_result_is_capped(self):
        items = [LibraryTitleSet(id=anime_id, title="Example Show") for anime_id in range(1, 6)]
        scorer = TitleScorer(MatchingSettings(max_scored_candidates=2))
        scores = scorer.score(Episode(title="Example Show"), items, _store(*items))

        assert [candidate.anime_id for candidate in scores] == [1, 2]

    def test_min_candidate_score(self):
        item = LibraryTitleSet(id=42, title="Example Show")
        scorer = TitleScorer(MatchingSettings(min_candidate_score=1.5))
        assert scorer.score(Episode(title="Example Show"), [item], _store(item)) == []


class TestBonus:
    def test_year_bonus(self):
        item = LibraryTitleSet(id=1, title="Example", date_start=date(2020, 1, 5))
        scorer = TitleScorer()

        assert scorer.bonus(Episode(year=2020), item) == pytest.approx(0.1)
        assert scorer.bonus(Episode(year=2019), item) == 0.0
        assert scorer.bonus(Episode(), item) == 0.0

    def test_type_bonus(self):
        item = LibraryTitleSet(id=1, title="Example", series_type=SeriesType.MOVIE)
        scorer = TitleScorer()

        assert scorer.bonus(Episode(anime_type=["Movie"]), item) == pytest.approx(0.1)
        assert scorer.bonus(Episode(anime_type=["OVA"]), item) == 0.0

    def test_bonus_breaks_ties(self):
        items = [
            LibraryTitleSet(id=1, title="Example", date_start=date(2010, 4, 1)),
            LibraryTitleSet(id=2, title="Example", date_start=date(2021, 4, 1)),
        ]
        scores = TitleScorer().score(Episode(title="Example", year=2021), items, _store(*items))

        assert scores[0].anime_id == 2
        assert scores[0].score == pytest.approx(1.1)
