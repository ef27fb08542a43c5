"""Tests for the RecognitionEngine facade.

These tests exercise identification end to end: parsing with the real
anitopy tokenizer, exact lookup, fuzzy scoring, validation and sequel
redirection.
"""

from __future__ import annotations

import logging
import threading
from datetime import date

import pytest

from anirecog.config.models.settings import Settings
from anirecog.core.library import LibraryTitleSet
from anirecog.core.matching import MatchOptions, RecognitionEngine, ScoredCandidate
from anirecog.core.parser.models import Episode, EpisodeRange
from anirecog.shared.constants import ANIME_ID_UNKNOWN


class TestIdentifyExact:
    """Test identification through the exact title index."""

    def test_identifies_release_file_name(self, engine):
        episode = engine.parse("[Group] Example Show - 05 [720p].mkv")

        assert engine.identify(episode) == 42
        assert episode.anime_id == 42
        assert episode.number == 5

    def test_identifies_raw_string(self, engine):
        assert engine.identify("[Group] Example Show - 05 [720p].mkv") == 42

    def test_shared_synonym_resolves_to_lowest_id(self, engine):
        assert engine.identify(Episode(title="Common Name")) == 7

    def test_episode_past_series_end_is_rejected(self, engine):
        episode = engine.parse("[Group] Example Show - 15 [720p].mkv")

        assert engine.identify(episode) == ANIME_ID_UNKNOWN
        assert episode.anime_id == ANIME_ID_UNKNOWN
        assert episode.episode_number_range == EpisodeRange.single(15)

    def test_file_without_number_for_airing_series(self, library):
        library.add(LibraryTitleSet(id=200, title="Airing Show", episode_count=0))
        engine = RecognitionEngine(library)

        assert engine.identify(Episode(title="Airing Show", file_extension="mkv")) == 200

    def test_episode_without_title(self, engine):
        assert engine.identify(Episode(), give_score=True) == ANIME_ID_UNKNOWN
        assert engine.get_scores() == []


class TestIdentifyFuzzy:
    """Test identification through similarity scoring."""

    def test_typo_is_recognized(self, engine):
        assert engine.identify(Episode(title="Exampel Show")) == 42

    def test_unrelated_title_is_not_recognized(self, engine):
        assert engine.identify(Episode(title="Zyzzyva Quartz")) == ANIME_ID_UNKNOWN

    def test_threshold_from_settings(self, library):
        strict = RecognitionEngine(library, Settings().matching.model_copy(update={"acceptance_threshold": 0.99}))
        assert strict.identify(Episode(title="Exampel Show")) == ANIME_ID_UNKNOWN

    def test_give_score_keeps_ranking(self, engine):
        engine.identify(Episode(title="Exampel Show"), give_score=True)
        scores = engine.get_scores()

        assert scores[0].anime_id == 42
        assert all(isinstance(candidate, ScoredCandidate) for candidate in scores)
        assert [c.score for c in scores] == sorted((c.score for c in scores), reverse=True)

    def test_give_score_on_exact_hit(self, engine):
        engine.identify(Episode(title="Example Show"), give_score=True)
        [candidate] = engine.get_scores()

        assert candidate.anime_id == 42
        assert candidate.score == pytest.approx(1.0)

    def test_score_title_given_candidates(self, engine):
        scores = engine.score_title(Episode(title="Exampel Show"), candidate_ids=[43, 42])

        assert [candidate.anime_id for candidate in scores] == [42, 43]

    def test_score_title_whole_library_is_validated(self, engine):
        episode = Episode(title="Future Show")

        assert engine.score_title(episode)[0].anime_id == 100
        scored = engine.score_title(episode, options=MatchOptions(check_airing_date=True))
        assert 100 not in [candidate.anime_id for candidate in scored]


class TestSequelRedirection:
    def test_redirects_to_sequel(self, engine):
        episode = engine.parse("[Group] Example Show - 15 [720p].mkv")

        assert engine.identify(episode, options=MatchOptions(allow_sequels=True)) == 43
        assert episode.anime_id == 43
        assert episode.episode_number_range == EpisodeRange(3, 3)

    def test_misspelled_title_redirects_to_sequel(self, engine):
        episode = Episode(title="Exmaple Show", file_extension="mkv")
        episode.number = 15

        assert engine.identify(episode, options=MatchOptions(allow_sequels=True)) == 43
        assert episode.episode_number_range == EpisodeRange(3, 3)

    def test_destination_outside_library_is_accepted(self, engine):
        engine.read_relations("42:13-24 -> 999:1-12")
        episode = engine.parse("[Group] Example Show - 14 [720p].mkv")

        assert engine.identify(episode, options=MatchOptions(allow_sequels=True)) == 999
        assert episode.number == 2

    def test_destination_rejecting_episode_fails(self, library):
        library.add(LibraryTitleSet(id=43, title="Example Show 2", episode_count=2))
        engine = RecognitionEngine(library)
        engine.read_relations("42:13-24 -> 43:1-12")
        episode = engine.parse("[Group] Example Show - 15 [720p].mkv")

        assert engine.identify(episode, options=MatchOptions(allow_sequels=True)) == ANIME_ID_UNKNOWN
        assert episode.episode_number_range == EpisodeRange.single(15)


class TestValidationOptions:
    def test_not_yet_aired(self, engine):
        options = MatchOptions(check_airing_date=True)

        assert engine.identify(Episode(title="Future Show"), options=options) == ANIME_ID_UNKNOWN
        assert engine.identify(Episode(title="Future Show")) == 100

    def test_aired_once_start_date_passes(self, library):
        engine = RecognitionEngine(library, today=lambda: date(2030, 5, 1))
        options = MatchOptions(check_airing_date=True)

        assert engine.identify(Episode(title="Future Show"), options=options) == 100

    def test_year_outside_air_dates(self, engine):
        options = MatchOptions(check_airing_date=True)
        assert engine.identify(Episode(title="Example Show", year=2019), options=options) == ANIME_ID_UNKNOWN

    def test_opening_is_rejected(self, engine):
        episode = Episode(title="Example Show", anime_type=["NCOP"])

        assert engine.identify(episode, options=MatchOptions(check_anime_type=True)) == ANIME_ID_UNKNOWN
        assert engine.identify(episode) == 42


class TestSearch:
    def test_exact_hits_come_first(self, engine):
        assert engine.search("Example Show")[0] == 42

    def test_fuzzy_results_are_ranked(self, engine):
        assert engine.search("Example")[:2] == [42, 43]

    def test_search_skips_validation(self, engine):
        assert 100 in engine.search("Future Show")

    def test_no_results(self, engine):
        assert engine.search("Zyzzyva Quartz") == []


class TestTitleMaintenance:
    def test_look_up_title(self, engine):
        assert engine.look_up_title("Common Name") == frozenset({7, 9})

    def test_update_titles_erases_old_titles(self, engine, library):
        renamed = LibraryTitleSet(id=42, title="Renamed Show", episode_count=12)
        library.add(renamed)
        engine.update_titles(renamed, erase_ids=True)

        assert engine.look_up_title("Example Show") == frozenset()
        assert engine.look_up_title("Renamed Show") == frozenset({42})

    def test_update_titles_keeps_old_titles(self, engine, library):
        extended = LibraryTitleSet(id=42, title="Example Show", user_synonyms=frozenset({"Exshow"}))
        library.add(extended)
        engine.update_titles(extended)

        assert engine.look_up_title("Exshow") == frozenset({42})
        assert engine.look_up_title("Example Show") == frozenset({42})

    def test_stale_ids_are_ignored_and_purged(self, engine, library, caplog):
        library.remove(42)

        with caplog.at_level(logging.WARNING):
            assert engine.look_up_title("Example Show") == frozenset()
        assert "stale" in caplog.text

        engine.update_titles(library.find(43))
        caplog.clear()
        with caplog.at_level(logging.WARNING):
            assert engine.look_up_title("Example Show") == frozenset()
        assert "stale" not in caplog.text

    def test_initialize_titles_picks_up_new_entries(self, engine, library):
        library.add(LibraryTitleSet(id=500, title="Brand New Show"))
        assert engine.look_up_title("Brand New Show") == frozenset()

        engine.initialize_titles()
        assert engine.look_up_title("Brand New Show") == frozenset({500})


class TestRelationsAndSettings:
    def test_from_settings_reads_relations(self, library, relations_file):
        settings = Settings(relations={"path": relations_file})
        engine = RecognitionEngine.from_settings(library, settings)

        assert len(engine.relations) == 1

    def test_read_relations_file(self, library, relations_file):
        engine = RecognitionEngine(library)
        assert engine.read_relations_file(relations_file)

        episode = engine.parse("[Group] Example Show - 13 [720p].mkv")
        assert engine.identify(episode, options=MatchOptions(allow_sequels=True)) == 43


@pytest.mark.slow
class TestConcurrency:
    def test_identify_while_reindexing(self, engine, library):
        errors: list[BaseException] = []
        results: list[int] = []
        lock = threading.Lock()

        def identify() -> None:
            try:
                for _ in range(50):
                    anime_id = engine.identify(Episode(title="Example Show"))
                    with lock:
                        results.append(anime_id)
            except BaseException as e:  # noqa: BLE001
                errors.append(e)

        def reindex() -> None:
            try:
                for _ in range(20):
                    engine.update_titles(library.find(42))
                    engine.initialize_titles()
            except BaseException as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=identify) for _ in range(4)]
        threads.append(threading.Thread(target=reindex))
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        assert not errors
        assert set(results) == {42}
