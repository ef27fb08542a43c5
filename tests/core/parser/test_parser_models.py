"""Tests for the Episode and EpisodeRange records."""

from __future__ import annotations

import pytest

from anirecog.core.parser.models import Episode, EpisodeRange
from anirecog.shared.constants import ANIME_ID_UNKNOWN


class TestEpisodeRange:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("5", EpisodeRange(5, 5)),
            ("13-24", EpisodeRange(13, 24)),
            ("13-?", EpisodeRange(13, None)),
            (" 1 - 12 ", EpisodeRange(1, 12)),
        ],
    )
    def test_parse(self, text, expected):
        assert EpisodeRange.parse(text) == expected

    @pytest.mark.parametrize("text", ["", "a", "5-", "?-5", "24-13"])
    def test_parse_invalid(self, text):
        with pytest.raises(ValueError):
            EpisodeRange.parse(text)

    def test_negative_low_rejected(self):
        with pytest.raises(ValueError):
            EpisodeRange(-1, 3)

    def test_contains(self):
        closed = EpisodeRange(13, 24)
        open_ended = EpisodeRange(13, None)

        assert closed.contains(13) and closed.contains(24)
        assert not closed.contains(25)
        assert open_ended.contains(1000)
        assert not open_ended.contains(12)

    def test_str(self):
        assert str(EpisodeRange.single(5)) == "5"
        assert str(EpisodeRange(1, 12)) == "1-12"
        assert str(EpisodeRange(13, None)) == "13-?"

    def test_flags(self):
        assert EpisodeRange.single(3).is_single
        assert EpisodeRange(3, None).is_open
        assert not EpisodeRange(3, 4).is_single


class TestEpisode:
    def test_defaults(self):
        episode = Episode()

        assert episode.anime_id == ANIME_ID_UNKNOWN
        assert episode.number is None
        assert episode.release_version == 1
        assert not episode.is_range

    def test_number_setter(self):
        episode = Episode()
        episode.number = 7

        assert episode.episode_number_range == EpisodeRange(7, 7)
        assert episode.number_high == 7

        episode.number = None
        assert episode.episode_number_range is None

    def test_range_properties(self):
        episode = Episode(episode_number_range=EpisodeRange(1, 12))

        assert episode.number == 1
        assert episode.number_high == 12
        assert episode.is_range

    def test_lookup_title_falls_back_to_clean_title(self):
        assert Episode(title="Title", clean_title="clean").lookup_title == "Title"
        assert Episode(clean_title="clean").lookup_title == "clean"

    def test_batch_release(self):
        assert Episode(volume_number="2").is_batch_release()
        assert Episode(release_information=["complete"]).is_batch_release()
        assert not Episode(release_information=["Remastered"]).is_batch_release()

    def test_copy_is_independent(self):
        episode = Episode(title="Example", audio_terms=["AAC"])
        copy = episode.copy()
        copy.audio_terms.append("FLAC")
        copy.anime_id = 42

        assert episode.audio_terms == ["AAC"]
        assert episode.anime_id == ANIME_ID_UNKNOWN
