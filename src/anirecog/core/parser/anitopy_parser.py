"""Anitopy-based release parser.

This module wraps the anitopy tokenizer, which splits an anime file name or
feed title into its elements, and merges its output into an Episode record.
Fields that the caller already populated are never overwritten.
"""

from __future__ import annotations

import logging
import re
from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import Any

import anitopy

from anirecog.core.normalization import NormalizationType, normalize
from anirecog.core.parser.models import Episode, EpisodeRange, ParseOptions

logger = logging.getLogger(__name__)

# Absolute POSIX paths, drive letter paths and UNC paths. A bare slash inside
# a title ("Fate/Zero") is not a path separator.
_PATH_PATTERN = re.compile(r"^(?:/|[A-Za-z]:[\\/]|\\\\)")
_VERSION_PATTERN = re.compile(r"(\d+)")


def _as_path(text: str) -> PurePath:
    if text.startswith("/"):
        return PurePosixPath(text)
    return PureWindowsPath(text)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(item) for item in value]
    return [str(value)]


def _first(value: Any) -> str:
    values = _as_list(value)
    return values[0] if values else ""


def _to_int(value: str) -> int | None:
    try:
        return int(value)
    except ValueError:
        return None


class AnitopyParser:
    """Parser that fills Episode records from anitopy's output.

    anitopy reports every element as a string, or as a list of strings when
    the element occurs several times (e.g. "01-12" gives two episode
    numbers). This class converts that dictionary into typed Episode fields.
    """

    def parse(
        self,
        text: str,
        options: ParseOptions | None = None,
        episode: Episode | None = None,
    ) -> Episode:
        """Parse a file name or title into an Episode.

        Args:
            text: File name, path or feed title to parse
            options: Parse options (default: ParseOptions())
            episode: Episode to merge into; a new one is created if None

        Returns:
            The populated Episode (``episode`` itself when given)

        Examples:
            >>> parser = AnitopyParser()
            >>> result = parser.parse("[Group] Example Show - 05 [720p].mkv")
            >>> result.title, result.number
            ('Example Show', 5)
        """
        options = options or ParseOptions()
        episode = episode if episode is not None else Episode()

        name = text
        folder = ""
        if options.parse_path and _PATH_PATTERN.match(text):
            path = _as_path(text)
            name = path.name
            folder = str(path.parent)

        elements = anitopy.parse(name)
        if not elements:
            logger.debug("Tokenizer found no elements in '%s'", name)
            elements = {}

        self._merge(episode, elements)

        if folder and not episode.folder:
            episode.folder = folder
        if options.parse_path and folder and not episode.title:
            self._merge_folder_title(episode, folder)

        if not episode.clean_title and episode.title:
            episode.clean_title = normalize(episode.title, NormalizationType.MINIMAL)

        logger.debug(
            "Parsed '%s': title='%s', episode=%s",
            text,
            episode.title,
            episode.episode_number_range,
        )
        return episode

    def _merge(self, episode: Episode, elements: dict[str, Any]) -> None:
        """Copy tokenizer elements into empty Episode fields."""
        if not episode.title:
            episode.title = _first(elements.get("anime_title"))
        if not episode.release_group:
            episode.release_group = _first(elements.get("release_group"))
        if episode.episode_number_range is None:
            episode.episode_number_range = self._extract_episode_range(elements.get("episode_number"))
        if episode.release_version == 1:
            version = _VERSION_PATTERN.search(_first(elements.get("release_version")))
            if version:
                episode.release_version = int(version.group(1))
        if not episode.video_resolution:
            episode.video_resolution = _first(elements.get("video_resolution"))
        if not episode.audio_terms:
            episode.audio_terms = _as_list(elements.get("audio_term"))
        if not episode.video_terms:
            episode.video_terms = _as_list(elements.get("video_term"))
        if not episode.checksum:
            episode.checksum = _first(elements.get("file_checksum"))
        if not episode.extras:
            episode.extras = [
                *_as_list(elements.get("source")),
                *_as_list(elements.get("subtitles")),
                *_as_list(elements.get("language")),
                *_as_list(elements.get("other")),
            ]
        if episode.year is None:
            episode.year = _to_int(_first(elements.get("anime_year")))
        if not episode.anime_type:
            episode.anime_type = _as_list(elements.get("anime_type"))
        if not episode.episode_title:
            episode.episode_title = _first(elements.get("episode_title"))
        if not episode.volume_number:
            episode.volume_number = _first(elements.get("volume_number"))
        if not episode.release_information:
            episode.release_information = _as_list(elements.get("release_information"))
        if not episode.file_name:
            episode.file_name = _first(elements.get("file_name"))
        if not episode.file_extension:
            episode.file_extension = _first(elements.get("file_extension"))

    def _merge_folder_title(self, episode: Episode, folder: str) -> None:
        """Take the anime title from the folder name when the file has none."""
        folder_name = _as_path(folder).name
        if not folder_name:
            return
        elements = anitopy.parse(folder_name) or {}
        episode.title = _first(elements.get("anime_title"))
        if episode.title:
            logger.debug("Using folder title '%s'", episode.title)

    def _extract_episode_range(self, value: Any) -> EpisodeRange | None:
        """Convert anitopy's episode number element to an EpisodeRange.

        Fractional numbers ("12.5") and other non-integer values give None.
        """
        numbers = [_to_int(item) for item in _as_list(value)]
        if not numbers or any(number is None for number in numbers):
            if numbers:
                logger.debug("Ignoring non-integer episode number: %s", value)
            return None

        low, high = numbers[0], numbers[-1]
        if high < low:
            low, high = high, low
        return EpisodeRange(low, high)
