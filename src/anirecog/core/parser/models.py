"""Data models for release parsing.

This module defines the Episode record that flows through the recognition
engine. Parsers fill it from a file name or feed title, and the engine fills
in the identified anime id and, after a sequel redirection, a rewritten
episode number range.
"""

from __future__ import annotations

import copy
import re
from dataclasses import dataclass, field

from anirecog.shared.constants import ANIME_ID_UNKNOWN, ReleaseKeywords

_RANGE_PATTERN = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+|\?)\s*)?$")


@dataclass(frozen=True)
class EpisodeRange:
    """Inclusive range of episode numbers.

    ``high`` is None for an open upper bound ("13-?"), which only appears in
    relation rules. A single episode has ``low == high``.

    Attributes:
        low: First episode number of the range
        high: Last episode number of the range, or None if open

    Example:
        >>> EpisodeRange.parse("13-24")
        EpisodeRange(low=13, high=24)
        >>> EpisodeRange.single(5).is_single
        True
    """

    low: int
    high: int | None

    def __post_init__(self) -> None:
        """Validate range bounds.

        Raises:
            ValueError: If a bound is negative or high is lower than low
        """
        if self.low < 0:
            msg = f"Episode range cannot start below 0, got {self.low}"
            raise ValueError(msg)
        if self.high is not None and self.high < self.low:
            msg = f"Invalid episode range {self.low}-{self.high}"
            raise ValueError(msg)

    @classmethod
    def single(cls, number: int) -> EpisodeRange:
        """Create a range covering exactly one episode."""
        return cls(number, number)

    @classmethod
    def parse(cls, text: str) -> EpisodeRange:
        """Parse "N", "N-M" or "N-?".

        Raises:
            ValueError: If the text is not a valid range
        """
        match = _RANGE_PATTERN.match(text)
        if match is None:
            msg = f"Invalid episode range: {text!r}"
            raise ValueError(msg)

        low = int(match.group(1))
        high_text = match.group(2)
        if high_text is None:
            return cls(low, low)
        if high_text == "?":
            return cls(low, None)
        return cls(low, int(high_text))

    @property
    def is_single(self) -> bool:
        return self.high == self.low

    @property
    def is_open(self) -> bool:
        return self.high is None

    def contains(self, number: int) -> bool:
        """Check whether an episode number lies in the range."""
        if number < self.low:
            return False
        return self.high is None or number <= self.high

    def __str__(self) -> str:
        if self.is_single:
            return str(self.low)
        return f"{self.low}-{'?' if self.high is None else self.high}"


@dataclass
class Episode:
    """A release or episode as seen by the recognition engine.

    Attributes:
        anime_id: Identified library id, ANIME_ID_UNKNOWN until resolved
        title: Anime title as reported by the tokenizer
        clean_title: Minimally normalized title
        release_group: Release group name
        episode_number_range: Episode number(s), None if the release has none
        release_version: Release version ("v2" -> 2)
        video_resolution: Resolution string such as "720p"
        audio_terms: Audio keywords
        video_terms: Video keywords
        checksum: CRC32 checksum found in the name
        extras: Source, subtitle and other keywords
        year: Year found in the name
        processed: Set by callers once the episode has been handled
        anime_type: Type keywords such as "OVA" or "NCOP"
        episode_title: Episode title found in the name
        volume_number: Volume number string
        release_information: Release keywords such as "BATCH"
        file_name: File name without folder
        file_extension: File extension without the dot
        folder: Folder the file was found in
    """

    anime_id: int = ANIME_ID_UNKNOWN
    title: str = ""
    clean_title: str = ""
    release_group: str = ""
    episode_number_range: EpisodeRange | None = None
    release_version: int = 1
    video_resolution: str = ""
    audio_terms: list[str] = field(default_factory=list)
    video_terms: list[str] = field(default_factory=list)
    checksum: str = ""
    extras: list[str] = field(default_factory=list)
    year: int | None = None
    processed: bool = False
    anime_type: list[str] = field(default_factory=list)
    episode_title: str = ""
    volume_number: str = ""
    release_information: list[str] = field(default_factory=list)
    file_name: str = ""
    file_extension: str = ""
    folder: str = ""

    @property
    def number(self) -> int | None:
        """Episode number, the low end of the range for multi-episode releases."""
        if self.episode_number_range is None:
            return None
        return self.episode_number_range.low

    @number.setter
    def number(self, value: int | None) -> None:
        self.episode_number_range = None if value is None else EpisodeRange.single(value)

    @property
    def number_high(self) -> int | None:
        if self.episode_number_range is None:
            return None
        return self.episode_number_range.high

    @property
    def is_range(self) -> bool:
        return self.episode_number_range is not None and not self.episode_number_range.is_single

    @property
    def lookup_title(self) -> str:
        """Title used for recognition: the tokenized title, else the clean one."""
        return self.title or self.clean_title

    def is_batch_release(self) -> bool:
        """Check whether the release bundles several episodes (volume or batch)."""
        if self.volume_number:
            return True
        return any(info.upper() in ReleaseKeywords.BATCH for info in self.release_information)

    def copy(self) -> Episode:
        """Return an independent copy, list fields included."""
        return copy.deepcopy(self)


@dataclass(frozen=True)
class ParseOptions:
    """Options for turning a raw string into an Episode.

    Attributes:
        parse_path: Split an absolute path into folder and file name, and
            fall back to the folder name for the title
    """

    parse_path: bool = True
