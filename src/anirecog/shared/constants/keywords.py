"""
Release Keyword Constants

Keyword tables used to interpret tokenizer output: anime type keywords,
batch markers and the mapping from type keywords to library series types.
"""

from typing import ClassVar


class AnimeTypeKeywords:
    """Anime type keywords as reported by the filename tokenizer."""

    # Types that never denote an episode of the series itself
    INVALID: ClassVar[frozenset[str]] = frozenset(
        {
            "ED",
            "ENDING",
            "NCED",
            "NCOP",
            "OP",
            "OPENING",
            "PREVIEW",
            "PV",
        }
    )

    # Keyword -> SeriesType value
    SERIES_TYPES: ClassVar[dict[str, str]] = {
        "TV": "tv",
        "OVA": "ova",
        "OAV": "ova",
        "OAD": "ova",
        "MOVIE": "movie",
        "GEKIJOUBAN": "movie",
        "SPECIAL": "special",
        "SPECIALS": "special",
        "SP": "special",
        "ONA": "ona",
        "MUSIC": "music",
    }


class ReleaseKeywords:
    """Release information keywords."""

    BATCH: ClassVar[frozenset[str]] = frozenset({"BATCH", "COMPLETE"})
