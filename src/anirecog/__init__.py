"""anirecog - anime title recognition and episode matching.

Identify the library entry a release file name or feed title belongs to,
validate its episode number and follow sequel relations.
"""

from anirecog.core.library import AnimeLibrary, AiringStatus, LibraryTitleSet, SeriesType
from anirecog.core.matching import MatchOptions, RecognitionEngine, RelationsGraph
from anirecog.core.normalization import NormalizationType, normalize
from anirecog.core.parser import Episode, EpisodeRange, ParseOptions
from anirecog.shared.constants import ANIME_ID_UNKNOWN, Application

__version__ = Application.VERSION

__all__ = [
    "ANIME_ID_UNKNOWN",
    "AiringStatus",
    "AnimeLibrary",
    "Episode",
    "EpisodeRange",
    "LibraryTitleSet",
    "MatchOptions",
    "NormalizationType",
    "ParseOptions",
    "RecognitionEngine",
    "RelationsGraph",
    "SeriesType",
    "__version__",
    "normalize",
]
