"""Anime library snapshot.

The library is the collaborator that owns the anime entries the engine
recognizes against. The engine only reads it: it indexes the titles of
every entry and consults episode counts, air dates and series types while
validating a match.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from datetime import date
from enum import Enum
from pathlib import Path

import orjson
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from anirecog.shared.errors import ErrorCode, ErrorContext, LibraryLoadError

logger = logging.getLogger(__name__)


class AiringStatus(str, Enum):
    """Airing status of a library entry."""

    UNKNOWN = "unknown"
    FINISHED = "finished_airing"
    AIRING = "currently_airing"
    NOT_YET_AIRED = "not_yet_aired"


class SeriesType(str, Enum):
    """Series type of a library entry."""

    UNKNOWN = "unknown"
    TV = "tv"
    OVA = "ova"
    MOVIE = "movie"
    SPECIAL = "special"
    ONA = "ona"
    MUSIC = "music"


class LibraryTitleSet(BaseModel):
    """Every title and the matching-relevant facts of one library entry.

    Attributes:
        id: Library id (positive)
        title: Main title
        english_title: English title, empty if unknown
        japanese_title: Japanese title, empty if unknown
        synonyms: Alternative titles from the list service
        user_synonyms: Alternative titles added by the user
        episode_count: Number of episodes, 0 if unknown
        episode_length: Episode length in minutes, 0 if unknown
        airing_status: Airing status
        date_start: First air date, None if unknown
        date_end: Last air date, None if unknown
        series_type: Series type

    Example:
        >>> item = LibraryTitleSet(id=42, title="Example Show", episode_count=12)
        >>> item.all_titles()
        ['Example Show']
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(gt=0)
    title: str
    english_title: str = ""
    japanese_title: str = ""
    synonyms: frozenset[str] = Field(default_factory=frozenset)
    user_synonyms: frozenset[str] = Field(default_factory=frozenset)
    episode_count: int = Field(default=0, ge=0)
    episode_length: int = Field(default=0, ge=0)
    airing_status: AiringStatus = AiringStatus.UNKNOWN
    date_start: date | None = None
    date_end: date | None = None
    series_type: SeriesType = SeriesType.UNKNOWN

    def alternative_titles(self) -> list[str]:
        """English, Japanese and synonym titles, in a stable order."""
        titles = [self.english_title, self.japanese_title, *sorted(self.synonyms)]
        return [title for title in titles if title]

    def all_titles(self) -> list[str]:
        """Every distinct non-empty title, main title first."""
        titles = [self.title, *self.alternative_titles(), *sorted(self.user_synonyms)]
        return list(dict.fromkeys(title for title in titles if title))

    def has_aired(self, today: date) -> bool:
        """Check whether the entry started airing on or before ``today``.

        An entry without a start date counts as aired unless its status says
        otherwise.
        """
        if self.airing_status in (AiringStatus.FINISHED, AiringStatus.AIRING):
            return True
        if self.date_start is not None:
            return self.date_start <= today
        return self.airing_status != AiringStatus.NOT_YET_AIRED

    def aired_in(self, year: int) -> bool:
        """Check whether ``year`` lies within the known air-date interval."""
        if self.date_start is not None and year < self.date_start.year:
            return False
        return not (self.date_end is not None and year > self.date_end.year)


_LIBRARY_ADAPTER = TypeAdapter(list[LibraryTitleSet])


class AnimeLibrary:
    """Thread-safe in-memory collection of library entries keyed by id.

    Example:
        >>> library = AnimeLibrary([LibraryTitleSet(id=42, title="Example Show")])
        >>> library.find(42).title
        'Example Show'
    """

    def __init__(self, items: Iterable[LibraryTitleSet] = ()) -> None:
        self._lock = threading.Lock()
        self._items: dict[int, LibraryTitleSet] = {item.id: item for item in items}

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, anime_id: object) -> bool:
        with self._lock:
            return anime_id in self._items

    def __iter__(self) -> Iterator[LibraryTitleSet]:
        return iter(self.items())

    def find(self, anime_id: int) -> LibraryTitleSet | None:
        with self._lock:
            return self._items.get(anime_id)

    def items(self) -> list[LibraryTitleSet]:
        """Snapshot of every entry, ordered by id."""
        with self._lock:
            return [self._items[anime_id] for anime_id in sorted(self._items)]

    def add(self, item: LibraryTitleSet) -> None:
        """Add an entry, replacing any entry with the same id."""
        with self._lock:
            self._items[item.id] = item

    def remove(self, anime_id: int) -> LibraryTitleSet | None:
        with self._lock:
            return self._items.pop(anime_id, None)

    @classmethod
    def from_file(cls, path: str | Path) -> AnimeLibrary:
        """Load a library snapshot from a JSON file.

        The file holds either a list of entries or an object with an
        ``items`` list.

        Args:
            path: Path of the JSON file

        Returns:
            The loaded library

        Raises:
            LibraryLoadError: If the file cannot be read or validated
        """
        path = Path(path)
        context = ErrorContext(file_path=str(path), operation="load_library")

        try:
            data = orjson.loads(path.read_bytes())
        except OSError as e:
            raise LibraryLoadError(
                ErrorCode.FILE_READ_ERROR,
                f"Cannot read library file: {path}",
                context,
                original_error=e,
            ) from e
        except orjson.JSONDecodeError as e:
            raise LibraryLoadError(
                ErrorCode.LIBRARY_LOAD_FAILED,
                f"Library file is not valid JSON: {path}",
                context,
                original_error=e,
            ) from e

        if isinstance(data, dict):
            data = data.get("items", [])

        try:
            items = _LIBRARY_ADAPTER.validate_python(data)
        except ValidationError as e:
            raise LibraryLoadError(
                ErrorCode.LIBRARY_LOAD_FAILED,
                f"Library file has {e.error_count()} invalid field(s): {path}",
                context,
                original_error=e,
            ) from e

        logger.info("Loaded %d library entries from %s", len(items), path)
        return cls(items)
