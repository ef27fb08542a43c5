"""
Pytest configuration and shared fixtures for anirecog tests.

This module provides the sample library, relations document and engine
fixtures used across the test modules.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from datetime import date
from pathlib import Path

import orjson
import pytest

from anirecog.core.library import AiringStatus, AnimeLibrary, LibraryTitleSet, SeriesType
from anirecog.core.matching import RecognitionEngine, RelationsGraph
from anirecog.shared.constants import Application

TODAY = date(2026, 1, 15)

RELATIONS_DOCUMENT = """\
::meta
- version: 1.0.0
- last_modified: 2026-01-01

::rules
# Example Show -> Example Show 2
- 42:13-24 -> 43:1-12
"""


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo handler and propagation changes made by setup_structured_logger.

    The CLI callback configures the package logger with propagate=False,
    which would hide records from caplog in later tests.
    """
    yield
    package_logger = logging.getLogger(Application.LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def library_items() -> list[LibraryTitleSet]:
    """Library entries shared by the matching tests."""
    return [
        LibraryTitleSet(
            id=42,
            title="Example Show",
            episode_count=12,
            airing_status=AiringStatus.FINISHED,
            date_start=date(2020, 1, 5),
            date_end=date(2020, 3, 29),
            series_type=SeriesType.TV,
        ),
        LibraryTitleSet(
            id=43,
            title="Example Show 2",
            episode_count=12,
            airing_status=AiringStatus.FINISHED,
            date_start=date(2020, 7, 5),
            date_end=date(2020, 9, 27),
            series_type=SeriesType.TV,
        ),
        LibraryTitleSet(
            id=7,
            title="Shared Synonym Alpha",
            synonyms=frozenset({"Common Name"}),
            episode_count=24,
        ),
        LibraryTitleSet(
            id=9,
            title="Shared Synonym Beta",
            synonyms=frozenset({"Common Name"}),
            episode_count=24,
        ),
        LibraryTitleSet(
            id=100,
            title="Future Show",
            episode_count=12,
            airing_status=AiringStatus.NOT_YET_AIRED,
            date_start=date(2030, 4, 1),
        ),
    ]


@pytest.fixture
def library(library_items: list[LibraryTitleSet]) -> AnimeLibrary:
    return AnimeLibrary(library_items)


@pytest.fixture
def relations() -> RelationsGraph:
    graph = RelationsGraph()
    graph.read(RELATIONS_DOCUMENT)
    return graph


@pytest.fixture
def engine(library: AnimeLibrary, relations: RelationsGraph) -> RecognitionEngine:
    """Engine over the sample library with a fixed reference date."""
    return RecognitionEngine(library, relations=relations, today=lambda: TODAY)


@pytest.fixture
def library_file(tmp_path: Path, library_items: list[LibraryTitleSet]) -> Path:
    """The sample library written as a JSON snapshot."""
    path = tmp_path / "library.json"
    payload = {"items": [item.model_dump(mode="json") for item in library_items]}
    path.write_bytes(orjson.dumps(payload))
    return path


@pytest.fixture
def relations_file(tmp_path: Path) -> Path:
    path = tmp_path / "relations.txt"
    path.write_text(RELATIONS_DOCUMENT, encoding="utf-8")
    return path
