"""Title matching and recognition.

This package provides the title index, trigram store, scorer, validator and
sequel relations, and the RecognitionEngine facade composing them.
"""

from anirecog.core.matching.engine import RecognitionEngine
from anirecog.core.matching.models import (
    MatchOptions,
    ParseOptions,
    Redirection,
    ScoredCandidate,
    ValidationResult,
)
from anirecog.core.matching.relations import RelationEntry, RelationsGraph
from anirecog.core.matching.scoring import TitleScorer
from anirecog.core.matching.title_index import TitleIndex
from anirecog.core.matching.trigrams import TrigramStore, compare_trigrams, get_trigrams
from anirecog.core.matching.validation import CandidateValidator, is_valid_episode_number

__all__ = [
    "CandidateValidator",
    "MatchOptions",
    "ParseOptions",
    "RecognitionEngine",
    "Redirection",
    "RelationEntry",
    "RelationsGraph",
    "ScoredCandidate",
    "TitleIndex",
    "TitleScorer",
    "TrigramStore",
    "ValidationResult",
    "compare_trigrams",
    "get_trigrams",
    "is_valid_episode_number",
]
