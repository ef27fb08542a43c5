"""Release parsing for anirecog.

This package turns file names and feed titles into Episode records using
the anitopy tokenizer.
"""

from anirecog.core.parser.anitopy_parser import AnitopyParser
from anirecog.core.parser.models import Episode, EpisodeRange, ParseOptions

__all__ = ["AnitopyParser", "Episode", "EpisodeRange", "ParseOptions"]
