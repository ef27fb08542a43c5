"""Title normalization module for anirecog.

This module reduces the many spellings of an anime title to a canonical,
comparable form. It is used on both sides of every comparison: library
titles are normalized when the title index is built, and release titles are
normalized before they are looked up or scored.

The normalization process includes:
1. Roman numeral conversion (II..XIII, skipping I and X)
2. Transliteration of always-equivalent characters and romanizations
3. Unicode folding (NFKC, mark/control stripping, case folding)
4. Ordinal and season number conversion
5. Removal of low-value tokens ("the", "episode", "(tv)"...)
6. Punctuation and whitespace erasure, depending on NormalizationType

Every function here is pure. ``normalize`` runs the pipeline until it
reaches a fixed point, so normalizing an already normalized string never
changes it.
"""

from __future__ import annotations

import functools
import logging
import re
import unicodedata
from enum import IntEnum

from anirecog.shared.constants import (
    Ordinals,
    PunctuationRanges,
    RomanNumerals,
    SeasonPhrases,
    Transliteration,
    UnicodeLumps,
    UnnecessaryWords,
)

logger = logging.getLogger(__name__)

_MAX_PASSES = 16

_WHITESPACE_RUN_PATTERN = re.compile(r" {2,}")
_CONTROL_WHITESPACE = frozenset("\t\n\v\f\r\x1c\x1d\x1e\x1f\x85  ")


class NormalizationType(IntEnum):
    """How aggressively punctuation and whitespace are erased.

    The values are ordered: each type erases at least as much as the
    previous one.
    """

    MINIMAL = 0  # no punctuation erased
    FOR_TRIGRAMS = 1  # punctuation erased, single spaces kept
    FOR_LOOKUP = 2  # punctuation and whitespace erased
    FULL = 3  # also erases the possibly meaningful tail


def _whole_word_pattern(word: str) -> re.Pattern[str]:
    """Compile a pattern matching ``word`` delimited by non-alphanumerics."""
    return re.compile(rf"(?<![^\W_]){re.escape(word)}(?![^\W_])")


def _compile_table(
    table: tuple[tuple[str, str], ...],
) -> tuple[tuple[re.Pattern[str], str], ...]:
    return tuple((_whole_word_pattern(find), replace) for find, replace in table)


_ROMAN_PATTERNS = _compile_table(RomanNumerals.TABLE)
_ROMANIZATION_PATTERNS = _compile_table(Transliteration.WORDS)
_ORDINAL_PATTERNS = _compile_table(Ordinals.TABLE)
_SEASON_PATTERNS = _compile_table(SeasonPhrases.table())
_UNNECESSARY_PATTERNS = _compile_table(UnnecessaryWords.TABLE)

_CHARACTER_TRANSLATION = str.maketrans(Transliteration.CHARACTERS)
_LUMP_TRANSLATION = str.maketrans(UnicodeLumps.TABLE)


def _replace_all(
    text: str,
    patterns: tuple[tuple[re.Pattern[str], str], ...],
) -> str:
    for pattern, replacement in patterns:
        text = pattern.sub(replacement, text)
    return text


def convert_roman_numbers(text: str) -> str:
    """Convert whole-word Roman numerals II..XIII to Arabic digits.

    Matching is case sensitive, so it must run before case folding.

    Example:
        >>> convert_roman_numbers("Season II")
        'Season 2'
    """
    return _replace_all(text, _ROMAN_PATTERNS)


def transliterate(text: str) -> str:
    """Apply character equivalences and Hepburn to wapuro romanization."""
    text = text.translate(_CHARACTER_TRANSLATION)
    return _replace_all(text, _ROMANIZATION_PATTERNS)


def normalize_unicode(text: str) -> str:
    """Fold a string for case- and accent-insensitive comparison.

    Applies compatibility decomposition, drops control characters, default
    ignorable characters and combining marks, lumps dash and quote variants,
    case-folds, and recomposes the result (NFC over a compatibility
    decomposed string, i.e. NFKC).

    Example:
        >>> normalize_unicode("Ｃｌａｎｎａｄ　Ａｆｔｅｒ Ｓｔｏｒｙ")
        'clannad after story'
    """
    decomposed = unicodedata.normalize("NFKD", text).translate(_LUMP_TRANSLATION)
    decomposed = unicodedata.normalize("NFKD", decomposed.casefold())

    kept: list[str] = []
    for char in decomposed:
        if char in _CONTROL_WHITESPACE:
            kept.append(" ")
            continue
        category = unicodedata.category(char)
        # Cc: control, Cf: format (zero-width and other default ignorables),
        # M*: combining marks
        if category in ("Cc", "Cf") or category.startswith("M"):
            continue
        kept.append(char)

    return unicodedata.normalize("NFC", "".join(kept))


def convert_ordinal_numbers(text: str) -> str:
    """Convert ordinal words to ordinal numbers ("first" -> "1st")."""
    return _replace_all(text, _ORDINAL_PATTERNS)


def convert_season_numbers(text: str) -> str:
    """Reduce season phrases ("2nd season", "season 2", "s2") to a digit."""
    return _replace_all(text, _SEASON_PATTERNS)


def erase_unnecessary(text: str) -> str:
    """Replace or erase low-value tokens such as "the" and "(tv)"."""
    return _replace_all(text, _UNNECESSARY_PATTERNS)


def _is_punctuation(char: str) -> bool:
    code = ord(char)
    if code <= PunctuationRanges.LATIN1_MAX:
        return not (char.isascii() and char.isalnum())
    return PunctuationRanges.SYMBOLS_START < code < PunctuationRanges.SYMBOLS_END


def erase_punctuation(
    text: str,
    normalization_type: NormalizationType,
    *,
    modified_tail: bool = False,
) -> str:
    """Erase punctuation (and, from FOR_LOOKUP up, whitespace).

    The trailing run of punctuation is often meaningful ("Working!!",
    "Title (2011)"), so it is kept unless ``normalization_type`` is FULL or
    ``modified_tail`` says the earlier stages already rewrote the end of the
    string.

    Args:
        text: String to clean
        normalization_type: Aggressiveness of the erasure
        modified_tail: Whether the tail was already altered

    Returns:
        The cleaned string
    """
    if normalization_type == NormalizationType.MINIMAL:
        return text

    erase_whitespace = normalization_type >= NormalizationType.FOR_LOOKUP
    erase_tail = modified_tail or normalization_type == NormalizationType.FULL

    tail_start = len(text)
    if not erase_tail:
        while tail_start > 0:
            char = text[tail_start - 1]
            if char == " " or not _is_punctuation(char):
                break
            tail_start -= 1

    body = []
    for char in text[:tail_start]:
        if char == " ":
            if not erase_whitespace:
                body.append(char)
        elif not _is_punctuation(char):
            body.append(char)

    return "".join(body) + text[tail_start:]


def _normalize_once(
    title: str,
    normalization_type: NormalizationType,
    normalized_before: bool,
) -> str:
    modified_tail = False

    if not normalized_before:
        unmodified_title = title

        title = convert_roman_numbers(title)
        title = transliterate(title)
        title = normalize_unicode(title)  # lower case from here on
        title = convert_ordinal_numbers(title)
        title = convert_season_numbers(title)
        title = erase_unnecessary(title)
        title = title.strip()

        if len(title) != len(unmodified_title) and title[-1:] != unmodified_title[-1:]:
            modified_tail = True

    title = erase_punctuation(title, normalization_type, modified_tail=modified_tail)

    if normalization_type < NormalizationType.FULL:
        title = _WHITESPACE_RUN_PATTERN.sub(" ", title).strip()

    return title


@functools.lru_cache(maxsize=8192)
def normalize(
    title: str,
    normalization_type: NormalizationType = NormalizationType.FULL,
    normalized_before: bool = False,
) -> str:
    """Normalize a title into its canonical comparable form.

    Args:
        title: Title to normalize
        normalization_type: How much punctuation and whitespace to erase
        normalized_before: Skip the text stages and only erase punctuation

    Returns:
        The normalized title. Identical input always gives identical output,
        and ``normalize(normalize(s, t), t) == normalize(s, t)``.

    Examples:
        >>> normalize("Season II", NormalizationType.FULL)
        '2'
        >>> normalize("Example Show", NormalizationType.FOR_LOOKUP)
        'exampleshow'
        >>> normalize("Example Show", NormalizationType.FOR_TRIGRAMS)
        'example show'
    """
    if not title:
        return ""

    result = _normalize_once(title, normalization_type, normalized_before)
    for _ in range(_MAX_PASSES):
        again = _normalize_once(result, normalization_type, normalized_before)
        if again == result:
            return result
        result = again

    logger.debug("Normalization of '%s' did not settle after %d passes", title, _MAX_PASSES)
    return result
