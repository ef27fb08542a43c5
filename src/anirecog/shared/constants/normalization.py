"""
Normalization Constants

Replacement tables used by the title normalization pipeline. Every table is
ordered: replacements are applied in the order listed.
"""

from typing import ClassVar


class RomanNumerals:
    """Roman numerals converted to Arabic digits.

    I and X are left out; as single letters they are far more likely to be
    part of a title than a number.
    """

    TABLE: ClassVar[tuple[tuple[str, str], ...]] = (
        ("II", "2"),
        ("III", "3"),
        ("IV", "4"),
        ("V", "5"),
        ("VI", "6"),
        ("VII", "7"),
        ("VIII", "8"),
        ("IX", "9"),
        ("XI", "11"),
        ("XII", "12"),
        ("XIII", "13"),
    )


class Transliteration:
    """Character equivalences and romanization variants."""

    CHARACTERS: ClassVar[dict[str, str]] = {
        "@": "a",  # e.g. "iDOLM@STER"
        "×": "x",  # multiplication sign, e.g. "Tasogare Otome x Amnesia"
        "꞉": ":",  # modifier letter colon, e.g. "Nisekoi:"
        "Ō": "ou",  # capital o with macron
        "ō": "ou",  # small o with macron
        "ū": "uu",  # small u with macron
    }

    # Hepburn to wapuro
    WORDS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("wa", "ha"),
        ("e", "he"),
        ("o", "wo"),
    )


class Ordinals:
    """Ordinal words converted to ordinal numbers."""

    TABLE: ClassVar[tuple[tuple[str, str], ...]] = (
        ("first", "1st"),
        ("second", "2nd"),
        ("third", "3rd"),
        ("fourth", "4th"),
        ("fifth", "5th"),
        ("sixth", "6th"),
        ("seventh", "7th"),
        ("eighth", "8th"),
        ("ninth", "9th"),
    )


class SeasonPhrases:
    """Season phrases reduced to a bare season number."""

    SEASONS = range(1, 7)
    SUFFIXES: ClassVar[dict[int, str]] = {1: "st", 2: "nd", 3: "rd"}

    @classmethod
    def table(cls) -> tuple[tuple[str, str], ...]:
        """Return (phrase, digit) pairs for every supported season."""
        pairs: list[tuple[str, str]] = []
        for number in cls.SEASONS:
            ordinal = f"{number}{cls.SUFFIXES.get(number, 'th')}"
            for phrase in (
                f"{ordinal} season",
                f"season {number}",
                f"series {number}",
                f"s{number}",
            ):
                pairs.append((phrase, str(number)))
        return tuple(pairs)


class UnnecessaryWords:
    """Low-value tokens replaced or erased after case folding."""

    TABLE: ClassVar[tuple[tuple[str, str], ...]] = (
        ("&", "and"),
        ("the animation", ""),
        ("the", ""),
        ("episode", ""),
        ("oad", "ova"),
        ("oav", "ova"),
        ("specials", "sp"),
        ("special", "sp"),
        ("(tv)", ""),
    )


class UnicodeLumps:
    """Characters folded together for easier comparison.

    Mirrors the "lump" mapping of utf8proc: dashes, quotes and spaces that
    survive NFKC are mapped onto their ASCII counterparts.
    """

    TABLE: ClassVar[dict[str, str]] = {
        "‐": "-",  # hyphen
        "‑": "-",  # non-breaking hyphen
        "‒": "-",  # figure dash
        "–": "-",  # en dash
        "—": "-",  # em dash
        "―": "-",  # horizontal bar
        "−": "-",  # minus sign
        "‘": "'",
        "’": "'",
        "‚": "'",
        "‛": "'",
        "′": "'",
        "“": '"',
        "”": '"',
        "„": '"',
        "″": '"',
        "∕": "/",  # division slash
        "⁄": "/",  # fraction slash
        "∶": ":",  # ratio
        "∣": "|",  # divides
        "ˆ": "^",
        "ː": ":",
        "˜": "~",
        "∼": "~",
        "〜": "~",
        "　": " ",  # ideographic space
    }


class PunctuationRanges:
    """Code point ranges treated as erasable punctuation."""

    LATIN1_MAX = 0xFF
    SYMBOLS_START = 0x2000  # exclusive; stars, hearts, notes...
    SYMBOLS_END = 0x2767  # exclusive
