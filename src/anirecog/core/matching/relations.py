"""Sequel relations and episode redirection.

Releases often keep counting episodes across seasons, so "Example Show - 15"
may really be episode 3 of the second season, which the library lists as a
separate entry. A relations document holds rules that remap such numbers:

    ::meta
    - version: 1.0.0

    ::rules
    # Example Show -> Example Show 2
    - 42|1042:13-24 -> 43|1043:1-12!

Each side is a "|" separated list of ids, one column per list service, and
an episode range ("N", "N-M" or "N-?"). ``?`` marks an id unknown for a
service (the rule is skipped for it), ``~`` on the right means "same as the
source id", and a trailing ``!`` also registers the rule for the destination
id. The same rules may be wrapped in JSON:
``{"meta": {"version": "1.0.0"}, "rules": [{"rule": "42:13-24 -> 43:1-12"}]}``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import orjson

from anirecog.core.matching.models import Redirection
from anirecog.core.parser.models import EpisodeRange
from anirecog.shared.errors import create_relations_load_error
from anirecog.shared.utils import ReadWriteLock

logger = logging.getLogger(__name__)

_ID = r"(?:\d+|[?~])"
_IDS = rf"{_ID}(?:\|{_ID})*"
_RANGE = r"\d+(?:-(?:\d+|\?))?"
_RULE_PATTERN = re.compile(
    rf"^(?P<source_ids>{_IDS}):(?P<source_range>{_RANGE})\s*->\s*"
    rf"(?P<destination_ids>{_IDS}):(?P<destination_range>{_RANGE})(?P<both>!)?$"
)

UNKNOWN_ID = "?"
SAME_ID = "~"
SECTION_PREFIX = "::"
COMMENT_PREFIX = "#"
ITEM_PREFIX = "- "


class RuleSyntaxError(ValueError):
    """A relation rule that does not follow the rule grammar."""


@dataclass(frozen=True)
class RelationEntry:
    """Maps a range of one entry's episodes onto another entry's range."""

    source_id: int
    source_range: EpisodeRange
    destination_id: int
    destination_range: EpisodeRange

    def find(self, number: int) -> int | None:
        """Map a source episode number, None if this rule does not cover it.

        A single-episode destination maps every covered number onto itself.
        """
        if not self.source_range.contains(number):
            return None

        destination = self.destination_range.low
        if not self.destination_range.is_single:
            destination += number - self.source_range.low

        if not self.destination_range.contains(destination):
            return None
        return destination

    def to_rule(self) -> str:
        return f"{self.source_id}:{self.source_range} -> {self.destination_id}:{self.destination_range}"


def parse_rule(rule: str, service_index: int = 0) -> list[RelationEntry]:
    """Parse one rule into the entries it registers.

    Args:
        rule: Rule text, with or without the "- " list prefix
        service_index: Id column to use

    Returns:
        The entries the rule registers: one, two for a "!" rule, or none if
        the id is unknown for the service

    Raises:
        RuleSyntaxError: If the rule is malformed

    Example:
        >>> parse_rule("1:13-24 -> 2:1-12")[0].destination_id
        2
    """
    text = rule.strip()
    if text.startswith(ITEM_PREFIX):
        text = text[len(ITEM_PREFIX) :].strip()

    match = _RULE_PATTERN.match(text)
    if match is None:
        msg = f"Invalid relation rule: {rule!r}"
        raise RuleSyntaxError(msg)

    source_id = _select_id(match.group("source_ids"), service_index, rule)
    destination_id = _select_id(match.group("destination_ids"), service_index, rule)
    if source_id == SAME_ID:
        msg = f"Source id cannot be '{SAME_ID}': {rule!r}"
        raise RuleSyntaxError(msg)
    if UNKNOWN_ID in (source_id, destination_id):
        return []

    try:
        source_range = EpisodeRange.parse(match.group("source_range"))
        destination_range = EpisodeRange.parse(match.group("destination_range"))
    except ValueError as e:
        raise RuleSyntaxError(str(e)) from e

    source = int(source_id)
    destination = source if destination_id == SAME_ID else int(destination_id)

    entries = [RelationEntry(source, source_range, destination, destination_range)]
    if match.group("both") and destination != source:
        entries.append(RelationEntry(destination, source_range, destination, destination_range))
    return entries


def _select_id(ids: str, service_index: int, rule: str) -> str:
    columns = ids.split("|")
    if service_index >= len(columns):
        msg = f"Rule has no id for service {service_index}: {rule!r}"
        raise RuleSyntaxError(msg)
    return columns[service_index]


class RelationsGraph:
    """Thread-safe table of relation rules keyed by source id.

    Reading a document builds a new table and swaps it in under the write
    lock, so concurrent redirection searches see either the old or the new
    table, never a mix.

    Example:
        >>> graph = RelationsGraph()
        >>> graph.read("1:13-24 -> 2:1-12")
        True
        >>> graph.search_redirection(1, EpisodeRange.single(15))
        Redirection(anime_id=2, episode_range=EpisodeRange(low=3, high=3))
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._relations: dict[int, tuple[RelationEntry, ...]] = {}
        self._meta: dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock.read_locked():
            return sum(len(entries) for entries in self._relations.values())

    @property
    def meta(self) -> dict[str, str]:
        with self._lock.read_locked():
            return dict(self._meta)

    def entries(self) -> list[RelationEntry]:
        """Every entry, grouped by source id in ascending order."""
        with self._lock.read_locked():
            return [entry for anime_id in sorted(self._relations) for entry in self._relations[anime_id]]

    def read(
        self,
        document: str | bytes,
        *,
        service_index: int = 0,
        source: str | None = None,
    ) -> bool:
        """Replace the table with the rules of a relations document.

        Malformed rules are logged and skipped.

        Args:
            document: Line format or JSON document
            service_index: Id column to use
            source: Where the document came from, for error context

        Returns:
            True if at least one rule was loaded

        Raises:
            RelationsLoadError: If the document cannot be parsed at all
        """
        if isinstance(document, bytes):
            try:
                document = document.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise create_relations_load_error(
                    "Relations document is not valid UTF-8",
                    source=source,
                    original_error=e,
                ) from e
        document = document.lstrip("\ufeff")
        is_json = document.lstrip().startswith("{")

        if is_json:
            meta, rules = self._split_json(document, source)
        else:
            meta, rules = self._split_lines(document)

        relations: dict[int, list[RelationEntry]] = {}
        loaded = failed = 0
        for rule in rules:
            try:
                entries = parse_rule(rule, service_index)
            except RuleSyntaxError:
                logger.warning("Could not parse relation rule: %s", rule)
                failed += 1
                continue
            for entry in entries:
                relations.setdefault(entry.source_id, []).append(entry)
            loaded += 1

        if failed and not loaded:
            raise create_relations_load_error(
                f"None of the {failed} relation rule(s) could be parsed",
                source=source,
            )

        with self._lock.write_locked():
            self._relations = {anime_id: tuple(entries) for anime_id, entries in relations.items()}
            self._meta = meta

        logger.info(
            "Loaded %d relation rule(s) (%d skipped), version %s",
            loaded,
            failed,
            meta.get("version", "unknown"),
        )
        return bool(relations)

    def read_file(self, path: str | Path, *, service_index: int = 0) -> bool:
        """Read a relations document from a file.

        Raises:
            RelationsLoadError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            document = path.read_bytes()
        except OSError as e:
            raise create_relations_load_error(
                f"Cannot read relations file: {path}",
                source=str(path),
                original_error=e,
            ) from e
        return self.read(document, service_index=service_index, source=str(path))

    def clear(self) -> None:
        with self._lock.write_locked():
            self._relations = {}
            self._meta = {}

    def search_redirection(
        self,
        anime_id: int,
        episode_range: EpisodeRange | int,
    ) -> Redirection | None:
        """Find where an episode (range) of an entry really belongs.

        Both ends of a range must map to the same destination entry.

        Args:
            anime_id: Entry the episode was matched to
            episode_range: Episode number or range to remap

        Returns:
            The destination entry and remapped range, or None
        """
        if isinstance(episode_range, int):
            episode_range = EpisodeRange.single(episode_range)

        with self._lock.read_locked():
            entries = self._relations.get(anime_id, ())

        low = self._find(entries, episode_range.low)
        if low is None:
            return None

        if episode_range.high is None or episode_range.is_single:
            return Redirection(low[0], EpisodeRange.single(low[1]))

        high = self._find(entries, episode_range.high)
        if high is None or high[0] != low[0]:
            return None
        return Redirection(low[0], EpisodeRange(low[1], high[1]))

    def serialize(self) -> str:
        """Write the table in the line format."""
        meta = self.meta
        lines = []
        if meta:
            lines.append(f"{SECTION_PREFIX}meta")
            lines.extend(f"{ITEM_PREFIX}{key}: {value}" for key, value in meta.items())
            lines.append("")
        lines.append(f"{SECTION_PREFIX}rules")
        lines.extend(f"{ITEM_PREFIX}{entry.to_rule()}" for entry in self.entries())
        return "\n".join(lines) + "\n"

    @staticmethod
    def _find(entries: tuple[RelationEntry, ...], number: int) -> tuple[int, int] | None:
        for entry in entries:
            destination = entry.find(number)
            if destination is not None:
                return entry.destination_id, destination
        return None

    @staticmethod
    def _split_lines(document: str) -> tuple[dict[str, str], list[str]]:
        meta: dict[str, str] = {}
        rules: list[str] = []
        section = "rules"

        for raw_line in document.splitlines():
            line = raw_line.strip()
            if not line or line.startswith(COMMENT_PREFIX):
                continue
            if line.startswith(SECTION_PREFIX):
                section = line[len(SECTION_PREFIX) :].strip().lower()
                continue

            if section == "meta":
                item = line[len(ITEM_PREFIX) :] if line.startswith(ITEM_PREFIX) else line
                key, separator, value = item.partition(":")
                if separator:
                    meta[key.strip()] = value.strip()
            elif section == "rules":
                rules.append(line)
            else:
                logger.debug("Ignoring line in unknown section '%s': %s", section, line)

        return meta, rules

    @staticmethod
    def _split_json(document: str, source: str | None) -> tuple[dict[str, str], list[str]]:
        try:
            root: Any = orjson.loads(document)
        except orjson.JSONDecodeError as e:
            raise create_relations_load_error(
                "Relations document is not valid JSON",
                source=source,
                original_error=e,
            ) from e

        if not isinstance(root, dict) or not isinstance(root.get("rules"), list):
            raise create_relations_load_error(
                "Relations document has no 'rules' list",
                source=source,
            )

        raw_meta = root.get("meta")
        meta = {str(key): str(value) for key, value in raw_meta.items()} if isinstance(raw_meta, dict) else {}

        rules: list[str] = []
        for item in root["rules"]:
            rule = item.get("rule") if isinstance(item, dict) else item
            if isinstance(rule, str):
                rules.append(rule)
            else:
                logger.warning("Skipping relation item without a rule: %s", item)
        return meta, rules
