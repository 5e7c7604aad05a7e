"""Killed-monster and looted-item section parsing."""
from __future__ import annotations

import re
from typing import Dict, List, NamedTuple, Optional, Sequence

from loguru import logger

from .text_normalizer import split_nonempty_lines

MONSTER_HEADERS = ("Killed Monsters:", "Monsters Killed:", "Monstros Mortos:", "Criaturas Mortas:")
ITEM_HEADERS = ("Looted Items:", "Items Looted:", "Itens Saqueados:", "Itens Coletados:")

_ENTRY_PATTERN = re.compile(r"^(\d+)\s*x\s+(\S.*)$", re.IGNORECASE)


class ListEntry(NamedTuple):
    name: str
    count: int


def _alternation(aliases: Sequence[str]) -> str:
    return "|".join(re.escape(a) for a in sorted(aliases, key=len, reverse=True))


def extract_section(
    text: str, header_aliases: Sequence[str], stop_aliases: Sequence[str] = ()
) -> Optional[str]:
    """
    Return the body of the first section introduced by one of ``header_aliases``.

    The body runs to the first stop alias at the start of a line, or to the
    end of the text. When the whole section sits on the header's own line
    (a log pasted as a single line) a stop alias anywhere on that line ends
    it too. Returns None when no header is present and ``""`` for a header
    with nothing under it.
    """
    if not text or not header_aliases:
        return None
    header = re.search(_alternation(header_aliases), text, re.IGNORECASE)
    if not header:
        return None

    rest = text[header.end():]
    end = len(rest)
    if stop_aliases:
        stops = _alternation(stop_aliases)
        line_start = re.search(rf"(?m)^[ \t]*(?:{stops})", rest, re.IGNORECASE)
        if line_start:
            end = line_start.start()
        first_line_end = rest.find("\n")
        first_line = rest if first_line_end == -1 else rest[:first_line_end]
        inline = re.search(stops, first_line, re.IGNORECASE)
        if inline:
            end = min(end, inline.start())
    return rest[:end].strip()


def parse_entries(section_body: Optional[str]) -> List[ListEntry]:
    """
    Parse ``<count>x <name>`` entries, one or more per line, comma separated.

    Segments of another shape are skipped with a warning. Order follows the
    document and duplicates are kept.
    """
    entries: List[ListEntry] = []
    if not section_body:
        return entries
    for line in split_nonempty_lines(section_body):
        for segment in line.split(","):
            segment = segment.strip()
            if not segment:
                continue
            match = _ENTRY_PATTERN.match(segment)
            if not match:
                logger.warning(f"Skipping malformed list entry '{segment}'")
                continue
            count = int(match.group(1))
            name = match.group(2).strip()
            if count < 1:
                logger.warning(f"Skipping list entry with zero count '{segment}'")
                continue
            entries.append(ListEntry(name=name, count=count))
    return entries


def aggregate_entries(entries: Sequence[ListEntry]) -> List[ListEntry]:
    """Merge entries with the same name (case-insensitive), keeping first-seen order and spelling."""
    totals: Dict[str, ListEntry] = {}
    for entry in entries:
        key = entry.name.casefold()
        if key in totals:
            totals[key] = totals[key]._replace(count=totals[key].count + entry.count)
        else:
            totals[key] = entry
    return list(totals.values())
