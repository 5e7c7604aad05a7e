"""Scalar field extraction driven by pattern tables.

Each layout describes its fields as ``FieldGroup`` rows: a group of sibling
values (e.g. damage and damage/h) and the alternative patterns that capture
them together, usually once per value order. The first alternative that
matches fills every field of the group; a group that never matches leaves
its fields absent.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional, Pattern, Sequence, Tuple

from loguru import logger

from .models import NUMERIC_FIELDS, SIGNED_FIELDS
from .number_normalizer import NUMERAL_PATTERN, Number, NumberFormat, NumberNormalizer
from .text_normalizer import TextNormalizer

DEFAULT_DATE_FORMATS: Tuple[str, ...] = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d.%m.%Y %H:%M:%S",
    "%d.%m.%Y %H:%M",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
)

_DURATION_PATTERN = re.compile(r"^\s*(\d+):(\d{1,2})\s*h?\s*$", re.IGNORECASE)


def label(name: str) -> str:
    """Regex for ``<name>:`` that won't fire inside a longer label ending the same way."""
    return rf"(?<![\w/])(?<!Raw ){re.escape(name)}\s*:\s*"


def value(field: str) -> str:
    """Named capture group for a numeral bound to ``field``."""
    return rf"(?P<{field}>{NUMERAL_PATTERN})"


@dataclass(frozen=True)
class FieldGroup:
    """Sibling fields captured together, with alternative patterns tried in order."""
    name: str
    fields: Tuple[str, ...]
    patterns: Tuple[Pattern[str], ...]
    labels: Tuple[str, ...] = ()

    @classmethod
    def build(
        cls, name: str, fields: Sequence[str], patterns: Iterable[str], labels: Sequence[str] = ()
    ) -> "FieldGroup":
        compiled = tuple(re.compile(p, re.IGNORECASE) for p in patterns)
        for pattern in compiled:
            missing = set(fields) - set(pattern.groupindex)
            if missing:
                raise ValueError(f"Pattern for group '{name}' lacks groups {sorted(missing)}")
        return cls(name=name, fields=tuple(fields), patterns=compiled, labels=tuple(labels))


def compile_patterns(patterns: Iterable[str]) -> Tuple[Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def clamp_negative_metrics(values: Dict[str, object]) -> None:
    """Reset negative values of unsigned metrics to 0, in place."""
    for field_name in NUMERIC_FIELDS:
        number = values.get(field_name)
        if field_name not in SIGNED_FIELDS and number is not None and number < 0:
            logger.warning(f"Negative {field_name} ({number}) is not possible; using 0")
            values[field_name] = 0


def parse_duration(duration: str) -> Optional[int]:
    """Convert ``H:MMh`` (``12:30h``) to whole minutes, or None if malformed."""
    match = _DURATION_PATTERN.match(duration or "")
    if not match:
        logger.warning(f"Malformed duration '{duration}'")
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60:
        logger.warning(f"Malformed duration '{duration}': minutes out of range")
        return None
    return hours * 60 + minutes


class FieldExtractor:
    """Applies date, duration and numeric group patterns to a log."""

    def __init__(
        self,
        number_normalizer: Optional[NumberNormalizer] = None,
        date_formats: Sequence[str] = DEFAULT_DATE_FORMATS,
        text_normalizer: Optional[TextNormalizer] = None,
    ) -> None:
        self.number_normalizer = number_normalizer or NumberNormalizer()
        self.date_formats = tuple(date_formats)
        self.text_normalizer = text_normalizer or TextNormalizer()

    def parse_datetime(self, raw: str) -> Optional[datetime]:
        """Parse a human-readable date-time against the configured formats."""
        candidate = self.text_normalizer.normalize_date(raw)
        for fmt in self.date_formats:
            try:
                return datetime.strptime(candidate, fmt)
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(candidate)
        except ValueError:
            return None

    def extract_date_range(
        self, text: str, patterns: Sequence[Pattern[str]]
    ) -> Dict[str, datetime]:
        """
        Extract start and end timestamps.

        Patterns must capture ``start`` and ``end``. The first pattern that
        matches decides; if either side fails to parse, both are dropped.
        """
        for pattern in patterns:
            match = pattern.search(text)
            if not match:
                continue
            start = self.parse_datetime(match.group("start"))
            end = self.parse_datetime(match.group("end"))
            if start is None or end is None:
                logger.warning(
                    f"Could not parse session range '{match.group('start')}' "
                    f"to '{match.group('end')}'; leaving dates out"
                )
                return {}
            return {"start_datetime": start, "end_datetime": end}
        return {}

    def extract_duration(self, text: str, patterns: Sequence[Pattern[str]]) -> Dict[str, int]:
        """Extract ``duration_minutes`` from the first pattern capturing ``duration``."""
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                minutes = parse_duration(match.group("duration"))
                return {} if minutes is None else {"duration_minutes": minutes}
        return {}

    def extract_group(self, text: str, group: FieldGroup, fmt: NumberFormat) -> Dict[str, Number]:
        for pattern in group.patterns:
            match = pattern.search(text)
            if match:
                return {
                    field: self.number_normalizer.to_number(match.group(field), fmt)
                    for field in group.fields
                }
        logger.debug(f"Field group '{group.name}' not present")
        return {}

    def extract_groups(
        self, text: str, groups: Sequence[FieldGroup], fmt: NumberFormat
    ) -> Dict[str, Number]:
        values: Dict[str, Number] = {}
        for group in groups:
            values.update(self.extract_group(text, group, fmt))
        return values
