"""
Best-effort extraction for logs no strategy recognises.

Every field is looked up on its own through an ordered list of candidate
patterns covering English and Portuguese labels; the first match wins.
Fields that can be computed from others (duration from the timestamps,
XP/h from XP and duration) are derived afterwards. A failure while
extracting one field skips that field and nothing else.
"""
from __future__ import annotations

from typing import Dict, Mapping, Optional, Pattern, Sequence, Tuple

from loguru import logger

from core.error_handler import ErrorHandler

from .config import ParserSettings
from .field_extractors import FieldExtractor, clamp_negative_metrics, compile_patterns, label, value
from .label_matcher import LabelMatcher
from .labels import FIELD_LABELS
from .list_sections import ITEM_HEADERS, MONSTER_HEADERS, extract_section, parse_entries
from .models import KilledMonster, LootedItem, ParsedSessionFields
from .number_normalizer import Number, NumberFormat, round_half_up

FALLBACK_DATE_PATTERNS: Tuple[str, ...] = (
    r"From (?P<start>.*?) to (?P<end>.*?)\s+Session:",
    r"Session data:\s*From (?P<start>.*?) to (?P<end>.*?)\s*(?:\n|$)",
    r"Hunt period:\s*(?P<start>.*?) - (?P<end>.*?)\s*(?:\n|$)",
    r"Start:\s*(?P<start>.*?)\s+End:\s*(?P<end>.*?)\s*(?:\n|$)",
    r"Período:\s*(?P<start>.*?) até (?P<end>.*?)\s*(?:\n|$)",
    r"Data:\s*(?P<start>.*?) a (?P<end>.*?)\s*(?:\n|$)",
)

FALLBACK_DURATION_PATTERNS: Tuple[str, ...] = (
    r"Session:\s*(?P<duration>\d+:\d{2}h?)",
    r"Duration:\s*(?P<duration>\d+:\d{2}h?)",
    r"Sessão:\s*(?P<duration>\d+:\d{2}h?)",
    r"Duração:\s*(?P<duration>\d+:\d{2}h?)",
)


class FallbackExtractor:
    """Per-field independent extraction with derivation of computable fields."""

    def __init__(self, extractor: FieldExtractor, settings: Optional[ParserSettings] = None) -> None:
        self.extractor = extractor
        self.settings = settings or ParserSettings()
        self.field_labels = self._merge_labels(FIELD_LABELS, self.settings.label_aliases)
        self.field_patterns: Dict[str, Tuple[Pattern[str], ...]] = {
            field_name: compile_patterns(label(alias) + value("value") for alias in labels)
            for field_name, labels in self.field_labels.items()
        }
        self.date_patterns = compile_patterns(FALLBACK_DATE_PATTERNS)
        self.duration_patterns = compile_patterns(FALLBACK_DURATION_PATTERNS)
        self.monster_headers = MONSTER_HEADERS + self.settings.headers_for("killed_monsters")
        self.item_headers = ITEM_HEADERS + self.settings.headers_for("looted_items")
        self.label_matcher = LabelMatcher(self.field_labels, cutoff=self.settings.fuzzy_label_cutoff)
        self.error_handler = ErrorHandler(level="WARNING")

    @staticmethod
    def _merge_labels(
        defaults: Mapping[str, Sequence[str]], extra: Mapping[str, Sequence[str]]
    ) -> Dict[str, Tuple[str, ...]]:
        merged = {name: tuple(labels) for name, labels in defaults.items()}
        for name, labels in extra.items():
            if name not in merged:
                logger.warning(f"Ignoring label aliases for unknown field '{name}'")
                continue
            merged[name] = merged[name] + tuple(alias for alias in labels if alias not in merged[name])
        return merged

    def extract_field(self, text: str, field_name: str, fmt: NumberFormat) -> Optional[Number]:
        """First candidate pattern for ``field_name`` that matches, converted under ``fmt``."""
        for pattern in self.field_patterns[field_name]:
            match = pattern.search(text)
            if match:
                return self.extractor.number_normalizer.to_number(match.group("value"), fmt)
        return None

    def extract(self, text: str) -> ParsedSessionFields:
        fmt = self.extractor.number_normalizer.detect_format(text)
        values: Dict[str, object] = {}

        dates = self.error_handler.safe_execute(
            self.extractor.extract_date_range, text, self.date_patterns,
            default={}, context="date range",
        )
        values.update(dates)
        duration = self.error_handler.safe_execute(
            self.extractor.extract_duration, text, self.duration_patterns,
            default={}, context="duration",
        )
        values.update(duration)

        for field_name in self.field_patterns:
            number = self.error_handler.safe_execute(
                self.extract_field, text, field_name, fmt, context=field_name,
            )
            if number is not None:
                values[field_name] = number

        if self.settings.enable_fuzzy_labels:
            missing = [name for name in self.field_patterns if name not in values]
            values.update(
                self.label_matcher.recover(text, missing, self.extractor.number_normalizer, fmt)
            )

        values["killed_monsters"] = self.error_handler.safe_execute(
            self._extract_monsters, text, default=(), context="killed monsters",
        )
        values["looted_items"] = self.error_handler.safe_execute(
            self._extract_items, text, default=(), context="looted items",
        )

        clamp_negative_metrics(values)
        self._derive(values)
        fields = ParsedSessionFields(**values)
        if fields.is_empty:
            logger.warning("Fallback extraction found no session data")
        else:
            logger.debug(f"Fallback extracted fields: {sorted(values)}")
        return fields

    def _extract_monsters(self, text: str) -> Tuple[KilledMonster, ...]:
        body = extract_section(text, self.monster_headers, self.item_headers)
        return tuple(KilledMonster(name=e.name, count=e.count) for e in parse_entries(body))

    def _extract_items(self, text: str) -> Tuple[LootedItem, ...]:
        body = extract_section(text, self.item_headers, self.monster_headers)
        return tuple(LootedItem(name=e.name, count=e.count) for e in parse_entries(body))

    @staticmethod
    def _derive(values: Dict[str, object]) -> None:
        start, end = values.get("start_datetime"), values.get("end_datetime")
        if start is not None and end is not None and values.get("duration_minutes") is None:
            minutes = round_half_up((end - start).total_seconds() / 60)
            if minutes >= 0:
                values["duration_minutes"] = minutes
            else:
                logger.warning(f"Session ends before it starts ({start} -> {end}); duration not derived")

        xp = values.get("total_xp_gain")
        duration = values.get("duration_minutes")
        if xp is not None and duration and values.get("total_xp_per_hour") is None:
            values["total_xp_per_hour"] = round_half_up(xp * 60 / duration)
