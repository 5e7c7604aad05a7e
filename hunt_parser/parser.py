"""
Main Session Log Parser.

This module provides ``SessionLogParser``, the entry point of the parsing
subsystem. It turns a pasted Hunt Analyzer summary into a
``ParsedSessionFields`` record.

Classes:
    ParseOutcome: A parsed record together with the path that produced it
    SessionLogParser: Facade over strategy dispatch and fallback extraction

Two calls are exposed on purpose:
    - ``parse_session_data`` runs the first strategy whose marker is present
      and returns None when no strategy recognises the log
    - ``extract_any_available_data`` is the degraded mode, recovering every
      field it can find on its own

Callers that want both in sequence use ``parse``, which reports whether a
strategy or the fallback produced the record.

Usage:
    parser = SessionLogParser()
    fields = parser.parse_session_data(text)
    if fields is None:
        fields = parser.extract_any_available_data(text)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from core.error_handler import log_execution_time
from core.exceptions import ParsingError

from .config import ParserSettings
from .fallback import FallbackExtractor
from .field_extractors import FieldExtractor
from .models import ParsedSessionFields
from .number_normalizer import NumberNormalizer
from .strategies import DEFAULT_LAYOUTS, LogLayout, ParserStrategy, build_strategies, select_strategy
from .text_normalizer import TextNormalizer

FALLBACK_SOURCE = "fallback"


@dataclass(frozen=True)
class ParseOutcome:
    """
    Result of the strategy-then-fallback sequence.

    Attributes:
        fields: The extracted record
        source: Name of the strategy that handled the log, or ``"fallback"``
    """
    fields: ParsedSessionFields
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "fields": self.fields.to_dict()}


class SessionLogParser:
    """
    Parser for pasted hunting session logs.

    Components:
        - TextNormalizer: clipboard cleanup (line endings, exotic spaces)
        - NumberNormalizer: per-document numeral convention detection
        - FieldExtractor: date, duration and numeric group extraction
        - ParserStrategy list: one recogniser per known layout, in order
        - FallbackExtractor: per-field extraction for unknown layouts

    No parsing state is kept between calls; ``stats`` only counts outcomes.
    """

    def __init__(
        self,
        settings: Optional[ParserSettings] = None,
        layouts: Sequence[LogLayout] = DEFAULT_LAYOUTS,
    ) -> None:
        self.settings = settings or ParserSettings()
        self.text_normalizer = TextNormalizer()
        # Sample every label any layout or alias reads values from
        sample_labels = [alias for layout in layouts for alias in layout.labels]
        sample_labels += [alias for aliases in self.settings.label_aliases.values() for alias in aliases]
        self.number_normalizer = NumberNormalizer(sample_labels=sample_labels)
        self.field_extractor = FieldExtractor(
            number_normalizer=self.number_normalizer,
            date_formats=self.settings.date_formats,
            text_normalizer=self.text_normalizer,
        )
        self.strategies: List[ParserStrategy] = build_strategies(self.field_extractor, layouts)
        self.fallback = FallbackExtractor(self.field_extractor, self.settings)
        self.reset_stats()
        logger.debug(f"SessionLogParser initialized with strategies {[s.name for s in self.strategies]}")

    def _prepare(self, text: Any) -> str:
        if text is None:
            raise ParsingError("Session log text is required, got None")
        if not isinstance(text, str):
            raise ParsingError(f"Session log text must be a string, got {type(text).__name__}")
        return self.text_normalizer.normalize(text)

    def claiming_strategy(self, text: str) -> Optional[ParserStrategy]:
        """The strategy that would handle ``text``, or None."""
        return select_strategy(self._prepare(text), self.strategies)

    def parse_session_data(self, text: str) -> Optional[ParsedSessionFields]:
        """
        Parse with the first strategy that recognises the log.

        Returns:
            The extracted record, or None when no strategy claims the text

        Raises:
            ParsingError: If ``text`` is None or not a string
        """
        normalized = self._prepare(text)
        self.stats["total_parses"] += 1
        strategy = select_strategy(normalized, self.strategies)
        if strategy is None:
            self.stats["unrecognized"] += 1
            return None
        self.stats["strategy_parses"] += 1
        return strategy.parse(normalized)

    def extract_any_available_data(self, text: str) -> ParsedSessionFields:
        """
        Recover whatever fields can be found, layout regardless.

        Monster and item lists are always present (possibly empty).

        Raises:
            ParsingError: If ``text`` is None or not a string
        """
        normalized = self._prepare(text)
        self.stats["fallback_extractions"] += 1
        return self.fallback.extract(normalized)

    @log_execution_time()
    def parse(self, text: str) -> ParseOutcome:
        """Strategy first, fallback when no strategy recognises the log."""
        normalized = self._prepare(text)
        strategy = select_strategy(normalized, self.strategies)
        self.stats["total_parses"] += 1
        if strategy is not None:
            self.stats["strategy_parses"] += 1
            return ParseOutcome(fields=strategy.parse(normalized), source=strategy.name)
        self.stats["unrecognized"] += 1
        self.stats["fallback_extractions"] += 1
        logger.info("Log layout not recognised; using fallback extraction")
        return ParseOutcome(fields=self.fallback.extract(normalized), source=FALLBACK_SOURCE)

    def get_parsing_stats(self) -> Dict[str, Any]:
        """Counters plus the share of logs recognised by a strategy."""
        stats: Dict[str, Any] = dict(self.stats)
        total = stats["total_parses"]
        stats["recognition_rate"] = stats["strategy_parses"] / total if total else 0.0
        return stats

    def reset_stats(self) -> None:
        self.stats = {
            "total_parses": 0,
            "strategy_parses": 0,
            "unrecognized": 0,
            "fallback_extractions": 0,
        }
