"""Use cases for hunt session import.

Implements the use case layer following Clean Architecture principles:
the parser only extracts what a log contains, and these use cases turn
that partial extraction into a complete session record or a preview.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Tuple

from loguru import logger

from core.exceptions import HuntLogException, ParsingError, SessionValidationError
from core.result import Failure, Result, Success
from hunt_parser.list_sections import ListEntry, aggregate_entries
from hunt_parser.models import NUMERIC_FIELDS, KilledMonster, LootedItem, Number, ParsedSessionFields
from hunt_parser.number_normalizer import round_half_up
from hunt_parser.parser import FALLBACK_SOURCE, ParseOutcome, SessionLogParser


@dataclass(frozen=True)
class SessionRecord:
    """A fully assembled hunting session.

    Every metric is present; metrics the log did not report are zero.
    ``duration_minutes`` is computed from the timestamps when the log omits it.
    ``source`` names the strategy that parsed the log, or "fallback".
    """
    start_datetime: datetime
    end_datetime: datetime
    duration_minutes: int
    raw_xp_gain: Number = 0
    total_xp_gain: Number = 0
    raw_xp_per_hour: Number = 0
    total_xp_per_hour: Number = 0
    loot_value: Number = 0
    supplies_value: Number = 0
    balance: Number = 0
    damage_dealt: Number = 0
    damage_per_hour: Number = 0
    healing_done: Number = 0
    healing_per_hour: Number = 0
    killed_monsters: Tuple[KilledMonster, ...] = ()
    looted_items: Tuple[LootedItem, ...] = ()
    source: str = FALLBACK_SOURCE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "start_datetime": self.start_datetime.isoformat(),
            "end_datetime": self.end_datetime.isoformat(),
            "duration_minutes": self.duration_minutes,
        }
        data.update({name: getattr(self, name) for name in NUMERIC_FIELDS})
        data["killed_monsters"] = [m.to_dict() for m in self.killed_monsters]
        data["looted_items"] = [i.to_dict() for i in self.looted_items]
        data["source"] = self.source
        return data


def _minutes_between(start: datetime, end: datetime) -> int:
    minutes = round_half_up((end - start).total_seconds() / 60)
    if minutes < 0:
        logger.warning(f"Session ends before it starts ({start} > {end}); duration set to 0")
        return 0
    return minutes


class ImportSessionUseCase:
    """Use case for importing a pasted session log.

    Runs the strategy parser, falls back to per-field extraction when no
    strategy recognises the log, then assembles and validates the record.
    """

    def __init__(self, parser: SessionLogParser, aggregate_duplicates: bool = False):
        self.parser = parser
        self.aggregate_duplicates = aggregate_duplicates

    def execute(
        self, text: str, fallback_only: bool = False, strict: bool = False
    ) -> Result[SessionRecord, HuntLogException]:
        """Parse ``text`` into a session record.

        Args:
            text: The pasted session log
            fallback_only: Skip strategy dispatch and use fallback extraction directly
            strict: Reject logs no strategy recognises instead of falling back

        Returns:
            Result containing SessionRecord on success, or ParsingError /
            SessionValidationError on failure
        """
        try:
            outcome = self._extract(text, fallback_only, strict)
            record = self.assemble(outcome.fields, outcome.source)
        except ParsingError as e:
            logger.error(f"Failed to parse session log: {e}")
            return Failure(e)
        except SessionValidationError as e:
            logger.warning(f"Session rejected: {e}")
            return Failure(e)

        logger.info(
            f"[import] source={record.source} duration={record.duration_minutes}min "
            f"monsters={len(record.killed_monsters)} items={len(record.looted_items)}"
        )
        return Success(record)

    def _extract(self, text: str, fallback_only: bool, strict: bool) -> ParseOutcome:
        if not fallback_only:
            fields = self.parser.parse_session_data(text)
            if fields is not None:
                strategy = self.parser.claiming_strategy(text)
                return ParseOutcome(fields=fields, source=strategy.name if strategy else FALLBACK_SOURCE)
            if strict:
                raise SessionValidationError("Log layout not recognised by any strategy")
            logger.info("No strategy recognised the log; extracting available data")
        return ParseOutcome(fields=self.parser.extract_any_available_data(text), source=FALLBACK_SOURCE)

    def assemble(self, fields: ParsedSessionFields, source: str = FALLBACK_SOURCE) -> SessionRecord:
        """Zero-fill absent metrics and require both timestamps.

        Raises:
            SessionValidationError: If the start or end timestamp is missing
        """
        if not fields.has_time_range:
            missing = tuple(
                name for name in ("start_datetime", "end_datetime") if getattr(fields, name) is None
            )
            raise SessionValidationError(
                f"Session log has no {' or '.join(missing)}", missing_fields=missing
            )

        duration = fields.duration_minutes
        if duration is None:
            duration = _minutes_between(fields.start_datetime, fields.end_datetime)

        metrics: Dict[str, Number] = {}
        for name in NUMERIC_FIELDS:
            metric = getattr(fields, name)
            metrics[name] = metric if metric is not None else 0

        monsters = tuple(fields.killed_monsters or ())
        items = tuple(fields.looted_items or ())
        if self.aggregate_duplicates:
            monsters = tuple(
                KilledMonster(name=e.name, count=e.count)
                for e in aggregate_entries([ListEntry(m.name, m.count) for m in monsters])
            )
            items = tuple(
                LootedItem(name=e.name, count=e.count)
                for e in aggregate_entries([ListEntry(i.name, i.count) for i in items])
            )

        return SessionRecord(
            start_datetime=fields.start_datetime,
            end_datetime=fields.end_datetime,
            duration_minutes=duration,
            **metrics,
            killed_monsters=monsters,
            looted_items=items,
            source=source,
        )


class PreviewSessionUseCase:
    """Use case for previewing what the parser finds in a log.

    Unlike the import, a preview never rejects the log: missing timestamps
    are reported instead of failing.
    """

    def __init__(self, parser: SessionLogParser):
        self.parser = parser

    def execute(self, text: str) -> Result[Dict[str, Any], ParsingError]:
        """Return the extracted fields, their source and the fields still missing."""
        try:
            outcome = self.parser.parse(text)
        except ParsingError as e:
            logger.error(f"Failed to preview session log: {e}")
            return Failure(e)

        data = outcome.to_dict()
        present = set(outcome.fields.present_fields)
        data["missing_fields"] = [
            name for name in ParsedSessionFields.field_names() if name not in present
        ]
        return Success(data)


__all__ = ["SessionRecord", "ImportSessionUseCase", "PreviewSessionUseCase"]
