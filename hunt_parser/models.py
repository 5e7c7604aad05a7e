"""Data types produced by the session log parser."""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union

Number = Union[int, float]

NUMERIC_FIELDS: Tuple[str, ...] = (
    "raw_xp_gain",
    "total_xp_gain",
    "raw_xp_per_hour",
    "total_xp_per_hour",
    "loot_value",
    "supplies_value",
    "balance",
    "damage_dealt",
    "damage_per_hour",
    "healing_done",
    "healing_per_hour",
)

# Only the balance can go below zero (supplies cost more than the loot)
SIGNED_FIELDS = frozenset({"balance"})


@dataclass(frozen=True)
class KilledMonster:
    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "count": self.count}


@dataclass(frozen=True)
class LootedItem:
    """A looted item line. ``value`` is filled in later by pricing, never by the parser."""
    name: str
    count: int
    value: Optional[Number] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "count": self.count}
        if self.value is not None:
            data["value"] = self.value
        return data


@dataclass(frozen=True)
class ParsedSessionFields:
    """
    One-shot extraction result for a pasted session log.

    Every field is optional. ``None`` means the log did not contain the
    metric; for the two list fields an empty tuple means the section was
    found but listed nothing.
    """
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    raw_xp_gain: Optional[Number] = None
    total_xp_gain: Optional[Number] = None
    raw_xp_per_hour: Optional[Number] = None
    total_xp_per_hour: Optional[Number] = None
    loot_value: Optional[Number] = None
    supplies_value: Optional[Number] = None
    balance: Optional[Number] = None
    damage_dealt: Optional[Number] = None
    damage_per_hour: Optional[Number] = None
    healing_done: Optional[Number] = None
    healing_per_hour: Optional[Number] = None
    killed_monsters: Optional[Tuple[KilledMonster, ...]] = None
    looted_items: Optional[Tuple[LootedItem, ...]] = None

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @property
    def present_fields(self) -> Tuple[str, ...]:
        return tuple(name for name in self.field_names() if getattr(self, name) is not None)

    @property
    def is_empty(self) -> bool:
        """True when nothing besides (empty) list sections was recovered."""
        for name in self.present_fields:
            value = getattr(self, name)
            if isinstance(value, tuple) and not value:
                continue
            return False
        return True

    @property
    def has_time_range(self) -> bool:
        return self.start_datetime is not None and self.end_datetime is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize present fields only; absent fields are omitted, not nulled."""
        data: Dict[str, Any] = {}
        for name in self.present_fields:
            value = getattr(self, name)
            if isinstance(value, datetime):
                data[name] = value.isoformat()
            elif isinstance(value, tuple):
                data[name] = [entry.to_dict() for entry in value]
            else:
                data[name] = value
        return data
