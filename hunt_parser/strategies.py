"""Known log layouts and the strategies that recognise them.

A strategy is a pair of plain callables: a cheap marker check and an
extractor. Strategies are tried in registration order and the first one
whose check passes handles the log alone.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Pattern, Sequence, Tuple

from loguru import logger

from .field_extractors import (
    FieldExtractor,
    FieldGroup,
    clamp_negative_metrics,
    compile_patterns,
    label,
    value,
)
from .list_sections import extract_section, parse_entries
from .models import KilledMonster, LootedItem, ParsedSessionFields

SEP = r"\s+"


@dataclass(frozen=True)
class ParserStrategy:
    name: str
    can_parse: Callable[[str], bool]
    parse: Callable[[str], ParsedSessionFields]


@dataclass(frozen=True)
class SectionSpec:
    headers: Tuple[str, ...]
    stops: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LogLayout:
    """Pattern tables describing one log layout."""
    name: str
    markers: Tuple[str, ...]
    date_patterns: Tuple[Pattern[str], ...] = ()
    duration_patterns: Tuple[Pattern[str], ...] = ()
    groups: Tuple[FieldGroup, ...] = ()
    monsters: Optional[SectionSpec] = None
    items: Optional[SectionSpec] = None

    def matches(self, text: str) -> bool:
        return any(marker in text for marker in self.markers)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(alias for group in self.groups for alias in group.labels)


def _pair(name: str, first: Tuple[str, str], second: Tuple[str, str]) -> FieldGroup:
    """Two sibling values, accepted in either order."""
    (label_a, field_a), (label_b, field_b) = first, second
    forward = label(label_a) + value(field_a) + SEP + label(label_b) + value(field_b)
    reverse = label(label_b) + value(field_b) + SEP + label(label_a) + value(field_a)
    return FieldGroup.build(name, (field_a, field_b), (forward, reverse), (label_a, label_b))


def _single(name: str, labels: Sequence[str], field_name: str) -> FieldGroup:
    return FieldGroup.build(
        name, (field_name,), [label(alias) + value(field_name) for alias in labels], labels
    )


def _loot_triple() -> FieldGroup:
    loot = label("Loot") + value("loot_value")
    supplies = label("Supplies") + value("supplies_value")
    balance = label("Balance") + value("balance")
    return FieldGroup.build(
        "loot",
        ("loot_value", "supplies_value", "balance"),
        (SEP.join((loot, supplies, balance)), SEP.join((balance, supplies, loot))),
        ("Loot", "Supplies", "Balance"),
    )


ENGLISH_GROUPS: Tuple[FieldGroup, ...] = (
    _pair("xp_gain", ("Raw XP Gain", "raw_xp_gain"), ("XP Gain", "total_xp_gain")),
    _pair("xp_per_hour", ("Raw XP/h", "raw_xp_per_hour"), ("XP/h", "total_xp_per_hour")),
    _loot_triple(),
    _pair("damage", ("Damage", "damage_dealt"), ("Damage/h", "damage_per_hour")),
    _pair("healing", ("Healing", "healing_done"), ("Healing/h", "healing_per_hour")),
)

PORTUGUESE_GROUPS: Tuple[FieldGroup, ...] = (
    _single("xp_gain", ("Experiência",), "total_xp_gain"),
    _single("raw_xp_gain", ("Experiência Bruta",), "raw_xp_gain"),
    _single("xp_per_hour", ("Experiência/h",), "total_xp_per_hour"),
    _single("loot", ("Valor do Loot", "Loot"), "loot_value"),
    _single("supplies", ("Custo de Suprimentos", "Suprimentos"), "supplies_value"),
    _single("balance", ("Lucro", "Saldo"), "balance"),
    _pair("damage", ("Dano", "damage_dealt"), ("Dano/h", "damage_per_hour")),
    _pair("healing", ("Cura", "healing_done"), ("Cura/h", "healing_per_hour")),
)

STANDARD_LAYOUT = LogLayout(
    name="standard",
    markers=("Session data:",),
    date_patterns=compile_patterns((
        r"From (?P<start>.*?) to (?P<end>.*?)\s+Session:",
        r"Session data:\s*From (?P<start>.*?) to (?P<end>.*?)\s*(?:\n|$)",
    )),
    duration_patterns=compile_patterns((r"Session:\s*(?P<duration>\d+:\d{2}h)",)),
    groups=ENGLISH_GROUPS,
    monsters=SectionSpec(("Killed Monsters:",), ("Looted Items:",)),
    items=SectionSpec(("Looted Items:",), ("Killed Monsters:",)),
)

HUNT_SUMMARY_LAYOUT = LogLayout(
    name="hunt_summary",
    markers=("Hunt Summary:",),
    date_patterns=compile_patterns((r"Hunt period:\s*(?P<start>.*?) - (?P<end>.*?)\s*(?:\n|$)",)),
    duration_patterns=compile_patterns((r"(?:Duration|Session):\s*(?P<duration>\d+:\d{2}h?)",)),
    groups=ENGLISH_GROUPS,
    monsters=SectionSpec(("Killed Monsters:", "Monsters Killed:"), ("Looted Items:", "Items Looted:")),
    items=SectionSpec(("Looted Items:", "Items Looted:"), ("Killed Monsters:", "Monsters Killed:")),
)

PORTUGUESE_LAYOUT = LogLayout(
    name="portuguese_report",
    markers=("Relatório de Caça:", "Resumo da Sessão:"),
    date_patterns=compile_patterns((r"Período:\s*(?P<start>.*?) até (?P<end>.*?)\s*(?:\n|$)",)),
    duration_patterns=compile_patterns((r"(?:Duração|Sessão):\s*(?P<duration>\d+:\d{2}h?)",)),
    groups=PORTUGUESE_GROUPS,
    monsters=SectionSpec(("Monstros Mortos:", "Criaturas Mortas:"), ("Itens Saqueados:", "Itens Coletados:")),
    items=SectionSpec(("Itens Saqueados:", "Itens Coletados:"), ("Monstros Mortos:", "Criaturas Mortas:")),
)

DEFAULT_LAYOUTS: Tuple[LogLayout, ...] = (STANDARD_LAYOUT, HUNT_SUMMARY_LAYOUT, PORTUGUESE_LAYOUT)


def parse_layout(text: str, layout: LogLayout, extractor: FieldExtractor) -> ParsedSessionFields:
    """Extract every field a layout describes. The numeral format is detected here, per call."""
    fmt = extractor.number_normalizer.detect_format(text)
    values: Dict[str, object] = {}
    values.update(extractor.extract_date_range(text, layout.date_patterns))
    values.update(extractor.extract_duration(text, layout.duration_patterns))
    values.update(extractor.extract_groups(text, layout.groups, fmt))
    clamp_negative_metrics(values)

    if layout.monsters is not None:
        body = extract_section(text, layout.monsters.headers, layout.monsters.stops)
        if body is not None:
            values["killed_monsters"] = tuple(
                KilledMonster(name=e.name, count=e.count) for e in parse_entries(body)
            )
    if layout.items is not None:
        body = extract_section(text, layout.items.headers, layout.items.stops)
        if body is not None:
            values["looted_items"] = tuple(
                LootedItem(name=e.name, count=e.count) for e in parse_entries(body)
            )

    logger.debug(f"Layout '{layout.name}' extracted fields: {sorted(values)}")
    return ParsedSessionFields(**values)


def strategy_for_layout(layout: LogLayout, extractor: FieldExtractor) -> ParserStrategy:
    return ParserStrategy(
        name=layout.name,
        can_parse=layout.matches,
        parse=lambda text: parse_layout(text, layout, extractor),
    )


def build_strategies(
    extractor: FieldExtractor, layouts: Sequence[LogLayout] = DEFAULT_LAYOUTS
) -> List[ParserStrategy]:
    """Strategies for the given layouts, in the order they should be tried."""
    return [strategy_for_layout(layout, extractor) for layout in layouts]


def select_strategy(text: str, strategies: Sequence[ParserStrategy]) -> Optional[ParserStrategy]:
    """First strategy that claims the text, or None."""
    for strategy in strategies:
        if strategy.can_parse(text):
            logger.debug(f"Strategy '{strategy.name}' claimed the log")
            return strategy
    logger.debug("No strategy claimed the log")
    return None
