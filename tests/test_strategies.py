"""Tests for layout strategies and strategy selection."""
from datetime import datetime

import pytest

from hunt_parser.field_extractors import FieldExtractor
from hunt_parser.models import KilledMonster, LootedItem
from hunt_parser.strategies import (
    DEFAULT_LAYOUTS,
    HUNT_SUMMARY_LAYOUT,
    PORTUGUESE_LAYOUT,
    STANDARD_LAYOUT,
    ParserStrategy,
    build_strategies,
    parse_layout,
    select_strategy,
)

HUNT_SUMMARY_LOG = """Hunt Summary:
Hunt period: 2024-05-01 18:00:00 - 2024-05-01 19:30:00
Duration: 1:30h
Raw XP Gain: 900,000
XP Gain: 1,170,000
Raw XP/h: 600,000
XP/h: 780,000
Balance: -12,500
Supplies: 212,500
Loot: 200,000
Damage/h: 1,000,000
Damage: 1,500,000
Monsters Killed:
  150x hydra
Items Looted:
  2x hydra egg
"""

PORTUGUESE_LOG = """Relatório de Caça:
Período: 10/03/2025 20:17 até 10/03/2025 22:04
Duração: 1:47h
Experiência Bruta: 1.219.564
Experiência: 1.585.433
Experiência/h: 888.622
Valor do Loot: 3.103.224
Custo de Suprimentos: 628.123
Lucro: 2.475.101
Dano: 2.906.466
Dano/h: 1.629.061
Cura: 620.170
Cura/h: 347.598
Monstros Mortos:
  232x cursed prospector
Itens Saqueados:
  3x gold coin
"""


@pytest.fixture
def extractor():
    return FieldExtractor()


class TestStandardLayout:
    """Tests for the Hunt Analyzer export layout."""

    def test_full_log(self, extractor, example_log):
        # Act
        fields = parse_layout(example_log, STANDARD_LAYOUT, extractor)

        # Assert
        assert fields.start_datetime == datetime(2025, 3, 10, 20, 17, 28)
        assert fields.end_datetime == datetime(2025, 3, 10, 22, 4, 43)
        assert fields.duration_minutes == 107
        assert fields.raw_xp_gain == 1219564
        assert fields.total_xp_gain == 1585433
        assert fields.raw_xp_per_hour == 683555
        assert fields.total_xp_per_hour == 888622
        assert fields.loot_value == 3103224
        assert fields.supplies_value == 628123
        assert fields.balance == 2475101
        assert fields.damage_dealt == 2906466
        assert fields.damage_per_hour == 1629061
        assert fields.healing_done == 620170
        assert fields.healing_per_hour == 347598
        assert fields.killed_monsters == (
            KilledMonster("cursed prospector", 232),
            KilledMonster("evil prospector", 41),
        )
        assert fields.looted_items == (
            LootedItem("gold coin", 3),
            LootedItem("giant shimmering pearl", 1),
        )

    def test_missing_group_left_absent(self, extractor):
        # Arrange
        text = "Session data: From 2025-03-10, 20:17:28 to 2025-03-10, 22:04:43\nSession: 01:47h\nLoot: 5\n"

        # Act
        fields = parse_layout(text, STANDARD_LAYOUT, extractor)

        # Assert
        assert fields.damage_dealt is None
        assert fields.loot_value is None  # loot, supplies and balance are read together
        assert fields.killed_monsters is None
        assert fields.looted_items is None


class TestOtherLayouts:
    """Tests for the hunt summary and Portuguese layouts."""

    def test_hunt_summary_reverse_order_and_negative_balance(self, extractor):
        # Act
        fields = parse_layout(HUNT_SUMMARY_LOG, HUNT_SUMMARY_LAYOUT, extractor)

        # Assert
        assert fields.start_datetime == datetime(2024, 5, 1, 18, 0)
        assert fields.duration_minutes == 90
        assert fields.balance == -12500
        assert fields.supplies_value == 212500
        assert fields.loot_value == 200000
        assert fields.damage_dealt == 1500000
        assert fields.damage_per_hour == 1000000
        assert fields.killed_monsters == (KilledMonster("hydra", 150),)
        assert fields.looted_items == (LootedItem("hydra egg", 2),)

    def test_portuguese_report(self, extractor):
        # Act
        fields = parse_layout(PORTUGUESE_LOG, PORTUGUESE_LAYOUT, extractor)

        # Assert
        assert fields.start_datetime == datetime(2025, 3, 10, 20, 17)
        assert fields.end_datetime == datetime(2025, 3, 10, 22, 4)
        assert fields.duration_minutes == 107
        assert fields.raw_xp_gain == 1219564
        assert fields.total_xp_gain == 1585433
        assert fields.total_xp_per_hour == 888622
        assert fields.loot_value == 3103224
        assert fields.supplies_value == 628123
        assert fields.balance == 2475101
        assert fields.healing_per_hour == 347598
        assert fields.killed_monsters == (KilledMonster("cursed prospector", 232),)
        assert fields.looted_items == (LootedItem("gold coin", 3),)


class TestStrategySelection:
    """Tests for ordered first-match dispatch."""

    def test_default_order(self, extractor):
        # Act
        strategies = build_strategies(extractor)

        # Assert
        assert [s.name for s in strategies] == ["standard", "hunt_summary", "portuguese_report"]

    def test_selects_by_marker(self, extractor, example_log):
        # Arrange
        strategies = build_strategies(extractor, DEFAULT_LAYOUTS)

        # Assert
        assert select_strategy(example_log, strategies).name == "standard"
        assert select_strategy(HUNT_SUMMARY_LOG, strategies).name == "hunt_summary"
        assert select_strategy(PORTUGUESE_LOG, strategies).name == "portuguese_report"

    def test_unknown_text_unclaimed(self, extractor):
        # Arrange
        strategies = build_strategies(extractor)

        # Assert
        assert select_strategy("Loot: 100\nXP Gain: 5", strategies) is None

    def test_first_match_wins(self):
        # Arrange
        first = ParserStrategy("first", lambda text: True, lambda text: None)
        second = ParserStrategy("second", lambda text: True, lambda text: None)

        # Act
        chosen = select_strategy("anything", [first, second])

        # Assert
        assert chosen is first
