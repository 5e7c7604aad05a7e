"""Tests for fallback extraction of unrecognised logs."""
from datetime import datetime

import pytest

from hunt_parser.config import ParserSettings
from hunt_parser.fallback import FallbackExtractor
from hunt_parser.field_extractors import FieldExtractor
from hunt_parser.models import KilledMonster, LootedItem

UNKNOWN_LAYOUT_LOG = """My hunt at the dragon lair
Start: 2024-01-15 14:00:00 End: 2024-01-15 15:30:00
XP Gain: 1.500.000
Loot: 300.000
Suplies: 120.000
Balance: 180.000
Killed Monsters: 10x dragon, 2x dragon lord
"""


@pytest.fixture
def fallback():
    return FallbackExtractor(FieldExtractor())


class TestFallbackExtraction:
    """Tests for per-field extraction."""

    def test_unknown_layout(self, fallback):
        # Act
        fields = fallback.extract(UNKNOWN_LAYOUT_LOG)

        # Assert
        assert fields.start_datetime == datetime(2024, 1, 15, 14, 0)
        assert fields.end_datetime == datetime(2024, 1, 15, 15, 30)
        assert fields.total_xp_gain == 1500000
        assert fields.loot_value == 300000
        assert fields.balance == 180000
        assert fields.killed_monsters == (KilledMonster("dragon", 10), KilledMonster("dragon lord", 2))

    def test_lists_always_present(self, fallback):
        # Act
        fields = fallback.extract("Loot: 100")

        # Assert
        assert fields.killed_monsters == ()
        assert fields.looted_items == ()
        assert fields.loot_value == 100

    def test_nothing_found(self, fallback):
        # Act
        fields = fallback.extract("no numbers here")

        # Assert
        assert fields.is_empty
        assert fields.present_fields == ("killed_monsters", "looted_items")

    def test_portuguese_labels(self, fallback):
        # Act
        fields = fallback.extract("Lucro: -1.250.000\nDano: 3.000.000\nItens Saqueados:\n 2x gold coin")

        # Assert
        assert fields.balance == -1250000
        assert fields.damage_dealt == 3000000
        assert fields.looted_items == (LootedItem("gold coin", 2),)

    def test_negative_xp_becomes_zero(self, fallback):
        # Act
        fields = fallback.extract("XP Gain: -100\nBalance: -50")

        # Assert
        assert fields.total_xp_gain == 0
        assert fields.balance == -50

    def test_failing_field_is_skipped_alone(self, monkeypatch):
        # Arrange
        fallback = FallbackExtractor(FieldExtractor(), ParserSettings(enable_fuzzy_labels=False))
        original = fallback.extract_field

        def flaky(text, field_name, fmt):
            if field_name == "loot_value":
                raise RuntimeError("boom")
            return original(text, field_name, fmt)

        monkeypatch.setattr(fallback, "extract_field", flaky)

        # Act
        fields = fallback.extract("Loot: 100\nBalance: 40")

        # Assert
        assert fields.loot_value is None
        assert fields.balance == 40


class TestDerivation:
    """Tests for duration and XP/h derivation."""

    def test_duration_and_rate_derived(self, fallback):
        # Act
        fields = fallback.extract(UNKNOWN_LAYOUT_LOG)

        # Assert
        assert fields.duration_minutes == 90
        assert fields.total_xp_per_hour == 1000000

    def test_explicit_duration_kept(self, fallback):
        # Act
        fields = fallback.extract(
            "Start: 2024-01-15 14:00:00 End: 2024-01-15 15:30:00\nDuration: 1:00h\nXP Gain: 600"
        )

        # Assert
        assert fields.duration_minutes == 60
        assert fields.total_xp_per_hour == 600

    def test_explicit_rate_kept(self, fallback):
        # Act
        fields = fallback.extract("Duration: 2:00h\nXP Gain: 600\nXP/h: 999")

        # Assert
        assert fields.total_xp_per_hour == 999

    def test_zero_duration_no_rate(self, fallback):
        # Act
        fields = fallback.extract("Duration: 0:00h\nXP Gain: 600")

        # Assert
        assert fields.duration_minutes == 0
        assert fields.total_xp_per_hour is None

    def test_half_minute_rounds_up(self, fallback):
        # Act
        fields = fallback.extract("Start: 2025-03-10 14:00:00 End: 2025-03-10 16:16:30")

        # Assert
        assert fields.duration_minutes == 137

    def test_half_rate_rounds_up(self, fallback):
        # Act
        fields = fallback.extract("Duration: 2:00h\nXP Gain: 5")

        # Assert
        assert fields.total_xp_per_hour == 3

    def test_end_before_start_not_derived(self, fallback):
        # Act
        fields = fallback.extract("Start: 2024-01-15 15:00:00 End: 2024-01-15 14:00:00")

        # Assert
        assert fields.start_datetime is not None
        assert fields.duration_minutes is None


class TestFuzzyLabels:
    """Tests for misspelled label recovery."""

    def test_misspelled_label_recovered(self, fallback):
        # Act
        fields = fallback.extract(UNKNOWN_LAYOUT_LOG)

        # Assert
        assert fields.supplies_value == 120000

    def test_disabled_by_settings(self):
        # Arrange
        fallback = FallbackExtractor(FieldExtractor(), ParserSettings(enable_fuzzy_labels=False))

        # Act
        fields = fallback.extract(UNKNOWN_LAYOUT_LOG)

        # Assert
        assert fields.supplies_value is None


class TestConfiguredAliases:
    """Tests for labels and headers added through settings."""

    def test_extra_label_alias(self):
        # Arrange
        settings = ParserSettings(label_aliases={"loot_value": ("Botín",)})
        fallback = FallbackExtractor(FieldExtractor(), settings)

        # Act
        fields = fallback.extract("Botín: 5.000.000")

        # Assert
        assert fields.loot_value == 5000000

    def test_unknown_field_alias_ignored(self):
        # Arrange
        settings = ParserSettings(label_aliases={"gold_per_hour": ("Gold/h",)})

        # Act
        fallback = FallbackExtractor(FieldExtractor(), settings)

        # Assert
        assert "gold_per_hour" not in fallback.field_patterns

    def test_extra_section_header(self):
        # Arrange
        settings = ParserSettings(section_aliases={"killed_monsters": ("Monstruos Eliminados:",)})
        fallback = FallbackExtractor(FieldExtractor(), settings)

        # Act
        fields = fallback.extract("Monstruos Eliminados:\n 5x dragon")

        # Assert
        assert fields.killed_monsters == (KilledMonster("dragon", 5),)
