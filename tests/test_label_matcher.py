"""Tests for fuzzy label recovery."""
import pytest

from hunt_parser.labels import FIELD_LABELS
from hunt_parser.label_matcher import LabelMatcher
from hunt_parser.number_normalizer import NumberFormat, NumberNormalizer


@pytest.fixture
def matcher():
    return LabelMatcher(FIELD_LABELS, cutoff=88.0)


class TestMatchLabel:
    """Tests for single label scoring."""

    @pytest.mark.parametrize("label,expected_field", [
        ("Suplies", "supplies_value"),
        ("Healling/h", "healing_per_hour"),
        ("balance", "balance"),
    ])
    def test_near_misses(self, matcher, label, expected_field):
        # Act
        field_name, score = matcher.match_label(label)

        # Assert
        assert field_name == expected_field
        assert score >= 88.0

    def test_unrelated_label(self, matcher):
        assert matcher.match_label("Weather") == ("", 0.0)


class TestRecover:
    """Tests for recovering values from misspelled lines."""

    def test_only_missing_fields_filled(self, matcher):
        # Arrange
        text = "Suplies: 628,123\nLot: 3,103,224"

        # Act
        recovered = matcher.recover(
            text, ["supplies_value"], NumberNormalizer(), NumberFormat.COMMA_THOUSANDS
        )

        # Assert
        assert recovered == {"supplies_value": 628123}

    def test_first_line_wins(self, matcher):
        # Arrange
        text = "Suplies: 10\nSuppliess: 20"

        # Act
        recovered = matcher.recover(text, ["supplies_value"], NumberNormalizer(), NumberFormat.UNKNOWN)

        # Assert
        assert recovered == {"supplies_value": 10}

    def test_nothing_missing(self, matcher):
        assert matcher.recover("Suplies: 10", [], NumberNormalizer(), NumberFormat.UNKNOWN) == {}

    def test_strict_cutoff_rejects_misspelling(self):
        # Arrange
        matcher = LabelMatcher(FIELD_LABELS, cutoff=100.0)

        # Act
        recovered = matcher.recover("Suplies: 10", ["supplies_value"], NumberNormalizer(), NumberFormat.UNKNOWN)

        # Assert
        assert recovered == {}

    def test_failure_is_contained(self, matcher):
        # Arrange
        class BrokenNormalizer:
            def to_number(self, token, fmt):
                raise RuntimeError("broken")

        # Act
        recovered = matcher.recover("Suplies: 10", ["supplies_value"], BrokenNormalizer(), NumberFormat.UNKNOWN)

        # Assert
        assert recovered == {}
