"""Tests for numeral convention detection and conversion."""
import pytest

from hunt_parser.number_normalizer import (
    NumberFormat,
    NumberNormalizer,
    classify_numeral,
    detect_format,
    round_half_up,
    to_number,
)


class TestDetectFormat:
    """Tests for per-document format detection."""

    def test_comma_grouping(self):
        assert detect_format("Raw XP Gain: 1,219,564") is NumberFormat.COMMA_THOUSANDS

    def test_dot_grouping(self):
        assert detect_format("Raw XP Gain: 1.219.564") is NumberFormat.DOT_THOUSANDS

    def test_later_separator_is_decimal(self):
        assert detect_format("Loot: 1.234,5") is NumberFormat.DOT_THOUSANDS
        assert detect_format("Loot: 1,234.5") is NumberFormat.COMMA_THOUSANDS

    def test_single_dot_read_as_decimal(self):
        # 12.345 is ambiguous; a lone dot is taken as the decimal point
        assert detect_format("Loot: 12.345") is NumberFormat.COMMA_THOUSANDS

    def test_unseparated_sample_is_skipped(self):
        # Arrange
        text = "XP Gain: 500\nLoot: 3.103.224"

        # Act
        fmt = detect_format(text)

        # Assert
        assert fmt is NumberFormat.DOT_THOUSANDS

    def test_no_separators_is_unknown(self):
        assert detect_format("XP Gain: 500\nLoot: 20") is NumberFormat.UNKNOWN

    def test_no_labelled_numerals_is_unknown(self):
        assert detect_format("hello world 1,000") is NumberFormat.UNKNOWN
        assert detect_format("") is NumberFormat.UNKNOWN

    def test_raw_label_sampled_whole(self):
        # "Raw XP Gain" must not be read as "XP Gain" with a leftover prefix
        assert detect_format("Raw XP Gain: 1.000.000") is NumberFormat.DOT_THOUSANDS

    def test_portuguese_label(self):
        assert detect_format("Experiência: 2.500.000") is NumberFormat.DOT_THOUSANDS

    @pytest.mark.parametrize("text", [
        "Suprimentos: 2.345.678\nLucro: 1.500",
        "Loot Value: 1.234.567\nBalance: 1.234",
        "Experiência Bruta: 1.000.000\nDano/h: 12.5",
    ])
    def test_every_field_label_is_sampled(self, text):
        # The first labelled value decides, whatever label it sits under
        assert detect_format(text) is NumberFormat.DOT_THOUSANDS

    def test_extra_sample_labels(self):
        # Arrange
        normalizer = NumberNormalizer(sample_labels=["Botín"])

        # Act
        fmt = normalizer.detect_format("Botín: 1.500.000")

        # Assert
        assert fmt is NumberFormat.DOT_THOUSANDS


class TestClassifyNumeral:
    """Tests for single numeral classification."""

    @pytest.mark.parametrize("numeral,expected", [
        ("1,234", NumberFormat.COMMA_THOUSANDS),
        ("1.234.567", NumberFormat.DOT_THOUSANDS),
        ("1.5", NumberFormat.COMMA_THOUSANDS),
        ("1.234,56", NumberFormat.DOT_THOUSANDS),
        ("1234", None),
    ])
    def test_classification(self, numeral, expected):
        assert classify_numeral(numeral) is expected


class TestToNumber:
    """Tests for numeral conversion."""

    def test_comma_thousands(self):
        assert to_number("1,219,564", NumberFormat.COMMA_THOUSANDS) == 1219564

    def test_dot_thousands(self):
        assert to_number("1.219.564", NumberFormat.DOT_THOUSANDS) == 1219564

    def test_decimal_under_each_format(self):
        assert to_number("1,5", NumberFormat.DOT_THOUSANDS) == 1.5
        assert to_number("1.5", NumberFormat.COMMA_THOUSANDS) == 1.5

    def test_integers_stay_int(self):
        # Act
        result = to_number("2,000", NumberFormat.COMMA_THOUSANDS)

        # Assert
        assert result == 2000
        assert isinstance(result, int)

    def test_negative_and_plus_sign(self):
        assert to_number("-2,475,101", NumberFormat.COMMA_THOUSANDS) == -2475101
        assert to_number("+1,000", NumberFormat.COMMA_THOUSANDS) == 1000

    def test_unicode_minus_and_spaces(self):
        assert to_number("−1 234", NumberFormat.UNKNOWN) == -1234

    @pytest.mark.parametrize("token,expected", [
        ("1,234,567", 1234567),
        ("1,5", 1.5),
        ("1.234.567", 1234567),
        ("1.5", 1.5),
        ("1.234,5", 1234.5),
        ("1,234.5", 1234.5),
        ("42", 42),
    ])
    def test_unknown_format_per_token(self, token, expected):
        assert to_number(token, NumberFormat.UNKNOWN) == expected

    @pytest.mark.parametrize("token", ["abc", "", "1,2,3.4.5", None])
    def test_malformed_tokens_resolve_to_zero(self, token):
        assert to_number(token, NumberFormat.COMMA_THOUSANDS) == 0

    def test_mixed_token_under_known_format_is_zero(self):
        # Comma grouping stripped leaves two dots
        assert to_number("1.234.567", NumberFormat.COMMA_THOUSANDS) == 0


class TestRoundHalfUp:
    """Tests for half-up rounding of derived values."""

    @pytest.mark.parametrize("value,expected", [
        (136.5, 137),
        (135.5, 136),
        (2.5, 3),
        (2.49, 2),
        (90.0, 90),
    ])
    def test_halves_round_up(self, value, expected):
        assert round_half_up(value) == expected
