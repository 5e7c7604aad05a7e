"""Numeral conversion for logs written with either decimal convention.

Hunt Analyzer exports follow the locale of the game client, so the same loot
value can arrive as ``3,103,224`` or ``3.103.224`` and a fractional rate as
``1,5`` or ``1.5``. The convention is detected once per document and then
passed explicitly to every conversion made while parsing that document.
"""
from __future__ import annotations

import math
import re
from enum import Enum
from typing import Iterable, Optional, Union

from loguru import logger

from .labels import all_labels

Number = Union[int, float]

NUMERAL_PATTERN = r"[-+]?\d(?:[\d.,]*\d)?"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up: 136.5 -> 137, not 136."""
    return math.floor(value + 0.5)


class NumberFormat(Enum):
    """Numeral convention of a document."""
    DOT_THOUSANDS = "dot_thousands"      # 1.234.567,5
    COMMA_THOUSANDS = "comma_thousands"  # 1,234,567.5
    UNKNOWN = "unknown"


def classify_numeral(numeral: str) -> Optional[NumberFormat]:
    """
    Decide the convention a single sampled numeral implies.

    Returns None when the numeral has no separator and so says nothing.
    """
    has_dot = "." in numeral
    has_comma = "," in numeral
    if has_dot and has_comma:
        if numeral.rfind(",") > numeral.rfind("."):
            return NumberFormat.DOT_THOUSANDS
        return NumberFormat.COMMA_THOUSANDS
    if has_comma:
        return NumberFormat.COMMA_THOUSANDS
    if has_dot:
        # 1.234.567 can only be grouping; a lone 12.345 is read as a decimal
        if numeral.count(".") >= 2:
            return NumberFormat.DOT_THOUSANDS
        return NumberFormat.COMMA_THOUSANDS
    return None


def _classify_token(token: str) -> NumberFormat:
    """Per-token guess used when the document convention is unknown."""
    has_dot = "." in token
    has_comma = "," in token
    if has_dot and has_comma:
        if token.rfind(",") > token.rfind("."):
            return NumberFormat.DOT_THOUSANDS
        return NumberFormat.COMMA_THOUSANDS
    if has_comma:
        if re.search(r",\d{1,2}$", token):
            return NumberFormat.DOT_THOUSANDS
        return NumberFormat.COMMA_THOUSANDS
    if has_dot and token.count(".") >= 2:
        return NumberFormat.DOT_THOUSANDS
    return NumberFormat.COMMA_THOUSANDS if has_dot else NumberFormat.UNKNOWN


class NumberNormalizer:
    """Detects a document's numeral convention and converts numeral tokens."""

    def __init__(self, sample_labels: Optional[Iterable[str]] = None) -> None:
        """
        Args:
            sample_labels: Labels sampled in addition to every built-in field label
        """
        self.sample_labels = all_labels(sample_labels or ())
        self._compile_patterns()

    def _compile_patterns(self) -> None:
        # Longest first so "Raw XP Gain" is not consumed as "XP Gain"
        alternation = "|".join(
            re.escape(label) for label in sorted(self.sample_labels, key=len, reverse=True)
        )
        self._sample_pattern = re.compile(
            rf"(?:{alternation})\s*:\s*({NUMERAL_PATTERN})",
            re.IGNORECASE,
        )
        self._whitespace_pattern = re.compile(r"\s+")
        self._numeric_pattern = re.compile(r"-?\d+(?:\.\d+)?")

    def detect_format(self, text: str) -> NumberFormat:
        """
        Detect which numeral convention a document uses.

        Labelled values are sampled in document order; the first one that
        carries a separator decides. Documents without any separated labelled
        numeral are UNKNOWN.
        """
        if not text:
            return NumberFormat.UNKNOWN
        for match in self._sample_pattern.finditer(text):
            detected = classify_numeral(match.group(1))
            if detected is not None:
                logger.debug(f"Detected number format {detected.value} from '{match.group(0)}'")
                return detected
        logger.debug("No separated labelled numeral found; number format unknown")
        return NumberFormat.UNKNOWN

    def to_number(self, token: Optional[str], fmt: NumberFormat = NumberFormat.UNKNOWN) -> Number:
        """
        Convert a numeral token under the given convention.

        Malformed tokens resolve to 0 with a warning; this never raises.
        """
        if token is None:
            logger.warning("Missing numeral token; defaulting to 0")
            return 0
        cleaned = self._whitespace_pattern.sub("", str(token)).replace("\u2212", "-")
        if cleaned.startswith("+"):
            cleaned = cleaned[1:]

        effective = fmt if fmt is not NumberFormat.UNKNOWN else _classify_token(cleaned)
        if effective is NumberFormat.DOT_THOUSANDS:
            cleaned = cleaned.replace(".", "").replace(",", ".")
        elif effective is NumberFormat.COMMA_THOUSANDS:
            cleaned = cleaned.replace(",", "")

        if not self._numeric_pattern.fullmatch(cleaned):
            logger.warning(f"Malformed numeral '{token}' ({effective.value}); defaulting to 0")
            return 0

        if "." not in cleaned:
            return int(cleaned)
        value = float(cleaned)
        if not math.isfinite(value):
            logger.warning(f"Non-finite numeral '{token}'; defaulting to 0")
            return 0
        return int(value) if value.is_integer() else value


_default_normalizer: Optional[NumberNormalizer] = None


def _get_default() -> NumberNormalizer:
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = NumberNormalizer()
    return _default_normalizer


def detect_format(text: str) -> NumberFormat:
    """Module-level shortcut sampling the built-in field labels."""
    return _get_default().detect_format(text)


def to_number(token: Optional[str], fmt: NumberFormat = NumberFormat.UNKNOWN) -> Number:
    """Module-level shortcut for conversion under an explicit format."""
    return _get_default().to_number(token, fmt)
