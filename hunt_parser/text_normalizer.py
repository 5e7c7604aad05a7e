"""Whitespace and punctuation normalization for pasted session logs."""

import re
from typing import List

# Characters that show up when logs are copied out of the game client or a browser
_SPACE_VARIANTS = "\u00a0\u2007\u2009\u202f\ufeff"
_MINUS_VARIANTS = "\u2212\u2013\u2014"


class TextNormalizer:
    """Cleans clipboard artifacts without touching the log's content."""

    def __init__(self) -> None:
        self._compile_patterns()

    def _compile_patterns(self) -> None:
        self._space_pattern = re.compile(f"[{_SPACE_VARIANTS}]")
        self._minus_pattern = re.compile(f"[{_MINUS_VARIANTS}](?=\\s*\\d)")
        self._trailing_ws_pattern = re.compile(r"[ \t]+$", re.MULTILINE)
        self._date_comma_pattern = re.compile(r",\s*")
        self._multi_space_pattern = re.compile(r"\s+")

    def normalize(self, text: str) -> str:
        """
        Normalize a whole log.

        Line endings become ``\\n``, exotic spaces become plain spaces, a
        typographic minus before a digit becomes ``-`` and trailing
        whitespace is dropped from every line.
        """
        if not text:
            return ""
        normalized = text.replace("\r\n", "\n").replace("\r", "\n")
        normalized = self._space_pattern.sub(" ", normalized)
        normalized = self._minus_pattern.sub("-", normalized)
        normalized = self._trailing_ws_pattern.sub("", normalized)
        return normalized

    def normalize_date(self, text: str) -> str:
        """Turn ``2024-01-15, 14:30:00`` into ``2024-01-15 14:30:00``."""
        cleaned = self._date_comma_pattern.sub(" ", text.strip())
        return self._multi_space_pattern.sub(" ", cleaned)


def split_nonempty_lines(text: str) -> List[str]:
    """Split text into trimmed lines, dropping blank ones."""
    return [line.strip() for line in text.split("\n") if line.strip()]
