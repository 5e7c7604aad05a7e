"""
Fuzzy recovery of misspelled field labels.

Hand-edited or retyped logs sometimes carry labels like ``Suplies:`` or
``Healling/h:`` that no pattern table lists. For fields the fallback
extractor could not find, every ``<label>: <numeral>`` line is scored
against all known labels with rapidfuzz and assigned to the field of its
best match, provided that field is still missing.
"""
import re
from typing import Collection, Dict, List, Mapping, Sequence, Tuple

from loguru import logger
from rapidfuzz import fuzz, process, utils

from core.error_handler import handle_exceptions

from .number_normalizer import NUMERAL_PATTERN, Number, NumberFormat, NumberNormalizer


class LabelMatcher:
    """Assigns loosely labelled numeric lines to known fields."""

    def __init__(self, field_labels: Mapping[str, Sequence[str]], cutoff: float = 88.0) -> None:
        """
        Args:
            field_labels: Field name to the labels that identify it
            cutoff: Minimum ``fuzz.ratio`` score (0-100) for a label to count
        """
        self.cutoff = cutoff
        self._choices: List[str] = []
        self._fields: List[str] = []
        for field_name, labels in field_labels.items():
            for label in labels:
                self._choices.append(label)
                self._fields.append(field_name)
        self._line_pattern = re.compile(
            rf"^[ \t]*(?P<label>[^\W\d][^:\n]{{0,40}}?)[ \t]*:[ \t]*(?P<value>{NUMERAL_PATTERN})[ \t]*$",
            re.MULTILINE,
        )

    def match_label(self, label: str) -> Tuple[str, float]:
        """Return ``(field, score)`` for the best known label, or ``("", 0.0)``."""
        best = process.extractOne(
            label,
            self._choices,
            scorer=fuzz.ratio,
            processor=utils.default_process,
            score_cutoff=self.cutoff,
        )
        if best is None:
            return "", 0.0
        _, score, index = best
        return self._fields[index], score

    @handle_exceptions(default_return={}, message="Fuzzy label recovery failed", level="WARNING")
    def recover(
        self,
        text: str,
        missing_fields: Collection[str],
        number_normalizer: NumberNormalizer,
        fmt: NumberFormat,
    ) -> Dict[str, Number]:
        """Values for ``missing_fields`` found under near-miss labels, first line wins."""
        recovered: Dict[str, Number] = {}
        if not missing_fields or not self._choices:
            return recovered
        for match in self._line_pattern.finditer(text):
            field_name, score = self.match_label(match.group("label").strip())
            if not field_name or field_name not in missing_fields or field_name in recovered:
                continue
            recovered[field_name] = number_normalizer.to_number(match.group("value"), fmt)
            logger.debug(f"Recovered {field_name} from label '{match.group('label').strip()}' (score {score:.0f})")
        return recovered
