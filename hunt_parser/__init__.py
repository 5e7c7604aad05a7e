"""
Hunt session log parser.

Turns the plaintext session summary a player pastes from the game's Hunt
Analyzer into structured fields: session range and duration, XP figures,
loot/supplies/balance, damage and healing, killed monsters and looted items.

Main Components:
    SessionLogParser: Facade running strategy dispatch and fallback extraction
    ParsedSessionFields: Immutable extraction result, every field optional
    NumberNormalizer: Detects dot- vs comma-grouped numerals per document
    FieldExtractor: Table-driven date, duration and numeric group extraction
    FallbackExtractor: Per-field extraction for unknown layouts
    LabelMatcher: Fuzzy recovery of misspelled labels (rapidfuzz)

Supported layouts:
    - Hunt Analyzer export (``Session data:``), multi-line or pasted as one line
    - ``Hunt Summary:`` reports
    - Portuguese reports (``Relatório de Caça:`` / ``Resumo da Sessão:``)
"""

from __future__ import annotations

from .config import ParserSettings
from .fallback import FallbackExtractor
from .field_extractors import FieldExtractor, FieldGroup, parse_duration
from .label_matcher import LabelMatcher
from .list_sections import ListEntry, aggregate_entries, extract_section, parse_entries
from .models import KilledMonster, LootedItem, ParsedSessionFields
from .number_normalizer import NumberFormat, NumberNormalizer, detect_format, to_number
from .parser import ParseOutcome, SessionLogParser
from .strategies import ParserStrategy

__all__ = [
    # Main parser interface
    "SessionLogParser",
    "ParseOutcome",
    "ParserSettings",

    # Data model
    "ParsedSessionFields",
    "KilledMonster",
    "LootedItem",

    # Components
    "NumberFormat",
    "NumberNormalizer",
    "detect_format",
    "to_number",
    "FieldExtractor",
    "FieldGroup",
    "parse_duration",
    "ListEntry",
    "extract_section",
    "parse_entries",
    "aggregate_entries",
    "ParserStrategy",
    "FallbackExtractor",
    "LabelMatcher",
]

__version__ = "1.0.0"
