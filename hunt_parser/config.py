"""Settings consumed by the session log parser."""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence, Tuple

from .field_extractors import DEFAULT_DATE_FORMATS


@dataclass(frozen=True)
class ParserSettings:
    """
    Parser tuning and extra label aliases.

    ``label_aliases`` maps a field name (``loot_value``) to additional labels
    the fallback extractor should accept for it; ``section_aliases`` maps
    ``killed_monsters`` / ``looted_items`` to additional section headers.
    Aliases extend the built-in English and Portuguese tables, they never
    replace them.
    """
    date_formats: Tuple[str, ...] = DEFAULT_DATE_FORMATS
    label_aliases: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    section_aliases: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    enable_fuzzy_labels: bool = True
    fuzzy_label_cutoff: float = 88.0

    @classmethod
    def from_app_config(cls, app_config) -> "ParserSettings":
        """Build settings from the application's ``AppConfig``."""
        parser_cfg = app_config.parser
        return cls(
            date_formats=tuple(parser_cfg.date_formats),
            label_aliases=_as_alias_map(app_config.label_aliases),
            section_aliases=_as_alias_map(app_config.section_aliases),
            enable_fuzzy_labels=parser_cfg.enable_fuzzy_labels,
            fuzzy_label_cutoff=parser_cfg.fuzzy_label_cutoff,
        )

    def headers_for(self, section: str) -> Tuple[str, ...]:
        return tuple(self.section_aliases.get(section, ()))


def _as_alias_map(raw: Mapping[str, Sequence[str]]) -> Dict[str, Tuple[str, ...]]:
    return {str(key): tuple(str(alias) for alias in aliases) for key, aliases in (raw or {}).items()}
