"""Label vocabulary shared by format detection and field extraction.

Every label a layout table or the fallback extractor reads must appear here,
so that the numeral convention is sampled from the same lines the values
are later taken from.
"""
from typing import Dict, Iterable, Tuple

# Field name -> labels, most specific first
FIELD_LABELS: Dict[str, Tuple[str, ...]] = {
    "raw_xp_gain": ("Raw XP Gain", "Raw Experience", "Experiência Bruta"),
    "total_xp_gain": ("XP Gain", "Experience", "Gained XP", "Experiência", "XP"),
    "raw_xp_per_hour": ("Raw XP/h", "Raw XP per hour"),
    "total_xp_per_hour": ("XP/h", "XP per hour", "Experiência/h", "Experiência por hora"),
    "loot_value": ("Loot", "Loot Value", "Valor do Loot"),
    "supplies_value": ("Supplies", "Supplies Cost", "Custo de Suprimentos", "Suprimentos"),
    "balance": ("Balance", "Profit", "Lucro", "Saldo"),
    "damage_dealt": ("Damage", "Damage Dealt", "Dano", "Dano Causado"),
    "damage_per_hour": ("Damage/h", "Damage per hour", "Dano/h"),
    "healing_done": ("Healing", "Healing Done", "Cura"),
    "healing_per_hour": ("Healing/h", "Healing per hour", "Cura/h"),
}


def all_labels(*extra: Iterable[str]) -> Tuple[str, ...]:
    """Every known label plus ``extra``, deduplicated, in first-seen order."""
    seen: Dict[str, None] = {}
    for labels in FIELD_LABELS.values():
        seen.update(dict.fromkeys(labels))
    for labels in extra:
        seen.update(dict.fromkeys(labels))
    return tuple(seen)
