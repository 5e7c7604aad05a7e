"""Shared fixtures for the parser tests."""
import re

import pytest

from hunt_parser.parser import SessionLogParser

EXAMPLE_LOG = """Session data: From 2025-03-10, 20:17:28 to 2025-03-10, 22:04:43
Session: 01:47h
Raw XP Gain: 1,219,564
XP Gain: 1,585,433
Raw XP/h: 683,555
XP/h: 888,622
Loot: 3,103,224
Supplies: 628,123
Balance: 2,475,101
Damage: 2,906,466
Damage/h: 1,629,061
Healing: 620,170
Healing/h: 347,598
Killed Monsters:
  232x cursed prospector
  41x evil prospector
Looted Items:
  3x gold coin
  1x giant shimmering pearl
"""


def to_dot_grouping(text: str) -> str:
    """Rewrite comma-grouped numerals (1,234) as dot-grouped ones (1.234)."""
    return re.sub(r"(?<=\d),(?=\d)", ".", text)


@pytest.fixture
def example_log():
    return EXAMPLE_LOG


@pytest.fixture
def example_log_dot():
    return to_dot_grouping(EXAMPLE_LOG)


@pytest.fixture
def parser():
    return SessionLogParser()
