"""Configuration loading with layered sources and validation.

Implements a hierarchical configuration system with the following precedence:
1. Default values (lowest priority)
2. JSON configuration files
3. Environment variables
4. Command-line arguments (highest priority)

Configuration is deep-merged across all sources, allowing partial overrides
at any level of the configuration hierarchy.
"""
from __future__ import annotations

import argparse
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from core.exceptions import ConfigurationError
from hunt_parser.field_extractors import DEFAULT_DATE_FORMATS

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR")
KNOWN_SECTIONS = ("killed_monsters", "looted_items")


@dataclass(frozen=True)
class ParserConfig:
    """Parser behaviour.

    Attributes:
        date_formats: strptime formats tried, in order, for session timestamps
        enable_fuzzy_labels: Recover misspelled labels in fallback extraction
        fuzzy_label_cutoff: Minimum similarity score (0-100) for a fuzzy label match
        aggregate_duplicates: Merge repeated monster/item names when assembling a session
    """
    date_formats: Tuple[str, ...] = DEFAULT_DATE_FORMATS
    enable_fuzzy_labels: bool = True
    fuzzy_label_cutoff: float = 88.0
    aggregate_duplicates: bool = False

    def __post_init__(self):
        if not self.date_formats:
            raise ConfigurationError("At least one date format is required")
        if not 0 <= self.fuzzy_label_cutoff <= 100:
            raise ConfigurationError(f"fuzzy_label_cutoff must be within 0-100, got {self.fuzzy_label_cutoff}")


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration.

    Attributes:
        parser: Parser settings
        label_aliases: Extra field labels, field name -> labels (from aliases.json)
        section_aliases: Extra section headers, section -> headers (from aliases.json)
        log_file: Optional file mirroring log output
        debug: Debug mode flag
        log_level: Logging verbosity level
    """
    parser: ParserConfig
    label_aliases: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    section_aliases: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    log_file: Optional[str] = None
    debug: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level: {self.log_level}")
        unknown = set(self.section_aliases) - set(KNOWN_SECTIONS)
        if unknown:
            raise ConfigurationError(f"Unknown sections in section_aliases: {sorted(unknown)}")


class ConfigLoader:
    """Centralized configuration loader with validation and hierarchy."""

    def __init__(self, config_dir: Path = Path("config")):
        self.config_dir = Path(config_dir)

    def load(self, argv: List[str]) -> Tuple[AppConfig, List[str]]:
        """Load configuration with proper hierarchy: defaults → files → env → CLI.

        Args:
            argv: Command-line arguments to parse

        Returns:
            Tuple of (AppConfig instance, unknown CLI arguments)
        """
        config_dict = self._get_defaults()
        self._deep_update(config_dict, self._load_json_configs())
        self._deep_update(config_dict, self._load_env_overrides())
        cli_overrides, unknown_args = self._parse_cli_args(argv)
        self._deep_update(config_dict, cli_overrides)
        return self._build_config(config_dict), unknown_args

    def _get_defaults(self) -> Dict[str, Any]:
        return {
            "parser": {
                "date_formats": list(DEFAULT_DATE_FORMATS),
                "enable_fuzzy_labels": True,
                "fuzzy_label_cutoff": 88.0,
                "aggregate_duplicates": False,
            },
            "label_aliases": {},
            "section_aliases": {},
            "log_file": None,
            "debug": False,
            "log_level": "INFO",
        }

    def _load_json_configs(self) -> Dict[str, Any]:
        """Load ``parser.json`` and ``aliases.json`` when present.

        ``parser.json`` holds top-level keys (``parser``, ``log_level``, ...);
        ``aliases.json`` holds ``labels`` and ``sections`` alias maps.
        """
        loaded: Dict[str, Any] = {}

        parser_json = self._read_json(self.config_dir / "parser.json")
        self._deep_update(loaded, parser_json)

        aliases_json = self._read_json(self.config_dir / "aliases.json")
        if aliases_json:
            loaded["label_aliases"] = aliases_json.get("labels", {})
            loaded["section_aliases"] = aliases_json.get("sections", {})

        return loaded

    @staticmethod
    def _read_json(file_path: Path) -> Dict[str, Any]:
        if not file_path.exists():
            return {}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load {file_path.name}: {e}")
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{file_path.name} must contain a JSON object")
        return data

    def _load_env_overrides(self) -> Dict[str, Any]:
        """Load configuration overrides from environment variables.

        Supported environment variables:
        - HUNTLOG_LOG_LEVEL: Set logging level
        - HUNTLOG_LOG_FILE: Mirror logs to this file
        - HUNTLOG_DEBUG: Enable debug mode
        - HUNTLOG_FUZZY_CUTOFF: Fuzzy label match cutoff (0-100)
        - HUNTLOG_DISABLE_FUZZY: Disable fuzzy label recovery

        Returns:
            Dictionary with environment-based overrides
        """
        overrides: Dict[str, Any] = {}

        log_level = os.getenv("HUNTLOG_LOG_LEVEL")
        if log_level:
            overrides["log_level"] = log_level.upper()

        log_file = os.getenv("HUNTLOG_LOG_FILE")
        if log_file:
            overrides["log_file"] = log_file

        if self._env_bool("HUNTLOG_DEBUG"):
            overrides["debug"] = True

        cutoff = os.getenv("HUNTLOG_FUZZY_CUTOFF")
        if cutoff:
            try:
                overrides.setdefault("parser", {})["fuzzy_label_cutoff"] = float(cutoff)
            except ValueError:
                raise ConfigurationError(f"HUNTLOG_FUZZY_CUTOFF must be a number, got '{cutoff}'")

        if self._env_bool("HUNTLOG_DISABLE_FUZZY"):
            overrides.setdefault("parser", {})["enable_fuzzy_labels"] = False

        return overrides

    def _parse_cli_args(self, argv: List[str]) -> Tuple[Dict[str, Any], List[str]]:
        """Parse the configuration-related CLI arguments.

        Args:
            argv: Command-line arguments

        Returns:
            Tuple of (overrides dictionary, unknown arguments)
        """
        parser = argparse.ArgumentParser(description="Hunt session log parser", add_help=False)
        parser.add_argument("--log-level", choices=LOG_LEVELS, help="Set logging level")
        parser.add_argument("--log-file", help="Mirror log output to this file")
        parser.add_argument("--debug", action="store_true", help="Enable debug mode")
        parser.add_argument("--no-fuzzy", action="store_true", help="Disable fuzzy label recovery")
        parser.add_argument("--aggregate", action="store_true", help="Merge repeated monster/item names")

        known, unknown = parser.parse_known_args(argv)

        overrides: Dict[str, Any] = {}
        if known.log_level:
            overrides["log_level"] = known.log_level
        if known.log_file:
            overrides["log_file"] = known.log_file
        if known.debug:
            overrides["debug"] = True
        if known.no_fuzzy:
            overrides.setdefault("parser", {})["enable_fuzzy_labels"] = False
        if known.aggregate:
            overrides.setdefault("parser", {})["aggregate_duplicates"] = True

        return overrides, unknown

    def _build_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Build and validate the final configuration object.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        parser_dict = dict(config_dict.get("parser", {}))
        if "date_formats" in parser_dict:
            parser_dict["date_formats"] = tuple(parser_dict["date_formats"])
        try:
            parser_config = ParserConfig(**parser_dict)
        except TypeError as e:
            raise ConfigurationError(f"Invalid parser configuration: {e}") from e

        log_level = str(config_dict.get("log_level", "INFO")).upper()
        if config_dict.get("debug") and log_level not in ("TRACE", "DEBUG"):
            log_level = "DEBUG"

        return AppConfig(
            parser=parser_config,
            label_aliases=self._alias_map(config_dict.get("label_aliases", {}), "label_aliases"),
            section_aliases=self._alias_map(config_dict.get("section_aliases", {}), "section_aliases"),
            log_file=config_dict.get("log_file"),
            debug=bool(config_dict.get("debug", False)),
            log_level=log_level,
        )

    @staticmethod
    def _alias_map(raw: Any, name: str) -> Dict[str, Tuple[str, ...]]:
        if not isinstance(raw, dict):
            raise ConfigurationError(f"{name} must be a mapping")
        result: Dict[str, Tuple[str, ...]] = {}
        for key, aliases in raw.items():
            if isinstance(aliases, str):
                aliases = [aliases]
            if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
                raise ConfigurationError(f"{name}.{key} must be a list of strings")
            result[key] = tuple(aliases)
        return result

    @staticmethod
    def _env_bool(name: str, default: bool = False) -> bool:
        """Parse boolean from environment variable ("1", "true", "yes", "y", "on")."""
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in {"1", "true", "yes", "y", "on"}

    @staticmethod
    def _deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Recursively merge ``updates`` into ``target`` without clobbering nested dicts."""
        for key, new_val in updates.items():
            if isinstance(new_val, dict) and isinstance(target.get(key), dict):
                ConfigLoader._deep_update(target[key], new_val)  # type: ignore[index]
            else:
                target[key] = new_val


__all__ = ["AppConfig", "ParserConfig", "ConfigLoader"]
