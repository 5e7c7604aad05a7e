"""Configuration service facade for simplified configuration access.

Gives callers flat properties instead of reaching through nested
configuration objects, and builds the parser's settings from them.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from config.config import AppConfig, ConfigLoader
from hunt_parser.config import ParserSettings


class ConfigurationService:
    """Facade for application configuration.

    Example:
        config_service = ConfigurationService(config)
        cutoff = config_service.fuzzy_label_cutoff  # Instead of config.parser.fuzzy_label_cutoff
    """

    def __init__(self, config: AppConfig):
        self._config = config

    # Parser configuration shortcuts
    @property
    def date_formats(self) -> tuple[str, ...]:
        return self._config.parser.date_formats

    @property
    def fuzzy_labels_enabled(self) -> bool:
        return self._config.parser.enable_fuzzy_labels

    @property
    def fuzzy_label_cutoff(self) -> float:
        return self._config.parser.fuzzy_label_cutoff

    @property
    def aggregate_duplicates(self) -> bool:
        return self._config.parser.aggregate_duplicates

    # General configuration
    @property
    def debug(self) -> bool:
        return self._config.debug

    @property
    def log_level(self) -> str:
        return self._config.log_level

    @property
    def log_file(self) -> Optional[str]:
        return self._config.log_file

    def parser_settings(self) -> ParserSettings:
        """Settings for constructing a ``SessionLogParser``."""
        return ParserSettings.from_app_config(self._config)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for logging."""
        return {
            "parser": {
                "date_formats": list(self.date_formats),
                "enable_fuzzy_labels": self.fuzzy_labels_enabled,
                "fuzzy_label_cutoff": self.fuzzy_label_cutoff,
                "aggregate_duplicates": self.aggregate_duplicates,
            },
            "label_aliases": {k: list(v) for k, v in self._config.label_aliases.items()},
            "section_aliases": {k: list(v) for k, v in self._config.section_aliases.items()},
            "log_file": self.log_file,
            "debug": self.debug,
            "log_level": self.log_level,
        }


class ConfigurationServiceFactory:
    """Factory for creating ConfigurationService instances."""

    @staticmethod
    def create_from_args(
        args: list[str], config_dir: Optional[Path] = None
    ) -> tuple[ConfigurationService, list[str]]:
        """Create configuration service from command-line arguments.

        Returns:
            Tuple of (ConfigurationService, unknown_args)
        """
        loader = ConfigLoader(config_dir) if config_dir is not None else ConfigLoader()
        config, unknown_args = loader.load(args)
        return ConfigurationService(config), unknown_args
