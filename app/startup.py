"""Application startup and configuration.

Command-line entry point that orchestrates configuration parsing, logging
setup, parser construction and the import use case.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from loguru import logger

from app.use_cases import ImportSessionUseCase, PreviewSessionUseCase
from config.service import ConfigurationService, ConfigurationServiceFactory
from core.exceptions import ConfigurationError, HuntLogException
from hunt_parser.parser import SessionLogParser
from logger.setup import configure_logging

EXIT_OK = 0
EXIT_INVALID_SESSION = 1
EXIT_UNREADABLE_INPUT = 2


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="main.py",
        description="Parse a pasted hunt session log and print it as JSON.",
    )
    parser.add_argument("path", nargs="?", help="Session log file (reads stdin when omitted)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--fallback-only", action="store_true", help="Skip layout strategies")
    mode.add_argument("--strict", action="store_true", help="Reject logs no strategy recognises")
    mode.add_argument("--preview", action="store_true", help="Show extracted fields without validating")
    return parser


def _read_input(path: Optional[str], stdin: TextIO) -> str:
    if path is None:
        return stdin.read()
    return Path(path).read_text(encoding="utf-8")


def build_parser(config_service: ConfigurationService) -> SessionLogParser:
    """Create a ``SessionLogParser`` from the loaded configuration."""
    return SessionLogParser(settings=config_service.parser_settings())


def run_application(
    argv: Optional[Sequence[str]] = None,
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
) -> int:
    """Main entry point.

    Orchestrates the startup sequence:
    1. Parse configuration from all sources (defaults, files, env, CLI)
    2. Configure loguru sinks
    3. Read the log from a file or stdin
    4. Run the import (or preview) use case and print JSON

    Returns:
        Process exit code: 0 on success, 1 when the session is rejected,
        2 when the input or configuration cannot be read
    """
    argv = list(sys.argv[1:] if argv is None else argv)

    try:
        config_service, unknown_args = ConfigurationServiceFactory.create_from_args(argv)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_UNREADABLE_INPUT

    configure_logging(config_service.log_level, config_service.log_file)
    logger.debug(f"Configuration: {config_service.to_dict()}")

    args = _build_arg_parser().parse_args(unknown_args)

    try:
        text = _read_input(args.path, stdin)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read session log: {e}")
        return EXIT_UNREADABLE_INPUT

    parser = build_parser(config_service)

    if args.preview:
        preview = PreviewSessionUseCase(parser).execute(text)
        if preview.is_failure():
            return EXIT_UNREADABLE_INPUT
        json.dump(preview.unwrap(), stdout, indent=2, ensure_ascii=False)
        stdout.write("\n")
        return EXIT_OK

    use_case = ImportSessionUseCase(parser, aggregate_duplicates=config_service.aggregate_duplicates)
    result = use_case.execute(text, fallback_only=args.fallback_only, strict=args.strict)
    if result.is_failure():
        error: HuntLogException = result.error
        json.dump({"error": str(error)}, stdout, ensure_ascii=False)
        stdout.write("\n")
        return EXIT_INVALID_SESSION

    json.dump(result.unwrap().to_dict(), stdout, indent=2, ensure_ascii=False)
    stdout.write("\n")
    logger.debug(f"Parser stats: {parser.get_parsing_stats()}")
    return EXIT_OK
