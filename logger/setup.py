"""Loguru sink configuration for the command-line entry point."""
from __future__ import annotations

import sys
from typing import List, Optional

from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{function} - {message}"
FILE_FORMAT = "[{time:YYYY-MM-DD HH:mm:ss}] {level}: {name}:{function} - {message}"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> List[int]:
    """Route loguru output to stderr and, optionally, a log file.

    stdout is left free for the parsed JSON. Any previously added sinks,
    including loguru's default one, are removed first so repeated calls
    do not duplicate output.

    Args:
        level: Minimum level for both sinks
        log_file: Path of a file mirroring the stderr output

    Returns:
        The ids of the sinks that were added
    """
    logger.remove()
    sink_ids = [logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)]
    if log_file:
        sink_ids.append(
            logger.add(log_file, level=level, format=FILE_FORMAT, encoding="utf-8")
        )
    logger.debug(f"Logging configured: level={level} file={log_file}")
    return sink_ids
