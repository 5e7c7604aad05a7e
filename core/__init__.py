"""Core infrastructure shared by the parser, configuration and use cases."""
from __future__ import annotations

from .exceptions import (
    ConfigurationError,
    HuntLogException,
    ParsingError,
    SessionValidationError,
)
from .result import Result, Success, Failure

__all__ = [
    "HuntLogException",
    "ParsingError",
    "SessionValidationError",
    "ConfigurationError",
    "Result",
    "Success",
    "Failure",
]
