"""Custom exception hierarchy for the application."""
from __future__ import annotations


class HuntLogException(Exception):
    """Base exception for all hunt log errors."""
    pass


class ParsingError(HuntLogException):
    """Raised when the parser is called with input it cannot work on at all."""
    pass


class SessionValidationError(HuntLogException):
    """Raised when an assembled session lacks required fields."""

    def __init__(self, message: str, missing_fields: tuple[str, ...] = ()):
        super().__init__(message)
        self.missing_fields = missing_fields


class ConfigurationError(HuntLogException):
    """Raised when configuration is invalid or missing."""
    pass
