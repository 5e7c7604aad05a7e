"""Utility decorators and error handlers for consistent error handling."""
from __future__ import annotations

import functools
import time
from typing import Any, Callable, Optional, TypeVar

from loguru import logger

T = TypeVar('T')


def handle_exceptions(
    logger_instance=logger,
    default_return: Optional[Any] = None,
    reraise: bool = False,
    message: Optional[str] = None,
    level: str = "ERROR",
):
    """Decorator to log exceptions and return a default instead.

    Args:
        logger_instance: Logger to use for error logging
        default_return: Value to return on exception
        reraise: Whether to re-raise the exception after logging
        message: Custom error message prefix
        level: Log level used for the report
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                error_msg = message or f"Error in {func.__name__}"
                logger_instance.opt(exception=e).log(level, f"{error_msg}: {e}")
                if reraise:
                    raise
                return default_return
        return wrapper
    return decorator


def log_execution_time(logger_instance=logger, level: str = "DEBUG"):
    """Decorator to log function execution time.

    Args:
        logger_instance: Logger to use
        level: Log level (DEBUG, INFO, etc.)
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                log_func = getattr(logger_instance, level.lower(), logger_instance.debug)
                log_func(f"{func.__name__} executed in {elapsed_ms:.2f}ms")
        return wrapper
    return decorator


class ErrorHandler:
    """Contain and report errors raised by independent units of work."""

    def __init__(self, logger_instance=logger, level: str = "ERROR"):
        self.logger = logger_instance
        self.level = level

    def handle(self, error: Exception, context: str = "", reraise: bool = False) -> None:
        """Log an error with optional context.

        Args:
            error: The exception to handle
            context: Additional context information
            reraise: Whether to re-raise after handling
        """
        message = f"Error in {context}: {error}" if context else str(error)
        self.logger.opt(exception=error).log(self.level, message)
        if reraise:
            raise error

    def safe_execute(
        self,
        func: Callable[..., T],
        *args,
        default: Optional[T] = None,
        context: str = "",
        **kwargs
    ) -> Optional[T]:
        """Execute a function, returning ``default`` if it raises.

        Args:
            func: Function to execute
            *args: Positional arguments for the function
            default: Default value to return on error
            context: Context information for logging
            **kwargs: Keyword arguments for the function

        Returns:
            Function result or default value on error
        """
        try:
            return func(*args, **kwargs)
        except Exception as e:
            self.handle(e, context=context or getattr(func, "__name__", "callable"))
            return default
