"""
Logger module for docedit

This module provides a small logging interface so callers can drop in their
own implementation. The default implementation is backed by structlog and
takes structured key/value context on every call.

Usage:
    from docedit.logger import Logger, session_logger

    session_logger.info("Session opened", session_id=sid, path=path)

    # Or implement your own
    class MyCustomLogger(Logger):
        def info(self, message: str, **kwargs):
            ...

Log output always goes to stderr: stdout belongs to the MCP stdio transport.
"""

import logging
import sys
from abc import ABC, abstractmethod
from typing import Any

import structlog


class Logger(ABC):
    """Structured logger interface used throughout docedit."""

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        pass


class StructLogger(Logger):
    """Logger backed by a structlog bound logger."""

    def __init__(self, name: str = "docedit", **context: Any):
        self.name = name
        self.context = context
        # Lazy proxy: picks up configure_logging() calls made after import.
        self._logger = structlog.get_logger(logger_name=name, **context)

    def bind(self, **context: Any) -> "StructLogger":
        """Return a child logger carrying extra context on every entry."""
        return StructLogger(self.name, **{**self.context, **context})

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, **kwargs)


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog output for the whole process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render one JSON object per line instead of console format
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_logging()

# Shared logger instance for modules that just need basic logging
session_logger: Logger = StructLogger("docedit")

__all__ = [
    "Logger",
    "StructLogger",
    "configure_logging",
    "session_logger",
]
