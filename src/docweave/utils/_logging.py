"""Logging utilities for docweave.

This module provides standalone structlog logger factories that write
JSON-formatted or text-formatted logs to stderr or to a file. Each logger is
self-contained and does not modify global structlog configuration, so
embedding applications keep full control of their own logging setup.
"""

import logging
import sys
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog
from structlog.typing import FilteringBoundLogger

if TYPE_CHECKING:
    from docweave.config import LoggingConfig

LogFormatType = Literal["json", "text"]

DEFAULT_LOG_LEVEL = "warning"


def _get_log_level(default: str = DEFAULT_LOG_LEVEL) -> int:
    """Get the log level from environment variables.

    Checks DOCWEAVE_DEBUG first (sets DEBUG if present), then
    DOCWEAVE_LOG_LEVEL. Falls back to ``default`` if neither is set.

    Returns:
        The logging level as an integer.
    """
    if getenv("DOCWEAVE_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(getenv("DOCWEAVE_LOG_LEVEL", default).upper(), logging.WARNING)


def _log_level_from_string(level: str, *, respect_env: bool = False) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, DOCWEAVE_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer.
    """
    if respect_env and getenv("DOCWEAVE_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.WARNING)


def _create_logger(
    log_file_path: str = "",
    *,
    log_level: int | None = None,
    log_format: LogFormatType = "text",
) -> FilteringBoundLogger:
    """Create a standalone structlog logger.

    Args:
        log_file_path: Path to the log file (opened in append mode). Logs go
            to stderr when empty.
        log_level: Override log level (uses env vars if not specified).
        log_format: Output format, either "json" or "text".

    Returns:
        A configured FilteringBoundLogger instance.
    """
    if log_file_path:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger_factory = structlog.WriteLoggerFactory(file=log_path.open("a"))
    else:
        logger_factory = structlog.PrintLoggerFactory(file=sys.stderr)

    effective_level = log_level if log_level is not None else _get_log_level()

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    wrapper_class = structlog.make_filtering_bound_logger(effective_level)

    # wrap_logger leaves the global structlog configuration untouched
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=wrapper_class,
            context_class=dict,
        ),
    )


def create_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "text",
    log_file: str = "",
    component: str = "",
) -> FilteringBoundLogger:
    """Create a logger for a docweave component.

    The log level is determined by (in order of precedence):
    1. DOCWEAVE_DEBUG environment variable (if set, enables DEBUG level)
    2. The `level` parameter (if provided)
    3. DOCWEAVE_LOG_LEVEL environment variable
    4. Default: WARNING

    Args:
        level: Optional log level string (debug, info, warning, error).
        log_format: Output format, either "json" or "text".
        log_file: Path to log file (stderr if empty).
        component: Component name bound to all entries ("engine", "loader").

    Returns:
        A FilteringBoundLogger instance.
    """
    effective_level: int | None = None
    if level is not None:
        effective_level = _log_level_from_string(level, respect_env=True)

    logger = _create_logger(log_file, log_level=effective_level, log_format=log_format)

    if component:
        return logger.bind(component=component)
    return logger


def create_configured_logger(
    settings: "LoggingConfig",
    *,
    component: str = "",
) -> FilteringBoundLogger:
    """Create a component logger from the ``[logging]`` configuration section.

    Args:
        settings: Logging configuration.
        component: Component name bound to all entries.

    Returns:
        A FilteringBoundLogger instance.
    """
    log_format: LogFormatType = "json" if settings.format == "json" else "text"
    return create_logger(
        level=settings.level.value,
        log_format=log_format,
        log_file=settings.file,
        component=component,
    )
