"""Shared utilities for docweave."""

from ._logging import LogFormatType, create_configured_logger, create_logger

__all__ = [
    "LogFormatType",
    "create_configured_logger",
    "create_logger",
]
