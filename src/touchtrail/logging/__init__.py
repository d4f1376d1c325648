"""Structured logging support for TouchTrail."""

from touchtrail.logging.context import (
    LogContext,
    add_context,
    clear_context,
    get_context,
)
from touchtrail.logging.formatters import JSONFormatter

__all__ = [
    "JSONFormatter",
    "LogContext",
    "add_context",
    "clear_context",
    "get_context",
]
