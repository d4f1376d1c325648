"""Logging context management for structured logging."""

import contextvars
from typing import Any

_log_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "touchtrail_log_context", default=None
)


def add_context(**kwargs: Any) -> None:
    """Add fields to the logging context.

    These fields are included in every JSON log record emitted from the
    current context.

    Example:
        >>> add_context(session_id="sess_abc123def")
        >>> logger.info("History loaded")  # carries session_id
    """
    current = _log_context.get()
    current = {} if current is None else current.copy()
    current.update(kwargs)
    _log_context.set(current)


def clear_context() -> None:
    """Clear all fields from the logging context."""
    _log_context.set({})


def get_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    current = _log_context.get()
    if current is None:
        return {}
    return current.copy()


class LogContext:
    """Context manager for temporarily adding log context."""

    def __init__(self, **kwargs: Any):
        self.fields = kwargs
        self.token: contextvars.Token | None = None

    def __enter__(self) -> "LogContext":
        current = get_context()
        current.update(self.fields)
        self.token = _log_context.set(current)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.token is not None:
            _log_context.reset(self.token)
            self.token = None

    def update(self, **kwargs: Any) -> None:
        """Add fields while the context is active."""
        self.fields.update(kwargs)
        add_context(**kwargs)
