"""Context-local logging fields for booking computations."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any] | None] = ContextVar("fare_log_context", default=None)


def get_log_context() -> dict[str, Any]:
    return dict(_log_context.get() or {})


class ContextFilter(logging.Filter):
    """Injects log_context fields into log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


class DefaultCorrelationFilter(logging.Filter):
    """Adds default correlation_id if not present."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Context manager that sets logging context fields.

    Fields are injected into log records via ContextFilter, which must
    be attached to the handler (see setup_logging). Nested contexts
    extend the outer one and restore it on exit.
    """
    token = _log_context.set({**get_log_context(), **kwargs})
    try:
        yield
    finally:
        _log_context.reset(token)


@contextmanager
def log_booking_context(booking_id: str, **kwargs: Any) -> Iterator[None]:
    """Convenience context manager for booking and invoice computations."""
    correlation_id = kwargs.pop("correlation_id", booking_id)
    with log_context(booking_id=booking_id, correlation_id=correlation_id, **kwargs):
        yield
