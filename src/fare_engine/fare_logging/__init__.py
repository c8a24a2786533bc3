from .context import ContextFilter, DefaultCorrelationFilter, log_booking_context, log_context
from .setup import setup_logging, setup_logging_from_settings

__all__ = [
    "ContextFilter",
    "DefaultCorrelationFilter",
    "log_booking_context",
    "log_context",
    "setup_logging",
    "setup_logging_from_settings",
]
