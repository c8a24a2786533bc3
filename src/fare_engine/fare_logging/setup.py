"""Handler installation for the fare_engine logger hierarchy."""

import logging
import sys
from typing import TextIO

from fare_engine.settings import LoggingSettings

from .context import ContextFilter, DefaultCorrelationFilter
from .formatters import DevFormatter, JSONFormatter

PACKAGE_LOGGER = "fare_engine"


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    environment: str = "development",
    stream: TextIO | None = None,
) -> logging.Handler:
    """Attach a single stream handler to the fare_engine logger.

    Calling again replaces the handler from the previous call. Handlers the
    host application put on the root logger are left alone.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in [h for h in package_logger.handlers if getattr(h, "fare_engine", False)]:
        package_logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.fare_engine = True
    handler.setFormatter(JSONFormatter(environment) if json_output else DevFormatter())
    handler.addFilter(ContextFilter())
    handler.addFilter(DefaultCorrelationFilter())

    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    return handler


def setup_logging_from_settings(settings: LoggingSettings) -> logging.Handler:
    return setup_logging(
        level=settings.level,
        json_output=settings.format == "json",
        environment=settings.environment,
        stream=getattr(sys, settings.stream),
    )
