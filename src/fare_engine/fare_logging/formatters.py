"""Log formatters for fare computations.

Both formatters understand the booking context set by log_booking_context
and the ``stage``/``amounts`` extras the pipeline attaches to its records.
"""

import json
import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from fare_engine.core.money import round_money

CONTEXT_FIELDS = ("booking_id", "service_type", "correlation_id", "stage")


def _amounts(record: logging.LogRecord) -> dict[str, float]:
    amounts = getattr(record, "amounts", None)
    if not isinstance(amounts, Mapping):
        return {}
    return {name: round_money(value) for name, value in amounts.items()}


class JSONFormatter(logging.Formatter):
    """One JSON object per record, stamped with the record's creation time."""

    def __init__(self, environment: str = "development"):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "env": self.environment,
        }
        payload.update(
            {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}
        )

        amounts = _amounts(record)
        if amounts:
            payload["amounts"] = amounts

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class DevFormatter(logging.Formatter):
    """Single-line text output tagged with the booking being priced.

    Example: ``10:00:00 DEBUG   fare_engine.pipeline [BK-1/One way] Fare ready | subtotal=2100.00``
    """

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s %(booking_tag)s%(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            str(getattr(record, field))
            for field in ("booking_id", "service_type")
            if getattr(record, field, None)
        ]
        record.booking_tag = f"[{'/'.join(parts)}] " if parts else ""

        text = super().format(record)
        amounts = _amounts(record)
        if amounts:
            text += " | " + " ".join(f"{name}={value:.2f}" for name, value in amounts.items())
        return text
