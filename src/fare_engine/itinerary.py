"""Trip description and reference data consumed by the fare engine."""

import re
from datetime import date, datetime
from enum import Enum
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_HOURS_PATTERN = re.compile(r"(\d+)\s*hours?", re.IGNORECASE)
_MINUTES_PATTERN = re.compile(r"(\d+)\s*mins?", re.IGNORECASE)


class ServiceType(str, Enum):
    """Booking service types. Values match offer categories."""

    ONE_WAY = "One way"
    ROUND_TRIP = "Round trip"
    HOURLY_PACKAGE = "Hourly Packages"
    DAY_PACKAGE = "Day Packages"
    AIRPORT_PICKUP = "Airport Pickup"
    AIRPORT_DROP = "Airport Drop"

    @property
    def is_package(self) -> bool:
        return self in {ServiceType.HOURLY_PACKAGE, ServiceType.DAY_PACKAGE}


def parse_duration_minutes(value: float | int | str) -> float:
    """Parse a routing duration such as "2 hours 15 mins" into minutes.

    Numbers are taken to already be minutes. Text without an hours or mins
    component parses to 0.
    """
    if isinstance(value, (int, float)):
        return float(value)

    hours_match = _HOURS_PATTERN.search(value)
    minutes_match = _MINUTES_PATTERN.search(value)

    hours = int(hours_match.group(1)) if hours_match else 0
    minutes = int(minutes_match.group(1)) if minutes_match else 0

    return float(hours * 60 + minutes)


def format_duration(total_minutes: float) -> str:
    """Format minutes back to the routing provider's "H hours M mins" form."""
    total = int(round(total_minutes))
    hours, minutes = divmod(total, 60)

    if hours > 0 and minutes > 0:
        return f"{hours} hours {minutes} mins"
    if hours > 0:
        return f"{hours} hours"
    return f"{minutes} mins"


class Itinerary(BaseModel):
    model_config = ConfigDict(frozen=True)

    pickup: str
    stops: list[str] = Field(default_factory=list)
    drop: str
    service_type: ServiceType
    pickup_date_time: datetime
    drop_date: date | None = None

    @field_validator("drop_date", mode="before")
    @classmethod
    def truncate_drop_datetime(cls, v: object) -> object:
        # Forms send the drop date as a full timestamp; only the day counts.
        if isinstance(v, datetime):
            return v.date()
        return v

    @model_validator(mode="after")
    def validate_round_trip_dates(self) -> Self:
        if (
            self.service_type == ServiceType.ROUND_TRIP
            and self.drop_date is not None
            and self.drop_date < self.pickup_date_time.date()
        ):
            raise ValueError(
                f"Round trip drop date {self.drop_date} is before pickup "
                f"{self.pickup_date_time.date()}"
            )
        return self

    @property
    def active_stops(self) -> list[str]:
        return [stop for stop in self.stops if stop.strip()]


class Tariff(BaseModel):
    """Per-vehicle, per-service price list entry."""

    model_config = ConfigDict(frozen=True)

    rate_per_distance_unit: float = Field(ge=0)
    vehicle_id: str
    service_type_id: str
    driver_surcharge: float = Field(default=0.0, ge=0)
    package_price: float | None = Field(default=None, ge=0)


class LegDistance(BaseModel):
    """Distance and duration between two consecutive waypoints."""

    model_config = ConfigDict(frozen=True)

    from_index: int = Field(ge=0)
    to_index: int = Field(ge=1)
    distance: float = Field(ge=0)
    duration: float = Field(default=0.0, ge=0, description="Minutes")

    @field_validator("duration", mode="before")
    @classmethod
    def parse_duration(cls, v: object) -> object:
        if isinstance(v, str):
            return parse_duration_minutes(v)
        return v

    @model_validator(mode="after")
    def validate_consecutive(self) -> Self:
        if self.to_index != self.from_index + 1:
            raise ValueError(
                f"Leg must join consecutive waypoints, got {self.from_index} -> {self.to_index}"
            )
        return self
