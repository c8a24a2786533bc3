from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from fare_engine.core.exceptions import ValidationError
from fare_engine.core.money import round_money
from fare_engine.itinerary import ServiceType
from fare_engine.settings import PricingSettings


class FareBreakdown(BaseModel):
    """Detailed breakdown of fare components."""

    model_config = ConfigDict(frozen=True)

    total_distance: float = Field(ge=0)
    effective_distance: float = Field(ge=0)
    trip_day_count: int = Field(ge=1)
    rate_per_distance_unit: float = Field(ge=0)
    base_fare: float = Field(ge=0)
    driver_surcharge: float = Field(ge=0)
    subtotal: float = Field(ge=0)


def count_trip_days(
    service_type: ServiceType,
    pickup_date_time: datetime,
    drop_date: date | None,
) -> int:
    """Calendar days between pickup and drop for a round trip, never below 1."""
    if service_type != ServiceType.ROUND_TRIP or drop_date is None:
        return 1
    return max(1, (drop_date - pickup_date_time.date()).days)


class FareCalculator:
    """Calculates base fare and subtotal from distance, tariff rate and trip dates."""

    def __init__(self, settings: PricingSettings | None = None) -> None:
        self.settings = settings or PricingSettings()

    def calculate(
        self,
        total_distance: float,
        rate_per_distance_unit: float,
        service_type: ServiceType,
        pickup_date_time: datetime,
        drop_date: date | None,
        driver_surcharge: float,
        *,
        return_leg_included: bool = False,
        package_price: float | None = None,
    ) -> FareBreakdown:
        """
        Calculate fare for a trip.

        A multi-day round trip charges the full distance once per day. A round
        trip without a drop date is priced as a same-day return by applying the
        round-trip multiplier. When double_looped_round_trip is disabled, a route
        that already returns to pickup is not multiplied. Package services with
        a package price use that price as the base fare.
        """
        if total_distance < 0:
            raise ValidationError("Distance must be non-negative")
        if rate_per_distance_unit < 0:
            raise ValidationError("Rate per distance unit must be non-negative")
        if driver_surcharge < 0:
            raise ValidationError("Driver surcharge must be non-negative")

        trip_day_count = count_trip_days(service_type, pickup_date_time, drop_date)

        if trip_day_count > 1:
            effective_distance = total_distance * trip_day_count
        elif (
            service_type == ServiceType.ROUND_TRIP
            and drop_date is None
            and (self.settings.double_looped_round_trip or not return_leg_included)
        ):
            effective_distance = total_distance * self.settings.round_trip_multiplier
        else:
            effective_distance = total_distance

        if service_type.is_package and package_price is not None:
            base_fare = round_money(package_price)
        else:
            base_fare = round_money(effective_distance * rate_per_distance_unit)

        return FareBreakdown(
            total_distance=total_distance,
            effective_distance=effective_distance,
            trip_day_count=trip_day_count,
            rate_per_distance_unit=rate_per_distance_unit,
            base_fare=base_fare,
            driver_surcharge=driver_surcharge,
            subtotal=round_money(base_fare + driver_surcharge),
        )


def compute_fare(
    total_distance: float,
    rate_per_distance_unit: float,
    service_type: ServiceType,
    pickup_date_time: datetime,
    drop_date: date | None,
    driver_surcharge: float,
    *,
    return_leg_included: bool = False,
    package_price: float | None = None,
    settings: PricingSettings | None = None,
) -> FareBreakdown:
    return FareCalculator(settings).calculate(
        total_distance,
        rate_per_distance_unit,
        service_type,
        pickup_date_time,
        drop_date,
        driver_surcharge,
        return_leg_included=return_leg_included,
        package_price=package_price,
    )
