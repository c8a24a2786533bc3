"""Single entry point for booking and invoice financials.

Every form calls compute_booking_financials with its full input snapshot on
each relevant change. Nothing is remembered between calls.
"""

import logging
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from fare_engine.charges import Charge, build_charges, static_charges
from fare_engine.core.exceptions import FareEngineWarning
from fare_engine.fare import FareBreakdown, FareCalculator
from fare_engine.fare_logging import log_booking_context, log_context
from fare_engine.geo.distance import DistanceSummary, aggregate_itinerary
from fare_engine.itinerary import Itinerary, LegDistance, Tariff
from fare_engine.offers import DiscountState, Offer, resolve_discount
from fare_engine.payment import PaymentState, reconcile_payment
from fare_engine.settings import Settings
from fare_engine.tax import TaxRates, TaxSelection, compute_tax

logger = logging.getLogger(__name__)


class BookingInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    booking_id: str | None = None
    itinerary: Itinerary
    legs: list[LegDistance] = Field(default_factory=list)
    tariff: Tariff
    # Overrides the tariff's driver surcharge when the form edits it.
    driver_surcharge: float | None = Field(default=None, ge=0)
    tax_rates: TaxRates = Field(default_factory=TaxRates)
    tax_selection: TaxSelection = Field(default_factory=TaxSelection)
    offers: list[Offer] = Field(default_factory=list)
    discount: DiscountState = Field(default_factory=DiscountState)
    toll: float = Field(default=0.0, ge=0)
    hill: float = Field(default=0.0, ge=0)
    permit: float = Field(default=0.0, ge=0)
    ad_hoc_charges: list[Charge] = Field(default_factory=list)
    advance_amount: float = 0.0
    # Offer validity reference time; offers are not date-filtered when None.
    as_of: datetime | None = None


class BookingFinancials(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    distance: DistanceSummary
    fare: FareBreakdown
    tax_lines: dict[str, float]
    offer: Offer | None
    discount_amount: float
    discount_locked: bool
    charges_map: dict[str, float]
    final_amount: float
    payment: PaymentState
    warnings: tuple[FareEngineWarning, ...] = ()


def compute_booking_financials(
    booking: BookingInput,
    settings: Settings | None = None,
) -> BookingFinancials:
    """Run distance, fare, tax, discount, charges and payment stages in order.

    Records logged during the run carry the booking id (when given) and the
    service type.

    Raises:
        IncompleteRouteError: A leg distance is missing.
        AmbiguousTaxSelectionError: Both tax regimes are selected.
        ChargeLabelError: Ad hoc charge labels collide.
        InvalidFareError: The final amount is negative.
    """
    service_type = booking.itinerary.service_type.value
    if booking.booking_id:
        context = log_booking_context(booking.booking_id, service_type=service_type)
    else:
        context = log_context(service_type=service_type)

    with context:
        return _compute(booking, settings or Settings())


def _compute(booking: BookingInput, settings: Settings) -> BookingFinancials:
    itinerary = booking.itinerary
    tariff = booking.tariff

    distance = aggregate_itinerary(itinerary, booking.legs)

    driver_surcharge = (
        booking.driver_surcharge
        if booking.driver_surcharge is not None
        else tariff.driver_surcharge
    )
    fare = FareCalculator(settings.pricing).calculate(
        distance.total_distance,
        tariff.rate_per_distance_unit,
        itinerary.service_type,
        itinerary.pickup_date_time,
        itinerary.drop_date,
        driver_surcharge,
        return_leg_included=distance.return_leg_included,
        package_price=tariff.package_price,
    )
    logger.debug(
        "Fare for %s: %.2f x %.2f over %d day(s) -> base %.2f, subtotal %.2f",
        itinerary.service_type.value,
        fare.effective_distance,
        fare.rate_per_distance_unit,
        fare.trip_day_count,
        fare.base_fare,
        fare.subtotal,
        extra={
            "stage": "fare",
            "amounts": {"base_fare": fare.base_fare, "subtotal": fare.subtotal},
        },
    )

    tax_lines = compute_tax(
        fare.subtotal,
        booking.tax_selection,
        booking.tax_rates,
        labels=settings.labels,
        merge_combined=settings.pricing.merge_combined_tax,
    )

    discount = resolve_discount(
        booking.discount,
        booking.offers,
        itinerary.service_type,
        fare.subtotal,
        as_of=booking.as_of,
        settings=settings.pricing,
    )

    charges = build_charges(
        fare.subtotal,
        fare.driver_surcharge,
        tax_lines,
        discount.amount,
        [
            *static_charges(booking.toll, booking.hill, booking.permit, labels=settings.labels),
            *booking.ad_hoc_charges,
        ],
        labels=settings.labels,
    )

    payment = reconcile_payment(charges.final_amount, booking.advance_amount)
    logger.debug(
        "Final amount %.2f, advance %.2f -> %s",
        payment.final_amount,
        payment.advance_amount,
        payment.status.value,
        extra={
            "stage": "payment",
            "amounts": {"final": payment.final_amount, "remaining": payment.remaining_amount},
        },
    )

    return BookingFinancials(
        distance=distance,
        fare=fare,
        tax_lines=tax_lines,
        offer=discount.offer,
        discount_amount=discount.amount,
        discount_locked=discount.locked,
        charges_map=charges.charges_map,
        final_amount=charges.final_amount,
        payment=payment,
        warnings=(*discount.warnings, *charges.warnings),
    )
