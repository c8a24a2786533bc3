"""Fare computation and payment reconciliation for vehicle bookings."""

from fare_engine.charges import Charge, ChargesResult, build_charges, static_charges
from fare_engine.fare import FareBreakdown, FareCalculator, compute_fare
from fare_engine.geo.distance import DistanceSummary, build_waypoints, compute_distance
from fare_engine.itinerary import Itinerary, LegDistance, ServiceType, Tariff
from fare_engine.offers import (
    Computed,
    DiscountState,
    Locked,
    Offer,
    OfferType,
    compute_discount,
    resolve_offer,
)
from fare_engine.payment import PaymentState, PaymentStatus, reconcile_payment
from fare_engine.pipeline import BookingFinancials, BookingInput, compute_booking_financials
from fare_engine.tax import TaxRates, TaxRegime, TaxSelection, compute_tax

__all__ = [
    "BookingFinancials",
    "BookingInput",
    "Charge",
    "ChargesResult",
    "Computed",
    "DiscountState",
    "DistanceSummary",
    "FareBreakdown",
    "FareCalculator",
    "Itinerary",
    "LegDistance",
    "Locked",
    "Offer",
    "OfferType",
    "PaymentState",
    "PaymentStatus",
    "ServiceType",
    "Tariff",
    "TaxRates",
    "TaxRegime",
    "TaxSelection",
    "build_charges",
    "build_waypoints",
    "compute_booking_financials",
    "compute_discount",
    "compute_distance",
    "compute_fare",
    "compute_tax",
    "reconcile_payment",
    "resolve_offer",
    "static_charges",
]
