import logging
import os
from datetime import datetime

import pytest

from fare_engine.itinerary import ServiceType
from fare_engine.offers import Offer, OfferType
from tests.factories import BookingFactory

# Settings are read from the environment; keep developer overrides out of tests.
for _key in list(os.environ):
    if _key.startswith(("LOG_", "PRICING_", "CHARGE_LABEL_")):
        del os.environ[_key]


@pytest.fixture
def pickup_time() -> datetime:
    return datetime(2024, 1, 1, 10, 0)


@pytest.fixture
def booking_factory() -> BookingFactory:
    return BookingFactory()


@pytest.fixture
def offers() -> list[Offer]:
    """Offer catalog mixing inactive, service-specific and wildcard offers."""
    return [
        Offer(
            offer_id="off-inactive",
            type=OfferType.PERCENTAGE,
            value=50,
            category=ServiceType.ROUND_TRIP.value,
            status=False,
        ),
        Offer(
            offer_id="off-all",
            type=OfferType.FLAT,
            value=75,
            category="All",
            status=True,
        ),
        Offer(
            offer_id="off-round-trip",
            type=OfferType.PERCENTAGE,
            value=10,
            category=ServiceType.ROUND_TRIP.value,
            status=True,
        ),
        Offer(
            offer_id="off-one-way",
            type=OfferType.FLAT,
            value=150,
            category=ServiceType.ONE_WAY.value,
            status=True,
        ),
    ]


@pytest.fixture
def package_logger():
    logger = logging.getLogger("fare_engine")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
