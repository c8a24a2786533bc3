"""Promotional offer selection and discount derivation."""

import logging
from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Self

from pydantic import BaseModel, ConfigDict, Field

from fare_engine.core.exceptions import FareEngineWarning, StaleInputWarning, ValidationError
from fare_engine.core.money import round_money
from fare_engine.itinerary import ServiceType
from fare_engine.settings import PricingSettings

logger = logging.getLogger(__name__)


class OfferType(str, Enum):
    FLAT = "Flat"
    PERCENTAGE = "Percentage"


class Offer(BaseModel):
    model_config = ConfigDict(frozen=True)

    offer_id: str | None = None
    offer_name: str | None = None
    type: OfferType
    value: float = Field(ge=0)
    category: str
    status: bool
    start_date: datetime | None = None
    end_date: datetime | None = None

    def is_valid_at(self, moment: datetime) -> bool:
        if self.start_date is not None and moment < self.start_date:
            return False
        if self.end_date is not None and moment > self.end_date:
            return False
        return True


class Locked(BaseModel):
    """Amount carried over from an existing booking or enquiry; never recomputed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["locked"] = "locked"
    value: float = Field(ge=0)
    # Subtotal the value was confirmed against, when known.
    source_subtotal: float | None = None


class Computed(BaseModel):
    """Amount derived live from the selected offer and the current subtotal."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["computed"] = "computed"


Adjustment = Annotated[Locked | Computed, Field(discriminator="kind")]


class DiscountState(BaseModel):
    model_config = ConfigDict(frozen=True)

    selected_offer: Offer | None = None
    amount: Adjustment = Field(default_factory=Computed)
    # Pick an eligible offer when none is selected and the amount is computed.
    auto_select: bool = True

    @property
    def locked(self) -> bool:
        return isinstance(self.amount, Locked)

    def lock(self, value: float, source_subtotal: float | None = None) -> Self:
        return self.model_copy(
            update={"amount": Locked(value=value, source_subtotal=source_subtotal)}
        )

    def unlock(self, offer: Offer | None) -> Self:
        """Explicit offer change by the user; re-enables live recomputation."""
        return self.model_copy(
            update={"selected_offer": offer, "amount": Computed(), "auto_select": False}
        )


class DiscountResolution(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    offer: Offer | None
    amount: float
    locked: bool
    warnings: tuple[FareEngineWarning, ...] = ()


def is_eligible(
    offer: Offer,
    service_type: ServiceType | str,
    *,
    as_of: datetime | None = None,
    wildcard: str = "All",
) -> bool:
    category = ServiceType(service_type).value
    if not offer.status:
        return False
    if as_of is not None and not offer.is_valid_at(as_of):
        return False
    return offer.category in (category, wildcard)


def resolve_offer(
    offers: Sequence[Offer],
    service_type: ServiceType | str,
    *,
    as_of: datetime | None = None,
    settings: PricingSettings | None = None,
) -> Offer | None:
    """First active offer for the service type, else first active wildcard offer."""
    wildcard = (settings or PricingSettings()).offer_wildcard_category
    category = ServiceType(service_type).value
    active = [
        offer
        for offer in offers
        if is_eligible(offer, category, as_of=as_of, wildcard=wildcard)
    ]

    for offer in active:
        if offer.category == category:
            return offer
    for offer in active:
        if offer.category == wildcard:
            return offer
    return None


def compute_discount(
    offer: Offer | None,
    subtotal: float,
    locked: bool = False,
    locked_amount: float | None = None,
) -> float:
    """Discount amount for an offer.

    Flat discounts are not capped to the subtotal. A locked discount returns
    locked_amount unchanged whatever the subtotal.
    """
    if locked:
        if locked_amount is None:
            raise ValidationError("Locked discount requires a locked amount")
        return locked_amount
    if offer is None:
        return 0.0
    if offer.type == OfferType.FLAT:
        return offer.value
    return round_money(subtotal * offer.value / 100)


def resolve_discount(
    state: DiscountState,
    offers: Sequence[Offer],
    service_type: ServiceType | str,
    subtotal: float,
    *,
    as_of: datetime | None = None,
    settings: PricingSettings | None = None,
) -> DiscountResolution:
    if isinstance(state.amount, Locked):
        warnings: tuple[FareEngineWarning, ...] = ()
        source = state.amount.source_subtotal
        if source is not None and round_money(source) != round_money(subtotal):
            warning = StaleInputWarning(
                f"Discount locked at subtotal {source:.2f}; "
                f"not recomputed for subtotal {subtotal:.2f}",
                details={"source_subtotal": source, "subtotal": subtotal},
            )
            logger.warning(warning.message)
            warnings = (warning,)
        return DiscountResolution(
            offer=state.selected_offer,
            amount=compute_discount(
                state.selected_offer, subtotal, locked=True, locked_amount=state.amount.value
            ),
            locked=True,
            warnings=warnings,
        )

    offer = state.selected_offer
    if offer is None and state.auto_select:
        offer = resolve_offer(offers, service_type, as_of=as_of, settings=settings)

    return DiscountResolution(
        offer=offer,
        amount=compute_discount(offer, subtotal),
        locked=False,
    )
