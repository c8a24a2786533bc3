"""Charges map and final amount for a booking or invoice."""

import logging
from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fare_engine.core.exceptions import (
    ChargeLabelConflictError,
    DuplicateChargeError,
    FareEngineWarning,
    NegativeFareWarning,
)
from fare_engine.core.money import round_money
from fare_engine.settings import ChargeLabelSettings

logger = logging.getLogger(__name__)


class Charge(BaseModel):
    """A named amount on the booking.

    Fixed charges are system-defined (tax lines); the rest are added by hand.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    amount: float
    fixed: bool = False

    @field_validator("label")
    @classmethod
    def validate_label(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Charge label must not be empty")
        return v


class ChargesResult(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    charges_map: dict[str, float]
    final_amount: float
    warnings: tuple[FareEngineWarning, ...] = Field(default=())


def static_charges(
    toll: float = 0.0,
    hill: float = 0.0,
    permit: float = 0.0,
    *,
    labels: ChargeLabelSettings | None = None,
) -> list[Charge]:
    """Toll, hill and permit charges entered on booking forms."""
    labels = labels or ChargeLabelSettings()
    return [
        Charge(label=labels.toll, amount=toll),
        Charge(label=labels.hill, amount=hill),
        Charge(label=labels.permit, amount=permit),
    ]


def _validate_labels(
    tax_lines: Mapping[str, float],
    ad_hoc_charges: Sequence[Charge],
    labels: ChargeLabelSettings,
) -> None:
    reserved = labels.system_labels | set(tax_lines)
    seen: set[str] = set()
    for charge in ad_hoc_charges:
        if charge.label in reserved:
            raise ChargeLabelConflictError(
                f"Charge label {charge.label!r} is reserved",
                details={"label": charge.label},
            )
        if charge.label in seen:
            raise DuplicateChargeError(
                f"Duplicate charge label {charge.label!r}",
                details={"label": charge.label},
            )
        seen.add(charge.label)


def build_charges(
    subtotal: float,
    driver_surcharge: float,
    tax_lines: Mapping[str, float],
    discount: float,
    ad_hoc_charges: Sequence[Charge] = (),
    *,
    labels: ChargeLabelSettings | None = None,
) -> ChargesResult:
    """Merge every charge into one map and total the final amount.

    The driver surcharge is listed in the map but is already part of the
    subtotal, so it is not added again. Zero-valued entries are left out.

    Raises:
        ChargeLabelConflictError: An ad hoc charge reuses a system label.
        DuplicateChargeError: Two ad hoc charges share a label.
    """
    labels = labels or ChargeLabelSettings()
    _validate_labels(tax_lines, ad_hoc_charges, labels)

    entries: list[tuple[str, float]] = [
        *tax_lines.items(),
        (labels.driver_surcharge, driver_surcharge),
        *((charge.label, charge.amount) for charge in ad_hoc_charges),
        (labels.discount, discount),
    ]
    charges_map = {label: amount for label, amount in entries if amount != 0}

    final_amount = round_money(
        subtotal
        + sum(tax_lines.values())
        + sum(charge.amount for charge in ad_hoc_charges)
        - discount
    )

    warnings: tuple[FareEngineWarning, ...] = ()
    if final_amount < 0:
        warning = NegativeFareWarning(
            f"Final amount {final_amount:.2f} is negative; discount {discount:.2f} "
            f"exceeds the chargeable total",
            details={"final_amount": final_amount, "discount": discount},
        )
        logger.warning(warning.message)
        warnings = (warning,)

    return ChargesResult(charges_map=charges_map, final_amount=final_amount, warnings=warnings)
