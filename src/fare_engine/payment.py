from enum import Enum
from typing import Self

from pydantic import BaseModel, Field, model_validator

from fare_engine.core.exceptions import AdvanceExceedsFareError, InvalidFareError
from fare_engine.core.money import round_money


class PaymentStatus(str, Enum):
    UNPAID = "Unpaid"
    PARTIAL_PAID = "Partial Paid"
    PAID = "Paid"


class PaymentState(BaseModel):
    """Payment position of a booking.

    final_amount and advance_amount are canonical; status and
    remaining_amount are always derived from them.
    """

    final_amount: float = Field(ge=0)
    advance_amount: float
    status: PaymentStatus = PaymentStatus.UNPAID
    remaining_amount: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def derive_status(self) -> Self:
        if self.advance_amount <= 0:
            self.status = PaymentStatus.UNPAID
            self.remaining_amount = self.final_amount
        elif self.advance_amount >= self.final_amount:
            # Excess advance is not refunded here, only never shown as negative balance.
            self.status = PaymentStatus.PAID
            self.remaining_amount = 0.0
        else:
            self.status = PaymentStatus.PARTIAL_PAID
            self.remaining_amount = round_money(self.final_amount - self.advance_amount)
        return self


def reconcile_payment(final_amount: float, advance_amount: float) -> PaymentState:
    """Derive payment status and remaining balance.

    Raises:
        InvalidFareError: final_amount is negative.
    """
    if final_amount < 0:
        raise InvalidFareError(
            f"Final amount must be non-negative, got {final_amount:.2f}",
            details={"final_amount": final_amount, "advance_amount": advance_amount},
        )
    return PaymentState(final_amount=final_amount, advance_amount=advance_amount)


def validate_advance(final_amount: float, advance_amount: float) -> None:
    """Reject an advance entry larger than the final amount.

    Forms call this before accepting user input; reconcile_payment itself
    treats an oversized advance as fully paid.
    """
    if advance_amount > final_amount:
        raise AdvanceExceedsFareError(
            f"Advance {advance_amount:.2f} exceeds final amount {final_amount:.2f}",
            details={"final_amount": final_amount, "advance_amount": advance_amount},
        )
