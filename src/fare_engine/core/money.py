"""Money rounding helpers."""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """Round to 2 decimals, half away from zero.

    Goes through the shortest decimal repr of the float so that values like
    2.675 round to 2.68 and rounding an already rounded amount is a no-op.
    """
    rounded = float(Decimal(repr(float(value))).quantize(_CENT, rounding=ROUND_HALF_UP))
    # normalize -0.0
    return 0.0 if rounded == 0 else rounded
