"""Mutually exclusive tax regimes applied to a booking subtotal.

A service is taxed either under the combined regime (central and state
components, CGST + SGST) or the single integrated regime (IGST), never both.
"""

from enum import Enum
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from fare_engine.core.exceptions import AmbiguousTaxSelectionError
from fare_engine.core.money import round_money
from fare_engine.settings import ChargeLabelSettings


class TaxRegime(str, Enum):
    COMBINED_RATE = "combined_rate"
    SINGLE_RATE = "single_rate"


class TaxRates(BaseModel):
    """Per-service tax percentages from reference data."""

    model_config = ConfigDict(frozen=True)

    cgst: float = Field(default=0.0, ge=0, le=100)
    sgst: float = Field(default=0.0, ge=0, le=100)
    igst: float = Field(default=0.0, ge=0, le=100)


class TaxSelection(BaseModel):
    """Selected flags of both regimes.

    Build selections with select() so that choosing one regime clears the
    other. Both flags set is rejected by compute_tax.
    """

    model_config = ConfigDict(frozen=True)

    combined_rate: bool = False
    single_rate: bool = False

    @classmethod
    def select(cls, regime: TaxRegime) -> Self:
        return cls(
            combined_rate=regime == TaxRegime.COMBINED_RATE,
            single_rate=regime == TaxRegime.SINGLE_RATE,
        )

    @classmethod
    def none(cls) -> Self:
        return cls()

    @property
    def regime(self) -> TaxRegime | None:
        if self.combined_rate and self.single_rate:
            raise AmbiguousTaxSelectionError(
                "Both tax regimes are selected",
                details={"combined_rate": True, "single_rate": True},
            )
        if self.combined_rate:
            return TaxRegime.COMBINED_RATE
        if self.single_rate:
            return TaxRegime.SINGLE_RATE
        return None


def _component(subtotal: float, rate: float) -> float:
    return round_money(subtotal * rate / 100)


def compute_tax(
    subtotal: float,
    selection: TaxSelection,
    rates: TaxRates,
    *,
    labels: ChargeLabelSettings | None = None,
    merge_combined: bool = False,
) -> dict[str, float]:
    """Tax line items for the selected regime, keyed by charge label.

    Returns an empty dict when no regime is selected. With merge_combined the
    CGST and SGST components are reported as one combined line.

    Raises:
        AmbiguousTaxSelectionError: Both regimes are selected.
    """
    labels = labels or ChargeLabelSettings()
    regime = selection.regime

    if regime is None:
        return {}

    if regime == TaxRegime.SINGLE_RATE:
        return {labels.igst: _component(subtotal, rates.igst)}

    cgst = _component(subtotal, rates.cgst)
    sgst = _component(subtotal, rates.sgst)
    if merge_combined:
        return {labels.combined_tax: round_money(cgst + sgst)}
    return {labels.cgst: cgst, labels.sgst: sgst}
