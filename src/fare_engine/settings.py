from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["text", "json"] = "text"
    stream: Literal["stdout", "stderr"] = "stdout"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class PricingSettings(BaseSettings):
    """Fare policy shared by every booking and invoice form."""

    round_trip_multiplier: float = Field(
        default=2.0,
        ge=1.0,
        le=4.0,
        description="Distance multiplier for a round trip priced from its one-way leg",
    )
    double_looped_round_trip: bool = Field(
        default=True,
        description=(
            "Apply the round-trip multiplier even when the route already returns "
            "to pickup through its stops"
        ),
    )
    offer_wildcard_category: str = Field(
        default="All",
        min_length=1,
        description="Offer category that applies to every service type",
    )
    merge_combined_tax: bool = Field(
        default=False,
        description="Persist CGST and SGST as a single combined tax line",
    )

    model_config = SettingsConfigDict(env_prefix="PRICING_")


class ChargeLabelSettings(BaseSettings):
    """Labels used as keys of the persisted charges map."""

    cgst: str = "CGST"
    sgst: str = "SGST"
    igst: str = "IGST"
    combined_tax: str = "CGST & SGST"
    driver_surcharge: str = "Driver Betta"
    discount: str = "Discount"
    toll: str = "Toll Charges"
    hill: str = "Hill Charges"
    permit: str = "Permit Charges"

    model_config = SettingsConfigDict(env_prefix="CHARGE_LABEL_")

    @model_validator(mode="after")
    def validate_labels_unique(self) -> "ChargeLabelSettings":
        labels = [label.strip() for label in self.model_dump().values()]
        if not all(labels):
            raise ValueError("Charge labels must be non-empty")
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise ValueError(f"Charge labels must be unique, duplicated: {', '.join(duplicates)}")
        return self

    @property
    def tax_labels(self) -> frozenset[str]:
        return frozenset({self.cgst, self.sgst, self.igst, self.combined_tax})

    @property
    def system_labels(self) -> frozenset[str]:
        """Labels owned by the engine; ad hoc charges may not reuse them."""
        return self.tax_labels | {self.driver_surcharge, self.discount}


class Settings(BaseSettings):
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    labels: ChargeLabelSettings = Field(default_factory=ChargeLabelSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
