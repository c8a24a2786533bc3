"""Standardized exception hierarchy for the fare engine."""

from typing import Any


class FareEngineError(Exception):
    """Base exception for all fare engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PermanentError(FareEngineError):
    """Errors that will not succeed on retry without corrected input."""

    pass


class ValidationError(PermanentError):
    """Invalid input or data format."""

    pass


class InvalidFareError(PermanentError):
    """Final amount is negative and cannot be reconciled."""

    pass


class AmbiguousTaxSelectionError(PermanentError):
    """Both tax regimes were selected at once."""

    pass


class IncompleteRouteError(PermanentError):
    """A consecutive waypoint pair has no leg distance."""

    pass


class ChargeLabelError(PermanentError):
    """Charge labels are not unique."""

    pass


class DuplicateChargeError(ChargeLabelError):
    """Two ad hoc charges share a label."""

    pass


class ChargeLabelConflictError(ChargeLabelError):
    """An ad hoc charge reuses a system-defined label."""

    pass


class AdvanceExceedsFareError(PermanentError):
    """Advance payment is larger than the final amount."""

    pass


class ConfigurationError(PermanentError):
    """Missing or invalid configuration."""

    pass


class FareEngineWarning(UserWarning):
    """Base class for non-fatal conditions carried on computation results."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class StaleInputWarning(FareEngineWarning):
    """Inputs changed while a discount was locked; live recomputation skipped."""

    pass


class NegativeFareWarning(FareEngineWarning):
    """Charges drive the final amount below zero."""

    pass
