"""Error types and field validation helpers for the bike simulation engine."""

from __future__ import annotations

import math
import numbers


class InvalidConfigurationError(ValueError):
    """Raised when a configuration value cannot be simulated.

    Attributes:
        field: Name of the offending configuration field.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field: str = field


class IntegrationError(RuntimeError):
    """Raised when the ODE solver fails to reach the requested tolerance."""


def require_finite(field: str, value: float) -> None:
    if not isinstance(value, numbers.Real) or isinstance(value, bool):
        raise InvalidConfigurationError(
            field, f"{field} must be numeric, got {type(value).__name__}."
        )
    if not math.isfinite(value):
        raise InvalidConfigurationError(field, f"{field} must be finite, got {value}.")


def require_positive(field: str, value: float) -> None:
    """Reject non-numeric, non-finite and non-positive values."""
    require_finite(field, value)
    if value <= 0.0:
        raise InvalidConfigurationError(field, f"{field} must be > 0, got {value}.")


def require_non_negative(field: str, value: float) -> None:
    """Reject non-numeric, non-finite and negative values."""
    require_finite(field, value)
    if value < 0.0:
        raise InvalidConfigurationError(field, f"{field} must be >= 0, got {value}.")


def require_fraction(field: str, value: float) -> None:
    """Reject values outside the closed interval [0, 1]."""
    require_finite(field, value)
    if not 0.0 <= value <= 1.0:
        raise InvalidConfigurationError(
            field, f"{field} must be between 0.0 and 1.0, got {value}."
        )
