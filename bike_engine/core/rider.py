"""Rider model for the bike simulation engine."""

from dataclasses import dataclass

from bike_engine.core.errors import require_positive


@dataclass(frozen=True)
class RiderConfig:
    """Immutable description of the rider shared by both bikes in a comparison.

    Attributes:
        power: Constant sustained power output in watts (> 0).
        rider_mass: Body mass of the rider in kg (> 0).
    """

    power: float
    rider_mass: float

    def __post_init__(self) -> None:
        """Validate rider parameters."""
        require_positive("power", self.power)
        require_positive("rider_mass", self.rider_mass)
