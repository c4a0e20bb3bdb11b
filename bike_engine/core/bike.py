"""Bicycle model for the bike simulation engine."""

from dataclasses import dataclass

from bike_engine.core.errors import (
    InvalidConfigurationError,
    require_non_negative,
    require_positive,
)


@dataclass(frozen=True)
class BikeConfig:
    """Deterministic representation of one bicycle configuration.

    Attributes:
        name: Label used in reports and charts.
        moment_of_inertia: Combined rotational inertia of both wheels
            in kg·m² (>= 0).
        wheel_radius: Rolling radius of the wheel in metres (> 0).
        bike_mass: Bicycle mass in kg (> 0).
        rolling_resistance_coeff: Rolling resistance coefficient Crr (>= 0).
        drag_area: Drag coefficient times frontal area (CdA) in m² (> 0).
    """

    name: str
    moment_of_inertia: float
    wheel_radius: float
    bike_mass: float
    rolling_resistance_coeff: float
    drag_area: float

    def __post_init__(self) -> None:
        """Validate bike parameters."""
        if not self.name:
            raise InvalidConfigurationError("name", "Bike name must not be empty.")
        require_non_negative("moment_of_inertia", self.moment_of_inertia)
        require_positive("wheel_radius", self.wheel_radius)
        require_positive("bike_mass", self.bike_mass)
        require_non_negative("rolling_resistance_coeff", self.rolling_resistance_coeff)
        require_positive("drag_area", self.drag_area)
