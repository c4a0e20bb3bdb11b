"""Sensitivity analysis for the bike simulation engine.

Measures how strongly the route time of a bike reacts to small changes
in one of its parameters, using central differences::

    sensitivity = (T(x + delta) - T(x - delta)) / (x_plus - x_minus)

Results are in seconds of route time per unit of the parameter (e.g.
seconds per kg for ``bike_mass``).  Every evaluation is a full
deterministic route simulation.
"""

from __future__ import annotations

from dataclasses import replace

from bike_engine.core.bike import BikeConfig
from bike_engine.core.errors import InvalidConfigurationError, require_positive
from bike_engine.core.rider import RiderConfig
from bike_engine.core.segmenter import compute_route_time
from bike_engine.core.terrain import TerrainConfig

# Numeric bike fields and whether zero is an allowed value.
_BIKE_FIELDS: dict[str, bool] = {
    "moment_of_inertia": True,
    "wheel_radius": False,
    "bike_mass": False,
    "rolling_resistance_coeff": True,
    "drag_area": False,
}

# Default perturbation per field, roughly 1-3 % of a typical road bike value.
DEFAULT_DELTAS: dict[str, float] = {
    "moment_of_inertia": 0.005,
    "wheel_radius": 0.005,
    "bike_mass": 0.25,
    "rolling_resistance_coeff": 0.0002,
    "drag_area": 0.005,
}


def compute_bike_sensitivity(
    rider: RiderConfig,
    bike: BikeConfig,
    terrain: TerrainConfig,
    field: str,
    delta: float | None = None,
) -> float:
    """Estimate d(route time)/d(field) for one bike parameter.

    Fields that may be zero have their lower perturbation clamped at
    zero, and the divisor uses the actual perturbed span.

    Args:
        rider: Rider configuration.
        bike: Bike whose parameter is perturbed.
        terrain: Route profile.
        field: Name of a numeric :class:`BikeConfig` field.
        delta: Perturbation magnitude.  Defaults to
            :data:`DEFAULT_DELTAS` for the field.

    Returns:
        Route-time sensitivity in seconds per unit of *field*.

    Raises:
        InvalidConfigurationError: If *field* is unknown, *delta* is not
            positive, or the lower perturbation of a strictly positive
            field would not be positive.
    """
    if field not in _BIKE_FIELDS:
        raise InvalidConfigurationError(
            "field",
            f"Unknown bike field '{field}'; expected one of {sorted(_BIKE_FIELDS)}.",
        )
    step: float = DEFAULT_DELTAS[field] if delta is None else delta
    require_positive("delta", step)

    value: float = getattr(bike, field)
    value_plus: float = value + step
    value_minus: float = value - step
    if _BIKE_FIELDS[field]:
        value_minus = max(0.0, value_minus)
    elif value_minus <= 0.0:
        raise InvalidConfigurationError(
            "delta",
            f"delta {step} is too large for {field} = {value}.",
        )

    actual_delta: float = value_plus - value_minus
    if actual_delta == 0.0:
        return 0.0

    bike_plus: BikeConfig = replace(bike, **{field: value_plus})
    bike_minus: BikeConfig = replace(bike, **{field: value_minus})

    time_plus: float = compute_route_time(rider, bike_plus, terrain)
    time_minus: float = compute_route_time(rider, bike_minus, terrain)

    return (time_plus - time_minus) / actual_delta


def compute_all_bike_sensitivities(
    rider: RiderConfig,
    bike: BikeConfig,
    terrain: TerrainConfig,
) -> dict[str, float]:
    """Return :func:`compute_bike_sensitivity` for every numeric bike field."""
    return {
        field: compute_bike_sensitivity(rider, bike, terrain, field)
        for field in _BIKE_FIELDS
    }
