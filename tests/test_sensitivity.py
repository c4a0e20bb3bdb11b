"""Tests for bike parameter sensitivity analysis."""

import pytest

from bike_engine.core.bike import BikeConfig
from bike_engine.core.errors import InvalidConfigurationError
from bike_engine.core.rider import RiderConfig
from bike_engine.core.sensitivity import (
    DEFAULT_DELTAS,
    compute_all_bike_sensitivities,
    compute_bike_sensitivity,
)
from bike_engine.core.terrain import TerrainConfig

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _sample_rider() -> RiderConfig:
    return RiderConfig(power=250.0, rider_mass=85.0)


def _sample_bike(**overrides) -> BikeConfig:
    params = dict(
        name="Test Bike",
        moment_of_inertia=0.096,
        wheel_radius=0.34,
        bike_mass=7.5,
        rolling_resistance_coeff=0.0029,
        drag_area=0.33,
    )
    params.update(overrides)
    return BikeConfig(**params)


def _sample_terrain() -> TerrainConfig:
    return TerrainConfig(
        total_elevation_gain=200.0,
        total_distance=20.0,
        climb_fraction=0.25,
        descent_fraction=0.25,
        stop_spacing=1000.0,
    )


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_mass_sensitivity_positive() -> None:
    """A heavier bike must take longer over a hilly route."""
    sens = compute_bike_sensitivity(
        _sample_rider(), _sample_bike(), _sample_terrain(), "bike_mass"
    )
    assert sens > 0.0


def test_drag_sensitivity_positive() -> None:
    """More aerodynamic drag must cost route time."""
    sens = compute_bike_sensitivity(
        _sample_rider(), _sample_bike(), _sample_terrain(), "drag_area"
    )
    assert sens > 0.0


def test_explicit_delta_overrides_default() -> None:
    """A custom delta must still give a same-sign estimate."""
    sens = compute_bike_sensitivity(
        _sample_rider(), _sample_bike(), _sample_terrain(), "bike_mass", delta=1.0
    )
    assert sens > 0.0


def test_unknown_field_raises() -> None:
    """Only numeric bike fields can be perturbed."""
    with pytest.raises(InvalidConfigurationError, match="Unknown bike field") as exc_info:
        compute_bike_sensitivity(_sample_rider(), _sample_bike(), _sample_terrain(), "name")
    assert exc_info.value.field == "field"


def test_non_positive_delta_raises() -> None:
    """A zero delta has no span to differentiate over."""
    with pytest.raises(InvalidConfigurationError) as exc_info:
        compute_bike_sensitivity(
            _sample_rider(), _sample_bike(), _sample_terrain(), "bike_mass", delta=0.0
        )
    assert exc_info.value.field == "delta"


def test_delta_too_large_for_positive_field_raises() -> None:
    """Perturbing a strictly positive field below zero must fail."""
    with pytest.raises(InvalidConfigurationError, match="too large") as exc_info:
        compute_bike_sensitivity(
            _sample_rider(), _sample_bike(), _sample_terrain(), "wheel_radius", delta=0.5
        )
    assert exc_info.value.field == "delta"


def test_zero_inertia_is_clamped_not_rejected() -> None:
    """Fields that may be zero clamp the lower perturbation at zero."""
    sens = compute_bike_sensitivity(
        _sample_rider(),
        _sample_bike(moment_of_inertia=0.0),
        _sample_terrain(),
        "moment_of_inertia",
    )
    assert sens > 0.0


def test_all_sensitivities_cover_every_field() -> None:
    """compute_all_bike_sensitivities must return one entry per numeric field."""
    result = compute_all_bike_sensitivities(
        _sample_rider(), _sample_bike(), _sample_terrain()
    )
    assert set(result) == set(DEFAULT_DELTAS)
