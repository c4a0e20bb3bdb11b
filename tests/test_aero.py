"""Tests for the drag area estimator."""

import pytest

from bike_engine.core.aero import (
    CDA_REFERENCE,
    ESTIMATION_METHODS,
    body_mass_index,
    drag_category,
    estimate_drag_area,
)
from bike_engine.core.bike import BikeConfig
from bike_engine.core.errors import InvalidConfigurationError

# ---------------------------------------------------------------------------
# estimate_drag_area
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("position", sorted(CDA_REFERENCE))
def test_reference_rider_gets_reference_value(position: str) -> None:
    """A 178 cm / 75 kg rider must get the table value from the scaling methods."""
    for method in ("lookup", "height", "weight", "combined"):
        assert estimate_drag_area(178.0, 75.0, position, method) == pytest.approx(
            CDA_REFERENCE[position]
        )


def test_height_scales_with_square() -> None:
    """Height scaling must use the square of the height ratio."""
    cda = estimate_drag_area(189.0, 75.0, "road-drops", "height")
    assert cda == pytest.approx(0.295 * (189.0 / 178.0) ** 2)


def test_weight_scales_with_power_point_three() -> None:
    """Weight scaling must use a 0.3 exponent."""
    cda = estimate_drag_area(178.0, 90.0, "triathlon", "weight")
    assert cda == pytest.approx(0.215 * (90.0 / 75.0) ** 0.3)


def test_combined_applies_both_factors() -> None:
    """The combined method multiplies the height and weight factors."""
    cda = estimate_drag_area(170.0, 65.0, "endurance", "combined")
    expected = 0.35 * (170.0 / 178.0) ** 2 * (65.0 / 75.0) ** 0.3
    assert cda == pytest.approx(expected)


def test_bmi_method_uses_bmi_ratio() -> None:
    """The BMI method scales by (bmi / 23) ** 0.3."""
    bmi = body_mass_index(180.0, 81.0)
    assert bmi == pytest.approx(25.0)
    cda = estimate_drag_area(180.0, 81.0, "road-aero", "bmi")
    assert cda == pytest.approx(0.245 * (25.0 / 23.0) ** 0.3)


def test_offset_method_starts_from_road_drops() -> None:
    """The offset method adds the position offset to the scaled road-drops value."""
    assert estimate_drag_area(178.0, 75.0, "triathlon", "offset") == pytest.approx(0.23)
    assert estimate_drag_area(178.0, 75.0, "endurance", "offset") == pytest.approx(0.325)


def test_every_method_feeds_a_valid_bike() -> None:
    """Each estimate must be accepted as a BikeConfig drag area."""
    for method in ESTIMATION_METHODS:
        cda = estimate_drag_area(172.0, 68.0, "road-drops", method)
        bike = BikeConfig(
            name="Estimated",
            moment_of_inertia=0.096,
            wheel_radius=0.34,
            bike_mass=7.5,
            rolling_resistance_coeff=0.0029,
            drag_area=cda,
        )
        assert bike.drag_area == cda


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "kwargs, field",
    [
        ({"height_cm": 0.0}, "height_cm"),
        ({"weight_kg": -70.0}, "weight_kg"),
        ({"position": "recumbent"}, "position"),
        ({"method": "wind-tunnel"}, "method"),
    ],
)
def test_invalid_inputs_raise(kwargs: dict, field: str) -> None:
    """Bad body size, position or method must name the field."""
    params = {"height_cm": 178.0, "weight_kg": 75.0, **kwargs}
    with pytest.raises(InvalidConfigurationError) as exc_info:
        estimate_drag_area(**params)
    assert exc_info.value.field == field


def test_non_positive_estimate_raises() -> None:
    """A tiny rider in a tuck would get a negative offset estimate."""
    with pytest.raises(InvalidConfigurationError, match="not positive"):
        estimate_drag_area(60.0, 20.0, "triathlon", "offset")


# ---------------------------------------------------------------------------
# drag_category
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "cda, label",
    [
        (0.19, "Elite Pro"),
        (0.20, "Elite Pro"),
        (0.24, "Competitive"),
        (0.295, "Recreational"),
        (0.35, "Comfort"),
        (0.40, "Upright"),
    ],
)
def test_drag_category(cda: float, label: str) -> None:
    """Categories must follow the inclusive upper bounds."""
    assert drag_category(cda) == label
