"""Tests for terrain validation and segmentation into flat/climb/descent."""

import logging
import math

import pytest

from bike_engine.core.errors import InvalidConfigurationError
from bike_engine.core.terrain import CLIMB, DESCENT, FLAT, TerrainConfig, split_terrain

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _sample_terrain(**overrides) -> TerrainConfig:
    params = dict(
        total_elevation_gain=7800.0,
        total_distance=1100.0,
        climb_fraction=0.33,
        descent_fraction=0.33,
        stop_spacing=2000.0,
    )
    params.update(overrides)
    return TerrainConfig(**params)


# ---------------------------------------------------------------------------
# split_terrain
# ---------------------------------------------------------------------------


def test_split_order_and_distances() -> None:
    """Sections must be flat, climb, descent with distances in metres."""
    flat, climb, descent = split_terrain(_sample_terrain())
    assert (flat.terrain_class, climb.terrain_class, descent.terrain_class) == (
        FLAT,
        CLIMB,
        DESCENT,
    )
    assert climb.distance == pytest.approx(363_000.0)
    assert descent.distance == pytest.approx(363_000.0)
    assert flat.distance == pytest.approx(374_000.0)


def test_split_grade_angles() -> None:
    """Climb and descent angles must be atan(+/-gain / distance); flat is zero."""
    flat, climb, descent = split_terrain(_sample_terrain())
    assert flat.grade_angle == 0.0
    assert climb.grade_angle == pytest.approx(math.atan(7800.0 / 363_000.0))
    assert descent.grade_angle == pytest.approx(-math.atan(7800.0 / 363_000.0))


def test_split_fractional_segment_counts() -> None:
    """Segment counts must be distance / stop_spacing without rounding."""
    flat, climb, descent = split_terrain(_sample_terrain(stop_spacing=1500.0))
    assert flat.segment_count == pytest.approx(374_000.0 / 1500.0)
    assert climb.segment_count == pytest.approx(242.0)
    assert flat.segment_count != round(flat.segment_count)


def test_split_skips_zero_distance_classes() -> None:
    """Classes with zero distance must have no angle and zero segments."""
    flat, climb, descent = split_terrain(
        _sample_terrain(climb_fraction=0.0, descent_fraction=0.0)
    )
    assert flat.distance == pytest.approx(1_100_000.0)
    for section in (climb, descent):
        assert section.is_empty
        assert section.grade_angle is None
        assert section.segment_count == 0.0


def test_split_degenerate_fractions_clamp_flat_to_zero() -> None:
    """Climb + descent above 1 must give zero flat distance, not an error."""
    flat, climb, descent = split_terrain(
        _sample_terrain(climb_fraction=0.7, descent_fraction=0.6)
    )
    assert flat.distance == 0.0
    assert flat.is_empty
    assert flat.segment_count == 0.0
    assert climb.distance == pytest.approx(770_000.0)
    assert descent.distance == pytest.approx(660_000.0)


@pytest.mark.parametrize("climb, descent", [(0.33, 0.67), (0.7, 0.3), (0.1, 0.9)])
def test_split_fractions_summing_to_one_leave_no_flat(
    climb: float, descent: float, caplog: pytest.LogCaptureFixture
) -> None:
    """Fractions that add up to 1 must give exactly zero flat distance, silently."""
    with caplog.at_level(logging.WARNING, logger="bike_engine.core.terrain"):
        flat, _, _ = split_terrain(
            _sample_terrain(climb_fraction=climb, descent_fraction=descent)
        )
    assert flat.distance == 0.0
    assert flat.is_empty
    assert flat.grade_angle is None
    assert flat.segment_count == 0.0
    assert caplog.records == []


def test_split_degenerate_fractions_log_warning(caplog: pytest.LogCaptureFixture) -> None:
    """A sum clearly above 1 must be reported at WARNING."""
    with caplog.at_level(logging.WARNING, logger="bike_engine.core.terrain"):
        split_terrain(_sample_terrain(climb_fraction=0.7, descent_fraction=0.6))
    assert any("exceeds 1" in r.getMessage() for r in caplog.records)


def test_split_zero_elevation_gain_gives_flat_climbs() -> None:
    """Without elevation gain the climb and descent angles are zero."""
    _, climb, descent = split_terrain(_sample_terrain(total_elevation_gain=0.0))
    assert climb.grade_angle == 0.0
    assert descent.grade_angle == 0.0


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "field, value",
    [
        ("total_distance", 0.0),
        ("total_distance", -5.0),
        ("stop_spacing", 0.0),
        ("total_elevation_gain", -1.0),
        ("climb_fraction", 1.2),
        ("descent_fraction", -0.1),
        ("total_distance", float("inf")),
    ],
)
def test_terrain_rejects_invalid_values(field: str, value: float) -> None:
    """Invalid terrain values must raise naming the offending field."""
    with pytest.raises(InvalidConfigurationError, match=field) as exc_info:
        _sample_terrain(**{field: value})
    assert exc_info.value.field == field


def test_terrain_is_immutable() -> None:
    """TerrainConfig must be a frozen value record."""
    terrain = _sample_terrain()
    with pytest.raises(AttributeError):
        terrain.total_distance = 10.0  # type: ignore[misc]
