"""Tests for the dashboard's computation helpers (no Streamlit session needed)."""

import time

import numpy as np
import pytest

import dashboard.app as app
from bike_engine.core.bike import BikeConfig
from bike_engine.core.comparator import ComparisonResult
from bike_engine.core.errors import IntegrationError
from bike_engine.core.rider import RiderConfig

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _sample_rider() -> RiderConfig:
    return RiderConfig(power=250.0, rider_mass=85.0)


def _bike_values(name: str = "Bike 1", **overrides) -> dict:
    values = dict(
        name=name,
        moment_of_inertia=0.096,
        wheel_radius=0.29,
        bike_mass=11.0,
        rolling_resistance_coeff=0.0029,
        drag_area=0.31,
    )
    values.update(overrides)
    return values


def _terrain_values() -> dict:
    return dict(
        total_elevation_gain=100.0,
        total_distance=10.0,
        climb_fraction=0.2,
        descent_fraction=0.2,
        stop_spacing=1000.0,
    )


def _stale_state() -> dict:
    return {"result": "old", "curves": "old", "inputs": "old", "unrelated": 1}


# ---------------------------------------------------------------------------
# _refresh_results
# ---------------------------------------------------------------------------


def test_successful_run_stores_result() -> None:
    """A valid run must replace the stored result, curves and inputs."""
    state = _stale_state()
    error = app._refresh_results(
        state,
        {"power": 250.0, "rider_mass": 85.0},
        _terrain_values(),
        [_bike_values("Bike 1"), _bike_values("Bike 2", drag_area=0.33)],
    )
    assert error is None
    assert isinstance(state["result"], ComparisonResult)
    assert set(state["curves"]["index"]) == {0, 1}
    rider, bikes, _ = state["inputs"]
    assert rider.power == 250.0
    assert [b.name for b in bikes] == ["Bike 1", "Bike 2"]


def test_invalid_input_clears_previous_result() -> None:
    """After invalid input the old result must not remain on display."""
    state = _stale_state()
    error = app._refresh_results(
        state,
        {"power": -10.0, "rider_mass": 85.0},
        _terrain_values(),
        [_bike_values(), _bike_values()],
    )
    assert error is not None and "power" in error
    assert "result" not in state
    assert "curves" not in state
    assert "inputs" not in state
    assert state["unrelated"] == 1


def test_invalid_bike_name_clears_previous_result() -> None:
    """An emptied bike name is reported instead of crashing the page."""
    state = _stale_state()
    error = app._refresh_results(
        state,
        {"power": 250.0, "rider_mass": 85.0},
        _terrain_values(),
        [_bike_values(""), _bike_values()],
    )
    assert error is not None and "name" in error
    assert "result" not in state


def test_integration_failure_clears_previous_result(monkeypatch: pytest.MonkeyPatch) -> None:
    """A solver failure must not leave the old result on display."""

    def failing_run(*args):
        raise IntegrationError("step size too small")

    monkeypatch.setattr(app, "_run_with_budget", failing_run)
    state = _stale_state()
    error = app._refresh_results(
        state,
        {"power": 250.0, "rider_mass": 85.0},
        _terrain_values(),
        [_bike_values(), _bike_values()],
    )
    assert error is not None and "step size too small" in error
    assert "result" not in state


def test_timeout_keeps_previous_result(monkeypatch: pytest.MonkeyPatch) -> None:
    """Only a timeout keeps the last completed result on screen."""

    def slow_run(*args):
        raise TimeoutError("Comparison exceeded the 60 s budget.")

    monkeypatch.setattr(app, "_run_with_budget", slow_run)
    state = _stale_state()
    error = app._refresh_results(
        state,
        {"power": 250.0, "rider_mass": 85.0},
        _terrain_values(),
        [_bike_values(), _bike_values()],
    )
    assert error is not None and "last completed result" in error
    assert state["result"] == "old"


# ---------------------------------------------------------------------------
# _run_with_budget
# ---------------------------------------------------------------------------


def test_budget_covers_curve_computation(monkeypatch: pytest.MonkeyPatch) -> None:
    """All work submitted to the budgeted future must be cut off on timeout."""

    def slow_compute(*args):
        time.sleep(0.5)

    monkeypatch.setattr(app, "_compute", slow_compute)
    monkeypatch.setattr(app, "_COMPUTE_BUDGET_S", 0.01)
    bike = BikeConfig(**_bike_values())
    with pytest.raises(TimeoutError, match="budget"):
        app._run_with_budget(_sample_rider(), bike, bike, None)


# ---------------------------------------------------------------------------
# Chart frames
# ---------------------------------------------------------------------------


def test_curve_frame_separates_bikes_with_same_name() -> None:
    """Two bikes sharing a name must still yield one monotone curve each."""
    bikes = [
        BikeConfig(**_bike_values("Same")),
        BikeConfig(**_bike_values("Same", drag_area=0.25)),
    ]
    frame = app._curve_frame(_sample_rider(), bikes)
    for index in (0, 1):
        curve = frame[frame["index"] == index]
        assert len(curve) == int(app._CURVE_TIME / app._CURVE_STEP) + 1
        assert np.all(np.diff(curve["time_s"].to_numpy()) > 0.0)


def test_force_frame_terms() -> None:
    """Force rows must expose every term, with drive equal to P / v."""
    bike = BikeConfig(**_bike_values())
    frame = app._force_frame(_sample_rider(), bike, 0.03)
    assert {"speed_kmh", "drive", "rolling", "aero", "gravity", "net"} <= set(frame.columns)
    first = frame.iloc[0]
    assert first["drive"] == pytest.approx(250.0 / (first["speed_kmh"] / 3.6))
    assert np.all(frame["gravity"] > 0.0)
    assert np.all(np.diff(frame["aero"].to_numpy()) > 0.0)
