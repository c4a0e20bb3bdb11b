"""Trajectory integration for the bike simulation engine.

Integrates the coupled first-order system::

    dv/dt = acceleration(P, v, m, I, r, Crr, CdA, alpha)
    dx/dt = v

from ``v(0) = MIN_VELOCITY`` and ``x(0) = 0`` with an adaptive embedded
Runge-Kutta solver, then samples the dense solution on a regular time
grid.  Each run is independent; a new grade needs a new run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from scipy.integrate import solve_ivp

from bike_engine.core.bike import BikeConfig
from bike_engine.core.errors import IntegrationError, require_finite, require_positive
from bike_engine.core.physics import MIN_VELOCITY, acceleration
from bike_engine.core.rider import RiderConfig

logger = logging.getLogger(__name__)

ABSOLUTE_TOLERANCE: float = 1e-8
RELATIVE_TOLERANCE: float = 1e-6
DEFAULT_MAX_TIME: float = 600.0  # s
DEFAULT_SAMPLE_STEP: float = 0.1  # s


@dataclass(frozen=True)
class SimulationPoint:
    """One sample of a trajectory.

    Attributes:
        time: Elapsed time in seconds.
        velocity: Road speed in m/s.
        distance: Distance covered since the start in metres.
    """

    time: float
    velocity: float
    distance: float


def _sample_times(max_time: float, sample_step: float) -> np.ndarray:
    """Return ``i * sample_step`` for every ``i`` with ``i * sample_step <= max_time``."""
    # Small slack so that e.g. 600 / 0.1 does not lose its last sample to rounding.
    count: int = int(np.floor(max_time / sample_step + 1e-9)) + 1
    return np.arange(count, dtype=float) * sample_step


def simulate(
    rider: RiderConfig,
    bike: BikeConfig,
    grade_angle: float = 0.0,
    max_time: float = DEFAULT_MAX_TIME,
    sample_step: float = DEFAULT_SAMPLE_STEP,
) -> tuple[SimulationPoint, ...]:
    """Simulate an acceleration from near rest on a constant grade.

    The solver (``RK45``) controls its own step size to stay within
    ``atol = 1e-8`` and ``rtol = 1e-6`` on ``[v, x]``; the regular
    output grid only determines where the dense solution is sampled.

    Args:
        rider: Rider power and mass.
        bike: Bicycle configuration.
        grade_angle: Road angle in radians (negative downhill).
        max_time: Simulated horizon in seconds (> 0).
        sample_step: Spacing of output samples in seconds (> 0).

    Returns:
        Samples in strictly ascending time, starting at ``t = 0``.
        Velocity is never negative and distance never decreases.

    Raises:
        InvalidConfigurationError: If the grade, horizon or step is
            not usable.
        IntegrationError: If the solver does not converge or produces
            non-finite values.
    """
    require_finite("grade_angle", grade_angle)
    require_positive("max_time", max_time)
    require_positive("sample_step", sample_step)

    power: float = rider.power
    total_mass: float = rider.rider_mass + bike.bike_mass

    def dydt(_t: float, y: np.ndarray) -> list[float]:
        a: float = acceleration(
            power,
            y[0],
            total_mass,
            bike.moment_of_inertia,
            bike.wheel_radius,
            bike.rolling_resistance_coeff,
            bike.drag_area,
            grade_angle,
        )
        return [a, max(y[0], 0.0)]

    t_eval: np.ndarray = _sample_times(max_time, sample_step)
    t_end: float = float(t_eval[-1])

    if t_end == 0.0:
        return (SimulationPoint(time=0.0, velocity=MIN_VELOCITY, distance=0.0),)

    solution = solve_ivp(
        dydt,
        (0.0, t_end),
        [MIN_VELOCITY, 0.0],
        method="RK45",
        t_eval=t_eval,
        atol=ABSOLUTE_TOLERANCE,
        rtol=RELATIVE_TOLERANCE,
    )
    if not solution.success:
        raise IntegrationError(
            f"Trajectory integration failed for bike '{bike.name}' at grade "
            f"{grade_angle:.5f} rad: {solution.message}"
        )
    if not np.all(np.isfinite(solution.y)):
        raise IntegrationError(
            f"Trajectory integration for bike '{bike.name}' produced non-finite values."
        )

    logger.debug(
        "bike=%s grade=%.5f rad: %d samples, %d rhs evaluations, v_end=%.3f m/s",
        bike.name,
        grade_angle,
        len(solution.t),
        solution.nfev,
        solution.y[0][-1],
    )

    velocities: np.ndarray = np.maximum(solution.y[0], 0.0)
    distances: np.ndarray = np.maximum.accumulate(np.maximum(solution.y[1], 0.0))

    return tuple(
        SimulationPoint(time=float(t), velocity=float(v), distance=float(x))
        for t, v, x in zip(t_eval, velocities, distances)
    )


def time_at_distance(
    points: Sequence[SimulationPoint],
    target_distance: float,
) -> float:
    """Find the time at which a trajectory first reaches a distance.

    Linear interpolation between the first bracketing pair of samples::

        t = t_i + (target - d_i) / (d_{i+1} - d_i) * (t_{i+1} - t_i)

    Targets at or before the first sample return the first sample's
    time.  Targets beyond the simulated horizon return the last sample's
    time, which underestimates the true time; this is logged as a
    warning rather than raised.

    Args:
        points: Samples in ascending time and distance.
        target_distance: Distance to reach in metres.

    Returns:
        Time in seconds.

    Raises:
        ValueError: If *points* is empty.
    """
    if not points:
        raise ValueError("points must not be empty.")

    first: SimulationPoint = points[0]
    if target_distance <= first.distance:
        return first.time

    for current, nxt in zip(points, points[1:]):
        if current.distance <= target_distance <= nxt.distance:
            span: float = nxt.distance - current.distance
            if span <= 0.0:
                return current.time
            ratio: float = (target_distance - current.distance) / span
            return current.time + ratio * (nxt.time - current.time)

    last: SimulationPoint = points[-1]
    logger.warning(
        "target distance %.1f m not reached within %.1f s (covered %.1f m); "
        "returning horizon time",
        target_distance,
        last.time,
        last.distance,
    )
    return last.time
