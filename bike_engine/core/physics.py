"""Deterministic equation of motion for the bike simulation engine."""

from __future__ import annotations

import math

import numpy as np

from bike_engine.core.errors import require_positive

G: float = 9.81  # m/s²
AIR_DENSITY: float = 1.2041  # kg/m³ at 20 °C, sea level
MIN_VELOCITY: float = 0.001  # m/s; floor for the power term and start of every run


def acceleration(
    power: float,
    velocity: float,
    total_mass: float,
    moment_of_inertia: float,
    wheel_radius: float,
    rolling_resistance_coeff: float,
    drag_area: float,
    grade_angle: float,
) -> float:
    """Calculate the instantaneous acceleration of bike and rider.

    The rider's constant power acts against rolling resistance,
    aerodynamic drag and the gravity component along the road::

        effective_mass = total_mass + moment_of_inertia / wheel_radius**2
        acceleration   = (power / v
                          - Crr * m * g * cos(alpha)
                          - 0.5 * CdA * rho * v**2
                          - m * g * sin(alpha)) / effective_mass

    ``v`` is floored at :data:`MIN_VELOCITY` since a finite power cannot
    be produced at a dead stop.

    Args:
        power: Rider power in watts.
        velocity: Current road speed in m/s.
        total_mass: Rider plus bike mass in kg.
        moment_of_inertia: Wheel inertia in kg·m².
        wheel_radius: Wheel radius in metres.
        rolling_resistance_coeff: Rolling resistance coefficient.
        drag_area: CdA in m².
        grade_angle: Road angle in radians (negative downhill).

    Returns:
        Acceleration in m/s².
    """
    v: float = max(velocity, MIN_VELOCITY)
    effective_mass: float = total_mass + moment_of_inertia / wheel_radius**2
    weight: float = total_mass * G
    normal_force: float = weight * math.cos(grade_angle)
    gravity_along_road: float = weight * math.sin(grade_angle)

    drive_force: float = power / v
    rolling_force: float = rolling_resistance_coeff * normal_force
    drag_force: float = 0.5 * drag_area * AIR_DENSITY * v * v

    return (drive_force - rolling_force - drag_force - gravity_along_road) / effective_mass


def resistance_forces(
    power: float,
    velocity: float,
    total_mass: float,
    rolling_resistance_coeff: float,
    drag_area: float,
    grade_angle: float,
) -> dict[str, float]:
    """Break the equation of motion down into its force terms.

    Args:
        power: Rider power in watts.
        velocity: Road speed in m/s (floored like :func:`acceleration`).
        total_mass: Rider plus bike mass in kg.
        rolling_resistance_coeff: Rolling resistance coefficient.
        drag_area: CdA in m².
        grade_angle: Road angle in radians.

    Returns:
        Dictionary with keys (all in newtons):
            drive    -- Propulsive force ``power / v``.
            rolling  -- Rolling resistance.
            aero     -- Aerodynamic drag.
            gravity  -- Gravity along the road (negative downhill).
            net      -- ``drive - rolling - aero - gravity``.
    """
    v: float = max(velocity, MIN_VELOCITY)
    weight: float = total_mass * G
    drive: float = power / v
    rolling: float = rolling_resistance_coeff * weight * math.cos(grade_angle)
    aero: float = 0.5 * drag_area * AIR_DENSITY * v * v
    gravity: float = weight * math.sin(grade_angle)
    return {
        "drive": drive,
        "rolling": rolling,
        "aero": aero,
        "gravity": gravity,
        "net": drive - rolling - aero - gravity,
    }


def terminal_velocity(
    power: float,
    total_mass: float,
    rolling_resistance_coeff: float,
    drag_area: float,
    grade_angle: float = 0.0,
) -> float:
    """Solve the steady-state power balance for the road speed.

    At terminal velocity the acceleration is zero, which reduces to the
    cubic::

        0.5 * rho * CdA * v**3 + m * g * (Crr * cos(alpha) + sin(alpha)) * v - P = 0

    The cubic has exactly one positive real root for ``P > 0`` and
    ``CdA > 0``.  Wheel inertia does not affect the result.

    Returns:
        Terminal velocity in m/s.

    Raises:
        InvalidConfigurationError: If power, mass or drag area is not
            positive.
    """
    require_positive("power", power)
    require_positive("total_mass", total_mass)
    require_positive("drag_area", drag_area)

    cubic: float = 0.5 * AIR_DENSITY * drag_area
    linear: float = (
        total_mass
        * G
        * (rolling_resistance_coeff * math.cos(grade_angle) + math.sin(grade_angle))
    )
    roots = np.roots([cubic, 0.0, linear, -power])
    real_positive = [
        float(r.real) for r in roots if abs(r.imag) < 1e-9 and r.real > 0.0
    ]
    return max(real_positive)
