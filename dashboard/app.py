"""Bike Performance Comparator Dashboard.

Interactive comparison of two bicycle configurations built with
Streamlit and Plotly.  Shows route times, cruising speeds, acceleration
curves, per-terrain breakdown, force balance and parameter
sensitivities.

Launch with::

    streamlit run dashboard/app.py
"""

from __future__ import annotations

from collections.abc import MutableMapping
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from bike_engine.config import load_presets
from bike_engine.core.aero import (
    ESTIMATION_METHODS,
    POSITION_LABELS,
    drag_category,
    estimate_drag_area,
)
from bike_engine.core.bike import BikeConfig
from bike_engine.core.comparator import ComparisonResult, compare_bikes
from bike_engine.core.errors import IntegrationError, InvalidConfigurationError
from bike_engine.core.physics import resistance_forces, terminal_velocity
from bike_engine.core.rider import RiderConfig
from bike_engine.core.sensitivity import compute_all_bike_sensitivities
from bike_engine.core.terrain import TerrainConfig, split_terrain
from bike_engine.core.trajectory import simulate
from bike_engine.core.wheel import WheelComponents, wheel_inertia

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

_COMPUTE_BUDGET_S: float = 60.0
_CURVE_TIME: float = 300.0  # s
_CURVE_STEP: float = 5.0  # s
_FORCE_SPEEDS_MS: np.ndarray = np.linspace(1.0, 20.0, 60)
_COLORS: tuple[str, str] = ("#3b82f6", "#a855f7")

# Session keys written by a successful comparison.
_RESULT_KEYS: tuple[str, ...] = ("result", "curves", "inputs")

_SENSITIVITY_LABELS: dict[str, str] = {
    "moment_of_inertia": "s per kg·m²",
    "wheel_radius": "s per m",
    "bike_mass": "s per kg",
    "rolling_resistance_coeff": "s per unit Crr",
    "drag_area": "s per m²",
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _bike_inputs(column, default: BikeConfig, key: str) -> dict[str, Any]:
    """Render editable fields for one bike and return the raw values."""
    with column:
        return {
            "name": st.text_input("Name", value=default.name, key=f"{key}_name"),
            "moment_of_inertia": st.number_input(
                "Moment of inertia (kg·m²)",
                min_value=0.0,
                max_value=1.0,
                value=float(default.moment_of_inertia),
                step=0.001,
                format="%.3f",
                key=f"{key}_inertia",
            ),
            "wheel_radius": st.number_input(
                "Wheel radius (m)",
                min_value=0.1,
                max_value=0.5,
                value=float(default.wheel_radius),
                step=0.01,
                key=f"{key}_radius",
            ),
            "bike_mass": st.number_input(
                "Bike mass (kg)",
                min_value=1.0,
                max_value=40.0,
                value=float(default.bike_mass),
                step=0.1,
                key=f"{key}_mass",
            ),
            "rolling_resistance_coeff": st.number_input(
                "Rolling resistance",
                min_value=0.0,
                max_value=0.02,
                value=float(default.rolling_resistance_coeff),
                step=0.0001,
                format="%.4f",
                key=f"{key}_crr",
            ),
            "drag_area": st.number_input(
                "Drag area CdA (m²)",
                min_value=0.05,
                max_value=1.0,
                value=float(default.drag_area),
                step=0.01,
                key=f"{key}_cda",
            ),
        }


def _curve_frame(rider: RiderConfig, bikes: list[BikeConfig]) -> pd.DataFrame:
    """Flat-ground acceleration curves for both bikes in long format.

    Rows are tagged with the bike's position so that two bikes sharing
    a name stay separable.
    """
    rows: list[dict] = []
    for index, bike in enumerate(bikes):
        for p in simulate(rider, bike, 0.0, _CURVE_TIME, _CURVE_STEP):
            rows.append(
                {
                    "index": index,
                    "bike": bike.name,
                    "time_s": p.time,
                    "velocity_kmh": p.velocity * 3.6,
                    "distance_m": p.distance,
                }
            )
    return pd.DataFrame(rows)


def _force_frame(rider: RiderConfig, bike: BikeConfig, grade_angle: float) -> pd.DataFrame:
    """Force terms of the equation of motion over a range of speeds."""
    total_mass: float = rider.rider_mass + bike.bike_mass
    rows: list[dict] = []
    for v in _FORCE_SPEEDS_MS:
        forces = resistance_forces(
            rider.power,
            float(v),
            total_mass,
            bike.rolling_resistance_coeff,
            bike.drag_area,
            grade_angle,
        )
        rows.append({"speed_kmh": float(v) * 3.6, **forces})
    return pd.DataFrame(rows)


def _compute(
    rider: RiderConfig,
    bike_a: BikeConfig,
    bike_b: BikeConfig,
    terrain: TerrainConfig,
) -> tuple[ComparisonResult, pd.DataFrame]:
    result = compare_bikes(rider, bike_a, bike_b, terrain, True)
    return result, _curve_frame(rider, [bike_a, bike_b])


def _run_with_budget(
    rider: RiderConfig,
    bike_a: BikeConfig,
    bike_b: BikeConfig,
    terrain: TerrainConfig,
) -> tuple[ComparisonResult, pd.DataFrame]:
    """Run the comparison and the acceleration curves under one wall-clock budget.

    Raises:
        TimeoutError: If the work exceeds the budget.
    """
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(_compute, rider, bike_a, bike_b, terrain)
    try:
        return future.result(timeout=_COMPUTE_BUDGET_S)
    except FutureTimeout:
        raise TimeoutError(
            f"Comparison exceeded the {_COMPUTE_BUDGET_S:.0f} s budget."
        ) from None
    finally:
        executor.shutdown(wait=False)


def _discard_results(state: MutableMapping) -> None:
    for key in _RESULT_KEYS:
        if key in state:
            del state[key]


def _refresh_results(
    state: MutableMapping,
    rider_values: dict[str, Any],
    terrain_values: dict[str, Any],
    bike_values: list[dict[str, Any]],
) -> str | None:
    """Recompute the comparison into *state*.

    Invalid input and solver failures clear the previous result so it is
    never shown for inputs it does not belong to.  A timeout keeps the
    last completed result on screen.

    Returns:
        An error message to display, or ``None`` on success.
    """
    try:
        rider = RiderConfig(**rider_values)
        terrain = TerrainConfig(**terrain_values)
        bikes = [BikeConfig(**values) for values in bike_values]
        result, curves = _run_with_budget(rider, bikes[0], bikes[1], terrain)
    except InvalidConfigurationError as e:
        _discard_results(state)
        return f"Invalid input for '{e.field}': {e}"
    except IntegrationError as e:
        _discard_results(state)
        return f"Calculation failed: {e}"
    except TimeoutError as e:
        return f"{e} Showing the last completed result."

    state["result"] = result
    state["curves"] = curves
    state["inputs"] = (rider, bikes, terrain)
    return None


# ---------------------------------------------------------------------------
# Streamlit app
# ---------------------------------------------------------------------------


def main() -> None:  # noqa: C901
    """Entry point for the Streamlit dashboard."""
    st.set_page_config(page_title="Bike Performance Comparator", layout="wide")
    st.title("Bike Performance Comparator")
    st.caption(
        "Constant-power acceleration model over a stop-and-go route of flat, "
        "climbing and descending segments."
    )

    presets = load_presets()
    preset_names = list(presets.bikes)

    # ── Sidebar ──────────────────────────────────────────────────────────
    st.sidebar.header("Rider")
    power = st.sidebar.number_input(
        "Power (W)", min_value=1.0, max_value=1000.0, value=presets.rider.power
    )
    rider_mass = st.sidebar.number_input(
        "Rider mass (kg)", min_value=1.0, max_value=200.0, value=presets.rider.rider_mass
    )

    st.sidebar.header("Route")
    t = presets.terrain
    gain = st.sidebar.number_input(
        "Total elevation gain (m)", min_value=0.0, value=t.total_elevation_gain
    )
    distance = st.sidebar.number_input(
        "Total distance (km)", min_value=0.1, value=t.total_distance
    )
    climb = st.sidebar.slider("Climbing fraction", 0.0, 1.0, t.climb_fraction, 0.01)
    descent = st.sidebar.slider("Descending fraction", 0.0, 1.0, t.descent_fraction, 0.01)
    spacing = st.sidebar.number_input(
        "Distance between stops (m)", min_value=1.0, value=t.stop_spacing
    )
    if climb + descent > 1.0 + 1e-9:
        st.sidebar.warning("Climb + descent exceed 1.0; flat distance is treated as zero.")

    # ── Bikes ────────────────────────────────────────────────────────────
    st.header("1 -- Bikes")
    col_a, col_b = st.columns(2)
    preset_a = col_a.selectbox("Preset A", preset_names, index=0)
    preset_b = col_b.selectbox(
        "Preset B", preset_names, index=min(1, len(preset_names) - 1)
    )

    with st.expander("Wheel inertia helper"):
        c1, c2, c3 = st.columns(3)
        try:
            components = WheelComponents(
                rim_mass_g=c1.number_input("Rim mass (g)", min_value=0.0, value=300.0),
                rim_diameter_mm=c1.number_input(
                    "Rim diameter (mm)", min_value=100.0, value=622.0
                ),
                rim_height_mm=c2.number_input("Rim height (mm)", min_value=0.0, value=35.0),
                tire_mass_g=c2.number_input("Tire mass (g)", min_value=0.0, value=200.0),
                tire_thickness_mm=c3.number_input(
                    "Tire thickness (mm)", min_value=0.0, value=34.0
                ),
                spokes_mass_g=c3.number_input("Spokes mass (g)", min_value=0.0, value=160.0),
            )
        except InvalidConfigurationError as e:
            st.error(f"Invalid wheel geometry: {e}")
        else:
            inertia = wheel_inertia(components)
            st.write(
                f"Per wheel: **{inertia.per_wheel:.4f} kg·m²** -- "
                f"both wheels: **{inertia.total:.4f} kg·m²**"
            )

    with st.expander("Drag area (CdA) helper"):
        c1, c2 = st.columns(2)
        height_cm = c1.number_input(
            "Rider height (cm)", min_value=100.0, max_value=230.0, value=178.0
        )
        weight_kg = c1.number_input(
            "Rider weight (kg)", min_value=30.0, max_value=200.0, value=75.0
        )
        position = c2.selectbox(
            "Position",
            list(POSITION_LABELS),
            format_func=POSITION_LABELS.get,
        )
        method = c2.selectbox("Method", ESTIMATION_METHODS, index=4)
        try:
            cda = estimate_drag_area(height_cm, weight_kg, position, method)
        except InvalidConfigurationError as e:
            st.error(f"Cannot estimate drag area: {e}")
        else:
            st.write(f"Estimated CdA: **{cda:.3f} m²** ({drag_category(cda)})")

    with st.expander("Advanced bike parameters", expanded=False):
        col_adv_a, col_adv_b = st.columns(2)
        bike_values = [
            _bike_inputs(col_adv_a, presets.bike(preset_a), "a"),
            _bike_inputs(col_adv_b, presets.bike(preset_b), "b"),
        ]

    # ── Run ──────────────────────────────────────────────────────────────
    if st.button("Run Comparison"):
        with st.spinner("Integrating trajectories..."):
            error = _refresh_results(
                st.session_state,
                {"power": power, "rider_mass": rider_mass},
                {
                    "total_elevation_gain": gain,
                    "total_distance": distance,
                    "climb_fraction": climb,
                    "descent_fraction": descent,
                    "stop_spacing": spacing,
                },
                bike_values,
            )
        if error is not None:
            st.error(error)

    if "result" not in st.session_state:
        st.info('Configure rider, route and bikes, then press "Run Comparison".')
        return

    result: ComparisonResult = st.session_state["result"]
    curves: pd.DataFrame = st.session_state["curves"]
    rider, bikes, terrain = st.session_state["inputs"]

    # ── Section 2: Summary ───────────────────────────────────────────────
    st.header("2 -- Result")
    cols = st.columns(3)
    for col, bike_result in zip(cols, result.per_bike):
        col.metric(
            bike_result.name,
            f"{bike_result.total_time / 3600:.2f} h",
            f"{bike_result.final_velocity:.1f} km/h cruising",
            delta_color="off",
        )
    diff = result.time_difference_minutes
    cols[2].metric(
        "Advantage",
        f"{abs(diff):.1f} min",
        f"{result.faster} faster" if result.faster else "tie",
        delta_color="off",
    )

    fig_bar = go.Figure()
    winner = 0 if diff > 0.0 else 1 if diff < 0.0 else None
    for i, bike_result in enumerate(result.per_bike):
        advantage = abs(diff) if i == winner else 0.0
        fig_bar.add_trace(
            go.Bar(
                name=bike_result.name,
                x=["Total time (min)", "Final velocity (km/h)", "Time advantage (min)"],
                y=[bike_result.total_time / 60, bike_result.final_velocity, advantage],
                marker_color=_COLORS[i],
            )
        )
    fig_bar.update_layout(title="Performance Comparison", barmode="group", height=380)
    st.plotly_chart(fig_bar, use_container_width=True)

    # ── Section 3: Acceleration curves ───────────────────────────────────
    st.header("3 -- Acceleration From Rest (flat)")
    col_v, col_d = st.columns(2)
    fig_v = go.Figure()
    fig_d = go.Figure()
    for i, bike in enumerate(bikes):
        frame = curves[curves["index"] == i]
        fig_v.add_trace(
            go.Scatter(
                x=frame["time_s"], y=frame["velocity_kmh"], name=bike.name,
                line=dict(color=_COLORS[i]),
            )
        )
        fig_d.add_trace(
            go.Scatter(
                x=frame["time_s"], y=frame["distance_m"], name=bike.name,
                line=dict(color=_COLORS[i]),
            )
        )
        v_term = terminal_velocity(
            rider.power,
            rider.rider_mass + bike.bike_mass,
            bike.rolling_resistance_coeff,
            bike.drag_area,
        )
        fig_v.add_hline(y=v_term * 3.6, line_dash="dot", line_color=_COLORS[i])
    fig_v.update_layout(
        title="Velocity", xaxis_title="Time (s)", yaxis_title="km/h", height=360
    )
    fig_d.update_layout(
        title="Distance", xaxis_title="Time (s)", yaxis_title="m", height=360
    )
    col_v.plotly_chart(fig_v, use_container_width=True)
    col_d.plotly_chart(fig_d, use_container_width=True)

    # ── Section 4: Terrain breakdown ─────────────────────────────────────
    st.header("4 -- Terrain Breakdown")
    rows = []
    for bike_result in result.per_bike:
        for s in bike_result.breakdown.sections:
            rows.append(
                {
                    "Bike": bike_result.name,
                    "Terrain": s.terrain_class,
                    "Distance (km)": s.distance / 1000,
                    "Segments": s.segment_count,
                    "Segment time (s)": s.segment_time,
                    "Total (h)": s.total_time / 3600,
                }
            )
    st.dataframe(pd.DataFrame(rows), use_container_width=True)

    # ── Section 5: Force balance ─────────────────────────────────────────
    st.header("5 -- Force Balance")
    sections = [s for s in split_terrain(terrain) if not s.is_empty]
    section = st.radio(
        "Terrain",
        sections,
        format_func=lambda s: f"{s.terrain_class} ({np.tan(s.grade_angle) * 100:.1f} %)",
        horizontal=True,
    )
    force_cols = st.columns(2)
    for i, (col, bike) in enumerate(zip(force_cols, bikes)):
        forces = _force_frame(rider, bike, section.grade_angle)
        fig_f = go.Figure()
        for term, dash in (
            ("drive", "solid"),
            ("rolling", "dot"),
            ("aero", "dash"),
            ("gravity", "dashdot"),
        ):
            fig_f.add_trace(
                go.Scatter(
                    x=forces["speed_kmh"], y=forces[term], name=term,
                    line=dict(color=_COLORS[i], dash=dash),
                )
            )
        fig_f.update_layout(
            title=bike.name, xaxis_title="Speed (km/h)", yaxis_title="N", height=360
        )
        col.plotly_chart(fig_f, use_container_width=True)

    # ── Section 6: Sensitivity ───────────────────────────────────────────
    st.header("6 -- Sensitivity")
    if st.button("Compute parameter sensitivities"):
        with st.spinner("Perturbing bike parameters..."):
            sens_rows = []
            for bike in bikes:
                sens = compute_all_bike_sensitivities(rider, bike, terrain)
                for field, value in sens.items():
                    sens_rows.append(
                        {
                            "Bike": bike.name,
                            "Parameter": field,
                            "d(time)": value,
                            "Unit": _SENSITIVITY_LABELS[field],
                        }
                    )
        st.dataframe(pd.DataFrame(sens_rows), use_container_width=True)


if __name__ == "__main__":
    main()
