"""Core simulation modules for the bike simulation engine."""

from bike_engine.core.aero import (
    CDA_REFERENCE,
    ESTIMATION_METHODS,
    body_mass_index,
    drag_category,
    estimate_drag_area,
)
from bike_engine.core.bike import BikeConfig
from bike_engine.core.comparator import (
    BikeResult,
    ComparisonResult,
    compare_bikes,
    evaluate_bike,
)
from bike_engine.core.errors import IntegrationError, InvalidConfigurationError
from bike_engine.core.physics import (
    AIR_DENSITY,
    G,
    MIN_VELOCITY,
    acceleration,
    resistance_forces,
    terminal_velocity,
)
from bike_engine.core.rider import RiderConfig
from bike_engine.core.segmenter import (
    RouteBreakdown,
    SegmentClassResult,
    compute_route_breakdown,
    compute_route_time,
)
from bike_engine.core.sensitivity import (
    compute_all_bike_sensitivities,
    compute_bike_sensitivity,
)
from bike_engine.core.terrain import (
    CLIMB,
    DESCENT,
    FLAT,
    TerrainConfig,
    TerrainSection,
    split_terrain,
)
from bike_engine.core.trajectory import SimulationPoint, simulate, time_at_distance
from bike_engine.core.wheel import (
    COMMON_WHEEL_SIZES,
    WheelComponents,
    WheelInertia,
    wheel_inertia,
    wheel_radius,
)

__all__ = [
    "AIR_DENSITY",
    "BikeConfig",
    "BikeResult",
    "CDA_REFERENCE",
    "CLIMB",
    "COMMON_WHEEL_SIZES",
    "ComparisonResult",
    "DESCENT",
    "ESTIMATION_METHODS",
    "FLAT",
    "G",
    "IntegrationError",
    "InvalidConfigurationError",
    "MIN_VELOCITY",
    "RiderConfig",
    "RouteBreakdown",
    "SegmentClassResult",
    "SimulationPoint",
    "TerrainConfig",
    "TerrainSection",
    "WheelComponents",
    "WheelInertia",
    "acceleration",
    "body_mass_index",
    "compare_bikes",
    "compute_all_bike_sensitivities",
    "compute_bike_sensitivity",
    "compute_route_breakdown",
    "compute_route_time",
    "drag_category",
    "estimate_drag_area",
    "evaluate_bike",
    "resistance_forces",
    "simulate",
    "split_terrain",
    "terminal_velocity",
    "time_at_distance",
    "wheel_inertia",
    "wheel_radius",
]
