"""Two-bike performance comparison for the bike simulation engine.

Both bikes are timed over the same route by the same rider.  The two
runs share no state, so they can be evaluated in either order or
concurrently with identical results.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from typing import Any

from bike_engine.core.bike import BikeConfig
from bike_engine.core.rider import RiderConfig
from bike_engine.core.segmenter import RouteBreakdown, compute_route_breakdown
from bike_engine.core.terrain import TerrainConfig
from bike_engine.core.trajectory import simulate

logger = logging.getLogger(__name__)

# Flat run used to sample each bike's cruising speed.
STEADY_STATE_TIME: float = 600.0  # s
STEADY_STATE_STEP: float = 1.0  # s
MS_TO_KMH: float = 3.6


@dataclass(frozen=True)
class BikeResult:
    """Outcome for one bike.

    Attributes:
        name: Bike label.
        final_velocity: Flat-ground cruising speed in km/h.
        total_time: Route time in seconds.
        breakdown: Per-terrain-class timing the route time is summed from.
    """

    name: str
    final_velocity: float
    total_time: float
    breakdown: RouteBreakdown


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing bike A against bike B.

    Attributes:
        per_bike: Results for bike A and bike B, in that order.
        time_difference_minutes: ``(time_b - time_a) / 60``.  Positive
            means bike A is faster.
    """

    per_bike: tuple[BikeResult, BikeResult]
    time_difference_minutes: float

    @property
    def faster(self) -> str | None:
        """Name of the faster bike, or ``None`` on an exact tie."""
        if self.time_difference_minutes > 0.0:
            return self.per_bike[0].name
        if self.time_difference_minutes < 0.0:
            return self.per_bike[1].name
        return None

    def as_dict(self) -> dict[str, Any]:
        return {
            "per_bike": [
                {
                    "name": b.name,
                    "final_velocity": b.final_velocity,
                    "total_time": b.total_time,
                    "sections": [asdict(s) for s in b.breakdown.sections],
                }
                for b in self.per_bike
            ],
            "time_difference_minutes": self.time_difference_minutes,
            "faster": self.faster,
        }


def evaluate_bike(
    rider: RiderConfig,
    bike: BikeConfig,
    terrain: TerrainConfig,
) -> BikeResult:
    """Time one bike over the route and sample its flat cruising speed."""
    breakdown: RouteBreakdown = compute_route_breakdown(rider, bike, terrain)
    total_time: float = breakdown.total_time
    flat_run = simulate(rider, bike, 0.0, STEADY_STATE_TIME, STEADY_STATE_STEP)
    final_velocity: float = flat_run[-1].velocity * MS_TO_KMH

    logger.info(
        "bike=%s: route time %.1f s, cruising speed %.2f km/h",
        bike.name,
        total_time,
        final_velocity,
    )
    return BikeResult(
        name=bike.name,
        final_velocity=final_velocity,
        total_time=total_time,
        breakdown=breakdown,
    )


def compare_bikes(
    rider: RiderConfig,
    bike_a: BikeConfig,
    bike_b: BikeConfig,
    terrain: TerrainConfig,
    parallel: bool = False,
) -> ComparisonResult:
    """Compare two bikes under one rider and one route.

    Args:
        rider: Shared rider configuration.
        bike_a: First bike.
        bike_b: Second bike.
        terrain: Shared route profile.
        parallel: Evaluate both bikes on a two-worker thread pool.

    Returns:
        A :class:`ComparisonResult`; ``time_difference_minutes`` is
        positive when *bike_a* is faster.
    """
    if parallel:
        with ThreadPoolExecutor(max_workers=2) as executor:
            future_a = executor.submit(evaluate_bike, rider, bike_a, terrain)
            future_b = executor.submit(evaluate_bike, rider, bike_b, terrain)
            result_a: BikeResult = future_a.result()
            result_b: BikeResult = future_b.result()
    else:
        result_a = evaluate_bike(rider, bike_a, terrain)
        result_b = evaluate_bike(rider, bike_b, terrain)

    return ComparisonResult(
        per_bike=(result_a, result_b),
        time_difference_minutes=(result_b.total_time - result_a.total_time) / 60.0,
    )
