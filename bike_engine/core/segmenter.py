"""Terrain-segmented route timing for the bike simulation engine.

Models stop-and-go riding: every ``stop_spacing`` metres the rider comes
to a halt and accelerates again from near rest.  All segments of one
terrain class share the same grade, so they are physically identical;
the class is simulated once and its single-segment time is scaled by
the (possibly fractional) segment count.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bike_engine.core.bike import BikeConfig
from bike_engine.core.rider import RiderConfig
from bike_engine.core.terrain import TerrainConfig, TerrainSection, split_terrain
from bike_engine.core.trajectory import (
    DEFAULT_MAX_TIME,
    DEFAULT_SAMPLE_STEP,
    simulate,
    time_at_distance,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentClassResult:
    """Timing of one terrain class.

    Attributes:
        terrain_class: ``"flat"``, ``"climb"`` or ``"descent"``.
        distance: Distance of the class in metres.
        grade_angle: Road angle in radians, ``None`` if skipped.
        segment_count: Number of stop-to-stop segments (fractional).
        segment_time: Time for one segment in seconds (0.0 if skipped).
        total_time: ``segment_count * segment_time`` in seconds.
    """

    terrain_class: str
    distance: float
    grade_angle: float | None
    segment_count: float
    segment_time: float
    total_time: float


@dataclass(frozen=True)
class RouteBreakdown:
    """Per-class timing of a whole route for one bike."""

    bike_name: str
    sections: tuple[SegmentClassResult, ...]

    @property
    def total_time(self) -> float:
        return sum(s.total_time for s in self.sections)


def _time_section(
    rider: RiderConfig,
    bike: BikeConfig,
    section: TerrainSection,
    stop_spacing: float,
    max_time: float,
    sample_step: float,
) -> SegmentClassResult:
    if section.is_empty or section.segment_count <= 0.0:
        return SegmentClassResult(
            terrain_class=section.terrain_class,
            distance=section.distance,
            grade_angle=None,
            segment_count=0.0,
            segment_time=0.0,
            total_time=0.0,
        )

    assert section.grade_angle is not None
    points = simulate(rider, bike, section.grade_angle, max_time, sample_step)
    segment_time: float = time_at_distance(points, stop_spacing)
    total: float = section.segment_count * segment_time

    logger.debug(
        "bike=%s %s: grade=%.5f rad, %.2f segments x %.2f s = %.1f s",
        bike.name,
        section.terrain_class,
        section.grade_angle,
        section.segment_count,
        segment_time,
        total,
    )
    return SegmentClassResult(
        terrain_class=section.terrain_class,
        distance=section.distance,
        grade_angle=section.grade_angle,
        segment_count=section.segment_count,
        segment_time=segment_time,
        total_time=total,
    )


def compute_route_breakdown(
    rider: RiderConfig,
    bike: BikeConfig,
    terrain: TerrainConfig,
    max_time: float = DEFAULT_MAX_TIME,
    sample_step: float = DEFAULT_SAMPLE_STEP,
) -> RouteBreakdown:
    """Time every terrain class of a route for one bike.

    For each class with a positive distance, one trajectory is simulated
    at the class grade and the time to cover ``stop_spacing`` is
    interpolated from it.  Classes with no distance are skipped without
    integrating.

    Args:
        rider: Rider power and mass.
        bike: Bicycle configuration.
        terrain: Route profile.
        max_time: Horizon of each class simulation in seconds.
        sample_step: Output spacing of each class simulation in seconds.

    Returns:
        A :class:`RouteBreakdown` with sections in the order flat,
        climb, descent.
    """
    sections = tuple(
        _time_section(rider, bike, section, terrain.stop_spacing, max_time, sample_step)
        for section in split_terrain(terrain)
    )
    return RouteBreakdown(bike_name=bike.name, sections=sections)


def compute_route_time(
    rider: RiderConfig,
    bike: BikeConfig,
    terrain: TerrainConfig,
    max_time: float = DEFAULT_MAX_TIME,
    sample_step: float = DEFAULT_SAMPLE_STEP,
) -> float:
    """Return the total elapsed time over a route in seconds.

    Sum over the flat, climb and descent classes of
    ``segment_count * time_at_distance(simulate(grade), stop_spacing)``.
    """
    return compute_route_breakdown(rider, bike, terrain, max_time, sample_step).total_time
