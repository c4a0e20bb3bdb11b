"""Terrain model for the bike simulation engine.

A route is reduced to three terrain classes -- flat, climb and descent --
each made of identical fixed-length segments separated by stops.  The
climb and descent classes share the route's total elevation gain, so
the route starts and finishes at the same altitude.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from bike_engine.core.errors import (
    require_fraction,
    require_non_negative,
    require_positive,
)

logger = logging.getLogger(__name__)

FLAT: str = "flat"
CLIMB: str = "climb"
DESCENT: str = "descent"

TERRAIN_CLASSES: tuple[str, ...] = (FLAT, CLIMB, DESCENT)

# Flat fractions within this distance of zero are treated as exactly zero.
FRACTION_TOLERANCE: float = 1e-12


@dataclass(frozen=True)
class TerrainConfig:
    """Simplified route profile.

    Attributes:
        total_elevation_gain: Total climbing over the route in metres (>= 0).
        total_distance: Route length in kilometres (> 0).
        climb_fraction: Share of the distance spent climbing (0.0-1.0).
        descent_fraction: Share of the distance spent descending (0.0-1.0).
        stop_spacing: Distance between stops in metres (> 0).  Each stop
            forces an acceleration from near rest.

    ``climb_fraction + descent_fraction`` may exceed 1.0; the flat share
    is then treated as zero rather than rejected.
    """

    total_elevation_gain: float
    total_distance: float
    climb_fraction: float
    descent_fraction: float
    stop_spacing: float

    def __post_init__(self) -> None:
        """Validate terrain parameters."""
        require_non_negative("total_elevation_gain", self.total_elevation_gain)
        require_positive("total_distance", self.total_distance)
        require_fraction("climb_fraction", self.climb_fraction)
        require_fraction("descent_fraction", self.descent_fraction)
        require_positive("stop_spacing", self.stop_spacing)


@dataclass(frozen=True)
class TerrainSection:
    """One terrain class of a route after segmentation.

    Attributes:
        terrain_class: One of ``"flat"``, ``"climb"`` or ``"descent"``.
        distance: Total distance of this class in metres (>= 0).
        grade_angle: Road angle in radians, or ``None`` when the class
            has no distance and is skipped.
        segment_count: Number of stop-to-stop segments.  Fractional
            counts are kept as-is and scale the time linearly.
    """

    terrain_class: str
    distance: float
    grade_angle: float | None
    segment_count: float

    @property
    def is_empty(self) -> bool:
        return self.distance <= 0.0


def split_terrain(terrain: TerrainConfig) -> tuple[TerrainSection, ...]:
    """Decompose a route into its flat, climb and descent sections.

    Distances are converted from kilometres to metres.  Grade angles are::

        climb_angle   = atan( elevation_gain / climb_distance)
        descent_angle = atan(-elevation_gain / descent_distance)

    and are only computed for classes with a positive distance.

    Args:
        terrain: Route profile.

    Returns:
        Sections in the fixed order flat, climb, descent.
    """
    length_m: float = terrain.total_distance * 1000.0
    climb_distance: float = length_m * terrain.climb_fraction
    descent_distance: float = length_m * terrain.descent_fraction
    flat_fraction: float = 1.0 - terrain.climb_fraction - terrain.descent_fraction

    if flat_fraction < -FRACTION_TOLERANCE:
        logger.warning(
            "climb_fraction + descent_fraction = %.3f exceeds 1; "
            "treating flat distance as zero",
            terrain.climb_fraction + terrain.descent_fraction,
        )
    # Fractions summing to 1 leave rounding residue either side of zero.
    if flat_fraction <= FRACTION_TOLERANCE:
        flat_fraction = 0.0
    flat_distance: float = length_m * flat_fraction

    gain: float = terrain.total_elevation_gain
    sections: list[TerrainSection] = []
    for terrain_class, distance, rise in (
        (FLAT, flat_distance, 0.0),
        (CLIMB, climb_distance, gain),
        (DESCENT, descent_distance, -gain),
    ):
        if distance > 0.0:
            angle: float | None = math.atan(rise / distance)
            count: float = distance / terrain.stop_spacing
        else:
            angle = None
            count = 0.0
        sections.append(
            TerrainSection(
                terrain_class=terrain_class,
                distance=distance,
                grade_angle=angle,
                segment_count=count,
            )
        )
    return tuple(sections)
