"""Wheel helpers that feed :class:`BikeConfig` inertia and radius values."""

from __future__ import annotations

from dataclasses import dataclass

from bike_engine.core.errors import (
    InvalidConfigurationError,
    require_non_negative,
    require_positive,
)

# Bead seat diameters (ISO 5775) in mm.
COMMON_WHEEL_SIZES: dict[str, float] = {
    "700C (Road)": 622.0,
    '650B (27.5")': 584.0,
    '26" MTB': 559.0,
    '29" (29er)': 622.0,
    '24" Kids': 507.0,
    '20" BMX/Folding': 406.0,
    '16" Kids': 349.0,
    '12" Kids': 203.0,
}


@dataclass(frozen=True)
class WheelComponents:
    """Mass and geometry of one wheel.

    Attributes:
        rim_mass_g: Rim mass in grams.
        rim_diameter_mm: Rim (bead seat) diameter in mm.
        rim_height_mm: Rim profile height in mm.
        tire_mass_g: Tire mass in grams.
        tire_thickness_mm: Tire section height in mm.
        spokes_mass_g: Combined spoke mass in grams.
    """

    rim_mass_g: float = 300.0
    rim_diameter_mm: float = 622.0
    rim_height_mm: float = 35.0
    tire_mass_g: float = 200.0
    tire_thickness_mm: float = 34.0
    spokes_mass_g: float = 160.0

    def __post_init__(self) -> None:
        require_non_negative("rim_mass_g", self.rim_mass_g)
        require_positive("rim_diameter_mm", self.rim_diameter_mm)
        require_non_negative("rim_height_mm", self.rim_height_mm)
        require_non_negative("tire_mass_g", self.tire_mass_g)
        require_non_negative("tire_thickness_mm", self.tire_thickness_mm)
        require_non_negative("spokes_mass_g", self.spokes_mass_g)
        if self.rim_height_mm >= self.rim_diameter_mm / 2.0:
            raise InvalidConfigurationError(
                "rim_height_mm", "rim_height_mm must be smaller than the rim radius."
            )


@dataclass(frozen=True)
class WheelInertia:
    """Moment of inertia contributions in kg·m²."""

    rim: float
    tire: float
    spokes: float

    @property
    def per_wheel(self) -> float:
        return self.rim + self.tire + self.spokes

    @property
    def total(self) -> float:
        """Both wheels; this is the value expected by ``BikeConfig.moment_of_inertia``."""
        return 2.0 * self.per_wheel


def wheel_inertia(components: WheelComponents) -> WheelInertia:
    """Approximate the moment of inertia of a wheel from its parts.

    Rim and tire are treated as thin rings at their centre of mass::

        rim    = m_rim  * ((D/2 - h_rim/2) / 1000)**2
        tire   = m_tire * ((D/2 + t_tire/2) / 1000)**2
        spokes = ((D/2 - h_rim) / 1000)**3 / 3 * m_spokes

    with masses in kg.
    """
    half_diameter: float = components.rim_diameter_mm / 2.0
    rim_arm: float = (half_diameter - components.rim_height_mm / 2.0) / 1000.0
    tire_arm: float = (half_diameter + components.tire_thickness_mm / 2.0) / 1000.0
    spoke_length: float = (half_diameter - components.rim_height_mm) / 1000.0

    return WheelInertia(
        rim=components.rim_mass_g / 1000.0 * rim_arm**2,
        tire=components.tire_mass_g / 1000.0 * tire_arm**2,
        spokes=spoke_length**3 / 3.0 * components.spokes_mass_g / 1000.0,
    )


def wheel_radius(bead_seat_diameter_mm: float, tire_height_mm: float) -> float:
    """Return the rolling radius in metres of a rim plus inflated tire."""
    require_positive("bead_seat_diameter_mm", bead_seat_diameter_mm)
    require_non_negative("tire_height_mm", tire_height_mm)
    return (bead_seat_diameter_mm / 2.0 + tire_height_mm) / 1000.0
