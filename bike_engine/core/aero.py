"""Drag area estimates that feed :class:`BikeConfig` ``drag_area`` values.

Reference CdA values are for a 178 cm, 75 kg rider (BMI 23).  They are
scaled to another rider with rule-of-thumb exponents::

    height_factor = (height / 178) ** 2
    weight_factor = (weight / 75) ** 0.3
    bmi_factor    = (bmi / 23) ** 0.3

These are rough estimates, not measurements.
"""

from __future__ import annotations

from bike_engine.core.errors import InvalidConfigurationError, require_positive

REFERENCE_HEIGHT_CM: float = 178.0
REFERENCE_WEIGHT_KG: float = 75.0
REFERENCE_BMI: float = 23.0

HEIGHT_EXPONENT: float = 2.0
WEIGHT_EXPONENT: float = 0.3

# Midpoints of the typical CdA range (m²) per riding position.
CDA_REFERENCE: dict[str, float] = {
    "triathlon": 0.215,
    "road-aero": 0.245,
    "road-drops": 0.295,
    "endurance": 0.35,
}

# Offsets relative to the road-drops baseline.
POSITION_OFFSETS: dict[str, float] = {
    "triathlon": -0.065,
    "road-aero": -0.04,
    "road-drops": 0.0,
    "endurance": 0.03,
}

POSITION_LABELS: dict[str, str] = {
    "triathlon": "Triathlon bike, full aero tuck",
    "road-aero": "Road race bike + clip-on aero bars",
    "road-drops": "Road race bike, drops position",
    "endurance": "Road endurance / winter bike, tops",
}

ESTIMATION_METHODS: tuple[str, ...] = (
    "lookup",
    "height",
    "weight",
    "bmi",
    "combined",
    "offset",
)

# Upper CdA bound (m², inclusive) of each category, best first.
_CATEGORIES: tuple[tuple[float, str], ...] = (
    (0.20, "Elite Pro"),
    (0.25, "Competitive"),
    (0.30, "Recreational"),
    (0.35, "Comfort"),
)


def body_mass_index(height_cm: float, weight_kg: float) -> float:
    require_positive("height_cm", height_cm)
    require_positive("weight_kg", weight_kg)
    height_m: float = height_cm / 100.0
    return weight_kg / (height_m * height_m)


def estimate_drag_area(
    height_cm: float,
    weight_kg: float,
    position: str = "road-drops",
    method: str = "combined",
) -> float:
    """Estimate a rider's CdA from body size and riding position.

    Methods:
        lookup   -- Reference value for the position, unscaled.
        height   -- Reference scaled by the height factor.
        weight   -- Reference scaled by the weight factor.
        bmi      -- Reference scaled by the BMI factor.
        combined -- Reference scaled by height and weight factors.
        offset   -- Road-drops reference scaled by height and weight,
                    plus the position offset.

    Args:
        height_cm: Rider height in cm (> 0).
        weight_kg: Rider mass in kg (> 0).
        position: Key of :data:`CDA_REFERENCE`.
        method: One of :data:`ESTIMATION_METHODS`.

    Returns:
        Drag area in m².

    Raises:
        InvalidConfigurationError: If an input is invalid, the position
            or method is unknown, or the estimate is not positive.
    """
    require_positive("height_cm", height_cm)
    require_positive("weight_kg", weight_kg)
    if position not in CDA_REFERENCE:
        raise InvalidConfigurationError(
            "position",
            f"Unknown riding position '{position}'; expected one of {sorted(CDA_REFERENCE)}.",
        )
    if method not in ESTIMATION_METHODS:
        raise InvalidConfigurationError(
            "method",
            f"Unknown estimation method '{method}'; expected one of {list(ESTIMATION_METHODS)}.",
        )

    reference: float = CDA_REFERENCE[position]
    height_factor: float = (height_cm / REFERENCE_HEIGHT_CM) ** HEIGHT_EXPONENT
    weight_factor: float = (weight_kg / REFERENCE_WEIGHT_KG) ** WEIGHT_EXPONENT

    if method == "lookup":
        cda = reference
    elif method == "height":
        cda = reference * height_factor
    elif method == "weight":
        cda = reference * weight_factor
    elif method == "bmi":
        bmi: float = body_mass_index(height_cm, weight_kg)
        cda = reference * (bmi / REFERENCE_BMI) ** WEIGHT_EXPONENT
    elif method == "combined":
        cda = reference * height_factor * weight_factor
    else:
        baseline: float = CDA_REFERENCE["road-drops"] * height_factor * weight_factor
        cda = baseline + POSITION_OFFSETS[position]

    if cda <= 0.0:
        raise InvalidConfigurationError(
            "drag_area",
            f"Estimated drag area {cda:.3f} m² is not positive for "
            f"{height_cm} cm / {weight_kg} kg.",
        )
    return cda


def drag_category(drag_area: float) -> str:
    """Label a CdA value from "Elite Pro" down to "Upright"."""
    for upper, label in _CATEGORIES:
        if drag_area <= upper:
            return label
    return "Upright"
