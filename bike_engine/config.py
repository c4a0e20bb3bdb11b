"""Preset loader for the bike simulation engine."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from bike_engine.core.bike import BikeConfig
from bike_engine.core.errors import InvalidConfigurationError
from bike_engine.core.rider import RiderConfig
from bike_engine.core.terrain import TerrainConfig

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
PRESETS_PATH: Path = DATA_DIR / "presets.yaml"

_RIDER_FIELDS: tuple[str, ...] = ("power", "rider_mass")

_TERRAIN_FIELDS: tuple[str, ...] = (
    "total_elevation_gain",
    "total_distance",
    "climb_fraction",
    "descent_fraction",
    "stop_spacing",
)

_BIKE_FIELDS: tuple[str, ...] = (
    "name",
    "moment_of_inertia",
    "wheel_radius",
    "bike_mass",
    "rolling_resistance_coeff",
    "drag_area",
)


@dataclass(frozen=True)
class Presets:
    """Default rider, terrain and named bikes loaded from YAML.

    Attributes:
        rider: Default rider.
        terrain: Default route profile.
        bikes: Bikes keyed by name, in file order.
    """

    rider: RiderConfig
    terrain: TerrainConfig
    bikes: dict[str, BikeConfig]

    def bike(self, name: str) -> BikeConfig:
        """Return a bike preset by name.

        Raises:
            KeyError: If no preset has that name.
        """
        try:
            return self.bikes[name]
        except KeyError:
            raise KeyError(
                f"Unknown bike preset '{name}'; available: {', '.join(self.bikes)}"
            ) from None


def _require_fields(section: str, entry: Any, fields: tuple[str, ...]) -> None:
    if not isinstance(entry, dict):
        raise InvalidConfigurationError(
            section, f"'{section}' must be a mapping, got {type(entry).__name__}."
        )
    for field in fields:
        if field not in entry:
            raise InvalidConfigurationError(
                field, f"{section} is missing required field '{field}'."
            )


def _build(section: str, cls: type, entry: dict, fields: tuple[str, ...]) -> Any:
    """Construct *cls* from the listed fields, prefixing errors with *section*."""
    try:
        return cls(**{field: entry[field] for field in fields})
    except InvalidConfigurationError as exc:
        raise InvalidConfigurationError(exc.field, f"{section}: {exc}") from exc


def load_presets(path: Path | None = None) -> Presets:
    """Load the default rider, terrain and bike presets from a YAML file.

    Every entry is validated by the record constructors; the error names
    the offending section and field.

    Args:
        path: Optional override for the presets file path.

    Returns:
        A :class:`Presets` instance.

    Raises:
        FileNotFoundError: If the presets file does not exist.
        InvalidConfigurationError: If an entry is missing fields, has
            out-of-range values, or bike names are duplicated.
    """
    presets_path = path or PRESETS_PATH
    if not presets_path.exists():
        raise FileNotFoundError(f"Presets file not found: {presets_path}")

    with open(presets_path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    _require_fields("rider", data.get("rider"), _RIDER_FIELDS)
    _require_fields("terrain", data.get("terrain"), _TERRAIN_FIELDS)

    rider: RiderConfig = _build("rider", RiderConfig, data["rider"], _RIDER_FIELDS)
    terrain: TerrainConfig = _build(
        "terrain", TerrainConfig, data["terrain"], _TERRAIN_FIELDS
    )

    entries = data.get("bikes") or []
    if not isinstance(entries, list) or not entries:
        raise InvalidConfigurationError("bikes", "'bikes' must be a non-empty list.")

    bikes: dict[str, BikeConfig] = {}
    for idx, entry in enumerate(entries):
        label = f"Bike entry {idx}"
        if isinstance(entry, dict) and entry.get("name"):
            label += f" ({entry['name']})"
        _require_fields(label, entry, _BIKE_FIELDS)
        bike: BikeConfig = _build(label, BikeConfig, entry, _BIKE_FIELDS)
        if bike.name in bikes:
            raise InvalidConfigurationError(
                "name", f"{label}: duplicate bike name '{bike.name}'."
            )
        bikes[bike.name] = bike

    return Presets(rider=rider, terrain=terrain, bikes=bikes)
