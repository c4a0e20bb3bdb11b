"""Terrain-segmented bicycle performance simulator."""

__version__ = "0.1.0"
