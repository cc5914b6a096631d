"""
Common utilities and infrastructure for the hexgridgeo library.

This package provides foundational components used across all modules:
- Geodetic constants with provenance
- Geographic and planar coordinate value types
- Logging configuration
"""

from common.constants import GeodeticConstants
from common.types import (
    GeoPoint,
    PlanarPoint,
    Orientation,
    make_point,
)
from common.logging_config import get_logger

__all__ = [
    "GeodeticConstants",
    "GeoPoint",
    "PlanarPoint",
    "Orientation",
    "make_point",
    "get_logger",
]
