"""
Value Types for Geographic and Planar Coordinates.

Design Rationale
----------------
Geographic points travel through the public API in DEGREES, while the
grid engine only ever sees planar points. Keeping the two as distinct
frozen dataclasses makes it impossible to hand a geographic point to the
engine, or a planar point to a caller, by accident.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple
import math

import numpy as np


class Orientation(Enum):
    """Hexagon orientation of a grid."""
    POINTY = "pointy"
    FLAT = "flat"

    @classmethod
    def from_name(cls, name: str) -> 'Orientation':
        """Resolve an orientation from its name ('pointy' or 'flat')."""
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(
                f"Unknown orientation {name!r}; expected one of "
                f"{[o.value for o in cls]}"
            ) from None


@dataclass(frozen=True)
class GeoPoint:
    """A geographic location on the spherical Earth.

    Attributes
    ----------
    longitude : float
        Longitude in DEGREES, positive east.
    latitude : float
        Latitude in DEGREES, positive north. Range: [-90, 90].

    Notes
    -----
    Longitude is stored as given and not range-checked here; projecting
    a point with |longitude| > 180 raises ProjectionDomainError. Corners
    of cells that straddle the antimeridian may un-project to longitudes
    slightly beyond +/-180; use `normalized()` to wrap them into (-180, 180].

    Examples
    --------
    >>> p = GeoPoint(longitude=-73.0, latitude=40.0)
    >>> p.lon, p.lat
    (-73.0, 40.0)
    """
    longitude: float
    latitude: float

    def __post_init__(self):
        """Validate coordinate values."""
        if not (math.isfinite(self.longitude) and math.isfinite(self.latitude)):
            raise ValueError(
                f"Coordinates must be finite, got "
                f"(lon={self.longitude}, lat={self.latitude})"
            )
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(
                f"Latitude {self.latitude} deg out of range [-90, 90]. "
                f"Did you swap longitude and latitude?"
            )

    @property
    def lon(self) -> float:
        return self.longitude

    @property
    def lat(self) -> float:
        return self.latitude

    def normalized(self) -> 'GeoPoint':
        """Return the same point with longitude wrapped into (-180, 180]."""
        lon = math.fmod(self.longitude, 360.0)
        if lon > 180.0:
            lon -= 360.0
        elif lon <= -180.0:
            lon += 360.0
        return GeoPoint(longitude=lon, latitude=self.latitude)

    def to_radians(self) -> Tuple[float, float]:
        """Convert to radians.

        Returns
        -------
        Tuple[float, float]
            (longitude_radians, latitude_radians)
        """
        return float(np.radians(self.longitude)), float(np.radians(self.latitude))

    @classmethod
    def from_radians(cls, lon_rad: float, lat_rad: float) -> 'GeoPoint':
        """Create a point from radians (convenience constructor)."""
        return cls(
            longitude=float(np.degrees(lon_rad)),
            latitude=float(np.degrees(lat_rad))
        )


@dataclass(frozen=True)
class PlanarPoint:
    """A location in a projection's planar coordinate system.

    Units depend on the projection: degrees (NoOp), meters (Sinusoidal,
    Spherical Mercator) or unit-sphere radians (Azimuthal Equidistant).
    """
    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return self.x, self.y


def make_point(lon: float, lat: float) -> GeoPoint:
    """Create a geographic point from longitude and latitude in degrees."""
    return GeoPoint(longitude=float(lon), latitude=float(lat))
