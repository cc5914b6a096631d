"""
Map Projections for Hexagonal Grids.

This module provides the four projection strategies a hexagonal grid can
be laid over. A projection turns a geographic point (degrees) into a
planar point the grid engine understands, and back. Every strategy is
stateless; the module-level singletons are shared by all grids.

Scientific Context
------------------
Domain: Cartography
Model: Spherical Earth of radius a = 6 378 137 m

Why Several Projections
-----------------------
1. No flat map can represent the sphere without distortion, so hexagons
   of equal planar size cover unequal ground.
2. Different projections distort different properties:
   - Equal-area (Sinusoidal): every cell covers the same ground area
   - Conformal (Spherical Mercator): cells keep their local shape
   - Equidistant (Azimuthal, polar): distance from the North Pole is kept
3. NoOp lays the grid directly over longitude/latitude degrees.

Domain Handling
---------------
Inputs where a projection cannot produce a finite, invertible result
raise `ProjectionDomainError` instead of letting NaN or infinity reach
the grid engine. At the poles, where longitude is undefined, the
inverse transforms return longitude 0.0.

References
----------
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof. Paper 1395.
- IOGP Geomatics Guidance Note 7-2 (EPSG:3857).
"""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Union
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyproj import CRS

from common.constants import (
    EARTH_METERS_PER_DEGREE,
    MERCATOR_MAX_LATITUDE,
    POLE_TOLERANCE,
    GeodeticConstants,
)
from common.logging_config import get_logger
from common.types import GeoPoint, PlanarPoint

logger = get_logger(__name__)

# Meters per radian along the equator; equal to the sphere radius
_SCALE = GeodeticConstants.half_circumference_per_radian()

# Slack in radians on the sinusoid envelope, for x computed at +/-180 deg
_ENVELOPE_TOLERANCE = 1e-9


class ProjectionDomainError(ValueError):
    """Raised when a point lies outside the domain of a projection.

    Attributes
    ----------
    projection : str
        Name of the projection that rejected the input.
    value : object
        The offending input (a point, or a count of offending elements).
    """

    def __init__(self, projection: str, value, reason: str):
        self.projection = projection
        self.value = value
        super().__init__(f"{projection}: {value} is out of domain ({reason})")


class Projection(ABC):
    """Abstract base class for projection strategies.

    Subclasses implement the transforms on numpy arrays, together with
    element-wise domain masks. The scalar `geo_to_point`/`point_to_geo`
    and the batch functions in this module are both built on top of
    them.
    """

    forward_domain = "longitude must be within [-180, 180] and latitude within [-90, 90]"
    inverse_domain = "coordinates must be finite"

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the projection."""
        pass

    @property
    @abstractmethod
    def proj4_string(self) -> str:
        """PROJ.4 definition of an equivalent projection."""
        pass

    @property
    @abstractmethod
    def sphere_radius(self) -> float:
        """Planar units per radian of arc along the equator."""
        pass

    @property
    @abstractmethod
    def preserves_angles(self) -> bool:
        """Whether this is a conformal projection."""
        pass

    @property
    @abstractmethod
    def preserves_area(self) -> bool:
        """Whether this is an equal-area projection."""
        pass

    @abstractmethod
    def forward(
        self,
        lon_deg: NDArray[np.float64],
        lat_deg: NDArray[np.float64]
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Transform geographic degrees to planar coordinates.

        Inputs are assumed to have passed `forward_violations`.
        """
        pass

    @abstractmethod
    def inverse(
        self,
        x: NDArray[np.float64],
        y: NDArray[np.float64]
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Transform planar coordinates to (longitude, latitude) degrees.

        Inputs are assumed to have passed `inverse_violations`.
        """
        pass

    def forward_violations(
        self,
        lon_deg: NDArray[np.float64],
        lat_deg: NDArray[np.float64]
    ) -> NDArray[np.bool_]:
        """Mask of inputs outside the forward domain."""
        return (
            ~np.isfinite(lon_deg) | ~np.isfinite(lat_deg)
            | (np.abs(lon_deg) > 180.0) | (np.abs(lat_deg) > 90.0)
        )

    def inverse_violations(
        self,
        x: NDArray[np.float64],
        y: NDArray[np.float64]
    ) -> NDArray[np.bool_]:
        """Mask of inputs outside the inverse domain."""
        return ~np.isfinite(x) | ~np.isfinite(y)

    def geo_to_point(self, geo_point: GeoPoint) -> PlanarPoint:
        """Project a geographic point onto the plane.

        Raises
        ------
        ProjectionDomainError
            If the point is outside this projection's domain.
        """
        lon = np.float64(geo_point.longitude)
        lat = np.float64(geo_point.latitude)
        if self.forward_violations(lon, lat):
            raise ProjectionDomainError(self.name, geo_point, self.forward_domain)
        x, y = self.forward(lon, lat)
        return PlanarPoint(x=float(x), y=float(y))

    def point_to_geo(self, point: PlanarPoint) -> GeoPoint:
        """Recover the geographic point of a planar point.

        Raises
        ------
        ProjectionDomainError
            If the planar point has no geographic counterpart.
        """
        x = np.float64(point.x)
        y = np.float64(point.y)
        if self.inverse_violations(x, y):
            raise ProjectionDomainError(self.name, point, self.inverse_domain)
        lon, lat = self.inverse(x, y)
        return GeoPoint(longitude=float(lon), latitude=float(lat))

    def to_crs(self) -> CRS:
        """Build the equivalent pyproj CRS."""
        return CRS.from_proj4(self.proj4_string)

    def __repr__(self) -> str:
        return f"<Projection {self.name}>"


class NoOpProjection(Projection):
    """Identity projection: planar x/y are longitude/latitude degrees."""

    inverse_domain = "y must be a latitude within [-90, 90]"

    @property
    def name(self) -> str:
        return "noop"

    @property
    def proj4_string(self) -> str:
        return "+proj=longlat +R=6378137 +no_defs"

    @property
    def sphere_radius(self) -> float:
        return 180.0 / np.pi

    @property
    def preserves_angles(self) -> bool:
        return False

    @property
    def preserves_area(self) -> bool:
        return False

    def forward(self, lon_deg, lat_deg):
        return lon_deg, lat_deg

    def inverse(self, x, y):
        return x, y

    def inverse_violations(self, x, y):
        return super().inverse_violations(x, y) | (np.abs(y) > 90.0)


class SinusoidalProjection(Projection):
    """Sinusoidal (Sanson-Flamsteed) equal-area projection.

    Longitude is shifted by +180 deg before projection, so x runs from 0
    along the antimeridian to 2*pi*a*cos(lat) going east.

        x = lambda * cos(phi) * a,   y = phi * a

    Notes
    -----
    Parallels converge to a single point at the poles, so longitude is
    unrecoverable there; the inverse returns longitude 0.0 when
    cos(phi) < POLE_TOLERANCE. Elsewhere x must satisfy
    0 <= x <= 2*pi*a*cos(phi); points outside that envelope have no
    geographic counterpart and are rejected.
    """

    inverse_domain = "point must lie within the sinusoid envelope, between the poles"

    @property
    def name(self) -> str:
        return "sinusoidal"

    @property
    def proj4_string(self) -> str:
        return "+proj=sinu +lon_0=-180 +R=6378137 +units=m +over +no_defs"

    @property
    def sphere_radius(self) -> float:
        return _SCALE

    @property
    def preserves_angles(self) -> bool:
        return False

    @property
    def preserves_area(self) -> bool:
        return True

    def forward(self, lon_deg, lat_deg):
        lam = np.radians(lon_deg + 180.0)
        phi = np.radians(lat_deg)
        x = (lam * np.cos(phi)) * _SCALE
        y = phi * _SCALE
        return x, y

    def _unwind(self, x, y):
        """Latitude, pole mask and shifted longitude (radians) of planar points."""
        phi = np.clip(y / _SCALE, -np.pi / 2, np.pi / 2)
        cos_phi = np.cos(phi)
        at_pole = np.abs(cos_phi) < POLE_TOLERANCE
        lam = x / (np.where(at_pole, 1.0, cos_phi) * _SCALE)
        return phi, at_pole, lam

    def inverse(self, x, y):
        phi, at_pole, lam = self._unwind(x, y)
        lam = np.clip(lam, 0.0, 2 * np.pi)
        lon = np.where(at_pole, 0.0, np.degrees(lam) - 180.0)
        lat = np.clip(np.degrees(phi), -90.0, 90.0)
        return lon, lat

    def inverse_violations(self, x, y):
        beyond_pole = np.abs(y / _SCALE) > np.pi / 2 + POLE_TOLERANCE
        _, at_pole, lam = self._unwind(x, y)
        # x must lie between the two bounding antimeridian curves
        outside = ~at_pole & ((lam < -_ENVELOPE_TOLERANCE) | (lam > 2 * np.pi + _ENVELOPE_TOLERANCE))
        return super().inverse_violations(x, y) | beyond_pole | outside


class AzimuthalEquidistantProjection(Projection):
    """Polar azimuthal equidistant projection on the unit sphere.

    Centered on the North Pole; planar distance from the origin equals
    the angular distance (radians) from the pole.

        theta = lon,  rho = pi/2 - lat
        x = rho * sin(theta),  y = -rho * cos(theta)

    Notes
    -----
    The inverse takes rho = hypot(x, y) rather than x / sin(theta), which
    stays defined on the meridian through the pole (x = 0). At the pole
    itself (rho < POLE_TOLERANCE) longitude is returned as 0.0.
    """

    inverse_domain = "distance from the origin must not exceed pi"

    @property
    def name(self) -> str:
        return "aep"

    @property
    def proj4_string(self) -> str:
        return "+proj=aeqd +lat_0=90 +lon_0=0 +R=1 +units=m +no_defs"

    @property
    def sphere_radius(self) -> float:
        return 1.0

    @property
    def preserves_angles(self) -> bool:
        return False

    @property
    def preserves_area(self) -> bool:
        return False

    def forward(self, lon_deg, lat_deg):
        theta = np.radians(lon_deg)
        rho = np.pi / 2 - np.radians(lat_deg)
        x = rho * np.sin(theta)
        y = -rho * np.cos(theta)
        return x, y

    def inverse(self, x, y):
        theta = np.arctan2(x, -y)
        rho = np.minimum(np.hypot(x, y), np.pi)
        lon = np.where(rho < POLE_TOLERANCE, 0.0, np.degrees(theta))
        lat = np.clip(np.degrees(np.pi / 2 - rho), -90.0, 90.0)
        return lon, lat

    def inverse_violations(self, x, y):
        beyond_south_pole = np.hypot(x, y) > np.pi + POLE_TOLERANCE
        return super().inverse_violations(x, y) | beyond_south_pole


class SphericalMercatorProjection(Projection):
    """Spherical (Web) Mercator projection, as used by EPSG:3857.

    Conformal cylindrical projection. y diverges at the poles, so the
    forward domain stops at +/-MERCATOR_MAX_LATITUDE, where the projected
    world becomes a square.
    """

    forward_domain = (
        f"longitude must be within [-180, 180] and latitude within "
        f"+/-{MERCATOR_MAX_LATITUDE} deg"
    )

    @property
    def name(self) -> str:
        return "mercator"

    @property
    def proj4_string(self) -> str:
        return (
            "+proj=merc +a=6378137 +b=6378137 +lat_ts=0 +lon_0=0 "
            "+x_0=0 +y_0=0 +k=1 +units=m +no_defs"
        )

    @property
    def sphere_radius(self) -> float:
        return _SCALE

    @property
    def preserves_angles(self) -> bool:
        return True

    @property
    def preserves_area(self) -> bool:
        return False

    def forward(self, lon_deg, lat_deg):
        phi = np.radians(lat_deg)
        x = lon_deg * EARTH_METERS_PER_DEGREE
        y = np.log(np.tan(phi) + (1.0 / np.cos(phi)))
        y = y * _SCALE
        return x, y

    def inverse(self, x, y):
        lon = x / EARTH_METERS_PER_DEGREE
        lat = np.degrees(np.arcsin(np.tanh(y / _SCALE)))
        return lon, lat

    def forward_violations(self, lon_deg, lat_deg):
        beyond_limit = np.abs(lat_deg) > MERCATOR_MAX_LATITUDE
        return super().forward_violations(lon_deg, lat_deg) | beyond_limit


PROJECTION_NOOP = NoOpProjection()
PROJECTION_SIN = SinusoidalProjection()
PROJECTION_AEP = AzimuthalEquidistantProjection()
PROJECTION_SM = SphericalMercatorProjection()

PROJECTIONS: Dict[str, Projection] = {
    p.name: p for p in (PROJECTION_NOOP, PROJECTION_SIN, PROJECTION_AEP, PROJECTION_SM)
}


def get_projection(projection: Union[str, Projection]) -> Projection:
    """Resolve a projection singleton.

    Parameters
    ----------
    projection : str or Projection
        Registry name ('noop', 'sinusoidal', 'aep', 'mercator') or an
        instance, which is returned unchanged.

    Returns
    -------
    Projection
        The matching strategy.

    Raises
    ------
    KeyError
        If the name is not registered.
    """
    if isinstance(projection, Projection):
        return projection
    try:
        return PROJECTIONS[projection.lower()]
    except KeyError:
        raise KeyError(
            f"Unknown projection {projection!r}; known: {sorted(PROJECTIONS)}"
        ) from None


def _reject(projection: Projection, violations: NDArray[np.bool_], reason: str) -> None:
    count = int(np.count_nonzero(violations))
    if count:
        logger.warning(
            f"{projection.name}: {count} of {violations.size} points out of domain"
        )
        raise ProjectionDomainError(projection.name, f"{count} point(s)", reason)


def project_batch(
    projection: Projection,
    lons_deg: ArrayLike,
    lats_deg: ArrayLike
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Project arrays of geographic coordinates.

    Parameters
    ----------
    projection : Projection
        Projection to use.
    lons_deg, lats_deg : array_like
        Coordinates in degrees; broadcast against each other.

    Returns
    -------
    Tuple[ndarray, ndarray]
        (x, y) planar coordinates.

    Raises
    ------
    ProjectionDomainError
        If any element lies outside the projection's domain.
    """
    lons, lats = np.broadcast_arrays(
        np.asarray(lons_deg, dtype=np.float64),
        np.asarray(lats_deg, dtype=np.float64)
    )
    _reject(projection, projection.forward_violations(lons, lats), projection.forward_domain)
    x, y = projection.forward(lons, lats)
    return np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64)


def unproject_batch(
    projection: Projection,
    x: ArrayLike,
    y: ArrayLike
) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Recover arrays of geographic coordinates from planar ones.

    Returns
    -------
    Tuple[ndarray, ndarray]
        (longitudes, latitudes) in degrees.

    Raises
    ------
    ProjectionDomainError
        If any element has no geographic counterpart.
    """
    xs, ys = np.broadcast_arrays(
        np.asarray(x, dtype=np.float64),
        np.asarray(y, dtype=np.float64)
    )
    _reject(projection, projection.inverse_violations(xs, ys), projection.inverse_domain)
    lons, lats = projection.inverse(xs, ys)
    return np.asarray(lons, dtype=np.float64), np.asarray(lats, dtype=np.float64)
