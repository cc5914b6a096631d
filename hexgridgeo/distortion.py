"""
Projection Distortion Analysis.

A hexagonal grid is regular in planar space only; on the ground its cells
stretch and shrink with the projection's local distortion. This module
quantifies that distortion with Tissot's indicatrix so callers can judge
how far a grid's cells deviate from equal size and shape in a region.

References
----------
- Snyder, J.P. (1987). Map Projections - A Working Manual, ch. 4.
- Tissot, A. (1859). Memoire sur la representation des surfaces.
"""

from dataclasses import dataclass
import numpy as np

from common.constants import POLE_TOLERANCE
from common.types import GeoPoint
from hexgridgeo.projections import Projection, project_batch


@dataclass
class TissotIndicatrix:
    """Tissot's indicatrix describing local distortion at a point.

    The indicatrix is the ellipse an infinitesimally small circle on the
    sphere becomes on the plane.

    Attributes
    ----------
    semi_major : float
        Maximum scale factor (semi-major axis of the ellipse).
    semi_minor : float
        Minimum scale factor (semi-minor axis of the ellipse).
    meridian_scale : float
        Scale factor along the meridian (h).
    parallel_scale : float
        Scale factor along the parallel (k).
    area_scale : float
        Area distortion factor (semi_major * semi_minor).
    angular_distortion_rad : float
        Maximum angular distortion in radians.

    Notes
    -----
    - For a conformal projection: semi_major = semi_minor
    - For an equal-area projection: area_scale = 1.0
    """
    semi_major: float
    semi_minor: float
    meridian_scale: float
    parallel_scale: float
    area_scale: float
    angular_distortion_rad: float

    @property
    def is_conformal(self) -> bool:
        """Check if projection is locally conformal (circle, no angular distortion)."""
        return np.abs(self.semi_major - self.semi_minor) < 1e-6

    @property
    def is_equal_area(self) -> bool:
        """Check if projection is locally equal-area."""
        return np.abs(self.area_scale - 1.0) < 1e-6


def compute_tissot_indicatrix(
    projection: Projection,
    geo_point: GeoPoint,
    delta_deg: float = 1e-5
) -> TissotIndicatrix:
    """Compute Tissot's indicatrix numerically.

    Parameters
    ----------
    projection : Projection
        The projection to analyze.
    geo_point : GeoPoint
        Location to analyze.
    delta_deg : float
        Offset in degrees for central differences.

    Returns
    -------
    TissotIndicatrix
        Local distortion characteristics.

    Raises
    ------
    ValueError
        At the poles, where the parallel scale is undefined.
    ProjectionDomainError
        If the point or its neighborhood is outside the projection domain.
    """
    lon, lat = geo_point.longitude, geo_point.latitude
    cos_lat = np.cos(np.radians(lat))
    if cos_lat < POLE_TOLERANCE:
        raise ValueError(f"Distortion is undefined at the pole (lat={lat})")

    # East, west, north, south neighbors
    lons = np.array([lon + delta_deg, lon - delta_deg, lon, lon])
    lats = np.array([lat, lat, lat + delta_deg, lat - delta_deg])
    x, y = project_batch(projection, lons, lats)

    step = 2.0 * np.radians(delta_deg)
    dxdl = (x[0] - x[1]) / step
    dydl = (y[0] - y[1]) / step
    dxdp = (x[2] - x[3]) / step
    dydp = (y[2] - y[3]) / step

    R = projection.sphere_radius
    h = np.hypot(dxdp, dydp) / R
    k = np.hypot(dxdl, dydl) / (R * cos_lat)
    area_scale = np.abs(dxdp * dydl - dydp * dxdl) / (R * R * cos_lat)

    # a + b and a - b from h, k and the area scale (Snyder eq. 4-12, 4-13)
    a_plus_b = np.sqrt(h * h + k * k + 2.0 * area_scale)
    a_minus_b = np.sqrt(max(h * h + k * k - 2.0 * area_scale, 0.0))
    semi_major = (a_plus_b + a_minus_b) / 2.0
    semi_minor = (a_plus_b - a_minus_b) / 2.0

    return TissotIndicatrix(
        semi_major=float(semi_major),
        semi_minor=float(semi_minor),
        meridian_scale=float(h),
        parallel_scale=float(k),
        area_scale=float(area_scale),
        angular_distortion_rad=float(2.0 * np.arcsin(a_minus_b / a_plus_b))
    )
