"""
Geodetic Constants for Hexagonal Grid Projections.

This module provides the constants shared by every projection strategy,
each carried with its unit and provenance. All projections in this system
use a spherical Earth whose radius equals the WGS84 semi-major axis, which
is the same sphere used by EPSG:3857 (Web Mercator).

References
----------
- WGS84 parameters: NIMA TR8350.2, Third Edition, 2000
- EPSG:3857 definition: IOGP Geomatics Guidance Note 7-2
- Snyder, J.P. (1987). Map Projections - A Working Manual. USGS Prof. Paper 1395.
"""

from dataclasses import dataclass
from typing import Final
import numpy as np


@dataclass(frozen=True)
class Constant:
    """A constant with uncertainty and provenance.

    Attributes
    ----------
    value : float
        The nominal value of the constant.
    uncertainty : float
        The standard uncertainty (1-sigma) of the constant.
    unit : str
        The unit of the constant.
    source : str
        Reference for the constant value.
    description : str
        Human-readable description of the constant.
    """
    value: float
    uncertainty: float
    unit: str
    source: str
    description: str


class GeodeticConstants:
    """Registry of constants used by the projection strategies.

    Earth Sphere
    ------------
    The sphere has radius a = 6 378 137 m (WGS84 semi-major axis). The
    circumference and meters-per-degree values are derived from it and
    stored at full double precision so that forward and inverse transforms
    agree to the last bit.

    Projection Domain
    -----------------
    Limits outside which a projection cannot produce finite planar
    coordinates or cannot recover longitude.
    """

    # =========================================================================
    # Earth Sphere
    # =========================================================================

    EARTH_SEMI_MAJOR_AXIS: Final[Constant] = Constant(
        value=6_378_137.0,
        uncertainty=0.0,  # Defined exactly
        unit="m",
        source="WGS84, NIMA TR8350.2",
        description="Semi-major axis of WGS84, used as the sphere radius"
    )

    EARTH_CIRCUMFERENCE: Final[Constant] = Constant(
        value=40_075_016.685578488,
        uncertainty=0.0,  # 2 * pi * a
        unit="m",
        source="Derived from WGS84 semi-major axis",
        description="Equatorial circumference of the projection sphere"
    )

    EARTH_METERS_PER_DEGREE: Final[Constant] = Constant(
        value=111_319.49079327358,
        uncertainty=0.0,  # circumference / 360
        unit="m per degree",
        source="Derived from WGS84 semi-major axis",
        description="Length of one degree of longitude along the equator"
    )

    # =========================================================================
    # Projection Domain
    # =========================================================================

    MERCATOR_MAX_LATITUDE: Final[Constant] = Constant(
        value=85.0511287798066,
        uncertainty=0.0,  # 2 * atan(exp(pi)) - pi/2
        unit="degree",
        source="EPSG:3857, IOGP Guidance Note 7-2",
        description="Latitude at which Web Mercator y equals x at the antimeridian"
    )

    POLE_TOLERANCE: Final[Constant] = Constant(
        value=1e-10,
        uncertainty=0.0,
        unit="dimensionless",
        source="Numerical convention",
        description="Threshold below which cos(latitude) or polar radius is zero"
    )

    @staticmethod
    def half_circumference_per_radian() -> float:
        """Planar scale shared by the sinusoidal and Mercator strategies.

        Returns
        -------
        float
            (C / 2) / pi in meters per radian, numerically equal to the
            sphere radius.
        """
        return (GeodeticConstants.EARTH_CIRCUMFERENCE.value / 2.0) / np.pi


EARTH_CIRCUMFERENCE = GeodeticConstants.EARTH_CIRCUMFERENCE.value
EARTH_METERS_PER_DEGREE = GeodeticConstants.EARTH_METERS_PER_DEGREE.value
MERCATOR_MAX_LATITUDE = GeodeticConstants.MERCATOR_MAX_LATITUDE.value
POLE_TOLERANCE = GeodeticConstants.POLE_TOLERANCE.value
