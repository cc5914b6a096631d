"""
hexgridgeo: Hexagonal Grids over Geographic Coordinates.

Lays a planar hexagonal grid over the sphere through one of four
projections and answers cell queries in longitude/latitude degrees.

This module provides:
- Projection strategies (NoOp, Sinusoidal, Azimuthal Equidistant,
  Spherical Mercator) with scalar and batch transforms
- The `Grid` facade and its `make_grid` factory
- Tissot-indicatrix distortion analysis
"""

from common.types import GeoPoint, Orientation, make_point

from hexgridgeo.projections import (
    Projection,
    ProjectionDomainError,
    PROJECTION_NOOP,
    PROJECTION_SIN,
    PROJECTION_AEP,
    PROJECTION_SM,
    PROJECTIONS,
    get_projection,
    project_batch,
    unproject_batch,
)

from hexgridgeo.engine import GridEngine, HexgridEngine

from hexgridgeo.grid import (
    Grid,
    GridSettings,
    make_grid,
    make_grid_from_settings,
)

from hexgridgeo.distortion import (
    TissotIndicatrix,
    compute_tissot_indicatrix,
)

__all__ = [
    # Points
    "GeoPoint",
    "Orientation",
    "make_point",
    # Projections
    "Projection",
    "ProjectionDomainError",
    "PROJECTION_NOOP",
    "PROJECTION_SIN",
    "PROJECTION_AEP",
    "PROJECTION_SM",
    "PROJECTIONS",
    "get_projection",
    "project_batch",
    "unproject_batch",
    # Grid
    "GridEngine",
    "HexgridEngine",
    "Grid",
    "GridSettings",
    "make_grid",
    "make_grid_from_settings",
    # Distortion
    "TissotIndicatrix",
    "compute_tissot_indicatrix",
]
