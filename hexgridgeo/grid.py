"""
Geographic Hexagonal Grid.

`Grid` is a coordinate-space adapter around a planar grid engine: every
geographic argument is projected before it reaches the engine, and every
planar result is un-projected before it reaches the caller. Codes, cells,
neighbors and regions pass through untouched.

Example Usage
-------------
>>> from hexgridgeo import make_grid, make_point, Orientation, PROJECTION_SM
>>> grid = make_grid(Orientation.FLAT, 500, PROJECTION_SM)
>>> cell = grid.hex_at(make_point(-73.0, 40.0))
>>> corners = grid.hex_corners(cell)
"""

from dataclasses import dataclass, asdict
import hashlib
import json
import math
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from common.logging_config import get_logger
from common.types import GeoPoint, Orientation, make_point
from hexgridgeo.engine import GridEngine, HexgridEngine
from hexgridgeo.projections import PROJECTIONS, Projection, get_projection

logger = get_logger(__name__)


@dataclass(frozen=True)
class GridSettings:
    """Construction parameters of a grid.

    Attributes
    ----------
    orientation : Orientation
        Hexagon orientation.
    size : float
        Cell size in the projection's planar units.
    projection_name : str
        Registry name of the projection; must be a key of PROJECTIONS.
    index_dimensions : int
        Dimensions of the Morton index used for cell codes.
    index_bits : int
        Bits per dimension of the Morton index.
    origin : Tuple[float, float]
        Planar center of cell (0, 0).
    """
    orientation: Orientation
    size: float
    projection_name: str = "mercator"
    index_dimensions: int = 2
    index_bits: int = 32
    origin: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self):
        """Validate settings."""
        if not isinstance(self.orientation, Orientation):
            raise ValueError(f"orientation must be an Orientation, got {self.orientation!r}")
        if not (math.isfinite(self.size) and self.size > 0):
            raise ValueError(f"Cell size must be a finite positive number, got {self.size}")
        if self.projection_name not in PROJECTIONS:
            raise KeyError(
                f"Unknown projection {self.projection_name!r}; known: {sorted(PROJECTIONS)}"
            )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> 'GridSettings':
        """Build settings from plain configuration data.

        Parameters
        ----------
        config : dict
            Keys match the attribute names; 'orientation' may be a name
            ('pointy' or 'flat').
        """
        values = dict(config)
        orientation = values.get("orientation")
        if isinstance(orientation, str):
            values["orientation"] = Orientation.from_name(orientation)
        if "size" in values:
            values["size"] = float(values["size"])
        if "origin" in values:
            values["origin"] = tuple(float(v) for v in values["origin"])
        return cls(**values)

    def config_hash(self) -> str:
        """Compute a deterministic hash of the settings.

        Returns
        -------
        str
            First 16 hex digits of the SHA-256 of the settings.
        """
        data = asdict(self)
        data["orientation"] = self.orientation.value
        config_str = json.dumps(data, sort_keys=True, default=str)
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]


EngineFactory = Callable[[GridSettings], GridEngine]


def hexgrid_engine_factory(settings: GridSettings) -> GridEngine:
    """Default engine: a `hexgrid` grid with square cells of `settings.size`."""
    return HexgridEngine(
        orientation=settings.orientation,
        origin=settings.origin,
        size=(settings.size, settings.size),
        index_dimensions=settings.index_dimensions,
        index_bits=settings.index_bits
    )


class Grid:
    """Hexagonal grid addressed in geographic coordinates.

    Parameters
    ----------
    engine : GridEngine
        Planar grid engine; owned by this grid.
    projection : Projection
        Projection between geographic and planar space; shared.
    settings : GridSettings
        Settings the grid was built from.

    Notes
    -----
    The grid holds no mutable state. Concurrent read-only use is as safe
    as the engine it wraps.
    """

    def __init__(self, engine: GridEngine, projection: Projection, settings: GridSettings):
        self._engine = engine
        self._projection = projection
        self._settings = settings

    @property
    def projection(self) -> Projection:
        return self._projection

    @property
    def orientation(self) -> Orientation:
        return self._settings.orientation

    @property
    def size(self) -> float:
        return self._settings.size

    @property
    def settings(self) -> GridSettings:
        return self._settings

    def hex_to_code(self, hex: Any) -> int:
        return self._engine.hex_to_code(hex)

    def hex_from_code(self, code: int) -> Any:
        return self._engine.hex_from_code(code)

    def hex_at(self, geo_point: GeoPoint) -> Any:
        """Cell containing a geographic point.

        Raises
        ------
        ProjectionDomainError
            If the point is outside the projection's domain.
        """
        return self._engine.hex_at(self._projection.geo_to_point(geo_point))

    def hex_center(self, hex: Any) -> GeoPoint:
        return self._projection.point_to_geo(self._engine.hex_center(hex))

    def hex_corners(self, hex: Any) -> List[GeoPoint]:
        """Six geographic corners of a cell.

        Each corner is un-projected independently, so away from the
        projection's true-scale region the result is not a regular (or
        even convex) hexagon in degrees.
        """
        return [self._projection.point_to_geo(c) for c in self._engine.hex_corners(hex)]

    def hex_neighbors(self, hex: Any, layers: int) -> List[Any]:
        return self._engine.hex_neighbors(hex, layers)

    def make_region(self, polygon: Iterable[Union[GeoPoint, Tuple[float, float]]]) -> Any:
        """Region covering a geographic polygon.

        Parameters
        ----------
        polygon : iterable of GeoPoint or (lon, lat)
            Vertices in the winding order the engine expects; they are
            projected in order and not reordered.
        """
        points = []
        for vertex in polygon:
            if not isinstance(vertex, GeoPoint):
                vertex = make_point(*vertex)
            points.append(self._projection.geo_to_point(vertex))
        return self._engine.make_region(points)

    def __repr__(self) -> str:
        return (
            f"Grid(orientation={self.orientation.value}, size={self.size}, "
            f"projection={self._projection.name})"
        )


def make_grid(
    orientation: Union[Orientation, str],
    size: float,
    projection: Union[Projection, str],
    engine_factory: Optional[EngineFactory] = None
) -> Grid:
    """Create a grid.

    Parameters
    ----------
    orientation : Orientation or str
        Hexagon orientation.
    size : float
        Cell size in the projection's planar units (meters for Sinusoidal
        and Spherical Mercator, degrees for NoOp, radians for AEP).
    projection : Projection or str
        Registered projection instance or registry name, so that the
        grid's settings can rebuild it.
    engine_factory : callable, optional
        Builds the engine from the settings; defaults to the `hexgrid`
        engine.

    Returns
    -------
    Grid
        The configured grid.
    """
    if isinstance(orientation, str):
        orientation = Orientation.from_name(orientation)
    projection = get_projection(projection)
    if PROJECTIONS.get(projection.name) is not projection:
        raise ValueError(
            f"Projection {projection!r} is not registered; grid settings can "
            f"only name one of {sorted(PROJECTIONS)}"
        )
    settings = GridSettings(
        orientation=orientation,
        size=float(size),
        projection_name=projection.name
    )
    return _build(settings, projection, engine_factory)


def make_grid_from_settings(
    settings: GridSettings,
    engine_factory: Optional[EngineFactory] = None
) -> Grid:
    """Create a grid from settings; the projection is looked up by name."""
    return _build(settings, get_projection(settings.projection_name), engine_factory)


def _build(
    settings: GridSettings,
    projection: Projection,
    engine_factory: Optional[EngineFactory]
) -> Grid:
    engine = (engine_factory or hexgrid_engine_factory)(settings)
    logger.debug(
        f"Created {settings.orientation.value} grid, size={settings.size}, "
        f"projection={projection.name}, config hash {settings.config_hash()}"
    )
    return Grid(engine, projection, settings)
