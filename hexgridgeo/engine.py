"""
Grid Engine Interface.

The hexagonal cell math (cell lookup, corners, neighbors, Morton codes,
polygon rasterization) is done by an external engine. This module defines
the narrow planar interface the `Grid` facade relies on, and the adapter
over the `hexgrid` engine with its `morton` space-filling-curve index.

Hex, code and region values are opaque: the facade passes them through
without inspecting them. Only points cross the boundary, as `PlanarPoint`.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Sequence, Tuple

import hexgrid
import morton

from common.types import Orientation, PlanarPoint

_ORIENTATIONS = {
    Orientation.POINTY: hexgrid.OrientationPointy,
    Orientation.FLAT: hexgrid.OrientationFlat,
}


class GridEngine(ABC):
    """Abstract base class for planar hexagonal grid engines."""

    @abstractmethod
    def hex_to_code(self, hex: Any) -> int:
        """Encode a cell as an integer."""
        pass

    @abstractmethod
    def hex_from_code(self, code: int) -> Any:
        """Decode an integer produced by `hex_to_code`."""
        pass

    @abstractmethod
    def hex_at(self, point: PlanarPoint) -> Any:
        """Cell containing a planar point."""
        pass

    @abstractmethod
    def hex_center(self, hex: Any) -> PlanarPoint:
        """Planar center of a cell."""
        pass

    @abstractmethod
    def hex_corners(self, hex: Any) -> List[PlanarPoint]:
        """Six planar corners of a cell, in the orientation's order."""
        pass

    @abstractmethod
    def hex_neighbors(self, hex: Any, layers: int) -> List[Any]:
        """Cells within `layers` rings around a cell."""
        pass

    @abstractmethod
    def make_region(self, points: Sequence[PlanarPoint]) -> Any:
        """Region covering a planar polygon."""
        pass


class HexgridEngine(GridEngine):
    """Adapter over `hexgrid.Grid`.

    Parameters
    ----------
    orientation : Orientation
        Hexagon orientation.
    origin : Tuple[float, float]
        Planar center of cell (0, 0).
    size : Tuple[float, float]
        Cell size along x and y, in planar units.
    index_dimensions, index_bits : int
        Morton index sizing; bounds the range of encodable cells.
    """

    def __init__(
        self,
        orientation: Orientation,
        origin: Tuple[float, float],
        size: Tuple[float, float],
        index_dimensions: int = 2,
        index_bits: int = 32
    ):
        self._grid = hexgrid.Grid(
            _ORIENTATIONS[orientation],
            hexgrid.Point(float(origin[0]), float(origin[1])),
            hexgrid.Point(float(size[0]), float(size[1])),
            morton.Morton(index_dimensions, index_bits)
        )

    @staticmethod
    def _to_engine(point: PlanarPoint) -> 'hexgrid.Point':
        return hexgrid.Point(point.x, point.y)

    @staticmethod
    def _from_engine(point) -> PlanarPoint:
        return PlanarPoint(x=float(point.x), y=float(point.y))

    def hex_to_code(self, hex):
        return self._grid.hex_to_code(hex)

    def hex_from_code(self, code):
        return self._grid.hex_from_code(code)

    def hex_at(self, point):
        return self._grid.hex_at(self._to_engine(point))

    def hex_center(self, hex):
        return self._from_engine(self._grid.hex_center(hex))

    def hex_corners(self, hex):
        return [self._from_engine(c) for c in self._grid.hex_corners(hex)]

    def hex_neighbors(self, hex, layers):
        return self._grid.hex_neighbors(hex, layers)

    def make_region(self, points):
        return self._grid.make_region([self._to_engine(p) for p in points])
