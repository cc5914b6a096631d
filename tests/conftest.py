"""Shared test doubles for the hexgridgeo test suite."""

from typing import List

from common.types import PlanarPoint
from hexgridgeo.engine import GridEngine


class RecordingEngine(GridEngine):
    """Planar engine that records what the facade hands it.

    Cells are (q, r) tuples of the rounded planar coordinates; codes are
    a reversible pairing of the two.
    """

    def __init__(self, settings=None):
        self.settings = settings
        self.seen_points: List[PlanarPoint] = []
        self.region_points: List[PlanarPoint] = []

    def hex_to_code(self, hex):
        q, r = hex
        return (q << 32) | (r & 0xFFFFFFFF)

    def hex_from_code(self, code):
        q = code >> 32
        r = code & 0xFFFFFFFF
        if r >= 1 << 31:
            r -= 1 << 32
        return (q, r)

    def hex_at(self, point):
        self.seen_points.append(point)
        return (round(point.x), round(point.y))

    def hex_center(self, hex):
        return PlanarPoint(x=float(hex[0]), y=float(hex[1]))

    def hex_corners(self, hex):
        q, r = hex
        offsets = [(1, 0), (0.5, 1), (-0.5, 1), (-1, 0), (-0.5, -1), (0.5, -1)]
        return [PlanarPoint(x=q + dx, y=r + dy) for dx, dy in offsets]

    def hex_neighbors(self, hex, layers):
        q, r = hex
        return [(q + dq, r + dr)
                for dq in range(-layers, layers + 1)
                for dr in range(-layers, layers + 1)]

    def make_region(self, points):
        self.region_points = list(points)
        return ("region", len(self.region_points))
