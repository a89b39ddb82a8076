"""
Spatial indexing for road point queries.

Provides lookup of the road points that fall inside a query box, using
a grid-based spatial index over every rasterized road point.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Tuple
import math

from ..models.city import Road
from ..models.geometry import BBox, Point
from ..config import ROAD_INDEX_CELL_SIZE


class SpatialIndex(ABC):
    """Abstract base class for spatial indexing."""

    @abstractmethod
    def query(self, bbox: BBox) -> List[Point]:
        """
        Query points inside the given bounding box.

        Args:
            bbox: Bounding box to query (inclusive)

        Returns:
            Points inside the box
        """
        pass

    def any_in(self, bbox: BBox) -> bool:
        """Check if any indexed point lies inside the box."""
        return bool(self.query(bbox))


class RoadPointIndex(SpatialIndex):
    """
    Grid-based spatial index for road points.

    Divides the plane into square cells and buckets every road point by
    cell. Queries only visit the cells a box overlaps, then filter the
    candidates with an exact inclusive containment test, so results match
    a scan of every road point.
    """

    def __init__(
        self,
        roads: List[Road],
        cell_size: float = ROAD_INDEX_CELL_SIZE
    ):
        """
        Initialize spatial index.

        Args:
            roads: Roads whose points are indexed
            cell_size: Size of grid cells
        """
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")

        self.cell_size = cell_size
        self.num_points = 0
        self.grid: Dict[Tuple[int, int], List[Point]] = {}

        for road in roads:
            for point in road.points:
                self.grid.setdefault(self._get_cell(point.x, point.y), []).append(point)
                self.num_points += 1

    def _get_cell(self, x: float, y: float) -> Tuple[int, int]:
        """Get grid cell coordinates for a point."""
        return (
            math.floor(x / self.cell_size),
            math.floor(y / self.cell_size),
        )

    def query(self, bbox: BBox) -> List[Point]:
        min_cell = self._get_cell(bbox.min_x, bbox.min_y)
        max_cell = self._get_cell(bbox.max_x, bbox.max_y)

        result: List[Point] = []
        for cx in range(min_cell[0], max_cell[0] + 1):
            for cy in range(min_cell[1], max_cell[1] + 1):
                for point in self.grid.get((cx, cy), ()):
                    if bbox.contains_point(point.x, point.y):
                        result.append(point)

        return result

    def get_stats(self) -> Dict[str, int]:
        """Get index statistics."""
        return {
            'num_points': self.num_points,
            'num_cells': len(self.grid),
            'avg_per_cell': self.num_points // max(1, len(self.grid)),
        }
