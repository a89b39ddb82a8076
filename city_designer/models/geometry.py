"""
Core geometry types for City Designer.

Provides Point, BBox and CircularRegion, the shapes consulted by
generation, placement validation and traffic simulation.
"""

from dataclasses import dataclass, field
from typing import List, Tuple
import math


@dataclass(frozen=True, slots=True)
class Point:
    """Integer pixel coordinate produced by rasterization."""
    x: int
    y: int

    def distance_to(self, other: 'Point') -> float:
        """Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def __sub__(self, other: 'Point') -> 'Point':
        """Vector subtraction."""
        return Point(self.x - other.x, self.y - other.y)

    def __add__(self, other: 'Point') -> 'Point':
        """Vector addition."""
        return Point(self.x + other.x, self.y + other.y)


@dataclass(slots=True)
class BBox:
    """Axis-aligned bounding box in 2D."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def intersects(self, other: 'BBox') -> bool:
        """Check if this bbox intersects another (touching counts)."""
        return not (
            self.max_x < other.min_x or
            self.min_x > other.max_x or
            self.max_y < other.min_y or
            self.min_y > other.max_y
        )

    def contains_point(self, x: float, y: float) -> bool:
        """Check if point is inside bbox (inclusive)."""
        return (
            self.min_x <= x <= self.max_x and
            self.min_y <= y <= self.max_y
        )

    def contains_bbox(self, other: 'BBox') -> bool:
        """Check if other lies fully inside this bbox (inclusive)."""
        return (
            self.min_x <= other.min_x and
            other.max_x <= self.max_x and
            self.min_y <= other.min_y and
            other.max_y <= self.max_y
        )

    def expand(self, margin: float) -> 'BBox':
        """Return a new bbox expanded by margin on all sides."""
        return BBox(
            self.min_x - margin,
            self.min_y - margin,
            self.max_x + margin,
            self.max_y + margin
        )

    def closest_point(self, x: float, y: float) -> Tuple[float, float]:
        """Point of the box nearest to (x, y)."""
        return (
            max(self.min_x, min(x, self.max_x)),
            max(self.min_y, min(y, self.max_y)),
        )

    @property
    def width(self) -> float:
        """Width in X direction."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Height in Y direction."""
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        """Center of bbox."""
        return (
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2
        )

    @staticmethod
    def from_center(x: float, y: float, width: float, depth: float) -> 'BBox':
        """Create bbox from a center and a footprint size."""
        half_w = width / 2.0
        half_d = depth / 2.0
        return BBox(x - half_w, y - half_d, x + half_w, y + half_d)

    @staticmethod
    def from_points(points: List[Point]) -> 'BBox':
        """Create bbox from a list of points."""
        if not points:
            raise ValueError("Cannot create BBox from empty point list")

        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return BBox(min(xs), min(ys), max(xs), max(ys))


@dataclass
class CircularRegion:
    """
    Park or fountain, stored only as rasterized boundary points.

    Center and radius are not kept. Consumers derive them from the
    boundary, and the two derivations below are not interchangeable:

    - centroid_circle(): mean of the points, radius = max distance to it
      (placement validation)
    - bbox_circle(): bounding box midpoint, radius = half the x-extent
      (traffic simulation)
    """
    points: List[Point] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index: int) -> Point:
        return self.points[index]

    @property
    def is_empty(self) -> bool:
        return not self.points

    def centroid_circle(self) -> Tuple[float, float, float]:
        """
        Center as the centroid of the boundary points, radius as the
        maximum distance from that center to any boundary point.

        Returns:
            (center_x, center_y, radius)

        Raises:
            ValueError: if the region has no points
        """
        if not self.points:
            raise ValueError("Cannot derive circle from empty region")

        n = len(self.points)
        cx = sum(p.x for p in self.points) / n
        cy = sum(p.y for p in self.points) / n

        radius = 0.0
        for p in self.points:
            dx = p.x - cx
            dy = p.y - cy
            radius = max(radius, math.sqrt(dx * dx + dy * dy))

        return cx, cy, radius

    def bbox_circle(self) -> Tuple[float, float, float]:
        """
        Center as the bounding box midpoint, radius as half the
        bounding box width.

        Returns:
            (center_x, center_y, radius)

        Raises:
            ValueError: if the region has no points
        """
        bbox = BBox.from_points(self.points)
        cx, cy = bbox.center
        return cx, cy, bbox.width / 2.0

    def contains_bbox_circle(self, x: float, y: float) -> bool:
        """Inclusive point-in-circle test using bbox_circle()."""
        if not self.points:
            return False

        cx, cy, radius = self.bbox_circle()
        dx = x - cx
        dy = y - cy
        return dx * dx + dy * dy <= radius * radius
