"""
City data model for City Designer.

Provides Road, Building and the CityData aggregate that owns everything
one generation cycle produces.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from .geometry import BBox, CircularRegion, Point


class BuildingType(Enum):
    """Building classification by height."""
    LOW_RISE = "LOW_RISE"
    MID_RISE = "MID_RISE"
    HIGH_RISE = "HIGH_RISE"

    @classmethod
    def from_string(cls, value: str) -> 'BuildingType':
        """
        Parse a saved type tag.

        Unknown tags fall back to LOW_RISE.
        """
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.LOW_RISE


@dataclass
class Road:
    """
    One rasterized road segment.

    Attributes:
        points: Path order, first to last along the road
        width: Cosmetic width (renderer only)
    """
    points: List[Point]
    width: int = 8

    def __len__(self) -> int:
        return len(self.points)

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def point_at(self, progress: float) -> int:
        """
        Index of the road point for a normalized progress in [0, 1].

        Truncates progress * (len - 1), clamped to the last index.
        """
        index = int(progress * (len(self.points) - 1))
        return min(index, len(self.points) - 1)


@dataclass
class Building:
    """
    Building with an axis-aligned footprint.

    Attributes:
        x, y: Footprint center
        width: Size along X
        depth: Size along Y
        height: Vertical extent (renderer only)
        type: Height classification
    """
    x: float
    y: float
    width: float
    depth: float
    height: float
    type: BuildingType = BuildingType.LOW_RISE

    @property
    def footprint(self) -> BBox:
        """Footprint rectangle."""
        return BBox.from_center(self.x, self.y, self.width, self.depth)


@dataclass
class CityData:
    """
    Everything one generation cycle produces.

    Attributes:
        roads: Road network
        parks: Park regions; when a fountain is configured it is the last
            entry, appended directly after the configured parks
        fountain: Fountain boundary (empty when there is none)
        buildings: Accepted buildings
        generated: True once a valid city exists

    Mutated by generation (clear + fill), by interactive placement
    (try_place appends) and by load (replace). Mutations must be serialized by
    the caller; iterating roads while the generator replaces them is not
    safe.
    """
    roads: List[Road] = field(default_factory=list)
    parks: List[CircularRegion] = field(default_factory=list)
    fountain: CircularRegion = field(default_factory=CircularRegion)
    buildings: List[Building] = field(default_factory=list)
    generated: bool = False

    def clear(self) -> None:
        """Empty every list and drop the generated flag."""
        self.roads = []
        self.parks = []
        self.fountain = CircularRegion()
        self.buildings = []
        self.generated = False

    def replace(self, other: 'CityData') -> None:
        """
        Replace the contents wholesale with another record.

        Raises:
            ValueError: if other violates the data model invariants
        """
        other.validate()
        self.roads = other.roads
        self.parks = other.parks
        self.fountain = other.fountain
        self.buildings = other.buildings
        self.generated = True

    def validate(self) -> None:
        """
        Check the data model invariants.

        Raises:
            ValueError: if a road has no points
        """
        for i, road in enumerate(self.roads):
            if not road.points:
                raise ValueError(f"Road {i} has no points")

    def summary(self) -> Dict[str, int]:
        """Counts used for logging and reports."""
        counts = {
            'roads': len(self.roads),
            'road_points': sum(len(r.points) for r in self.roads),
            'parks': len(self.parks),
            'fountain_points': len(self.fountain.points),
            'buildings': len(self.buildings),
        }
        for building_type in BuildingType:
            key = building_type.value.lower()
            counts[key] = sum(
                1 for b in self.buildings if b.type == building_type
            )
        return counts
