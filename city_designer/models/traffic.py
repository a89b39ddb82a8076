"""
Traffic data model for City Designer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class CarState(Enum):
    """Per-car simulation state."""
    SPAWNING = "spawning"
    CRUISING = "cruising"
    TRANSITIONING = "transitioning"


@dataclass
class Car:
    """
    Single car moving along the road network.

    Attributes:
        x, y: Current position
        vx, vy: Velocity components (units per second)
        speed: Velocity magnitude
        road_index: Index into the road list traffic was generated against
        road_progress: Normalized progress along that road
        color: RGB display color
        state: Simulation state
    """
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    speed: float = 0.0
    road_index: int = 0
    road_progress: float = 0.0
    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    state: CarState = CarState.SPAWNING


@dataclass
class TrafficData:
    """Car population of one traffic session."""
    cars: List[Car] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cars)
