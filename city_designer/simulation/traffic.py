"""
Traffic simulation for City Designer.

Spawns cars on road points and advances them every tick. Each car moves
as a point mass along its velocity, is blocked by parks and the fountain,
and is relocated along a (possibly new) road once its progress wraps.

Obstacle escape is a heuristic, not collision response: a blocked car
keeps its position and jumps its road progress forward by 0.1 so the
next transition lands it past the obstacle.

Obstacles use CircularRegion.bbox_circle() with no buffer.
"""

from typing import List, Optional, Sequence, Tuple
import logging
import random

from ..models.city import Road
from ..models.geometry import BBox, CircularRegion, Point
from ..models.traffic import Car, CarState, TrafficData
from ..utils.math_utils import normalize_vector
from ..config import (
    CAR_COLORS,
    CAR_SPEED_MIN,
    CAR_SPEED_RANGE,
    OBSTACLE_PROGRESS_JUMP,
    PROGRESS_SPEED_DIVISOR,
    ROAD_SWITCH_PROBABILITY,
    SPAWN_ATTEMPTS_PER_CAR,
    TRAFFIC_SCREEN_MARGIN,
    TRANSITION_CANDIDATES,
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
)

logger = logging.getLogger(__name__)


class TrafficGenerator:
    """
    Owns one traffic session: the car population and the obstacles it
    was generated against.

    Precondition: update_traffic() must receive the same road list that
    generate_traffic() was given. Regenerating roads invalidates every
    car's road_index; regenerate traffic right after any city
    regeneration. This is not checked.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Random source (default: fresh entropy-seeded Random)
        """
        self.rng = rng if rng is not None else random.Random()
        self._traffic = TrafficData()
        self.obstacles: List[CircularRegion] = []
        self.screen_width = CANVAS_WIDTH
        self.screen_height = CANVAS_HEIGHT

    @property
    def traffic_data(self) -> TrafficData:
        return self._traffic

    def has_traffic(self) -> bool:
        return bool(self._traffic.cars)

    def clear(self) -> None:
        self._traffic.cars = []

    # -------------------------------------------------------------------------
    # Spawn
    # -------------------------------------------------------------------------

    def generate_traffic(
        self,
        roads: Sequence[Road],
        num_cars: int,
        parks: Sequence[CircularRegion],
        fountain: Optional[CircularRegion],
        screen_width: int,
        screen_height: int
    ) -> TrafficData:
        """
        Replace the population with up to num_cars new cars.

        Each attempt picks a random road and progress, snaps to the road
        point at that progress and rejects points outside the screen
        margin or inside an obstacle. At most 3 * num_cars attempts are
        made, so fewer cars than requested may spawn.

        Args:
            roads: Road network
            num_cars: Requested population
            parks: Park regions
            fountain: Fountain region (may be None or empty)
            screen_width, screen_height: Canvas size

        Returns:
            The new traffic data
        """
        self._traffic.cars = []
        self.obstacles = list(parks)
        if fountain is not None and not fountain.is_empty:
            self.obstacles.append(fountain)
        self.screen_width = screen_width
        self.screen_height = screen_height

        if not roads or num_cars <= 0:
            return self._traffic

        logger.info(f"Generating {num_cars} cars on {len(roads)} roads")

        bounds = self._screen_bounds()
        cars = self._traffic.cars
        attempts = 0

        while len(cars) < num_cars and attempts < num_cars * SPAWN_ATTEMPTS_PER_CAR:
            attempts += 1

            car = Car(state=CarState.SPAWNING)
            car.road_index = self._random_road_index(len(roads))
            car.road_progress = self.rng.random()
            road = roads[car.road_index]

            if road.points:
                point_index = road.point_at(car.road_progress)
                point = road.points[point_index]
                car.x = float(point.x)
                car.y = float(point.y)

                if not bounds.contains_point(car.x, car.y):
                    continue
                if self.is_blocked(car.x, car.y):
                    continue

                next_point = _next_point(road, point_index)
                if next_point is not None:
                    ux, uy, length = normalize_vector(
                        next_point.x - point.x, next_point.y - point.y
                    )
                    if length > 0.0:
                        car.speed = CAR_SPEED_MIN + self.rng.random() * CAR_SPEED_RANGE
                        car.vx = ux * car.speed
                        car.vy = uy * car.speed

            car.color = self._random_color()
            car.state = CarState.CRUISING
            cars.append(car)

        if len(cars) < num_cars:
            logger.warning(
                f"Spawned {len(cars)} of {num_cars} cars after {attempts} attempts"
            )
        else:
            logger.info(f"Spawned {len(cars)} cars")

        return self._traffic

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def update_traffic(self, delta_time: float, roads: Sequence[Road]) -> None:
        """
        Advance every car by delta_time seconds.

        Args:
            delta_time: Elapsed time
            roads: The road list traffic was generated against
        """
        if not roads:
            return

        for car in self._traffic.cars:
            car.state = CarState.CRUISING

            new_x = car.x + car.vx * delta_time
            new_y = car.y + car.vy * delta_time

            if self.is_blocked(new_x, new_y):
                car.road_progress += OBSTACLE_PROGRESS_JUMP
            else:
                car.x = new_x
                car.y = new_y

            car.road_progress += (car.speed / PROGRESS_SPEED_DIVISOR) * delta_time

            if car.road_progress >= 1.0:
                self._transition(car, roads)

    def _transition(self, car: Car, roads: Sequence[Road]) -> None:
        """
        Move a car that reached the end of its road.

        20% of the time the car switches to a random road. Candidates at
        progress 0, 0.2, ..., 0.8 are probed; the first one in bounds and
        clear of obstacles becomes the new position. If none qualifies
        the car moves to the next road index with progress 0 and keeps
        its (stale) position until the next tick.
        """
        car.state = CarState.TRANSITIONING
        car.road_progress = 0.0

        if self.rng.random() < ROAD_SWITCH_PROBABILITY:
            car.road_index = self._random_road_index(len(roads))

        road = roads[car.road_index]
        if not road.points:
            return

        candidate = self._find_entry_point(road)
        if candidate is None:
            car.road_index = (car.road_index + 1) % len(roads)
            car.road_progress = 0.0
            return

        progress, point_index = candidate
        point = road.points[point_index]
        car.x = float(point.x)
        car.y = float(point.y)
        car.road_progress = progress

        next_point = _next_point(road, point_index)
        if next_point is not None:
            ux, uy, length = normalize_vector(
                next_point.x - point.x, next_point.y - point.y
            )
            if length > 0.0:
                car.vx = ux * car.speed
                car.vy = uy * car.speed

        car.state = CarState.CRUISING

    def _find_entry_point(self, road: Road) -> Optional[Tuple[float, int]]:
        """First (progress, point index) candidate in bounds and unobstructed."""
        bounds = self._screen_bounds()

        for attempt in range(TRANSITION_CANDIDATES):
            progress = attempt / TRANSITION_CANDIDATES
            point_index = road.point_at(progress)
            point = road.points[point_index]

            if not bounds.contains_point(point.x, point.y):
                continue
            if self.is_blocked(point.x, point.y):
                continue

            return progress, point_index

        return None

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def is_blocked(self, x: float, y: float) -> bool:
        """Check if a position is inside any park or the fountain."""
        return any(region.contains_bbox_circle(x, y) for region in self.obstacles)

    def _screen_bounds(self) -> BBox:
        margin = TRAFFIC_SCREEN_MARGIN
        return BBox(
            margin,
            margin,
            self.screen_width - margin,
            self.screen_height - margin,
        )

    def _random_road_index(self, num_roads: int) -> int:
        return min(int(self.rng.random() * num_roads), num_roads - 1)

    def _random_color(self) -> Tuple[float, float, float]:
        index = min(int(self.rng.random() * len(CAR_COLORS)), len(CAR_COLORS) - 1)
        return CAR_COLORS[index]


def _next_point(road: Road, index: int) -> Optional[Point]:
    """The point after index on the road, or None at the last point."""
    if index < len(road.points) - 1:
        return road.points[index + 1]
    return None
