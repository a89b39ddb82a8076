"""
City generator orchestrator for City Designer.

Owns the CityData record and runs one generation cycle:

1. Clear the record
2. Generate roads (RoadGenerator)
3. Generate parks and the central fountain (midpoint circles, no
   collision checks)
4. Generate buildings (approximate placement policy, bounded retries)
5. Flag the record as generated

Interactive placement and load operate on the same record afterwards.
"""

from typing import Optional, Tuple
import logging
import random

from ..models.city import Building, BuildingType, CityData
from ..models.geometry import CircularRegion
from ..processing.placement import (
    PlacementResult,
    is_clear_of_parks_approx,
    try_place,
)
from ..utils.rasterize import midpoint_circle
from .road_generator import RoadGenerator
from ..config import (
    CityConfig,
    SkylineType,
    BUILDING_ATTEMPTS_PER_REQUEST,
    BUILDING_MARGIN,
    HIGH_RISE_HEIGHT,
    LOW_RISE_HEIGHT,
    MID_RISE_HEIGHT,
    PARK_MARGIN,
)

logger = logging.getLogger(__name__)


class CityGenerator:
    """
    Generates and owns a city on a fixed-size canvas.

    All mutation goes through this class; callers get read access via
    city_data. Operations are synchronous and must be serialized by the
    host (one call at a time).
    """

    def __init__(
        self,
        width: int,
        height: int,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize city generator.

        Args:
            width, height: Canvas size
            rng: Random source shared with the road generator
                (default: fresh entropy-seeded Random)
        """
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else random.Random()
        self.road_generator = RoadGenerator(width, height, rng=self.rng)
        self._city = CityData()

    @property
    def city_data(self) -> CityData:
        """The owned city record (read access for renderers/serializers)."""
        return self._city

    @property
    def canvas(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def has_city(self) -> bool:
        return self._city.generated

    def generate_city(self, config: CityConfig) -> CityData:
        """
        Run a full generation cycle.

        Invalidates any traffic generated against the previous roads;
        callers must regenerate traffic afterwards.

        Args:
            config: City configuration

        Returns:
            The regenerated city record
        """
        logger.info(f"Generating city: {config.describe()}")

        self._city.clear()

        self._city.roads = self.road_generator.generate_roads(config)
        self.generate_parks(config)
        self.generate_buildings(config)

        self._city.generated = True

        logger.info(
            f"City generation complete: {len(self._city.roads)} roads, "
            f"{len(self._city.parks)} parks, "
            f"{len(self._city.buildings)} buildings"
        )
        return self._city

    def generate_parks(self, config: CityConfig) -> None:
        """
        Place parks and the central fountain.

        Parks are circles of park_radius at random centers; they may
        overlap roads, each other and the fountain. The fountain, when
        fountain_radius > 0, is appended to the park list right after the
        configured parks and is also kept as city.fountain.
        """
        if config.num_parks == 0:
            logger.info("No parks requested")
        else:
            logger.info(f"Generating {config.num_parks} parks")

        x_hi = max(PARK_MARGIN, self.width - PARK_MARGIN)
        y_hi = max(PARK_MARGIN, self.height - PARK_MARGIN)

        for i in range(config.num_parks):
            x = self.rng.randint(PARK_MARGIN, x_hi)
            y = self.rng.randint(PARK_MARGIN, y_hi)
            park = CircularRegion(midpoint_circle(x, y, config.park_radius))
            self._city.parks.append(park)
            logger.debug(f"Park {i + 1} at ({x}, {y}) with radius {config.park_radius}")

        if config.fountain_radius > 0:
            center_x = self.width // 2
            center_y = self.height // 2
            fountain = CircularRegion(
                midpoint_circle(center_x, center_y, config.fountain_radius)
            )
            self._city.parks.append(fountain)
            self._city.fountain = fountain
            logger.debug(
                f"Central fountain at ({center_x}, {center_y}) "
                f"with radius {config.fountain_radius}"
            )

    def generate_buildings(self, config: CityConfig) -> None:
        """
        Place buildings with the approximate policy.

        Makes up to 10 attempts per requested building. A shortfall when
        the attempt budget runs out is accepted as final.
        """
        requested = config.num_buildings
        if requested == 0:
            logger.info("No buildings requested")
            return

        logger.info(f"Generating {requested} buildings")

        x_hi = max(BUILDING_MARGIN, self.width - BUILDING_MARGIN)
        y_hi = max(BUILDING_MARGIN, self.height - BUILDING_MARGIN)

        buildings = self._city.buildings
        attempts = 0
        max_attempts = requested * BUILDING_ATTEMPTS_PER_REQUEST

        while len(buildings) < requested and attempts < max_attempts:
            attempts += 1

            x = float(self.rng.randint(BUILDING_MARGIN, x_hi))
            y = float(self.rng.randint(BUILDING_MARGIN, y_hi))
            width = self.rng.uniform(config.building_size_min, config.building_size_max)
            depth = self.rng.uniform(config.building_size_min, config.building_size_max)

            if not is_clear_of_parks_approx(x, y, self._city.parks):
                continue

            building_type, height = self._roll_building(config.skyline_type)
            buildings.append(Building(x, y, width, depth, height, building_type))

            if len(buildings) % 5 == 0:
                logger.debug(f"Generated {len(buildings)} buildings")

        if len(buildings) < requested:
            logger.warning(
                f"Placed {len(buildings)} of {requested} buildings "
                f"after {attempts} attempts"
            )

        counts = self._city.summary()
        logger.info(
            f"Completed {len(buildings)} buildings "
            f"(low-rise: {counts['low_rise']}, mid-rise: {counts['mid_rise']}, "
            f"high-rise: {counts['high_rise']})"
        )

    def _roll_building(self, skyline: SkylineType) -> Tuple[BuildingType, float]:
        """Draw a building type and height for the skyline distribution."""
        if skyline == SkylineType.LOW_RISE:
            building_type = BuildingType.LOW_RISE
        elif skyline == SkylineType.MID_RISE:
            building_type = BuildingType.MID_RISE
        elif skyline == SkylineType.SKYSCRAPER:
            # 2 of 3 rolls are high-rise
            choice = self.rng.randint(0, 2)
            building_type = BuildingType.HIGH_RISE if choice <= 1 else BuildingType.MID_RISE
        else:
            choice = self.rng.randint(0, 2)
            building_type = (
                BuildingType.LOW_RISE,
                BuildingType.MID_RISE,
                BuildingType.HIGH_RISE,
            )[choice]

        return building_type, self.rng.uniform(*_HEIGHT_RANGES[building_type])

    def place_building(self, x: float, y: float, config: CityConfig) -> PlacementResult:
        """
        Interactive placement with the strict policy.

        Uses the configured standard footprint. On rejection the city is
        left untouched.

        Args:
            x, y: Requested footprint center
            config: City configuration (standard_width, standard_depth)

        Returns:
            PlacementResult with the rejection reason or the new building
        """
        city = self._city
        return try_place(
            (x, y),
            (config.standard_width, config.standard_depth),
            city.roads,
            city.parks,
            city.fountain,
            city.buildings,
            self.canvas,
        )

    def load_city(self, city: CityData) -> CityData:
        """
        Replace the owned record with a loaded one.

        Raises:
            ValueError: if the loaded record violates the data model
        """
        self._city.replace(city)
        logger.info(
            f"Loaded city: {len(self._city.roads)} roads, "
            f"{len(self._city.parks)} parks, "
            f"{len(self._city.buildings)} buildings"
        )
        return self._city


_HEIGHT_RANGES = {
    BuildingType.LOW_RISE: LOW_RISE_HEIGHT,
    BuildingType.MID_RISE: MID_RISE_HEIGHT,
    BuildingType.HIGH_RISE: HIGH_RISE_HEIGHT,
}
