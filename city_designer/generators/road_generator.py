"""
Road network generator for City Designer.

Builds the road list for one of three patterns:

GRID: N+1 horizontal and N+1 vertical straight roads inside a margin.
RADIAL: N spokes from the canvas center plus N//2 rings, each ring cut
    into short straight pieces joining every 8th boundary point.
RANDOM: 3N attempts to join two distinct nodes drawn from 2N random
    interior points plus four inset corners.

Every road is a Bresenham-rasterized straight segment.
"""

from typing import List, Optional
import logging
import math
import random

from ..models.city import Road
from ..models.geometry import Point
from ..utils.rasterize import bresenham_line, midpoint_circle
from ..config import (
    CityConfig,
    RoadPattern,
    ROAD_MARGIN,
    RANDOM_NODE_MARGIN,
    RANDOM_NODES_PER_UNIT,
    RANDOM_ROADS_PER_UNIT,
    RING_SEGMENT_STEP,
)

logger = logging.getLogger(__name__)


class RoadGenerator:
    """
    Generates road networks on a fixed-size canvas.

    Owns one random source, used by the RANDOM pattern. When no source
    is given a new one is seeded from OS entropy, so two generators
    built with defaults produce different random networks.
    """

    def __init__(
        self,
        width: int,
        height: int,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize road generator.

        Args:
            width, height: Canvas size
            rng: Random source (default: fresh entropy-seeded Random)
        """
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else random.Random()

    def generate_roads(self, config: CityConfig) -> List[Road]:
        """
        Generate roads for the configured pattern.

        Args:
            config: City configuration (road_pattern, layout_size, road_width)

        Returns:
            List of roads, each with at least one point
        """
        logger.info(f"Generating roads ({config.road_pattern.value} pattern)")

        if config.road_pattern == RoadPattern.RADIAL:
            roads = self.generate_radial_roads(config.layout_size, config.road_width)
        elif config.road_pattern == RoadPattern.RANDOM:
            roads = self.generate_random_roads(config.layout_size, config.road_width)
        else:
            roads = self.generate_grid_roads(config.layout_size, config.road_width)

        logger.info(f"Generated {len(roads)} road segments")
        return roads

    def generate_grid_roads(self, layout_size: int, road_width: int) -> List[Road]:
        """
        Evenly spaced horizontal and vertical roads.

        Horizontal roads span [margin, width - margin] and are spaced over
        the canvas height; vertical roads span [margin, height - margin]
        and are spaced over the canvas width. layout_size <= 0 degrades to
        a single pair of roads along the margin.
        """
        n = max(0, layout_size)
        margin = ROAD_MARGIN

        if n > 0:
            spacing_x = (self.width - 2 * margin) // n
            spacing_y = (self.height - 2 * margin) // n
        else:
            spacing_x = spacing_y = 0

        logger.debug(f"Creating {n}x{n} grid (spacing {spacing_x}x{spacing_y})")

        roads: List[Road] = []

        for i in range(n + 1):
            y = margin + i * spacing_y
            roads.append(self.create_road(margin, y, self.width - margin, y, road_width))

        for i in range(n + 1):
            x = margin + i * spacing_x
            roads.append(self.create_road(x, margin, x, self.height - margin, road_width))

        return roads

    def generate_radial_roads(self, layout_size: int, road_width: int) -> List[Road]:
        """
        Spokes from the canvas center plus polygonal rings.

        Ring k of N//2 has radius max_radius * k // (N//2). Each ring
        boundary is rasterized as a circle and re-segmented into straight
        roads from point i to point (i + 8) % len for every 8th point.
        """
        n = max(0, layout_size)
        center_x = self.width // 2
        center_y = self.height // 2
        max_radius = min(self.width, self.height) // 2 - ROAD_MARGIN

        roads: List[Road] = []

        logger.debug(f"Creating {n} radial spokes")
        for i in range(n):
            angle = (2.0 * math.pi * i) / n
            end_x = center_x + int(max_radius * math.cos(angle))
            end_y = center_y + int(max_radius * math.sin(angle))
            roads.append(self.create_road(center_x, center_y, end_x, end_y, road_width))

        num_rings = n // 2
        logger.debug(f"Creating {num_rings} circular rings")
        for ring in range(1, num_rings + 1):
            radius = (max_radius * ring) // num_rings
            roads.extend(self._ring_roads(center_x, center_y, radius, road_width))

        return roads

    def _ring_roads(
        self,
        center_x: int,
        center_y: int,
        radius: int,
        road_width: int
    ) -> List[Road]:
        """Cut one rasterized ring into straight pieces."""
        circle = midpoint_circle(center_x, center_y, radius)
        count = len(circle)

        pieces: List[Road] = []
        for i in range(0, count, RING_SEGMENT_STEP):
            start = circle[i]
            end = circle[(i + RING_SEGMENT_STEP) % count]
            pieces.append(self.create_road(start.x, start.y, end.x, end.y, road_width))

        return pieces

    def generate_random_roads(self, layout_size: int, road_width: int) -> List[Road]:
        """
        Straight roads between randomly chosen node pairs.

        Attempts that draw the same node twice are skipped, so the result
        can hold fewer than 3N roads. Repeated pairs are kept.
        """
        n = max(0, layout_size)
        num_roads = n * RANDOM_ROADS_PER_UNIT
        inset = RANDOM_NODE_MARGIN

        logger.debug(f"Creating {num_roads} random roads")

        nodes = [self.random_point() for _ in range(n * RANDOM_NODES_PER_UNIT)]
        nodes.extend((
            Point(inset, inset),
            Point(self.width - inset, inset),
            Point(inset, self.height - inset),
            Point(self.width - inset, self.height - inset),
        ))

        roads: List[Road] = []
        for _ in range(num_roads):
            idx1 = self.rng.randint(0, len(nodes) - 1)
            idx2 = self.rng.randint(0, len(nodes) - 1)
            if idx1 == idx2:
                continue
            a, b = nodes[idx1], nodes[idx2]
            roads.append(self.create_road(a.x, a.y, b.x, b.y, road_width))

        return roads

    def random_point(self, margin: int = RANDOM_NODE_MARGIN) -> Point:
        """Uniform integer point inside the canvas inset by margin."""
        x = self.rng.randint(margin, max(margin, self.width - margin))
        y = self.rng.randint(margin, max(margin, self.height - margin))
        return Point(x, y)

    @staticmethod
    def create_road(x0: int, y0: int, x1: int, y1: int, width: int) -> Road:
        """Rasterize a straight road between two points."""
        return Road(points=bresenham_line(x0, y0, x1, y1), width=width)
