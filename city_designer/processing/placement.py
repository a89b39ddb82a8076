"""
Building placement validation for City Designer.

Two placement policies exist and are selected by call site:

APPROXIMATE (automatic generation):
    A candidate center must be at least 80 units from the first boundary
    point of every park. Roads, other buildings and the canvas are not
    checked.

STRICT (interactive placement):
    Ordered checks, stopping at the first failure:
    1. canvas boundary (60 margin)
    2. road points (20 buffer around the footprint)
    3. parks (35 buffer, centroid circle)
    4. fountain (35 buffer, centroid circle)
    5. existing buildings (25 buffer, box vs box)

The two policies are deliberately not unified: generated cities may hold
buildings the strict policy would refuse.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple
import logging

from ..models.city import Building, BuildingType, CityData, Road
from ..models.geometry import BBox, CircularRegion
from ..utils.math_utils import bbox_circle_overlap, distance
from .spatial_index import RoadPointIndex, SpatialIndex
from ..config import (
    APPROX_PARK_CLEARANCE,
    PLACED_BUILDING_HEIGHT,
    PLACEMENT_BUILDING_BUFFER,
    PLACEMENT_FOUNTAIN_BUFFER,
    PLACEMENT_PARK_BUFFER,
    PLACEMENT_ROAD_BUFFER,
    PLACEMENT_SCREEN_MARGIN,
)

logger = logging.getLogger(__name__)


class PlacementRejection(Enum):
    """Reason a strict placement was refused."""
    NONE = "none"
    BOUNDARY = "boundary"
    ROAD = "road"
    PARK = "park"
    FOUNTAIN = "fountain"
    BUILDING = "building"

    @property
    def message(self) -> str:
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    PlacementRejection.NONE: "building placed",
    PlacementRejection.BOUNDARY: "too close to screen edge",
    PlacementRejection.ROAD: "overlaps with road",
    PlacementRejection.PARK: "overlaps with park",
    PlacementRejection.FOUNTAIN: "overlaps with fountain",
    PlacementRejection.BUILDING: "overlaps with existing building",
}


@dataclass
class PlacementResult:
    """
    Outcome of a strict placement attempt.

    Attributes:
        accepted: True if the building was appended
        reason: Why it was refused (NONE when accepted)
        building: The appended building, if any
    """
    accepted: bool
    reason: PlacementRejection = PlacementRejection.NONE
    building: Optional[Building] = None

    def __bool__(self) -> bool:
        return self.accepted

    @property
    def message(self) -> str:
        return self.reason.message


# =============================================================================
# APPROXIMATE POLICY
# =============================================================================

def is_clear_of_parks_approx(
    x: float,
    y: float,
    parks: Sequence[CircularRegion],
    min_distance: float = APPROX_PARK_CLEARANCE
) -> bool:
    """
    Loose park clearance check used during automatic generation.

    Measures the straight-line distance from the candidate center to
    each park's first boundary point; it is not a center/radius test.

    Args:
        x, y: Candidate building center
        parks: Park regions (fountain included)
        min_distance: Required clearance

    Returns:
        True if every park reference point is at least min_distance away
    """
    for park in parks:
        if park.is_empty:
            continue
        ref = park[0]
        if distance(x, y, ref.x, ref.y) < min_distance:
            return False
    return True


# =============================================================================
# STRICT POLICY CHECKS
# =============================================================================

def fits_canvas(
    footprint: BBox,
    canvas: Tuple[int, int],
    margin: float = PLACEMENT_SCREEN_MARGIN
) -> bool:
    """Check the footprint lies inside the canvas inset by margin."""
    width, height = canvas
    allowed = BBox(margin, margin, width - margin, height - margin)
    return allowed.contains_bbox(footprint)


def collides_with_roads(
    footprint: BBox,
    road_index: SpatialIndex,
    buffer: float = PLACEMENT_ROAD_BUFFER
) -> bool:
    """Any road point inside the buffered footprint collides."""
    return road_index.any_in(footprint.expand(buffer))


def collides_with_circle(
    footprint: BBox,
    region: CircularRegion,
    buffer: float
) -> bool:
    """
    Buffered footprint vs buffered circle.

    The circle is derived with CircularRegion.centroid_circle(); the
    footprint is grown by buffer and the radius by the same buffer.
    """
    if region.is_empty:
        return False

    cx, cy, radius = region.centroid_circle()
    return bbox_circle_overlap(footprint.expand(buffer), cx, cy, radius + buffer)


def collides_with_parks(
    footprint: BBox,
    parks: Sequence[CircularRegion],
    buffer: float = PLACEMENT_PARK_BUFFER
) -> bool:
    return any(collides_with_circle(footprint, park, buffer) for park in parks)


def collides_with_buildings(
    footprint: BBox,
    buildings: Sequence[Building],
    buffer: float = PLACEMENT_BUILDING_BUFFER
) -> bool:
    """Box vs box overlap with the candidate grown by buffer."""
    expanded = footprint.expand(buffer)
    return any(expanded.intersects(b.footprint) for b in buildings)


def check_placement(
    point: Tuple[float, float],
    footprint_size: Tuple[float, float],
    roads: Sequence[Road],
    parks: Sequence[CircularRegion],
    fountain: CircularRegion,
    buildings: Sequence[Building],
    canvas: Tuple[int, int],
    road_index: Optional[SpatialIndex] = None
) -> PlacementRejection:
    """
    Run the strict checks in order without mutating anything.

    Args:
        point: Footprint center
        footprint_size: (width, depth)
        roads: Road network
        parks: Park regions
        fountain: Fountain region (may be empty)
        buildings: Existing buildings
        canvas: (width, height)
        road_index: Prebuilt index over roads (built on demand if None)

    Returns:
        First failing check, or PlacementRejection.NONE
    """
    x, y = point
    width, depth = footprint_size
    footprint = BBox.from_center(x, y, width, depth)

    if not fits_canvas(footprint, canvas):
        return PlacementRejection.BOUNDARY

    if road_index is None:
        road_index = RoadPointIndex(list(roads))
    if collides_with_roads(footprint, road_index):
        return PlacementRejection.ROAD

    if collides_with_parks(footprint, parks):
        return PlacementRejection.PARK

    if collides_with_circle(footprint, fountain, PLACEMENT_FOUNTAIN_BUFFER):
        return PlacementRejection.FOUNTAIN

    if collides_with_buildings(footprint, buildings):
        return PlacementRejection.BUILDING

    return PlacementRejection.NONE


def try_place(
    point: Tuple[float, float],
    footprint_size: Tuple[float, float],
    roads: Sequence[Road],
    parks: Sequence[CircularRegion],
    fountain: CircularRegion,
    buildings: List[Building],
    canvas: Tuple[int, int],
    road_index: Optional[SpatialIndex] = None
) -> PlacementResult:
    """
    Strict placement: validate and, on success, append a mid-rise building.

    Nothing is mutated on rejection.

    Returns:
        PlacementResult with the first failing reason or the new building
    """
    reason = check_placement(
        point, footprint_size, roads, parks, fountain, buildings, canvas,
        road_index=road_index,
    )

    x, y = point
    if reason != PlacementRejection.NONE:
        logger.info(f"Cannot place building at ({x:.0f}, {y:.0f}): {reason.message}")
        return PlacementResult(accepted=False, reason=reason)

    width, depth = footprint_size
    building = Building(
        x=float(x),
        y=float(y),
        width=float(width),
        depth=float(depth),
        height=PLACED_BUILDING_HEIGHT,
        type=BuildingType.MID_RISE,
    )
    buildings.append(building)

    logger.info(
        f"Building placed at ({x:.0f}, {y:.0f}), total buildings: {len(buildings)}"
    )
    return PlacementResult(accepted=True, building=building)


# =============================================================================
# RE-VALIDATION
# =============================================================================

def find_violations(
    city: CityData,
    buildings: Optional[Sequence[Building]] = None
) -> List[str]:
    """
    Re-check buildings against the strict clearance rules.

    Each building is tested against road points, parks, the fountain and
    every other building in the city. The canvas check is skipped.

    Args:
        city: City to check
        buildings: Subset to check (default: every building)

    Returns:
        One message per violation; empty if the placement is consistent
    """
    if buildings is None:
        buildings = city.buildings

    road_index = RoadPointIndex(city.roads)
    violations: List[str] = []

    for building in buildings:
        footprint = building.footprint
        label = f"building at ({building.x:.0f}, {building.y:.0f})"

        if collides_with_roads(footprint, road_index):
            violations.append(f"{label}: {PlacementRejection.ROAD.message}")
        if collides_with_parks(footprint, city.parks):
            violations.append(f"{label}: {PlacementRejection.PARK.message}")
        if collides_with_circle(footprint, city.fountain, PLACEMENT_FOUNTAIN_BUFFER):
            violations.append(f"{label}: {PlacementRejection.FOUNTAIN.message}")

        others = [b for b in city.buildings if b is not building]
        if collides_with_buildings(footprint, others):
            violations.append(f"{label}: {PlacementRejection.BUILDING.message}")

    return violations
