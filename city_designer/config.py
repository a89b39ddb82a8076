"""
Configuration constants for City Designer.

Contains all tunable parameters for city generation, placement validation
and traffic simulation, plus the runtime CityConfig record.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


# =============================================================================
# ENUMS
# =============================================================================

class RoadPattern(Enum):
    """Road network layout pattern."""
    GRID = "grid"
    RADIAL = "radial"
    RANDOM = "random"


class SkylineType(Enum):
    """
    Building height distribution.

    LOW_RISE: every building low-rise
    MID_RISE: every building mid-rise
    SKYSCRAPER: 2/3 high-rise, rest mid-rise
    MIXED: low/mid/high with equal probability
    """
    LOW_RISE = "low"
    MID_RISE = "mid"
    SKYSCRAPER = "high"
    MIXED = "mixed"


class TextureTheme(Enum):
    """Facade style. Cosmetic only, carried for the renderer."""
    MODERN = "modern"
    CLASSIC = "classic"
    INDUSTRIAL = "industrial"
    FUTURISTIC = "futuristic"


# =============================================================================
# CANVAS
# =============================================================================

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600

# =============================================================================
# ROAD NETWORK
# =============================================================================

# Inset of grid roads and radial ring clearance (pixels)
ROAD_MARGIN = 50

# Inset of random node pool and inset corner nodes
RANDOM_NODE_MARGIN = 100

# Ring boundaries are re-segmented by joining every Nth boundary point
RING_SEGMENT_STEP = 8

# Random pattern: nodes per layout unit and road attempts per layout unit
RANDOM_NODES_PER_UNIT = 2
RANDOM_ROADS_PER_UNIT = 3

# =============================================================================
# PARKS AND FOUNTAIN
# =============================================================================

# Park centers are drawn from [margin, extent - margin]
PARK_MARGIN = 100

# =============================================================================
# AUTOMATIC BUILDING GENERATION
# =============================================================================

# Building centers are drawn from [margin, extent - margin]
BUILDING_MARGIN = 50

# Attempts per requested building before giving up
BUILDING_ATTEMPTS_PER_REQUEST = 10

# Approximate policy: minimum distance from a park's first boundary point
APPROX_PARK_CLEARANCE = 80.0

# Footprint size range (pixels, [min, max))
BUILDING_SIZE_MIN = 20.0
BUILDING_SIZE_MAX = 60.0

# Height ranges per building type, [min, max)
LOW_RISE_HEIGHT = (10.0, 30.0)
MID_RISE_HEIGHT = (40.0, 100.0)
HIGH_RISE_HEIGHT = (120.0, 250.0)

# =============================================================================
# INTERACTIVE PLACEMENT (STRICT POLICY)
# =============================================================================

PLACEMENT_SCREEN_MARGIN = 60.0
PLACEMENT_ROAD_BUFFER = 20.0
PLACEMENT_PARK_BUFFER = 35.0
PLACEMENT_FOUNTAIN_BUFFER = 35.0
PLACEMENT_BUILDING_BUFFER = 25.0

# Height given to interactively placed (mid-rise) buildings
PLACED_BUILDING_HEIGHT = 70.0

# Standard footprint used by interactive placement
STANDARD_BUILDING_WIDTH = 40.0
STANDARD_BUILDING_DEPTH = 40.0

# Standard footprint as a fraction of grid block spacing
STANDARD_SIZE_BLOCK_RATIO = 0.5

# Grid cell size for road point lookups
ROAD_INDEX_CELL_SIZE = 50.0

# =============================================================================
# TRAFFIC
# =============================================================================

TRAFFIC_SCREEN_MARGIN = 50.0
SPAWN_ATTEMPTS_PER_CAR = 3

CAR_SPEED_MIN = 20.0
CAR_SPEED_RANGE = 30.0

# Progress gained per unit of speed per second
PROGRESS_SPEED_DIVISOR = 500.0

# Progress jump applied when a move is blocked by an obstacle
OBSTACLE_PROGRESS_JUMP = 0.1

# Probability of switching to a random road at the end of a road
ROAD_SWITCH_PROBABILITY = 0.2

# Candidate points probed along a road during a transition
TRANSITION_CANDIDATES = 5

CAR_COLORS = (
    (1.0, 0.0, 0.0),   # red
    (0.0, 0.0, 1.0),   # blue
    (1.0, 1.0, 0.0),   # yellow
    (0.0, 1.0, 0.0),   # green
    (1.0, 0.5, 0.0),   # orange
    (0.8, 0.8, 0.8),   # silver
    (0.2, 0.2, 0.2),   # dark gray
    (1.0, 1.0, 1.0),   # white
)

# =============================================================================
# SAVE FORMAT
# =============================================================================

SAVE_FORMAT_VERSION = "1.0"


# =============================================================================
# RUNTIME CONFIGURATION
# =============================================================================

@dataclass
class CityConfig:
    """
    Runtime configuration for city generation.

    Holds every user-controlled option. texture_theme and view_3d are
    carried for the renderer and ignored by the generation core.
    """

    # Buildings
    num_buildings: int = 20
    layout_size: int = 10

    # Roads
    road_pattern: RoadPattern = RoadPattern.GRID
    road_width: int = 8

    # Skyline
    skyline_type: SkylineType = SkylineType.MIXED

    # Cosmetic
    texture_theme: TextureTheme = TextureTheme.MODERN
    view_3d: bool = False

    # Parks / fountain
    park_radius: int = 40
    num_parks: int = 3
    fountain_radius: int = 25

    # Footprint range for automatic generation
    building_size_min: float = BUILDING_SIZE_MIN
    building_size_max: float = BUILDING_SIZE_MAX

    # Footprint for interactive placement
    standard_width: float = STANDARD_BUILDING_WIDTH
    standard_depth: float = STANDARD_BUILDING_DEPTH

    # Traffic
    num_cars: int = 30

    # Canvas
    canvas_width: int = CANVAS_WIDTH
    canvas_height: int = CANVAS_HEIGHT

    # None = entropy-seeded random source per generator
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate configuration values."""
        for name in ('num_buildings', 'layout_size', 'num_parks', 'num_cars'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

        for name in ('park_radius', 'fountain_radius', 'road_width'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

        if self.building_size_min <= 0:
            raise ValueError("building_size_min must be positive")

        if self.building_size_min > self.building_size_max:
            raise ValueError(
                "building_size_min must not exceed building_size_max"
            )

        if self.standard_width <= 0 or self.standard_depth <= 0:
            raise ValueError("standard building size must be positive")

        if self.canvas_width < 0 or self.canvas_height < 0:
            raise ValueError("canvas dimensions must be non-negative")

    def update_standard_building_size(self) -> None:
        """
        Fit the standard footprint to the current grid block spacing.

        Half a block, clamped to the automatic footprint range.
        """
        if self.layout_size <= 0:
            return

        spacing = (self.canvas_width - 2 * ROAD_MARGIN) / self.layout_size
        size = spacing * STANDARD_SIZE_BLOCK_RATIO
        size = max(self.building_size_min, min(self.building_size_max, size))

        self.standard_width = size
        self.standard_depth = size

    def describe(self) -> str:
        """One-line human readable summary."""
        return (
            f"pattern={self.road_pattern.value} layout={self.layout_size} "
            f"buildings={self.num_buildings} skyline={self.skyline_type.value} "
            f"parks={self.num_parks}x r{self.park_radius} "
            f"fountain=r{self.fountain_radius} cars={self.num_cars} "
            f"canvas={self.canvas_width}x{self.canvas_height}"
        )


# Default configuration instance
DEFAULT_CONFIG = CityConfig()
