"""
City save/load for City Designer.

Saves a generated CityData to a JSON document and loads it back:

    {
      "version": "1.0",
      "timestamp": "1731000000",
      "buildings": [{"x", "y", "width", "depth", "height", "type"}, ...],
      "roads": [{"width", "points": [{"x", "y"}, ...]}, ...],
      "parks": [[{"x", "y"}, ...], ...],
      "fountain": [{"x", "y"}, ...]
    }
"""

from pathlib import Path
from typing import Any, Dict, List
import json
import logging
import time

from ..models.city import Building, BuildingType, CityData, Road
from ..models.geometry import CircularRegion, Point
from ..config import SAVE_FORMAT_VERSION

logger = logging.getLogger(__name__)


class CitySerializerError(Exception):
    """Raised when a city cannot be saved or loaded."""
    pass


def city_to_dict(city: CityData) -> Dict[str, Any]:
    """Convert a city record to its JSON-ready form."""
    return {
        'version': SAVE_FORMAT_VERSION,
        'timestamp': str(int(time.time())),
        'buildings': [
            {
                'x': b.x,
                'y': b.y,
                'width': b.width,
                'depth': b.depth,
                'height': b.height,
                'type': b.type.value,
            }
            for b in city.buildings
        ],
        'roads': [
            {'width': road.width, 'points': _points_to_list(road.points)}
            for road in city.roads
        ],
        'parks': [_points_to_list(park.points) for park in city.parks],
        'fountain': _points_to_list(city.fountain.points),
    }


def city_from_dict(data: Dict[str, Any]) -> CityData:
    """
    Rebuild a city record from its JSON form.

    Roads and parks without points are dropped with a warning; later
    road indices shift down accordingly.

    Raises:
        CitySerializerError: if a required field is missing or malformed
    """
    try:
        buildings = [
            Building(
                x=float(b['x']),
                y=float(b['y']),
                width=float(b['width']),
                depth=float(b['depth']),
                height=float(b['height']),
                type=BuildingType.from_string(str(b.get('type', ''))),
            )
            for b in data.get('buildings', [])
        ]

        roads = []
        for i, r in enumerate(data.get('roads', [])):
            points = _points_from_list(r.get('points', []))
            if not points:
                logger.warning(f"Dropping road {i}: no points")
                continue
            roads.append(Road(points=points, width=int(r.get('width', 0))))

        parks = []
        for i, p in enumerate(data.get('parks', [])):
            if not p:
                logger.warning(f"Dropping park {i}: no points")
                continue
            parks.append(CircularRegion(_points_from_list(p)))

        fountain = CircularRegion(_points_from_list(data.get('fountain', [])))

    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CitySerializerError(f"Malformed city data: {e}") from e

    return CityData(
        roads=roads,
        parks=parks,
        fountain=fountain,
        buildings=buildings,
        generated=True,
    )


def save_city(city: CityData, filepath: str) -> Path:
    """
    Save a generated city to a JSON file.

    Creates parent directories as needed.

    Args:
        city: City to save
        filepath: Output path (.json)

    Returns:
        Path written

    Raises:
        CitySerializerError: if the city is not generated or cannot be written
    """
    if not city.generated:
        raise CitySerializerError("Cannot save: no city generated yet")

    path = Path(filepath)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(city_to_dict(city), f, indent=2)
    except OSError as e:
        raise CitySerializerError(f"Failed to write {path}: {e}") from e

    counts = city.summary()
    logger.info(
        f"Saved city to {path}: {counts['buildings']} buildings, "
        f"{counts['roads']} roads ({counts['road_points']} points), "
        f"{counts['parks']} parks, {counts['fountain_points']} fountain points"
    )
    return path


def load_city(filepath: str) -> CityData:
    """
    Load a city from a JSON file.

    Args:
        filepath: Path to a file written by save_city

    Returns:
        CityData flagged as generated

    Raises:
        FileNotFoundError: If file doesn't exist
        CitySerializerError: If the file is not a valid save
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"City save not found: {filepath}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise CitySerializerError(f"Invalid JSON in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise CitySerializerError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise CitySerializerError(f"Invalid city save in {path}: expected an object")

    version = data.get('version')
    if version != SAVE_FORMAT_VERSION:
        logger.warning(f"City save {path} has version {version!r}, expected {SAVE_FORMAT_VERSION}")

    city = city_from_dict(data)
    city.validate()

    counts = city.summary()
    logger.info(
        f"Loaded city from {path}: {counts['buildings']} buildings, "
        f"{counts['roads']} roads, {counts['parks']} parks"
    )
    return city


def _points_to_list(points: List[Point]) -> List[Dict[str, int]]:
    return [{'x': p.x, 'y': p.y} for p in points]


def _points_from_list(items: List[Dict[str, Any]]) -> List[Point]:
    return [Point(int(item['x']), int(item['y'])) for item in items]
