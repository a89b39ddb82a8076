"""
Data models for City Designer.
"""

from .geometry import Point, BBox, CircularRegion
from .city import Road, Building, BuildingType, CityData
from .traffic import Car, CarState, TrafficData

__all__ = [
    'Point', 'BBox', 'CircularRegion',
    'Road', 'Building', 'BuildingType', 'CityData',
    'Car', 'CarState', 'TrafficData',
]
