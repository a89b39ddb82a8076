"""
Input/Output modules for City Designer.
"""

from .city_serializer import (
    CitySerializerError,
    city_to_dict,
    city_from_dict,
    save_city,
    load_city,
)

__all__ = [
    'CitySerializerError',
    'city_to_dict',
    'city_from_dict',
    'save_city',
    'load_city',
]
