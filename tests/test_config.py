"""CityConfig validation and derived values."""
import pytest

from city_designer.config import DEFAULT_CONFIG, CityConfig, RoadPattern, SkylineType


def test_defaults():
    config = CityConfig()
    assert config.num_buildings == 20
    assert config.layout_size == 10
    assert config.road_pattern == RoadPattern.GRID
    assert config.skyline_type == SkylineType.MIXED
    assert (config.canvas_width, config.canvas_height) == (800, 600)
    assert config.seed is None
    assert DEFAULT_CONFIG == config


@pytest.mark.parametrize("kwargs", [
    {'num_buildings': -1},
    {'layout_size': -2},
    {'num_parks': -1},
    {'num_cars': -5},
    {'park_radius': -1},
    {'fountain_radius': -3},
    {'road_width': -1},
    {'building_size_min': 0},
    {'building_size_min': 70, 'building_size_max': 60},
    {'standard_width': 0},
    {'canvas_width': -800},
])
def test_invalid_values_raise(kwargs):
    with pytest.raises(ValueError):
        CityConfig(**kwargs)


def test_standard_size_follows_grid_spacing():
    config = CityConfig(layout_size=10)
    config.update_standard_building_size()
    assert config.standard_width == pytest.approx(35.0)
    assert config.standard_depth == pytest.approx(35.0)


def test_standard_size_is_clamped():
    config = CityConfig(layout_size=1)
    config.update_standard_building_size()
    assert config.standard_width == 60.0

    config = CityConfig(layout_size=50)
    config.update_standard_building_size()
    assert config.standard_width == 20.0


def test_standard_size_kept_without_grid():
    config = CityConfig(layout_size=0)
    config.update_standard_building_size()
    assert config.standard_width == 40.0


def test_describe_mentions_pattern():
    text = CityConfig(road_pattern=RoadPattern.RADIAL).describe()
    assert "pattern=radial" in text
