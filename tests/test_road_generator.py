"""Road network generation for the three patterns."""
import math
import random

from city_designer.config import CityConfig, RoadPattern
from city_designer.generators.road_generator import RoadGenerator
from city_designer.models.geometry import Point
from city_designer.utils.rasterize import midpoint_circle


def make_generator(seed=1, width=800, height=600):
    return RoadGenerator(width, height, rng=random.Random(seed))


def test_grid_road_count_on_default_canvas():
    roads = make_generator().generate_grid_roads(10, 8)
    assert len(roads) == 22


def test_grid_roads_stay_inside_margin():
    roads = make_generator().generate_grid_roads(10, 8)
    horizontal, vertical = roads[:11], roads[11:]

    for road in horizontal:
        assert road.start.x == 50 and road.end.x == 750
        assert road.start.y == road.end.y
        assert 50 <= road.start.y <= 550

    for road in vertical:
        assert road.start.y == 50 and road.end.y == 550
        assert road.start.x == road.end.x
        assert 50 <= road.start.x <= 750


def test_grid_degrades_for_zero_layout():
    roads = make_generator().generate_grid_roads(0, 8)
    assert len(roads) == 2
    assert all(road.points for road in roads)


def test_radial_road_count():
    n = 8
    roads = make_generator().generate_radial_roads(n, 8)

    max_radius = 600 // 2 - 50
    num_rings = n // 2
    expected = n
    for ring in range(1, num_rings + 1):
        radius = (max_radius * ring) // num_rings
        expected += math.ceil(len(midpoint_circle(400, 300, radius)) / 8)

    assert len(roads) == expected


def test_radial_spokes_start_at_center():
    roads = make_generator().generate_radial_roads(6, 8)
    for spoke in roads[:6]:
        assert spoke.start == Point(400, 300)
        assert abs(spoke.start.distance_to(spoke.end) - 250) <= 1.5


def test_radial_zero_layout_is_empty():
    assert make_generator().generate_radial_roads(0, 8) == []


def test_random_roads_bounded_and_inside_node_area():
    roads = make_generator(seed=42).generate_random_roads(10, 8)
    assert len(roads) <= 30
    for road in roads:
        assert road.points
        for p in road.points:
            assert 100 <= p.x <= 700
            assert 100 <= p.y <= 500


def test_random_roads_repeat_with_same_seed():
    a = make_generator(seed=9).generate_random_roads(7, 8)
    b = make_generator(seed=9).generate_random_roads(7, 8)
    assert [r.points for r in a] == [r.points for r in b]


def test_generate_roads_dispatches_on_pattern():
    gen = make_generator()
    config = CityConfig(layout_size=4, road_pattern=RoadPattern.RADIAL, road_width=5)
    roads = gen.generate_roads(config)
    assert roads[0].start == Point(400, 300)
    assert all(road.width == 5 for road in roads)


def test_every_road_has_points():
    gen = make_generator(seed=3)
    for pattern in RoadPattern:
        roads = gen.generate_roads(CityConfig(layout_size=5, road_pattern=pattern))
        assert all(len(road) >= 1 for road in roads)
