"""Car spawning and tick behaviour."""
import random

import pytest

from city_designer.config import CityConfig
from city_designer.generators.city_generator import CityGenerator
from city_designer.models.city import Road
from city_designer.models.geometry import CircularRegion, Point
from city_designer.models.traffic import Car, CarState
from city_designer.simulation.traffic import TrafficGenerator
from city_designer.utils.rasterize import bresenham_line, midpoint_circle


class FixedRandom(random.Random):
    """Random source whose random() always returns the same value."""

    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


class SequenceRandom(random.Random):
    """Random source whose random() replays a fixed sequence."""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


@pytest.fixture
def city():
    gen = CityGenerator(800, 600, rng=random.Random(3))
    return gen.generate_city(CityConfig(num_buildings=10, layout_size=8))


def test_spawned_cars_sit_on_road_points(city):
    traffic = TrafficGenerator(rng=random.Random(4))
    data = traffic.generate_traffic(city.roads, 30, city.parks, city.fountain, 800, 600)

    assert 0 < len(data) <= 30
    for car in data.cars:
        road = city.roads[car.road_index]
        assert Point(int(car.x), int(car.y)) in road.points
        assert 50 <= car.x <= 750
        assert 50 <= car.y <= 550
        assert not any(o.contains_bbox_circle(car.x, car.y) for o in city.parks)
        assert car.state == CarState.CRUISING
        if car.speed:
            assert 20 <= car.speed < 50


def test_spawn_gives_up_when_no_point_qualifies():
    roads = [Road(bresenham_line(0, 10, 799, 10))]
    traffic = TrafficGenerator(rng=random.Random(1))
    data = traffic.generate_traffic(roads, 5, [], None, 800, 600)
    assert len(data) == 0
    assert not traffic.has_traffic()


def test_spawn_without_roads_or_cars():
    traffic = TrafficGenerator(rng=random.Random(1))
    assert len(traffic.generate_traffic([], 10, [], None, 800, 600)) == 0

    roads = [Road(bresenham_line(100, 300, 700, 300))]
    assert len(traffic.generate_traffic(roads, 0, [], None, 800, 600)) == 0


def test_car_on_last_point_has_no_velocity():
    roads = [Road([Point(400, 300)])]
    traffic = TrafficGenerator(rng=random.Random(2))
    data = traffic.generate_traffic(roads, 4, [], None, 800, 600)

    assert len(data) == 4
    for car in data.cars:
        assert (car.vx, car.vy, car.speed) == (0.0, 0.0, 0.0)


def test_empty_fountain_is_not_an_obstacle():
    traffic = TrafficGenerator()
    traffic.generate_traffic([], 0, [], CircularRegion(), 800, 600)
    assert traffic.obstacles == []


def test_free_move_advances_position_and_progress():
    roads = [Road(bresenham_line(100, 300, 700, 300))]
    traffic = TrafficGenerator(rng=FixedRandom(0.5))
    traffic.generate_traffic(roads, 0, [], None, 800, 600)
    car = Car(x=200.0, y=300.0, vx=25.0, speed=25.0, road_progress=0.2)
    traffic.traffic_data.cars.append(car)

    traffic.update_traffic(2.0, roads)

    assert car.x == pytest.approx(250.0)
    assert car.y == pytest.approx(300.0)
    assert car.road_progress == pytest.approx(0.2 + 25.0 / 500.0 * 2.0)
    assert car.state == CarState.CRUISING


def test_blocked_move_jumps_progress():
    roads = [Road(bresenham_line(100, 100, 700, 100))]
    park = CircularRegion(midpoint_circle(200, 200, 20))
    traffic = TrafficGenerator(rng=FixedRandom(0.5))
    traffic.generate_traffic(roads, 0, [park], None, 800, 600)
    car = Car(x=175.0, y=200.0, vx=10.0, speed=10.0, road_progress=0.0)
    traffic.traffic_data.cars.append(car)

    traffic.update_traffic(1.0, roads)

    assert (car.x, car.y) == (175.0, 200.0)
    assert car.road_progress == pytest.approx(0.1 + 10.0 / 500.0)


def test_transition_relocates_to_first_valid_point():
    roads = [Road(bresenham_line(100, 300, 700, 300))]
    traffic = TrafficGenerator(rng=FixedRandom(0.5))
    traffic.generate_traffic(roads, 0, [], None, 800, 600)
    car = Car(x=690.0, y=300.0, vx=40.0, speed=40.0, road_progress=0.99)
    traffic.traffic_data.cars.append(car)

    traffic.update_traffic(1.0, roads)

    assert (car.x, car.y) == (100.0, 300.0)
    assert car.road_progress == 0.0
    assert car.vx == pytest.approx(40.0)
    assert car.vy == pytest.approx(0.0)
    assert car.state == CarState.CRUISING


def test_transition_skips_blocked_candidates():
    roads = [Road(bresenham_line(100, 300, 600, 300))]
    # Covers progress 0 (x=100) but not progress 0.2 (x=200)
    park = CircularRegion(midpoint_circle(100, 300, 30))
    traffic = TrafficGenerator(rng=FixedRandom(0.5))
    traffic.generate_traffic(roads, 0, [park], None, 800, 600)
    car = Car(x=590.0, y=300.0, vx=40.0, speed=40.0, road_progress=0.99)
    traffic.traffic_data.cars.append(car)

    traffic.update_traffic(1.0, roads)

    assert (car.x, car.y) == (200.0, 300.0)
    assert car.road_progress == pytest.approx(0.2)


def test_failed_transition_moves_to_next_road_with_stale_position():
    outside = Road(bresenham_line(0, 10, 799, 10))
    inside = Road(bresenham_line(100, 300, 700, 300))
    roads = [outside, inside]
    traffic = TrafficGenerator(rng=FixedRandom(0.5))
    traffic.generate_traffic(roads, 0, [], None, 800, 600)
    car = Car(x=400.0, y=10.0, vx=0.0, speed=0.0, road_index=0, road_progress=1.0)
    traffic.traffic_data.cars.append(car)

    traffic.update_traffic(0.1, roads)

    assert car.road_index == 1
    assert car.road_progress == 0.0
    assert (car.x, car.y) == (400.0, 10.0)
    assert car.state == CarState.TRANSITIONING


def test_ticks_keep_cars_on_valid_roads(city):
    traffic = TrafficGenerator(rng=random.Random(6))
    traffic.generate_traffic(city.roads, 20, city.parks, city.fountain, 800, 600)

    for _ in range(300):
        traffic.update_traffic(1.0 / 30.0, city.roads)

    for car in traffic.traffic_data.cars:
        assert 0 <= car.road_index < len(city.roads)
        assert car.road_progress < 1.0


def test_clear_drops_population(city):
    traffic = TrafficGenerator(rng=random.Random(7))
    traffic.generate_traffic(city.roads, 5, city.parks, city.fountain, 800, 600)
    traffic.clear()
    assert not traffic.has_traffic()


def test_transition_can_switch_to_random_road():
    roads = [
        Road(bresenham_line(100, 200, 700, 200)),
        Road(bresenham_line(100, 300, 700, 300)),
    ]
    # 0.1 triggers the switch, 0.7 picks road int(0.7 * 2) = 1
    traffic = TrafficGenerator(rng=SequenceRandom([0.1, 0.7]))
    traffic.generate_traffic(roads, 0, [], None, 800, 600)
    car = Car(x=700.0, y=200.0, vx=0.0, speed=0.0, road_index=0, road_progress=1.0)
    traffic.traffic_data.cars.append(car)

    traffic.update_traffic(0.1, roads)

    assert car.road_index == 1
    assert (car.x, car.y) == (100.0, 300.0)
    assert car.state == CarState.CRUISING


def test_every_requested_car_spawns_on_open_grid():
    gen = CityGenerator(800, 600, rng=random.Random(10))
    city = gen.generate_city(CityConfig(num_buildings=0, num_parks=0, fountain_radius=0))
    traffic = TrafficGenerator(rng=random.Random(11))

    data = traffic.generate_traffic(city.roads, 10, city.parks, city.fountain, 800, 600)

    assert len(data) == 10
    for car in data.cars:
        assert 0 <= car.road_index < len(city.roads)
        assert 0.0 <= car.road_progress < 1.0
