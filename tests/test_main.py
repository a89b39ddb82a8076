"""End-to-end pipeline and CLI."""
import json
import logging

import pytest

from city_designer.config import CityConfig, RoadPattern
from city_designer.main import RunOptions, main, run_pipeline


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


def test_pipeline_generates_places_and_simulates(tmp_path):
    config = CityConfig(num_buildings=10, layout_size=3, num_cars=12, seed=5)
    config.update_standard_building_size()
    options = RunOptions(
        output_dir=str(tmp_path),
        run_name="demo",
        placements=[(150.0, 150.0), (400.0, 300.0), (70.0, 70.0)],
        ticks=20,
        save_name="demo_city",
    )

    result = run_pipeline(config, options)

    assert result.success
    stats = result.report.stats
    assert stats.roads == 8
    assert stats.placements_attempted == 3
    assert stats.placements_accepted + sum(stats.placement_rejections.values()) == 3
    assert stats.placement_rejections.get('boundary') == 1
    assert stats.placement_violations == []
    assert stats.cars_spawned <= 12
    assert stats.ticks_run == 20

    report_path = tmp_path / "demo_report.json"
    assert report_path.exists()
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report['config_used']['seed'] == 5
    assert (tmp_path / "demo_city.json").exists()


def test_pipeline_is_repeatable_with_seed(tmp_path):
    config = CityConfig(num_buildings=15, road_pattern=RoadPattern.RANDOM, seed=99)
    options = RunOptions(output_dir=str(tmp_path), write_report=False, ticks=5)

    a = run_pipeline(config, options)
    b = run_pipeline(config, options)

    assert a.city_generator.city_data.buildings == b.city_generator.city_data.buildings
    cars_a = [(c.x, c.y) for c in a.traffic_generator.traffic_data.cars]
    cars_b = [(c.x, c.y) for c in b.traffic_generator.traffic_data.cars]
    assert cars_a == cars_b


def test_pipeline_reports_failed_load(tmp_path):
    options = RunOptions(output_dir=str(tmp_path), load_path=str(tmp_path / "missing.json"))
    result = run_pipeline(CityConfig(seed=1), options)

    assert not result.success
    assert result.city_generator is None
    assert "Failed to load city" in result.report.errors[0]


def test_cli_save_then_load(tmp_path):
    out = str(tmp_path)
    assert main(['--seed', '3', '--cars', '0', '--output-dir', out,
                 '--save', 'cli_city', '--no-log-file']) == 0

    saved = tmp_path / "cli_city.json"
    assert saved.exists()

    assert main(['--load', str(saved), '--cars', '5', '--ticks', '3',
                 '--output-dir', out, '--name', 'reloaded', '--no-log-file']) == 0
    report = json.loads((tmp_path / "reloaded_report.json").read_text(encoding="utf-8"))
    saved_data = json.loads(saved.read_text(encoding="utf-8"))
    assert report['stats']['buildings_generated'] == len(saved_data['buildings'])


def test_cli_rejects_invalid_configuration(tmp_path):
    assert main(['--buildings', '-1', '--output-dir', str(tmp_path), '--no-log-file']) == 1


def test_cli_missing_load_fails(tmp_path):
    assert main(['--load', str(tmp_path / "none.json"),
                 '--output-dir', str(tmp_path), '--no-log-file']) == 1


def test_cli_writes_log_file(tmp_path):
    assert main(['--seed', '1', '--cars', '0', '--output-dir', str(tmp_path),
                 '--name', 'logged']) == 0
    assert (tmp_path / "logged.log").exists()


def test_pipeline_reports_unreadable_save(tmp_path):
    options = RunOptions(output_dir=str(tmp_path / "out"), load_path=str(tmp_path))
    result = run_pipeline(CityConfig(seed=1), options)

    assert not result.success
    assert "Failed to load city" in result.report.errors[0]
    assert (tmp_path / "out" / "city_report.json").exists()


@pytest.mark.parametrize("size", ['0', '-10'])
def test_cli_rejects_non_positive_standard_size(tmp_path, size):
    assert main(['--standard-size', size, '--output-dir', str(tmp_path),
                 '--no-log-file']) == 1
