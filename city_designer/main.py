"""
City Designer - Main CLI

Generates a city, optionally places buildings interactively, runs a
traffic session for a number of ticks and writes a JSON report.

Usage:
    python -m city_designer.main [--pattern grid|radial|random] [--layout-size N]

Example:
    python -m city_designer.main --pattern radial --layout-size 8 --cars 40 --ticks 120
    python -m city_designer.main --place 120 140 --place 400 90 --save my_city
"""

import argparse
import json
import logging
import os
import random
import sys
import time
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Tuple

from . import __version__
from .config import CityConfig, RoadPattern, SkylineType
from .generators.city_generator import CityGenerator
from .io.city_serializer import CitySerializerError, load_city, save_city
from .processing.placement import find_violations
from .simulation.traffic import TrafficGenerator


@dataclass
class RunOptions:
    """Per-run options that are not part of the city configuration."""
    output_dir: str = "./output"
    run_name: str = "city"
    load_path: Optional[str] = None
    save_name: Optional[str] = None
    placements: List[Tuple[float, float]] = field(default_factory=list)
    ticks: int = 0
    delta_time: float = 1.0 / 60.0
    write_report: bool = True


@dataclass
class PipelineStats:
    """Statistics from the pipeline run."""
    roads: int = 0
    road_points: int = 0
    parks: int = 0
    fountain_points: int = 0
    buildings_requested: int = 0
    buildings_generated: int = 0
    low_rise: int = 0
    mid_rise: int = 0
    high_rise: int = 0
    placements_attempted: int = 0
    placements_accepted: int = 0
    cars_requested: int = 0
    cars_spawned: int = 0
    ticks_run: int = 0
    processing_time_ms: int = 0
    placement_rejections: Dict[str, int] = field(default_factory=dict)
    placement_violations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class PipelineReport:
    """Report from pipeline run."""
    run_name: str
    version: str
    success: bool
    stats: PipelineStats
    output_files: List[str]
    errors: List[str] = field(default_factory=list)
    car_states: Dict[str, int] = field(default_factory=dict)
    config_used: Dict[str, object] = field(default_factory=dict)


@dataclass
class PipelineResult:
    """
    Complete result of pipeline execution.

    Attributes:
        success: Whether pipeline completed without errors
        report: Detailed statistics and metadata
        city_generator: Generator owning the final city (None on early failure)
        traffic_generator: Traffic session (None if no cars were requested)
    """
    success: bool
    report: PipelineReport
    city_generator: Optional[CityGenerator] = None
    traffic_generator: Optional[TrafficGenerator] = None


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """
    Configure logging to console and optionally to file.

    Args:
        verbose: If True, use DEBUG level; otherwise INFO
        log_file: Optional path to log file. If provided, logs will be written to file.
    """
    level = logging.DEBUG if verbose else logging.INFO

    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)


def run_pipeline(
    config: CityConfig,
    options: Optional[RunOptions] = None
) -> PipelineResult:
    """
    Run a complete city session.

    Steps:
    1. Generate the city (or load it from a save)
    2. Place interactive buildings
    3. Re-validate placed buildings
    4. Spawn traffic and advance it for the requested ticks
    5. Save the city (optional)
    6. Write the report

    Args:
        config: City configuration
        options: Run options (default RunOptions())

    Returns:
        PipelineResult with report and the generators holding final state
    """
    logger = logging.getLogger(__name__)
    options = options or RunOptions()

    start_time = time.time()
    stats = PipelineStats(
        buildings_requested=config.num_buildings,
        cars_requested=config.num_cars,
    )
    errors: List[str] = []
    output_files: List[str] = []

    if options.write_report or options.save_name:
        os.makedirs(options.output_dir, exist_ok=True)

    # One explicit random source for the whole session
    rng = random.Random(config.seed)
    city_gen = CityGenerator(config.canvas_width, config.canvas_height, rng=rng)

    # Step 1: Generate or load
    if options.load_path:
        logger.info(f"Loading city from {options.load_path}")
        try:
            city_gen.load_city(load_city(options.load_path))
        except (FileNotFoundError, CitySerializerError, ValueError) as e:
            errors.append(f"Failed to load city: {e}")
            return _finish(config, options, stats, errors, output_files, start_time)
    else:
        city_gen.generate_city(config)

    city = city_gen.city_data
    stats.buildings_generated = len(city.buildings)

    # Step 2: Interactive placements
    placed = []
    for x, y in options.placements:
        stats.placements_attempted += 1
        result = city_gen.place_building(x, y, config)
        if result.accepted:
            stats.placements_accepted += 1
            placed.append(result.building)
        else:
            key = result.reason.value
            stats.placement_rejections[key] = stats.placement_rejections.get(key, 0) + 1

    # Step 3: Re-validate placed buildings
    if placed:
        stats.placement_violations = find_violations(city, placed)
        for violation in stats.placement_violations:
            logger.warning(f"Placement violation: {violation}")

    # Step 4: Traffic
    traffic_gen = None
    if config.num_cars > 0:
        traffic_gen = TrafficGenerator(rng=rng)
        traffic_gen.generate_traffic(
            city.roads,
            config.num_cars,
            city.parks,
            city.fountain,
            config.canvas_width,
            config.canvas_height,
        )
        stats.cars_spawned = len(traffic_gen.traffic_data)
        if stats.cars_spawned < config.num_cars:
            stats.warnings.append(
                f"Spawned {stats.cars_spawned} of {config.num_cars} cars"
            )

        for _ in range(options.ticks):
            traffic_gen.update_traffic(options.delta_time, city.roads)
            stats.ticks_run += 1

        if options.ticks:
            logger.info(f"Advanced traffic {stats.ticks_run} ticks of {options.delta_time:.4f}s")

    if stats.buildings_generated < config.num_buildings and not options.load_path:
        stats.warnings.append(
            f"Generated {stats.buildings_generated} of {config.num_buildings} buildings"
        )

    # Step 5: Save
    if options.save_name:
        try:
            path = save_city(city, os.path.join(options.output_dir, f"{options.save_name}.json"))
            output_files.append(str(path))
        except CitySerializerError as e:
            errors.append(f"Failed to save city: {e}")

    return _finish(
        config, options, stats, errors, output_files, start_time,
        city_gen=city_gen, traffic_gen=traffic_gen,
    )


def _finish(
    config: CityConfig,
    options: RunOptions,
    stats: PipelineStats,
    errors: List[str],
    output_files: List[str],
    start_time: float,
    city_gen: Optional[CityGenerator] = None,
    traffic_gen: Optional[TrafficGenerator] = None
) -> PipelineResult:
    """Fill final stats, write the report and build the result."""
    logger = logging.getLogger(__name__)

    if city_gen is not None:
        counts = city_gen.city_data.summary()
        stats.roads = counts['roads']
        stats.road_points = counts['road_points']
        stats.parks = counts['parks']
        stats.fountain_points = counts['fountain_points']
        stats.low_rise = counts['low_rise']
        stats.mid_rise = counts['mid_rise']
        stats.high_rise = counts['high_rise']

    car_states: Dict[str, int] = {}
    if traffic_gen is not None:
        for car in traffic_gen.traffic_data.cars:
            car_states[car.state.value] = car_states.get(car.state.value, 0) + 1

    stats.processing_time_ms = int((time.time() - start_time) * 1000)

    config_used = {
        'road_pattern': config.road_pattern.value,
        'layout_size': config.layout_size,
        'road_width': config.road_width,
        'num_buildings': config.num_buildings,
        'skyline_type': config.skyline_type.value,
        'num_parks': config.num_parks,
        'park_radius': config.park_radius,
        'fountain_radius': config.fountain_radius,
        'standard_width': config.standard_width,
        'standard_depth': config.standard_depth,
        'num_cars': config.num_cars,
        'canvas': [config.canvas_width, config.canvas_height],
        'seed': config.seed,
    }

    report = PipelineReport(
        run_name=options.run_name,
        version=__version__,
        success=len(errors) == 0,
        stats=stats,
        output_files=output_files,
        errors=errors,
        car_states=car_states,
        config_used=config_used,
    )

    if options.write_report:
        report_path = os.path.join(options.output_dir, f"{options.run_name}_report.json")
        with open(report_path, 'w', encoding='utf-8') as f:
            json.dump(asdict(report), f, indent=2)
        output_files.append(report_path)
        logger.info(f"Report saved to {report_path}")

    logger.info(f"Pipeline completed in {stats.processing_time_ms}ms")

    return PipelineResult(
        success=report.success,
        report=report,
        city_generator=city_gen,
        traffic_generator=traffic_gen,
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description='City Designer - Procedural city layout and traffic simulation'
    )

    parser.add_argument(
        '--pattern',
        type=str,
        choices=[p.value for p in RoadPattern],
        default='grid',
        help='Road network pattern (default: grid)'
    )

    parser.add_argument(
        '--layout-size',
        type=int,
        default=10,
        help='Road density / grid dimension N (default: 10)'
    )

    parser.add_argument(
        '--road-width',
        type=int,
        default=8,
        help='Road width in pixels, cosmetic (default: 8)'
    )

    parser.add_argument(
        '--buildings',
        type=int,
        default=20,
        help='Number of buildings to generate (default: 20)'
    )

    parser.add_argument(
        '--skyline',
        type=str,
        choices=[s.value for s in SkylineType],
        default='mixed',
        help='Skyline type: low, mid, high (skyscraper-weighted) or mixed (default: mixed)'
    )

    parser.add_argument(
        '--parks',
        type=int,
        default=3,
        help='Number of parks (default: 3)'
    )

    parser.add_argument(
        '--park-radius',
        type=int,
        default=40,
        help='Park radius in pixels (default: 40)'
    )

    parser.add_argument(
        '--fountain-radius',
        type=int,
        default=25,
        help='Central fountain radius, 0 for none (default: 25)'
    )

    parser.add_argument(
        '--standard-size',
        type=float,
        default=None,
        help='Footprint for interactive placement (default: fitted to grid spacing)'
    )

    parser.add_argument(
        '--place',
        type=float,
        nargs=2,
        action='append',
        metavar=('X', 'Y'),
        default=[],
        help='Place a building at X Y after generation (repeatable)'
    )

    parser.add_argument(
        '--cars',
        type=int,
        default=30,
        help='Number of cars to spawn, 0 for none (default: 30)'
    )

    parser.add_argument(
        '--ticks',
        type=int,
        default=0,
        help='Traffic ticks to simulate (default: 0)'
    )

    parser.add_argument(
        '--dt',
        type=float,
        default=1.0 / 60.0,
        help='Seconds per traffic tick (default: 1/60)'
    )

    parser.add_argument(
        '--width',
        type=int,
        default=800,
        help='Canvas width (default: 800)'
    )

    parser.add_argument(
        '--height',
        type=int,
        default=600,
        help='Canvas height (default: 600)'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed (default: entropy, different every run)'
    )

    parser.add_argument(
        '--output-dir',
        default='./output',
        help='Output directory for generated files (default: ./output)'
    )

    parser.add_argument(
        '--name',
        default='city',
        help='Run name used for report and log file names (default: city)'
    )

    parser.add_argument(
        '--save',
        type=str,
        default=None,
        help='Save the final city as <output-dir>/<SAVE>.json'
    )

    parser.add_argument(
        '--load',
        type=str,
        default=None,
        help='Load a saved city instead of generating one'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--no-log-file',
        action='store_true',
        help='Disable log file output (only console)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    os.makedirs(args.output_dir, exist_ok=True)

    log_file = None
    if not args.no_log_file:
        log_file = os.path.join(args.output_dir, f"{args.name}.log")

    setup_logging(args.verbose, log_file)

    try:
        config = CityConfig(
            num_buildings=args.buildings,
            layout_size=args.layout_size,
            road_pattern=RoadPattern(args.pattern),
            road_width=args.road_width,
            skyline_type=SkylineType(args.skyline),
            park_radius=args.park_radius,
            num_parks=args.parks,
            fountain_radius=args.fountain_radius,
            num_cars=args.cars,
            canvas_width=args.width,
            canvas_height=args.height,
            seed=args.seed,
        )
    except ValueError as e:
        print(f"Invalid configuration: {e}")
        return 1

    if args.standard_size is not None:
        if args.standard_size <= 0:
            print("Invalid configuration: standard size must be positive")
            return 1
        config.standard_width = args.standard_size
        config.standard_depth = args.standard_size
    else:
        config.update_standard_building_size()

    options = RunOptions(
        output_dir=args.output_dir,
        run_name=args.name,
        load_path=args.load,
        save_name=args.save,
        placements=[(x, y) for x, y in args.place],
        ticks=args.ticks,
        delta_time=args.dt,
    )

    try:
        result = run_pipeline(config, options)
    except Exception as e:
        logging.exception(f"Pipeline failed: {e}")
        if log_file:
            print(f"See log file for details: {log_file}")
        return 1

    report = result.report
    stats = report.stats

    if not result.success:
        print("\nPipeline failed with errors:")
        for error in report.errors:
            print(f"  - {error}")
        if log_file:
            print(f"See log file for details: {log_file}")
        return 1

    print(f"\nSuccess! {stats.roads} roads, {stats.parks} parks, "
          f"{stats.buildings_generated} buildings")
    print(f"  Low-rise: {stats.low_rise} | Mid-rise: {stats.mid_rise} | "
          f"High-rise: {stats.high_rise}")

    if stats.placements_attempted:
        print(f"\nPlacements: {stats.placements_accepted}/{stats.placements_attempted} accepted")
        for reason, count in sorted(stats.placement_rejections.items(), key=lambda x: -x[1]):
            print(f"  {reason}: {count}")
        if stats.placement_violations:
            print(f"  Violations: {len(stats.placement_violations)}")

    if stats.cars_requested:
        print(f"\nTraffic: {stats.cars_spawned}/{stats.cars_requested} cars, "
              f"{stats.ticks_run} ticks")

    for warning in stats.warnings:
        print(f"Warning: {warning}")

    print(f"Output files: {', '.join(report.output_files)}")
    if log_file:
        print(f"Log file: {log_file}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
