"""
Hamlet - Village Simulation
Headless entry point: spawns a village, runs it, prints a report.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import SimulationConfig
from .event_logger import VillageEventLogger
from .statistics import VillageStatistics
from .world import SimulationWorld

logger = logging.getLogger("hamlet.village")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Hamlet village behavior and economy simulation")
    parser.add_argument(
        "--villagers",
        type=int,
        default=None,
        help="Number of villagers (default: HAMLET_VILLAGERS or 15)",
    )
    parser.add_argument(
        "--days",
        type=float,
        default=1.0,
        help="Simulated days to run (default: 1)",
    )
    parser.add_argument(
        "--step",
        type=float,
        default=0.5,
        help="Real seconds per tick (default: 0.5)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible run",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    parser.add_argument(
        "--events",
        action="store_true",
        help="Log every domain event",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> SimulationConfig:
    config = SimulationConfig.from_env()
    if args.villagers is not None:
        config.villager_count = args.villagers
    if args.seed is not None:
        config.seed = args.seed
    return config


def main(argv: list[str] | None = None) -> int:
    """Run a simulation and print its report. Returns the exit code."""
    load_dotenv(Path.cwd() / ".env")
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = build_config(args)
    issues = config.validate()
    if args.days < 0:
        issues.append("Days cannot be negative")
    if args.step <= 0:
        issues.append("Step must be positive")
    if issues:
        for issue in issues:
            logger.error("Invalid configuration: %s", issue)
        return 2

    logger.info("Starting village simulation: %r", config)
    world = SimulationWorld(config)

    event_logger = VillageEventLogger(world.events)
    if args.events:
        event_logger.attach()

    world.populate()
    stats = VillageStatistics(world)
    ticks = world.run_days(args.days, args.step)
    logger.info("Simulation finished after %d ticks (%s)", ticks, world.clock)

    report = stats.build_report()
    if args.json:
        print(report.model_dump_json(indent=2))
    else:
        print(report.format_text())

    event_logger.detach()
    return 0


if __name__ == "__main__":
    sys.exit(main())
