#!/usr/bin/env python3
"""
Hangar Timeline CLI.

Provides command-line tools for loading flight and work package data,
computing timeline layouts and serving the HTTP API.

Usage:
    python -m src.cli.timeline seed --database hangar.db \
        --flights data/flights.json --work-packages data/workPackages.json
    python -m src.cli.timeline demo --database hangar.db --count 50 --seed 7
    python -m src.cli.timeline layout --database hangar.db \
        --start 2024-04-15T00:00:00.000Z --end 2024-04-16T00:00:00.000Z
    python -m src.cli.timeline serve --database hangar.db --port 3001
"""

import argparse
import json
import logging
import random
import sys

from src.cli.utils import parse_window, validate_database_path
from src.core.layout_config import LayoutConfig, TickEndPolicy
from src.services.db_service import DatabaseService
from src.services.seed_service import generate_demo_work_packages, seed_database
from src.services.timeline_service import TimelineService

# Setup logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def seed(args: argparse.Namespace) -> int:
    """Load flights and work packages from JSON files."""
    db_service = None
    try:
        db_service = DatabaseService(args.database)
        db_service.connect()

        flights, work_packages = seed_database(
            db_service, args.flights, args.work_packages
        )
        print(f"✓ Seeded {flights} flights and {work_packages} work packages")
        return 0

    except Exception as e:
        logger.error(f"Failed to seed database: {e}")
        if args.verbose:
            raise
        return 1
    finally:
        if db_service:
            db_service.close()


def demo(args: argparse.Namespace) -> int:
    """Insert generated demo work packages."""
    db_service = None
    try:
        db_service = DatabaseService(args.database)
        db_service.connect()

        rng = random.Random(args.seed) if args.seed is not None else None
        packages = generate_demo_work_packages(
            db_service.get_registrations(), count=args.count, rng=rng
        )
        db_service.insert_work_packages(packages)
        print(f"✓ Inserted {len(packages)} demo work packages")
        return 0

    except Exception as e:
        logger.error(f"Failed to generate demo data: {e}")
        if args.verbose:
            raise
        return 1
    finally:
        if db_service:
            db_service.close()


def layout(args: argparse.Namespace) -> int:
    """Print the timeline layout as JSON."""
    db_service = None
    try:
        window = parse_window(args.start, args.end)
        config = LayoutConfig(
            pixels_per_hour=args.pixels_per_hour,
            tick_end_policy=(
                TickEndPolicy.ROUND_UP_TO_HOUR
                if args.round_ticks
                else TickEndPolicy.EXACT
            ),
        )

        db_service = DatabaseService(args.database)
        db_service.connect()

        result = TimelineService(db_service, config).layout_for(window)
        print(json.dumps(result.to_dict(), indent=2 if args.pretty else None))
        return 0

    except Exception as e:
        logger.error(f"Failed to compute layout: {e}")
        if args.verbose:
            raise
        return 1
    finally:
        if db_service:
            db_service.close()


def serve(args: argparse.Namespace) -> int:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from src.core.logging_config import setup_logging, shutdown_logging
    from src.webserver.config import ServerConfig
    from src.webserver.server import create_app

    config = ServerConfig.from_env()
    if args.database:
        config.db_path = args.database
    if args.host:
        config.host = args.host
    if args.port:
        config.port = args.port
    if args.seed_dir:
        config.seed_dir = args.seed_dir

    setup_logging(debug_mode=args.verbose)
    logger.info(f"Serving on http://{config.host}:{config.port} (db={config.db_path})")
    try:
        uvicorn.run(create_app(config), host=config.host, port=config.port)
        return 0
    except Exception as e:
        logger.error(f"Web server error: {e}", exc_info=True)
        if args.verbose:
            raise
        return 1
    finally:
        shutdown_logging()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Flight and maintenance timeline tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Seed command
    seed_parser = subparsers.add_parser("seed", help="Load data from JSON files")
    seed_parser.add_argument(
        "--database", "-d", required=True, help="Path to database file"
    )
    seed_parser.add_argument("--flights", help="JSON list of flights")
    seed_parser.add_argument(
        "--work-packages", dest="work_packages", help="JSON list of work packages"
    )
    seed_parser.set_defaults(func=seed, allow_create=True)

    # Demo command
    demo_parser = subparsers.add_parser(
        "demo", help="Generate demo work packages"
    )
    demo_parser.add_argument(
        "--database", "-d", required=True, help="Path to database file"
    )
    demo_parser.add_argument(
        "--count", type=int, default=100, help="Number of packages (default: 100)"
    )
    demo_parser.add_argument("--seed", type=int, help="Random seed")
    demo_parser.set_defaults(func=demo, allow_create=True)

    # Layout command
    layout_parser = subparsers.add_parser("layout", help="Print timeline layout")
    layout_parser.add_argument(
        "--database", "-d", required=True, help="Path to database file"
    )
    layout_parser.add_argument("--start", help="Window start (ISO 8601)")
    layout_parser.add_argument("--end", help="Window end (ISO 8601)")
    layout_parser.add_argument(
        "--pixels-per-hour",
        dest="pixels_per_hour",
        type=float,
        default=LayoutConfig.pixels_per_hour,
        help="Horizontal scale (default: 100)",
    )
    layout_parser.add_argument(
        "--round-ticks",
        dest="round_ticks",
        action="store_true",
        help="Extend ticks to the next whole hour after the window end",
    )
    layout_parser.add_argument(
        "--pretty", action="store_true", help="Indent the JSON output"
    )
    layout_parser.set_defaults(func=layout, allow_create=False)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--database", "-d", help="Path to database file")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port")
    serve_parser.add_argument(
        "--seed-dir", dest="seed_dir", help="Seed an in-memory database on startup"
    )
    serve_parser.set_defaults(func=serve, allow_create=False)

    return parser


def main() -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    # Validate database path
    if getattr(args, "database", None):
        if not validate_database_path(args.database, allow_create=args.allow_create):
            sys.exit(1)

    # Execute command
    if hasattr(args, "func"):
        sys.exit(args.func(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
