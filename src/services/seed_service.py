"""
Seed Service Module.

Loads flights and work packages from JSON seed files and generates demo
work packages with realistic statuses.
"""

import json
import logging
import random
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from src.core.aviation import Flight, WorkPackage, WorkPackageStatus
from src.core.intervals import Instant, format_instant, parse_instant
from src.services.db_service import DatabaseService

logger = logging.getLogger(__name__)

DEFAULT_REGISTRATIONS = ["N123AB", "N456CD", "N789EF", "N012GH", "N345IJ"]
DEMO_AREAS = ["ENGINE", "AVIONICS", "HYDRAULICS", "ELECTRICAL", "STRUCTURE"]
DEMO_STATIONS = ["SFO", "LAX", "JFK", "ORD", "DFW"]
DEMO_DATE = date(2024, 4, 17)
DEMO_CURRENT_TIME = "2024-04-17T12:00:00.000Z"

FLIGHTS_FILENAME = "flights.json"
WORK_PACKAGES_FILENAME = "workPackages.json"


def load_seed_file(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Reads a JSON list of wire-format records.

    Args:
        path: Path to the JSON file.

    Returns:
        List of record dictionaries.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not contain a JSON list.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"Seed file {path} must contain a JSON list")
    return data


def seed_database(
    db_service: DatabaseService,
    flights_path: Optional[Union[str, Path]] = None,
    work_packages_path: Optional[Union[str, Path]] = None,
) -> Tuple[int, int]:
    """
    Inserts seed records into the database.

    Args:
        db_service: Connected database service.
        flights_path: JSON file of flights, skipped when None.
        work_packages_path: JSON file of work packages, skipped when None.

    Returns:
        Tuple of (flights inserted, work packages inserted).

    Raises:
        MalformedIntervalError: If a record carries an unparseable timestamp.
    """
    flights = []
    work_packages = []

    if flights_path:
        flights = [Flight.from_dict(item) for item in load_seed_file(flights_path)]
        db_service.insert_flights(flights)

    if work_packages_path:
        work_packages = [
            WorkPackage.from_dict(item) for item in load_seed_file(work_packages_path)
        ]
        db_service.insert_work_packages(work_packages)

    logger.info(
        f"Seeded database with {len(flights)} flights and "
        f"{len(work_packages)} work packages"
    )
    return len(flights), len(work_packages)


def seed_from_directory(
    db_service: DatabaseService, seed_dir: Union[str, Path]
) -> Tuple[int, int]:
    """Seeds from flights.json and workPackages.json inside seed_dir."""
    seed_dir = Path(seed_dir)
    flights_path = seed_dir / FLIGHTS_FILENAME
    work_packages_path = seed_dir / WORK_PACKAGES_FILENAME
    return seed_database(
        db_service,
        flights_path if flights_path.exists() else None,
        work_packages_path if work_packages_path.exists() else None,
    )


def generate_demo_work_packages(
    registrations: Sequence[str] = (),
    count: int = 100,
    demo_date: date = DEMO_DATE,
    current_time: Union[str, Instant] = DEMO_CURRENT_TIME,
    rng: Optional[random.Random] = None,
) -> List[WorkPackage]:
    """
    Generates overlapping demo work packages spread across registrations.

    Each package starts on a whole hour between 00:00 and 19:00 UTC of the
    demo day and lasts 1-9 hours. Statuses follow the package's position
    relative to current_time.

    Args:
        registrations: Registrations to distribute packages over; defaults
            to a fixed demo fleet when empty.
        count: Number of packages to generate.
        demo_date: UTC day the packages fall on.
        current_time: "Now" used for status assignment.
        rng: Random source; pass a seeded instance for reproducible output.

    Returns:
        List of WorkPackage records.
    """
    rng = rng or random.Random()
    fleet = sorted(set(registrations)) or DEFAULT_REGISTRATIONS
    day_start = datetime(
        demo_date.year, demo_date.month, demo_date.day, tzinfo=timezone.utc
    )

    packages = []
    for i in range(count):
        start_hour = rng.randrange(20)
        duration_hours = rng.random() * 8 + 1
        start = day_start + timedelta(hours=start_hour)
        end = start + timedelta(hours=duration_hours)

        packages.append(
            WorkPackage(
                work_package_id=f"DEMO-WP-{i:03d}",
                name=f"Demo Work Package {i + 1}",
                station=rng.choice(DEMO_STATIONS),
                status=WorkPackageStatus.PENDING,
                area=rng.choice(DEMO_AREAS),
                registration=fleet[i % len(fleet)],
                start_date_time=format_instant(parse_instant(start)),
                end_date_time=format_instant(parse_instant(end)),
            )
        )

    assign_realistic_statuses(packages, parse_instant(current_time))
    return packages


def _assign_split(
    packages: List[WorkPackage], share: float, first: str, rest: str
) -> None:
    cutoff = int(len(packages) * share)
    for index, package in enumerate(packages):
        package.status = first if index < cutoff else rest


def assign_realistic_statuses(
    work_packages: List[WorkPackage], current_time: Instant
) -> None:
    """
    Assigns statuses based on each package's timing relative to current_time.

    Past packages: 80% COMPLETED, the rest CANCELLED.
    Active packages: 80% IN_PROGRESS, the rest ON_HOLD.
    Future packages: 90% SCHEDULED, the rest PENDING.

    Modifies the packages in place.
    """
    past, active, future = [], [], []
    for package in work_packages:
        interval = package.to_interval()
        if interval.end < current_time:
            past.append(package)
        elif interval.start <= current_time <= interval.end:
            active.append(package)
        else:
            future.append(package)

    _assign_split(past, 0.8, WorkPackageStatus.COMPLETED, WorkPackageStatus.CANCELLED)
    _assign_split(
        active, 0.8, WorkPackageStatus.IN_PROGRESS, WorkPackageStatus.ON_HOLD
    )
    _assign_split(future, 0.9, WorkPackageStatus.SCHEDULED, WorkPackageStatus.PENDING)
