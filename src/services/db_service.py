"""
Database Service Module.
Provides the low-level SQL interface to the SQLite database holding flights
and work packages.

Timestamps are stored as the original ISO-8601 text plus integer
epoch-millisecond columns used for range filtering. CRUD operations are
delegated to repository classes.
"""

import logging
import sqlite3
from contextlib import contextmanager
from typing import List, Optional

from src.core.aviation import Flight, WorkPackage
from src.core.intervals import Instant
from src.services.repositories import FlightRepository, WorkPackageRepository

logger = logging.getLogger(__name__)


class DatabaseService:
    """
    Handles all raw interactions with the SQLite database.

    This service delegates CRUD operations to specialized repository
    classes while maintaining schema management and connection handling.
    """

    def __init__(self, db_path: str = ":memory:"):
        """
        Args:
            db_path: Path to the database file.
                     Defaults to :memory: for testing.
        """
        self.db_path = db_path
        self._connection: Optional[sqlite3.Connection] = None

        # Initialize repositories (connected once the connection is established)
        self._flight_repo = FlightRepository()
        self._work_package_repo = WorkPackageRepository()

        logger.info(f"DatabaseService initialized with path: {self.db_path}")

    def connect(self):
        """Establishes connection to the database."""
        try:
            # Connections are handed to the web server's worker threads
            self._connection = sqlite3.connect(self.db_path, check_same_thread=False)
            self._connection.execute("PRAGMA foreign_keys = ON;")
            if self.db_path != ":memory:":
                self._connection.execute("PRAGMA journal_mode=WAL;")
                logger.debug("WAL mode enabled for database.")
            self._connection.row_factory = sqlite3.Row
            logger.debug("Database connection established.")

            self._init_schema()

            self._flight_repo.set_connection(self._connection)
            self._work_package_repo.set_connection(self._connection)

        except sqlite3.Error as e:
            logger.critical(f"Failed to connect to database: {e}")
            raise

    def close(self):
        """Closes the database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            self._flight_repo.set_connection(None)
            self._work_package_repo.set_connection(None)
            logger.debug("Database connection closed.")

    @contextmanager
    def transaction(self):
        """Safe context manager for transactions."""
        if not self._connection:
            self.connect()
        try:
            yield self._connection
            self._connection.commit()
        except Exception as e:
            self._connection.rollback()
            logger.error(f"Transaction rolled back due to error: {e}")
            raise

    def _init_schema(self):
        """Creates the core tables if they don't exist."""
        schema_sql = """
        CREATE TABLE IF NOT EXISTS flights (
            flight_id TEXT PRIMARY KEY,
            airline TEXT,
            registration TEXT NOT NULL,
            aircraft_type TEXT,
            flight_num TEXT,
            sched_dep_time TEXT NOT NULL,
            sched_arr_time TEXT NOT NULL,
            actual_dep_time TEXT,
            actual_arr_time TEXT,
            estimated_dep_time TEXT,
            estimated_arr_time TEXT,
            sched_dep_station TEXT,
            sched_arr_station TEXT,
            dep_stand TEXT,
            orig_dep_stand TEXT,
            arr_stand TEXT,
            orig_arr_stand TEXT,
            dep_ms INTEGER NOT NULL,
            arr_ms INTEGER NOT NULL
        );

        CREATE TABLE IF NOT EXISTS work_packages (
            work_package_id TEXT PRIMARY KEY,
            name TEXT,
            station TEXT,
            status TEXT,
            area TEXT,
            registration TEXT NOT NULL,
            start_date_time TEXT NOT NULL,
            end_date_time TEXT NOT NULL,
            start_ms INTEGER NOT NULL,
            end_ms INTEGER NOT NULL
        );

        -- Indexes for range queries
        CREATE INDEX IF NOT EXISTS idx_flights_dep ON flights(dep_ms);
        CREATE INDEX IF NOT EXISTS idx_flights_registration ON flights(registration);
        CREATE INDEX IF NOT EXISTS idx_work_packages_start ON work_packages(start_ms);
        CREATE INDEX IF NOT EXISTS idx_work_packages_end ON work_packages(end_ms);
        """

        try:
            with self.transaction() as conn:
                conn.executescript(schema_sql)
            logger.debug("Database schema initialized.")
        except sqlite3.Error as e:
            logger.critical(f"Schema initialization failed: {e}")
            raise

    # --------------------------------------------------------------------------
    # Flight CRUD (delegated to FlightRepository)
    # --------------------------------------------------------------------------

    def insert_flight(self, flight: Flight) -> None:
        self._flight_repo.insert(flight)

    def insert_flights(self, flights: List[Flight]) -> None:
        self._flight_repo.insert_bulk(flights)

    def get_flight(self, flight_id: str) -> Optional[Flight]:
        return self._flight_repo.get(flight_id)

    def get_all_flights(self) -> List[Flight]:
        return self._flight_repo.get_all()

    def get_flights_in_range(self, start: Instant, end: Instant) -> List[Flight]:
        """Flights whose scheduled departure lies in [start, end)."""
        return self._flight_repo.get_in_range(start, end)

    def delete_flight(self, flight_id: str) -> None:
        self._flight_repo.delete(flight_id)

    def count_flights(self) -> int:
        return self._flight_repo.count()

    # --------------------------------------------------------------------------
    # Work Package CRUD (delegated to WorkPackageRepository)
    # --------------------------------------------------------------------------

    def insert_work_package(self, work_package: WorkPackage) -> None:
        self._work_package_repo.insert(work_package)

    def insert_work_packages(self, work_packages: List[WorkPackage]) -> None:
        self._work_package_repo.insert_bulk(work_packages)

    def get_work_package(self, work_package_id: str) -> Optional[WorkPackage]:
        return self._work_package_repo.get(work_package_id)

    def get_all_work_packages(self) -> List[WorkPackage]:
        return self._work_package_repo.get_all()

    def get_work_packages_in_range(
        self, start: Instant, end: Instant
    ) -> List[WorkPackage]:
        """Work packages strictly overlapping (start, end)."""
        return self._work_package_repo.get_in_range(start, end)

    def delete_work_package(self, work_package_id: str) -> None:
        self._work_package_repo.delete(work_package_id)

    def count_work_packages(self) -> int:
        return self._work_package_repo.count()

    # --------------------------------------------------------------------------
    # Aggregates
    # --------------------------------------------------------------------------

    def get_registrations(self) -> List[str]:
        """
        Returns every aircraft registration known to either table, sorted.
        """
        if not self._connection:
            raise RuntimeError("Database connection not initialized")
        cursor = self._connection.execute(
            """
            SELECT registration FROM flights
            UNION
            SELECT registration FROM work_packages
            ORDER BY registration ASC
            """
        )
        return [row[0] for row in cursor.fetchall()]
