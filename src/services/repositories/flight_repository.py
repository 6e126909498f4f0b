"""
Flight Repository Module.

Handles CRUD operations for Flight records in the database.
"""

import logging
from typing import List, Optional

from src.core.aviation import Flight
from src.core.intervals import Instant
from src.services.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

_UPSERT_SQL = """
    INSERT INTO flights (flight_id, airline, registration, aircraft_type,
                         flight_num, sched_dep_time, sched_arr_time,
                         actual_dep_time, actual_arr_time, estimated_dep_time,
                         estimated_arr_time, sched_dep_station,
                         sched_arr_station, dep_stand, orig_dep_stand,
                         arr_stand, orig_arr_stand, dep_ms, arr_ms)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(flight_id) DO UPDATE SET
        airline=excluded.airline,
        registration=excluded.registration,
        aircraft_type=excluded.aircraft_type,
        flight_num=excluded.flight_num,
        sched_dep_time=excluded.sched_dep_time,
        sched_arr_time=excluded.sched_arr_time,
        actual_dep_time=excluded.actual_dep_time,
        actual_arr_time=excluded.actual_arr_time,
        estimated_dep_time=excluded.estimated_dep_time,
        estimated_arr_time=excluded.estimated_arr_time,
        sched_dep_station=excluded.sched_dep_station,
        sched_arr_station=excluded.sched_arr_station,
        dep_stand=excluded.dep_stand,
        orig_dep_stand=excluded.orig_dep_stand,
        arr_stand=excluded.arr_stand,
        orig_arr_stand=excluded.orig_arr_stand,
        dep_ms=excluded.dep_ms,
        arr_ms=excluded.arr_ms;
"""

_COLUMNS = (
    "flight_id, airline, registration, aircraft_type, flight_num, "
    "sched_dep_time, sched_arr_time, actual_dep_time, actual_arr_time, "
    "estimated_dep_time, estimated_arr_time, sched_dep_station, "
    "sched_arr_station, dep_stand, orig_dep_stand, arr_stand, orig_arr_stand"
)


def _row_params(flight: Flight) -> tuple:
    # Raises MalformedIntervalError before anything is written
    interval = flight.to_interval()
    return (
        flight.flight_id,
        flight.airline,
        flight.registration,
        flight.aircraft_type,
        flight.flight_num,
        flight.sched_dep_time,
        flight.sched_arr_time,
        flight.actual_dep_time,
        flight.actual_arr_time,
        flight.estimated_dep_time,
        flight.estimated_arr_time,
        flight.sched_dep_station,
        flight.sched_arr_station,
        flight.dep_stand,
        flight.orig_dep_stand,
        flight.arr_stand,
        flight.orig_arr_stand,
        interval.start,
        interval.end,
    )


class FlightRepository(BaseRepository):
    """
    Repository for Flight records.

    Scheduled times are stored as the original ISO text together with
    epoch-millisecond columns used for range queries.
    """

    def insert(self, flight: Flight) -> None:
        """
        Insert a new flight or update an existing one (Upsert).

        Args:
            flight: The flight to persist.

        Raises:
            MalformedIntervalError: If a scheduled time is unparseable.
            sqlite3.Error: If the database operation fails.
        """
        params = _row_params(flight)
        with self.transaction() as conn:
            conn.execute(_UPSERT_SQL, params)

    def insert_bulk(self, flights: List[Flight]) -> None:
        """
        Insert multiple flights in a single transaction.

        Args:
            flights: Flights to persist.

        Raises:
            MalformedIntervalError: If any scheduled time is unparseable.
            sqlite3.Error: If the database operation fails.
        """
        data = [_row_params(flight) for flight in flights]
        with self.transaction() as conn:
            conn.executemany(_UPSERT_SQL, data)
        logger.debug(f"Bulk inserted {len(data)} flights")

    def get(self, flight_id: str) -> Optional[Flight]:
        """
        Retrieve a single flight by id.

        Returns:
            The Flight if found, else None.
        """
        conn = self._require_connection()
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM flights WHERE flight_id = ?", (flight_id,)
        ).fetchone()
        return Flight.from_dict(dict(row)) if row else None

    def get_all(self) -> List[Flight]:
        """
        Retrieve all flights ordered by scheduled departure.
        """
        conn = self._require_connection()
        cursor = conn.execute(
            f"SELECT {_COLUMNS} FROM flights ORDER BY dep_ms ASC, flight_id ASC"
        )
        return [Flight.from_dict(dict(row)) for row in cursor.fetchall()]

    def get_in_range(self, start: Instant, end: Instant) -> List[Flight]:
        """
        Retrieve flights departing inside [start, end).

        Flights are selected by scheduled departure (start-anchored), so a
        flight departing before start is excluded even if still airborne.

        Args:
            start: Window start (inclusive).
            end: Window end (exclusive).

        Returns:
            Flights ordered by scheduled departure.
        """
        conn = self._require_connection()
        cursor = conn.execute(
            f"""
            SELECT {_COLUMNS} FROM flights
            WHERE dep_ms >= ? AND dep_ms < ?
            ORDER BY dep_ms ASC, flight_id ASC
            """,
            (start, end),
        )
        return [Flight.from_dict(dict(row)) for row in cursor.fetchall()]

    def delete(self, flight_id: str) -> None:
        """Delete a flight permanently."""
        with self.transaction() as conn:
            conn.execute("DELETE FROM flights WHERE flight_id = ?", (flight_id,))

    def count(self) -> int:
        conn = self._require_connection()
        return conn.execute("SELECT COUNT(*) FROM flights").fetchone()[0]
