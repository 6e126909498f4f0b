"""
Work Package Repository Module.

Handles CRUD operations for WorkPackage records in the database.
"""

import logging
from typing import List, Optional

from src.core.aviation import WorkPackage
from src.core.intervals import Instant
from src.services.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)

_UPSERT_SQL = """
    INSERT INTO work_packages (work_package_id, name, station, status, area,
                               registration, start_date_time, end_date_time,
                               start_ms, end_ms)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(work_package_id) DO UPDATE SET
        name=excluded.name,
        station=excluded.station,
        status=excluded.status,
        area=excluded.area,
        registration=excluded.registration,
        start_date_time=excluded.start_date_time,
        end_date_time=excluded.end_date_time,
        start_ms=excluded.start_ms,
        end_ms=excluded.end_ms;
"""

_COLUMNS = (
    "work_package_id, name, station, status, area, registration, "
    "start_date_time, end_date_time"
)


def _row_params(work_package: WorkPackage) -> tuple:
    interval = work_package.to_interval()
    return (
        work_package.work_package_id,
        work_package.name,
        work_package.station,
        work_package.status,
        work_package.area,
        work_package.registration,
        work_package.start_date_time,
        work_package.end_date_time,
        interval.start,
        interval.end,
    )


class WorkPackageRepository(BaseRepository):
    """
    Repository for WorkPackage records.
    """

    def insert(self, work_package: WorkPackage) -> None:
        """
        Insert a new work package or update an existing one (Upsert).

        Raises:
            MalformedIntervalError: If a timestamp is unparseable.
            sqlite3.Error: If the database operation fails.
        """
        params = _row_params(work_package)
        with self.transaction() as conn:
            conn.execute(_UPSERT_SQL, params)

    def insert_bulk(self, work_packages: List[WorkPackage]) -> None:
        """
        Insert multiple work packages in a single transaction.

        Raises:
            MalformedIntervalError: If any timestamp is unparseable.
            sqlite3.Error: If the database operation fails.
        """
        data = [_row_params(wp) for wp in work_packages]
        with self.transaction() as conn:
            conn.executemany(_UPSERT_SQL, data)
        logger.debug(f"Bulk inserted {len(data)} work packages")

    def get(self, work_package_id: str) -> Optional[WorkPackage]:
        conn = self._require_connection()
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM work_packages WHERE work_package_id = ?",
            (work_package_id,),
        ).fetchone()
        return WorkPackage.from_dict(dict(row)) if row else None

    def get_all(self) -> List[WorkPackage]:
        conn = self._require_connection()
        cursor = conn.execute(
            f"SELECT {_COLUMNS} FROM work_packages "
            "ORDER BY start_ms ASC, work_package_id ASC"
        )
        return [WorkPackage.from_dict(dict(row)) for row in cursor.fetchall()]

    def get_in_range(self, start: Instant, end: Instant) -> List[WorkPackage]:
        """
        Retrieve work packages overlapping the window.

        A work package overlaps if start < package end and end > package
        start; packages merely touching a window boundary are excluded.

        Args:
            start: Window start.
            end: Window end.

        Returns:
            Work packages ordered by start.
        """
        conn = self._require_connection()
        cursor = conn.execute(
            f"""
            SELECT {_COLUMNS} FROM work_packages
            WHERE ? < end_ms AND ? > start_ms
            ORDER BY start_ms ASC, work_package_id ASC
            """,
            (start, end),
        )
        return [WorkPackage.from_dict(dict(row)) for row in cursor.fetchall()]

    def delete(self, work_package_id: str) -> None:
        with self.transaction() as conn:
            conn.execute(
                "DELETE FROM work_packages WHERE work_package_id = ?",
                (work_package_id,),
            )

    def count(self) -> int:
        conn = self._require_connection()
        return conn.execute("SELECT COUNT(*) FROM work_packages").fetchone()[0]
