"""
Timeline Service Module.

Connects stored flights and work packages to the layout engine: records are
grouped into rows by aircraft registration, converted to intervals and laid
out against a window.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from src.core.aviation import Flight, WorkPackage
from src.core.intervals import Window
from src.core.layout_config import DEFAULT_LAYOUT_CONFIG, LayoutConfig
from src.core.row_layout import RowLayout, layout_rows
from src.core.time_range import get_timeline_range
from src.core.timeline_ticks import TimelineHeader, build_header
from src.services.db_service import DatabaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimelineLayout:
    """Complete layout of a window: header geometry plus one entry per row."""

    window: Window
    header: TimelineHeader
    rows: List[RowLayout]

    @property
    def total_height(self) -> float:
        return sum(row.height for row in self.rows)

    def to_dict(self) -> dict:
        return {
            "window": self.window.to_dict(),
            "header": self.header.to_dict(),
            "rows": [row.to_dict() for row in self.rows],
            "totalHeight": self.total_height,
        }


def group_by_registration(
    flights: Sequence[Flight], work_packages: Sequence[WorkPackage]
) -> Dict[str, Tuple[List[Flight], List[WorkPackage]]]:
    """
    Groups records by aircraft registration.

    Returns:
        Dict keyed by registration in sorted order, each value holding the
        row's flights and work packages in input order.
    """
    registrations = sorted(
        {f.registration for f in flights} | {wp.registration for wp in work_packages}
    )
    rows: Dict[str, Tuple[List[Flight], List[WorkPackage]]] = {
        registration: ([], []) for registration in registrations
    }
    for flight in flights:
        rows[flight.registration][0].append(flight)
    for work_package in work_packages:
        rows[work_package.registration][1].append(work_package)
    return rows


def build_timeline_layout(
    flights: Sequence[Flight],
    work_packages: Sequence[WorkPackage],
    window: Optional[Window] = None,
    config: LayoutConfig = DEFAULT_LAYOUT_CONFIG,
) -> TimelineLayout:
    """
    Lays out flights and work packages, one row per registration.

    Args:
        flights: Primary-tier records.
        work_packages: Secondary-tier records.
        window: Visible window; derived from the data when None.
        config: Layout configuration.

    Returns:
        TimelineLayout: Header and rows.

    Raises:
        MalformedIntervalError: If a record carries an unparseable timestamp.
        EmptyRangeError: If no window is given and there is no data.
    """
    grouped = group_by_registration(flights, work_packages)
    rows = [
        (
            registration,
            [flight.to_interval() for flight in row_flights],
            [wp.to_interval() for wp in row_work_packages],
        )
        for registration, (row_flights, row_work_packages) in grouped.items()
    ]

    if window is None:
        window = get_timeline_range(
            *[primary for _, primary, _ in rows],
            *[secondary for _, _, secondary in rows],
        )

    layout = TimelineLayout(
        window=window,
        header=build_header(window, config),
        rows=layout_rows(rows, window, config),
    )
    logger.debug(
        f"Laid out {len(layout.rows)} rows, {len(flights)} flights, "
        f"{len(work_packages)} work packages, height={layout.total_height}"
    )
    return layout


class TimelineService:
    """
    Serves window-filtered records and layouts from the database.
    """

    def __init__(
        self, db_service: DatabaseService, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
    ) -> None:
        """
        Args:
            db_service: Connected database service.
            config: Layout configuration used by layout_for().
        """
        self.db_service = db_service
        self.config = config

    def flights_for(self, window: Window) -> List[Flight]:
        """Flights departing inside the window."""
        return self.db_service.get_flights_in_range(window.min, window.max)

    def work_packages_for(self, window: Window) -> List[WorkPackage]:
        """Work packages overlapping the window."""
        return self.db_service.get_work_packages_in_range(window.min, window.max)

    def layout_for(self, window: Optional[Window] = None) -> TimelineLayout:
        """
        Lays out the window's records.

        With no window, every stored record is laid out over the range the
        data spans.
        """
        if window is None:
            return build_timeline_layout(
                self.db_service.get_all_flights(),
                self.db_service.get_all_work_packages(),
                None,
                self.config,
            )
        return build_timeline_layout(
            self.flights_for(window),
            self.work_packages_for(window),
            window,
            self.config,
        )
