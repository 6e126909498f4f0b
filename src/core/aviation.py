"""Core Aviation Module.

Defines the Flight and WorkPackage records served by the API and laid out on
the timeline. Flights form the primary tier of a row and work packages the
secondary tier; rows are keyed by aircraft registration.

Timestamps are kept as the ISO-8601 strings of the wire format and converted
to Instants only when an interval is requested.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.intervals import TimeInterval, make_interval


class WorkPackageStatus:
    """Known work package status values."""

    PENDING = "PENDING"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    ALL = (PENDING, SCHEDULED, IN_PROGRESS, ON_HOLD, COMPLETED, CANCELLED)


# Python attribute name -> wire (camelCase) key
_FLIGHT_FIELDS = {
    "flight_id": "flightId",
    "airline": "airline",
    "registration": "registration",
    "aircraft_type": "aircraftType",
    "flight_num": "flightNum",
    "sched_dep_time": "schedDepTime",
    "sched_arr_time": "schedArrTime",
    "actual_dep_time": "actualDepTime",
    "actual_arr_time": "actualArrTime",
    "estimated_dep_time": "estimatedDepTime",
    "estimated_arr_time": "estimatedArrTime",
    "sched_dep_station": "schedDepStation",
    "sched_arr_station": "schedArrStation",
    "dep_stand": "depStand",
    "orig_dep_stand": "origDepStand",
    "arr_stand": "arrStand",
    "orig_arr_stand": "origArrStand",
}

_WORK_PACKAGE_FIELDS = {
    "work_package_id": "workPackageId",
    "name": "name",
    "station": "station",
    "status": "status",
    "area": "area",
    "registration": "registration",
    "start_date_time": "startDateTime",
    "end_date_time": "endDateTime",
}


def _from_wire(fields: Dict[str, str], data: Dict[str, Any]) -> Dict[str, Any]:
    """Accepts either camelCase wire keys or snake_case attribute names."""
    values = {}
    for attr, key in fields.items():
        if key in data:
            values[attr] = data[key]
        elif attr in data:
            values[attr] = data[attr]
    return values


@dataclass
class Flight:
    """
    A scheduled flight operated by one aircraft.
    """

    flight_id: str
    registration: str
    sched_dep_time: str
    sched_arr_time: str
    airline: str = ""
    aircraft_type: str = ""
    flight_num: str = ""
    sched_dep_station: str = ""
    sched_arr_station: str = ""
    actual_dep_time: Optional[str] = None
    actual_arr_time: Optional[str] = None
    estimated_dep_time: Optional[str] = None
    estimated_arr_time: Optional[str] = None
    dep_stand: Optional[str] = None
    orig_dep_stand: Optional[str] = None
    arr_stand: Optional[str] = None
    orig_arr_stand: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Converts the Flight to its wire representation.

        Returns:
            Dict[str, Any]: camelCase keyed dictionary.
        """
        return {key: getattr(self, attr) for attr, key in _FLIGHT_FIELDS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Flight":
        """
        Creates a Flight from a wire or row dictionary.

        Args:
            data: Dictionary with camelCase or snake_case keys.

        Returns:
            Flight: A new Flight instance.
        """
        return cls(**_from_wire(_FLIGHT_FIELDS, data))

    def to_interval(self) -> TimeInterval:
        """
        Returns the primary-tier interval (scheduled departure to arrival).

        Raises:
            MalformedIntervalError: If a scheduled time is unparseable.
        """
        return make_interval(self.flight_id, self.sched_dep_time, self.sched_arr_time)

    @property
    def label(self) -> str:
        return "—".join(
            (self.sched_dep_station, self.flight_num, self.sched_arr_station)
        )


@dataclass
class WorkPackage:
    """
    A maintenance work package scheduled on one aircraft.
    """

    work_package_id: str
    registration: str
    start_date_time: str
    end_date_time: str
    name: str = ""
    station: str = ""
    status: str = WorkPackageStatus.PENDING
    area: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """
        Converts the WorkPackage to its wire representation.

        Returns:
            Dict[str, Any]: camelCase keyed dictionary.
        """
        return {
            key: getattr(self, attr) for attr, key in _WORK_PACKAGE_FIELDS.items()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkPackage":
        """
        Creates a WorkPackage from a wire or row dictionary.

        Args:
            data: Dictionary with camelCase or snake_case keys.

        Returns:
            WorkPackage: A new WorkPackage instance.
        """
        return cls(**_from_wire(_WORK_PACKAGE_FIELDS, data))

    def to_interval(self) -> TimeInterval:
        """
        Returns the secondary-tier interval (start to end).

        Raises:
            MalformedIntervalError: If a timestamp is unparseable.
        """
        return make_interval(
            self.work_package_id, self.start_date_time, self.end_date_time
        )
