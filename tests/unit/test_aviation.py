"""
Tests for the Flight and WorkPackage records.
"""

import pytest

from src.core.aviation import Flight, WorkPackage, WorkPackageStatus
from src.core.intervals import MalformedIntervalError, parse_instant

FLIGHT_WIRE = {
    "flightId": "FL-1001",
    "airline": "AA",
    "registration": "N123AB",
    "aircraftType": "B737",
    "flightNum": "AA100",
    "schedDepTime": "2024-04-15T06:00:00.000Z",
    "schedArrTime": "2024-04-15T08:30:00.000Z",
    "schedDepStation": "SFO",
    "schedArrStation": "LAX",
}

WORK_PACKAGE_WIRE = {
    "workPackageId": "WP-001",
    "name": "A-Check",
    "station": "SFO",
    "status": "SCHEDULED",
    "area": "ENGINE",
    "registration": "N123AB",
    "startDateTime": "2024-04-15T13:00:00.000Z",
    "endDateTime": "2024-04-15T18:00:00.000Z",
}


class TestFlight:
    def test_from_wire_dict(self):
        flight = Flight.from_dict(FLIGHT_WIRE)

        assert flight.flight_id == "FL-1001"
        assert flight.aircraft_type == "B737"
        assert flight.actual_dep_time is None

    def test_from_snake_case_dict(self):
        flight = Flight.from_dict(
            {
                "flight_id": "FL-1",
                "registration": "N1",
                "sched_dep_time": "2024-04-15T06:00:00.000Z",
                "sched_arr_time": "2024-04-15T07:00:00.000Z",
            }
        )

        assert flight.flight_id == "FL-1"
        assert flight.airline == ""

    def test_to_dict_uses_wire_keys(self):
        data = Flight.from_dict(FLIGHT_WIRE).to_dict()

        for key, value in FLIGHT_WIRE.items():
            assert data[key] == value
        assert data["depStand"] is None

    def test_to_interval(self):
        interval = Flight.from_dict(FLIGHT_WIRE).to_interval()

        assert interval.id == "FL-1001"
        assert interval.start == parse_instant("2024-04-15T06:00:00.000Z")
        assert interval.end == parse_instant("2024-04-15T08:30:00.000Z")

    def test_malformed_time_raises(self):
        flight = Flight.from_dict({**FLIGHT_WIRE, "schedArrTime": "later"})

        with pytest.raises(MalformedIntervalError, match="FL-1001"):
            flight.to_interval()

    def test_missing_required_field(self):
        with pytest.raises(TypeError):
            Flight.from_dict({"flightId": "FL-1"})

    def test_label(self):
        assert Flight.from_dict(FLIGHT_WIRE).label == "SFO—AA100—LAX"


class TestWorkPackage:
    def test_from_wire_dict(self):
        work_package = WorkPackage.from_dict(WORK_PACKAGE_WIRE)

        assert work_package.work_package_id == "WP-001"
        assert work_package.status == WorkPackageStatus.SCHEDULED
        assert work_package.to_dict() == WORK_PACKAGE_WIRE

    def test_defaults(self):
        work_package = WorkPackage(
            "WP-X", "N1", "2024-04-15T00:00:00Z", "2024-04-15T01:00:00Z"
        )

        assert work_package.status == WorkPackageStatus.PENDING
        assert work_package.name == ""

    def test_to_interval(self):
        interval = WorkPackage.from_dict(WORK_PACKAGE_WIRE).to_interval()

        assert interval.id == "WP-001"
        assert interval.duration_ms == 5 * 3_600_000

    def test_status_values(self):
        assert len(WorkPackageStatus.ALL) == 6
        assert WorkPackageStatus.IN_PROGRESS in WorkPackageStatus.ALL
