"""
Tests for grouping records into rows and building full layouts.
"""

import pytest

from src.core.aviation import Flight, WorkPackage
from src.core.intervals import EmptyRangeError, Window, parse_instant
from src.core.layout_config import LayoutConfig
from src.services.seed_service import seed_from_directory
from src.services.timeline_service import (
    TimelineService,
    build_timeline_layout,
    group_by_registration,
)

APR_15 = Window.from_iso("2024-04-15T00:00:00.000Z", "2024-04-16T00:00:00.000Z")


def flight(flight_id, registration, dep, arr):
    return Flight(flight_id, registration, dep, arr)


def work_package(work_package_id, registration, start, end):
    return WorkPackage(work_package_id, registration, start, end)


@pytest.fixture
def service(db_service, seed_dir):
    seed_from_directory(db_service, seed_dir)
    return TimelineService(db_service)


def test_group_by_registration_sorted_rows():
    flights = [
        flight("F1", "N9", "2024-04-15T01:00:00Z", "2024-04-15T02:00:00Z"),
        flight("F2", "N1", "2024-04-15T01:00:00Z", "2024-04-15T02:00:00Z"),
    ]
    packages = [
        work_package("W1", "N5", "2024-04-15T01:00:00Z", "2024-04-15T02:00:00Z")
    ]

    rows = group_by_registration(flights, packages)

    assert list(rows) == ["N1", "N5", "N9"]
    assert rows["N5"] == ([], packages)
    assert rows["N9"][0] == [flights[0]]


def test_build_layout_derives_window_from_data():
    flights = [flight("F1", "N1", "2024-04-15T06:00:00Z", "2024-04-15T08:00:00Z")]
    packages = [
        work_package("W1", "N1", "2024-04-15T07:00:00Z", "2024-04-15T12:00:00Z")
    ]

    layout = build_timeline_layout(flights, packages)

    assert layout.window == Window.from_iso(
        "2024-04-15T06:00:00Z", "2024-04-15T12:00:00Z"
    )
    assert layout.header.visual_origin == parse_instant("2024-04-15T00:00:00Z")
    assert layout.rows[0].height == 28 + 28 + 16


def test_build_layout_without_data_needs_window():
    with pytest.raises(EmptyRangeError):
        build_timeline_layout([], [])

    layout = build_timeline_layout([], [], APR_15)
    assert layout.rows == []
    assert layout.total_height == 0


def test_layout_for_window(service):
    layout = service.layout_for(APR_15)

    assert [row.key for row in layout.rows] == ["N123AB", "N456CD", "N789EF"]
    assert [row.height for row in layout.rows] == [100, 72, 45]
    assert [row.top for row in layout.rows] == [0, 100, 172]
    assert layout.total_height == 217

    n123 = layout.rows[0]
    assert {b.id: b.level for b in n123.secondary_blocks} == {
        "WP-001": 0,
        "WP-002": 1,
        "WP-003": 0,
    }


def test_layout_for_clips_overnight_flight(service):
    layout = service.layout_for(APR_15)
    n456 = layout.rows[1]

    overnight = next(b for b in n456.primary_blocks if b.id == "FL-2002")
    assert overnight.left == 2200.0
    assert overnight.width == 200.0


def test_layout_for_all_records(service):
    layout = service.layout_for()

    assert layout.window == Window.from_iso(
        "2024-04-15T06:00:00.000Z", "2024-04-16T11:45:00.000Z"
    )
    assert len(layout.rows) == 3


def test_layout_uses_service_config(db_service, seed_dir):
    seed_from_directory(db_service, seed_dir)
    service = TimelineService(db_service, LayoutConfig(pixels_per_hour=50))

    layout = service.layout_for(APR_15)

    assert layout.header.width == 1200.0
    assert layout.header.ticks[2].left_px == 50.0


def test_layout_to_dict(service):
    data = service.layout_for(APR_15).to_dict()

    assert data["window"] == {
        "min": "2024-04-15T00:00:00.000Z",
        "max": "2024-04-16T00:00:00.000Z",
    }
    assert data["totalHeight"] == 217
    assert len(data["header"]["ticks"]) == 49
    assert data["rows"][2]["primary"] == []
