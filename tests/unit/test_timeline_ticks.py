"""
Tests for the header tick generator and day grouping.
"""

import pytest

from src.core.intervals import Window, parse_instant
from src.core.layout_config import LayoutConfig, TickEndPolicy
from src.core.timeline_ticks import (
    build_header,
    generate_ticks,
    group_ticks_by_day,
    tick_count,
    tick_end,
)

ROUND_UP = LayoutConfig(tick_end_policy=TickEndPolicy.ROUND_UP_TO_HOUR)


def window(start: str, end: str) -> Window:
    return Window.from_iso(start, end)


class TestGenerateTicks:
    def test_ticks_start_at_visual_origin(self):
        ticks = generate_ticks(
            window("2024-04-15T09:00:00.000Z", "2024-04-15T12:00:00.000Z")
        )

        assert ticks[0].time == parse_instant("2024-04-15T00:00:00.000Z")
        assert ticks[0].left_px == 0.0

    def test_ticks_cover_window_inclusive(self):
        ticks = generate_ticks(
            window("2024-04-15T09:00:00.000Z", "2024-04-15T12:00:00.000Z")
        )

        # 00:00 through 12:00 every 30 minutes
        assert len(ticks) == 25
        assert ticks[-1].time == parse_instant("2024-04-15T12:00:00.000Z")

    def test_ten_oclock_tick_offset(self):
        ticks = generate_ticks(
            window("2024-04-15T09:00:00.000Z", "2024-04-15T12:00:00.000Z")
        )
        ten = next(
            t for t in ticks if t.time == parse_instant("2024-04-15T10:00:00.000Z")
        )

        assert ten.left_px == 10 * 100
        assert ten.is_hour_mark
        assert ten.label == "10:00"

    def test_half_hour_marks_are_minor(self):
        ticks = generate_ticks(
            window("2024-04-15T09:00:00.000Z", "2024-04-15T12:00:00.000Z")
        )

        assert [t.is_hour_mark for t in ticks[:4]] == [True, False, True, False]
        assert ticks[18].label == "9:00"

    def test_exact_policy_stops_at_max(self):
        w = window("2024-04-15T09:00:00.000Z", "2024-04-15T12:10:00.000Z")

        ticks = generate_ticks(w)

        assert tick_end(w) == w.max
        assert ticks[-1].time == parse_instant("2024-04-15T12:00:00.000Z")

    def test_round_up_policy_extends_to_next_hour(self):
        w = window("2024-04-15T09:00:00.000Z", "2024-04-15T12:10:00.000Z")

        ticks = generate_ticks(w, ROUND_UP)

        assert tick_end(w, ROUND_UP) == parse_instant("2024-04-15T13:00:00.000Z")
        assert ticks[-1].time == parse_instant("2024-04-15T13:00:00.000Z")
        assert len(ticks) == 27

    def test_round_up_keeps_whole_hour(self):
        w = window("2024-04-15T09:00:00.000Z", "2024-04-15T12:00:00.000Z")

        assert tick_end(w, ROUND_UP) == w.max

    def test_custom_cadence(self):
        config = LayoutConfig(minutes_per_tick=60)
        ticks = generate_ticks(
            window("2024-04-15T01:00:00.000Z", "2024-04-15T03:00:00.000Z"), config
        )

        assert len(ticks) == 4
        assert all(t.is_hour_mark for t in ticks)


class TestGroupTicksByDay:
    def test_groups_split_on_utc_midnight(self):
        w = window("2024-04-15T09:00:00.000Z", "2024-04-16T06:00:00.000Z")
        ticks = generate_ticks(w)

        groups = group_ticks_by_day(ticks, w)

        assert len(groups) == 2
        assert len(groups[0].ticks) == 48
        assert len(groups[1].ticks) == 13
        assert groups[0].date == parse_instant("2024-04-15T00:00:00.000Z")
        assert groups[1].date == parse_instant("2024-04-16T00:00:00.000Z")

    def test_full_day_spans_to_next_midnight(self):
        w = window("2024-04-15T09:00:00.000Z", "2024-04-16T06:00:00.000Z")

        first = group_ticks_by_day(generate_ticks(w), w)[0]

        assert first.start_px == 0.0
        assert first.width_px == 2400.0

    def test_trailing_day_is_clipped_to_window_end(self):
        w = window("2024-04-15T09:00:00.000Z", "2024-04-16T06:00:00.000Z")

        last = group_ticks_by_day(generate_ticks(w), w)[-1]

        # Natural end would be 06:30 (3050px); the window ends at 06:00
        assert last.start_px == 2400.0
        assert last.width_px == 600.0

    def test_rounded_tick_past_max_collapses(self):
        w = window("2024-04-15T09:00:00.000Z", "2024-04-15T23:10:00.000Z")

        groups = group_ticks_by_day(generate_ticks(w, ROUND_UP), w, ROUND_UP)

        assert groups[-1].start_px == 2400.0
        assert groups[-1].width_px == 0.0

    def test_day_label(self):
        w = window("2024-04-15T09:00:00.000Z", "2024-04-15T12:00:00.000Z")

        group = group_ticks_by_day(generate_ticks(w), w)[0]

        assert group.label == "Monday, Apr 15, 2024"

    def test_no_ticks_no_groups(self):
        w = window("2024-04-15T09:00:00.000Z", "2024-04-15T12:00:00.000Z")

        assert group_ticks_by_day([], w) == []


def test_build_header():
    w = window("2024-04-15T09:00:00.000Z", "2024-04-16T06:00:00.000Z")

    header = build_header(w)
    data = header.to_dict()

    assert header.visual_origin == parse_instant("2024-04-15T00:00:00.000Z")
    assert header.width == 2100.0
    assert len(data["ticks"]) == len(header.ticks)
    assert data["ticks"][1]["label"] is None
    assert data["dayGroups"][0]["widthPx"] == 2400.0


@pytest.mark.parametrize(
    "config", [LayoutConfig(), ROUND_UP, LayoutConfig(minutes_per_tick=15)]
)
def test_tick_count_matches_generated_ticks(config):
    w = window("2024-04-15T09:00:00.000Z", "2024-04-16T06:10:00.000Z")

    assert tick_count(w, config) == len(generate_ticks(w, config))


def test_tick_count_grows_with_span():
    w = window("2000-01-01T00:00:00.000Z", "2010-01-01T00:00:00.000Z")

    # 3653 days of 48 ticks plus the closing midnight
    assert tick_count(w) == 3653 * 48 + 1
