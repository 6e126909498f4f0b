"""
Lane Packer Module.

Provides the lane packing algorithm for organizing intervals within one row
without overlaps using a greedy "First Fit" approach.
"""

import logging
from typing import Dict, Iterable, List, Sequence

from src.core.intervals import ScheduledInterval, TimeInterval

logger = logging.getLogger(__name__)


def assign_lanes(intervals: Iterable[TimeInterval]) -> List[ScheduledInterval]:
    """
    Packs intervals into lanes using the First Fit algorithm.

    Intervals are stable-sorted by start, then each one takes the lowest
    lane whose previous occupant ended at or before its start. When no lane
    qualifies a new lane is opened. The number of lanes used equals the
    maximum number of mutually overlapping intervals.

    Args:
        intervals: Intervals belonging to one row. Not modified.

    Returns:
        List of ScheduledInterval in start order.
    """
    ordered = sorted(intervals, key=lambda interval: interval.start)

    lanes_end_times: List[int] = []
    scheduled = []

    for interval in ordered:
        level = _find_available_lane(lanes_end_times, interval)
        scheduled.append(ScheduledInterval(interval=interval, level=level))

    logger.debug(f"Packed {len(scheduled)} intervals into {len(lanes_end_times)} lanes")
    return scheduled


def _find_available_lane(lanes_end_times: List[int], interval: TimeInterval) -> int:
    """
    Finds the first available lane for an interval and claims it.

    Args:
        lanes_end_times: End time of the last occupant of each lane.
        interval: The interval to place.

    Returns:
        int: The lane index (0-based).
    """
    for i, lane_end in enumerate(lanes_end_times):
        if lane_end <= interval.start:
            lanes_end_times[i] = interval.end
            return i

    lanes_end_times.append(interval.end)
    return len(lanes_end_times) - 1


def required_lanes(intervals: Iterable[TimeInterval]) -> int:
    """
    Calculates the number of lanes needed for a set of intervals.

    Returns:
        int: 1 + the highest assigned level, or 0 for no intervals.
    """
    scheduled = assign_lanes(intervals)
    if not scheduled:
        return 0
    return max(item.level for item in scheduled) + 1


def lane_assignments(intervals: Iterable[TimeInterval]) -> Dict[str, int]:
    """Maps interval id to its assigned lane."""
    return {item.id: item.level for item in assign_lanes(intervals)}


def max_overlap_depth(intervals: Sequence[TimeInterval]) -> int:
    """
    Computes the largest number of intervals overlapping at one instant.

    Sweep line over start (+1) and end (-1) events. At equal instants ends
    are processed first, matching the non-strict lane reuse rule.
    """
    events = []
    for interval in intervals:
        events.append((interval.start, 1))
        events.append((interval.end, -1))
    events.sort(key=lambda event: (event[0], event[1]))

    depth = 0
    deepest = 0
    for _, delta in events:
        depth += delta
        deepest = max(deepest, depth)
    return deepest
