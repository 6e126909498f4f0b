"""
Time Range Module.

Reduces pooled interval collections to the window they span.
"""

from typing import Iterable

from src.core.intervals import EmptyRangeError, TimeInterval, Window


def get_timeline_range(*collections: Iterable[TimeInterval]) -> Window:
    """
    Returns the window spanning every interval in the given collections.

    Args:
        *collections: Any number of interval collections, pooled together.

    Returns:
        Window: min of all starts and max of all ends.

    Raises:
        EmptyRangeError: If the pooled set is empty.
    """
    starts = []
    ends = []
    for collection in collections:
        for interval in collection:
            starts.append(interval.start)
            ends.append(interval.end)

    if not starts:
        raise EmptyRangeError("Cannot derive a time range from zero intervals")

    # max(ends) can be below min(starts) only for degenerate input
    lo = min(starts)
    return Window(lo, max(max(ends), lo))


def get_timeline_range_or(
    fallback: Window, *collections: Iterable[TimeInterval]
) -> Window:
    """Like get_timeline_range(), but returns fallback for an empty pool."""
    try:
        return get_timeline_range(*collections)
    except EmptyRangeError:
        return fallback
