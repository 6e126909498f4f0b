"""Core Intervals Module.

Defines the time-stamped units consumed by the layout engine.

An Instant is an integer count of milliseconds since the Unix epoch (UTC).
Timestamps from the outside world are converted at the boundary with
parse_instant(), which fails fast on malformed input instead of letting a
not-a-number value leak into the layout.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Union

Instant = int

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
MILLISECONDS_PER_DAY = 24 * 60 * 60 * 1000


class TimelineError(Exception):
    """Base class for timeline layout errors."""


class MalformedIntervalError(TimelineError, ValueError):
    """Raised when a timestamp cannot be converted into an Instant."""


class EmptyRangeError(TimelineError, ValueError):
    """Raised when a time range is requested over an empty interval set."""


@dataclass(frozen=True)
class TimeInterval:
    """
    A half-open span of time identified by id.

    end > start is expected but not enforced; degenerate intervals are laid
    out with zero or negative width.
    """

    id: str
    start: Instant
    end: Instant

    @property
    def duration_ms(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Window:
    """
    The visible time range.

    Attributes:
        min: Earliest visible instant.
        max: Latest visible instant.
    """

    min: Instant
    max: Instant

    def __post_init__(self) -> None:
        if self.max < self.min:
            raise ValueError(
                f"Window max ({self.max}) must not be before min ({self.min})"
            )

    @property
    def visual_origin(self) -> Instant:
        """UTC midnight of the day containing min; the zero point for pixels."""
        return utc_day_start(self.min)

    @classmethod
    def from_iso(cls, start: str, end: str) -> "Window":
        """Builds a window from two ISO-8601 strings."""
        return cls(parse_instant(start), parse_instant(end))

    def to_dict(self) -> dict:
        return {"min": format_instant(self.min), "max": format_instant(self.max)}


@dataclass(frozen=True)
class ScheduledInterval:
    """A TimeInterval annotated with its 0-indexed lane."""

    interval: TimeInterval
    level: int

    @property
    def id(self) -> str:
        return self.interval.id


def utc_day_start(instant: Instant) -> Instant:
    """
    Truncates an instant down to 00:00:00.000 UTC of its day.

    Args:
        instant: Milliseconds since epoch.

    Returns:
        Instant: Start of the UTC calendar day.
    """
    return instant - instant % MILLISECONDS_PER_DAY


def to_datetime(instant: Instant) -> datetime:
    """Converts an Instant into an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=instant)


def parse_instant(value: Union[str, datetime, int, float]) -> Instant:
    """
    Converts a timestamp into an Instant.

    Accepts ISO-8601 strings (a trailing "Z" is understood, naive values are
    taken as UTC), datetimes, and millisecond counts.

    Args:
        value: The timestamp to convert.

    Returns:
        Instant: Milliseconds since epoch.

    Raises:
        MalformedIntervalError: If the value cannot be interpreted.
    """
    if isinstance(value, bool):
        raise MalformedIntervalError(f"Not a timestamp: {value!r}")

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise MalformedIntervalError(f"Not a finite timestamp: {value!r}")
        return int(value)

    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError:
            raise MalformedIntervalError(
                f"Unparseable timestamp: {value!r}"
            ) from None

    if not isinstance(value, datetime):
        raise MalformedIntervalError(f"Unsupported timestamp type: {type(value)}")

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - EPOCH) // timedelta(milliseconds=1)


def format_instant(instant: Instant) -> str:
    """
    Renders an Instant as canonical ISO-8601 with millisecond precision.

    Example: 2024-04-15T09:00:00.000Z
    """
    dt = to_datetime(instant)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def make_interval(id: str, start, end) -> TimeInterval:
    """
    Builds a TimeInterval from raw timestamps, failing fast when malformed.

    Raises:
        MalformedIntervalError: If either timestamp is unparseable.
    """
    try:
        return TimeInterval(id=id, start=parse_instant(start), end=parse_instant(end))
    except MalformedIntervalError as e:
        raise MalformedIntervalError(f"Interval {id!r}: {e}") from e


def overlaps_window(
    interval: TimeInterval, window_start: Instant, window_end: Instant
) -> bool:
    """Strict overlap: the interval shares some time with the window."""
    return window_start < interval.end and window_end > interval.start


def starts_in_window(
    interval: TimeInterval, window_start: Instant, window_end: Instant
) -> bool:
    """Start-anchored: the interval begins inside [window_start, window_end)."""
    return window_start <= interval.start < window_end
