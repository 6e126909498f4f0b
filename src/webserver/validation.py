"""
Request Validation Module.

Validates the startTime/endTime query parameters shared by the API
endpoints. Timestamps must be canonical ISO-8601 in UTC with millisecond
precision, e.g. 2024-04-16T00:00:00.000Z.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from src.core.intervals import (
    MalformedIntervalError,
    Window,
    format_instant,
    parse_instant,
)
from src.core.layout_config import LayoutConfig
from src.core.timeline_ticks import tick_count

MSG_QUERY_REQUIRED = "Query parameters are required"
MSG_PARAMS_REQUIRED = (
    "Both startTime and endTime parameters are required. "
    "Format: ISO 8601 (e.g., 2024-04-16T00:00:00.000Z)"
)
MSG_NOT_STRINGS = "startTime and endTime must be strings in ISO 8601 format"
MSG_INVALID_FORMAT = (
    "Invalid date format. Use ISO 8601 format (e.g., 2024-04-16T00:00:00.000Z)"
)
MSG_ORDER = "startTime must be before endTime"
MSG_INVALID_FLAG = "{name} must be true or false"
MSG_RANGE_TOO_LARGE = (
    "Time range too large: layout would need {count} ticks, "
    "the limit is {max_ticks}"
)


@dataclass
class TimeRangeQuery:
    """A validated time range as received on the wire."""

    start_time: str
    end_time: str

    @property
    def window(self) -> Window:
        return Window.from_iso(self.start_time, self.end_time)

    def to_dict(self) -> dict:
        return {"startTime": self.start_time, "endTime": self.end_time}


@dataclass
class ValidationResult:
    """
    Outcome of query validation.

    Attributes:
        is_valid: True if the query can be used.
        error: Human-readable reason when invalid.
        data: The parsed value when valid (a TimeRangeQuery for time ranges).
    """

    is_valid: bool
    error: str = ""
    data: Any = None


def is_valid_iso_date(value: str) -> bool:
    """
    Checks that a string is a canonical ISO-8601 UTC timestamp.

    The string must parse and re-serialize to exactly itself, which rejects
    date-only values, offsets other than Z and missing milliseconds.
    """
    try:
        return format_instant(parse_instant(value)) == value
    except MalformedIntervalError:
        return False


def validate_time_range_query(query: Optional[Mapping[str, Any]]) -> ValidationResult:
    """
    Validates time range query parameters.

    Args:
        query: Mapping with startTime and endTime entries.

    Returns:
        ValidationResult: Valid result with data, or invalid with an error.
    """
    if query is None or not isinstance(query, Mapping):
        return ValidationResult(False, MSG_QUERY_REQUIRED)

    start_time = query.get("startTime")
    end_time = query.get("endTime")

    if not start_time or not end_time:
        return ValidationResult(False, MSG_PARAMS_REQUIRED)

    if not isinstance(start_time, str) or not isinstance(end_time, str):
        return ValidationResult(False, MSG_NOT_STRINGS)

    if not is_valid_iso_date(start_time) or not is_valid_iso_date(end_time):
        return ValidationResult(False, MSG_INVALID_FORMAT)

    if parse_instant(start_time) >= parse_instant(end_time):
        return ValidationResult(False, MSG_ORDER)

    return ValidationResult(True, data=TimeRangeQuery(start_time, end_time))


_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def parse_flag(value: Optional[str], name: str) -> ValidationResult:
    """
    Parses an optional boolean query parameter.

    A missing parameter is False. Accepted spellings are true/false, 1/0,
    yes/no and on/off, case-insensitive.

    Returns:
        ValidationResult: data holds the bool when valid.
    """
    if value is None:
        return ValidationResult(True, data=False)
    text = value.strip().lower()
    if text in _TRUE_VALUES:
        return ValidationResult(True, data=True)
    if text in _FALSE_VALUES:
        return ValidationResult(True, data=False)
    return ValidationResult(False, MSG_INVALID_FLAG.format(name=name))


def validate_tick_budget(
    window: Window, config: LayoutConfig, max_ticks: int
) -> ValidationResult:
    """
    Rejects windows whose header would need more than max_ticks ticks.

    The header always starts at the visual origin, so the count covers the
    whole first day regardless of startTime.
    """
    count = tick_count(window, config)
    if count > max_ticks:
        return ValidationResult(
            False, MSG_RANGE_TOO_LARGE.format(count=count, max_ticks=max_ticks)
        )
    return ValidationResult(True)
