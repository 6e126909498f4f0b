"""
Timeline Ticks Module.

Generates the header ruler for a visible window:
- Fixed-cadence ticks from the visual origin through the window's end
- Hour marks (labelled) versus minor marks (gridline only)
- Contiguous same-day groups, clipped to the window's end
"""

import logging
from dataclasses import dataclass, field
from typing import List

from src.core.intervals import Instant, Window, to_datetime, utc_day_start
from src.core.layout_config import (
    DEFAULT_LAYOUT_CONFIG,
    MILLISECONDS_PER_HOUR,
    LayoutConfig,
    TickEndPolicy,
)
from src.core.pixel_mapper import position, timeline_width

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tick:
    """
    A single ruler mark.

    Attributes:
        time: Instant of the mark.
        left_px: Pixel offset from the visual origin.
        is_hour_mark: True when the minute component is zero.
    """

    time: Instant
    left_px: float
    is_hour_mark: bool

    @property
    def label(self) -> str:
        dt = to_datetime(self.time)
        return f"{dt.hour}:{dt.minute:02d}"

    def to_dict(self) -> dict:
        return {
            "time": self.time,
            "leftPx": self.left_px,
            "isHourMark": self.is_hour_mark,
            "label": self.label if self.is_hour_mark else None,
        }


@dataclass(frozen=True)
class DayGroup:
    """
    A run of ticks falling on the same UTC calendar day.

    Attributes:
        date: Instant of 00:00 UTC of the day.
        ticks: Ticks in the run, in order.
        start_px: Offset of the first tick.
        width_px: Span of the run, clipped to the window's end.
    """

    date: Instant
    ticks: List[Tick] = field(default_factory=list)
    start_px: float = 0.0
    width_px: float = 0.0

    @property
    def label(self) -> str:
        dt = to_datetime(self.date)
        return f"{dt:%A}, {dt:%b} {dt.day}, {dt.year}"

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "label": self.label,
            "startPx": self.start_px,
            "widthPx": self.width_px,
        }


@dataclass(frozen=True)
class TimelineHeader:
    """Everything needed to draw the header of one window."""

    visual_origin: Instant
    width: float
    ticks: List[Tick]
    day_groups: List[DayGroup]

    def to_dict(self) -> dict:
        return {
            "visualOrigin": self.visual_origin,
            "width": self.width,
            "ticks": [tick.to_dict() for tick in self.ticks],
            "dayGroups": [group.to_dict() for group in self.day_groups],
        }


def tick_end(window: Window, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG) -> Instant:
    """
    Returns the last instant a tick may fall on under the config's policy.
    """
    if config.tick_end_policy is TickEndPolicy.ROUND_UP_TO_HOUR:
        remainder = window.max % MILLISECONDS_PER_HOUR
        if remainder:
            return window.max - remainder + MILLISECONDS_PER_HOUR
    return window.max


def tick_count(
    window: Window, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> int:
    """Number of ticks generate_ticks() would produce, without building them."""
    span = tick_end(window, config) - window.visual_origin
    return span // config.tick_step_ms + 1


def generate_ticks(
    window: Window, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> List[Tick]:
    """
    Generates ticks from the visual origin through the window's end.

    Args:
        window: The visible window.
        config: Layout configuration (cadence, scale, end policy).

    Returns:
        List[Tick]: Ordered ticks, inclusive of the end bound.
    """
    origin = window.visual_origin
    end = tick_end(window, config)
    step = config.tick_step_ms

    ticks = []
    current = origin
    while current <= end:
        ticks.append(
            Tick(
                time=current,
                left_px=position(current, origin, config),
                is_hour_mark=to_datetime(current).minute == 0,
            )
        )
        current += step

    logger.debug(
        f"Generated {len(ticks)} ticks from {origin} to {end} "
        f"(policy={config.tick_end_policy.name})"
    )
    return ticks


def group_ticks_by_day(
    ticks: List[Tick], window: Window, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> List[DayGroup]:
    """
    Groups ticks into contiguous same-UTC-day runs.

    Each run ends one tick width after its last tick, or at the window's
    end if that comes first.

    Args:
        ticks: Ordered ticks, as produced by generate_ticks().
        window: The visible window.
        config: Layout configuration.

    Returns:
        List[DayGroup]: One group per run, in order.
    """
    max_px = position(window.max, window.visual_origin, config)

    runs: List[List[Tick]] = []
    current_day = None
    for tick in ticks:
        day = utc_day_start(tick.time)
        if day != current_day:
            runs.append([])
            current_day = day
        runs[-1].append(tick)

    groups = []
    for run in runs:
        start_px = run[0].left_px
        end_px = min(run[-1].left_px + config.tick_width_px, max_px)
        # A run made only of rounded-up ticks past max collapses to zero width
        end_px = max(end_px, start_px)
        groups.append(
            DayGroup(
                date=utc_day_start(run[0].time),
                ticks=run,
                start_px=start_px,
                width_px=end_px - start_px,
            )
        )
    return groups


def build_header(
    window: Window, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> TimelineHeader:
    """Builds ticks and day groups for a window."""
    ticks = generate_ticks(window, config)
    return TimelineHeader(
        visual_origin=window.visual_origin,
        width=timeline_width(window.min, window.max, config),
        ticks=ticks,
        day_groups=group_ticks_by_day(ticks, window, config),
    )
