"""
Pixel Mapper Module.

Maps absolute instants onto horizontal pixel offsets. All offsets are
measured from the window's visual origin (UTC midnight of the day holding
the window's min), never from min itself.
"""

from src.core.intervals import Instant, Window
from src.core.layout_config import (
    DEFAULT_LAYOUT_CONFIG,
    MILLISECONDS_PER_HOUR,
    LayoutConfig,
)


def hours_between(start: float, end: float) -> float:
    """Exact fractional hours from start to end (negative if end < start)."""
    return (end - start) / MILLISECONDS_PER_HOUR


def timeline_width(
    min_time: Instant, max_time: Instant, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> float:
    """
    Calculates the rendered width of the timeline.

    Args:
        min_time: Window start.
        max_time: Window end.
        config: Layout configuration.

    Returns:
        float: Width in pixels, never below config.min_timeline_width.
    """
    return max(
        hours_between(min_time, max_time) * config.pixels_per_hour,
        config.min_timeline_width,
    )


def position(
    instant: Instant,
    visual_origin: Instant,
    config: LayoutConfig = DEFAULT_LAYOUT_CONFIG,
) -> float:
    """
    Converts an instant into a pixel offset from the visual origin.

    Args:
        instant: The instant to map.
        visual_origin: The zero point (UTC midnight of the window's first day).
        config: Layout configuration.

    Returns:
        float: Offset in pixels.
    """
    return hours_between(visual_origin, instant) * config.pixels_per_hour


def instant_at(
    px: float, visual_origin: Instant, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> float:
    """Inverse of position(): the instant (in float ms) at a pixel offset."""
    return visual_origin + px / config.pixels_per_hour * MILLISECONDS_PER_HOUR


class PixelMapper:
    """
    Binds a window's visual origin and a config for repeated mapping.
    """

    def __init__(self, window: Window, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG):
        """
        Args:
            window: The visible window.
            config: Layout configuration.
        """
        self.window = window
        self.config = config
        self.visual_origin = window.visual_origin

    def position(self, instant: Instant) -> float:
        return position(instant, self.visual_origin, self.config)

    def instant_at(self, px: float) -> float:
        return instant_at(px, self.visual_origin, self.config)

    @property
    def width(self) -> float:
        return timeline_width(self.window.min, self.window.max, self.config)
