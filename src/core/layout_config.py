"""
Layout Configuration Module.

Defines the configuration values that drive the timeline layout engine.
A LayoutConfig is passed explicitly into every layout call so that several
layouts (for example different zoom levels) can coexist.
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict

MILLISECONDS_PER_HOUR = 60 * 60 * 1000
MILLISECONDS_PER_MINUTE = 60 * 1000


class TickEndPolicy(Enum):
    """
    Upper bound policy for the tick generator.

    EXACT stops at the window's max instant. ROUND_UP_TO_HOUR first rounds
    the max instant up to the next whole UTC hour.
    """

    EXACT = "exact"
    ROUND_UP_TO_HOUR = "round_up_to_hour"


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration settings for the timeline layout engine.

    Attributes:
        pixels_per_hour: Horizontal scale of the timeline.
        minutes_per_tick: Cadence of header ticks.
        min_timeline_width: Minimum rendered width in pixels.
        min_row_height: Minimum height of a row in pixels.
        primary_tier_height: Band reserved for primary blocks (flights).
        lane_spacing: Vertical pitch of a secondary lane (work packages).
        padding: Vertical padding added to every row.
        tick_end_policy: Where the tick generator stops.
    """

    pixels_per_hour: float = 100.0
    minutes_per_tick: int = 30
    min_timeline_width: float = 800.0
    min_row_height: int = 45
    primary_tier_height: int = 28
    lane_spacing: int = 28
    padding: int = 16
    tick_end_policy: TickEndPolicy = TickEndPolicy.EXACT

    def __post_init__(self) -> None:
        if not (math.isfinite(self.pixels_per_hour) and self.pixels_per_hour > 0):
            raise ValueError(
                f"pixels_per_hour must be positive, got {self.pixels_per_hour}"
            )
        if self.minutes_per_tick <= 0:
            raise ValueError(
                f"minutes_per_tick must be positive, got {self.minutes_per_tick}"
            )
        for name in (
            "min_timeline_width",
            "min_row_height",
            "primary_tier_height",
            "lane_spacing",
            "padding",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    @property
    def tick_step_ms(self) -> int:
        """Length of one tick step in milliseconds."""
        return self.minutes_per_tick * MILLISECONDS_PER_MINUTE

    @property
    def tick_width_px(self) -> float:
        """Pixels covered by one tick step."""
        return self.minutes_per_tick / 60 * self.pixels_per_hour

    def with_zoom(self, factor: float) -> "LayoutConfig":
        """
        Returns a copy of this config with the horizontal scale multiplied.

        Args:
            factor: Zoom multiplier, must be positive.

        Returns:
            LayoutConfig: The zoomed configuration.

        Raises:
            ValueError: If the resulting scale is not positive.
        """
        return replace(self, pixels_per_hour=self.pixels_per_hour * factor)

    def to_dict(self) -> Dict[str, Any]:
        """
        Converts the config to a dictionary for JSON serialization.

        Returns:
            dict: Dictionary representation of the configuration.
        """
        return {
            "pixels_per_hour": self.pixels_per_hour,
            "minutes_per_tick": self.minutes_per_tick,
            "min_timeline_width": self.min_timeline_width,
            "min_row_height": self.min_row_height,
            "primary_tier_height": self.primary_tier_height,
            "lane_spacing": self.lane_spacing,
            "padding": self.padding,
            "tick_end_policy": self.tick_end_policy.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutConfig":
        """
        Creates a LayoutConfig from a dictionary.

        Unknown keys are ignored and missing keys keep their defaults.

        Args:
            data: Dictionary containing configuration values.

        Returns:
            LayoutConfig: A new LayoutConfig instance.

        Raises:
            ValueError: If a value is out of range or the tick end policy
                name is unknown.
        """
        defaults = cls()
        values = {
            key: data[key]
            for key in defaults.to_dict()
            if key in data and key != "tick_end_policy"
        }

        policy = data.get("tick_end_policy")
        if isinstance(policy, TickEndPolicy):
            values["tick_end_policy"] = policy
        elif policy is not None:
            try:
                values["tick_end_policy"] = TickEndPolicy[str(policy).upper()]
            except KeyError:
                raise ValueError(f"Unknown tick end policy: {policy}") from None

        return cls(**values)


DEFAULT_LAYOUT_CONFIG = LayoutConfig()
