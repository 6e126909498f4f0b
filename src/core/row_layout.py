"""
Row Layout Module.

Turns one row's primary and secondary intervals into pixel geometry:
row height from the lane count, per-block left/width from the pixel
mapper, and vertical offsets from the lane levels. Rows are laid out
independently of each other.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from src.core.intervals import TimeInterval, Window
from src.core.lane_packer import assign_lanes
from src.core.layout_config import DEFAULT_LAYOUT_CONFIG, LayoutConfig
from src.core.pixel_mapper import position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockGeometry:
    """
    Pixel rectangle of one interval.

    Attributes:
        id: Interval id.
        left: Offset of the interval start from the visual origin.
        width: Extent up to the (clamped) end.
        top: Vertical offset inside the row.
        level: Lane index for secondary blocks, None for primary blocks.
    """

    id: str
    left: float
    width: float
    top: float = 0.0
    level: Optional[int] = None

    def to_dict(self) -> dict:
        data = {"id": self.id, "left": self.left, "width": self.width, "top": self.top}
        if self.level is not None:
            data["level"] = self.level
        return data


@dataclass(frozen=True)
class RowLayout:
    """Geometry of one row (one aircraft registration)."""

    key: str
    height: float
    lanes: int
    top: float = 0.0
    primary_blocks: List[BlockGeometry] = field(default_factory=list)
    secondary_blocks: List[BlockGeometry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "top": self.top,
            "height": self.height,
            "lanes": self.lanes,
            "primary": [block.to_dict() for block in self.primary_blocks],
            "secondary": [block.to_dict() for block in self.secondary_blocks],
        }


def _primary_height(has_primary: bool, config: LayoutConfig) -> int:
    return config.primary_tier_height if has_primary else 0


def row_height_for_lanes(
    has_primary: bool, lanes: int, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> float:
    """Height of a row with the given primary presence and lane count."""
    return max(
        config.min_row_height,
        _primary_height(has_primary, config)
        + lanes * config.lane_spacing
        + config.padding,
    )


def row_height(
    primary_count: int,
    secondary: Sequence[TimeInterval],
    config: LayoutConfig = DEFAULT_LAYOUT_CONFIG,
) -> float:
    """
    Calculates a row's height from its content.

    Args:
        primary_count: Number of primary intervals (flights) in the row.
        secondary: Secondary intervals (work packages) in the row.
        config: Layout configuration.

    Returns:
        float: Height in pixels, at least config.min_row_height.
    """
    scheduled = assign_lanes(secondary)
    lanes = max((item.level for item in scheduled), default=-1) + 1
    height = row_height_for_lanes(primary_count > 0, lanes, config)
    logger.debug(
        f"Row height: primary={primary_count}, secondary={len(scheduled)}, "
        f"lanes={lanes}, height={height}"
    )
    return height


def primary_top(config: LayoutConfig = DEFAULT_LAYOUT_CONFIG) -> float:
    """Vertical offset of primary blocks inside a row."""
    return config.padding / 2


def secondary_top(
    level: int, has_primary: bool, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> float:
    """Vertical offset of a secondary block on the given lane."""
    return (
        _primary_height(has_primary, config)
        + config.padding
        + level * config.lane_spacing
    )


def block_geometry(
    interval: TimeInterval, window: Window, config: LayoutConfig = DEFAULT_LAYOUT_CONFIG
) -> BlockGeometry:
    """
    Computes the horizontal extent of an interval.

    The end is clamped to the window's max so blocks running past the window
    are clipped rather than dropped. The start is not clamped; intervals
    entirely left of the window are expected to be filtered out by the
    caller, otherwise a negative left is passed through.

    Args:
        interval: The interval to place.
        window: The visible window.
        config: Layout configuration.

    Returns:
        BlockGeometry: id, left and width (top left at 0).
    """
    origin = window.visual_origin
    left = position(interval.start, origin, config)
    clamped_end = min(interval.end, window.max)
    return BlockGeometry(
        id=interval.id,
        left=left,
        width=position(clamped_end, origin, config) - left,
    )


def layout_row(
    key: str,
    primary: Sequence[TimeInterval],
    secondary: Sequence[TimeInterval],
    window: Window,
    config: LayoutConfig = DEFAULT_LAYOUT_CONFIG,
) -> RowLayout:
    """
    Lays out a single row.

    Args:
        key: Row key (aircraft registration).
        primary: Primary-tier intervals.
        secondary: Secondary-tier intervals, packed into lanes.
        window: The visible window.
        config: Layout configuration.

    Returns:
        RowLayout: Height, lane count and positioned blocks.
    """
    has_primary = len(primary) > 0
    scheduled = assign_lanes(secondary)
    lanes = max((item.level for item in scheduled), default=-1) + 1

    top = primary_top(config)
    primary_blocks = []
    for interval in primary:
        geometry = block_geometry(interval, window, config)
        primary_blocks.append(
            BlockGeometry(geometry.id, geometry.left, geometry.width, top=top)
        )

    secondary_blocks = []
    for item in scheduled:
        geometry = block_geometry(item.interval, window, config)
        secondary_blocks.append(
            BlockGeometry(
                geometry.id,
                geometry.left,
                geometry.width,
                top=secondary_top(item.level, has_primary, config),
                level=item.level,
            )
        )

    return RowLayout(
        key=key,
        height=row_height_for_lanes(has_primary, lanes, config),
        lanes=lanes,
        primary_blocks=primary_blocks,
        secondary_blocks=secondary_blocks,
    )


def row_top_offsets(heights: Sequence[float]) -> List[float]:
    """Cumulative top offset of each row given the heights of all rows."""
    offsets = []
    total = 0.0
    for height in heights:
        offsets.append(total)
        total += height
    return offsets


def layout_rows(
    rows: Sequence[Tuple[str, Sequence[TimeInterval], Sequence[TimeInterval]]],
    window: Window,
    config: LayoutConfig = DEFAULT_LAYOUT_CONFIG,
) -> List[RowLayout]:
    """
    Lays out several rows independently and stacks them vertically.

    Args:
        rows: (key, primary, secondary) per row, in display order.
        window: The visible window.
        config: Layout configuration.

    Returns:
        List[RowLayout]: One layout per row with cumulative top offsets.
    """
    layouts = [
        layout_row(key, primary, secondary, window, config)
        for key, primary, secondary in rows
    ]
    offsets = row_top_offsets([layout.height for layout in layouts])
    return [
        RowLayout(
            key=layout.key,
            height=layout.height,
            lanes=layout.lanes,
            top=offset,
            primary_blocks=layout.primary_blocks,
            secondary_blocks=layout.secondary_blocks,
        )
        for layout, offset in zip(layouts, offsets)
    ]
