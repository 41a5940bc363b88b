"""Usage quota segments.

All three read the same snapshot through the usage cache store, so enabling
more than one of them never costs more than one network call.
"""

import math

from typing import Optional

from ...config.schema import SegmentConfig, SegmentId
from ...types import RenderContext, SegmentData
from ...utils.formatting import (
    format_5hour_reset,
    format_7day_reset,
    format_compact_reset,
)
from ..base import Segment
from ..registry import register_segment
from ..sources import get_usage_snapshot

# Nerd Font circle_slice_1 .. circle_slice_8
CIRCLE_SLICES = [chr(code) for code in range(0xF0A9E, 0xF0AA6)]


def circle_icon(utilization: float) -> str:
    """Pick the circle slice that covers the utilization."""
    index = math.ceil(utilization / 100 * len(CIRCLE_SLICES))
    index = min(len(CIRCLE_SLICES), max(1, index))
    return CIRCLE_SLICES[index - 1]


def format_utilization(utilization: float) -> str:
    return f"{math.floor(utilization + 0.5)}%"


@register_segment(SegmentId.USAGE, description="Five-hour usage with weekly reset date")
class UsageSegment(Segment):
    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        snapshot = get_usage_snapshot(context)
        if snapshot is None or snapshot.five_hour is None:
            return None

        utilization = snapshot.five_hour.utilization
        secondary = ""
        if snapshot.seven_day is not None:
            secondary = f"· {format_compact_reset(snapshot.seven_day.resets_at, context.tz)}"

        return SegmentData(
            primary=format_utilization(utilization),
            secondary=secondary,
            utilization=utilization,
            dynamic_icon=circle_icon(utilization),
        )


@register_segment(SegmentId.USAGE_5HOUR, description="Five-hour window usage and reset time")
class Usage5HourSegment(Segment):
    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        snapshot = get_usage_snapshot(context)
        if snapshot is None or snapshot.five_hour is None:
            return None

        window = snapshot.five_hour
        return SegmentData(
            primary=format_utilization(window.utilization),
            secondary=f"→ {format_5hour_reset(window.resets_at, context.tz)}",
            utilization=window.utilization,
            dynamic_icon=circle_icon(window.utilization),
        )


@register_segment(SegmentId.USAGE_7DAY, description="Seven-day window usage and reset time")
class Usage7DaySegment(Segment):
    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        snapshot = get_usage_snapshot(context)
        if snapshot is None or snapshot.seven_day is None:
            return None

        window = snapshot.seven_day
        return SegmentData(
            primary=format_utilization(window.utilization),
            secondary=f"→ {format_7day_reset(window.resets_at, context.tz)}",
            utilization=window.utilization,
            dynamic_icon=circle_icon(window.utilization),
        )
