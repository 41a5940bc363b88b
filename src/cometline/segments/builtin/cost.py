"""Session cost segment."""

from typing import Optional

from ...config.schema import SegmentConfig, SegmentId
from ...types import RenderContext, SegmentData
from ..base import Segment
from ..registry import register_segment


@register_segment(SegmentId.COST, description="Session cost in USD")
class CostSegment(Segment):
    """Display session cost in USD."""

    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        total_cost = context.invocation.total_cost_usd
        if total_cost is None:
            return None

        return SegmentData(primary=f"${total_cost:.2f}")
