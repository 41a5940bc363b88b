"""Model name segment."""

from typing import Optional

from ...config.schema import SegmentConfig, SegmentId
from ...types import RenderContext, SegmentData
from ...utils.models import get_display_name
from ..base import Segment
from ..registry import register_segment


@register_segment(SegmentId.MODEL, description="Claude model name (e.g., Sonnet 4.5)")
class ModelSegment(Segment):
    """Display the short model name; unknown ids pass through unchanged."""

    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        invocation = context.invocation
        if invocation.model_id:
            return SegmentData(primary=get_display_name(invocation.model_id))
        if invocation.model_display_name:
            return SegmentData(primary=invocation.model_display_name)
        return None
