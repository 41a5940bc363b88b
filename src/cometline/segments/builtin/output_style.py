"""Output style segment."""

from typing import Optional

from ...config.schema import SegmentConfig, SegmentId
from ...types import RenderContext, SegmentData
from ..base import Segment
from ..registry import register_segment


@register_segment(SegmentId.OUTPUT_STYLE, description="Active output style name")
class OutputStyleSegment(Segment):
    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        style = context.invocation.output_style
        return SegmentData(primary=style) if style else None
