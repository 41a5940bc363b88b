"""Directory segment."""

import os

from typing import Optional

from ...config.schema import SegmentConfig, SegmentId
from ...types import RenderContext, SegmentData
from ..base import Segment
from ..registry import register_segment


@register_segment(SegmentId.DIRECTORY, description="Current working directory name")
class DirectorySegment(Segment):
    """Display current working directory basename."""

    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        current_dir = context.invocation.workspace_dir
        if not current_dir:
            return None

        name = os.path.basename(current_dir.rstrip("/\\")) or current_dir
        return SegmentData(primary=name)
