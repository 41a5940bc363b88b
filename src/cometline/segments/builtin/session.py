"""Session duration segment."""

from typing import Optional

from ...config.schema import SegmentConfig, SegmentId
from ...types import RenderContext, SegmentData
from ...utils.formatting import format_duration
from ..base import Segment
from ..registry import register_segment
from ..sources import get_or_parse_transcript


@register_segment(SegmentId.SESSION, description="Session duration and lines changed")
class SessionSegment(Segment):
    """Display elapsed session time and lines added/removed."""

    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        invocation = context.invocation

        duration_ms = invocation.total_duration_ms
        if duration_ms is None:
            transcript = get_or_parse_transcript(context)
            if transcript is not None and transcript.start_time is not None:
                duration_ms = transcript.duration_seconds * 1000

        lines = []
        if invocation.lines_added > 0:
            lines.append(f"+{invocation.lines_added}")
        if invocation.lines_removed > 0:
            lines.append(f"-{invocation.lines_removed}")

        if duration_ms is None and not lines:
            return None

        primary = format_duration(duration_ms) if duration_ms is not None else ""
        secondary = " ".join(lines)
        if not primary:
            return SegmentData(primary=secondary)
        return SegmentData(primary=primary, secondary=secondary)
