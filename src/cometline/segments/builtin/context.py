"""Context window segment."""

from typing import Optional

from ...config.schema import SegmentConfig, SegmentId
from ...types import ContextWindowState, RenderContext, SegmentData
from ...utils.formatting import format_percentage, format_tokens
from ...utils.models import get_context_limit
from ..base import Segment
from ..registry import register_segment
from ..sources import get_or_parse_transcript


def get_context_window_state(context: RenderContext) -> Optional[ContextWindowState]:
    """Consumed tokens and limit, preferring the host's own numbers.

    The host payload's current usage wins over the transcript estimate; the
    limit comes from the payload or else from the static model table.
    """
    invocation = context.invocation
    limit = invocation.context_window_size or get_context_limit(invocation.model_id)

    if invocation.current_context_tokens is not None:
        return ContextWindowState(invocation.current_context_tokens, limit)

    transcript = get_or_parse_transcript(context)
    if transcript is None:
        return None
    return ContextWindowState(transcript.context_tokens, limit)


@register_segment(SegmentId.CONTEXT_WINDOW, description="Context window usage")
class ContextWindowSegment(Segment):
    """Display context usage percentage and token count."""

    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        state = get_context_window_state(context)
        if state is None:
            return None

        percentage = state.percentage
        return SegmentData(
            primary=format_percentage(percentage),
            secondary=f"· {format_tokens(state.consumed_tokens)}",
            utilization=percentage,
        )
