"""Segment registry and the single evaluate() entry point."""

import traceback

from typing import Callable, Optional

from ..config.schema import SegmentConfig, SegmentId
from ..types import RenderContext, RenderedFragment
from ..utils.debug import debug_log
from .base import Segment
from .presentation import build_fragment

# Registry of segment kind -> provider instance; keys are the closed SegmentId set
_SEGMENT_REGISTRY: dict[SegmentId, Segment] = {}


def register_segment(
    segment_id: SegmentId, description: str = ""
) -> Callable[[type[Segment]], type[Segment]]:
    """Decorator to register segment provider classes.

    Usage:
        @register_segment(SegmentId.MODEL, description="Model display name")
        class ModelSegment(Segment):
            def render(self, config, context):
                ...
    """

    def decorator(cls: type[Segment]) -> type[Segment]:
        cls.segment_id = segment_id
        cls.description = description

        _SEGMENT_REGISTRY[segment_id] = cls()
        return cls

    return decorator


def get_segment(segment_id: SegmentId) -> Optional[Segment]:
    """Get the provider for a segment kind."""
    return _SEGMENT_REGISTRY.get(segment_id)


def get_all_segments() -> dict[SegmentId, Segment]:
    return dict(_SEGMENT_REGISTRY)


def evaluate(
    segment_id: SegmentId, context: RenderContext, config: SegmentConfig
) -> Optional[RenderedFragment]:
    """Evaluate one segment to a fragment, or None to skip it.

    A provider bug must not cost the whole line: unexpected exceptions are
    logged with their traceback and the segment is skipped.
    """
    segment = get_segment(segment_id)
    if segment is None:
        return None

    try:
        data = segment.render(config, context)
    except Exception:
        debug_log(f"Segment {segment_id.value} failed:\n{traceback.format_exc()}")
        return None

    if data is None:
        return None

    return build_fragment(config, data, context.icon_mode)
