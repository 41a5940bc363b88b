"""Base segment interface for status line components."""

from abc import ABC, abstractmethod
from typing import Optional

from ..config.schema import SegmentConfig, SegmentId
from ..types import RenderContext, SegmentData


class Segment(ABC):
    """Base segment provider - every segment kind implements this.

    Segment metadata (segment_id, description) is set by the
    @register_segment decorator rather than requiring implementation of methods.
    """

    # Class attributes set by @register_segment decorator
    segment_id: SegmentId
    description: str = ""

    @abstractmethod
    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        """Compute segment content.

        Args:
            config: Segment configuration including options
            context: Invocation snapshot and lazily gathered adapter results

        Returns:
            Segment data, or None to skip the segment
        """
        pass
