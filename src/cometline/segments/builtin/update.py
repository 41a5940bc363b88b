"""Installed version and update availability segment."""

from typing import Optional

from ... import __version__
from ...config.schema import SegmentConfig, SegmentId
from ...types import RenderContext, SegmentData
from ...utils.colors import parse_color
from ...utils.updates import get_latest_version, is_newer
from ..base import Segment
from ..registry import register_segment


@register_segment(SegmentId.UPDATE, description="Installed version, flags newer releases")
class UpdateSegment(Segment):
    def render(
        self, config: SegmentConfig, context: RenderContext
    ) -> Optional[SegmentData]:
        latest = get_latest_version()
        if latest and is_newer(latest, __version__):
            return SegmentData(
                primary=f"v{__version__}",
                secondary=f"↑ v{latest}",
                color_override=parse_color(config.options.get("warning_color")),
            )
        return SegmentData(primary=f"v{__version__}")
