"""Resolve icon, colors and weight for computed segment data."""

from ..config.schema import SegmentConfig
from ..types import RenderedFragment, SegmentData
from ..utils.colors import parse_color
from ..utils.thresholds import Tier, resolve, resolve_tier, thresholds_for


def select_icon(config: SegmentConfig, data: SegmentData, mode: str) -> str:
    if mode == "plain":
        return config.icon.plain
    return data.dynamic_icon or config.icon.nerd_font or config.icon.plain


def build_fragment(
    config: SegmentConfig, data: SegmentData, mode: str = "plain"
) -> RenderedFragment:
    """Turn segment data into a fragment under the segment's configuration.

    When the data carries a utilization, the text color and weight follow
    the threshold tier it falls in.
    """
    text_color = config.colors.text
    bold = config.styles.text_bold

    if data.utilization is not None:
        options = config.options
        warning, critical = thresholds_for(options)
        text_color = resolve(
            data.utilization,
            warning,
            critical,
            text_color,
            parse_color(options.get("warning_color")) or text_color,
            parse_color(options.get("critical_color")) or text_color,
        )
        tier = resolve_tier(data.utilization, warning, critical)
        if tier is not Tier.DEFAULT:
            tier_bold = options.get(f"{tier.value}_bold")
            if isinstance(tier_bold, bool):
                bold = tier_bold

    if data.color_override is not None:
        text_color = data.color_override

    return RenderedFragment(
        text=data.text,
        color=text_color,
        icon=select_icon(config, data, mode),
        icon_color=config.colors.icon,
        background=config.colors.background,
        bold=bold,
    )
