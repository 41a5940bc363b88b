"""Main rendering pipeline for the status line."""

from typing import Optional

from .config.schema import AnsiColor, EffectiveTheme, SegmentConfig, StyleConfig
from .segments import builtin  # noqa: F401
from .segments.registry import evaluate
from .types import RenderContext, RenderedFragment
from .utils.colors import colorize, dim

POWERLINE_ARROW = "\ue0b0"


def render_fragment(fragment: RenderedFragment, padded: bool = False) -> str:
    """Wrap a fragment's icon and text in their color escapes."""
    background = fragment.background
    text = colorize(fragment.text, fragment.color, fragment.bold, background)

    if fragment.icon:
        icon = colorize(fragment.icon, fragment.icon_color, background=background)
        body = icon + colorize(" ", background=background) + text
    else:
        body = text

    if padded:
        pad = colorize(" ", background=background)
        body = pad + body + pad
    return body


def _separator(
    text: str,
    style: StyleConfig,
    prev_background: Optional[AnsiColor],
    next_background: Optional[AnsiColor],
) -> str:
    if style.mode == "powerline":
        return colorize(text or POWERLINE_ARROW, prev_background, background=next_background)
    return dim(text)


def render_fragments(
    pairs: list[tuple[SegmentConfig, Optional[RenderedFragment]]], style: StyleConfig
) -> str:
    """Join rendered fragments in configured order.

    Skipped segments (None) contribute nothing, not even a separator. The
    separator placed before a fragment is that segment's own override when
    set, else the style's separator.

    Args:
        pairs: (segment config, fragment or None) in configured order
        style: Separator and icon mode

    Returns:
        Single status line with ANSI colors
    """
    visible = [(config, fragment) for config, fragment in pairs if fragment is not None]
    powerline = style.mode == "powerline"

    parts = []
    prev_background: Optional[AnsiColor] = None
    for index, (config, fragment) in enumerate(visible):
        if index > 0:
            separator = config.separator if config.separator is not None else style.separator
            parts.append(_separator(separator, style, prev_background, fragment.background))
        parts.append(render_fragment(fragment, padded=powerline))
        prev_background = fragment.background

    if powerline and visible and prev_background is not None:
        parts.append(colorize(POWERLINE_ARROW, prev_background))

    return "".join(parts)


def render_status_line(theme: EffectiveTheme, context: RenderContext) -> str:
    """Evaluate every enabled segment and render the line.

    Args:
        theme: Effective configuration for this run
        context: Render context with invocation data and adapters

    Returns:
        Formatted status line string
    """
    context.icon_mode = theme.style.mode

    pairs = []
    for segment_config in theme.enabled_segments():
        fragment = evaluate(segment_config.id, context, segment_config)
        pairs.append((segment_config, fragment))

    return render_fragments(pairs, theme.style)
