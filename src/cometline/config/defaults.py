"""Built-in base theme for cometline."""

import copy

from typing import Any

from .schema import (
    Color16,
    ColorConfig,
    EffectiveTheme,
    IconConfig,
    SegmentConfig,
    SegmentId,
    StyleConfig,
)

DEFAULT_WARNING_THRESHOLD = 60
DEFAULT_CRITICAL_THRESHOLD = 80

DEFAULT_API_BASE_URL = "https://api.anthropic.com"
DEFAULT_CACHE_DURATION = 180  # seconds
DEFAULT_USAGE_TIMEOUT = 2  # seconds


def _threshold_options() -> dict[str, Any]:
    return {
        "warning_threshold": DEFAULT_WARNING_THRESHOLD,
        "critical_threshold": DEFAULT_CRITICAL_THRESHOLD,
        "warning_color": {"c16": 11},
        "critical_color": {"c16": 9},
        "warning_bold": False,
        "critical_bold": True,
    }


def _segment(
    segment_id: SegmentId,
    plain: str,
    nerd_font: str,
    c16: int,
    enabled: bool = True,
    icon_c16: int | None = None,
    options: dict[str, Any] | None = None,
) -> SegmentConfig:
    return SegmentConfig(
        id=segment_id,
        enabled=enabled,
        icon=IconConfig(plain=plain, nerd_font=nerd_font),
        colors=ColorConfig(
            icon=Color16(c16=icon_c16 if icon_c16 is not None else c16),
            text=Color16(c16=c16),
        ),
        options=options or {},
    )


def get_default_theme() -> EffectiveTheme:
    """Generate the base theme every other layer is merged onto."""
    usage_options = {
        "api_base_url": DEFAULT_API_BASE_URL,
        "cache_duration": DEFAULT_CACHE_DURATION,
        "timeout": DEFAULT_USAGE_TIMEOUT,
        **_threshold_options(),
    }
    return EffectiveTheme(
        theme="default",
        style=StyleConfig(mode="plain", separator=" | "),
        segments=[
            _segment(
                SegmentId.DIRECTORY, "📁", "\U000f024b", 10, icon_c16=11
            ),
            _segment(
                SegmentId.GIT,
                "🌿",
                "\U000f02a2",
                12,
                options={"show_sha": False, "show_dirty_count": False},
            ),
            _segment(SegmentId.MODEL, "🤖", "\ue26d", 14),
            _segment(
                SegmentId.CONTEXT_WINDOW,
                "⚡️",
                "\uf49b",
                13,
                options=_threshold_options(),
            ),
            _segment(
                SegmentId.USAGE,
                "📊",
                "\U000f0a9e",
                14,
                enabled=False,
                options=dict(usage_options),
            ),
            _segment(
                SegmentId.USAGE_5HOUR,
                "📊",
                "\U000f0a9e",
                14,
                enabled=False,
                options=_threshold_options(),
            ),
            _segment(
                SegmentId.USAGE_7DAY,
                "📊",
                "\U000f0a9e",
                12,
                enabled=False,
                options=_threshold_options(),
            ),
            _segment(SegmentId.COST, "💰", "\ueec1", 3, enabled=False),
            _segment(SegmentId.SESSION, "⏱️", "\U000f19bb", 2, enabled=False),
            _segment(
                SegmentId.OUTPUT_STYLE, "🎯", "\U000f12f5", 6, enabled=False
            ),
            _segment(
                SegmentId.UPDATE,
                "🔄",
                "\uf021",
                8,
                enabled=False,
                options={"warning_color": {"c16": 11}},
            ),
        ],
    )


def get_default_layer() -> dict[str, Any]:
    """Base theme as a raw layer, the shape the merge operates on."""
    return get_default_theme().model_dump(mode="json")


def get_starter_layer() -> dict[str, Any]:
    """Sparse user config written by --init.

    Only the theme name, the segment order, enabled flags and options are
    spelled out, so the selected preset still controls style, icons and colors.
    """
    theme = get_default_theme()
    return {
        "theme": theme.theme,
        "segments": [
            {"id": s.id.value, "enabled": s.enabled, "options": copy.deepcopy(s.options)}
            for s in theme.segments
        ],
    }
