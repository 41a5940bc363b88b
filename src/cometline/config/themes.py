"""Built-in theme presets.

Presets are partial layers: they only carry the fields they change, and are
merged over the base theme field by field.
"""

from typing import Any

from .schema import SegmentId

BASE_ORDER = [
    SegmentId.DIRECTORY,
    SegmentId.GIT,
    SegmentId.MODEL,
    SegmentId.CONTEXT_WINDOW,
    SegmentId.USAGE,
    SegmentId.USAGE_5HOUR,
    SegmentId.USAGE_7DAY,
    SegmentId.COST,
    SegmentId.SESSION,
    SegmentId.OUTPUT_STYLE,
    SegmentId.UPDATE,
]


def _colors(palette: dict[SegmentId, dict[str, Any]], bold: bool = False) -> list[dict[str, Any]]:
    segments = []
    for segment_id in BASE_ORDER:
        if segment_id not in palette:
            continue
        record: dict[str, Any] = {
            "id": segment_id.value,
            "colors": {"icon": palette[segment_id], "text": palette[segment_id]},
        }
        if bold:
            record["styles"] = {"text_bold": True}
        segments.append(record)
    return segments


def _minimal() -> dict[str, Any]:
    icons = {
        SegmentId.DIRECTORY: "◉",
        SegmentId.GIT: "├",
        SegmentId.MODEL: "✽",
        SegmentId.CONTEXT_WINDOW: "◐",
        SegmentId.USAGE: "◔",
        SegmentId.USAGE_5HOUR: "◔",
        SegmentId.USAGE_7DAY: "◔",
        SegmentId.COST: "$",
        SegmentId.SESSION: "◷",
        SegmentId.OUTPUT_STYLE: "◇",
        SegmentId.UPDATE: "↻",
    }
    return {
        "style": {"mode": "plain", "separator": " │ "},
        "segments": [
            {
                "id": segment_id.value,
                "icon": {"plain": icons[segment_id]},
                "colors": {"icon": {"c16": 7}, "text": {"c16": 7}},
            }
            for segment_id in BASE_ORDER
        ],
    }


def _gruvbox() -> dict[str, Any]:
    return {
        "style": {"mode": "nerd_font", "separator": " | "},
        "segments": _colors(
            {
                SegmentId.DIRECTORY: {"c256": 142},
                SegmentId.GIT: {"c256": 109},
                SegmentId.MODEL: {"c256": 208},
                SegmentId.CONTEXT_WINDOW: {"c256": 175},
                SegmentId.USAGE: {"c256": 108},
                SegmentId.USAGE_5HOUR: {"c256": 108},
                SegmentId.USAGE_7DAY: {"c256": 109},
                SegmentId.COST: {"c256": 214},
                SegmentId.SESSION: {"c256": 142},
                SegmentId.OUTPUT_STYLE: {"c256": 108},
                SegmentId.UPDATE: {"c256": 246},
            },
            bold=True,
        ),
    }


def _nord() -> dict[str, Any]:
    frost = {"r": 136, "g": 192, "b": 208}
    return {
        "style": {"mode": "nerd_font", "separator": " | "},
        "segments": _colors(
            {
                SegmentId.DIRECTORY: {"r": 163, "g": 190, "b": 140},
                SegmentId.GIT: {"r": 129, "g": 161, "b": 193},
                SegmentId.MODEL: frost,
                SegmentId.CONTEXT_WINDOW: {"r": 180, "g": 142, "b": 173},
                SegmentId.USAGE: frost,
                SegmentId.USAGE_5HOUR: frost,
                SegmentId.USAGE_7DAY: {"r": 94, "g": 129, "b": 172},
                SegmentId.COST: {"r": 235, "g": 203, "b": 139},
                SegmentId.SESSION: {"r": 163, "g": 190, "b": 140},
                SegmentId.OUTPUT_STYLE: {"r": 143, "g": 188, "b": 187},
                SegmentId.UPDATE: {"r": 216, "g": 222, "b": 233},
            }
        ),
    }


def _powerline_dark() -> dict[str, Any]:
    white = {"r": 255, "g": 255, "b": 255}
    backgrounds = {
        SegmentId.DIRECTORY: {"r": 76, "g": 86, "b": 106},
        SegmentId.GIT: {"r": 59, "g": 66, "b": 82},
        SegmentId.MODEL: {"r": 67, "g": 76, "b": 94},
        SegmentId.CONTEXT_WINDOW: {"r": 46, "g": 52, "b": 64},
        SegmentId.USAGE: {"r": 40, "g": 44, "b": 52},
        SegmentId.USAGE_5HOUR: {"r": 40, "g": 44, "b": 52},
        SegmentId.USAGE_7DAY: {"r": 36, "g": 40, "b": 48},
        SegmentId.COST: {"r": 45, "g": 45, "b": 45},
        SegmentId.SESSION: {"r": 35, "g": 35, "b": 35},
        SegmentId.OUTPUT_STYLE: {"r": 25, "g": 25, "b": 25},
        SegmentId.UPDATE: {"r": 25, "g": 25, "b": 25},
    }
    return {
        "style": {"mode": "powerline", "separator": "\ue0b0"},
        "segments": [
            {
                "id": segment_id.value,
                "colors": {
                    "icon": white,
                    "text": white,
                    "background": backgrounds[segment_id],
                },
            }
            for segment_id in BASE_ORDER
        ],
    }


BUILTIN_THEMES = {
    "default": lambda: {"style": {"mode": "plain", "separator": " | "}},
    "minimal": _minimal,
    "gruvbox": _gruvbox,
    "nord": _nord,
    "powerline-dark": _powerline_dark,
}


def list_builtin_themes() -> list[str]:
    return list(BUILTIN_THEMES)


def get_builtin_theme(name: str) -> dict[str, Any] | None:
    """Return a fresh copy of a built-in preset layer, or None if unknown."""
    factory = BUILTIN_THEMES.get(name)
    return factory() if factory else None
