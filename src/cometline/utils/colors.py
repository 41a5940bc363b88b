"""ANSI color codes and utilities."""

from typing import Any, Optional

from pydantic import ValidationError

from ..config.schema import COLOR_ADAPTER, AnsiColor, Color16, Color256, ColorRgb

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"


def color_code(color: Optional[AnsiColor], background: bool = False) -> str:
    """Get the ANSI SGR sequence for a palette color.

    Args:
        color: 16-color, 256-color or RGB color, or None
        background: Emit a background sequence instead of a foreground one

    Returns:
        ANSI escape sequence or empty string for None
    """
    if color is None:
        return ""
    if isinstance(color, Color16):
        if color.c16 < 8:
            base = 40 if background else 30
            return f"\033[{base + color.c16}m"
        base = 100 if background else 90
        return f"\033[{base + color.c16 - 8}m"
    selector = 48 if background else 38
    if isinstance(color, Color256):
        return f"\033[{selector};5;{color.c256}m"
    if isinstance(color, ColorRgb):
        return f"\033[{selector};2;{color.r};{color.g};{color.b}m"
    return ""


def colorize(
    text: str,
    color: Optional[AnsiColor] = None,
    bold: bool = False,
    background: Optional[AnsiColor] = None,
) -> str:
    """Apply color to text with ANSI codes.

    Args:
        text: Text to colorize
        color: Foreground color or None
        bold: Whether to apply bold formatting
        background: Background color or None

    Returns:
        Colorized text with ANSI codes
    """
    if not text:
        return text

    codes = []
    if bold:
        codes.append(BOLD)
    codes.append(color_code(color))
    codes.append(color_code(background, background=True))

    prefix = "".join(codes)
    if not prefix:
        return text

    return prefix + text + RESET


def parse_color(value: Any) -> Optional[AnsiColor]:
    """Parse a color from an options value such as {"c16": 11}.

    Returns:
        The color, or None when the value is absent or not a color
    """
    if value is None:
        return None
    try:
        return COLOR_ADAPTER.validate_python(value)
    except ValidationError:
        return None


def dim(text: str) -> str:
    """Render text in the terminal's dim weight."""
    return DIM + text + RESET if text else text
