"""Configuration schema using Pydantic for validation."""

from enum import Enum
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter


class SegmentId(str, Enum):
    """The closed set of segment kinds."""

    DIRECTORY = "directory"
    GIT = "git"
    MODEL = "model"
    CONTEXT_WINDOW = "context_window"
    USAGE = "usage"
    USAGE_5HOUR = "usage_5hour"
    USAGE_7DAY = "usage_7day"
    COST = "cost"
    SESSION = "session"
    OUTPUT_STYLE = "output_style"
    UPDATE = "update"


USAGE_SEGMENTS = (SegmentId.USAGE, SegmentId.USAGE_5HOUR, SegmentId.USAGE_7DAY)


class Color16(BaseModel):
    c16: int = Field(ge=0, le=15)

    model_config = {"extra": "forbid"}


class Color256(BaseModel):
    c256: int = Field(ge=0, le=255)

    model_config = {"extra": "forbid"}


class ColorRgb(BaseModel):
    r: int = Field(ge=0, le=255)
    g: int = Field(ge=0, le=255)
    b: int = Field(ge=0, le=255)

    model_config = {"extra": "forbid"}


AnsiColor = Union[Color16, Color256, ColorRgb]

COLOR_ADAPTER: TypeAdapter[Optional[AnsiColor]] = TypeAdapter(Optional[AnsiColor])


class IconConfig(BaseModel):
    plain: str = ""
    nerd_font: str = ""


class ColorConfig(BaseModel):
    icon: Optional[AnsiColor] = None
    text: Optional[AnsiColor] = None
    background: Optional[AnsiColor] = None


class TextStyleConfig(BaseModel):
    text_bold: bool = False


class SegmentConfig(BaseModel):
    """Configuration for a single segment."""

    id: SegmentId
    enabled: bool = True
    icon: IconConfig = Field(default_factory=IconConfig)
    colors: ColorConfig = Field(default_factory=ColorConfig)
    styles: TextStyleConfig = Field(default_factory=TextStyleConfig)
    separator: Optional[str] = None
    options: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


StyleMode = Literal["plain", "nerd_font", "powerline"]


class StyleConfig(BaseModel):
    mode: StyleMode = "plain"
    separator: str = " | "


class EffectiveTheme(BaseModel):
    """Merged result of base theme, preset, user config and CLI override."""

    theme: str = "default"
    style: StyleConfig = Field(default_factory=StyleConfig)
    segments: list[SegmentConfig] = Field(default_factory=list)

    model_config = {"extra": "forbid"}

    def segment(self, segment_id: SegmentId) -> Optional[SegmentConfig]:
        for segment in self.segments:
            if segment.id == segment_id:
                return segment
        return None

    def enabled_segments(self) -> list[SegmentConfig]:
        return [s for s in self.segments if s.enabled]


# Per-field validators used when sanitizing a raw configuration layer.
SEGMENT_FIELD_ADAPTERS: dict[str, TypeAdapter[Any]] = {
    "enabled": TypeAdapter(bool),
    "separator": TypeAdapter(Optional[str]),
    "icon.plain": TypeAdapter(str),
    "icon.nerd_font": TypeAdapter(str),
    "colors.icon": COLOR_ADAPTER,
    "colors.text": COLOR_ADAPTER,
    "colors.background": COLOR_ADAPTER,
    "styles.text_bold": TypeAdapter(bool),
}

STYLE_FIELD_ADAPTERS: dict[str, TypeAdapter[Any]] = {
    "mode": TypeAdapter(StyleMode),
    "separator": TypeAdapter(str),
}

OPTION_VALUE_ADAPTER: TypeAdapter[Any] = TypeAdapter(
    Union[bool, int, float, str, None, dict[str, Union[int, float, str, bool]]]
)
