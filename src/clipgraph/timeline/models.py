"""Pydantic models for timeline layers, global options and errors."""

import re
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, Literal, Optional, Union, Annotated
from ..core.types import Anchor, PositionKeyword

ASPECT_RATIO_PATTERN = re.compile(r"^(\d+):(\d+)$")

# Default on-screen time for text and image layers without a duration
DEFAULT_OVERLAY_DURATION = 5.0


class CompositionError(Exception):
    """Base exception for timeline composition errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.details = details


class EmptyCompositionError(CompositionError):
    """Exception raised when rendering a timeline without layers."""

    pass


class InvalidAspectRatioError(CompositionError, ValueError):
    """Exception raised for aspect ratios that are not positive W:H integers."""

    pass


def parse_aspect_ratio(ratio: str) -> tuple:
    """
    Split a "W:H" aspect ratio into two positive integers.

    Raises:
        InvalidAspectRatioError: If the string is malformed or has a zero term
    """
    match = ASPECT_RATIO_PATTERN.match(ratio or "")
    if not match:
        raise InvalidAspectRatioError(
            f"Invalid aspect ratio {ratio!r}, expected 'W:H'", {"ratio": ratio}
        )
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise InvalidAspectRatioError(
            f"Invalid aspect ratio {ratio!r}, terms must be positive",
            {"ratio": ratio},
        )
    return width, height


# Position models


class PositionSpec(BaseModel):
    """Explicit position: numbers, pixel strings, percentages or raw expressions."""

    x: Union[int, float, str] = 0
    y: Union[int, float, str] = 0
    anchor: Optional[Anchor] = None

    model_config = {"frozen": True}


# Unrecognised keyword strings are kept and fall back per context when compiled
Position = Union[PositionKeyword, PositionSpec, str]


# Option models


class TextBackground(BaseModel):
    """Box drawn behind text."""

    color: Optional[str] = None
    padding: Optional[int] = None

    model_config = {"frozen": True, "extra": "forbid"}


class TextStyle(BaseModel):
    """Styling for drawtext layers."""

    font_size: Optional[int] = None
    font_family: Optional[str] = None
    font_style: Optional[Literal["normal", "italic"]] = None
    color: Optional[str] = None
    background_color: Optional[str] = None
    background: Optional[TextBackground] = None
    stroke_color: Optional[str] = None
    stroke_width: Optional[int] = None
    shadow_color: Optional[str] = None
    shadow_offset_x: Optional[int] = None
    shadow_offset_y: Optional[int] = None
    text_align: Optional[Literal["left", "center", "right"]] = None

    model_config = {"frozen": True, "extra": "forbid"}


class TextOptions(BaseModel):
    """Options for text layers."""

    position: Optional[Position] = Field(default=None, union_mode="left_to_right")
    style: TextStyle = TextStyle()

    model_config = {"frozen": True, "extra": "forbid"}


class ImageOptions(BaseModel):
    """Options for image layers."""

    position: Optional[Position] = Field(default=None, union_mode="left_to_right")

    model_config = {"frozen": True, "extra": "forbid"}


class EchoOptions(BaseModel):
    """Echo delay (ms) and decay factor."""

    delay: float
    decay: float

    model_config = {"frozen": True}


class ReverbOptions(BaseModel):
    """Reverb parameters (rendered as a fixed echo approximation)."""

    room: float = 0.5
    damping: float = 0.5

    model_config = {"frozen": True}


class AudioOptions(BaseModel):
    """Per-track audio processing options."""

    volume: Optional[float] = None
    fade_in: Optional[float] = None
    fade_out: Optional[float] = None
    pitch: Optional[float] = None
    tempo: Optional[float] = None
    lowpass: Optional[float] = None
    highpass: Optional[float] = None
    echo: Optional[EchoOptions] = None
    reverb: Optional[ReverbOptions] = None
    trim_start: Optional[float] = None
    trim_end: Optional[float] = None
    loop: bool = False

    model_config = {"frozen": True, "extra": "forbid"}


# Layers


class BaseLayer(BaseModel):
    """Fields shared by every timeline layer."""

    start_time: float = Field(default=0.0, ge=0)
    duration: Optional[float] = Field(default=None, gt=0)

    model_config = {"frozen": True}

    @property
    def end_time(self) -> Optional[float]:
        """End of the layer interval, or None when it runs to its natural end."""
        if self.duration is None:
            return None
        return self.start_time + self.duration


class VideoLayer(BaseLayer):
    """Video source; the first one is the base plate."""

    type: Literal["video"] = "video"
    source: str


class AudioLayer(BaseLayer):
    """Audio track mixed into the output."""

    type: Literal["audio"] = "audio"
    source: str
    options: AudioOptions = AudioOptions()


class TextLayer(BaseLayer):
    """Text drawn over the video."""

    type: Literal["text"] = "text"
    content: str
    options: TextOptions = TextOptions()
    duration: Optional[float] = Field(default=DEFAULT_OVERLAY_DURATION, gt=0)
    timed: bool = False  # Caller set start_time or duration explicitly


class ImageLayer(BaseLayer):
    """Still image, looped into a video stream."""

    type: Literal["image"] = "image"
    source: str
    options: ImageOptions = ImageOptions()
    duration: Optional[float] = Field(default=DEFAULT_OVERLAY_DURATION, gt=0)
    timed: bool = False


class FilterLayer(BaseLayer):
    """Named video filter applied to the whole composition."""

    type: Literal["filter"] = "filter"
    content: str
    options: Dict[str, Any] = Field(default_factory=dict)


Layer = Annotated[
    Union[VideoLayer, AudioLayer, TextLayer, ImageLayer, FilterLayer],
    Field(discriminator="type"),
]


# Global options


class TrimOptions(BaseModel):
    """Input trim range in seconds."""

    start: float = Field(default=0.0, ge=0)
    end: Optional[float] = None

    model_config = {"frozen": True}


class ScaleOptions(BaseModel):
    """Output scale; -1/-2 keep the aspect ratio as in FFmpeg."""

    width: Union[int, str]
    height: Union[int, str]

    model_config = {"frozen": True}


class CropOptions(BaseModel):
    """Crop rectangle applied after scaling."""

    width: Union[int, str]
    height: Union[int, str]
    x: Union[int, str] = 0
    y: Union[int, str] = 0

    model_config = {"frozen": True}


class GlobalOptions(BaseModel):
    """Composition-wide settings, independent of layers."""

    trim: Optional[TrimOptions] = None
    scale: Optional[ScaleOptions] = None
    crop: Optional[CropOptions] = None
    aspect_ratio: Optional[str] = None
    frame_rate: Optional[float] = Field(default=None, gt=0)
    duration: Optional[float] = Field(default=None, gt=0)

    model_config = {"frozen": True}

    @field_validator("aspect_ratio")
    @classmethod
    def check_aspect_ratio(cls, v):
        """Validate that aspect_ratio is a positive W:H pair."""
        if v is not None:
            parse_aspect_ratio(v)
        return v
