"""Core types and enums for the clipgraph timeline compiler."""

from enum import Enum
from typing import Callable, Optional


class LayerType(str, Enum):
    """Kind of a timeline layer."""

    VIDEO = "video"
    AUDIO = "audio"
    TEXT = "text"
    IMAGE = "image"
    FILTER = "filter"


class Anchor(str, Enum):
    """Point of an element that a position refers to."""

    CENTER = "center"
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    CENTER_LEFT = "center-left"
    CENTER_RIGHT = "center-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"


class PositionKeyword(str, Enum):
    """Named placements for text and image layers."""

    TOP = "top"
    BOTTOM = "bottom"
    CENTER = "center"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


class GeometryContext(str, Enum):
    """Variable namespace a coordinate expression is evaluated in."""

    TEXT = "text"  # drawtext: w, h, text_w, text_h
    OVERLAY = "overlay"  # overlay: main_w, main_h, overlay_w, overlay_h


class FilterKind(str, Enum):
    """Generic filters with a known parameter template."""

    BLUR = "blur"
    BRIGHTNESS = "brightness"
    CONTRAST = "contrast"
    SATURATION = "saturation"
    ZOOMPAN = "zoompan"
    COLORCHANNELMIXER = "colorchannelmixer"
    VIGNETTE = "vignette"
    PASSTHROUGH = "passthrough"  # Any other name, emitted verbatim

    @classmethod
    def from_name(cls, name: str) -> "FilterKind":
        """Map a filter name to its kind, falling back to PASSTHROUGH."""
        try:
            kind = cls(name)
        except ValueError:
            return cls.PASSTHROUGH
        return kind


class HardwareAcceleration(str, Enum):
    """Decoder hardware acceleration (values are FFmpeg -hwaccel names)."""

    NONE = "none"
    AUTO = "auto"
    CUDA = "cuda"
    QSV = "qsv"
    VAAPI = "vaapi"
    VIDEOTOOLBOX = "videotoolbox"
    D3D11VA = "d3d11va"

    # Vendor aliases
    NVIDIA = "cuda"
    INTEL = "qsv"
    APPLE = "videotoolbox"
    AMD = "d3d11va"

    @classmethod
    def from_name(cls, name: str) -> "HardwareAcceleration":
        """Resolve an FFmpeg hwaccel name or a vendor alias ("nvidia", "apple")."""
        try:
            return cls[name.upper()]
        except KeyError:
            return cls(name)


class Quality(str, Enum):
    """Quality levels used when no explicit codec configuration is set."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ULTRA = "ultra"


class Easing(str, Enum):
    """Easing curves for pan/zoom movement."""

    LINEAR = "linear"
    EASE_IN = "ease-in"
    EASE_OUT = "ease-out"
    EASE_IN_OUT = "ease-in-out"


class PanDirection(str, Enum):
    """Camera paths for the Ken Burns effect."""

    RANDOM = "random"
    CENTER_OUT = "center-out"
    TOP_BOTTOM = "top-bottom"
    LEFT_RIGHT = "left-right"
    DIAGONAL = "diagonal"


# Status callback for render(): receives "compiling", then "compiled"
StatusCb = Optional[Callable[[str], None]]
