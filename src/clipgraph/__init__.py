"""clipgraph - Describe video compositions as immutable timelines and compile them to FFmpeg commands."""

from .__version__ import __version__
from .timeline import (
    Timeline,
    CompositionError,
    EmptyCompositionError,
    InvalidAspectRatioError,
    PositionSpec,
    TextStyle,
    CodecConfiguration,
    RenderOptions,
    FFmpegCommand,
    compile_timeline,
    MediaContext,
    default_context,
    set_default_context,
)
from .core import (
    Anchor,
    PositionKeyword,
    HardwareAcceleration,
    Quality,
    Easing,
    PanDirection,
)


__all__ = [
    "__version__",
    "Timeline",
    "CompositionError",
    "EmptyCompositionError",
    "InvalidAspectRatioError",
    "PositionSpec",
    "TextStyle",
    "CodecConfiguration",
    "RenderOptions",
    "FFmpegCommand",
    "compile_timeline",
    "MediaContext",
    "default_context",
    "set_default_context",
    "Anchor",
    "PositionKeyword",
    "HardwareAcceleration",
    "Quality",
    "Easing",
    "PanDirection",
]
