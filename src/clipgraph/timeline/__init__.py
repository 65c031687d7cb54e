"""Timeline module: immutable layer model and the FFmpeg filter-graph compiler."""

from .models import (
    CompositionError,
    EmptyCompositionError,
    InvalidAspectRatioError,
    PositionSpec,
    TextStyle,
    TextBackground,
    AudioOptions,
    EchoOptions,
    ReverbOptions,
    GlobalOptions,
    VideoLayer,
    AudioLayer,
    TextLayer,
    ImageLayer,
    FilterLayer,
)
from .codecs import (
    CodecConfiguration,
    VideoCodecOptions,
    AudioCodecOptions,
    RenderOptions,
)
from .timeline import (
    Timeline,
    add_video,
    add_audio,
    add_text,
    add_image,
    add_filter,
    add_watermark,
    trim,
    scale,
    crop,
    set_aspect_ratio,
    set_frame_rate,
    set_duration,
    set_video_codec,
    set_audio_codec,
    set_codec,
    set_hardware_acceleration,
    get_command,
    render,
    concat,
    get_duration,
    pipe,
)
from .command import FFmpegCommand, compile_timeline
from .graph import FilterGraph, GraphAssembler, is_image_sequence
from .effects import Rect, add_pan_zoom, add_ken_burns, zoom_in, zoom_out, pan
from .context import MediaContext, default_context, set_default_context

__all__ = [
    "CompositionError",
    "EmptyCompositionError",
    "InvalidAspectRatioError",
    "PositionSpec",
    "TextStyle",
    "TextBackground",
    "AudioOptions",
    "EchoOptions",
    "ReverbOptions",
    "GlobalOptions",
    "VideoLayer",
    "AudioLayer",
    "TextLayer",
    "ImageLayer",
    "FilterLayer",
    "CodecConfiguration",
    "VideoCodecOptions",
    "AudioCodecOptions",
    "RenderOptions",
    "Timeline",
    "add_video",
    "add_audio",
    "add_text",
    "add_image",
    "add_filter",
    "add_watermark",
    "trim",
    "scale",
    "crop",
    "set_aspect_ratio",
    "set_frame_rate",
    "set_duration",
    "set_video_codec",
    "set_audio_codec",
    "set_codec",
    "set_hardware_acceleration",
    "get_command",
    "render",
    "concat",
    "get_duration",
    "pipe",
    "FFmpegCommand",
    "compile_timeline",
    "FilterGraph",
    "GraphAssembler",
    "is_image_sequence",
    "Rect",
    "add_pan_zoom",
    "add_ken_burns",
    "zoom_in",
    "zoom_out",
    "pan",
    "MediaContext",
    "default_context",
    "set_default_context",
]
