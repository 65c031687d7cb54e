"""Immutable timeline snapshot and its builder functions."""

import logging
from pydantic import BaseModel
from typing import Any, Callable, Dict, Optional, Tuple, Union
from ..core.types import HardwareAcceleration, LayerType, PositionKeyword, StatusCb
from .codecs import (
    AudioCodecOptions,
    CodecConfiguration,
    RenderOptions,
    VideoCodecOptions,
)
from .models import (
    DEFAULT_OVERLAY_DURATION,
    AudioLayer,
    AudioOptions,
    CropOptions,
    EmptyCompositionError,
    FilterLayer,
    GlobalOptions,
    ImageLayer,
    ImageOptions,
    Layer,
    Position,
    PositionSpec,
    ScaleOptions,
    TextLayer,
    TextOptions,
    TextStyle,
    TrimOptions,
    VideoLayer,
    parse_aspect_ratio,
)

logger = logging.getLogger(__name__)

# Assumed length of video/audio layers without a duration
DEFAULT_MEDIA_DURATION = 30.0

WATERMARK_MARGIN = 20

# Passing duration="full" keeps an image on screen for the whole composition
FULL = "full"


class Timeline(BaseModel):
    """
    Immutable description of a video composition.

    Every builder returns a new Timeline; the receiver is never modified, so
    one snapshot can be extended along independent branches.

    Example:
        >>> tl = Timeline().add_video("in.mp4").add_text("Hello", position="top")
        >>> tl.get_command("out.mp4")
    """

    layers: Tuple[Layer, ...] = ()
    global_options: GlobalOptions = GlobalOptions()
    codec: Optional[CodecConfiguration] = None

    model_config = {"frozen": True}

    # Layers

    def add_video(self, path: str, start_time: float = 0.0, duration=None) -> "Timeline":
        """Append a video layer; the first one becomes the base plate."""
        return add_video(self, path, start_time, duration)

    def add_audio(
        self, path: str, start_time: float = 0.0, duration=None, **options
    ) -> "Timeline":
        """Append an audio track; `options` are AudioOptions fields."""
        return add_audio(self, path, start_time, duration, **options)

    def add_text(
        self,
        content: str,
        position=None,
        style=None,
        start_time=None,
        duration=None,
        **style_fields,
    ) -> "Timeline":
        """Append a drawtext layer."""
        return add_text(
            self, content, position, style, start_time, duration, **style_fields
        )

    def add_image(
        self, path: str, position=None, start_time=None, duration=None
    ) -> "Timeline":
        """Append an image layer (base plate when there is no video)."""
        return add_image(self, path, position, start_time, duration)

    def add_filter(
        self, name: str, start_time: float = 0.0, duration=None, **params
    ) -> "Timeline":
        """Append a generic video filter."""
        return add_filter(self, name, start_time, duration, **params)

    def add_watermark(
        self, path: str, position="top-left", margin: int = WATERMARK_MARGIN
    ) -> "Timeline":
        """Append a logo overlay that stays visible for the whole composition."""
        return add_watermark(self, path, position, margin)

    # Global options

    def trim(self, start: float, end: Optional[float] = None) -> "Timeline":
        return trim(self, start, end)

    def scale(self, width: Union[int, str], height: Union[int, str]) -> "Timeline":
        return scale(self, width, height)

    def crop(self, width, height, x=0, y=0) -> "Timeline":
        return crop(self, width, height, x, y)

    def set_aspect_ratio(self, ratio: str) -> "Timeline":
        return set_aspect_ratio(self, ratio)

    def set_frame_rate(self, fps: float) -> "Timeline":
        return set_frame_rate(self, fps)

    def set_duration(self, seconds: float) -> "Timeline":
        return set_duration(self, seconds)

    # Codecs

    def set_video_codec(
        self, codec: str, options: Optional[VideoCodecOptions] = None
    ) -> "Timeline":
        return set_video_codec(self, codec, options)

    def set_audio_codec(
        self, codec: str, options: Optional[AudioCodecOptions] = None
    ) -> "Timeline":
        return set_audio_codec(self, codec, options)

    def set_codec(self, config: CodecConfiguration) -> "Timeline":
        return set_codec(self, config)

    def set_hardware_acceleration(
        self, hw: Union[HardwareAcceleration, str]
    ) -> "Timeline":
        return set_hardware_acceleration(self, hw)

    # Output

    def get_command(
        self, output_path: str, render_options: Optional[RenderOptions] = None
    ) -> str:
        """Compile to a shell-ready FFmpeg command line."""
        return get_command(self, output_path, render_options)

    def render(
        self,
        output_path: str,
        render_options: Optional[RenderOptions] = None,
        on_status: StatusCb = None,
    ) -> str:
        """Compile for a final render; raises EmptyCompositionError when empty."""
        return render(self, output_path, render_options, on_status)

    def to_json(self) -> Dict[str, Any]:
        """Plain-data form of the snapshot (layers, global options, codec)."""
        return to_json(self)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Timeline":
        """Rebuild a snapshot from to_json() output."""
        return from_json(data)

    # Composition

    def concat(self, other: "Timeline") -> "Timeline":
        return concat(self, other)

    def get_duration(self) -> float:
        return get_duration(self)

    def pipe(self, fn: Callable[..., "Timeline"], *args, **kwargs) -> "Timeline":
        """Apply ``fn(self, *args, **kwargs)``, for chaining free functions."""
        return pipe(self, fn, *args, **kwargs)


def _append(timeline: Timeline, layer) -> Timeline:
    return timeline.model_copy(update={"layers": (*timeline.layers, layer)})


def _with_options(timeline: Timeline, **update) -> Timeline:
    options = GlobalOptions(**{**timeline.global_options.model_dump(), **update})
    return timeline.model_copy(update={"global_options": options})


def _with_codec(timeline: Timeline, codec: CodecConfiguration) -> Timeline:
    return timeline.model_copy(update={"codec": codec})


def _position(position) -> Optional[Position]:
    if position is None or isinstance(position, (PositionKeyword, PositionSpec)):
        return position
    if isinstance(position, str):
        try:
            return PositionKeyword(position)
        except ValueError:
            return position
    return PositionSpec.model_validate(position)


def add_video(
    timeline: Timeline,
    path: str,
    start_time: float = 0.0,
    duration: Optional[float] = None,
) -> Timeline:
    """
    Append a video layer.

    Args:
        timeline: Snapshot to extend
        path: Video file path or URL
        start_time: Start on the output timeline in seconds
        duration: Length in seconds, or None for the natural length

    Returns:
        New Timeline
    """
    return _append(
        timeline, VideoLayer(source=path, start_time=start_time, duration=duration)
    )


def add_audio(
    timeline: Timeline,
    path: str,
    start_time: float = 0.0,
    duration: Optional[float] = None,
    **options,
) -> Timeline:
    """
    Append an audio track, mixed with every other audio stream.

    Args:
        timeline: Snapshot to extend
        path: Audio file path or URL
        start_time: Delay before the track starts, in seconds
        duration: Track length in seconds
        **options: AudioOptions fields (volume, fade_in, echo, loop...)

    Returns:
        New Timeline
    """
    layer = AudioLayer(
        source=path,
        start_time=start_time,
        duration=duration,
        options=AudioOptions(**options),
    )
    return _append(timeline, layer)


def add_text(
    timeline: Timeline,
    content: str,
    position=None,
    style: Optional[TextStyle] = None,
    start_time: Optional[float] = None,
    duration: Optional[float] = None,
    **style_fields,
) -> Timeline:
    """
    Append a drawtext layer.

    Text without an explicit start time or duration stays on screen for the
    whole composition.

    Args:
        timeline: Snapshot to extend
        content: Text to draw; quotes are escaped at compile time
        position: Keyword ("top", "bottom-right"...), PositionSpec or dict
        style: TextStyle; `style_fields` override individual fields
        start_time: Start in seconds
        duration: Visible time in seconds (default 5)

    Returns:
        New Timeline
    """
    if style_fields:
        base = style.model_dump(exclude_none=True) if style else {}
        style = TextStyle(**{**base, **style_fields})

    layer = TextLayer(
        content=content,
        options=TextOptions(position=_position(position), style=style or TextStyle()),
        start_time=start_time or 0.0,
        duration=duration if duration is not None else DEFAULT_OVERLAY_DURATION,
        timed=start_time is not None or duration is not None,
    )
    return _append(timeline, layer)


def add_image(
    timeline: Timeline,
    path: str,
    position=None,
    start_time: Optional[float] = None,
    duration: Union[float, str, None] = None,
) -> Timeline:
    """
    Append an image layer.

    Without any video layer the first image is the base plate; later images
    are overlaid. Several back-to-back images form an image sequence.

    Args:
        timeline: Snapshot to extend
        path: Image file path or URL
        position: Overlay position (keyword, PositionSpec or dict)
        start_time: Start in seconds
        duration: Seconds on screen (default 5), or "full"

    Returns:
        New Timeline
    """
    if duration == FULL:
        length = None
    elif duration is None:
        length = DEFAULT_OVERLAY_DURATION
    else:
        length = duration

    layer = ImageLayer(
        source=path,
        options=ImageOptions(position=_position(position)),
        start_time=start_time or 0.0,
        duration=length,
        timed=start_time is not None or duration is not None,
    )
    return _append(timeline, layer)


def add_filter(
    timeline: Timeline,
    name: str,
    start_time: float = 0.0,
    duration: Optional[float] = None,
    **params,
) -> Timeline:
    """
    Append a generic video filter.

    Known names ("blur", "brightness", "zoompan"...) use a parameter
    template; any other name is passed to FFmpeg as-is.
    """
    return _append(
        timeline,
        FilterLayer(
            content=name, options=params, start_time=start_time, duration=duration
        ),
    )


def add_watermark(
    timeline: Timeline,
    path: str,
    position: Union[str, PositionSpec, dict, None] = "top-left",
    margin: int = WATERMARK_MARGIN,
) -> Timeline:
    """
    Append a logo overlay in a corner, visible for the whole composition.

    Args:
        timeline: Snapshot to extend
        path: Logo image path
        position: Corner keyword, or an explicit PositionSpec/dict
        margin: Inset from the corner in pixels

    Returns:
        New Timeline
    """
    if isinstance(position, str) or position is None:
        right = f"main_w-overlay_w-{margin}"
        bottom = f"main_h-overlay_h-{margin}"
        corners = {
            "top-right": (right, margin),
            "bottom-right": (right, bottom),
            "bottom-left": (margin, bottom),
        }
        x, y = corners.get(position, (margin, margin))
        position = PositionSpec(x=x, y=y)
    return add_image(timeline, path, position=position, duration=FULL)


def trim(timeline: Timeline, start: float, end: Optional[float] = None) -> Timeline:
    """Keep only [start, end) of the inputs."""
    return _with_options(timeline, trim=TrimOptions(start=start, end=end))


def scale(
    timeline: Timeline, width: Union[int, str], height: Union[int, str]
) -> Timeline:
    """Scale the output; -1 or -2 keeps the aspect ratio."""
    return _with_options(timeline, scale=ScaleOptions(width=width, height=height))


def crop(timeline: Timeline, width, height, x=0, y=0) -> Timeline:
    """Crop the output to a rectangle."""
    return _with_options(
        timeline, crop=CropOptions(width=width, height=height, x=x, y=y)
    )


def set_aspect_ratio(timeline: Timeline, ratio: str) -> Timeline:
    """
    Convert the output to a W:H aspect ratio.

    Raises:
        InvalidAspectRatioError: If `ratio` is not a positive W:H pair
    """
    parse_aspect_ratio(ratio)
    return _with_options(timeline, aspect_ratio=ratio)


def set_frame_rate(timeline: Timeline, fps: float) -> Timeline:
    return _with_options(timeline, frame_rate=fps)


def set_duration(timeline: Timeline, seconds: float) -> Timeline:
    """Cap the output length (also overrides get_duration())."""
    return _with_options(timeline, duration=seconds)


def set_video_codec(
    timeline: Timeline, codec: str, options: Optional[VideoCodecOptions] = None
) -> Timeline:
    """Use an explicit video encoder instead of the render defaults."""
    config = timeline.codec or CodecConfiguration()
    return _with_codec(timeline, config.with_video(codec, options))


def set_audio_codec(
    timeline: Timeline, codec: str, options: Optional[AudioCodecOptions] = None
) -> Timeline:
    """Use an explicit audio encoder instead of the render defaults."""
    config = timeline.codec or CodecConfiguration()
    return _with_codec(timeline, config.with_audio(codec, options))


def set_codec(timeline: Timeline, config: CodecConfiguration) -> Timeline:
    """Replace the whole codec configuration."""
    return _with_codec(timeline, config)


def set_hardware_acceleration(
    timeline: Timeline, hw: Union[HardwareAcceleration, str]
) -> Timeline:
    """
    Decode with hardware acceleration and switch to the matching encoder.

    Accepts FFmpeg names ("cuda", "qsv") and vendor aliases ("nvidia",
    "intel", "amd", "apple").
    """
    if not isinstance(hw, HardwareAcceleration):
        hw = HardwareAcceleration.from_name(hw)
    config = timeline.codec or CodecConfiguration()
    return _with_codec(timeline, config.with_hardware_acceleration(hw))


def get_command(
    timeline: Timeline,
    output_path: str,
    render_options: Optional[RenderOptions] = None,
) -> str:
    """Compile a timeline to a shell-ready FFmpeg command line."""
    from .command import compile_timeline

    return str(compile_timeline(timeline, output_path, render_options))


def render(
    timeline: Timeline,
    output_path: str,
    render_options: Optional[RenderOptions] = None,
    on_status: StatusCb = None,
) -> str:
    """
    Compile a timeline for a final render.

    Running FFmpeg is left to the caller.

    Args:
        timeline: Snapshot to compile
        output_path: Output file path
        render_options: Quality, codec and bitrate knobs
        on_status: Optional status callback

    Returns:
        FFmpeg command line

    Raises:
        EmptyCompositionError: If the timeline has no layers
    """
    if not timeline.layers:
        raise EmptyCompositionError(
            "Cannot render an empty timeline", {"output_path": output_path}
        )

    if on_status:
        on_status("compiling")
    command = get_command(timeline, output_path, render_options)
    logger.info(f"FFmpeg command: {command}")
    if on_status:
        on_status("compiled")
    return command


def to_json(timeline: Timeline) -> Dict[str, Any]:
    return timeline.model_dump(mode="json")


def from_json(data: Dict[str, Any]) -> Timeline:
    return Timeline.model_validate(data)


def get_duration(timeline: Timeline) -> float:
    """
    Estimated output length in seconds.

    An explicit set_duration() wins; otherwise the latest layer end, where
    video and audio without a duration count as 30 s and everything else as
    5 s. Empty timelines last 0 s.
    """
    if timeline.global_options.duration:
        return timeline.global_options.duration

    longest = 0.0
    for layer in timeline.layers:
        if layer.duration is not None:
            length = layer.duration
        elif layer.type in (LayerType.VIDEO, LayerType.AUDIO):
            length = DEFAULT_MEDIA_DURATION
        else:
            length = DEFAULT_OVERLAY_DURATION
        longest = max(longest, layer.start_time + length)
    return longest


def concat(timeline: Timeline, other: Timeline) -> Timeline:
    """Append `other`'s layers, shifted to start where `timeline` ends."""
    offset = get_duration(timeline)
    shifted = tuple(
        layer.model_copy(update={"start_time": layer.start_time + offset})
        for layer in other.layers
    )
    return timeline.model_copy(update={"layers": (*timeline.layers, *shifted)})


def pipe(timeline: Timeline, fn: Callable[..., Timeline], *args, **kwargs) -> Timeline:
    return fn(timeline, *args, **kwargs)
