"""Filter graph assembly: image-sequence fast path and general overlay graph."""

import logging
from pydantic import BaseModel
from typing import List, Optional, Sequence
from ..core.numbers import fmt_num
from .audio import AudioMixGraphBuilder
from .filters import generic_filter, image_overlay, is_zoompan, text_filter
from .labels import InputMap, StreamLabels, base_layer, bracket
from .models import (
    AudioLayer,
    FilterLayer,
    GlobalOptions,
    ImageLayer,
    TextLayer,
    VideoLayer,
    parse_aspect_ratio,
)

logger = logging.getLogger(__name__)

# Slack allowed between consecutive images before they count as overlapping
SEQUENCE_TOLERANCE = 0.01

# Loop length of still-image inputs without a duration
SEQUENCE_IMAGE_DURATION = 0.5
STILL_IMAGE_DURATION = 5.0

# Blank canvas used when overlays or filters have no video/image to draw on
CANVAS_SIZE = (1920, 1080)
CANVAS_FPS = 30


def _ratio_filter(w: int, h: int) -> str:
    return (
        f"scale='if(gt(a,{w}/{h}),iw,ih*{w}/{h})'"
        f":'if(gt(a,{w}/{h}),iw*{h}/{w},ih)',crop=iw:ih"
    )


NAMED_ASPECT_RATIOS = {
    "16:9": _ratio_filter(16, 9),
    "9:16": "scale='if(gt(a,9/16),ih*9/16,iw)':'if(gt(a,9/16),ih,iw*16/9)',crop=iw:ih",
    "1:1": "scale='if(gt(a,1),iw,ih)':'if(gt(a,1),iw,ih)',crop='min(iw,ih)':'min(iw,ih)'",
    "4:3": _ratio_filter(4, 3),
    "21:9": _ratio_filter(21, 9),
}


def aspect_ratio_filter(ratio: str) -> str:
    """
    Conditional scale+crop pair converting the frame to `ratio`.

    Raises:
        InvalidAspectRatioError: If `ratio` is not a positive W:H pair
    """
    if ratio in NAMED_ASPECT_RATIOS:
        return NAMED_ASPECT_RATIOS[ratio]
    w, h = parse_aspect_ratio(ratio)
    return _ratio_filter(w, h)


def is_image_sequence(layers: Sequence[object]) -> bool:
    """
    Detect a pure, non-overlapping sequence of still images.

    True when there is more than one image, no video, and each image (sorted
    by start time) ends no later than the next one starts, within
    SEQUENCE_TOLERANCE seconds.
    """
    images = [layer for layer in layers if isinstance(layer, ImageLayer)]
    has_video = any(isinstance(layer, VideoLayer) for layer in layers)
    if len(images) <= 1 or has_video:
        return False

    ordered = sorted(images, key=lambda layer: layer.start_time)
    for current, following in zip(ordered, ordered[1:]):
        end = current.start_time + (current.duration or SEQUENCE_IMAGE_DURATION)
        if end > following.start_time + SEQUENCE_TOLERANCE:
            return False
    return True


class InputSpec(BaseModel):
    """One FFmpeg input."""

    path: str
    loop_duration: Optional[float] = None  # Still images: -loop 1 -t <d>
    format: Optional[str] = None  # e.g. "lavfi" for generated sources

    model_config = {"frozen": True}


class FilterGraph(BaseModel):
    """Result of assembling a timeline: inputs, fragments and output labels."""

    inputs: List[InputSpec]
    fragments: List[str]
    video_label: Optional[str] = None
    audio_label: Optional[str] = None
    image_sequence: bool = False

    @property
    def script(self) -> Optional[str]:
        """Semicolon-joined filter script, or None when nothing was emitted."""
        if not self.fragments:
            return None
        return ";".join(self.fragments)


class GraphAssembler:
    """Compiles layers and global options into a FilterGraph."""

    def __init__(
        self,
        layers: Sequence[object],
        global_options: GlobalOptions,
        duration: float = 0.0,
    ):
        """
        Initialize the assembler.

        Args:
            layers: Timeline layers in insertion order
            global_options: Composition-wide transforms
            duration: Estimated timeline duration, used for a generated canvas
        """
        self.layers = list(layers)
        self.options = global_options
        self.duration = duration
        self.inputs = InputMap.from_layers(self.layers)

    def _of_type(self, cls) -> list:
        return [layer for layer in self.layers if isinstance(layer, cls)]

    def build(self) -> FilterGraph:
        """Choose a strategy and assemble the graph."""
        if is_image_sequence(self.layers):
            logger.debug("Compiling as image sequence")
            return self._build_image_sequence()
        logger.debug("Compiling general filter graph")
        return self._build_general()

    def _input_specs(self, image_default: float) -> List[InputSpec]:
        specs: List[InputSpec] = []
        images = self._of_type(ImageLayer)
        for source in self.inputs.sources:
            image = next((i for i in images if i.source == source), None)
            if image is not None:
                specs.append(
                    InputSpec(
                        path=source,
                        loop_duration=image.duration or image_default,
                    )
                )
            else:
                specs.append(InputSpec(path=source))
        return specs

    def _canvas_spec(self) -> InputSpec:
        width, height = CANVAS_SIZE
        if self.options.scale and all(
            isinstance(v, int) and v > 0
            for v in (self.options.scale.width, self.options.scale.height)
        ):
            width, height = self.options.scale.width, self.options.scale.height
        rate = fmt_num(self.options.frame_rate or CANVAS_FPS)
        return InputSpec(
            path=(
                f"color=c=black:size={width}x{height}:rate={rate}"
                f":d={fmt_num(self.duration or STILL_IMAGE_DURATION)}"
            ),
            format="lavfi",
        )

    def _build_image_sequence(self) -> FilterGraph:
        labels = StreamLabels()
        images = sorted(self._of_type(ImageLayer), key=lambda layer: layer.start_time)

        concat_inputs = "".join(
            bracket(self.inputs.video(image.source)) for image in images
        )
        out = labels.fixed("v")
        fragments = [f"{concat_inputs}concat=n={len(images)}:v=1:a=0{bracket(out)}"]
        labels.advance_video(out)

        audio = AudioMixGraphBuilder(self.inputs, labels)
        fragments.extend(audio.build(self._of_type(AudioLayer)))

        return FilterGraph(
            inputs=self._input_specs(SEQUENCE_IMAGE_DURATION),
            fragments=fragments,
            video_label=labels.video,
            audio_label=labels.audio,
            image_sequence=True,
        )

    def _build_general(self) -> FilterGraph:
        fragments: List[str] = []
        specs = self._input_specs(STILL_IMAGE_DURATION)
        labels = StreamLabels.for_layers(self.layers, self.inputs)
        base = base_layer(self.layers)
        filter_layers: List[FilterLayer] = self._of_type(FilterLayer)
        opts = self.options

        needs_video = bool(
            self._of_type(TextLayer)
            or filter_layers
            or opts.aspect_ratio
            or opts.scale
            or opts.crop
        )
        if base is None and needs_video:
            specs.append(self._canvas_spec())
            labels.advance_video(f"{len(specs) - 1}:v")

        def emit(fragment: str, label: str) -> None:
            fragments.append(fragment)
            labels.advance_video(label)

        # Zoompan on a still base plate runs before anything is composited
        if isinstance(base, ImageLayer):
            zoom_at = next(
                (i for i, layer in enumerate(filter_layers) if is_zoompan(layer)),
                None,
            )
            if zoom_at is not None:
                zoom = filter_layers.pop(zoom_at)
                out = labels.next("filtered")
                emit(generic_filter(zoom, labels.video, out), out)

        if opts.aspect_ratio:
            out = labels.fixed("aspect")
            body = aspect_ratio_filter(opts.aspect_ratio)
            emit(f"{bracket(labels.video)}{body}{bracket(out)}", out)

        if opts.scale:
            out = labels.fixed("scaled")
            emit(
                f"{bracket(labels.video)}scale={fmt_num(opts.scale.width)}"
                f":{fmt_num(opts.scale.height)}{bracket(out)}",
                out,
            )

        if opts.crop:
            crop = opts.crop
            out = labels.fixed("cropped")
            emit(
                f"{bracket(labels.video)}crop={fmt_num(crop.width)}:{fmt_num(crop.height)}"
                f":{fmt_num(crop.x)}:{fmt_num(crop.y)}{bracket(out)}",
                out,
            )

        for layer in self.layers:
            if isinstance(layer, TextLayer):
                out = labels.next("text")
                emit(text_filter(layer, labels.video, out), out)
            elif isinstance(layer, ImageLayer) and layer is not base:
                out = labels.next("overlay")
                stream = self.inputs.video(layer.source)
                emit(image_overlay(layer, labels.video, stream, out), out)

        for layer in filter_layers:
            out = labels.next("filtered")
            emit(generic_filter(layer, labels.video, out), out)

        base_audio = (
            self.inputs.audio(base.source) if isinstance(base, VideoLayer) else None
        )
        audio = AudioMixGraphBuilder(self.inputs, labels)
        fragments.extend(audio.build(self._of_type(AudioLayer), base_audio))

        logger.debug(f"Filter graph: {len(fragments)} fragments")
        return FilterGraph(
            inputs=specs,
            fragments=fragments,
            video_label=labels.video,
            audio_label=labels.audio,
        )
