"""Serialization of an assembled filter graph into an FFmpeg command."""

import re
from pydantic import BaseModel, Field
from typing import List, Optional, TYPE_CHECKING
from ..core.numbers import fmt_num
from ..core.types import HardwareAcceleration
from .codecs import RenderOptions
from .context import MediaContext, default_context
from .graph import FilterGraph, GraphAssembler, InputSpec
from .labels import bracket, is_input_stream

if TYPE_CHECKING:
    from .timeline import Timeline

# Characters that keep a special meaning inside a double-quoted shell word
SHELL_DOUBLE_QUOTED = re.compile(r'([\\"$`])')


def double_quote(value: str) -> str:
    """Wrap `value` in double quotes so a POSIX shell passes it through unchanged."""
    return '"' + SHELL_DOUBLE_QUOTED.sub(r"\\\1", value) + '"'


class FFmpegCommand(BaseModel):
    """Compiled command, kept in sections so callers can inspect each part."""

    program: str = "ffmpeg"
    hwaccel: List[str] = Field(default_factory=list)
    inputs: List[InputSpec] = Field(default_factory=list)
    options: List[str] = Field(default_factory=list)
    filter_script: Optional[str] = None
    maps: List[str] = Field(default_factory=list)
    output_path: str

    model_config = {"frozen": True}

    def input_args(self) -> List[str]:
        """Per-input flags followed by ``-i <path>``."""
        args: List[str] = []
        for spec in self.inputs:
            if spec.format:
                args.extend(["-f", spec.format])
            if spec.loop_duration is not None:
                args.extend(["-loop", "1", "-t", fmt_num(spec.loop_duration)])
            args.extend(["-i", spec.path])
        return args

    def _assemble(self, script: Optional[str]) -> List[str]:
        args = [self.program, *self.hwaccel, *self.input_args(), *self.options]
        if script is not None:
            args.extend(["-filter_complex", script])
        for target in self.maps:
            args.extend(["-map", target])
        args.extend(["-y", self.output_path])
        return args

    def argv(self) -> List[str]:
        """Argument vector suitable for subprocess (no shell quoting)."""
        return self._assemble(self.filter_script)

    def __str__(self) -> str:
        script = (
            double_quote(self.filter_script) if self.filter_script is not None else None
        )
        return " ".join(self._assemble(script))


def map_targets(graph: FilterGraph) -> List[str]:
    """
    Explicit ``-map`` targets for the graph's final streams.

    Filter outputs are mapped as ``[label]``; untouched input streams are
    mapped bare, and input audio is optional so silent sources don't fail.
    """
    if graph.script is None:
        return []

    targets: List[str] = []
    if graph.video_label:
        video = graph.video_label
        targets.append(video if is_input_stream(video) else bracket(video))
    if graph.audio_label:
        audio = graph.audio_label
        targets.append(f"{audio}?" if is_input_stream(audio) else bracket(audio))
    return targets


class CommandSerializer:
    """Turns a timeline snapshot into an FFmpegCommand."""

    def __init__(self, timeline: "Timeline", ctx: Optional[MediaContext] = None):
        """
        Initialize serializer.

        Args:
            timeline: Snapshot to compile
            ctx: Media context providing the program name and logger
        """
        self.timeline = timeline
        self.ctx = ctx or default_context()

    def _hwaccel_args(self, render_options: RenderOptions) -> List[str]:
        hw = render_options.hardware_acceleration
        if hw is not None:
            return [] if hw == HardwareAcceleration.NONE else ["-hwaccel", hw.value]
        if self.timeline.codec:
            return self.timeline.codec.hwaccel_args()
        return []

    def _trim_args(self) -> List[str]:
        trim = self.timeline.global_options.trim
        if trim is None:
            return []
        args = ["-ss", fmt_num(trim.start)]
        if trim.end:
            args.extend(["-t", fmt_num(trim.end - trim.start)])
        return args

    def _timing_args(self) -> List[str]:
        opts = self.timeline.global_options
        args: List[str] = []
        if opts.frame_rate:
            args.extend(["-r", fmt_num(opts.frame_rate)])
        # Trim end already bounds the output
        if opts.duration and not (opts.trim and opts.trim.end):
            args.extend(["-t", fmt_num(opts.duration)])
        return args

    def serialize(
        self, output_path: str, render_options: Optional[RenderOptions] = None
    ) -> FFmpegCommand:
        """
        Compile the snapshot into a command.

        Args:
            output_path: Output file path
            render_options: Quality, codec and bitrate knobs

        Returns:
            FFmpegCommand
        """
        render_options = render_options or RenderOptions()
        graph = GraphAssembler(
            self.timeline.layers,
            self.timeline.global_options,
            duration=self.timeline.get_duration(),
        ).build()

        options = self._trim_args()
        if self.timeline.codec:
            options.extend(self.timeline.codec.args())
        else:
            with_audio = not (graph.image_sequence and graph.audio_label is None)
            options.extend(render_options.default_encoder_args(with_audio=with_audio))
        options.extend(render_options.bitrate_args())
        options.extend(self._timing_args())

        command = FFmpegCommand(
            program=self.ctx.ffmpeg,
            hwaccel=self._hwaccel_args(render_options),
            inputs=graph.inputs,
            options=options,
            filter_script=graph.script,
            maps=map_targets(graph),
            output_path=output_path,
        )
        self.ctx.logger.debug(
            f"Compiled {len(graph.inputs)} inputs, {len(graph.fragments)} filter fragments"
        )
        return command


def compile_timeline(
    timeline: "Timeline",
    output_path: str,
    render_options: Optional[RenderOptions] = None,
    ctx: Optional[MediaContext] = None,
) -> FFmpegCommand:
    """
    Compile a timeline into an FFmpeg command.

    Pure function of the snapshot: compiling the same timeline twice yields
    identical commands.

    Args:
        timeline: Snapshot to compile
        output_path: Output file path
        render_options: Quality, codec and bitrate knobs
        ctx: Media context (default context when omitted)

    Returns:
        FFmpegCommand; ``str()`` gives the shell-ready command line
    """
    return CommandSerializer(timeline, ctx).serialize(output_path, render_options)
