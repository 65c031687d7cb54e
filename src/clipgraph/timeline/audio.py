"""Audio filter chains and the final N-way mix."""

import logging
from typing import List, Optional, Sequence
from ..core.numbers import fmt_num
from .labels import InputMap, StreamLabels, bracket
from .models import AudioLayer

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100

# Fixed echo used to approximate reverb
REVERB_ECHO = "aecho=0.8:0.88:60:0.4"


def track_filters(layer: AudioLayer) -> List[str]:
    """
    Ordered effect stages for one audio track.

    Only stages with configured parameters are returned. The order is fixed:
    trim, volume, fades, pitch, tempo, tone filters, echo, reverb, start
    delay, duration clamp, loop.
    """
    opts = layer.options
    filters: List[str] = []

    if opts.trim_start is not None or opts.trim_end is not None:
        trim = f"atrim=start={fmt_num(opts.trim_start or 0)}"
        if opts.trim_end:
            trim += f",end={fmt_num(opts.trim_end)}"
        filters.append(trim)

    if opts.volume is not None:
        filters.append(f"volume={fmt_num(opts.volume)}")

    if opts.fade_in:
        filters.append(f"afade=t=in:st=0:d={fmt_num(opts.fade_in)}")
    # Fade-out needs a known end
    if opts.fade_out and layer.duration:
        fade_start = layer.duration - opts.fade_out
        filters.append(
            f"afade=t=out:st={fmt_num(fade_start)}:d={fmt_num(opts.fade_out)}"
        )

    if opts.pitch:
        filters.append(
            f"asetrate={SAMPLE_RATE}*{fmt_num(opts.pitch)},aresample={SAMPLE_RATE}"
        )
    if opts.tempo:
        filters.append(f"atempo={fmt_num(opts.tempo)}")

    if opts.lowpass:
        filters.append(f"lowpass=f={fmt_num(opts.lowpass)}")
    if opts.highpass:
        filters.append(f"highpass=f={fmt_num(opts.highpass)}")

    if opts.echo:
        filters.append(
            f"aecho=0.8:0.9:{fmt_num(opts.echo.delay)}:{fmt_num(opts.echo.decay)}"
        )
    if opts.reverb:
        filters.append(REVERB_ECHO)

    if layer.start_time > 0:
        delay_ms = fmt_num(layer.start_time * 1000)
        filters.append(f"adelay={delay_ms}|{delay_ms}")

    if layer.duration:
        filters.append(f"atrim=duration={fmt_num(layer.duration)}")

    if opts.loop and layer.duration:
        filters.append(f"aloop=loop=-1:size={SAMPLE_RATE}*10")

    return filters


class AudioMixGraphBuilder:
    """Builds per-track audio chains and mixes them into one stream."""

    def __init__(self, inputs: InputMap, labels: StreamLabels):
        """
        Initialize the builder.

        Args:
            inputs: Source to input index map
            labels: Label registers for the current compile
        """
        self.inputs = inputs
        self.labels = labels

    def build(
        self, audio_layers: Sequence[AudioLayer], base_audio: Optional[str] = None
    ) -> List[str]:
        """
        Build audio fragments and set the final audio label.

        Args:
            audio_layers: Audio layers in insertion order
            base_audio: Input audio stream of the base video, mixed unprocessed

        Returns:
            Filter fragments (may be empty)
        """
        fragments: List[str] = []
        streams: List[str] = []

        if base_audio:
            streams.append(base_audio)

        for layer in audio_layers:
            stream = self.inputs.audio(layer.source)
            stages = track_filters(layer)
            if stages:
                processed = self.labels.next("audio")
                fragments.append(
                    f"{bracket(stream)}{','.join(stages)}{bracket(processed)}"
                )
                stream = processed
            streams.append(stream)

        if not streams:
            return fragments

        if len(streams) == 1:
            # Single stream: alias it, no mix node
            self.labels.advance_audio(streams[0])
            logger.debug(f"Audio: single stream {streams[0]}, no mix")
            return fragments

        mixed = self.labels.fixed("aout")
        mix_inputs = "".join(bracket(s) for s in streams)
        fragments.append(
            f"{mix_inputs}amix=inputs={len(streams)}:duration=longest{bracket(mixed)}"
        )
        self.labels.advance_audio(mixed)
        logger.debug(f"Audio: mixing {len(streams)} streams into {mixed}")
        return fragments
