"""Codec configuration and render options with FFmpeg argument generation."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Union
from ..core.numbers import fmt_num
from ..core.types import HardwareAcceleration, Quality

OptionValue = Union[str, int, float]

# Encoder swapped in when hardware acceleration is enabled on a configuration
HARDWARE_ENCODERS: Dict[HardwareAcceleration, Dict[str, object]] = {
    HardwareAcceleration.CUDA: {
        "encoder": "h264_nvenc",
        "preset": "p4",
        "extra_options": {
            "rc": "vbr",
            "cq": 23,
            "b:v": "0",
            "maxrate": "4M",
            "bufsize": "8M",
        },
    },
    HardwareAcceleration.QSV: {
        "encoder": "h264_qsv",
        "preset": "medium",
        "extra_options": {"global_quality": 23, "look_ahead": 1},
    },
    HardwareAcceleration.D3D11VA: {
        "encoder": "h264_amf",
        "extra_options": {"usage": "transcoding", "quality": "balanced"},
    },
    HardwareAcceleration.VAAPI: {
        "encoder": "h264_vaapi",
        "extra_options": {"qp": 23},
    },
    HardwareAcceleration.VIDEOTOOLBOX: {
        "encoder": "h264_videotoolbox",
        "profile": "high",
        "extra_options": {"allow_sw": 1},
    },
}

# (crf, preset) per quality level; None keeps the caller's preset
QUALITY_SETTINGS: Dict[Quality, tuple] = {
    Quality.LOW: (28, "fast"),
    Quality.MEDIUM: (23, None),
    Quality.HIGH: (18, None),
    Quality.ULTRA: (15, "slow"),
}


class VideoCodecOptions(BaseModel):
    """Encoder-specific video options."""

    preset: Optional[str] = None
    crf: Optional[int] = None
    profile: Optional[str] = None
    level: Optional[str] = None
    pixel_format: Optional[str] = None
    keyframe_interval: Optional[int] = None
    b_frames: Optional[int] = None
    ref_frames: Optional[int] = None
    tune: Optional[str] = None
    extra_options: Dict[str, OptionValue] = Field(default_factory=dict)

    model_config = {"frozen": True}


class AudioCodecOptions(BaseModel):
    """Encoder-specific audio options."""

    bitrate: Optional[str] = None
    sample_rate: Optional[int] = None
    channels: Optional[int] = None
    profile: Optional[str] = None
    compression_level: Optional[int] = None
    quality: Optional[float] = None
    vbr: bool = False
    extra_options: Dict[str, OptionValue] = Field(default_factory=dict)

    model_config = {"frozen": True}


class VideoCodec(BaseModel):
    """Video codec name plus its options."""

    codec: str
    options: VideoCodecOptions = VideoCodecOptions()

    model_config = {"frozen": True}


class AudioCodec(BaseModel):
    """Audio codec name plus its options."""

    codec: str
    options: AudioCodecOptions = AudioCodecOptions()

    model_config = {"frozen": True}


class CodecConfiguration(BaseModel):
    """Explicit encoder configuration that replaces the default codec flags."""

    video: Optional[VideoCodec] = None
    audio: Optional[AudioCodec] = None
    hardware_acceleration: HardwareAcceleration = HardwareAcceleration.NONE

    model_config = {"frozen": True}

    @staticmethod
    def h264(crf: int = 23, preset: str = "medium") -> "CodecConfiguration":
        """
        H.264 video with AAC audio.

        Args:
            crf: Constant Rate Factor (lower = higher quality)
            preset: Encoding preset (ultrafast ... veryslow)

        Returns:
            H.264 codec configuration
        """
        return CodecConfiguration(
            video=VideoCodec(
                codec="libx264",
                options=VideoCodecOptions(
                    crf=crf, preset=preset, pixel_format="yuv420p"
                ),
            ),
            audio=AudioCodec(codec="aac", options=AudioCodecOptions(bitrate="192k")),
        )

    @staticmethod
    def h265(crf: int = 28, preset: str = "medium") -> "CodecConfiguration":
        """
        H.265/HEVC video with AAC audio.

        Args:
            crf: Constant Rate Factor
            preset: Encoding preset

        Returns:
            H.265 codec configuration
        """
        return CodecConfiguration(
            video=VideoCodec(
                codec="libx265",
                options=VideoCodecOptions(
                    crf=crf,
                    preset=preset,
                    pixel_format="yuv420p",
                    extra_options={"tag:v": "hvc1"},
                ),
            ),
            audio=AudioCodec(codec="aac", options=AudioCodecOptions(bitrate="192k")),
        )

    @staticmethod
    def vp9(crf: int = 32) -> "CodecConfiguration":
        """
        VP9 video with Opus audio for WebM output.

        Args:
            crf: Constant Rate Factor

        Returns:
            VP9 codec configuration
        """
        return CodecConfiguration(
            video=VideoCodec(
                codec="libvpx-vp9",
                options=VideoCodecOptions(crf=crf, extra_options={"b:v": "0"}),
            ),
            audio=AudioCodec(
                codec="libopus", options=AudioCodecOptions(bitrate="128k", vbr=True)
            ),
        )

    def with_video(
        self, codec: str, options: Optional[VideoCodecOptions] = None
    ) -> "CodecConfiguration":
        """Return a copy with the video codec replaced."""
        return self.model_copy(
            update={
                "video": VideoCodec(
                    codec=codec, options=options or VideoCodecOptions()
                )
            }
        )

    def with_audio(
        self, codec: str, options: Optional[AudioCodecOptions] = None
    ) -> "CodecConfiguration":
        """Return a copy with the audio codec replaced."""
        return self.model_copy(
            update={
                "audio": AudioCodec(
                    codec=codec, options=options or AudioCodecOptions()
                )
            }
        )

    def with_hardware_acceleration(
        self, hw: HardwareAcceleration
    ) -> "CodecConfiguration":
        """
        Return a copy that decodes with `hw` and encodes with its matching encoder.

        AUTO and NONE only change the -hwaccel flag; vendor types also swap
        the video encoder and merge the vendor's default options.
        """
        update: Dict[str, object] = {"hardware_acceleration": hw}
        profile = HARDWARE_ENCODERS.get(hw)
        if profile:
            current = self.video.options if self.video else VideoCodecOptions()
            options = current.model_copy(
                update={
                    "preset": profile.get("preset", current.preset),
                    "profile": profile.get("profile", current.profile),
                    "extra_options": {
                        **current.extra_options,
                        **profile["extra_options"],
                    },
                }
            )
            update["video"] = VideoCodec(codec=profile["encoder"], options=options)
        return self.model_copy(update=update)

    def hwaccel_args(self) -> List[str]:
        """FFmpeg flags that must precede every input."""
        if self.hardware_acceleration == HardwareAcceleration.NONE:
            return []
        return ["-hwaccel", self.hardware_acceleration.value]

    def args(self) -> List[str]:
        """
        Generate FFmpeg encoder arguments for this configuration.

        Returns:
            List of FFmpeg arguments (no output path)
        """
        args: List[str] = []

        if self.video:
            opts = self.video.options
            args.extend(["-c:v", self.video.codec])
            if opts.preset:
                args.extend(["-preset", opts.preset])
            if opts.crf is not None:
                args.extend(["-crf", str(opts.crf)])
            if opts.profile:
                args.extend(["-profile:v", opts.profile])
            if opts.level:
                args.extend(["-level", opts.level])
            if opts.pixel_format:
                args.extend(["-pix_fmt", opts.pixel_format])
            if opts.keyframe_interval:
                args.extend(["-g", str(opts.keyframe_interval)])
            if opts.b_frames is not None:
                args.extend(["-bf", str(opts.b_frames)])
            if opts.ref_frames is not None:
                args.extend(["-refs", str(opts.ref_frames)])
            if opts.tune:
                args.extend(["-tune", opts.tune])
            for key, value in opts.extra_options.items():
                args.extend([f"-{key}", fmt_num(value)])

        if self.audio:
            opts = self.audio.options
            args.extend(["-c:a", self.audio.codec])
            if opts.bitrate:
                args.extend(["-b:a", opts.bitrate])
            if opts.sample_rate:
                args.extend(["-ar", str(opts.sample_rate)])
            if opts.channels:
                args.extend(["-ac", str(opts.channels)])
            if opts.profile:
                args.extend(["-profile:a", opts.profile])
            if opts.compression_level is not None:
                args.extend(["-compression_level", str(opts.compression_level)])
            if opts.quality is not None:
                args.extend(["-q:a", fmt_num(opts.quality)])
            # VBR flag only exists for Opus
            if opts.vbr and self.audio.codec == "libopus":
                args.extend(["-vbr", "on"])
            for key, value in opts.extra_options.items():
                args.extend([f"-{key}", fmt_num(value)])

        return args


class RenderOptions(BaseModel):
    """Per-call rendering knobs used by Timeline.get_command()."""

    quality: Quality = Quality.MEDIUM
    codec: str = "h264"
    preset: Optional[str] = None
    bitrate: Optional[str] = None
    audio_bitrate: Optional[str] = None
    hardware_acceleration: Optional[HardwareAcceleration] = None

    model_config = {"frozen": True}

    def default_encoder_args(self, with_audio: bool = True) -> List[str]:
        """
        Fallback encoder flags used when no CodecConfiguration is set.

        Args:
            with_audio: Include the audio codec flag

        Returns:
            List of FFmpeg arguments
        """
        crf, quality_preset = QUALITY_SETTINGS[self.quality]
        preset = quality_preset or self.preset or "medium"

        args = ["-c:v", self.codec, "-pix_fmt", "yuv420p"]
        if with_audio:
            args.extend(["-c:a", "aac"])
        args.extend(["-crf", str(crf), "-preset", preset])
        return args

    def bitrate_args(self) -> List[str]:
        """Bitrate overrides, applied after the encoder flags."""
        args: List[str] = []
        if self.bitrate:
            args.extend(["-b:v", self.bitrate])
        if self.audio_bitrate:
            args.extend(["-b:a", self.audio_bitrate])
        return args
