"""Tests for codec configuration and render options."""

from clipgraph.core import HardwareAcceleration, Quality
from clipgraph.timeline.codecs import (
    AudioCodecOptions,
    CodecConfiguration,
    RenderOptions,
    VideoCodecOptions,
)


class TestCodecConfiguration:
    """Test CodecConfiguration constructors and arguments."""

    def test_h265(self):
        """Test H.265 tags the stream for Apple players."""
        args = CodecConfiguration.h265().args()
        assert args[:2] == ["-c:v", "libx265"]
        assert "-crf" in args and args[args.index("-crf") + 1] == "28"
        assert ["-tag:v", "hvc1"] == args[args.index("-tag:v") : args.index("-tag:v") + 2]

    def test_vp9_opus(self):
        """Test VP9 with Opus VBR."""
        assert CodecConfiguration.vp9().args() == [
            "-c:v",
            "libvpx-vp9",
            "-crf",
            "32",
            "-b:v",
            "0",
            "-c:a",
            "libopus",
            "-b:a",
            "128k",
            "-vbr",
            "on",
        ]

    def test_vbr_ignored_for_other_codecs(self):
        """Test the VBR flag is only emitted for Opus."""
        config = CodecConfiguration().with_audio("aac", AudioCodecOptions(vbr=True))
        assert "-vbr" not in config.args()

    def test_detailed_options(self):
        """Test every video and audio option maps to its flag."""
        config = (
            CodecConfiguration()
            .with_video(
                "libx264",
                VideoCodecOptions(
                    profile="high",
                    level="4.1",
                    keyframe_interval=48,
                    b_frames=2,
                    ref_frames=3,
                    tune="film",
                ),
            )
            .with_audio(
                "aac",
                AudioCodecOptions(sample_rate=48000, channels=2, profile="aac_low"),
            )
        )
        assert config.args() == [
            "-c:v", "libx264",
            "-profile:v", "high",
            "-level", "4.1",
            "-g", "48",
            "-bf", "2",
            "-refs", "3",
            "-tune", "film",
            "-c:a", "aac",
            "-ar", "48000",
            "-ac", "2",
            "-profile:a", "aac_low",
        ]  # fmt: skip

    def test_builders_do_not_mutate(self):
        """Test with_* return copies."""
        base = CodecConfiguration.h264()
        changed = base.with_audio("libopus")
        assert base.audio.codec == "aac"
        assert changed.audio.codec == "libopus"
        assert changed.video == base.video


class TestHardwareAcceleration:
    """Test hardware encoder selection."""

    def test_aliases(self):
        """Test vendor aliases resolve to FFmpeg hwaccel names."""
        assert HardwareAcceleration.from_name("nvidia") == HardwareAcceleration.CUDA
        assert HardwareAcceleration.from_name("apple") == HardwareAcceleration.VIDEOTOOLBOX
        assert HardwareAcceleration.from_name("amd") == HardwareAcceleration.D3D11VA
        assert HardwareAcceleration.from_name("qsv") == HardwareAcceleration.QSV

    def test_vendor_switches_encoder(self):
        """Test a vendor profile swaps the encoder and keeps user options."""
        config = CodecConfiguration.h264(crf=20).with_hardware_acceleration(
            HardwareAcceleration.VIDEOTOOLBOX
        )
        assert config.video.codec == "h264_videotoolbox"
        assert config.video.options.profile == "high"
        assert config.video.options.extra_options["allow_sw"] == 1
        assert config.video.options.crf == 20
        assert config.hwaccel_args() == ["-hwaccel", "videotoolbox"]

    def test_auto_keeps_encoder(self):
        """Test AUTO only sets the decoder flag."""
        config = CodecConfiguration.h264().with_hardware_acceleration(
            HardwareAcceleration.AUTO
        )
        assert config.video.codec == "libx264"
        assert config.hwaccel_args() == ["-hwaccel", "auto"]

    def test_none(self):
        """Test NONE emits no flags."""
        assert CodecConfiguration().hwaccel_args() == []


class TestRenderOptions:
    """Test default encoder flags."""

    def test_defaults(self):
        """Test the default flag set."""
        assert RenderOptions().default_encoder_args() == [
            "-c:v", "h264", "-pix_fmt", "yuv420p", "-c:a", "aac",
            "-crf", "23", "-preset", "medium",
        ]  # fmt: skip

    def test_without_audio(self):
        """Test the audio codec can be left out."""
        assert "-c:a" not in RenderOptions().default_encoder_args(with_audio=False)

    def test_quality_preset_wins(self):
        """Test LOW and ULTRA force their own preset."""
        options = RenderOptions(quality=Quality.LOW, preset="veryslow")
        assert options.default_encoder_args()[-2:] == ["-preset", "fast"]

    def test_bitrates(self):
        """Test bitrate overrides."""
        assert RenderOptions(bitrate="4M").bitrate_args() == ["-b:v", "4M"]
        assert RenderOptions().bitrate_args() == []
