"""Tests for the Timeline snapshot and its builders."""

import logging
import pytest
from pydantic import ValidationError
from clipgraph import Timeline
from clipgraph.core import HardwareAcceleration, PositionKeyword
from clipgraph.timeline import (
    EmptyCompositionError,
    InvalidAspectRatioError,
    PositionSpec,
    TextStyle,
    add_text,
    add_video,
    scale,
    set_duration,
)
from clipgraph.timeline.models import AudioLayer, ImageLayer, TextLayer


class TestImmutability:
    """Test that builders never modify the receiver."""

    def test_builders_return_new_snapshots(self, empty_timeline):
        """Test every builder leaves the original untouched."""
        with_video = empty_timeline.add_video("a.mp4")
        assert empty_timeline.layers == ()
        assert len(with_video.layers) == 1

        scaled = with_video.scale(1280, 720)
        assert with_video.global_options.scale is None
        assert scaled.global_options.scale.width == 1280

    def test_branching(self, video_timeline):
        """Test two branches from one base stay independent."""
        left = video_timeline.add_text("Left")
        right = video_timeline.add_text("Right")
        assert left.layers[-1].content == "Left"
        assert right.layers[-1].content == "Right"
        assert len(video_timeline.layers) == 1

    def test_free_functions(self):
        """Test module-level builders match the methods."""
        via_functions = set_duration(scale(add_video(Timeline(), "a.mp4"), 640, 360), 10)
        via_methods = Timeline().add_video("a.mp4").scale(640, 360).set_duration(10)
        assert via_functions == via_methods


class TestLayerBuilders:
    """Test layer construction from builder arguments."""

    def test_text_timing_flag(self):
        """Test text records whether timing was set explicitly."""
        untimed = Timeline().add_text("A").layers[-1]
        timed = Timeline().add_text("B", duration=2).layers[-1]
        assert untimed.timed is False and untimed.duration == 5
        assert timed.timed is True and timed.start_time == 0

    def test_text_style_fields(self):
        """Test keyword style fields merge over a style object."""
        layer = add_text(
            Timeline(), "Hi", style=TextStyle(font_size=40, color="red"), color="blue"
        ).layers[-1]
        assert layer.options.style.font_size == 40
        assert layer.options.style.color == "blue"

    def test_text_position_forms(self):
        """Test keyword strings and dicts are both accepted."""
        keyword = Timeline().add_text("A", position="top-left").layers[-1]
        assert keyword.options.position == PositionKeyword.TOP_LEFT
        spec = Timeline().add_text("A", position={"x": "10%", "y": 20}).layers[-1]
        assert spec.options.position == PositionSpec(x="10%", y=20)

    def test_unknown_keyword_kept(self):
        """Test unrecognised keywords are stored as given and still compile."""
        layer = Timeline().add_text("A", position="middle").layers[-1]
        assert layer.options.position == "middle"
        command = (
            Timeline()
            .add_video("in.mp4")
            .add_image("logo.png", position="top-center")
            .add_text("Hi", position="middle")
            .get_command("out.mp4")
        )
        assert "[0:v][1:v]overlay=20:20[overlay0]" in command
        assert "x=(w-text_w)/2:y=(h-text_h)/2" in command

    def test_unknown_keyword_round_trip(self):
        """Test unrecognised keywords survive JSON without becoming enums."""
        timeline = Timeline().add_image("logo.png", position="top-center")
        restored = Timeline.from_json(timeline.to_json())
        assert restored.layers[-1].options.position == "top-center"
        assert restored == timeline

    def test_image_full_duration(self):
        """Test duration="full" stores no duration."""
        layer = Timeline().add_image("logo.png", duration="full").layers[-1]
        assert isinstance(layer, ImageLayer)
        assert layer.duration is None

    def test_audio_options(self):
        """Test audio keyword options land in AudioOptions."""
        layer = Timeline().add_audio("m.mp3", start_time=1, volume=0.4, loop=True)
        audio = layer.layers[-1]
        assert isinstance(audio, AudioLayer)
        assert audio.options.volume == 0.4
        assert audio.options.loop is True
        with pytest.raises(ValidationError):
            Timeline().add_audio("m.mp3", volumee=0.4)

    def test_filter_params(self):
        """Test filter keyword params are stored as the option bag."""
        layer = Timeline().add_filter("blur", radius=8).layers[-1]
        assert layer.content == "blur"
        assert layer.options == {"radius": 8}

    @pytest.mark.parametrize(
        "position,expected",
        [
            ("top-left", (20, 20)),
            ("top-right", ("main_w-overlay_w-20", 20)),
            ("bottom-right", ("main_w-overlay_w-20", "main_h-overlay_h-20")),
            ("bottom-left", (20, "main_h-overlay_h-20")),
            ("center", (20, 20)),
        ],
    )
    def test_watermark_corners(self, position, expected):
        """Test watermark corners use the margin and run full length."""
        layer = Timeline().add_watermark("logo.png", position=position).layers[-1]
        assert (layer.options.position.x, layer.options.position.y) == expected
        assert layer.duration is None

    def test_watermark_command(self, video_timeline):
        """Test a watermark compiles to an ungated overlay."""
        command = video_timeline.add_watermark(
            "logo.png", position="bottom-right", margin=10
        ).get_command("out.mp4")
        assert (
            "[0:v][1:v]overlay=main_w-overlay_w-10:main_h-overlay_h-10[overlay0]"
            in command
        )
        assert "enable=" not in command


class TestGlobalOptions:
    """Test global setters."""

    def test_aspect_ratio_fails_fast(self, video_timeline):
        """Test invalid ratios raise when set, not at compile time."""
        with pytest.raises(InvalidAspectRatioError):
            video_timeline.set_aspect_ratio("wide")
        with pytest.raises(InvalidAspectRatioError):
            video_timeline.set_aspect_ratio("16:0")

    def test_last_write_wins(self, video_timeline):
        """Test setting an option twice keeps the last value."""
        timeline = video_timeline.set_frame_rate(24).set_frame_rate(60)
        assert timeline.global_options.frame_rate == 60

    def test_invalid_frame_rate(self, video_timeline):
        """Test frame rate must be positive."""
        with pytest.raises(ValidationError):
            video_timeline.set_frame_rate(0)

    def test_codec_setters(self, video_timeline):
        """Test codec setters build up one configuration."""
        timeline = (
            video_timeline.set_video_codec("libx265")
            .set_audio_codec("libopus")
            .set_hardware_acceleration("apple")
        )
        assert timeline.codec.video.codec == "h264_videotoolbox"
        assert timeline.codec.audio.codec == "libopus"
        assert timeline.codec.hardware_acceleration == HardwareAcceleration.VIDEOTOOLBOX


class TestDuration:
    """Test duration estimation and concatenation."""

    def test_empty(self, empty_timeline):
        """Test an empty timeline lasts 0 s."""
        assert empty_timeline.get_duration() == 0

    def test_defaults(self):
        """Test media defaults to 30 s and overlays to 5 s."""
        assert Timeline().add_video("a.mp4").get_duration() == 30
        assert Timeline().add_text("A", start_time=2).get_duration() == 7
        assert Timeline().add_image("a.png", duration="full").get_duration() == 5

    def test_explicit_duration_wins(self):
        """Test set_duration overrides the estimate."""
        assert Timeline().add_video("a.mp4").set_duration(12).get_duration() == 12

    def test_concat_shifts_layers(self, image_sequence):
        """Test concat appends layers offset by the first timeline's length."""
        outro = Timeline().add_text("The End", duration=2)
        joined = image_sequence.concat(outro)
        assert len(joined.layers) == 4
        assert joined.layers[-1].start_time == 9
        assert isinstance(joined.layers[-1], TextLayer)
        assert joined.get_duration() == 11


class TestRender:
    """Test render() and serialization."""

    def test_empty_render_raises(self, empty_timeline):
        """Test rendering nothing is an error."""
        with pytest.raises(EmptyCompositionError):
            empty_timeline.render("out.mp4")

    def test_empty_command_still_compiles(self, empty_timeline):
        """Test get_command on an empty timeline does not raise."""
        assert empty_timeline.get_command("out.mp4").endswith("-y out.mp4")

    def test_render_returns_command_and_logs(self, video_timeline, caplog):
        """Test render returns the command and logs it at INFO."""
        statuses = []
        with caplog.at_level(logging.INFO, logger="clipgraph"):
            command = video_timeline.render("out.mp4", on_status=statuses.append)
        assert command == video_timeline.get_command("out.mp4")
        assert statuses == ["compiling", "compiled"]
        assert any(command in record.getMessage() for record in caplog.records)

    def test_json_round_trip(self):
        """Test from_json(to_json()) compiles to the same command."""
        timeline = (
            Timeline()
            .add_video("in.mp4")
            .add_text(
                "It's live",
                position={"x": "50%", "y": "50%", "anchor": "center"},
                start_time=2,
                duration=3,
                font_size=36,
            )
            .add_image("logo.png", position="top-right", duration="full")
            .add_audio("music.mp3", volume=0.2, echo={"delay": 300, "decay": 0.4})
            .add_filter("hue", h=90)
            .set_aspect_ratio("1:1")
            .trim(1, 9)
            .set_hardware_acceleration("intel")
        )
        data = timeline.to_json()
        restored = Timeline.from_json(data)
        assert restored == timeline
        assert restored.get_command("out.mp4") == timeline.get_command("out.mp4")
