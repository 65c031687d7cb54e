"""Tests for audio chains and mixing."""

from clipgraph.timeline.audio import AudioMixGraphBuilder, track_filters
from clipgraph.timeline.labels import InputMap, StreamLabels
from clipgraph.timeline.models import (
    AudioLayer,
    AudioOptions,
    EchoOptions,
    ReverbOptions,
)


def audio(source="music.mp3", **kwargs):
    options = kwargs.pop("options", {})
    return AudioLayer(source=source, options=AudioOptions(**options), **kwargs)


class TestTrackFilters:
    """Test per-track stage ordering."""

    def test_no_options(self):
        """Test an unconfigured track has no stages."""
        assert track_filters(audio()) == []

    def test_delay_rounded(self):
        """Test a fractional start gives a clean millisecond delay."""
        assert track_filters(audio(start_time=1.1)) == ["adelay=1100|1100"]

    def test_full_chain_order(self):
        """Test every stage appears in the fixed order."""
        layer = audio(
            start_time=2,
            duration=10,
            options={
                "trim_start": 1,
                "trim_end": 20,
                "volume": 0.5,
                "fade_in": 1,
                "fade_out": 2,
                "pitch": 1.2,
                "tempo": 1.1,
                "lowpass": 8000,
                "highpass": 200,
                "echo": EchoOptions(delay=500, decay=0.3),
                "reverb": ReverbOptions(),
                "loop": True,
            },
        )
        assert track_filters(layer) == [
            "atrim=start=1,end=20",
            "volume=0.5",
            "afade=t=in:st=0:d=1",
            "afade=t=out:st=8:d=2",
            "asetrate=44100*1.2,aresample=44100",
            "atempo=1.1",
            "lowpass=f=8000",
            "highpass=f=200",
            "aecho=0.8:0.9:500:0.3",
            "aecho=0.8:0.88:60:0.4",
            "adelay=2000|2000",
            "atrim=duration=10",
            "aloop=loop=-1:size=44100*10",
        ]

    def test_fade_out_needs_duration(self):
        """Test fade-out is skipped when the track has no known end."""
        assert track_filters(audio(options={"fade_out": 2})) == []

    def test_loop_needs_duration(self):
        """Test loop is skipped without a duration."""
        assert track_filters(audio(options={"loop": True})) == []

    def test_fractional_delay(self):
        """Test adelay in milliseconds for fractional starts."""
        assert track_filters(audio(start_time=1.5)) == ["adelay=1500|1500"]


class TestAudioMix:
    """Test mixing into the final audio stream."""

    def build(self, layers, base_audio=None):
        inputs = InputMap.from_layers(layers)
        labels = StreamLabels()
        fragments = AudioMixGraphBuilder(inputs, labels).build(layers, base_audio)
        return fragments, labels

    def test_no_audio(self):
        """Test nothing is emitted without audio."""
        fragments, labels = self.build([])
        assert fragments == []
        assert labels.audio is None

    def test_single_unprocessed_stream(self):
        """Test a lone untouched track is aliased without any fragment."""
        fragments, labels = self.build([audio()])
        assert fragments == []
        assert labels.audio == "0:a"

    def test_single_processed_stream(self):
        """Test a lone processed track is aliased without a mix node."""
        fragments, labels = self.build([audio(options={"volume": 0.3})])
        assert fragments == ["[0:a]volume=0.3[audio0]"]
        assert labels.audio == "audio0"

    def test_mix_arity(self):
        """Test N streams produce one amix with inputs=N."""
        layers = [audio("a.mp3"), audio("b.mp3", options={"volume": 0.2})]
        fragments, labels = self.build(layers, base_audio="2:a")
        assert fragments == [
            "[1:a]volume=0.2[audio0]",
            "[2:a][0:a][audio0]amix=inputs=3:duration=longest[aout]",
        ]
        assert labels.audio == "aout"

    def test_base_audio_only(self):
        """Test base video audio alone is aliased directly."""
        fragments, labels = self.build([], base_audio="0:a")
        assert fragments == []
        assert labels.audio == "0:a"
