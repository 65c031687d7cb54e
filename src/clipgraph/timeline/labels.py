"""Input indexing and stream label bookkeeping for filter graph builds."""

from typing import Dict, List, Optional, Sequence, Set
from .models import ImageLayer, VideoLayer


class InputMap:
    """Stable mapping from source path to FFmpeg input index."""

    def __init__(self, sources: Sequence[str]):
        """
        Initialize input map.

        Args:
            sources: Source paths in layer order; repeats share one index
        """
        self._index: Dict[str, int] = {}
        for source in sources:
            if source not in self._index:
                self._index[source] = len(self._index)

    @classmethod
    def from_layers(cls, layers: Sequence[object]) -> "InputMap":
        """Build the map from every layer that carries a source."""
        return cls(
            [layer.source for layer in layers if getattr(layer, "source", None)]
        )

    @property
    def sources(self) -> List[str]:
        """Unique sources in first-appearance order."""
        return list(self._index)

    def index_of(self, source: str) -> int:
        """Input index for a source path."""
        return self._index[source]

    def video(self, source: str) -> str:
        """Input video stream specifier, e.g. ``1:v``."""
        return f"{self._index[source]}:v"

    def audio(self, source: str) -> str:
        """Input audio stream specifier, e.g. ``1:a``."""
        return f"{self._index[source]}:a"

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, source: str) -> bool:
        return source in self._index


def is_input_stream(label: str) -> bool:
    """True for ``<index>:<type>`` specifiers, False for synthetic labels."""
    head, sep, _ = label.partition(":")
    return bool(sep) and head.isdigit()


class StreamLabels:
    """
    Current video/audio stream registers threaded through one compile.

    Labels are stored without brackets: input streams as ``0:v`` and
    synthetic labels as plain names (``scaled``, ``text0``).
    """

    def __init__(self, video: Optional[str] = None, audio: Optional[str] = None):
        self.video = video
        self.audio = audio
        self._issued: Set[str] = set()
        self._counters: Dict[str, int] = {}

    @classmethod
    def for_layers(cls, layers: Sequence[object], inputs: InputMap) -> "StreamLabels":
        """
        Initialize the video register from the base plate.

        The base plate is the first video layer; without video layers the
        first image layer is used instead (image-as-base mode).
        """
        base = base_layer(layers)
        return cls(video=inputs.video(base.source) if base else None)

    def next(self, prefix: str) -> str:
        """Allocate the next unused label for a prefix (``text0``, ``text1``...)."""
        index = self._counters.get(prefix, 0)
        label = f"{prefix}{index}"
        while label in self._issued:
            index += 1
            label = f"{prefix}{index}"
        self._counters[prefix] = index + 1
        self._issued.add(label)
        return label

    def fixed(self, label: str) -> str:
        """Claim a named label (``aspect``, ``aout``) for a single use."""
        if label in self._issued:
            return self.next(label)
        self._issued.add(label)
        return label

    def advance_video(self, label: str) -> None:
        """Make `label` the current video stream."""
        self.video = label

    def advance_audio(self, label: str) -> None:
        """Make `label` the current audio stream."""
        self.audio = label

    @property
    def issued(self) -> Set[str]:
        """Every synthetic label handed out so far."""
        return set(self._issued)


def bracket(label: str) -> str:
    """Wrap a label for use as a filter pad: ``0:v`` -> ``[0:v]``."""
    return f"[{label}]"


def base_layer(layers: Sequence[object]):
    """First video layer, else first image layer, else None."""
    for layer in layers:
        if isinstance(layer, VideoLayer):
            return layer
    for layer in layers:
        if isinstance(layer, ImageLayer):
            return layer
    return None
