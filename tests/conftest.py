"""Shared test fixtures and configuration."""

import random
import pytest
from clipgraph.timeline import Timeline, set_default_context
from clipgraph.timeline.context import FFMPEG_ENV_VAR


@pytest.fixture(autouse=True)
def clean_context(monkeypatch):
    """Compile with a plain "ffmpeg" default context in every test."""
    monkeypatch.delenv(FFMPEG_ENV_VAR, raising=False)
    set_default_context(None)
    yield
    set_default_context(None)


@pytest.fixture
def empty_timeline():
    """Timeline without layers."""
    return Timeline()


@pytest.fixture
def video_timeline():
    """Timeline with a single base video."""
    return Timeline().add_video("input.mp4")


@pytest.fixture
def image_sequence():
    """Three back-to-back images, 3 s each."""
    return (
        Timeline()
        .add_image("a.jpg", start_time=0, duration=3)
        .add_image("b.jpg", start_time=3, duration=3)
        .add_image("c.jpg", start_time=6, duration=3)
    )


@pytest.fixture
def seeded_rng():
    """Deterministic random source for Ken Burns tests."""
    return random.Random(1234)
