"""Pan/zoom and Ken Burns helpers built on the zoompan filter."""

import math
import random
from pydantic import BaseModel
from typing import Optional, Tuple
from ..core.numbers import fmt_num
from ..core.types import Easing, PanDirection
from .timeline import Timeline, add_filter

ZOOMPAN_FPS = 25
DEFAULT_RESOLUTION = (1920, 1080)


class Rect(BaseModel):
    """Visible region of the source frame, in pixels."""

    x: float
    y: float
    width: float
    height: float

    model_config = {"frozen": True}

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


def _num(value: float) -> str:
    return fmt_num(round(value, 4))


def easing_expression(easing: Easing, frames: int) -> str:
    """Progress 0..1 over `frames` output frames, shaped by `easing`."""
    p = f"(on/{frames})"
    if easing == Easing.EASE_IN:
        return f"{p}*{p}"
    elif easing == Easing.EASE_OUT:
        return f"1-pow(1-{p},2)"
    elif easing == Easing.EASE_IN_OUT:
        return f"if(lt({p},0.5),2*pow({p},2),1-2*pow(1-{p},2))"
    return p


def calculate_zoom_pan(
    start: Rect,
    end: Rect,
    duration: float,
    easing: Easing = Easing.LINEAR,
    resolution: Tuple[int, int] = DEFAULT_RESOLUTION,
) -> str:
    """
    Build zoompan options moving the view from `start` to `end`.

    Args:
        start: Region visible on the first frame
        end: Region visible on the last frame
        duration: Effect length in seconds
        easing: Movement curve
        resolution: Source and output size (width, height)

    Returns:
        Option string for ``zoompan=`` (z, x, y, d, s, fps)
    """
    width, height = resolution
    start_zoom = min(width / start.width, height / start.height)
    end_zoom = min(width / end.width, height / end.height)

    (sx, sy), (ex, ey) = start.center, end.center
    frames = math.floor(duration * ZOOMPAN_FPS)
    progress = easing_expression(Easing(easing), frames)

    zoom = f"{_num(start_zoom)}+{_num(end_zoom - start_zoom)}*{progress}"
    x = f"(iw/2)-(iw/zoom/2)+{_num(ex - sx)}*{progress}"
    y = f"(ih/2)-(ih/zoom/2)+{_num(ey - sy)}*{progress}"

    return (
        f"z='{zoom}':x='{x}':y='{y}'"
        f":d={frames}:s={width}x{height}:fps={ZOOMPAN_FPS}"
    )


def generate_ken_burns(
    start_zoom: float = 1.0,
    end_zoom: float = 1.3,
    direction: PanDirection = PanDirection.RANDOM,
    resolution: Tuple[int, int] = DEFAULT_RESOLUTION,
    rng: Optional[random.Random] = None,
) -> Tuple[Rect, Rect]:
    """
    Start and end regions for a Ken Burns move.

    Args:
        start_zoom: Zoom factor on the first frame
        end_zoom: Zoom factor on the last frame
        direction: Camera path; RANDOM draws both regions from `rng`
        resolution: Source size (width, height)
        rng: Random source for RANDOM; a fresh unseeded one when omitted

    Returns:
        (start, end) regions
    """
    width, height = resolution
    sw, sh = width / start_zoom, height / start_zoom
    ew, eh = width / end_zoom, height / end_zoom
    direction = PanDirection(direction)

    if direction == PanDirection.CENTER_OUT:
        start = Rect(x=(width - sw) / 2, y=(height - sh) / 2, width=sw, height=sh)
        end = Rect(x=(width - ew) / 2, y=(height - eh) / 2, width=ew, height=eh)
    elif direction == PanDirection.TOP_BOTTOM:
        start = Rect(x=(width - sw) / 2, y=0, width=sw, height=sh)
        end = Rect(x=(width - ew) / 2, y=height - eh, width=ew, height=eh)
    elif direction == PanDirection.LEFT_RIGHT:
        start = Rect(x=0, y=(height - sh) / 2, width=sw, height=sh)
        end = Rect(x=width - ew, y=(height - eh) / 2, width=ew, height=eh)
    elif direction == PanDirection.DIAGONAL:
        start = Rect(x=0, y=0, width=sw, height=sh)
        end = Rect(x=width - ew, y=height - eh, width=ew, height=eh)
    else:
        rng = rng or random.Random()
        start = Rect(
            x=rng.random() * (width - sw),
            y=rng.random() * (height - sh),
            width=sw,
            height=sh,
        )
        end = Rect(
            x=rng.random() * (width - ew),
            y=rng.random() * (height - eh),
            width=ew,
            height=eh,
        )
    return start, end


def add_pan_zoom(
    timeline: Timeline,
    start: Rect,
    end: Rect,
    duration: float,
    easing: Easing = Easing.LINEAR,
    resolution: Tuple[int, int] = DEFAULT_RESOLUTION,
) -> Timeline:
    """Append a zoompan filter moving between two regions."""
    expr = calculate_zoom_pan(start, end, duration, easing, resolution)
    return add_filter(timeline, "zoompan", raw=expr)


def add_ken_burns(
    timeline: Timeline,
    duration: float,
    start_zoom: float = 1.0,
    end_zoom: float = 1.3,
    direction: PanDirection = PanDirection.RANDOM,
    easing: Easing = Easing.LINEAR,
    resolution: Tuple[int, int] = DEFAULT_RESOLUTION,
    rng: Optional[random.Random] = None,
) -> Timeline:
    """
    Append a Ken Burns move (slow zoom plus pan).

    Pass a seeded `rng` to make the RANDOM direction reproducible.
    """
    start, end = generate_ken_burns(
        start_zoom, end_zoom, direction, resolution, rng
    )
    return add_pan_zoom(timeline, start, end, duration, easing, resolution)


def zoom_in(
    timeline: Timeline,
    zoom: float = 1.5,
    duration: float = 5.0,
    easing: Easing = Easing.EASE_IN_OUT,
) -> Timeline:
    """Zoom from the full frame into the centre."""
    return add_ken_burns(
        timeline, duration, 1.0, zoom, PanDirection.CENTER_OUT, easing
    )


def zoom_out(
    timeline: Timeline,
    zoom: float = 1.5,
    duration: float = 5.0,
    easing: Easing = Easing.EASE_IN_OUT,
) -> Timeline:
    """Zoom from the centre back out to the full frame."""
    return add_ken_burns(
        timeline, duration, zoom, 1.0, PanDirection.CENTER_OUT, easing
    )


def pan(
    timeline: Timeline,
    direction: str = "right",
    duration: float = 5.0,
    easing: Easing = Easing.LINEAR,
    zoom: float = 1.2,
) -> Timeline:
    """
    Pan across the frame at a constant zoom.

    "left"/"right" pan horizontally, "up"/"down" vertically. `zoom` must be
    above 1 so there is room to move.
    """
    if direction in ("up", "down"):
        path = PanDirection.TOP_BOTTOM
    else:
        path = PanDirection.LEFT_RIGHT
    start, end = generate_ken_burns(zoom, zoom, path)
    if direction in ("left", "up"):
        start, end = end, start
    return add_pan_zoom(timeline, start, end, duration, easing)
