"""Core module for clipgraph."""

from .types import (
    StatusCb,
    LayerType,
    Anchor,
    PositionKeyword,
    GeometryContext,
    FilterKind,
    HardwareAcceleration,
    Quality,
    Easing,
    PanDirection,
)
from .numbers import fmt_num

__all__ = [
    "StatusCb",
    "LayerType",
    "Anchor",
    "PositionKeyword",
    "GeometryContext",
    "FilterKind",
    "HardwareAcceleration",
    "Quality",
    "Easing",
    "PanDirection",
    "fmt_num",
]
