"""Position resolution into FFmpeg coordinate expressions."""

from typing import Dict, Optional, Tuple, Union
from ..core.numbers import fmt_num
from ..core.types import Anchor, GeometryContext, PositionKeyword
from .models import Position, PositionSpec


class Namespace:
    """Variable names and keyword margin for one geometry context."""

    def __init__(
        self, frame_w: str, frame_h: str, elem_w: str, elem_h: str, margin: int
    ):
        self.frame_w = frame_w
        self.frame_h = frame_h
        self.elem_w = elem_w
        self.elem_h = elem_h
        self.margin = margin


NAMESPACES: Dict[GeometryContext, Namespace] = {
    GeometryContext.TEXT: Namespace("w", "h", "text_w", "text_h", 50),
    GeometryContext.OVERLAY: Namespace(
        "main_w", "main_h", "overlay_w", "overlay_h", 20
    ),
}

# Fraction of the element's own size subtracted from (x, y) for each anchor
ANCHOR_OFFSETS: Dict[Anchor, Tuple[float, float]] = {
    Anchor.TOP_LEFT: (0, 0),
    Anchor.TOP_CENTER: (0.5, 0),
    Anchor.TOP_RIGHT: (1, 0),
    Anchor.CENTER_LEFT: (0, 0.5),
    Anchor.CENTER: (0.5, 0.5),
    Anchor.CENTER_RIGHT: (1, 0.5),
    Anchor.BOTTOM_LEFT: (0, 1),
    Anchor.BOTTOM_CENTER: (0.5, 1),
    Anchor.BOTTOM_RIGHT: (1, 1),
}


def namespace(context: GeometryContext) -> Namespace:
    """Variable namespace for a context."""
    return NAMESPACES[context]


def resolve_coordinate(
    value: Union[int, float, str], frame_var: str
) -> str:
    """
    Convert a single coordinate into an expression.

    Percent strings become ``(<frame_var>*<fraction>)``, ``px`` suffixes are
    dropped and anything else is emitted as-is.
    """
    if isinstance(value, str):
        text = value.strip()
        if "%" in text:
            try:
                percent = float(text.replace("%", "")) / 100
            except ValueError:
                # Left for FFmpeg to reject
                return text
            return f"({frame_var}*{fmt_num(percent)})"
        if text.endswith("px"):
            return text[:-2]
        return text
    return fmt_num(value)


def apply_anchor(
    x: str, y: str, anchor: Optional[Anchor], ns: Namespace
) -> Tuple[str, str]:
    """Shift (x, y) so that `anchor` of the element lands on the point."""
    if anchor is None:
        return x, y

    fx, fy = ANCHOR_OFFSETS[anchor]
    if fx == 0.5:
        x = f"({x}-({ns.elem_w}/2))"
    elif fx == 1:
        x = f"({x}-{ns.elem_w})"
    if fy == 0.5:
        y = f"({y}-({ns.elem_h}/2))"
    elif fy == 1:
        y = f"({y}-{ns.elem_h})"
    return x, y


def keyword_position(
    keyword: Union[PositionKeyword, str], context: GeometryContext
) -> Tuple[str, str]:
    """
    Expressions for a named placement, inset by the context margin.

    Unrecognised keywords centre text and put overlays at the top-left margin.
    """
    ns = namespace(context)
    m = ns.margin
    centered_x = f"({ns.frame_w}-{ns.elem_w})/2"
    right_x = f"{ns.frame_w}-{ns.elem_w}-{m}"
    bottom_y = f"{ns.frame_h}-{ns.elem_h}-{m}"

    if keyword == PositionKeyword.CENTER:
        return centered_x, f"({ns.frame_h}-{ns.elem_h})/2"
    elif keyword == PositionKeyword.TOP:
        return centered_x, str(m)
    elif keyword == PositionKeyword.BOTTOM:
        return centered_x, bottom_y
    elif keyword == PositionKeyword.TOP_LEFT:
        return str(m), str(m)
    elif keyword == PositionKeyword.TOP_RIGHT:
        return right_x, str(m)
    elif keyword == PositionKeyword.BOTTOM_LEFT:
        return str(m), bottom_y
    elif keyword == PositionKeyword.BOTTOM_RIGHT:
        return right_x, bottom_y
    elif context == GeometryContext.TEXT:
        return centered_x, f"({ns.frame_h}-{ns.elem_h})/2"
    else:
        return str(m), str(m)


def resolve_position(
    position: Optional[Position], context: GeometryContext
) -> Tuple[str, str]:
    """
    Resolve a position into ``(x_expr, y_expr)`` for the given context.

    Args:
        position: Keyword, PositionSpec, unrecognised keyword string or None
        context: TEXT for drawtext, OVERLAY for overlay

    Returns:
        Tuple of expression strings, evaluated by FFmpeg at runtime
    """
    ns = namespace(context)

    if position is None:
        # drawtext centres by default, overlay starts at the origin
        if context == GeometryContext.TEXT:
            return keyword_position(PositionKeyword.CENTER, context)
        return "0", "0"

    if isinstance(position, (PositionKeyword, str)):
        return keyword_position(position, context)

    if isinstance(position, PositionSpec):
        x = resolve_coordinate(position.x, ns.frame_w)
        y = resolve_coordinate(position.y, ns.frame_h)
        return apply_anchor(x, y, position.anchor, ns)

    raise TypeError(f"Unsupported position type: {type(position).__name__}")
