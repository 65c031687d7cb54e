"""Filter fragment builders for text, image overlay and generic filter layers."""

from typing import Any, Dict, List, Optional, Union
from ..core.numbers import fmt_num
from ..core.types import FilterKind, GeometryContext
from .geometry import resolve_position
from .labels import bracket
from .models import FilterLayer, ImageLayer, TextLayer

DEFAULT_FONT_SIZE = 24
DEFAULT_FONT_COLOR = "white"
DEFAULT_BOX_BORDER = 5

# colorchannelmixer coefficients in FFmpeg's option order
CHANNEL_MIXER_KEYS = ("rr", "rg", "rb", "gr", "gg", "gb", "br", "bg", "bb")


def escape_text(content: str) -> str:
    """Escape single quotes for a single-quoted drawtext value."""
    return content.replace("'", "'\\''")


def time_gate(layer: Union[TextLayer, ImageLayer]) -> Optional[str]:
    """
    Build the ``enable`` expression limiting a layer to its interval.

    Returns None for layers that were never timed, so they stay visible for
    the whole composition.
    """
    if not (layer.timed or layer.start_time > 0):
        return None

    start = fmt_num(layer.start_time)
    if layer.duration is None:
        # Open-ended from t=0 needs no gate
        return f"enable='gte(t,{start})'" if layer.start_time > 0 else None
    end = fmt_num(layer.start_time + layer.duration)
    return f"enable='between(t,{start},{end})'"


def text_filter(layer: TextLayer, input_label: str, output_label: str) -> str:
    """
    Build a drawtext fragment for a text layer.

    Args:
        layer: Text layer
        input_label: Current video label
        output_label: Label for the fragment's output

    Returns:
        Filter fragment ``[in]drawtext=...[out]``
    """
    style = layer.options.style
    x, y = resolve_position(layer.options.position, GeometryContext.TEXT)

    parts: List[str] = [
        f"text='{escape_text(layer.content)}'",
        f"x={x}",
        f"y={y}",
        f"fontsize={style.font_size or DEFAULT_FONT_SIZE}",
    ]
    if style.font_family:
        parts.append(f"fontfile='{style.font_family}'")
    parts.append(f"fontcolor={style.color or DEFAULT_FONT_COLOR}")

    # Background box
    box_color = style.background_color or (
        style.background.color if style.background else None
    )
    if box_color:
        parts.append(f"box=1:boxcolor={box_color}")
    if style.background and style.background.padding:
        parts.append(f"boxborderw={style.background.padding}")
    elif style.background_color:
        parts.append(f"boxborderw={DEFAULT_BOX_BORDER}")

    # Stroke
    if style.stroke_color:
        parts.append(f"bordercolor={style.stroke_color}")
    if style.stroke_width:
        parts.append(f"borderw={style.stroke_width}")

    # Shadow
    if style.shadow_color:
        parts.append(f"shadowcolor={style.shadow_color}")
    if style.shadow_offset_x:
        parts.append(f"shadowx={style.shadow_offset_x}")
    if style.shadow_offset_y:
        parts.append(f"shadowy={style.shadow_offset_y}")

    if style.font_style == "italic":
        parts.append("italic=1")
    if style.text_align in ("center", "right"):
        parts.append(f"alignment={style.text_align}")

    gate = time_gate(layer)
    if gate:
        parts.append(gate)

    return f"{bracket(input_label)}drawtext={':'.join(parts)}{bracket(output_label)}"


def image_overlay(
    layer: ImageLayer, input_label: str, image_stream: str, output_label: str
) -> str:
    """
    Build an overlay fragment compositing an image input onto the video.

    Args:
        layer: Image layer
        input_label: Current video label (main input)
        image_stream: Input stream of the image, e.g. ``2:v``
        output_label: Label for the fragment's output

    Returns:
        Filter fragment ``[main][img]overlay=x:y[out]``
    """
    x, y = resolve_position(layer.options.position, GeometryContext.OVERLAY)
    params = f"{x}:{y}"

    gate = time_gate(layer)
    if gate:
        params += f":{gate}"

    return (
        f"{bracket(input_label)}{bracket(image_stream)}"
        f"overlay={params}{bracket(output_label)}"
    )


def _options(params: Dict[str, Any], keys, quoted=()) -> List[str]:
    """Render present keys as ``key=value`` in the given order."""
    out: List[str] = []
    for key in keys:
        value = params.get(key)
        if value is None or value == "":
            continue
        rendered = fmt_num(value)
        out.append(f"{key}='{rendered}'" if key in quoted else f"{key}={rendered}")
    return out


def filter_expression(name: str, params: Dict[str, Any]) -> str:
    """
    Render a generic filter from its name and parameter bag.

    Known kinds use a fixed parameter template; unknown names are emitted
    verbatim, with any parameters appended as ``key=value`` pairs.
    """
    kind = FilterKind.from_name(name)

    if kind == FilterKind.BLUR:
        return f"boxblur={fmt_num(params.get('radius', 5))}"

    elif kind == FilterKind.BRIGHTNESS:
        return f"eq=brightness={fmt_num(params.get('value', 0))}"

    elif kind == FilterKind.CONTRAST:
        return f"eq=contrast={fmt_num(params.get('value', 1))}"

    elif kind == FilterKind.SATURATION:
        return f"eq=saturation={fmt_num(params.get('value', 1))}"

    elif kind == FilterKind.ZOOMPAN:
        if params.get("raw"):
            return f"zoompan={params['raw']}"
        opts = _options(params, ("z", "x", "y"), quoted=("z", "x", "y"))
        opts += _options(params, ("d", "s", "fps"))
        return f"zoompan={':'.join(opts)}"

    elif kind == FilterKind.COLORCHANNELMIXER:
        opts = _options(params, CHANNEL_MIXER_KEYS)
        return f"colorchannelmixer={':'.join(opts)}"

    elif kind == FilterKind.VIGNETTE:
        opts = _options(params, ("angle",))
        return f"vignette={':'.join(opts)}" if opts else "vignette"

    elif kind == FilterKind.PASSTHROUGH:
        if not params:
            return name
        opts = _options(params, params.keys())
        return f"{name}={':'.join(opts)}"

    else:
        raise ValueError(f"Unknown filter kind: {kind}")


def generic_filter(layer: FilterLayer, input_label: str, output_label: str) -> str:
    """Build a fragment applying a filter layer to the current video."""
    expr = filter_expression(layer.content, layer.options)
    return f"{bracket(input_label)}{expr}{bracket(output_label)}"


def is_zoompan(layer: FilterLayer) -> bool:
    """True for zoompan filter layers."""
    return FilterKind.from_name(layer.content) == FilterKind.ZOOMPAN
