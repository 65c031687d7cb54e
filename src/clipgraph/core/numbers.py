"""Number formatting for FFmpeg expressions."""

from typing import Union

Number = Union[int, float]

# Decimal places kept when printing floats; hides binary rounding noise
PRECISION = 6


def fmt_num(value: Union[Number, str]) -> str:
    """
    Render a number the way it should appear inside a filter expression.

    Floats are rounded to PRECISION decimal places, so ``0.1 + 0.2`` prints
    as ``0.3``. Integral floats drop their fractional part (``5.0`` -> ``"5"``)
    and strings pass through untouched.
    """
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float):
        value = round(value, PRECISION)
        if value.is_integer():
            return str(int(value))
    return str(value)
