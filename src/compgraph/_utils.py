"""Numeric helpers."""

import math


def round_value(value: float, precision: int) -> float:
    """Round to `precision` decimal places, with halves rounded away from zero.

    Unlike the built-in `round`, ties do not go to the even neighbour.
    NaN and infinities are returned unchanged.

    Example:
        >>> round_value(2.5, 0)
        3.0
        >>> round_value(-0.125, 2)
        -0.13

    """
    if not math.isfinite(value):
        return value
    factor = 10.0**precision
    return math.copysign(math.floor(abs(value) * factor + 0.5), value) / factor
