"""
Resolution module for truncating decimal degrees to a number of digits.

Resolution r means fractional digits, so a value truncated at resolution r
is trunc(value * 10^r) / 10^r.

Truncation never rounds: it drops digits toward zero, and keeps whatever
the binary float representation produces along the way (47.1234 at
resolution 4 becomes 47.1233).
"""

import math
from decimal import Decimal
from typing import List, Union

Number = Union[int, float]

DEFAULT_MAX_RESOLUTION = 10


def _shortest_decimal(value: Number) -> Decimal:
    """Decimal built from the shortest round-trip repr of value."""
    return Decimal(repr(float(value)))


def calculate_resolution(value: Number, max_resolution: int = DEFAULT_MAX_RESOLUTION) -> int:
    """
    Calculate the number of fractional digits to tag for a value.

    Args:
        value: Latitude or longitude in degrees
        max_resolution: Upper bound on the returned resolution

    Returns:
        1 for integral values, otherwise the count of digits after the
        decimal point capped at max_resolution
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot calculate resolution of {value!r}")

    if float(value).is_integer():
        return 1

    exponent = _shortest_decimal(value).as_tuple().exponent
    return min(-exponent, max_resolution)


def truncate_to_resolution(value: Number, resolution: int) -> float:
    """
    Truncate a value to the given number of fractional digits.

    Args:
        value: Value in degrees
        resolution: Number of fractional digits to keep

    Returns:
        Truncated value (toward zero)
    """
    factor = 10 ** resolution
    return math.trunc(value * factor) / factor


def resolution_ladder(value: Number, max_resolution: int = DEFAULT_MAX_RESOLUTION) -> List[float]:
    """
    Truncate a value at every resolution from its own down to 1.

    Args:
        value: Value in degrees
        max_resolution: Cap on the starting resolution

    Returns:
        Truncated values, most precise first
    """
    top = calculate_resolution(value, max_resolution)
    return [truncate_to_resolution(value, r) for r in range(top, 0, -1)]


def format_degrees(value: Number) -> str:
    """
    Format a number of degrees as tag text.

    Integral values print without a fractional part ("47", not "47.0"),
    everything else as the shortest round-trip decimal, never in
    exponent notation.
    """
    if isinstance(value, int):
        return str(value)
    if value.is_integer():
        return str(int(value))
    return format(_shortest_decimal(value), "f")
