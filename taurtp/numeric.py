"""Small integer and floating point helpers."""

from __future__ import annotations

import sys


def align(value: int, alignment: int) -> int:
    """Round ``value`` up to a multiple of ``alignment``."""
    return alignment * ((value + alignment - 1) // alignment)


def div_ceil(a: int, b: int) -> int:
    """Integer division rounding up."""
    return (a + b - 1) // b


def near(a: float, b: float) -> bool:
    """Tell whether two floats differ by less than machine epsilon."""
    return abs(a - b) < sys.float_info.epsilon