"""
Coordinate mapping and small 2-D helpers.
"""

import math
from typing import Tuple

from .landmarks import Landmark

Point = Tuple[float, float]


def map_range(value: float, in_lo: float, in_hi: float, out_lo: float, out_hi: float, clamp: bool = False) -> float:
    """
    Linearly re-map a value from one range to another.

    Args:
        value: Input value
        in_lo, in_hi: Source range
        out_lo, out_hi: Target range (may be descending)
        clamp: Constrain the result to the target range

    Returns:
        Re-mapped value
    """
    out = out_lo + (value - in_lo) * (out_hi - out_lo) / (in_hi - in_lo)
    if clamp:
        lo, hi = min(out_lo, out_hi), max(out_lo, out_hi)
        out = max(lo, min(hi, out))
    return out


def midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


class CoordinateMapper:
    """
    Maps normalized landmarks into display space.

    x is mirrored ([0, 1] -> [width, 0]) so the canvas reads like a self-view
    camera; y maps [0, 1] -> [0, height].
    """

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height

    def to_canvas(self, landmark: Landmark) -> Point:
        return (
            map_range(landmark.x, 0.0, 1.0, self.width, 0.0),
            map_range(landmark.y, 0.0, 1.0, 0.0, self.height),
        )
