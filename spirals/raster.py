"""Half-pixel line rasterizer and range helpers."""
from __future__ import annotations

import math
from typing import List, Tuple

RGB = Tuple[int, int, int]
Vec2 = Tuple[float, float]
Pixel = Tuple[int, int, RGB]


def round_half_up(v: float) -> int:
    # round() would send 0.5 to 0 and 2.5 to 2
    return int(math.floor(v + 0.5))


def in_range(num: float, lo: float, hi: float) -> bool:
    """True iff lo <= num < hi."""
    return lo <= num < hi


def sign(x: float) -> int:
    if x > 0:
        return 1
    if x < 0:
        return -1
    return 0


def rasterize_line(p1: Vec2, p2: Vec2, color: RGB, step: float = 0.5) -> List[Pixel]:
    """
    Walk from p1 to p2 in ``step`` increments along the axis with the larger
    delta, returning the rounded pixels covered.

    The walk is half-open: samples run from the lower end of the major axis
    while strictly below the upper end, so the far endpoint itself is never
    emitted. The minor coordinate is advanced before each sample is taken.
    """
    out: List[Pixel] = []
    if abs(p1[1] - p2[1]) < abs(p1[0] - p2[0]):
        (x1, y1), (x2, y2) = (p2, p1) if p2[0] < p1[0] else (p1, p2)
        ystep = step * (y1 - y2) / (x1 - x2)
        y = y1
        x = x1
        while x < x2:
            y += ystep
            out.append((round_half_up(x), round_half_up(y), color))
            x += step
    else:
        (x1, y1), (x2, y2) = (p2, p1) if p2[1] < p1[1] else (p1, p2)
        if y1 == y2:
            return out
        xstep = step * (x1 - x2) / (y1 - y2)
        x = x1
        y = y1
        while y < y2:
            x += xstep
            out.append((round_half_up(x), round_half_up(y), color))
            y += step
    return out
