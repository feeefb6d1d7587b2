"""Caller-side checks for crop quadrilaterals (TL, TR, BR, BL order)."""
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

import math

from docscan.errors import QuadError

from .homography import Point

MIN_QUAD_AREA = 100.0
MIN_OUTPUT_SIDE = 10
MAX_OUTPUT_SIDE = 10000


def parse_corners(raw: Iterable[object]) -> List[Point]:
    """Accept ``{"x": .., "y": ..}`` mappings or ``(x, y)`` pairs."""
    corners: List[Point] = []
    for item in raw:
        if isinstance(item, dict):
            corners.append((float(item["x"]), float(item["y"])))
        else:
            x, y = item  # type: ignore[misc]
            corners.append((float(x), float(y)))
    return corners


def _ccw(a: Point, b: Point, c: Point) -> bool:
    return (c[1] - a[1]) * (b[0] - a[0]) > (b[1] - a[1]) * (c[0] - a[0])


def _segments_intersect(p1: Point, p2: Point, p3: Point, p4: Point) -> bool:
    return _ccw(p1, p3, p4) != _ccw(p2, p3, p4) and _ccw(p1, p2, p3) != _ccw(p1, p2, p4)


def quad_area(corners: Sequence[Point]) -> float:
    p0, p1, p2, p3 = corners
    return abs(
        p0[0] * (p1[1] - p3[1])
        + p1[0] * (p2[1] - p0[1])
        + p2[0] * (p3[1] - p1[1])
        + p3[0] * (p0[1] - p2[1])
    ) / 2.0


def is_valid_quad(corners: Sequence[Point], min_area: float = MIN_QUAD_AREA) -> bool:
    """True when the quad does not cross itself and encloses ``min_area``."""
    if corners is None or len(corners) != 4:
        return False
    p0, p1, p2, p3 = corners
    if _segments_intersect(p0, p1, p2, p3):
        return False
    if _segments_intersect(p1, p2, p3, p0):
        return False
    return quad_area(corners) >= min_area


def output_size_for_quad(corners: Sequence[Point]) -> Tuple[int, int]:
    """Output rectangle that keeps the longer of each pair of opposite edges."""
    tl, tr, br, bl = corners
    top = math.dist(tl, tr)
    bottom = math.dist(bl, br)
    left = math.dist(tl, bl)
    right = math.dist(tr, br)
    width = round(max(top, bottom))
    height = round(max(left, right))
    if width < MIN_OUTPUT_SIDE or height < MIN_OUTPUT_SIDE:
        raise QuadError(f"Crop area too small ({width}x{height})")
    if width > MAX_OUTPUT_SIDE or height > MAX_OUTPUT_SIDE:
        raise QuadError(f"Crop area too large ({width}x{height})")
    return width, height
