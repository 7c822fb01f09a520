"""2D point helpers shared by the geometry and smoothing code.

Points are plain ``(x, y)`` float tuples so they hash, compare exactly
and serialize without conversion.
"""

import math
from typing import Optional, Sequence, Tuple

from src.core.constants import GEOMETRY_EPSILON

Point = Tuple[float, float]


def add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Point, b: Point) -> Point:
    return (a[0] - b[0], a[1] - b[1])


def scale(a: Point, factor: float) -> Point:
    return (a[0] * factor, a[1] * factor)


def length(a: Point) -> float:
    return math.hypot(a[0], a[1])


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def lerp(a: Point, b: Point, t: float) -> Point:
    """Linear interpolation from a (t=0) to b (t=1)."""
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) * 0.5, (a[1] + b[1]) * 0.5)


def normalize(a: Point) -> Optional[Point]:
    """
    Unit vector in the direction of a.

    Returns:
        The normalized vector, or None for a (near) zero vector.
    """
    n = length(a)
    if n < GEOMETRY_EPSILON:
        return None
    return (a[0] / n, a[1] / n)


def dot(a: Point, b: Point) -> float:
    return a[0] * b[0] + a[1] * b[1]


def angle_between(a: Point, b: Point) -> float:
    """Unsigned angle in degrees between two unit vectors."""
    cos_theta = max(-1.0, min(1.0, dot(a, b)))
    return math.degrees(math.acos(cos_theta))


def project_onto_segment(point: Point, seg_a: Point, seg_b: Point) -> Optional[Point]:
    """
    Closest point to ``point`` on segment ``seg_a``-``seg_b``.

    Returns:
        Projected point clamped to the segment, or None when the segment
        is degenerate (zero length).
    """
    ab = sub(seg_b, seg_a)
    denom = dot(ab, ab)
    if denom < GEOMETRY_EPSILON:
        return None
    t = dot(sub(point, seg_a), ab) / denom
    t = max(0.0, min(1.0, t))
    return lerp(seg_a, seg_b, t)


def polyline_length(points: Sequence[Point]) -> float:
    """Sum of Euclidean segment lengths."""
    return sum(distance(points[i], points[i + 1]) for i in range(len(points) - 1))
