"""Curve smoothing for paths and boundary contours.

Provides Chaikin corner cutting (never overshoots, used for contours) and
Catmull-Rom splines (interpolating, used for tightened paths), plus the
SmoothCurve value type that execution walks along.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import List, Optional, Sequence, Tuple

import numpy as np

from src.core.config import CurveMethod
from src.core.constants import DEFAULT_SMOOTHING_ITERATIONS, GEOMETRY_EPSILON

from .vector import Point, normalize, sub


def _to_points(array: np.ndarray) -> List[Point]:
    return [(float(x), float(y)) for x, y in array]


def _strip_closing_point(points: Sequence[Point]) -> List[Point]:
    pts = list(points)
    if len(pts) > 1 and pts[0] == pts[-1]:
        pts.pop()
    return pts


@dataclass(frozen=True)
class SmoothCurve:
    """
    Immutable polyline walked during execution.

    Attributes:
        points: Ordered points. For closed curves first == last.
        closed: Whether the curve is a loop.
    """

    points: Tuple[Point, ...]
    closed: bool = False

    def __post_init__(self):
        if not self.points:
            raise ValueError("A curve needs at least one point")
        if self.closed and self.points[0] != self.points[-1]:
            raise ValueError("Closed curve must end on its first point")

    @classmethod
    def from_points(cls, points: Sequence[Point], closed: bool = False) -> "SmoothCurve":
        """Build a curve, appending the closing point for loops when missing."""
        pts = [(float(x), float(y)) for x, y in points]
        if closed and pts and pts[0] != pts[-1]:
            pts.append(pts[0])
        return cls(points=tuple(pts), closed=closed)

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def __len__(self) -> int:
        return len(self.points)

    @cached_property
    def _cumulative(self) -> np.ndarray:
        array = np.asarray(self.points, dtype=float)
        if len(array) < 2:
            return np.zeros(1)
        segment_lengths = np.hypot(*np.diff(array, axis=0).T)
        return np.concatenate(([0.0], np.cumsum(segment_lengths)))

    def cumulative_lengths(self) -> List[float]:
        """Arc length from the start at every point."""
        return [float(v) for v in self._cumulative]

    @property
    def length(self) -> float:
        """Total Euclidean length."""
        return float(self._cumulative[-1])

    def point_at(self, progress: float) -> Point:
        """
        Point at a normalized arc-length position.

        Args:
            progress: 0.0 (start) to 1.0 (end); clamped.
        """
        progress = max(0.0, min(1.0, progress))
        total = self.length
        if total < GEOMETRY_EPSILON or progress <= 0.0:
            return self.points[0]
        if progress >= 1.0:
            return self.points[-1]

        target = progress * total
        cumulative = self._cumulative
        index = int(np.searchsorted(cumulative, target, side="right")) - 1
        index = max(0, min(index, len(self.points) - 2))
        span = cumulative[index + 1] - cumulative[index]
        if span < GEOMETRY_EPSILON:
            return self.points[index + 1]
        t = float((target - cumulative[index]) / span)
        a = self.points[index]
        b = self.points[index + 1]
        return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)

    def direction_at(self, progress: float, lookahead: float = 0.01) -> Optional[Point]:
        """Unit tangent estimate at a progress value, None on a degenerate curve."""
        a = self.point_at(progress)
        b = self.point_at(min(1.0, progress + lookahead))
        if a == b:
            a = self.point_at(max(0.0, progress - lookahead))
            b = self.point_at(progress)
        return normalize(sub(b, a))


def chaikin(points: Sequence[Point], iterations: int, closed: bool = False) -> List[Point]:
    """
    Chaikin corner-cutting subdivision.

    Every edge becomes two points at 25% and 75% along it. Open curves
    keep their endpoints; closed curves end on their first point.

    Args:
        points: Control polygon (a closing duplicate point is accepted).
        iterations: Number of subdivision passes.
        closed: Treat the polygon as a loop.
    """
    pts = _strip_closing_point(points) if closed else list(points)
    if len(pts) < (3 if closed else 2) or iterations <= 0:
        result = list(pts)
        if closed and result and result[0] != result[-1]:
            result.append(result[0])
        return result

    array = np.asarray(pts, dtype=float)
    for _ in range(iterations):
        if closed:
            nxt = np.roll(array, -1, axis=0)
            cur = array
        else:
            cur = array[:-1]
            nxt = array[1:]
        cut = np.empty((2 * len(cur), 2))
        cut[0::2] = 0.75 * cur + 0.25 * nxt
        cut[1::2] = 0.25 * cur + 0.75 * nxt
        if closed:
            array = cut
        else:
            array = np.vstack((array[:1], cut, array[-1:]))

    result = _to_points(array)
    if closed:
        result.append(result[0])
    else:
        result[0] = pts[0]
        result[-1] = pts[-1]
    return result


def catmull_rom(points: Sequence[Point], segments: int, closed: bool = False) -> List[Point]:
    """
    Uniform Catmull-Rom spline through the control points.

    Open curves clamp the missing outer control points to the endpoints;
    closed curves wrap around.

    Args:
        points: Control points (a closing duplicate point is accepted).
        segments: Points generated per span between two control points.
        closed: Treat the points as a loop.
    """
    pts = _strip_closing_point(points) if closed else list(points)
    n = len(pts)
    if n < (3 if closed else 2) or segments <= 0:
        result = list(pts)
        if closed and result and result[0] != result[-1]:
            result.append(result[0])
        return result

    array = np.asarray(pts, dtype=float)
    if closed:
        idx = np.arange(n)
        p0 = array[(idx - 1) % n]
        p1 = array[idx]
        p2 = array[(idx + 1) % n]
        p3 = array[(idx + 2) % n]
    else:
        padded = np.vstack((array[:1], array, array[-1:]))
        p0 = padded[:-3]
        p1 = padded[1:-2]
        p2 = padded[2:-1]
        p3 = padded[3:]

    t = (np.arange(segments) / segments)[None, :, None]
    t2 = t * t
    t3 = t2 * t
    p0, p1, p2, p3 = (p[:, None, :] for p in (p0, p1, p2, p3))
    spans = 0.5 * (
        2.0 * p1
        + (-p0 + p2) * t
        + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * t2
        + (-p0 + 3.0 * p1 - 3.0 * p2 + p3) * t3
    )

    result = _to_points(spans.reshape(-1, 2))
    result[0] = pts[0]
    result.append(pts[0] if closed else pts[-1])
    return result


class CurveSmoother:
    """
    Final spline pass over waypoints or contours.

    Usage:
        smoother = CurveSmoother(CurveMethod.CHAIKIN, iterations=3)
        curve = smoother.smooth_curve(points, closed=True)
    """

    def __init__(
        self,
        method: CurveMethod = CurveMethod.CATMULL_ROM,
        iterations: int = DEFAULT_SMOOTHING_ITERATIONS,
    ):
        """
        Initialize smoother.

        Args:
            method: Chaikin or Catmull-Rom.
            iterations: Chaikin passes, or Catmull-Rom points per span.
        """
        self.method = CurveMethod(method)
        self.iterations = iterations

    def smooth(self, points: Sequence[Point], closed: bool = False) -> List[Point]:
        """Smooth a point sequence with the configured method."""
        if self.method is CurveMethod.CHAIKIN:
            return chaikin(points, self.iterations, closed)
        return catmull_rom(points, self.iterations, closed)

    def smooth_curve(self, points: Sequence[Point], closed: bool = False) -> SmoothCurve:
        return SmoothCurve.from_points(self.smooth(points, closed), closed=closed)
