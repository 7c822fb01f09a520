"""Waypoint generation from hex cell paths."""

from typing import List, Optional, Sequence

from src.core.constants import DEFAULT_WAYPOINT_TENSION, STRAIGHT_ANGLE_TOLERANCE_DEG

from .hex_grid import HexCell
from .vector import Point, add, angle_between, distance, midpoint, normalize, scale, sub


def is_straight_path(
    points: Sequence[Point], tolerance_deg: float = STRAIGHT_ANGLE_TOLERANCE_DEG
) -> bool:
    """
    Check whether all segments point the same way.

    Coincident consecutive points are ignored. Two or fewer points are
    always straight.
    """
    previous: Optional[Point] = None
    for i in range(len(points) - 1):
        direction = normalize(sub(points[i + 1], points[i]))
        if direction is None:
            continue
        if previous is not None and angle_between(previous, direction) > tolerance_deg:
            return False
        previous = direction
    return True


class PathInterpolator:
    """
    Turns a cell path into waypoints.

    Usage:
        interpolator = PathInterpolator()
        waypoints = interpolator.generate_path_waypoints(path, tension=0.35)
        dense = interpolator.generate_midpoint_interpolation(waypoints, layers=2)
    """

    def __init__(self, straight_tolerance_deg: float = STRAIGHT_ANGLE_TOLERANCE_DEG):
        """
        Initialize interpolator.

        Args:
            straight_tolerance_deg: Maximum angle between consecutive
                directions for a run to count as straight.
        """
        self.straight_tolerance_deg = straight_tolerance_deg

    def is_straight(self, path: Sequence[HexCell]) -> bool:
        return is_straight_path([c.world_position for c in path], self.straight_tolerance_deg)

    def generate_path_waypoints(
        self, path: Sequence[HexCell], tension: float = DEFAULT_WAYPOINT_TENSION
    ) -> List[Point]:
        """
        Generate waypoints for a cell path.

        Straight runs return the cell centers unchanged. On a turn, each
        interior center is pushed toward the inside of the turn along the
        bisector of its incoming and outgoing directions.

        Args:
            path: Ordered cells from start to destination.
            tension: 0 keeps centers, 1 pushes a turn point halfway to
                the nearer neighbor.

        Returns:
            One waypoint per cell; first and last are the exact centers.
        """
        centers = [cell.world_position for cell in path]
        if len(centers) <= 2 or is_straight_path(centers, self.straight_tolerance_deg):
            return centers

        tension = max(0.0, min(1.0, tension))
        waypoints = [centers[0]]
        for i in range(1, len(centers) - 1):
            prev_pt, here, next_pt = centers[i - 1], centers[i], centers[i + 1]
            d_in = normalize(sub(here, prev_pt))
            d_out = normalize(sub(next_pt, here))
            if d_in is None or d_out is None:
                waypoints.append(here)
                continue
            if angle_between(d_in, d_out) <= self.straight_tolerance_deg:
                waypoints.append(here)
                continue

            # d_out - d_in points into the turn
            bisector = normalize(sub(d_out, d_in))
            if bisector is None:
                # Full reversal
                waypoints.append(here)
                continue

            reach = 0.5 * min(distance(prev_pt, here), distance(here, next_pt))
            waypoints.append(add(here, scale(bisector, reach * tension)))
        waypoints.append(centers[-1])
        return waypoints

    def generate_midpoint_interpolation(self, points: Sequence[Point], layers: int) -> List[Point]:
        """
        Insert segment midpoints, ``layers`` times over.

        Each layer turns n points into 2n - 1; endpoints are untouched.
        """
        result = list(points)
        for _ in range(max(0, layers)):
            if len(result) < 2:
                break
            subdivided = [result[0]]
            for i in range(len(result) - 1):
                subdivided.append(midpoint(result[i], result[i + 1]))
                subdivided.append(result[i + 1])
            result = subdivided
        return result
