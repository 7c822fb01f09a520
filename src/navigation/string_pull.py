"""String pulling inside a hex corridor.

Tightens a waypoint polyline toward straight segments while keeping every
point inside the union of the path cells' hexagons.
"""

import logging
from typing import List, Sequence, Tuple

from src.core.constants import (
    GEOMETRY_EPSILON,
    STRING_PULL_BACKOFF,
    STRING_PULL_CONVERGENCE,
    STRING_PULL_MAX_ITERATIONS,
)

from .hex_grid import HexCell, HexLayout
from .vector import Point, add, distance, length, project_onto_segment, scale, sub

logger = logging.getLogger(__name__)

Polygon = List[Point]
BoundingBox = Tuple[float, float, float, float]


def point_on_segment(point: Point, a: Point, b: Point, tolerance: float = 1e-7) -> bool:
    """Check whether point lies on segment a-b (within tolerance)."""
    projected = project_onto_segment(point, a, b)
    if projected is None:
        return distance(point, a) <= tolerance
    return distance(point, projected) <= tolerance


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """
    Ray-casting containment test; points on an edge count as inside.

    Args:
        point: Point to test.
        polygon: Polygon vertices in order (either winding).
    """
    x, y = point
    inside = False
    n = len(polygon)
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if point_on_segment(point, polygon[j], polygon[i]):
            return True
        if (yi > y) != (yj > y):
            x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < x_cross:
                inside = not inside
        j = i
    return inside


def _bounding_box(polygon: Sequence[Point]) -> BoundingBox:
    xs = [p[0] for p in polygon]
    ys = [p[1] for p in polygon]
    return (min(xs), min(ys), max(xs), max(ys))


class HexCorridor:
    """Union of hex polygons with a bounding-box prefilter."""

    def __init__(self, layout: HexLayout, cells: Sequence[HexCell]):
        self.cells = list(cells)
        self.polygons: List[Polygon] = [layout.corners(c.coord) for c in self.cells]
        self._boxes = [_bounding_box(p) for p in self.polygons]

    def contains(self, point: Point, tolerance: float = 1e-7) -> bool:
        x, y = point
        for polygon, (min_x, min_y, max_x, max_y) in zip(self.polygons, self._boxes):
            if x < min_x - tolerance or x > max_x + tolerance:
                continue
            if y < min_y - tolerance or y > max_y + tolerance:
                continue
            if point_in_polygon(point, polygon):
                return True
        return False

    def nearest_center(self, point: Point) -> Point:
        return min((c.world_position for c in self.cells), key=lambda p: distance(p, point))


class StringPullValidator:
    """
    Relaxes waypoints toward straight lines inside a hex corridor.

    Usage:
        validator = StringPullValidator(grid.layout)
        tight = validator.pull_string_through_path(waypoints, path)
        assert validator.validate(tight, path)
    """

    def __init__(
        self,
        layout: HexLayout,
        max_iterations: int = STRING_PULL_MAX_ITERATIONS,
        convergence: float = STRING_PULL_CONVERGENCE,
        backoff: Sequence[float] = STRING_PULL_BACKOFF,
    ):
        """
        Initialize validator.

        Args:
            layout: Layout used to build cell polygons.
            max_iterations: Upper bound on relaxation passes.
            convergence: Stop once no point moves farther than this.
            backoff: Fractions of a rejected move to retry, largest first.
        """
        self.layout = layout
        self.max_iterations = max_iterations
        self.convergence = convergence
        self.backoff = tuple(backoff)

    def corridor(self, path_cells: Sequence[HexCell]) -> HexCorridor:
        return HexCorridor(self.layout, path_cells)

    def validate(self, points: Sequence[Point], path_cells: Sequence[HexCell]) -> bool:
        """Check every point lies inside the path's hex corridor."""
        corridor = self.corridor(path_cells)
        return all(corridor.contains(p) for p in points)

    def pull_string_through_path(
        self, points: Sequence[Point], path_cells: Sequence[HexCell]
    ) -> List[Point]:
        """
        Tighten a polyline without leaving the path's hexagons.

        Each pass moves every interior point toward its projection onto the
        segment joining its neighbors. A move landing outside the corridor
        is retried at smaller fractions, and dropped if none fit.

        Args:
            points: Waypoints; first and last are kept exactly.
            path_cells: Cells whose hexagons form the corridor.

        Returns:
            Tightened points, same count as the input.
        """
        result = list(points)
        if len(result) < 3 or not path_cells:
            return result

        corridor = self.corridor(path_cells)

        # Interior points must start inside for the containment guarantee
        for i in range(1, len(result) - 1):
            if not corridor.contains(result[i]):
                logger.debug("Waypoint %d outside corridor, snapping to cell center", i)
                result[i] = corridor.nearest_center(result[i])

        for iteration in range(self.max_iterations):
            largest_move = 0.0
            for i in range(1, len(result) - 1):
                target = project_onto_segment(result[i], result[i - 1], result[i + 1])
                if target is None:
                    continue
                move = sub(target, result[i])
                if length(move) < GEOMETRY_EPSILON:
                    continue

                for fraction in self.backoff:
                    candidate = add(result[i], scale(move, fraction))
                    if corridor.contains(candidate):
                        largest_move = max(largest_move, distance(result[i], candidate))
                        result[i] = candidate
                        break

            if largest_move < self.convergence:
                logger.debug(
                    "String pull converged after %d iterations (max move %.3f)",
                    iteration + 1,
                    largest_move,
                )
                break

        return result
