"""Boundary extraction for navigable regions.

Finds the edge cells of a region and orders them into a closed contour
with a wall-following walk, ready for curve smoothing.
"""

import logging
from typing import Dict, Iterable, List, Optional

from src.core.config import CurveMethod

from .curves import CurveSmoother, SmoothCurve
from .hex_grid import HexCell, HexCoord
from .vector import distance

logger = logging.getLogger(__name__)

DEFAULT_CONTOUR_ITERATIONS = 2


class BoundaryTracer:
    """
    Orders the boundary of a set of navigable cells.

    Usage:
        tracer = BoundaryTracer()
        ordered = tracer.trace_boundary(grid.enabled_cells())
        contour = tracer.trace_contour(grid.enabled_cells())
    """

    def find_boundary_cells(self, cells: Iterable[HexCell]) -> List[HexCell]:
        """
        Get cells with at least one missing or disabled neighbor.

        Args:
            cells: The navigable region; disabled cells are ignored.

        Returns:
            Boundary cells in input order.
        """
        region = {c.coord: c for c in cells if c.enabled}
        return [
            cell
            for cell in region.values()
            if any(n not in region for n in cell.coord.neighbors())
        ]

    def trace_boundary(self, cells: Iterable[HexCell]) -> List[HexCell]:
        """
        Order boundary cells into a contour walk.

        Starts at the topmost, then leftmost boundary cell and heads east.
        Each step scans the six directions clockwise, starting two
        positions clockwise from the direction it arrived from, and takes
        the first unvisited boundary neighbor. When no neighbor qualifies
        the walk jumps to the nearest unvisited boundary cell.

        Returns:
            Boundary cells in traversal order, each exactly once.
        """
        boundary: Dict[HexCoord, HexCell] = {c.coord: c for c in self.find_boundary_cells(cells)}
        if not boundary:
            return []

        start = min(
            boundary.values(),
            key=lambda c: (c.world_position[1], c.world_position[0], c.q, c.r),
        )
        ordered = [start]
        visited = {start.coord}
        arrival: Optional[int] = None

        while len(visited) < len(boundary):
            current = ordered[-1]
            search_start = 0 if arrival is None else ((arrival + 3) % 6 + 2) % 6

            step: Optional[HexCell] = None
            for i in range(6):
                direction = (search_start + i) % 6
                candidate = boundary.get(current.coord.neighbor(direction))
                if candidate is not None and candidate.coord not in visited:
                    step = candidate
                    arrival = direction
                    break

            if step is None:
                # Wall following stalled
                step = min(
                    (c for c in boundary.values() if c.coord not in visited),
                    key=lambda c: (distance(c.world_position, current.world_position), c.q, c.r),
                )
                arrival = None
                logger.debug("Boundary walk jumped from %s to %s", current, step)

            ordered.append(step)
            visited.add(step.coord)

        return ordered

    def trace_contour(
        self,
        cells: Iterable[HexCell],
        smoother: Optional[CurveSmoother] = None,
        iterations: int = DEFAULT_CONTOUR_ITERATIONS,
    ) -> Optional[SmoothCurve]:
        """
        Closed, smoothed contour through the ordered boundary cells.

        Args:
            cells: The navigable region.
            smoother: Spline pass to apply (Chaikin by default, which never
                overshoots the region).
            iterations: Chaikin passes when no smoother is given.

        Returns:
            Closed SmoothCurve, or None when the region is empty.
        """
        ordered = self.trace_boundary(cells)
        if not ordered:
            return None

        smoother = smoother or CurveSmoother(CurveMethod.CHAIKIN, iterations)
        points = [c.world_position for c in ordered]
        return smoother.smooth_curve(points, closed=True)
