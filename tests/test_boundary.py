"""Tests for boundary tracing."""

import pytest

from src.core.config import CurveMethod
from src.navigation.boundary import BoundaryTracer
from src.navigation.curves import CurveSmoother
from src.navigation.hex_grid import HexCoord, HexGrid


def coords(cells):
    return [(c.q, c.r) for c in cells]


class TestBoundaryTracer:
    """Tests for BoundaryTracer class."""

    @pytest.fixture
    def tracer(self):
        return BoundaryTracer()

    def test_boundary_cells_of_parallelogram(self, tracer):
        """Interior cells are excluded."""
        grid = HexGrid.parallelogram(5, 5)
        boundary = tracer.find_boundary_cells(grid)
        assert len(boundary) == 16
        assert HexCoord(2, 2) not in {c.coord for c in boundary}

    def test_disabled_cell_exposes_neighbors(self, tracer):
        """A hole makes its neighbors boundary cells."""
        grid = HexGrid.hexagon(2)
        grid.set_enabled((0, 0), False)
        boundary = {c.coord for c in tracer.find_boundary_cells(grid)}
        assert HexCoord(0, 0) not in boundary
        assert all(n in boundary for n in HexCoord(0, 0).neighbors())

    def test_trace_hexagon_ring(self, tracer):
        """Walk starts at the top-left cell and goes clockwise."""
        grid = HexGrid.hexagon(1)
        ordered = tracer.trace_boundary(grid.enabled_cells())
        assert coords(ordered) == [(0, -1), (1, -1), (1, 0), (0, 1), (-1, 1), (-1, 0)]

    def test_trace_visits_each_once(self, tracer):
        grid = HexGrid.parallelogram(6, 4)
        ordered = tracer.trace_boundary(grid.enabled_cells())
        assert len(ordered) == len(tracer.find_boundary_cells(grid))
        assert len({c.coord for c in ordered}) == len(ordered)

    def test_trace_consecutive_cells_adjacent(self, tracer):
        """A convex region is walked without jumps."""
        grid = HexGrid.hexagon(3)
        ordered = tracer.trace_boundary(grid.enabled_cells())
        for a, b in zip(ordered, ordered[1:]):
            assert a.coord.is_adjacent(b.coord)

    def test_disconnected_regions(self, tracer):
        """Separate islands are all visited."""
        grid = HexGrid.from_coords([(0, 0), (5, 5)])
        ordered = tracer.trace_boundary(grid.enabled_cells())
        assert coords(ordered) == [(0, 0), (5, 5)]

    def test_empty_region(self, tracer):
        assert tracer.trace_boundary([]) == []
        assert tracer.trace_contour([]) is None

    def test_contour_closed(self, tracer):
        grid = HexGrid.hexagon(2)
        contour = tracer.trace_contour(grid.enabled_cells())
        assert contour.closed
        assert contour.start == contour.end
        assert contour.length > 0

    def test_contour_custom_smoother(self, tracer):
        grid = HexGrid.hexagon(2)
        contour = tracer.trace_contour(
            grid.enabled_cells(), CurveSmoother(CurveMethod.CHAIKIN, 0)
        )
        # 12 ring cells plus the closing point
        assert len(contour) == 13

    def test_contour_iterations(self, tracer):
        """Each Chaikin pass doubles the ring."""
        grid = HexGrid.hexagon(1)
        contour = tracer.trace_contour(grid.enabled_cells(), iterations=1)
        assert len(contour) == 13
