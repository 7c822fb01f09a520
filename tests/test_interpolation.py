"""Tests for waypoint generation."""

import math

import pytest

from src.navigation.hex_grid import HexGrid
from src.navigation.interpolation import PathInterpolator, is_straight_path


def l_path(grid):
    """East along row 0, then south-east."""
    return [grid.cell_at_coord(c) for c in [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]]


class TestIsStraightPath:
    """Tests for is_straight_path."""

    def test_collinear(self):
        assert is_straight_path([(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)])

    def test_short_paths_are_straight(self):
        assert is_straight_path([])
        assert is_straight_path([(0.0, 0.0)])
        assert is_straight_path([(0.0, 0.0), (5.0, 3.0)])

    def test_turn(self):
        assert not is_straight_path([(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)])

    def test_coincident_points_ignored(self):
        """Zero-length segments do not break a straight run."""
        assert is_straight_path([(0.0, 0.0), (1.0, 0.0), (1.0, 0.0), (2.0, 0.0)])

    def test_tolerance(self):
        """Small bends within tolerance count as straight."""
        bent = [(0.0, 0.0), (10.0, 0.0), (20.0, 0.5)]
        assert is_straight_path(bent, tolerance_deg=5.0)
        assert not is_straight_path(bent, tolerance_deg=1.0)


class TestPathInterpolator:
    """Tests for PathInterpolator class."""

    @pytest.fixture
    def grid(self):
        return HexGrid.parallelogram(5, 5)

    @pytest.fixture
    def interpolator(self):
        return PathInterpolator()

    def test_straight_path_keeps_centers(self, grid, interpolator):
        """Straight runs come back unchanged."""
        path = [grid.cell_at_coord((q, 1)) for q in range(4)]
        waypoints = interpolator.generate_path_waypoints(path)
        assert waypoints == [c.world_position for c in path]

    def test_turn_moves_corner_inward(self, grid, interpolator):
        """Only the turning cell is offset, toward the inside of the turn."""
        path = l_path(grid)
        waypoints = interpolator.generate_path_waypoints(path, tension=0.35)
        centers = [c.world_position for c in path]

        assert len(waypoints) == len(path)
        assert waypoints[0] == centers[0]
        assert waypoints[-1] == centers[-1]
        assert waypoints[1] == centers[1]
        assert waypoints[3] == centers[3]

        offset = math.dist(waypoints[2], centers[2])
        assert offset == pytest.approx(0.5 * grid.layout.cell_spacing * 0.35)
        # Inward is toward the segment joining the neighbors
        assert waypoints[2][0] < centers[2][0]
        assert waypoints[2][1] > centers[2][1]

    def test_zero_tension_keeps_centers(self, grid, interpolator):
        path = l_path(grid)
        waypoints = interpolator.generate_path_waypoints(path, tension=0.0)
        assert waypoints == [c.world_position for c in path]

    def test_midpoint_layers(self, interpolator):
        """Each layer turns n points into 2n - 1."""
        points = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0)]
        one = interpolator.generate_midpoint_interpolation(points, 1)
        assert one == [(0.0, 0.0), (2.0, 0.0), (4.0, 0.0), (4.0, 2.0), (4.0, 4.0)]
        assert len(interpolator.generate_midpoint_interpolation(points, 2)) == 9
        assert len(interpolator.generate_midpoint_interpolation(points, 3)) == 17

    def test_midpoint_keeps_originals(self, interpolator):
        points = [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0)]
        dense = interpolator.generate_midpoint_interpolation(points, 2)
        assert dense[0] == points[0]
        assert dense[4] == points[1]
        assert dense[-1] == points[-1]

    def test_midpoint_single_point(self, interpolator):
        assert interpolator.generate_midpoint_interpolation([(1.0, 1.0)], 2) == [(1.0, 1.0)]
