"""Tests for A* pathfinding."""

import pytest

from src.navigation.hex_grid import HexCoord, HexGrid
from src.navigation.pathfinding import (
    AStarPathfinder,
    HexPathfinder,
    PathStatus,
    is_valid_path,
    path_cost,
    terrain_cost,
)


def coords(path):
    """Path as (q, r) tuples."""
    return [(c.q, c.r) for c in path]


class TestAStarPathfinder:
    """Tests for AStarPathfinder class."""

    @pytest.fixture
    def grid(self):
        """Create 5x5 grid."""
        return HexGrid.parallelogram(5, 5)

    @pytest.fixture
    def finder(self):
        return AStarPathfinder()

    def test_straight_path(self, grid, finder):
        """Shortest path along a row."""
        path = finder.find_path(
            grid.cell_at_coord((0, 0)), grid.cell_at_coord((3, 0)), grid
        )
        assert coords(path) == [(0, 0), (1, 0), (2, 0), (3, 0)]
        assert finder.last_status is PathStatus.FOUND

    def test_path_includes_start_and_goal(self, grid, finder):
        """Path starts at start and ends at goal."""
        start = grid.cell_at_coord((0, 0))
        goal = grid.cell_at_coord((4, 4))
        path = finder.find_path(start, goal, grid)
        assert path[0] is start
        assert path[-1] is goal
        assert path_cost(path) == 8
        assert is_valid_path(path)

    def test_same_cell(self, grid, finder):
        """Start equal to goal returns just the start."""
        cell = grid.cell_at_coord((2, 2))
        assert finder.find_path(cell, cell, grid) == [cell]
        assert finder.last_status is PathStatus.FOUND

    def test_path_around_obstacle(self, grid, finder):
        """Disabled cells are routed around."""
        grid.set_enabled((1, 0), False)
        grid.set_enabled((2, 0), False)
        path = finder.find_path(
            grid.cell_at_coord((0, 0)), grid.cell_at_coord((3, 0)), grid
        )
        assert coords(path) == [(0, 0), (0, 1), (1, 1), (2, 1), (3, 0)]
        assert path_cost(path) == 4

    def test_disabled_goal_is_invalid(self, grid, finder):
        """Disabled endpoint is invalid input."""
        grid.set_enabled((3, 3), False)
        path = finder.find_path(
            grid.cell_at_coord((0, 0)), grid.cell_at_coord((3, 3)), grid
        )
        assert path == []
        assert finder.last_status is PathStatus.INVALID_INPUT

    def test_missing_endpoint_is_invalid(self, grid, finder):
        """None endpoint is invalid input."""
        assert finder.find_path(None, grid.cell_at_coord((0, 0)), grid) == []
        assert finder.last_status is PathStatus.INVALID_INPUT

    def test_unreachable_goal(self, grid, finder):
        """Walled-off goal is not found."""
        for coord in HexCoord(4, 4).neighbors():
            grid.set_enabled(coord, False)
        path = finder.find_path(
            grid.cell_at_coord((0, 0)), grid.cell_at_coord((4, 4)), grid
        )
        assert path == []
        assert finder.last_status is PathStatus.NOT_FOUND

    def test_failure_callback_fires_once(self, grid, finder):
        """Each failed search notifies callbacks exactly once."""
        calls = []
        finder.register_failure_callback(lambda status, start, goal: calls.append(status))
        grid.set_enabled((2, 2), False)
        finder.find_path(grid.cell_at_coord((0, 0)), grid.cell_at_coord((2, 2)), grid)
        assert calls == [PathStatus.INVALID_INPUT]

        finder.find_path(grid.cell_at_coord((0, 0)), grid.cell_at_coord((1, 1)), grid)
        assert calls == [PathStatus.INVALID_INPUT]

    def test_max_iterations(self, grid):
        """Iteration cap ends the search as not found."""
        finder = AStarPathfinder(max_iterations=1)
        path = finder.find_path(
            grid.cell_at_coord((0, 0)), grid.cell_at_coord((4, 4)), grid
        )
        assert path == []
        assert finder.last_status is PathStatus.NOT_FOUND

    def test_cost_function(self, grid, finder):
        """Expensive cells are avoided with a terrain cost function."""
        grid.cell_at_coord((1, 0)).metadata["move_cost"] = 10
        grid.cell_at_coord((2, 0)).metadata["move_cost"] = 10
        path = finder.find_path(
            grid.cell_at_coord((0, 0)),
            grid.cell_at_coord((3, 0)),
            grid,
            cost_fn=terrain_cost,
        )
        assert coords(path) == [(0, 0), (0, 1), (1, 1), (2, 1), (3, 0)]

    def test_deterministic(self, grid, finder):
        """Repeated searches return the same path."""
        start = grid.cell_at_coord((0, 4))
        goal = grid.cell_at_coord((4, 0))
        first = finder.find_path(start, goal, grid)
        for _ in range(3):
            assert finder.find_path(start, goal, grid) == first


class TestHexPathfinder:
    """Tests for HexPathfinder class."""

    @pytest.fixture
    def grid(self):
        return HexGrid.parallelogram(5, 5)

    @pytest.fixture
    def finder(self, grid):
        return HexPathfinder(grid)

    def test_find_path_coords(self, finder):
        """Coordinate lookup."""
        path = finder.find_path_coords((0, 0), (3, 0))
        assert len(path) == 4

    def test_find_path_world(self, grid, finder):
        """World position lookup."""
        start = grid.cell_at_coord((0, 0)).world_position
        goal = grid.cell_at_coord((2, 2)).world_position
        path = finder.find_path_world(start, goal)
        assert path_cost(path) == 4

    def test_find_path_world_off_grid(self, finder):
        """Off-grid positions fail as invalid input."""
        assert finder.find_path_world((-1000.0, -1000.0), (0.0, 0.0)) == []
        assert finder.last_status is PathStatus.INVALID_INPUT

    def test_find_path_to_range(self, grid, finder):
        """Path stops at the nearest cell within range."""
        path = finder.find_path_to_range(
            grid.cell_at_coord((0, 0)), grid.cell_at_coord((4, 4)), 1
        )
        assert path_cost(path) == 7
        assert path[-1].coord.distance_to(HexCoord(4, 4)) <= 1

    def test_find_path_to_range_disabled_goal(self, grid, finder):
        """Range target itself may be disabled."""
        grid.set_enabled((4, 4), False)
        path = finder.find_path_to_range(
            grid.cell_at_coord((0, 0)), grid.cell_at_coord((4, 4)), 1
        )
        assert path_cost(path) == 7

    def test_find_path_to_range_already_in_range(self, grid, finder):
        """Start inside the range returns just the start."""
        start = grid.cell_at_coord((3, 3))
        assert finder.find_path_to_range(start, grid.cell_at_coord((4, 4)), 2) == [start]

    def test_find_path_to_range_failure_fires_once(self, grid, finder):
        """Unreachable range notifies callbacks once."""
        calls = []
        finder.register_failure_callback(lambda status, start, goal: calls.append(status))
        for coord in [(3, 3), (4, 3), (3, 4), (4, 4)]:
            grid.set_enabled(coord, False)
        path = finder.find_path_to_range(
            grid.cell_at_coord((0, 0)), grid.cell_at_coord((4, 4)), 0
        )
        assert path == []
        assert calls == [PathStatus.NOT_FOUND]

    def test_movement_range(self, grid, finder):
        """Cells within a step budget."""
        cells = finder.get_cells_in_movement_range(grid.cell_at_coord((0, 0)), 1)
        assert sorted(coords(cells)) == [(0, 0), (0, 1), (1, 0)]

    def test_movement_costs_respect_walls(self, grid, finder):
        """Range expansion walks around disabled cells."""
        grid.set_enabled((1, 0), False)
        costs = finder.get_movement_costs(grid.cell_at_coord((0, 0)), 3)
        assert costs[HexCoord(0, 0)] == 0
        assert HexCoord(1, 0) not in costs
        assert costs[HexCoord(2, 0)] == 3

    def test_next_step(self, grid, finder):
        """First step of a path."""
        step = finder.get_next_step(grid.cell_at_coord((0, 0)), grid.cell_at_coord((3, 0)))
        assert step.coord == HexCoord(1, 0)
        cell = grid.cell_at_coord((1, 1))
        assert finder.get_next_step(cell, cell) is None


class TestPathHelpers:
    """Tests for path helper functions."""

    def test_path_cost(self):
        grid = HexGrid.parallelogram(3, 1)
        assert path_cost([]) == 0
        assert path_cost(list(grid)) == 2

    def test_is_valid_path(self):
        """Paths must be contiguous and enabled."""
        grid = HexGrid.parallelogram(3, 1)
        cells = list(grid)
        assert is_valid_path(cells)
        assert not is_valid_path([cells[0], cells[2]])
        cells[1].enabled = False
        assert not is_valid_path(cells)
        assert not is_valid_path([])
