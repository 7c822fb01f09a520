"""A* Pathfinding over hex cells.

Implements a generic A* search over any cell provider, and a hex-specific
wrapper adding world-position lookups, path-to-range search and
movement-range expansion.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from heapq import heappop, heappush
from typing import Callable, Dict, List, Optional, Sequence, Set, Tuple

from src.core.constants import DEFAULT_MOVE_COST

from .hex_grid import CellProvider, CoordLike, HexCell, HexCoord, as_coord
from .vector import Point

logger = logging.getLogger(__name__)

CostFunction = Callable[[HexCell, HexCell], float]
FailureCallback = Callable[["PathStatus", Optional[HexCell], Optional[HexCell]], None]


class PathStatus(Enum):
    """Outcome of the last search."""

    FOUND = auto()
    INVALID_INPUT = auto()  # Null, disabled or off-grid endpoint
    NOT_FOUND = auto()  # Frontier exhausted


@dataclass(order=True)
class PathNode:
    """A* search node."""

    f_score: float  # g + h (total estimated cost)
    h_score: float  # Tie-break: nearer the goal first
    sort_key: Tuple[int, int]  # Tie-break: lowest axial coordinate
    cell: HexCell = field(compare=False)
    g_score: float = field(compare=False)  # Actual cost from start
    parent: Optional["PathNode"] = field(default=None, compare=False)


def path_cost(path: Sequence[HexCell]) -> int:
    """Number of steps in a path (cells minus one, 0 for empty)."""
    return max(0, len(path) - 1)


def is_valid_path(path: Sequence[HexCell]) -> bool:
    """Check every cell is enabled and consecutive cells are adjacent."""
    if not path:
        return False
    for i, cell in enumerate(path):
        if not cell.enabled:
            return False
        if i > 0 and not path[i - 1].coord.is_adjacent(cell.coord):
            return False
    return True


def terrain_cost(from_cell: HexCell, to_cell: HexCell) -> float:
    """Edge cost read from the entered cell's ``move_cost`` metadata."""
    return float(to_cell.metadata.get("move_cost", DEFAULT_MOVE_COST))


class AStarPathfinder:
    """
    A* pathfinding on any cell provider.

    Working sets are created per call, so one instance can serve any
    number of agents.

    Usage:
        finder = AStarPathfinder()
        path = finder.find_path(start_cell, goal_cell, grid)
        if not path:
            print(finder.last_status)
    """

    def __init__(self, max_iterations: Optional[int] = None):
        """
        Initialize pathfinder.

        Args:
            max_iterations: Optional cap on node expansions. None means
                bounded only by the graph size.
        """
        self.max_iterations = max_iterations
        self.last_status: Optional[PathStatus] = None
        self._failure_callbacks: List[FailureCallback] = []

    def register_failure_callback(self, callback: FailureCallback) -> None:
        """Register a callback fired once per failed search."""
        self._failure_callbacks.append(callback)

    def find_path(
        self,
        start: Optional[HexCell],
        goal: Optional[HexCell],
        cell_provider: CellProvider,
        move_cost: float = DEFAULT_MOVE_COST,
        cost_fn: Optional[CostFunction] = None,
    ) -> List[HexCell]:
        """
        Find shortest path from start to goal.

        Args:
            start: Starting cell (must be enabled).
            goal: Target cell (must be enabled).
            cell_provider: Source of enabled neighbors.
            move_cost: Uniform edge cost when ``cost_fn`` is not given.
            cost_fn: Optional per-edge cost. Costs below ``move_cost``
                make the heuristic inadmissible.

        Returns:
            Path as list of cells (including start and goal), or an empty
            list when the input is invalid or no path exists.
        """
        if start is None or goal is None or not start.enabled or not goal.enabled:
            return self._fail(PathStatus.INVALID_INPUT, start, goal)

        if start is goal or start.coord == goal.coord:
            self.last_status = PathStatus.FOUND
            return [start]

        # A* initialization
        open_set: List[PathNode] = []
        closed_set: Set[HexCoord] = set()
        g_scores: Dict[HexCoord, float] = {start.coord: 0.0}

        h = self._heuristic(start, goal, move_cost)
        heappush(
            open_set,
            PathNode(f_score=h, h_score=h, sort_key=(start.q, start.r), cell=start, g_score=0.0),
        )

        iterations = 0

        while open_set:
            if self.max_iterations is not None and iterations >= self.max_iterations:
                logger.warning(
                    "A* gave up after %d iterations (%s -> %s)", iterations, start, goal
                )
                break
            iterations += 1
            current = heappop(open_set)

            # Goal reached
            if current.cell.coord == goal.coord:
                self.last_status = PathStatus.FOUND
                return self._reconstruct_path(current)

            # Skip stale entries
            if current.cell.coord in closed_set:
                continue

            closed_set.add(current.cell.coord)

            for neighbor in cell_provider.enabled_neighbors(current.cell):
                if neighbor.coord in closed_set:
                    continue

                step = cost_fn(current.cell, neighbor) if cost_fn else move_cost
                tentative_g = current.g_score + step

                # Skip if we've found a better path already
                known = g_scores.get(neighbor.coord)
                if known is not None and tentative_g >= known:
                    continue

                g_scores[neighbor.coord] = tentative_g
                h = self._heuristic(neighbor, goal, move_cost)
                heappush(
                    open_set,
                    PathNode(
                        f_score=tentative_g + h,
                        h_score=h,
                        sort_key=(neighbor.q, neighbor.r),
                        cell=neighbor,
                        g_score=tentative_g,
                        parent=current,
                    ),
                )

        return self._fail(PathStatus.NOT_FOUND, start, goal)

    def notify_failure(
        self, status: PathStatus, start: Optional[HexCell], goal: Optional[HexCell]
    ) -> None:
        """Fire the registered failure callbacks."""
        for callback in self._failure_callbacks:
            callback(status, start, goal)

    def _fail(
        self, status: PathStatus, start: Optional[HexCell], goal: Optional[HexCell]
    ) -> List[HexCell]:
        self.last_status = status
        logger.debug("A* found no path from %s to %s: %s", start, goal, status.name)
        self.notify_failure(status, start, goal)
        return []

    def _heuristic(self, a: HexCell, b: HexCell, move_cost: float) -> float:
        """Heuristic function: hex distance scaled by the cheapest step."""
        return float(a.coord.distance_to(b.coord)) * move_cost

    def _reconstruct_path(self, node: PathNode) -> List[HexCell]:
        """Reconstruct path from goal node (including start)."""
        path = []
        current: Optional[PathNode] = node
        while current is not None:
            path.append(current.cell)
            current = current.parent
        path.reverse()
        return path


class HexPathfinder:
    """
    Hex-grid conveniences on top of AStarPathfinder.

    Usage:
        finder = HexPathfinder(grid)
        path = finder.find_path_world((0.0, 0.0), (160.0, 0.0))
        reachable = finder.get_cells_in_movement_range(start_cell, 3)
    """

    def __init__(
        self,
        grid: CellProvider,
        astar: Optional[AStarPathfinder] = None,
        move_cost: float = DEFAULT_MOVE_COST,
        cost_fn: Optional[CostFunction] = None,
    ):
        """
        Initialize pathfinder.

        Args:
            grid: The cell provider to pathfind on.
            astar: Search implementation (a fresh one by default).
            move_cost: Uniform edge cost.
            cost_fn: Optional per-edge cost function.
        """
        self.grid = grid
        self.astar = astar or AStarPathfinder()
        self.move_cost = move_cost
        self.cost_fn = cost_fn
        self.last_status: Optional[PathStatus] = None

    def register_failure_callback(self, callback: FailureCallback) -> None:
        self.astar.register_failure_callback(callback)

    def find_path(self, start: Optional[HexCell], goal: Optional[HexCell]) -> List[HexCell]:
        """Find shortest path between two cells (see AStarPathfinder.find_path)."""
        path = self.astar.find_path(start, goal, self.grid, self.move_cost, self.cost_fn)
        self.last_status = self.astar.last_status
        if not path:
            logger.warning("No path from %s to %s: %s", start, goal, self.last_status.name)
        return path

    def find_path_coords(self, start: CoordLike, goal: CoordLike) -> List[HexCell]:
        """Find path between two coordinates."""
        return self.find_path(
            self.grid.cell_at_coord(as_coord(start)),
            self.grid.cell_at_coord(as_coord(goal)),
        )

    def find_path_world(self, from_point: Point, to_point: Point) -> List[HexCell]:
        """
        Find path between two world positions.

        Returns:
            Path of cells, or empty if either position is off-grid or no
            path exists.
        """
        return self.find_path(
            self.grid.cell_at_world_position(from_point),
            self.grid.cell_at_world_position(to_point),
        )

    def find_path_to_range(
        self, start: Optional[HexCell], goal: Optional[HexCell], radius: int
    ) -> List[HexCell]:
        """
        Find path to any enabled cell within ``radius`` of goal.

        The candidate reached with the fewest path cells wins; ties keep
        the first one found.

        Args:
            start: Starting cell.
            goal: Center of the target area (may itself be disabled).
            radius: Hex distance around goal that counts as arrived.

        Returns:
            Path of cells (just [start] when already in range), or empty
            if no candidate is reachable.
        """
        if start is None or goal is None or not start.enabled or radius < 0:
            return self._fail_range(PathStatus.INVALID_INPUT, start, goal)

        # Already in range
        if start.coord.distance_to(goal.coord) <= radius:
            self.last_status = PathStatus.FOUND
            return [start]

        candidates = list(self.grid.enabled_cells_in_range(goal, radius))
        if not candidates:
            return self._fail_range(PathStatus.NOT_FOUND, start, goal)

        # Nearest first, stable on the provider's order
        candidates.sort(key=lambda c: start.coord.distance_to(c.coord))

        best_path: List[HexCell] = []
        best_length = float("inf")

        # Per-candidate misses must not reach the failure callbacks
        probe = AStarPathfinder(self.astar.max_iterations)
        for candidate in candidates:
            # Lower bound on path cells is distance + 1
            if start.coord.distance_to(candidate.coord) + 1 >= best_length:
                continue

            path = probe.find_path(start, candidate, self.grid, self.move_cost, self.cost_fn)
            if path and len(path) < best_length:
                best_path = path
                best_length = len(path)

        if not best_path:
            return self._fail_range(PathStatus.NOT_FOUND, start, goal)

        self.last_status = PathStatus.FOUND
        return best_path

    def _fail_range(
        self, status: PathStatus, start: Optional[HexCell], goal: Optional[HexCell]
    ) -> List[HexCell]:
        self.last_status = status
        logger.warning("No path from %s into range of %s: %s", start, goal, status.name)
        self.astar.notify_failure(status, start, goal)
        return []

    def get_movement_costs(self, start: Optional[HexCell], budget: int) -> Dict[HexCoord, int]:
        """
        Uniform-cost frontier expansion from start.

        Args:
            start: Starting cell.
            budget: Maximum number of steps.

        Returns:
            Mapping of reachable coordinate to step count (start maps to 0).
        """
        if start is None or not start.enabled or budget < 0:
            return {}

        costs: Dict[HexCoord, int] = {start.coord: 0}
        frontier = deque([start])

        while frontier:
            current = frontier.popleft()
            steps = costs[current.coord]
            if steps >= budget:
                continue
            for neighbor in self.grid.enabled_neighbors(current):
                if neighbor.coord in costs:
                    continue
                costs[neighbor.coord] = steps + 1
                frontier.append(neighbor)

        return costs

    def get_cells_in_movement_range(
        self, start: Optional[HexCell], budget: int
    ) -> List[HexCell]:
        """
        Get all cells reachable within ``budget`` steps.

        Used for range previews, not for path execution.

        Returns:
            Reachable cells including start, in expansion order.
        """
        cells = []
        for coord in self.get_movement_costs(start, budget):
            cell = self.grid.cell_at_coord(coord)
            if cell is not None:
                cells.append(cell)
        return cells

    def get_next_step(
        self, start: Optional[HexCell], goal: Optional[HexCell]
    ) -> Optional[HexCell]:
        """
        Get just the first step of a path.

        Returns:
            Next cell to move to, or None if at goal or no path.
        """
        path = self.find_path(start, goal)
        if len(path) > 1:
            return path[1]
        return None
