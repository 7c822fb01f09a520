"""Hex navigation module.

This module provides the path planning half of turn-based movement:
- Axial hex coordinates, world layout and the cell grid
- A* pathfinding, range-limited search and movement range expansion
- Waypoint generation and midpoint interpolation
- String pulling inside the path's hex corridor
- Boundary tracing for navigable regions
- Chaikin / Catmull-Rom curve smoothing
"""

# Hex Grid
from .hex_grid import (
    CellProvider,
    HexCell,
    HexCoord,
    HexGrid,
    HexLayout,
    Orientation,
    cube_round,
)

# Pathfinding
from .pathfinding import (
    AStarPathfinder,
    HexPathfinder,
    PathNode,
    PathStatus,
    is_valid_path,
    path_cost,
    terrain_cost,
)

# Path smoothing
from .interpolation import PathInterpolator, is_straight_path
from .string_pull import HexCorridor, StringPullValidator, point_in_polygon
from .boundary import BoundaryTracer
from .curves import CurveSmoother, SmoothCurve, catmull_rom, chaikin
from .path_curve import PathCurveBuilder

__all__ = [
    # Hex Grid
    "CellProvider",
    "HexCell",
    "HexCoord",
    "HexGrid",
    "HexLayout",
    "Orientation",
    "cube_round",
    # Pathfinding
    "AStarPathfinder",
    "HexPathfinder",
    "PathNode",
    "PathStatus",
    "is_valid_path",
    "path_cost",
    "terrain_cost",
    # Path smoothing
    "PathInterpolator",
    "is_straight_path",
    "HexCorridor",
    "StringPullValidator",
    "point_in_polygon",
    "BoundaryTracer",
    "CurveSmoother",
    "SmoothCurve",
    "catmull_rom",
    "chaikin",
    "PathCurveBuilder",
]
