"""Hex Movement Constants."""

import math
from typing import Final

# =============================================================================
# HEX GEOMETRY
# =============================================================================
SQRT3: Final[float] = math.sqrt(3.0)

# Default hex radius (center to corner) in world units
DEFAULT_HEX_SIZE: Final[float] = 32.0

# Axial neighbor directions, clockwise on screen (y grows downward)
# Order: E, SE, SW, W, NW, NE
HEX_DIRECTIONS: Final[tuple[tuple[int, int], ...]] = (
    (1, 0),   # E
    (0, 1),   # SE
    (-1, 1),  # SW
    (-1, 0),  # W
    (0, -1),  # NW
    (1, -1),  # NE
)

# =============================================================================
# PATHFINDING
# =============================================================================
DEFAULT_MOVE_COST: Final[float] = 1.0

# =============================================================================
# PATH SMOOTHING
# =============================================================================
# Two consecutive path directions closer than this are "the same direction"
STRAIGHT_ANGLE_TOLERANCE_DEG: Final[float] = 5.0

DEFAULT_WAYPOINT_TENSION: Final[float] = 0.35
DEFAULT_INTERPOLATION_LAYERS: Final[int] = 2
MAX_INTERPOLATION_LAYERS: Final[int] = 3

STRING_PULL_MAX_ITERATIONS: Final[int] = 10
STRING_PULL_CONVERGENCE: Final[float] = 0.5  # world units
# Fractions of a rejected move retried, largest first
STRING_PULL_BACKOFF: Final[tuple[float, ...]] = (1.0, 0.75, 0.5, 0.25, 0.1)

DEFAULT_SMOOTHING_ITERATIONS: Final[int] = 2

# Below this length a segment is treated as a point
GEOMETRY_EPSILON: Final[float] = 1e-9

# =============================================================================
# TURN MOVEMENT
# =============================================================================
DEFAULT_MAX_MOVEMENT_PER_TURN: Final[float] = 5.0  # cells
DEFAULT_MOVEMENT_SPEED: Final[float] = 240.0  # world units per second
DEFAULT_ARRIVAL_DISTANCE: Final[float] = 2.0  # world units
DEFAULT_NEAR_FINISH_PROGRESS: Final[float] = 0.99
# A turn ends automatically once this share of the budget is used
END_TURN_BUDGET_RATIO: Final[float] = 0.95

TICK_RATE: Final[int] = 30  # Updates per second
TICK_DURATION: Final[float] = 1.0 / TICK_RATE
