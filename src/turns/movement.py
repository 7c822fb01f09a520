"""Movement execution along a smooth curve.

Handles tick-based advancement of a confirmed move, distance milestones
and the per-turn distance budget.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from src.core.constants import (
    DEFAULT_ARRIVAL_DISTANCE,
    DEFAULT_MOVEMENT_SPEED,
    DEFAULT_NEAR_FINISH_PROGRESS,
    END_TURN_BUDGET_RATIO,
    GEOMETRY_EPSILON,
)
from src.navigation.curves import SmoothCurve
from src.navigation.vector import Point, distance, normalize, sub

from .agent import AgentBody

logger = logging.getLogger(__name__)


@dataclass
class MovementBudget:
    """
    Distance an agent may still travel this turn, in cells.

    ``used`` only grows within a turn and never passes ``max_per_turn``.
    """

    max_per_turn: float
    used: float = 0.0

    def __post_init__(self):
        if self.max_per_turn <= 0:
            raise ValueError(f"max_per_turn must be positive, got {self.max_per_turn}")

    @property
    def remaining(self) -> float:
        return max(0.0, self.max_per_turn - self.used)

    @property
    def remaining_cells(self) -> int:
        """Whole cells still affordable."""
        return int(math.floor(self.remaining + GEOMETRY_EPSILON))

    def consume(self, amount: float) -> float:
        """
        Spend part of the budget.

        Args:
            amount: Cells travelled (negative values are ignored).

        Returns:
            Amount actually charged after capping.
        """
        charged = min(max(0.0, amount), self.remaining)
        self.used += charged
        return charged

    def reset(self) -> None:
        self.used = 0.0

    def is_exhausted(self, ratio: float = END_TURN_BUDGET_RATIO) -> bool:
        """True once ``used`` reaches ``ratio`` of the maximum."""
        return self.used >= ratio * self.max_per_turn


class ProgressTracker:
    """
    Normalized progress along a curve.

    Progress maps onto cumulative Euclidean length and never decreases.
    Milestones are whole cells of the underlying path crossed so far.
    """

    def __init__(self, curve: SmoothCurve, cell_distance: int = 0):
        """
        Initialize tracker.

        Args:
            curve: Curve being walked.
            cell_distance: Cell steps the curve represents.
        """
        self.curve = curve
        self.cell_distance = max(0, cell_distance)
        self.progress = 0.0
        self.cells_traversed = 0

    @property
    def length(self) -> float:
        return self.curve.length

    @property
    def distance_travelled(self) -> float:
        return self.progress * self.length

    @property
    def is_finished(self) -> bool:
        return self.progress >= 1.0

    def reset(self) -> None:
        self.progress = 0.0
        self.cells_traversed = 0

    def set_progress(self, value: float) -> List[int]:
        """
        Move progress forward to ``value`` (clamped to [0, 1]).

        Returns:
            Newly crossed cell milestones, in order.
        """
        self.progress = max(self.progress, min(1.0, value))
        reached = int(math.floor(self.progress * self.cell_distance + GEOMETRY_EPSILON))
        milestones = list(range(self.cells_traversed + 1, reached + 1))
        self.cells_traversed = max(self.cells_traversed, reached)
        return milestones

    def advance(self, travelled: float) -> List[int]:
        """Advance by a world-space distance."""
        if self.length < GEOMETRY_EPSILON:
            return self.set_progress(1.0)
        return self.set_progress(self.progress + max(0.0, travelled) / self.length)

    def target_point(self) -> Point:
        return self.curve.point_at(self.progress)


@dataclass
class ExecutionStep:
    """Result of one execution tick."""

    position: Point
    direction: Optional[Point]
    progress: float
    completed: bool
    milestones: List[int] = field(default_factory=list)


class MovementExecutor:
    """
    Drives an AgentBody along a SmoothCurve over time.

    Usage:
        executor = MovementExecutor(body, speed=240.0)
        executor.start(curve, cell_distance=3)
        # Each tick:
        step = executor.update(delta_time=0.033)
    """

    def __init__(
        self,
        body: AgentBody,
        speed: float = DEFAULT_MOVEMENT_SPEED,
        arrival_threshold: float = DEFAULT_ARRIVAL_DISTANCE,
        near_finish_progress: float = DEFAULT_NEAR_FINISH_PROGRESS,
    ):
        """
        Initialize executor.

        Args:
            body: Agent being moved.
            speed: World units per second.
            arrival_threshold: Snap to the end when this close to it.
            near_finish_progress: Snap to the end at this progress.
        """
        self.body = body
        self.speed = speed
        self.arrival_threshold = arrival_threshold
        self.near_finish_progress = near_finish_progress
        self.tracker: Optional[ProgressTracker] = None
        self.is_active = False

    @property
    def progress(self) -> float:
        return self.tracker.progress if self.tracker else 0.0

    def start(self, curve: SmoothCurve, cell_distance: int) -> None:
        """Begin walking a curve from progress 0."""
        self.tracker = ProgressTracker(curve, cell_distance)
        self.is_active = True

    def stop(self) -> None:
        self.is_active = False

    def update(self, delta_time: float) -> ExecutionStep:
        """
        Advance the move by delta time.

        Args:
            delta_time: Time elapsed (seconds).

        Returns:
            Position, facing and completion for this tick.
        """
        if not self.is_active or self.tracker is None:
            return ExecutionStep(
                position=self.body.position,
                direction=None,
                progress=self.progress,
                completed=True,
            )

        tracker = self.tracker
        milestones = tracker.advance(self.speed * max(0.0, delta_time))
        target = tracker.target_point()
        final = tracker.curve.end
        direction = normalize(sub(target, self.body.position))

        if (
            distance(target, final) <= self.arrival_threshold
            or tracker.progress >= self.near_finish_progress
        ):
            milestones.extend(tracker.set_progress(1.0))
            if direction is None:
                direction = normalize(sub(final, self.body.position))
            self.body.set_position(final)
            if direction is not None:
                self.body.set_facing(direction)
            self.is_active = False
            logger.debug("Execution reached end of curve at %s", final)
            return ExecutionStep(
                position=final,
                direction=direction,
                progress=1.0,
                completed=True,
                milestones=milestones,
            )

        self.body.set_position(target)
        if direction is not None:
            self.body.set_facing(direction)
        return ExecutionStep(
            position=target,
            direction=direction,
            progress=tracker.progress,
            completed=False,
            milestones=milestones,
        )
