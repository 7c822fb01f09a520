"""Turn-based movement controller.

Orchestrates planning -> preview -> confirmation -> execution -> completion
for a single agent and enforces the per-turn distance budget.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from src.core.config import MovementSettings
from src.navigation.curves import SmoothCurve
from src.navigation.hex_grid import CoordLike, HexCell, HexGrid, as_coord
from src.navigation.path_curve import PathCurveBuilder
from src.navigation.pathfinding import HexPathfinder, PathStatus, path_cost
from src.navigation.vector import Point

from .agent import AgentBody
from .events import EventBus, MovementEvent
from .movement import ExecutionStep, MovementBudget, MovementExecutor
from .turn_state import TurnState, TurnStateMachine

logger = logging.getLogger(__name__)


class MoveRejection(str, Enum):
    """Why a controller call returned False."""

    WRONG_STATE = "wrong_state"
    NO_BUDGET = "no_budget"
    OFF_GRID = "off_grid"
    INVALID_DESTINATION = "invalid_destination"
    UNREACHABLE = "unreachable"
    ALREADY_THERE = "already_there"


class TurnBasedMovementController:
    """
    Per-agent movement lifecycle.

    Usage:
        controller = TurnBasedMovementController(grid, body, settings)
        controller.start_turn()
        if controller.request_movement_to(HexCoord(3, 0)):
            controller.confirm_movement()
        # Each tick:
        controller.update(delta_time=0.033)
    """

    def __init__(
        self,
        grid: HexGrid,
        body: AgentBody,
        settings: Optional[MovementSettings] = None,
        events: Optional[EventBus] = None,
        pathfinder: Optional[HexPathfinder] = None,
        curve_builder: Optional[PathCurveBuilder] = None,
    ):
        """
        Initialize controller.

        Args:
            grid: Grid the agent moves on.
            body: Agent position/facing adapter.
            settings: Movement settings (defaults when omitted).
            events: Notification bus (a private one when omitted).
            pathfinder: Pathfinder over ``grid``.
            curve_builder: Cell path to curve pipeline.
        """
        self.grid = grid
        self.body = body
        self.settings = settings or MovementSettings()
        self.events = events or EventBus()
        self.state_machine = TurnStateMachine(self.events)
        self.pathfinder = pathfinder or HexPathfinder(grid)
        self.curve_builder = curve_builder or PathCurveBuilder(grid.layout, self.settings)
        self.budget = MovementBudget(self.settings.max_movement_per_turn)
        self.executor = MovementExecutor(
            body,
            speed=self.settings.movement_speed,
            arrival_threshold=self.settings.arrival_distance_threshold,
            near_finish_progress=self.settings.near_finish_progress_threshold,
        )

        # Replaced (never mutated) by each request
        self.current_path: List[HexCell] = []
        self.current_curve: Optional[SmoothCurve] = None

        self.last_rejection: Optional[MoveRejection] = None
        self.last_path_status: Optional[PathStatus] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> TurnState:
        return self.state_machine.state

    @property
    def turn_number(self) -> int:
        return self.state_machine.turn_number

    @property
    def used_this_turn(self) -> float:
        return self.budget.used

    @property
    def remaining_budget(self) -> float:
        return self.budget.remaining

    @property
    def is_executing(self) -> bool:
        return self.state is TurnState.EXECUTING

    @property
    def current_cell(self) -> Optional[HexCell]:
        """Cell under the agent's current position."""
        return self.grid.cell_at_world_position(self.body.position)

    # ------------------------------------------------------------------
    # Turn boundaries
    # ------------------------------------------------------------------

    def start_turn(self) -> int:
        """
        Begin a new turn: drop any pending move and refill the budget.

        Returns:
            The new turn number.
        """
        self.executor.stop()
        self._discard_pending()
        self.budget.reset()
        return self.state_machine.start_turn()

    def end_turn(self) -> None:
        """
        End the turn early.

        A move in progress stops where it is and is charged for the cells
        already crossed.
        """
        if self.is_executing and self.executor.is_active and self.executor.tracker:
            self.budget.consume(self.executor.tracker.cells_traversed)
            self.executor.stop()
        self._discard_pending()
        self.state_machine.end_turn()

    def force_idle(self) -> None:
        """Drop everything and return to IDLE (error recovery)."""
        self.executor.stop()
        self._discard_pending()
        self.state_machine.reset()

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def request_movement_to(self, destination: Optional[CoordLike]) -> bool:
        """
        Plan a move to a destination cell.

        Valid only from IDLE. On success the controller holds the trimmed
        path and its curve and waits in AWAITING_CONFIRMATION.

        Args:
            destination: Target coordinate or cell.

        Returns:
            True if a path was planned, False otherwise (see last_rejection).
        """
        if not self.state_machine.is_in(TurnState.IDLE):
            return self._reject(MoveRejection.WRONG_STATE, f"request from {self.state.name}")

        remaining_cells = self.budget.remaining_cells
        if remaining_cells <= 0:
            self.events.emit(
                MovementEvent.BUDGET_EXHAUSTED,
                used=self.budget.used,
                maximum=self.budget.max_per_turn,
            )
            return self._reject(MoveRejection.NO_BUDGET, "no movement left this turn")

        try:
            target = as_coord(destination)
        except (TypeError, ValueError):
            self.last_path_status = PathStatus.INVALID_INPUT
            self.events.emit(
                MovementEvent.PATH_FAILED, status=PathStatus.INVALID_INPUT, destination=destination
            )
            return self._reject(
                MoveRejection.INVALID_DESTINATION, f"unusable destination {destination!r}"
            )

        self.state_machine.transition_to(TurnState.PLANNING)
        start = self.current_cell
        goal = self.grid.cell_at_coord(target)
        if start is None or goal is None:
            return self._planning_failed(
                MoveRejection.OFF_GRID, PathStatus.INVALID_INPUT, target
            )
        if start is goal:
            self.state_machine.reset()
            return self._reject(MoveRejection.ALREADY_THERE, f"agent already at {target}")

        path = self.pathfinder.find_path(start, goal)
        self.last_path_status = self.pathfinder.last_status
        if not path:
            rejection = (
                MoveRejection.INVALID_DESTINATION
                if self.last_path_status is PathStatus.INVALID_INPUT
                else MoveRejection.UNREACHABLE
            )
            return self._planning_failed(rejection, self.last_path_status, target)

        return self._plan(path, remaining_cells)

    def request_movement_to_world(self, point: Point) -> bool:
        """Plan a move to the cell containing a world position."""
        try:
            target = self.grid.layout.to_hex(point)
        except (TypeError, ValueError):
            target = None
        return self.request_movement_to(target)

    def _plan(self, path: List[HexCell], remaining_cells: int) -> bool:
        if path_cost(path) > remaining_cells:
            logger.debug(
                "Trimming path from %d to %d cells of movement", path_cost(path), remaining_cells
            )
            path = path[: remaining_cells + 1]

        curve = self.curve_builder.build(path)
        self.current_path = list(path)
        self.current_curve = curve
        self.last_rejection = None

        self.state_machine.transition_to(TurnState.PREVIEW)
        total_distance = path_cost(path)
        logger.info("Planned %d-cell move to %s", total_distance, path[-1])
        self.events.emit(
            MovementEvent.PATH_CALCULATED,
            curve=curve,
            total_distance=total_distance,
            path=list(path),
        )
        self.state_machine.transition_to(TurnState.AWAITING_CONFIRMATION)
        return True

    def _planning_failed(
        self, rejection: MoveRejection, status: Optional[PathStatus], target: Any
    ) -> bool:
        self.last_path_status = status
        self.state_machine.reset()
        self.events.emit(MovementEvent.PATH_FAILED, status=status, destination=target)
        return self._reject(rejection, f"no path to {target}")

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------

    def confirm_movement(self) -> bool:
        """
        Start executing the pending move.

        Returns:
            True if execution started, False when nothing awaits confirmation.
        """
        if not self.state_machine.is_in(TurnState.AWAITING_CONFIRMATION) or self.current_curve is None:
            return self._reject(MoveRejection.WRONG_STATE, f"confirm from {self.state.name}")

        self.state_machine.transition_to(TurnState.EXECUTING)
        self.executor.start(self.current_curve, path_cost(self.current_path))
        logger.info("Movement confirmed (%d cells)", path_cost(self.current_path))
        self.events.emit(MovementEvent.PATH_CONFIRMED)
        self.events.emit(MovementEvent.MOVEMENT_STARTED)
        return True

    def cancel_movement(self) -> bool:
        """
        Discard the pending move and return to IDLE.

        Returns:
            True if a pending move was cancelled.
        """
        if not self.state_machine.is_in(TurnState.AWAITING_CONFIRMATION):
            return self._reject(MoveRejection.WRONG_STATE, f"cancel from {self.state.name}")

        self._discard_pending()
        self.state_machine.reset()
        logger.info("Movement cancelled")
        self.events.emit(MovementEvent.PATH_CANCELLED)
        return True

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def update(self, delta_time: float) -> Optional[ExecutionStep]:
        """
        Advance an executing move by delta time.

        Args:
            delta_time: Time elapsed (seconds).

        Returns:
            The tick's ExecutionStep, or None when not executing.
        """
        if not self.is_executing:
            return None

        step = self.executor.update(delta_time)
        for cells in step.milestones:
            self.events.emit(
                MovementEvent.PROGRESS_MILESTONE, cells_traversed=cells, progress=step.progress
            )
        if step.completed:
            self._complete_movement()
        return step

    def _complete_movement(self) -> None:
        distance_used = path_cost(self.current_path)
        self.budget.consume(distance_used)
        logger.info(
            "Movement completed: %d cells (%.2f/%.2f used)",
            distance_used,
            self.budget.used,
            self.budget.max_per_turn,
        )
        self._discard_pending()
        self.events.emit(MovementEvent.MOVEMENT_COMPLETED, distance_used=distance_used)

        if self.budget.is_exhausted(self.settings.end_turn_budget_ratio):
            self.events.emit(
                MovementEvent.BUDGET_EXHAUSTED,
                used=self.budget.used,
                maximum=self.budget.max_per_turn,
            )
            self.state_machine.end_turn()
        else:
            self.state_machine.transition_to(TurnState.COMPLETED)
            self.state_machine.transition_to(TurnState.IDLE)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def reachable_cells(self) -> List[HexCell]:
        """Cells reachable with the remaining budget (range preview)."""
        return self.pathfinder.get_cells_in_movement_range(
            self.current_cell, self.budget.remaining_cells
        )

    def snapshot(self) -> Dict[str, Any]:
        """Plain-data view of the controller."""
        cell = self.current_cell
        return {
            "state": self.state.name,
            "turn_number": self.turn_number,
            "position": self.body.position,
            "cell": (cell.q, cell.r) if cell else None,
            "max_movement_per_turn": self.budget.max_per_turn,
            "used_this_turn": self.budget.used,
            "remaining_budget": self.budget.remaining,
            "progress": self.executor.progress if self.is_executing else 0.0,
            "path": [(c.q, c.r) for c in self.current_path],
            "curve": list(self.current_curve.points) if self.current_curve else [],
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _discard_pending(self) -> None:
        self.current_path = []
        self.current_curve = None

    def _reject(self, rejection: MoveRejection, detail: str) -> bool:
        self.last_rejection = rejection
        logger.warning("Movement request rejected (%s): %s", rejection.value, detail)
        return False
