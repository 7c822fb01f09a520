"""Per-turn movement state machine."""

import logging
from enum import Enum, auto
from typing import Dict, FrozenSet, Optional

from .events import EventBus, MovementEvent

logger = logging.getLogger(__name__)


class TurnState(Enum):
    """Movement lifecycle state for one agent."""

    IDLE = auto()  # Waiting for a destination
    PLANNING = auto()  # Pathfinding in progress
    PREVIEW = auto()  # Curve built, being shown
    AWAITING_CONFIRMATION = auto()  # Waiting for confirm/cancel
    EXECUTING = auto()  # Moving along the curve
    COMPLETED = auto()  # Move finished / turn over


# Legal targets per state; IDLE is always reachable
TRANSITIONS: Dict[TurnState, FrozenSet[TurnState]] = {
    TurnState.IDLE: frozenset({TurnState.PLANNING}),
    TurnState.PLANNING: frozenset({TurnState.PREVIEW}),
    TurnState.PREVIEW: frozenset({TurnState.AWAITING_CONFIRMATION}),
    TurnState.AWAITING_CONFIRMATION: frozenset({TurnState.EXECUTING}),
    TurnState.EXECUTING: frozenset({TurnState.COMPLETED}),
    TurnState.COMPLETED: frozenset(),
}


class TurnStateMachine:
    """
    Enumerated states and legal transitions for one agent's move.

    Illegal transitions are refused with a warning and leave the state
    untouched.

    Usage:
        machine = TurnStateMachine()
        machine.start_turn()
        machine.transition_to(TurnState.PLANNING)
    """

    def __init__(self, events: Optional[EventBus] = None):
        """
        Initialize state machine.

        Args:
            events: Bus for TURN_STARTED / TURN_ENDED / STATE_CHANGED.
        """
        self.events = events or EventBus()
        self._state = TurnState.IDLE
        self.turn_number = 0

    @property
    def state(self) -> TurnState:
        return self._state

    def is_in(self, state: TurnState) -> bool:
        return self._state is state

    @staticmethod
    def can_transition(current: TurnState, target: TurnState) -> bool:
        """Check the transition table."""
        return target is TurnState.IDLE or target in TRANSITIONS[current]

    def transition_to(self, target: TurnState) -> bool:
        """
        Move to a new state if the table allows it.

        Returns:
            True if the state changed (or was already IDLE for an IDLE
            request), False if the transition was refused.
        """
        if not self.can_transition(self._state, target):
            logger.warning(
                "Illegal turn state transition %s -> %s", self._state.name, target.name
            )
            return False

        previous = self._state
        if previous is target:
            return True
        self._state = target
        logger.debug("Turn state %s -> %s", previous.name, target.name)
        self.events.emit(MovementEvent.STATE_CHANGED, previous=previous, current=target)
        return True

    def reset(self) -> None:
        """Force IDLE from any state (cancel / error recovery)."""
        self.transition_to(TurnState.IDLE)

    def start_turn(self) -> int:
        """
        Begin a new turn: reset to IDLE and bump the counter.

        Returns:
            The new turn number.
        """
        self.reset()
        self.turn_number += 1
        logger.info("Turn %d started", self.turn_number)
        self.events.emit(MovementEvent.TURN_STARTED, turn_number=self.turn_number)
        return self.turn_number

    def end_turn(self) -> None:
        """
        End the current turn.

        EXECUTING moves to COMPLETED; any other state drops to IDLE.
        TURN_ENDED always fires.
        """
        if self._state is TurnState.EXECUTING:
            self.transition_to(TurnState.COMPLETED)
        else:
            self.reset()
        logger.info("Turn %d ended", self.turn_number)
        self.events.emit(MovementEvent.TURN_ENDED, turn_number=self.turn_number)
