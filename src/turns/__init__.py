"""Turn-based movement module.

This module provides the execution half of turn-based movement:
- The per-turn state machine and its notifications
- Movement budget accounting
- Progress tracking and tick-based execution along a curve
- The controller tying planning, preview, confirmation and execution together
"""

# Notifications
from .events import EventBus, MovementEvent

# State machine
from .turn_state import TRANSITIONS, TurnState, TurnStateMachine

# Execution
from .agent import AgentBody, PointBody
from .movement import ExecutionStep, MovementBudget, MovementExecutor, ProgressTracker

# Orchestration
from .controller import MoveRejection, TurnBasedMovementController

__all__ = [
    # Notifications
    "EventBus",
    "MovementEvent",
    # State machine
    "TRANSITIONS",
    "TurnState",
    "TurnStateMachine",
    # Execution
    "AgentBody",
    "PointBody",
    "ExecutionStep",
    "MovementBudget",
    "MovementExecutor",
    "ProgressTracker",
    # Orchestration
    "MoveRejection",
    "TurnBasedMovementController",
]
