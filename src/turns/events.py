"""Movement notifications.

A small synchronous observer bus. Subscribers are called in registration
order on the emitting call stack.
"""

from enum import Enum, auto
from typing import Any, Callable, Dict, List

EventCallback = Callable[["MovementEvent", Dict[str, Any]], None]


class MovementEvent(Enum):
    """Notifications fired by the turn/movement core."""

    TURN_STARTED = auto()  # turn_number
    TURN_ENDED = auto()  # turn_number
    STATE_CHANGED = auto()  # previous, current
    PATH_CALCULATED = auto()  # curve, total_distance, path
    PATH_FAILED = auto()  # status, destination
    PATH_CONFIRMED = auto()
    PATH_CANCELLED = auto()
    MOVEMENT_STARTED = auto()
    MOVEMENT_COMPLETED = auto()  # distance_used
    PROGRESS_MILESTONE = auto()  # cells_traversed, progress
    BUDGET_EXHAUSTED = auto()  # used, maximum


class EventBus:
    """
    Observer registry keyed by MovementEvent.

    Usage:
        bus = EventBus()
        bus.subscribe(MovementEvent.TURN_STARTED, lambda event, data: print(data))
        bus.emit(MovementEvent.TURN_STARTED, turn_number=1)
    """

    def __init__(self):
        self._subscribers: Dict[MovementEvent, List[EventCallback]] = {}
        self._wildcard: List[EventCallback] = []

    def subscribe(self, event: MovementEvent, callback: EventCallback) -> None:
        """Register a callback for one event type."""
        self._subscribers.setdefault(event, []).append(callback)

    def subscribe_all(self, callback: EventCallback) -> None:
        """Register a callback for every event type."""
        self._wildcard.append(callback)

    def unsubscribe(self, event: MovementEvent, callback: EventCallback) -> bool:
        """
        Remove a callback.

        Returns:
            True if the callback was registered.
        """
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    def unsubscribe_all(self, callback: EventCallback) -> bool:
        if callback in self._wildcard:
            self._wildcard.remove(callback)
            return True
        return False

    def emit(self, event: MovementEvent, **payload: Any) -> None:
        """Call every subscriber for the event with the payload dict."""
        for callback in list(self._subscribers.get(event, [])):
            callback(event, payload)
        for callback in list(self._wildcard):
            callback(event, payload)
