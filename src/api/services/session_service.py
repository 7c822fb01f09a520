"""
Movement session service.

One TurnBasedMovementController per session, with its notifications
recorded for polling clients.
"""

import logging
import uuid
from collections import OrderedDict, deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

from src.core.config import MovementSettings
from src.navigation import HexCell, HexCoord, HexGrid, SmoothCurve
from src.turns import (
    EventBus,
    MovementEvent,
    MoveRejection,
    PointBody,
    TurnBasedMovementController,
)

from ..schemas.common import CoordSchema
from ..schemas.movement import (
    CreateSessionRequest,
    EventSchema,
    SessionStateSchema,
    SettingsOverrides,
)
from .path_service import build_grid

logger = logging.getLogger(__name__)


class SessionActionError(Exception):
    """A controller call was refused."""

    def __init__(self, rejection: Optional[MoveRejection]):
        self.rejection = rejection
        super().__init__(rejection.value if rejection else "rejected")


def _serialize(value: Any) -> Any:
    """Make event payload values JSON friendly."""
    if isinstance(value, SmoothCurve):
        return [list(p) for p in value.points]
    if isinstance(value, HexCell):
        return {"q": value.q, "r": value.r}
    if isinstance(value, HexCoord):
        return {"q": value.q, "r": value.r}
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass
class MovementSession:
    """A controller, its grid and its most recent notifications."""

    session_id: str
    grid: HexGrid
    controller: TurnBasedMovementController
    events: Deque[EventSchema] = field(default_factory=deque)

    def record(self, event: MovementEvent, payload: Dict[str, Any]) -> None:
        self.events.append(
            EventSchema(
                event=event.name,
                payload={k: _serialize(v) for k, v in payload.items()},
            )
        )


class MovementSessionService:
    """Movement session management."""

    def __init__(
        self,
        max_sessions: int = 100,
        settings: Optional[MovementSettings] = None,
        max_events: int = 500,
    ):
        self.max_sessions = max_sessions
        self.max_events = max_events
        self.settings = settings or MovementSettings()
        self._sessions: "OrderedDict[str, MovementSession]" = OrderedDict()

    def create_session(self, request: CreateSessionRequest) -> SessionStateSchema:
        """
        Create a session with an agent at the start cell.

        Raises:
            ValueError: If the start cell is off-grid or disabled.
        """
        grid = build_grid(request.grid, self.settings)
        start = grid.cell_at_coord(HexCoord(request.start.q, request.start.r))
        if start is None or not start.enabled:
            raise ValueError(f"Start cell ({request.start.q}, {request.start.r}) is not walkable")

        settings = self._apply_overrides(request.settings)
        events = EventBus()
        controller = TurnBasedMovementController(
            grid, PointBody(start.world_position), settings=settings, events=events
        )

        session_id = str(uuid.uuid4())[:8]
        session = MovementSession(
            session_id=session_id,
            grid=grid,
            controller=controller,
            events=deque(maxlen=self.max_events),
        )
        events.subscribe_all(session.record)

        self._sessions[session_id] = session
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Evicted movement session %s", evicted)

        if request.start_turn:
            controller.start_turn()
        logger.info("Created movement session %s", session_id)
        return self.to_schema(session)

    def get_session(self, session_id: str) -> Optional[MovementSession]:
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> MovementSession:
        """
        Get a session.

        Raises:
            ValueError: If the session does not exist.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise ValueError(f"Session {session_id} not found")
        return session

    def delete_session(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def start_turn(self, session_id: str) -> SessionStateSchema:
        session = self.require_session(session_id)
        session.controller.start_turn()
        return self.to_schema(session)

    def end_turn(self, session_id: str) -> SessionStateSchema:
        session = self.require_session(session_id)
        session.controller.end_turn()
        return self.to_schema(session)

    def request_move(self, session_id: str, destination: CoordSchema) -> SessionStateSchema:
        session = self.require_session(session_id)
        controller = session.controller
        if not controller.request_movement_to(HexCoord(destination.q, destination.r)):
            raise SessionActionError(controller.last_rejection)
        return self.to_schema(session)

    def confirm(self, session_id: str) -> SessionStateSchema:
        session = self.require_session(session_id)
        if not session.controller.confirm_movement():
            raise SessionActionError(session.controller.last_rejection)
        return self.to_schema(session)

    def cancel(self, session_id: str) -> SessionStateSchema:
        session = self.require_session(session_id)
        if not session.controller.cancel_movement():
            raise SessionActionError(session.controller.last_rejection)
        return self.to_schema(session)

    def tick(self, session_id: str, delta_time: float, steps: int) -> SessionStateSchema:
        """Advance execution up to ``steps`` ticks, stopping once it finishes."""
        session = self.require_session(session_id)
        controller = session.controller
        for _ in range(steps):
            if controller.update(delta_time) is None:
                break
        return self.to_schema(session)

    def toggle_cell(
        self, session_id: str, cell: CoordSchema, enabled: Optional[bool]
    ) -> SessionStateSchema:
        """
        Edit the session grid.

        Raises:
            ValueError: If the cell is off-grid.
        """
        session = self.require_session(session_id)
        coord = HexCoord(cell.q, cell.r)
        if coord not in session.grid:
            raise ValueError(f"Cell ({cell.q}, {cell.r}) is off-grid")
        if enabled is None:
            session.grid.toggle(coord)
        else:
            session.grid.set_enabled(coord, enabled)
        return self.to_schema(session)

    def reachable(self, session_id: str) -> List[CoordSchema]:
        session = self.require_session(session_id)
        return [CoordSchema(q=c.q, r=c.r) for c in session.controller.reachable_cells()]

    def events(self, session_id: str) -> List[EventSchema]:
        return list(self.require_session(session_id).events)

    def to_schema(self, session: MovementSession) -> SessionStateSchema:
        snapshot = session.controller.snapshot()
        cell = snapshot["cell"]
        return SessionStateSchema(
            session_id=session.session_id,
            state=snapshot["state"],
            turn_number=snapshot["turn_number"],
            position=snapshot["position"],
            cell=CoordSchema(q=cell[0], r=cell[1]) if cell else None,
            max_movement_per_turn=snapshot["max_movement_per_turn"],
            used_this_turn=snapshot["used_this_turn"],
            remaining_budget=snapshot["remaining_budget"],
            progress=snapshot["progress"],
            path=[CoordSchema(q=q, r=r) for q, r in snapshot["path"]],
            curve=snapshot["curve"],
        )

    def _apply_overrides(self, overrides: SettingsOverrides) -> MovementSettings:
        update = overrides.model_dump(exclude_none=True)
        if not update:
            return self.settings
        return self.settings.model_copy(update=update)
