"""API services."""

from .path_service import PathService, build_grid
from .session_service import MovementSession, MovementSessionService, SessionActionError

__all__ = [
    "PathService",
    "build_grid",
    "MovementSession",
    "MovementSessionService",
    "SessionActionError",
]
