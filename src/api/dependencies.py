"""
Dependency injection for API services.
"""

from functools import lru_cache

from src.core.config import get_movement_settings

from .config import settings
from .services.path_service import PathService
from .services.session_service import MovementSessionService


@lru_cache()
def get_path_service() -> PathService:
    """Get PathService singleton."""
    return PathService(get_movement_settings())


@lru_cache()
def get_session_service() -> MovementSessionService:
    """Get MovementSessionService singleton."""
    return MovementSessionService(
        settings.MAX_SESSIONS, get_movement_settings(), settings.MAX_SESSION_EVENTS
    )
