# Shared constants, settings and logging setup
from .constants import (
    DEFAULT_HEX_SIZE,
    DEFAULT_MAX_MOVEMENT_PER_TURN,
    DEFAULT_MOVEMENT_SPEED,
    HEX_DIRECTIONS,
    TICK_DURATION,
    TICK_RATE,
)
from .config import CurveMethod, MovementSettings, get_movement_settings
from .logging_config import configure_logging

__all__ = [
    "DEFAULT_HEX_SIZE",
    "DEFAULT_MAX_MOVEMENT_PER_TURN",
    "DEFAULT_MOVEMENT_SPEED",
    "HEX_DIRECTIONS",
    "TICK_DURATION",
    "TICK_RATE",
    "CurveMethod",
    "MovementSettings",
    "get_movement_settings",
    "configure_logging",
]
