"""Runtime settings for hex movement.

Values come from keyword arguments, then ``HEXMOVE_*`` environment
variables, then an optional ``.env`` file.
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_ARRIVAL_DISTANCE,
    DEFAULT_HEX_SIZE,
    DEFAULT_INTERPOLATION_LAYERS,
    DEFAULT_MAX_MOVEMENT_PER_TURN,
    DEFAULT_MOVEMENT_SPEED,
    DEFAULT_NEAR_FINISH_PROGRESS,
    DEFAULT_SMOOTHING_ITERATIONS,
    DEFAULT_WAYPOINT_TENSION,
    END_TURN_BUDGET_RATIO,
    MAX_INTERPOLATION_LAYERS,
    STRAIGHT_ANGLE_TOLERANCE_DEG,
    STRING_PULL_CONVERGENCE,
    STRING_PULL_MAX_ITERATIONS,
)


class CurveMethod(str, Enum):
    """Spline used for the final smoothing pass."""

    CHAIKIN = "chaikin"
    CATMULL_ROM = "catmull_rom"


class MovementSettings(BaseSettings):
    """Movement, smoothing and layout settings."""

    model_config = SettingsConfigDict(
        env_prefix="HEXMOVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Turn budget / execution
    max_movement_per_turn: float = Field(default=DEFAULT_MAX_MOVEMENT_PER_TURN, gt=0.0)
    movement_speed: float = Field(default=DEFAULT_MOVEMENT_SPEED, gt=0.0)
    arrival_distance_threshold: float = Field(default=DEFAULT_ARRIVAL_DISTANCE, ge=0.0)
    near_finish_progress_threshold: float = Field(
        default=DEFAULT_NEAR_FINISH_PROGRESS, gt=0.0, le=1.0
    )
    end_turn_budget_ratio: float = Field(default=END_TURN_BUDGET_RATIO, gt=0.0, le=1.0)

    # Path -> curve pipeline
    interpolation_layers: int = Field(
        default=DEFAULT_INTERPOLATION_LAYERS, ge=1, le=MAX_INTERPOLATION_LAYERS
    )
    curve_method: CurveMethod = CurveMethod.CATMULL_ROM
    smoothing_iterations: int = Field(default=DEFAULT_SMOOTHING_ITERATIONS, ge=0)
    waypoint_tension: float = Field(default=DEFAULT_WAYPOINT_TENSION, ge=0.0, le=1.0)
    string_pull_iterations: int = Field(default=STRING_PULL_MAX_ITERATIONS, ge=0)
    string_pull_convergence: float = Field(default=STRING_PULL_CONVERGENCE, gt=0.0)
    straight_angle_tolerance: float = Field(
        default=STRAIGHT_ANGLE_TOLERANCE_DEG, ge=0.0, lt=90.0
    )

    # Layout
    hex_size: float = Field(default=DEFAULT_HEX_SIZE, gt=0.0)
    isometric: bool = False


@lru_cache()
def get_movement_settings() -> MovementSettings:
    """Get MovementSettings singleton."""
    return MovementSettings()
