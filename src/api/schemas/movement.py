"""
Movement session API schemas.
"""

from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional

from src.core.config import CurveMethod
from src.core.constants import TICK_DURATION

from .common import CoordSchema, PointSchema
from .grid import GridSpec


class SettingsOverrides(BaseModel):
    """Per-session overrides of MovementSettings."""

    max_movement_per_turn: Optional[float] = Field(default=None, gt=0)
    movement_speed: Optional[float] = Field(default=None, gt=0)
    interpolation_layers: Optional[int] = Field(default=None, ge=1, le=3)
    curve_method: Optional[CurveMethod] = None
    smoothing_iterations: Optional[int] = Field(default=None, ge=0)
    arrival_distance_threshold: Optional[float] = Field(default=None, ge=0)
    near_finish_progress_threshold: Optional[float] = Field(default=None, gt=0, le=1)


class CreateSessionRequest(BaseModel):
    """Create a movement session."""

    grid: GridSpec = Field(default_factory=GridSpec)
    start: CoordSchema
    settings: SettingsOverrides = Field(default_factory=SettingsOverrides)
    start_turn: bool = True


class MoveRequest(BaseModel):
    """Plan a move."""

    destination: CoordSchema


class TickRequest(BaseModel):
    """Advance execution."""

    delta_time: float = Field(default=TICK_DURATION, gt=0, le=5)
    steps: int = Field(default=1, ge=1, le=10000)


class ToggleCellRequest(BaseModel):
    """Enable, disable or flip a cell."""

    cell: CoordSchema
    enabled: Optional[bool] = None  # None flips


class SessionStateSchema(BaseModel):
    """Controller snapshot."""

    session_id: str
    state: str
    turn_number: int
    position: PointSchema
    cell: Optional[CoordSchema] = None
    max_movement_per_turn: float
    used_this_turn: float
    remaining_budget: float
    progress: float
    path: List[CoordSchema]
    curve: List[PointSchema]


class RangeResponse(BaseModel):
    """Cells reachable with the remaining budget."""

    cells: List[CoordSchema]


class EventSchema(BaseModel):
    """Recorded notification."""

    event: str
    payload: Dict[str, Any]


class EventLogResponse(BaseModel):
    """Notifications recorded for a session."""

    events: List[EventSchema]
