"""
Grid and path API schemas.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum

from src.core.config import CurveMethod

from .common import CoordSchema, PointSchema


class GridShape(str, Enum):
    """Grid construction shape."""

    PARALLELOGRAM = "parallelogram"
    HEXAGON = "hexagon"


class OrientationName(str, Enum):
    """Hex orientation."""

    POINTY = "pointy"
    FLAT = "flat"


class GridSpec(BaseModel):
    """Grid to build for a request or session."""

    shape: GridShape = GridShape.PARALLELOGRAM
    width: int = Field(default=5, ge=1, le=200)  # parallelogram only
    height: int = Field(default=5, ge=1, le=200)  # parallelogram only
    radius: int = Field(default=3, ge=0, le=100)  # hexagon only
    hex_size: Optional[float] = Field(default=None, gt=0)  # Settings default when omitted
    orientation: OrientationName = OrientationName.POINTY
    isometric: Optional[bool] = None
    disabled: List[CoordSchema] = Field(default_factory=list)


class FindPathRequest(BaseModel):
    """Stateless pathfinding request."""

    grid: GridSpec
    start: CoordSchema
    goal: CoordSchema
    radius: Optional[int] = Field(default=None, ge=0)  # Stop within range of goal
    curve_method: Optional[CurveMethod] = None


class PathResponse(BaseModel):
    """Path and its smoothed curve."""

    cells: List[CoordSchema]
    cost: int
    curve: List[PointSchema]
    curve_length: float


class BoundaryRequest(BaseModel):
    """Boundary trace request."""

    grid: GridSpec
    iterations: int = Field(default=2, ge=0, le=6)


class BoundaryResponse(BaseModel):
    """Ordered boundary cells and closed contour."""

    boundary: List[CoordSchema]
    contour: List[PointSchema]
