"""
Common API schemas.
"""

from pydantic import BaseModel
from typing import Optional, Tuple
from enum import Enum


class ResponseStatus(str, Enum):
    """Response status enum."""

    SUCCESS = "success"
    ERROR = "error"


class BaseResponse(BaseModel):
    """Base response model."""

    status: ResponseStatus = ResponseStatus.SUCCESS
    message: Optional[str] = None


class CoordSchema(BaseModel):
    """Axial hex coordinate."""

    q: int
    r: int


# World-space point as [x, y]
PointSchema = Tuple[float, float]
