"""
Stateless pathfinding API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from ..schemas.grid import (
    FindPathRequest,
    PathResponse,
    BoundaryRequest,
    BoundaryResponse,
)
from ..services.path_service import PathService
from ..dependencies import get_path_service

router = APIRouter()


@router.post("/find", response_model=PathResponse)
async def find_path(
    request: FindPathRequest,
    service: PathService = Depends(get_path_service),
):
    """
    Find a path on a request-supplied grid.

    With ``radius`` set, stops at the nearest cell within range of goal.
    """
    result = service.find_path(
        grid_spec=request.grid,
        start=request.start,
        goal=request.goal,
        radius=request.radius,
        curve_method=request.curve_method,
    )
    if result is None:
        raise HTTPException(status_code=404, detail="No path found")
    return result


@router.post("/boundary", response_model=BoundaryResponse)
async def trace_boundary(
    request: BoundaryRequest,
    service: PathService = Depends(get_path_service),
):
    """Trace the boundary of the grid's enabled cells."""
    return service.trace_boundary(request.grid, request.iterations)
