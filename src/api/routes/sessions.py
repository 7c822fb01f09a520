"""
Movement session API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from ..schemas.common import BaseResponse
from ..schemas.movement import (
    CreateSessionRequest,
    MoveRequest,
    TickRequest,
    ToggleCellRequest,
    SessionStateSchema,
    RangeResponse,
    EventLogResponse,
)
from ..services.session_service import MovementSessionService, SessionActionError
from ..dependencies import get_session_service

router = APIRouter()


@router.post("", response_model=SessionStateSchema)
async def create_session(
    request: CreateSessionRequest,
    service: MovementSessionService = Depends(get_session_service),
):
    """Create a movement session."""
    try:
        return service.create_session(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{session_id}", response_model=SessionStateSchema)
async def get_session(
    session_id: str,
    service: MovementSessionService = Depends(get_session_service),
):
    """Get session state."""
    session = service.get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")
    return service.to_schema(session)


@router.delete("/{session_id}", response_model=BaseResponse)
async def delete_session(
    session_id: str,
    service: MovementSessionService = Depends(get_session_service),
):
    """Delete a session."""
    if not service.delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return BaseResponse(message="Session deleted")


@router.post("/{session_id}/turn/start", response_model=SessionStateSchema)
async def start_turn(
    session_id: str,
    service: MovementSessionService = Depends(get_session_service),
):
    """Start a new turn."""
    try:
        return service.start_turn(session_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{session_id}/turn/end", response_model=SessionStateSchema)
async def end_turn(
    session_id: str,
    service: MovementSessionService = Depends(get_session_service),
):
    """End the current turn."""
    try:
        return service.end_turn(session_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{session_id}/move", response_model=SessionStateSchema)
async def request_move(
    session_id: str,
    request: MoveRequest,
    service: MovementSessionService = Depends(get_session_service),
):
    """Plan a move; the session then awaits confirmation."""
    try:
        return service.request_move(session_id, request.destination)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SessionActionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{session_id}/confirm", response_model=SessionStateSchema)
async def confirm_move(
    session_id: str,
    service: MovementSessionService = Depends(get_session_service),
):
    """Confirm the pending move."""
    try:
        return service.confirm(session_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SessionActionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{session_id}/cancel", response_model=SessionStateSchema)
async def cancel_move(
    session_id: str,
    service: MovementSessionService = Depends(get_session_service),
):
    """Cancel the pending move."""
    try:
        return service.cancel(session_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SessionActionError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{session_id}/tick", response_model=SessionStateSchema)
async def tick(
    session_id: str,
    request: TickRequest,
    service: MovementSessionService = Depends(get_session_service),
):
    """Advance an executing move."""
    try:
        return service.tick(session_id, request.delta_time, request.steps)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{session_id}/range", response_model=RangeResponse)
async def movement_range(
    session_id: str,
    service: MovementSessionService = Depends(get_session_service),
):
    """Cells reachable with the remaining budget."""
    try:
        return RangeResponse(cells=service.reachable(session_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{session_id}/events", response_model=EventLogResponse)
async def get_events(
    session_id: str,
    service: MovementSessionService = Depends(get_session_service),
):
    """Notifications recorded for the session."""
    try:
        return EventLogResponse(events=service.events(session_id))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{session_id}/cells/toggle", response_model=SessionStateSchema)
async def toggle_cell(
    session_id: str,
    request: ToggleCellRequest,
    service: MovementSessionService = Depends(get_session_service),
):
    """Enable, disable or flip a grid cell."""
    if service.get_session(session_id) is None:
        raise HTTPException(status_code=404, detail="Session not found")
    try:
        return service.toggle_cell(session_id, request.cell, request.enabled)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
