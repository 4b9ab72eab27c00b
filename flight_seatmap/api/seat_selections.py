"""
Seat selection API endpoints.

Endpoints are coroutines so that every request runs on the event loop and
operations on one session never interleave.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status

from flight_seatmap.schemas.common import ErrorResponse
from flight_seatmap.schemas.seat import (
    ProceedRequest, RequiredCountRequest, SeatSnapshotRequest, SelectionCreateRequest,
    SelectionStateResponse, ToggleResponse, ToggleSeatRequest
)
from flight_seatmap.services.selection_session_service import (
    SelectionSessionService, get_selection_session_service
)
from flight_seatmap.utils.exceptions import (
    SelectionSessionNotFoundError, SessionLimitError, ValidationError
)

router = APIRouter(
    prefix="/seat-selections",
    tags=["seat-selections"],
    responses={404: {"model": ErrorResponse, "description": "Selection session not found"}}
)


def _not_found(exc: SelectionSessionNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.to_dict())


@router.post("", response_model=SelectionStateResponse, status_code=status.HTTP_201_CREATED)
async def create_selection(
    request: SelectionCreateRequest,
    service: SelectionSessionService = Depends(get_selection_session_service)
):
    """
    Start a seat selection for a flight.

    Args:
        request: Flight id, passenger count and current seat snapshot
        service: Selection session service

    Returns:
        Initial seat map and empty selection
    """
    try:
        return service.create_session(
            flight_id=request.flight_id,
            seats=request.seats,
            required_count=request.required_count
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.to_dict())
    except SessionLimitError as e:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=e.to_dict())


@router.get("/{session_id}", response_model=SelectionStateResponse)
async def get_selection(
    session_id: str,
    service: SelectionSessionService = Depends(get_selection_session_service)
):
    """Get the seat map and current selection."""
    try:
        return service.get_state(session_id)
    except SelectionSessionNotFoundError as e:
        raise _not_found(e)


@router.put("/{session_id}/seats", response_model=SelectionStateResponse)
async def replace_seats(
    session_id: str,
    request: SeatSnapshotRequest,
    service: SelectionSessionService = Depends(get_selection_session_service)
):
    """
    Replace the seat snapshot with a newer one.

    Selected seats that were removed or taken meanwhile are dropped from the
    selection.
    """
    try:
        return service.replace_seats(session_id, request.seats)
    except SelectionSessionNotFoundError as e:
        raise _not_found(e)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.to_dict())


@router.post("/{session_id}/toggle", response_model=ToggleResponse)
async def toggle_seat(
    session_id: str,
    request: ToggleSeatRequest,
    service: SelectionSessionService = Depends(get_selection_session_service)
):
    """
    Select or deselect a seat.

    A full selection rejects new seats with a SELECTION_FULL notice instead of
    an error status.
    """
    try:
        return service.toggle(session_id, request.seat_id)
    except SelectionSessionNotFoundError as e:
        raise _not_found(e)


@router.post("/{session_id}/reset", response_model=SelectionStateResponse)
async def reset_selection(
    session_id: str,
    service: SelectionSessionService = Depends(get_selection_session_service)
):
    """Clear the selection."""
    try:
        return service.reset(session_id)
    except SelectionSessionNotFoundError as e:
        raise _not_found(e)


@router.put("/{session_id}/required-count", response_model=SelectionStateResponse)
async def set_required_count(
    session_id: str,
    request: RequiredCountRequest,
    service: SelectionSessionService = Depends(get_selection_session_service)
):
    """Change the passenger count; a different count clears the selection."""
    try:
        return service.set_required_count(session_id, request.required_count)
    except SelectionSessionNotFoundError as e:
        raise _not_found(e)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.to_dict())


@router.post("/{session_id}/proceed", response_model=SelectionStateResponse)
async def proceed(
    session_id: str,
    request: Optional[ProceedRequest] = Body(None),
    service: SelectionSessionService = Depends(get_selection_session_service)
):
    """
    Confirm a complete selection.

    Pass the latest seat snapshot to check availability one last time; the
    response's ``proceeded`` flag tells whether the selection was accepted.
    """
    try:
        return service.proceed(session_id, seats=request.seats if request else None)
    except SelectionSessionNotFoundError as e:
        raise _not_found(e)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.to_dict())


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_selection(
    session_id: str,
    service: SelectionSessionService = Depends(get_selection_session_service)
):
    """Close the selection session."""
    try:
        service.close_session(session_id)
    except SelectionSessionNotFoundError as e:
        raise _not_found(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
