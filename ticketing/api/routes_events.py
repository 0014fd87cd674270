"""
Event API routes
"""

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ticketing.api.deps import clock, get_event_service
from ticketing.api.ws import websocket_manager
from ticketing.core.db import get_db
from ticketing.schemas.event import (
    CancelEventRequest,
    CancelEventResponse,
    EventCreate,
    EventResponse,
    EventUpdate,
    EventViewRequest,
    EventViewResponse,
)
from ticketing.services.event_service import EventService

router = APIRouter()

@router.get("", response_model=List[EventResponse])
async def list_events(db: Session = Depends(get_db)):
    return EventService.list_events(db)

@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: int, db: Session = Depends(get_db)):
    return EventService.get_event(db, event_id)

@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    service: EventService = Depends(get_event_service)
):
    return service.create_event(db, event_data.model_dump())

@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: int,
    event_data: EventUpdate,
    db: Session = Depends(get_db),
    service: EventService = Depends(get_event_service)
):
    return service.update_event(db, event_id, event_data.model_dump(exclude_unset=True))

@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    service: EventService = Depends(get_event_service)
):
    """Delete an event without tickets; 409 when tickets exist"""
    service.delete_event(db, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{event_id}/can-delete")
async def can_delete_event(event_id: int, db: Session = Depends(get_db)):
    EventService.get_event(db, event_id)
    return {"canDelete": EventService.can_delete_event(db, event_id)}

@router.post("/{event_id}/cancel", response_model=CancelEventResponse)
async def cancel_event(
    event_id: int,
    request: CancelEventRequest = None,
    db: Session = Depends(get_db),
    service: EventService = Depends(get_event_service)
):
    """Cancel an event and refund every outstanding ticket"""
    reason = request.reason if request is not None else None
    result = service.cancel_event(db, event_id, reason)

    await websocket_manager.broadcast_to_event(event_id, {
        "type": "event_cancelled",
        "event_id": event_id,
        "tickets_refunded": result.tickets_refunded,
        "timestamp": clock.now().isoformat()
    })
    return CancelEventResponse(
        success=True,
        message=result.message,
        tickets_refunded=result.tickets_refunded,
        total_refund_amount=float(result.total_refund_amount)
    )

@router.post("/{event_id}/view", response_model=EventViewResponse)
async def track_view(
    event_id: int,
    view: EventViewRequest,
    db: Session = Depends(get_db),
    service: EventService = Depends(get_event_service)
):
    """Count a first visit by an attendee"""
    counted = service.track_unique_view(db, event_id, view.user_id, view.role)
    event = EventService.get_event(db, event_id)
    return EventViewResponse(counted=counted, view_count=event.view_count)
