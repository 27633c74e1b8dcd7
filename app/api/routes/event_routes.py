"""
Event Routes

GET /events - Calendar, by date
GET /events/{id} - Get event
POST /events - Create standalone event (admin)
PUT /events/{id} - Update standalone event (admin)
DELETE /events/{id} - Delete standalone event (admin)

Drive events are managed through /drives and are refused here.
"""

from fastapi import APIRouter, Depends
from typing import List

from app.core.auth import get_current_user, get_current_admin
from app.schemas.schemas import EventCreate, EventUpdate, EventResponse, MessageResponse
from app.services.event_service import EventService, get_event_service

router = APIRouter(prefix="/events", tags=["Events"])


@router.get("", response_model=List[EventResponse])
async def list_events(
    user: dict = Depends(get_current_user),
    events: EventService = Depends(get_event_service)
):
    return events.list()


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: str,
    user: dict = Depends(get_current_user),
    events: EventService = Depends(get_event_service)
):
    return events.get(event_id)


@router.post("", response_model=EventResponse, status_code=201)
async def create_event(
    data: EventCreate,
    admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    return events.create(data.title, data.date, description=data.description)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    data: EventUpdate,
    admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    return events.update(event_id, data.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: str,
    admin: dict = Depends(get_current_admin),
    events: EventService = Depends(get_event_service)
):
    events.delete(event_id)
    return MessageResponse(message="Event deleted successfully")
