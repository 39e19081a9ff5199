"""Event router for catalog operations."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..models.profile import Profile
from ..schemas.common import DeletedResponse
from ..schemas.event import (
    BrowseEventsRequest,
    CreateEventRequest,
    Event,
    EventList,
    GetEventRequest,
    SearchEventsRequest,
    UpdateEventRequest,
)
from ..services.event_service import EventService
from .responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/event", tags=["event"])

DB_DEPENDENCY = Depends(get_db)
ADMIN_DEPENDENCY = Depends(require_admin)


def _to_list(events) -> EventList:
    return EventList(items=[Event.model_validate(e) for e in events])


@router.post("/list", response_model=EventList)
async def list_events(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    events = await EventService(db).list_events()
    return ok(_to_list(events))


@router.post("/upcoming", response_model=EventList)
async def list_upcoming_events(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Events that have not started yet, soonest first."""
    events = await EventService(db).list_upcoming()
    return ok(_to_list(events))


@router.post("/get", response_model=Event)
async def get_event(request: GetEventRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Get an event with its ticket types and expiry flag."""
    event = await EventService(db).get_event_or_raise(request.event_id)
    return ok(Event.model_validate(event))


@router.post("/search", response_model=EventList)
async def search_events(request: SearchEventsRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    events = await EventService(db).search(request.query)
    return ok(_to_list(events))


@router.post("/browse", response_model=EventList)
async def browse_events(request: BrowseEventsRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    events = await EventService(db).browse(request)
    return ok(_to_list(events))


@router.post("/create", response_model=Event)
async def create_event(
    request: CreateEventRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    event = await EventService(db).create_event(request, actor_id=admin.id)
    return ok(Event.model_validate(event))


@router.post("/update", response_model=Event)
async def update_event(
    request: UpdateEventRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    event = await EventService(db).update_event(request, actor_id=admin.id)
    return ok(Event.model_validate(event))


@router.post("/delete", response_model=DeletedResponse)
async def delete_event(
    request: GetEventRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    await EventService(db).delete_event(request.event_id, actor_id=admin.id)
    return ok(DeletedResponse(id=request.event_id))
