"""Event service for catalog operations."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError, ValidationError
from ..models.audit import AuditAction
from ..models.event import Event
from ..schemas.event import BrowseEventsRequest, CreateEventRequest, UpdateEventRequest
from . import catalog_filter
from .audit_service import AuditService

logger = logging.getLogger(__name__)


class EventService:
    """Service for event-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def list_events(self) -> list[Event]:
        """All events, soonest first; undated events last."""
        stmt = select(Event).order_by(Event.start_date.is_(None), Event.start_date, Event.title)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_upcoming(self, now: Optional[datetime] = None) -> list[Event]:
        """Events starting after now, ascending."""
        now = now or datetime.utcnow()
        stmt = select(Event).where(Event.start_date > now).order_by(Event.start_date)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def search(self, query: str) -> list[Event]:
        """Case-insensitive match on title, description or location."""
        pattern = f"%{query.strip()}%"
        stmt = (
            select(Event)
            .where(or_(Event.title.ilike(pattern), Event.description.ilike(pattern), Event.location.ilike(pattern)))
            .order_by(Event.start_date)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_event(self, event_id: UUID) -> Optional[Event]:
        """Get event by ID, or None."""
        result = await self.db.execute(select(Event).where(Event.id == event_id))
        return result.scalar_one_or_none()

    async def get_event_or_raise(self, event_id: UUID) -> Event:
        """
        Get event by ID or raise NotFoundError.

        Raises:
            NotFoundError: If event not found
        """
        event = await self.get_event(event_id)
        if not event:
            logger.warning("Event not found", extra={"event_id": str(event_id)})
            raise NotFoundError(resource_type="event", resource_id=str(event_id))
        return event

    async def create_event(self, request: CreateEventRequest, actor_id: str) -> Event:
        """Create an event."""
        event = Event(**request.model_dump())
        self.db.add(event)
        await self.db.flush()

        self.audit.record(AuditAction.CREATE, "events", event.id, actor_id, request.model_dump())

        await self.db.commit()
        await self.db.refresh(event)

        logger.info(
            "Event created successfully",
            extra={"event_id": str(event.id), "title": event.title, "actor_id": actor_id}
        )
        return event

    async def update_event(self, request: UpdateEventRequest, actor_id: str) -> Event:
        """
        Apply the fields present in the patch.

        Raises:
            ValidationError: If the resulting end date precedes the start date
        """
        event = await self.get_event_or_raise(request.event_id)

        changes = request.model_dump(exclude_unset=True, exclude={"event_id"})
        if changes.get("title", "") is None:
            changes.pop("title")
        for name, value in changes.items():
            setattr(event, name, value)

        if event.start_date and event.end_date and event.end_date < event.start_date:
            await self.db.rollback()
            raise ValidationError(
                detail="end_date must not precede start_date",
                errors={"end_date": "before start_date"},
            )

        self.audit.record(AuditAction.UPDATE, "events", event.id, actor_id, changes)

        await self.db.commit()
        await self.db.refresh(event)

        logger.info(
            "Event updated successfully",
            extra={"event_id": str(event.id), "fields": sorted(changes), "actor_id": actor_id}
        )
        return event

    async def delete_event(self, event_id: UUID, actor_id: str) -> None:
        """Delete an event."""
        event = await self.get_event_or_raise(event_id)

        await self.db.delete(event)
        self.audit.record(AuditAction.DELETE, "events", event_id, actor_id, {"title": event.title})
        await self.db.commit()

        logger.info("Event deleted successfully", extra={"event_id": str(event_id), "actor_id": actor_id})

    async def browse(self, request: BrowseEventsRequest, now: Optional[datetime] = None) -> list[Event]:
        """Fetch wholesale, then filter by text, location and time window."""
        events = await self.list_events()
        return catalog_filter.filter_events(
            events,
            query=request.query,
            location=request.location,
            time_filter=request.time_filter.value,
            now=now,
        )
