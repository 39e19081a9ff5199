"""Event-related Pydantic schemas."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from ..services.pricing import is_event_expired, resolve_ticket_types


class EventTimeFilter(str, Enum):
    """Time filter used when browsing events."""
    ALL = "all"
    UPCOMING = "upcoming"
    PAST = "past"


class TicketType(BaseModel):
    """A ticket type on sale for an event."""

    type: str = Field(..., description="Ticket type key, e.g. regular")
    name: str = Field(..., description="Display name")
    price: float = Field(..., ge=0, description="Price per ticket")
    description: str | None = None


class CreateEventRequest(BaseModel):
    """Request schema for creating an event."""

    title: str = Field(..., min_length=1, max_length=255, description="Event title")
    description: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=255)
    event_type: str | None = Field(None, max_length=100)
    image_url: str | None = None
    payment_url: str | None = None
    price: float | None = Field(None, ge=0, description="Base ticket price")
    program_name: str | None = None
    program_type: str | None = None
    program_url: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    ticket_types: dict[str, Any] | list[dict[str, Any]] | None = Field(None, description="Ticket types keyed by type, or a list")

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self


class UpdateEventRequest(BaseModel):
    """Request schema for updating an event; only sent fields change."""

    event_id: UUID = Field(..., description="Event to update")
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    location: str | None = Field(None, max_length=255)
    event_type: str | None = None
    image_url: str | None = None
    payment_url: str | None = None
    price: float | None = Field(None, ge=0)
    program_name: str | None = None
    program_type: str | None = None
    program_url: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    ticket_types: dict[str, Any] | list[dict[str, Any]] | None = Field(None, description="Ticket types keyed by type, or a list")


class GetEventRequest(BaseModel):
    """Request schema for addressing one event."""

    event_id: UUID = Field(..., description="Event ID")


class SearchEventsRequest(BaseModel):
    """Request schema for event search."""

    query: str = Field(..., min_length=1, max_length=255, description="Text matched against title, description and location")


class BrowseEventsRequest(BaseModel):
    """Request schema for filtering events."""

    query: str | None = Field(None, max_length=255, description="Free text")
    location: str | None = Field(None, description="Exact location")
    time_filter: EventTimeFilter = Field(EventTimeFilter.ALL, description="Time window")


class Event(BaseModel):
    """Event response schema."""

    id: UUID = Field(..., description="Unique event ID")
    title: str
    description: str | None = None
    location: str | None = None
    event_type: str | None = None
    image_url: str | None = None
    payment_url: str | None = None
    price: float | None = None
    program_name: str | None = None
    program_type: str | None = None
    program_url: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    ticket_types: list[TicketType] = Field(default_factory=list, validate_default=True, description="Ticket types, defaults applied")
    created_at: datetime
    updated_at: datetime

    @field_validator("ticket_types", mode="before")
    @classmethod
    def apply_ticket_types(cls, v, info):
        return resolve_ticket_types(v, info.data.get("price"))

    @computed_field
    @property
    def is_expired(self) -> bool:
        """Whether the event is over."""
        return is_event_expired(self.start_date, self.end_date)

    class Config:
        from_attributes = True


class EventList(BaseModel):
    """Response schema for event lists."""

    items: list[Event] = Field(..., description="Events")
