"""Itinerary-related Pydantic schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class CreateItineraryRequest(BaseModel):
    """Request schema for creating an itinerary."""

    title: str = Field(..., min_length=1, max_length=255, description="Trip title")
    description: str | None = Field(None, max_length=5000)
    is_public: bool = Field(False, description="Whether anyone with the share code may view it")


class UpdateItineraryRequest(BaseModel):
    """Request schema for updating an itinerary; only sent fields change."""

    itinerary_id: UUID = Field(..., description="Itinerary to update")
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    is_public: bool | None = None


class GetItineraryRequest(BaseModel):
    """Request schema for addressing one itinerary."""

    itinerary_id: UUID = Field(..., description="Itinerary ID")


class ShareCodeRequest(BaseModel):
    """Request schema for opening a shared itinerary."""

    share_code: str = Field(..., min_length=8, max_length=8, pattern=r"^[a-z0-9]{8}$", description="Share code")


class AddStopRequest(BaseModel):
    """Request schema for adding a destination stop to an itinerary."""

    itinerary_id: UUID = Field(..., description="Itinerary to extend")
    destination_id: UUID = Field(..., description="Destination visited")
    start_date: date
    end_date: date
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self


class UpdateStopRequest(BaseModel):
    """Request schema for changing a stop's dates or notes."""

    stop_id: UUID = Field(..., description="Stop to update")
    start_date: date | None = None
    end_date: date | None = None
    notes: str | None = Field(None, max_length=2000)


class RemoveStopRequest(BaseModel):
    """Request schema for removing a stop."""

    stop_id: UUID = Field(..., description="Stop to remove")


class ItineraryStop(BaseModel):
    """Itinerary stop response schema."""

    id: UUID
    itinerary_id: UUID
    destination_id: UUID
    name: str
    start_date: date
    end_date: date
    notes: str | None = None
    order: int

    class Config:
        from_attributes = True


class Itinerary(BaseModel):
    """Itinerary response schema."""

    id: UUID
    user_id: str
    title: str
    description: str | None = None
    is_public: bool
    share_code: str | None = None
    stops: list[ItineraryStop] = Field(default_factory=list, description="Stops in visiting order")
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ItineraryList(BaseModel):
    """Response schema for itinerary lists."""

    items: list[Itinerary]
