"""Accommodation-related Pydantic schemas."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .common import StringListFieldsMixin
from ..services.pricing import parse_room_types


class AccommodationSort(str, Enum):
    """Sort order used when browsing accommodations."""
    RATING = "rating"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"


class RoomType(BaseModel):
    """A bookable room type and its price multiplier."""

    id: str = Field(..., description="Room type ID")
    name: str = Field(..., description="Display name")
    multiplier: float = Field(1.0, gt=0, description="Multiplier applied to the nightly price")
    description: str | None = None


class CreateAccommodationRequest(StringListFieldsMixin):
    """Request schema for creating an accommodation."""

    name: str = Field(..., min_length=1, max_length=255, description="Accommodation name")
    location: str = Field(..., min_length=1, max_length=255, description="Location")
    description: str | None = Field(None, max_length=5000)
    price_per_night: float = Field(..., ge=0, description="Base price per night")
    max_guests: int | None = Field(None, ge=1, description="Maximum guests per booking")
    image_url: str | None = None
    is_featured: bool = False
    rating: float | None = Field(None, ge=0, le=5)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    amenities: list[str] = Field(default_factory=list)
    additional_images: list[str] = Field(default_factory=list)
    room_types: list[dict[str, Any]] | str | None = Field(None, description="Room types as a list or JSON string")


class UpdateAccommodationRequest(StringListFieldsMixin):
    """Request schema for updating an accommodation; only sent fields change."""

    accommodation_id: UUID = Field(..., description="Accommodation to update")
    name: str | None = Field(None, min_length=1, max_length=255)
    location: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    price_per_night: float | None = Field(None, ge=0)
    max_guests: int | None = Field(None, ge=1)
    image_url: str | None = None
    is_featured: bool | None = None
    rating: float | None = Field(None, ge=0, le=5)
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    amenities: list[str] | None = None
    additional_images: list[str] | None = None
    room_types: list[dict[str, Any]] | str | None = None


class GetAccommodationRequest(BaseModel):
    """Request schema for addressing one accommodation."""

    accommodation_id: UUID = Field(..., description="Accommodation ID")


class SearchAccommodationsRequest(BaseModel):
    """Request schema for accommodation search."""

    query: str = Field("", max_length=255, description="Text matched against name and description")
    location: str | None = Field(None, max_length=255, description="Location substring")


class BrowseAccommodationsRequest(BaseModel):
    """Request schema for filtering and sorting accommodations."""

    query: str | None = Field(None, max_length=255, description="Free text over name or location")
    sort: AccommodationSort = Field(AccommodationSort.RATING, description="Sort order")


class Accommodation(StringListFieldsMixin):
    """Accommodation response schema."""

    id: UUID = Field(..., description="Unique accommodation ID")
    name: str
    location: str
    description: str | None = None
    price_per_night: float
    max_guests: int | None = None
    image_url: str | None = None
    is_featured: bool = False
    rating: float | None = None
    review_count: int | None = None
    latitude: float | None = None
    longitude: float | None = None
    amenities: list[str] = Field(default_factory=list)
    additional_images: list[str] = Field(default_factory=list)
    room_types: list[RoomType] = Field(default_factory=list, validate_default=True, description="Parsed room types")
    created_at: datetime
    updated_at: datetime

    @field_validator("room_types", mode="before")
    @classmethod
    def apply_room_types(cls, v):
        return parse_room_types(v)

    class Config:
        from_attributes = True


class AccommodationList(BaseModel):
    """Response schema for accommodation lists."""

    items: list[Accommodation] = Field(..., description="Accommodations")
