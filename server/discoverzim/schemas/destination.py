"""Destination-related Pydantic schemas."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from .common import StringListFieldsMixin


class PriceBand(str, Enum):
    """Price band filter used when browsing destinations."""
    ALL = "all"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DestinationSort(str, Enum):
    """Sort order used when browsing destinations."""
    NAME = "name"
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    RATING = "rating"


class CreateDestinationRequest(StringListFieldsMixin):
    """Request schema for creating a destination."""

    name: str = Field(..., min_length=1, max_length=255, description="Destination name")
    location: str = Field(..., min_length=1, max_length=255, description="Town, park or region")
    description: str | None = Field(None, max_length=5000, description="Long description")
    price: float = Field(..., ge=0, description="Price per person")
    image_url: str | None = Field(None, description="Main image URL")
    payment_url: str | None = Field(None, description="External payment page URL")
    is_featured: bool = Field(False, description="Show on the home page")
    best_time_to_visit: str | None = Field(None, description="Best season to visit")
    difficulty_level: str | None = Field(None, description="Difficulty level")
    duration_recommended: str | None = Field(None, description="Recommended length of stay")
    getting_there: str | None = Field(None, description="Travel directions")
    weather_info: str | None = Field(None, description="Weather notes")
    latitude: float | None = Field(None, ge=-90, le=90, description="Latitude")
    longitude: float | None = Field(None, ge=-180, le=180, description="Longitude")
    activities: list[str] = Field(default_factory=list, description="Activities on offer")
    amenities: list[str] = Field(default_factory=list, description="Amenities")
    categories: list[str] = Field(default_factory=list, description="Categories, e.g. wildlife")
    highlights: list[str] = Field(default_factory=list, description="Highlights")
    what_to_bring: list[str] = Field(default_factory=list, description="Packing list")
    additional_images: list[str] = Field(default_factory=list, description="Gallery image URLs")
    additional_costs: dict[str, Any] | list[Any] | None = Field(None, description="Extra costs")


class UpdateDestinationRequest(StringListFieldsMixin):
    """Request schema for updating a destination; only sent fields change."""

    destination_id: UUID = Field(..., description="Destination to update")
    name: str | None = Field(None, min_length=1, max_length=255)
    location: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=5000)
    price: float | None = Field(None, ge=0)
    image_url: str | None = None
    payment_url: str | None = None
    is_featured: bool | None = None
    best_time_to_visit: str | None = None
    difficulty_level: str | None = None
    duration_recommended: str | None = None
    getting_there: str | None = None
    weather_info: str | None = None
    latitude: float | None = Field(None, ge=-90, le=90)
    longitude: float | None = Field(None, ge=-180, le=180)
    activities: list[str] | None = None
    amenities: list[str] | None = None
    categories: list[str] | None = None
    highlights: list[str] | None = None
    what_to_bring: list[str] | None = None
    additional_images: list[str] | None = None
    additional_costs: dict[str, Any] | list[Any] | None = None


class GetDestinationRequest(BaseModel):
    """Request schema for addressing one destination."""

    destination_id: UUID = Field(..., description="Destination ID")


class SearchDestinationsRequest(BaseModel):
    """Request schema for the free-text destination search."""

    query: str = Field(..., min_length=1, max_length=255, description="Text to match")


class SimilarDestinationsRequest(BaseModel):
    """Request schema for similar destinations."""

    destination_id: UUID = Field(..., description="Destination to compare against")
    limit: int = Field(4, ge=1, le=20, description="Maximum results")


class BrowseDestinationsRequest(BaseModel):
    """Request schema for filtering and sorting the destination catalog."""

    query: str | None = Field(None, max_length=255, description="Free text over name, location and description")
    price_band: PriceBand = Field(PriceBand.ALL, description="Price band")
    location: str | None = Field(None, description="Exact location")
    category: str | None = Field(None, description="Category the destination must carry")
    sort: DestinationSort = Field(DestinationSort.NAME, description="Sort order")


class Destination(StringListFieldsMixin):
    """Destination response schema."""

    id: UUID = Field(..., description="Unique destination ID")
    name: str = Field(..., description="Destination name")
    location: str = Field(..., description="Town, park or region")
    description: str | None = None
    price: float = Field(..., description="Price per person")
    image_url: str | None = None
    payment_url: str | None = None
    is_featured: bool = False
    best_time_to_visit: str | None = None
    difficulty_level: str | None = None
    duration_recommended: str | None = None
    getting_there: str | None = None
    weather_info: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    activities: list[str] = Field(default_factory=list)
    amenities: list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    highlights: list[str] = Field(default_factory=list)
    what_to_bring: list[str] = Field(default_factory=list)
    additional_images: list[str] = Field(default_factory=list)
    additional_costs: dict[str, Any] | list[Any] | None = None
    created_at: datetime = Field(..., description="Creation time (ISO 8601)")
    updated_at: datetime = Field(..., description="Last update time (ISO 8601)")

    class Config:
        from_attributes = True


class DestinationList(BaseModel):
    """Response schema for destination lists."""

    items: list[Destination] = Field(..., description="Destinations")


class LocationList(BaseModel):
    """Distinct destination locations, sorted."""

    items: list[str] = Field(..., description="Locations")


class RatingSummary(BaseModel):
    """Average rating for a destination."""

    destination_id: UUID
    average_rating: float | None = Field(None, description="Average rating, null when unrated")
    review_count: int = Field(..., ge=0)
