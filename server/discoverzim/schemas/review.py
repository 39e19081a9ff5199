"""Review-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .common import StringListFieldsMixin


class CreateReviewRequest(StringListFieldsMixin):
    """Request schema for reviewing a destination."""

    destination_id: UUID = Field(..., description="Destination reviewed")
    rating: int = Field(..., ge=1, le=5, description="Star rating")
    comment: str | None = Field(None, max_length=5000)
    images: list[str] = Field(default_factory=list, description="Photo URLs")


class UpdateReviewRequest(StringListFieldsMixin):
    """Request schema for editing one's own review."""

    review_id: UUID = Field(..., description="Review to edit")
    rating: int | None = Field(None, ge=1, le=5)
    comment: str | None = Field(None, max_length=5000)
    images: list[str] | None = None


class GetReviewRequest(BaseModel):
    """Request schema for addressing one review."""

    review_id: UUID = Field(..., description="Review ID")


class DestinationReviewsRequest(BaseModel):
    """Request schema for a destination's reviews."""

    destination_id: UUID = Field(..., description="Destination ID")


class Review(StringListFieldsMixin):
    """Review response schema."""

    id: UUID
    user_id: str
    destination_id: UUID
    rating: int
    comment: str | None = None
    images: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReviewList(BaseModel):
    """Response schema for review lists."""

    items: list[Review]
