"""Wishlist-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from .destination import Destination


class WishlistDestinationRequest(BaseModel):
    """Request schema for wishlist operations on one destination."""

    destination_id: UUID = Field(..., description="Destination ID")


class WishlistItem(BaseModel):
    """Wishlist entry response schema."""

    id: UUID
    user_id: str
    destination_id: UUID
    created_at: datetime
    destination: Destination | None = None

    class Config:
        from_attributes = True


class WishlistList(BaseModel):
    """Response schema for a user's wishlist."""

    items: list[WishlistItem]


class WishlistStatus(BaseModel):
    """Whether a destination is on the caller's wishlist."""

    destination_id: UUID
    in_wishlist: bool
