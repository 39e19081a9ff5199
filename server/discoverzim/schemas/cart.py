"""Cart-related Pydantic schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from .destination import Destination
from .event import Event


class AddCartItemRequest(BaseModel):
    """Request schema for putting a destination or event in the cart."""

    destination_id: UUID | None = None
    event_id: UUID | None = None
    quantity: int = Field(1, ge=1, le=100)
    preferred_date: date | None = None

    @model_validator(mode="after")
    def check_single_target(self):
        if (self.destination_id is None) == (self.event_id is None):
            raise ValueError("exactly one of destination_id or event_id is required")
        return self


class UpdateCartItemRequest(BaseModel):
    """Request schema for changing a cart line."""

    item_id: UUID = Field(..., description="Cart item to update")
    quantity: int | None = Field(None, ge=1, le=100)
    preferred_date: date | None = None


class RemoveCartItemRequest(BaseModel):
    """Request schema for removing a cart line."""

    item_id: UUID = Field(..., description="Cart item to remove")


class CartItem(BaseModel):
    """Cart item response schema."""

    id: UUID
    user_id: str
    destination_id: UUID | None = None
    event_id: UUID | None = None
    quantity: int
    preferred_date: date | None = None
    created_at: datetime
    updated_at: datetime
    destination: Destination | None = None
    event: Event | None = None

    class Config:
        from_attributes = True


class Cart(BaseModel):
    """Response schema for the caller's cart."""

    items: list[CartItem]
    total: float = Field(..., ge=0, description="Sum of line totals")
