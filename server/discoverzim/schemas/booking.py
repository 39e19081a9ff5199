"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, model_validator

from .payment import Payment, PaymentStatus


class BookingStatus(str, Enum):
    """Booking status enumeration."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class BookingContactForm(BaseModel):
    """Contact fields shared by every booking form."""

    contact_name: str = Field(..., min_length=2, max_length=255, description="Lead traveller name")
    contact_email: EmailStr = Field(..., description="Email for the confirmation")
    contact_phone: str = Field(..., min_length=10, max_length=50, description="Phone number")
    special_requests: str | None = Field(None, max_length=2000, description="Free-text requests")


class CreateDestinationBookingRequest(BookingContactForm):
    """Request schema for booking a destination."""

    destination_id: UUID = Field(..., description="Destination to book")
    number_of_people: int = Field(..., ge=1, le=100, description="Number of travellers")
    preferred_date: date = Field(..., description="Preferred travel date")


class CreateEventBookingRequest(BookingContactForm):
    """Request schema for booking event tickets."""

    event_id: UUID = Field(..., description="Event to book")
    number_of_people: int = Field(..., ge=1, le=100, description="Number of tickets")
    preferred_date: date = Field(..., description="Date attending")
    ticket_type: str = Field("regular", min_length=1, max_length=50, description="Ticket type key")


class CreateAccommodationBookingRequest(BookingContactForm):
    """Request schema for booking a stay."""

    accommodation_id: UUID = Field(..., description="Accommodation to book")
    check_in_date: date = Field(..., description="Check-in date")
    check_out_date: date = Field(..., description="Check-out date")
    number_of_guests: int = Field(..., ge=1, le=100, description="Number of guests")
    room_type: str = Field("standard", min_length=1, max_length=100, description="Room type ID")

    @model_validator(mode="after")
    def check_stay(self):
        if self.check_out_date <= self.check_in_date:
            raise ValueError("check_out_date must be after check_in_date")
        return self


class GetBookingRequest(BaseModel):
    """Request schema for addressing one booking."""

    booking_id: UUID = Field(..., description="Booking ID")


class CancelBookingRequest(BaseModel):
    """Request schema for a traveller cancelling their own booking."""

    booking_id: UUID = Field(..., description="Booking to cancel")
    reason: str = Field(..., min_length=1, max_length=1000, description="Why the booking is cancelled")


class ListBookingsRequest(BaseModel):
    """Request schema for the admin booking list."""

    status: BookingStatus | None = Field(None, description="Only bookings with this status")


class UpdateBookingStatusRequest(BaseModel):
    """Request schema for an admin booking status change."""

    booking_id: UUID = Field(..., description="Booking to update")
    status: BookingStatus = Field(..., description="New status")
    cancellation_reason: str | None = Field(None, max_length=1000)


class UpdateBookingPaymentStatusRequest(BaseModel):
    """Request schema for an admin payment status change on a booking."""

    booking_id: UUID = Field(..., description="Booking to update")
    payment_status: PaymentStatus = Field(..., description="New payment status")


class Booking(BaseModel):
    """Booking response schema."""

    id: UUID = Field(..., description="Unique booking ID")
    reference: str = Field(..., description="Short customer-facing reference")
    kind: str = Field(..., description="destination, event or accommodation")
    user_id: str | None = None
    destination_id: UUID | None = None
    event_id: UUID | None = None
    accommodation_id: UUID | None = None
    contact_name: str
    contact_email: str
    contact_phone: str
    booking_date: datetime
    preferred_date: date | None = None
    number_of_people: int
    total_price: float
    booking_details: dict[str, Any] | None = None
    selected_ticket_type: dict[str, Any] | None = None
    status: BookingStatus
    payment_status: PaymentStatus
    payment_id: UUID | None = None
    payment_proof_url: str | None = None
    payment_proof_uploaded_at: datetime | None = None
    confirmation_date: datetime | None = None
    cancellation_date: datetime | None = None
    cancellation_reason: str | None = None
    completion_date: datetime | None = None
    created_at: datetime
    updated_at: datetime
    payment: Payment | None = None

    class Config:
        from_attributes = True


class BookingList(BaseModel):
    """Response schema for booking lists."""

    items: list[Booking] = Field(..., description="Bookings")


class Invoice(BaseModel):
    """Printable invoice view of a booking."""

    reference: str = Field(..., description="Invoice reference")
    booking_id: UUID
    issued_at: datetime
    customer_name: str
    customer_email: str
    customer_phone: str
    item_name: str = Field(..., description="What was booked")
    item_location: str | None = None
    item_kind: str
    unit_price: float = Field(..., description="Price per person, ticket or night")
    quantity: int = Field(..., description="People, tickets or nights")
    total_price: float
    preferred_date: date | None = None
    status: BookingStatus
    payment_status: PaymentStatus
