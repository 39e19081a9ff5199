"""Payment-related Pydantic schemas."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class PaymentStatus(str, Enum):
    """Payment status enumeration."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class GetPaymentRequest(BaseModel):
    """Request schema for addressing one payment."""

    payment_id: UUID = Field(..., description="Payment ID")


class GetPaymentByBookingRequest(BaseModel):
    """Request schema for looking up a booking's payment."""

    booking_id: UUID = Field(..., description="Booking ID")


class CreatePaymentRequest(BaseModel):
    """Request schema for recording a payment against a booking."""

    booking_id: UUID = Field(..., description="Booking being paid for")
    amount: float = Field(..., ge=0, description="Amount due")
    payment_method: str | None = Field(None, max_length=50, description="e.g. bank_transfer, ecocash")
    payment_gateway: str = Field("manual", max_length=50, description="Gateway name")
    payment_gateway_reference: str | None = Field(None, max_length=255)
    payment_details: dict[str, Any] | None = None


class UpdatePaymentRequest(BaseModel):
    """Request schema for updating a payment; only sent fields change."""

    payment_id: UUID = Field(..., description="Payment to update")
    status: PaymentStatus | None = None
    payment_method: str | None = Field(None, max_length=50)
    payment_gateway_reference: str | None = Field(None, max_length=255)
    payment_intent_id: str | None = Field(None, max_length=255)
    payment_details: dict[str, Any] | None = None


class UploadPaymentProofRequest(BaseModel):
    """Request schema for attaching proof of payment to a booking."""

    booking_id: UUID = Field(..., description="Booking the proof is for")
    proof_url: str = Field(..., min_length=1, max_length=1024, description="URL of the uploaded proof in the object store")


class MarkPaymentRequest(BaseModel):
    """Request schema for admin payment transitions."""

    payment_id: UUID = Field(..., description="Payment to transition")
    note: str | None = Field(None, max_length=1000, description="Optional admin note")


class Payment(BaseModel):
    """Payment response schema."""

    id: UUID = Field(..., description="Unique payment ID")
    booking_id: UUID
    amount: float
    status: PaymentStatus
    payment_method: str | None = None
    payment_gateway: str | None = None
    payment_gateway_reference: str | None = None
    payment_intent_id: str | None = None
    payment_details: dict[str, Any] | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
