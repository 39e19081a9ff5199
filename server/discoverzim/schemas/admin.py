"""Admin back-office Pydantic schemas."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from .common import coerce_string_list


class AuditAction(str, Enum):
    """Audit action enumeration."""
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    ROLE_CHANGE = "ROLE_CHANGE"
    LOCK = "LOCK"
    UNLOCK = "UNLOCK"


class DashboardStats(BaseModel):
    """Headline numbers for the admin dashboard."""

    user_count: int = Field(..., ge=0)
    booking_count: int = Field(..., ge=0)
    bookings_by_status: dict[str, int] = Field(..., description="Booking count per status")
    revenue: float = Field(..., ge=0, description="Sum of completed payments")
    destination_count: int = Field(..., ge=0)
    event_count: int = Field(..., ge=0)
    accommodation_count: int = Field(..., ge=0)


class ListAuditLogsRequest(BaseModel):
    """Request schema for browsing the audit log."""

    table_name: str | None = Field(None, max_length=100)
    action: AuditAction | None = None
    limit: int = Field(100, ge=1, le=500)


class AuditLog(BaseModel):
    """Audit log response schema."""

    id: UUID
    action: AuditAction
    table_name: str
    record_id: str
    user_id: str | None = None
    new_data: dict[str, Any] | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class AuditLogList(BaseModel):
    """Response schema for audit log lists."""

    items: list[AuditLog]


class UpsertApiDocRequest(BaseModel):
    """Request schema for creating or replacing an endpoint's documentation."""

    endpoint_path: str = Field(..., min_length=1, max_length=255, pattern=r"^/")
    method: str = Field(..., pattern=r"^(GET|POST|PUT|PATCH|DELETE)$")
    description: str | None = Field(None, max_length=5000)
    request_schema: dict[str, Any] | None = None
    response_schema: dict[str, Any] | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v):
        return coerce_string_list(v)


class ApiDoc(BaseModel):
    """API documentation row response schema."""

    id: UUID
    endpoint_path: str
    method: str
    description: str | None = None
    request_schema: dict[str, Any] | None = None
    response_schema: dict[str, Any] | None = None
    tags: list[str] = Field(default_factory=list)
    updated_at: datetime

    class Config:
        from_attributes = True


class ApiDocList(BaseModel):
    """Response schema for API documentation lists."""

    items: list[ApiDoc]


class SendEmailRequest(BaseModel):
    """Request schema for a free-form email from the back office."""

    recipient: EmailStr = Field(..., description="Recipient address")
    subject: str = Field(..., min_length=1, max_length=255)
    html: str = Field(..., min_length=1, description="HTML body")
    text: str | None = Field(None, description="Plain-text body")


class EmailQueued(BaseModel):
    """Response schema for an accepted email."""

    email_id: UUID
    recipient: str
    subject: str
    queued: bool = Field(..., description="False when delivery was skipped")
