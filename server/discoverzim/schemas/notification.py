"""Notification-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class MarkNotificationRequest(BaseModel):
    """Request schema for marking one notification read."""

    notification_id: UUID = Field(..., description="Notification ID")


class Notification(BaseModel):
    """Notification response schema."""

    id: UUID
    user_id: str
    title: str
    description: str
    type: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationList(BaseModel):
    """Response schema for notification lists."""

    items: list[Notification]
    unread_count: int = Field(..., ge=0)
