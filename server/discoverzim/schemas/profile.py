"""Profile-related Pydantic schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """User role enumeration."""
    USER = "USER"
    ADMIN = "ADMIN"


class UpdateProfileRequest(BaseModel):
    """Request schema for editing one's own profile; only sent fields change."""

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    username: str | None = Field(None, min_length=3, max_length=100, pattern=r"^[A-Za-z0-9_.-]+$")
    phone: str | None = Field(None, min_length=10, max_length=50)
    avatar_url: str | None = Field(None, max_length=1024)


class GetProfileRequest(BaseModel):
    """Request schema for addressing one profile."""

    user_id: str = Field(..., min_length=1, max_length=255, description="User ID")


class ChangeRoleRequest(BaseModel):
    """Request schema for an admin role change."""

    user_id: str = Field(..., min_length=1, max_length=255)
    role: UserRole


class SetLockRequest(BaseModel):
    """Request schema for locking or unlocking an account."""

    user_id: str = Field(..., min_length=1, max_length=255)
    locked: bool


class Profile(BaseModel):
    """Profile response schema."""

    id: str
    email: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    avatar_url: str | None = None
    role: UserRole
    is_locked: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ProfileList(BaseModel):
    """Response schema for profile lists."""

    items: list[Profile]


class RoleResponse(BaseModel):
    """The caller's role."""

    user_id: str
    role: UserRole
    is_admin: bool
