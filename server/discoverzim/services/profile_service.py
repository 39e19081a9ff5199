"""Profile service: identity-to-profile sync, self-service edits and user administration."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError
from ..models.audit import AuditAction
from ..models.profile import Profile, UserRole
from ..schemas.profile import UpdateProfileRequest
from .audit_service import AuditService

logger = logging.getLogger(__name__)


class ProfileService:
    """Service for profile-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def get_profile(self, user_id: str) -> Optional[Profile]:
        """Get profile by user ID, or None."""
        result = await self.db.execute(select(Profile).where(Profile.id == user_id))
        return result.scalar_one_or_none()

    async def get_profile_or_raise(self, user_id: str) -> Profile:
        """
        Get profile by user ID or raise NotFoundError.

        Raises:
            NotFoundError: If profile not found
        """
        profile = await self.get_profile(user_id)
        if not profile:
            raise NotFoundError(resource_type="profile", resource_id=user_id)
        return profile

    async def ensure_profile(self, user: dict) -> Profile:
        """
        Return the caller's profile, creating it from token claims on first sight.

        Existing profiles are never overwritten from claims; users edit
        their own profile through update_own_profile.
        """
        profile = await self.get_profile(user["user_id"])
        if profile:
            return profile

        username = user.get("username")
        if username and await self._username_taken(username, user["user_id"]):
            username = None

        profile = Profile(
            id=user["user_id"],
            email=user.get("email"),
            username=username,
            first_name=user.get("first_name"),
            last_name=user.get("last_name"),
            role=UserRole.USER.value,
            is_locked=False,
        )
        self.db.add(profile)
        await self.db.commit()
        await self.db.refresh(profile)

        logger.info("Profile created from identity claims", extra={"user_id": profile.id})
        return profile

    async def _username_taken(self, username: str, user_id: str) -> bool:
        stmt = select(Profile.id).where(Profile.username == username, Profile.id != user_id)
        return (await self.db.execute(stmt)).first() is not None

    async def update_own_profile(self, user_id: str, request: UpdateProfileRequest) -> Profile:
        """
        Apply the fields present in the patch to the caller's profile.

        Raises:
            ConflictError: If the requested username belongs to someone else
        """
        profile = await self.get_profile_or_raise(user_id)
        changes = request.model_dump(exclude_unset=True)

        username = changes.get("username")
        if username and await self._username_taken(username, user_id):
            raise ConflictError(
                detail=f"Username '{username}' is already taken",
                conflicting_resource={"username": username},
            )

        for name, value in changes.items():
            setattr(profile, name, value)

        await self.db.commit()
        await self.db.refresh(profile)

        logger.info("Profile updated", extra={"user_id": user_id, "fields": sorted(changes)})
        return profile

    async def get_role(self, user_id: str) -> UserRole:
        """Role of a user; unknown users are plain users."""
        profile = await self.get_profile(user_id)
        if not profile:
            return UserRole.USER
        return UserRole(profile.role)

    async def is_admin(self, user_id: str) -> bool:
        return await self.get_role(user_id) == UserRole.ADMIN

    async def list_profiles(self) -> list[Profile]:
        """All profiles, newest first."""
        result = await self.db.execute(select(Profile).order_by(Profile.created_at.desc()))
        return list(result.scalars().all())

    async def change_role(self, user_id: str, role: UserRole, actor_id: str) -> Profile:
        """Set a user's role and record it in the audit log."""
        profile = await self.get_profile_or_raise(user_id)
        previous = profile.role
        profile.role = role.value

        self.audit.record(
            AuditAction.ROLE_CHANGE, "profiles", user_id, actor_id,
            {"role": role.value, "previous_role": str(previous)},
        )
        await self.db.commit()
        await self.db.refresh(profile)

        logger.info(
            "Role changed",
            extra={"user_id": user_id, "role": role.value, "actor_id": actor_id}
        )
        return profile

    async def set_locked(self, user_id: str, locked: bool, actor_id: str) -> Profile:
        """Lock or unlock an account."""
        profile = await self.get_profile_or_raise(user_id)
        profile.is_locked = locked

        self.audit.record(
            AuditAction.LOCK if locked else AuditAction.UNLOCK, "profiles", user_id, actor_id,
            {"is_locked": locked},
        )
        await self.db.commit()
        await self.db.refresh(profile)

        logger.info(
            "Account lock updated",
            extra={"user_id": user_id, "locked": locked, "actor_id": actor_id}
        )
        return profile
