"""In-app notifications."""

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..models.notification import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for a user's notification feed."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def create(self, user_id: str, title: str, description: str, type: str = "info") -> Notification:
        """Stage a notification in the caller's transaction."""
        notification = Notification(user_id=user_id, title=title, description=description, type=type, is_read=False)
        self.db.add(notification)
        return notification

    async def create_notification(self, user_id: str, title: str, description: str, type: str = "info") -> Notification:
        """Create and commit a standalone notification."""
        notification = self.create(user_id, title, description, type)
        await self.db.commit()
        await self.db.refresh(notification)
        return notification

    async def list_notifications(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        """Newest first."""
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def unread_count(self, user_id: str) -> int:
        stmt = select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
        return int((await self.db.execute(stmt)).scalar_one())

    async def mark_read(self, user_id: str, notification_id: UUID) -> Notification:
        """
        Mark one of the user's notifications read.

        Raises:
            NotFoundError: If the notification does not exist or belongs to someone else
        """
        stmt = select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
        notification = (await self.db.execute(stmt)).scalar_one_or_none()
        if not notification:
            raise NotFoundError(resource_type="notification", resource_id=str(notification_id))

        notification.is_read = True
        await self.db.commit()
        await self.db.refresh(notification)
        return notification

    async def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification read; returns how many changed."""
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()

        logger.info("Notifications marked read", extra={"user_id": user_id, "count": result.rowcount})
        return result.rowcount
