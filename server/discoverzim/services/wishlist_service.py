"""Wishlist service."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import ConflictError, NotFoundError
from ..models.wishlist import Wishlist
from .destination_service import DestinationService

logger = logging.getLogger(__name__)


class WishlistService:
    """Service for saving destinations to a user's wishlist."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_items(self, user_id: str) -> list[Wishlist]:
        """The user's wishlist with destinations, newest first."""
        stmt = (
            select(Wishlist)
            .where(Wishlist.user_id == user_id)
            .options(selectinload(Wishlist.destination))
            .order_by(Wishlist.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _get_entry(self, user_id: str, destination_id: UUID) -> Wishlist | None:
        stmt = select(Wishlist).where(Wishlist.user_id == user_id, Wishlist.destination_id == destination_id)
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def contains(self, user_id: str, destination_id: UUID) -> bool:
        return await self._get_entry(user_id, destination_id) is not None

    async def add(self, user_id: str, destination_id: UUID) -> Wishlist:
        """
        Save a destination.

        Raises:
            NotFoundError: If the destination does not exist
            ConflictError: If it is already on the wishlist
        """
        await DestinationService(self.db).get_destination_or_raise(destination_id)

        if await self._get_entry(user_id, destination_id):
            raise ConflictError(
                detail="Destination is already on the wishlist",
                conflicting_resource={"destination_id": str(destination_id)},
            )

        entry = Wishlist(user_id=user_id, destination_id=destination_id)
        self.db.add(entry)
        await self.db.commit()

        stmt = select(Wishlist).where(Wishlist.id == entry.id).options(selectinload(Wishlist.destination))
        entry = (await self.db.execute(stmt)).scalar_one()

        logger.info("Wishlist entry added", extra={"user_id": user_id, "destination_id": str(destination_id)})
        return entry

    async def remove(self, user_id: str, destination_id: UUID) -> None:
        """
        Remove a destination from the wishlist.

        Raises:
            NotFoundError: If it was not on the wishlist
        """
        entry = await self._get_entry(user_id, destination_id)
        if not entry:
            raise NotFoundError(resource_type="wishlist", resource_id=str(destination_id))

        await self.db.delete(entry)
        await self.db.commit()

        logger.info("Wishlist entry removed", extra={"user_id": user_id, "destination_id": str(destination_id)})

    async def toggle(self, user_id: str, destination_id: UUID) -> bool:
        """Add if absent, remove if present; returns the new membership."""
        if await self.contains(user_id, destination_id):
            await self.remove(user_id, destination_id)
            return False
        await self.add(user_id, destination_id)
        return True
