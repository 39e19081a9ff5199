"""Destination service for catalog operations."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..models.audit import AuditAction
from ..models.destination import Destination
from ..models.review import Review
from ..schemas.destination import BrowseDestinationsRequest, CreateDestinationRequest, UpdateDestinationRequest
from . import catalog_filter
from .audit_service import AuditService

logger = logging.getLogger(__name__)

ARRAY_FIELDS = ("activities", "amenities", "categories", "highlights", "what_to_bring", "additional_images")


class DestinationService:
    """Service for destination-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def list_destinations(self) -> list[Destination]:
        """All destinations, ordered by name."""
        result = await self.db.execute(select(Destination).order_by(Destination.name))
        return list(result.scalars().all())

    async def list_featured(self) -> list[Destination]:
        """Destinations flagged for the home page."""
        stmt = select(Destination).where(Destination.is_featured.is_(True)).order_by(Destination.name)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def search(self, query: str) -> list[Destination]:
        """Case-insensitive match on name, location or description."""
        pattern = f"%{query.strip()}%"
        stmt = (
            select(Destination)
            .where(
                or_(
                    Destination.name.ilike(pattern),
                    Destination.location.ilike(pattern),
                    Destination.description.ilike(pattern),
                )
            )
            .order_by(Destination.name)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_destination(self, destination_id: UUID) -> Optional[Destination]:
        """
        Get destination by ID.

        Args:
            destination_id: Destination ID to search for

        Returns:
            Destination if found, None otherwise
        """
        stmt = select(Destination).where(Destination.id == destination_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_destination_or_raise(self, destination_id: UUID) -> Destination:
        """
        Get destination by ID or raise NotFoundError.

        Raises:
            NotFoundError: If destination not found
        """
        destination = await self.get_destination(destination_id)
        if not destination:
            logger.warning("Destination not found", extra={"destination_id": str(destination_id)})
            raise NotFoundError(resource_type="destination", resource_id=str(destination_id))
        return destination

    async def create_destination(self, request: CreateDestinationRequest, actor_id: str) -> Destination:
        """
        Create a destination.

        Null array fields arrive as empty lists from the request schema.
        """
        destination = Destination(**request.model_dump())
        self.db.add(destination)
        await self.db.flush()

        self.audit.record(AuditAction.CREATE, "destinations", destination.id, actor_id, request.model_dump())

        await self.db.commit()
        await self.db.refresh(destination)

        logger.info(
            "Destination created successfully",
            extra={"destination_id": str(destination.id), "destination_name": destination.name, "actor_id": actor_id}
        )
        return destination

    async def update_destination(self, request: UpdateDestinationRequest, actor_id: str) -> Destination:
        """
        Apply the fields present in the patch.

        Array fields sent as null are stored as empty lists; array fields
        not sent are left alone.
        """
        destination = await self.get_destination_or_raise(request.destination_id)

        changes = request.model_dump(exclude_unset=True, exclude={"destination_id"})
        for name, value in changes.items():
            if name in ARRAY_FIELDS and value is None:
                value = []
            if value is None and name in ("name", "location", "price", "is_featured"):
                continue
            setattr(destination, name, value)

        self.audit.record(AuditAction.UPDATE, "destinations", destination.id, actor_id, changes)

        await self.db.commit()
        await self.db.refresh(destination)

        logger.info(
            "Destination updated successfully",
            extra={"destination_id": str(destination.id), "fields": sorted(changes), "actor_id": actor_id}
        )
        return destination

    async def delete_destination(self, destination_id: UUID, actor_id: str) -> None:
        """Delete a destination and its reviews."""
        destination = await self.get_destination_or_raise(destination_id)

        await self.db.delete(destination)
        self.audit.record(AuditAction.DELETE, "destinations", destination_id, actor_id, {"name": destination.name})
        await self.db.commit()

        logger.info(
            "Destination deleted successfully",
            extra={"destination_id": str(destination_id), "actor_id": actor_id}
        )

    async def list_similar(self, destination_id: UUID, limit: int = 4) -> list[Destination]:
        """Destinations sharing a category or location with the given one."""
        target = await self.get_destination_or_raise(destination_id)
        candidates = await self.list_destinations()
        return catalog_filter.similar_destinations(target, candidates, limit)

    async def average_ratings(self) -> dict[UUID, float]:
        """Average review rating per destination."""
        stmt = select(Review.destination_id, func.avg(Review.rating)).group_by(Review.destination_id)
        result = await self.db.execute(stmt)
        return {destination_id: float(avg) for destination_id, avg in result.all()}

    async def browse(self, request: BrowseDestinationsRequest) -> list[Destination]:
        """Fetch the catalog wholesale, then filter and sort it in memory."""
        destinations = await self.list_destinations()
        filtered = catalog_filter.filter_destinations(
            destinations,
            query=request.query,
            band=request.price_band.value,
            location=request.location,
            category=request.category,
        )
        ratings = await self.average_ratings() if request.sort.value == "rating" else None
        return catalog_filter.sort_destinations(filtered, request.sort.value, ratings)

    async def list_locations(self) -> list[str]:
        """Distinct locations for filter dropdowns."""
        result = await self.db.execute(select(Destination.location).distinct())
        return sorted(location for location in result.scalars().all() if location)

    async def rating_summary(self, destination_id: UUID) -> tuple[Optional[float], int]:
        """Average rating and review count for a destination."""
        await self.get_destination_or_raise(destination_id)
        stmt = select(func.avg(Review.rating), func.count(Review.id)).where(Review.destination_id == destination_id)
        avg, count = (await self.db.execute(stmt)).one()
        return (round(float(avg), 2) if avg is not None else None, int(count))
