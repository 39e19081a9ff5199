"""Accommodation service for catalog operations."""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..models.accommodation import Accommodation
from ..models.audit import AuditAction
from ..schemas.accommodation import (
    BrowseAccommodationsRequest,
    CreateAccommodationRequest,
    UpdateAccommodationRequest,
)
from . import catalog_filter
from .audit_service import AuditService

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6


class AccommodationService:
    """Service for accommodation-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditService(db)

    async def list_accommodations(self) -> list[Accommodation]:
        """All accommodations, ordered by name."""
        result = await self.db.execute(select(Accommodation).order_by(Accommodation.name))
        return list(result.scalars().all())

    async def list_featured(self) -> list[Accommodation]:
        """Up to six featured accommodations, ordered by name."""
        stmt = (
            select(Accommodation)
            .where(Accommodation.is_featured.is_(True))
            .order_by(Accommodation.name)
            .limit(FEATURED_LIMIT)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def search(self, query: str, location: Optional[str] = None) -> list[Accommodation]:
        """Free text over name and description, optionally narrowed by location substring."""
        stmt = select(Accommodation).order_by(Accommodation.name)
        if query and query.strip():
            pattern = f"%{query.strip()}%"
            stmt = stmt.where(or_(Accommodation.name.ilike(pattern), Accommodation.description.ilike(pattern)))
        if location and location.strip():
            stmt = stmt.where(Accommodation.location.ilike(f"%{location.strip()}%"))
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_accommodation(self, accommodation_id: UUID) -> Optional[Accommodation]:
        """Get accommodation by ID, or None."""
        stmt = select(Accommodation).where(Accommodation.id == accommodation_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_accommodation_or_raise(self, accommodation_id: UUID) -> Accommodation:
        """
        Get accommodation by ID or raise NotFoundError.

        Raises:
            NotFoundError: If accommodation not found
        """
        accommodation = await self.get_accommodation(accommodation_id)
        if not accommodation:
            logger.warning("Accommodation not found", extra={"accommodation_id": str(accommodation_id)})
            raise NotFoundError(resource_type="accommodation", resource_id=str(accommodation_id))
        return accommodation

    async def create_accommodation(self, request: CreateAccommodationRequest, actor_id: str) -> Accommodation:
        """Create an accommodation."""
        accommodation = Accommodation(**request.model_dump())
        self.db.add(accommodation)
        await self.db.flush()

        self.audit.record(AuditAction.CREATE, "accommodations", accommodation.id, actor_id, request.model_dump())

        await self.db.commit()
        await self.db.refresh(accommodation)

        logger.info(
            "Accommodation created successfully",
            extra={"accommodation_id": str(accommodation.id), "accommodation_name": accommodation.name, "actor_id": actor_id}
        )
        return accommodation

    async def update_accommodation(self, request: UpdateAccommodationRequest, actor_id: str) -> Accommodation:
        """Apply the fields present in the patch."""
        accommodation = await self.get_accommodation_or_raise(request.accommodation_id)

        changes = request.model_dump(exclude_unset=True, exclude={"accommodation_id"})
        for name, value in changes.items():
            if name in ("amenities", "additional_images") and value is None:
                value = []
            if value is None and name in ("name", "location", "price_per_night", "is_featured"):
                continue
            setattr(accommodation, name, value)

        self.audit.record(AuditAction.UPDATE, "accommodations", accommodation.id, actor_id, changes)

        await self.db.commit()
        await self.db.refresh(accommodation)

        logger.info(
            "Accommodation updated successfully",
            extra={"accommodation_id": str(accommodation.id), "fields": sorted(changes), "actor_id": actor_id}
        )
        return accommodation

    async def delete_accommodation(self, accommodation_id: UUID, actor_id: str) -> None:
        """Delete an accommodation."""
        accommodation = await self.get_accommodation_or_raise(accommodation_id)

        await self.db.delete(accommodation)
        self.audit.record(AuditAction.DELETE, "accommodations", accommodation_id, actor_id, {"name": accommodation.name})
        await self.db.commit()

        logger.info(
            "Accommodation deleted successfully",
            extra={"accommodation_id": str(accommodation_id), "actor_id": actor_id}
        )

    async def browse(self, request: BrowseAccommodationsRequest) -> list[Accommodation]:
        """Fetch wholesale, then filter by text and sort."""
        accommodations = await self.list_accommodations()
        filtered = catalog_filter.filter_accommodations(accommodations, request.query)
        return catalog_filter.sort_accommodations(filtered, request.sort.value)
