"""Itinerary service: trips, their stops and public sharing."""

import logging
import secrets
import string
from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..models.itinerary import Itinerary, ItineraryDestination
from ..schemas.itinerary import AddStopRequest, CreateItineraryRequest, UpdateItineraryRequest, UpdateStopRequest
from .destination_service import DestinationService

logger = logging.getLogger(__name__)

SHARE_CODE_ALPHABET = string.ascii_lowercase + string.digits
SHARE_CODE_LENGTH = 8


def generate_share_code() -> str:
    """Random 8-char lowercase alphanumeric code."""
    return "".join(secrets.choice(SHARE_CODE_ALPHABET) for _ in range(SHARE_CODE_LENGTH))


class ItineraryService:
    """Service for itinerary-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self, itinerary_id: UUID) -> Optional[Itinerary]:
        stmt = (
            select(Itinerary)
            .where(Itinerary.id == itinerary_id)
            .options(selectinload(Itinerary.stops))
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def _load_owned(self, user_id: str, itinerary_id: UUID) -> Itinerary:
        """
        Raises:
            NotFoundError: If the itinerary does not exist
            AuthorizationError: If it belongs to someone else
        """
        itinerary = await self._load(itinerary_id)
        if not itinerary:
            raise NotFoundError(resource_type="itinerary", resource_id=str(itinerary_id))
        if itinerary.user_id != user_id:
            raise AuthorizationError(detail="Only the owner may modify this itinerary")
        return itinerary

    async def _load_stop_owned(self, user_id: str, stop_id: UUID) -> ItineraryDestination:
        stmt = (
            select(ItineraryDestination)
            .where(ItineraryDestination.id == stop_id)
            .options(selectinload(ItineraryDestination.itinerary))
        )
        stop = (await self.db.execute(stmt)).scalar_one_or_none()
        if not stop:
            raise NotFoundError(resource_type="itinerary_stop", resource_id=str(stop_id))
        if stop.itinerary.user_id != user_id:
            raise AuthorizationError(detail="Only the owner may modify this itinerary")
        return stop

    async def create_itinerary(self, user_id: str, request: CreateItineraryRequest) -> Itinerary:
        itinerary = Itinerary(user_id=user_id, **request.model_dump())
        if itinerary.is_public:
            itinerary.share_code = await self._unique_share_code()
        self.db.add(itinerary)
        await self.db.commit()

        logger.info("Itinerary created", extra={"itinerary_id": str(itinerary.id), "user_id": user_id})
        return await self._load(itinerary.id)

    async def list_itineraries(self, user_id: str) -> list[Itinerary]:
        """The user's itineraries, newest first, stops in order."""
        stmt = (
            select(Itinerary)
            .where(Itinerary.user_id == user_id)
            .options(selectinload(Itinerary.stops))
            .order_by(Itinerary.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_itinerary(self, itinerary_id: UUID, user_id: Optional[str]) -> Itinerary:
        """
        Owners see their itineraries; anyone sees public ones.

        Private itineraries of other users are reported as not found.
        """
        itinerary = await self._load(itinerary_id)
        if not itinerary or (itinerary.user_id != user_id and not itinerary.is_public):
            raise NotFoundError(resource_type="itinerary", resource_id=str(itinerary_id))
        return itinerary

    async def get_by_share_code(self, share_code: str) -> Itinerary:
        """Public itineraries only."""
        stmt = (
            select(Itinerary)
            .where(Itinerary.share_code == share_code, Itinerary.is_public.is_(True))
            .options(selectinload(Itinerary.stops))
        )
        itinerary = (await self.db.execute(stmt)).scalar_one_or_none()
        if not itinerary:
            raise NotFoundError(resource_type="itinerary", resource_id=share_code)
        return itinerary

    async def _unique_share_code(self) -> str:
        while True:
            code = generate_share_code()
            taken = (await self.db.execute(select(Itinerary.id).where(Itinerary.share_code == code))).first()
            if not taken:
                return code

    async def update_itinerary(self, user_id: str, request: UpdateItineraryRequest) -> Itinerary:
        """Title, description and visibility; going public issues a share code once."""
        itinerary = await self._load_owned(user_id, request.itinerary_id)

        changes = request.model_dump(exclude_unset=True, exclude={"itinerary_id"})
        for name, value in changes.items():
            if value is None and name in ("title", "is_public"):
                continue
            setattr(itinerary, name, value)

        if itinerary.is_public and not itinerary.share_code:
            itinerary.share_code = await self._unique_share_code()

        await self.db.commit()
        return await self._load(itinerary.id)

    async def delete_itinerary(self, user_id: str, itinerary_id: UUID) -> None:
        itinerary = await self._load_owned(user_id, itinerary_id)
        await self.db.delete(itinerary)
        await self.db.commit()

        logger.info("Itinerary deleted", extra={"itinerary_id": str(itinerary_id), "user_id": user_id})

    async def add_stop(self, user_id: str, request: AddStopRequest) -> Itinerary:
        """Append a destination stop after the current last one."""
        itinerary = await self._load_owned(user_id, request.itinerary_id)
        destination = await DestinationService(self.db).get_destination_or_raise(request.destination_id)

        max_order = (
            await self.db.execute(
                select(func.max(ItineraryDestination.order)).where(ItineraryDestination.itinerary_id == itinerary.id)
            )
        ).scalar_one()

        stop = ItineraryDestination(
            itinerary_id=itinerary.id,
            destination_id=destination.id,
            name=destination.name,
            start_date=request.start_date,
            end_date=request.end_date,
            notes=request.notes,
            order=0 if max_order is None else max_order + 1,
        )
        self.db.add(stop)
        await self.db.commit()

        logger.info(
            "Itinerary stop added",
            extra={"itinerary_id": str(itinerary.id), "destination_id": str(destination.id), "order": stop.order}
        )
        return await self._load(itinerary.id)

    async def update_stop(self, user_id: str, request: UpdateStopRequest) -> Itinerary:
        """
        Change a stop's dates or notes.

        Raises:
            ValidationError: If the resulting end date precedes the start date
        """
        stop = await self._load_stop_owned(user_id, request.stop_id)

        changes = request.model_dump(exclude_unset=True, exclude={"stop_id"})
        start_date = changes.get("start_date") or stop.start_date
        end_date = changes.get("end_date") or stop.end_date
        if end_date < start_date:
            raise ValidationError(
                detail="end_date must not precede start_date",
                errors={"end_date": "before start_date"},
            )

        stop.start_date = start_date
        stop.end_date = end_date
        if "notes" in changes:
            stop.notes = changes["notes"]

        itinerary_id = stop.itinerary_id
        await self.db.commit()
        return await self._load(itinerary_id)

    async def remove_stop(self, user_id: str, stop_id: UUID) -> Itinerary:
        stop = await self._load_stop_owned(user_id, stop_id)
        itinerary_id = stop.itinerary_id

        await self.db.delete(stop)
        await self.db.commit()
        return await self._load(itinerary_id)
