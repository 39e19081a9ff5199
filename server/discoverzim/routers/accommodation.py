"""Accommodation router for catalog operations."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..models.profile import Profile
from ..schemas.accommodation import (
    Accommodation,
    AccommodationList,
    BrowseAccommodationsRequest,
    CreateAccommodationRequest,
    GetAccommodationRequest,
    SearchAccommodationsRequest,
    UpdateAccommodationRequest,
)
from ..schemas.common import DeletedResponse
from ..services.accommodation_service import AccommodationService
from .responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/accommodation", tags=["accommodation"])

DB_DEPENDENCY = Depends(get_db)
ADMIN_DEPENDENCY = Depends(require_admin)


def _to_list(accommodations) -> AccommodationList:
    return AccommodationList(items=[Accommodation.model_validate(a) for a in accommodations])


@router.post("/list", response_model=AccommodationList)
async def list_accommodations(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    accommodations = await AccommodationService(db).list_accommodations()
    return ok(_to_list(accommodations))


@router.post("/featured", response_model=AccommodationList)
async def list_featured_accommodations(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Up to six featured accommodations."""
    accommodations = await AccommodationService(db).list_featured()
    return ok(_to_list(accommodations))


@router.post("/get", response_model=Accommodation)
async def get_accommodation(request: GetAccommodationRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Get an accommodation with its normalized room types."""
    accommodation = await AccommodationService(db).get_accommodation_or_raise(request.accommodation_id)
    return ok(Accommodation.model_validate(accommodation))


@router.post("/search", response_model=AccommodationList)
async def search_accommodations(
    request: SearchAccommodationsRequest, db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    accommodations = await AccommodationService(db).search(request.query, request.location)
    return ok(_to_list(accommodations))


@router.post("/browse", response_model=AccommodationList)
async def browse_accommodations(
    request: BrowseAccommodationsRequest, db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    accommodations = await AccommodationService(db).browse(request)
    return ok(_to_list(accommodations))


@router.post("/create", response_model=Accommodation)
async def create_accommodation(
    request: CreateAccommodationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    accommodation = await AccommodationService(db).create_accommodation(request, actor_id=admin.id)
    return ok(Accommodation.model_validate(accommodation))


@router.post("/update", response_model=Accommodation)
async def update_accommodation(
    request: UpdateAccommodationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    accommodation = await AccommodationService(db).update_accommodation(request, actor_id=admin.id)
    return ok(Accommodation.model_validate(accommodation))


@router.post("/delete", response_model=DeletedResponse)
async def delete_accommodation(
    request: GetAccommodationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    await AccommodationService(db).delete_accommodation(request.accommodation_id, actor_id=admin.id)
    return ok(DeletedResponse(id=request.accommodation_id))
