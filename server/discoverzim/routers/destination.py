"""Destination router for catalog operations."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..models.profile import Profile
from ..schemas.common import DeletedResponse
from ..schemas.destination import (
    BrowseDestinationsRequest,
    CreateDestinationRequest,
    Destination,
    DestinationList,
    GetDestinationRequest,
    LocationList,
    RatingSummary,
    SearchDestinationsRequest,
    SimilarDestinationsRequest,
    UpdateDestinationRequest,
)
from ..services.destination_service import DestinationService
from .responses import ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/destination", tags=["destination"])

DB_DEPENDENCY = Depends(get_db)
ADMIN_DEPENDENCY = Depends(require_admin)


def _to_list(destinations) -> DestinationList:
    return DestinationList(items=[Destination.model_validate(d) for d in destinations])


@router.post("/list", response_model=DestinationList)
async def list_destinations(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """All destinations, ordered by name."""
    destinations = await DestinationService(db).list_destinations()
    return ok(_to_list(destinations))


@router.post("/featured", response_model=DestinationList)
async def list_featured_destinations(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Destinations shown on the home page."""
    destinations = await DestinationService(db).list_featured()
    return ok(_to_list(destinations))


@router.post("/get", response_model=Destination)
async def get_destination(request: GetDestinationRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    destination = await DestinationService(db).get_destination_or_raise(request.destination_id)
    return ok(Destination.model_validate(destination))


@router.post("/search", response_model=DestinationList)
async def search_destinations(request: SearchDestinationsRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    destinations = await DestinationService(db).search(request.query)
    return ok(_to_list(destinations))


@router.post("/browse", response_model=DestinationList)
async def browse_destinations(request: BrowseDestinationsRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """
    Browse page listing.

    Filters by free text, price band, location and category, then sorts.
    """
    destinations = await DestinationService(db).browse(request)
    return ok(_to_list(destinations))


@router.post("/similar", response_model=DestinationList)
async def similar_destinations(request: SimilarDestinationsRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    destinations = await DestinationService(db).list_similar(request.destination_id, request.limit)
    return ok(_to_list(destinations))


@router.post("/locations", response_model=LocationList)
async def list_locations(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Distinct locations for filter dropdowns."""
    locations = await DestinationService(db).list_locations()
    return ok(LocationList(items=locations))


@router.post("/rating-summary", response_model=RatingSummary)
async def rating_summary(request: GetDestinationRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    average, count = await DestinationService(db).rating_summary(request.destination_id)
    return ok(RatingSummary(destination_id=request.destination_id, average_rating=average, review_count=count))


@router.post("/create", response_model=Destination)
async def create_destination(
    request: CreateDestinationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """Create a destination (admin)."""
    destination = await DestinationService(db).create_destination(request, actor_id=admin.id)
    return ok(Destination.model_validate(destination))


@router.post("/update", response_model=Destination)
async def update_destination(
    request: UpdateDestinationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """Update a destination (admin); only the fields sent are changed."""
    destination = await DestinationService(db).update_destination(request, actor_id=admin.id)
    return ok(Destination.model_validate(destination))


@router.post("/delete", response_model=DeletedResponse)
async def delete_destination(
    request: GetDestinationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """Delete a destination (admin)."""
    await DestinationService(db).delete_destination(request.destination_id, actor_id=admin.id)
    return ok(DeletedResponse(id=request.destination_id))
