"""Itinerary router."""

from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_profile, get_optional_user
from ..models.profile import Profile
from ..schemas.common import DeletedResponse
from ..schemas.itinerary import (
    AddStopRequest,
    CreateItineraryRequest,
    GetItineraryRequest,
    Itinerary,
    ItineraryList,
    RemoveStopRequest,
    ShareCodeRequest,
    UpdateItineraryRequest,
    UpdateStopRequest,
)
from ..services.itinerary_service import ItineraryService
from .responses import ok

router = APIRouter(prefix="/v1/itinerary", tags=["itinerary"])

DB_DEPENDENCY = Depends(get_db)
PROFILE_DEPENDENCY = Depends(get_current_profile)
OPTIONAL_USER_DEPENDENCY = Depends(get_optional_user)


@router.post("/create", response_model=Itinerary)
async def create_itinerary(
    request: CreateItineraryRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    itinerary = await ItineraryService(db).create_itinerary(profile.id, request)
    return ok(Itinerary.model_validate(itinerary))


@router.post("/mine", response_model=ItineraryList)
async def list_my_itineraries(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    itineraries = await ItineraryService(db).list_itineraries(profile.id)
    return ok(ItineraryList(items=[Itinerary.model_validate(i) for i in itineraries]))


@router.post("/get", response_model=Itinerary)
async def get_itinerary(
    request: GetItineraryRequest,
    db: AsyncSession = DB_DEPENDENCY,
    user: Optional[dict] = OPTIONAL_USER_DEPENDENCY,
) -> JSONResponse:
    """Owners see their own itineraries; anyone may see public ones."""
    user_id = user["user_id"] if user else None
    itinerary = await ItineraryService(db).get_itinerary(request.itinerary_id, user_id)
    return ok(Itinerary.model_validate(itinerary))


@router.post("/shared", response_model=Itinerary)
async def get_shared_itinerary(request: ShareCodeRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Open a public itinerary by its share code."""
    itinerary = await ItineraryService(db).get_by_share_code(request.share_code)
    return ok(Itinerary.model_validate(itinerary))


@router.post("/update", response_model=Itinerary)
async def update_itinerary(
    request: UpdateItineraryRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """Making an itinerary public issues its share code."""
    itinerary = await ItineraryService(db).update_itinerary(profile.id, request)
    return ok(Itinerary.model_validate(itinerary))


@router.post("/delete", response_model=DeletedResponse)
async def delete_itinerary(
    request: GetItineraryRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    await ItineraryService(db).delete_itinerary(profile.id, request.itinerary_id)
    return ok(DeletedResponse(id=request.itinerary_id))


@router.post("/add-stop", response_model=Itinerary)
async def add_stop(
    request: AddStopRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    itinerary = await ItineraryService(db).add_stop(profile.id, request)
    return ok(Itinerary.model_validate(itinerary))


@router.post("/update-stop", response_model=Itinerary)
async def update_stop(
    request: UpdateStopRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    itinerary = await ItineraryService(db).update_stop(profile.id, request)
    return ok(Itinerary.model_validate(itinerary))


@router.post("/remove-stop", response_model=Itinerary)
async def remove_stop(
    request: RemoveStopRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    itinerary = await ItineraryService(db).remove_stop(profile.id, request.stop_id)
    return ok(Itinerary.model_validate(itinerary))
