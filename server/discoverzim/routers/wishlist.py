"""Wishlist router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_profile
from ..models.profile import Profile
from ..schemas.common import DeletedResponse
from ..schemas.wishlist import WishlistDestinationRequest, WishlistItem, WishlistList, WishlistStatus
from ..services.wishlist_service import WishlistService
from .responses import ok

router = APIRouter(prefix="/v1/wishlist", tags=["wishlist"])

DB_DEPENDENCY = Depends(get_db)
PROFILE_DEPENDENCY = Depends(get_current_profile)


@router.post("/mine", response_model=WishlistList)
async def list_wishlist(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """The caller's saved destinations, newest first."""
    items = await WishlistService(db).list_items(profile.id)
    return ok(WishlistList(items=[WishlistItem.model_validate(item) for item in items]))


@router.post("/add", response_model=WishlistItem)
async def add_to_wishlist(
    request: WishlistDestinationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    item = await WishlistService(db).add(profile.id, request.destination_id)
    return ok(WishlistItem.model_validate(item))


@router.post("/remove", response_model=DeletedResponse)
async def remove_from_wishlist(
    request: WishlistDestinationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    await WishlistService(db).remove(profile.id, request.destination_id)
    return ok(DeletedResponse(id=request.destination_id))


@router.post("/contains", response_model=WishlistStatus)
async def wishlist_contains(
    request: WishlistDestinationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    in_wishlist = await WishlistService(db).contains(profile.id, request.destination_id)
    return ok(WishlistStatus(destination_id=request.destination_id, in_wishlist=in_wishlist))


@router.post("/toggle", response_model=WishlistStatus)
async def toggle_wishlist(
    request: WishlistDestinationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """Add the destination if absent, remove it if present."""
    in_wishlist = await WishlistService(db).toggle(profile.id, request.destination_id)
    return ok(WishlistStatus(destination_id=request.destination_id, in_wishlist=in_wishlist))
