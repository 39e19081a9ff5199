"""Cart router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_profile
from ..models.profile import Profile
from ..schemas.cart import AddCartItemRequest, Cart, CartItem, RemoveCartItemRequest, UpdateCartItemRequest
from ..schemas.common import CountResponse, DeletedResponse
from ..services.cart_service import CartService, cart_total
from .responses import ok

router = APIRouter(prefix="/v1/cart", tags=["cart"])

DB_DEPENDENCY = Depends(get_db)
PROFILE_DEPENDENCY = Depends(get_current_profile)


@router.post("/mine", response_model=Cart)
async def get_cart(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """Cart lines with their destination or event, and the cart total."""
    items = await CartService(db).list_items(profile.id)
    return ok(Cart(items=[CartItem.model_validate(item) for item in items], total=cart_total(items)))


@router.post("/add", response_model=CartItem)
async def add_cart_item(
    request: AddCartItemRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    item = await CartService(db).add_item(profile.id, request)
    return ok(CartItem.model_validate(item))


@router.post("/update", response_model=CartItem)
async def update_cart_item(
    request: UpdateCartItemRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    item = await CartService(db).update_item(profile.id, request)
    return ok(CartItem.model_validate(item))


@router.post("/remove", response_model=DeletedResponse)
async def remove_cart_item(
    request: RemoveCartItemRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    await CartService(db).remove_item(profile.id, request.item_id)
    return ok(DeletedResponse(id=request.item_id))


@router.post("/clear", response_model=CountResponse)
async def clear_cart(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    count = await CartService(db).clear(profile.id)
    return ok(CountResponse(count=count))
