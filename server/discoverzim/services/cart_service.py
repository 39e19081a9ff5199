"""Shopping cart service."""

import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import NotFoundError
from ..models.cart import CartItem
from ..schemas.cart import AddCartItemRequest, UpdateCartItemRequest
from .destination_service import DestinationService
from .event_service import EventService

logger = logging.getLogger(__name__)


def line_total(item: CartItem) -> float:
    """Unit price of the destination or event times quantity."""
    target = item.destination or item.event
    unit_price = float(target.price or 0) if target is not None else 0.0
    return unit_price * item.quantity


def cart_total(items: list[CartItem]) -> float:
    return round(sum(line_total(item) for item in items), 2)


class CartService:
    """Service for a user's cart."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _with_targets(self, stmt):
        return stmt.options(selectinload(CartItem.destination), selectinload(CartItem.event))

    async def list_items(self, user_id: str) -> list[CartItem]:
        """Cart lines with their destination or event, oldest first."""
        stmt = self._with_targets(
            select(CartItem).where(CartItem.user_id == user_id).order_by(CartItem.created_at)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def _get_owned(self, user_id: str, item_id: UUID) -> CartItem:
        stmt = self._with_targets(
            select(CartItem)
            .where(CartItem.id == item_id, CartItem.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        item = (await self.db.execute(stmt)).scalar_one_or_none()
        if not item:
            raise NotFoundError(resource_type="cart_item", resource_id=str(item_id))
        return item

    async def add_item(self, user_id: str, request: AddCartItemRequest) -> CartItem:
        """The destination or event must exist."""
        if request.destination_id is not None:
            await DestinationService(self.db).get_destination_or_raise(request.destination_id)
        else:
            await EventService(self.db).get_event_or_raise(request.event_id)

        item = CartItem(user_id=user_id, **request.model_dump())
        self.db.add(item)
        await self.db.commit()

        logger.info("Cart item added", extra={"user_id": user_id, "item_id": str(item.id)})
        return await self._get_owned(user_id, item.id)

    async def update_item(self, user_id: str, request: UpdateCartItemRequest) -> CartItem:
        item = await self._get_owned(user_id, request.item_id)

        changes = request.model_dump(exclude_unset=True, exclude={"item_id"})
        if changes.get("quantity") is not None:
            item.quantity = changes["quantity"]
        if "preferred_date" in changes:
            item.preferred_date = changes["preferred_date"]

        await self.db.commit()
        return await self._get_owned(user_id, item.id)

    async def remove_item(self, user_id: str, item_id: UUID) -> None:
        item = await self._get_owned(user_id, item_id)
        await self.db.delete(item)
        await self.db.commit()

    async def clear(self, user_id: str) -> int:
        """Empty the cart; returns how many lines were removed."""
        result = await self.db.execute(delete(CartItem).where(CartItem.user_id == user_id))
        await self.db.commit()

        logger.info("Cart cleared", extra={"user_id": user_id, "count": result.rowcount})
        return result.rowcount
