"""Cart item model definition."""

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .destination import Destination
    from .event import Event


class CartItem(Base):
    """A destination or event waiting in a user's cart."""

    __tablename__ = "cart_items"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    destination_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("destinations.id", ondelete="CASCADE"),
        nullable=True
    )
    event_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=True
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    preferred_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=datetime.utcnow,
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        server_default=func.now()
    )

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_cart_item_quantity_positive"),
    )

    destination: Mapped["Destination | None"] = relationship("Destination")
    event: Mapped["Event | None"] = relationship("Event")

    def __repr__(self) -> str:
        return f"<CartItem(id={self.id}, user_id={self.user_id}, quantity={self.quantity})>"
