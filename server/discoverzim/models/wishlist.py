"""Wishlist model definition."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import ForeignKey, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .destination import Destination


class Wishlist(Base):
    """A destination saved to a user's wishlist."""

    __tablename__ = "wishlists"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    destination_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("destinations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        nullable=False,
        default=datetime.utcnow,
        server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("user_id", "destination_id", name="uq_wishlist_user_destination"),
    )

    destination: Mapped["Destination"] = relationship("Destination")

    def __repr__(self) -> str:
        return f"<Wishlist(id={self.id}, user_id={self.user_id}, destination_id={self.destination_id})>"
