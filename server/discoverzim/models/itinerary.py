"""Itinerary and itinerary stop model definitions."""

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .destination import Destination


class Itinerary(Base):
    """A user-curated trip made of ordered destination stops."""

    __tablename__ = "itineraries"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    share_code: Mapped[str | None] = mapped_column(String(16), nullable=True, unique=True, index=True)

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

    # Relationships
    stops: Mapped[list["ItineraryDestination"]] = relationship(
        "ItineraryDestination",
        back_populates="itinerary",
        cascade="all, delete-orphan",
        order_by="ItineraryDestination.order"
    )

    def __repr__(self) -> str:
        return f"<Itinerary(id={self.id}, title='{self.title}', is_public={self.is_public})>"


class ItineraryDestination(Base):
    """One stop of an itinerary: a destination visited over a date range."""

    __tablename__ = "itinerary_destinations"

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    itinerary_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("itineraries.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    destination_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("destinations.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

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
        CheckConstraint("end_date >= start_date", name="ck_itinerary_stop_dates_ordered"),
        CheckConstraint('"order" >= 0', name="ck_itinerary_stop_order_non_negative"),
    )

    itinerary: Mapped["Itinerary"] = relationship("Itinerary", back_populates="stops")
    destination: Mapped["Destination"] = relationship("Destination")

    def __repr__(self) -> str:
        return (
            f"<ItineraryDestination(id={self.id}, itinerary_id={self.itinerary_id}, "
            f"order={self.order}, start={self.start_date}, end={self.end_date})>"
        )
