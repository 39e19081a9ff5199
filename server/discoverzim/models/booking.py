"""Booking model definition."""

from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import JSON, CheckConstraint, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .accommodation import Accommodation
    from .destination import Destination
    from .event import Event
    from .payment import Payment


class BookingStatus(str, Enum):
    """Booking status enumeration."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    """Payment status enumeration, shared by bookings and payments."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class Booking(Base):
    """Booking entity for a destination, event or accommodation."""

    __tablename__ = "bookings"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Owner; null for anonymous destination bookings
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)

    # What is being booked
    destination_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("destinations.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    event_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    accommodation_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("accommodations.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Contact details
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    contact_phone: Mapped[str] = mapped_column(String(50), nullable=False)

    # Booking details
    booking_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    preferred_date: Mapped[date | None] = mapped_column(Date, nullable=True, index=True)
    number_of_people: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    booking_details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    selected_ticket_type: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    status: Mapped[BookingStatus] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.PENDING,
        index=True
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.PENDING,
        index=True
    )

    # Linked payment; the payments table owns the foreign key
    payment_id: Mapped[UUID | None] = mapped_column(Uuid(as_uuid=True), nullable=True, index=True)
    payment_proof_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    payment_proof_uploaded_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Lifecycle stamps
    confirmation_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    cancellation_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    completion_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

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

    # Constraints
    __table_args__ = (
        CheckConstraint("number_of_people >= 1", name="ck_booking_people_positive"),
        CheckConstraint("total_price >= 0", name="ck_booking_total_price_non_negative"),
        CheckConstraint(
            "(CASE WHEN destination_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN event_id IS NULL THEN 0 ELSE 1 END"
            " + CASE WHEN accommodation_id IS NULL THEN 0 ELSE 1 END) <= 1",
            name="ck_booking_single_target"
        ),
    )

    # Relationships
    destination: Mapped["Destination | None"] = relationship("Destination")
    event: Mapped["Event | None"] = relationship("Event")
    accommodation: Mapped["Accommodation | None"] = relationship("Accommodation")
    payment: Mapped["Payment | None"] = relationship(
        "Payment",
        back_populates="booking",
        cascade="all, delete-orphan",
        uselist=False
    )

    @property
    def kind(self) -> str:
        """Which catalog entity this booking is for."""
        if self.event_id is not None:
            return "event"
        if self.accommodation_id is not None:
            return "accommodation"
        return "destination"

    @property
    def reference(self) -> str:
        """Short customer-facing reference."""
        return str(self.id)[:8].upper()

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, kind={self.kind}, people={self.number_of_people}, "
            f"status={self.status}, payment_status={self.payment_status})>"
        )
