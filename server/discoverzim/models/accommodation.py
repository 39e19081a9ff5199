"""Accommodation model definition."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, Float, Integer, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base


class Accommodation(Base):
    """Accommodation entity representing a lodge, hotel or camp."""

    __tablename__ = "accommodations"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Accommodation information
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_per_night: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    max_guests: Mapped[int | None] = mapped_column(Integer, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    review_count: Mapped[int | None] = mapped_column(Integer, nullable=True, default=0)

    # Coordinates
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Arrays and blobs
    amenities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    additional_images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    room_types: Mapped[list | str | None] = mapped_column(JSON, nullable=True)

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
        CheckConstraint("price_per_night >= 0", name="ck_accommodation_price_non_negative"),
        CheckConstraint("max_guests IS NULL OR max_guests > 0", name="ck_accommodation_max_guests_positive"),
    )

    def __repr__(self) -> str:
        return f"<Accommodation(id={self.id}, name='{self.name}', location='{self.location}')>"
