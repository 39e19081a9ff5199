"""Destination model definition."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, CheckConstraint, Float, Numeric, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base

if TYPE_CHECKING:
    from .review import Review


class Destination(Base):
    """Destination entity representing a place travellers can book."""

    __tablename__ = "destinations"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Destination information
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    payment_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

    # Travel guidance
    best_time_to_visit: Mapped[str | None] = mapped_column(String(255), nullable=True)
    difficulty_level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    duration_recommended: Mapped[str | None] = mapped_column(String(100), nullable=True)
    getting_there: Mapped[str | None] = mapped_column(Text, nullable=True)
    weather_info: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Coordinates
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Tag-style arrays and blobs
    activities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    amenities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    categories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    highlights: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    what_to_bring: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    additional_images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    additional_costs: Mapped[dict | list | None] = mapped_column(JSON, nullable=True)

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
        CheckConstraint("price >= 0", name="ck_destination_price_non_negative"),
        CheckConstraint("length(name) > 0", name="ck_destination_name_not_empty"),
    )

    # Relationships
    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="destination",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Destination(id={self.id}, name='{self.name}', location='{self.location}')>"
