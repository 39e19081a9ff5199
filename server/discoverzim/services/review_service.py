"""Destination reviews."""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import AuthorizationError, NotFoundError
from ..models.profile import Profile, UserRole
from ..models.review import Review
from ..schemas.review import CreateReviewRequest, UpdateReviewRequest
from .destination_service import DestinationService

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for review-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_destination(self, destination_id: UUID) -> list[Review]:
        """A destination's reviews, newest first."""
        stmt = select(Review).where(Review.destination_id == destination_id).order_by(Review.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_for_user(self, user_id: str) -> list[Review]:
        stmt = select(Review).where(Review.user_id == user_id).order_by(Review.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_review_or_raise(self, review_id: UUID) -> Review:
        """
        Raises:
            NotFoundError: If review not found
        """
        review = (await self.db.execute(select(Review).where(Review.id == review_id))).scalar_one_or_none()
        if not review:
            raise NotFoundError(resource_type="review", resource_id=str(review_id))
        return review

    async def create_review(self, user_id: str, request: CreateReviewRequest) -> Review:
        """Review a destination; the destination must exist."""
        await DestinationService(self.db).get_destination_or_raise(request.destination_id)

        review = Review(user_id=user_id, **request.model_dump())
        self.db.add(review)
        await self.db.commit()
        await self.db.refresh(review)

        logger.info(
            "Review created",
            extra={"review_id": str(review.id), "destination_id": str(review.destination_id), "rating": review.rating}
        )
        return review

    async def update_review(self, user_id: str, request: UpdateReviewRequest) -> Review:
        """
        Edit one's own review.

        Raises:
            AuthorizationError: If the review belongs to someone else
        """
        review = await self.get_review_or_raise(request.review_id)
        if review.user_id != user_id:
            raise AuthorizationError(detail="Only the author may edit this review")

        changes = request.model_dump(exclude_unset=True, exclude={"review_id"})
        for name, value in changes.items():
            if name == "images" and value is None:
                value = []
            if name == "rating" and value is None:
                continue
            setattr(review, name, value)

        await self.db.commit()
        await self.db.refresh(review)
        return review

    async def delete_review(self, profile: Profile, review_id: UUID) -> None:
        """
        Delete a review; authors delete their own, admins delete any.

        Raises:
            AuthorizationError: If the caller is neither author nor admin
        """
        review = await self.get_review_or_raise(review_id)
        if review.user_id != profile.id and profile.role != UserRole.ADMIN:
            raise AuthorizationError(detail="Only the author or an administrator may delete this review")

        await self.db.delete(review)
        await self.db.commit()

        logger.info("Review deleted", extra={"review_id": str(review_id), "actor_id": profile.id})
