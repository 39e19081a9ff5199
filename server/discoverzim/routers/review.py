"""Review router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_profile
from ..models.profile import Profile
from ..schemas.common import DeletedResponse
from ..schemas.review import (
    CreateReviewRequest,
    DestinationReviewsRequest,
    GetReviewRequest,
    Review,
    ReviewList,
    UpdateReviewRequest,
)
from ..services.review_service import ReviewService
from .responses import ok

router = APIRouter(prefix="/v1/review", tags=["review"])

DB_DEPENDENCY = Depends(get_db)
PROFILE_DEPENDENCY = Depends(get_current_profile)


@router.post("/for-destination", response_model=ReviewList)
async def list_destination_reviews(
    request: DestinationReviewsRequest, db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """A destination's reviews, newest first. Public."""
    reviews = await ReviewService(db).list_for_destination(request.destination_id)
    return ok(ReviewList(items=[Review.model_validate(r) for r in reviews]))


@router.post("/mine", response_model=ReviewList)
async def list_my_reviews(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    reviews = await ReviewService(db).list_for_user(profile.id)
    return ok(ReviewList(items=[Review.model_validate(r) for r in reviews]))


@router.post("/create", response_model=Review)
async def create_review(
    request: CreateReviewRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    review = await ReviewService(db).create_review(profile.id, request)
    return ok(Review.model_validate(review))


@router.post("/update", response_model=Review)
async def update_review(
    request: UpdateReviewRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    review = await ReviewService(db).update_review(profile.id, request)
    return ok(Review.model_validate(review))


@router.post("/delete", response_model=DeletedResponse)
async def delete_review(
    request: GetReviewRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """Authors delete their own reviews; admins may delete any."""
    await ReviewService(db).delete_review(profile, request.review_id)
    return ok(DeletedResponse(id=request.review_id))
