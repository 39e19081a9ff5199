"""Booking router for booking operations."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_profile, get_optional_user, require_admin
from ..core.exceptions import AccountLockedError, ProblemDetailsException
from ..models.profile import Profile
from ..schemas.booking import (
    Booking,
    BookingList,
    CancelBookingRequest,
    CreateAccommodationBookingRequest,
    CreateDestinationBookingRequest,
    CreateEventBookingRequest,
    GetBookingRequest,
    Invoice,
    ListBookingsRequest,
    UpdateBookingPaymentStatusRequest,
    UpdateBookingStatusRequest,
)
from ..services.booking_service import BookingService
from ..services.profile_service import ProfileService
from .responses import internal_error, ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/booking", tags=["booking"])

# Define dependencies to avoid B008 linting errors
DB_DEPENDENCY = Depends(get_db)
OPTIONAL_USER_DEPENDENCY = Depends(get_optional_user)
PROFILE_DEPENDENCY = Depends(get_current_profile)
ADMIN_DEPENDENCY = Depends(require_admin)


def _convert_booking_to_schema(booking_model) -> Booking:
    """Convert booking model, with its payment, to schema."""
    return Booking.model_validate(booking_model)


@router.post("/create-destination", response_model=Booking)
async def create_destination_booking(
    request: CreateDestinationBookingRequest,
    db: AsyncSession = DB_DEPENDENCY,
    user: Optional[dict] = OPTIONAL_USER_DEPENDENCY,
) -> JSONResponse:
    """
    Book a destination.

    Signed-in users own the booking; anonymous bookings are accepted with
    no owner. The confirmation email is sent in the background.
    """
    try:
        user_id = None
        if user is not None:
            profile = await ProfileService(db).ensure_profile(user)
            if profile.is_locked:
                raise AccountLockedError(user_id=profile.id)
            user_id = profile.id

        booking = await BookingService(db).create_destination_booking(request, user_id=user_id)
        return ok(_convert_booking_to_schema(booking))

    except ProblemDetailsException:
        # Re-raise Problem Details exceptions as-is
        raise

    except Exception as e:
        raise internal_error("destination booking", e, destination_id=str(request.destination_id))


@router.post("/create-event", response_model=Booking)
async def create_event_booking(
    request: CreateEventBookingRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """Book event tickets. Requires a signed-in user."""
    try:
        booking = await BookingService(db).create_event_booking(request, user_id=profile.id)
        return ok(_convert_booking_to_schema(booking))

    except ProblemDetailsException:
        raise

    except Exception as e:
        raise internal_error("event booking", e, event_id=str(request.event_id), user_id=profile.id)


@router.post("/create-accommodation", response_model=Booking)
async def create_accommodation_booking(
    request: CreateAccommodationBookingRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """Book a stay. Requires a signed-in user."""
    try:
        booking = await BookingService(db).create_accommodation_booking(request, user_id=profile.id)
        return ok(_convert_booking_to_schema(booking))

    except ProblemDetailsException:
        raise

    except Exception as e:
        raise internal_error(
            "accommodation booking", e, accommodation_id=str(request.accommodation_id), user_id=profile.id
        )


@router.post("/get", response_model=Booking)
async def get_booking(
    request: GetBookingRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """Get one of the caller's bookings; admins may get any."""
    booking = await BookingService(db).get_booking_for(profile, request.booking_id)
    return ok(_convert_booking_to_schema(booking))


@router.post("/mine", response_model=BookingList)
async def list_my_bookings(
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    bookings = await BookingService(db).list_user_bookings(profile.id)
    return ok(BookingList(items=[_convert_booking_to_schema(b) for b in bookings]))


@router.post("/invoice", response_model=Invoice)
async def get_invoice(
    request: GetBookingRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """Invoice view of a booking."""
    invoice = await BookingService(db).build_invoice(profile, request.booking_id)
    return ok(Invoice(**invoice))


@router.post("/cancel", response_model=Booking)
async def cancel_booking(
    request: CancelBookingRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """
    Cancel one of the caller's bookings.

    Only pending and confirmed bookings can be cancelled.
    """
    try:
        booking = await BookingService(db).cancel_user_booking(profile.id, request)
        return ok(_convert_booking_to_schema(booking))

    except ProblemDetailsException:
        raise

    except Exception as e:
        raise internal_error("booking cancellation", e, booking_id=str(request.booking_id), user_id=profile.id)


@router.post("/admin/list", response_model=BookingList)
async def admin_list_bookings(
    request: ListBookingsRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """All bookings, optionally filtered by status (admin)."""
    bookings = await BookingService(db).list_bookings(request.status)
    return ok(BookingList(items=[_convert_booking_to_schema(b) for b in bookings]))


@router.post("/admin/update-status", response_model=Booking)
async def admin_update_status(
    request: UpdateBookingStatusRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """Set a booking's status (admin)."""
    try:
        booking = await BookingService(db).update_status(request, actor_id=admin.id)
        return ok(_convert_booking_to_schema(booking))

    except ProblemDetailsException:
        raise

    except Exception as e:
        raise internal_error("booking status update", e, booking_id=str(request.booking_id), actor_id=admin.id)


@router.post("/admin/update-payment-status", response_model=Booking)
async def admin_update_payment_status(
    request: UpdateBookingPaymentStatusRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """Set a booking's payment status (admin)."""
    try:
        booking = await BookingService(db).update_payment_status(request, actor_id=admin.id)
        return ok(_convert_booking_to_schema(booking))

    except ProblemDetailsException:
        raise

    except Exception as e:
        raise internal_error(
            "booking payment status update", e, booking_id=str(request.booking_id), actor_id=admin.id
        )
