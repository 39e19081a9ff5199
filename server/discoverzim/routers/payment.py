"""Payment router: payment by proof and admin settlement."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_profile, require_admin
from ..core.exceptions import ProblemDetailsException
from ..models.profile import Profile
from ..schemas.booking import Booking
from ..schemas.payment import (
    CreatePaymentRequest,
    GetPaymentByBookingRequest,
    GetPaymentRequest,
    MarkPaymentRequest,
    Payment,
    UpdatePaymentRequest,
    UploadPaymentProofRequest,
)
from ..services.payment_service import PaymentService
from .responses import internal_error, ok

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/payment", tags=["payment"])

DB_DEPENDENCY = Depends(get_db)
PROFILE_DEPENDENCY = Depends(get_current_profile)
ADMIN_DEPENDENCY = Depends(require_admin)


@router.post("/get", response_model=Payment)
async def get_payment(
    request: GetPaymentRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    payment = await PaymentService(db).get_payment_for(profile, request.payment_id)
    return ok(Payment.model_validate(payment))


@router.post("/by-booking", response_model=Payment)
async def get_payment_by_booking(
    request: GetPaymentByBookingRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """The latest payment recorded for a booking."""
    payment = await PaymentService(db).get_by_booking_for(profile, request.booking_id)
    return ok(Payment.model_validate(payment))


@router.post("/upload-proof", response_model=Booking)
async def upload_payment_proof(
    request: UploadPaymentProofRequest,
    db: AsyncSession = DB_DEPENDENCY,
    profile: Profile = PROFILE_DEPENDENCY,
) -> JSONResponse:
    """
    Attach proof of payment to the caller's booking.

    The file itself lives in the object store; only its URL is recorded.
    The payment moves to processing until an admin settles it.
    """
    try:
        booking = await PaymentService(db).upload_proof(profile.id, request)
        return ok(Booking.model_validate(booking))

    except ProblemDetailsException:
        raise

    except Exception as e:
        raise internal_error("payment proof upload", e, booking_id=str(request.booking_id), user_id=profile.id)


@router.post("/create", response_model=Payment)
async def create_payment(
    request: CreatePaymentRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    payment = await PaymentService(db).create_payment(request, actor_id=admin.id)
    return ok(Payment.model_validate(payment))


@router.post("/update", response_model=Payment)
async def update_payment(
    request: UpdatePaymentRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    payment = await PaymentService(db).update_payment(request, actor_id=admin.id)
    return ok(Payment.model_validate(payment))


@router.post("/mark-completed", response_model=Payment)
async def mark_payment_completed(
    request: MarkPaymentRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    """Settle a payment; the booking becomes confirmed and the customer is emailed (admin)."""
    try:
        payment = await PaymentService(db).mark_completed(request.payment_id, actor_id=admin.id, note=request.note)
        return ok(Payment.model_validate(payment))

    except ProblemDetailsException:
        raise

    except Exception as e:
        raise internal_error("payment completion", e, payment_id=str(request.payment_id), actor_id=admin.id)


@router.post("/mark-failed", response_model=Payment)
async def mark_payment_failed(
    request: MarkPaymentRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    payment = await PaymentService(db).mark_failed(request.payment_id, actor_id=admin.id, note=request.note)
    return ok(Payment.model_validate(payment))


@router.post("/mark-refunded", response_model=Payment)
async def mark_payment_refunded(
    request: MarkPaymentRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: Profile = ADMIN_DEPENDENCY,
) -> JSONResponse:
    payment = await PaymentService(db).mark_refunded(request.payment_id, actor_id=admin.id, note=request.note)
    return ok(Payment.model_validate(payment))
