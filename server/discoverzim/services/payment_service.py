"""Payment service: payment by proof and admin settlement."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import ConflictError, NotFoundError
from ..core.observability import metrics_collector
from ..models.audit import AuditAction
from ..models.booking import Booking, BookingStatus, PaymentStatus
from ..models.payment import Payment
from ..models.profile import Profile
from ..schemas.payment import CreatePaymentRequest, UpdatePaymentRequest, UploadPaymentProofRequest
from .audit_service import AuditService
from .booking_service import BookingService, booking_mail_data, can_view_booking
from .mailer import EmailTemplate, MailDispatcher, mail_dispatcher
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

SETTLED_STATUSES = (PaymentStatus.COMPLETED.value, PaymentStatus.REFUNDED.value)


class PaymentService:
    """Service for payment-related operations."""

    def __init__(self, db: AsyncSession, dispatcher: Optional[MailDispatcher] = None):
        self.db = db
        self.dispatcher = dispatcher or mail_dispatcher
        self.bookings = BookingService(db, self.dispatcher)
        self.audit = AuditService(db)
        self.notifications = NotificationService(db)

    async def _load(self, payment_id: UUID) -> Optional[Payment]:
        stmt = (
            select(Payment)
            .where(Payment.id == payment_id)
            .options(selectinload(Payment.booking))
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def get_payment_or_raise(self, payment_id: UUID) -> Payment:
        """
        Get payment by ID or raise NotFoundError.

        Raises:
            NotFoundError: If payment not found
        """
        payment = await self._load(payment_id)
        if not payment:
            logger.warning("Payment not found", extra={"payment_id": str(payment_id)})
            raise NotFoundError(resource_type="payment", resource_id=str(payment_id))
        return payment

    async def get_payment_for(self, profile: Profile, payment_id: UUID) -> Payment:
        """A payment whose booking the caller may see."""
        payment = await self.get_payment_or_raise(payment_id)
        if not can_view_booking(profile, payment.booking):
            raise NotFoundError(resource_type="payment", resource_id=str(payment_id))
        return payment

    async def get_by_booking_for(self, profile: Profile, booking_id: UUID) -> Payment:
        """The most recent payment of a booking the caller may see."""
        booking = await self.bookings.get_booking_for(profile, booking_id)
        stmt = (
            select(Payment)
            .where(Payment.booking_id == booking.id)
            .order_by(Payment.created_at.desc())
            .limit(1)
        )
        payment = (await self.db.execute(stmt)).scalar_one_or_none()
        if not payment:
            raise NotFoundError(resource_type="payment", resource_id=str(booking_id))
        return payment

    async def create_payment(self, request: CreatePaymentRequest, actor_id: str) -> Payment:
        """Record the payment of a booking that has none, and link it."""
        booking = await self.bookings.get_booking_or_raise(request.booking_id)

        existing = (
            await self.db.execute(select(Payment.id).where(Payment.booking_id == booking.id).limit(1))
        ).scalar_one_or_none()
        if existing is not None:
            raise ConflictError(
                detail=f"Booking {booking.id} already has a payment",
                conflicting_resource={"payment_id": str(existing)},
            )

        payment = Payment(
            booking_id=booking.id,
            amount=request.amount,
            status=PaymentStatus.PENDING.value,
            payment_method=request.payment_method,
            payment_gateway=request.payment_gateway,
            payment_gateway_reference=request.payment_gateway_reference,
            payment_details=request.payment_details,
        )
        self.db.add(payment)
        await self.db.flush()

        booking.payment_id = payment.id

        self.audit.record(AuditAction.CREATE, "payments", payment.id, actor_id, request.model_dump())
        await self.db.commit()

        logger.info(
            "Payment created successfully",
            extra={"payment_id": str(payment.id), "booking_id": str(booking.id), "actor_id": actor_id}
        )
        return await self._load(payment.id)

    async def update_payment(self, request: UpdatePaymentRequest, actor_id: str) -> Payment:
        """Apply the fields present in the patch."""
        payment = await self.get_payment_or_raise(request.payment_id)

        changes = request.model_dump(exclude_unset=True, exclude={"payment_id"})
        for name, value in changes.items():
            if name == "status":
                if value is None:
                    continue
                value = PaymentStatus(value).value
            setattr(payment, name, value)

        self.audit.record(AuditAction.UPDATE, "payments", payment.id, actor_id, changes)
        await self.db.commit()

        logger.info(
            "Payment updated successfully",
            extra={"payment_id": str(payment.id), "fields": sorted(changes), "actor_id": actor_id}
        )
        return await self._load(payment.id)

    async def upload_proof(self, user_id: str, request: UploadPaymentProofRequest) -> Booking:
        """
        Attach proof of payment to one of the caller's bookings.

        Raises:
            NotFoundError: If the booking or its payment is missing
            AuthorizationError: If the booking belongs to someone else
            ConflictError: If the payment is already settled
        """
        booking = await self.bookings.get_booking_or_raise(request.booking_id)
        self.bookings.ensure_owner(booking, user_id)

        payment = booking.payment
        if payment is None:
            raise NotFoundError(resource_type="payment", resource_id=str(booking.id))
        if payment.status in SETTLED_STATUSES:
            raise ConflictError(
                detail=f"Payment {payment.id} is already {payment.status}",
                conflicting_resource={"payment_id": str(payment.id), "status": str(payment.status)},
            )

        now = datetime.utcnow()
        booking.payment_proof_url = request.proof_url
        booking.payment_proof_uploaded_at = now
        booking.payment_status = PaymentStatus.PROCESSING.value

        payment.status = PaymentStatus.PROCESSING.value
        payment.payment_details = {
            **(payment.payment_details or {}),
            "proof_uploaded": True,
            "proof_uploaded_at": now.isoformat(),
            "proof_url": request.proof_url,
        }

        self.notifications.create(
            user_id,
            title="Payment proof received",
            description=f"We received your proof of payment for booking {booking.reference}. It is being reviewed.",
            type="payment",
        )
        await self.db.commit()

        metrics_collector.record_payment_proof_uploaded()
        logger.info(
            "Payment proof uploaded",
            extra={"booking_id": str(booking.id), "payment_id": str(payment.id), "user_id": user_id}
        )
        return await self.bookings.get_booking_or_raise(booking.id)

    async def mark_completed(self, payment_id: UUID, actor_id: str, note: Optional[str] = None) -> Payment:
        """
        Settle a payment: the booking is paid and confirmed, and the customer is emailed.

        Raises:
            ConflictError: If the payment was refunded
        """
        payment = await self.get_payment_or_raise(payment_id)
        if payment.status == PaymentStatus.REFUNDED.value:
            raise ConflictError(
                detail=f"Payment {payment.id} was refunded and cannot be completed",
                conflicting_resource={"payment_id": str(payment.id), "status": str(payment.status)},
            )

        now = datetime.utcnow()
        payment.status = PaymentStatus.COMPLETED.value
        payment.payment_details = {
            **(payment.payment_details or {}),
            "completed_at": now.isoformat(),
            **({"admin_note": note} if note else {}),
        }

        booking = payment.booking
        booking.payment_status = PaymentStatus.COMPLETED.value
        booking.status = BookingStatus.CONFIRMED.value
        booking.confirmation_date = now

        self.audit.record(
            AuditAction.UPDATE, "payments", payment.id, actor_id,
            {"status": PaymentStatus.COMPLETED.value, "booking_id": str(booking.id), "note": note},
        )
        if booking.user_id:
            self.notifications.create(
                booking.user_id,
                title="Payment confirmed",
                description=f"Your payment for booking {booking.reference} has been confirmed.",
                type="payment",
            )
        await self.db.commit()

        metrics_collector.record_payment_completed()
        logger.info(
            "Payment completed",
            extra={"payment_id": str(payment.id), "booking_id": str(booking.id), "actor_id": actor_id}
        )

        self.dispatcher.dispatch(EmailTemplate.PAYMENT_CONFIRMATION, booking.contact_email, booking_mail_data(booking))
        return await self._load(payment.id)

    async def _mark(self, payment_id: UUID, status: PaymentStatus, actor_id: str, note: Optional[str]) -> Payment:
        payment = await self.get_payment_or_raise(payment_id)

        payment.status = status.value
        if note:
            payment.payment_details = {**(payment.payment_details or {}), "admin_note": note}
        payment.booking.payment_status = status.value

        self.audit.record(
            AuditAction.UPDATE, "payments", payment.id, actor_id,
            {"status": status.value, "booking_id": str(payment.booking_id), "note": note},
        )
        await self.db.commit()

        logger.info(
            "Payment status updated",
            extra={"payment_id": str(payment.id), "status": status.value, "actor_id": actor_id}
        )
        return await self._load(payment.id)

    async def mark_failed(self, payment_id: UUID, actor_id: str, note: Optional[str] = None) -> Payment:
        return await self._mark(payment_id, PaymentStatus.FAILED, actor_id, note)

    async def mark_refunded(self, payment_id: UUID, actor_id: str, note: Optional[str] = None) -> Payment:
        return await self._mark(payment_id, PaymentStatus.REFUNDED, actor_id, note)
