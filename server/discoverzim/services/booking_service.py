"""Booking service: the booking orchestration and booking lifecycle."""

import logging
from datetime import date, datetime, timedelta
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import AuthorizationError, BookingNotCancellableError, NotFoundError
from ..core.observability import metrics_collector
from ..models.audit import AuditAction
from ..models.booking import Booking, BookingStatus, PaymentStatus
from ..models.payment import Payment
from ..models.profile import Profile, UserRole
from ..schemas.booking import (
    BookingContactForm,
    CancelBookingRequest,
    CreateAccommodationBookingRequest,
    CreateDestinationBookingRequest,
    CreateEventBookingRequest,
    UpdateBookingPaymentStatusRequest,
    UpdateBookingStatusRequest,
)
from . import pricing
from .accommodation_service import AccommodationService
from .audit_service import AuditService
from .destination_service import DestinationService
from .event_service import EventService
from .mailer import EmailTemplate, MailDispatcher, mail_dispatcher
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

CANCELLABLE_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


def booking_mail_data(booking: Booking) -> dict:
    """Snapshot of the fields the mail templates read."""
    return {
        "id": str(booking.id),
        "contact_name": booking.contact_name,
        "contact_email": booking.contact_email,
        "preferred_date": booking.preferred_date,
        "number_of_people": booking.number_of_people,
        "total_price": booking.total_price,
        "destination_id": booking.destination_id,
        "event_id": booking.event_id,
        "accommodation_id": booking.accommodation_id,
        "booking_details": dict(booking.booking_details or {}),
        "cancellation_reason": booking.cancellation_reason,
    }


def can_view_booking(profile: Optional[Profile], booking: Booking) -> bool:
    if profile is None:
        return False
    return booking.user_id == profile.id or profile.role == UserRole.ADMIN


class BookingService:
    """Service for booking-related operations."""

    def __init__(self, db: AsyncSession, dispatcher: Optional[MailDispatcher] = None):
        self.db = db
        self.dispatcher = dispatcher or mail_dispatcher
        self.audit = AuditService(db)
        self.notifications = NotificationService(db)

    async def _load(self, booking_id: UUID) -> Optional[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.id == booking_id)
            .options(selectinload(Booking.payment))
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def get_booking_or_raise(self, booking_id: UUID) -> Booking:
        """
        Get booking by ID or raise NotFoundError.

        Raises:
            NotFoundError: If booking not found
        """
        booking = await self._load(booking_id)
        if not booking:
            logger.warning("Booking not found", extra={"booking_id": str(booking_id)})
            raise NotFoundError(resource_type="booking", resource_id=str(booking_id))
        return booking

    async def get_booking_for(self, profile: Profile, booking_id: UUID) -> Booking:
        """
        A booking visible to the caller: their own, or any for admins.

        Other users' bookings are reported as not found.
        """
        booking = await self.get_booking_or_raise(booking_id)
        if not can_view_booking(profile, booking):
            raise NotFoundError(resource_type="booking", resource_id=str(booking_id))
        return booking

    async def _place(
        self,
        kind: str,
        user_id: Optional[str],
        form: BookingContactForm,
        quote: pricing.PriceQuote,
        number_of_people: int,
        preferred_date: date,
        **target,
    ) -> Booking:
        """
        Insert the booking and its payment and link them, in one transaction.

        The confirmation email is scheduled only after the commit, and its
        outcome never affects the result.
        """
        booking_details = dict(quote.booking_details)
        if form.special_requests:
            booking_details["special_requests"] = form.special_requests

        booking = Booking(
            user_id=user_id,
            contact_name=form.contact_name,
            contact_email=str(form.contact_email),
            contact_phone=form.contact_phone,
            booking_date=datetime.utcnow(),
            preferred_date=quote.preferred_date or preferred_date,
            number_of_people=number_of_people,
            total_price=quote.total_price,
            booking_details=booking_details,
            selected_ticket_type=quote.selected_ticket_type,
            status=BookingStatus.PENDING.value,
            payment_status=PaymentStatus.PENDING.value,
            **target,
        )

        try:
            self.db.add(booking)
            await self.db.flush()

            payment = Payment(
                booking_id=booking.id,
                amount=quote.total_price,
                status=PaymentStatus.PENDING.value,
                payment_gateway="manual",
                payment_details=quote.payment_details,
            )
            self.db.add(payment)
            await self.db.flush()

            booking.payment_id = payment.id

            if user_id:
                self.notifications.create(
                    user_id,
                    title="Booking received",
                    description=(
                        f"Your booking {booking.reference} for {booked_item_name(booking_details)} "
                        f"is pending payment."
                    ),
                    type="booking",
                )

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(
                "Booking transaction rolled back",
                extra={"kind": kind, "user_id": user_id},
                exc_info=True
            )
            raise

        metrics_collector.record_booking_created(kind)
        logger.info(
            "Booking created successfully",
            extra={
                "booking_id": str(booking.id),
                "payment_id": str(booking.payment_id),
                "kind": kind,
                "user_id": user_id,
                "total_price": booking.total_price,
            }
        )

        self.dispatcher.dispatch(EmailTemplate.BOOKING_CONFIRMATION, booking.contact_email, booking_mail_data(booking))

        return await self._load(booking.id)

    async def create_destination_booking(
        self, request: CreateDestinationBookingRequest, user_id: Optional[str] = None
    ) -> Booking:
        """Book a destination; anonymous callers are allowed."""
        destination = await DestinationService(self.db).get_destination_or_raise(request.destination_id)
        quote = pricing.price_destination_booking(destination, request.number_of_people)
        return await self._place(
            "destination", user_id, request, quote,
            request.number_of_people, request.preferred_date,
            destination_id=destination.id,
        )

    async def create_event_booking(self, request: CreateEventBookingRequest, user_id: str) -> Booking:
        """Book event tickets."""
        event = await EventService(self.db).get_event_or_raise(request.event_id)
        quote = pricing.price_event_booking(event, request.number_of_people, request.ticket_type)
        return await self._place(
            "event", user_id, request, quote,
            request.number_of_people, request.preferred_date,
            event_id=event.id,
        )

    async def create_accommodation_booking(self, request: CreateAccommodationBookingRequest, user_id: str) -> Booking:
        """Book a stay; the check-in date becomes the preferred date."""
        accommodation = await AccommodationService(self.db).get_accommodation_or_raise(request.accommodation_id)
        quote = pricing.price_accommodation_booking(
            accommodation,
            request.check_in_date,
            request.check_out_date,
            request.number_of_guests,
            request.room_type,
        )
        return await self._place(
            "accommodation", user_id, request, quote,
            request.number_of_guests, request.check_in_date,
            accommodation_id=accommodation.id,
        )

    async def list_user_bookings(self, user_id: str) -> list[Booking]:
        """The user's bookings, newest first."""
        stmt = (
            select(Booking)
            .where(Booking.user_id == user_id)
            .options(selectinload(Booking.payment))
            .order_by(Booking.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_bookings(self, status: Optional[BookingStatus] = None) -> list[Booking]:
        """All bookings for the back office, newest first."""
        stmt = select(Booking).options(selectinload(Booking.payment)).order_by(Booking.created_at.desc())
        if status is not None:
            stmt = stmt.where(Booking.status == BookingStatus(status).value)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def build_invoice(self, profile: Profile, booking_id: UUID) -> dict:
        """Invoice view of a visible booking."""
        booking = await self.get_booking_for(profile, booking_id)
        details = booking.booking_details or {}
        kind = booking.kind

        if kind == "event":
            unit_price = details.get("ticket_price", 0)
            quantity = booking.number_of_people
            location = details.get("event_location")
        elif kind == "accommodation":
            unit_price = float(details.get("base_price") or 0) * float(details.get("room_type_multiplier") or 1)
            quantity = int(details.get("number_of_nights") or 1)
            location = details.get("accommodation_location")
        else:
            unit_price = details.get("price_per_person", 0)
            quantity = booking.number_of_people
            location = details.get("destination_location")

        return {
            "reference": booking.reference,
            "booking_id": booking.id,
            "issued_at": booking.booking_date,
            "customer_name": booking.contact_name,
            "customer_email": booking.contact_email,
            "customer_phone": booking.contact_phone,
            "item_name": booked_item_name(details),
            "item_location": location,
            "item_kind": kind,
            "unit_price": round(float(unit_price or 0), 2),
            "quantity": quantity,
            "total_price": booking.total_price,
            "preferred_date": booking.preferred_date,
            "status": booking.status,
            "payment_status": booking.payment_status,
        }

    def _apply_status(self, booking: Booking, status: BookingStatus, reason: Optional[str] = None) -> None:
        """Set the status and stamp the matching lifecycle date."""
        now = datetime.utcnow()
        booking.status = status.value
        if status == BookingStatus.CONFIRMED:
            booking.confirmation_date = now
        elif status == BookingStatus.CANCELLED:
            booking.cancellation_date = now
            booking.cancellation_reason = reason
        elif status == BookingStatus.COMPLETED:
            booking.completion_date = now

    async def cancel_user_booking(self, user_id: str, request: CancelBookingRequest) -> Booking:
        """
        Cancel one of the caller's bookings.

        Raises:
            NotFoundError: If booking not found or owned by someone else
            BookingNotCancellableError: If it is already cancelled or completed
        """
        booking = await self.get_booking_or_raise(request.booking_id)
        if booking.user_id != user_id:
            raise NotFoundError(resource_type="booking", resource_id=str(request.booking_id))

        if booking.status not in CANCELLABLE_STATUSES:
            logger.warning(
                "Booking cancellation refused",
                extra={"booking_id": str(booking.id), "status": booking.status}
            )
            raise BookingNotCancellableError(booking_id=str(booking.id), status=str(booking.status))

        self._apply_status(booking, BookingStatus.CANCELLED, request.reason)
        self.notifications.create(
            user_id,
            title="Booking cancelled",
            description=f"Your booking {booking.reference} has been cancelled.",
            type="booking",
        )
        await self.db.commit()

        metrics_collector.record_booking_cancelled("user")
        logger.info(
            "Booking cancelled successfully",
            extra={"booking_id": str(booking.id), "user_id": user_id}
        )

        self.dispatcher.dispatch(EmailTemplate.BOOKING_CANCELLATION, booking.contact_email, booking_mail_data(booking))
        return await self._load(booking.id)

    async def update_status(self, request: UpdateBookingStatusRequest, actor_id: str) -> Booking:
        """Admin status change with date stamps, owner notification and cancellation email."""
        booking = await self.get_booking_or_raise(request.booking_id)
        previous = booking.status
        status = BookingStatus(request.status.value)

        self._apply_status(booking, status, request.cancellation_reason)
        self.audit.record(
            AuditAction.UPDATE, "bookings", booking.id, actor_id,
            {"status": status.value, "previous_status": str(previous), "cancellation_reason": request.cancellation_reason},
        )
        if booking.user_id:
            self.notifications.create(
                booking.user_id,
                title="Booking updated",
                description=f"Your booking {booking.reference} is now {status.value}.",
                type="booking",
            )
        await self.db.commit()

        logger.info(
            "Booking status updated",
            extra={"booking_id": str(booking.id), "status": status.value, "actor_id": actor_id}
        )

        if status == BookingStatus.CANCELLED:
            metrics_collector.record_booking_cancelled("admin")
            self.dispatcher.dispatch(
                EmailTemplate.BOOKING_CANCELLATION, booking.contact_email, booking_mail_data(booking)
            )
        elif status == BookingStatus.COMPLETED:
            metrics_collector.record_bookings_completed(1)

        return await self._load(booking.id)

    async def update_payment_status(self, request: UpdateBookingPaymentStatusRequest, actor_id: str) -> Booking:
        """Admin payment status change; the linked payment follows."""
        booking = await self.get_booking_or_raise(request.booking_id)
        payment_status = request.payment_status.value

        booking.payment_status = payment_status
        if booking.payment is not None:
            booking.payment.status = payment_status

        self.audit.record(AuditAction.UPDATE, "bookings", booking.id, actor_id, {"payment_status": payment_status})
        await self.db.commit()

        logger.info(
            "Booking payment status updated",
            extra={"booking_id": str(booking.id), "payment_status": payment_status, "actor_id": actor_id}
        )
        return await self._load(booking.id)

    async def complete_overdue(self, now: Optional[datetime] = None, grace_days: int = 1, batch_size: int = 100) -> int:
        """
        Mark confirmed bookings whose preferred date is more than grace_days past as completed.

        Returns:
            Number of bookings completed
        """
        now = now or datetime.utcnow()
        cutoff = now.date() - timedelta(days=grace_days)

        stmt = (
            select(Booking)
            .where(
                Booking.status == BookingStatus.CONFIRMED.value,
                Booking.preferred_date.is_not(None),
                Booking.preferred_date < cutoff,
            )
            .limit(batch_size)
        )
        bookings = list((await self.db.execute(stmt)).scalars().all())

        for booking in bookings:
            booking.status = BookingStatus.COMPLETED.value
            booking.completion_date = now

        if bookings:
            await self.db.commit()
            metrics_collector.record_bookings_completed(len(bookings))
            logger.info(
                "Overdue bookings completed",
                extra={"completed_count": len(bookings), "cutoff": cutoff.isoformat()}
            )

        return len(bookings)

    def ensure_owner(self, booking: Booking, user_id: str) -> None:
        """
        Raises:
            AuthorizationError: If the booking belongs to someone else
        """
        if booking.user_id != user_id:
            raise AuthorizationError(detail="Only the booking owner may do this")


def booked_item_name(details: dict) -> str:
    """Display name of what was booked, from the stored booking details."""
    return (
        details.get("destination_name")
        or details.get("event_name")
        or details.get("accommodation_name")
        or "Booking"
    )
