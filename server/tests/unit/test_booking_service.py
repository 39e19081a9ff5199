"""Unit tests for booking service."""

from datetime import date, datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select

from discoverzim.core.exceptions import (
    AuthorizationError,
    BookingNotCancellableError,
    GuestLimitExceededError,
    NotFoundError,
)
from discoverzim.models.audit import AuditLog
from discoverzim.models.booking import Booking, BookingStatus, PaymentStatus
from discoverzim.models.notification import Notification
from discoverzim.models.payment import Payment
from discoverzim.models.profile import Profile, UserRole
from discoverzim.schemas.booking import (
    CancelBookingRequest,
    CreateAccommodationBookingRequest,
    CreateDestinationBookingRequest,
    CreateEventBookingRequest,
    UpdateBookingPaymentStatusRequest,
    UpdateBookingStatusRequest,
)
from discoverzim.services import booking_service
from discoverzim.services.booking_service import BookingService
from discoverzim.services.mailer import EmailTemplate

from conftest import ADMIN_ID, OTHER_USER_ID, USER_ID

TRAVEL_DATE = date.today() + timedelta(days=14)


async def book_destination(service, destination, contact_data, user_id=USER_ID, people=2, **extra):
    request = CreateDestinationBookingRequest(
        destination_id=destination.id,
        number_of_people=people,
        preferred_date=TRAVEL_DATE,
        **contact_data,
        **extra,
    )
    return await service.create_destination_booking(request, user_id=user_id)


@pytest.mark.asyncio
async def test_destination_booking_creates_linked_payment(test_session, destination, contact_data, recording_dispatcher):
    """Booking and payment are created together and linked both ways."""
    service = BookingService(test_session, recording_dispatcher)

    booking = await book_destination(service, destination, contact_data, special_requests="Window seat")

    assert booking.total_price == 100.0
    assert booking.status == BookingStatus.PENDING.value
    assert booking.payment_status == PaymentStatus.PENDING.value
    assert booking.booking_details["special_requests"] == "Window seat"
    assert booking.kind == "destination"

    assert booking.payment is not None
    assert booking.payment_id == booking.payment.id
    assert booking.payment.booking_id == booking.id
    assert booking.payment.amount == booking.total_price
    assert booking.payment.payment_gateway == "manual"
    assert booking.payment.payment_details["number_of_people"] == 2


@pytest.mark.asyncio
async def test_booking_sends_confirmation_and_notifies(test_session, destination, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)

    booking = await book_destination(service, destination, contact_data)

    template, recipient, data = recording_dispatcher.sent[0]
    assert template == EmailTemplate.BOOKING_CONFIRMATION
    assert recipient == contact_data["contact_email"]
    assert data["id"] == str(booking.id)

    notifications = (await test_session.execute(select(Notification))).scalars().all()
    assert len(notifications) == 1
    assert notifications[0].user_id == USER_ID
    assert booking.reference in notifications[0].description


@pytest.mark.asyncio
async def test_anonymous_destination_booking(test_session, destination, contact_data, recording_dispatcher):
    """Anonymous bookings are allowed and produce no notification."""
    booking = await book_destination(BookingService(test_session, recording_dispatcher), destination, contact_data, user_id=None)

    assert booking.user_id is None
    assert (await test_session.execute(select(Notification))).scalars().all() == []
    assert recording_dispatcher.templates() == [EmailTemplate.BOOKING_CONFIRMATION]


@pytest.mark.asyncio
async def test_booking_unknown_destination(test_session, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    request = CreateDestinationBookingRequest(
        destination_id=uuid4(), number_of_people=1, preferred_date=TRAVEL_DATE, **contact_data
    )

    with pytest.raises(NotFoundError):
        await service.create_destination_booking(request, user_id=USER_ID)

    assert (await test_session.execute(select(Payment))).scalars().all() == []
    assert recording_dispatcher.sent == []


@pytest.mark.asyncio
async def test_event_booking_prices_ticket_type(test_session, event, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)

    booking = await service.create_event_booking(
        CreateEventBookingRequest(
            event_id=event.id, number_of_people=3, preferred_date=TRAVEL_DATE, ticket_type="vip", **contact_data
        ),
        user_id=USER_ID,
    )

    assert booking.kind == "event"
    assert booking.total_price == 135.0
    assert booking.selected_ticket_type["type"] == "vip"
    assert booking.booking_details["event_name"] == event.title


@pytest.mark.asyncio
async def test_accommodation_booking_uses_check_in_as_preferred_date(
    test_session, accommodation, contact_data, recording_dispatcher
):
    service = BookingService(test_session, recording_dispatcher)
    check_in = TRAVEL_DATE

    booking = await service.create_accommodation_booking(
        CreateAccommodationBookingRequest(
            accommodation_id=accommodation.id,
            check_in_date=check_in,
            check_out_date=check_in + timedelta(days=2),
            number_of_guests=2,
            room_type="deluxe",
            **contact_data,
        ),
        user_id=USER_ID,
    )

    assert booking.kind == "accommodation"
    assert booking.preferred_date == check_in
    assert booking.number_of_people == 2
    assert booking.total_price == 300.0
    assert booking.booking_details["number_of_nights"] == 2


@pytest.mark.asyncio
async def test_accommodation_guest_limit(test_session, accommodation, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)

    with pytest.raises(GuestLimitExceededError):
        await service.create_accommodation_booking(
            CreateAccommodationBookingRequest(
                accommodation_id=accommodation.id,
                check_in_date=TRAVEL_DATE,
                check_out_date=TRAVEL_DATE + timedelta(days=1),
                number_of_guests=5,
                **contact_data,
            ),
            user_id=USER_ID,
        )

    assert recording_dispatcher.sent == []


@pytest.mark.asyncio
async def test_owner_cancels_booking(test_session, destination, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    booking = await book_destination(service, destination, contact_data)

    cancelled = await service.cancel_user_booking(
        USER_ID, CancelBookingRequest(booking_id=booking.id, reason="Change of plans")
    )

    assert cancelled.status == BookingStatus.CANCELLED.value
    assert cancelled.cancellation_reason == "Change of plans"
    assert cancelled.cancellation_date is not None
    assert recording_dispatcher.templates()[-1] == EmailTemplate.BOOKING_CANCELLATION


@pytest.mark.asyncio
async def test_cancel_twice_refused(test_session, destination, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    booking = await book_destination(service, destination, contact_data)
    request = CancelBookingRequest(booking_id=booking.id, reason="Change of plans")
    await service.cancel_user_booking(USER_ID, request)

    with pytest.raises(BookingNotCancellableError):
        await service.cancel_user_booking(USER_ID, request)


@pytest.mark.asyncio
async def test_cancel_someone_elses_booking_is_not_found(test_session, destination, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    booking = await book_destination(service, destination, contact_data)

    with pytest.raises(NotFoundError):
        await service.cancel_user_booking(OTHER_USER_ID, CancelBookingRequest(booking_id=booking.id, reason="x"))


@pytest.mark.asyncio
async def test_booking_visibility(test_session, destination, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    booking = await book_destination(service, destination, contact_data)

    owner = Profile(id=USER_ID, role=UserRole.USER.value)
    stranger = Profile(id=OTHER_USER_ID, role=UserRole.USER.value)
    admin = Profile(id=ADMIN_ID, role=UserRole.ADMIN.value)

    assert (await service.get_booking_for(owner, booking.id)).id == booking.id
    assert (await service.get_booking_for(admin, booking.id)).id == booking.id
    with pytest.raises(NotFoundError):
        await service.get_booking_for(stranger, booking.id)


@pytest.mark.asyncio
async def test_list_user_bookings_newest_first(test_session, destination, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    first = await book_destination(service, destination, contact_data)
    first.created_at = datetime.utcnow() - timedelta(hours=1)
    await test_session.commit()
    second = await book_destination(service, destination, contact_data)
    await book_destination(service, destination, contact_data, user_id=OTHER_USER_ID)

    bookings = await service.list_user_bookings(USER_ID)

    assert [b.id for b in bookings] == [second.id, first.id]


@pytest.mark.asyncio
async def test_admin_status_update_stamps_dates_and_audits(
    test_session, destination, contact_data, recording_dispatcher
):
    service = BookingService(test_session, recording_dispatcher)
    booking = await book_destination(service, destination, contact_data)

    confirmed = await service.update_status(
        UpdateBookingStatusRequest(booking_id=booking.id, status="confirmed"), actor_id=ADMIN_ID
    )
    assert confirmed.status == BookingStatus.CONFIRMED.value
    assert confirmed.confirmation_date is not None

    cancelled = await service.update_status(
        UpdateBookingStatusRequest(booking_id=booking.id, status="cancelled", cancellation_reason="Park closed"),
        actor_id=ADMIN_ID,
    )
    assert cancelled.cancellation_reason == "Park closed"
    assert recording_dispatcher.templates()[-1] == EmailTemplate.BOOKING_CANCELLATION

    audit_rows = (
        await test_session.execute(select(AuditLog).where(AuditLog.table_name == "bookings"))
    ).scalars().all()
    assert len(audit_rows) == 2
    assert all(row.user_id == ADMIN_ID for row in audit_rows)


@pytest.mark.asyncio
async def test_payment_status_update_syncs_payment(test_session, destination, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    booking = await book_destination(service, destination, contact_data)

    updated = await service.update_payment_status(
        UpdateBookingPaymentStatusRequest(booking_id=booking.id, payment_status="failed"), actor_id=ADMIN_ID
    )

    assert updated.payment_status == PaymentStatus.FAILED.value
    assert updated.payment.status == PaymentStatus.FAILED.value


@pytest.mark.asyncio
async def test_invoice_for_accommodation(test_session, accommodation, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    booking = await service.create_accommodation_booking(
        CreateAccommodationBookingRequest(
            accommodation_id=accommodation.id,
            check_in_date=TRAVEL_DATE,
            check_out_date=TRAVEL_DATE + timedelta(days=3),
            number_of_guests=2,
            room_type="deluxe",
            **contact_data,
        ),
        user_id=USER_ID,
    )

    invoice = await service.build_invoice(Profile(id=USER_ID, role=UserRole.USER.value), booking.id)

    assert invoice["reference"] == booking.reference
    assert invoice["item_name"] == accommodation.name
    assert invoice["unit_price"] == 150.0
    assert invoice["quantity"] == 3
    assert invoice["total_price"] == 450.0


@pytest.mark.asyncio
async def test_complete_overdue(test_session, destination, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    due = await book_destination(service, destination, contact_data)
    not_due = await book_destination(service, destination, contact_data)
    pending = await book_destination(service, destination, contact_data)

    for booking in (due, not_due):
        await service.update_status(
            UpdateBookingStatusRequest(booking_id=booking.id, status="confirmed"), actor_id=ADMIN_ID
        )

    now = datetime.combine(TRAVEL_DATE, datetime.min.time())
    due.preferred_date = TRAVEL_DATE - timedelta(days=2)
    pending.preferred_date = TRAVEL_DATE - timedelta(days=2)
    await test_session.commit()

    completed = await service.complete_overdue(now, grace_days=1)

    assert completed == 1
    assert (await service.get_booking_or_raise(due.id)).status == BookingStatus.COMPLETED.value
    assert (await service.get_booking_or_raise(not_due.id)).status == BookingStatus.CONFIRMED.value
    assert (await service.get_booking_or_raise(pending.id)).status == BookingStatus.PENDING.value


@pytest.mark.asyncio
async def test_ensure_owner(test_session, destination, contact_data, recording_dispatcher):
    service = BookingService(test_session, recording_dispatcher)
    booking = await book_destination(service, destination, contact_data)

    service.ensure_owner(booking, USER_ID)
    with pytest.raises(AuthorizationError):
        service.ensure_owner(booking, OTHER_USER_ID)


@pytest.mark.asyncio
async def test_failed_payment_insert_leaves_nothing_behind(
    test_session, destination, contact_data, recording_dispatcher, monkeypatch
):
    def broken_payment(**kwargs):
        raise RuntimeError("payments table unavailable")

    monkeypatch.setattr(booking_service, "Payment", broken_payment)
    service = BookingService(test_session, recording_dispatcher)

    with pytest.raises(RuntimeError):
        await book_destination(service, destination, contact_data)

    assert (await test_session.execute(select(Booking))).scalars().all() == []
    assert (await test_session.execute(select(Payment))).scalars().all() == []
    assert (await test_session.execute(select(Notification))).scalars().all() == []
    assert recording_dispatcher.sent == []
