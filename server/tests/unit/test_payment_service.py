"""Unit tests for payment service."""

from datetime import date, timedelta

import pytest
import pytest_asyncio
from sqlalchemy import select

from discoverzim.core.exceptions import AuthorizationError, ConflictError, NotFoundError
from discoverzim.models.booking import Booking, BookingStatus, PaymentStatus
from discoverzim.models.notification import Notification
from discoverzim.models.payment import Payment
from discoverzim.models.profile import Profile, UserRole
from discoverzim.schemas.booking import CreateDestinationBookingRequest
from discoverzim.schemas.payment import CreatePaymentRequest, UpdatePaymentRequest, UploadPaymentProofRequest
from discoverzim.services.booking_service import BookingService
from discoverzim.services.mailer import EmailTemplate
from discoverzim.services.payment_service import PaymentService

from conftest import ADMIN_ID, OTHER_USER_ID, USER_ID

PROOF_URL = "https://storage.example/payment-proofs/proof.jpg"


@pytest.fixture
def payment_service(test_session, recording_dispatcher):
    return PaymentService(test_session, recording_dispatcher)


@pytest_asyncio.fixture
async def booking(test_session, destination, contact_data, recording_dispatcher):
    return await BookingService(test_session, recording_dispatcher).create_destination_booking(
        CreateDestinationBookingRequest(
            destination_id=destination.id,
            number_of_people=2,
            preferred_date=date.today() + timedelta(days=10),
            **contact_data,
        ),
        user_id=USER_ID,
    )


@pytest.mark.asyncio
async def test_upload_proof_moves_to_processing(payment_service, booking):
    updated = await payment_service.upload_proof(
        USER_ID, UploadPaymentProofRequest(booking_id=booking.id, proof_url=PROOF_URL)
    )

    assert updated.payment_proof_url == PROOF_URL
    assert updated.payment_proof_uploaded_at is not None
    assert updated.payment_status == PaymentStatus.PROCESSING.value
    assert updated.payment.status == PaymentStatus.PROCESSING.value
    assert updated.payment.payment_details["proof_uploaded"] is True
    assert updated.payment.payment_details["proof_url"] == PROOF_URL
    # Pricing details survive the merge
    assert updated.payment.payment_details["number_of_people"] == 2


@pytest.mark.asyncio
async def test_upload_proof_notifies_owner(test_session, payment_service, booking):
    await payment_service.upload_proof(USER_ID, UploadPaymentProofRequest(booking_id=booking.id, proof_url=PROOF_URL))

    titles = [n.title for n in (await test_session.execute(select(Notification))).scalars().all()]
    assert "Payment proof received" in titles


@pytest.mark.asyncio
async def test_upload_proof_by_non_owner(payment_service, booking):
    with pytest.raises(AuthorizationError):
        await payment_service.upload_proof(
            OTHER_USER_ID, UploadPaymentProofRequest(booking_id=booking.id, proof_url=PROOF_URL)
        )


@pytest.mark.asyncio
async def test_mark_completed_confirms_booking_and_emails(payment_service, booking, recording_dispatcher):
    payment = await payment_service.mark_completed(booking.payment_id, actor_id=ADMIN_ID, note="EcoCash ref 1234")

    assert payment.status == PaymentStatus.COMPLETED.value
    assert payment.payment_details["admin_note"] == "EcoCash ref 1234"
    assert "completed_at" in payment.payment_details
    assert payment.booking.status == BookingStatus.CONFIRMED.value
    assert payment.booking.payment_status == PaymentStatus.COMPLETED.value
    assert payment.booking.confirmation_date is not None
    assert recording_dispatcher.templates()[-1] == EmailTemplate.PAYMENT_CONFIRMATION


@pytest.mark.asyncio
async def test_proof_after_completion_conflicts(payment_service, booking):
    await payment_service.mark_completed(booking.payment_id, actor_id=ADMIN_ID)

    with pytest.raises(ConflictError):
        await payment_service.upload_proof(
            USER_ID, UploadPaymentProofRequest(booking_id=booking.id, proof_url=PROOF_URL)
        )


@pytest.mark.asyncio
async def test_refunded_payment_cannot_complete(payment_service, booking):
    refunded = await payment_service.mark_refunded(booking.payment_id, actor_id=ADMIN_ID)
    assert refunded.booking.payment_status == PaymentStatus.REFUNDED.value

    with pytest.raises(ConflictError):
        await payment_service.mark_completed(booking.payment_id, actor_id=ADMIN_ID)


@pytest.mark.asyncio
async def test_mark_failed_records_note(payment_service, booking):
    payment = await payment_service.mark_failed(booking.payment_id, actor_id=ADMIN_ID, note="Proof unreadable")

    assert payment.status == PaymentStatus.FAILED.value
    assert payment.payment_details["admin_note"] == "Proof unreadable"


@pytest.mark.asyncio
async def test_payment_visibility(payment_service, booking):
    owner = Profile(id=USER_ID, role=UserRole.USER.value)
    stranger = Profile(id=OTHER_USER_ID, role=UserRole.USER.value)

    assert (await payment_service.get_payment_for(owner, booking.payment_id)).id == booking.payment_id
    assert (await payment_service.get_by_booking_for(owner, booking.id)).booking_id == booking.id

    with pytest.raises(NotFoundError):
        await payment_service.get_payment_for(stranger, booking.payment_id)
    with pytest.raises(NotFoundError):
        await payment_service.get_by_booking_for(stranger, booking.id)


@pytest.mark.asyncio
async def test_admin_update_payment_fields(payment_service, booking):
    payment = await payment_service.update_payment(
        UpdatePaymentRequest(payment_id=booking.payment_id, payment_method="ecocash", payment_gateway_reference="EC-99"),
        actor_id=ADMIN_ID,
    )

    assert payment.payment_method == "ecocash"
    assert payment.payment_gateway_reference == "EC-99"
    assert payment.status == PaymentStatus.PENDING.value


@pytest.mark.asyncio
async def test_create_payment_for_unknown_booking(payment_service):
    from uuid import uuid4

    with pytest.raises(NotFoundError):
        await payment_service.create_payment(CreatePaymentRequest(booking_id=uuid4(), amount=10), actor_id=ADMIN_ID)


@pytest.mark.asyncio
async def test_second_payment_on_booking_conflicts(test_session, payment_service, booking):
    with pytest.raises(ConflictError):
        await payment_service.create_payment(CreatePaymentRequest(booking_id=booking.id, amount=100), actor_id=ADMIN_ID)

    payments = (await test_session.execute(select(Payment).where(Payment.booking_id == booking.id))).scalars().all()
    assert [p.id for p in payments] == [booking.payment_id]

    updated = await payment_service.upload_proof(
        USER_ID, UploadPaymentProofRequest(booking_id=booking.id, proof_url=PROOF_URL)
    )
    assert updated.payment.id == booking.payment_id
    assert updated.payment.status == PaymentStatus.PROCESSING.value


@pytest.mark.asyncio
async def test_create_payment_links_unpaid_booking(test_session, payment_service, destination, contact_data):
    unpaid = Booking(
        user_id=USER_ID,
        destination_id=destination.id,
        number_of_people=1,
        total_price=50.0,
        status=BookingStatus.PENDING.value,
        payment_status=PaymentStatus.PENDING.value,
        **contact_data,
    )
    test_session.add(unpaid)
    await test_session.commit()

    payment = await payment_service.create_payment(
        CreatePaymentRequest(booking_id=unpaid.id, amount=50, payment_method="bank_transfer"), actor_id=ADMIN_ID
    )

    assert payment.booking_id == unpaid.id
    assert payment.booking.payment_id == payment.id
    assert payment.status == PaymentStatus.PENDING.value
