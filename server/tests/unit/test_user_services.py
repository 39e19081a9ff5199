"""Unit tests for the per-user services and the admin email."""

from datetime import date, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select

from discoverzim.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from discoverzim.models.audit import AuditLog
from discoverzim.models.profile import Profile, UserRole
from discoverzim.schemas.admin import SendEmailRequest
from discoverzim.schemas.cart import AddCartItemRequest, UpdateCartItemRequest
from discoverzim.schemas.itinerary import (
    AddStopRequest,
    CreateItineraryRequest,
    UpdateItineraryRequest,
    UpdateStopRequest,
)
from discoverzim.schemas.profile import UpdateProfileRequest
from discoverzim.schemas.review import CreateReviewRequest, UpdateReviewRequest
from discoverzim.services.admin_service import AdminService
from discoverzim.services.cart_service import CartService, cart_total
from discoverzim.services.itinerary_service import ItineraryService, generate_share_code
from discoverzim.services.mailer import EmailTemplate
from discoverzim.services.notification_service import NotificationService
from discoverzim.services.profile_service import ProfileService
from discoverzim.services.review_service import ReviewService
from discoverzim.services.wishlist_service import WishlistService

from conftest import ADMIN_ID, OTHER_USER_ID, USER_ID


# Profiles

@pytest.mark.asyncio
async def test_ensure_profile_creates_from_claims(test_session):
    service = ProfileService(test_session)

    profile = await service.ensure_profile({"user_id": USER_ID, "email": "tendai@example.com", "username": "tendai"})

    assert profile.email == "tendai@example.com"
    assert profile.role == UserRole.USER.value
    assert not profile.is_locked
    assert (await service.ensure_profile({"user_id": USER_ID})).id == USER_ID


@pytest.mark.asyncio
async def test_ensure_profile_drops_taken_username(test_session):
    service = ProfileService(test_session)
    await service.ensure_profile({"user_id": USER_ID, "username": "tendai"})

    other = await service.ensure_profile({"user_id": OTHER_USER_ID, "username": "tendai"})

    assert other.username is None


@pytest.mark.asyncio
async def test_update_profile_username_conflict(test_session):
    service = ProfileService(test_session)
    await service.ensure_profile({"user_id": USER_ID, "username": "tendai"})
    await service.ensure_profile({"user_id": OTHER_USER_ID})

    with pytest.raises(ConflictError):
        await service.update_own_profile(OTHER_USER_ID, UpdateProfileRequest(username="tendai"))

    updated = await service.update_own_profile(OTHER_USER_ID, UpdateProfileRequest(first_name="Rudo"))
    assert updated.first_name == "Rudo"


@pytest.mark.asyncio
async def test_role_and_lock_changes(test_session, admin_profile):
    service = ProfileService(test_session)
    await service.ensure_profile({"user_id": USER_ID})

    promoted = await service.change_role(USER_ID, UserRole.ADMIN, actor_id=ADMIN_ID)
    assert promoted.role == UserRole.ADMIN.value
    assert await service.is_admin(USER_ID)

    locked = await service.set_locked(USER_ID, True, actor_id=ADMIN_ID)
    assert locked.is_locked

    with pytest.raises(NotFoundError):
        await service.set_locked("nobody", True, actor_id=ADMIN_ID)


# Wishlist

@pytest.mark.asyncio
async def test_wishlist_add_duplicate_and_toggle(test_session, destination):
    service = WishlistService(test_session)

    item = await service.add(USER_ID, destination.id)
    assert item.destination_id == destination.id
    assert await service.contains(USER_ID, destination.id)

    with pytest.raises(ConflictError):
        await service.add(USER_ID, destination.id)

    assert await service.toggle(USER_ID, destination.id) is False
    assert not await service.contains(USER_ID, destination.id)
    assert await service.toggle(USER_ID, destination.id) is True


@pytest.mark.asyncio
async def test_wishlist_unknown_destination(test_session):
    service = WishlistService(test_session)

    with pytest.raises(NotFoundError):
        await service.add(USER_ID, uuid4())
    with pytest.raises(NotFoundError):
        await service.remove(USER_ID, uuid4())


@pytest.mark.asyncio
async def test_wishlist_items_carry_destination(test_session, destination):
    service = WishlistService(test_session)
    await service.add(USER_ID, destination.id)

    items = await service.list_items(USER_ID)

    assert [i.destination.name for i in items] == [destination.name]
    assert await service.list_items(OTHER_USER_ID) == []


# Reviews

@pytest.mark.asyncio
async def test_review_author_edits_and_others_cannot(test_session, destination):
    service = ReviewService(test_session)
    review = await service.create_review(
        USER_ID, CreateReviewRequest(destination_id=destination.id, rating=5, comment="Breathtaking")
    )

    edited = await service.update_review(USER_ID, UpdateReviewRequest(review_id=review.id, rating=4))
    assert edited.rating == 4
    assert edited.comment == "Breathtaking"

    with pytest.raises(AuthorizationError):
        await service.update_review(OTHER_USER_ID, UpdateReviewRequest(review_id=review.id, rating=1))

    stranger = Profile(id=OTHER_USER_ID, role=UserRole.USER.value)
    with pytest.raises(AuthorizationError):
        await service.delete_review(stranger, review.id)


@pytest.mark.asyncio
async def test_admin_deletes_any_review(test_session, destination):
    service = ReviewService(test_session)
    review = await service.create_review(USER_ID, CreateReviewRequest(destination_id=destination.id, rating=3))

    await service.delete_review(Profile(id=ADMIN_ID, role=UserRole.ADMIN.value), review.id)

    assert await service.list_for_destination(destination.id) == []


@pytest.mark.asyncio
async def test_review_unknown_destination(test_session):
    with pytest.raises(NotFoundError):
        await ReviewService(test_session).create_review(USER_ID, CreateReviewRequest(destination_id=uuid4(), rating=3))


# Itineraries

def test_share_code_format():
    code = generate_share_code()
    assert len(code) == 8
    assert code.isalnum() and code == code.lower()


@pytest.mark.asyncio
async def test_itinerary_stops_are_ordered(test_session, destination):
    service = ItineraryService(test_session)
    itinerary = await service.create_itinerary(USER_ID, CreateItineraryRequest(title="Zambezi week"))
    start = date.today() + timedelta(days=30)

    await service.add_stop(USER_ID, AddStopRequest(
        itinerary_id=itinerary.id, destination_id=destination.id, start_date=start, end_date=start + timedelta(days=2)
    ))
    itinerary = await service.add_stop(USER_ID, AddStopRequest(
        itinerary_id=itinerary.id, destination_id=destination.id,
        start_date=start + timedelta(days=3), end_date=start + timedelta(days=4),
    ))

    assert [s.order for s in itinerary.stops] == [0, 1]
    assert itinerary.stops[0].name == destination.name

    itinerary = await service.remove_stop(USER_ID, itinerary.stops[0].id)
    assert len(itinerary.stops) == 1


@pytest.mark.asyncio
async def test_itinerary_stop_dates_validated(test_session, destination):
    service = ItineraryService(test_session)
    itinerary = await service.create_itinerary(USER_ID, CreateItineraryRequest(title="Eastern Highlands"))
    start = date.today() + timedelta(days=30)
    itinerary = await service.add_stop(USER_ID, AddStopRequest(
        itinerary_id=itinerary.id, destination_id=destination.id, start_date=start, end_date=start
    ))

    with pytest.raises(ValidationError):
        await service.update_stop(USER_ID, UpdateStopRequest(
            stop_id=itinerary.stops[0].id, end_date=start - timedelta(days=1)
        ))


@pytest.mark.asyncio
async def test_itinerary_sharing(test_session):
    service = ItineraryService(test_session)
    itinerary = await service.create_itinerary(USER_ID, CreateItineraryRequest(title="Private trip"))
    assert itinerary.share_code is None

    with pytest.raises(NotFoundError):
        await service.get_itinerary(itinerary.id, OTHER_USER_ID)

    shared = await service.update_itinerary(USER_ID, UpdateItineraryRequest(itinerary_id=itinerary.id, is_public=True))
    assert shared.share_code is not None

    assert (await service.get_itinerary(itinerary.id, None)).id == itinerary.id
    assert (await service.get_by_share_code(shared.share_code)).id == itinerary.id

    with pytest.raises(AuthorizationError):
        await service.update_itinerary(OTHER_USER_ID, UpdateItineraryRequest(itinerary_id=itinerary.id, title="Mine"))


# Cart

@pytest.mark.asyncio
async def test_cart_totals(test_session, destination, event):
    service = CartService(test_session)
    await service.add_item(USER_ID, AddCartItemRequest(destination_id=destination.id, quantity=2))
    event_item = await service.add_item(USER_ID, AddCartItemRequest(event_id=event.id, quantity=1))

    items = await service.list_items(USER_ID)
    assert cart_total(items) == 120.0

    await service.update_item(USER_ID, UpdateCartItemRequest(item_id=event_item.id, quantity=3))
    assert cart_total(await service.list_items(USER_ID)) == 160.0

    assert await service.clear(USER_ID) == 2
    assert await service.list_items(USER_ID) == []


@pytest.mark.asyncio
async def test_cart_item_of_other_user(test_session, destination):
    service = CartService(test_session)
    item = await service.add_item(USER_ID, AddCartItemRequest(destination_id=destination.id))

    with pytest.raises(NotFoundError):
        await service.remove_item(OTHER_USER_ID, item.id)


# Notifications

@pytest.mark.asyncio
async def test_notifications_read_flow(test_session):
    service = NotificationService(test_session)
    first = await service.create_notification(USER_ID, "Welcome", "Karibu to DiscoverZim")
    await service.create_notification(USER_ID, "Reminder", "Your trip is in 3 days")
    await service.create_notification(OTHER_USER_ID, "Welcome", "Hello")

    assert await service.unread_count(USER_ID) == 2

    read = await service.mark_read(USER_ID, first.id)
    assert read.is_read
    assert len(await service.list_notifications(USER_ID, unread_only=True)) == 1

    with pytest.raises(NotFoundError):
        await service.mark_read(OTHER_USER_ID, first.id)

    assert await service.mark_all_read(USER_ID) == 1
    assert await service.unread_count(USER_ID) == 0
    assert await service.unread_count(OTHER_USER_ID) == 1


# Admin email

@pytest.mark.asyncio
async def test_custom_email_is_dispatched_and_audited(test_session, recording_dispatcher):
    service = AdminService(test_session, recording_dispatcher)

    email_id, queued = await service.send_custom_email(
        SendEmailRequest(recipient="rudo@example.com", subject="Gate times", html="<p>Gates open at 6am</p>"),
        actor_id=ADMIN_ID,
    )

    assert recording_dispatcher.templates() == [EmailTemplate.CUSTOM]
    assert recording_dispatcher.sent[0][1] == "rudo@example.com"
    assert recording_dispatcher.custom == [{"subject": "Gate times", "html": "<p>Gates open at 6am</p>", "text": None}]
    # The recording dispatcher never schedules delivery
    assert queued is False

    [entry] = (await test_session.execute(select(AuditLog))).scalars().all()
    assert entry.table_name == "emails"
    assert entry.record_id == str(email_id)
    assert entry.user_id == ADMIN_ID
