"""Unit tests for destination, accommodation and event services."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import select

from discoverzim.core.exceptions import NotFoundError, ValidationError
from discoverzim.models.audit import AuditAction, AuditLog
from discoverzim.schemas.accommodation import BrowseAccommodationsRequest, CreateAccommodationRequest
from discoverzim.schemas.destination import BrowseDestinationsRequest, CreateDestinationRequest, UpdateDestinationRequest
from discoverzim.schemas.event import BrowseEventsRequest, CreateEventRequest, UpdateEventRequest
from discoverzim.schemas.review import CreateReviewRequest
from discoverzim.services.accommodation_service import AccommodationService
from discoverzim.services.destination_service import DestinationService
from discoverzim.services.event_service import EventService
from discoverzim.services.review_service import ReviewService

from conftest import ADMIN_ID, OTHER_USER_ID, USER_ID


async def add_destination(service, name, location, price, categories=(), featured=False):
    return await service.create_destination(
        CreateDestinationRequest(
            name=name, location=location, price=price, categories=list(categories), is_featured=featured
        ),
        actor_id=ADMIN_ID,
    )


@pytest.mark.asyncio
async def test_create_destination_is_audited(test_session, destination):
    rows = (await test_session.execute(select(AuditLog))).scalars().all()

    assert len(rows) == 1
    assert rows[0].action == AuditAction.CREATE.value
    assert rows[0].table_name == "destinations"
    assert rows[0].record_id == str(destination.id)
    assert rows[0].user_id == ADMIN_ID


@pytest.mark.asyncio
async def test_update_destination_changes_only_sent_fields(test_session, destination):
    service = DestinationService(test_session)

    updated = await service.update_destination(
        UpdateDestinationRequest(destination_id=destination.id, price=65.0), actor_id=ADMIN_ID
    )

    assert updated.price == 65.0
    assert updated.name == destination.name
    assert updated.categories == ["nature", "adventure"]


@pytest.mark.asyncio
async def test_delete_destination(test_session, destination):
    service = DestinationService(test_session)

    await service.delete_destination(destination.id, actor_id=ADMIN_ID)

    assert await service.get_destination(destination.id) is None
    with pytest.raises(NotFoundError):
        await service.delete_destination(destination.id, actor_id=ADMIN_ID)


@pytest.mark.asyncio
async def test_featured_and_search(test_session):
    service = DestinationService(test_session)
    await add_destination(service, "Victoria Falls", "Victoria Falls", 50, featured=True)
    await add_destination(service, "Chimanimani", "Manicaland", 30)

    assert [d.name for d in await service.list_featured()] == ["Victoria Falls"]
    assert [d.name for d in await service.search("manica")] == ["Chimanimani"]
    assert await service.list_locations() == ["Manicaland", "Victoria Falls"]


@pytest.mark.asyncio
async def test_browse_by_band_and_rating(test_session):
    service = DestinationService(test_session)
    cheap = await add_destination(service, "Great Zimbabwe", "Masvingo", 15, ["history"])
    mid = await add_destination(service, "Hwange", "Hwange", 120, ["wildlife"])
    await add_destination(service, "Mana Pools", "Hurungwe", 200, ["wildlife"])

    reviews = ReviewService(test_session)
    await reviews.create_review(USER_ID, CreateReviewRequest(destination_id=mid.id, rating=5))
    await reviews.create_review(OTHER_USER_ID, CreateReviewRequest(destination_id=cheap.id, rating=3))

    by_rating = await service.browse(BrowseDestinationsRequest(sort="rating"))
    assert [d.name for d in by_rating] == ["Hwange", "Great Zimbabwe", "Mana Pools"]

    wildlife_mid = await service.browse(BrowseDestinationsRequest(price_band="medium", category="wildlife"))
    assert [d.name for d in wildlife_mid] == ["Hwange"]


@pytest.mark.asyncio
async def test_rating_summary(test_session, destination):
    service = DestinationService(test_session)
    assert await service.rating_summary(destination.id) == (None, 0)

    reviews = ReviewService(test_session)
    await reviews.create_review(USER_ID, CreateReviewRequest(destination_id=destination.id, rating=5))
    await reviews.create_review(OTHER_USER_ID, CreateReviewRequest(destination_id=destination.id, rating=4))

    assert await service.rating_summary(destination.id) == (4.5, 2)


@pytest.mark.asyncio
async def test_similar_destinations(test_session):
    service = DestinationService(test_session)
    target = await add_destination(service, "Hwange", "Hwange", 120, ["wildlife"])
    await add_destination(service, "Mana Pools", "Hurungwe", 200, ["wildlife"])
    await add_destination(service, "Great Zimbabwe", "Masvingo", 15, ["history"])

    assert [d.name for d in await service.list_similar(target.id)] == ["Mana Pools"]


@pytest.mark.asyncio
async def test_accommodation_browse_and_room_types(test_session, accommodation):
    service = AccommodationService(test_session)
    await service.create_accommodation(
        CreateAccommodationRequest(name="Nyanga Cottage", location="Nyanga", price_per_night=60, rating=3.9),
        actor_id=ADMIN_ID,
    )

    lodges = await service.browse(BrowseAccommodationsRequest(sort="price-asc"))
    assert [a.name for a in lodges] == ["Nyanga Cottage", accommodation.name]

    assert [a.name for a in await service.search("", location="nyanga")] == ["Nyanga Cottage"]

    with pytest.raises(NotFoundError):
        await service.get_accommodation_or_raise(uuid4())


@pytest.mark.asyncio
async def test_event_upcoming_and_browse(test_session, event):
    service = EventService(test_session)
    now = datetime.utcnow()
    await service.create_event(
        CreateEventRequest(title="Bulawayo Arts Festival", location="Bulawayo", start_date=now - timedelta(days=10)),
        actor_id=ADMIN_ID,
    )

    assert [e.id for e in await service.list_upcoming(now)] == [event.id]

    past = await service.browse(BrowseEventsRequest(time_filter="past"), now=now)
    assert [e.title for e in past] == ["Bulawayo Arts Festival"]


@pytest.mark.asyncio
async def test_event_update_rejects_inverted_dates(test_session, event):
    service = EventService(test_session)

    with pytest.raises(ValidationError):
        await service.update_event(
            UpdateEventRequest(event_id=event.id, end_date=event.start_date - timedelta(days=1)),
            actor_id=ADMIN_ID,
        )
