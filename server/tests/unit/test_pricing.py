"""Unit tests for booking pricing rules."""

from datetime import date, datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest

from discoverzim.core.exceptions import GuestLimitExceededError, InvalidStayError
from discoverzim.services import pricing


def make_destination(price=50.0):
    return SimpleNamespace(
        id=uuid4(), name="Great Zimbabwe", location="Masvingo", price=price, payment_url="https://pay.example/gz"
    )


def make_event(price=20.0, ticket_types=None):
    return SimpleNamespace(
        id=uuid4(), title="Jacaranda Music Festival", location="Harare",
        price=price, ticket_types=ticket_types, payment_url=None,
    )


def make_accommodation(price_per_night=100.0, max_guests=4, room_types=None):
    return SimpleNamespace(
        id=uuid4(), name="Matobo Hills Lodge", location="Matobo",
        price_per_night=price_per_night, max_guests=max_guests, room_types=room_types,
    )


def test_destination_price_is_per_person():
    quote = pricing.price_destination_booking(make_destination(50.0), 3)

    assert quote.total_price == 150.0
    assert quote.booking_details["price_per_person"] == 50.0
    assert quote.booking_details["destination_name"] == "Great Zimbabwe"
    assert quote.payment_details["number_of_people"] == 3


def test_event_ticket_from_keyed_ticket_types():
    event = make_event(ticket_types={"vip": {"name": "VIP", "price": 45}})

    quote = pricing.price_event_booking(event, 2, "vip")

    assert quote.total_price == 90.0
    assert quote.selected_ticket_type == {"type": "vip", "name": "VIP", "price": 45.0}


def test_event_default_ticket_types():
    tickets = pricing.resolve_ticket_types(None, 20.0)

    assert [t["type"] for t in tickets] == ["regular", "vip"]
    assert tickets[1]["price"] == 30.0


def test_unknown_ticket_type_uses_event_price():
    quote = pricing.price_event_booking(make_event(price=20.0), 4, "student")

    assert quote.total_price == 80.0
    assert quote.selected_ticket_type["name"] == "Regular"


def test_ticket_types_from_list_entries():
    tickets = pricing.resolve_ticket_types([{"type": "early", "price": 10}, {"name": "Door", "price": -5}], 25.0)

    assert tickets[0] == {"type": "early", "name": "Early", "price": 10.0, "description": None}
    # Negative prices fall back to the event price
    assert tickets[1]["type"] == "door"
    assert tickets[1]["price"] == 25.0


def test_accommodation_nights_times_room_multiplier():
    accommodation = make_accommodation(room_types=[{"id": "deluxe", "name": "Deluxe", "multiplier": 1.5}])

    quote = pricing.price_accommodation_booking(accommodation, date(2026, 7, 1), date(2026, 7, 4), 2, "deluxe")

    assert quote.total_price == 450.0
    assert quote.booking_details["number_of_nights"] == 3
    assert quote.booking_details["room_type_name"] == "Deluxe"
    assert quote.preferred_date == date(2026, 7, 1)


def test_unknown_room_type_prices_as_standard():
    quote = pricing.price_accommodation_booking(
        make_accommodation(), date(2026, 7, 1), date(2026, 7, 3), 1, "penthouse"
    )

    assert quote.total_price == 200.0
    assert quote.booking_details["room_type_multiplier"] == 1.0


def test_stay_without_nights_is_rejected():
    with pytest.raises(InvalidStayError):
        pricing.price_accommodation_booking(make_accommodation(), date(2026, 7, 1), date(2026, 7, 1), 1, "standard")


def test_guest_limit_enforced():
    with pytest.raises(GuestLimitExceededError):
        pricing.price_accommodation_booking(
            make_accommodation(max_guests=2), date(2026, 7, 1), date(2026, 7, 2), 3, "standard"
        )


def test_no_guest_limit_when_unset():
    quote = pricing.price_accommodation_booking(
        make_accommodation(max_guests=None), date(2026, 7, 1), date(2026, 7, 2), 12, "standard"
    )
    assert quote.total_price == 100.0


@pytest.mark.parametrize("raw", [None, [], "not json", 42])
def test_room_types_fall_back_to_defaults(raw):
    rooms = pricing.parse_room_types(raw)
    assert [r["id"] for r in rooms] == ["standard", "deluxe", "suite"]


def test_room_types_normalized():
    rooms = pricing.parse_room_types('["Family", {"name": "Chalet", "multiplier": -2}, 7]')

    assert rooms[0]["id"] == "family"
    assert rooms[1] == {"id": "chalet", "name": "Chalet", "multiplier": 1.0, "description": None}
    assert rooms[2]["id"] == "room-2"
    assert rooms[2]["name"] == "Room Type 3"


def test_event_expiry():
    now = datetime(2026, 6, 1, 12, 0)

    assert pricing.is_event_expired(now - timedelta(days=3), now - timedelta(days=1), now)
    assert not pricing.is_event_expired(now - timedelta(days=3), now + timedelta(days=1), now)
    assert pricing.is_event_expired(now - timedelta(hours=1), None, now)
    assert not pricing.is_event_expired(None, None, now)
