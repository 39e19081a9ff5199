"""Property-based tests for pricing invariants."""

from datetime import date, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest
from hypothesis import given
from hypothesis import strategies as st

from discoverzim.core.exceptions import InvalidStayError
from discoverzim.services import catalog_filter, pricing

# Strategies for generating test data
prices = st.integers(min_value=0, max_value=1_000_000).map(lambda cents: cents / 100)
party_sizes = st.integers(min_value=1, max_value=100)
multipliers = st.sampled_from([1.0, 1.25, 1.5, 2.0, 3.0])
check_in_dates = st.dates(min_value=date(2024, 1, 1), max_value=date(2030, 12, 31))
room_ids = st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=12)


def destination(price):
    return SimpleNamespace(id=uuid4(), name="Hwange", location="Hwange", price=price, payment_url=None)


def lodge(price_per_night, multiplier, max_guests=None):
    return SimpleNamespace(
        id=uuid4(), name="Camp", location="Hwange", price_per_night=price_per_night, max_guests=max_guests,
        room_types=[{"id": "room", "name": "Room", "multiplier": multiplier}],
    )


@given(price=prices, people=party_sizes)
def test_destination_total_is_price_times_people(price, people):
    quote = pricing.price_destination_booking(destination(price), people)

    assert quote.total_price >= 0
    assert quote.total_price == round(price * people, 2)
    assert quote.payment_details["number_of_people"] == people


@given(price=prices, people=party_sizes)
def test_destination_total_grows_with_party(price, people):
    smaller = pricing.price_destination_booking(destination(price), people).total_price
    larger = pricing.price_destination_booking(destination(price), people + 1).total_price

    assert larger >= smaller


@given(price=prices, multiplier=multipliers, check_in=check_in_dates, nights=st.integers(min_value=1, max_value=60))
def test_accommodation_total_is_nights_times_rate(price, multiplier, check_in, nights):
    quote = pricing.price_accommodation_booking(
        lodge(price, multiplier), check_in, check_in + timedelta(days=nights), 1, "room"
    )

    assert quote.total_price == round(nights * price * multiplier, 2)
    assert quote.booking_details["number_of_nights"] == nights
    assert quote.preferred_date == check_in


@given(check_in=check_in_dates, offset=st.integers(min_value=-30, max_value=0))
def test_stays_without_nights_are_rejected(check_in, offset):
    with pytest.raises(InvalidStayError):
        pricing.count_nights(check_in, check_in + timedelta(days=offset))


@given(price=prices, room_type=room_ids)
def test_unknown_room_type_prices_at_base_rate(price, room_type):
    accommodation = lodge(price, 2.0)
    accommodation.room_types = None

    quote = pricing.price_accommodation_booking(accommodation, date(2026, 1, 1), date(2026, 1, 2), 1, room_type)

    expected = {"standard": 1.0, "deluxe": 1.5, "suite": 2.0}.get(room_type, 1.0)
    assert quote.total_price == round(price * expected, 2)


@given(low=prices, high=prices)
def test_price_band_is_monotonic(low, high):
    order = ["low", "medium", "high"]
    if low > high:
        low, high = high, low

    assert order.index(catalog_filter.price_band(low)) <= order.index(catalog_filter.price_band(high))


@given(raw=st.one_of(st.none(), st.text(max_size=50), st.lists(st.integers(), max_size=5)))
def test_parsed_room_types_are_always_usable(raw):
    rooms = pricing.parse_room_types(raw)

    assert rooms
    for room in rooms:
        assert room["id"]
        assert room["multiplier"] > 0
