"""Unit tests for in-memory catalog search, filtering and sorting."""

from datetime import datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

from discoverzim.services import catalog_filter


def dest(name, location, price, categories=(), description=None):
    return SimpleNamespace(
        id=uuid4(), name=name, location=location, price=price,
        categories=list(categories), description=description,
    )


DESTINATIONS = [
    dest("Victoria Falls", "Victoria Falls", 50, ["nature", "adventure"], "The smoke that thunders"),
    dest("Hwange National Park", "Hwange", 150, ["wildlife", "nature"]),
    dest("Great Zimbabwe", "Masvingo", 15, ["history"], "Ancient stone city"),
    dest("Mana Pools", "Hurungwe", 151, ["wildlife"]),
]


def names(items):
    return [item.name for item in items]


def test_price_band_boundaries():
    assert catalog_filter.price_band(50) == "low"
    assert catalog_filter.price_band(50.01) == "medium"
    assert catalog_filter.price_band(150) == "medium"
    assert catalog_filter.price_band(151) == "high"


def test_text_query_matches_description_case_insensitively():
    assert names(catalog_filter.filter_destinations(DESTINATIONS, query="  STONE ")) == ["Great Zimbabwe"]


def test_filters_combine():
    results = catalog_filter.filter_destinations(DESTINATIONS, band="medium", category="Nature")
    assert names(results) == ["Hwange National Park"]


def test_exact_location_filter():
    assert names(catalog_filter.filter_destinations(DESTINATIONS, location="Hwange")) == ["Hwange National Park"]
    assert catalog_filter.filter_destinations(DESTINATIONS, location="hwange") == []


def test_sort_orders():
    assert names(catalog_filter.sort_destinations(DESTINATIONS))[0] == "Great Zimbabwe"
    assert names(catalog_filter.sort_destinations(DESTINATIONS, "price-desc"))[0] == "Mana Pools"
    assert names(catalog_filter.sort_destinations(DESTINATIONS, "price-asc"))[0] == "Great Zimbabwe"


def test_rating_sort_puts_unrated_last():
    ratings = {DESTINATIONS[2].id: 4.8, DESTINATIONS[1].id: 3.0}

    ordered = names(catalog_filter.sort_destinations(DESTINATIONS, "rating", ratings))

    assert ordered[:2] == ["Great Zimbabwe", "Hwange National Park"]
    assert ordered[2:] == ["Mana Pools", "Victoria Falls"]


def test_similar_destinations_rank_by_shared_categories():
    target = DESTINATIONS[1]

    similar = catalog_filter.similar_destinations(target, DESTINATIONS)

    # Victoria Falls shares one category and Mana Pools one; Mana Pools is closer in price
    assert names(similar) == ["Mana Pools", "Victoria Falls"]
    assert target not in similar


def test_similar_includes_same_location():
    target = dest("Zambezi Cruise", "Victoria Falls", 40)
    assert names(catalog_filter.similar_destinations(target, DESTINATIONS)) == ["Victoria Falls"]


def test_accommodation_sort_defaults_to_rating():
    lodges = [
        SimpleNamespace(name="A", location="Kariba", price_per_night=80, rating=None),
        SimpleNamespace(name="B", location="Nyanga", price_per_night=120, rating=4.2),
    ]
    assert names(catalog_filter.sort_accommodations(lodges)) == ["B", "A"]
    assert names(catalog_filter.filter_accommodations(lodges, "kariba")) == ["A"]


def test_event_time_filters():
    now = datetime(2026, 6, 1)
    events = [
        SimpleNamespace(title="Past", description=None, location="Harare", start_date=now - timedelta(days=2)),
        SimpleNamespace(title="Future", description=None, location="Bulawayo", start_date=now + timedelta(days=2)),
        SimpleNamespace(title="Undated", description=None, location="Harare", start_date=None),
    ]

    assert [e.title for e in catalog_filter.filter_events(events, time_filter="upcoming", now=now)] == ["Future"]
    assert [e.title for e in catalog_filter.filter_events(events, time_filter="past", now=now)] == ["Past"]
    assert len(catalog_filter.filter_events(events, now=now)) == 3
    assert [e.title for e in catalog_filter.filter_events(events, location="Harare", now=now)] == ["Past", "Undated"]
