"""In-memory search, filter and sort over catalog rows fetched wholesale."""

from datetime import datetime
from typing import Iterable, Optional, Sequence

LOW_PRICE_CEILING = 50
MEDIUM_PRICE_CEILING = 150


def _contains(value: Optional[str], needle: str) -> bool:
    return bool(value) and needle in value.lower()


def matches_text(item, query: Optional[str], fields: Sequence[str]) -> bool:
    """Case-insensitive substring match of query against any of the fields."""
    if not query or not query.strip():
        return True
    needle = query.strip().lower()
    return any(_contains(getattr(item, name, None), needle) for name in fields)


def price_band(price: float) -> str:
    """low up to 50, medium up to and including 150, high above."""
    if price <= LOW_PRICE_CEILING:
        return "low"
    if price <= MEDIUM_PRICE_CEILING:
        return "medium"
    return "high"


def filter_destinations(
    destinations: Iterable,
    query: Optional[str] = None,
    band: str = "all",
    location: Optional[str] = None,
    category: Optional[str] = None,
) -> list:
    """Apply the browse page's text, price band, location and category filters."""
    results = []
    wanted_category = category.lower() if category else None
    for destination in destinations:
        if not matches_text(destination, query, ("name", "location", "description")):
            continue
        if band != "all" and price_band(float(destination.price or 0)) != band:
            continue
        if location and destination.location != location:
            continue
        if wanted_category and wanted_category not in [c.lower() for c in destination.categories or []]:
            continue
        results.append(destination)
    return results


def sort_destinations(destinations: Iterable, sort: str = "name", ratings: Optional[dict] = None) -> list:
    """Sort by name, price-asc, price-desc or rating (unrated last)."""
    items = list(destinations)
    if sort == "price-asc":
        return sorted(items, key=lambda d: float(d.price or 0))
    if sort == "price-desc":
        return sorted(items, key=lambda d: float(d.price or 0), reverse=True)
    if sort == "rating":
        ratings = ratings or {}
        return sorted(items, key=lambda d: (-(ratings.get(d.id) or 0), d.name.lower()))
    return sorted(items, key=lambda d: d.name.lower())


def similar_destinations(target, candidates: Iterable, limit: int = 4) -> list:
    """
    Destinations sharing a category or the target's location.

    Ranked by number of shared categories, then by closeness in price.
    """
    target_categories = {c.lower() for c in target.categories or []}
    target_price = float(target.price or 0)

    scored = []
    for candidate in candidates:
        if candidate.id == target.id:
            continue
        shared = len(target_categories & {c.lower() for c in candidate.categories or []})
        same_location = candidate.location == target.location
        if not shared and not same_location:
            continue
        distance = abs(float(candidate.price or 0) - target_price)
        scored.append((-shared, distance, candidate.name.lower(), candidate))

    scored.sort(key=lambda entry: entry[:3])
    return [entry[3] for entry in scored[:limit]]


def filter_accommodations(accommodations: Iterable, query: Optional[str] = None) -> list:
    """Free-text filter on name or location."""
    return [a for a in accommodations if matches_text(a, query, ("name", "location"))]


def sort_accommodations(accommodations: Iterable, sort: str = "rating") -> list:
    """Sort by rating (default, descending, unrated as 0), price-asc or price-desc."""
    items = list(accommodations)
    if sort == "price-asc":
        return sorted(items, key=lambda a: float(a.price_per_night or 0))
    if sort == "price-desc":
        return sorted(items, key=lambda a: float(a.price_per_night or 0), reverse=True)
    return sorted(items, key=lambda a: a.rating or 0, reverse=True)


def filter_events(
    events: Iterable,
    query: Optional[str] = None,
    location: Optional[str] = None,
    time_filter: str = "all",
    now: Optional[datetime] = None,
) -> list:
    """
    Filter events by text, exact location and time window.

    upcoming keeps events starting after now; past keeps events that
    started before now. Events without a start date only match "all".
    """
    now = now or datetime.utcnow()
    results = []
    for event in events:
        if not matches_text(event, query, ("title", "description", "location")):
            continue
        if location and event.location != location:
            continue
        if time_filter == "upcoming" and not (event.start_date and event.start_date > now):
            continue
        if time_filter == "past" and not (event.start_date and event.start_date < now):
            continue
        results.append(event)
    return results
