"""Pricing rules for destination, event and accommodation bookings.

Everything here is pure: callers pass in catalog rows (or anything with the
same attributes) and get back totals plus the details that are stored on the
booking and payment rows.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..core.exceptions import GuestLimitExceededError, InvalidStayError

logger = logging.getLogger(__name__)


DEFAULT_ROOM_TYPES = [
    {"id": "standard", "name": "Standard Room", "multiplier": 1.0},
    {"id": "deluxe", "name": "Deluxe Room", "multiplier": 1.5},
    {"id": "suite", "name": "Suite", "multiplier": 2.0},
]

VIP_PRICE_FACTOR = 1.5


@dataclass
class PriceQuote:
    """Total price for a booking and the details recorded alongside it."""

    total_price: float
    booking_details: dict[str, Any]
    payment_details: dict[str, Any]
    selected_ticket_type: Optional[dict[str, Any]] = None
    preferred_date: Optional[date] = None


def _money(value: float) -> float:
    return round(float(value), 2)


def parse_room_types(raw: Any) -> list[dict[str, Any]]:
    """
    Normalize stored room types.

    Accepts a list or a JSON-encoded list. Anything absent or malformed falls
    back to the standard/deluxe/suite defaults. Each entry gets an id (given
    id, else lowercased name, else room-<n>), a name and a multiplier.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Malformed room_types JSON, using defaults", extra={"room_types": raw[:200]})
            raw = None

    if not isinstance(raw, list) or not raw:
        return [dict(room) for room in DEFAULT_ROOM_TYPES]

    rooms = []
    for index, room in enumerate(raw):
        if isinstance(room, dict):
            room_id = room.get("id")
            name = room.get("name")
            multiplier = room.get("multiplier")
            description = room.get("description")
        elif isinstance(room, str):
            room_id, name, multiplier, description = None, room, None, None
        else:
            room_id = name = multiplier = description = None

        rooms.append({
            "id": str(room_id or (name.lower() if isinstance(name, str) and name else f"room-{index}")),
            "name": name or f"Room Type {index + 1}",
            "multiplier": float(multiplier) if isinstance(multiplier, (int, float)) and multiplier > 0 else 1.0,
            "description": description,
        })
    return rooms


def find_room_type(room_types: list[dict[str, Any]], room_type_id: str) -> dict[str, Any]:
    """Return the chosen room type; unknown ids price as a standard room."""
    for room in room_types:
        if room["id"] == room_type_id:
            return room
    return {"id": room_type_id, "name": room_type_id, "multiplier": 1.0}


def default_ticket_types(price: Optional[float]) -> list[dict[str, Any]]:
    """Regular at the event price and VIP at one and a half times it."""
    base = float(price or 0)
    return [
        {"type": "regular", "name": "Regular", "price": _money(base)},
        {"type": "vip", "name": "VIP", "price": _money(base * VIP_PRICE_FACTOR)},
    ]


def resolve_ticket_types(raw: Any, price: Optional[float]) -> list[dict[str, Any]]:
    """
    Normalize stored ticket types, falling back to the defaults.

    Stored ticket types may be a mapping keyed by type
    (``{"vip": {"name": "VIP", "price": 30}}``) or a list of entries
    carrying their own ``type``.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            raw = None

    entries: list[tuple[str, Any]] = []
    if isinstance(raw, dict):
        entries = list(raw.items())
    elif isinstance(raw, list):
        for index, item in enumerate(raw):
            if isinstance(item, dict):
                key = item.get("type") or item.get("id") or (item.get("name") or "").lower() or f"ticket-{index}"
                entries.append((str(key), item))

    if not entries:
        return default_ticket_types(price)

    tickets = []
    for key, item in entries:
        item = item if isinstance(item, dict) else {}
        ticket_price = item.get("price")
        if not isinstance(ticket_price, (int, float)) or ticket_price < 0:
            ticket_price = price or 0
        tickets.append({
            "type": key,
            "name": item.get("name") or key.title(),
            "price": _money(ticket_price),
            "description": item.get("description"),
        })
    return tickets


def select_ticket_type(tickets: list[dict[str, Any]], selected: str, event_price: Optional[float]) -> dict[str, Any]:
    """Chosen ticket, priced from the ticket, else the event price, else 0."""
    for ticket in tickets:
        if ticket["type"] == selected:
            price = ticket["price"] or event_price or 0
            return {"type": selected, "name": ticket["name"], "price": _money(price)}
    return {"type": selected, "name": "Regular", "price": _money(event_price or 0)}


def count_nights(check_in: date, check_out: date) -> int:
    """Whole nights between check-in and check-out; at least one is required."""
    nights = (check_out - check_in).days
    if nights < 1:
        raise InvalidStayError(
            check_in_date=datetime.combine(check_in, datetime.min.time()),
            check_out_date=datetime.combine(check_out, datetime.min.time()),
        )
    return nights


def is_event_expired(start_date: Optional[datetime], end_date: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """An event is over once its end date passes, or its start date when it has no end."""
    now = now or datetime.utcnow()
    if end_date is not None:
        return end_date < now
    if start_date is not None:
        return start_date < now
    return False


def price_destination_booking(destination, number_of_people: int) -> PriceQuote:
    """Price per person times the number of travellers."""
    price = float(destination.price or 0)
    total = _money(price * number_of_people)
    return PriceQuote(
        total_price=total,
        booking_details={
            "type": "destination",
            "destination_name": destination.name,
            "destination_location": destination.location,
            "price_per_person": _money(price),
            "payment_url": destination.payment_url,
        },
        payment_details={
            "destination_id": str(destination.id),
            "number_of_people": number_of_people,
            "payment_url": destination.payment_url,
        },
    )


def price_event_booking(event, number_of_people: int, ticket_type: str) -> PriceQuote:
    """Ticket price times the number of tickets."""
    tickets = resolve_ticket_types(event.ticket_types, event.price)
    selected = select_ticket_type(tickets, ticket_type, event.price)
    total = _money(selected["price"] * number_of_people)
    return PriceQuote(
        total_price=total,
        booking_details={
            "type": "event",
            "event_name": event.title or "Event",
            "event_location": event.location or "Location not specified",
            "ticket_type": ticket_type,
            "ticket_price": selected["price"],
            "payment_url": event.payment_url,
        },
        payment_details={
            "event_id": str(event.id),
            "ticket_type": ticket_type,
            "number_of_people": number_of_people,
            "payment_url": event.payment_url,
        },
        selected_ticket_type=selected,
    )


def price_accommodation_booking(
    accommodation,
    check_in: date,
    check_out: date,
    number_of_guests: int,
    room_type: str,
) -> PriceQuote:
    """
    Nights times the nightly price times the room multiplier.

    Raises:
        InvalidStayError: If the stay has no nights
        GuestLimitExceededError: If the party is larger than the property allows
    """
    nights = count_nights(check_in, check_out)

    if accommodation.max_guests and number_of_guests > accommodation.max_guests:
        raise GuestLimitExceededError(
            requested_guests=number_of_guests,
            max_guests=accommodation.max_guests,
            accommodation_id=str(accommodation.id),
        )

    room = find_room_type(parse_room_types(accommodation.room_types), room_type)
    base_price = float(accommodation.price_per_night or 0)
    total = _money(nights * base_price * room["multiplier"])

    return PriceQuote(
        total_price=total,
        booking_details={
            "type": "accommodation",
            "accommodation_id": str(accommodation.id),
            "accommodation_name": accommodation.name or "Accommodation",
            "accommodation_location": accommodation.location or "Location not specified",
            "check_in_date": check_in.isoformat(),
            "check_out_date": check_out.isoformat(),
            "number_of_nights": nights,
            "room_type": room["id"],
            "room_type_name": room["name"],
            "base_price": _money(base_price),
            "room_type_multiplier": room["multiplier"],
        },
        payment_details={
            "accommodation_id": str(accommodation.id),
            "room_type": room["id"],
            "number_of_guests": number_of_guests,
            "number_of_nights": nights,
        },
        preferred_date=check_in,
    )
