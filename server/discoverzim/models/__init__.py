"""Models module exporting all database models."""

from .accommodation import Accommodation
from .audit import ApiDoc, AuditAction, AuditLog
from .booking import Booking, BookingStatus, PaymentStatus
from .cart import CartItem
from .chat import ChatConversation, ChatMessage
from .destination import Destination
from .event import Event
from .itinerary import Itinerary, ItineraryDestination
from .notification import Notification
from .payment import Payment
from .profile import Profile, UserRole
from .review import Review
from .wishlist import Wishlist

__all__ = [
    # Catalog entities
    "Destination",
    "Accommodation",
    "Event",

    # Booking entities
    "Booking",
    "BookingStatus",
    "Payment",
    "PaymentStatus",

    # User entities
    "Profile",
    "UserRole",
    "Review",
    "Wishlist",
    "Itinerary",
    "ItineraryDestination",
    "CartItem",
    "Notification",
    "ChatConversation",
    "ChatMessage",

    # Admin entities
    "AuditLog",
    "AuditAction",
    "ApiDoc",
]
