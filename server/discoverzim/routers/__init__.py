"""FastAPI routers package."""

from .accommodation import router as accommodation_router
from .admin import router as admin_router
from .booking import router as booking_router
from .cart import router as cart_router
from .chat import router as chat_router
from .destination import router as destination_router
from .event import router as event_router
from .health import router as health_router
from .itinerary import router as itinerary_router
from .metrics import router as metrics_router
from .notification import router as notification_router
from .payment import router as payment_router
from .profile import router as profile_router
from .review import router as review_router
from .wishlist import router as wishlist_router

__all__ = [
    "accommodation_router",
    "admin_router",
    "booking_router",
    "cart_router",
    "chat_router",
    "destination_router",
    "event_router",
    "health_router",
    "itinerary_router",
    "metrics_router",
    "notification_router",
    "payment_router",
    "profile_router",
    "review_router",
    "wishlist_router",
]
