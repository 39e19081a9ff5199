"""Pydantic schemas for request/response validation."""

from .accommodation import *  # noqa: F403
from .admin import *  # noqa: F403
from .booking import *  # noqa: F403
from .cart import *  # noqa: F403
from .chat import *  # noqa: F403
from .common import *  # noqa: F403
from .destination import *  # noqa: F403
from .event import *  # noqa: F403
from .health import *  # noqa: F403
from .itinerary import *  # noqa: F403
from .notification import *  # noqa: F403
from .payment import *  # noqa: F403
from .profile import *  # noqa: F403
from .review import *  # noqa: F403
from .wishlist import *  # noqa: F403
