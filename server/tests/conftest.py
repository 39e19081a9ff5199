"""Test configuration and fixtures."""

from datetime import datetime, timedelta

import httpx
import jwt
import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from discoverzim.core.config import settings
from discoverzim.core.database import Base, get_db
from discoverzim.models import *  # noqa: F403 - Import all models
from discoverzim.models.profile import Profile, UserRole
from discoverzim.schemas.accommodation import CreateAccommodationRequest
from discoverzim.schemas.destination import CreateDestinationRequest
from discoverzim.schemas.event import CreateEventRequest
from discoverzim.services.accommodation_service import AccommodationService
from discoverzim.services.chat_service import ChatAssistantClient
from discoverzim.services.destination_service import DestinationService
from discoverzim.services.event_service import EventService
from discoverzim.services.mailer import MailDispatcher, mail_dispatcher

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

USER_ID = "user-1"
OTHER_USER_ID = "user-2"
ADMIN_ID = "admin-1"

ASSISTANT_TEXT = "Victoria Falls is best seen between February and May."


def make_token(user_id: str, expires_in: int = 3600, **claims) -> str:
    """Sign a bearer token the way the identity service does."""
    payload = {
        "sub": user_id,
        "exp": int((datetime.utcnow() + timedelta(seconds=expires_in)).timestamp()),
        **claims,
    }
    return jwt.encode(payload, settings.bearer_token_secret, algorithm="HS256")


def auth_headers(user_id: str, **claims) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, **claims)}"}


class RecordingDispatcher(MailDispatcher):
    """Collects dispatched emails instead of scheduling delivery."""

    def __init__(self):
        super().__init__()
        self.sent: list[tuple] = []
        self.custom: list[dict] = []

    def dispatch(self, template, recipient, booking=None, custom=None):
        self.sent.append((template, recipient, booking))
        if custom is not None:
            self.custom.append(custom)
        return None

    def templates(self) -> list:
        return [template for template, _, _ in self.sent]


def assistant_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={"candidates": [{"content": {"parts": [{"text": ASSISTANT_TEXT}]}}]},
    )


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def test_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def recording_dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def chat_transport():
    """Upstream language API stub; tests may swap the handler."""
    return httpx.MockTransport(assistant_handler)


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session, chat_transport):
    """Create a test FastAPI application."""
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware

    from discoverzim.main import API_ROUTERS, register_exception_handlers
    from discoverzim.routers.chat import get_chat_client

    # Simplified app without lifespan, workers or telemetry
    app = FastAPI(
        title="DiscoverZim API (Test)",
        version="1.0.0-test",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "service": "discoverzim-api", "version": "1.0.0"}

    for router in API_ROUTERS:
        app.include_router(router)

    async def override_get_db():
        yield test_session

    def override_chat_client():
        return ChatAssistantClient(api_key="test-key", transport=chat_transport)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_chat_client] = override_chat_client

    yield app

    await mail_dispatcher.drain()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    from httpx import ASGITransport
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def user_headers():
    return auth_headers(USER_ID, email="tendai@example.com", username="tendai", first_name="Tendai")


@pytest.fixture
def other_user_headers():
    return auth_headers(OTHER_USER_ID, email="rudo@example.com", username="rudo")


@pytest_asyncio.fixture
async def admin_profile(test_session):
    profile = Profile(id=ADMIN_ID, email="admin@example.com", username="admin", role=UserRole.ADMIN.value)
    test_session.add(profile)
    await test_session.commit()
    return profile


@pytest_asyncio.fixture
async def admin_headers(admin_profile):
    return auth_headers(ADMIN_ID, email="admin@example.com")


@pytest.fixture
def sample_destination_data():
    """Sample destination data for testing."""
    return {
        "name": "Victoria Falls",
        "location": "Victoria Falls",
        "description": "Mosi-oa-Tunya, the smoke that thunders",
        "price": 50.0,
        "payment_url": "https://pay.example/vic-falls",
        "is_featured": True,
        "categories": ["nature", "adventure"],
        "activities": ["rafting", "bungee"],
    }


@pytest.fixture
def sample_accommodation_data():
    """Sample accommodation data for testing."""
    return {
        "name": "Zambezi River Lodge",
        "location": "Victoria Falls",
        "price_per_night": 100.0,
        "max_guests": 4,
        "rating": 4.5,
        "room_types": [
            {"id": "standard", "name": "Standard Room", "multiplier": 1.0},
            {"id": "deluxe", "name": "Deluxe Room", "multiplier": 1.5},
        ],
    }


@pytest.fixture
def sample_event_data():
    """Sample event data for testing."""
    return {
        "title": "Harare International Festival of the Arts",
        "location": "Harare",
        "price": 20.0,
        "start_date": datetime.utcnow() + timedelta(days=30),
        "end_date": datetime.utcnow() + timedelta(days=35),
        "ticket_types": {"vip": {"name": "VIP", "price": 45.0}, "regular": {"name": "Regular", "price": 20.0}},
    }


@pytest.fixture
def contact_data():
    """Contact fields shared by every booking form."""
    return {
        "contact_name": "Tendai Moyo",
        "contact_email": "tendai@example.com",
        "contact_phone": "+263771234567",
    }


@pytest_asyncio.fixture
async def destination(test_session, sample_destination_data):
    return await DestinationService(test_session).create_destination(
        CreateDestinationRequest(**sample_destination_data), actor_id=ADMIN_ID
    )


@pytest_asyncio.fixture
async def accommodation(test_session, sample_accommodation_data):
    return await AccommodationService(test_session).create_accommodation(
        CreateAccommodationRequest(**sample_accommodation_data), actor_id=ADMIN_ID
    )


@pytest_asyncio.fixture
async def event(test_session, sample_event_data):
    return await EventService(test_session).create_event(
        CreateEventRequest(**sample_event_data), actor_id=ADMIN_ID
    )
