#!/usr/bin/env python3
"""Setup script for the DiscoverZim API."""

import asyncio
import logging
import sys
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select

from discoverzim.core.database import async_session_factory, init_db
from discoverzim.models import *  # Import all models to ensure they're registered
from discoverzim.schemas.accommodation import CreateAccommodationRequest
from discoverzim.schemas.destination import CreateDestinationRequest
from discoverzim.services.accommodation_service import AccommodationService
from discoverzim.services.destination_service import DestinationService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SEED_ACTOR = "setup-script"

SAMPLE_DESTINATIONS = [
    CreateDestinationRequest(
        name="Victoria Falls",
        location="Victoria Falls",
        description="Mosi-oa-Tunya, one of the largest waterfalls in the world",
        price=50,
        is_featured=True,
        best_time_to_visit="February to May",
        categories=["nature", "adventure"],
        activities=["White-water rafting", "Bungee jumping", "Sunset cruise"],
    ),
    CreateDestinationRequest(
        name="Great Zimbabwe",
        location="Masvingo",
        description="Stone ruins of the medieval capital of the Kingdom of Zimbabwe",
        price=15,
        is_featured=True,
        categories=["history", "culture"],
        activities=["Guided tour", "Museum visit"],
    ),
    CreateDestinationRequest(
        name="Hwange National Park",
        location="Hwange",
        description="Zimbabwe's largest game reserve, home to huge elephant herds",
        price=120,
        categories=["wildlife", "nature"],
        activities=["Game drive", "Walking safari"],
    ),
    CreateDestinationRequest(
        name="Mana Pools",
        location="Hurungwe",
        description="Floodplain on the Zambezi known for canoe safaris",
        price=200,
        categories=["wildlife", "adventure"],
        activities=["Canoe safari", "Fishing"],
    ),
]

SAMPLE_ACCOMMODATIONS = [
    CreateAccommodationRequest(
        name="Zambezi River Lodge",
        location="Victoria Falls",
        description="Riverside lodge a short drive from the Falls",
        price_per_night=140,
        max_guests=4,
        rating=4.4,
        is_featured=True,
        room_types=[
            {"id": "standard", "name": "Standard Room", "multiplier": 1.0},
            {"id": "river-view", "name": "River View Room", "multiplier": 1.4},
        ],
    ),
]


async def setup_database():
    """Setup the database with initial schema."""
    logger.info("Setting up database...")

    try:
        # Initialize database connection
        await init_db()
        logger.info("Database connection initialized")

        # Run Alembic migrations
        alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
        alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))

        logger.info("Running database migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Database migrations completed")

        logger.info("Database setup completed successfully!")

    except Exception as e:
        logger.error(f"Database setup failed: {e}")
        raise


async def create_sample_data():
    """Seed a few destinations and a lodge."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        existing = await db.execute(select(func.count(Destination.id)))
        if existing.scalar() > 0:
            logger.info("Sample data already exists, skipping...")
            return

        destinations = DestinationService(db)
        for request in SAMPLE_DESTINATIONS:
            await destinations.create_destination(request, actor_id=SEED_ACTOR)

        accommodations = AccommodationService(db)
        for request in SAMPLE_ACCOMMODATIONS:
            await accommodations.create_accommodation(request, actor_id=SEED_ACTOR)

        logger.info("Sample data created successfully!")


async def main():
    """Main setup function."""
    logger.info("Starting DiscoverZim API setup...")

    # Setup database
    await setup_database()

    # Create sample data
    await create_sample_data()

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn discoverzim.main:app --reload")


if __name__ == "__main__":
    asyncio.run(main())
