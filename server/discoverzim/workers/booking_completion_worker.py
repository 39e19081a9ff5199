"""Background worker that completes bookings once their date has passed."""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..core.config import settings
from ..core.database import async_session_factory
from ..services.booking_service import BookingService
from .base import BaseWorker

logger = logging.getLogger(__name__)


class BookingCompletionWorker(BaseWorker):
    """
    Moves confirmed bookings to completed.

    A booking is due once its preferred date lies more than `grace_days`
    in the past. Bookings without a preferred date are left alone.
    """

    def __init__(
        self,
        interval_seconds: Optional[int] = None,
        grace_days: Optional[int] = None,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        super().__init__(
            name="BookingCompletion",
            interval_seconds=interval_seconds or settings.booking_completion_interval_seconds,
        )
        self.grace_days = settings.booking_completion_grace_days if grace_days is None else grace_days
        self.session_factory = session_factory or async_session_factory
        self.clock = clock
        self.completed_total = 0

    async def process(self) -> None:
        async with self.session_factory() as db:
            now = self.clock()
            try:
                completed = await BookingService(db).complete_overdue(now, grace_days=self.grace_days)
            except Exception as e:
                await db.rollback()
                logger.error(
                    f"Error completing bookings: {e!s}",
                    exc_info=True,
                    extra={"worker": self.name}
                )
                raise

            self.completed_total += completed
            if completed > 0:
                logger.info(
                    f"Completed {completed} bookings",
                    extra={
                        "completed_count": completed,
                        "timestamp": now.isoformat(),
                        "worker": self.name,
                    }
                )
