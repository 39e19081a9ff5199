"""Base class for periodic background workers."""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)


class BaseWorker(ABC):
    """
    Runs `process` every `interval_seconds` until stopped.

    A failing iteration is logged and the loop carries on after the
    normal interval.
    """

    def __init__(self, name: str, interval_seconds: int = 60):
        self.name = name
        self.interval_seconds = interval_seconds
        self.last_run_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    @abstractmethod
    async def process(self) -> None:
        """Process one iteration of the background task."""

    async def run_once(self) -> None:
        """Run a single iteration and record when it happened."""
        started = datetime.utcnow()
        try:
            await self.process()
            self.last_error = None
        except Exception as e:
            self.last_error = str(e)
            raise
        finally:
            self.last_run_at = started

        logger.info(
            f"{self.name} worker iteration completed",
            extra={
                "duration_seconds": (datetime.utcnow() - started).total_seconds(),
                "worker": self.name,
            }
        )

    async def start(self) -> None:
        if self._running:
            logger.warning(f"{self.name} worker is already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"{self.name} worker started with {self.interval_seconds}s interval")

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if not self._running:
            logger.warning(f"{self.name} worker is not running")
            return

        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(f"{self.name} worker stopped")

    async def _run(self) -> None:
        while self._running:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                logger.info(f"{self.name} worker loop cancelled")
                break
            except Exception as e:
                logger.error(
                    f"{self.name} worker error: {str(e)}",
                    exc_info=True,
                    extra={"worker": self.name}
                )

            await asyncio.sleep(self.interval_seconds)
