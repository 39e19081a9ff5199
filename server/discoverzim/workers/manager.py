"""Worker manager for coordinating background tasks."""

import asyncio
import logging
from typing import Dict

from .base import BaseWorker
from .booking_completion_worker import BookingCompletionWorker

logger = logging.getLogger(__name__)


class WorkerManager:
    """Starts, stops and reports on the application's background workers."""

    def __init__(self, workers: Dict[str, BaseWorker] | None = None):
        self.workers: Dict[str, BaseWorker] = workers if workers is not None else self._default_workers()
        logger.info(f"Initialized {len(self.workers)} workers")

    @staticmethod
    def _default_workers() -> Dict[str, BaseWorker]:
        return {"booking_completion": BookingCompletionWorker()}

    async def start_all(self) -> None:
        logger.info("Starting all workers")

        for name, worker in self.workers.items():
            try:
                await worker.start()
                logger.info(f"Started worker: {name}")
            except Exception as e:
                logger.error(f"Failed to start worker {name}: {str(e)}", exc_info=True)

    async def stop_all(self) -> None:
        """Stop all workers; errors are logged per worker."""
        logger.info("Stopping all workers")

        running = {name: w for name, w in self.workers.items() if w.running}
        results = await asyncio.gather(*(w.stop() for w in running.values()), return_exceptions=True)

        for name, result in zip(running.keys(), results):
            if isinstance(result, Exception):
                logger.error(f"Error stopping worker {name}: {str(result)}")
            else:
                logger.info(f"Stopped worker: {name}")

    def get_worker(self, name: str) -> BaseWorker:
        """
        Raises:
            KeyError: If worker not found
        """
        return self.workers[name]

    def get_worker_status(self) -> Dict[str, dict]:
        return {
            name: {
                "running": worker.running,
                "last_run_at": worker.last_run_at.isoformat() if worker.last_run_at else None,
                "last_error": worker.last_error,
            }
            for name, worker in self.workers.items()
        }


# Global worker manager instance
worker_manager = WorkerManager()
