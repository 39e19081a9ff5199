"""Background workers."""

from .booking_completion_worker import BookingCompletionWorker

__all__ = ["BookingCompletionWorker"]
