# MIT License
# Copyright (c) 2025 Hashborn

"""
Deadlines and cancellation for blocking lifecycle steps.
"""

import threading
import time
from typing import Optional

from .errors import CancelledError, DeadlineExceededError


class Deadline:
    """
    Absolute deadline on the monotonic clock with a cancel signal.

    A Deadline created with timeout=None never expires but can still be
    cancelled from another thread.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._expires_at = None if timeout is None else time.monotonic() + timeout
        self._cancelled = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def remaining(self) -> Optional[float]:
        """Seconds left, or None when unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def check(self):
        """Raise if the deadline has been cancelled or has passed."""
        if self.cancelled:
            raise CancelledError("operation cancelled")
        if self.expired:
            raise DeadlineExceededError("deadline exceeded")

    def sleep(self, interval: float):
        """
        Sleep for interval, waking early on cancellation or expiry.

        Raises:
            CancelledError: If cancelled before or during the sleep
            DeadlineExceededError: If the deadline passed
        """
        self.check()
        remaining = self.remaining()
        if remaining is not None:
            interval = min(interval, remaining)
        self._cancelled.wait(interval)
        self.check()
