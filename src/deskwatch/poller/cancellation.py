"""Cooperative cancellation with an optional deadline."""

from __future__ import annotations

import threading
import time

from deskwatch.poller.exceptions import CycleCancelledError


class CancellationToken:
    """Signals that a running cycle should stop at its next checkpoint.

    The token trips either when ``cancel()`` is called or when its deadline
    passes. Nothing is interrupted; the cycle checks the token between steps.
    """

    def __init__(self, deadline_seconds: float | None = None) -> None:
        """Initialize the token.

        Args:
            deadline_seconds: Budget from now; None means no deadline.
        """
        self._event = threading.Event()
        self._deadline = (
            time.monotonic() + deadline_seconds if deadline_seconds is not None else None
        )
        self.reason: str | None = None

    def cancel(self, reason: str = "cancelled") -> None:
        """Request cancellation."""
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        """True once cancelled or past the deadline."""
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.cancel("deadline exceeded")
            return True
        return False

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        """Raise CycleCancelledError if the token has tripped."""
        if self.cancelled:
            raise CycleCancelledError(self.reason or "cancelled")
