"""Poller - Fetch, diff, persist and notify, one cycle at a time."""

from deskwatch.poller.cancellation import CancellationToken
from deskwatch.poller.exceptions import CycleCancelledError, PollerError
from deskwatch.poller.models import CycleResult, CycleStatus
from deskwatch.poller.poller import Poller, TicketSource
from deskwatch.poller.worker import PollingWorker

__all__ = [
    "CancellationToken",
    "CycleCancelledError",
    "CycleResult",
    "CycleStatus",
    "Poller",
    "PollerError",
    "PollingWorker",
    "TicketSource",
]
