"""Data models for the Poller module."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime  # noqa: TC003
from enum import StrEnum

from deskwatch.diff_engine import Delivery, NotificationEvent  # noqa: TC001


class CycleStatus(StrEnum):
    """Final status of one polling cycle."""

    COMPLETED = "completed"
    SKIPPED_REALTIME = "skipped_realtime"
    SKIPPED_BUSY = "skipped_busy"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class CycleResult:
    """Result of one polling cycle.

    Attributes:
        status: How the cycle ended.
        started_at: When the cycle began (UTC).
        finished_at: When the cycle ended (UTC).
        events: Notification events produced by the diff.
        delivery: The notification handed to the sink, if any.
        delivered: Whether the sink accepted the notification.
        snapshot_count: Size of the snapshot set persisted by this cycle.
        error: Description of the failure for failed or cancelled cycles.
    """

    status: CycleStatus
    started_at: datetime
    finished_at: datetime
    events: list[NotificationEvent] = field(default_factory=list)
    delivery: Delivery | None = None
    delivered: bool = False
    snapshot_count: int = 0
    error: str | None = None
