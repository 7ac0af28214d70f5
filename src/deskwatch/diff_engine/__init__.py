"""Snapshot Diff Engine - Decides which ticket changes deserve a notification."""

from deskwatch.diff_engine.engine import (
    SnapshotDiffEngine,
    aggregate_for_delivery,
    detect_customer_replies,
    detect_new_assignments,
    detect_new_tickets,
    is_later,
    project_snapshots,
    run_cycle,
)
from deskwatch.diff_engine.messages import MessageCatalog
from deskwatch.diff_engine.models import (
    CycleOutcome,
    Delivery,
    EventKind,
    LiveTicket,
    NotificationEvent,
    NotificationPreferences,
    TicketSnapshot,
)

__all__ = [
    "CycleOutcome",
    "Delivery",
    "EventKind",
    "LiveTicket",
    "MessageCatalog",
    "NotificationEvent",
    "NotificationPreferences",
    "SnapshotDiffEngine",
    "TicketSnapshot",
    "aggregate_for_delivery",
    "detect_customer_replies",
    "detect_new_assignments",
    "detect_new_tickets",
    "is_later",
    "project_snapshots",
    "run_cycle",
]
