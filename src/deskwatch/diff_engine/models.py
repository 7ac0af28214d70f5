"""Data models for the Snapshot Diff Engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class EventKind(StrEnum):
    """Category of a notification-worthy ticket change."""

    NEW_TICKET = "new_ticket"
    NEW_ASSIGNMENT = "new_assignment"
    NEW_REPLY = "new_reply"


@dataclass(frozen=True)
class TicketSnapshot:
    """Minimal persisted ticket state used only for change detection."""

    id: int
    owner_id: int
    updated_at: str  # ISO-8601 as returned by Zammad


@dataclass(frozen=True)
class LiveTicket:
    """A freshly fetched ticket.

    Only ``id``, ``owner_id`` and ``updated_at`` take part in the diff;
    ``number`` and ``title`` are used to build notification text.
    """

    id: int
    owner_id: int
    updated_at: str
    number: str
    title: str = ""

    def to_snapshot(self) -> TicketSnapshot:
        """Project this ticket down to its snapshot fields."""
        return TicketSnapshot(id=self.id, owner_id=self.owner_id, updated_at=self.updated_at)


@dataclass(frozen=True)
class NotificationEvent:
    """A single notification-worthy change produced by one diff run."""

    kind: EventKind
    title: str
    body: str
    ticket_id: int
    ticket_number: str = ""
    ticket_title: str = ""


@dataclass(frozen=True)
class NotificationPreferences:
    """User notification toggles, read-only to the engine.

    Attributes:
        master_enabled: Global switch; when off no category fires.
        new_ticket_enabled: Gate for NEW_TICKET events.
        assignment_enabled: Gate for NEW_ASSIGNMENT events.
        reply_enabled: Gate for NEW_REPLY events.
        realtime_mode_enabled: Push channel is active; polling must not run.
    """

    master_enabled: bool = True
    new_ticket_enabled: bool = True
    assignment_enabled: bool = True
    reply_enabled: bool = True
    realtime_mode_enabled: bool = False


@dataclass
class CycleOutcome:
    """Result of one pure diff run.

    Attributes:
        events: Notification events, ordered new tickets, assignments, replies.
        new_snapshots: Snapshot set to persist, or None when the cycle was
            skipped and the stored snapshot must not advance.
        skipped: True when realtime mode suppressed the whole cycle.
    """

    events: list[NotificationEvent] = field(default_factory=list)
    new_snapshots: list[TicketSnapshot] | None = None
    skipped: bool = False


@dataclass(frozen=True)
class Delivery:
    """One user-visible notification built from a cycle's events."""

    title: str
    body: str
    badge_count: int
    ticket_id: int | None = None
