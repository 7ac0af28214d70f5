"""SnapshotDiffEngine - Decides which ticket changes are notification-worthy.

All functions here are pure: they take the previous snapshot set and the live
ticket list and return new values without doing any I/O. Every run is a single
pass over the live list with dict lookups against the previous set.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

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

logger = logging.getLogger(__name__)

_DEFAULT_CATALOG = MessageCatalog()


def _index(previous: Iterable[TicketSnapshot]) -> dict[int, TicketSnapshot]:
    return {snapshot.id: snapshot for snapshot in previous}


def _parse_timestamp(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def is_later(candidate: str, reference: str) -> bool:
    """Return True if timestamp ``candidate`` is strictly later than ``reference``.

    ISO-8601 values are compared as datetimes. When either side does not parse,
    or only one side carries a timezone, the raw strings are compared instead.
    """
    parsed_candidate = _parse_timestamp(candidate)
    parsed_reference = _parse_timestamp(reference)
    if (
        parsed_candidate is not None
        and parsed_reference is not None
        and (parsed_candidate.tzinfo is None) == (parsed_reference.tzinfo is None)
    ):
        return parsed_candidate > parsed_reference
    return candidate > reference


def _event(
    kind: EventKind, ticket: LiveTicket, catalog: MessageCatalog
) -> NotificationEvent:
    return NotificationEvent(
        kind=kind,
        title=catalog.format(f"{kind.value}_title"),
        body=catalog.format(f"{kind.value}_body", number=ticket.number),
        ticket_id=ticket.id,
        ticket_number=ticket.number,
        ticket_title=ticket.title,
    )


def _unique(live: Sequence[LiveTicket]) -> list[LiveTicket]:
    """Collapse repeated ids, keeping first position and last content."""
    by_id: dict[int, LiveTicket] = {}
    for ticket in live:
        by_id[ticket.id] = ticket
    return list(by_id.values())


def project_snapshots(live: Sequence[LiveTicket]) -> list[TicketSnapshot]:
    """Project live tickets down to the snapshot set to persist."""
    return [ticket.to_snapshot() for ticket in _unique(live)]


def detect_new_tickets(
    previous: Iterable[TicketSnapshot],
    live: Sequence[LiveTicket],
    catalog: MessageCatalog = _DEFAULT_CATALOG,
) -> list[NotificationEvent]:
    """One NEW_TICKET event per live ticket whose id was not known before."""
    known = _index(previous)
    return [
        _event(EventKind.NEW_TICKET, ticket, catalog)
        for ticket in _unique(live)
        if ticket.id not in known
    ]


def detect_new_assignments(
    previous: Iterable[TicketSnapshot],
    live: Sequence[LiveTicket],
    current_user_id: int,
    catalog: MessageCatalog = _DEFAULT_CATALOG,
) -> list[NotificationEvent]:
    """One NEW_ASSIGNMENT event per ticket that became owned by the current user.

    A ticket with no previous snapshot that is already owned by the user
    counts as newly assigned.
    """
    known = _index(previous)
    events = []
    for ticket in _unique(live):
        if ticket.owner_id != current_user_id:
            continue
        before = known.get(ticket.id)
        if before is None or before.owner_id != current_user_id:
            events.append(_event(EventKind.NEW_ASSIGNMENT, ticket, catalog))
    return events


def detect_customer_replies(
    previous: Iterable[TicketSnapshot],
    live: Sequence[LiveTicket],
    current_user_id: int,
    catalog: MessageCatalog = _DEFAULT_CATALOG,
) -> list[NotificationEvent]:
    """One NEW_REPLY event per owned, known ticket whose timestamp advanced.

    Any activity that bumps ``updated_at`` counts, including the agent's own
    edits; the snapshot carries no article sender data to tell them apart.
    """
    known = _index(previous)
    events = []
    for ticket in _unique(live):
        if ticket.owner_id != current_user_id:
            continue
        before = known.get(ticket.id)
        if before is not None and is_later(ticket.updated_at, before.updated_at):
            events.append(_event(EventKind.NEW_REPLY, ticket, catalog))
    return events


def run_cycle(
    previous: Iterable[TicketSnapshot],
    live: Sequence[LiveTicket],
    current_user_id: int,
    prefs: NotificationPreferences,
    catalog: MessageCatalog = _DEFAULT_CATALOG,
) -> CycleOutcome:
    """Run all enabled detectors and compute the snapshot to persist.

    Realtime mode skips the cycle entirely: no events and no snapshot
    advancement. Otherwise the snapshot always advances, even when every
    category (or the master switch) is disabled.
    """
    if prefs.realtime_mode_enabled:
        logger.debug("Realtime mode enabled, skipping diff")
        return CycleOutcome(events=[], new_snapshots=None, skipped=True)

    previous = list(previous)
    events: list[NotificationEvent] = []
    if prefs.master_enabled:
        if prefs.new_ticket_enabled:
            events.extend(detect_new_tickets(previous, live, catalog))
        if prefs.assignment_enabled:
            events.extend(detect_new_assignments(previous, live, current_user_id, catalog))
        if prefs.reply_enabled:
            events.extend(detect_customer_replies(previous, live, current_user_id, catalog))

    new_snapshots = project_snapshots(live)
    logger.debug(
        "Diffed %d live ticket(s) against %d snapshot(s): %d event(s)",
        len(new_snapshots),
        len(previous),
        len(events),
    )
    return CycleOutcome(events=events, new_snapshots=new_snapshots)


def aggregate_for_delivery(
    events: Sequence[NotificationEvent],
    catalog: MessageCatalog = _DEFAULT_CATALOG,
) -> Delivery | None:
    """Collapse a cycle's events into at most one notification.

    Returns:
        None for no events; the event itself with badge 1 for a single event;
        otherwise a summary listing every ticket, with badge = event count.
    """
    if not events:
        return None

    if len(events) == 1:
        event = events[0]
        return Delivery(
            title=event.title,
            body=event.body,
            badge_count=1,
            ticket_id=event.ticket_id,
        )

    lines = [
        catalog.format(
            "summary_line",
            number=event.ticket_number or event.ticket_id,
            title=event.ticket_title,
        )
        for event in events
    ]
    return Delivery(
        title=catalog.format("summary_title", count=len(events)),
        body="\n".join(lines),
        badge_count=len(events),
    )


class SnapshotDiffEngine:
    """The diff functions bound to one message catalog."""

    def __init__(self, catalog: MessageCatalog | None = None) -> None:
        self.catalog = catalog or _DEFAULT_CATALOG

    def detect_new_tickets(
        self, previous: Iterable[TicketSnapshot], live: Sequence[LiveTicket]
    ) -> list[NotificationEvent]:
        return detect_new_tickets(previous, live, self.catalog)

    def detect_new_assignments(
        self,
        previous: Iterable[TicketSnapshot],
        live: Sequence[LiveTicket],
        current_user_id: int,
    ) -> list[NotificationEvent]:
        return detect_new_assignments(previous, live, current_user_id, self.catalog)

    def detect_customer_replies(
        self,
        previous: Iterable[TicketSnapshot],
        live: Sequence[LiveTicket],
        current_user_id: int,
    ) -> list[NotificationEvent]:
        return detect_customer_replies(previous, live, current_user_id, self.catalog)

    def run_cycle(
        self,
        previous: Iterable[TicketSnapshot],
        live: Sequence[LiveTicket],
        current_user_id: int,
        prefs: NotificationPreferences,
    ) -> CycleOutcome:
        return run_cycle(previous, live, current_user_id, prefs, self.catalog)

    def aggregate_for_delivery(self, events: Sequence[NotificationEvent]) -> Delivery | None:
        return aggregate_for_delivery(events, self.catalog)
