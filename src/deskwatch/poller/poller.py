"""Poller - Runs one fetch-diff-persist-notify cycle."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from deskwatch.diff_engine import SnapshotDiffEngine
from deskwatch.poller.cancellation import CancellationToken
from deskwatch.poller.exceptions import CycleCancelledError
from deskwatch.poller.models import CycleResult, CycleStatus
from deskwatch.snapshot_store import SnapshotStoreError

if TYPE_CHECKING:
    from deskwatch.config import PreferencesSource
    from deskwatch.diff_engine import Delivery, LiveTicket, MessageCatalog
    from deskwatch.notifier import NotificationSink
    from deskwatch.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class TicketSource(Protocol):
    """Interface for the component supplying the current user and open tickets."""

    def fetch_open_tickets_and_user(self) -> tuple[int, list[LiveTicket]]:
        """Return (current_user_id, live tickets). May raise on any fetch error."""
        ...


class Poller:
    """Drives one polling cycle against injected collaborators.

    The cycle holds the store's cycle lock from load to save. A cycle
    triggered while another one is running returns ``skipped_busy`` at once
    instead of queueing behind it. Any failure before
    the save leaves the stored snapshot untouched; the next cycle is the retry.
    """

    def __init__(
        self,
        source: TicketSource,
        store: SnapshotStore,
        notifier: NotificationSink,
        preferences: PreferencesSource,
        catalog: MessageCatalog | None = None,
    ) -> None:
        """Initialize the Poller.

        Args:
            source: Supplies the current user id and live tickets.
            store: Persists the snapshot set and cycle history.
            notifier: Shows the aggregated notification.
            preferences: Supplies the notification toggles, read every cycle.
            catalog: Message catalog for notification text.
        """
        self.source = source
        self.store = store
        self.notifier = notifier
        self.preferences = preferences
        self.engine = SnapshotDiffEngine(catalog)

    def run_cycle(self, token: CancellationToken | None = None) -> CycleResult:
        """Run one cycle.

        Args:
            token: Cooperative cancellation/deadline; checked before the save.

        Returns:
            CycleResult describing the outcome. Errors are reported through
            the result status, not raised.
        """
        token = token or CancellationToken()
        started_at = datetime.now(UTC)

        try:
            prefs = self.preferences.load()
        except Exception as e:
            logger.exception("Could not read notification preferences")
            return self._finish(CycleStatus.FAILED, started_at, error=f"preferences: {e}")

        if prefs.realtime_mode_enabled:
            logger.info("Realtime notifications enabled, skipping polling cycle")
            return CycleResult(
                status=CycleStatus.SKIPPED_REALTIME,
                started_at=started_at,
                finished_at=datetime.now(UTC),
            )

        cycle_lock = self.store.cycle_lock()
        if not cycle_lock.acquire(blocking=False):
            logger.info("Another cycle is in progress, skipping")
            return CycleResult(
                status=CycleStatus.SKIPPED_BUSY,
                started_at=started_at,
                finished_at=datetime.now(UTC),
            )

        try:
            try:
                token.raise_if_cancelled()
                previous = self.store.load()
                current_user_id, live = self.source.fetch_open_tickets_and_user()
                token.raise_if_cancelled()
            except CycleCancelledError as e:
                logger.warning("Cycle cancelled before diff: %s", e)
                return self._finish(CycleStatus.CANCELLED, started_at, error=str(e))
            except Exception as e:
                logger.error("Load or fetch failed, snapshot left untouched: %s", e)
                return self._finish(CycleStatus.FAILED, started_at, error=str(e))

            outcome = self.engine.run_cycle(previous, live, current_user_id, prefs)
            new_snapshots = outcome.new_snapshots or []

            try:
                token.raise_if_cancelled()
                self.store.save(new_snapshots)
            except CycleCancelledError as e:
                logger.warning("Cycle cancelled before save: %s", e)
                return self._finish(CycleStatus.CANCELLED, started_at, error=str(e))
            except SnapshotStoreError as e:
                logger.error("Saving snapshot failed: %s", e)
                return self._finish(CycleStatus.FAILED, started_at, error=str(e))
        finally:
            cycle_lock.release()

        delivery = self.engine.aggregate_for_delivery(outcome.events)
        delivered = self._deliver(delivery)

        logger.info(
            "Cycle complete: %d ticket(s), %d event(s), delivered=%s",
            len(new_snapshots),
            len(outcome.events),
            delivered,
        )
        return self._finish(
            CycleStatus.COMPLETED,
            started_at,
            events=outcome.events,
            delivery=delivery,
            delivered=delivered,
            snapshot_count=len(new_snapshots),
        )

    def _deliver(self, delivery: Delivery | None) -> bool:
        """Hand the notification to the sink; failures are logged, never retried."""
        if delivery is None:
            return False
        try:
            self.notifier.deliver(
                title=delivery.title,
                body=delivery.body,
                ticket_id=delivery.ticket_id,
                badge_count=delivery.badge_count,
            )
        except Exception as e:
            logger.error("Notification delivery failed: %s", e)
            return False
        return True

    def _finish(self, status: CycleStatus, started_at: datetime, **fields: object) -> CycleResult:
        result = CycleResult(
            status=status,
            started_at=started_at,
            finished_at=datetime.now(UTC),
            **fields,  # type: ignore[arg-type]
        )
        try:
            self.store.record_cycle(
                status=result.status.value,
                started_at=result.started_at,
                finished_at=result.finished_at,
                event_count=len(result.events),
                snapshot_count=result.snapshot_count,
                error=result.error,
            )
        except SnapshotStoreError as e:
            logger.warning("Could not record cycle history: %s", e)
        return result
