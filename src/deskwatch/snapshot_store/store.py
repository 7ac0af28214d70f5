"""SnapshotStore - Persists the last known ticket snapshot between cycles."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from deskwatch.snapshot_store.database import Database
from deskwatch.snapshot_store.exceptions import DuplicateSnapshotError, SnapshotStoreError
from deskwatch.snapshot_store.models import CycleRecord, TicketSnapshotRecord

if TYPE_CHECKING:
    from datetime import datetime

    from sqlalchemy.orm import Session

    from deskwatch.diff_engine import TicketSnapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Main API for Snapshot Store operations.

    Holds exactly one snapshot set, replaced wholesale by ``save``, plus a
    capped history of cycle outcomes. Each method runs in its own SQLite
    transaction; a short internal lock keeps threads from sharing the
    in-memory connection mid-transaction.

    Polling cycles serialise on ``cycle_lock()``, which readers never take.
    That lock is process-local: run one deskwatch process (``poll`` or
    ``serve``, not both) per database file, otherwise two cycles can load the
    same snapshot and both notify about the same change.
    """

    def __init__(self, db_path: str = "deskwatch.db", history_limit: int = 1000) -> None:
        """Initialize Snapshot Store with SQLite database.

        Creates database and tables if they don't exist.

        Args:
            db_path: Path to SQLite database file
            history_limit: Newest cycle records to keep; older ones are pruned.
        """
        self._db = Database(db_path)
        self._db.create_tables()
        self.history_limit = history_limit
        self._lock = threading.Lock()
        self._cycle_lock = threading.Lock()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def cycle_lock(self) -> threading.Lock:
        """Lock held by a polling cycle from load to save."""
        return self._cycle_lock

    # --- Snapshot Operations ---

    def load(self) -> list[TicketSnapshot]:
        """Load the persisted snapshot set.

        Returns:
            Snapshots ordered by ticket id; empty before the first save.

        Raises:
            SnapshotStoreError: If the database cannot be read.
        """
        with self._lock:
            session = self._db.get_session()
            try:
                stmt = select(TicketSnapshotRecord).order_by(TicketSnapshotRecord.ticket_id)
                records = session.execute(stmt).scalars().all()
                return [record.to_snapshot() for record in records]
            except SQLAlchemyError as e:
                raise SnapshotStoreError(f"Failed to load snapshots: {e}") from e
            finally:
                session.close()

    def save(self, snapshots: Iterable[TicketSnapshot]) -> None:
        """Replace the persisted snapshot set in a single transaction.

        Args:
            snapshots: The complete new snapshot set.

        Raises:
            DuplicateSnapshotError: If a ticket id appears twice; nothing is written.
            SnapshotStoreError: If the write fails; the previous set is kept.
        """
        snapshots = list(snapshots)
        seen: set[int] = set()
        for snapshot in snapshots:
            if snapshot.id in seen:
                raise DuplicateSnapshotError(f"Ticket {snapshot.id} appears more than once")
            seen.add(snapshot.id)

        with self._lock:
            session = self._db.get_session()
            try:
                session.execute(delete(TicketSnapshotRecord))
                session.add_all(TicketSnapshotRecord.from_snapshot(s) for s in snapshots)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise SnapshotStoreError(f"Failed to save snapshots: {e}") from e
            finally:
                session.close()
        logger.debug("Saved %d snapshot(s)", len(snapshots))

    def count(self) -> int:
        """Number of persisted snapshots."""
        with self._lock:
            session = self._db.get_session()
            try:
                return session.execute(
                    select(func.count()).select_from(TicketSnapshotRecord)
                ).scalar_one()
            except SQLAlchemyError as e:
                raise SnapshotStoreError(f"Failed to count snapshots: {e}") from e
            finally:
                session.close()

    # --- Cycle History Operations ---

    def record_cycle(
        self,
        status: str,
        started_at: datetime,
        finished_at: datetime,
        event_count: int = 0,
        snapshot_count: int = 0,
        error: str | None = None,
    ) -> CycleRecord:
        """Append a cycle outcome to the history and prune the oldest records.

        Args:
            status: Final cycle status (e.g. "completed", "failed").
            started_at: When the cycle began.
            finished_at: When the cycle ended.
            event_count: Number of notification events produced.
            snapshot_count: Size of the snapshot set after the cycle.
            error: Error description for failed or cancelled cycles.

        Returns:
            The created CycleRecord.
        """
        with self._lock:
            session = self._db.get_session()
            try:
                record = CycleRecord(
                    status=status,
                    started_at=started_at,
                    finished_at=finished_at,
                    event_count=event_count,
                    snapshot_count=snapshot_count,
                    error=error,
                )
                session.add(record)
                session.flush()
                self._prune_history(session)
                session.commit()
                return record
            except SQLAlchemyError as e:
                session.rollback()
                raise SnapshotStoreError(f"Failed to record cycle: {e}") from e
            finally:
                session.close()

    def _prune_history(self, session: Session) -> None:
        """Delete cycle records beyond ``history_limit``, oldest first."""
        keep = (
            select(CycleRecord.id)
            .order_by(CycleRecord.started_at.desc(), CycleRecord.id.desc())
            .limit(self.history_limit)
        )
        result = session.execute(
            delete(CycleRecord).where(CycleRecord.id.not_in(keep)),
            execution_options={"synchronize_session": False},
        )
        if result.rowcount:
            logger.debug("Pruned %d cycle record(s)", result.rowcount)

    def list_cycles(self, limit: int = 50, offset: int = 0) -> list[CycleRecord]:
        """Query cycle history, most recent first."""
        with self._lock:
            session = self._db.get_session()
            try:
                stmt = (
                    select(CycleRecord)
                    .order_by(CycleRecord.started_at.desc())
                    .limit(limit)
                    .offset(offset)
                )
                return list(session.execute(stmt).scalars().all())
            finally:
                session.close()

    def get_last_cycle(self) -> CycleRecord | None:
        """Most recent cycle, or None if none has run."""
        cycles = self.list_cycles(limit=1)
        return cycles[0] if cycles else None
