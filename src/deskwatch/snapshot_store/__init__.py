"""Snapshot Store - Persistent storage for the last known ticket snapshot."""

from deskwatch.snapshot_store.exceptions import DuplicateSnapshotError, SnapshotStoreError
from deskwatch.snapshot_store.models import CycleRecord, TicketSnapshotRecord
from deskwatch.snapshot_store.store import SnapshotStore

__all__ = [
    "CycleRecord",
    "DuplicateSnapshotError",
    "SnapshotStore",
    "SnapshotStoreError",
    "TicketSnapshotRecord",
]
