"""Custom exceptions for Snapshot Store."""


class SnapshotStoreError(Exception):
    """Base exception for Snapshot Store errors."""


class DuplicateSnapshotError(SnapshotStoreError):
    """Snapshot set contains the same ticket id more than once."""
