"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends

from deskwatch.config import PreferencesSource  # noqa: TC001
from deskwatch.poller import Poller, PollingWorker  # noqa: TC001
from deskwatch.snapshot_store import SnapshotStore

# Global SnapshotStore instance (initialized on app startup)
_snapshot_store: SnapshotStore | None = None


def init_snapshot_store(db_path: str = "deskwatch.db") -> SnapshotStore:
    """Initialize the global SnapshotStore instance."""
    global _snapshot_store  # noqa: PLW0603
    _snapshot_store = SnapshotStore(db_path)
    return _snapshot_store


def close_snapshot_store() -> None:
    """Close the global SnapshotStore instance."""
    global _snapshot_store  # noqa: PLW0603
    if _snapshot_store is not None:
        _snapshot_store.close()
        _snapshot_store = None


def get_snapshot_store() -> Generator[SnapshotStore, None, None]:
    """Dependency that provides the SnapshotStore instance."""
    if _snapshot_store is None:
        raise RuntimeError("SnapshotStore not initialized. Call init_snapshot_store() first.")
    yield _snapshot_store


SnapshotStoreDep = Annotated[SnapshotStore, Depends(get_snapshot_store)]

# Global Poller instance (initialized on app startup)
_poller: Poller | None = None


def init_poller(poller: Poller) -> None:
    """Initialize the global Poller instance."""
    global _poller  # noqa: PLW0603
    _poller = poller


def close_poller() -> None:
    """Close the global Poller instance."""
    global _poller  # noqa: PLW0603
    _poller = None


def get_poller() -> Generator[Poller, None, None]:
    """Dependency that provides the Poller instance."""
    if _poller is None:
        raise RuntimeError("Poller not initialized. Call init_poller() first.")
    yield _poller


PollerDep = Annotated[Poller, Depends(get_poller)]

# Global PollingWorker instance; None when the app runs without a background thread
_worker: PollingWorker | None = None


def init_worker(worker: PollingWorker | None) -> None:
    """Initialize the global PollingWorker instance."""
    global _worker  # noqa: PLW0603
    _worker = worker


def close_worker() -> None:
    """Stop and drop the global PollingWorker instance."""
    global _worker  # noqa: PLW0603
    if _worker is not None:
        _worker.stop()
        _worker = None


def get_worker() -> PollingWorker | None:
    """Dependency that provides the PollingWorker, if one is running."""
    return _worker


WorkerDep = Annotated[PollingWorker | None, Depends(get_worker)]

# Global preferences source
_preferences: PreferencesSource | None = None


def init_preferences(preferences: PreferencesSource) -> None:
    """Initialize the global PreferencesSource."""
    global _preferences  # noqa: PLW0603
    _preferences = preferences


def get_preferences() -> Generator[PreferencesSource, None, None]:
    """Dependency that provides the PreferencesSource."""
    if _preferences is None:
        raise RuntimeError("Preferences not initialized. Call init_preferences() first.")
    yield _preferences


PreferencesDep = Annotated[PreferencesSource, Depends(get_preferences)]
