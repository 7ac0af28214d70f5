"""Background thread that runs polling cycles on a fixed interval."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from deskwatch.poller.cancellation import CancellationToken

if TYPE_CHECKING:
    from deskwatch.poller.models import CycleResult
    from deskwatch.poller.poller import Poller

logger = logging.getLogger(__name__)


class PollingWorker:
    """Periodically triggers ``Poller.run_cycle`` from a daemon thread.

    Each cycle gets a fresh CancellationToken with ``cycle_timeout`` as its
    deadline. A failing cycle never stops the loop.
    """

    def __init__(self, poller: Poller, interval: float = 60.0, cycle_timeout: float = 25.0) -> None:
        """Initialize the worker.

        Args:
            poller: Poller whose cycle is run on each tick.
            interval: Seconds to wait between the end of one cycle and the next.
            cycle_timeout: Deadline for a single cycle in seconds.
        """
        self.poller = poller
        self.interval = interval
        self.cycle_timeout = cycle_timeout
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._current: CancellationToken | None = None
        self._lock = threading.Lock()
        self.last_result: CycleResult | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the polling thread. No-op if already running."""
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="deskwatch-poller", daemon=True)
        self._thread.start()
        logger.info("Polling worker started (interval=%ss)", self.interval)

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop the thread and cancel any in-flight cycle."""
        self._stop.set()
        with self._lock:
            if self._current is not None:
                self._current.cancel("worker stopping")
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Polling worker stopped")

    def join(self, timeout: float | None = None) -> None:
        """Wait for the polling thread to finish."""
        if self._thread is not None:
            self._thread.join(timeout)

    def run_once(self) -> CycleResult | None:
        """Run a single cycle with the configured deadline."""
        token = CancellationToken(self.cycle_timeout)
        with self._lock:
            self._current = token
        try:
            result = self.poller.run_cycle(token)
        except Exception as e:
            logger.exception("Polling cycle crashed: %s", e)
            return None
        finally:
            with self._lock:
                self._current = None
        self.last_result = result
        return result

    def _run(self) -> None:
        while not self._stop.is_set():
            self.run_once()
            self._stop.wait(self.interval)
