"""Unit tests for PollingWorker."""

import threading
import time
from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from deskwatch.poller import CancellationToken, CycleResult, CycleStatus, PollingWorker


def _result(status: CycleStatus = CycleStatus.COMPLETED) -> CycleResult:
    now = datetime.now(UTC)
    return CycleResult(status=status, started_at=now, finished_at=now)


@pytest.fixture
def poller() -> MagicMock:
    mock = MagicMock()
    mock.run_cycle.return_value = _result()
    return mock


@pytest.mark.unit
class TestRunOnce:
    """Tests for PollingWorker.run_once."""

    def test_passes_token_with_deadline(self, poller: MagicMock) -> None:
        worker = PollingWorker(poller, interval=60, cycle_timeout=25)

        result = worker.run_once()

        token = poller.run_cycle.call_args.args[0]
        assert isinstance(token, CancellationToken)
        assert 0 < token.remaining() <= 25
        assert result is worker.last_result
        assert result.status == CycleStatus.COMPLETED

    def test_crash_is_contained(self, poller: MagicMock) -> None:
        poller.run_cycle.side_effect = RuntimeError("boom")
        worker = PollingWorker(poller)

        assert worker.run_once() is None
        assert worker.last_result is None


@pytest.mark.unit
class TestThread:
    """Tests for start/stop of the background thread."""

    def test_runs_until_stopped(self, poller: MagicMock) -> None:
        ran = threading.Event()
        poller.run_cycle.side_effect = lambda token: (ran.set(), _result())[1]
        worker = PollingWorker(poller, interval=0.01)

        worker.start()
        try:
            assert ran.wait(2.0)
            assert worker.running
        finally:
            worker.stop()

        assert not worker.running

    def test_start_twice_is_noop(self, poller: MagicMock) -> None:
        worker = PollingWorker(poller, interval=10)

        worker.start()
        thread = worker._thread
        worker.start()
        try:
            assert worker._thread is thread
        finally:
            worker.stop()

    def test_stop_cancels_in_flight_cycle(self, poller: MagicMock) -> None:
        started = threading.Event()
        seen: list[CancellationToken] = []

        def long_cycle(token: CancellationToken) -> CycleResult:
            seen.append(token)
            started.set()
            while not token.cancelled:
                time.sleep(0.01)
            return _result(CycleStatus.CANCELLED)

        poller.run_cycle.side_effect = long_cycle
        worker = PollingWorker(poller, interval=10, cycle_timeout=30)

        worker.start()
        assert started.wait(2.0)
        worker.stop(timeout=2.0)

        assert seen[0].reason == "worker stopping"
        assert not worker.running
