"""Integration tests: ZammadClient + SnapshotStore + Poller over a fake Zammad server."""

import json
from pathlib import Path

import httpx
import pytest

from deskwatch.config import StaticPreferences
from deskwatch.diff_engine import EventKind, MessageCatalog, NotificationPreferences
from deskwatch.notifier import RecordingNotifier
from deskwatch.poller import CycleStatus, Poller
from deskwatch.snapshot_store import SnapshotStore
from deskwatch.zammad import ZammadClient

ME = 5
OTHER = 9


class FakeZammad:
    """Serves users/me and tickets/search from mutable state."""

    def __init__(self) -> None:
        self.tickets: dict[int, dict] = {}
        self.status_code = 200
        self.requests: list[httpx.Request] = []

    def put(self, id: int, owner_id: int, updated_at: str, title: str = "") -> None:
        self.tickets[id] = {
            "id": id,
            "number": str(31000 + id),
            "title": title or f"Ticket {id}",
            "owner_id": owner_id,
            "updated_at": updated_at,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("Authorization") != "Token token=secret":
            return httpx.Response(401, json={"error": "authentication failed"})
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream down")
        if request.url.path == "/api/v1/users/me":
            return httpx.Response(200, json={"id": ME, "firstname": "Ada"})
        if request.url.path == "/api/v1/tickets/search":
            return httpx.Response(200, content=json.dumps(list(self.tickets.values())))
        return httpx.Response(404)


@pytest.fixture
def server() -> FakeZammad:
    return FakeZammad()


@pytest.fixture
def zammad(server: FakeZammad):
    client = ZammadClient(server_url="https://helpdesk.example.com", token="secret")
    client._client = httpx.Client(
        transport=httpx.MockTransport(server.handler),
        headers={"Authorization": "Token token=secret"},
    )
    yield client
    client.close()


@pytest.fixture
def store(tmp_path: Path):
    s = SnapshotStore(str(tmp_path / "deskwatch.db"))
    yield s
    s.close()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def poller(zammad, store, notifier) -> Poller:
    return Poller(zammad, store, notifier, StaticPreferences())


@pytest.mark.integration
class TestPollingCycle:
    """End-to-end polling behaviour over several cycles."""

    def test_lifecycle(self, poller: Poller, server: FakeZammad, notifier, store) -> None:
        """Bootstrap, quiet cycle, then a reply and a handover."""
        server.put(1, ME, "2024-01-01T08:00:00.000Z", "VPN broken")
        server.put(2, OTHER, "2024-01-01T08:00:00.000Z", "Printer jam")

        first = poller.run_cycle()
        assert first.status == CycleStatus.COMPLETED
        assert sorted((e.kind, e.ticket_id) for e in first.events) == [
            (EventKind.NEW_ASSIGNMENT, 1),
            (EventKind.NEW_TICKET, 1),
            (EventKind.NEW_TICKET, 2),
        ]
        assert notifier.delivered[-1].badge_count == 3

        quiet = poller.run_cycle()
        assert quiet.events == []
        assert len(notifier.delivered) == 1

        server.put(1, ME, "2024-01-01T09:15:00.000Z", "VPN broken")
        server.put(2, ME, "2024-01-01T08:00:00.000Z", "Printer jam")

        third = poller.run_cycle()
        assert sorted((e.kind, e.ticket_id) for e in third.events) == [
            (EventKind.NEW_ASSIGNMENT, 2),
            (EventKind.NEW_REPLY, 1),
        ]
        summary = notifier.delivered[-1]
        assert summary.title == "2 new ticket updates"
        assert "#31001 VPN broken" in summary.body
        assert "#31002 Printer jam" in summary.body

        assert [c.status for c in store.list_cycles()] == ["completed"] * 3

    def test_server_error_keeps_snapshot(
        self, poller: Poller, server: FakeZammad, notifier, store
    ) -> None:
        """Changes seen after an outage are still reported once the server is back."""
        server.put(1, ME, "2024-01-01T08:00:00Z")
        poller.run_cycle()

        server.status_code = 503
        server.put(1, ME, "2024-01-02T08:00:00Z")
        failed = poller.run_cycle()

        assert failed.status == CycleStatus.FAILED
        assert store.load()[0].updated_at == "2024-01-01T08:00:00Z"

        server.status_code = 200
        recovered = poller.run_cycle()

        assert [e.kind for e in recovered.events] == [EventKind.NEW_REPLY]

    def test_malformed_ticket_fails_cycle(
        self, poller: Poller, server: FakeZammad, notifier, store
    ) -> None:
        server.put(1, ME, "2024-01-01T08:00:00Z")
        poller.run_cycle()
        server.tickets[2] = {"id": 2, "number": "31002", "owner_id": None, "updated_at": "x"}

        result = poller.run_cycle()

        assert result.status == CycleStatus.FAILED
        assert [s.id for s in store.load()] == [1]
        assert len(notifier.delivered) == 1

    def test_bad_token(self, store, notifier, server: FakeZammad) -> None:
        client = ZammadClient(server_url="https://helpdesk.example.com", token="wrong")
        client._client = httpx.Client(
            transport=httpx.MockTransport(server.handler),
            headers={"Authorization": "Token token=wrong"},
        )
        poller = Poller(client, store, notifier, StaticPreferences())

        result = poller.run_cycle()

        assert result.status == CycleStatus.FAILED
        assert "Authentication" in result.error
        client.close()

    def test_realtime_makes_no_requests(self, zammad, store, notifier, server) -> None:
        prefs = StaticPreferences(NotificationPreferences(realtime_mode_enabled=True))
        poller = Poller(zammad, store, notifier, prefs)

        result = poller.run_cycle()

        assert result.status == CycleStatus.SKIPPED_REALTIME
        assert server.requests == []

    def test_localized_notification(self, zammad, store, notifier, server) -> None:
        server.put(4, OTHER, "2024-01-01T08:00:00Z")
        poller = Poller(zammad, store, notifier, StaticPreferences(), MessageCatalog("nl"))

        poller.run_cycle()

        assert notifier.delivered[0].title == "Nieuw ticket"
        assert notifier.delivered[0].ticket_id == 4

    def test_search_request_shape(self, poller: Poller, server: FakeZammad) -> None:
        poller.run_cycle()

        search = next(r for r in server.requests if r.url.path.endswith("tickets/search"))
        assert search.url.params["expand"] == "true"
        assert search.url.params["per_page"] == "200"
        assert "state.name" in search.url.params["query"]
