"""Shared pytest fixtures and configuration."""

from collections.abc import Callable

import pytest

from deskwatch.diff_engine import LiveTicket, TicketSnapshot


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture
def make_ticket() -> Callable[..., LiveTicket]:
    """Factory for live tickets with sensible display fields."""

    def _make(
        id: int,
        owner_id: int,
        updated_at: str = "2024-01-01T00:00:00Z",
        number: str | None = None,
        title: str | None = None,
    ) -> LiveTicket:
        return LiveTicket(
            id=id,
            owner_id=owner_id,
            updated_at=updated_at,
            number=number if number is not None else str(10000 + id),
            title=title if title is not None else f"Ticket {id}",
        )

    return _make


@pytest.fixture
def make_snapshot() -> Callable[..., TicketSnapshot]:
    """Factory for persisted snapshots."""

    def _make(id: int, owner_id: int, updated_at: str = "2024-01-01T00:00:00Z") -> TicketSnapshot:
        return TicketSnapshot(id=id, owner_id=owner_id, updated_at=updated_at)

    return _make
