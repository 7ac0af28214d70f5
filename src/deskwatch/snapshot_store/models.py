"""SQLAlchemy models for Snapshot Store."""

from __future__ import annotations

import uuid
from datetime import datetime  # noqa: TC003 - used at runtime for SQLAlchemy
from typing import Any

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from deskwatch.diff_engine import TicketSnapshot


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TicketSnapshotRecord(Base):
    """Last known state of one ticket."""

    __tablename__ = "ticket_snapshots"

    ticket_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[str] = mapped_column(String(64), nullable=False)

    @classmethod
    def from_snapshot(cls, snapshot: TicketSnapshot) -> TicketSnapshotRecord:
        return cls(
            ticket_id=snapshot.id,
            owner_id=snapshot.owner_id,
            updated_at=snapshot.updated_at,
        )

    def to_snapshot(self) -> TicketSnapshot:
        return TicketSnapshot(id=self.ticket_id, owner_id=self.owner_id, updated_at=self.updated_at)

    def __repr__(self) -> str:
        return (
            f"<TicketSnapshotRecord(ticket_id={self.ticket_id!r}, "
            f"owner_id={self.owner_id!r}, updated_at={self.updated_at!r})>"
        )


class CycleRecord(Base):
    """Outcome of one polling cycle."""

    __tablename__ = "cycle_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    event_count: Mapped[int] = mapped_column(Integer, nullable=False)
    snapshot_count: Mapped[int] = mapped_column(Integer, nullable=False)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    finished_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    def __init__(
        self,
        status: str,
        started_at: datetime,
        finished_at: datetime,
        id: str | None = None,
        event_count: int = 0,
        snapshot_count: int = 0,
        error: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.id = id if id is not None else generate_uuid()
        self.status = status
        self.started_at = started_at
        self.finished_at = finished_at
        self.event_count = event_count
        self.snapshot_count = snapshot_count
        self.error = error

    @property
    def duration_seconds(self) -> float:
        return (self.finished_at - self.started_at).total_seconds()

    def __repr__(self) -> str:
        return f"<CycleRecord(id={self.id!r}, status={self.status!r})>"
