"""Pydantic models for REST API."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Snapshot models


class SnapshotResponse(BaseModel):
    """Response model for one persisted ticket snapshot."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    updated_at: str


def snapshot_to_response(snapshot: Any) -> SnapshotResponse:
    """Convert a TicketSnapshot to SnapshotResponse."""
    return SnapshotResponse.model_validate(snapshot)


# Cycle models


class CycleRecordResponse(BaseModel):
    """Response model for a cycle history entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    status: str
    event_count: int
    snapshot_count: int
    error: str | None
    started_at: datetime
    finished_at: datetime
    duration_seconds: float


def cycle_record_to_response(record: Any) -> CycleRecordResponse:
    """Convert a CycleRecord model to CycleRecordResponse."""
    return CycleRecordResponse.model_validate(record)


class EventResponse(BaseModel):
    """Response model for a notification event."""

    model_config = ConfigDict(from_attributes=True)

    kind: str
    title: str
    body: str
    ticket_id: int
    ticket_number: str


class DeliveryResponse(BaseModel):
    """Response model for the notification handed to the sink."""

    model_config = ConfigDict(from_attributes=True)

    title: str
    body: str
    badge_count: int
    ticket_id: int | None


class CycleResultResponse(BaseModel):
    """Response model for the outcome of a triggered cycle."""

    model_config = ConfigDict(from_attributes=True)

    status: str
    started_at: datetime
    finished_at: datetime
    events: list[EventResponse]
    delivery: DeliveryResponse | None
    delivered: bool
    snapshot_count: int
    error: str | None


def cycle_result_to_response(result: Any) -> CycleResultResponse:
    """Convert a CycleResult to CycleResultResponse."""
    return CycleResultResponse.model_validate(result)


# Status models


class PreferencesResponse(BaseModel):
    """Response model for notification preferences."""

    model_config = ConfigDict(from_attributes=True)

    master_enabled: bool
    new_ticket_enabled: bool
    assignment_enabled: bool
    reply_enabled: bool
    realtime_mode_enabled: bool


class StatusResponse(BaseModel):
    """Response model for overall poller status."""

    worker_running: bool
    snapshot_count: int
    preferences: PreferencesResponse
    last_cycle: CycleRecordResponse | None
