"""Cycle history endpoints."""

from fastapi import APIRouter, Query

from deskwatch.api.dependencies import SnapshotStoreDep
from deskwatch.api.models import APIResponse, CycleRecordResponse, cycle_record_to_response

router = APIRouter(prefix="/cycles", tags=["cycles"])


@router.get("", response_model=APIResponse[list[CycleRecordResponse]])
def list_cycles(
    store: SnapshotStoreDep,
    limit: int = Query(default=50, ge=1, le=1000, description="Max results"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
) -> APIResponse[list[CycleRecordResponse]]:
    """List past polling cycles, most recent first."""
    cycles = store.list_cycles(limit=limit, offset=offset)
    return APIResponse(data=[cycle_record_to_response(c) for c in cycles])
