"""Snapshot query endpoints."""

from fastapi import APIRouter

from deskwatch.api.dependencies import SnapshotStoreDep
from deskwatch.api.models import APIResponse, SnapshotResponse, snapshot_to_response

router = APIRouter(prefix="/snapshots", tags=["snapshots"])


@router.get("", response_model=APIResponse[list[SnapshotResponse]])
def list_snapshots(store: SnapshotStoreDep) -> APIResponse[list[SnapshotResponse]]:
    """List the persisted snapshot set, ordered by ticket id."""
    return APIResponse(data=[snapshot_to_response(s) for s in store.load()])
