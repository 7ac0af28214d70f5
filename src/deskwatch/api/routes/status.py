"""Status endpoint."""

from fastapi import APIRouter

from deskwatch.api.dependencies import PreferencesDep, SnapshotStoreDep, WorkerDep
from deskwatch.api.models import (
    APIResponse,
    PreferencesResponse,
    StatusResponse,
    cycle_record_to_response,
)

router = APIRouter(tags=["status"])


@router.get("/status", response_model=APIResponse[StatusResponse])
def get_status(
    store: SnapshotStoreDep,
    preferences: PreferencesDep,
    worker: WorkerDep,
) -> APIResponse[StatusResponse]:
    """Report worker state, preferences and the most recent cycle."""
    last_cycle = store.get_last_cycle()
    return APIResponse(
        data=StatusResponse(
            worker_running=worker is not None and worker.running,
            snapshot_count=store.count(),
            preferences=PreferencesResponse.model_validate(preferences.load()),
            last_cycle=cycle_record_to_response(last_cycle) if last_cycle else None,
        )
    )
