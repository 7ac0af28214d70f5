"""Sync endpoint for running a polling cycle on demand."""

from fastapi import APIRouter

from deskwatch.api.dependencies import PollerDep
from deskwatch.api.models import (
    APIResponse,
    CycleResultResponse,
    cycle_result_to_response,
)

router = APIRouter(tags=["sync"])


@router.post("/sync", response_model=APIResponse[CycleResultResponse])
def run_sync(poller: PollerDep) -> APIResponse[CycleResultResponse]:
    """Run one fetch-diff-persist-notify cycle now."""
    result = poller.run_cycle()
    return APIResponse(
        data=cycle_result_to_response(result),
        error=result.error,
    )
