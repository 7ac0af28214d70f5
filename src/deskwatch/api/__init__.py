"""REST API for deskwatch."""

from deskwatch.api.app import build_poller, create_app
from deskwatch.api.models import APIResponse, CycleResultResponse, StatusResponse

__all__ = [
    "APIResponse",
    "CycleResultResponse",
    "StatusResponse",
    "build_poller",
    "create_app",
]
