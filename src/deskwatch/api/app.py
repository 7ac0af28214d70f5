"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from deskwatch.api.dependencies import (
    close_poller,
    close_snapshot_store,
    close_worker,
    init_poller,
    init_preferences,
    init_snapshot_store,
    init_worker,
)
from deskwatch.api.models import APIResponse
from deskwatch.api.routes import cycles, snapshots, status as status_routes, sync
from deskwatch.config import ConfigError, EnvPreferences, Settings
from deskwatch.diff_engine import MessageCatalog
from deskwatch.notifier import LogNotifier, WebhookNotifier
from deskwatch.poller import Poller, PollingWorker
from deskwatch.snapshot_store import SnapshotStoreError
from deskwatch.zammad import ZammadClient

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from deskwatch.config import PreferencesSource
    from deskwatch.notifier import NotificationSink
    from deskwatch.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


def build_notifier(settings: Settings) -> NotificationSink:
    """Webhook notifier when a URL is configured, log notifier otherwise."""
    if settings.webhook_url:
        return WebhookNotifier(settings.webhook_url)
    return LogNotifier()


def build_poller(
    settings: Settings,
    store: SnapshotStore,
    preferences: PreferencesSource,
) -> Poller:
    """Wire a Poller from settings.

    The HTTP timeout is capped by the cycle deadline so a slow server fails
    the fetch instead of outliving the cycle.
    """
    client = ZammadClient(
        server_url=settings.server_url,
        token=settings.api_token,
        query=settings.query,
        timeout=settings.cycle_timeout,
    )
    return Poller(
        source=client,
        store=store,
        notifier=build_notifier(settings),
        preferences=preferences,
        catalog=MessageCatalog(settings.locale),
    )


def close_poller_resources(poller: Poller) -> None:
    """Close the HTTP clients held by a poller built with ``build_poller``."""
    if isinstance(poller.source, ZammadClient):
        poller.source.close()
    if isinstance(poller.notifier, WebhookNotifier):
        poller.notifier.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    start_worker: bool = app.state.start_worker

    store = init_snapshot_store(settings.db_path)
    preferences = EnvPreferences()
    init_preferences(preferences)
    poller = build_poller(settings, store, preferences)
    init_poller(poller)

    worker = None
    if start_worker:
        worker = PollingWorker(
            poller,
            interval=settings.poll_interval,
            cycle_timeout=settings.cycle_timeout,
        )
        worker.start()
    init_worker(worker)

    yield

    close_worker()
    close_poller_resources(poller)
    close_poller()
    close_snapshot_store()


def create_app(settings: Settings | None = None, start_worker: bool = True) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Runtime settings; read from the environment when omitted.
        start_worker: Whether to run the background polling thread.
    """
    app = FastAPI(
        title="deskwatch API",
        description="Zammad ticket change notifications",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings or Settings.from_env()
    app.state.start_worker = start_worker

    @app.exception_handler(SnapshotStoreError)
    async def snapshot_store_error_handler(
        _request: Request, exc: SnapshotStoreError
    ) -> JSONResponse:
        logger.error("Snapshot store error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error="Snapshot store error").model_dump(),
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(_request: Request, exc: ConfigError) -> JSONResponse:
        logger.error("Configuration error: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=APIResponse[None](data=None, error=f"Configuration error: {exc}").model_dump(),
        )

    app.include_router(sync.router, prefix="/api/v1")
    app.include_router(snapshots.router, prefix="/api/v1")
    app.include_router(cycles.router, prefix="/api/v1")
    app.include_router(status_routes.router, prefix="/api/v1")

    return app
