"""CLI entry point for deskwatch.

- poll: run the polling loop in the foreground (or a single cycle with --once)
- serve: run the HTTP API, optionally with the polling loop in the background
"""

from __future__ import annotations

import logging
import sys

import click

from deskwatch.config import ConfigError, EnvPreferences, Settings
from deskwatch.logging import setup_logging
from deskwatch.poller import CycleStatus, PollingWorker
from deskwatch.snapshot_store import SnapshotStore

logger = logging.getLogger("deskwatch.cli")


def _load_settings() -> Settings:
    """Read and validate settings, exiting with status 2 when they are unusable."""
    try:
        settings = Settings.from_env()
        settings.validate()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)
    return settings


@click.group()
@click.version_option(package_name="deskwatch")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: DESKWATCH_LOG_LEVEL or INFO)",
)
def main(log_level: str | None) -> None:
    """deskwatch - notify a Zammad agent about ticket changes."""
    setup_logging(level=log_level)


@main.command()
@click.option("--once", is_flag=True, help="Run a single cycle and exit")
def poll(once: bool) -> None:
    """Poll Zammad on a fixed interval until interrupted."""
    from deskwatch.api.app import build_poller, close_poller_resources  # noqa: PLC0415

    settings = _load_settings()
    store = SnapshotStore(settings.db_path)
    poller = build_poller(settings, store, EnvPreferences())
    try:
        worker = PollingWorker(
            poller,
            interval=settings.poll_interval,
            cycle_timeout=settings.cycle_timeout,
        )
        if once:
            result = worker.run_once()
            if result is None or result.status in (CycleStatus.FAILED, CycleStatus.CANCELLED):
                click.echo(f"Cycle did not complete: {result.error if result else 'crashed'}")
                sys.exit(1)
            click.echo(f"Cycle {result.status}: {len(result.events)} event(s)")
            return

        worker.start()
        try:
            while worker.running:
                worker.join(1.0)
        except KeyboardInterrupt:
            logger.info("Interrupted, stopping")
        finally:
            worker.stop()
    finally:
        close_poller_resources(poller)
        store.close()


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", type=int, default=8000, show_default=True, help="Bind port")
@click.option("--no-worker", is_flag=True, help="Do not poll in the background")
def serve(host: str, port: int, no_worker: bool) -> None:
    """Run the HTTP API."""
    import uvicorn  # noqa: PLC0415

    from deskwatch.api import create_app  # noqa: PLC0415

    settings = _load_settings()
    app = create_app(settings, start_worker=not no_worker)
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
