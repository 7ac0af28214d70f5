"""SQLite engine and session handling for the snapshot store."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from deskwatch.snapshot_store.models import Base

if TYPE_CHECKING:
    from sqlalchemy import Engine

MEMORY = ":memory:"

# Milliseconds a writer waits on a locked database file before failing
BUSY_TIMEOUT_MS = 5000


def _apply_pragmas(dbapi_connection: object, _connection_record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
    finally:
        cursor.close()


def build_engine(db_path: str) -> Engine:
    """Create the SQLite engine for ``db_path``.

    An in-memory database lives on a single shared connection, so the polling
    thread and API request threads all see the same data. File databases get
    their parent directory created on demand.
    """
    if db_path == MEMORY:
        engine = create_engine(
            "sqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            f"sqlite:///{db_path}",
            connect_args={"check_same_thread": False},
        )
    event.listen(engine, "connect", _apply_pragmas)
    return engine


class Database:
    """Lazily built engine plus a session factory for one SQLite file.

    Sessions keep attribute values after commit so records can be returned to
    callers once the session is closed.
    """

    def __init__(self, db_path: str = "deskwatch.db") -> None:
        self.db_path = db_path
        self._engine: Engine | None = None
        self._sessions: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = build_engine(self.db_path)
        return self._engine

    def create_tables(self) -> None:
        """Create the snapshot and cycle history tables when missing."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        """Open a new session; the caller is responsible for closing it."""
        if self._sessions is None:
            self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        return self._sessions()

    def journal_mode(self) -> str:
        """Current SQLite journal mode (``wal`` for file databases)."""
        with self.engine.connect() as conn:
            return str(conn.execute(text("PRAGMA journal_mode")).scalar())

    def is_wal_mode(self) -> bool:
        return self.journal_mode().lower() == "wal"

    def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessions = None
