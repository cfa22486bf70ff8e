"""SQLite storage for the ledger: engine, sessions and schema bootstrap."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from trading_ledger.data.models import Base
from trading_ledger.paths import DEFAULT_DB_PATH

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger()


def _use_wal_journal(dbapi_connection: Any, _connection_record: Any) -> None:
    # Readers (history, leaderboard) keep working while a close commits.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class DatabaseManager:
    """
    Owns the async engine and session factory for one ledger database file.

    Nothing touches the filesystem until the engine is first needed. Every service call
    opens its own short-lived session from `session_factory`.
    """

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH, *, echo: bool = False) -> None:
        """
        Args:
            db_path: SQLite database file; parent directories are created on first use.
            echo: Log every SQL statement (debugging aid).
        """
        self._db_path = Path(db_path)
        self._echo = echo
        self._engine: AsyncEngine | None = None
        self._sessions: async_sessionmaker[AsyncSession] | None = None

    @property
    def db_path(self) -> Path:
        return self._db_path

    @property
    def url(self) -> str:
        """SQLAlchemy URL for the aiosqlite driver."""
        return f"sqlite+aiosqlite:///{self._db_path}"

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_async_engine(self.url, echo=self._echo)
            event.listen(self._engine.sync_engine, "connect", _use_wal_journal)
            logger.debug("Ledger database engine created", path=str(self._db_path))
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Sessions keep attribute values after commit so entries can be returned."""
        if self._sessions is None:
            self._sessions = async_sessionmaker(self.engine, expire_on_commit=False)
        return self._sessions

    async def create_tables(self) -> None:
        """Create `ledger_entries` and `trader_profiles` if they are missing."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Dispose of the engine. The manager can be reused afterwards."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessions = None

    async def __aenter__(self) -> DatabaseManager:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
