from __future__ import annotations

import pytest
from sqlalchemy import inspect

from trading_ledger.data import DatabaseManager


@pytest.mark.asyncio
async def test_create_tables_creates_schema(tmp_path) -> None:
    db_path = tmp_path / "nested" / "ledger.db"

    async with DatabaseManager(db_path) as db:
        await db.create_tables()

        async with db.engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert db_path.exists()
    assert {"ledger_entries", "trader_profiles"} <= set(tables)


@pytest.mark.asyncio
async def test_close_resets_engine(tmp_path) -> None:
    db = DatabaseManager(tmp_path / "ledger.db")
    first_engine = db.engine

    await db.close()

    assert db.engine is not first_engine
    await db.close()


@pytest.mark.asyncio
async def test_create_tables_is_idempotent(tmp_path) -> None:
    async with DatabaseManager(tmp_path / "ledger.db") as db:
        await db.create_tables()
        await db.create_tables()

        async with db.engine.connect() as conn:
            journal_mode = (await conn.exec_driver_sql("PRAGMA journal_mode")).scalar_one()

    assert journal_mode.lower() == "wal"


def test_db_path_and_url(tmp_path) -> None:
    db = DatabaseManager(str(tmp_path / "ledger.db"))

    assert db.db_path == tmp_path / "ledger.db"
    assert db.url == f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}"
