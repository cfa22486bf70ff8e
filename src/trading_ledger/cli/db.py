"""Shared helpers for CLI database and service setup."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import typer

from trading_ledger.cli.utils import console
from trading_ledger.config import LedgerConfig
from trading_ledger.data import DatabaseManager
from trading_ledger.ledger.service import LedgerService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path


def load_config() -> LedgerConfig:
    """Load configuration from the environment, exiting cleanly if it is invalid."""
    try:
        return LedgerConfig.from_env()
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None


@asynccontextmanager
async def open_db(db_path: Path) -> AsyncIterator[DatabaseManager]:
    """Open a database manager and ensure tables exist before yielding."""
    async with DatabaseManager(db_path) as db:
        await db.create_tables()
        yield db


@asynccontextmanager
async def open_service(
    config: LedgerConfig, db_path: Path | None = None
) -> AsyncIterator[LedgerService]:
    """Open the database (CLI `--db` overrides the configured path) and build a service."""
    async with open_db(db_path or config.db_path) as db:
        yield LedgerService.from_config(db, config)
