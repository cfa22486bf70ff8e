"""Typer CLI commands for trader profiles."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - Required at runtime for Typer introspection
from typing import Annotated

import typer

from trading_ledger.cli.utils import console, run_async

app = typer.Typer(help="Trader profile commands.")


@app.command("add")
def traders_add(
    user_id: Annotated[str, typer.Argument(help="Trader user id.")],
    name: Annotated[str, typer.Argument(help="Display name shown on the leaderboard.")],
    avatar: Annotated[
        str | None,
        typer.Option("--avatar", help="Avatar URL."),
    ] = None,
    db_path: Annotated[
        Path | None,
        typer.Option("--db", "-d", help="Path to SQLite database file."),
    ] = None,
) -> None:
    """Create a trader profile, or rename an existing one."""
    from trading_ledger.cli.db import load_config, open_service

    config = load_config()

    async def _add() -> None:
        async with open_service(config, db_path) as service:
            profile = await service.register_trader(user_id, name, avatar)
        console.print(f"[green]✓[/green] Trader {profile.user_id} saved as '{profile.name}'")

    run_async(_add())
