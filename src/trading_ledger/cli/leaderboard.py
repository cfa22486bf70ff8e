"""Typer CLI commands for the leaderboard and per-trader reputation."""

from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003 - Required at runtime for Typer introspection
from typing import Annotated

import typer
from rich.table import Table

from trading_ledger.cli.utils import console, format_percent, format_signed_usd, run_async

app = typer.Typer(help="Leaderboard and reputation commands.")

DbOption = Annotated[
    Path | None,
    typer.Option("--db", "-d", help="Path to SQLite database file."),
]


@app.command("show")
def leaderboard_show(
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Number of traders to show (default: 50)."),
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    db_path: DbOption = None,
) -> None:
    """Top traders ranked by realized P&L."""
    from trading_ledger.cli.db import load_config, open_service

    config = load_config()

    async def _show() -> None:
        async with open_service(config, db_path) as service:
            rows = await service.get_leaderboard(limit)

        if output_json:
            payload = {
                "leaderboard": [row.model_dump(mode="json") for row in rows],
                "total_users": len(rows),
            }
            typer.echo(json.dumps(payload, indent=2, default=str))
            return

        if not rows:
            console.print("[yellow]No traders have closed a position yet[/yellow]")
            return

        table = Table(title="Leaderboard", show_header=True)
        table.add_column("Rank", justify="right", style="bold")
        table.add_column("Trader", style="cyan")
        table.add_column("Realized P&L", justify="right")
        table.add_column("Closed", justify="right")
        table.add_column("Win Rate", justify="right")
        table.add_column("Best Trade", justify="right")

        for row in rows:
            table.add_row(
                str(row.rank),
                row.name,
                format_signed_usd(row.total_realized_pnl),
                str(row.total_positions_closed),
                format_percent(row.win_rate),
                format_signed_usd(row.best_trade),
            )

        console.print(table)

    run_async(_show())


@app.command("rank")
def leaderboard_rank(
    user_id: Annotated[str, typer.Argument(help="Trader user id.")],
    db_path: DbOption = None,
) -> None:
    """Show a trader's rank (tied traders share a rank; 0 means unranked)."""
    from trading_ledger.cli.db import load_config, open_service

    config = load_config()

    async def _rank() -> None:
        async with open_service(config, db_path) as service:
            rank = await service.get_user_rank(user_id)

        if rank == 0:
            console.print(f"{user_id} is unranked (no closed positions)")
            return
        console.print(f"{user_id} rank: {rank}")

    run_async(_rank())


@app.command("summary")
def leaderboard_summary(
    user_id: Annotated[str, typer.Argument(help="Trader user id.")],
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    db_path: DbOption = None,
) -> None:
    """Show a trader's reputation summary and rank."""
    from trading_ledger.cli.db import load_config, open_service
    from trading_ledger.cli.ledger import build_summary_table
    from trading_ledger.exceptions import ProfileNotFoundError

    config = load_config()

    async def _summary() -> None:
        async with open_service(config, db_path) as service:
            try:
                reputation = await service.get_reputation_summary(user_id)
            except ProfileNotFoundError as e:
                console.print(f"[red]Error:[/red] {e}")
                raise typer.Exit(1) from None

        if output_json:
            typer.echo(json.dumps(reputation.model_dump(mode="json"), indent=2, default=str))
            return

        if reputation.summary is None:
            console.print(f"[yellow]{reputation.name} has not closed any positions yet[/yellow]")
            return

        title = f"Reputation: {reputation.name} (rank {reputation.rank})"
        console.print(build_summary_table(reputation.summary, title=title))

    run_async(_summary())
