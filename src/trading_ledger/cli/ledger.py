"""Typer CLI commands for recording and inspecting closed positions."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 - Required at runtime for Typer introspection
from typing import TYPE_CHECKING, Annotated

import typer
from rich.table import Table

from trading_ledger.cli.utils import console, format_percent, format_signed_usd, run_async
from trading_ledger.ledger.models import ExitReason, PortfolioType

if TYPE_CHECKING:
    from trading_ledger.ledger.models import PerformanceSummary

app = typer.Typer(help="Trade ledger commands (close, history, recompute, delete, audit).")

DbOption = Annotated[
    Path | None,
    typer.Option("--db", "-d", help="Path to SQLite database file."),
]


def build_summary_table(summary: PerformanceSummary, *, title: str) -> Table:
    """Render a performance summary as a two-column table."""
    table = Table(title=title, show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Realized P&L:", format_signed_usd(summary.total_realized_pnl))
    table.add_row("Positions Closed:", str(summary.total_positions_closed))
    table.add_row("Win Rate:", format_percent(summary.win_rate))
    table.add_row("Avg Win:", format_signed_usd(summary.average_win))
    table.add_row("Avg Loss:", format_signed_usd(summary.average_loss))
    table.add_row("Best Trade:", format_signed_usd(summary.best_trade))
    table.add_row("Worst Trade:", format_signed_usd(summary.worst_trade))
    return table


@app.command("close")
def ledger_close(
    user_id: Annotated[str, typer.Argument(help="Owner of the position.")],
    ticker: Annotated[str, typer.Option("--ticker", "-t", help="Instrument symbol.")],
    shares: Annotated[float, typer.Option("--shares", help="Quantity closed.")],
    entry_price: Annotated[float, typer.Option("--entry-price", help="Per-share open price.")],
    exit_price: Annotated[float, typer.Option("--exit-price", help="Per-share close price.")],
    portfolio_id: Annotated[str, typer.Option("--portfolio-id", help="Owning portfolio id.")],
    portfolio_type: Annotated[
        PortfolioType,
        typer.Option("--portfolio-type", help="Portfolio strategy classification."),
    ] = PortfolioType.SOLID,
    reason: Annotated[
        ExitReason,
        typer.Option("--reason", "-r", help="Why the position was closed."),
    ] = ExitReason.MANUAL_CLOSE,
    opened_at: Annotated[
        datetime | None,
        typer.Option("--opened-at", help="When the position was opened (default: now)."),
    ] = None,
    db_path: DbOption = None,
) -> None:
    """Record a closed position and refresh the trader's summary."""
    from trading_ledger.cli.db import load_config, open_service
    from trading_ledger.exceptions import (
        CloseEventValidationError,
        LedgerWriteError,
        SummaryRefreshError,
    )

    config = load_config()
    snapshot = {
        "ticker": ticker,
        "shares": shares,
        "entry_price": entry_price,
        "portfolio_type": portfolio_type.value,
        "portfolio_id": portfolio_id,
        "open_date": opened_at or datetime.now(UTC),
    }

    async def _close() -> None:
        async with open_service(config, db_path) as service:
            try:
                entry = await service.close_position(user_id, snapshot, exit_price, reason)
            except CloseEventValidationError as e:
                console.print(f"[red]Error:[/red] {e}")
                for detail in e.errors:
                    console.print(f"  [dim]- {detail}[/dim]")
                raise typer.Exit(1) from None
            except SummaryRefreshError as e:
                console.print(
                    f"[yellow]Warning:[/yellow] Trade recorded (entry {e.entry.id}) but the "
                    "performance summary was not refreshed."
                )
                console.print(
                    f"[dim]Run `trading-ledger ledger recompute {user_id}` to retry.[/dim]"
                )
                return
            except LedgerWriteError as e:
                console.print(f"[red]Error:[/red] {e}. Nothing was recorded; please retry.")
                raise typer.Exit(1) from None

        console.print(
            f"[green]✓[/green] Closed {entry.ticker} for {entry.user_id} "
            f"(entry {entry.id}): {format_signed_usd(entry.realized_pnl)} "
            f"({format_percent(entry.realized_pnl_percent)})"
        )

    run_async(_close())


@app.command("history")
def ledger_history(
    user_id: Annotated[str, typer.Argument(help="Trader user id.")],
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Number of trades to show (default: 50)."),
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    db_path: DbOption = None,
) -> None:
    """View a trader's closed positions, most recent first."""
    from trading_ledger.cli.db import load_config, open_service

    config = load_config()

    async def _history() -> None:
        async with open_service(config, db_path) as service:
            history = await service.get_trading_history(user_id, limit)

        if output_json:
            payload = {
                "history": [item.model_dump(mode="json") for item in history],
                "total_trades": len(history),
            }
            typer.echo(json.dumps(payload, indent=2, default=str))
            return

        if not history:
            console.print(f"[yellow]No closed positions for {user_id}[/yellow]")
            return

        table = Table(title=f"Trading History: {user_id}", show_header=True)
        table.add_column("Exit Date", style="dim")
        table.add_column("Ticker", style="cyan", no_wrap=True)
        table.add_column("Shares", justify="right")
        table.add_column("Entry", justify="right")
        table.add_column("Exit", justify="right")
        table.add_column("P&L", justify="right")
        table.add_column("P&L %", justify="right")
        table.add_column("Type", style="magenta")
        table.add_column("Reason", style="yellow")

        for item in history:
            table.add_row(
                item.exit_date.strftime("%Y-%m-%d %H:%M"),
                item.ticker,
                f"{item.shares:g}",
                f"${item.entry_price:,.2f}",
                f"${item.exit_price:,.2f}",
                format_signed_usd(item.realized_pnl),
                format_percent(item.realized_pnl_percent),
                item.portfolio_type.value,
                item.exit_reason.value,
            )

        console.print(table)

    run_async(_history())


@app.command("recompute")
def ledger_recompute(
    user_id: Annotated[str, typer.Argument(help="Trader user id.")],
    db_path: DbOption = None,
) -> None:
    """Rebuild a trader's summary from their full ledger."""
    from trading_ledger.cli.db import load_config, open_service

    config = load_config()

    async def _recompute() -> None:
        async with open_service(config, db_path) as service:
            summary = await service.recompute_summary(user_id)

        if summary is None:
            console.print(f"[yellow]No closed positions for {user_id}; nothing to do.[/yellow]")
            return
        console.print(build_summary_table(summary, title=f"Performance Summary: {user_id}"))

    run_async(_recompute())


@app.command("delete")
def ledger_delete(
    entry_id: Annotated[int, typer.Argument(help="Ledger entry id.")],
    deleted_by: Annotated[str, typer.Option("--by", help="Administrator performing the delete.")],
    reason: Annotated[
        str | None,
        typer.Option("--reason", "-r", help="Why the entry is being removed."),
    ] = None,
    db_path: DbOption = None,
) -> None:
    """Administratively delete a ledger entry (audited) and re-aggregate."""
    from trading_ledger.cli.db import load_config, open_service
    from trading_ledger.exceptions import (
        LedgerDeleteError,
        LedgerEntryNotFoundError,
        PersistenceError,
    )

    config = load_config()

    async def _delete() -> None:
        async with open_service(config, db_path) as service:
            try:
                summary = await service.delete_entry(
                    entry_id, deleted_by=deleted_by, reason=reason
                )
            except (LedgerEntryNotFoundError, LedgerDeleteError) as e:
                console.print(f"[red]Error:[/red] {e}")
                raise typer.Exit(1) from None
            except PersistenceError as e:
                console.print(f"[yellow]Warning:[/yellow] {e}")
                return

        console.print(f"[green]✓[/green] Deleted ledger entry {entry_id}")
        console.print(f"[dim]Audit log: {config.audit_log_path}[/dim]")
        if summary is None:
            console.print("[dim]No closed positions remain; summary cleared.[/dim]")
        else:
            console.print(build_summary_table(summary, title="Refreshed Performance Summary"))

    run_async(_delete())


@app.command("audit")
def ledger_audit(
    user_id: Annotated[
        str | None,
        typer.Option("--user", "-u", help="Only show deletions of this trader's entries."),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Number of deletions to show (default: 50)."),
    ] = None,
    output_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    db_path: DbOption = None,
) -> None:
    """List administratively deleted ledger entries, most recent first."""
    from trading_ledger.cli.db import load_config, open_service

    config = load_config()

    async def _audit() -> None:
        async with open_service(config, db_path) as service:
            events = service.get_deletion_audits(user_id, limit)

        if output_json:
            payload = {
                "deletions": [event.model_dump(mode="json") for event in events],
                "count": len(events),
            }
            typer.echo(json.dumps(payload, indent=2, default=str))
            return

        if not events:
            console.print("[yellow]No deleted ledger entries[/yellow]")
            return

        table = Table(title="Deleted Ledger Entries", show_header=True)
        table.add_column("Deleted At", style="dim")
        table.add_column("Entry", justify="right")
        table.add_column("Trader", style="cyan")
        table.add_column("Ticker", no_wrap=True)
        table.add_column("P&L", justify="right")
        table.add_column("By", style="magenta")
        table.add_column("Reason")

        for event in events:
            table.add_row(
                event.timestamp.strftime("%Y-%m-%d %H:%M"),
                str(event.entry_id),
                event.user_id,
                event.ticker,
                format_signed_usd(event.amount),
                event.deleted_by,
                event.reason or "-",
            )

        console.print(table)

    run_async(_audit())
