"""
CLI application for the trading ledger.

Provides commands for recording closed positions, inspecting trading history, and
viewing the leaderboard.
"""

from __future__ import annotations

import typer
from dotenv import find_dotenv, load_dotenv

from trading_ledger.cli.leaderboard import app as leaderboard_app
from trading_ledger.cli.ledger import app as ledger_app
from trading_ledger.cli.traders import app as traders_app
from trading_ledger.cli.utils import console

app = typer.Typer(
    name="trading-ledger",
    help="Trading Ledger CLI - closed-position ledger, performance summaries, leaderboard.",
    add_completion=False,
)

app.add_typer(traders_app, name="traders")
app.add_typer(ledger_app, name="ledger")
app.add_typer(leaderboard_app, name="leaderboard")


@app.callback()
def main() -> None:
    """Trading Ledger CLI."""
    load_dotenv(find_dotenv(usecwd=True))


@app.command()
def version() -> None:
    """Show version information."""
    from trading_ledger import __version__

    console.print(f"trading-ledger v{__version__}")
