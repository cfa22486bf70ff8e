"""Shared utilities for CLI commands (console output, async helpers, formatting)."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

import typer
from rich.console import Console

if TYPE_CHECKING:
    from collections.abc import Coroutine

console = Console()

T = TypeVar("T")


def run_async(coro: Coroutine[object, object, T]) -> T:
    """Run a coroutine from a sync CLI command.

    Centralizes asyncio.run() usage across CLI modules to ensure consistent
    handling of KeyboardInterrupt (Ctrl+C).

    Raises:
        typer.Exit: With code 130 on KeyboardInterrupt (standard SIGINT exit code).
    """
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        raise typer.Exit(130) from None


def format_signed_usd(amount: float) -> str:
    """Format a USD amount as a signed currency string with color.

    Args:
        amount: Amount in dollars (can be positive, negative, or zero).

    Returns:
        Formatted string with color markup.
    """
    value = f"${abs(amount):,.2f}"
    if amount > 0:
        return f"[green]+{value}[/green]"
    if amount < 0:
        return f"[red]-{value}[/red]"
    return value


def format_percent(value: float) -> str:
    """Format a percentage with two decimals."""
    return f"{value:.2f}%"
