"""Realized P&L arithmetic for a single closed position.

Both values are computed once, when the position is closed, and stored on the ledger
entry. They are never re-derived on read.
"""

from __future__ import annotations

import math


def realized_pnl(*, entry_price: float, exit_price: float, shares: float) -> float:
    """USD gain or loss locked in by closing `shares` at `exit_price`."""
    return (exit_price - entry_price) * shares


def realized_pnl_percent(*, entry_price: float, exit_price: float) -> float:
    """Price move as a percentage of entry price.

    A zero entry price (e.g. a gifted or zero-cost position) yields 0 rather than a
    division by zero.
    """
    if entry_price > 0:
        return ((exit_price - entry_price) / entry_price) * 100
    return 0.0


def round_half_up(value: float, decimals: int = 2) -> float:
    """Round to `decimals` places with halves going toward positive infinity.

    Matches the rounding the stored summaries have always used
    (`floor(value * 10**decimals + 0.5) / 10**decimals`): 0.125 becomes 0.13 and -0.125
    becomes -0.12.
    """
    factor = 10**decimals
    return math.floor(value * factor + 0.5) / factor
