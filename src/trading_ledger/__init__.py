"""
Trading Ledger.

Append-only ledger of closed positions, per-trader performance summaries derived from it,
and a leaderboard ranking traders by realized profit.
"""

__version__ = "0.1.0"

from trading_ledger.data import DatabaseManager
from trading_ledger.ledger.models import ExitReason, PortfolioType, PositionSnapshot
from trading_ledger.ledger.service import LedgerService

# Configure structlog once at import time (quiet by default).
from trading_ledger.logging import configure_structlog

configure_structlog()

__all__ = [
    "DatabaseManager",
    "ExitReason",
    "LedgerService",
    "PortfolioType",
    "PositionSnapshot",
    "__version__",
]
