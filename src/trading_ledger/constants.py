"""Centralized policy constants for the trading ledger.

Named constants for the literals that encode ledger and ranking policy, so the same
concept is never spelled two different ways across the aggregator, the ranking engine
and the CLI.
"""

from __future__ import annotations

# =============================================================================
# Query Limits
# =============================================================================

# Number of rows returned by a leaderboard query when the caller gives no limit, or a
# limit below 1.
#
# Used by:
# - ledger/ranking.py: RankingEngine.get_leaderboard()
# - cli/leaderboard.py: leaderboard show --limit default
DEFAULT_LEADERBOARD_LIMIT: int = 50

# Number of ledger entries returned by a trading history query under the same rules.
#
# Used by:
# - ledger/service.py: LedgerService.get_trading_history()
# - cli/ledger.py: ledger history --limit default
DEFAULT_HISTORY_LIMIT: int = 50

# =============================================================================
# Summary Rounding
# =============================================================================

# Decimal places kept for win_rate, average_win, average_loss, best_trade and
# worst_trade when a summary is persisted. total_realized_pnl and
# total_positions_closed are stored exact.
#
# Used by:
# - ledger/aggregator.py: compute_summary()
SUMMARY_DECIMALS: int = 2

# =============================================================================
# Close Path
# =============================================================================

# Template for the notes field written on every entry created by close_position().
CLOSE_NOTES_TEMPLATE: str = "Closed position - {exit_reason}"
