"""Trade ledger, performance aggregation and reputation ranking.

This package is split into:
- models: pydantic inputs (PositionSnapshot) and query results
- pnl / aggregator.compute_summary / ranking.rank_leaderboard: pure functions
- aggregator.SummaryAggregator / ranking.RankingEngine: persistence-backed wrappers
- service: the LedgerService orchestrating the close path and the query surface

Only the models are re-exported here; import the service from
`trading_ledger.ledger.service` (or the top-level package).
"""

from trading_ledger.ledger.models import (
    DeletionAuditEvent,
    ExitReason,
    LeaderboardRow,
    PerformanceSummary,
    PortfolioType,
    PositionSnapshot,
    ReputationSummary,
    TradeAction,
    TradeHistoryItem,
)

__all__ = [
    "DeletionAuditEvent",
    "ExitReason",
    "LeaderboardRow",
    "PerformanceSummary",
    "PortfolioType",
    "PositionSnapshot",
    "ReputationSummary",
    "TradeAction",
    "TradeHistoryItem",
]
