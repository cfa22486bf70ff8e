"""Performance summary aggregation.

A user's summary is a pure function of their complete ledger. Every recompute reads all
of the user's entries and overwrites the stored summary as a whole; nothing is updated
incrementally. A summary that went stale (for example after two concurrent closes for the
same user, or a failed summary write) is therefore corrected by the next recompute.

Rounding policy:
    win_rate, average_win, average_loss, best_trade and worst_trade are rounded to
    `SUMMARY_DECIMALS` places. total_realized_pnl and total_positions_closed are exact.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import structlog

from trading_ledger.constants import SUMMARY_DECIMALS
from trading_ledger.data.repositories import LedgerEntryRepository, ProfileRepository
from trading_ledger.ledger.models import PerformanceSummary
from trading_ledger.ledger.pnl import round_half_up

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


def compute_summary(pnls: Iterable[float]) -> PerformanceSummary | None:
    """Reduce realized P&L values into a performance summary.

    Entries with exactly zero P&L count toward the total but are neither wins nor losses.

    Returns:
        The summary, or None when there are no values.
    """
    values = list(pnls)
    if not values:
        return None

    winning = [pnl for pnl in values if pnl > 0]
    losing = [pnl for pnl in values if pnl < 0]

    total = len(values)
    win_rate = (len(winning) / total) * 100
    average_win = math.fsum(winning) / len(winning) if winning else 0.0
    average_loss = math.fsum(losing) / len(losing) if losing else 0.0

    return PerformanceSummary(
        # fsum keeps the total independent of entry order
        total_realized_pnl=math.fsum(values),
        total_positions_closed=total,
        win_rate=round_half_up(win_rate, SUMMARY_DECIMALS),
        average_win=round_half_up(average_win, SUMMARY_DECIMALS),
        average_loss=round_half_up(average_loss, SUMMARY_DECIMALS),
        best_trade=round_half_up(max(values), SUMMARY_DECIMALS),
        worst_trade=round_half_up(min(values), SUMMARY_DECIMALS),
    )


class SummaryAggregator:
    """Recompute and persist a user's summary from their full ledger."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._entries = LedgerEntryRepository(session)
        self._profiles = ProfileRepository(session)

    async def recompute_summary(self, user_id: str) -> PerformanceSummary | None:
        """
        Recalculate and store the user's performance summary.

        A user with no ledger entries is left untouched: no summary is written and None
        is returned. Storage errors propagate unchanged.

        Returns:
            The summary that was written, or None if there was nothing to aggregate.
        """
        logger.info("Recalculating performance summary", user_id=user_id)

        entries = await self._entries.list_for_user(user_id)
        summary = compute_summary(entry.realized_pnl for entry in entries)
        if summary is None:
            logger.info("No closed positions found", user_id=user_id)
            return None

        await self._profiles.set_reputation_fields(user_id, summary)
        await self._session.commit()

        logger.info(
            "Performance summary updated",
            user_id=user_id,
            total_realized_pnl=summary.total_realized_pnl,
            total_positions_closed=summary.total_positions_closed,
            win_rate=summary.win_rate,
            average_win=summary.average_win,
            average_loss=summary.average_loss,
            best_trade=summary.best_trade,
            worst_trade=summary.worst_trade,
        )
        return summary
