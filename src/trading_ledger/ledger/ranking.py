"""Leaderboard ranking and per-user rank lookup.

Two rank definitions coexist and are intentionally not reconciled:

- Leaderboard rows use a dense sequential rank: `rank = position + 1`. Two traders with
  the same realized P&L get consecutive ranks (80, 50, 50 -> 1, 2, 3).
- `get_user_rank()` uses a competition rank: one plus the number of other eligible
  traders with strictly greater realized P&L. Tied traders share a rank (80, 50, 50 ->
  1, 2, 2).

A trader tied with others can therefore see a different number on their own summary than
on the leaderboard.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog

from trading_ledger.constants import DEFAULT_LEADERBOARD_LIMIT
from trading_ledger.data.repositories import ProfileRepository
from trading_ledger.ledger.models import LeaderboardRow

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

    from trading_ledger.data.models import TraderProfile

logger = structlog.get_logger()

UNRANKED = 0


class _RankedSummary(Protocol):
    total_realized_pnl: float | None
    total_positions_closed: int


def normalize_limit(limit: int | None, default: int = DEFAULT_LEADERBOARD_LIMIT) -> int:
    """Return `limit`, or `default` when it is missing or below 1."""
    if limit is None or limit < 1:
        return default
    return limit


def is_eligible(summary: _RankedSummary) -> bool:
    """Only traders with at least one closed position are ranked."""
    return summary.total_positions_closed > 0


def rank_leaderboard(
    profiles: Iterable[TraderProfile], limit: int | None = None
) -> list[LeaderboardRow]:
    """Order eligible profiles by realized P&L and assign dense sequential ranks.

    The sort is stable, so profiles with equal P&L keep the order they were given in.
    """
    eligible = [profile for profile in profiles if is_eligible(profile)]
    ordered = sorted(eligible, key=lambda p: p.total_realized_pnl or 0.0, reverse=True)
    top = ordered[: normalize_limit(limit)]
    return [
        LeaderboardRow.from_profile(profile, rank=index + 1) for index, profile in enumerate(top)
    ]


class RankingEngine:
    """Read-only leaderboard queries against the profile store."""

    def __init__(self, session: AsyncSession) -> None:
        self._profiles = ProfileRepository(session)

    async def get_leaderboard(self, limit: int | None = None) -> list[LeaderboardRow]:
        """Top `limit` eligible traders by realized P&L (default 50)."""
        effective_limit = normalize_limit(limit)
        logger.info("Fetching leaderboard", limit=effective_limit)

        profiles = await self._profiles.list_ranked(effective_limit)
        rows = rank_leaderboard(profiles, effective_limit)

        logger.info("Leaderboard generated", rows=len(rows))
        return rows

    async def get_user_rank(self, user_id: str) -> int:
        """Competition rank of a trader, or 0 if they are unknown or have no summary."""
        summary = await self._profiles.get_reputation_fields(user_id)
        if summary is None:
            return UNRANKED

        above = await self._profiles.count_ranked_above(summary.total_realized_pnl)
        return above + 1
