"""Trader profile repository: the key-value target for performance summaries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from trading_ledger.data.models import TraderProfile, utc_now
from trading_ledger.data.repositories.base import BaseRepository
from trading_ledger.ledger.models import PerformanceSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement


def _eligible() -> ColumnElement[bool]:
    return TraderProfile.total_positions_closed > 0


class ProfileRepository(BaseRepository[TraderProfile]):
    """Repository for TraderProfile entities."""

    model = TraderProfile

    async def upsert_profile(
        self, user_id: str, name: str, avatar: str | None = None
    ) -> TraderProfile:
        """Create a profile, or update the display fields of an existing one."""
        existing = await self.get(user_id)
        if existing is not None:
            existing.name = name
            if avatar is not None:
                existing.avatar = avatar
            await self._session.flush()
            return existing
        return await self.add(TraderProfile(user_id=user_id, name=name, avatar=avatar))

    async def get_reputation_fields(self, user_id: str) -> PerformanceSummary | None:
        """Return the stored summary, or None if the user has none."""
        profile = await self.get(user_id)
        if profile is None or profile.total_positions_closed <= 0:
            return None
        return PerformanceSummary(
            total_realized_pnl=profile.total_realized_pnl or 0.0,
            total_positions_closed=profile.total_positions_closed,
            win_rate=profile.win_rate or 0.0,
            average_win=profile.average_win or 0.0,
            average_loss=profile.average_loss or 0.0,
            best_trade=profile.best_trade or 0.0,
            worst_trade=profile.worst_trade or 0.0,
        )

    async def set_reputation_fields(self, user_id: str, summary: PerformanceSummary) -> None:
        """Overwrite every summary field on the user's profile.

        A missing profile is created with the user id as its display name.
        """
        profile = await self.get(user_id)
        if profile is None:
            profile = TraderProfile(user_id=user_id, name=user_id)
            self._session.add(profile)

        profile.total_realized_pnl = summary.total_realized_pnl
        profile.total_positions_closed = summary.total_positions_closed
        profile.win_rate = summary.win_rate
        profile.average_win = summary.average_win
        profile.average_loss = summary.average_loss
        profile.best_trade = summary.best_trade
        profile.worst_trade = summary.worst_trade
        profile.summary_updated_at = utc_now()
        await self._session.flush()

    async def clear_reputation_fields(self, user_id: str) -> None:
        """Remove the summary from a user's profile (no closed positions remain)."""
        profile = await self.get(user_id)
        if profile is None:
            return

        profile.total_realized_pnl = None
        profile.total_positions_closed = 0
        profile.win_rate = None
        profile.average_win = None
        profile.average_loss = None
        profile.best_trade = None
        profile.worst_trade = None
        profile.summary_updated_at = utc_now()
        await self._session.flush()

    async def list_ranked(self, limit: int) -> Sequence[TraderProfile]:
        """Profiles with at least one closed position, highest realized P&L first.

        Equal totals keep the profiles' creation order.
        """
        stmt = (
            select(TraderProfile)
            .where(_eligible())
            .order_by(
                TraderProfile.total_realized_pnl.desc(),
                TraderProfile.created_at.asc(),
                TraderProfile.user_id.asc(),
            )
            .limit(limit)
        )
        return await self._scalars(stmt)

    async def count_ranked_above(self, total_realized_pnl: float) -> int:
        """Count eligible profiles whose realized P&L is strictly greater."""
        stmt = (
            select(func.count(TraderProfile.user_id))
            .where(_eligible())
            .where(TraderProfile.total_realized_pnl > total_realized_pnl)
        )
        return await self._count(stmt)
