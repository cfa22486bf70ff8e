"""Ledger entry repository (append-only trade-close records)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from trading_ledger.data.models import LedgerEntry
from trading_ledger.data.repositories.base import BaseRepository

if TYPE_CHECKING:
    from collections.abc import Sequence


class LedgerEntryRepository(BaseRepository[LedgerEntry]):
    """Repository for LedgerEntry records.

    There is deliberately no update method. Entries are written once by the close path;
    `delete()` (inherited) exists only for administrative removal.
    """

    model = LedgerEntry

    async def list_for_user(self, user_id: str, limit: int | None = None) -> Sequence[LedgerEntry]:
        """Get a user's entries, most recent exit first."""
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.user_id == user_id)
            .order_by(LedgerEntry.exit_date.desc(), LedgerEntry.id.desc())
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._scalars(stmt)
