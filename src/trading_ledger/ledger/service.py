"""Ledger service: records closed positions and serves reputation queries.

Write path for a close event:

    validate -> append LedgerEntry (commit) -> recompute summary from the full ledger
    -> overwrite the profile's summary fields (commit)

The entry commit happens before the recompute is attempted. If the recompute fails the
entry stays recorded and `SummaryRefreshError` tells the caller so; re-running
`recompute_summary()` (or the user's next close) repairs the summary.

Concurrency:
    Closes for the same user are serialized within this process by a per-user
    `asyncio.Lock`, so two concurrent closes cannot each aggregate a ledger that is
    missing the other's entry. Separate processes sharing one database are not
    coordinated: there the last summary write wins, and the stale summary is replaced by
    the next recompute for that user. Closes for different users never share a lock.
    A user's lock only exists while a close or delete for that user is running or waiting.
    Read queries take no locks and may observe a summary that is mid-refresh.
"""

from __future__ import annotations

import asyncio
import math
from collections import Counter
from collections.abc import Mapping
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from trading_ledger.constants import (
    CLOSE_NOTES_TEMPLATE,
    DEFAULT_HISTORY_LIMIT,
    DEFAULT_LEADERBOARD_LIMIT,
)
from trading_ledger.data.models import LedgerEntry, TraderProfile, utc_now
from trading_ledger.data.repositories import LedgerEntryRepository, ProfileRepository
from trading_ledger.exceptions import (
    CloseEventValidationError,
    LedgerDeleteError,
    LedgerEntryNotFoundError,
    LedgerWriteError,
    PersistenceError,
    ProfileNotFoundError,
    SummaryRefreshError,
)
from trading_ledger.ledger.aggregator import SummaryAggregator
from trading_ledger.ledger.audit import DeletionAuditLogger
from trading_ledger.ledger.models import (
    DeletionAuditEvent,
    ExitReason,
    LeaderboardRow,
    PerformanceSummary,
    PositionSnapshot,
    ReputationSummary,
    TradeAction,
    TradeHistoryItem,
)
from trading_ledger.ledger.pnl import realized_pnl, realized_pnl_percent
from trading_ledger.ledger.ranking import RankingEngine, normalize_limit
from trading_ledger.paths import DEFAULT_DELETION_AUDIT_LOG

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from trading_ledger.config import LedgerConfig
    from trading_ledger.data.database import DatabaseManager

logger = structlog.get_logger()


def _validate_close_event(
    user_id: str,
    snapshot: PositionSnapshot | Mapping[str, Any],
    exit_price: float,
    exit_reason: ExitReason | str,
) -> tuple[PositionSnapshot, ExitReason]:
    """Check a close event before anything is written."""
    errors: list[str] = []

    if not isinstance(user_id, str) or not user_id.strip():
        errors.append("user_id is required")

    position: PositionSnapshot | None = None
    if isinstance(snapshot, PositionSnapshot):
        position = snapshot
    elif isinstance(snapshot, Mapping):
        try:
            position = PositionSnapshot.model_validate(dict(snapshot))
        except ValidationError as e:
            for err in e.errors():
                field = ".".join(str(part) for part in err["loc"]) or "snapshot"
                errors.append(f"snapshot.{field}: {err['msg']}")
    else:
        errors.append(f"snapshot must be a PositionSnapshot or mapping (got {type(snapshot)})")

    if (
        isinstance(exit_price, bool)
        or not isinstance(exit_price, int | float)
        or not math.isfinite(exit_price)
        or exit_price < 0
    ):
        errors.append(f"exit_price must be a finite number >= 0 (got {exit_price!r})")

    reason: ExitReason | None = None
    try:
        reason = ExitReason(exit_reason)
    except ValueError:
        allowed = ", ".join(r.value for r in ExitReason)
        errors.append(f"exit_reason must be one of: {allowed} (got {exit_reason!r})")

    if errors or position is None or reason is None:
        raise CloseEventValidationError("Invalid position close event", errors=errors)
    return position, reason


def _entry_snapshot(entry: LedgerEntry) -> dict[str, Any]:
    return {column.name: getattr(entry, column.name) for column in LedgerEntry.__table__.columns}


class LedgerService:
    """Record closed positions and answer leaderboard / history / summary queries."""

    def __init__(
        self,
        db: DatabaseManager,
        *,
        audit_logger: DeletionAuditLogger | None = None,
        leaderboard_limit: int = DEFAULT_LEADERBOARD_LIMIT,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        """Initialize the service with a database manager."""
        self.db = db
        self.audit_logger = audit_logger or DeletionAuditLogger(DEFAULT_DELETION_AUDIT_LOG)
        self._leaderboard_limit = leaderboard_limit
        self._history_limit = history_limit
        self._user_locks: dict[str, asyncio.Lock] = {}
        self._lock_users: Counter[str] = Counter()

    @classmethod
    def from_config(cls, db: DatabaseManager, config: LedgerConfig) -> LedgerService:
        """Build a service using the limits and audit log path from `config`."""
        return cls(
            db,
            audit_logger=DeletionAuditLogger(config.audit_log_path),
            leaderboard_limit=config.leaderboard_limit,
            history_limit=config.history_limit,
        )

    @asynccontextmanager
    async def _user_lock(self, user_id: str) -> AsyncIterator[None]:
        """Hold the user's lock; it is dropped once no caller holds or awaits it."""
        lock = self._user_locks.setdefault(user_id, asyncio.Lock())
        self._lock_users[user_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if not self._lock_users[user_id]:
                del self._lock_users[user_id]
                del self._user_locks[user_id]

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    async def close_position(
        self,
        user_id: str,
        snapshot: PositionSnapshot | Mapping[str, Any],
        exit_price: float,
        exit_reason: ExitReason | str,
    ) -> LedgerEntry:
        """
        Record a closed position and refresh the user's performance summary.

        Args:
            user_id: Owner of the position.
            snapshot: Position state at close time (model or mapping).
            exit_price: Per-share close price, >= 0.
            exit_reason: One of `ExitReason`.

        Returns:
            The committed ledger entry.

        Raises:
            CloseEventValidationError: The event is malformed; nothing was written.
            LedgerWriteError: The entry could not be stored; nothing was written.
            SummaryRefreshError: The entry was stored but the summary was not refreshed.
        """
        position, reason = _validate_close_event(user_id, snapshot, exit_price, exit_reason)

        async with self._user_lock(user_id):
            entry = await self._append_entry(user_id, position, float(exit_price), reason)
            try:
                await self.recompute_summary(user_id)
            except SQLAlchemyError as e:
                logger.warning(
                    "Trade recorded but performance summary refresh failed",
                    user_id=user_id,
                    entry_id=entry.id,
                    error=str(e),
                )
                raise SummaryRefreshError(entry) from e

        return entry

    async def _append_entry(
        self,
        user_id: str,
        position: PositionSnapshot,
        exit_price: float,
        reason: ExitReason,
    ) -> LedgerEntry:
        pnl = realized_pnl(
            entry_price=position.entry_price, exit_price=exit_price, shares=position.shares
        )
        pnl_percent = realized_pnl_percent(entry_price=position.entry_price, exit_price=exit_price)

        logger.info(
            "Recording closed position",
            user_id=user_id,
            ticker=position.ticker,
            entry_price=position.entry_price,
            exit_price=exit_price,
            shares=position.shares,
            realized_pnl=round(pnl, 2),
        )

        entry = LedgerEntry(
            user_id=user_id,
            ticker=position.ticker,
            shares=position.shares,
            entry_price=position.entry_price,
            exit_price=exit_price,
            realized_pnl=pnl,
            realized_pnl_percent=pnl_percent,
            entry_date=position.open_date,
            exit_date=utc_now(),
            portfolio_type=position.portfolio_type.value,
            portfolio_id=position.portfolio_id,
            exit_reason=reason.value,
            action=TradeAction.SELL.value,
            notes=CLOSE_NOTES_TEMPLATE.format(exit_reason=reason.value),
        )

        try:
            async with self.db.session_factory() as session:
                repo = LedgerEntryRepository(session)
                await repo.add(entry)
                await repo.commit()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to record closed position",
                user_id=user_id,
                ticker=position.ticker,
                error=str(e),
            )
            raise LedgerWriteError(user_id, position.ticker) from e

        logger.info("Ledger entry saved", user_id=user_id, entry_id=entry.id, ticker=entry.ticker)
        return entry

    async def recompute_summary(self, user_id: str) -> PerformanceSummary | None:
        """Rebuild the user's summary from their complete ledger (no-op if empty)."""
        async with self.db.session_factory() as session:
            return await SummaryAggregator(session).recompute_summary(user_id)

    async def delete_entry(
        self,
        entry_id: int,
        *,
        deleted_by: str,
        reason: str | None = None,
    ) -> PerformanceSummary | None:
        """
        Administratively delete a ledger entry and re-aggregate its owner's summary.

        An audit event with the full entry is appended once the delete has committed, so
        the log only ever lists entries that are really gone. If the owner has no entries
        left, their summary is cleared so they drop off the leaderboard.

        Returns:
            The owner's refreshed summary, or None if no entries remain.

        Raises:
            LedgerEntryNotFoundError: No entry has this id.
            LedgerDeleteError: The delete failed; the entry and the audit log are unchanged.
            PersistenceError: The entry was deleted but the summary was not refreshed.
        """
        async with self.db.session_factory() as session:
            existing = await LedgerEntryRepository(session).get(entry_id)
        if existing is None:
            raise LedgerEntryNotFoundError(entry_id)

        user_id = existing.user_id
        async with self._user_lock(user_id):
            async with self.db.session_factory() as session:
                repo = LedgerEntryRepository(session)
                entry = await repo.get(entry_id)
                if entry is None:
                    raise LedgerEntryNotFoundError(entry_id)

                event = DeletionAuditEvent(
                    timestamp=utc_now(),
                    entry_id=entry.id,
                    user_id=entry.user_id,
                    ticker=entry.ticker,
                    amount=entry.realized_pnl,
                    portfolio_id=entry.portfolio_id,
                    deleted_by=deleted_by,
                    reason=reason,
                    before_snapshot=_entry_snapshot(entry),
                )
                try:
                    await repo.delete(entry)
                    await repo.commit()
                except SQLAlchemyError as e:
                    logger.error(
                        "Failed to delete ledger entry",
                        entry_id=entry_id,
                        user_id=user_id,
                        error=str(e),
                    )
                    raise LedgerDeleteError(entry_id) from e

            self.audit_logger.write(event)
            logger.info(
                "Ledger entry deleted",
                entry_id=entry_id,
                user_id=user_id,
                deleted_by=deleted_by,
                reason=reason,
            )

            try:
                summary = await self.recompute_summary(user_id)
                if summary is None:
                    async with self.db.session_factory() as session:
                        profiles = ProfileRepository(session)
                        await profiles.clear_reputation_fields(user_id)
                        await profiles.commit()
            except SQLAlchemyError as e:
                logger.warning(
                    "Entry deleted but performance summary refresh failed",
                    entry_id=entry_id,
                    user_id=user_id,
                    error=str(e),
                )
                raise PersistenceError(
                    f"Ledger entry {entry_id} was deleted but the performance summary for "
                    f"user {user_id} was not refreshed"
                ) from e

        return summary

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    async def register_trader(
        self, user_id: str, name: str, avatar: str | None = None
    ) -> TraderProfile:
        """Create a trader profile, or update its display name / avatar."""
        async with self.db.session_factory() as session:
            profiles = ProfileRepository(session)
            profile = await profiles.upsert_profile(user_id, name, avatar)
            await profiles.commit()
            return profile

    # ------------------------------------------------------------------
    # Query surface
    # ------------------------------------------------------------------

    async def get_leaderboard(self, limit: int | None = None) -> list[LeaderboardRow]:
        """Top traders by realized P&L with dense sequential ranks."""
        effective_limit = normalize_limit(limit, self._leaderboard_limit)
        async with self.db.session_factory() as session:
            return await RankingEngine(session).get_leaderboard(effective_limit)

    async def get_user_rank(self, user_id: str) -> int:
        """Competition rank of a trader; 0 when unranked."""
        async with self.db.session_factory() as session:
            return await RankingEngine(session).get_user_rank(user_id)

    async def get_trading_history(
        self, user_id: str, limit: int | None = None
    ) -> list[TradeHistoryItem]:
        """A user's closed positions, most recent exit first."""
        effective_limit = normalize_limit(limit, self._history_limit)
        async with self.db.session_factory() as session:
            entries = await LedgerEntryRepository(session).list_for_user(
                user_id, limit=effective_limit
            )
        return [TradeHistoryItem.from_entry(entry) for entry in entries]

    def get_deletion_audits(
        self, user_id: str | None = None, limit: int | None = None
    ) -> list[DeletionAuditEvent]:
        """Recorded administrative deletions, most recent first."""
        events = self.audit_logger.read_events(user_id)
        return events[: normalize_limit(limit, self._history_limit)]

    async def get_reputation_summary(self, user_id: str) -> ReputationSummary:
        """A trader's stored summary plus their competition rank."""
        async with self.db.session_factory() as session:
            profiles = ProfileRepository(session)
            profile = await profiles.get(user_id)
            if profile is None:
                raise ProfileNotFoundError(user_id)

            summary = await profiles.get_reputation_fields(user_id)
            rank = await RankingEngine(session).get_user_rank(user_id)

        return ReputationSummary(
            user_id=profile.user_id,
            name=profile.name,
            summary=summary,
            is_profitable=summary.is_profitable if summary is not None else False,
            rank=rank,
        )
