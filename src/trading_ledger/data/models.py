"""SQLAlchemy ORM models for the trade ledger and trader profiles."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class LedgerEntry(Base):
    """Immutable record of one closed position's realized outcome.

    Rows are append-only. The financial fields are computed once when the position is
    closed and never updated; the only mutation outside creation is an administrative
    whole-row delete, which must be followed by a summary recompute for the user.
    """

    __tablename__ = "ledger_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    ticker: Mapped[str] = mapped_column(String(32), nullable=False)
    shares: Mapped[float] = mapped_column(Float, nullable=False)
    entry_price: Mapped[float] = mapped_column(Float, nullable=False)
    exit_price: Mapped[float] = mapped_column(Float, nullable=False)

    # USD amount made/lost, and the same move as a percentage of entry price
    realized_pnl: Mapped[float] = mapped_column(Float, nullable=False)
    realized_pnl_percent: Mapped[float] = mapped_column(Float, nullable=False)

    entry_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    exit_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    portfolio_type: Mapped[str] = mapped_column(String(10), nullable=False)  # solid/risky
    portfolio_id: Mapped[str] = mapped_column(String(64), nullable=False)
    exit_reason: Mapped[str] = mapped_column(String(20), nullable=False)
    action: Mapped[str] = mapped_column(String(4), default="SELL", nullable=False)  # BUY/SELL
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        Index("idx_ledger_entries_user_exit", "user_id", "exit_date"),
        Index("idx_ledger_entries_user_pnl", "user_id", "realized_pnl"),
        Index("idx_ledger_entries_ticker", "ticker"),
        Index("idx_ledger_entries_exit_reason", "exit_reason"),
        Index("idx_ledger_entries_portfolio_type", "portfolio_type"),
    )


class TraderProfile(Base):
    """User profile record holding the derived performance summary.

    The summary columns are owned by the aggregator: they are NULL until the user's first
    recompute and are only ever overwritten as a whole.
    """

    __tablename__ = "trader_profiles"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)

    total_realized_pnl: Mapped[float | None] = mapped_column(Float, nullable=True)
    total_positions_closed: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    win_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    average_win: Mapped[float | None] = mapped_column(Float, nullable=True)
    average_loss: Mapped[float | None] = mapped_column(Float, nullable=True)
    best_trade: Mapped[float | None] = mapped_column(Float, nullable=True)
    worst_trade: Mapped[float | None] = mapped_column(Float, nullable=True)
    summary_updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    __table_args__ = (
        Index("idx_trader_profiles_ranking", "total_positions_closed", "total_realized_pnl"),
    )
