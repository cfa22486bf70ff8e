"""Pydantic models for the ledger's inputs and query results."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from trading_ledger.data.models import LedgerEntry, TraderProfile


class PortfolioType(str, Enum):
    """Strategy classification of the portfolio a position belonged to."""

    SOLID = "solid"
    RISKY = "risky"


class ExitReason(str, Enum):
    """Why a position was closed."""

    MANUAL_DELETE = "manual_delete"
    STOP_LOSS = "stop_loss"
    TAKE_PROFIT = "take_profit"
    MANUAL_CLOSE = "manual_close"


class TradeAction(str, Enum):
    """Ledger entry action. Entries written by the close path are always SELL."""

    BUY = "BUY"
    SELL = "SELL"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class PositionSnapshot(BaseModel):
    """State of an open position at the moment it is closed.

    Supplied by the position store. Accepts both snake_case and the camelCase keys used by
    the portfolio documents (`entryPrice`, `portfolioType`, `portfolioId`, `openDate`).
    """

    model_config = ConfigDict(frozen=True)

    ticker: str = Field(min_length=1)
    shares: float = Field(gt=0)
    entry_price: float = Field(ge=0, validation_alias=AliasChoices("entry_price", "entryPrice"))
    portfolio_type: PortfolioType = Field(
        validation_alias=AliasChoices("portfolio_type", "portfolioType")
    )
    portfolio_id: str = Field(
        min_length=1, validation_alias=AliasChoices("portfolio_id", "portfolioId")
    )
    open_date: datetime = Field(
        validation_alias=AliasChoices("open_date", "openDate", "createdAt", "date")
    )

    @field_validator("ticker")
    @classmethod
    def _strip_ticker(cls, value: str) -> str:
        ticker = value.strip()
        if not ticker:
            raise ValueError("ticker must not be blank")
        return ticker

    @field_validator("open_date")
    @classmethod
    def _open_date_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class PerformanceSummary(BaseModel):
    """Per-user aggregate derived entirely from that user's ledger entries."""

    model_config = ConfigDict(frozen=True)

    total_realized_pnl: float
    total_positions_closed: int
    win_rate: float
    average_win: float
    average_loss: float
    best_trade: float
    worst_trade: float

    @property
    def is_profitable(self) -> bool:
        return self.total_realized_pnl > 0


class LeaderboardRow(BaseModel):
    """One ranked leaderboard line. Built per request, never stored."""

    model_config = ConfigDict(frozen=True)

    rank: int
    user_id: str
    name: str
    avatar: str | None = None
    total_realized_pnl: float
    total_positions_closed: int
    win_rate: float
    best_trade: float
    is_profitable: bool

    @classmethod
    def from_profile(cls, profile: TraderProfile, *, rank: int) -> LeaderboardRow:
        total = profile.total_realized_pnl or 0.0
        return cls(
            rank=rank,
            user_id=profile.user_id,
            name=profile.name,
            avatar=profile.avatar,
            total_realized_pnl=total,
            total_positions_closed=profile.total_positions_closed,
            win_rate=profile.win_rate or 0.0,
            best_trade=profile.best_trade or 0.0,
            is_profitable=total > 0,
        )


class TradeHistoryItem(BaseModel):
    """Display shape of a ledger entry in a user's trading history."""

    model_config = ConfigDict(frozen=True)

    id: int
    ticker: str
    shares: float
    entry_price: float
    exit_price: float
    realized_pnl: float
    realized_pnl_percent: float
    entry_date: datetime
    exit_date: datetime
    portfolio_type: PortfolioType
    exit_reason: ExitReason
    is_profitable: bool

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> TradeHistoryItem:
        return cls(
            id=entry.id,
            ticker=entry.ticker,
            shares=entry.shares,
            entry_price=entry.entry_price,
            exit_price=entry.exit_price,
            realized_pnl=entry.realized_pnl,
            realized_pnl_percent=entry.realized_pnl_percent,
            entry_date=_as_utc(entry.entry_date),
            exit_date=_as_utc(entry.exit_date),
            portfolio_type=PortfolioType(entry.portfolio_type),
            exit_reason=ExitReason(entry.exit_reason),
            is_profitable=entry.realized_pnl > 0,
        )


class ReputationSummary(BaseModel):
    """A user's stored performance summary together with their competition rank."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    name: str
    summary: PerformanceSummary | None
    is_profitable: bool
    rank: int


class DeletionAuditEvent(BaseModel):
    """Append-only JSONL record written before a ledger entry is deleted."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    entry_id: int
    user_id: str
    ticker: str
    amount: float
    portfolio_id: str
    deleted_by: str
    reason: str | None = None
    before_snapshot: dict[str, Any]
