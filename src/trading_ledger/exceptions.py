"""Ledger errors and exception types."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trading_ledger.data.models import LedgerEntry


class LedgerError(Exception):
    """Base exception for trading ledger errors."""


class CloseEventValidationError(LedgerError):
    """Malformed position-close event. Nothing was persisted."""

    def __init__(self, message: str, *, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class PersistenceError(LedgerError):
    """Storage failure while reading or writing ledger data."""


class LedgerWriteError(PersistenceError):
    """The ledger entry could not be written. Nothing was recorded; safe to retry."""

    def __init__(self, user_id: str, ticker: str) -> None:
        super().__init__(f"Failed to record closed position {ticker} for user {user_id}")
        self.user_id = user_id
        self.ticker = ticker


class SummaryRefreshError(PersistenceError):
    """The trade was recorded but the user's performance summary was not refreshed.

    The committed entry is available as `entry`. Re-running the recompute (or the next
    close for the same user) brings the summary back in line with the ledger.
    """

    def __init__(self, entry: LedgerEntry) -> None:
        super().__init__(
            f"Trade {entry.ticker} was recorded (entry {entry.id}) but the performance "
            f"summary for user {entry.user_id} was not refreshed"
        )
        self.entry = entry


class ProfileNotFoundError(LedgerError):
    """No trader profile exists for the given user."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Trader profile not found: {user_id}")
        self.user_id = user_id


class LedgerEntryNotFoundError(LedgerError):
    """No ledger entry exists with the given id."""

    def __init__(self, entry_id: int) -> None:
        super().__init__(f"Ledger entry not found: {entry_id}")
        self.entry_id = entry_id


class LedgerDeleteError(PersistenceError):
    """The ledger entry could not be deleted. It is still recorded and no audit line exists."""

    def __init__(self, entry_id: int) -> None:
        super().__init__(f"Failed to delete ledger entry {entry_id}; the entry is unchanged")
        self.entry_id = entry_id
