"""Repository classes for data access."""

from trading_ledger.data.repositories.ledger import LedgerEntryRepository
from trading_ledger.data.repositories.profiles import ProfileRepository

__all__ = [
    "LedgerEntryRepository",
    "ProfileRepository",
]
