"""Data layer for persistent storage of ledger entries and trader profiles."""

from trading_ledger.data.database import DatabaseManager
from trading_ledger.data.models import Base, LedgerEntry, TraderProfile
from trading_ledger.data.repositories import LedgerEntryRepository, ProfileRepository

__all__ = [
    "Base",
    "DatabaseManager",
    "LedgerEntry",
    "LedgerEntryRepository",
    "ProfileRepository",
    "TraderProfile",
]
