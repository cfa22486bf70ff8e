"""
Centralized path defaults for the trading ledger.

All paths are expressed relative to the current working directory. Every default can be
overridden via environment variables (see `config.py`) or CLI options.
"""

from pathlib import Path

DEFAULT_DATA_DIR = Path("data")
DEFAULT_DB_PATH = DEFAULT_DATA_DIR / "ledger.db"
DEFAULT_DELETION_AUDIT_LOG = DEFAULT_DATA_DIR / "deletion_audit.jsonl"

__all__ = [
    "DEFAULT_DATA_DIR",
    "DEFAULT_DB_PATH",
    "DEFAULT_DELETION_AUDIT_LOG",
]
