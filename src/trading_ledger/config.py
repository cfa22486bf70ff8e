"""Runtime configuration for the trading ledger."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from trading_ledger.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_LEADERBOARD_LIMIT
from trading_ledger.paths import DEFAULT_DB_PATH, DEFAULT_DELETION_AUDIT_LOG


def _positive_int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None
    if value < 1:
        raise ValueError(f"{name} must be >= 1 (got {value})")
    return value


@dataclass(frozen=True)
class LedgerConfig:
    """Configuration for the ledger service and CLI."""

    db_path: Path = DEFAULT_DB_PATH
    audit_log_path: Path = DEFAULT_DELETION_AUDIT_LOG
    leaderboard_limit: int = DEFAULT_LEADERBOARD_LIMIT
    history_limit: int = DEFAULT_HISTORY_LIMIT

    @classmethod
    def from_env(cls) -> LedgerConfig:
        """Load configuration from environment variables.

        Optional:
            TRADING_LEDGER_DB_PATH: SQLite database file (default: data/ledger.db)
            TRADING_LEDGER_AUDIT_LOG: JSONL deletion audit log
                (default: data/deletion_audit.jsonl)
            TRADING_LEDGER_LEADERBOARD_LIMIT: Default leaderboard size (default: 50)
            TRADING_LEDGER_HISTORY_LIMIT: Default trading history size (default: 50)
        """
        db_path = os.environ.get("TRADING_LEDGER_DB_PATH") or str(DEFAULT_DB_PATH)
        audit_log_path = os.environ.get("TRADING_LEDGER_AUDIT_LOG") or str(
            DEFAULT_DELETION_AUDIT_LOG
        )

        return cls(
            db_path=Path(db_path),
            audit_log_path=Path(audit_log_path),
            leaderboard_limit=_positive_int_env(
                "TRADING_LEDGER_LEADERBOARD_LIMIT", DEFAULT_LEADERBOARD_LIMIT
            ),
            history_limit=_positive_int_env("TRADING_LEDGER_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT),
        )
