from __future__ import annotations

from pathlib import Path

import pytest

from trading_ledger.config import LedgerConfig

_ENV_VARS = (
    "TRADING_LEDGER_DB_PATH",
    "TRADING_LEDGER_AUDIT_LOG",
    "TRADING_LEDGER_LEADERBOARD_LIMIT",
    "TRADING_LEDGER_HISTORY_LIMIT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = LedgerConfig.from_env()

    assert config.db_path == Path("data/ledger.db")
    assert config.audit_log_path == Path("data/deletion_audit.jsonl")
    assert config.leaderboard_limit == 50
    assert config.history_limit == 50


def test_overrides(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("TRADING_LEDGER_DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("TRADING_LEDGER_AUDIT_LOG", str(tmp_path / "audit.jsonl"))
    monkeypatch.setenv("TRADING_LEDGER_LEADERBOARD_LIMIT", "10")
    monkeypatch.setenv("TRADING_LEDGER_HISTORY_LIMIT", " 5 ")

    config = LedgerConfig.from_env()

    assert config.db_path == tmp_path / "x.db"
    assert config.audit_log_path == tmp_path / "audit.jsonl"
    assert config.leaderboard_limit == 10
    assert config.history_limit == 5


def test_blank_limit_uses_default(monkeypatch) -> None:
    monkeypatch.setenv("TRADING_LEDGER_LEADERBOARD_LIMIT", "  ")

    assert LedgerConfig.from_env().leaderboard_limit == 50


@pytest.mark.parametrize("raw", ["0", "-1", "ten"])
def test_invalid_limit_raises(monkeypatch, raw) -> None:
    monkeypatch.setenv("TRADING_LEDGER_HISTORY_LIMIT", raw)

    with pytest.raises(ValueError, match="TRADING_LEDGER_HISTORY_LIMIT"):
        LedgerConfig.from_env()
