from __future__ import annotations

from datetime import UTC, datetime, timedelta

from trading_ledger.ledger.audit import DeletionAuditLogger
from trading_ledger.ledger.models import DeletionAuditEvent

T0 = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


def _event(entry_id: int, user_id: str = "alice", minutes: int = 0) -> DeletionAuditEvent:
    return DeletionAuditEvent(
        timestamp=T0 + timedelta(minutes=minutes),
        entry_id=entry_id,
        user_id=user_id,
        ticker="AAPL",
        amount=12.5,
        portfolio_id="pf-1",
        deleted_by="admin",
        reason="duplicate",
        before_snapshot={"id": entry_id, "realized_pnl": 12.5},
    )


def test_write_appends_jsonl_lines(tmp_path) -> None:
    path = tmp_path / "audit" / "deletions.jsonl"
    audit = DeletionAuditLogger(path)

    audit.write(_event(1))
    audit.write(_event(2, minutes=5))

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2

    events = audit.read_events()
    assert [e.entry_id for e in events] == [2, 1]
    assert events[1].timestamp == T0
    assert events[1].before_snapshot == {"id": 1, "realized_pnl": 12.5}


def test_read_events_filters_by_user(tmp_path) -> None:
    audit = DeletionAuditLogger(tmp_path / "deletions.jsonl")
    audit.write(_event(1, user_id="alice"))
    audit.write(_event(2, user_id="bob", minutes=1))

    assert [e.entry_id for e in audit.read_events("bob")] == [2]
    assert audit.read_events("carol") == []


def test_read_events_missing_file(tmp_path) -> None:
    audit = DeletionAuditLogger(tmp_path / "missing.jsonl")

    assert audit.read_events() == []
    assert audit.path == tmp_path / "missing.jsonl"
