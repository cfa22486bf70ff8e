"""JSONL audit logging for administrative ledger deletions."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from trading_ledger.ledger.models import DeletionAuditEvent

if TYPE_CHECKING:
    from pathlib import Path


class DeletionAuditLogger:
    """Append-only JSONL log with one line per deleted ledger entry."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        """Return the JSONL audit log path."""
        return self._path

    def write(self, event: DeletionAuditEvent) -> None:
        """Append one audit event as a single JSONL line."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = event.model_dump(mode="json")
        with self._path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload) + "\n")

    def read_events(self, user_id: str | None = None) -> list[DeletionAuditEvent]:
        """Recorded deletions, most recent first, optionally for one user only."""
        if not self._path.exists():
            return []
        with self._path.open(encoding="utf-8") as f:
            events = [DeletionAuditEvent.model_validate_json(line) for line in f if line.strip()]
        if user_id is not None:
            events = [event for event in events if event.user_id == user_id]
        return sorted(events, key=lambda event: event.timestamp, reverse=True)
