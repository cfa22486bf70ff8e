"""
Shared test fixtures.

PHILOSOPHY: Use REAL objects wherever possible. Only mock at failure-injection seams.
- Real Pydantic models (not dicts pretending to be models)
- Real SQLite (in-memory or tmp file) for repository and service tests
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest

from trading_ledger.data import DatabaseManager
from trading_ledger.ledger.audit import DeletionAuditLogger
from trading_ledger.ledger.models import PortfolioType, PositionSnapshot
from trading_ledger.ledger.service import LedgerService

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable
    from pathlib import Path

    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Database Fixtures (REAL SQLite, not mocks)
# ============================================================================
@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create real async in-memory SQLite engine for testing."""
    from sqlalchemy.ext.asyncio import create_async_engine

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
    )
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(tmp_path: Path) -> AsyncGenerator[DatabaseManager, None]:
    """File-backed database manager with schema created."""
    async with DatabaseManager(tmp_path / "ledger.db") as manager:
        await manager.create_tables()
        yield manager


@pytest.fixture
def audit_log_path(tmp_path: Path) -> Path:
    """Deletion audit log location inside the test's tmp dir."""
    return tmp_path / "deletion_audit.jsonl"


@pytest.fixture
def service(db: DatabaseManager, audit_log_path: Path) -> LedgerService:
    """Ledger service over the test database."""
    return LedgerService(db, audit_logger=DeletionAuditLogger(audit_log_path))


# ============================================================================
# Domain Object Builders (create REAL objects, not dicts)
# ============================================================================
@pytest.fixture
def make_snapshot() -> Callable[..., PositionSnapshot]:
    """Factory to create REAL PositionSnapshot objects with sensible defaults."""

    def _make(
        ticker: str = "AAPL",
        shares: float = 10,
        entry_price: float = 10.0,
        portfolio_type: PortfolioType = PortfolioType.SOLID,
        portfolio_id: str = "pf-1",
        **overrides: Any,
    ) -> PositionSnapshot:
        data: dict[str, Any] = {
            "ticker": ticker,
            "shares": shares,
            "entry_price": entry_price,
            "portfolio_type": portfolio_type,
            "portfolio_id": portfolio_id,
            "open_date": datetime(2026, 1, 2, 14, 30, tzinfo=UTC),
        }
        data.update(overrides)
        return PositionSnapshot.model_validate(data)

    return _make
