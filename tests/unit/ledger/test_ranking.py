from __future__ import annotations

from trading_ledger.data.models import TraderProfile
from trading_ledger.ledger.ranking import (
    UNRANKED,
    is_eligible,
    normalize_limit,
    rank_leaderboard,
)


def _profile(user_id: str, pnl: float | None, closed: int = 1) -> TraderProfile:
    return TraderProfile(
        user_id=user_id,
        name=user_id.title(),
        total_realized_pnl=pnl,
        total_positions_closed=closed,
        win_rate=50.0 if closed else None,
        best_trade=pnl,
    )


def test_normalize_limit_defaults() -> None:
    assert normalize_limit(None) == 50
    assert normalize_limit(0) == 50
    assert normalize_limit(-3) == 50
    assert normalize_limit(10) == 10
    assert normalize_limit(0, default=25) == 25


def test_is_eligible_requires_a_closed_position() -> None:
    assert is_eligible(_profile("a", 10.0, closed=1))
    assert not is_eligible(_profile("b", None, closed=0))


def test_rank_leaderboard_assigns_dense_sequential_ranks() -> None:
    rows = rank_leaderboard(
        [_profile("bob", 50.0), _profile("alice", 80.0), _profile("carol", 50.0)], limit=3
    )

    assert [row.rank for row in rows] == [1, 2, 3]
    assert [row.user_id for row in rows] == ["alice", "bob", "carol"]
    assert [row.total_realized_pnl for row in rows] == [80.0, 50.0, 50.0]


def test_rank_leaderboard_is_stable_for_ties() -> None:
    rows = rank_leaderboard([_profile("z", 5.0), _profile("a", 5.0)])

    assert [row.user_id for row in rows] == ["z", "a"]


def test_rank_leaderboard_excludes_ineligible_profiles() -> None:
    rows = rank_leaderboard([_profile("active", -5.0), _profile("fresh", None, closed=0)])

    assert [row.user_id for row in rows] == ["active"]
    assert rows[0].is_profitable is False


def test_rank_leaderboard_truncates_to_limit() -> None:
    profiles = [_profile(f"u{i:02d}", float(i)) for i in range(10)]

    rows = rank_leaderboard(profiles, limit=3)

    assert [row.user_id for row in rows] == ["u09", "u08", "u07"]


def test_rank_leaderboard_non_positive_limit_uses_default() -> None:
    profiles = [_profile(f"u{i:02d}", float(i)) for i in range(60)]

    assert len(rank_leaderboard(profiles, limit=0)) == 50
    assert len(rank_leaderboard(profiles, limit=-1)) == 50


def test_leaderboard_row_fields() -> None:
    profile = _profile("alice", 80.0, closed=3)
    profile.avatar = "https://example.com/a.png"

    (row,) = rank_leaderboard([profile])

    assert row.name == "Alice"
    assert row.avatar == "https://example.com/a.png"
    assert row.total_positions_closed == 3
    assert row.win_rate == 50.0
    assert row.best_trade == 80.0
    assert row.is_profitable is True


def test_unranked_sentinel_is_zero() -> None:
    assert UNRANKED == 0
