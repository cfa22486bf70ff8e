from __future__ import annotations

import pytest

from trading_ledger.ledger.aggregator import compute_summary


def test_mixed_wins_and_losses() -> None:
    summary = compute_summary([100.0, -50.0, 30.0])

    assert summary is not None
    assert summary.total_realized_pnl == pytest.approx(80.0)
    assert summary.total_positions_closed == 3
    assert summary.win_rate == pytest.approx(66.67)
    assert summary.average_win == pytest.approx(65.0)
    assert summary.average_loss == pytest.approx(-50.0)
    assert summary.best_trade == pytest.approx(100.0)
    assert summary.worst_trade == pytest.approx(-50.0)
    assert summary.is_profitable is True


def test_empty_ledger_has_no_summary() -> None:
    assert compute_summary([]) is None


def test_all_losses() -> None:
    summary = compute_summary([-10.0, -30.0])

    assert summary is not None
    assert summary.win_rate == 0.0
    assert summary.average_win == 0.0
    assert summary.average_loss == pytest.approx(-20.0)
    assert summary.best_trade == pytest.approx(-10.0)
    assert summary.worst_trade == pytest.approx(-30.0)
    assert summary.is_profitable is False


def test_all_wins_has_zero_average_loss() -> None:
    summary = compute_summary([5.0, 15.0])

    assert summary is not None
    assert summary.win_rate == pytest.approx(100.0)
    assert summary.average_loss == 0.0
    assert summary.average_win == pytest.approx(10.0)


def test_breakeven_trade_is_neither_win_nor_loss() -> None:
    summary = compute_summary([0.0, 20.0, -10.0, 0.0])

    assert summary is not None
    assert summary.total_positions_closed == 4
    assert summary.win_rate == pytest.approx(25.0)
    assert summary.average_win == pytest.approx(20.0)
    assert summary.average_loss == pytest.approx(-10.0)


def test_single_breakeven_trade_is_not_profitable() -> None:
    summary = compute_summary([0.0])

    assert summary is not None
    assert summary.win_rate == 0.0
    assert summary.best_trade == 0.0
    assert summary.worst_trade == 0.0
    assert summary.is_profitable is False


def test_win_rate_and_averages_are_rounded_to_two_places() -> None:
    summary = compute_summary([1.0, 1.0, 2.0 / 3.0 * -1])

    assert summary is not None
    assert summary.win_rate == pytest.approx(66.67)
    assert summary.average_loss == pytest.approx(-0.67)
    assert summary.worst_trade == pytest.approx(-0.67)


def test_total_is_not_rounded() -> None:
    summary = compute_summary([0.005, 0.001])

    assert summary is not None
    assert summary.total_realized_pnl == pytest.approx(0.006)


def test_summary_is_order_independent() -> None:
    pnls = [0.1, 0.2, -0.3, 1e10, -1e10, 7.25]

    forward = compute_summary(pnls)
    backward = compute_summary(list(reversed(pnls)))

    assert forward == backward


def test_summary_is_deterministic() -> None:
    pnls = [12.5, -3.25, 40.0]
    assert compute_summary(pnls) == compute_summary(pnls)


def test_accepts_generators() -> None:
    summary = compute_summary(pnl for pnl in (1.0, 2.0))

    assert summary is not None
    assert summary.total_positions_closed == 2
