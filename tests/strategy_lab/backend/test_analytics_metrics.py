from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from strategy_lab.backend.core.analytics.metrics import (
    average_hours_between,
    compute_metrics,
    max_drawdown,
    monthly_returns,
    percentile,
    profit_factor,
)
from strategy_lab.backend.core.analytics.models import EquityPoint, SimulatedTrade
from strategy_lab.backend.core.strategy_builder.models import ActionKind


START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def build_trade(hours: float, pnl: float) -> SimulatedTrade:
    return SimulatedTrade(
        id=f"trade_{hours}",
        timestamp=START + timedelta(hours=hours),
        type=ActionKind.SWAP,
        from_token="USDT",
        to_token="TON",
        from_amount=100.0,
        to_amount=20.0,
        price=0.2,
        slippage=0.1,
        gas=0.05,
        pnl=pnl,
        cum_pnl=pnl,
    )


def build_curve(values) -> list:
    return [EquityPoint(timestamp=START + timedelta(hours=i), value=v) for i, v in enumerate(values)]


def test_max_drawdown_tracks_peak_to_trough() -> None:
    assert max_drawdown([100, 120, 90, 130], initial_peak=100) == pytest.approx(25.0)
    assert max_drawdown([100, 101, 105], initial_peak=100) == 0.0
    assert max_drawdown([50, 0], initial_peak=100) == 100.0
    assert max_drawdown([-10], initial_peak=100) == 100.0


def test_profit_factor_edges() -> None:
    assert profit_factor(np.array([10.0, -5.0])) == 2.0
    assert profit_factor(np.array([3.0])) == float("inf")
    assert profit_factor(np.array([-3.0])) == 0.0
    assert profit_factor(np.array([])) == 0.0


def test_compute_metrics_on_empty_curve_is_zero() -> None:
    metrics = compute_metrics([], [], 1000.0, START, START + timedelta(days=1), trigger_firings=3)
    assert metrics.total_return == 0
    assert metrics.sharpe_ratio == 0
    assert metrics.trigger_firings == 3


def test_compute_metrics_returns_and_trade_stats() -> None:
    curve = build_curve([1000, 1100, 1045, 1150])
    trades = [build_trade(0, 10.0), build_trade(2, -5.0), build_trade(6, 15.0)]
    metrics = compute_metrics(trades, curve, 1000.0, START, START + timedelta(days=73))

    returns = np.array([0.1, -0.05, 1150 / 1045 - 1])
    assert metrics.total_return == pytest.approx(15.0)
    assert metrics.annualized_return == pytest.approx(75.0)
    assert metrics.volatility == pytest.approx(np.std(returns) * np.sqrt(365) * 100)
    assert metrics.sharpe_ratio > 0
    assert metrics.sortino_ratio > metrics.sharpe_ratio
    assert metrics.max_drawdown == pytest.approx(5.0)
    assert metrics.win_rate == pytest.approx(2 / 3)
    assert metrics.profit_factor == pytest.approx(5.0)
    assert metrics.total_trades == 3
    assert metrics.avg_trade_return == pytest.approx(20 / 3)
    assert metrics.avg_holding_period == pytest.approx(3.0)


def test_flat_curve_has_zero_ratios() -> None:
    metrics = compute_metrics([], build_curve([500, 500, 500]), 500.0, START, START + timedelta(hours=3))
    assert metrics.sharpe_ratio == 0
    assert metrics.sortino_ratio == 0
    assert metrics.volatility == 0
    assert metrics.max_drawdown == 0


def test_average_hours_between_needs_two_trades() -> None:
    assert average_hours_between([]) == 0.0
    assert average_hours_between([build_trade(1, 1.0)]) == 0.0
    assert average_hours_between([build_trade(0, 1.0), build_trade(5, 1.0)]) == pytest.approx(5.0)


def test_monthly_returns_bucket_by_calendar_month() -> None:
    curve = [
        EquityPoint(timestamp=datetime(2023, 12, 31, 23, tzinfo=timezone.utc), value=100.0),
        EquityPoint(timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc), value=100.0),
        EquityPoint(timestamp=datetime(2024, 1, 31, tzinfo=timezone.utc), value=110.0),
        EquityPoint(timestamp=datetime(2024, 2, 1, tzinfo=timezone.utc), value=110.0),
        EquityPoint(timestamp=datetime(2024, 2, 29, tzinfo=timezone.utc), value=99.0),
    ]
    buckets = monthly_returns(curve)

    assert [(entry.year, entry.month) for entry in buckets] == [(2023, 12), (2024, 1), (2024, 2)]
    assert buckets[0].return_ == 0.0
    assert buckets[1].return_ == pytest.approx(10.0)
    assert buckets[2].return_ == pytest.approx(-10.0)
    assert buckets[1].to_wire() == {"year": 2024, "month": 1, "return": pytest.approx(10.0)}
    assert monthly_returns([]) == []


def test_percentile_is_discrete_index() -> None:
    values = [float(v) for v in range(1, 11)]
    assert percentile(values, 0.05) == 1.0
    assert percentile(values, 0.5) == 6.0
    assert percentile(values, 0.95) == 10.0
    assert percentile([4.0], 0.95) == 4.0
