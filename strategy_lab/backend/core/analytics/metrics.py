"""Performance statistics over simulated trades and equity curves."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Sequence

import numpy as np
import pandas as pd

from strategy_lab.backend.core.analytics.models import (
    EquityPoint,
    MonthlyReturn,
    SimulatedTrade,
    StrategyMetrics,
)

DAILY_RISK_FREE_RATE = 0.03 / 365
ANNUALIZATION_FACTOR = math.sqrt(365)


def max_drawdown(values: Sequence[float], initial_peak: float) -> float:
    """Largest peak-to-trough decline in percent, clamped to [0, 100]."""

    peak = initial_peak
    worst = 0.0
    for value in values:
        peak = max(peak, value)
        if peak > 0:
            worst = max(worst, (peak - value) / peak * 100)
    return float(min(worst, 100.0))


def profit_factor(pnls: np.ndarray) -> float:
    gross_profit = float(np.sum(pnls[pnls > 0])) if pnls.size else 0.0
    gross_loss = abs(float(np.sum(pnls[pnls < 0]))) if pnls.size else 0.0
    if gross_loss > 0:
        return gross_profit / gross_loss
    return float("inf") if gross_profit > 0 else 0.0


def compute_metrics(
    trades: Sequence[SimulatedTrade],
    equity_curve: Sequence[EquityPoint],
    initial_capital: float,
    start: datetime,
    end: datetime,
    trigger_firings: int = 0,
) -> StrategyMetrics:
    """Compute return, risk and trade statistics for a finished backtest.

    Args:
        trades: Executed trades in chronological order.
        equity_curve: One equity sample per processed tick.
        initial_capital: Capital at the start of the run, also the initial drawdown peak.
        start: Start of the simulated period.
        end: End of the simulated period, used to annualise the total return.
        trigger_firings: Number of ticks on which at least one trigger fired.

    Returns:
        StrategyMetrics; all zeros when no equity was recorded.
    """

    if not equity_curve:
        return StrategyMetrics(trigger_firings=trigger_firings)

    values = np.asarray([point.value for point in equity_curve], dtype=float)
    total_return = (values[-1] - initial_capital) / initial_capital * 100
    duration_days = (end - start).total_seconds() / 86_400
    annualized_return = total_return * (365 / duration_days) if duration_days > 0 else 0.0

    returns = np.diff(values) / values[:-1] if values.size > 1 else np.empty(0)
    returns = returns[np.isfinite(returns)]
    mean_return = float(np.mean(returns)) if returns.size else 0.0
    volatility = float(np.std(returns)) if returns.size else 0.0
    sharpe = (mean_return - DAILY_RISK_FREE_RATE) / volatility * ANNUALIZATION_FACTOR if volatility > 0 else 0.0

    negative = returns[returns < 0]
    downside = float(np.sqrt(np.mean(negative**2))) if negative.size else 0.0
    sortino = (mean_return - DAILY_RISK_FREE_RATE) / downside * ANNUALIZATION_FACTOR if downside > 0 else 0.0

    pnls = np.asarray([trade.pnl for trade in trades], dtype=float)
    win_rate = float(np.mean(pnls > 0)) if pnls.size else 0.0
    avg_trade_return = float(np.mean(pnls)) if pnls.size else 0.0

    return StrategyMetrics(
        total_return=float(total_return),
        annualized_return=float(annualized_return),
        sharpe_ratio=float(sharpe),
        sortino_ratio=float(sortino),
        max_drawdown=max_drawdown(values.tolist(), initial_capital),
        win_rate=win_rate,
        profit_factor=profit_factor(pnls),
        total_trades=len(trades),
        avg_trade_return=avg_trade_return,
        avg_holding_period=average_hours_between(trades),
        volatility=volatility * ANNUALIZATION_FACTOR * 100,
        trigger_firings=trigger_firings,
    )


def average_hours_between(trades: Sequence[SimulatedTrade]) -> float:
    if len(trades) < 2:
        return 0.0
    stamps = pd.Series([trade.timestamp for trade in trades])
    gaps = stamps.diff().dropna().dt.total_seconds() / 3600
    return float(gaps.mean())


def monthly_returns(equity_curve: Sequence[EquityPoint]) -> list[MonthlyReturn]:
    """Bucket the equity curve by (year, month) using each bucket's first and last sample."""

    if not equity_curve:
        return []
    frame = pd.DataFrame(
        {
            "timestamp": pd.to_datetime([point.timestamp for point in equity_curve], utc=True),
            "value": [point.value for point in equity_curve],
        }
    )
    stamps = frame["timestamp"]
    grouped = frame.groupby([stamps.dt.year.rename("year"), stamps.dt.month.rename("month")], sort=True)["value"]
    buckets = grouped.agg(["first", "last"])

    results: list[MonthlyReturn] = []
    for (year, month), row in buckets.iterrows():
        start_value = float(row["first"])
        change = (float(row["last"]) - start_value) / start_value * 100 if start_value else 0.0
        results.append(MonthlyReturn(year=int(year), month=int(month), return_=change))
    return results


def percentile(sorted_values: Sequence[float], fraction: float) -> float:
    """Discrete percentile: element at ``floor(n * fraction)``, no interpolation."""

    index = min(int(math.floor(len(sorted_values) * fraction)), len(sorted_values) - 1)
    return float(sorted_values[index])


__all__ = [
    "DAILY_RISK_FREE_RATE",
    "compute_metrics",
    "max_drawdown",
    "profit_factor",
    "average_hours_between",
    "monthly_returns",
    "percentile",
]
