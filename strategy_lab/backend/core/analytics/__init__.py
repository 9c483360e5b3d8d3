"""Analytics over simulated trades and equity curves."""

from strategy_lab.backend.core.analytics.models import (
    DrawdownPoint,
    EquityPoint,
    MonthlyReturn,
    SimulatedTrade,
    StrategyMetrics,
)
from strategy_lab.backend.core.analytics.metrics import compute_metrics, monthly_returns, percentile

__all__ = [
    "DrawdownPoint",
    "EquityPoint",
    "MonthlyReturn",
    "SimulatedTrade",
    "StrategyMetrics",
    "compute_metrics",
    "monthly_returns",
    "percentile",
]
