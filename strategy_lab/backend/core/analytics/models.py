"""Models for trade and equity statistics."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from strategy_lab.backend.core.base_models import WireModel
from strategy_lab.backend.core.strategy_builder.models import ActionKind


class SimulatedTrade(WireModel):
    id: str
    timestamp: datetime
    type: ActionKind
    from_token: str
    to_token: str
    from_amount: float
    to_amount: float
    price: float
    slippage: float
    gas: float
    pnl: float
    cum_pnl: float


class EquityPoint(WireModel):
    timestamp: datetime
    value: float


class DrawdownPoint(WireModel):
    timestamp: datetime
    drawdown: float


class MonthlyReturn(WireModel):
    year: int
    month: int
    return_: float = Field(alias="return")


class StrategyMetrics(WireModel):
    """Performance statistics; percentages are expressed in 0-100 units, win rate in 0-1."""

    total_return: float = 0.0
    annualized_return: float = 0.0
    sharpe_ratio: float = 0.0
    sortino_ratio: float = 0.0
    max_drawdown: float = 0.0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    total_trades: int = 0
    avg_trade_return: float = 0.0
    avg_holding_period: float = 0.0
    volatility: float = 0.0
    trigger_firings: int = 0


__all__ = ["SimulatedTrade", "EquityPoint", "DrawdownPoint", "MonthlyReturn", "StrategyMetrics"]
