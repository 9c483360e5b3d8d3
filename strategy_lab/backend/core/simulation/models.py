"""Pydantic models for simulation requests and results."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from strategy_lab.backend.core.base_models import ConfigModel, WireModel
from strategy_lab.backend.core.analytics.models import (
    DrawdownPoint,
    EquityPoint,
    MonthlyReturn,
    SimulatedTrade,
    StrategyMetrics,
)
from strategy_lab.backend.core.utils.datetime import ensure_utc_datetime

VolatilityLevel = Literal["low", "medium", "high"]
TrendKind = Literal["bull", "bear", "sideways"]
LiquidityLevel = Literal["low", "medium", "high"]
PriceDataSource = Literal["historical", "synthetic"]
BacktestStatus = Literal["completed", "timed_out", "cancelled"]
Horizon = Literal["short", "medium", "long"]


class MarketConditions(WireModel):
    """Discrete market regime used by the synthetic price model."""

    volatility: VolatilityLevel = "medium"
    trend: TrendKind = "sideways"
    liquidity: LiquidityLevel = "medium"


class SimulationConfig(WireModel):
    """Parameters of a single backtest run."""

    start_date: datetime
    end_date: datetime
    initial_capital: float = Field(default=10_000.0, gt=0)
    price_data_source: PriceDataSource = "synthetic"
    slippage_model: Literal["fixed", "variable", "realistic"] = "realistic"
    gas_model: Literal["fixed", "historical"] = "historical"
    market_conditions: Optional[MarketConditions] = None
    monte_carlo_runs: Optional[int] = None
    seed: Optional[int] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _ensure_dates_timezone(cls, value: datetime | str) -> datetime:
        return ensure_utc_datetime(value)

    @model_validator(mode="after")
    def _check_range(self) -> "SimulationConfig":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class PricePoint(WireModel):
    """OHLCV bar returned by a historical price provider."""

    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @field_validator("timestamp", mode="before")
    @classmethod
    def _ensure_timestamp_timezone(cls, value: datetime | str) -> datetime:
        return ensure_utc_datetime(value)


class PriceTick(WireModel):
    """One step of the merged price series: a price per token plus gas."""

    timestamp: datetime
    prices: Dict[str, float] = Field(default_factory=dict)
    volume: float = 0.0
    gas_price: float = 0.05


class BacktestResult(WireModel):
    """Full backtest result payload."""

    model_config = ConfigDict(frozen=True)

    id: str
    strategy_id: str
    config: SimulationConfig
    started_at: datetime
    completed_at: datetime
    status: BacktestStatus = "completed"
    metrics: StrategyMetrics
    trades: List[SimulatedTrade] = Field(default_factory=list)
    equity_curve: List[EquityPoint] = Field(default_factory=list)
    drawdown_curve: List[DrawdownPoint] = Field(default_factory=list)
    monthly_returns: List[MonthlyReturn] = Field(default_factory=list)


class MonteCarloResult(WireModel):
    model_config = ConfigDict(frozen=True)

    runs: int
    median_return: float
    avg_return: float
    percentile5_return: float
    percentile95_return: float
    median_drawdown: float
    max_drawdown: float
    avg_sharpe: float
    results: List[BacktestResult] = Field(default_factory=list)


class SandboxResult(WireModel):
    success: bool
    trades: int
    final_equity: float
    pnl: float
    issues: List[str] = Field(default_factory=list)


class PerformanceEstimate(WireModel):
    expected_return: float
    best_case: float
    worst_case: float
    confidence: float
    sharpe_ratio: float
    max_drawdown: float
    win_rate: float


class SimulationEngineConfig(ConfigModel):
    """Engine defaults, loadable from ``configs/lab/simulation.yaml``."""

    data_source: PriceDataSource = "synthetic"
    enable_cache: bool = True
    max_duration_seconds: float = 300.0
    default_monte_carlo_runs: int = Field(default=100, gt=0)
    max_workers: int = Field(default=4, gt=0)
    quote_token: str = "USDT"
    base_price: float = 5.0
    price_floor: float = 0.01
    volatility_levels: Dict[str, float] = Field(
        default_factory=lambda: {"low": 0.005, "medium": 0.015, "high": 0.03}
    )
    trend_drifts: Dict[str, float] = Field(default_factory=lambda: {"bull": 0.0005, "bear": -0.0005, "sideways": 0.0})
    default_prices: Dict[str, float] = Field(
        default_factory=lambda: {"TON": 5.0, "USDT": 1.0, "USDC": 1.0, "ETH": 2500.0}
    )

    @classmethod
    def from_yaml_config(cls, data: Dict[str, object]) -> "SimulationEngineConfig":
        return cls.model_validate(data.get("simulation", data))


__all__ = [
    "VolatilityLevel",
    "TrendKind",
    "LiquidityLevel",
    "PriceDataSource",
    "BacktestStatus",
    "Horizon",
    "MarketConditions",
    "SimulationConfig",
    "PricePoint",
    "PriceTick",
    "SimulatedTrade",
    "EquityPoint",
    "DrawdownPoint",
    "MonthlyReturn",
    "StrategyMetrics",
    "BacktestResult",
    "MonteCarloResult",
    "SandboxResult",
    "PerformanceEstimate",
    "SimulationEngineConfig",
]
