"""Simulation core: price model, backtest engine and Monte Carlo orchestration."""

from strategy_lab.backend.core.simulation.models import (
    BacktestResult,
    MarketConditions,
    MonteCarloResult,
    PerformanceEstimate,
    PricePoint,
    PriceTick,
    SandboxResult,
    SimulationConfig,
    SimulationEngineConfig,
)
from strategy_lab.backend.core.simulation.cache import BacktestResultCache
from strategy_lab.backend.core.simulation.price_model import PriceDataProvider, PriceModel
from strategy_lab.backend.core.simulation.monte_carlo import MonteCarloOrchestrator
from strategy_lab.backend.core.simulation.engine import SimulationEngine

__all__ = [
    "BacktestResult",
    "MarketConditions",
    "MonteCarloResult",
    "PerformanceEstimate",
    "PricePoint",
    "PriceTick",
    "SandboxResult",
    "SimulationConfig",
    "SimulationEngineConfig",
    "BacktestResultCache",
    "PriceDataProvider",
    "PriceModel",
    "MonteCarloOrchestrator",
    "SimulationEngine",
]
