"""Core services for the Strategy Lab backend."""

from strategy_lab.backend.core.config_loader import LabConfigLoader
from strategy_lab.backend.core.strategy_builder import (
    BlockCatalog,
    InterchangeFormatError,
    StrategyCompiler,
    StrategyDslSerializer,
    StrategyValidator,
    ValidationConfig,
)
from strategy_lab.backend.core.analytics import compute_metrics, monthly_returns
from strategy_lab.backend.core.simulation import (
    BacktestResultCache,
    MonteCarloOrchestrator,
    PriceModel,
    SimulationEngine,
    SimulationEngineConfig,
)

__all__ = [
    "LabConfigLoader",
    "BlockCatalog",
    "InterchangeFormatError",
    "StrategyCompiler",
    "StrategyDslSerializer",
    "StrategyValidator",
    "ValidationConfig",
    "compute_metrics",
    "monthly_returns",
    "BacktestResultCache",
    "MonteCarloOrchestrator",
    "PriceModel",
    "SimulationEngine",
    "SimulationEngineConfig",
]
