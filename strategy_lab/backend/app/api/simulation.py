"""Simulation endpoints: backtests, Monte Carlo, sandbox runs and estimates."""

from typing import Optional

from fastapi import APIRouter
from pydantic import Field

from strategy_lab.backend.app.api.strategy_builder import catalog
from strategy_lab.backend.core.base_models import WireModel
from strategy_lab.backend.core.config_loader import LabConfigLoader
from strategy_lab.backend.core.simulation import (
    BacktestResult,
    MonteCarloResult,
    PerformanceEstimate,
    SandboxResult,
    SimulationConfig,
    SimulationEngine,
    SimulationEngineConfig,
)
from strategy_lab.backend.core.simulation.models import Horizon
from strategy_lab.backend.core.strategy_builder import Strategy
from strategy_lab.backend.settings import get_settings

router = APIRouter(prefix="/simulation", tags=["simulation"])

settings = get_settings()

engine = SimulationEngine(
    SimulationEngineConfig.from_yaml_config(LabConfigLoader().load_optional(settings.simulation_config_name)),
    catalog,
)


class BacktestRequest(WireModel):
    strategy: Strategy
    config: SimulationConfig


class MonteCarloRequest(BacktestRequest):
    runs: Optional[int] = Field(default=None, gt=0, le=1000)
    seed: Optional[int] = None


class SandboxRequest(WireModel):
    strategy: Strategy
    duration_hours: int = Field(default=24, gt=0, le=24 * 30)
    seed: Optional[int] = None


class EstimateRequest(WireModel):
    strategy: Strategy
    horizon: Horizon = "medium"
    seed: Optional[int] = None


@router.post("/backtest", response_model=BacktestResult)
def run_backtest(payload: BacktestRequest) -> BacktestResult:
    """Run a single backtest."""

    return engine.run_backtest(payload.strategy, payload.config)


@router.post("/monte-carlo", response_model=MonteCarloResult)
def run_monte_carlo(payload: MonteCarloRequest) -> MonteCarloResult:
    return engine.run_monte_carlo(payload.strategy, payload.config, runs=payload.runs, seed=payload.seed)


@router.post("/sandbox", response_model=SandboxResult)
def run_sandbox(payload: SandboxRequest) -> SandboxResult:
    return engine.run_sandbox(payload.strategy, duration_hours=payload.duration_hours, seed=payload.seed)


@router.post("/estimate", response_model=PerformanceEstimate)
def estimate_performance(payload: EstimateRequest) -> PerformanceEstimate:
    """Estimate expected return and confidence over a fixed horizon."""

    return engine.estimate_performance(payload.strategy, payload.horizon, seed=payload.seed)


__all__ = ["router"]
