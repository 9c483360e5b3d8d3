"""Monte Carlo orchestration over randomized market regimes."""

from __future__ import annotations

import logging
import statistics
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Protocol, Sequence

import numpy as np

from strategy_lab.backend.core.analytics.metrics import percentile
from strategy_lab.backend.core.simulation.models import (
    BacktestResult,
    MarketConditions,
    MonteCarloResult,
    SimulationConfig,
)
from strategy_lab.backend.core.strategy_builder.models import Strategy

logger = logging.getLogger(__name__)

VOLATILITY_LEVELS = ("low", "medium", "high")
TRENDS = ("bull", "bear", "sideways")
LIQUIDITY_LEVELS = ("low", "medium", "high")


class BacktestRunner(Protocol):
    def run_backtest(self, strategy: Strategy, config: SimulationConfig, use_cache: bool = True) -> BacktestResult:
        """Execute a single backtest."""


def draw_run_configs(base: SimulationConfig, runs: int, seed: Optional[int] = None) -> List[SimulationConfig]:
    """Derive ``runs`` synthetic configs, each with its own regime and seed, from one master seed."""

    children = np.random.SeedSequence(seed).spawn(runs)
    configs: List[SimulationConfig] = []
    for child in children:
        rng = np.random.default_rng(child)
        conditions = MarketConditions(
            volatility=VOLATILITY_LEVELS[int(rng.integers(0, 3))],
            trend=TRENDS[int(rng.integers(0, 3))],
            liquidity=LIQUIDITY_LEVELS[int(rng.integers(0, 3))],
        )
        configs.append(
            base.model_copy(
                update={
                    "price_data_source": "synthetic",
                    "market_conditions": conditions,
                    "seed": int(rng.integers(0, 2**32)),
                }
            )
        )
    return configs


def aggregate_results(results: Sequence[BacktestResult]) -> MonteCarloResult:
    """Aggregate per-run returns and drawdowns using discrete (non-interpolated) percentiles."""

    returns = sorted(result.metrics.total_return for result in results)
    drawdowns = sorted(result.metrics.max_drawdown for result in results)
    return MonteCarloResult(
        runs=len(results),
        median_return=returns[len(returns) // 2],
        avg_return=statistics.fmean(returns),
        percentile5_return=percentile(returns, 0.05),
        percentile95_return=percentile(returns, 0.95),
        median_drawdown=drawdowns[len(drawdowns) // 2],
        max_drawdown=max(drawdowns),
        avg_sharpe=statistics.fmean(result.metrics.sharpe_ratio for result in results),
        results=list(results),
    )


class MonteCarloOrchestrator:
    """Runs independent backtests on a bounded thread pool and aggregates them."""

    def __init__(self, runner: BacktestRunner, max_workers: int = 4) -> None:
        self.runner = runner
        self.max_workers = max_workers

    def run(
        self,
        strategy: Strategy,
        config: SimulationConfig,
        runs: int,
        seed: Optional[int] = None,
    ) -> MonteCarloResult:
        if runs <= 0:
            raise ValueError("runs must be positive")

        run_configs = draw_run_configs(config, runs, seed if seed is not None else config.seed)
        logger.info("Monte Carlo started | strategy=%s runs=%d workers=%d", strategy.id, runs, self.max_workers)
        started = time.monotonic()

        # Runs share one cache key, so each one bypasses the cache.
        with ThreadPoolExecutor(max_workers=min(self.max_workers, runs)) as executor:
            results = list(
                executor.map(lambda run_config: self.runner.run_backtest(strategy, run_config, use_cache=False), run_configs)
            )

        aggregate = aggregate_results(results)
        logger.info(
            "Monte Carlo finished | strategy=%s runs=%d median_return=%.4f elapsed=%.2fs",
            strategy.id,
            runs,
            aggregate.median_return,
            time.monotonic() - started,
        )
        return aggregate


__all__ = ["MonteCarloOrchestrator", "BacktestRunner", "aggregate_results", "draw_run_configs"]
