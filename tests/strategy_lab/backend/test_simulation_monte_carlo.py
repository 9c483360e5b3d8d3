from datetime import datetime, timedelta, timezone

import pytest

from strategy_lab.backend.core.simulation.engine import SimulationEngine
from strategy_lab.backend.core.simulation.models import SimulationConfig, SimulationEngineConfig
from strategy_lab.backend.core.simulation.monte_carlo import MonteCarloOrchestrator, aggregate_results, draw_run_configs
from strategy_lab.backend.core.strategy_builder.block_catalog import BlockCatalog
from strategy_lab.backend.core.strategy_builder.models import Connection, Strategy


START = datetime(2024, 6, 1, tzinfo=timezone.utc)


def build_strategy() -> Strategy:
    catalog = BlockCatalog()
    trigger = catalog.create_block("trigger_schedule", "trigger")
    trigger.config["interval"] = 6 * 3600
    swap = catalog.create_block("action_swap", "swap")
    return Strategy(
        id="mc",
        name="Monte Carlo",
        blocks=[trigger, swap],
        connections=[
            Connection(id="c1", source_block_id="trigger", source_output_id="out", target_block_id="swap", target_input_id="in")
        ],
    )


def build_config(hours: int = 24) -> SimulationConfig:
    return SimulationConfig(start_date=START, end_date=START + timedelta(hours=hours), price_data_source="historical")


def test_monte_carlo_percentiles_are_ordered() -> None:
    result = SimulationEngine().run_monte_carlo(build_strategy(), build_config(), runs=100, seed=123)

    assert result.runs == 100
    assert len(result.results) == 100
    assert result.percentile5_return <= result.median_return <= result.percentile95_return
    assert result.median_drawdown <= result.max_drawdown
    assert all(run.config.price_data_source == "synthetic" for run in result.results)
    assert all(run.config.market_conditions is not None for run in result.results)


def test_monte_carlo_runs_bypass_cache() -> None:
    engine = SimulationEngine()
    engine.run_monte_carlo(build_strategy(), build_config(), runs=5, seed=1)
    assert len(engine.cache) == 0


def test_concurrent_and_sequential_runs_aggregate_identically() -> None:
    strategy = build_strategy()
    sequential = SimulationEngine(SimulationEngineConfig(max_workers=1)).run_monte_carlo(
        strategy, build_config(), runs=20, seed=77
    )
    concurrent = SimulationEngine(SimulationEngineConfig(max_workers=8)).run_monte_carlo(
        strategy, build_config(), runs=20, seed=77
    )

    assert [r.metrics.total_return for r in sequential.results] == [r.metrics.total_return for r in concurrent.results]
    assert sequential.median_return == concurrent.median_return
    assert sequential.percentile5_return == concurrent.percentile5_return
    assert sequential.avg_sharpe == concurrent.avg_sharpe


def test_results_keep_dispatch_order() -> None:
    config = build_config()
    expected = draw_run_configs(config, 10, seed=5)
    result = SimulationEngine().run_monte_carlo(build_strategy(), config, runs=10, seed=5)

    assert [run.config.seed for run in result.results] == [run_config.seed for run_config in expected]
    assert [run.config.market_conditions for run in result.results] == [c.market_conditions for c in expected]


def test_draw_run_configs_is_seeded() -> None:
    config = build_config()
    first = draw_run_configs(config, 30, seed=9)
    second = draw_run_configs(config, 30, seed=9)
    other = draw_run_configs(config, 30, seed=10)

    assert first == second
    assert first != other
    assert len({c.seed for c in first}) == 30
    assert {c.market_conditions.volatility for c in first} <= {"low", "medium", "high"}
    assert all(c.start_date == config.start_date and c.end_date == config.end_date for c in first)


def test_default_run_count_comes_from_config() -> None:
    engine = SimulationEngine(SimulationEngineConfig(default_monte_carlo_runs=4))
    assert engine.run_monte_carlo(build_strategy(), build_config(hours=6), seed=1).runs == 4

    configured = build_config(hours=6).model_copy(update={"monte_carlo_runs": 3})
    assert engine.run_monte_carlo(build_strategy(), configured, seed=1).runs == 3


def test_non_positive_runs_are_rejected() -> None:
    orchestrator = MonteCarloOrchestrator(SimulationEngine())
    with pytest.raises(ValueError):
        orchestrator.run(build_strategy(), build_config(), runs=0)


def test_aggregate_uses_discrete_percentiles() -> None:
    engine = SimulationEngine()
    base = engine.run_backtest(build_strategy(), build_config(hours=6))
    results = [
        base.model_copy(update={"metrics": base.metrics.model_copy(update={"total_return": float(value), "max_drawdown": float(value % 7)})})
        for value in [9, 3, 7, 1, 5, 2, 8, 0, 6, 4]
    ]
    aggregate = aggregate_results(results)

    assert aggregate.median_return == 5.0
    assert aggregate.avg_return == 4.5
    assert aggregate.percentile5_return == 0.0
    assert aggregate.percentile95_return == 9.0
    assert aggregate.max_drawdown == 6.0
