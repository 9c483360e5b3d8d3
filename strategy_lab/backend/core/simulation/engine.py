"""Backtest engine replaying a strategy graph against a price series."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from strategy_lab.backend.core.analytics.metrics import compute_metrics, monthly_returns
from strategy_lab.backend.core.simulation.cache import BacktestResultCache, cache_key
from strategy_lab.backend.core.simulation.models import (
    BacktestResult,
    BacktestStatus,
    DrawdownPoint,
    EquityPoint,
    Horizon,
    MonteCarloResult,
    PerformanceEstimate,
    PriceTick,
    SandboxResult,
    SimulatedTrade,
    SimulationConfig,
    SimulationEngineConfig,
)
from strategy_lab.backend.core.simulation.monte_carlo import MonteCarloOrchestrator
from strategy_lab.backend.core.simulation.price_model import STAKED_PREFIX, PriceDataProvider, PriceModel
from strategy_lab.backend.core.strategy_builder.block_catalog import BlockCatalog
from strategy_lab.backend.core.strategy_builder.models import ActionKind, Block, Strategy, TriggerKind
from strategy_lab.backend.core.utils.datetime import utc_now

logger = logging.getLogger(__name__)

HORIZON_DAYS: Dict[str, int] = {"short": 7, "medium": 30, "long": 90}
ESTIMATE_CAPITAL = 10_000.0
ESTIMATE_MONTE_CARLO_RUNS = 50
SANDBOX_CAPITAL = 1_000.0
DEFAULT_SCHEDULE_INTERVAL = 86_400
TOKEN_CONFIG_KEYS = ("token", "fromToken", "toToken")


@dataclass
class ExecutionPlan:
    """Trigger and action behaviours resolved once before the tick loop."""

    triggers: List[Tuple[Block, TriggerKind]]
    actions: List[Tuple[Block, ActionKind]]
    tokens: List[str]


@dataclass
class SimulationState:
    capital: float
    positions: Dict[str, float] = field(default_factory=dict)
    trade_count: int = 0
    cum_pnl: float = 0.0
    trigger_firings: int = 0
    last_fired: Dict[str, datetime] = field(default_factory=dict)
    previous_prices: Dict[str, float] = field(default_factory=dict)


class SimulationEngine:
    """Runs backtests, sandbox checks and performance estimates for strategies.

    Actions run whenever any trigger fires; condition and risk blocks are not
    evaluated along the connection graph during simulation.
    """

    def __init__(
        self,
        config: Optional[SimulationEngineConfig] = None,
        catalog: Optional[BlockCatalog] = None,
        price_provider: Optional[PriceDataProvider] = None,
        cache: Optional[BacktestResultCache] = None,
    ) -> None:
        self.config = config or SimulationEngineConfig()
        self.catalog = catalog or BlockCatalog()
        self.price_model = PriceModel(self.config, price_provider)
        self.cache = cache if cache is not None else BacktestResultCache()
        self.monte_carlo = MonteCarloOrchestrator(self, max_workers=self.config.max_workers)

    def run_backtest(
        self,
        strategy: Strategy,
        config: SimulationConfig,
        use_cache: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> BacktestResult:
        """Replay ``strategy`` over one price series.

        The run stops early, keeping partial results, when ``cancel_event`` is set or the
        configured wall-clock budget is exhausted; both are checked once per tick.
        """

        key = cache_key(strategy, config)
        caching = self.config.enable_cache and use_cache
        if caching:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Backtest cache hit | strategy=%s version=%s", strategy.id, strategy.version)
                return cached

        started_at = utc_now()
        clock_start = time.monotonic()
        rng = np.random.default_rng(config.seed)
        plan = self.build_plan(strategy)
        ticks = self.price_model.build_series(plan.tokens, config, rng)

        state = SimulationState(capital=config.initial_capital)
        trades: List[SimulatedTrade] = []
        equity_curve: List[EquityPoint] = []
        drawdown_curve: List[DrawdownPoint] = []
        peak = config.initial_capital
        status: BacktestStatus = "completed"

        for tick in ticks:
            if cancel_event is not None and cancel_event.is_set():
                status = "cancelled"
                break
            if time.monotonic() - clock_start > self.config.max_duration_seconds:
                status = "timed_out"
                break

            if self._any_trigger_fired(plan, state, tick):
                state.trigger_firings += 1
                trades.extend(self._execute_actions(plan, state, tick, rng))

            equity = self._equity(state, tick)
            equity_curve.append(EquityPoint(timestamp=tick.timestamp, value=equity))
            peak = max(peak, equity)
            drawdown = (peak - equity) / peak * 100 if peak > 0 else 0.0
            drawdown_curve.append(DrawdownPoint(timestamp=tick.timestamp, drawdown=min(max(drawdown, 0.0), 100.0)))
            state.previous_prices = dict(tick.prices)

        if status != "completed":
            logger.warning(
                "Backtest stopped early | strategy=%s status=%s ticks=%d/%d",
                strategy.id,
                status,
                len(equity_curve),
                len(ticks),
            )

        result = BacktestResult(
            id=str(uuid.uuid4()),
            strategy_id=strategy.id,
            config=config,
            started_at=started_at,
            completed_at=utc_now(),
            status=status,
            metrics=compute_metrics(
                trades,
                equity_curve,
                config.initial_capital,
                config.start_date,
                config.end_date,
                trigger_firings=state.trigger_firings,
            ),
            trades=trades,
            equity_curve=equity_curve,
            drawdown_curve=drawdown_curve,
            monthly_returns=monthly_returns(equity_curve),
        )
        logger.debug(
            "Backtest finished | strategy=%s ticks=%d trades=%d total_return=%.4f",
            strategy.id,
            len(equity_curve),
            len(trades),
            result.metrics.total_return,
        )
        if caching and status == "completed":
            self.cache.put(key, result)
        return result

    def run_monte_carlo(
        self,
        strategy: Strategy,
        config: SimulationConfig,
        runs: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> MonteCarloResult:
        count = runs if runs is not None else config.monte_carlo_runs or self.config.default_monte_carlo_runs
        return self.monte_carlo.run(strategy, config, count, seed=seed)

    def run_sandbox(
        self,
        strategy: Strategy,
        duration_hours: int = 24,
        seed: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> SandboxResult:
        """Quick low-capital backtest over the trailing ``duration_hours``, with detected issues."""

        if duration_hours <= 0:
            raise ValueError("duration_hours must be positive")
        end = now or utc_now()
        config = SimulationConfig(
            start_date=end - timedelta(hours=duration_hours),
            end_date=end,
            initial_capital=SANDBOX_CAPITAL,
            price_data_source="historical",
            seed=seed,
        )
        result = self.run_backtest(strategy, config)
        return SandboxResult(
            success=True,
            trades=len(result.trades),
            final_equity=result.equity_curve[-1].value if result.equity_curve else config.initial_capital,
            pnl=result.metrics.total_return,
            issues=self.detect_sandbox_issues(result),
        )

    def estimate_performance(
        self,
        strategy: Strategy,
        horizon: Horizon,
        seed: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> PerformanceEstimate:
        if horizon not in HORIZON_DAYS:
            raise ValueError(f"Unknown horizon '{horizon}'")
        end = now or utc_now()
        config = SimulationConfig(
            start_date=end - timedelta(days=HORIZON_DAYS[horizon]),
            end_date=end,
            initial_capital=ESTIMATE_CAPITAL,
            price_data_source="historical",
            seed=seed,
        )
        backtest = self.run_backtest(strategy, config)
        monte_carlo = self.run_monte_carlo(strategy, config, runs=ESTIMATE_MONTE_CARLO_RUNS, seed=seed)
        return PerformanceEstimate(
            expected_return=monte_carlo.median_return,
            best_case=monte_carlo.percentile95_return,
            worst_case=monte_carlo.percentile5_return,
            confidence=confidence_score(backtest, monte_carlo),
            sharpe_ratio=backtest.metrics.sharpe_ratio,
            max_drawdown=backtest.metrics.max_drawdown,
            win_rate=backtest.metrics.win_rate,
        )

    def build_plan(self, strategy: Strategy) -> ExecutionPlan:
        triggers = [
            (block, self.catalog.resolve_trigger_kind(block))
            for block in strategy.blocks
            if block.category == "trigger" and block.enabled
        ]
        actions = [
            (block, self.catalog.resolve_action_kind(block))
            for block in strategy.blocks
            if block.category == "action" and block.enabled
        ]
        tokens: Dict[str, None] = {}
        for block in strategy.blocks:
            for key in TOKEN_CONFIG_KEYS:
                value = block.config.get(key)
                if isinstance(value, str) and value and not value.startswith("{{"):
                    tokens[value] = None
        tokens.setdefault("TON", None)
        tokens.setdefault(self.config.quote_token, None)
        return ExecutionPlan(triggers=triggers, actions=actions, tokens=list(tokens))

    @staticmethod
    def detect_sandbox_issues(result: BacktestResult) -> List[str]:
        issues: List[str] = []
        if not result.trades:
            issues.append("No trades executed - check trigger conditions")
        if result.metrics.win_rate < 0.3:
            issues.append("Low win rate - consider adjusting entry conditions")
        if result.metrics.max_drawdown > 30:
            issues.append("High drawdown - consider tighter risk controls")
        if any(trade.slippage > 5 for trade in result.trades):
            issues.append("Some trades had high slippage - consider lower position sizes")
        return issues

    def _any_trigger_fired(self, plan: ExecutionPlan, state: SimulationState, tick: PriceTick) -> bool:
        fired = False
        # Every trigger is evaluated so each schedule keeps its own clock.
        for block, kind in plan.triggers:
            if self._trigger_fires(block, kind, state, tick):
                fired = True
        return fired

    def _trigger_fires(self, block: Block, kind: TriggerKind, state: SimulationState, tick: PriceTick) -> bool:
        config = block.config
        if kind is TriggerKind.SCHEDULE:
            interval = _number(config.get("interval")) or DEFAULT_SCHEDULE_INTERVAL
            last = state.last_fired.get(block.id)
            if last is None or (tick.timestamp - last).total_seconds() >= interval:
                state.last_fired[block.id] = tick.timestamp
                return True
            return False

        token = _token(config.get("token"), "TON")
        price = self.price_model.price_of(tick, token)
        previous = state.previous_prices.get(token)

        if kind is TriggerKind.PRICE_THRESHOLD:
            threshold = _number(config.get("threshold"))
            if threshold is None:
                return False
            direction = config.get("direction") or "above"
            if direction == "above":
                return price > threshold
            if direction == "below":
                return price < threshold
            if direction == "cross" and previous is not None:
                return (previous - threshold) * (price - threshold) < 0
            return False

        if kind is TriggerKind.PRICE_CHANGE:
            percentage = _number(config.get("percentage"))
            if percentage is None or not previous:
                return False
            change = (price - previous) / previous * 100
            direction = config.get("direction") or "any"
            if direction == "up":
                return change >= percentage
            if direction == "down":
                return -change >= percentage
            return abs(change) >= percentage

        if kind is TriggerKind.PORTFOLIO and config.get("metric", "total_value") == "total_value":
            value = _number(config.get("value"))
            if value is None:
                return False
            equity = self._equity(state, tick)
            return equity > value if config.get("condition", "above") == "above" else equity < value

        return False

    def _execute_actions(
        self,
        plan: ExecutionPlan,
        state: SimulationState,
        tick: PriceTick,
        rng: np.random.Generator,
    ) -> List[SimulatedTrade]:
        trades: List[SimulatedTrade] = []
        for block, kind in plan.actions:
            trade: Optional[SimulatedTrade] = None
            if kind is ActionKind.SWAP:
                trade = self._simulate_swap(block.config, state, tick, rng)
            elif kind is ActionKind.DCA:
                trade = self._simulate_swap(_dca_as_swap(block.config), state, tick, rng, kind=ActionKind.DCA)
            elif kind is ActionKind.STAKE:
                trade = self._simulate_stake(block.config, state, tick, unstake=False)
            elif kind is ActionKind.UNSTAKE:
                trade = self._simulate_stake(block.config, state, tick, unstake=True)
            if trade is not None:
                state.trade_count += 1
                trades.append(trade)
        return trades

    def _simulate_swap(
        self,
        config: Dict[str, Any],
        state: SimulationState,
        tick: PriceTick,
        rng: np.random.Generator,
        kind: ActionKind = ActionKind.SWAP,
    ) -> Optional[SimulatedTrade]:
        from_token = _token(config.get("fromToken"), self.config.quote_token)
        to_token = _token(config.get("toToken"), "TON")
        balance = self._balance(state, from_token)
        if balance <= 0:
            return None

        amount = _sized_amount(config, balance, default_amount=10.0)
        if amount <= 0:
            return None
        max_slippage = _number(config.get("maxSlippage")) or 1.0

        from_price = self.price_model.price_of(tick, from_token)
        to_price = self.price_model.price_of(tick, to_token)
        rate = from_price / to_price
        slippage = float(rng.random()) * max_slippage / 100
        received = amount * rate * (1 - slippage)

        self._adjust(state, from_token, -amount)
        self._adjust(state, to_token, received)
        state.capital -= tick.gas_price

        pnl = (received * to_price - amount * from_price) / (amount * from_price) * 100
        state.cum_pnl += pnl
        return SimulatedTrade(
            id=f"trade_{uuid.uuid4().hex[:12]}",
            timestamp=tick.timestamp,
            type=kind,
            from_token=from_token,
            to_token=to_token,
            from_amount=amount,
            to_amount=received,
            price=rate,
            slippage=slippage * 100,
            gas=tick.gas_price,
            pnl=pnl,
            cum_pnl=state.cum_pnl,
        )

    def _simulate_stake(
        self, config: Dict[str, Any], state: SimulationState, tick: PriceTick, unstake: bool
    ) -> Optional[SimulatedTrade]:
        token = _token(config.get("token"), "TON")
        staked = f"{STAKED_PREFIX}{token}"
        source, target = (staked, token) if unstake else (token, staked)
        balance = self._balance(state, source)
        if balance <= 0:
            return None

        amount = _sized_amount(config, balance, default_amount=50.0)
        if amount <= 0:
            return None
        self._adjust(state, source, -amount)
        self._adjust(state, target, amount)
        state.capital -= tick.gas_price
        return SimulatedTrade(
            id=f"{'unstake' if unstake else 'stake'}_{uuid.uuid4().hex[:12]}",
            timestamp=tick.timestamp,
            type=ActionKind.UNSTAKE if unstake else ActionKind.STAKE,
            from_token=source,
            to_token=target,
            from_amount=amount,
            to_amount=amount,
            price=1.0,
            slippage=0.0,
            gas=tick.gas_price,
            pnl=0.0,
            cum_pnl=state.cum_pnl,
        )

    def _balance(self, state: SimulationState, token: str) -> float:
        if token == self.config.quote_token:
            return state.capital
        return state.positions.get(token, 0.0)

    def _adjust(self, state: SimulationState, token: str, delta: float) -> None:
        if token == self.config.quote_token:
            state.capital += delta
        else:
            state.positions[token] = state.positions.get(token, 0.0) + delta

    def _equity(self, state: SimulationState, tick: PriceTick) -> float:
        equity = state.capital
        for token, amount in state.positions.items():
            equity += amount * self.price_model.price_of(tick, token)
        return equity


def confidence_score(backtest: BacktestResult, monte_carlo: MonteCarloResult) -> float:
    """Heuristic confidence in [0, 0.95] from backtest quality and Monte Carlo spread."""

    metrics = backtest.metrics
    confidence = 0.5
    if metrics.sharpe_ratio > 1:
        confidence += 0.1
    if metrics.sharpe_ratio > 2:
        confidence += 0.1
    if metrics.win_rate > 0.5:
        confidence += 0.05
    if metrics.win_rate > 0.6:
        confidence += 0.05
    if metrics.max_drawdown < 20:
        confidence += 0.1
    if metrics.max_drawdown < 10:
        confidence += 0.05
    if monte_carlo.percentile95_return - monte_carlo.percentile5_return < 50:
        confidence += 0.1
    return min(confidence, 0.95)


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _token(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def _sized_amount(config: Dict[str, Any], balance: float, default_amount: float) -> float:
    amount_type = config.get("amountType") or "percentage"
    amount = _number(config.get("amount")) or default_amount
    if amount_type == "percentage":
        return min(balance * amount / 100, balance)
    if amount_type == "all":
        return balance
    return min(amount, balance)


def _dca_as_swap(config: Dict[str, Any]) -> Dict[str, Any]:
    from_token, to_token = config.get("fromToken"), config.get("toToken")
    if config.get("direction") == "sell":
        from_token, to_token = to_token, from_token
    return {
        "fromToken": from_token,
        "toToken": to_token,
        "amountType": "fixed",
        "amount": config.get("amountPerOrder"),
        "maxSlippage": config.get("maxSlippage"),
    }


__all__ = ["SimulationEngine", "SimulationState", "ExecutionPlan", "confidence_score"]
