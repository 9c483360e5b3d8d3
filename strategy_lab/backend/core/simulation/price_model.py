"""Historical and synthetic price series for backtests."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Protocol

import numpy as np

from strategy_lab.backend.core.simulation.models import (
    MarketConditions,
    PricePoint,
    PriceTick,
    SimulationConfig,
    SimulationEngineConfig,
)

logger = logging.getLogger(__name__)

TICK = timedelta(hours=1)
HISTORICAL_GAS_PRICE = 0.05
STAKED_PREFIX = "staked_"


class PriceDataProvider(Protocol):
    """Source of historical prices injected into the simulation engine."""

    def get_historical_prices(self, token: str, start: datetime, end: datetime) -> List[PricePoint]:
        """Return bars for ``token`` between ``start`` and ``end``."""

    def get_current_price(self, token: str) -> float:
        """Return the latest price for ``token``."""


class PriceModel:
    """Builds the per-tick price series a backtest replays."""

    def __init__(self, config: SimulationEngineConfig, provider: Optional[PriceDataProvider] = None) -> None:
        self.config = config
        self.provider = provider

    def build_series(
        self,
        tokens: Iterable[str],
        sim_config: SimulationConfig,
        rng: np.random.Generator,
    ) -> List[PriceTick]:
        """Return historical ticks when requested and available, otherwise a synthetic walk."""

        if sim_config.price_data_source == "historical":
            if self.provider is None:
                logger.info("No price provider configured; using synthetic prices")
            else:
                ticks = self.historical_series(tokens, sim_config.start_date, sim_config.end_date)
                if ticks:
                    return ticks
                logger.warning("Historical prices unavailable; falling back to synthetic prices")
        return self.synthetic_series(
            sim_config.start_date,
            sim_config.end_date,
            sim_config.market_conditions or MarketConditions(),
            rng,
        )

    def synthetic_series(
        self,
        start: datetime,
        end: datetime,
        conditions: MarketConditions,
        rng: np.random.Generator,
    ) -> List[PriceTick]:
        """Hourly multiplicative random walk with regime-dependent drift and volatility."""

        intervals = max(int(math.floor((end - start) / TICK)), 0)
        volatility = self.config.volatility_levels.get(conditions.volatility, 0.015)
        drift = self.config.trend_drifts.get(conditions.trend, 0.0)

        shocks = rng.uniform(-1.0, 1.0, size=intervals)
        volumes = rng.random(size=intervals) * 1_000_000
        gas_prices = 0.05 + rng.random(size=intervals) * 0.05

        ticks: List[PriceTick] = []
        price = self.config.base_price
        for index in range(intervals):
            price = max(price * (1 + drift + shocks[index] * volatility), self.config.price_floor)
            ticks.append(
                PriceTick(
                    timestamp=start + index * TICK,
                    prices={"TON": price, "USDT": 1.0, "USDC": 1.0, "ETH": price * 500},
                    volume=float(volumes[index]),
                    gas_price=float(gas_prices[index]),
                )
            )
        return ticks

    def historical_series(self, tokens: Iterable[str], start: datetime, end: datetime) -> List[PriceTick]:
        """Fetch each token sequentially and merge the series by position.

        Series are aligned by index, not timestamp; the merged series is truncated to the
        shortest input and a warning is logged when lengths differ.
        """

        series: Dict[str, List[PricePoint]] = {}
        for token in tokens:
            try:
                raw = self.provider.get_historical_prices(token, start, end)
                series[token] = [
                    point if isinstance(point, PricePoint) else PricePoint.model_validate(point) for point in raw
                ]
            except Exception as exc:  # provider failures and malformed bars degrade to synthetic prices
                logger.warning("Price provider failed | token=%s error=%s", token, exc)
                return []

        if not series:
            return []
        lengths = {token: len(points) for token, points in series.items()}
        length = min(lengths.values())
        if len(set(lengths.values())) > 1:
            logger.warning("Price series length mismatch; truncating to %d | lengths=%s", length, lengths)

        first = next(iter(series.values()))
        return [
            PriceTick(
                timestamp=first[index].timestamp,
                prices={token: points[index].close for token, points in series.items()},
                volume=float(first[index].volume),
                gas_price=HISTORICAL_GAS_PRICE,
            )
            for index in range(length)
        ]

    def price_of(self, tick: PriceTick, token: str) -> float:
        """Price ``token`` at ``tick``; staked buckets use their underlying, unknown tokens a default."""

        underlying = token[len(STAKED_PREFIX) :] if token.startswith(STAKED_PREFIX) else token
        for candidate in (token, underlying):
            price = tick.prices.get(candidate)
            if price is not None and math.isfinite(price) and price > 0:
                return float(price)
        return float(self.config.default_prices.get(underlying, 1.0))


__all__ = ["PriceModel", "PriceDataProvider", "TICK", "STAKED_PREFIX"]
