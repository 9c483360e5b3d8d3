import logging
from datetime import datetime, timedelta, timezone

import numpy as np

from strategy_lab.backend.core.simulation.models import (
    MarketConditions,
    PricePoint,
    PriceTick,
    SimulationConfig,
    SimulationEngineConfig,
)
from strategy_lab.backend.core.simulation.price_model import PriceModel


START = datetime(2024, 1, 1, tzinfo=timezone.utc)


class ListPriceProvider:
    """Serves fixed hourly closes per token."""

    def __init__(self, closes: dict) -> None:
        self.closes = closes

    def get_historical_prices(self, token: str, start: datetime, end: datetime) -> list:
        return [
            PricePoint(timestamp=START + timedelta(hours=i), open=c, high=c, low=c, close=c, volume=10.0)
            for i, c in enumerate(self.closes.get(token, []))
        ]

    def get_current_price(self, token: str) -> float:
        return self.closes[token][-1]


class BrokenPriceProvider:
    def get_historical_prices(self, token: str, start: datetime, end: datetime) -> list:
        raise ConnectionError("provider offline")

    def get_current_price(self, token: str) -> float:
        raise ConnectionError("provider offline")


def build_config(hours: int = 24, source: str = "synthetic", **extra) -> SimulationConfig:
    return SimulationConfig(start_date=START, end_date=START + timedelta(hours=hours), price_data_source=source, **extra)


def test_synthetic_series_is_hourly_and_seeded() -> None:
    model = PriceModel(SimulationEngineConfig())
    first = model.synthetic_series(START, START + timedelta(hours=24), MarketConditions(), np.random.default_rng(7))
    second = model.synthetic_series(START, START + timedelta(hours=24), MarketConditions(), np.random.default_rng(7))

    assert len(first) == 24
    assert [tick.timestamp for tick in first] == [START + timedelta(hours=i) for i in range(24)]
    assert first == second
    for tick in first:
        assert tick.prices["USDT"] == 1.0
        assert tick.prices["ETH"] == tick.prices["TON"] * 500
        assert 0.05 <= tick.gas_price <= 0.1


def test_synthetic_series_floors_partial_hours() -> None:
    model = PriceModel(SimulationEngineConfig())
    ticks = model.synthetic_series(START, START + timedelta(minutes=150), MarketConditions(), np.random.default_rng(1))
    assert len(ticks) == 2
    assert model.synthetic_series(START, START, MarketConditions(), np.random.default_rng(1)) == []


def test_synthetic_prices_never_fall_below_floor() -> None:
    config = SimulationEngineConfig(volatility_levels={"low": 0.9, "medium": 0.9, "high": 0.9}, price_floor=0.5)
    model = PriceModel(config)
    ticks = model.synthetic_series(
        START, START + timedelta(days=10), MarketConditions(volatility="high", trend="bear"), np.random.default_rng(3)
    )
    assert min(tick.prices["TON"] for tick in ticks) >= 0.5


def test_trend_drift_shapes_the_walk() -> None:
    config = SimulationEngineConfig(volatility_levels={"low": 0.0, "medium": 0.0, "high": 0.0})
    model = PriceModel(config)
    bull = model.synthetic_series(START, START + timedelta(hours=10), MarketConditions(trend="bull"), np.random.default_rng(0))
    bear = model.synthetic_series(START, START + timedelta(hours=10), MarketConditions(trend="bear"), np.random.default_rng(0))

    assert bull[-1].prices["TON"] > config.base_price > bear[-1].prices["TON"]
    assert bull[0].prices["TON"] == config.base_price * (1 + 0.0005)


def test_historical_series_merges_by_index() -> None:
    provider = ListPriceProvider({"TON": [5.0, 5.5, 6.0], "USDT": [1.0, 1.0, 1.0]})
    model = PriceModel(SimulationEngineConfig(), provider)
    ticks = model.build_series(["TON", "USDT"], build_config(source="historical"), np.random.default_rng(0))

    assert len(ticks) == 3
    assert ticks[1].prices == {"TON": 5.5, "USDT": 1.0}
    assert ticks[2].timestamp == START + timedelta(hours=2)


def test_historical_series_truncates_mismatched_lengths(caplog) -> None:
    provider = ListPriceProvider({"TON": [5.0, 5.5, 6.0, 6.5], "USDT": [1.0, 1.0]})
    model = PriceModel(SimulationEngineConfig(), provider)

    with caplog.at_level(logging.WARNING):
        ticks = model.historical_series(["TON", "USDT"], START, START + timedelta(hours=4))

    assert len(ticks) == 2
    assert "length mismatch" in caplog.text


def test_missing_or_failing_provider_falls_back_to_synthetic() -> None:
    config = build_config(source="historical", seed=5)
    expected = PriceModel(SimulationEngineConfig()).build_series(["TON"], config, np.random.default_rng(5))

    no_provider = PriceModel(SimulationEngineConfig()).build_series(["TON"], config, np.random.default_rng(5))
    failing = PriceModel(SimulationEngineConfig(), BrokenPriceProvider()).build_series(
        ["TON"], config, np.random.default_rng(5)
    )
    empty = PriceModel(SimulationEngineConfig(), ListPriceProvider({})).build_series(
        ["TON"], config, np.random.default_rng(5)
    )

    assert len(expected) == 24
    assert no_provider == expected
    assert failing == expected
    assert empty == expected


def test_price_of_handles_staked_and_unknown_tokens() -> None:
    model = PriceModel(SimulationEngineConfig())
    tick = PriceTick(timestamp=START, prices={"TON": 4.0, "BAD": float("nan")})

    assert model.price_of(tick, "TON") == 4.0
    assert model.price_of(tick, "staked_TON") == 4.0
    assert model.price_of(tick, "ETH") == 2500.0
    assert model.price_of(tick, "BAD") == 1.0
    assert model.price_of(tick, "UNKNOWN") == 1.0


class DictPriceProvider:
    """Returns bars as plain mappings instead of PricePoint models."""

    def __init__(self, bars: list) -> None:
        self.bars = bars

    def get_historical_prices(self, token: str, start: datetime, end: datetime) -> list:
        return self.bars

    def get_current_price(self, token: str) -> float:
        return 1.0


def test_mapping_bars_are_validated_into_price_points() -> None:
    bars = [
        {"timestamp": (START + timedelta(hours=i)).isoformat(), "open": 5.0, "high": 5.0, "low": 5.0, "close": 5.0 + i}
        for i in range(3)
    ]
    model = PriceModel(SimulationEngineConfig(), DictPriceProvider(bars))
    ticks = model.historical_series(["TON"], START, START + timedelta(hours=3))

    assert [tick.prices["TON"] for tick in ticks] == [5.0, 6.0, 7.0]
    assert ticks[0].timestamp == START


def test_malformed_bars_fall_back_to_synthetic(caplog) -> None:
    config = build_config(source="historical", seed=5)
    expected = PriceModel(SimulationEngineConfig()).build_series(["TON"], config, np.random.default_rng(5))
    provider = DictPriceProvider([{"timestamp": START.isoformat(), "close": 5.0}, object()])

    with caplog.at_level(logging.WARNING):
        ticks = PriceModel(SimulationEngineConfig(), provider).build_series(["TON"], config, np.random.default_rng(5))

    assert ticks == expected
    assert "Price provider failed" in caplog.text
