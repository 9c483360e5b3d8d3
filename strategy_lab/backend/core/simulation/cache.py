"""Process-wide cache of backtest results."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict, Optional, Tuple

from strategy_lab.backend.core.simulation.models import BacktestResult, SimulationConfig
from strategy_lab.backend.core.strategy_builder.models import Strategy

CacheKey = Tuple[str, str, datetime, datetime]


def cache_key(strategy: Strategy, config: SimulationConfig) -> CacheKey:
    return (strategy.id, strategy.version, config.start_date, config.end_date)


class BacktestResultCache:
    """Keyed by (strategy id, version, period start, period end); entries are never evicted.

    Concurrent misses on the same key may both compute; the later ``put`` wins.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, BacktestResult] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[BacktestResult]:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: CacheKey, result: BacktestResult) -> None:
        with self._lock:
            self._entries[key] = result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["BacktestResultCache", "CacheKey", "cache_key"]
