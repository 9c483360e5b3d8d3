"""Shared helpers for the Strategy Lab core."""

from strategy_lab.backend.core.utils.datetime import ensure_utc_datetime

__all__ = ["ensure_utc_datetime"]
