"""Logging configuration for the Strategy Lab backend."""

from __future__ import annotations

import logging
import sys

from strategy_lab.backend.settings import get_settings


def configure_logging(level: str | None = None) -> None:
    """Configure standard logging to stdout; ``STRATEGY_LAB_LOG_LEVEL`` overrides the default level."""

    resolved = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, resolved, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


__all__ = ["configure_logging"]
