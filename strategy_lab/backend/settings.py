"""Central settings for the Strategy Lab backend."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class LabSettings:
    """Holds filesystem locations and process-level defaults for the backend."""

    project_root: Path = Path(__file__).resolve().parents[2]
    config_root: Path = project_root / "configs" / "lab"
    validation_config_name: str = "validation"
    simulation_config_name: str = "simulation"
    log_level: str = "INFO"


def get_settings() -> LabSettings:
    """Return backend settings, honouring the STRATEGY_LAB_LOG_LEVEL override."""

    settings = LabSettings()
    env_level = os.getenv("STRATEGY_LAB_LOG_LEVEL")
    if env_level:
        settings.log_level = env_level.upper()
    return settings


__all__ = ["LabSettings", "get_settings"]
