"""Lab configuration loader."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from strategy_lab.backend.settings import get_settings

logger = logging.getLogger(__name__)


class LabConfigLoader:
    """Loads YAML configurations from the lab config directory."""

    def __init__(self, base_path: str | Path | None = None) -> None:
        settings = get_settings()
        self.base_path: Path = Path(base_path) if base_path else settings.config_root

    def load_config(self, name: str) -> dict[str, Any]:
        """Load a YAML config by name without extension."""

        path = self.base_path / f"{name}.yaml"
        if not path.exists():
            raise FileNotFoundError(f"Lab config '{name}' not found at {path}")

        try:
            with path.open("r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            message = f"Invalid YAML in lab config '{name}': {exc}"
            logger.error(message)
            raise ValueError(message) from exc

        if not isinstance(data, dict):
            raise ValueError(f"Lab config '{name}' must contain a mapping at the top level")

        logger.debug("Lab config loaded | name=%s path=%s", name, path)
        return data

    def load_optional(self, name: str) -> dict[str, Any]:
        """Like :meth:`load_config` but returns an empty mapping when the file is absent."""

        try:
            return self.load_config(name)
        except FileNotFoundError:
            logger.info("Lab config '%s' not found; using defaults", name)
            return {}

    def list_configs(self) -> list[str]:
        """Return all available config names (without extension)."""

        if not self.base_path.exists():
            return []

        return sorted([config.stem for config in self.base_path.glob("*.yaml")])


__all__ = ["LabConfigLoader"]
