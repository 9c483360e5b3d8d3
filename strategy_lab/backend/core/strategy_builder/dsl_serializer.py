"""Serializer for compiled strategies into the JSON interchange format and YAML."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from strategy_lab.backend.core.strategy_builder.compiler import StrategyCompiler
from strategy_lab.backend.core.strategy_builder.models import CompiledStrategy, Strategy

logger = logging.getLogger(__name__)


class InterchangeFormatError(ValueError):
    """Raised when interchange input cannot be parsed into a compiled strategy."""


class StrategyDslSerializer:
    """Transform strategies into interchange representations and back."""

    def __init__(self, compiler: Optional[StrategyCompiler] = None) -> None:
        self.compiler = compiler or StrategyCompiler()

    def to_dict(self, strategy: Strategy) -> Dict[str, Any]:
        """Return the wire form ``{id, name, version, triggers, nodes, edges, riskParams, config, hash}``."""

        return self.compiler.compile(strategy).to_wire()

    def to_json(self, strategy: Strategy) -> str:
        return json.dumps(self.to_dict(strategy), indent=2)

    def to_yaml(self, strategy: Strategy) -> str:
        """Return a YAML string for the interchange representation."""

        return yaml.safe_dump(self.to_dict(strategy), sort_keys=False)

    def parse(self, payload: str | bytes | Dict[str, Any]) -> CompiledStrategy:
        """Parse interchange input into a :class:`CompiledStrategy`; fails fast on malformed data."""

        try:
            data = json.loads(payload) if isinstance(payload, (str, bytes)) else payload
            return CompiledStrategy.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Malformed interchange JSON | error=%s", exc)
            raise InterchangeFormatError(f"Interchange payload is not valid JSON: {exc}") from exc
        except ValidationError as exc:
            logger.warning("Invalid interchange document | errors=%d", exc.error_count())
            raise InterchangeFormatError(f"Interchange payload does not match the compiled strategy format: {exc}") from exc

    def from_json(self, payload: str | bytes | Dict[str, Any]) -> Strategy:
        return self.compiler.decompile(self.parse(payload))


__all__ = ["StrategyDslSerializer", "InterchangeFormatError"]
