"""Strategy Builder core components."""

from strategy_lab.backend.core.strategy_builder.models import (
    ActionKind,
    Block,
    CompiledStrategy,
    Connection,
    ConnectionPoint,
    Position,
    Strategy,
    StrategyConfig,
    StrategyRiskParams,
    TriggerKind,
    ValidationIssue,
    ValidationResult,
)
from strategy_lab.backend.core.strategy_builder.block_catalog import BlockCatalog, BlockTypeDefinition
from strategy_lab.backend.core.strategy_builder.compiler import StrategyCompiler
from strategy_lab.backend.core.strategy_builder.dsl_serializer import InterchangeFormatError, StrategyDslSerializer
from strategy_lab.backend.core.strategy_builder.validator import (
    CustomValidationRule,
    StrategyValidator,
    ValidationConfig,
    get_validation_summary,
    validate_strategy,
)

__all__ = [
    "ActionKind",
    "Block",
    "CompiledStrategy",
    "Connection",
    "ConnectionPoint",
    "Position",
    "Strategy",
    "StrategyConfig",
    "StrategyRiskParams",
    "TriggerKind",
    "ValidationIssue",
    "ValidationResult",
    "BlockCatalog",
    "BlockTypeDefinition",
    "StrategyCompiler",
    "StrategyDslSerializer",
    "InterchangeFormatError",
    "CustomValidationRule",
    "StrategyValidator",
    "ValidationConfig",
    "get_validation_summary",
    "validate_strategy",
]
