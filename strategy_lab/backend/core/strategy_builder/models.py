"""Strategy Builder domain models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import ConfigDict, Field

from strategy_lab.backend.core.base_models import WireModel

BlockCategory = Literal["trigger", "condition", "action", "risk", "capital", "data", "utility"]
DataType = Literal["trigger", "boolean", "number", "string", "token", "amount", "address", "transaction", "any"]
StrategyCategory = Literal[
    "trading",
    "yield_farming",
    "liquidity_management",
    "arbitrage",
    "portfolio_automation",
    "dao_governance",
    "custom",
]
StrategyStatus = Literal["draft", "testing", "pending", "active", "paused", "stopped", "error", "archived"]
Severity = Literal["error", "warning", "info"]
ValidationErrorCode = Literal[
    "missing_required_input",
    "invalid_connection",
    "type_mismatch",
    "circular_dependency",
    "unreachable_block",
    "missing_trigger",
    "invalid_config",
    "risk_exceeded",
    "unsupported_token",
    "unsupported_protocol",
    "invalid_expression",
]


class ActionKind(str, Enum):
    """Closed set of simulated action behaviours."""

    SWAP = "swap"
    TRANSFER = "transfer"
    STAKE = "stake"
    UNSTAKE = "unstake"
    PROVIDE_LIQUIDITY = "provide_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"
    DCA = "dca"
    REBALANCE = "rebalance"
    NOTIFICATION = "notification"
    OTHER = "other"


class TriggerKind(str, Enum):
    """Closed set of trigger behaviours understood by the simulator."""

    PRICE_THRESHOLD = "price_threshold"
    PRICE_CHANGE = "price_change_percent"
    SCHEDULE = "time_schedule"
    PORTFOLIO = "portfolio_threshold"
    AI_SIGNAL = "ai_signal"
    MANUAL = "manual"


class Position(WireModel):
    """Canvas position of a block."""

    x: float = 0.0
    y: float = 0.0


class ConnectionPoint(WireModel):
    """Typed port on a block."""

    id: str
    type: Literal["input", "output"]
    data_type: DataType
    label: str = ""
    required: bool = True
    multiple: bool = False


class Block(WireModel):
    """A node instance within a strategy graph."""

    id: str
    category: BlockCategory
    name: str
    type: Optional[str] = None
    description: str = ""
    version: str = "1.0.0"
    config: Dict[str, Any] = Field(default_factory=dict)
    position: Position = Field(default_factory=Position)
    inputs: List[ConnectionPoint] = Field(default_factory=list)
    outputs: List[ConnectionPoint] = Field(default_factory=list)
    enabled: bool = True
    action_kind: Optional[ActionKind] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def get_input(self, port_id: str) -> Optional[ConnectionPoint]:
        return next((port for port in self.inputs if port.id == port_id), None)

    def get_output(self, port_id: str) -> Optional[ConnectionPoint]:
        return next((port for port in self.outputs if port.id == port_id), None)

    def clone(self) -> "Block":
        """Return a structural copy sharing no mutable state with this block."""

        return self.model_copy(deep=True)


class Connection(WireModel):
    """Directed edge from one block's output port to another block's input port."""

    id: str
    source_block_id: str
    source_output_id: str
    target_block_id: str
    target_input_id: str
    label: Optional[str] = None


class RetryPolicy(WireModel):
    max_retries: int = 3
    backoff_ms: int = 1000
    backoff_multiplier: float = 2.0


class NotificationSettings(WireModel):
    on_execution: bool = True
    on_error: bool = True
    on_profit_target: bool = True
    on_loss_limit: bool = True
    channels: List[Literal["telegram", "email", "webhook"]] = Field(default_factory=lambda: ["telegram"])


class StrategyConfig(WireModel):
    """Execution configuration attached to a strategy."""

    max_gas_per_execution: float = 1.0
    execution_timeout: int = 60000
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    token_whitelist: List[str] = Field(default_factory=list)
    protocol_whitelist: List[str] = Field(default_factory=list)


class StrategyRiskParams(WireModel):
    """Risk parameters, percentages expressed in 0-100 units."""

    max_position_size: float = 30.0
    max_daily_loss: float = 5.0
    max_drawdown: float = 15.0
    stop_loss_percent: float = 5.0
    take_profit_percent: float = 10.0
    max_slippage: float = 2.0
    max_trades_per_day: int = 20
    cooldown_seconds: int = 300


class Strategy(WireModel):
    """Full strategy graph: blocks, connections and risk/execution parameters."""

    id: str
    name: str
    description: str = ""
    category: StrategyCategory = "custom"
    version: str = "1.0.0"
    status: StrategyStatus = "draft"
    blocks: List[Block] = Field(default_factory=list)
    connections: List[Connection] = Field(default_factory=list)
    config: StrategyConfig = Field(default_factory=StrategyConfig)
    risk_params: StrategyRiskParams = Field(default_factory=StrategyRiskParams)
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def get_block(self, block_id: str) -> Optional[Block]:
        return next((block for block in self.blocks if block.id == block_id), None)

    def blocks_by_category(self, category: BlockCategory) -> List[Block]:
        return [block for block in self.blocks if block.category == category]

    def clone(self) -> "Strategy":
        return self.model_copy(deep=True)


class ValidationIssue(WireModel):
    """Represents a validation finding detected in a strategy."""

    severity: Severity
    code: ValidationErrorCode
    message: str
    block_id: Optional[str] = None
    connection_id: Optional[str] = None
    field: Optional[str] = None


class SecurityCheck(WireModel):
    name: str
    passed: bool
    message: Optional[str] = None


class ValidationResult(WireModel):
    """Outcome of one validation call."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)
    risk_score: int = 0
    estimated_gas: float = 0.0
    security_checks: List[SecurityCheck] = Field(default_factory=list)


class CompiledTrigger(WireModel):
    id: str
    type: str
    config: Dict[str, Any] = Field(default_factory=dict)
    next_nodes: List[str] = Field(default_factory=list)


class CompiledNode(WireModel):
    id: str
    type: str
    category: BlockCategory
    config: Dict[str, Any] = Field(default_factory=dict)
    inputs: Dict[str, List[str]] = Field(default_factory=dict)
    outputs: Dict[str, List[str]] = Field(default_factory=dict)


class CompiledEdge(WireModel):
    from_: str = Field(alias="from")
    from_output: str
    to: str
    to_input: str


class CompiledStrategy(WireModel):
    """Interchange form: adjacency lists plus a content hash."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    version: str
    triggers: List[CompiledTrigger] = Field(default_factory=list)
    nodes: List[CompiledNode] = Field(default_factory=list)
    edges: List[CompiledEdge] = Field(default_factory=list)
    risk_params: StrategyRiskParams = Field(default_factory=StrategyRiskParams)
    config: StrategyConfig = Field(default_factory=StrategyConfig)
    hash: str


__all__ = [
    "ActionKind",
    "TriggerKind",
    "BlockCategory",
    "DataType",
    "StrategyCategory",
    "StrategyStatus",
    "Severity",
    "ValidationErrorCode",
    "Position",
    "ConnectionPoint",
    "Block",
    "Connection",
    "RetryPolicy",
    "NotificationSettings",
    "StrategyConfig",
    "StrategyRiskParams",
    "Strategy",
    "ValidationIssue",
    "SecurityCheck",
    "ValidationResult",
    "CompiledTrigger",
    "CompiledNode",
    "CompiledEdge",
    "CompiledStrategy",
]
