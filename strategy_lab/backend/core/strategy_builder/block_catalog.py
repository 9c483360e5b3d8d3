"""Catalog of available strategy builder block types."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from strategy_lab.backend.core.base_models import WireModel
from strategy_lab.backend.core.strategy_builder.models import (
    ActionKind,
    Block,
    BlockCategory,
    ConnectionPoint,
    DataType,
    Position,
    TriggerKind,
)


class ConfigProperty(WireModel):
    """A single JSON-schema-like configuration property."""

    type: Literal["string", "number", "boolean", "array", "object"]
    title: str
    description: Optional[str] = None
    default: Any = None
    enum: Optional[List[Any]] = None
    min: Optional[float] = None
    max: Optional[float] = None


class ConfigSchema(WireModel):
    type: Literal["object"] = "object"
    properties: Dict[str, ConfigProperty] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)


class BlockTypeDefinition(WireModel):
    """Reusable block template: ports, config schema and defaults."""

    type: str
    category: BlockCategory
    name: str
    description: str = ""
    inputs: List[ConnectionPoint] = Field(default_factory=list)
    outputs: List[ConnectionPoint] = Field(default_factory=list)
    config_schema: ConfigSchema = Field(default_factory=ConfigSchema)
    default_config: Dict[str, Any] = Field(default_factory=dict)
    action_kind: Optional[ActionKind] = None
    trigger_kind: Optional[TriggerKind] = None
    version: str = "1.0.0"


def _port_in(port_id: str, data_type: DataType, label: str, required: bool = True) -> ConnectionPoint:
    return ConnectionPoint(id=port_id, type="input", data_type=data_type, label=label, required=required)


def _port_out(port_id: str, data_type: DataType, label: str, required: bool = True) -> ConnectionPoint:
    return ConnectionPoint(id=port_id, type="output", data_type=data_type, label=label, required=required)


def _prop(type: str, title: str, **extra: Any) -> ConfigProperty:
    return ConfigProperty(type=type, title=title, **extra)


def _trigger_ports() -> Dict[str, List[ConnectionPoint]]:
    return {"inputs": [], "outputs": [_port_out("out", "trigger", "Trigger")]}


def _branch_ports() -> Dict[str, List[ConnectionPoint]]:
    return {
        "inputs": [_port_in("in", "trigger", "Input")],
        "outputs": [_port_out("true", "trigger", "True"), _port_out("false", "trigger", "False")],
    }


def _action_ports() -> Dict[str, List[ConnectionPoint]]:
    return {
        "inputs": [_port_in("in", "trigger", "Trigger")],
        "outputs": [_port_out("success", "trigger", "Success"), _port_out("failure", "trigger", "Failure")],
    }


def _risk_ports(second: str) -> Dict[str, List[ConnectionPoint]]:
    return {
        "inputs": [_port_in("in", "trigger", "Input")],
        "outputs": [_port_out("pass", "trigger", "Pass"), _port_out(second, "trigger", second.capitalize())],
    }


AMOUNT_TYPES = ["fixed", "percentage", "all"]

# Ordered: "unstake" must win over "stake".
_ACTION_NAME_KEYWORDS = (
    ("swap", ActionKind.SWAP),
    ("unstake", ActionKind.UNSTAKE),
    ("stake", ActionKind.STAKE),
    ("transfer", ActionKind.TRANSFER),
    ("remove liquidity", ActionKind.REMOVE_LIQUIDITY),
    ("liquidity", ActionKind.PROVIDE_LIQUIDITY),
    ("rebalance", ActionKind.REBALANCE),
    ("dca", ActionKind.DCA),
    ("notif", ActionKind.NOTIFICATION),
)
_TRIGGER_KIND_VALUES = {kind.value for kind in TriggerKind}


class BlockCatalog:
    """Holds the block type definitions available to the strategy builder.

    Instances handed out by :meth:`create_block` never share mutable state with
    the registered definitions or with each other.
    """

    def __init__(self, load_core_blocks: bool = True) -> None:
        self._definitions: Dict[str, BlockTypeDefinition] = {}
        if load_core_blocks:
            for definition in self._core_definitions():
                self.register(definition)

    def register(self, definition: BlockTypeDefinition) -> None:
        """Register or replace a block type definition."""

        self._definitions[definition.type] = definition.model_copy(deep=True)

    def get(self, block_type: str) -> Optional[BlockTypeDefinition]:
        definition = self._definitions.get(block_type)
        return definition.model_copy(deep=True) if definition else None

    def get_by_category(self, category: BlockCategory) -> List[BlockTypeDefinition]:
        return [
            definition.model_copy(deep=True)
            for definition in self._definitions.values()
            if definition.category == category
        ]

    def get_all(self) -> List[BlockTypeDefinition]:
        return [definition.model_copy(deep=True) for definition in self._definitions.values()]

    def create_block(self, block_type: str, block_id: str, position: Optional[Position] = None) -> Optional[Block]:
        """Instantiate a block from its definition; ``None`` for unregistered types."""

        definition = self._definitions.get(block_type)
        if definition is None:
            return None
        # Definition is deep-copied so the block owns its config and ports.
        source = definition.model_copy(deep=True)
        return Block(
            id=block_id,
            category=source.category,
            name=source.name,
            type=source.type,
            description=source.description,
            version=source.version,
            config=source.default_config,
            position=position.model_copy() if position else Position(),
            inputs=source.inputs,
            outputs=source.outputs,
            action_kind=source.action_kind,
        )

    def resolve_action_kind(self, block: Block) -> ActionKind:
        """Return the behaviour of an action block: explicit tag, then catalog type, then display name."""

        if block.action_kind is not None:
            return block.action_kind
        definition = self._definitions.get(block.type) if block.type else None
        if definition is not None and definition.action_kind is not None:
            return definition.action_kind
        lowered = block.name.lower()
        for keyword, kind in _ACTION_NAME_KEYWORDS:
            if keyword in lowered:
                return kind
        return ActionKind.OTHER

    def resolve_trigger_kind(self, block: Block) -> TriggerKind:
        configured = block.config.get("type")
        if isinstance(configured, str) and configured in _TRIGGER_KIND_VALUES:
            return TriggerKind(configured)
        definition = self._definitions.get(block.type) if block.type else None
        if definition is not None and definition.trigger_kind is not None:
            return definition.trigger_kind
        for definition in self._definitions.values():
            if definition.category == "trigger" and definition.name == block.name and definition.trigger_kind:
                return definition.trigger_kind
        return TriggerKind.MANUAL

    def _core_definitions(self) -> List[BlockTypeDefinition]:
        definitions: List[BlockTypeDefinition] = []

        def add(**kwargs: Any) -> None:
            definitions.append(BlockTypeDefinition(**kwargs))

        # Trigger blocks
        add(
            type="trigger_price_threshold",
            category="trigger",
            name="Price Threshold",
            description="Triggers when a token price crosses a threshold",
            trigger_kind=TriggerKind.PRICE_THRESHOLD,
            config_schema=ConfigSchema(
                properties={
                    "token": _prop("string", "Token"),
                    "threshold": _prop("number", "Price"),
                    "direction": _prop("string", "Direction", enum=["above", "below", "cross"], default="above"),
                    "currency": _prop("string", "Currency", default="USD"),
                },
                required=["token", "threshold", "direction"],
            ),
            default_config={"token": "TON", "threshold": 5.0, "direction": "above", "currency": "USD"},
            **_trigger_ports(),
        )
        add(
            type="trigger_price_change",
            category="trigger",
            name="Price Change %",
            description="Triggers when price changes by a percentage",
            trigger_kind=TriggerKind.PRICE_CHANGE,
            config_schema=ConfigSchema(
                properties={
                    "token": _prop("string", "Token"),
                    "percentage": _prop("number", "Change %", min=0.1, max=100),
                    "direction": _prop("string", "Direction", enum=["up", "down", "any"], default="any"),
                    "timeframe": _prop("string", "Timeframe", enum=["1m", "5m", "15m", "1h", "4h", "1d"], default="1h"),
                },
                required=["token", "percentage"],
            ),
            default_config={"token": "TON", "percentage": 5, "direction": "any", "timeframe": "1h"},
            **_trigger_ports(),
        )
        add(
            type="trigger_schedule",
            category="trigger",
            name="Schedule",
            description="Triggers on a time schedule",
            trigger_kind=TriggerKind.SCHEDULE,
            config_schema=ConfigSchema(
                properties={
                    "scheduleType": _prop(
                        "string", "Type", enum=["interval", "cron", "daily", "weekly"], default="interval"
                    ),
                    "interval": _prop("number", "Interval (seconds)", min=60),
                    "cron": _prop("string", "Cron Expression"),
                    "time": _prop("string", "Time (HH:MM)"),
                    "dayOfWeek": _prop("number", "Day of Week", min=0, max=6),
                },
            ),
            default_config={"scheduleType": "interval", "interval": 3600},
            **_trigger_ports(),
        )
        add(
            type="trigger_portfolio",
            category="trigger",
            name="Portfolio Change",
            description="Triggers on portfolio value or allocation changes",
            trigger_kind=TriggerKind.PORTFOLIO,
            config_schema=ConfigSchema(
                properties={
                    "metric": _prop(
                        "string", "Metric", enum=["total_value", "token_allocation", "pnl_percent"], default="total_value"
                    ),
                    "condition": _prop("string", "Condition", enum=["above", "below", "change_by"], default="above"),
                    "value": _prop("number", "Value"),
                    "token": _prop("string", "Token (for allocation)"),
                },
                required=["metric", "condition", "value"],
            ),
            default_config={"metric": "total_value", "condition": "above", "value": 1000},
            **_trigger_ports(),
        )
        add(
            type="trigger_ai_signal",
            category="trigger",
            name="AI Signal",
            description="Triggers on AI-generated trading signals",
            trigger_kind=TriggerKind.AI_SIGNAL,
            config_schema=ConfigSchema(
                properties={
                    "signalType": _prop(
                        "string",
                        "Signal Type",
                        enum=["buy", "sell", "rebalance", "opportunity", "risk"],
                        default="opportunity",
                    ),
                    "minConfidence": _prop("number", "Min Confidence", min=0, max=1, default=0.7),
                    "tokens": _prop("array", "Filter Tokens"),
                },
                required=["signalType", "minConfidence"],
            ),
            default_config={"signalType": "opportunity", "minConfidence": 0.7, "tokens": []},
            **_trigger_ports(),
        )

        # Condition blocks
        add(
            type="condition_price",
            category="condition",
            name="Price Condition",
            description="Check current token price",
            config_schema=ConfigSchema(
                properties={
                    "token": _prop("string", "Token"),
                    "operator": _prop("string", "Operator", enum=["gt", "gte", "lt", "lte", "eq"]),
                    "value": _prop("number", "Price"),
                    "currency": _prop("string", "Currency", default="USD"),
                },
                required=["token", "operator", "value"],
            ),
            default_config={"token": "TON", "operator": "gt", "value": 5.0, "currency": "USD"},
            **_branch_ports(),
        )
        add(
            type="condition_balance",
            category="condition",
            name="Balance Check",
            description="Check wallet balance",
            config_schema=ConfigSchema(
                properties={
                    "token": _prop("string", "Token"),
                    "operator": _prop("string", "Operator", enum=["gt", "gte", "lt", "lte"]),
                    "value": _prop("number", "Amount"),
                },
                required=["token", "operator", "value"],
            ),
            default_config={"token": "TON", "operator": "gt", "value": 100},
            **_branch_ports(),
        )
        add(
            type="condition_market",
            category="condition",
            name="Market Condition",
            description="Check market conditions (trend, volatility)",
            config_schema=ConfigSchema(
                properties={
                    "metric": _prop("string", "Metric", enum=["trend", "volatility", "volume", "sentiment"]),
                    "condition": _prop(
                        "string", "Is", enum=["bullish", "bearish", "neutral", "high", "low", "normal"]
                    ),
                    "token": _prop("string", "Token (optional)"),
                    "timeframe": _prop("string", "Timeframe", enum=["1h", "4h", "1d", "7d"], default="1d"),
                },
                required=["metric", "condition"],
            ),
            default_config={"metric": "trend", "condition": "bullish", "timeframe": "1d"},
            **_branch_ports(),
        )
        add(
            type="condition_time",
            category="condition",
            name="Time Condition",
            description="Check current time/date",
            config_schema=ConfigSchema(
                properties={
                    "checkType": _prop("string", "Check", enum=["hour_range", "day_of_week", "day_of_month"]),
                    "startHour": _prop("number", "Start Hour (0-23)", min=0, max=23),
                    "endHour": _prop("number", "End Hour (0-23)", min=0, max=23),
                    "days": _prop("array", "Days"),
                },
            ),
            default_config={"checkType": "hour_range", "startHour": 9, "endHour": 17},
            **_branch_ports(),
        )
        add(
            type="condition_logic",
            category="condition",
            name="Logic Gate",
            description="Combine conditions with AND/OR/NOT",
            inputs=[_port_in("a", "boolean", "A"), _port_in("b", "boolean", "B", required=False)],
            outputs=[_port_out("result", "boolean", "Result")],
            config_schema=ConfigSchema(
                properties={"operator": _prop("string", "Operator", enum=["and", "or", "not", "xor"], default="and")},
                required=["operator"],
            ),
            default_config={"operator": "and"},
        )

        # Action blocks
        add(
            type="action_swap",
            category="action",
            name="Swap",
            description="Swap tokens on DEX",
            action_kind=ActionKind.SWAP,
            config_schema=ConfigSchema(
                properties={
                    "fromToken": _prop("string", "From Token"),
                    "toToken": _prop("string", "To Token"),
                    "amountType": _prop("string", "Amount Type", enum=AMOUNT_TYPES, default="percentage"),
                    "amount": _prop("number", "Amount"),
                    "maxSlippage": _prop("number", "Max Slippage %", default=1, min=0.1, max=10),
                    "dex": _prop("string", "DEX", enum=["dedust", "stonfi", "auto"], default="auto"),
                },
                required=["fromToken", "toToken", "amountType", "amount"],
            ),
            default_config={
                "fromToken": "USDT",
                "toToken": "TON",
                "amountType": "percentage",
                "amount": 50,
                "maxSlippage": 1,
                "dex": "auto",
            },
            **_action_ports(),
        )
        add(
            type="action_transfer",
            category="action",
            name="Transfer",
            description="Transfer tokens to address",
            action_kind=ActionKind.TRANSFER,
            config_schema=ConfigSchema(
                properties={
                    "token": _prop("string", "Token"),
                    "destination": _prop("string", "Destination Address"),
                    "amountType": _prop("string", "Amount Type", enum=AMOUNT_TYPES),
                    "amount": _prop("number", "Amount"),
                    "memo": _prop("string", "Memo (optional)"),
                },
                required=["token", "destination", "amountType", "amount"],
            ),
            default_config={"token": "TON", "amountType": "fixed", "amount": 10},
            **_action_ports(),
        )
        add(
            type="action_stake",
            category="action",
            name="Stake",
            description="Stake tokens in validator/pool",
            action_kind=ActionKind.STAKE,
            config_schema=ConfigSchema(
                properties={
                    "token": _prop("string", "Token", default="TON"),
                    "protocol": _prop(
                        "string", "Protocol", enum=["tonstakers", "bemo", "whales", "auto"], default="auto"
                    ),
                    "amountType": _prop("string", "Amount Type", enum=AMOUNT_TYPES),
                    "amount": _prop("number", "Amount"),
                },
                required=["token", "amountType", "amount"],
            ),
            default_config={"token": "TON", "protocol": "auto", "amountType": "percentage", "amount": 50},
            **_action_ports(),
        )
        add(
            type="action_provide_liquidity",
            category="action",
            name="Provide Liquidity",
            description="Add liquidity to DEX pool",
            action_kind=ActionKind.PROVIDE_LIQUIDITY,
            config_schema=ConfigSchema(
                properties={
                    "tokenA": _prop("string", "Token A"),
                    "tokenB": _prop("string", "Token B"),
                    "amountType": _prop("string", "Amount Type", enum=["fixed", "percentage"]),
                    "amount": _prop("number", "Amount (Token A)"),
                    "dex": _prop("string", "DEX", enum=["dedust", "stonfi"]),
                    "range": _prop("object", "Price Range", description="For concentrated liquidity"),
                },
                required=["tokenA", "tokenB", "amountType", "amount", "dex"],
            ),
            default_config={
                "tokenA": "TON",
                "tokenB": "USDT",
                "amountType": "percentage",
                "amount": 50,
                "dex": "dedust",
            },
            **_action_ports(),
        )
        add(
            type="action_dca",
            category="action",
            name="DCA Order",
            description="Dollar cost averaging order",
            action_kind=ActionKind.DCA,
            config_schema=ConfigSchema(
                properties={
                    "direction": _prop("string", "Direction", enum=["buy", "sell"]),
                    "fromToken": _prop("string", "From Token"),
                    "toToken": _prop("string", "To Token"),
                    "amountPerOrder": _prop("number", "Amount Per Order"),
                    "totalOrders": _prop("number", "Total Orders"),
                    "intervalSeconds": _prop("number", "Interval (seconds)"),
                },
                required=["direction", "fromToken", "toToken", "amountPerOrder", "totalOrders", "intervalSeconds"],
            ),
            default_config={
                "direction": "buy",
                "fromToken": "USDT",
                "toToken": "TON",
                "amountPerOrder": 100,
                "totalOrders": 10,
                "intervalSeconds": 86400,
            },
            **_action_ports(),
        )
        add(
            type="action_rebalance",
            category="action",
            name="Rebalance Portfolio",
            description="Rebalance portfolio to target allocations",
            action_kind=ActionKind.REBALANCE,
            config_schema=ConfigSchema(
                properties={
                    "allocations": _prop("array", "Target Allocations"),
                    "threshold": _prop("number", "Drift Threshold %", default=5, min=1, max=20),
                    "maxSlippage": _prop("number", "Max Slippage %", default=1),
                },
                required=["allocations"],
            ),
            default_config={
                "allocations": [
                    {"token": "TON", "target": 50},
                    {"token": "USDT", "target": 30},
                    {"token": "ETH", "target": 20},
                ],
                "threshold": 5,
                "maxSlippage": 1,
            },
            **_action_ports(),
        )
        add(
            type="action_notification",
            category="action",
            name="Send Notification",
            description="Send notification to user",
            action_kind=ActionKind.NOTIFICATION,
            inputs=[_port_in("in", "trigger", "Trigger")],
            outputs=[_port_out("out", "trigger", "Continue")],
            config_schema=ConfigSchema(
                properties={
                    "channel": _prop("string", "Channel", enum=["telegram", "email", "webhook"], default="telegram"),
                    "message": _prop("string", "Message"),
                    "priority": _prop("string", "Priority", enum=["low", "normal", "high"], default="normal"),
                },
                required=["channel", "message"],
            ),
            default_config={"channel": "telegram", "message": "Strategy notification", "priority": "normal"},
        )

        # Risk blocks
        add(
            type="risk_stop_loss",
            category="risk",
            name="Stop Loss",
            description="Exit position on loss threshold",
            config_schema=ConfigSchema(
                properties={
                    "type": _prop("string", "Type", enum=["percentage", "fixed", "trailing"], default="percentage"),
                    "value": _prop("number", "Loss Limit"),
                    "trailingDistance": _prop("number", "Trailing Distance %"),
                },
                required=["type", "value"],
            ),
            default_config={"type": "percentage", "value": 5},
            **_risk_ports("triggered"),
        )
        add(
            type="risk_take_profit",
            category="risk",
            name="Take Profit",
            description="Exit position on profit target",
            config_schema=ConfigSchema(
                properties={
                    "type": _prop("string", "Type", enum=["percentage", "fixed", "trailing"]),
                    "value": _prop("number", "Profit Target"),
                    "partial": _prop("boolean", "Partial Exit", default=False),
                    "partialPercent": _prop("number", "Exit %", default=50),
                },
                required=["type", "value"],
            ),
            default_config={"type": "percentage", "value": 10, "partial": False},
            **_risk_ports("triggered"),
        )
        add(
            type="risk_max_position",
            category="risk",
            name="Max Position Size",
            description="Limit maximum position size",
            config_schema=ConfigSchema(
                properties={
                    "maxType": _prop("string", "Limit Type", enum=["percentage", "fixed"]),
                    "maxValue": _prop("number", "Maximum"),
                    "token": _prop("string", "Token (optional)"),
                },
                required=["maxType", "maxValue"],
            ),
            default_config={"maxType": "percentage", "maxValue": 25},
            **_risk_ports("blocked"),
        )
        add(
            type="risk_daily_limit",
            category="risk",
            name="Daily Limits",
            description="Limit daily trading activity",
            config_schema=ConfigSchema(
                properties={
                    "maxTrades": _prop("number", "Max Trades", min=1),
                    "maxVolume": _prop("number", "Max Volume (USD)"),
                    "maxLoss": _prop("number", "Max Loss %"),
                    "resetTime": _prop("string", "Reset Time (UTC)", default="00:00"),
                },
            ),
            default_config={"maxTrades": 20, "maxVolume": 10000, "maxLoss": 5, "resetTime": "00:00"},
            **_risk_ports("blocked"),
        )
        add(
            type="risk_cooldown",
            category="risk",
            name="Cooldown",
            description="Enforce minimum time between actions",
            config_schema=ConfigSchema(
                properties={
                    "seconds": _prop("number", "Cooldown (seconds)", min=1),
                    "scope": _prop("string", "Scope", enum=["strategy", "action", "token"], default="strategy"),
                },
                required=["seconds"],
            ),
            default_config={"seconds": 60, "scope": "strategy"},
            **_risk_ports("blocked"),
        )

        # Capital blocks
        add(
            type="capital_allocate",
            category="capital",
            name="Allocate Capital",
            description="Allocate capital to strategy",
            inputs=[_port_in("in", "trigger", "Trigger")],
            outputs=[_port_out("out", "amount", "Amount")],
            config_schema=ConfigSchema(
                properties={
                    "type": _prop("string", "Type", enum=["fixed", "percentage", "dynamic"]),
                    "amount": _prop("number", "Amount"),
                    "reserve": _prop("number", "Reserve %", default=10),
                },
                required=["type", "amount"],
            ),
            default_config={"type": "percentage", "amount": 50, "reserve": 10},
        )
        add(
            type="capital_split",
            category="capital",
            name="Split Capital",
            description="Split capital into multiple streams",
            inputs=[_port_in("in", "amount", "Input")],
            outputs=[
                _port_out("out1", "amount", "Output 1"),
                _port_out("out2", "amount", "Output 2"),
                _port_out("out3", "amount", "Output 3", required=False),
            ],
            config_schema=ConfigSchema(
                properties={"splits": _prop("array", "Splits (%)")},
                required=["splits"],
            ),
            default_config={"splits": [50, 50]},
        )

        # Utility blocks
        add(
            type="utility_delay",
            category="utility",
            name="Delay",
            description="Wait before continuing",
            inputs=[_port_in("in", "trigger", "Input")],
            outputs=[_port_out("out", "trigger", "Output")],
            config_schema=ConfigSchema(
                properties={
                    "seconds": _prop("number", "Delay (seconds)", min=1),
                    "randomize": _prop("boolean", "Randomize", default=False),
                    "maxSeconds": _prop("number", "Max Delay (seconds)"),
                },
                required=["seconds"],
            ),
            default_config={"seconds": 60, "randomize": False},
        )
        add(
            type="utility_loop",
            category="utility",
            name="Loop",
            description="Repeat actions multiple times",
            inputs=[_port_in("in", "trigger", "Input")],
            outputs=[_port_out("iteration", "trigger", "Each"), _port_out("complete", "trigger", "Done")],
            config_schema=ConfigSchema(
                properties={
                    "count": _prop("number", "Iterations", min=1, max=100),
                    "delayBetween": _prop("number", "Delay Between (seconds)", default=0),
                },
                required=["count"],
            ),
            default_config={"count": 5, "delayBetween": 0},
        )
        add(
            type="utility_parallel",
            category="utility",
            name="Parallel",
            description="Execute multiple branches in parallel",
            inputs=[_port_in("in", "trigger", "Input")],
            outputs=[
                _port_out("branch1", "trigger", "Branch 1"),
                _port_out("branch2", "trigger", "Branch 2"),
                _port_out("branch3", "trigger", "Branch 3", required=False),
            ],
            config_schema=ConfigSchema(
                properties={"waitForAll": _prop("boolean", "Wait for All", default=True)},
            ),
            default_config={"waitForAll": True},
        )
        add(
            type="utility_comment",
            category="utility",
            name="Comment",
            description="Add notes to the strategy (no execution)",
            config_schema=ConfigSchema(
                properties={
                    "text": _prop("string", "Comment"),
                    "color": _prop("string", "Color", default="#FFEB3B"),
                },
                required=["text"],
            ),
            default_config={"text": "Add your notes here", "color": "#FFEB3B"},
        )
        return definitions


__all__ = ["BlockCatalog", "BlockTypeDefinition", "ConfigSchema", "ConfigProperty"]
