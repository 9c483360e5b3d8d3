"""Static validation passes over strategy graphs."""

from __future__ import annotations

import json
import logging
import math
import re
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from pydantic import Field

from strategy_lab.backend.core.base_models import ConfigModel
from strategy_lab.backend.core.strategy_builder.block_catalog import BlockCatalog
from strategy_lab.backend.core.strategy_builder.models import (
    ActionKind,
    Block,
    Connection,
    DataType,
    SecurityCheck,
    Strategy,
    ValidationIssue,
    ValidationResult,
)

logger = logging.getLogger(__name__)

COMPARISON_OPERATORS = {"eq", "neq", "gt", "gte", "lt", "lte", "in", "nin"}
LOGIC_OPERATORS = {"and", "or", "not", "xor"}
TOKEN_KEYS = ("token", "fromToken", "toToken", "tokenA", "tokenB")
PROTOCOL_KEYS = ("protocol", "dex")
POSITIVE_RISK_KEYS = ("value", "maxValue", "seconds", "maxTrades", "maxLoss")
ADDRESS_PATTERN = re.compile(r"EQ[A-Za-z0-9_-]{46}")

CATEGORY_RISK_OFFSET = {
    "arbitrage": 20,
    "trading": 10,
    "liquidity_management": 10,
    "yield_farming": 5,
    "portfolio_automation": 0,
}

ACTION_GAS_COST = {
    ActionKind.SWAP: 0.15,
    ActionKind.STAKE: 0.1,
    ActionKind.UNSTAKE: 0.1,
    ActionKind.TRANSFER: 0.05,
    ActionKind.PROVIDE_LIQUIDITY: 0.2,
    ActionKind.REMOVE_LIQUIDITY: 0.2,
    ActionKind.REBALANCE: 0.3,
}
DEFAULT_ACTION_GAS = 0.05
CHECK_GAS = 0.01


class ValidationConfig(ConfigModel):
    """Validator settings, loadable from ``configs/lab/validation.yaml``."""

    strict_mode: bool = False
    max_risk_score: int = 80
    allowed_tokens: Optional[List[str]] = Field(
        default_factory=lambda: ["TON", "USDT", "USDC", "ETH", "BTC", "stTON", "tsTON"]
    )
    allowed_protocols: Optional[List[str]] = Field(
        default_factory=lambda: ["dedust", "stonfi", "tonstakers", "bemo", "whales", "evaa"]
    )
    max_gas_budget: float = 5.0
    enable_security_checks: bool = True

    @classmethod
    def from_yaml_config(cls, data: Dict[str, Any]) -> "ValidationConfig":
        return cls.model_validate(data.get("validation", data))


@dataclass(frozen=True)
class CustomValidationRule:
    """User supplied rule returning a finding or ``None``."""

    id: str
    name: str
    validate: Callable[[Strategy], Optional[ValidationIssue]]


def types_compatible(source: DataType, target: DataType) -> bool:
    if source == target or target == "any":
        return True
    return source == "trigger" and target == "boolean"


class StrategyValidator:
    """Runs structural, connection, config, risk and compliance passes over a strategy."""

    def __init__(
        self,
        config: Optional[ValidationConfig] = None,
        catalog: Optional[BlockCatalog] = None,
        custom_rules: Optional[Iterable[CustomValidationRule]] = None,
    ) -> None:
        self.config = config or ValidationConfig()
        self.catalog = catalog or BlockCatalog()
        self.custom_rules: List[CustomValidationRule] = list(custom_rules or [])

    def validate(self, strategy: Strategy) -> ValidationResult:
        """Validate ``strategy``; findings are returned, never raised."""

        findings: List[ValidationIssue] = []
        findings.extend(self._validate_structure(strategy))
        findings.extend(self._validate_connections(strategy))
        for block in strategy.blocks:
            findings.extend(self.validate_block(block))
        findings.extend(self._validate_risk_params(strategy))
        findings.extend(self._validate_compliance(strategy))
        for rule in self.custom_rules:
            issue = rule.validate(strategy)
            if issue is not None:
                findings.append(issue)

        errors = [issue for issue in findings if issue.severity == "error"]
        warnings = [issue for issue in findings if issue.severity != "error"]
        security_checks = self._run_security_checks(strategy) if self.config.enable_security_checks else []

        valid = not errors
        if self.config.strict_mode:
            valid = valid and not any(issue.severity == "warning" for issue in warnings)

        result = ValidationResult(
            valid=valid,
            errors=errors,
            warnings=warnings,
            risk_score=self._risk_score(strategy, findings),
            estimated_gas=self.estimate_gas(strategy),
            security_checks=security_checks,
        )
        logger.debug(
            "Strategy validated | strategy=%s valid=%s errors=%d warnings=%d risk_score=%d",
            strategy.id,
            result.valid,
            len(errors),
            len(warnings),
            result.risk_score,
        )
        return result

    def validate_block(self, block: Block) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        block_type = block.type or block.name.lower().replace(" ", "_")
        is_comment = block_type == "utility_comment" or block.name == "Comment"
        if self.catalog.get(block_type) is None and not is_comment:
            issues.append(
                ValidationIssue(
                    severity="info",
                    code="invalid_config",
                    message=f"Unknown block type: {block.type or block.name}",
                    block_id=block.id,
                )
            )
        issues.extend(self._validate_block_config(block))
        return issues

    def validate_connection(self, connection: Connection, strategy: Strategy) -> List[ValidationIssue]:
        def broken(message: str, code: str = "invalid_connection") -> List[ValidationIssue]:
            return [ValidationIssue(severity="error", code=code, message=message, connection_id=connection.id)]

        source = strategy.get_block(connection.source_block_id)
        if source is None:
            return broken(f"Source block not found: {connection.source_block_id}")
        target = strategy.get_block(connection.target_block_id)
        if target is None:
            return broken(f"Target block not found: {connection.target_block_id}")
        output = source.get_output(connection.source_output_id)
        if output is None:
            return broken(f"Output not found: {connection.source_output_id} on {source.name}")
        target_input = target.get_input(connection.target_input_id)
        if target_input is None:
            return broken(f"Input not found: {connection.target_input_id} on {target.name}")
        if not types_compatible(output.data_type, target_input.data_type):
            return broken(f"Type mismatch: {output.data_type} -> {target_input.data_type}", code="type_mismatch")
        return []

    def estimate_gas(self, strategy: Strategy) -> float:
        """Flat per-block gas heuristic in TON."""

        gas = 0.0
        for block in strategy.blocks:
            if block.category == "action":
                gas += ACTION_GAS_COST.get(self.catalog.resolve_action_kind(block), DEFAULT_ACTION_GAS)
            elif block.category in ("condition", "risk"):
                gas += CHECK_GAS
        return round(gas, 6)

    def is_deployable(self, result: ValidationResult) -> bool:
        return result.valid and result.risk_score < self.config.max_risk_score

    def find_cycle(self, strategy: Strategy) -> List[str]:
        """Return the first cycle path found by DFS from the triggers, or an empty list."""

        adjacency = _adjacency(strategy.connections)
        visited: Set[str] = set()
        on_stack: Set[str] = set()

        for trigger in strategy.blocks_by_category("trigger"):
            if trigger.id in visited:
                continue
            # explicit stack of (block, pending neighbours); long chains must not hit the recursion limit
            path: List[str] = [trigger.id]
            stack = [(trigger.id, iter(adjacency.get(trigger.id, [])))]
            visited.add(trigger.id)
            on_stack.add(trigger.id)
            while stack:
                block_id, neighbors = stack[-1]
                advanced = False
                for neighbor in neighbors:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        on_stack.add(neighbor)
                        path.append(neighbor)
                        stack.append((neighbor, iter(adjacency.get(neighbor, []))))
                        advanced = True
                        break
                    if neighbor in on_stack:
                        return path + [neighbor]
                if not advanced:
                    stack.pop()
                    on_stack.discard(block_id)
                    path.pop()
        return []

    def find_unreachable(self, strategy: Strategy) -> List[str]:
        adjacency = _adjacency(strategy.connections)
        reachable: Set[str] = set()
        queue = deque(block.id for block in strategy.blocks_by_category("trigger"))
        while queue:
            current = queue.popleft()
            if current in reachable:
                continue
            reachable.add(current)
            queue.extend(neighbor for neighbor in adjacency.get(current, []) if neighbor not in reachable)
        return [
            block.id for block in strategy.blocks if block.id not in reachable and block.category != "trigger"
        ]

    def used_tokens(self, strategy: Strategy) -> List[str]:
        tokens: Dict[str, None] = {}
        for block in strategy.blocks:
            for key in TOKEN_KEYS:
                value = block.config.get(key)
                if isinstance(value, str) and value:
                    tokens[value] = None
        for token in strategy.config.token_whitelist:
            tokens[token] = None
        return [token for token in tokens if token and not token.startswith("{{")]

    def used_protocols(self, strategy: Strategy) -> List[str]:
        protocols: Dict[str, None] = {}
        for block in strategy.blocks:
            for key in PROTOCOL_KEYS:
                value = block.config.get(key)
                if isinstance(value, str) and value:
                    protocols[value] = None
        return [p for p in protocols if p != "auto" and not p.startswith("{{")]

    def _validate_structure(self, strategy: Strategy) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        if not strategy.blocks_by_category("trigger"):
            issues.append(
                ValidationIssue(
                    severity="error",
                    code="missing_trigger",
                    message="Strategy must have at least one trigger block",
                )
            )
        if not strategy.blocks_by_category("action"):
            issues.append(
                ValidationIssue(
                    severity="warning",
                    code="missing_required_input",
                    message="Strategy must have at least one action block",
                )
            )

        cycle = self.find_cycle(strategy)
        if cycle:
            issues.append(
                ValidationIssue(
                    severity="error",
                    code="circular_dependency",
                    message=f"Circular dependency detected: {' -> '.join(cycle)}",
                )
            )

        for block_id in self.find_unreachable(strategy):
            block = strategy.get_block(block_id)
            if block is not None and block.category != "utility":
                issues.append(
                    ValidationIssue(
                        severity="warning",
                        code="unreachable_block",
                        message=f'Block "{block.name}" is not connected and will not execute',
                        block_id=block_id,
                    )
                )
        return issues

    def _validate_connections(self, strategy: Strategy) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        for connection in strategy.connections:
            issues.extend(self.validate_connection(connection, strategy))

        wired = {(c.target_block_id, c.target_input_id) for c in strategy.connections}
        for block in strategy.blocks:
            if block.category == "trigger":
                continue
            for port in block.inputs:
                if port.required and (block.id, port.id) not in wired:
                    issues.append(
                        ValidationIssue(
                            severity="error",
                            code="missing_required_input",
                            message=f'Required input "{port.label or port.id}" is not connected on "{block.name}"',
                            block_id=block.id,
                            field=port.id,
                        )
                    )
        return issues

    def _validate_block_config(self, block: Block) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        config = block.config

        def add(severity: str, code: str, message: str, field: str) -> None:
            issues.append(ValidationIssue(severity=severity, code=code, message=message, block_id=block.id, field=field))

        if block.category == "trigger":
            if config.get("scheduleType") == "interval" and not config.get("interval"):
                add("error", "missing_required_input", "Interval is required for scheduled triggers", "interval")

        if block.category in ("trigger", "condition", "action"):
            for key in TOKEN_KEYS:
                token = config.get(key)
                if isinstance(token, str) and token and not token.startswith("{{") and not self._token_allowed(token):
                    add("warning", "unsupported_token", f'Token "{token}" is not in the whitelist', key)
            for key in PROTOCOL_KEYS:
                protocol = config.get(key)
                if isinstance(protocol, str) and protocol and not self._protocol_allowed(protocol):
                    add("warning", "unsupported_protocol", f'Protocol "{protocol}" is not in the whitelist', key)

        if block.category == "action":
            slippage = config.get("maxSlippage")
            if _is_number(slippage) and slippage > 10:
                add("warning", "risk_exceeded", "Slippage tolerance is very high (>10%)", "maxSlippage")

        elif block.category == "risk":
            for key in POSITIVE_RISK_KEYS:
                value = config.get(key)
                if _is_number(value) and value <= 0:
                    add("error", "invalid_config", "Risk limit value must be positive", key)

        elif block.category == "condition":
            operator = config.get("operator")
            if operator:
                allowed = LOGIC_OPERATORS if self._is_logic_gate(block) else COMPARISON_OPERATORS
                if not isinstance(operator, str) or operator not in allowed:
                    add("error", "invalid_config", f"Invalid operator: {operator}", "operator")
        return issues

    def _validate_risk_params(self, strategy: Strategy) -> List[ValidationIssue]:
        params = strategy.risk_params
        issues: List[ValidationIssue] = []

        def add(severity: str, message: str, field: Optional[str]) -> None:
            issues.append(ValidationIssue(severity=severity, code="risk_exceeded", message=message, field=field))

        if params.max_position_size > 100:
            add("error", "Maximum position size cannot exceed 100%", "maxPositionSize")
        if params.max_position_size > 50:
            add("warning", "High position concentration (>50%) increases risk", "maxPositionSize")
        if params.max_daily_loss > 20:
            add("warning", "Daily loss limit exceeds 20% - very high risk", "maxDailyLoss")
        if params.max_drawdown > 50:
            add("warning", "Maximum drawdown exceeds 50% - extreme risk", "maxDrawdown")
        if params.stop_loss_percent == 0 and strategy.category == "trading":
            add("warning", "No stop loss configured for trading strategy", "stopLossPercent")
        if params.max_slippage > 5:
            add("warning", "High slippage tolerance may result in poor execution", "maxSlippage")
        if params.max_trades_per_day > 100:
            add("info", "Very high trade frequency may incur excessive gas costs", "maxTradesPerDay")
        if not strategy.blocks_by_category("risk"):
            add("info", "No risk control blocks - consider adding stop loss or position limits", None)
        return issues

    def _validate_compliance(self, strategy: Strategy) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        gas = self.estimate_gas(strategy)
        if self.config.max_gas_budget and gas > self.config.max_gas_budget:
            issues.append(
                ValidationIssue(
                    severity="warning",
                    code="invalid_config",
                    message=f"Estimated gas ({gas:.2f} TON) exceeds budget ({self.config.max_gas_budget} TON)",
                )
            )
        for token in self.used_tokens(strategy):
            if not self._token_allowed(token):
                issues.append(
                    ValidationIssue(
                        severity="warning",
                        code="unsupported_token",
                        message=f'Token "{token}" is not in the allowed list',
                    )
                )
        for protocol in self.used_protocols(strategy):
            if not self._protocol_allowed(protocol):
                issues.append(
                    ValidationIssue(
                        severity="warning",
                        code="unsupported_protocol",
                        message=f'Protocol "{protocol}" is not in the allowed list',
                    )
                )
        return issues

    def _run_security_checks(self, strategy: Strategy) -> List[SecurityCheck]:
        def check(name: str, passed: bool, failure: str) -> SecurityCheck:
            return SecurityCheck(name=name, passed=passed, message=None if passed else failure)

        hardcoded = any(ADDRESS_PATTERN.search(json.dumps(block.config, default=str)) for block in strategy.blocks)
        has_risk_blocks = bool(strategy.blocks_by_category("risk"))
        has_stop_loss = strategy.risk_params.stop_loss_percent > 0 or any(
            block.type == "risk_stop_loss" or "stop loss" in block.name.lower() for block in strategy.blocks
        )
        notifications = strategy.config.notifications
        return [
            check("No hardcoded addresses", not hardcoded, "Strategy contains hardcoded addresses - use variables instead"),
            check("Risk controls present", has_risk_blocks, "Add risk control blocks for safety"),
            check(
                "Reasonable position sizes",
                strategy.risk_params.max_position_size <= 50,
                "Position size exceeds 50% - high concentration risk",
            ),
            check("Stop loss configured", has_stop_loss, "Consider adding a stop loss for protection"),
            check(
                "Notifications enabled",
                notifications.on_execution or notifications.on_error,
                "Enable notifications to stay informed",
            ),
            check(
                "Whitelisted tokens only",
                all(self._token_allowed(token) for token in self.used_tokens(strategy)),
                "Some tokens are not in the whitelist",
            ),
            check(
                "Whitelisted protocols only",
                all(self._protocol_allowed(protocol) for protocol in self.used_protocols(strategy)),
                "Some protocols are not in the whitelist",
            ),
            check(
                "No infinite loops",
                not self.find_cycle(strategy),
                "Circular dependencies detected - may cause infinite loops",
            ),
        ]

    def _risk_score(self, strategy: Strategy, findings: List[ValidationIssue]) -> int:
        params = strategy.risk_params
        score = 0.0
        score += max(params.max_position_size - 30, 0) * 1.5
        score += max(params.max_daily_loss - 5, 0) * 2
        score += max(params.max_drawdown - 15, 0)
        if params.stop_loss_percent == 0:
            score += 15
        score += max(params.max_slippage - 2, 0) * 5
        score += CATEGORY_RISK_OFFSET.get(strategy.category, 0)
        score += 5 * sum(1 for issue in findings if issue.code == "risk_exceeded")
        # Half-up rounding.
        return max(0, min(int(math.floor(score + 0.5)), 100))

    def _token_allowed(self, token: str) -> bool:
        if self.config.allowed_tokens is None:
            return True
        return token.upper() in {allowed.upper() for allowed in self.config.allowed_tokens}

    def _protocol_allowed(self, protocol: str) -> bool:
        if self.config.allowed_protocols is None or protocol == "auto":
            return True
        return protocol.lower() in {allowed.lower() for allowed in self.config.allowed_protocols}

    @staticmethod
    def _is_logic_gate(block: Block) -> bool:
        return block.type == "condition_logic" or block.name == "Logic Gate"


def _adjacency(connections: List[Connection]) -> Dict[str, List[str]]:
    adjacency: Dict[str, List[str]] = defaultdict(list)
    for connection in connections:
        adjacency[connection.source_block_id].append(connection.target_block_id)
    return adjacency


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_strategy(strategy: Strategy, config: Optional[ValidationConfig] = None) -> ValidationResult:
    """Validate with a default-configured validator."""

    return StrategyValidator(config=config).validate(strategy)


def get_validation_summary(result: ValidationResult) -> str:
    """Render a human-readable report of a validation result."""

    lines = ["Strategy is valid" if result.valid else "Strategy has errors", f"Risk Score: {result.risk_score}/100"]
    if result.errors:
        lines.append(f"Errors ({len(result.errors)}):")
        lines.extend(f"- {issue.message}" for issue in result.errors)
    if result.warnings:
        lines.append(f"Warnings ({len(result.warnings)}):")
        lines.extend(f"- {issue.message}" for issue in result.warnings)
    passed = sum(1 for check in result.security_checks if check.passed)
    lines.append(f"Security: {passed}/{len(result.security_checks)} checks passed")
    lines.append(f"Estimated gas: {result.estimated_gas:.2f} TON")
    return "\n".join(lines)


__all__ = [
    "StrategyValidator",
    "ValidationConfig",
    "CustomValidationRule",
    "types_compatible",
    "validate_strategy",
    "get_validation_summary",
]
