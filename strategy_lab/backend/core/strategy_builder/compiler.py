"""Transforms strategy graphs into the flat interchange form and back."""

from __future__ import annotations

import json
from collections import defaultdict
from typing import Dict, List, Optional

from strategy_lab.backend.core.strategy_builder.block_catalog import BlockCatalog
from strategy_lab.backend.core.strategy_builder.models import (
    Block,
    CompiledEdge,
    CompiledNode,
    CompiledStrategy,
    CompiledTrigger,
    Connection,
    ConnectionPoint,
    Position,
    Strategy,
)

GRID_COLUMNS = 5
GRID_ORIGIN = 100.0
GRID_STEP_X = 200.0
GRID_STEP_Y = 150.0


def content_hash(content: str) -> str:
    """Rolling 31-multiplier hash over ``content``, as unsigned 32-bit magnitude in hex.

    Not collision resistant; only suitable for change detection.
    """

    # UTF-16 code units, so non-BMP characters hash as surrogate pairs
    units = content.encode("utf-16-le", "surrogatepass")
    value = 0
    for index in range(0, len(units), 2):
        code = units[index] | (units[index + 1] << 8)
        value = ((value << 5) - value + code) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return format(abs(value), "x")


class StrategyCompiler:
    """Compiles strategies to :class:`CompiledStrategy` and decompiles them back."""

    def __init__(self, catalog: Optional[BlockCatalog] = None) -> None:
        self.catalog = catalog or BlockCatalog()

    def compile(self, strategy: Strategy) -> CompiledStrategy:
        inbound, outbound = self._adjacency(strategy.connections)

        triggers = [
            CompiledTrigger(
                id=block.id,
                type=self._trigger_type(block),
                config=dict(block.config),
                next_nodes=[c.target_block_id for c in strategy.connections if c.source_block_id == block.id],
            )
            for block in strategy.blocks
            if block.category == "trigger"
        ]
        nodes = [
            CompiledNode(
                id=block.id,
                type=block.type or block.name,
                category=block.category,
                config=dict(block.config),
                inputs=inbound.get(block.id, {}),
                outputs=outbound.get(block.id, {}),
            )
            for block in strategy.blocks
        ]
        edges = [
            CompiledEdge(
                from_=conn.source_block_id,
                from_output=conn.source_output_id,
                to=conn.target_block_id,
                to_input=conn.target_input_id,
            )
            for conn in strategy.connections
        ]

        return CompiledStrategy(
            id=strategy.id,
            name=strategy.name,
            version=strategy.version,
            triggers=triggers,
            nodes=nodes,
            edges=edges,
            risk_params=strategy.risk_params.model_copy(deep=True),
            config=strategy.config.model_copy(deep=True),
            hash=self.hash_strategy(strategy),
        )

    def decompile(self, compiled: CompiledStrategy) -> Strategy:
        """Rebuild an editable strategy; layout, labels and port types are not recoverable."""

        blocks: List[Block] = []
        for index, node in enumerate(compiled.nodes):
            blocks.append(
                Block(
                    id=node.id,
                    category=node.category,
                    name=node.type,
                    type=node.type,
                    config=dict(node.config),
                    position=Position(
                        x=GRID_ORIGIN + (index % GRID_COLUMNS) * GRID_STEP_X,
                        y=GRID_ORIGIN + (index // GRID_COLUMNS) * GRID_STEP_Y,
                    ),
                    inputs=[
                        ConnectionPoint(id=key, type="input", data_type="any", label=key) for key in node.inputs
                    ],
                    outputs=[
                        ConnectionPoint(id=key, type="output", data_type="any", label=key) for key in node.outputs
                    ],
                )
            )

        connections = [
            Connection(
                id=f"conn_{index}",
                source_block_id=edge.from_,
                source_output_id=edge.from_output,
                target_block_id=edge.to,
                target_input_id=edge.to_input,
            )
            for index, edge in enumerate(compiled.edges)
        ]

        return Strategy(
            id=compiled.id,
            name=compiled.name,
            version=compiled.version,
            blocks=blocks,
            connections=connections,
            config=compiled.config.model_copy(deep=True),
            risk_params=compiled.risk_params.model_copy(deep=True),
        )

    def hash_strategy(self, strategy: Strategy) -> str:
        # Connections contribute their endpoints only, so renamed connection ids keep the hash.
        payload = {
            "blocks": [{"id": block.id, "config": block.config} for block in strategy.blocks],
            "connections": [
                {
                    "sourceBlockId": conn.source_block_id,
                    "sourceOutputId": conn.source_output_id,
                    "targetBlockId": conn.target_block_id,
                    "targetInputId": conn.target_input_id,
                }
                for conn in strategy.connections
            ],
        }
        return content_hash(json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=str))

    def _trigger_type(self, block: Block) -> str:
        configured = block.config.get("type")
        if isinstance(configured, str) and configured:
            return configured
        return self.catalog.resolve_trigger_kind(block).value

    @staticmethod
    def _adjacency(
        connections: List[Connection],
    ) -> tuple[Dict[str, Dict[str, List[str]]], Dict[str, Dict[str, List[str]]]]:
        inbound: Dict[str, Dict[str, List[str]]] = defaultdict(dict)
        outbound: Dict[str, Dict[str, List[str]]] = defaultdict(dict)
        for conn in connections:
            inbound[conn.target_block_id].setdefault(conn.target_input_id, []).append(conn.source_block_id)
            outbound[conn.source_block_id].setdefault(conn.source_output_id, []).append(conn.target_block_id)
        return inbound, outbound


__all__ = ["StrategyCompiler", "content_hash"]
