import json

import pytest
import yaml

from strategy_lab.backend.core.strategy_builder.block_catalog import BlockCatalog
from strategy_lab.backend.core.strategy_builder.compiler import StrategyCompiler, content_hash
from strategy_lab.backend.core.strategy_builder.dsl_serializer import InterchangeFormatError, StrategyDslSerializer
from strategy_lab.backend.core.strategy_builder.models import Block, Connection, Strategy


def build_strategy() -> Strategy:
    catalog = BlockCatalog()
    trigger = catalog.create_block("trigger_schedule", "trigger")
    condition = catalog.create_block("condition_price", "check")
    swap = catalog.create_block("action_swap", "swap")
    stop = catalog.create_block("risk_stop_loss", "stop")
    return Strategy(
        id="s1",
        name="Hourly swap",
        version="1.2.0",
        blocks=[trigger, condition, swap, stop],
        connections=[
            Connection(id="c1", source_block_id="trigger", source_output_id="out", target_block_id="check", target_input_id="in"),
            Connection(id="c2", source_block_id="check", source_output_id="true", target_block_id="swap", target_input_id="in"),
            Connection(id="c3", source_block_id="swap", source_output_id="success", target_block_id="stop", target_input_id="in"),
        ],
    )


def test_content_hash_is_lowercase_hex_of_rolling_hash() -> None:
    assert content_hash("") == "0"
    assert content_hash("a") == "61"
    assert content_hash("ab") == format(97 * 31 + 98, "x")
    value = content_hash("x" * 500)
    assert value == value.lower()
    assert int(value, 16) <= 0x80000000


def test_compile_is_deterministic() -> None:
    compiler = StrategyCompiler()
    strategy = build_strategy()
    first = compiler.compile(strategy)
    second = compiler.compile(strategy)
    assert first.hash == second.hash
    assert first == second


def test_compile_builds_triggers_and_adjacency() -> None:
    compiled = StrategyCompiler().compile(build_strategy())

    assert [trigger.id for trigger in compiled.triggers] == ["trigger"]
    assert compiled.triggers[0].type == "time_schedule"
    assert compiled.triggers[0].next_nodes == ["check"]

    nodes = {node.id: node for node in compiled.nodes}
    assert set(nodes) == {"trigger", "check", "swap", "stop"}
    assert nodes["check"].inputs == {"in": ["trigger"]}
    assert nodes["check"].outputs == {"true": ["swap"]}
    assert nodes["swap"].type == "action_swap"
    assert nodes["trigger"].inputs == {}
    assert len(compiled.edges) == 3
    assert compiled.edges[0].from_ == "trigger"


def test_trigger_type_prefers_config_type() -> None:
    strategy = Strategy(
        id="s2",
        name="Configured",
        blocks=[Block(id="t", category="trigger", name="Custom", config={"type": "webhook"})],
    )
    compiled = StrategyCompiler().compile(strategy)
    assert compiled.triggers[0].type == "webhook"

    strategy.blocks[0].config = {}
    assert StrategyCompiler().compile(strategy).triggers[0].type == "manual"


def test_unregistered_block_types_pass_through() -> None:
    strategy = Strategy(
        id="s3",
        name="Opaque",
        blocks=[Block(id="x", category="utility", name="Future Block", config={"k": 1})],
    )
    compiled = StrategyCompiler().compile(strategy)
    assert compiled.nodes[0].type == "Future Block"
    assert compiled.nodes[0].config == {"k": 1}


def test_hash_changes_with_config_and_order() -> None:
    compiler = StrategyCompiler()
    strategy = build_strategy()
    baseline = compiler.hash_strategy(strategy)

    changed = strategy.clone()
    changed.blocks[2].config["amount"] = 75
    assert compiler.hash_strategy(changed) != baseline

    reordered = strategy.clone()
    reordered.blocks = list(reversed(reordered.blocks))
    assert compiler.hash_strategy(reordered) != baseline


def test_round_trip_preserves_hash() -> None:
    compiler = StrategyCompiler()
    strategy = build_strategy()
    compiled = compiler.compile(strategy)
    restored = compiler.decompile(compiled)

    assert restored != strategy
    assert compiler.compile(restored).hash == compiled.hash


def test_decompile_synthesizes_layout_and_ports() -> None:
    compiler = StrategyCompiler()
    restored = compiler.decompile(compiler.compile(build_strategy()))

    positions = [(block.position.x, block.position.y) for block in restored.blocks]
    assert positions == [(100.0, 100.0), (300.0, 100.0), (500.0, 100.0), (700.0, 100.0)]
    check = restored.get_block("check")
    assert check.name == "condition_price"
    assert [port.id for port in check.inputs] == ["in"]
    assert [port.id for port in check.outputs] == ["true"]
    assert all(port.data_type == "any" for port in check.inputs + check.outputs)
    assert [conn.id for conn in restored.connections] == ["conn_0", "conn_1", "conn_2"]
    assert restored.version == "1.2.0"


def test_decompile_wraps_grid_after_five_columns() -> None:
    compiler = StrategyCompiler()
    strategy = Strategy(
        id="grid",
        name="Grid",
        blocks=[Block(id=f"b{i}", category="utility", name="Comment") for i in range(7)],
    )
    restored = compiler.decompile(compiler.compile(strategy))
    assert (restored.blocks[5].position.x, restored.blocks[5].position.y) == (100.0, 250.0)
    assert (restored.blocks[6].position.x, restored.blocks[6].position.y) == (300.0, 250.0)


def test_serializer_json_wire_format_round_trip() -> None:
    serializer = StrategyDslSerializer()
    strategy = build_strategy()
    payload = serializer.to_json(strategy)
    data = json.loads(payload)

    assert set(data) == {"id", "name", "version", "triggers", "nodes", "edges", "riskParams", "config", "hash"}
    assert data["edges"][0]["from"] == "trigger"
    assert data["edges"][0]["fromOutput"] == "out"
    assert data["triggers"][0]["nextNodes"] == ["check"]
    assert data["riskParams"]["maxPositionSize"] == 30.0

    restored = serializer.from_json(payload)
    assert StrategyCompiler().compile(restored).hash == data["hash"]


def test_serializer_yaml_export() -> None:
    serializer = StrategyDslSerializer()
    strategy = build_strategy()
    data = yaml.safe_load(serializer.to_yaml(strategy))
    assert data == serializer.to_dict(strategy)


def test_from_json_rejects_malformed_input() -> None:
    serializer = StrategyDslSerializer()
    with pytest.raises(InterchangeFormatError):
        serializer.from_json("{not json")

    document = serializer.to_dict(build_strategy())
    del document["hash"]
    with pytest.raises(InterchangeFormatError):
        serializer.from_json(document)

    with pytest.raises(ValueError):
        serializer.from_json({"id": "x", "name": "y", "version": "1", "hash": "0", "nodes": [{"id": "n"}]})


def test_parse_rejects_undecodable_bytes() -> None:
    serializer = StrategyDslSerializer()
    with pytest.raises(InterchangeFormatError):
        serializer.parse(b"\xff\xfe\xfa")
    with pytest.raises(InterchangeFormatError):
        serializer.from_json(b"\x80\x81\x82\x83")


def test_content_hash_walks_utf16_code_units() -> None:
    assert content_hash("é") == "e9"
    # U+1F600 hashes as its surrogate pair 0xD83D 0xDE00
    assert content_hash("\U0001F600") == format(0xD83D * 31 + 0xDE00, "x")


def test_hash_covers_non_ascii_config_unescaped() -> None:
    strategy = Strategy(
        id="s",
        name="Unicode",
        blocks=[Block(id="b", category="trigger", name="Manual", config={"label": "café"})],
    )
    expected = content_hash('{"blocks":[{"id":"b","config":{"label":"café"}}],"connections":[]}')
    assert StrategyCompiler().hash_strategy(strategy) == expected
