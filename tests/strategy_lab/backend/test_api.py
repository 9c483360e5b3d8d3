from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from strategy_lab.backend.app.main import app
from strategy_lab.backend.core.strategy_builder.block_catalog import BlockCatalog
from strategy_lab.backend.core.strategy_builder.models import Connection, Strategy


client = TestClient(app)
START = datetime(2024, 2, 1, tzinfo=timezone.utc)


def build_strategy_payload() -> dict:
    catalog = BlockCatalog()
    strategy = Strategy(
        id="api-strategy",
        name="API Strategy",
        blocks=[
            catalog.create_block("trigger_schedule", "trigger"),
            catalog.create_block("action_swap", "swap"),
            catalog.create_block("risk_stop_loss", "stop"),
        ],
        connections=[
            Connection(id="c1", source_block_id="trigger", source_output_id="out", target_block_id="swap", target_input_id="in"),
            Connection(id="c2", source_block_id="swap", source_output_id="success", target_block_id="stop", target_input_id="in"),
        ],
    )
    return strategy.to_wire()


def build_config_payload(hours: int = 24) -> dict:
    return {
        "startDate": START.isoformat(),
        "endDate": (START + timedelta(hours=hours)).isoformat(),
        "initialCapital": 10000,
        "seed": 7,
    }


def test_health_endpoint() -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "strategy_lab_backend"}
    assert response.headers.get("X-Request-ID")


def test_request_id_is_echoed() -> None:
    response = client.get("/api/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_list_blocks_endpoint_returns_catalog() -> None:
    response = client.get("/api/strategy-builder/blocks")

    assert response.status_code == 200
    types = {block["type"] for block in response.json()}
    assert {definition.type for definition in BlockCatalog().get_all()} == types
    swap = next(block for block in response.json() if block["type"] == "action_swap")
    assert swap["defaultConfig"]["fromToken"] == "USDT"
    assert swap["actionKind"] == "swap"


def test_validate_endpoint() -> None:
    response = client.post("/api/strategy-builder/validate", json=build_strategy_payload())

    assert response.status_code == 200
    data = response.json()
    assert data["result"]["valid"] is True
    assert data["result"]["riskScore"] == 0
    assert data["deployable"] is True
    assert data["summary"].startswith("Strategy is valid")

    broken = build_strategy_payload()
    broken["connections"] = []
    data = client.post("/api/strategy-builder/validate", json=broken).json()
    assert data["result"]["valid"] is False
    assert {issue["code"] for issue in data["result"]["errors"]} == {"missing_required_input"}


def test_compile_and_decompile_round_trip() -> None:
    compiled = client.post("/api/strategy-builder/compile", json=build_strategy_payload())
    assert compiled.status_code == 200
    document = compiled.json()
    assert document["triggers"][0]["nextNodes"] == ["swap"]
    assert document["edges"][0]["from"] == "trigger"

    restored = client.post("/api/strategy-builder/decompile", json=document)
    assert restored.status_code == 200
    recompiled = client.post("/api/strategy-builder/compile", json=restored.json())
    assert recompiled.json()["hash"] == document["hash"]


def test_decompile_rejects_malformed_document() -> None:
    response = client.post("/api/strategy-builder/decompile", json={"id": "x", "nodes": "nope"})

    assert response.status_code == 400
    data = response.json()
    assert data["error_code"] == "bad_request"
    assert data["request_id"] == response.headers["X-Request-ID"]


def test_invalid_request_body_is_rejected() -> None:
    response = client.post("/api/simulation/backtest", json={"strategy": build_strategy_payload()})
    assert response.status_code == 422


def test_backtest_endpoint() -> None:
    payload = {"strategy": build_strategy_payload(), "config": build_config_payload()}
    response = client.post("/api/simulation/backtest", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["strategyId"] == "api-strategy"
    assert data["status"] == "completed"
    assert len(data["equityCurve"]) == 24
    assert data["metrics"]["triggerFirings"] == 24
    assert data["metrics"]["totalTrades"] == len(data["trades"])


def test_monte_carlo_endpoint() -> None:
    payload = {"strategy": build_strategy_payload(), "config": build_config_payload(hours=12), "runs": 5, "seed": 3}
    response = client.post("/api/simulation/monte-carlo", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["runs"] == 5
    assert data["percentile5Return"] <= data["medianReturn"] <= data["percentile95Return"]

    payload["runs"] = 0
    assert client.post("/api/simulation/monte-carlo", json=payload).status_code == 422


def test_sandbox_and_estimate_endpoints() -> None:
    sandbox = client.post(
        "/api/simulation/sandbox", json={"strategy": build_strategy_payload(), "durationHours": 6, "seed": 1}
    )
    assert sandbox.status_code == 200
    assert sandbox.json()["success"] is True
    assert sandbox.json()["trades"] == 6

    estimate = client.post(
        "/api/simulation/estimate", json={"strategy": build_strategy_payload(), "horizon": "short", "seed": 2}
    )
    assert estimate.status_code == 200
    assert 0 <= estimate.json()["confidence"] <= 0.95


def test_malformed_block_config_is_reported_not_raised() -> None:
    payload = build_strategy_payload()
    condition = BlockCatalog().create_block("condition_price", "check")
    condition.config["operator"] = ["gt"]
    payload["blocks"].append(condition.to_wire())
    payload["blocks"][1]["config"]["toToken"] = ["TON"]

    validation = client.post("/api/strategy-builder/validate", json=payload)
    assert validation.status_code == 200
    assert "invalid_config" in {issue["code"] for issue in validation.json()["result"]["errors"]}

    backtest = client.post("/api/simulation/backtest", json={"strategy": payload, "config": build_config_payload(hours=3)})
    assert backtest.status_code == 200
    assert backtest.json()["status"] == "completed"
