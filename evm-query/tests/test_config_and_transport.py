from __future__ import annotations

import pytest

from query_config import load_config, parse_config
from rpc_contract import build_rpc_executor, resolve_rpc_url
from rpc_transport import invoke_rpc

from ._query_helpers import (
    BAYC,
    CONFIG,
    REFERENCES,
    USDC,
    _RPCHandler,
    _result,
    _rpc_error,
    _serve,
    _stop,
)


def test_default_config_loads_contracts():
    config = load_config(CONFIG)
    assert config.rpc_url == "https://eth.llamarpc.com"
    assert config.timeout_seconds == 20.0

    token = config.contract("token")
    assert token.address == USDC
    assert token.symbol == "USDC"
    assert token.abi_path == (REFERENCES / "abi" / "usdc.json").resolve()
    assert token.load_interface().function("decimals").output_types == ("uint8",)

    assert config.contract("nft").address == BAYC
    with pytest.raises(ValueError):
        config.contract("missing")


@pytest.mark.parametrize(
    "raw",
    [
        [],
        {"contracts": {"token": {"address": USDC, "abi": "a.json"}}},
        {"rpc_url": "http://x", "contracts": {}},
        {"rpc_url": "http://x", "contracts": {"token": {"address": "0x1", "abi": "a.json"}}},
        {"rpc_url": "http://x", "contracts": {"token": {"address": USDC}}},
        {"rpc_url": "http://x", "timeout_seconds": 0, "contracts": {"token": {"address": USDC, "abi": "a.json"}}},
    ],
)
def test_parse_config_rejects_invalid(raw, tmp_path):
    with pytest.raises(ValueError):
        parse_config(raw, base_dir=tmp_path)


def test_load_config_reports_yaml_errors(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("rpc_url: [unclosed", encoding="utf-8")
    with pytest.raises(ValueError, match="cannot read config"):
        load_config(path)


def test_env_overrides_configured_endpoint():
    assert resolve_rpc_url("https://default", {"ETH_RPC_URL": "http://local:8545"}) == (
        "http://local:8545",
        "user_env",
    )
    assert resolve_rpc_url("https://default", {"ETH_RPC_URL": "  "}) == ("https://default", "config")
    assert resolve_rpc_url("https://default", {}) == ("https://default", "config")


def test_executor_returns_result_and_numbers_requests():
    server, url = _serve([_result("0x10"), _result("0x11")])
    try:
        execute = build_rpc_executor(rpc_url=url, timeout_seconds=5)
        assert execute({"method": "eth_blockNumber", "params": []}) == (
            0,
            {
                "method": "eth_blockNumber",
                "status": "ok",
                "ok": True,
                "error_code": None,
                "error_message": None,
                "result": "0x10",
            },
        )
        execute({"method": "eth_blockNumber"})
        assert [call["id"] for call in _RPCHandler.calls] == [1, 2]
        assert _RPCHandler.calls[0]["jsonrpc"] == "2.0"
        assert _RPCHandler.calls[1]["params"] == []
    finally:
        _stop(server)


def test_executor_maps_remote_error():
    server, url = _serve([_rpc_error("execution reverted")])
    try:
        execute = build_rpc_executor(rpc_url=url, timeout_seconds=5)
        exit_code, payload = execute({"method": "eth_call", "params": []})
        assert exit_code == 1
        assert payload["error_code"] == "RPC_REMOTE_ERROR"
        assert payload["error_message"] == "execution reverted (code 3)"
    finally:
        _stop(server)


def test_transport_http_error_and_non_json():
    server, url = _serve([(503, {"error": "busy"}), "<html>oops</html>"])
    try:
        first = invoke_rpc(rpc_url=url, payload={"method": "eth_blockNumber"}, timeout_seconds=5)
        assert first["ok"] is False
        assert first["error_code"] == "RPC_TRANSPORT_ERROR"
        assert first["error_message"] == "http error 503"

        second = invoke_rpc(rpc_url=url, payload={"method": "eth_blockNumber"}, timeout_seconds=5)
        assert second["error_code"] == "RPC_TRANSPORT_ERROR"
        assert second["rpc_response"] == {"raw": "<html>oops</html>"}
        # no retries
        assert len(_RPCHandler.calls) == 2
    finally:
        _stop(server)


def test_transport_connection_refused():
    result = invoke_rpc(rpc_url="http://127.0.0.1:1", payload={"method": "eth_blockNumber"}, timeout_seconds=2)
    assert result["ok"] is False
    assert result["error_code"] in {"RPC_TRANSPORT_ERROR", "RPC_TIMEOUT"}


def test_transport_undecodable_body_is_a_transport_failure():
    server, url = _serve([b"\xff\xfe garbage"])
    try:
        result = invoke_rpc(rpc_url=url, payload={"method": "eth_blockNumber"}, timeout_seconds=5)
        assert result["ok"] is False
        assert result["error_code"] == "RPC_TRANSPORT_ERROR"
        assert result["error_message"].startswith("unreadable rpc response")
    finally:
        _stop(server)


def test_transport_slow_endpoint_times_out():
    server, url = _serve([_result("0x10")], delay_seconds=1.5)
    try:
        result = invoke_rpc(rpc_url=url, payload={"method": "eth_blockNumber"}, timeout_seconds=0.3)
        assert result["ok"] is False
        assert result["error_code"] == "RPC_TIMEOUT"
    finally:
        _stop(server)


def test_executor_accepts_null_error_next_to_result():
    server, url = _serve([{"jsonrpc": "2.0", "id": 1, "result": "0x10", "error": None}])
    try:
        execute = build_rpc_executor(rpc_url=url, timeout_seconds=5)
        exit_code, payload = execute({"method": "eth_blockNumber", "params": []})
        assert exit_code == 0
        assert payload["result"] == "0x10"
    finally:
        _stop(server)
