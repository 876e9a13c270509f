"""Request/response contract helpers shared by the query commands."""

from __future__ import annotations

import itertools
import os
from typing import Any, Callable, Mapping

from error_map import (
    ERR_INTERNAL,
    ERR_RPC_REMOTE,
    ERR_RPC_TIMEOUT,
    EXIT_OK,
    EXIT_RPC_FAILURE,
)
from rpc_transport import invoke_rpc

DEFAULT_TIMEOUT_SECONDS = 20.0
RPC_URL_ENV = "ETH_RPC_URL"

RpcExecutor = Callable[[dict[str, Any]], tuple[int, dict[str, Any]]]


def resolve_rpc_url(default_url: str, env: Mapping[str, str] | None = None) -> tuple[str, str]:
    """Return (rpc_url, source); ETH_RPC_URL wins over the configured default."""
    environ = os.environ if env is None else env
    override = str(environ.get(RPC_URL_ENV, "")).strip()
    if override:
        return override, "user_env"
    return default_url, "config"


def build_error_payload(
    *,
    method: str,
    code: str,
    message: str,
    status: str = "error",
    rpc_response: Any = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "method": method,
        "status": status,
        "ok": False,
        "error_code": code,
        "error_message": message,
    }
    if rpc_response is not None:
        payload["rpc_response"] = rpc_response
    return payload


def wrap_stage_failure(command_method: str, stage: str, cause: dict[str, Any]) -> dict[str, Any]:
    payload = build_error_payload(
        method=command_method,
        status=str(cause.get("status", "error")),
        code=str(cause.get("error_code") or ERR_INTERNAL),
        message=f"{stage}: {cause.get('error_message', 'unknown error')}",
    )
    payload["stage"] = stage
    payload["cause"] = cause
    return payload


def _remote_error_message(error_obj: Any) -> str:
    if isinstance(error_obj, dict):
        message = str(error_obj.get("message", "")).strip() or "rpc returned an error response"
        if "code" in error_obj:
            return f"{message} (code {error_obj['code']})"
        return message
    return f"rpc returned an error response: {error_obj}"


def build_rpc_executor(*, rpc_url: str, timeout_seconds: float) -> RpcExecutor:
    ids = itertools.count(1)

    def _execute(req: dict[str, Any]) -> tuple[int, dict[str, Any]]:
        method = str(req.get("method", ""))
        rpc_payload = {
            "jsonrpc": "2.0",
            "id": next(ids),
            "method": method,
            "params": req.get("params", []),
        }
        transport = invoke_rpc(rpc_url=rpc_url, payload=rpc_payload, timeout_seconds=timeout_seconds)
        if not transport["ok"]:
            return EXIT_RPC_FAILURE, build_error_payload(
                method=method,
                status="timeout" if transport["error_code"] == ERR_RPC_TIMEOUT else "error",
                code=transport["error_code"],
                message=transport["error_message"],
                rpc_response=transport.get("rpc_response"),
            )

        rpc_response = transport["rpc_response"]
        if (
            not isinstance(rpc_response, dict)
            or rpc_response.get("error") is not None
            or "result" not in rpc_response
        ):
            error_obj = rpc_response.get("error") if isinstance(rpc_response, dict) else rpc_response
            return EXIT_RPC_FAILURE, build_error_payload(
                method=method,
                code=ERR_RPC_REMOTE,
                message=_remote_error_message(error_obj),
                rpc_response=rpc_response,
            )

        return EXIT_OK, {
            "method": method,
            "status": "ok",
            "ok": True,
            "error_code": None,
            "error_message": None,
            "result": rpc_response["result"],
        }

    return _execute
