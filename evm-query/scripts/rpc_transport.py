"""HTTP JSON-RPC transport. One POST per request, no retries."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from socket import timeout as SocketTimeout
from typing import Any

from error_map import ERR_RPC_TIMEOUT, ERR_RPC_TRANSPORT

logger = logging.getLogger(__name__)


def _failure(code: str, message: str, rpc_response: Any = None) -> dict[str, Any]:
    return {
        "ok": False,
        "error_code": code,
        "error_message": message,
        "rpc_response": rpc_response,
    }


def invoke_rpc(
    *,
    rpc_url: str,
    payload: dict[str, Any],
    timeout_seconds: float,
) -> dict[str, Any]:
    body = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        rpc_url,
        data=body,
        method="POST",
        headers={"Content-Type": "application/json"},
    )
    logger.debug("rpc %s -> %s", payload.get("method"), rpc_url)

    try:
        with urllib.request.urlopen(req, timeout=timeout_seconds) as resp:
            text = resp.read().decode("utf-8")
    except SocketTimeout as err:
        return _failure(ERR_RPC_TIMEOUT, str(err) or "rpc request timed out")
    except urllib.error.HTTPError as err:
        text = err.read().decode("utf-8", errors="replace")
        return _failure(ERR_RPC_TRANSPORT, f"http error {err.code}", {"status": err.code, "raw": text})
    except urllib.error.URLError as err:
        if isinstance(err.reason, SocketTimeout):
            return _failure(ERR_RPC_TIMEOUT, str(err.reason) or "rpc request timed out")
        return _failure(ERR_RPC_TRANSPORT, str(err.reason))
    except OSError as err:
        return _failure(ERR_RPC_TRANSPORT, str(err))
    except Exception as err:  # noqa: BLE001
        # undecodable or truncated bodies (UnicodeDecodeError, http.client.HTTPException)
        return _failure(ERR_RPC_TRANSPORT, f"unreadable rpc response: {err}")

    try:
        rpc_response = json.loads(text)
    except json.JSONDecodeError:
        return _failure(ERR_RPC_TRANSPORT, "rpc endpoint returned non-json response", {"raw": text})

    return {
        "ok": True,
        "error_code": None,
        "error_message": None,
        "rpc_response": rpc_response,
    }
