"""Stable error codes shared by the query commands."""

from __future__ import annotations

ERR_INTERNAL = "INTERNAL_ERROR"
ERR_INVALID_REQUEST = "INVALID_REQUEST"
ERR_INVALID_BLOCK_RANGE = "INVALID_BLOCK_RANGE"
ERR_CONFIG_INVALID = "CONFIG_INVALID"
ERR_INTERFACE_INVALID = "INTERFACE_INVALID"

ERR_RPC_TRANSPORT = "RPC_TRANSPORT_ERROR"
ERR_RPC_TIMEOUT = "RPC_TIMEOUT"
ERR_RPC_REMOTE = "RPC_REMOTE_ERROR"

ERR_ABI_ENCODE_FAILED = "ABI_ENCODE_FAILED"
ERR_ABI_DECODE_FAILED = "ABI_DECODE_FAILED"
ERR_LOGS_FILTER_FAILED = "LOGS_FILTER_FAILED"

# exit codes
EXIT_OK = 0
EXIT_RPC_FAILURE = 1
EXIT_INVALID = 2
EXIT_CONFIG = 4
