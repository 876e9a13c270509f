"""eth_getLogs filter construction and block range helpers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from abi_codec import ADDRESS_RE, HEX_RE
from error_map import (
    ERR_INVALID_BLOCK_RANGE,
    ERR_LOGS_FILTER_FAILED,
    EXIT_INVALID,
    EXIT_OK,
)
from quantity import parse_nonnegative_quantity, to_hex_quantity
from rpc_contract import RpcExecutor, build_error_payload, wrap_stage_failure

logger = logging.getLogger(__name__)

DEFAULT_RECENT_BLOCKS = 100


@dataclass(frozen=True)
class FilterQuery:
    from_block: int
    to_block: int
    address: str
    topics: tuple[str, ...]

    def __post_init__(self) -> None:
        if self.from_block < 0 or self.to_block < 0:
            raise ValueError("block bounds must be >= 0")
        if self.from_block > self.to_block:
            raise ValueError("fromBlock must be <= toBlock")
        if not ADDRESS_RE.fullmatch(self.address):
            raise ValueError("filter address must be a 20-byte hex string")

    def as_rpc_filter(self) -> dict[str, Any]:
        return {
            "fromBlock": to_hex_quantity(self.from_block),
            "toBlock": to_hex_quantity(self.to_block),
            "address": self.address,
            "topics": list(self.topics),
        }


@dataclass(frozen=True)
class LogEntry:
    block_number: int
    topics: tuple[str, ...]
    data: str
    transaction_hash: str | None = None
    log_index: int | None = None


def resolve_recent_range(head_block: int, span: int = DEFAULT_RECENT_BLOCKS) -> tuple[int, int]:
    """Inclusive range covering the last `span` blocks up to head, clamped at genesis."""
    if span <= 0:
        raise ValueError("span must be a positive integer")
    if head_block < 0:
        raise ValueError("head block must be >= 0")
    return max(0, head_block - span + 1), head_block


def build_event_filter(*, address: str, topic0: str, from_block: int, to_block: int) -> FilterQuery:
    return FilterQuery(
        from_block=from_block,
        to_block=to_block,
        address=address,
        topics=(topic0,),
    )


def parse_log_entry(item: Any) -> LogEntry:
    if not isinstance(item, dict):
        raise ValueError("log item is not an object")

    ok_block, block_number, block_err = parse_nonnegative_quantity(item.get("blockNumber"))
    if not ok_block:
        raise ValueError(f"log blockNumber: {block_err}")

    topics = item.get("topics", [])
    if not isinstance(topics, list) or not all(isinstance(t, str) and HEX_RE.fullmatch(t) for t in topics):
        raise ValueError("log topics must be an array of 0x-prefixed hex strings")

    data = item.get("data", "0x")
    if not isinstance(data, str) or not HEX_RE.fullmatch(data):
        raise ValueError("log data must be a 0x-prefixed hex string")

    log_index: int | None = None
    if item.get("logIndex") is not None:
        ok_index, log_index, index_err = parse_nonnegative_quantity(item.get("logIndex"))
        if not ok_index:
            raise ValueError(f"log logIndex: {index_err}")

    return LogEntry(
        block_number=block_number,
        topics=tuple(topics),
        data=data,
        transaction_hash=item.get("transactionHash"),
        log_index=log_index,
    )


def fetch_head_block(execute_rpc: RpcExecutor) -> tuple[int, dict[str, Any]]:
    exit_code, payload = execute_rpc({"method": "eth_blockNumber", "params": []})
    if exit_code != EXIT_OK:
        return exit_code, wrap_stage_failure("eth_blockNumber", "latest block lookup", payload)

    result = payload.get("result")
    if not isinstance(result, str):
        ok_head, head, head_err = False, 0, "result is not a string"
    else:
        ok_head, head, head_err = parse_nonnegative_quantity(result)
    if not ok_head:
        return EXIT_INVALID, build_error_payload(
            method="eth_blockNumber",
            code=ERR_INVALID_BLOCK_RANGE,
            message=f"latest block lookup: invalid block quantity {result!r} ({head_err})",
        )
    return EXIT_OK, {**payload, "head_block": head}


def fetch_logs(query: FilterQuery, execute_rpc: RpcExecutor) -> tuple[int, dict[str, Any]]:
    rpc_filter = query.as_rpc_filter()
    logger.debug("eth_getLogs %s..%s on %s", query.from_block, query.to_block, query.address)
    exit_code, payload = execute_rpc({"method": "eth_getLogs", "params": [rpc_filter]})
    if exit_code != EXIT_OK:
        return exit_code, wrap_stage_failure("eth_getLogs", "filter logs", payload)

    result = payload.get("result")
    if not isinstance(result, list):
        return EXIT_INVALID, build_error_payload(
            method="eth_getLogs",
            code=ERR_LOGS_FILTER_FAILED,
            message="eth_getLogs returned a non-array result",
        )

    try:
        entries = [parse_log_entry(item) for item in result]
    except ValueError as err:
        return EXIT_INVALID, build_error_payload(
            method="eth_getLogs",
            code=ERR_LOGS_FILTER_FAILED,
            message=str(err),
        )

    return EXIT_OK, {
        "method": "eth_getLogs",
        "status": "ok",
        "ok": True,
        "error_code": None,
        "error_message": None,
        "filter": rpc_filter,
        "logs": entries,
    }
