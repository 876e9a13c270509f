"""ERC-20 decimals and Transfer log queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from abi_interface import AbiEvent
from contract_handle import BoundContract
from error_map import (
    ERR_ABI_DECODE_FAILED,
    ERR_INTERFACE_INVALID,
    ERR_INVALID_BLOCK_RANGE,
    EXIT_CONFIG,
    EXIT_INVALID,
    EXIT_OK,
)
from logs_engine import LogEntry, build_event_filter, fetch_logs
from rpc_contract import build_error_payload, wrap_stage_failure
from transforms import is_zero_address, scale_amount

logger = logging.getLogger(__name__)

TRANSFER_EVENT = "Transfer"
KIND_MINT = "Mint"
KIND_TRANSFER = "Transfer"


@dataclass(frozen=True)
class TransferRecord:
    block_number: int
    kind: str
    sender: str
    recipient: str
    raw_amount: int
    amount: int
    transaction_hash: str | None = None
    log_index: int | None = None


def get_decimals(contract: BoundContract) -> tuple[int, dict[str, Any]]:
    exit_code, payload = contract.call_single("decimals")
    if exit_code != EXIT_OK:
        return exit_code, wrap_stage_failure("decimals", "decimals()", payload)
    payload["decimals"] = int(payload["value"])
    return EXIT_OK, payload


def decode_transfer(entry: LogEntry, event: AbiEvent, decimals: int) -> TransferRecord:
    decoded = event.decode_log(list(entry.topics), entry.data)
    sender, recipient, raw_amount = (arg["value"] for arg in decoded["args"])
    return TransferRecord(
        block_number=entry.block_number,
        kind=KIND_MINT if is_zero_address(sender) else KIND_TRANSFER,
        sender=sender,
        recipient=recipient,
        raw_amount=raw_amount,
        amount=scale_amount(raw_amount, decimals),
        transaction_hash=entry.transaction_hash,
        log_index=entry.log_index,
    )


def get_transfers(
    contract: BoundContract,
    *,
    from_block: int,
    to_block: int,
    decimals: int,
) -> tuple[int, dict[str, Any]]:
    """Decode every Transfer log of `contract` in [from_block, to_block], in node order."""
    try:
        event = contract.interface.event(TRANSFER_EVENT)
    except ValueError as err:
        return EXIT_CONFIG, build_error_payload(
            method="transfers",
            code=ERR_INTERFACE_INVALID,
            message=str(err),
        )
    if len(event.inputs) != 3 or [i.indexed for i in event.inputs] != [True, True, False]:
        return EXIT_CONFIG, build_error_payload(
            method="transfers",
            code=ERR_INTERFACE_INVALID,
            message=f"unexpected Transfer event layout: {event.declaration}",
        )

    try:
        query = build_event_filter(
            address=contract.address,
            topic0=event.topic0,
            from_block=from_block,
            to_block=to_block,
        )
    except ValueError as err:
        return EXIT_INVALID, build_error_payload(
            method="transfers",
            code=ERR_INVALID_BLOCK_RANGE,
            message=str(err),
        )

    exit_code, logs_payload = fetch_logs(query, contract.execute_rpc)
    if exit_code != EXIT_OK:
        return exit_code, wrap_stage_failure("transfers", "eth_getLogs", logs_payload)

    records: list[TransferRecord] = []
    for entry in logs_payload["logs"]:
        try:
            records.append(decode_transfer(entry, event, decimals))
        except ValueError as err:
            return EXIT_INVALID, build_error_payload(
                method="transfers",
                code=ERR_ABI_DECODE_FAILED,
                message=f"cannot decode Transfer log in block {entry.block_number}: {err}",
            )
    logger.info("decoded %d transfer logs in blocks %d..%d", len(records), from_block, to_block)

    return EXIT_OK, {
        "method": "transfers",
        "status": "ok",
        "ok": True,
        "error_code": None,
        "error_message": None,
        "filter": logs_payload["filter"],
        "from_block": from_block,
        "to_block": to_block,
        "records": records,
    }
