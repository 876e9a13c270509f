"""Contract handle: address + interface description + RPC executor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from abi_codec import ADDRESS_RE, decode_output, encode_call
from abi_interface import ContractInterface
from error_map import (
    ERR_ABI_DECODE_FAILED,
    ERR_ABI_ENCODE_FAILED,
    ERR_INTERFACE_INVALID,
    EXIT_CONFIG,
    EXIT_INVALID,
    EXIT_OK,
)
from rpc_contract import RpcExecutor, build_error_payload, wrap_stage_failure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundContract:
    address: str
    interface: ContractInterface
    execute_rpc: RpcExecutor

    def __post_init__(self) -> None:
        if not ADDRESS_RE.fullmatch(self.address):
            raise ValueError(f"contract address must be a 20-byte hex string: {self.address}")

    def call(
        self,
        function_name: str,
        args: list[Any] | None = None,
        *,
        block_tag: str = "latest",
    ) -> tuple[int, dict[str, Any]]:
        """eth_call one interface function; payload["values"] holds the decoded outputs."""
        call_args = list(args or [])
        try:
            fn = self.interface.function(function_name)
        except ValueError as err:
            return EXIT_CONFIG, build_error_payload(
                method=function_name,
                code=ERR_INTERFACE_INVALID,
                message=str(err),
            )

        try:
            encoded = encode_call(fn.signature, call_args)
        except ValueError as err:
            return EXIT_INVALID, build_error_payload(
                method=fn.signature,
                code=ERR_ABI_ENCODE_FAILED,
                message=str(err),
            )

        logger.debug("eth_call %s on %s", fn.signature, self.address)
        exit_code, rpc_payload = self.execute_rpc(
            {
                "method": "eth_call",
                "params": [{"to": self.address, "data": encoded["calldata"]}, block_tag],
            }
        )
        if exit_code != EXIT_OK:
            return exit_code, wrap_stage_failure(fn.signature, "eth_call", rpc_payload)

        raw_result = rpc_payload.get("result")
        try:
            decoded = decode_output(list(fn.output_types), raw_result)
        except ValueError as err:
            return EXIT_INVALID, build_error_payload(
                method=fn.signature,
                code=ERR_ABI_DECODE_FAILED,
                message=f"cannot decode {fn.signature} result {raw_result!r}: {err}",
            )

        return EXIT_OK, {
            "method": fn.signature,
            "status": "ok",
            "ok": True,
            "error_code": None,
            "error_message": None,
            "calldata": encoded["calldata"],
            "raw_result": raw_result,
            "values": decoded["values"],
        }

    def call_single(self, function_name: str, args: list[Any] | None = None) -> tuple[int, dict[str, Any]]:
        """Like call(), for functions with exactly one output; sets payload["value"]."""
        exit_code, payload = self.call(function_name, args)
        if exit_code != EXIT_OK:
            return exit_code, payload
        if len(payload["values"]) != 1:
            return EXIT_CONFIG, build_error_payload(
                method=payload["method"],
                code=ERR_INTERFACE_INVALID,
                message=f"{payload['method']} must declare exactly one output",
            )
        payload["value"] = payload["values"][0]
        return EXIT_OK, payload
