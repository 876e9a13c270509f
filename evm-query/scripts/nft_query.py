"""ERC-721 owner and metadata URI lookups."""

from __future__ import annotations

from typing import Any

from contract_handle import BoundContract
from error_map import EXIT_OK
from rpc_contract import wrap_stage_failure


def owner_of(contract: BoundContract, token_id: int) -> tuple[int, dict[str, Any]]:
    exit_code, payload = contract.call_single("ownerOf", [token_id])
    if exit_code != EXIT_OK:
        return exit_code, wrap_stage_failure("ownerOf", f"ownerOf({token_id})", payload)
    return EXIT_OK, payload


def token_uri(contract: BoundContract, token_id: int) -> tuple[int, dict[str, Any]]:
    exit_code, payload = contract.call_single("tokenURI", [token_id])
    if exit_code != EXIT_OK:
        return exit_code, wrap_stage_failure("tokenURI", f"tokenURI({token_id})", payload)
    return EXIT_OK, payload
