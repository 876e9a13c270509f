"""Argument, logging and startup helpers shared by the query commands."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from contract_handle import BoundContract
from error_map import ERR_CONFIG_INVALID, ERR_INTERFACE_INVALID, EXIT_CONFIG, EXIT_OK
from query_config import DEFAULT_CONFIG, ContractConfig, load_config
from rpc_contract import build_error_payload, build_rpc_executor, resolve_rpc_url

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Runtime:
    contract_config: ContractConfig
    contract: BoundContract
    rpc_url: str
    rpc_source: str


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=str(DEFAULT_CONFIG), help="contracts/endpoint YAML config")
    parser.add_argument(
        "--timeout-seconds",
        type=float,
        help="per-request RPC timeout (defaults to config timeout_seconds)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def print_failure(operation: str, payload: dict[str, Any]) -> None:
    message = payload.get("error_message") or "unknown error"
    code = payload.get("error_code") or "UNKNOWN"
    print(f"Failed to {operation}: {message} ({code})", file=sys.stderr)


def load_runtime(args: argparse.Namespace, contract_key: str) -> tuple[int, Runtime | dict[str, Any]]:
    """Load config + interface and bind the contract; returns (exit_code, Runtime or error payload)."""
    try:
        config = load_config(Path(args.config))
        contract_config = config.contract(contract_key)
    except ValueError as err:
        return EXIT_CONFIG, build_error_payload(method="config", code=ERR_CONFIG_INVALID, message=str(err))

    try:
        interface = contract_config.load_interface()
    except ValueError as err:
        return EXIT_CONFIG, build_error_payload(method="interface", code=ERR_INTERFACE_INVALID, message=str(err))

    timeout = args.timeout_seconds if args.timeout_seconds is not None else config.timeout_seconds
    if timeout <= 0:
        return EXIT_CONFIG, build_error_payload(
            method="config",
            code=ERR_CONFIG_INVALID,
            message="--timeout-seconds must be a positive number",
        )

    rpc_url, rpc_source = resolve_rpc_url(config.rpc_url)
    logger.debug("using rpc endpoint %s (%s)", rpc_url, rpc_source)
    contract = BoundContract(
        address=contract_config.address,
        interface=interface,
        execute_rpc=build_rpc_executor(rpc_url=rpc_url, timeout_seconds=timeout),
    )
    return EXIT_OK, Runtime(
        contract_config=contract_config,
        contract=contract,
        rpc_url=rpc_url,
        rpc_source=rpc_source,
    )
