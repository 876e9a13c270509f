#!/usr/bin/env python3
"""Print a token's decimals and its Transfer events over the latest blocks."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Local imports for script execution (python3 scripts/token_transfers.py ...)
SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from cli_support import add_common_args, configure_logging, load_runtime, print_failure  # noqa: E402
from error_map import ERR_INVALID_REQUEST, EXIT_INVALID, EXIT_OK  # noqa: E402
from logs_engine import DEFAULT_RECENT_BLOCKS, fetch_head_block, resolve_recent_range  # noqa: E402
from token_query import TransferRecord, get_decimals, get_transfers  # noqa: E402
from transforms import display_address  # noqa: E402


def format_transfer(record: TransferRecord, symbol: str) -> str:
    return (
        f"Block #{record.block_number}: {record.kind} from {display_address(record.sender)} "
        f"to {display_address(record.recipient)}, amount: {record.amount} {symbol}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--last-blocks",
        type=int,
        default=DEFAULT_RECENT_BLOCKS,
        help=f"number of most recent blocks to scan (default {DEFAULT_RECENT_BLOCKS})",
    )
    add_common_args(parser)
    return parser


def run(args: argparse.Namespace) -> int:
    if args.last_blocks <= 0:
        print_failure(
            "parse arguments",
            {"error_code": ERR_INVALID_REQUEST, "error_message": "--last-blocks must be a positive integer"},
        )
        return EXIT_INVALID

    exit_code, runtime = load_runtime(args, "token")
    if exit_code != EXIT_OK:
        print_failure("load token contract", runtime)
        return exit_code
    symbol = runtime.contract_config.symbol

    exit_code, decimals_payload = get_decimals(runtime.contract)
    if exit_code != EXIT_OK:
        print_failure(f"get {symbol} decimal places", decimals_payload)
        return exit_code
    decimals = decimals_payload["decimals"]
    print(f"{symbol} decimal places: {decimals}")

    exit_code, head_payload = fetch_head_block(runtime.contract.execute_rpc)
    if exit_code != EXIT_OK:
        print_failure("get the latest block number", head_payload)
        return exit_code
    start_block, end_block = resolve_recent_range(head_payload["head_block"], args.last_blocks)

    exit_code, transfers_payload = get_transfers(
        runtime.contract,
        from_block=start_block,
        to_block=end_block,
        decimals=decimals,
    )
    if exit_code != EXIT_OK:
        print_failure(f"query {symbol} transfer records", transfers_payload)
        return exit_code

    records = transfers_payload["records"]
    print(f"Found {len(records)} {symbol} transfer records between blocks {start_block} and {end_block}")
    for record in records:
        print(format_transfer(record, symbol))
    return EXIT_OK


def main() -> int:
    args = build_parser().parse_args()
    configure_logging(args.verbose)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
