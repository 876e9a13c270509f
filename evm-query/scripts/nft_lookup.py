#!/usr/bin/env python3
"""Print an ERC-721 token's owner and metadata URI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Local imports for script execution (python3 scripts/nft_lookup.py ...)
SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from cli_support import add_common_args, configure_logging, load_runtime, print_failure  # noqa: E402
from error_map import ERR_INVALID_REQUEST, EXIT_INVALID, EXIT_OK  # noqa: E402
from nft_query import owner_of, token_uri  # noqa: E402
from quantity import parse_nonnegative_quantity_str  # noqa: E402
from transforms import display_address  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--token-id",
        default="1",
        help="token id to query, decimal or 0x-prefixed hex (default 1)",
    )
    add_common_args(parser)
    return parser


def run(args: argparse.Namespace) -> int:
    try:
        token_id = parse_nonnegative_quantity_str(args.token_id)
    except ValueError as err:
        print_failure(
            "parse --token-id",
            {"error_code": ERR_INVALID_REQUEST, "error_message": f"{err}: {args.token_id!r}"},
        )
        return EXIT_INVALID

    exit_code, runtime = load_runtime(args, "nft")
    if exit_code != EXIT_OK:
        print_failure("load NFT contract", runtime)
        return exit_code

    exit_code, owner_payload = owner_of(runtime.contract, token_id)
    if exit_code != EXIT_OK:
        print_failure(f"get owner of token #{token_id}", owner_payload)
        return exit_code
    print(f"Owner of token #{token_id}: {display_address(owner_payload['value'])}")

    exit_code, uri_payload = token_uri(runtime.contract, token_id)
    if exit_code != EXIT_OK:
        print_failure(f"get token URI of token #{token_id}", uri_payload)
        return exit_code
    print(f"Token URI: {uri_payload['value']}")
    return EXIT_OK


def main() -> int:
    args = build_parser().parse_args()
    configure_logging(args.verbose)
    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
