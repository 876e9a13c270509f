"""Presentation transforms for decoded call and log values."""

from __future__ import annotations

from eth_utils import is_same_address, to_checksum_address

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def scale_amount(raw_value: int, decimals: int) -> int:
    """Whole token units, truncating the fractional part."""
    if decimals < 0:
        raise ValueError("decimals must be non-negative")
    return raw_value // (10**decimals)


def is_zero_address(address: str) -> bool:
    return is_same_address(address, ZERO_ADDRESS)


def display_address(address: str) -> str:
    return to_checksum_address(address)
