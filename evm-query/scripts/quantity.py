"""Shared parsers for Ethereum quantity-like values."""

from __future__ import annotations

from typing import Any


def parse_nonnegative_quantity_str(raw: str) -> int:
    value = str(raw).strip()
    if not value:
        raise ValueError("quantity cannot be empty")
    if "_" in value:
        raise ValueError("quantity cannot contain underscores")
    if value.lower().startswith("0x"):
        if len(value) == 2:
            raise ValueError("hex quantity cannot be empty")
        return int(value, 16)
    if not value.isdigit():
        raise ValueError("quantity must be a decimal integer or 0x-prefixed hex quantity")
    return int(value, 10)


def parse_nonnegative_quantity(value: Any) -> tuple[bool, int, str]:
    if isinstance(value, bool):
        return False, 0, "value cannot be boolean"
    if isinstance(value, int):
        if value < 0:
            return False, 0, "value must be non-negative"
        return True, value, ""
    if not isinstance(value, str):
        return False, 0, "value must be int or string"
    try:
        return True, parse_nonnegative_quantity_str(value), ""
    except ValueError as err:
        return False, 0, str(err)


def to_hex_quantity(value: int) -> str:
    return hex(value)
