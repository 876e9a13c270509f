"""ABI encode/decode helpers for common Solidity scalar types."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import keccak, to_checksum_address

HEX_RE = re.compile(r"^0x[0-9a-fA-F]*$")
ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
FUNC_SIG_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\((.*)\)$")


@dataclass(frozen=True)
class AbiType:
    kind: str
    bits: int | None = None
    size: int | None = None


def _split_csv(raw: str) -> list[str]:
    text = raw.strip()
    if not text:
        return []
    out = [item.strip() for item in text.split(",")]
    if any(not item for item in out):
        raise ValueError("empty type entry in list")
    return out


def parse_type(raw_type: str) -> AbiType:
    t = str(raw_type).strip()
    if not t:
        raise ValueError("type cannot be empty")
    if "[" in t or "(" in t:
        raise ValueError(f"unsupported ABI type (arrays/tuples not supported): {raw_type}")

    if t == "address":
        return AbiType(kind="address")
    if t == "bool":
        return AbiType(kind="bool")
    if t == "string":
        return AbiType(kind="string")
    if t == "bytes":
        return AbiType(kind="bytes_dyn")

    m_bytes = re.fullmatch(r"bytes([0-9]{1,2})", t)
    if m_bytes:
        n = int(m_bytes.group(1), 10)
        if n < 1 or n > 32:
            raise ValueError(f"invalid fixed bytes size: {t}")
        return AbiType(kind="bytes_fixed", size=n)

    m_int = re.fullmatch(r"(u?)int([0-9]{0,3})", t)
    if m_int:
        bits = int(m_int.group(2) or "256", 10)
        if bits < 8 or bits > 256 or (bits % 8) != 0:
            raise ValueError(f"invalid integer bit size: {t}")
        return AbiType(kind="uint" if m_int.group(1) else "int", bits=bits)

    raise ValueError(f"unsupported ABI type: {raw_type}")


def format_type(t: AbiType) -> str:
    if t.kind == "bytes_dyn":
        return "bytes"
    if t.kind == "bytes_fixed":
        return f"bytes{t.size}"
    if t.kind in {"uint", "int"}:
        return f"{t.kind}{t.bits}"
    return t.kind


def parse_types(types: Any) -> list[AbiType]:
    if isinstance(types, str):
        raw_items = _split_csv(types)
    elif isinstance(types, (list, tuple)) and all(isinstance(item, str) for item in types):
        raw_items = [item.strip() for item in types]
    else:
        raise ValueError("types must be a comma-separated string or list of strings")
    return [parse_type(item) for item in raw_items]


def parse_function_signature(signature: str) -> tuple[str, list[AbiType], str]:
    m = FUNC_SIG_RE.fullmatch(str(signature).strip())
    if not m:
        raise ValueError("signature must look like functionName(type1,type2,...)")
    name = m.group(1)
    arg_types = parse_types(m.group(2))
    canonical = f"{name}({','.join(format_type(t) for t in arg_types)})"
    return name, arg_types, canonical


def parse_event_declaration(declaration: str) -> tuple[str, list[AbiType], list[bool], list[str], str]:
    m = FUNC_SIG_RE.fullmatch(str(declaration).strip())
    if not m:
        raise ValueError("event declaration must look like EventName(type indexed name, ...)")

    event_name = m.group(1)
    arg_types: list[AbiType] = []
    indexed: list[bool] = []
    names: list[str] = []

    for idx, token in enumerate(_split_csv(m.group(2))):
        parts = token.split()
        arg_types.append(parse_type(parts[0]))
        indexed.append("indexed" in parts[1:])
        tail = [p for p in parts[1:] if p != "indexed"]
        names.append(tail[-1] if tail else f"arg{idx}")

    canonical = f"{event_name}({','.join(format_type(t) for t in arg_types)})"
    return event_name, arg_types, indexed, names, canonical


def is_dynamic(t: AbiType) -> bool:
    return t.kind in {"bytes_dyn", "string"}


def parse_hex_bytes(value: Any, *, field: str) -> bytes:
    if not isinstance(value, str) or not HEX_RE.fullmatch(value):
        raise ValueError(f"{field} must be 0x-prefixed hex string")
    data = value[2:]
    if len(data) % 2 != 0:
        raise ValueError(f"{field} hex length must be even")
    return bytes.fromhex(data)


def _coerce_arg(t: AbiType, value: Any) -> Any:
    if t.kind == "address":
        if not isinstance(value, str) or not ADDRESS_RE.fullmatch(value):
            raise ValueError("address value must be 0x-prefixed 20-byte hex string")
        return to_checksum_address(value)
    if t.kind in {"uint", "int"} and isinstance(value, str):
        raw = value.strip()
        return int(raw, 16) if raw.lower().startswith("0x") else int(raw, 10)
    if t.kind in {"bytes_dyn", "bytes_fixed"} and isinstance(value, str):
        return parse_hex_bytes(value, field=f"{format_type(t)} value")
    return value


def _normalize_decoded(t: AbiType, value: Any) -> Any:
    if t.kind == "address":
        return to_checksum_address(value)
    if t.kind in {"bytes_dyn", "bytes_fixed"}:
        return f"0x{bytes(value).hex()}"
    return value


def encode_abi(types: list[AbiType], values: list[Any]) -> bytes:
    if len(types) != len(values):
        raise ValueError(f"expected {len(types)} values, got {len(values)}")
    coerced = [_coerce_arg(t, v) for t, v in zip(types, values)]
    try:
        return abi_encode([format_type(t) for t in types], coerced)
    except EncodingError as err:
        raise ValueError(str(err)) from err


def decode_abi(types: list[AbiType], data_hex: str) -> list[Any]:
    data = parse_hex_bytes(data_hex, field="data")
    try:
        raw_values = abi_decode([format_type(t) for t in types], data)
    except DecodingError as err:
        raise ValueError(f"abi decode failed: {err}") from err
    return [_normalize_decoded(t, v) for t, v in zip(types, raw_values)]


def function_selector(signature: str) -> str:
    _, _, canonical = parse_function_signature(signature)
    return f"0x{keccak(text=canonical)[:4].hex()}"


def event_topic0(event_signature_or_declaration: str) -> str:
    raw = str(event_signature_or_declaration).strip()
    if " " in raw:
        _, _, _, _, canonical = parse_event_declaration(raw)
    else:
        _, _, canonical = parse_function_signature(raw)
    return f"0x{keccak(text=canonical).hex()}"


def encode_call(signature: str, args: list[Any]) -> dict[str, Any]:
    _, arg_types, canonical = parse_function_signature(signature)
    if len(arg_types) != len(args):
        raise ValueError("argument count mismatch for function signature")
    selector = function_selector(canonical)
    encoded_args = encode_abi(arg_types, list(args))
    return {
        "signature": canonical,
        "selector": selector,
        "calldata": selector + encoded_args.hex(),
    }


def decode_output(types_spec: Any, data_hex: str) -> dict[str, Any]:
    types = parse_types(types_spec)
    return {
        "types": [format_type(t) for t in types],
        "values": decode_abi(types, data_hex),
    }


def decode_log(
    event_declaration: str,
    topics: list[str],
    data_hex: str,
    *,
    anonymous: bool = False,
) -> dict[str, Any]:
    event_name, arg_types, indexed_flags, names, _ = parse_event_declaration(event_declaration)
    return decode_event_log(
        event_name,
        arg_types,
        indexed_flags,
        names,
        topics,
        data_hex,
        anonymous=anonymous,
    )


def decode_event_log(
    event_name: str,
    arg_types: list[AbiType],
    indexed_flags: list[bool],
    names: list[str],
    topics: list[str],
    data_hex: str,
    *,
    anonymous: bool = False,
) -> dict[str, Any]:
    """decode_log() for an event whose inputs are already parsed."""
    if not isinstance(topics, list) or not all(isinstance(t, str) and HEX_RE.fullmatch(t) for t in topics):
        raise ValueError("topics must be an array of 0x-prefixed hex strings")
    if not (len(arg_types) == len(indexed_flags) == len(names)):
        raise ValueError("event inputs, indexed flags and names must have the same length")

    canonical = f"{event_name}({','.join(format_type(t) for t in arg_types)})"
    expected_topic0 = f"0x{keccak(text=canonical).hex()}"

    topic_cursor = 0
    if not anonymous:
        if not topics:
            raise ValueError("missing topic0 for non-anonymous event")
        if topics[0].lower() != expected_topic0:
            raise ValueError("topic0 does not match event signature")
        topic_cursor = 1

    indexed_count = sum(1 for flag in indexed_flags if flag)
    if len(topics) - topic_cursor < indexed_count:
        raise ValueError("insufficient indexed topics for event declaration")

    non_indexed_types = [t for t, is_indexed in zip(arg_types, indexed_flags) if not is_indexed]
    non_indexed_values = iter(decode_abi(non_indexed_types, data_hex))

    args_out: list[dict[str, Any]] = []
    for idx, (t, is_indexed, name) in enumerate(zip(arg_types, indexed_flags, names)):
        item: dict[str, Any] = {
            "index": idx,
            "name": name,
            "type": format_type(t),
            "indexed": is_indexed,
        }
        if not is_indexed:
            item["value"] = next(non_indexed_values)
        else:
            topic_word = topics[topic_cursor]
            topic_cursor += 1
            if is_dynamic(t):
                # dynamic indexed values are stored as their keccak hash
                item["value_hash"] = topic_word.lower()
            else:
                item["value"] = decode_abi([t], topic_word)[0]
        args_out.append(item)

    return {
        "event": event_name,
        "signature": canonical,
        "topic0": expected_topic0,
        "anonymous": anonymous,
        "args": args_out,
    }
