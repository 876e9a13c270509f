"""Parsed contract interface descriptions (JSON ABI documents)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from abi_codec import decode_event_log, event_topic0, format_type, parse_type


@dataclass(frozen=True)
class AbiFunction:
    name: str
    input_types: tuple[str, ...]
    output_types: tuple[str, ...]
    state_mutability: str

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"


@dataclass(frozen=True)
class AbiEventInput:
    name: str
    type: str
    indexed: bool


@dataclass(frozen=True)
class AbiEvent:
    name: str
    inputs: tuple[AbiEventInput, ...]
    anonymous: bool

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(i.type for i in self.inputs)})"

    @property
    def declaration(self) -> str:
        parts = []
        for item in self.inputs:
            tokens = [item.type]
            if item.indexed:
                tokens.append("indexed")
            if item.name:
                tokens.append(item.name)
            parts.append(" ".join(tokens))
        return f"{self.name}({','.join(parts)})"

    @property
    def topic0(self) -> str:
        return event_topic0(self.signature)

    def decode_log(self, topics: list[str], data_hex: str) -> dict[str, Any]:
        return decode_event_log(
            self.name,
            [parse_type(i.type) for i in self.inputs],
            [i.indexed for i in self.inputs],
            [i.name or f"arg{idx}" for idx, i in enumerate(self.inputs)],
            topics,
            data_hex,
            anonymous=self.anonymous,
        )


@dataclass(frozen=True)
class ContractInterface:
    """Immutable view of one ABI document.

    Only the first entry is kept for overloaded names.
    """

    functions: Mapping[str, AbiFunction]
    events: Mapping[str, AbiEvent]

    def function(self, name: str) -> AbiFunction:
        try:
            return self.functions[name]
        except KeyError:
            raise ValueError(f"interface has no function named {name!r}") from None

    def event(self, name: str) -> AbiEvent:
        try:
            return self.events[name]
        except KeyError:
            raise ValueError(f"interface has no event named {name!r}") from None


def _canonical_type(raw: Any, *, where: str) -> str:
    if not isinstance(raw, str):
        raise ValueError(f"{where}: type must be a string")
    return format_type(parse_type(raw))


def _parse_function(entry: dict[str, Any]) -> AbiFunction:
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError("function entry requires a name")
    inputs = entry.get("inputs", [])
    outputs = entry.get("outputs", [])
    if not isinstance(inputs, list) or not isinstance(outputs, list):
        raise ValueError(f"function {name}: inputs/outputs must be arrays")

    mutability = entry.get("stateMutability")
    if not isinstance(mutability, str):
        # pre-0.5 ABIs only carry the constant/payable flags
        if entry.get("constant"):
            mutability = "view"
        elif entry.get("payable"):
            mutability = "payable"
        else:
            mutability = "nonpayable"

    return AbiFunction(
        name=name,
        input_types=tuple(_canonical_type(i.get("type"), where=f"{name} input") for i in inputs),
        output_types=tuple(_canonical_type(o.get("type"), where=f"{name} output") for o in outputs),
        state_mutability=mutability,
    )


def _parse_event(entry: dict[str, Any]) -> AbiEvent:
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError("event entry requires a name")
    inputs = entry.get("inputs", [])
    if not isinstance(inputs, list):
        raise ValueError(f"event {name}: inputs must be an array")
    return AbiEvent(
        name=name,
        inputs=tuple(
            AbiEventInput(
                name=str(item.get("name") or ""),
                type=_canonical_type(item.get("type"), where=f"{name} input"),
                indexed=bool(item.get("indexed", False)),
            )
            for item in inputs
        ),
        anonymous=bool(entry.get("anonymous", False)),
    )


def parse_interface(document: Any) -> ContractInterface:
    if not isinstance(document, list):
        raise ValueError("ABI document must be a JSON array")

    functions: dict[str, AbiFunction] = {}
    events: dict[str, AbiEvent] = {}
    for entry in document:
        if not isinstance(entry, dict):
            raise ValueError("ABI entries must be objects")
        kind = entry.get("type", "function")
        if kind == "function":
            fn = _parse_function(entry)
            functions.setdefault(fn.name, fn)
        elif kind == "event":
            ev = _parse_event(entry)
            events.setdefault(ev.name, ev)
        # constructor, fallback, receive and error entries are never called here

    return ContractInterface(
        functions=MappingProxyType(functions),
        events=MappingProxyType(events),
    )


def load_interface(path: Path) -> ContractInterface:
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as err:
        raise ValueError(f"cannot read ABI document {path}: {err}") from err
    return parse_interface(document)
