"""Static contract/endpoint configuration loaded from references/contracts.yaml."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from abi_codec import ADDRESS_RE
from abi_interface import ContractInterface, load_interface
from rpc_contract import DEFAULT_TIMEOUT_SECONDS

SCRIPT_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG = (SCRIPT_DIR.parent / "references" / "contracts.yaml").resolve()


@dataclass(frozen=True)
class ContractConfig:
    key: str
    address: str
    symbol: str
    abi_path: Path

    def load_interface(self) -> ContractInterface:
        return load_interface(self.abi_path)


@dataclass(frozen=True)
class QueryConfig:
    rpc_url: str
    timeout_seconds: float
    contracts: dict[str, ContractConfig]

    def contract(self, key: str) -> ContractConfig:
        try:
            return self.contracts[key]
        except KeyError:
            raise ValueError(f"config has no contract entry {key!r}") from None


def _parse_contract(key: str, raw: Any, base_dir: Path) -> ContractConfig:
    if not isinstance(raw, dict):
        raise ValueError(f"contracts.{key} must be a mapping")
    address = raw.get("address")
    if not isinstance(address, str) or not ADDRESS_RE.fullmatch(address):
        raise ValueError(f"contracts.{key}.address must be a 0x-prefixed 20-byte hex string")
    abi = raw.get("abi")
    if not isinstance(abi, str) or not abi.strip():
        raise ValueError(f"contracts.{key}.abi must be a path")
    return ContractConfig(
        key=key,
        address=address,
        symbol=str(raw.get("symbol") or key.upper()),
        abi_path=(base_dir / abi).resolve(),
    )


def parse_config(raw: Any, *, base_dir: Path) -> QueryConfig:
    if not isinstance(raw, dict):
        raise ValueError("config root must be a mapping")

    rpc_url = raw.get("rpc_url")
    if not isinstance(rpc_url, str) or not rpc_url.strip():
        raise ValueError("rpc_url must be a non-empty string")

    timeout = raw.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ValueError("timeout_seconds must be a positive number")

    contracts_raw = raw.get("contracts")
    if not isinstance(contracts_raw, dict) or not contracts_raw:
        raise ValueError("contracts must be a non-empty mapping")

    return QueryConfig(
        rpc_url=rpc_url.strip(),
        timeout_seconds=float(timeout),
        contracts={str(k): _parse_contract(str(k), v, base_dir) for k, v in contracts_raw.items()},
    )


def load_config(path: Path = DEFAULT_CONFIG) -> QueryConfig:
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as err:
        raise ValueError(f"cannot read config {path}: {err}") from err
    return parse_config(raw, base_dir=path.resolve().parent)
