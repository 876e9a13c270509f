from __future__ import annotations

import pytest

from abi_interface import load_interface, parse_interface

from ._query_helpers import ALICE, BOB, REFERENCES, TRANSFER_TOPIC0, _pad_address, _uint_word


def test_usdc_interface_exposes_decimals_and_transfer():
    iface = load_interface(REFERENCES / "abi" / "usdc.json")

    decimals = iface.function("decimals")
    assert decimals.signature == "decimals()"
    assert decimals.output_types == ("uint8",)
    # legacy "constant": true entry
    assert decimals.state_mutability == "view"

    transfer = iface.event("Transfer")
    assert transfer.signature == "Transfer(address,address,uint256)"
    assert transfer.declaration == "Transfer(address indexed from,address indexed to,uint256 value)"
    assert transfer.topic0 == TRANSFER_TOPIC0


def test_erc721_interface_functions():
    iface = load_interface(REFERENCES / "abi" / "erc721.json")
    assert iface.function("ownerOf").signature == "ownerOf(uint256)"
    assert iface.function("ownerOf").output_types == ("address",)
    assert iface.function("tokenURI").output_types == ("string",)


def test_unknown_names_raise():
    iface = load_interface(REFERENCES / "abi" / "erc721.json")
    with pytest.raises(ValueError, match="no function named"):
        iface.function("decimals")
    with pytest.raises(ValueError, match="no event named"):
        iface.event("Swap")


def test_interface_is_read_only():
    iface = parse_interface([{"type": "function", "name": "f", "inputs": [], "outputs": []}])
    with pytest.raises(TypeError):
        iface.functions["g"] = iface.functions["f"]  # type: ignore[index]


def test_parse_interface_rejects_malformed_documents():
    with pytest.raises(ValueError):
        parse_interface({"not": "a list"})
    with pytest.raises(ValueError):
        parse_interface([{"type": "function", "inputs": []}])
    with pytest.raises(ValueError):
        parse_interface([{"type": "function", "name": "f", "inputs": [{"type": "uint7"}], "outputs": []}])


def test_load_interface_reports_unreadable_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(ValueError, match="cannot read ABI document"):
        load_interface(path)
    with pytest.raises(ValueError, match="cannot read ABI document"):
        load_interface(tmp_path / "missing.json")


def test_event_decodes_log_from_parsed_inputs():
    transfer = load_interface(REFERENCES / "abi" / "usdc.json").event("Transfer")
    decoded = transfer.decode_log(
        [TRANSFER_TOPIC0, _pad_address(ALICE), _pad_address(BOB)],
        _uint_word(1_500_000),
    )
    assert decoded["signature"] == "Transfer(address,address,uint256)"
    assert [arg["name"] for arg in decoded["args"]] == ["from", "to", "value"]
    assert [arg["value"] for arg in decoded["args"]] == [ALICE, BOB, 1_500_000]
