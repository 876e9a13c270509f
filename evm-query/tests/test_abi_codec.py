from __future__ import annotations

import pytest

from abi_codec import (
    decode_log,
    decode_output,
    encode_call,
    event_topic0,
    function_selector,
    parse_event_declaration,
    parse_type,
)

from ._query_helpers import (
    ALICE,
    BOB,
    DECIMALS_SELECTOR,
    OWNER_OF_SELECTOR,
    TOKEN_URI_SELECTOR,
    TRANSFER_TOPIC0,
    ZERO,
    _abi_string,
    _pad_address,
    _uint_word,
)


def test_known_selectors_and_topic():
    assert function_selector("decimals()") == DECIMALS_SELECTOR
    assert function_selector("ownerOf(uint256)") == OWNER_OF_SELECTOR
    assert function_selector("tokenURI(uint)") == TOKEN_URI_SELECTOR
    assert event_topic0("Transfer(address,address,uint256)") == TRANSFER_TOPIC0
    assert event_topic0("Transfer(address indexed from,address indexed to,uint256 value)") == TRANSFER_TOPIC0


def test_encode_call_with_token_id():
    encoded = encode_call("ownerOf(uint256)", [7])
    assert encoded["signature"] == "ownerOf(uint256)"
    assert encoded["selector"] == OWNER_OF_SELECTOR
    assert encoded["calldata"] == OWNER_OF_SELECTOR + f"{7:064x}"

    assert encode_call("decimals()", [])["calldata"] == DECIMALS_SELECTOR
    assert encode_call("tokenURI(uint256)", ["0x10"])["calldata"].endswith(f"{16:064x}")


def test_encode_call_rejects_bad_arguments():
    with pytest.raises(ValueError):
        encode_call("ownerOf(uint256)", [])
    with pytest.raises(ValueError):
        encode_call("ownerOf(uint256)", [-1])
    with pytest.raises(ValueError):
        encode_call("ownerOf(uint256)", [1 << 256])
    with pytest.raises(ValueError):
        encode_call("balanceOf(address)", ["0x1234"])


def test_decode_output_scalar_types():
    assert decode_output(["uint8"], _uint_word(6))["values"] == [6]
    assert decode_output("address", _pad_address(ALICE))["values"] == [ALICE]
    assert decode_output(["string"], _abi_string("ipfs://QmHash/1"))["values"] == ["ipfs://QmHash/1"]
    assert decode_output(["bool"], _uint_word(1))["values"] == [True]


def test_decode_output_checksums_addresses():
    lower = "0xbc4ca0eda7647a8ab7c2061c2e118a18a936f13d"
    (value,) = decode_output(["address"], _pad_address(lower))["values"]
    assert value == "0xBC4CA0EdA7647A8aB7C2061c2E118A18a936f13D"


def test_decode_output_rejects_out_of_range_uint8():
    with pytest.raises(ValueError):
        decode_output(["uint8"], _uint_word(256))


def test_decode_output_rejects_short_or_malformed_data():
    with pytest.raises(ValueError):
        decode_output(["uint8"], "0x")
    with pytest.raises(ValueError):
        decode_output(["uint8"], "not-hex")
    with pytest.raises(ValueError):
        decode_output(["uint8"], "0x123")


def test_parse_type_rejects_arrays_and_bad_widths():
    with pytest.raises(ValueError):
        parse_type("uint256[]")
    with pytest.raises(ValueError):
        parse_type("uint7")
    with pytest.raises(ValueError):
        parse_type("bytes33")
    assert parse_type("uint").bits == 256
    assert parse_type("int8").kind == "int"


def test_parse_event_declaration_names_and_indexed_flags():
    name, _, indexed, names, canonical = parse_event_declaration(
        "Transfer(address indexed from,address indexed to,uint256 value)"
    )
    assert name == "Transfer"
    assert indexed == [True, True, False]
    assert names == ["from", "to", "value"]
    assert canonical == "Transfer(address,address,uint256)"


def test_decode_log_transfer():
    decoded = decode_log(
        "Transfer(address indexed from,address indexed to,uint256 value)",
        [TRANSFER_TOPIC0, _pad_address(ZERO), _pad_address(BOB)],
        _uint_word(1_000_000),
    )
    values = [arg["value"] for arg in decoded["args"]]
    assert values == [ZERO, BOB, 1_000_000]
    assert decoded["topic0"] == TRANSFER_TOPIC0


def test_decode_log_rejects_wrong_topic0_and_missing_topics():
    decl = "Transfer(address indexed from,address indexed to,uint256 value)"
    with pytest.raises(ValueError, match="topic0"):
        decode_log(decl, ["0x" + "0" * 64, _pad_address(ALICE), _pad_address(BOB)], _uint_word(1))
    with pytest.raises(ValueError, match="insufficient"):
        decode_log(decl, [TRANSFER_TOPIC0, _pad_address(ALICE)], _uint_word(1))
