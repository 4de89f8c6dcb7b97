"""Tests for ABI encoding and decoding helpers."""

import pytest
from eth_abi import encode

from batchcall.batchers.codec import (
    decode_output,
    encode_call,
    find_function,
    is_constant,
    is_readable_field,
)

HOLDER = "0x3333333333333333333333333333333333333333"


class TestCodec:
    """Test cases for the codec helpers."""

    def test_find_function_ignores_events(self, token_abi):
        assert find_function(token_abi, "getPrice")["name"] == "getPrice"
        assert find_function(token_abi, "Transfer") is None
        assert find_function(token_abi, "missing") is None
        assert find_function(None, "getPrice") is None

    def test_constant_flag_comes_from_abi(self, token_abi):
        assert is_constant(find_function(token_abi, "getPrice")) is True
        assert is_constant(find_function(token_abi, "symbol")) is False
        assert is_constant(None) is False

    def test_readable_fields_are_read_only_and_argument_less(self, token_abi):
        readable = [entry["name"] for entry in token_abi if is_readable_field(entry)]

        assert readable == ["getPrice", "symbol", "totalSupply", "getReserves"]

    def test_encode_call_without_args_is_selector(self, token_abi):
        calldata = encode_call(find_function(token_abi, "totalSupply"))

        assert calldata == "0x18160ddd"

    def test_encode_call_with_args(self, token_abi):
        entry = find_function(token_abi, "getBalance")
        calldata = encode_call(entry, [HOLDER])

        assert len(calldata) == 2 + 8 + 64
        assert calldata.endswith("3" * 40)

    def test_decode_single_output(self, token_abi):
        entry = find_function(token_abi, "getPrice")
        data = "0x" + encode(["uint256"], [1500]).hex()

        assert decode_output(entry, data) == 1500

    def test_decode_multiple_outputs(self, token_abi):
        entry = find_function(token_abi, "getReserves")
        data = encode(["uint112", "uint112", "uint32"], [1, 2, 3])

        assert decode_output(entry, data) == [1, 2, 3]

    def test_decode_without_outputs(self):
        entry = {"name": "poke", "type": "function", "inputs": [], "outputs": []}

        assert decode_output(entry, "0x") is None

    def test_decode_empty_result_fails(self, token_abi):
        with pytest.raises(Exception):
            decode_output(find_function(token_abi, "getPrice"), "0x")
