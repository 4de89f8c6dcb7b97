"""
ABI helpers for encoding eth_call requests and decoding their responses.
"""

from typing import Any, Dict, List, Optional, Sequence

from eth_abi import decode, encode
from eth_utils import function_abi_to_4byte_selector, to_bytes
from eth_utils.abi import collapse_if_tuple

READ_ONLY_MUTABILITY = ("view", "pure")


def is_function(entry: Dict[str, Any]) -> bool:
    return entry.get("type", "function") == "function"


def find_function(abi: Optional[Sequence[Dict[str, Any]]], name: str) -> Optional[Dict[str, Any]]:
    """Return the first function entry called ``name``, or None."""
    for entry in abi or []:
        if is_function(entry) and entry.get("name") == name:
            return entry
    return None


def is_constant(entry: Optional[Dict[str, Any]]) -> bool:
    return bool(entry) and entry.get("constant") is True


def is_readable_field(entry: Dict[str, Any]) -> bool:
    """A function with no inputs that does not modify state."""
    if not is_function(entry) or entry.get("inputs"):
        return False
    return (
        entry.get("constant") is True
        or entry.get("stateMutability") in READ_ONLY_MUTABILITY
    )


def input_types(entry: Dict[str, Any]) -> List[str]:
    return [collapse_if_tuple(arg) for arg in entry.get("inputs", [])]


def output_types(entry: Dict[str, Any]) -> List[str]:
    return [collapse_if_tuple(arg) for arg in entry.get("outputs", [])]


def encode_call(entry: Dict[str, Any], args: Optional[Sequence[Any]] = None) -> str:
    """
    Build hex calldata for a function call.

    Args:
        entry: ABI function entry
        args: Positional call arguments

    Returns:
        0x-prefixed selector followed by the ABI-encoded arguments
    """
    selector = function_abi_to_4byte_selector(entry)
    encoded_args = encode(input_types(entry), list(args or []))
    return "0x" + (selector + encoded_args).hex()


def decode_output(entry: Dict[str, Any], data: Any) -> Any:
    """
    Decode an eth_call result for ``entry``.

    Single-output functions decode to the bare value, multi-output functions
    to a list, functions without outputs to None.
    """
    types = output_types(entry)
    if not types:
        return None
    raw = to_bytes(hexstr=data) if isinstance(data, str) else bytes(data)
    values = decode(types, raw)
    if len(values) == 1:
        return values[0]
    return list(values)
