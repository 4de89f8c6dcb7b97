"""Test configuration for batchers."""
from unittest.mock import MagicMock

import pytest
from eth_abi import decode, encode
from eth_utils import function_abi_to_4byte_selector

from batchcall.batchers.codec import input_types, output_types

PRICE_ADDRESS = "0x1111111111111111111111111111111111111111"
BALANCE_ADDRESS = "0x2222222222222222222222222222222222222222"
HOLDER = "0x3333333333333333333333333333333333333333"
OTHER_HOLDER = "0x4444444444444444444444444444444444444444"

TOKEN_ABI = [
    {
        "name": "getPrice",
        "type": "function",
        "constant": True,
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "symbol",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
    },
    {
        "name": "totalSupply",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "getBalance",
        "type": "function",
        "stateMutability": "view",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "getReserves",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"},
        ],
    },
    {
        "name": "transfer",
        "type": "function",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "name": "Transfer",
        "type": "event",
        "anonymous": False,
        "inputs": [
            {"indexed": True, "name": "from", "type": "address"},
            {"indexed": True, "name": "to", "type": "address"},
            {"indexed": False, "name": "value", "type": "uint256"},
        ],
    },
]


class FakeNode:
    """
    In-memory JSON-RPC node answering eth_call batches for TOKEN_ABI.

    Return values are registered per (address, method); a callable receives
    the decoded call arguments.
    """

    def __init__(self, abi=None):
        self.abi = abi or TOKEN_ABI
        self._by_selector = {
            "0x" + function_abi_to_4byte_selector(entry).hex(): entry
            for entry in self.abi
            if entry.get("type") == "function"
        }
        self.returns = {}
        self.errors = {}
        self.batches = []

    def set_return(self, address, name, value):
        self.returns[(address.lower(), name)] = value

    def fail(self, address, name, message="execution reverted"):
        self.errors[(address.lower(), name)] = message

    @property
    def requests(self):
        return [request for batch in self.batches for request in batch]

    def called_methods(self, batch_index=-1):
        return [
            self._by_selector[params[0]["data"][:10]]["name"]
            for _, params in self.batches[batch_index]
        ]

    async def make_batch_request(self, requests):
        self.batches.append(list(requests))
        responses = []
        for request_id, (method, params) in enumerate(requests):
            assert method == "eth_call"
            call = params[0]
            entry = self._by_selector[call["data"][:10]]
            key = (call["to"].lower(), entry["name"])

            if key in self.errors:
                responses.append({
                    "jsonrpc": "2.0",
                    "id": request_id,
                    "error": {"code": 3, "message": self.errors[key]},
                })
                continue

            value = self.returns[key]
            if callable(value):
                args = decode(input_types(entry), bytes.fromhex(call["data"][10:]))
                value = value(*args)
            types = output_types(entry)
            values = [value] if len(types) == 1 else list(value)
            responses.append({
                "jsonrpc": "2.0",
                "id": request_id,
                "result": "0x" + encode(types, values).hex(),
            })
        return responses


@pytest.fixture
def token_abi():
    """ABI shared by every test contract."""
    return TOKEN_ABI


@pytest.fixture
def node():
    """Fake node with default return values for both test contracts."""
    fake_node = FakeNode()
    for address in (PRICE_ADDRESS, BALANCE_ADDRESS):
        fake_node.set_return(address, "getPrice", 1500)
        fake_node.set_return(address, "symbol", "TKN")
        fake_node.set_return(address, "totalSupply", 0)
        fake_node.set_return(address, "getReserves", (10, 20, 1700000000))
        fake_node.set_return(
            address, "getBalance",
            lambda owner: 42 if owner.lower() == HOLDER else 7,
        )
    return fake_node


@pytest.fixture
def web3(node):
    """AsyncWeb3 stand-in whose provider is the fake node."""
    mock_web3 = MagicMock()
    mock_web3.provider.make_batch_request = node.make_batch_request
    return mock_web3
