"""
batchcall: aggregate many smart-contract reads into a single JSON-RPC batch.

The entry point is :class:`BatchCall`. Contract groups name the addresses
(or web3 contract handles) to read and the methods to read on them; the
engine sends every call in one round trip and returns the results per
address, optionally simplified and grouped by namespace.
"""

from .batch_call import BatchCall
from .batchers import (
    BatchError,
    CallError,
    ContractGroup,
    MethodSpec,
    NetworkError,
    RegistrationError,
    RegistryError,
    ValidationError,
)
from .config import ConfigError

__all__ = [
    "BatchCall",
    "ContractGroup",
    "MethodSpec",
    "BatchError",
    "CallError",
    "NetworkError",
    "RegistrationError",
    "RegistryError",
    "ValidationError",
    "ConfigError",
]
