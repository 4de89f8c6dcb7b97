"""
ABI storage for batchcall.

This module provides the interface cache used by the engine and the
backends it can persist to:
- Memory (default) for a single process
- JSON file for persistence across runs
- Redis for sharing ABIs between processes

Usage:
    from batchcall.core.storage import AbiStorage, JsonAbiStore

    store = JsonAbiStore({"base_path": "./data"})
    await store.connect()

    storage = AbiStorage(store=store)
    await storage.load()
"""

from .abi_storage import AbiStorage, abi_hash
from .base import (
    AbiStore,
    AbiStoreInterface,
    ConnectionError,
    DataError,
    StorageBase,
    StorageError,
)
from .json_storage import JsonAbiStore
from .manager import create_abi_store
from .memory import MemoryAbiStore
from .redis import RedisAbiStore

__all__ = [
    "AbiStorage",
    "abi_hash",
    "AbiStore",
    "AbiStoreInterface",
    "StorageBase",
    "StorageError",
    "ConnectionError",
    "DataError",
    "JsonAbiStore",
    "MemoryAbiStore",
    "RedisAbiStore",
    "create_abi_store",
]
