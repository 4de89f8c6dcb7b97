"""
Selects the ABI persistence backend from configuration.
"""

import logging
from typing import Optional

from ...config import StorageConfig
from .base import AbiStore
from .json_storage import JsonAbiStore
from .memory import MemoryAbiStore
from .redis import RedisAbiStore

logger = logging.getLogger(__name__)


def create_abi_store(config: Optional[StorageConfig] = None) -> AbiStore:
    """
    Build the ABI store named by ``config.ABI_STORE``.

    The store is returned unconnected; callers own its lifecycle.
    """
    config = config or StorageConfig()
    backend = config.ABI_STORE

    if backend == "json":
        store = JsonAbiStore(config.get_json_config())
    elif backend == "redis":
        store = RedisAbiStore(config.get_redis_connection_kwargs())
    else:
        store = MemoryAbiStore()

    logger.debug(f"Using {type(store).__name__} for ABI storage")
    return store
