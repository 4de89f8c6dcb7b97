"""
Configuration management for batchcall.

Use get_config() to access all configuration settings.

Example:
    from batchcall.config import get_config

    config = get_config()

    rpc_url = config.batch_call.RPC_URL
    abi_store = config.storage.ABI_STORE
"""

from .base import BaseConfig, ConfigError
from .batch_call import BatchCallConfig
from .manager import ConfigManager, get_config, reload_config
from .storage import StorageConfig

__all__ = [
    "BaseConfig",
    "ConfigError",
    "BatchCallConfig",
    "StorageConfig",
    "ConfigManager",
    "get_config",
    "reload_config",
]
