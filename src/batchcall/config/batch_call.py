"""
Engine configuration for batchcall.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .base import BaseConfig, ConfigError


@dataclass
class BatchCallConfig(BaseConfig):
    """Node connection, ABI registry and output shape settings."""

    # Node connection
    RPC_URL: Optional[str] = BaseConfig.get_env("RPC_URL")
    CHAIN_ID: int = BaseConfig.get_env_int("CHAIN_ID", 1)

    # Etherscan ABI registry
    ETHERSCAN_API_KEY: Optional[str] = BaseConfig.get_env("ETHERSCAN_API_KEY") or None
    ETHERSCAN_DELAY_TIME: float = BaseConfig.get_env_float("ETHERSCAN_DELAY_TIME", 0.3)

    # Output shape
    GROUP_BY_NAMESPACE: bool = BaseConfig.get_env_bool("GROUP_BY_NAMESPACE", False)
    SIMPLIFY_RESPONSE: bool = BaseConfig.get_env_bool("SIMPLIFY_RESPONSE", False)

    # Log method count and execution time of every batch
    LOGGING: bool = BaseConfig.get_env_bool("BATCHCALL_LOGGING", False)

    def _validate_config(self):
        super()._validate_config()
        if self.ETHERSCAN_DELAY_TIME < 0:
            raise ConfigError(
                f"ETHERSCAN_DELAY_TIME must not be negative, got: {self.ETHERSCAN_DELAY_TIME}"
            )
        if self.RPC_URL and not self.RPC_URL.startswith(("http://", "https://")):
            raise ConfigError(f"RPC_URL must be an http(s) URL, got: {self.RPC_URL}")

    @property
    def etherscan(self) -> Dict[str, Any]:
        """Etherscan options in the shape the engine accepts."""
        return {
            "api_key": self.ETHERSCAN_API_KEY,
            "delay_time": self.ETHERSCAN_DELAY_TIME,
            "chain_id": self.CHAIN_ID,
        }
