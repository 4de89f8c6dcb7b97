"""
ABI storage configuration for batchcall.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .base import BaseConfig, ConfigError

ABI_STORE_BACKENDS = ("memory", "json", "redis")


@dataclass
class StorageConfig(BaseConfig):
    """ABI persistence backend selection and connection settings."""

    ABI_STORE: str = BaseConfig.get_env("ABI_STORE", "memory")

    # JSON backend
    ABI_STORE_PATH: str = BaseConfig.get_env("ABI_STORE_PATH", "./data")
    ABI_STORE_COMPRESS: bool = BaseConfig.get_env_bool("ABI_STORE_COMPRESS", False)

    # Redis backend
    REDIS_HOST: str = BaseConfig.get_env("REDIS_HOST", "localhost")
    REDIS_PORT: int = BaseConfig.get_env_int("REDIS_PORT", 6379)
    REDIS_PASSWORD: Optional[str] = BaseConfig.get_env("REDIS_PASSWORD") or None
    REDIS_DB: int = BaseConfig.get_env_int("REDIS_DB", 0)
    CONNECTION_TIMEOUT: int = BaseConfig.get_env_int("CONNECTION_TIMEOUT", 5)

    def _validate_config(self):
        super()._validate_config()
        if self.ABI_STORE not in ABI_STORE_BACKENDS:
            raise ConfigError(
                f"Unsupported ABI_STORE '{self.ABI_STORE}', expected one of {ABI_STORE_BACKENDS}"
            )

    def get_json_config(self) -> Dict[str, Any]:
        """Get JSON ABI store parameters."""
        return {
            "base_path": self.ABI_STORE_PATH,
            "compress": self.ABI_STORE_COMPRESS,
        }

    def get_redis_connection_kwargs(self) -> Dict[str, Any]:
        """Get Redis connection parameters."""
        kwargs = {
            "host": self.REDIS_HOST,
            "port": self.REDIS_PORT,
            "db": self.REDIS_DB,
            "socket_timeout": self.CONNECTION_TIMEOUT,
        }

        # Only add password if it's actually set and not empty/whitespace
        if self.REDIS_PASSWORD and self.REDIS_PASSWORD.strip():
            kwargs["password"] = self.REDIS_PASSWORD.strip()

        return kwargs
