"""
Configuration manager for batchcall.

This module provides a centralized way to access all configuration settings
across the application. It combines all configuration classes into a single
easy-to-use interface.
"""

import logging
from typing import Any, Dict, Optional

from .base import BaseConfig, ConfigError
from .batch_call import BatchCallConfig
from .storage import StorageConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Centralized configuration manager that combines all configuration classes.
    """

    def __init__(self, environment: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            environment: Override the environment (local, dev, test, staging, production)
        """
        self._environment = environment
        self._base_config = None
        self._batch_call_config = None
        self._storage_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        """Initialize all configuration objects."""
        try:
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment

            self._batch_call_config = BatchCallConfig()
            self._storage_config = StorageConfig()

            logger.debug(f"Configuration initialized for environment: {self.environment}")

        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}")

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        """Get base configuration."""
        return self._base_config

    @property
    def batch_call(self) -> BatchCallConfig:
        """Get engine configuration."""
        return self._batch_call_config

    @property
    def storage(self) -> StorageConfig:
        """Get ABI storage configuration."""
        return self._storage_config

    def validate_configuration(self) -> bool:
        """
        Validate all configuration settings.

        Returns:
            True if all configurations are valid

        Raises:
            ConfigError: If any configuration is invalid
        """
        if not self.batch_call.RPC_URL:
            logger.warning("RPC_URL not configured; a web3 instance must be passed explicitly")
        if self.storage.ABI_STORE == "redis" and not self.storage.REDIS_HOST:
            raise ConfigError("REDIS_HOST is required when ABI_STORE is redis")
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert all configurations to dictionary format."""
        return {
            "environment": self.environment,
            "base": self.base.to_dict() if self.base else {},
            "batch_call": self.batch_call.to_dict() if self.batch_call else {},
            "storage": self.storage.to_dict() if self.storage else {},
        }

    def __repr__(self) -> str:
        """String representation of the configuration manager."""
        return f"ConfigManager(environment={self.environment})"


# Global configuration manager instance
_config_manager = None


def get_config(environment: Optional[str] = None, force_reload: bool = False) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        environment: Override environment
        force_reload: Force reload of configuration

    Returns:
        ConfigManager instance
    """
    global _config_manager

    if _config_manager is None or force_reload:
        _config_manager = ConfigManager(environment=environment)
        _config_manager.validate_configuration()

    return _config_manager


def reload_config(environment: Optional[str] = None) -> ConfigManager:
    """
    Reload the global configuration manager.

    Args:
        environment: Override environment

    Returns:
        New ConfigManager instance
    """
    return get_config(environment=environment, force_reload=True)
