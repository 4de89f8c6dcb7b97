"""
Environment-backed settings shared by every batchcall config section.

Values are read from the process environment once, when a section class is
defined; a ``.env`` file in the working directory is loaded first.
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Optional, TypeVar

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENVIRONMENTS = ("local", "dev", "test", "staging", "production")
TRUE_VALUES = ("true", "1", "yes", "on")

# Masked by to_dict()
SECRET_FIELDS = ("ETHERSCAN_API_KEY", "REDIS_PASSWORD")


class ConfigError(Exception):
    """Raised when a setting is missing or malformed."""
    pass


@dataclass
class BaseConfig:
    """Deployment environment and log level, plus the env parsing helpers."""

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    def __post_init__(self):
        logging.basicConfig(
            level=getattr(logging, self.LOG_LEVEL.upper(), logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        self._validate_config()

    def _validate_config(self):
        if self.ENVIRONMENT not in ENVIRONMENTS:
            raise ConfigError(f"Invalid environment: {self.ENVIRONMENT}")

    @staticmethod
    def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
        return os.getenv(key, default)

    @staticmethod
    def _parse_env(key: str, default: T, parse: Callable[[str], T], kind: str) -> T:
        """
        Parse an environment variable, falling back to ``default`` when it is
        unset or empty.

        Raises:
            ConfigError: If the value cannot be parsed
        """
        value = os.getenv(key)
        if value is None or not value.strip():
            return default
        try:
            return parse(value.strip())
        except ValueError:
            raise ConfigError(f"Environment variable '{key}' must be {kind}, got: {value}")

    @staticmethod
    def get_env_int(key: str, default: int) -> int:
        return BaseConfig._parse_env(key, default, int, "an integer")

    @staticmethod
    def get_env_float(key: str, default: float) -> float:
        return BaseConfig._parse_env(key, default, float, "a float")

    @staticmethod
    def get_env_bool(key: str, default: bool = False) -> bool:
        return BaseConfig._parse_env(key, default, lambda v: v.lower() in TRUE_VALUES, "a boolean")

    def to_dict(self) -> Dict[str, Any]:
        """Settings by field name, with credentials masked."""
        settings = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in SECRET_FIELDS and value:
                value = "***"
            settings[f.name] = value
        return settings
