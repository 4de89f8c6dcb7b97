"""
Redis storage implementation for contract ABIs.
"""

import json
import logging
from typing import Any, Dict, Optional

import redis.asyncio as redis
from redis.asyncio import Redis

from .base import Abi, AbiStore, ConnectionError, DataError

logger = logging.getLogger(__name__)


class RedisAbiStore(AbiStore):
    """
    Redis storage for contract ABIs, shared between processes.

    ABIs are stored as JSON strings under ``<key_prefix><address>``.
    """

    KEY_PREFIX = "batchcall:abi:"

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize Redis storage.

        Args:
            config: Configuration with keys:
                - host: Redis host
                - port: Redis port
                - password: Redis password (optional)
                - db: Redis database number (default: 0)
                - socket_timeout: Socket timeout in seconds (default: 5)
                - key_prefix: Prefix for ABI keys
                - connection_pool_kwargs: Additional connection pool arguments
        """
        super().__init__(config)
        self.client: Optional[Redis] = None
        self.key_prefix = self.config.get('key_prefix', self.KEY_PREFIX)

    async def connect(self) -> None:
        """Establish connection to Redis."""
        try:
            pool_kwargs = {
                'host': self.config.get('host', 'localhost'),
                'port': self.config.get('port', 6379),
                'db': self.config.get('db', 0),
                'decode_responses': True,
                'socket_timeout': self.config.get('socket_timeout', 5),
                **self.config.get('connection_pool_kwargs', {})
            }

            # Only add password if it's actually set
            password = self.config.get('password')
            if password is not None:
                pool_kwargs['password'] = password

            pool = redis.ConnectionPool(**pool_kwargs)
            self.client = redis.Redis(connection_pool=pool)

            await self.client.ping()

            self.is_connected = True
            logger.info("Redis connection established")

        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            raise ConnectionError(f"Redis connection failed: {e}")

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.client:
            await self.client.aclose()
            self.client = None

        self.is_connected = False
        logger.info("Redis connection closed")

    async def health_check(self) -> bool:
        """Check Redis connection health."""
        if not self.client:
            return False

        try:
            response = await self.client.ping()
            return response is True
        except Exception as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    def _key(self, address: str) -> str:
        return f"{self.key_prefix}{address.lower()}"

    async def get_abi(self, address: str) -> Optional[Abi]:
        if not self.client:
            raise ConnectionError("Not connected to Redis")

        try:
            value = await self.client.get(self._key(address))
        except Exception as e:
            logger.error(f"Failed to get ABI for {address}: {e}")
            raise DataError(f"ABI get failed: {e}")

        if value is None:
            return None
        return json.loads(value)

    async def set_abi(self, address: str, abi: Abi) -> bool:
        if not self.client:
            raise ConnectionError("Not connected to Redis")

        try:
            result = await self.client.set(self._key(address), json.dumps(abi))
            return result is True
        except Exception as e:
            logger.error(f"Failed to set ABI for {address}: {e}")
            raise DataError(f"ABI set failed: {e}")

    async def all_abis(self) -> Dict[str, Abi]:
        if not self.client:
            raise ConnectionError("Not connected to Redis")

        abis = {}
        try:
            async for key in self.client.scan_iter(match=f"{self.key_prefix}*"):
                value = await self.client.get(key)
                if value is not None:
                    abis[key[len(self.key_prefix):]] = json.loads(value)
        except Exception as e:
            logger.error(f"Failed to list stored ABIs: {e}")
            raise DataError(f"ABI scan failed: {e}")
        return abis
