"""
Base classes and interfaces for ABI storage implementations.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

Abi = List[Dict[str, Any]]


class StorageError(Exception):
    """Base exception for storage-related errors."""
    pass


class ConnectionError(StorageError):
    """Raised when connection to storage backend fails."""
    pass


class DataError(StorageError):
    """Raised when data operations fail."""
    pass


class StorageBase(ABC):
    """
    Abstract base class for storage implementations.
    All storage backends must implement these methods.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize storage backend with configuration.

        Args:
            config: Configuration dictionary for the storage backend
        """
        self.config = config or {}
        self.is_connected = False

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection to the storage backend."""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to the storage backend."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the storage backend is healthy and accessible.

        Returns:
            bool: True if healthy, False otherwise
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.disconnect()


class AbiStoreInterface(ABC):
    """Interface for contract ABI persistence."""

    @abstractmethod
    async def get_abi(self, address: str) -> Optional[Abi]:
        """
        Get the stored ABI for an address.

        Args:
            address: Contract address

        Returns:
            ABI or None if not stored
        """
        pass

    @abstractmethod
    async def set_abi(self, address: str, abi: Abi) -> bool:
        """
        Store the ABI for an address.

        Args:
            address: Contract address
            abi: Contract ABI

        Returns:
            bool: True if successful
        """
        pass

    @abstractmethod
    async def all_abis(self) -> Dict[str, Abi]:
        """Return every stored ABI keyed by address."""
        pass


class AbiStore(StorageBase, AbiStoreInterface):
    """Storage backend usable as the ABI persistence layer."""
    pass
