"""
Interface cache: resolves contract addresses to their ABIs.

Lookups are served from memory only. Registrations go through to the
configured persistence backend, and ABIs that are neither supplied nor
stored are fetched from the Etherscan registry when an API key is set.
Identical ABIs shared by many addresses are kept once, keyed by hash.
"""

import json
import logging
from typing import Dict, List, Optional

from eth_utils import keccak

from ...batchers.codec import is_readable_field
from ...batchers.errors import RegistrationError
from ...utils.etherscan import EtherscanClient
from .base import Abi, AbiStore, StorageError
from .memory import MemoryAbiStore

logger = logging.getLogger(__name__)


def abi_hash(abi: Abi) -> str:
    canonical = json.dumps(abi, sort_keys=True, separators=(",", ":"))
    return keccak(text=canonical).hex()


class AbiStorage:
    """In-memory ABI cache backed by an :class:`AbiStore`."""

    def __init__(
        self,
        store: Optional[AbiStore] = None,
        etherscan_api_key: Optional[str] = None,
        etherscan_delay_time: float = EtherscanClient.DEFAULT_DELAY_TIME,
        registry: Optional[EtherscanClient] = None,
        logging: bool = False,
    ):
        self.store = store or MemoryAbiStore()
        if registry is None and etherscan_api_key:
            registry = EtherscanClient(etherscan_api_key, delay_time=etherscan_delay_time)
        self.registry = registry
        self.logging = logging
        self.abi_hash_by_address: Dict[str, str] = {}
        self.abi_by_hash: Dict[str, Abi] = {}

    async def load(self) -> int:
        """
        Warm the cache with every ABI held by the store.

        Returns:
            Number of addresses loaded
        """
        abis = await self.store.all_abis()
        for address, abi in abis.items():
            self._cache(address, abi)
        if self.logging:
            logger.info(f"Loaded {len(abis)} ABIs from {type(self.store).__name__}")
        return len(abis)

    def get_abi_from_cache(self, address: str) -> Optional[Abi]:
        abi_id = self.abi_hash_by_address.get(address.lower())
        if abi_id is None:
            return None
        return self.abi_by_hash.get(abi_id)

    def get_readable_abi_fields(self, address: str) -> List[str]:
        """Names of the cached functions readable without arguments."""
        abi = self.get_abi_from_cache(address) or []
        return [entry["name"] for entry in abi if is_readable_field(entry)]

    async def add_abi_to_cache(self, address: str, abi: Optional[Abi] = None) -> None:
        """
        Register the ABI for an address.

        When ``abi`` is omitted it is loaded from the store, then from the
        registry. An address with no resolvable ABI is left uncached.

        Raises:
            RegistrationError: If the store or the registry fails
        """
        if abi is None:
            abi = await self._resolve(address)
            if abi is None:
                return
        elif self.abi_hash_by_address.get(address.lower()) == abi_hash(abi):
            return

        # Cache only what the store accepted
        try:
            await self.store.set_abi(address, abi)
        except StorageError as e:
            raise RegistrationError(f"Failed to store ABI for {address}: {e}") from e
        self._cache(address, abi)

        if self.logging:
            logger.info(f"Registered ABI for {address}")

    async def _resolve(self, address: str) -> Optional[Abi]:
        if self.get_abi_from_cache(address) is not None:
            return None

        try:
            stored = await self.store.get_abi(address)
        except StorageError as e:
            raise RegistrationError(f"Failed to read ABI for {address}: {e}") from e
        if stored is not None:
            self._cache(address, stored)
            return None

        if self.registry is None:
            logger.warning(f"No ABI available for {address}")
            return None

        return await self.registry.fetch_abi(address)

    def _cache(self, address: str, abi: Abi) -> None:
        abi_id = abi_hash(abi)
        self.abi_by_hash.setdefault(abi_id, abi)
        self.abi_hash_by_address[address.lower()] = abi_id
