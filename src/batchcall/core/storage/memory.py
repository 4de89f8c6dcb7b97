"""
In-process ABI storage, the default backend.
"""

from typing import Any, Dict, Optional

from .base import Abi, AbiStore


class MemoryAbiStore(AbiStore):
    """Keeps ABIs in a dictionary for the lifetime of the process."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self._abis: Dict[str, Abi] = {}

    async def connect(self) -> None:
        self.is_connected = True

    async def disconnect(self) -> None:
        self.is_connected = False

    async def health_check(self) -> bool:
        return True

    async def get_abi(self, address: str) -> Optional[Abi]:
        return self._abis.get(address.lower())

    async def set_abi(self, address: str, abi: Abi) -> bool:
        self._abis[address.lower()] = abi
        return True

    async def all_abis(self) -> Dict[str, Abi]:
        return dict(self._abis)
