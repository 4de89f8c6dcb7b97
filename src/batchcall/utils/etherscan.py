"""
Etherscan ABI registry client.

Fetches verified contract ABIs from the Etherscan API so that contracts can
be read by address alone.
"""

import asyncio
import json
import logging
import time
from typing import Any, Dict, List, Optional

import requests

from ..batchers.errors import RegistryError

logger = logging.getLogger(__name__)


class EtherscanClient:
    """Look up verified contract ABIs on Etherscan."""

    BASE_URL = "https://api.etherscan.io/v2/api"
    DEFAULT_DELAY_TIME = 0.3  # seconds between lookups to stay under the rate limit

    def __init__(
        self,
        api_key: str,
        delay_time: float = DEFAULT_DELAY_TIME,
        chain_id: int = 1,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Etherscan API key
            delay_time: Minimum delay in seconds between two lookups
            chain_id: Chain to look ABIs up on
            base_url: Override for the API endpoint
            session: requests session to reuse
        """
        self.api_key = api_key
        self.delay_time = delay_time
        self.chain_id = chain_id
        self.base_url = base_url or self.BASE_URL
        self.session = session or requests.Session()
        self._last_request_at: Optional[float] = None

    def get_abi(self, address: str) -> List[Dict[str, Any]]:
        """
        Fetch the ABI of a verified contract.

        Args:
            address: Contract address

        Returns:
            Parsed ABI

        Raises:
            RegistryError: If the request fails or the contract is not verified
        """
        self._wait_for_rate_limit()

        params = {
            "chainid": self.chain_id,
            "module": "contract",
            "action": "getabi",
            "address": address,
            "apikey": self.api_key,
        }
        try:
            response = self.session.get(self.base_url, params=params, timeout=30)
            response.raise_for_status()
            payload = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Etherscan request for {address} failed: {e}")
            raise RegistryError(f"Etherscan request for {address} failed: {e}")
        finally:
            self._last_request_at = time.monotonic()

        if str(payload.get("status")) != "1":
            message = payload.get("result") or payload.get("message")
            raise RegistryError(f"Etherscan has no ABI for {address}: {message}")

        try:
            return json.loads(payload["result"])
        except (KeyError, TypeError, json.JSONDecodeError) as e:
            raise RegistryError(f"Invalid ABI returned for {address}: {e}")

    async def fetch_abi(self, address: str) -> List[Dict[str, Any]]:
        """Run :meth:`get_abi` in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.get_abi, address)

    def _wait_for_rate_limit(self) -> None:
        if self._last_request_at is None:
            return
        elapsed = time.monotonic() - self._last_request_at
        if elapsed < self.delay_time:
            time.sleep(self.delay_time - elapsed)
