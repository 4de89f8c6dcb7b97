"""
Response correlator: folds per-call results into per-address results.
"""

import asyncio
import logging
from typing import Dict, List, Optional

from .base import AddressResult, AddressState, CallResult

logger = logging.getLogger(__name__)


class ResponseCorrelator:
    """
    Reduces the pending results of every group into one ordered list of
    :class:`AddressResult`, keyed by case-insensitive address. An entry keeps
    the address spelling and namespace of its first result.

    Results are folded in group, then address, then method order:

    - the first result for an address creates its entry;
    - a result whose encoded input is not yet present for the method is
      appended;
    - a result without input (an argument-less call) replaces the method's
      list, so such calls never repeat;
    - empty results (methods missing from the ABI) are skipped.
    """

    def __init__(self):
        self._results: Dict[str, AddressResult] = {}

    async def reduce(self, pending: List[asyncio.Future]) -> List[AddressResult]:
        """
        Wait for every group and fold their results.

        Raises:
            Exception: The first call failure, without waiting for the rest
        """
        try:
            groups = await asyncio.gather(*pending)
        except Exception:
            _drain(pending)
            raise

        for group in groups:
            for address_state in group:
                self.add_address_state(address_state)
        return self.results

    @property
    def results(self) -> List[AddressResult]:
        return list(self._results.values())

    def add_address_state(self, address_state: AddressState) -> None:
        for result in address_state.state:
            self.add_result(address_state.address, address_state.namespace, result)

    def add_result(self, address: str, namespace: str, result: Optional[CallResult]) -> None:
        if not result:
            return

        key = address.lower()
        address_result = self._results.get(key)
        if address_result is None:
            address_result = AddressResult(address=address, namespace=namespace)
            address_result.methods[result.method] = [result]
            self._results[key] = address_result
            return

        if result.input is None:
            address_result.methods[result.method] = [result]
            return

        method_results = address_result.methods.setdefault(result.method, [])
        if not any(existing.input == result.input for existing in method_results):
            method_results.append(result)


def _drain(pending: List[asyncio.Future]) -> None:
    """Mark the exceptions of settled futures as retrieved."""
    for future in pending:
        if future.done() and not future.cancelled():
            future.exception()
