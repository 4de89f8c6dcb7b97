"""
Batch aggregator: turns contract groups into one outbound batch.
"""

import asyncio
import logging
from typing import Any, Dict, FrozenSet, List, Optional, Set, Tuple

from .base import AddressState, CallRecord, CallResult, ContractGroup, MethodSpec
from .codec import find_function, is_constant
from .transport import OutboundBatch

logger = logging.getLogger(__name__)


def _resolved(value: Any) -> asyncio.Future:
    future = asyncio.get_running_loop().create_future()
    future.set_result(value)
    return future


class BatchAggregator:
    """
    Builds a single outbound batch from a list of contract groups.

    The aggregator owns no state of its own: the interface cache and the
    set of addresses read at least once belong to the engine and are passed
    in, so that they outlive a single invocation.
    """

    def __init__(self, abi_storage, read_contracts: Set[str]):
        """
        Args:
            abi_storage: Interface cache exposing ``get_abi_from_cache`` and
                ``get_readable_abi_fields``
            read_contracts: Lower-cased addresses already read by a previous
                invocation; updated in place
        """
        self.abi_storage = abi_storage
        self.read_contracts = read_contracts
        self.number_of_methods = 0

    def build(
        self,
        batch: OutboundBatch,
        groups: List[ContractGroup],
        block_number: Optional[int] = None,
    ) -> List["asyncio.Future[List[AddressState]]"]:
        """
        Enqueue every call of every group into ``batch``.

        Args:
            batch: Batch the calls are added to
            groups: Contract groups in request order
            block_number: Block height to pin every call to (latest when None)

        Returns:
            One pending result per group, resolving to the states of its
            addresses once all their calls resolve, or failing with the
            first call that fails
        """
        # Suppression only looks at reads from earlier invocations
        read_before = frozenset(self.read_contracts)

        # No task is created and no address marked until every call is enqueued
        enqueued = [
            [
                self._add_address(batch, group, target, read_before, block_number)
                for target in group.targets
            ]
            for group in groups
        ]

        pending = [
            asyncio.gather(*[
                self._collect(address, group.namespace, futures)
                for address, futures in addresses
            ])
            for group, addresses in zip(groups, enqueued)
        ]
        self.read_contracts.update(
            address.lower() for addresses in enqueued for address, _ in addresses
        )
        return pending

    @staticmethod
    async def _collect(
        address: str,
        namespace: str,
        futures: List["asyncio.Future[Optional[CallResult]]"],
    ) -> AddressState:
        state = await asyncio.gather(*futures)
        return AddressState(address=address, namespace=namespace, state=list(state))

    def _add_address(
        self,
        batch: OutboundBatch,
        group: ContractGroup,
        target: Any,
        read_before: FrozenSet[str],
        block_number: Optional[int],
    ) -> Tuple[str, List["asyncio.Future[Optional[CallResult]]"]]:
        address, abi = self._resolve_target(target)

        methods = list(group.read_methods)
        if group.all_read_methods:
            methods.extend(
                MethodSpec(name=name)
                for name in self.abi_storage.get_readable_abi_fields(address)
            )

        already_read = address.lower() in read_before
        futures = []
        for method in methods:
            entry = find_function(abi, method.name)
            if already_read and (method.constant or is_constant(entry)):
                continue
            futures.append(self._add_method(batch, address, group.namespace, entry, method, block_number))

        return address, futures

    def _add_method(
        self,
        batch: OutboundBatch,
        address: str,
        namespace: str,
        entry: Optional[Dict[str, Any]],
        method: MethodSpec,
        block_number: Optional[int],
    ) -> "asyncio.Future[Optional[CallResult]]":
        if entry is None:
            return _resolved(None)

        self.number_of_methods += 1
        record = CallRecord(address=address, namespace=namespace, method=method, abi_entry=entry)
        return batch.add(record, block_number)

    def _resolve_target(self, target: Any) -> Tuple[str, Optional[List[Dict[str, Any]]]]:
        # Live contract handles carry their own ABI
        if hasattr(target, "address") and hasattr(target, "abi"):
            return target.address, target.abi
        return target, self.abi_storage.get_abi_from_cache(target)
