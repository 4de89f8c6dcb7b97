"""
BatchCall engine: many contract reads, one JSON-RPC round trip.

Example:
    ::

        from batchcall import BatchCall

        batch_call = BatchCall(provider="https://eth.llamarpc.com", simplify_response=True)
        result = await batch_call.execute([
            {
                "namespace": "tokens",
                "addresses": ["0x6B175474E89094C44Da98b954EedeAC495271d0F"],
                "abi": erc20_abi,
                "allReadMethods": True,
                "readMethods": [{"name": "balanceOf", "args": [holder]}],
            },
        ])
"""

import logging
import time
from typing import Any, Dict, List, Optional, Set, Union

from web3 import AsyncHTTPProvider, AsyncWeb3

from .batchers.aggregator import BatchAggregator
from .batchers.base import ContractGroup
from .batchers.correlator import ResponseCorrelator
from .batchers.errors import ErrorHandler
from .batchers.formatter import FormattedResult, ResultFormatter
from .batchers.transport import Web3BatchTransport
from .config import ConfigError, ConfigManager, get_config
from .core.storage import AbiStorage, AbiStore, create_abi_store
from .utils.etherscan import EtherscanClient

logger = logging.getLogger(__name__)


class BatchCall:
    """
    Aggregates contract reads from many contract groups into one batch.

    The ABI cache and the set of addresses already read live as long as the
    instance: constant methods of an address are only requested by the
    first invocation that reads it. Everything else is rebuilt per
    :meth:`execute`.

    Args:
        web3: AsyncWeb3 instance to send batches through
        provider: HTTP RPC URL, used when ``web3`` is not given
        group_by_namespace: Return ``{namespace: [entries]}`` instead of a list
        simplify_response: Collapse single-valued method results to bare values
        log_execution: Log method count and execution time of every batch
        store: ABI persistence backend (in-memory when omitted)
        etherscan: ``api_key``, ``delay_time`` and ``chain_id`` of the
            Etherscan registry used for unknown ABIs
    """

    def __init__(
        self,
        web3: Optional[AsyncWeb3] = None,
        provider: Optional[str] = None,
        group_by_namespace: bool = False,
        simplify_response: bool = False,
        log_execution: bool = False,
        store: Optional[AbiStore] = None,
        etherscan: Optional[Dict[str, Any]] = None,
    ):
        if web3 is None and provider is None:
            raise ConfigError("You need to either provide a web3 instance or a provider url")

        self.web3 = web3 or AsyncWeb3(AsyncHTTPProvider(provider))
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

        etherscan = etherscan or {}
        self.etherscan_api_key = etherscan.get("api_key")
        self.etherscan_delay_time = etherscan.get("delay_time", EtherscanClient.DEFAULT_DELAY_TIME)
        registry = None
        if self.etherscan_api_key:
            registry = EtherscanClient(
                self.etherscan_api_key,
                delay_time=self.etherscan_delay_time,
                chain_id=etherscan.get("chain_id", 1),
            )

        self.group_by_namespace = group_by_namespace
        self.simplify_response = simplify_response
        self.log_execution = log_execution

        self.read_contracts: Set[str] = set()
        self.store = AbiStorage(store=store, registry=registry, logging=log_execution)
        self.transport = Web3BatchTransport(self.web3)
        self.formatter = ResultFormatter(
            simplify_response=simplify_response,
            group_by_namespace=group_by_namespace,
        )

    @classmethod
    def from_config(
        cls,
        config: Optional[ConfigManager] = None,
        web3: Optional[AsyncWeb3] = None,
    ) -> "BatchCall":
        """
        Build an engine from environment configuration.

        Args:
            config: Configuration manager (global configuration when None)
            web3: AsyncWeb3 instance overriding ``RPC_URL``
        """
        config = config or get_config()
        settings = config.batch_call
        return cls(
            web3=web3,
            provider=settings.RPC_URL,
            group_by_namespace=settings.GROUP_BY_NAMESPACE,
            simplify_response=settings.SIMPLIFY_RESPONSE,
            log_execution=settings.LOGGING,
            store=create_abi_store(config.storage),
            etherscan=settings.etherscan,
        )

    async def connect(self) -> None:
        """Connect the ABI store and warm the cache from it."""
        await self.store.store.connect()
        await self.store.load()

    async def close(self) -> None:
        await self.store.store.disconnect()

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def execute(
        self,
        contracts_batch: List[Union[ContractGroup, Dict[str, Any]]],
        block_number: Optional[int] = None,
    ) -> Union[FormattedResult, Dict[str, str]]:
        """
        Read every method of every contract group in one batch.

        Args:
            contracts_batch: Contract groups, as :class:`ContractGroup` or dicts
            block_number: Block height to read at (latest when None)

        Returns:
            The formatted results, or ``{"error": message}`` when any call fails

        Raises:
            RegistrationError: If an ABI cannot be registered; nothing is sent
        """
        start_time = time.monotonic()
        groups = [
            group if isinstance(group, ContractGroup) else ContractGroup.from_dict(group)
            for group in contracts_batch
        ]

        for group in groups:
            if group.registers_abi:
                await self._add_abis(group)

        aggregator = BatchAggregator(self.store, self.read_contracts)
        correlator = ResponseCorrelator()
        try:
            batch = self.transport.new_batch()
            pending = aggregator.build(batch, groups, block_number)
            await batch.dispatch()
            contracts_state = await correlator.reduce(pending)
        except Exception as e:
            self.error_handler.log_error(e, {
                "operation": "execute",
                "number_of_methods": aggregator.number_of_methods,
                "block_number": block_number,
            })
            return {"error": str(e)}

        result = self.formatter.format([entry.to_dict() for entry in contracts_state])

        if self.log_execution:
            execution_time = int((time.monotonic() - start_time) * 1000)
            self.logger.info(
                f"[BatchCall] methods: {aggregator.number_of_methods}, "
                f"execution time: {execution_time} ms"
            )
        return result

    async def _add_abis(self, group: ContractGroup) -> None:
        for address in group.addresses or []:
            await self.store.add_abi_to_cache(address, group.abi)
