"""
JSON-RPC batch transport over web3.py.

Every queued call becomes one ``eth_call`` entry in a single JSON-RPC batch
and is paired with an ``asyncio.Future``. Dispatching the batch settles each
future exactly once: with a decoded :class:`CallResult`, or with an error.
"""

import asyncio
import logging
from typing import Any, List, Optional, Tuple, Union

from web3 import AsyncWeb3, Web3

from .base import CallRecord, CallResult
from .codec import decode_output, encode_call
from .errors import CallError, NetworkError

logger = logging.getLogger(__name__)

CorrelationId = Tuple[str, str, Optional[str]]


def to_block_identifier(block_number: Optional[int]) -> Union[str, int]:
    """Map an optional block height to an eth_call block parameter."""
    if block_number is None:
        return "latest"
    return hex(block_number)


class _PendingCall:
    __slots__ = ("record", "calldata", "future")

    def __init__(self, record: CallRecord, calldata: str, future: asyncio.Future):
        self.record = record
        self.calldata = calldata
        self.future = future

    @property
    def correlation_id(self) -> CorrelationId:
        args_input = self.calldata if self.record.method.args is not None else None
        return (self.record.address, self.record.method.name, args_input)

    def resolve(self, data: Any) -> None:
        method = self.record.method
        try:
            value = decode_output(self.record.abi_entry, data)
        except Exception as e:
            self.reject(CallError(
                f"Failed to decode {method.name} on {self.record.address}: {e}",
                address=self.record.address,
                method=method.name,
            ))
            return
        self.future.set_result(CallResult(
            method=method.name,
            value=value,
            input=self.correlation_id[2],
            args=method.args,
        ))

    def reject(self, error: Exception) -> None:
        if not self.future.done():
            self.future.set_exception(error)


class OutboundBatch:
    """A single outbound JSON-RPC batch of eth_call requests."""

    def __init__(self, web3: AsyncWeb3):
        self.web3 = web3
        self._requests: List[Tuple[str, List[Any]]] = []
        self._pending: List[_PendingCall] = []
        self.dispatched = False

    def __len__(self) -> int:
        return len(self._pending)

    def add(self, record: CallRecord, block_number: Optional[int] = None) -> asyncio.Future:
        """
        Queue one call and return the future its response will settle.

        Args:
            record: Call to queue
            block_number: Block height to pin the call to (latest when None)
        """
        if self.dispatched:
            raise RuntimeError("Batch has already been dispatched")

        calldata = encode_call(record.abi_entry, record.method.args)
        future = asyncio.get_running_loop().create_future()
        params = [
            {"to": Web3.to_checksum_address(record.address), "data": calldata},
            to_block_identifier(block_number),
        ]
        self._requests.append(("eth_call", params))
        self._pending.append(_PendingCall(record, calldata, future))
        return future

    async def dispatch(self) -> None:
        """
        Send every queued call in one round trip and settle their futures.

        Transport failures reject every future instead of raising, so that
        callers observe them through the futures like any other call error.
        """
        self.dispatched = True
        if not self._pending:
            return

        try:
            responses = await self.web3.provider.make_batch_request(self._requests)
        except Exception as e:
            logger.error(f"Batch request failed: {e}")
            error = NetworkError(f"Batch request failed: {e}")
            for pending in self._pending:
                pending.reject(error)
            return

        if isinstance(responses, dict):
            # The node rejected the batch as a whole
            message = _error_message(responses.get("error")) or "Invalid batch response"
            for pending in self._pending:
                pending.reject(CallError(message))
            return

        for index, pending in enumerate(self._pending):
            if index >= len(responses):
                pending.reject(CallError(
                    f"No response for {pending.record.method.name} on {pending.record.address}",
                    address=pending.record.address,
                    method=pending.record.method.name,
                ))
                continue
            self._settle(pending, responses[index])

    def _settle(self, pending: _PendingCall, response: Any) -> None:
        error = response.get("error") if isinstance(response, dict) else None
        if error:
            code = error.get("code") if isinstance(error, dict) else None
            pending.reject(CallError(
                _error_message(error),
                address=pending.record.address,
                method=pending.record.method.name,
                code=code,
            ))
            return
        pending.resolve(response.get("result"))


def _error_message(error: Any) -> str:
    if isinstance(error, dict):
        return str(error.get("message", error))
    return str(error) if error is not None else ""


class Web3BatchTransport:
    """Creates outbound batches bound to one AsyncWeb3 connection."""

    def __init__(self, web3: AsyncWeb3):
        self.web3 = web3

    def new_batch(self) -> OutboundBatch:
        return OutboundBatch(self.web3)
