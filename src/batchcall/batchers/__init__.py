"""
Blockchain batch calling building blocks.

This package provides the stages of a batched contract read: the
aggregator that builds a single JSON-RPC batch, the transport that sends
it, the correlator that folds the responses, and the formatter that shapes
the final result.
"""

from .aggregator import BatchAggregator
from .base import (
    DEFAULT_NAMESPACE,
    AddressResult,
    AddressState,
    CallRecord,
    CallResult,
    ContractGroup,
    MethodSpec,
)
from .correlator import ResponseCorrelator
from .errors import (
    BatchError,
    CallError,
    NetworkError,
    RegistrationError,
    RegistryError,
    ValidationError,
)
from .formatter import ResultFormatter, group_by_namespace, simplify
from .transport import OutboundBatch, Web3BatchTransport

__all__ = [
    'DEFAULT_NAMESPACE',
    'AddressResult',
    'AddressState',
    'CallRecord',
    'CallResult',
    'ContractGroup',
    'MethodSpec',
    'BatchAggregator',
    'ResponseCorrelator',
    'ResultFormatter',
    'group_by_namespace',
    'simplify',
    'OutboundBatch',
    'Web3BatchTransport',
    'BatchError',
    'CallError',
    'NetworkError',
    'RegistrationError',
    'RegistryError',
    'ValidationError',
]
