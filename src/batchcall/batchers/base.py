"""
Base types for blockchain batch calling.

This module holds the declarative request types (contract groups and method
specs) and the result records that flow from the aggregator through the
correlator to the formatter.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "default"


@dataclass
class MethodSpec:
    """A method to read, with optional call arguments."""

    name: str
    args: Optional[List[Any]] = None
    constant: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MethodSpec":
        if "name" not in data:
            raise ValidationError(f"Method spec is missing a name: {data}")
        args = data.get("args")
        return cls(
            name=data["name"],
            args=list(args) if args is not None else None,
            constant=bool(data.get("constant", False)),
        )


@dataclass
class ContractGroup:
    """
    A group of contracts read with the same set of methods.

    Either ``addresses`` (plain address strings, whose ABIs come from the
    interface cache) or ``contracts`` (web3 contract handles carrying their
    own ``address`` and ``abi``) are the call targets. Address groups first
    register ``abi`` (or a stored or registry ABI when omitted) for their
    addresses; with no ``read_methods`` such a group only registers.
    """

    namespace: str = DEFAULT_NAMESPACE
    addresses: Optional[List[str]] = None
    contracts: Optional[List[Any]] = None
    read_methods: List[MethodSpec] = field(default_factory=list)
    all_read_methods: bool = False
    abi: Optional[List[Dict[str, Any]]] = None

    @property
    def targets(self) -> Sequence[Any]:
        if self.addresses is not None:
            return self.addresses
        return self.contracts or []

    @property
    def registers_abi(self) -> bool:
        return not self.contracts

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContractGroup":
        """
        Build a group from its JSON form.

        Keys follow the camelCase wire names (``readMethods``,
        ``allReadMethods``) and also accept their snake_case spelling.
        """
        read_methods = data.get("readMethods", data.get("read_methods", []))
        return cls(
            namespace=data.get("namespace", DEFAULT_NAMESPACE),
            addresses=data.get("addresses"),
            contracts=data.get("contracts"),
            read_methods=[
                m if isinstance(m, MethodSpec) else MethodSpec.from_dict(m)
                for m in read_methods
            ],
            all_read_methods=bool(
                data.get("allReadMethods", data.get("all_read_methods", False))
            ),
            abi=data.get("abi"),
        )


@dataclass
class CallRecord:
    """One outbound request: a method read on one address."""

    address: str
    namespace: str
    method: MethodSpec
    abi_entry: Dict[str, Any]


@dataclass
class CallResult:
    """Decoded response to a single call."""

    method: str
    value: Any
    input: Optional[str] = None
    args: Optional[List[Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {"value": self.value}
        if self.input is not None:
            result["input"] = self.input
        if self.args is not None:
            result["args"] = self.args
        return result


@dataclass
class AddressState:
    """Results produced for one address of one group."""

    address: str
    namespace: str
    state: List[Optional[CallResult]] = field(default_factory=list)


@dataclass
class AddressResult:
    """Accumulated results for one address, keyed by method name."""

    address: str
    namespace: str
    methods: Dict[str, List[CallResult]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "address": self.address,
            "namespace": self.namespace,
        }
        for name, results in self.methods.items():
            result[name] = [r.to_dict() for r in results]
        return result
