"""Registry and helper utilities."""

from .etherscan import EtherscanClient

__all__ = ["EtherscanClient"]
