#!/usr/bin/env python3
"""
Command-line interface for one-shot batched contract reads.

Usage:
    python -m batchcall.cli groups.json
    python -m batchcall.cli groups.json --block 18000000 --simplify
    python -m batchcall.cli groups.json --group-by-namespace --abi-dir ./data
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, List, Optional

from .batch_call import BatchCall
from .batchers.errors import BatchError
from .config import ConfigError, get_config
from .core.storage import JsonAbiStore, StorageError, create_abi_store

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """json.dumps fallback for decoded ABI values."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, tuple):
        return list(value)
    return str(value)


def load_groups(path: str) -> List[dict]:
    """Read the contract groups from a JSON file ("-" for stdin)."""
    if path == "-":
        groups = json.load(sys.stdin)
    else:
        with open(path, "r", encoding="utf-8") as f:
            groups = json.load(f)

    if not isinstance(groups, list):
        raise ValueError("Contract groups file must contain a JSON list")
    return groups


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Read many contract methods in a single JSON-RPC batch",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Read at the latest block
  python -m batchcall.cli groups.json

  # Read at a historical block, collapse single values
  python -m batchcall.cli groups.json --block 18000000 --simplify

  # Persist ABIs between runs
  python -m batchcall.cli groups.json --abi-dir ./data
        """,
    )
    parser.add_argument("groups", help="JSON file with the contract groups, or - for stdin")
    parser.add_argument("--block", type=int, default=None, help="Block number to read at")
    parser.add_argument("--rpc-url", default=None, help="Node RPC URL (defaults to RPC_URL)")
    parser.add_argument(
        "--group-by-namespace", action="store_true", help="Group results by namespace"
    )
    parser.add_argument(
        "--simplify", action="store_true", help="Collapse single-valued results"
    )
    parser.add_argument("--abi-dir", default=None, help="Directory of the JSON ABI store")
    parser.add_argument("--verbose", action="store_true", help="Log execution time")
    return parser


async def run(args) -> bool:
    """Run one batch and print its result."""
    config = get_config()
    settings = config.batch_call

    if args.abi_dir:
        store = JsonAbiStore({"base_path": args.abi_dir})
    else:
        store = create_abi_store(config.storage)

    batch_call = BatchCall(
        provider=args.rpc_url or settings.RPC_URL,
        group_by_namespace=args.group_by_namespace or settings.GROUP_BY_NAMESPACE,
        simplify_response=args.simplify or settings.SIMPLIFY_RESPONSE,
        log_execution=args.verbose or settings.LOGGING,
        store=store,
        etherscan=settings.etherscan,
    )

    groups = load_groups(args.groups)
    async with batch_call:
        result = await batch_call.execute(groups, args.block)

    print(json.dumps(result, indent=2, default=to_json))

    if isinstance(result, dict) and isinstance(result.get("error"), str):
        logger.error(f"Batch failed: {result['error']}")
        return False
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function."""
    args = build_parser().parse_args(argv)
    try:
        success = asyncio.run(run(args))
    except (BatchError, ConfigError, StorageError, ValueError, OSError) as e:
        logger.error(f"❌ {e}")
        return 1
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
