"""
JSON file storage implementation for contract ABIs.
"""

import gzip
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .base import Abi, AbiStore, DataError

logger = logging.getLogger(__name__)


class JsonAbiStore(AbiStore):
    """
    JSON file storage for contract ABIs.

    All ABIs live in one file mapping lower-cased addresses to ABIs. The
    file is read once on connect and rewritten atomically on every change.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize JSON storage.

        Args:
            config: Configuration with keys:
                - base_path: Base directory for JSON storage
                - filename: ABI file name (default: abis.json)
                - compress: Whether to gzip the file (default: False)
                - pretty: Whether to pretty-print JSON (default: True)
        """
        super().__init__(config)
        self.base_path = Path(self.config.get('base_path', './data'))
        self.filename = self.config.get('filename', 'abis.json')
        self.compress = self.config.get('compress', False)
        self.pretty = self.config.get('pretty', True)
        self._abis: Dict[str, Abi] = {}

    @property
    def filepath(self) -> Path:
        filename = self.filename
        if self.compress and not filename.endswith('.gz'):
            filename = f"{filename}.gz"
        return self.base_path / filename

    async def connect(self) -> None:
        """Ensure base directory exists and load the ABI file."""
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._abis = self._load()
        self.is_connected = True
        logger.info(f"JSON ABI storage initialized at {self.filepath} ({len(self._abis)} ABIs)")

    async def disconnect(self) -> None:
        """No-op for JSON storage."""
        self.is_connected = False

    async def health_check(self) -> bool:
        """Check if base directory is accessible."""
        return self.base_path.exists() and self.base_path.is_dir()

    async def get_abi(self, address: str) -> Optional[Abi]:
        return self._abis.get(address.lower())

    async def set_abi(self, address: str, abi: Abi) -> bool:
        key = address.lower()
        previous = self._abis.get(key)
        self._abis[key] = abi
        try:
            return self._save()
        except DataError:
            if previous is None:
                del self._abis[key]
            else:
                self._abis[key] = previous
            raise

    async def all_abis(self) -> Dict[str, Abi]:
        return dict(self._abis)

    def _load(self) -> Dict[str, Abi]:
        filepath = self.filepath
        if not filepath.exists():
            return {}

        try:
            if self.compress:
                with gzip.open(filepath, 'rt', encoding='utf-8') as f:
                    return json.load(f)
            with open(filepath, 'r', encoding='utf-8') as f:
                return json.load(f)
        except Exception as e:
            logger.error(f"Failed to load ABI file {filepath}: {e}")
            raise DataError(f"JSON load failed: {e}")

    def _save(self) -> bool:
        filepath = self.filepath
        indent = 2 if self.pretty else None
        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)

            # Atomic write with temporary file
            temp_path = filepath.with_suffix('.tmp')
            if self.compress:
                with gzip.open(temp_path, 'wt', encoding='utf-8') as f:
                    json.dump(self._abis, f, indent=indent)
            else:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(self._abis, f, indent=indent)
            temp_path.replace(filepath)

            logger.debug(f"Saved {len(self._abis)} ABIs to {filepath}")
            return True

        except Exception as e:
            logger.error(f"Failed to save ABI file {filepath}: {e}")
            raise DataError(f"JSON save failed: {e}")
