"""Key-value persistence substrates for the feed cache."""

import errno
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from ..errors import StorageQuotaError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """String-to-string store with a distinguishable quota failure."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string or None when the key is unset."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a string value.

        Raises:
            StorageQuotaError: the store cannot hold the value
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key; missing keys are ignored."""
        pass


class MemoryStore(KeyValueStore):
    """In-process store. `quota_bytes` bounds the sum of all stored values."""

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        self.quota_bytes = quota_bytes
        self._data: Dict[str, str] = {}

    def _size_without(self, key: str) -> int:
        return sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            needed = self._size_without(key) + len(value.encode("utf-8"))
            if needed > self.quota_bytes:
                raise StorageQuotaError(
                    f"Storing {key!r} needs {needed} bytes, quota is {self.quota_bytes}"
                )
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore(KeyValueStore):
    """One UTF-8 file per key inside `directory`.

    `quota_bytes` bounds each value. Writes go through a temporary file and
    an atomic rename so readers never see half-written blobs.
    """

    def __init__(self, directory: Path, quota_bytes: Optional[int] = None) -> None:
        self.directory = Path(directory).expanduser()
        self.quota_bytes = quota_bytes

    def _path(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.directory / f"{safe}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        data = value.encode("utf-8")
        if self.quota_bytes is not None and len(data) > self.quota_bytes:
            raise StorageQuotaError(
                f"Value for {key!r} is {len(data)} bytes, quota is {self.quota_bytes}"
            )

        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{path.stem}-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            if e.errno == errno.ENOSPC:
                raise StorageQuotaError(f"No space left storing {key!r}") from e
            raise

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
        logger.debug("Removed cache file for %s", key)
