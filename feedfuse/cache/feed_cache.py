"""Expiring, size-bounded cache persisted as one JSON blob per namespace."""

import json
import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from ..errors import CacheCorruptionError, CacheQuotaError, StorageQuotaError
from ..models import CacheEntry, CacheStats
from .policy import EvictionPolicy, OldestFractionEviction
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 4 * 1024 * 1024
DEFAULT_TTL = 30 * 60.0


class FeedCache:
    """
    Expiring key-value cache for one namespace.

    The whole namespace is serialized into a single store key as a JSON
    object mapping cache keys to ``{value, stored_at, ttl}`` records. The
    cache is disposable: quota problems evict entries and a corrupt blob
    reads as an empty cache.

    Features:
    - Lazy expiry on read
    - Oldest-first eviction when the blob outgrows `max_bytes`
    - Thread-safe operations, last writer wins per key
    """

    def __init__(
        self,
        namespace: str,
        store: KeyValueStore,
        default_ttl: float = DEFAULT_TTL,
        max_bytes: int = DEFAULT_MAX_BYTES,
        eviction_policy: Optional[EvictionPolicy] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the cache.

        Args:
            namespace: Store key holding this cache's blob
            store: Persistence substrate
            default_ttl: TTL in seconds used when `set` gets none
            max_bytes: Ceiling for the serialized blob
            eviction_policy: Picks entries to drop when over budget
            clock: Returns the current time in epoch seconds
        """
        self.namespace = namespace
        self.store = store
        self.default_ttl = default_ttl
        self.max_bytes = max_bytes
        self.eviction_policy = eviction_policy or OldestFractionEviction()
        self.clock = clock
        self.lock = threading.RLock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when absent or expired."""
        with self.lock:
            entries = self._load()
            entry = entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self.clock()):
                logger.debug("Cache entry expired: %s/%s", self.namespace, key)
                del entries[key]
                self._save(entries)
                return None
            return entry.value

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a JSON-serializable value for `ttl` seconds."""
        with self.lock:
            entries = self._load()
            replaced = entries.pop(key, None) is not None
            entries[key] = CacheEntry(
                value=value,
                stored_at=self.clock(),
                ttl=self.default_ttl if ttl is None else ttl,
            )
            # A new key that overflows must shrink the namespace below its old size
            self._save(entries, at_least=1 if replaced else 2)

    def delete(self, key: str) -> None:
        with self.lock:
            entries = self._load()
            if entries.pop(key, None) is not None:
                self._save(entries)

    def clear(self) -> None:
        """Drop the whole namespace."""
        with self.lock:
            try:
                self.store.remove_item(self.namespace)
            except OSError as e:
                logger.warning("Could not clear cache %s: %s", self.namespace, e)
                return
            logger.info("Cleared cache %s", self.namespace)

    def purge_expired(self) -> int:
        """Remove every expired entry and return how many were dropped."""
        with self.lock:
            entries = self._load()
            now = self.clock()
            expired = [key for key, entry in entries.items() if entry.is_expired(now)]
            for key in expired:
                del entries[key]
            if expired:
                self._save(entries)
                logger.info("Purged %d expired entries from %s", len(expired), self.namespace)
            return len(expired)

    def stats(self) -> CacheStats:
        with self.lock:
            entries = self._load()
            now = self.clock()
            expired = sum(1 for entry in entries.values() if entry.is_expired(now))
            return CacheStats(
                total_items=len(entries),
                expired_items=expired,
                valid_items=len(entries) - expired,
            )

    def _load(self) -> Dict[str, CacheEntry]:
        try:
            return self._decode(self.store.get_item(self.namespace))
        except (CacheCorruptionError, UnicodeDecodeError) as e:
            logger.warning("Treating corrupt cache %s as empty: %s", self.namespace, e)
            return {}
        except OSError as e:
            logger.warning("Could not read cache %s, treating as empty: %s", self.namespace, e)
            return {}

    def _decode(self, blob: Optional[str]) -> Dict[str, CacheEntry]:
        if not blob:
            return {}
        try:
            raw = json.loads(blob)
        except json.JSONDecodeError as e:
            raise CacheCorruptionError(f"Invalid JSON in {self.namespace}: {e}") from e
        if not isinstance(raw, dict):
            raise CacheCorruptionError(f"Expected an object in {self.namespace}, got {type(raw).__name__}")

        entries = {}
        for key, record in raw.items():
            try:
                entries[key] = CacheEntry.model_validate(record)
            except ValidationError:
                logger.debug("Dropping malformed cache record %s/%s", self.namespace, key)
        return entries

    def _write(self, entries: Dict[str, CacheEntry]) -> None:
        blob = json.dumps({key: entry.model_dump() for key, entry in entries.items()})
        size = len(blob.encode("utf-8"))
        if size > self.max_bytes:
            raise CacheQuotaError(f"{self.namespace} is {size} bytes, limit is {self.max_bytes}")
        try:
            self.store.set_item(self.namespace, blob)
        except StorageQuotaError as e:
            raise CacheQuotaError(str(e)) from e

    def _save(self, entries: Dict[str, CacheEntry], at_least: int = 1) -> None:
        try:
            self._save_with_eviction(entries, at_least)
        except OSError as e:
            logger.warning("Could not persist cache %s, skipping: %s", self.namespace, e)

    def _save_with_eviction(self, entries: Dict[str, CacheEntry], at_least: int) -> None:
        try:
            self._write(entries)
            return
        except CacheQuotaError as e:
            logger.warning("Cache %s over quota, evicting old entries: %s", self.namespace, e)

        for key in self.eviction_policy.select(entries, at_least):
            del entries[key]
        try:
            self._write(entries)
            logger.info("Cache %s now holds %d entries after eviction", self.namespace, len(entries))
        except CacheQuotaError as e:
            logger.error("Cache %s still over quota after eviction, clearing: %s", self.namespace, e)
            self.clear()
