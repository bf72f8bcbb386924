"""Expiring, quota-aware caches."""

from .feed_cache import DEFAULT_MAX_BYTES, FeedCache
from .inflight import InFlightTracker
from .namespaces import CacheRegistry, create_store, namespace_key
from .policy import EvictionPolicy, OldestFractionEviction
from .storage import FileStore, KeyValueStore, MemoryStore

__all__ = [
    "DEFAULT_MAX_BYTES",
    "CacheRegistry",
    "EvictionPolicy",
    "FeedCache",
    "FileStore",
    "InFlightTracker",
    "KeyValueStore",
    "MemoryStore",
    "OldestFractionEviction",
    "create_store",
    "namespace_key",
]
