"""Named cache namespaces built from configuration."""

import logging
import time
from pathlib import Path
from typing import Callable, Dict, Optional

from ..config import CacheConfig
from .feed_cache import FeedCache
from .policy import OldestFractionEviction
from .storage import FileStore, KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

FEEDS = "feeds"
MERGED = "merged"
SUMMARIES = "summaries"
PREVIEWS = "previews"
APP_STATE = "app_state"


def namespace_key(name: str) -> str:
    return f"feedfuse-{name.replace('_', '-')}-cache"


def create_store(config: CacheConfig) -> KeyValueStore:
    """Build the persistence substrate selected by `config.backend`."""
    if config.backend == "memory":
        return MemoryStore()
    return FileStore(Path(config.directory).expanduser())


class CacheRegistry:
    """One `FeedCache` per namespace, all sharing a store."""

    def __init__(
        self,
        config: CacheConfig,
        store: Optional[KeyValueStore] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.store = store if store is not None else create_store(config)
        ttls = {
            FEEDS: config.feed_ttl,
            MERGED: config.merged_ttl,
            SUMMARIES: config.summary_ttl,
            PREVIEWS: config.preview_ttl,
            APP_STATE: config.app_state_ttl,
        }
        self._caches: Dict[str, FeedCache] = {
            name: FeedCache(
                namespace_key(name),
                self.store,
                default_ttl=ttl,
                max_bytes=config.max_bytes,
                eviction_policy=OldestFractionEviction(config.eviction_fraction),
                clock=clock,
            )
            for name, ttl in ttls.items()
        }

    def __getitem__(self, name: str) -> FeedCache:
        return self._caches[name]

    @property
    def feeds(self) -> FeedCache:
        return self._caches[FEEDS]

    @property
    def merged(self) -> FeedCache:
        return self._caches[MERGED]

    @property
    def summaries(self) -> FeedCache:
        return self._caches[SUMMARIES]

    @property
    def previews(self) -> FeedCache:
        return self._caches[PREVIEWS]

    @property
    def app_state(self) -> FeedCache:
        return self._caches[APP_STATE]

    def items(self):
        return self._caches.items()

    def clear_all(self) -> None:
        for cache in self._caches.values():
            cache.clear()
        logger.info("All caches cleared")

    def purge_all(self) -> Dict[str, int]:
        """Drop expired entries everywhere; returns counts per namespace."""
        return {name: cache.purge_expired() for name, cache in self._caches.items()}
