"""Fetch feeds concurrently and merge them into one timeline."""

import asyncio
import logging
import time
from typing import Iterable, List, Optional, Sequence

import pendulum
from pydantic import ValidationError

from ..cache import CacheRegistry, FeedCache
from ..config import FetchConfig
from ..errors import AllFeedsFailedError, NoFeedsError, ParseError, TransportError
from ..models import FeedResult, NormalizedFeed
from ..parsing import parse_feed, sort_items
from .fetcher import DocumentFetcher, HttpDocumentFetcher

logger = logging.getLogger(__name__)

MERGED_FEED_TITLE = "All Feeds"


def merged_cache_key(urls: Iterable[str]) -> str:
    """Cache key for a set of feeds; input order does not matter."""
    return "ALL:" + "|".join(sorted(set(urls)))


def merge_feeds(results: Sequence[FeedResult]) -> NormalizedFeed:
    """Combine successful results, tagging each item with its source feed."""
    items = []
    for result in results:
        feed = result.feed
        if feed is None:
            continue
        source_url = feed.link or result.url
        items.extend(
            item.model_copy(update={"source_feed_title": feed.title, "source_feed_url": source_url})
            for item in feed.items
        )

    return NormalizedFeed(
        title=MERGED_FEED_TITLE,
        description=f"Combined feed from {len(results)} sources",
        link="",
        items=sort_items(items),
        last_build_date=pendulum.now("UTC").to_iso8601_string(),
    )


class FeedAggregator:
    """Fetch, parse and cache feeds, singly or merged."""

    def __init__(
        self,
        fetcher: DocumentFetcher,
        feed_cache: Optional[FeedCache] = None,
        merged_cache: Optional[FeedCache] = None,
        timeout_per_feed: float = 10.0,
        max_concurrent: int = 10,
    ) -> None:
        """Initialize the aggregator."""
        self.fetcher = fetcher
        self.feed_cache = feed_cache
        self.merged_cache = merged_cache
        self.timeout_per_feed = timeout_per_feed
        self.max_concurrent = max_concurrent

    @classmethod
    def from_config(cls, config: FetchConfig, caches: CacheRegistry) -> "FeedAggregator":
        fetcher = HttpDocumentFetcher(
            user_agent=config.user_agent,
            proxy_template=config.proxy_template,
        )
        return cls(
            fetcher,
            feed_cache=caches.feeds,
            merged_cache=caches.merged,
            timeout_per_feed=config.timeout_per_feed,
            max_concurrent=config.max_concurrent,
        )

    def _cached(self, cache: Optional[FeedCache], key: str) -> Optional[NormalizedFeed]:
        if cache is None:
            return None
        value = cache.get(key)
        if value is None:
            return None
        try:
            return NormalizedFeed.model_validate(value)
        except ValidationError as e:
            logger.warning("Ignoring unreadable cached feed %s: %s", key, e)
            cache.delete(key)
            return None

    async def fetch_feed(
        self,
        url: str,
        use_cache: bool = True,
        timeout: Optional[float] = None,
    ) -> NormalizedFeed:
        """
        Fetch and parse a single feed.

        Raises:
            TransportError: the document could not be fetched
            ParseError: the document is not a usable feed
        """
        if use_cache:
            cached = await asyncio.to_thread(self._cached, self.feed_cache, url)
            if cached is not None:
                logger.debug("Using cached feed %s", url)
                return cached

        raw = await self.fetcher.fetch(url, timeout or self.timeout_per_feed)
        feed = parse_feed(raw)

        if self.feed_cache is not None:
            await asyncio.to_thread(self.feed_cache.set, url, feed.model_dump())
        return feed

    async def _fetch_result(self, url: str, timeout: float, use_cache: bool) -> FeedResult:
        start = time.monotonic()
        try:
            feed = await asyncio.wait_for(self.fetch_feed(url, use_cache, timeout), timeout)
        except asyncio.TimeoutError:
            error = f"Timeout: {url} took longer than {timeout}s"
        except TransportError as e:
            error = f"Fetch failed: {e}"
        except ParseError as e:
            error = f"Invalid feed: {e}"
        except Exception as e:
            logger.exception("Unexpected error loading %s", url)
            error = f"Unexpected error: {e}"
        else:
            duration = time.monotonic() - start
            logger.info("Loaded %s (%d items) in %.2fs", url, len(feed.items), duration)
            return FeedResult(
                url=url,
                success=True,
                feed=feed,
                item_count=len(feed.items),
                duration=duration,
            )

        logger.warning("Failed to load %s: %s", url, error)
        return FeedResult(url=url, success=False, error=error, duration=time.monotonic() - start)

    async def fetch_results(
        self,
        urls: Sequence[str],
        timeout_per_feed: Optional[float] = None,
        use_cache: bool = True,
    ) -> List[FeedResult]:
        """Fetch every feed concurrently; failures come back as results."""
        timeout = timeout_per_feed or self.timeout_per_feed
        unique_urls = list(dict.fromkeys(urls))
        if not unique_urls:
            return []

        # Create semaphore for concurrency control
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_with_semaphore(url: str) -> FeedResult:
            async with semaphore:
                return await self._fetch_result(url, timeout, use_cache)

        tasks = [fetch_with_semaphore(url) for url in unique_urls]
        return list(await asyncio.gather(*tasks))

    async def fetch_all(
        self,
        urls: Sequence[str],
        timeout_per_feed: Optional[float] = None,
        use_cache: bool = True,
    ) -> NormalizedFeed:
        """
        Fetch feeds concurrently and merge them newest first.

        Feeds that fail or time out are dropped; the rest are merged.

        Raises:
            NoFeedsError: `urls` is empty
            AllFeedsFailedError: every feed failed
        """
        if not urls:
            raise NoFeedsError()

        key = merged_cache_key(urls)
        if use_cache:
            cached = await asyncio.to_thread(self._cached, self.merged_cache, key)
            if cached is not None:
                logger.debug("Using cached merged feed for %d urls", len(set(urls)))
                return cached

        results = await self.fetch_results(urls, timeout_per_feed, use_cache)
        succeeded = [r for r in results if r.success]
        logger.info("Loaded %d/%d feeds", len(succeeded), len(results))
        if not succeeded:
            raise AllFeedsFailedError({r.url: r.error or "Unknown error" for r in results})

        merged = merge_feeds(succeeded)
        if self.merged_cache is not None:
            await asyncio.to_thread(self.merged_cache.set, key, merged.model_dump())
        return merged

    def fetch_results_sync(
        self,
        urls: Sequence[str],
        timeout_per_feed: Optional[float] = None,
        use_cache: bool = True,
    ) -> List[FeedResult]:
        """Synchronous wrapper for fetch_results."""
        return asyncio.run(self.fetch_results(urls, timeout_per_feed, use_cache))

    def fetch_all_sync(
        self,
        urls: Sequence[str],
        timeout_per_feed: Optional[float] = None,
        use_cache: bool = True,
    ) -> NormalizedFeed:
        """Synchronous wrapper for fetch_all."""
        return asyncio.run(self.fetch_all(urls, timeout_per_feed, use_cache))
