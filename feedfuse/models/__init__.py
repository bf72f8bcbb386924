"""Data models for feeds, aggregation results and cache entries."""

from .cache import CacheEntry, CacheStats
from .feed import FeedItem, FeedResult, NormalizedFeed

__all__ = ["CacheEntry", "CacheStats", "FeedItem", "FeedResult", "NormalizedFeed"]
