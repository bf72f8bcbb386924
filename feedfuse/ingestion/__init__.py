"""Feed fetching, aggregation and article extraction."""

from .aggregator import FeedAggregator, merge_feeds, merged_cache_key
from .article_fetcher import ArticleFetcher
from .fetcher import DocumentFetcher, HttpDocumentFetcher

__all__ = [
    "ArticleFetcher",
    "DocumentFetcher",
    "FeedAggregator",
    "HttpDocumentFetcher",
    "merge_feeds",
    "merged_cache_key",
]
