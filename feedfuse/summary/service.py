"""Cached, de-duplicated item summaries."""

import asyncio
import logging
from typing import Optional

from pydantic import BaseModel, Field

from ..cache import FeedCache, InFlightTracker
from ..errors import AlreadyInFlightError, SummarizerError, TransportError
from ..ingestion import ArticleFetcher
from ..models import FeedItem
from ..parsing import is_hn_discussion_link
from .prompts import SHORT_SUMMARY_PROMPT
from .providers import Summarizer

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 30


class SummaryResult(BaseModel):
    """Outcome of summarizing one item."""

    item_key: str = Field(..., description="guid or link of the item")
    success: bool = Field(..., description="Whether a summary is available")
    summary: Optional[str] = Field(None, description="Summary text")
    cached: bool = Field(False, description="Served from the summary cache")
    error: Optional[str] = Field(None, description="Reason when unsuccessful")


def _is_hacker_news(item: FeedItem) -> bool:
    return item.source_feed_title == "Hacker News" or "ycombinator.com" in item.source_feed_url


class SummaryService:
    """Summarize feed items once, caching results and refusing duplicates."""

    def __init__(
        self,
        summarizer: Summarizer,
        cache: Optional[FeedCache] = None,
        tracker: Optional[InFlightTracker] = None,
        article_fetcher: Optional[ArticleFetcher] = None,
    ) -> None:
        self.summarizer = summarizer
        self.cache = cache
        self.tracker = tracker or InFlightTracker()
        self.article_fetcher = article_fetcher

    @staticmethod
    def cache_key(item: FeedItem) -> str:
        return f"{item.link}-{item.title}"

    async def _content_for(self, item: FeedItem) -> str:
        """Hacker News snippets are just links, so summarize the article itself."""
        if (
            self.article_fetcher is not None
            and _is_hacker_news(item)
            and item.link
            and not is_hn_discussion_link(item.link)
        ):
            try:
                text = await self.article_fetcher.fetch_text(item.link)
                if text:
                    return text
            except TransportError as e:
                logger.warning("Could not fetch article %s: %s", item.link, e)
        return item.content_snippet

    async def summarize_item(self, item: FeedItem, prompt: Optional[str] = None) -> SummaryResult:
        """Summarize an item unless a summary for it is already being made."""
        item_key = item.guid or item.link
        try:
            with self.tracker.track(item_key):
                return await self._summarize(item, item_key, prompt or SHORT_SUMMARY_PROMPT)
        except AlreadyInFlightError:
            return SummaryResult(
                item_key=item_key,
                success=False,
                error="Summary already being generated for this item",
            )

    async def _summarize(self, item: FeedItem, item_key: str, prompt: str) -> SummaryResult:
        key = self.cache_key(item)
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached:
                return SummaryResult(item_key=item_key, success=True, summary=cached, cached=True)

        content = await self._content_for(item)
        if len(content) <= MIN_CONTENT_LENGTH:
            return SummaryResult(
                item_key=item_key,
                success=False,
                error="Insufficient content for summary generation",
            )

        try:
            summary = await asyncio.to_thread(self.summarizer.summarize, content, prompt)
        except SummarizerError as e:
            logger.error("Failed to summarize %r: %s", item.title, e)
            return SummaryResult(item_key=item_key, success=False, error=str(e))

        if self.cache is not None:
            self.cache.set(key, summary)
        return SummaryResult(item_key=item_key, success=True, summary=summary)

    def is_generating(self, item_key: str) -> bool:
        return self.tracker.is_in_flight(item_key)
