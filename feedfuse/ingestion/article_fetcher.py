"""Article page fetcher and text extractor."""

import asyncio
import logging
from typing import Optional

import trafilatura

from ..cache import FeedCache
from .fetcher import DocumentFetcher

logger = logging.getLogger(__name__)

MAX_ARTICLE_CHARS = 4000


class ArticleFetcher:
    """Fetch an article page and extract its main text."""

    def __init__(
        self,
        fetcher: DocumentFetcher,
        cache: Optional[FeedCache] = None,
        timeout: float = 15.0,
        max_chars: int = MAX_ARTICLE_CHARS,
    ) -> None:
        """Initialize article fetcher."""
        self.fetcher = fetcher
        self.cache = cache
        self.timeout = timeout
        self.max_chars = max_chars

    def _normalize_text(self, text: str) -> str:
        """Collapse whitespace and cap the length for prompt budgets."""
        text = " ".join(text.split())
        if len(text) > self.max_chars:
            text = text[: self.max_chars] + "..."
        return text

    async def fetch_text(self, url: str) -> str:
        """
        Return the readable text of the article at `url`.

        Returns an empty string when nothing could be extracted.

        Raises:
            TransportError: the page could not be fetched
        """
        if self.cache is not None:
            cached = await asyncio.to_thread(self.cache.get, url)
            if cached is not None:
                return cached

        html = await self.fetcher.fetch(url, self.timeout)
        extracted = trafilatura.extract(
            html,
            include_comments=False,
            include_tables=False,
            deduplicate=True,
            favor_precision=True,
            url=url,
        )
        if not extracted:
            logger.info("No article text extracted from %s", url)
            return ""

        text = self._normalize_text(extracted)
        if self.cache is not None:
            await asyncio.to_thread(self.cache.set, url, text)
        return text
