"""Fetch raw documents over HTTP."""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union
from urllib.parse import quote

import httpx

from ..errors import FeedTimeoutError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "feedfuse/0.1 (RSS reader)"
FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, text/xml;q=0.9, */*;q=0.8"


class DocumentFetcher(ABC):
    """Fetch a document by URL."""

    @abstractmethod
    async def fetch(self, url: str, timeout: float) -> Union[str, bytes]:
        """
        Fetch a document.

        Args:
            url: Document URL
            timeout: Seconds before giving up

        Returns:
            Decoded text, or raw bytes when the server declared no charset

        Raises:
            TransportError: network, HTTP status or timeout failure
        """
        pass


class HttpDocumentFetcher(DocumentFetcher):
    """Fetch documents with httpx, optionally through a URL-rewriting proxy."""

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        proxy_template: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the fetcher.

        Args:
            user_agent: User-Agent header value
            proxy_template: URL with a ``{url}`` placeholder that receives the
                URL-encoded target, for CORS-style relays
            transport: Custom httpx transport (tests)
        """
        self.user_agent = user_agent
        self.proxy_template = proxy_template
        self.transport = transport

    def request_url(self, url: str) -> str:
        if not self.proxy_template:
            return url
        return self.proxy_template.format(url=quote(url, safe=""))

    async def fetch(self, url: str, timeout: float = 10.0) -> Union[str, bytes]:
        headers = {"User-Agent": self.user_agent, "Accept": FEED_ACCEPT}
        try:
            async with httpx.AsyncClient(
                timeout=timeout,
                follow_redirects=True,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = await client.get(self.request_url(url))
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = f"HTTP {status}"
            if status == 404:
                message = "Feed not found (404)"
            elif status == 403:
                message = "Access forbidden (403)"
            elif status >= 500:
                message = f"Server error ({status})"
            raise TransportError(message, url=url, status_code=status) from e
        except httpx.TimeoutException as e:
            raise FeedTimeoutError(f"Request timed out after {timeout}s", url=url) from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error: {e}", url=url) from e

        logger.debug("Fetched %s (%d bytes)", url, len(response.content))
        # Without a declared charset the XML declaration decides the encoding
        if response.charset_encoding is None:
            return response.content
        return response.text
