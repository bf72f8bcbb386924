"""Shared fixtures for feedfuse tests."""

import asyncio
from pathlib import Path
from typing import Dict, List, Union

import pytest

from feedfuse.cache import FeedCache, MemoryStore
from feedfuse.errors import TransportError
from feedfuse.ingestion import DocumentFetcher

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


def rss_document(title: str, items: List[Dict[str, str]], link: str = "") -> str:
    """Build a small RSS 2.0 document."""
    parts = []
    for item in items:
        fields = "".join(f"<{k}>{v}</{k}>" for k, v in item.items())
        parts.append(f"<item>{fields}</item>")
    return (
        '<?xml version="1.0"?><rss version="2.0"><channel>'
        f"<title>{title}</title><link>{link}</link>{''.join(parts)}"
        "</channel></rss>"
    )


class FakeClock:
    """Manually advanced clock in epoch seconds."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher(DocumentFetcher):
    """Serve canned documents; exceptions are raised, delays are awaited."""

    def __init__(self, documents: Dict[str, Union[str, Exception]], delays: Dict[str, float] = None) -> None:
        self.documents = documents
        self.delays = delays or {}
        self.calls: List[str] = []

    async def fetch(self, url: str, timeout: float) -> str:
        self.calls.append(url)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        document = self.documents.get(url)
        if document is None:
            raise TransportError("Feed not found (404)", url=url, status_code=404)
        if isinstance(document, Exception):
            raise document
        return document


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def make_cache(store, clock):
    def factory(namespace: str = "test-cache", **kwargs) -> FeedCache:
        kwargs.setdefault("default_ttl", 600.0)
        return FeedCache(namespace, store, clock=clock, **kwargs)

    return factory
