"""Tests for cached item summaries."""

import asyncio

import pytest

from conftest import FakeFetcher
from feedfuse.errors import SummarizerError, TransportError
from feedfuse.ingestion import ArticleFetcher
from feedfuse.models import FeedItem
from feedfuse.summary import MockSummarizer, SummaryService, create_summarizer, get_prompt
from feedfuse.summary.providers import Summarizer

LONG_TEXT = "Python 3.13 ships a new interactive shell, an experimental JIT and free-threaded builds."


def _item(**kwargs):
    kwargs.setdefault("guid", "post-1")
    kwargs.setdefault("title", "Python 3.13 released")
    kwargs.setdefault("link", "https://blog.example.com/py313")
    kwargs.setdefault("content_snippet", LONG_TEXT)
    return FeedItem(**kwargs)


def _hn_item(link="https://arstechnica.com/story", snippet="Comments"):
    return _item(
        guid="hn-1",
        link=link,
        content_snippet=snippet,
        source_feed_title="Hacker News",
        source_feed_url="https://news.ycombinator.com/",
    )


class StubArticles:
    """Article fetcher returning canned text, optionally after a gate opens."""

    def __init__(self, text="", error=None, gate=None):
        self.text = text
        self.error = error
        self.gate = gate
        self.urls = []

    async def fetch_text(self, url):
        self.urls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.text


class FailingSummarizer(Summarizer):
    def summarize(self, text, prompt):
        raise SummarizerError("Failed to generate summary: rate limited")

    def get_usage_stats(self):
        return {}


@pytest.mark.asyncio
async def test_summarizes_and_caches(make_cache):
    summarizer = MockSummarizer()
    service = SummaryService(summarizer, cache=make_cache("summaries"))

    first = await service.summarize_item(_item())
    second = await service.summarize_item(_item())

    assert first.success and not first.cached
    assert first.summary.startswith("Mock summary: Python 3.13")
    assert second.cached and second.summary == first.summary
    assert len(summarizer.calls) == 1


@pytest.mark.asyncio
async def test_cache_key_is_link_and_title(make_cache):
    cache = make_cache("summaries")
    cache.set("https://blog.example.com/py313-Python 3.13 released", "Already summarized")

    result = await SummaryService(MockSummarizer(), cache=cache).summarize_item(_item())
    assert result.cached and result.summary == "Already summarized"


@pytest.mark.asyncio
async def test_custom_prompt_is_passed_through():
    summarizer = MockSummarizer()
    prompt = get_prompt("technical").prompt
    await SummaryService(summarizer).summarize_item(_item(), prompt=prompt)
    assert summarizer.calls[0][1] == prompt


@pytest.mark.asyncio
async def test_short_content_is_rejected():
    summarizer = MockSummarizer()
    result = await SummaryService(summarizer).summarize_item(_item(content_snippet="Too short."))

    assert not result.success
    assert result.error == "Insufficient content for summary generation"
    assert summarizer.calls == []


@pytest.mark.asyncio
async def test_summarizer_failure_is_reported_and_not_cached(make_cache):
    cache = make_cache("summaries")
    result = await SummaryService(FailingSummarizer(), cache=cache).summarize_item(_item())

    assert not result.success
    assert "rate limited" in result.error
    assert cache.stats().total_items == 0


@pytest.mark.asyncio
async def test_hacker_news_item_uses_article_text():
    summarizer = MockSummarizer()
    articles = StubArticles(text=LONG_TEXT)
    result = await SummaryService(summarizer, article_fetcher=articles).summarize_item(_hn_item())

    assert result.success
    assert articles.urls == ["https://arstechnica.com/story"]
    assert summarizer.calls[0][0] == LONG_TEXT


@pytest.mark.asyncio
async def test_hacker_news_discussion_link_is_not_fetched():
    articles = StubArticles(text=LONG_TEXT)
    item = _hn_item(link="https://news.ycombinator.com/item?id=1", snippet=LONG_TEXT)
    result = await SummaryService(MockSummarizer(), article_fetcher=articles).summarize_item(item)

    assert result.success
    assert articles.urls == []


@pytest.mark.asyncio
async def test_article_fetch_failure_falls_back_to_snippet():
    articles = StubArticles(error=TransportError("Feed not found (404)", status_code=404))
    result = await SummaryService(MockSummarizer(), article_fetcher=articles).summarize_item(_hn_item())

    # The snippet is too short to stand in for the article
    assert not result.success
    assert result.error == "Insufficient content for summary generation"


@pytest.mark.asyncio
async def test_concurrent_request_for_same_item_is_refused():
    gate = asyncio.Event()
    articles = StubArticles(text=LONG_TEXT, gate=gate)
    service = SummaryService(MockSummarizer(), article_fetcher=articles)

    first = asyncio.create_task(service.summarize_item(_hn_item()))
    while not articles.urls:
        await asyncio.sleep(0)

    assert service.is_generating("hn-1")
    duplicate = await service.summarize_item(_hn_item())
    assert not duplicate.success
    assert duplicate.error == "Summary already being generated for this item"

    gate.set()
    assert (await first).success
    assert not service.is_generating("hn-1")


@pytest.mark.asyncio
async def test_article_fetcher_extracts_and_caches(make_cache):
    paragraphs = [
        "The release notes describe a reworked interactive interpreter with multiline editing and colour.",
        "An experimental just-in-time compiler can be enabled at build time for early performance testing.",
        "Free-threaded builds remove the global interpreter lock and let threads run on every core.",
        "Several deprecated modules were finally removed from the standard library after long notice.",
        "Error messages gained more colour and better suggestions for misspelled keyword arguments.",
        "Mobile platforms such as iOS and Android are now officially supported tier three targets.",
    ]
    html = (
        "<html><head><title>Python 3.13 released</title></head><body><article><h1>Python 3.13 released</h1>"
        + "".join(f"<p>{p}</p>" for p in paragraphs)
        + "</article></body></html>"
    )
    fetcher = FakeFetcher({"https://example.com/story": html})
    articles = ArticleFetcher(fetcher, cache=make_cache("previews"), max_chars=120)

    text = await articles.fetch_text("https://example.com/story")
    again = await articles.fetch_text("https://example.com/story")

    assert "interactive interpreter" in text
    assert len(text) <= 123 and text.endswith("...")
    assert again == text
    assert fetcher.calls == ["https://example.com/story"]


def test_create_summarizer_falls_back_to_mock():
    assert isinstance(create_summarizer({"provider": "openai", "api_key": None}), MockSummarizer)
    assert isinstance(create_summarizer({"provider": "mock"}), MockSummarizer)
    assert isinstance(create_summarizer({"provider": "unknown"}), MockSummarizer)


def test_get_prompt():
    assert get_prompt("short").is_default
    assert get_prompt("missing") is None
