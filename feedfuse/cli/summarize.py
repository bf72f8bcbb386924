"""Summarize command implementation."""

import asyncio
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..cache import CacheRegistry
from ..config import Config
from ..errors import ParseError, TransportError
from ..ingestion import ArticleFetcher, FeedAggregator
from ..summary import DEFAULT_PROMPTS, SummaryService, create_summarizer, get_prompt

console = Console()


def summarize_command(
    url: str = typer.Argument(..., help="Feed URL"),
    index: int = typer.Option(0, "--index", "-i", help="Item position, newest first", min=0),
    prompt_id: Optional[str] = typer.Option(
        None,
        "--prompt",
        "-p",
        help=f"Prompt id ({', '.join(p.id for p in DEFAULT_PROMPTS)})",
    ),
) -> None:
    """Summarize one item of a feed."""
    config = Config()
    settings = config.config

    prompt = None
    if prompt_id:
        selected = get_prompt(prompt_id)
        if selected is None:
            console.print(f"[red]Unknown prompt '{prompt_id}'.[/red]")
            raise typer.Exit(1)
        prompt = selected.prompt

    caches = CacheRegistry(settings.cache)
    aggregator = FeedAggregator.from_config(settings.fetch, caches)
    service = SummaryService(
        create_summarizer(config.get_llm_config()),
        cache=caches.summaries,
        article_fetcher=ArticleFetcher(aggregator.fetcher, cache=caches.previews),
    )

    async def run():
        feed = await aggregator.fetch_feed(url)
        if index >= len(feed.items):
            return feed, None, None
        item = feed.items[index]
        return feed, item, await service.summarize_item(item, prompt)

    try:
        feed, item, result = asyncio.run(run())
    except (TransportError, ParseError) as e:
        console.print(f"[red]❌ {url}: {e}[/red]")
        raise typer.Exit(1)

    if item is None:
        console.print(f"[red]{feed.title} has only {len(feed.items)} items.[/red]")
        raise typer.Exit(1)

    if not result.success:
        console.print(f"[red]❌ {item.title}: {result.error}[/red]")
        raise typer.Exit(1)

    source = " (cached)" if result.cached else ""
    console.print(Panel(result.summary, title=item.title, subtitle=f"{item.link}{source}"))
