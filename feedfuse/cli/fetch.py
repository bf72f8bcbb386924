"""Fetch command implementation."""

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..cache import CacheRegistry
from ..config import Config
from ..errors import AggregationError
from ..ingestion import FeedAggregator
from ..models import FeedResult, NormalizedFeed

console = Console()


def print_feed_summary(results: List[FeedResult]) -> None:
    """Print summary of feed fetch results."""
    total_items = sum(r.item_count for r in results)
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    console.print("\n[bold]Feed Summary:[/bold]")
    console.print(f"  Feeds fetched: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")
    console.print(f"  Total items: {total_items}")

    if failed > 0:
        console.print("\n[bold red]Failed feeds:[/bold red]")
        for result in results:
            if not result.success:
                console.print(f"  - {result.url}: {result.error}")


def print_feed(feed: NormalizedFeed, limit: int) -> None:
    """Print the newest items of a feed as a table."""
    table = Table(title=f"{feed.title} ({len(feed.items)} items)")
    table.add_column("Published", style="yellow", no_wrap=True)
    table.add_column("Title", style="cyan")
    table.add_column("Source", style="magenta")
    table.add_column("Link", style="blue")

    for item in feed.items[:limit]:
        table.add_row(item.published_at or "-", item.title, item.source_feed_title, item.link)

    console.print(table)


def fetch_command(
    urls: Optional[List[str]] = typer.Argument(None, help="Feed URLs (default: enabled sources)"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass cached feeds"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Per-feed timeout in seconds"),
    limit: int = typer.Option(20, "--limit", "-n", help="Items to show", min=1),
) -> None:
    """Fetch feeds and show the merged timeline."""
    config = Config()
    try:
        settings = config.config
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if not urls:
        urls = [s.url for s in config.get_sources()]
    if not urls:
        console.print("[red]No feeds given and no sources configured. Run 'feedfuse init' first.[/red]")
        raise typer.Exit(1)

    caches = CacheRegistry(settings.cache)
    aggregator = FeedAggregator.from_config(settings.fetch, caches)

    if len(urls) == 1:
        results = aggregator.fetch_results_sync(urls, timeout, use_cache=not no_cache)
        result = results[0]
        if not result.success:
            console.print(f"[red]❌ {result.url}: {result.error}[/red]")
            raise typer.Exit(1)
        print_feed(result.feed, limit)
        return

    try:
        feed = aggregator.fetch_all_sync(urls, timeout, use_cache=not no_cache)
    except AggregationError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    print_feed(feed, limit)
