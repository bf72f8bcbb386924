"""Sources management commands."""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..cache import CacheRegistry
from ..config import Config, SourceConfig, load_sources, save_sources
from ..ingestion import FeedAggregator
from .fetch import print_feed_summary

console = Console()
sources_app = typer.Typer(help="Manage feed sources")


@sources_app.command("list")
def sources_list() -> None:
    """List all configured sources."""
    config = Config()

    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        console.print("[red]Sources file not found. Run 'feedfuse init' first.[/red]")
        raise typer.Exit(1)

    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled", style="yellow")
    table.add_column("URL", style="blue")

    for source in sources:
        table.add_row(source.name, "✓" if source.enabled else "✗", source.url)

    console.print(table)


@sources_app.command("add")
def sources_add(
    name: str = typer.Option(..., "--name", "-n", help="Source name"),
    url: str = typer.Option(..., "--url", "-u", help="RSS or Atom feed URL"),
) -> None:
    """Add a new feed source."""
    config = Config()

    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        sources = []

    if any(s.name == name or s.url == url for s in sources):
        console.print(f"[red]Source '{name}' or URL already exists.[/red]")
        raise typer.Exit(1)

    sources.append(SourceConfig(name=name, url=url, enabled=True))
    save_sources(sources, config.sources_path)

    console.print(f"[green]✅ Added source: {name}[/green]")


@sources_app.command("remove")
def sources_remove(
    name: str = typer.Argument(..., help="Source name to remove"),
) -> None:
    """Remove a source."""
    config = Config()

    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        console.print("[red]Sources file not found.[/red]")
        raise typer.Exit(1)

    original_count = len(sources)
    sources = [s for s in sources if s.name != name]

    if len(sources) == original_count:
        console.print(f"[red]Source '{name}' not found.[/red]")
        raise typer.Exit(1)

    save_sources(sources, config.sources_path)
    console.print(f"[green]✅ Removed source: {name}[/green]")


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
) -> None:
    """Fetch and parse sources without using the cache."""
    config = Config()

    try:
        sources = load_sources(config.sources_path)
    except FileNotFoundError:
        console.print("[red]Sources file not found.[/red]")
        raise typer.Exit(1)

    if name:
        sources = [s for s in sources if s.name == name]
        if not sources:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)

    for source in sources:
        if not source.enabled:
            console.print(f"[yellow]⚠️  {source.name}: Disabled[/yellow]")

    urls = [s.url for s in sources if s.enabled]
    if not urls:
        return

    settings = config.config
    aggregator = FeedAggregator.from_config(settings.fetch, CacheRegistry(settings.cache))
    results = aggregator.fetch_results_sync(urls, use_cache=False)

    names = {s.url: s.name for s in sources}
    for result in results:
        label = names.get(result.url, result.url)
        if result.success:
            console.print(f"[green]✅ {label}: OK ({result.item_count} items, {result.duration:.1f}s)[/green]")
        else:
            console.print(f"[red]❌ {label}: {result.error}[/red]")

    print_feed_summary(results)
    if not any(r.success for r in results):
        raise typer.Exit(1)
