"""Cache inspection commands."""

import typer
from rich.console import Console
from rich.table import Table

from ..cache import CacheRegistry
from ..config import Config

console = Console()
cache_app = typer.Typer(help="Inspect and clear caches")


def _registry() -> CacheRegistry:
    return CacheRegistry(Config().config.cache)


@cache_app.command("stats")
def cache_stats() -> None:
    """Show entry counts per cache namespace."""
    table = Table(title="Cache Statistics")
    table.add_column("Namespace", style="cyan")
    table.add_column("TTL", style="magenta")
    table.add_column("Total", style="bold")
    table.add_column("Valid", style="green")
    table.add_column("Expired", style="red")

    for name, cache in _registry().items():
        stats = cache.stats()
        table.add_row(
            name,
            f"{cache.default_ttl:.0f}s",
            str(stats.total_items),
            str(stats.valid_items),
            str(stats.expired_items),
        )

    console.print(table)


@cache_app.command("purge")
def cache_purge() -> None:
    """Remove expired entries from every namespace."""
    purged = _registry().purge_all()
    total = sum(purged.values())
    console.print(f"[green]✅ Purged {total} expired entries[/green]")


@cache_app.command("clear")
def cache_clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Drop every cached feed, summary and preview."""
    if not yes and not typer.confirm("Clear all caches?"):
        raise typer.Exit(0)
    _registry().clear_all()
    console.print("[green]✅ All caches cleared[/green]")
