"""Init command implementation."""

from pathlib import Path
from typing import List

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import CacheConfig, ConfigModel, SourceConfig, save_config, save_sources
from ..config.loader import DEFAULT_CONFIG_DIR

console = Console()


def create_default_sources() -> List[SourceConfig]:
    """Create default feed sources."""
    return [
        SourceConfig(name="Hacker News", url="https://news.ycombinator.com/rss", enabled=True),
        SourceConfig(name="Kubernetes Blog", url="https://kubernetes.io/feed.xml", enabled=True),
        SourceConfig(name="GitHub Blog", url="https://github.blog/feed/", enabled=True),
    ]


def init_command(
    config_dir: Path = typer.Option(
        DEFAULT_CONFIG_DIR,
        "--config-dir",
        "-c",
        help="Configuration directory",
    ),
    cache_dir: Path = typer.Option(
        Path.home() / ".cache" / "feedfuse",
        "--cache-dir",
        help="Directory for cached feeds",
    ),
    seed_sources: bool = typer.Option(
        True,
        "--seed-sources/--no-seed-sources",
        help="Seed default feed sources",
    ),
) -> None:
    """Initialize feedfuse configuration."""
    console.print(Panel.fit("feedfuse - Initialization", style="bold blue"))

    config_dir.mkdir(parents=True, exist_ok=True)
    config_path = config_dir / "config.yaml"
    sources_path = config_dir / "sources.yaml"

    config = ConfigModel(cache=CacheConfig(directory=str(cache_dir)))
    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    if seed_sources:
        sources = create_default_sources()
        save_sources(sources, sources_path)
        console.print(f"✅ Created sources: {sources_path} (seeded with {len(sources)} sources)")
    else:
        save_sources([], sources_path)
        console.print(f"✅ Created sources: {sources_path} (empty)")

    cache_dir.mkdir(parents=True, exist_ok=True)
    console.print(f"✅ Created cache directory: {cache_dir}")

    console.print(
        Panel(
            f"[green]✅ feedfuse initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n"
            f"Sources: {sources_path}\n\n"
            f"Next steps:\n"
            f"1. Optional, for summaries: [bold]export OPENAI_API_KEY=your_key[/bold]\n"
            f"2. Run: [bold]feedfuse fetch[/bold]",
            style="green",
        )
    )
