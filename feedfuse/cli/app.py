"""Main CLI application."""

import logging

import typer
from dotenv import load_dotenv
from rich.logging import RichHandler

# Load .env file if it exists
load_dotenv()

from .cache import cache_app
from .fetch import fetch_command
from .init import init_command
from .sources import sources_app
from .summarize import summarize_command

app = typer.Typer(
    name="feedfuse",
    help="feedfuse - RSS and Atom reader with merged, cached timelines",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=verbose)],
    )


# Register commands
app.command("init")(init_command)
app.command("fetch")(fetch_command)
app.command("summarize")(summarize_command)
app.add_typer(sources_app, name="sources", help="Manage feed sources")
app.add_typer(cache_app, name="cache", help="Inspect and clear caches")


if __name__ == "__main__":
    app()
