"""Sources commands."""

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import Config, IngestionConfig
from ..errors import InvalidRequestError
from ..ingestion import RSSFetcher, print_feed_summary, select_sources
from .common import fail

console = Console()
sources_app = typer.Typer(help="Inspect RSS sources")


@sources_app.command("list")
def sources_list() -> None:
    """List configured sources and how their fields are read."""
    config = Config()
    sources = config.get_sources()

    if not sources:
        console.print("[yellow]No sources configured.[/yellow]")
        return

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled", style="yellow")
    table.add_column("Content", style="magenta")
    table.add_column("Author", style="green")
    table.add_column("Category", style="green")
    table.add_column("URL", style="blue")

    for source in sources:
        fields = source.fields
        table.add_row(
            source.name,
            "✓" if source.enabled else "✗",
            fields.content_field if fields.rich_content else "standard",
            fields.author_field,
            fields.category_field,
            source.url,
        )

    console.print(table)


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
) -> None:
    """Fetch and parse feeds without storing anything."""
    config = Config()
    try:
        sources = select_sources(config.get_sources(), name)
    except InvalidRequestError as e:
        fail(e)

    settings = config.config.ingestion if config.config_path.exists() else IngestionConfig()
    fetcher = RSSFetcher(timeout=settings.timeout, user_agent=settings.user_agent)

    results = []
    for source in sources:
        result = fetcher.fetch_feed_sync(source)
        results.append(result)
        if result.success and result.items:
            sample = result.items[0]
            console.print(
                f"[dim]{source.name}: {escape(sample.title[:70])} | author: {escape(sample.author or '-')}"
                f" | category: {escape(sample.category or '-')}[/dim]"
            )

    print_feed_summary(results)
