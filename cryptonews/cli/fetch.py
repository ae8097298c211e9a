"""Fetch command implementation."""

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..db import ArticleStorage, get_connection
from ..errors import InvalidRequestError
from ..ingestion import IngestionReport, RSSFetcher, select_sources
from ..pipeline import IngestionOrchestrator
from .common import fail, load_config, print_json, require_database

console = Console()


def print_ingestion_report(report: IngestionReport) -> None:
    """Render an ingestion report as a table."""
    table = Table(title="Fetch Summary")
    table.add_column("Source", style="cyan")
    table.add_column("Processed", justify="right")
    table.add_column("New", style="green", justify="right")
    table.add_column("Existing", style="dim", justify="right")
    table.add_column("Failed", style="red", justify="right")
    table.add_column("Error", style="red")

    for result in report.results:
        table.add_row(
            result.source,
            str(result.processed),
            str(result.new),
            str(result.existing),
            str(result.failed),
            escape(result.error or ""),
        )

    console.print(table)
    console.print(
        f"[bold]Total processed:[/bold] {report.processed}  "
        f"[bold]New:[/bold] [green]{report.new}[/green]  "
        f"[dim]{report.timestamp.isoformat()}[/dim]"
    )


def fetch_command(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help="Fetch only this source (default: all enabled sources)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Fetch RSS feeds and store new articles."""
    config = load_config()
    settings = config.config.ingestion
    sources = config.get_sources()

    try:
        select_sources(sources, source)
    except InvalidRequestError as e:
        fail(e)

    require_database(config)

    orchestrator = IngestionOrchestrator(
        fetcher=RSSFetcher(timeout=settings.timeout, user_agent=settings.user_agent),
        storage=ArticleStorage(),
        item_delay=settings.item_delay,
        max_content_chars=settings.max_content_chars,
    )

    try:
        with get_connection(config.get_db_config()) as conn:
            report = orchestrator.run(conn, sources, source)
    except KeyboardInterrupt:
        console.print("\n[yellow]Fetch interrupted by user[/yellow]")
        raise typer.Exit(1)

    if as_json:
        print_json(report)
    else:
        print_ingestion_report(report)
