"""Annotate and summarize commands."""

from typing import List, Optional

import typer
from psycopg import Connection
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..annotation import (
    AnnotationReport,
    ArticleAnnotator,
    BatchSummarizer,
    SummaryType,
    build_llm_provider,
)
from ..config import Config
from ..db import AnnotationStorage, ArticleStorage, SummaryStorage, get_connection
from ..errors import ConfigurationError, InvalidRequestError
from ..models import Article, ArticleQuery, BatchSummary
from .common import fail, load_config, print_json, require_database

console = Console()

TYPE_HELP = "Summary type: " + ", ".join(f"'{t.value}'" for t in SummaryType) + " (or member name, e.g. SENTIMENT_BASED)"


def select_articles(conn: Connection, ids: Optional[List[int]], latest: Optional[int]) -> List[Article]:
    """
    Load the articles named on the command line.

    Raises:
        InvalidRequestError: If nothing was selected or some ids do not exist
    """
    storage = ArticleStorage()
    if ids:
        articles = storage.get_articles_by_ids(conn, ids)
        found = {a.id for a in articles}
        missing = [i for i in ids if i not in found]
        if missing:
            raise InvalidRequestError(f"Articles not found: {', '.join(str(i) for i in missing)}")
        return articles
    if latest:
        return storage.list_articles(conn, ArticleQuery(limit=latest))
    raise InvalidRequestError("No articles provided")


def _build_provider(config: Config):
    try:
        return build_llm_provider(config.get_llm_config())
    except ConfigurationError as e:
        fail(e)


def print_annotation_report(report: AnnotationReport) -> None:
    """Render an annotation report as a table."""
    table = Table(title=report.summary_type)
    table.add_column("Article", style="cyan", justify="right")
    table.add_column("Status", style="bold")
    table.add_column("Sentiment")
    table.add_column("Trend", justify="right")
    table.add_column("Impact", justify="right")
    table.add_column("Cryptos", style="magenta")
    table.add_column("Error", style="red")

    for item in report.results:
        record = item.summary
        table.add_row(
            str(item.article_id),
            "[green]✓[/green]" if item.success else "[red]✗[/red]",
            record.ai_sentiment.value if record else "-",
            str(record.trending_score) if record else "-",
            str(record.market_impact_score) if record else "-",
            ", ".join(record.related_cryptos) if record else "",
            escape(item.error or ""),
        )

    console.print(table)
    style = "green" if report.failed == 0 else "yellow"
    console.print(Panel(f"{report.message}\nTotal time: {report.total_time:.1f}s", style=style))


def annotate_command(
    summary_type: str = typer.Option(..., "--type", "-t", help=TYPE_HELP),
    ids: Optional[List[int]] = typer.Option(None, "--id", help="Article ID to annotate (repeatable)"),
    latest: Optional[int] = typer.Option(
        None, "--latest", "-n", min=1, max=100, help="Annotate the N most recently stored articles"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Annotate articles with AI summaries, sentiment and scores."""
    try:
        parsed_type = SummaryType.parse(summary_type)
        if not ids and not latest:
            raise InvalidRequestError("No articles provided: pass --id or --latest")
    except InvalidRequestError as e:
        fail(e)

    config = load_config()
    provider = _build_provider(config)
    require_database(config)

    settings = config.config.annotation
    annotator = ArticleAnnotator(
        llm_provider=provider,
        storage=AnnotationStorage(),
        item_delay=settings.item_delay,
        language=settings.language,
    )

    try:
        with get_connection(config.get_db_config()) as conn:
            articles = select_articles(conn, ids, latest)
            report = annotator.annotate(conn, articles, parsed_type)
    except InvalidRequestError as e:
        fail(e)

    if as_json:
        print_json(report)
    else:
        print_annotation_report(report)


def print_batch_summary(summary: BatchSummary) -> None:
    console.print(
        Panel(
            f"{escape(summary.summary)}\n\n"
            f"[bold]Articles:[/bold] {summary.all_select}  "
            f"[bold]Sentiment:[/bold] {summary.sentiment.value}  "
            f"[bold]Trending:[/bold] {summary.trending_score}  "
            f"[bold]Crypto:[/bold] {summary.name_crypto or '-'}\n"
            f"[dim]Sources: {escape(summary.all_source)}[/dim]",
            title=f"Batch summary #{summary.id}",
            style="blue",
        )
    )


def summarize_command(
    ids: Optional[List[int]] = typer.Option(None, "--id", help="Article ID to include (repeatable)"),
    latest: Optional[int] = typer.Option(
        None, "--latest", "-n", min=1, max=100, help="Summarize the N most recently stored articles"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON"),
) -> None:
    """Summarize several articles into one record."""
    if not ids and not latest:
        fail(InvalidRequestError("No articles provided: pass --id or --latest"))

    config = load_config()
    provider = _build_provider(config)
    require_database(config)

    settings = config.config.annotation
    summarizer = BatchSummarizer(
        llm_provider=provider,
        storage=SummaryStorage(),
        language=settings.language,
        max_content_chars=settings.max_batch_content_chars,
    )

    try:
        with get_connection(config.get_db_config()) as conn:
            articles = select_articles(conn, ids, latest)
            summary = summarizer.summarize(conn, articles)
    except InvalidRequestError as e:
        fail(e)

    if as_json:
        print_json(summary)
    else:
        print_batch_summary(summary)
