"""Read-only listing commands."""

from typing import NoReturn, Optional

import pendulum
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..annotation import SummaryType
from ..db import AnnotationStorage, ArticleStorage, SummaryStorage, get_connection
from ..errors import InvalidRequestError
from ..insights import MarketInsight, compute_market_insights
from ..models import AnnotationQuery, ArticleQuery
from ..models.query import MAX_PAGE_SIZE
from .common import fail, load_config, parse_date

console = Console()

SENTIMENT_STYLES = {"Positive": "green", "Neutral": "yellow", "Negative": "red"}


def _invalid_query(e: ValidationError) -> NoReturn:
    messages = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
    fail(InvalidRequestError(f"Invalid query: {messages}"))


def articles_command(
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Source name or 'all'"),
    tag: Optional[str] = typer.Option(None, "--tag", help="Crypto tag, 'others' for untagged, or 'all'"),
    since: Optional[str] = typer.Option(None, "--since", help="Published on or after (ISO date)"),
    until: Optional[str] = typer.Option(None, "--until", help="Published before (ISO date)"),
    page: int = typer.Option(1, "--page", min=1, help="Page number"),
    limit: int = typer.Option(20, "--limit", "-l", min=1, max=MAX_PAGE_SIZE, help="Articles per page"),
    sort_by: str = typer.Option("created_at", "--sort", help="created_at, pub_date, title or source"),
    order: str = typer.Option("desc", "--order", help="asc or desc"),
    as_json: bool = typer.Option(False, "--json", help="Print articles as JSON"),
) -> None:
    """List stored articles."""
    try:
        query = ArticleQuery(
            source=source,
            tag=tag,
            since=parse_date(since, "since"),
            until=parse_date(until, "until"),
            page=page,
            limit=limit,
            sort_by=sort_by,
            order=order.lower(),
        )
    except InvalidRequestError as e:
        fail(e)
    except ValidationError as e:
        _invalid_query(e)

    config = load_config()
    storage = ArticleStorage()
    with get_connection(config.get_db_config()) as conn:
        total = storage.count_articles(conn, query)
        articles = storage.list_articles(conn, query)

    if as_json:
        console.print_json(data={
            "articles": [a.model_dump(mode="json") for a in articles],
            "total": total,
            "page": query.page,
            "limit": query.limit,
        })
        return

    pages = max(1, -(-total // query.limit))
    table = Table(title=f"Articles (page {query.page}/{pages}, {total} total)")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Source", style="cyan")
    table.add_column("Published", style="yellow")
    table.add_column("Tags", style="magenta")
    table.add_column("Title")

    for article in articles:
        table.add_row(
            str(article.id),
            article.source,
            article.pub_date.strftime("%Y-%m-%d %H:%M") if article.pub_date else "-",
            ", ".join(article.tags) or "-",
            escape(article.title),
        )

    console.print(table)


def tags_command() -> None:
    """List every crypto tag seen on stored articles."""
    config = load_config()
    with get_connection(config.get_db_config()) as conn:
        tags = ArticleStorage().list_tags(conn)

    if not tags:
        console.print("[yellow]No tagged articles yet.[/yellow]")
        return
    console.print(", ".join(f"[magenta]{tag}[/magenta]" for tag in tags))


def _annotation_query(
    summary_type: Optional[str],
    source: Optional[str],
    crypto: Optional[str],
    since: Optional[str],
    until: Optional[str],
    page: int = 1,
    limit: int = 20,
) -> AnnotationQuery:
    try:
        return AnnotationQuery(
            summary_type=SummaryType.parse(summary_type).value if summary_type else None,
            source=source,
            crypto=crypto,
            since=parse_date(since, "since"),
            until=parse_date(until, "until"),
            page=page,
            limit=limit,
        )
    except InvalidRequestError as e:
        fail(e)
    except ValidationError as e:
        _invalid_query(e)


def annotations_command(
    summary_type: Optional[str] = typer.Option(None, "--type", "-t", help="Summary type"),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Article source"),
    crypto: Optional[str] = typer.Option(None, "--crypto", "-c", help="Related crypto symbol"),
    since: Optional[str] = typer.Option(None, "--since", help="Created on or after (ISO date)"),
    until: Optional[str] = typer.Option(None, "--until", help="Created before (ISO date)"),
    page: int = typer.Option(1, "--page", min=1, help="Page number"),
    limit: int = typer.Option(20, "--limit", "-l", min=1, max=MAX_PAGE_SIZE, help="Records per page"),
    as_json: bool = typer.Option(False, "--json", help="Print records as JSON"),
) -> None:
    """List stored AI annotations, newest first."""
    query = _annotation_query(summary_type, source, crypto, since, until, page, limit)

    config = load_config()
    with get_connection(config.get_db_config()) as conn:
        records = AnnotationStorage().list_annotations(conn, query)

    if as_json:
        console.print_json(data=[r.model_dump(mode="json") for r in records])
        return

    if not records:
        console.print("[yellow]No annotations found.[/yellow]")
        return

    for record in records:
        style = SENTIMENT_STYLES.get(record.ai_sentiment.value, "white")
        points = "\n".join(f"• {escape(p)}" for p in record.key_points)
        console.print(
            Panel(
                f"{escape(record.ai_summary)}\n\n{points}\n\n"
                f"[bold]Sentiment:[/bold] [{style}]{record.ai_sentiment.value}[/{style}]  "
                f"[bold]Trending:[/bold] {record.trending_score}  "
                f"[bold]Impact:[/bold] {record.market_impact_score}  "
                f"[bold]Cryptos:[/bold] {', '.join(record.related_cryptos) or '-'}\n"
                f"[dim]{escape(record.original_source)} | {record.summary_type} | {record.processing_time:.1f}s[/dim]",
                title=f"#{record.id} {escape(record.original_title[:80])}",
                style=style,
            )
        )


def summaries_command(
    limit: int = typer.Option(20, "--limit", "-l", min=1, max=MAX_PAGE_SIZE, help="Number of summaries"),
    as_json: bool = typer.Option(False, "--json", help="Print summaries as JSON"),
) -> None:
    """List batch summaries, newest first."""
    config = load_config()
    with get_connection(config.get_db_config()) as conn:
        summaries = SummaryStorage().list_summaries(conn, limit)

    if as_json:
        console.print_json(data=[s.model_dump(mode="json") for s in summaries])
        return

    table = Table(title="Batch Summaries")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Articles", justify="right")
    table.add_column("Crypto", style="magenta")
    table.add_column("Sentiment")
    table.add_column("Trend", justify="right")
    table.add_column("Summary")

    for summary in summaries:
        style = SENTIMENT_STYLES.get(summary.sentiment.value, "white")
        table.add_row(
            str(summary.id),
            str(summary.all_select),
            summary.name_crypto or "-",
            f"[{style}]{summary.sentiment.value}[/{style}]",
            str(summary.trending_score),
            escape(summary.summary[:120]),
        )

    console.print(table)


def print_market_insight(insight: MarketInsight) -> None:
    """Render market insights as panels and tables."""
    dist = insight.sentiment_distribution
    style = SENTIMENT_STYLES.get(insight.overall_sentiment.value, "white")
    console.print(
        Panel(
            f"[bold]Records:[/bold] {insight.total}\n"
            f"[bold]Overall sentiment:[/bold] [{style}]{insight.overall_sentiment.value}[/{style}] "
            f"([green]{dist.positive}%[/green] / [yellow]{dist.neutral}%[/yellow] / [red]{dist.negative}%[/red])\n"
            f"[bold]Average trending:[/bold] {insight.average_trending_score}  "
            f"[bold]Average impact:[/bold] {insight.average_market_impact}\n"
            f"[bold]Recommendation:[/bold] {insight.trading_recommendation} "
            f"(confidence {insight.confidence_level}%)",
            title="Market Insights",
            style="blue",
        )
    )

    if insight.top_cryptos:
        table = Table(title="Top Cryptos")
        table.add_column("Crypto", style="magenta")
        table.add_column("Mentions", justify="right")
        table.add_column("Positive %", justify="right")
        table.add_column("Avg impact", justify="right")
        for stat in insight.top_cryptos:
            table.add_row(stat.crypto, str(stat.count), str(stat.avg_sentiment_score), str(stat.avg_impact))
        console.print(table)

    if insight.top_positive_cryptos or insight.top_negative_cryptos:
        console.print(
            f"[green]Most positive:[/green] {', '.join(s.crypto for s in insight.top_positive_cryptos) or '-'}   "
            f"[red]Most negative:[/red] {', '.join(s.crypto for s in insight.top_negative_cryptos) or '-'}"
        )

    if insight.key_themes:
        console.print("\n[bold]Key themes[/bold]")
        for theme in insight.key_themes:
            console.print(f"  • {escape(theme)}")

    if insight.summary_types_stats:
        console.print("\n[bold]Summary types[/bold]")
        for name, count in insight.summary_types_stats.items():
            console.print(f"  {name}: {count}")


def insights_command(
    days: Optional[int] = typer.Option(None, "--days", "-d", min=1, help="Only annotations from the last N days"),
    summary_type: Optional[str] = typer.Option(None, "--type", "-t", help="Summary type"),
    crypto: Optional[str] = typer.Option(None, "--crypto", "-c", help="Related crypto symbol"),
    since: Optional[str] = typer.Option(None, "--since", help="Created on or after (ISO date)"),
    until: Optional[str] = typer.Option(None, "--until", help="Created before (ISO date)"),
    as_json: bool = typer.Option(False, "--json", help="Print insights as JSON"),
) -> None:
    """Aggregate stored annotations into market insights."""
    query = _annotation_query(summary_type, None, crypto, since, until)
    if days:
        query.since = pendulum.now("UTC").subtract(days=days)

    config = load_config()
    with get_connection(config.get_db_config()) as conn:
        records = AnnotationStorage().fetch_all(conn, query)

    insight = compute_market_insights(records)
    if as_json:
        console.print_json(insight.model_dump_json())
    else:
        print_market_insight(insight)
