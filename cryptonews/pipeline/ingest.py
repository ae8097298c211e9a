"""Ingestion orchestrator: feeds to stored, tagged articles."""

import time
from typing import List, Optional, Sequence

import pendulum
import psycopg
from psycopg import Connection
from rich.console import Console
from rich.markup import escape

from ..config import SourceConfig
from ..db.articles import ArticleStorage
from ..ingestion import (
    FeedItem,
    IngestionReport,
    RSSFetcher,
    SourceResult,
    clean_content,
    extract_crypto_tags,
    join_tags,
    select_sources,
)
from ..ingestion.normalize import DEFAULT_MAX_CONTENT_CHARS
from ..models import Article

console = Console()

NEW = "new"
EXISTING = "existing"
FAILED = "failed"


class IngestionOrchestrator:
    """Fetch every selected source and store the articles it has not seen."""

    def __init__(
        self,
        fetcher: RSSFetcher,
        storage: ArticleStorage,
        item_delay: float = 0.1,
        max_content_chars: int = DEFAULT_MAX_CONTENT_CHARS,
    ) -> None:
        """
        Initialize ingestion orchestrator.

        Args:
            fetcher: Feed fetcher
            storage: Article storage used for the dedup check and inserts
            item_delay: Pause after each insert attempt, in seconds
            max_content_chars: Cap on stored article content
        """
        self.fetcher = fetcher
        self.storage = storage
        self.item_delay = item_delay
        self.max_content_chars = max_content_chars

    def build_article(self, item: FeedItem) -> Article:
        """Normalize a feed item into an article row."""
        tags = extract_crypto_tags(item.title)
        return Article(
            title=item.title,
            url=item.link,
            content=clean_content(item.content or item.description, self.max_content_chars),
            description=clean_content(item.description, max_length=None) or None,
            source=item.source_name,
            pub_date=item.published,
            category=item.category,
            name_category=join_tags(tags),
            creator=item.author,
        )

    def _store_item(self, conn: Connection, item: FeedItem) -> str:
        """Dedup-check and insert one item; returns its outcome."""
        try:
            if self.storage.article_exists(conn, item.link):
                console.print(f"[dim]Article already exists: {escape(item.title[:50])}...[/dim]")
                return EXISTING

            article = self.build_article(item)
            article_id = self.storage.insert_article(conn, article)
        except psycopg.Error as e:
            console.print(f"[red]Error inserting article {escape(item.link)}: {escape(str(e))}[/red]")
            outcome = FAILED
        else:
            if article_id is None:
                # Lost a race with another run; the unique url constraint kept one row.
                outcome = EXISTING
            else:
                console.print(f"[green]Saved[/green] {escape(item.title[:60])} [dim]tags: {article.name_category or 'none'}[/dim]")
                outcome = NEW

        if self.item_delay:
            time.sleep(self.item_delay)
        return outcome

    def ingest_source(self, conn: Connection, source: SourceConfig) -> SourceResult:
        """Fetch one source and store its new articles."""
        console.print(f"Fetching from [cyan]{source.name}[/cyan]...")
        feed = self.fetcher.fetch_feed_sync(source)

        if not feed.success:
            return SourceResult(source=source.name, error=feed.error or "Unknown error")

        console.print(f"Processing {feed.item_count} articles from {source.name}")
        result = SourceResult(source=source.name)

        for item in feed.items:
            if not item.title or not item.link:
                continue

            result.processed += 1
            outcome = self._store_item(conn, item)
            if outcome == NEW:
                result.new += 1
            elif outcome == EXISTING:
                result.existing += 1
            else:
                result.failed += 1

        conn.commit()
        return result

    def run(
        self,
        conn: Connection,
        sources: Sequence[SourceConfig],
        source_name: Optional[str] = None,
    ) -> IngestionReport:
        """
        Ingest every enabled source, or only ``source_name``.

        One source failing never stops the others; its entry in the report
        carries the error instead.

        Raises:
            InvalidRequestError: If ``source_name`` is unknown or disabled
        """
        selected = select_sources(sources, source_name)
        console.print(
            f"Starting news fetch job... {'for ' + source_name if source_name else 'for all sources'}"
        )

        results: List[SourceResult] = []
        for source in selected:
            try:
                result = self.ingest_source(conn, source)
            except Exception as e:
                console.print(f"[red]Error processing {source.name}: {escape(str(e))}[/red]")
                try:
                    conn.rollback()
                except psycopg.Error as rollback_error:
                    console.print(f"[red]Rollback failed: {escape(str(rollback_error))}[/red]")
                result = SourceResult(source=source.name, error=str(e) or type(e).__name__)
            results.append(result)

        report = IngestionReport(
            processed=sum(r.processed for r in results),
            new=sum(r.new for r in results),
            results=results,
            timestamp=pendulum.now("UTC"),
        )
        console.print(f"Job completed. Total processed: {report.processed}, Total new: {report.new}")
        return report
