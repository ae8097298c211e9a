"""Per-article AI annotation."""

import time
from typing import List, Sequence, Union

import psycopg
from psycopg import Connection
from rich.console import Console
from rich.markup import escape

from ..db.annotations import AnnotationStorage
from ..errors import InvalidRequestError, ModelCallError
from ..models import AnnotationRecord, Article
from .llm_provider import LLMProvider
from .models import AnnotationItemResult, AnnotationReport, AnnotationResult, default_annotation
from .parsing import parse_annotation
from .templates import DEFAULT_LANGUAGE, SummaryType

console = Console()


def validate_articles(articles: Sequence[Article]) -> None:
    """
    Reject a batch before any model call is made.

    Raises:
        InvalidRequestError: If the batch is empty or an article lacks id, title or content
    """
    if not articles:
        raise InvalidRequestError("No articles provided")

    for article in articles:
        if article.id is None:
            raise InvalidRequestError(f"Article has no id: {article.title[:50]}")
        if not article.title or not article.title.strip():
            raise InvalidRequestError(f"Article {article.id} has no title")
        if not article.content or not article.content.strip():
            raise InvalidRequestError(f"Article {article.id} has no content")


def build_record(
    article: Article,
    summary_type: SummaryType,
    result: AnnotationResult,
    processing_time: float,
) -> AnnotationRecord:
    """Combine an article snapshot with a model annotation."""
    return AnnotationRecord(
        article_id=article.id,
        original_title=article.title,
        original_content=article.content,
        original_source=article.source,
        original_url=article.url,
        original_category=article.category,
        original_name_category=article.name_category,
        original_pub_date=article.pub_date,
        summary_type=summary_type.value,
        ai_summary=result.summary,
        ai_sentiment=result.sentiment,
        trending_score=result.trending_score,
        key_points=result.key_points,
        related_cryptos=result.related_cryptos,
        market_impact_score=result.market_impact_score,
        processing_time=processing_time,
    )


class ArticleAnnotator:
    """Annotate selected articles one at a time with a single summary template."""

    def __init__(
        self,
        llm_provider: LLMProvider,
        storage: AnnotationStorage,
        item_delay: float = 0.0,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        """
        Initialize annotator.

        Args:
            llm_provider: Model used for every article
            storage: Where annotation records are written
            item_delay: Pause between articles, in seconds
            language: Output language requested from the model
        """
        self.llm_provider = llm_provider
        self.storage = storage
        self.item_delay = item_delay
        self.language = language

    def _annotate_one(self, conn: Connection, article: Article, summary_type: SummaryType) -> AnnotationItemResult:
        start = time.time()
        error = None

        prompt = summary_type.render_article(article, self.language)
        try:
            text = self.llm_provider.generate(prompt)
        except ModelCallError as e:
            console.print(f"[red]Model call failed for article {article.id}: {escape(str(e))}[/red]")
            result = default_annotation()
            error = str(e)
        else:
            parsed = parse_annotation(text)
            if parsed is None:
                console.print(f"[yellow]No JSON found in model response for article {article.id}[/yellow]")
                console.print(f"[dim]Raw text: {escape(text[:500])}[/dim]")
                result = default_annotation()
                error = "Could not parse model response"
            else:
                result = parsed

        record = build_record(article, summary_type, result, round(time.time() - start, 2))

        try:
            stored = self.storage.insert_annotation(conn, record)
            conn.commit()
        except psycopg.Error as e:
            console.print(f"[red]Error saving summary for article {article.id}: {escape(str(e))}[/red]")
            conn.rollback()
            return AnnotationItemResult(article_id=article.id, success=False, error="Failed to save summary")

        return AnnotationItemResult(
            article_id=article.id,
            success=error is None,
            summary=stored,
            error=error,
        )

    def annotate(
        self,
        conn: Connection,
        articles: Sequence[Article],
        summary_type: Union[SummaryType, str],
    ) -> AnnotationReport:
        """
        Annotate every article with ``summary_type`` and store one record each.

        A failing article never stops the batch; it is reported as failed and,
        where the failure came from the model, still stored with default values.

        Raises:
            InvalidRequestError: If the batch or summary type is invalid
        """
        summary_type = SummaryType.parse(summary_type)
        validate_articles(articles)

        batch_start = time.time()
        results: List[AnnotationItemResult] = []

        for index, article in enumerate(articles):
            console.print(f"Processing article {article.id} with {summary_type.value}...")
            try:
                item = self._annotate_one(conn, article, summary_type)
            except Exception as e:
                console.print(f"[red]Error processing article {article.id}: {escape(str(e))}[/red]")
                item = AnnotationItemResult(article_id=article.id, success=False, error=str(e) or "Unknown error")
            results.append(item)

            if self.item_delay and index < len(articles) - 1:
                time.sleep(self.item_delay)

        successful = sum(1 for r in results if r.success)
        report = AnnotationReport(
            processed=len(articles),
            successful=successful,
            failed=len(articles) - successful,
            total_time=round(time.time() - batch_start, 2),
            summary_type=summary_type.value,
            results=results,
            message=f"Processed {successful}/{len(articles)} articles successfully",
        )
        console.print(f"[bold]{report.message}[/bold] in {report.total_time:.1f}s")
        return report
