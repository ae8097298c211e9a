"""Single summary over a batch of selected articles."""

from typing import List, Sequence

from psycopg import Connection
from rich.console import Console
from rich.markup import escape

from ..db.summaries import SummaryStorage
from ..errors import InvalidRequestError, ModelCallError
from ..ingestion.tags import extract_crypto_tags
from ..models import Article, BatchSummary, Sentiment
from .llm_provider import LLMProvider
from .models import DEFAULT_SCORE, DEFAULT_SUMMARY
from .parsing import clamp_score, extract_json_object, parse_sentiment
from .templates import DEFAULT_LANGUAGE, combine_articles, render_batch_prompt

console = Console()

DEFAULT_MAX_BATCH_CONTENT_CHARS = 10000


def _distinct(values: Sequence[str]) -> List[str]:
    seen: List[str] = []
    for value in values:
        if value and value not in seen:
            seen.append(value)
    return seen


class BatchSummarizer:
    """Summarize several articles into one stored record."""

    def __init__(
        self,
        llm_provider: LLMProvider,
        storage: SummaryStorage,
        language: str = DEFAULT_LANGUAGE,
        max_content_chars: int = DEFAULT_MAX_BATCH_CONTENT_CHARS,
    ) -> None:
        self.llm_provider = llm_provider
        self.storage = storage
        self.language = language
        self.max_content_chars = max_content_chars

    def summarize(self, conn: Connection, articles: Sequence[Article]) -> BatchSummary:
        """
        Ask the model for one summary of ``articles`` and store it.

        Model failures fall back to a neutral default summary; storage
        errors propagate.

        Raises:
            InvalidRequestError: If no articles are given
        """
        if not articles:
            raise InvalidRequestError("No articles provided")

        all_content = combine_articles(articles)
        sources = _distinct([a.source for a in articles])
        categories = _distinct([a.category for a in articles if a.category])
        cryptos = extract_crypto_tags(all_content, max_tags=1)

        summary = DEFAULT_SUMMARY
        sentiment = Sentiment.NEUTRAL
        trending_score = DEFAULT_SCORE

        console.print(f"Analyzing {len(articles)} articles with AI...")
        try:
            text = self.llm_provider.generate(render_batch_prompt(articles, self.language))
        except ModelCallError as e:
            console.print(f"[yellow]AI analysis failed, using defaults: {escape(str(e))}[/yellow]")
        else:
            data = extract_json_object(text)
            if data is None:
                console.print("[yellow]No JSON found in AI response, using defaults[/yellow]")
            else:
                if isinstance(data.get("summary"), str) and data["summary"].strip():
                    summary = data["summary"].strip()
                sentiment = parse_sentiment(data.get("sentiment"), sentiment)
                trending_score = clamp_score(data.get("trending_score"), trending_score)

        record = BatchSummary(
            all_select=len(articles),
            all_content=all_content[: self.max_content_chars],
            all_source=", ".join(sources),
            all_category=", ".join(categories) or None,
            name_crypto=cryptos[0] if cryptos else None,
            summary=summary,
            source=sources[0],
            sentiment=sentiment,
            trending_score=trending_score,
        )

        stored = self.storage.insert_summary(conn, record)
        conn.commit()
        return stored
