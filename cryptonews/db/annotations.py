"""Storage for per-article AI annotations."""

from typing import Any, List, Tuple

from psycopg import Connection

from ..models import AnnotationQuery, AnnotationRecord

ANNOTATION_COLUMNS = (
    "article_id",
    "original_title",
    "original_content",
    "original_source",
    "original_url",
    "original_category",
    "original_name_category",
    "original_pub_date",
    "summary_type",
    "ai_summary",
    "ai_sentiment",
    "trending_score",
    "key_points",
    "related_cryptos",
    "market_impact_score",
    "processing_time",
)


def _annotation_filters(query: AnnotationQuery) -> Tuple[str, List[Any]]:
    """Build the WHERE clause for an annotation listing."""
    clauses = []
    params: List[Any] = []

    if query.summary_type:
        clauses.append("summary_type = %s")
        params.append(query.summary_type)
    if query.source:
        clauses.append("original_source = %s")
        params.append(query.source)
    if query.crypto:
        clauses.append("%s = ANY(related_cryptos)")
        params.append(query.crypto.upper())
    if query.since:
        clauses.append("created_at >= %s")
        params.append(query.since)
    if query.until:
        clauses.append("created_at < %s")
        params.append(query.until)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class AnnotationStorage:
    """Append-only store of annotation records."""

    def insert_annotation(self, conn: Connection, record: AnnotationRecord) -> AnnotationRecord:
        """Insert a record and return it as stored."""
        data = record.model_dump(include=set(ANNOTATION_COLUMNS), mode="python")
        data["ai_sentiment"] = record.ai_sentiment.value
        placeholders = ", ".join(["%s"] * len(ANNOTATION_COLUMNS))

        with conn.transaction():
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO ai_news_summaries ({", ".join(ANNOTATION_COLUMNS)})
                    VALUES ({placeholders})
                    RETURNING *
                    """,
                    tuple(data[column] for column in ANNOTATION_COLUMNS),
                )
                row = cur.fetchone()

        return AnnotationRecord(**row)

    def list_annotations(self, conn: Connection, query: AnnotationQuery) -> List[AnnotationRecord]:
        """List annotations, newest first."""
        where, params = _annotation_filters(query)

        with conn.cursor() as cur:
            cur.execute(
                f"""
                SELECT * FROM ai_news_summaries
                {where}
                ORDER BY created_at DESC, id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, query.limit, query.offset),
            )
            return [AnnotationRecord(**row) for row in cur.fetchall()]

    def fetch_all(self, conn: Connection, query: AnnotationQuery) -> List[AnnotationRecord]:
        """All annotations matching the query filters, ignoring paging."""
        where, params = _annotation_filters(query)

        with conn.cursor() as cur:
            cur.execute(
                f"SELECT * FROM ai_news_summaries {where} ORDER BY created_at DESC, id DESC",
                params,
            )
            return [AnnotationRecord(**row) for row in cur.fetchall()]
