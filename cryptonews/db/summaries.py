"""Storage for batch summaries."""

from typing import List

from psycopg import Connection

from ..models import BatchSummary

SUMMARY_COLUMNS = (
    "all_select",
    "all_content",
    "all_source",
    "all_category",
    "name_crypto",
    "summary",
    "source",
    "sentiment",
    "trending_score",
)


class SummaryStorage:
    """Store and list batch summaries."""

    def insert_summary(self, conn: Connection, summary: BatchSummary) -> BatchSummary:
        """Insert a batch summary and return it as stored."""
        values = [getattr(summary, column) for column in SUMMARY_COLUMNS]
        values[SUMMARY_COLUMNS.index("sentiment")] = summary.sentiment.value

        with conn.transaction():
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO batch_summaries ({", ".join(SUMMARY_COLUMNS)})
                    VALUES ({", ".join(["%s"] * len(SUMMARY_COLUMNS))})
                    RETURNING *
                    """,
                    tuple(values),
                )
                row = cur.fetchone()

        return BatchSummary(**row)

    def list_summaries(self, conn: Connection, limit: int = 20) -> List[BatchSummary]:
        """Most recent batch summaries."""
        with conn.cursor() as cur:
            cur.execute(
                "SELECT * FROM batch_summaries ORDER BY created_at DESC, id DESC LIMIT %s",
                (limit,),
            )
            return [BatchSummary(**row) for row in cur.fetchall()]
