"""Article storage, deduplication and listing."""

from typing import Any, List, Optional, Sequence, Tuple

from psycopg import Connection

from ..models import Article, ArticleQuery

ARTICLE_COLUMNS = (
    "title",
    "url",
    "content",
    "description",
    "source",
    "pub_date",
    "category",
    "name_category",
    "creator",
)

UNTAGGED = "others"


def _article_filters(query: ArticleQuery) -> Tuple[str, List[Any]]:
    """Build the WHERE clause for an article listing."""
    clauses = []
    params: List[Any] = []

    if query.source and query.source != "all":
        clauses.append("source = %s")
        params.append(query.source)

    if query.tag and query.tag != "all":
        if query.tag == UNTAGGED:
            clauses.append("name_category IS NULL")
        else:
            clauses.append("%s = ANY(string_to_array(name_category, ','))")
            params.append(query.tag.upper())

    if query.since:
        clauses.append("pub_date >= %s")
        params.append(query.since)

    if query.until:
        clauses.append("pub_date < %s")
        params.append(query.until)

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class ArticleStorage:
    """Handle article storage and deduplication."""

    def article_exists(self, conn: Connection, url: str) -> bool:
        """Check whether an article with this url is already stored."""
        with conn.transaction():
            with conn.cursor() as cur:
                cur.execute("SELECT id FROM articles WHERE url = %s LIMIT 1", (url,))
                return cur.fetchone() is not None

    def insert_article(self, conn: Connection, article: Article) -> Optional[int]:
        """
        Insert an article unless its url is already stored.

        Runs in its own transaction block so a failed insert leaves the
        connection usable for the next article.

        Returns:
            New article ID, or None if the url already existed
        """
        placeholders = ", ".join(["%s"] * len(ARTICLE_COLUMNS))
        values = tuple(getattr(article, column) for column in ARTICLE_COLUMNS)

        with conn.transaction():
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO articles ({", ".join(ARTICLE_COLUMNS)})
                    VALUES ({placeholders})
                    ON CONFLICT (url) DO NOTHING
                    RETURNING id
                    """,
                    values,
                )
                row = cur.fetchone()

        return row["id"] if row else None

    def get_articles_by_ids(self, conn: Connection, article_ids: Sequence[int]) -> List[Article]:
        """Load articles by ID, keeping the requested order."""
        if not article_ids:
            return []

        with conn.cursor() as cur:
            cur.execute(
                "SELECT * FROM articles WHERE id = ANY(%s)",
                (list(article_ids),),
            )
            rows = cur.fetchall()

        by_id = {row["id"]: Article(**row) for row in rows}
        return [by_id[i] for i in article_ids if i in by_id]

    def list_articles(self, conn: Connection, query: ArticleQuery) -> List[Article]:
        """List articles matching the query, one page at a time."""
        where, params = _article_filters(query)

        with conn.cursor() as cur:
            cur.execute(
                f"""
                SELECT * FROM articles
                {where}
                ORDER BY {query.sort_by} {query.order.upper()} NULLS LAST, id DESC
                LIMIT %s OFFSET %s
                """,
                (*params, query.limit, query.offset),
            )
            return [Article(**row) for row in cur.fetchall()]

    def count_articles(self, conn: Connection, query: ArticleQuery) -> int:
        """Count articles matching the query filters."""
        where, params = _article_filters(query)

        with conn.cursor() as cur:
            cur.execute(f"SELECT COUNT(*) AS total FROM articles {where}", params)
            row = cur.fetchone()
            return row["total"] if row else 0

    def list_tags(self, conn: Connection) -> List[str]:
        """All distinct crypto tags seen on stored articles."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT DISTINCT trim(tag) AS tag
                FROM articles, unnest(string_to_array(name_category, ',')) AS tag
                WHERE name_category IS NOT NULL
                ORDER BY 1
                """
            )
            return [row["tag"] for row in cur.fetchall() if row["tag"]]
