"""Database initialization and schema management."""

from typing import Any, Dict

from psycopg.errors import DatabaseError
from rich.console import Console

from .connection import get_connection

console = Console()

SCHEMA_SQL = """
-- Ingested articles, deduplicated by url
CREATE TABLE IF NOT EXISTS articles (
    id SERIAL PRIMARY KEY,
    title TEXT NOT NULL,
    url TEXT NOT NULL UNIQUE,
    content TEXT NOT NULL DEFAULT '',
    description TEXT,
    source TEXT NOT NULL,
    pub_date TIMESTAMPTZ,
    category TEXT,
    name_category TEXT,
    creator TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- One row per (article, summary type) annotation; article fields are a snapshot
CREATE TABLE IF NOT EXISTS ai_news_summaries (
    id SERIAL PRIMARY KEY,
    article_id INTEGER NOT NULL,
    original_title TEXT NOT NULL,
    original_content TEXT NOT NULL DEFAULT '',
    original_source TEXT NOT NULL,
    original_url TEXT,
    original_category TEXT,
    original_name_category TEXT,
    original_pub_date TIMESTAMPTZ,
    summary_type TEXT NOT NULL,
    ai_summary TEXT NOT NULL,
    ai_sentiment TEXT NOT NULL CHECK (ai_sentiment IN ('Positive', 'Neutral', 'Negative')),
    trending_score INTEGER NOT NULL CHECK (trending_score BETWEEN 0 AND 100),
    key_points TEXT[] NOT NULL DEFAULT '{}',
    related_cryptos TEXT[] NOT NULL DEFAULT '{}',
    market_impact_score INTEGER NOT NULL CHECK (market_impact_score BETWEEN 0 AND 100),
    processing_time REAL NOT NULL DEFAULT 0,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- One row per batch of articles summarized together
CREATE TABLE IF NOT EXISTS batch_summaries (
    id SERIAL PRIMARY KEY,
    all_select INTEGER NOT NULL,
    all_content TEXT NOT NULL,
    all_source TEXT NOT NULL,
    all_category TEXT,
    name_crypto TEXT,
    summary TEXT NOT NULL,
    source TEXT NOT NULL,
    sentiment TEXT NOT NULL CHECK (sentiment IN ('Positive', 'Neutral', 'Negative')),
    trending_score INTEGER NOT NULL CHECK (trending_score BETWEEN 0 AND 100),
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_articles_source ON articles(source);
CREATE INDEX IF NOT EXISTS idx_articles_pub_date ON articles(pub_date);
CREATE INDEX IF NOT EXISTS idx_articles_created_at ON articles(created_at);
CREATE INDEX IF NOT EXISTS idx_ai_news_summaries_article_id ON ai_news_summaries(article_id);
CREATE INDEX IF NOT EXISTS idx_ai_news_summaries_summary_type ON ai_news_summaries(summary_type);
CREATE INDEX IF NOT EXISTS idx_ai_news_summaries_created_at ON ai_news_summaries(created_at);
CREATE INDEX IF NOT EXISTS idx_ai_news_summaries_related_cryptos ON ai_news_summaries USING GIN (related_cryptos);
CREATE INDEX IF NOT EXISTS idx_batch_summaries_created_at ON batch_summaries(created_at);

CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';

CREATE OR REPLACE TRIGGER update_articles_updated_at BEFORE UPDATE ON articles
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

CREATE OR REPLACE TRIGGER update_ai_news_summaries_updated_at BEFORE UPDATE ON ai_news_summaries
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

CREATE OR REPLACE TRIGGER update_batch_summaries_updated_at BEFORE UPDATE ON batch_summaries
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
"""


def validate_connection(config: Dict[str, Any]) -> bool:
    """Validate database connection."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                result = cur.fetchone()
                return result is not None and result["ok"] == 1
    except Exception as e:
        console.print(f"[red]Database connection failed: {e}[/red]")
        return False


def init_database(config: Dict[str, Any]) -> None:
    """Initialize database schema."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
            conn.commit()
            console.print("Database schema initialized successfully")
    except DatabaseError as e:
        console.print(f"[red]Failed to initialize database schema: {e}[/red]")
        raise
