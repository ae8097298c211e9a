"""RSS ingestion: sources, fetching, normalization and tagging."""

from .models import FeedItem, FeedResult, IngestionReport, SourceResult
from .normalize import clean_content, html_to_text
from .rss_fetcher import RSSFetcher, print_feed_summary
from .sources import DEFAULT_SOURCES, select_sources
from .tags import extract_crypto_tags, join_tags

__all__ = [
    "RSSFetcher",
    "FeedItem",
    "FeedResult",
    "SourceResult",
    "IngestionReport",
    "DEFAULT_SOURCES",
    "select_sources",
    "clean_content",
    "html_to_text",
    "extract_crypto_tags",
    "join_tags",
    "print_feed_summary",
]
