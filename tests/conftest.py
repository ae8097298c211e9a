"""Shared fixtures: in-memory storages and article factories."""

from datetime import datetime, timezone
from itertools import count
from typing import List, Optional, Set
from unittest.mock import MagicMock

import pytest

from cryptonews.models import AnnotationRecord, Article, BatchSummary


class FakeArticleStorage:
    """ArticleStorage stand-in keyed by url."""

    def __init__(self, existing_urls: Optional[Set[str]] = None) -> None:
        self.existing_urls = set(existing_urls or [])
        self.inserted: List[Article] = []
        self._ids = count(1)

    def article_exists(self, conn, url: str) -> bool:
        return url in self.existing_urls

    def insert_article(self, conn, article: Article) -> Optional[int]:
        if article.url in self.existing_urls:
            return None
        self.existing_urls.add(article.url)
        self.inserted.append(article)
        return next(self._ids)


class FakeAnnotationStorage:
    def __init__(self) -> None:
        self.records: List[AnnotationRecord] = []

    def insert_annotation(self, conn, record: AnnotationRecord) -> AnnotationRecord:
        stored = record.model_copy(update={"id": len(self.records) + 1})
        self.records.append(stored)
        return stored


class FakeSummaryStorage:
    def __init__(self) -> None:
        self.summaries: List[BatchSummary] = []

    def insert_summary(self, conn, summary: BatchSummary) -> BatchSummary:
        stored = summary.model_copy(update={"id": len(self.summaries) + 1})
        self.summaries.append(stored)
        return stored


@pytest.fixture
def conn() -> MagicMock:
    return MagicMock()


@pytest.fixture
def make_article():
    def _make(article_id: int = 1, **overrides) -> Article:
        data = {
            "id": article_id,
            "title": f"Bitcoin update {article_id}",
            "url": f"https://example.com/articles/{article_id}",
            "content": "Bitcoin rose 5% after strong ETF inflows.",
            "source": "CoinDesk",
            "pub_date": datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
            "category": "Markets",
            "name_category": "BTC",
        }
        data.update(overrides)
        return Article(**data)

    return _make
