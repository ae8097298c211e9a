"""Tests for cryptonews.pipeline.ingest."""

from datetime import datetime, timezone
from typing import Dict

import psycopg
import pytest

from cryptonews.config import SourceConfig
from cryptonews.errors import InvalidRequestError
from cryptonews.ingestion import FeedItem, FeedResult
from cryptonews.pipeline import IngestionOrchestrator

from conftest import FakeArticleStorage

SOURCE = SourceConfig(name="CoinDesk", url="https://example.com/coindesk.xml")
OTHER = SourceConfig(name="CryptoSlate", url="https://example.com/cryptoslate.xml")


def _item(n: int, source: str = "CoinDesk", **overrides) -> FeedItem:
    data = {
        "title": f"Headline {n}",
        "link": f"https://example.com/{source.lower()}/{n}",
        "published": datetime(2024, 1, n, tzinfo=timezone.utc),
        "description": f"<p>Description {n}</p>",
        "content": f"<p>Body {n}</p>",
        "source_name": source,
    }
    data.update(overrides)
    return FeedItem(**data)


class FakeFetcher:
    def __init__(self, results: Dict[str, object]) -> None:
        self.results = results
        self.fetched = []

    def fetch_feed_sync(self, source: SourceConfig) -> FeedResult:
        self.fetched.append(source.name)
        result = self.results[source.name]
        if isinstance(result, Exception):
            raise result
        return result


def _feed(source: SourceConfig, items) -> FeedResult:
    return FeedResult(
        source_name=source.name,
        source_url=source.url,
        success=True,
        items=items,
        item_count=len(items),
    )


class TestIngestionOrchestrator:
    def test_existing_article_is_skipped(self, conn) -> None:
        items = [_item(1), _item(2), _item(3)]
        storage = FakeArticleStorage(existing_urls={items[1].link})
        fetcher = FakeFetcher({"CoinDesk": _feed(SOURCE, items)})

        report = IngestionOrchestrator(fetcher, storage, item_delay=0).run(conn, [SOURCE])

        assert report.success is True
        assert report.processed == 3
        assert report.new == 2
        assert report.results[0].existing == 1
        assert [a.url for a in storage.inserted] == [items[0].link, items[2].link]
        conn.commit.assert_called_once()

    def test_items_without_title_or_link_are_skipped(self, conn) -> None:
        items = [_item(1), _item(2, title=""), _item(3, link="")]
        fetcher = FakeFetcher({"CoinDesk": _feed(SOURCE, items)})

        report = IngestionOrchestrator(fetcher, FakeArticleStorage(), item_delay=0).run(conn, [SOURCE])

        assert report.processed == 1
        assert report.new == 1

    def test_failed_feed_does_not_stop_other_sources(self, conn) -> None:
        failed = FeedResult(source_name="CoinDesk", source_url=SOURCE.url, success=False, error="HTTP 500")
        fetcher = FakeFetcher({"CoinDesk": failed, "CryptoSlate": _feed(OTHER, [_item(1, "CryptoSlate")])})

        report = IngestionOrchestrator(fetcher, FakeArticleStorage(), item_delay=0).run(conn, [SOURCE, OTHER])

        assert report.results[0].error == "HTTP 500"
        assert report.results[1].new == 1
        assert report.new == 1

    def test_unexpected_source_error_is_reported(self, conn) -> None:
        fetcher = FakeFetcher({"CoinDesk": RuntimeError("parser exploded"), "CryptoSlate": _feed(OTHER, [])})

        report = IngestionOrchestrator(fetcher, FakeArticleStorage(), item_delay=0).run(conn, [SOURCE, OTHER])

        assert report.results[0].error == "parser exploded"
        assert report.results[1].error is None
        conn.rollback.assert_called_once()

    def test_failed_rollback_still_reports_every_source(self, conn) -> None:
        conn.rollback.side_effect = psycopg.OperationalError("server closed the connection")
        fetcher = FakeFetcher(
            {"CoinDesk": psycopg.OperationalError("connection lost"), "CryptoSlate": RuntimeError("bad feed")}
        )

        report = IngestionOrchestrator(fetcher, FakeArticleStorage(), item_delay=0).run(conn, [SOURCE, OTHER])

        assert [r.source for r in report.results] == ["CoinDesk", "CryptoSlate"]
        assert report.results[0].error == "connection lost"
        assert report.results[1].error == "bad feed"
        assert conn.rollback.call_count == 2

    def test_storage_error_counts_as_failed(self, conn) -> None:
        class BrokenStorage(FakeArticleStorage):
            def insert_article(self, conn, article):
                if article.url.endswith("/2"):
                    raise psycopg.OperationalError("disk full")
                return super().insert_article(conn, article)

        fetcher = FakeFetcher({"CoinDesk": _feed(SOURCE, [_item(1), _item(2), _item(3)])})
        report = IngestionOrchestrator(fetcher, BrokenStorage(), item_delay=0).run(conn, [SOURCE])

        assert report.results[0].failed == 1
        assert report.new == 2
        assert report.processed == 3

    def test_lost_insert_race_counts_as_existing(self, conn) -> None:
        class RacingStorage(FakeArticleStorage):
            def insert_article(self, conn, article):
                return None

        fetcher = FakeFetcher({"CoinDesk": _feed(SOURCE, [_item(1)])})
        report = IngestionOrchestrator(fetcher, RacingStorage(), item_delay=0).run(conn, [SOURCE])

        assert report.new == 0
        assert report.results[0].existing == 1

    def test_single_source_selection(self, conn) -> None:
        fetcher = FakeFetcher({"CoinDesk": _feed(SOURCE, []), "CryptoSlate": _feed(OTHER, [])})
        IngestionOrchestrator(fetcher, FakeArticleStorage(), item_delay=0).run(conn, [SOURCE, OTHER], "CryptoSlate")
        assert fetcher.fetched == ["CryptoSlate"]

    def test_unknown_source_is_rejected(self, conn) -> None:
        fetcher = FakeFetcher({})
        with pytest.raises(InvalidRequestError, match="Source not found"):
            IngestionOrchestrator(fetcher, FakeArticleStorage(), item_delay=0).run(conn, [SOURCE], "Nope")
        assert fetcher.fetched == []

    def test_item_delay_after_each_write(self, conn, monkeypatch) -> None:
        sleeps = []
        monkeypatch.setattr("cryptonews.pipeline.ingest.time.sleep", sleeps.append)
        items = [_item(1), _item(2)]
        storage = FakeArticleStorage(existing_urls={items[0].link})
        fetcher = FakeFetcher({"CoinDesk": _feed(SOURCE, items)})

        IngestionOrchestrator(fetcher, storage, item_delay=0.25).run(conn, [SOURCE])

        assert sleeps == [0.25]


class TestBuildArticle:
    def test_normalizes_and_tags(self) -> None:
        orchestrator = IngestionOrchestrator(FakeFetcher({}), FakeArticleStorage(), max_content_chars=200)
        item = _item(
            1,
            title="SEC approves spot ETH ETF; BTC also rallies",
            content="<p>Spot&nbsp;ETF <b>approved</b></p>",
            author="Jane Doe",
            category="Policy",
        )

        article = orchestrator.build_article(item)

        assert article.name_category == "ETH,BTC"
        assert article.content == "Spot ETF approved"
        assert article.description == "Description 1"
        assert article.creator == "Jane Doe"
        assert article.category == "Policy"
        assert article.source == "CoinDesk"

    def test_untagged_article(self) -> None:
        orchestrator = IngestionOrchestrator(FakeFetcher({}), FakeArticleStorage())
        article = orchestrator.build_article(_item(1, title="Markets close higher", content=None))
        assert article.name_category is None
        assert article.content == "Description 1"
        assert article.tags == []

    def test_tags_split_stored_tag_string(self) -> None:
        orchestrator = IngestionOrchestrator(FakeFetcher({}), FakeArticleStorage())
        article = orchestrator.build_article(_item(1, title="Solana and Bitcoin diverge"))
        assert article.name_category == "SOL,BTC"
        assert article.tags == ["SOL", "BTC"]
