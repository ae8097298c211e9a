"""Tests for cryptonews.insights.market."""

from cryptonews.insights import compute_market_insights, round_half_up
from cryptonews.models import AnnotationRecord, Sentiment


def _record(sentiment: str, trending: int, impact: int, cryptos=(), points=(), summary_type="Extractive Summarization"):
    return AnnotationRecord(
        article_id=1,
        original_title="T",
        original_source="CoinDesk",
        summary_type=summary_type,
        ai_summary="s",
        ai_sentiment=sentiment,
        trending_score=trending,
        market_impact_score=impact,
        related_cryptos=list(cryptos),
        key_points=list(points),
    )


class TestComputeMarketInsights:
    def test_empty_input(self) -> None:
        insight = compute_market_insights([])
        assert insight.total == 0
        assert insight.overall_sentiment == Sentiment.NEUTRAL
        assert insight.average_trending_score == 0
        assert insight.trading_recommendation == "WAIT"
        assert insight.confidence_level == 0

    def test_bullish_batch(self) -> None:
        records = [
            _record("Positive", 80, 80, ["BTC", "ETH"], ["a", "b"]),
            _record("Positive", 75, 75, ["BTC"], ["b", "c"], "Impact-Oriented Summarization"),
            _record("Negative", 60, 70, ["ETH", "BTC"], ["d"]),
        ]

        insight = compute_market_insights(records)

        assert insight.total == 3
        assert insight.sentiment_distribution.positive == 67
        assert insight.sentiment_distribution.neutral == 0
        assert insight.sentiment_distribution.negative == 33
        assert insight.overall_sentiment == Sentiment.POSITIVE
        assert insight.average_trending_score == 72
        assert insight.average_market_impact == 75
        assert insight.trading_recommendation == "BUY"
        assert insight.confidence_level == 85

        assert [(s.crypto, s.count) for s in insight.top_cryptos] == [("BTC", 3), ("ETH", 2)]
        assert insight.top_cryptos[0].avg_sentiment_score == 67
        assert insight.top_cryptos[1].avg_sentiment_score == 50
        assert insight.top_cryptos[1].avg_impact == 75
        assert [s.crypto for s in insight.top_positive_cryptos] == ["BTC", "ETH"]
        assert [s.crypto for s in insight.top_negative_cryptos] == ["ETH", "BTC"]

        assert insight.key_themes == ["a", "b", "c", "d"]
        assert insight.summary_types_stats == {
            "Extractive Summarization": 2,
            "Impact-Oriented Summarization": 1,
        }

    def test_single_mentions_are_not_movers(self) -> None:
        insight = compute_market_insights([_record("Positive", 50, 50, ["SOL"])])
        assert [s.crypto for s in insight.top_cryptos] == ["SOL"]
        assert insight.top_positive_cryptos == []
        assert insight.top_negative_cryptos == []

    def test_hold(self) -> None:
        insight = compute_market_insights([_record("Positive", 55, 40), _record("Neutral", 55, 40)])
        assert insight.overall_sentiment == Sentiment.NEUTRAL
        assert insight.trading_recommendation == "HOLD"
        assert insight.confidence_level == 65

    def test_sell(self) -> None:
        insight = compute_market_insights([_record("Negative", 20, 20), _record("Negative", 30, 25)])
        assert insight.overall_sentiment == Sentiment.NEGATIVE
        assert insight.trading_recommendation == "SELL"
        assert insight.confidence_level == 80

    def test_wait(self) -> None:
        insight = compute_market_insights([_record("Neutral", 50, 50)])
        assert insight.trading_recommendation == "WAIT"
        assert insight.confidence_level == 50

    def test_key_themes_are_capped(self) -> None:
        records = [_record("Neutral", 50, 50, points=[f"p{i}" for i in range(12)])]
        assert len(compute_market_insights(records).key_themes) == 8


class TestRoundHalfUp:
    def test_rounds_halves_up(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(66.666) == 67
        assert round_half_up(33.333) == 33
