"""Market insights computed from stored annotation records."""

import math
from typing import Dict, List, Sequence, Tuple

from ..models import AnnotationRecord, Sentiment
from .models import CryptoStat, MarketInsight, Recommendation, SentimentDistribution

TOP_CRYPTOS = 10
TOP_MOVERS = 3
MIN_MENTIONS = 2
MAX_THEMES = 8


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _crypto_stats(records: Sequence[AnnotationRecord]) -> List[CryptoStat]:
    mentions: Dict[str, List[AnnotationRecord]] = {}
    for record in records:
        for crypto in record.related_cryptos:
            mentions.setdefault(crypto, []).append(record)

    stats = []
    for crypto, mentioned_in in mentions.items():
        positive = sum(1 for r in mentioned_in if r.ai_sentiment == Sentiment.POSITIVE)
        stats.append(
            CryptoStat(
                crypto=crypto,
                count=len(mentioned_in),
                avg_sentiment_score=round_half_up(positive / len(mentioned_in) * 100),
                avg_impact=round_half_up(_mean([r.market_impact_score for r in mentioned_in])),
            )
        )

    # Stable sort keeps first-mention order among equal counts.
    stats.sort(key=lambda s: s.count, reverse=True)
    return stats[:TOP_CRYPTOS]


def _recommend(trending: int, impact: int, dist: SentimentDistribution) -> Tuple[Recommendation, int]:
    """Pick a trading signal and its confidence from the aggregate scores."""
    if trending >= 70 and impact >= 70 and dist.positive >= 60:
        return "BUY", 85
    if trending <= 30 and impact <= 30 and dist.negative >= 60:
        return "SELL", 80
    if trending >= 50 and dist.positive >= 40:
        return "HOLD", 65
    return "WAIT", 50


def compute_market_insights(records: Sequence[AnnotationRecord]) -> MarketInsight:
    """
    Summarize sentiment, scores and crypto mentions across annotations.

    Args:
        records: Annotation records, typically already filtered by date or crypto

    Returns:
        MarketInsight; an empty input gives a neutral insight with a WAIT signal
    """
    if not records:
        return MarketInsight()

    total = len(records)
    counts = {sentiment: 0 for sentiment in Sentiment}
    for record in records:
        counts[record.ai_sentiment] += 1

    distribution = SentimentDistribution(
        positive=round_half_up(counts[Sentiment.POSITIVE] / total * 100),
        neutral=round_half_up(counts[Sentiment.NEUTRAL] / total * 100),
        negative=round_half_up(counts[Sentiment.NEGATIVE] / total * 100),
    )

    overall = Sentiment.NEUTRAL
    if distribution.positive > 50:
        overall = Sentiment.POSITIVE
    elif distribution.negative > 50:
        overall = Sentiment.NEGATIVE

    trending = round_half_up(_mean([r.trending_score for r in records]))
    impact = round_half_up(_mean([r.market_impact_score for r in records]))

    top_cryptos = _crypto_stats(records)
    frequent = [s for s in top_cryptos if s.count >= MIN_MENTIONS]
    top_positive = sorted(frequent, key=lambda s: (-s.avg_sentiment_score, -s.avg_impact))[:TOP_MOVERS]
    top_negative = sorted(frequent, key=lambda s: (s.avg_sentiment_score, -s.avg_impact))[:TOP_MOVERS]

    themes: List[str] = []
    for record in records:
        for point in record.key_points:
            if point not in themes:
                themes.append(point)
    themes = themes[:MAX_THEMES]

    type_counts: Dict[str, int] = {}
    for record in records:
        type_counts[record.summary_type] = type_counts.get(record.summary_type, 0) + 1

    recommendation, confidence = _recommend(trending, impact, distribution)

    return MarketInsight(
        total=total,
        overall_sentiment=overall,
        sentiment_distribution=distribution,
        average_trending_score=trending,
        average_market_impact=impact,
        top_cryptos=top_cryptos,
        top_positive_cryptos=top_positive,
        top_negative_cryptos=top_negative,
        key_themes=themes,
        summary_types_stats=type_counts,
        trading_recommendation=recommendation,
        confidence_level=confidence,
    )
