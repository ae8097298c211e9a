"""Data models for market insights."""

from typing import Dict, List, Literal

from pydantic import BaseModel, Field

from ..models import Sentiment

Recommendation = Literal["BUY", "HOLD", "SELL", "WAIT"]


class SentimentDistribution(BaseModel):
    """Rounded percentage of records per sentiment."""

    positive: int = 0
    neutral: int = 0
    negative: int = 0


class CryptoStat(BaseModel):
    """Mention statistics for one crypto."""

    crypto: str
    count: int
    avg_sentiment_score: int = Field(..., description="Percent of mentions with positive sentiment")
    avg_impact: int = Field(..., description="Mean market impact score")


class MarketInsight(BaseModel):
    """Aggregate view over a set of annotation records."""

    total: int = 0
    overall_sentiment: Sentiment = Sentiment.NEUTRAL
    sentiment_distribution: SentimentDistribution = Field(default_factory=SentimentDistribution)
    average_trending_score: int = 0
    average_market_impact: int = 0
    top_cryptos: List[CryptoStat] = Field(default_factory=list)
    top_positive_cryptos: List[CryptoStat] = Field(default_factory=list)
    top_negative_cryptos: List[CryptoStat] = Field(default_factory=list)
    key_themes: List[str] = Field(default_factory=list)
    summary_types_stats: Dict[str, int] = Field(default_factory=dict)
    trading_recommendation: Recommendation = "WAIT"
    confidence_level: int = 0
