"""Market insights over annotation records."""

from .market import compute_market_insights, round_half_up
from .models import CryptoStat, MarketInsight, SentimentDistribution

__all__ = [
    "compute_market_insights",
    "round_half_up",
    "CryptoStat",
    "MarketInsight",
    "SentimentDistribution",
]
