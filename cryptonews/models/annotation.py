"""Annotation records produced by the AI summarizer."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import DBModel


class Sentiment(str, Enum):
    """Tri-state sentiment label."""

    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


class AnnotationRecord(DBModel):
    """One AI annotation of one article under one summary type.

    The ``original_*`` fields are a snapshot of the article at annotation
    time so the record stays readable if the article is removed.
    """

    article_id: int = Field(..., description="ID of the annotated article")
    original_title: str = Field(..., description="Article title snapshot")
    original_content: str = Field("", description="Article content snapshot")
    original_source: str = Field(..., description="Article source snapshot")
    original_url: Optional[str] = Field(None, description="Article URL snapshot")
    original_category: Optional[str] = Field(None, description="Article category snapshot")
    original_name_category: Optional[str] = Field(None, description="Article crypto tags snapshot")
    original_pub_date: Optional[datetime] = Field(None, description="Article publication snapshot")
    summary_type: str = Field(..., description="Summary template used")
    ai_summary: str = Field(..., description="Generated summary")
    ai_sentiment: Sentiment = Field(Sentiment.NEUTRAL, description="Sentiment label")
    trending_score: int = Field(50, ge=0, le=100)
    key_points: List[str] = Field(default_factory=list)
    related_cryptos: List[str] = Field(default_factory=list)
    market_impact_score: int = Field(50, ge=0, le=100)
    processing_time: float = Field(0.0, description="Seconds spent on this article", ge=0.0)
