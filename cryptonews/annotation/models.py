"""Data models for AI annotation."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import AnnotationRecord, Sentiment

DEFAULT_SUMMARY = "Unable to analyze content at this time."
DEFAULT_SCORE = 50


class AnnotationResult(BaseModel):
    """Validated fields the model is asked to return."""

    summary: str = Field(DEFAULT_SUMMARY)
    sentiment: Sentiment = Field(Sentiment.NEUTRAL)
    trending_score: int = Field(DEFAULT_SCORE, ge=0, le=100)
    key_points: List[str] = Field(default_factory=list)
    related_cryptos: List[str] = Field(default_factory=list)
    market_impact_score: int = Field(DEFAULT_SCORE, ge=0, le=100)


def default_annotation() -> AnnotationResult:
    """Fallback used when the model call or its output is unusable."""
    return AnnotationResult()


class AnnotationItemResult(BaseModel):
    """Outcome for one article in an annotation batch."""

    article_id: int
    success: bool
    summary: Optional[AnnotationRecord] = Field(None, description="Stored record, if any")
    error: Optional[str] = None


class AnnotationReport(BaseModel):
    """Aggregate outcome of an annotation batch."""

    success: bool = True
    processed: int
    successful: int
    failed: int
    total_time: float = Field(..., description="Seconds for the whole batch")
    summary_type: str
    results: List[AnnotationItemResult]
    message: str
